"""Coerce user-supplied numbers and numeric strings to ``float`` or ``int``.

Viewport bounds and canvas sizes arrive from text fields as often as from
code, so ``"-2pi"``, ``"1e3"`` and ``7`` should all be accepted.
"""

from __future__ import annotations

from typing import Any, Type, TypeVar

import sympy as sp

from .errors import EvaluationError
from .evaluator import compile_expression

T = TypeVar("T", int, float)


def InputConvert(obj: Any, dest_type: Type[T] = float, truncate: bool = True) -> T:
    """
    Convert `obj` to `dest_type` (``float`` or ``int``).

    Rules:
    - If `obj` is a number: cast via dest_type(obj).
    - If `obj` is a string:
        1) try float(s)
        2) else evaluate it as a calculator expression without ``x``
           (e.g. ``"2pi"``, ``"sqrt(2)/2"``)
        3) else parse it as a SymPy expression, then evaluate.

    Truncation Rules (`truncate`):
    - When converting Float -> Int:
        - If `truncate=True`: Truncate decimal part (e.g., 3.9 -> 3).
        - If `truncate=False`: Require exact integer (e.g., 3.0 -> 3, 3.1 -> Error).

    Raises
    ------
    NotImplementedError
        If dest_type is unsupported.
    ValueError
        If conversion fails or violates truncation rules.
    """
    if dest_type not in (float, int):
        raise NotImplementedError(
            f"Unsupported destination type: {dest_type!r}. Only float and int are supported."
        )

    def _coerce(value: float) -> T:
        if dest_type is float:
            return float(value)  # type: ignore[return-value]
        if not float(value).is_integer():
            if not truncate:
                raise ValueError(
                    f"Could not convert {obj!r} to int: value is not an exact integer."
                )
        return int(value)  # type: ignore[return-value]

    # Fast path: numeric types (exclude bool)
    if isinstance(obj, (int, float)) and not isinstance(obj, bool):
        try:
            return _coerce(float(obj))
        except (OverflowError, ValueError) as e:
            raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}.") from e

    if not isinstance(obj, str):
        raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}.")

    s = obj.strip()
    if s == "":
        raise ValueError(f"Cannot convert empty string to {dest_type.__name__}.")

    # 1) Plain native conversion
    try:
        value = float(s)
    except ValueError:
        value = None

    # 2) Calculator expression path
    if value is None:
        try:
            compiled = compile_expression(s)
            if not compiled.uses_variable:
                value = compiled.evaluate_strict()
        except EvaluationError:
            pass

    # 3) SymPy path
    if value is None:
        try:
            value = float(sp.sympify(s).evalf())
        except (sp.SympifyError, TypeError, ValueError) as e:
            raise ValueError(
                f"Could not convert {obj!r} to {dest_type.__name__} "
                "(neither directly, as an expression, nor via SymPy)."
            ) from e

    try:
        return _coerce(value)
    except (OverflowError, ValueError) as e:
        raise ValueError(f"Could not convert {obj!r} to {dest_type.__name__}.") from e
