"""Constant and function registry for expression evaluation.

The registry is a closed set: functions are members of :class:`FunctionKind`
and constants live in the read-only :data:`CONSTANTS` mapping. Nothing is
registered at runtime.

All functions take and return a plain ``float``. Domain errors do not raise;
they yield IEEE sentinels (``sqrt(-1)`` is NaN, ``exp(1000)`` is ``inf``) so
the evaluator can surface them as undefined sample points.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Callable, Mapping, Optional

import numpy as np

__all__ = [
    "CONSTANTS",
    "FunctionKind",
    "IDENTIFIERS",
    "LITERAL_WORDS",
    "VARIABLE_NAME",
    "binary_entropy",
    "lookup_constant",
    "lookup_function",
]

VARIABLE_NAME = "x"

_EPSILON = float(np.finfo(np.float64).eps)


def binary_entropy(p: float) -> float:
    """Return the Shannon entropy (in bits) of a Bernoulli(``p``) variable.

    Values outside the open interval ``(0, 1)`` have zero entropy. Terms whose
    probability is below machine epsilon are dropped instead of evaluating
    ``0 * log2(0)``.

    Examples
    --------
    >>> binary_entropy(0.5)
    1.0
    >>> binary_entropy(1.0)
    0.0
    """
    if p <= 0 or p >= 1:
        return 0.0
    q = 1.0 - p
    entropy = 0.0
    with np.errstate(all="ignore"):
        if p > _EPSILON:
            entropy -= p * np.log2(p)
        if q > _EPSILON:
            entropy -= q * np.log2(q)
    return float(entropy)


class FunctionKind(Enum):
    """Unary functions callable from an expression as ``name(argument)``."""

    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    ASIN = "asin"
    ACOS = "acos"
    ATAN = "atan"
    LOG = "log"
    LN = "ln"
    SQRT = "sqrt"
    EXP = "exp"
    ENTROPY = "entropy"

    def __call__(self, value: float) -> float:
        with np.errstate(all="ignore"):
            return float(_IMPLEMENTATIONS[self](float(value)))


_IMPLEMENTATIONS: Mapping[FunctionKind, Callable[[float], float]] = MappingProxyType(
    {
        FunctionKind.SIN: np.sin,
        FunctionKind.COS: np.cos,
        FunctionKind.TAN: np.tan,
        FunctionKind.ASIN: np.arcsin,
        FunctionKind.ACOS: np.arccos,
        FunctionKind.ATAN: np.arctan,
        # ``log`` is the calculator's common logarithm; ``ln`` is natural.
        FunctionKind.LOG: np.log10,
        FunctionKind.LN: np.log,
        FunctionKind.SQRT: np.sqrt,
        FunctionKind.EXP: np.exp,
        FunctionKind.ENTROPY: binary_entropy,
    }
)

CONSTANTS: Mapping[str, float] = MappingProxyType(
    {
        "pi": float(np.pi),
        "tau": float(2.0 * np.pi),
        "e": float(np.e),
    }
)

# Words the number reader accepts as literals, mirroring C ``strtod``.
LITERAL_WORDS: Mapping[str, float] = MappingProxyType(
    {
        "inf": float("inf"),
        "nan": float("nan"),
    }
)

# Every identifier the tokenizer can recognise, longest first so that a run of
# letters is always split by longest match (``exp`` before ``e``).
IDENTIFIERS: tuple[str, ...] = tuple(
    sorted(
        [kind.value for kind in FunctionKind]
        + list(CONSTANTS)
        + list(LITERAL_WORDS)
        + [VARIABLE_NAME],
        key=lambda name: (-len(name), name),
    )
)


def lookup_function(name: str) -> Optional[FunctionKind]:
    """Return the :class:`FunctionKind` called ``name`` or ``None``."""
    try:
        return FunctionKind(name)
    except ValueError:
        return None


def lookup_constant(name: str) -> Optional[float]:
    """Return the value of constant ``name`` or ``None``."""
    return CONSTANTS.get(name)
