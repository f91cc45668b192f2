"""Precedence-based arithmetic reduction.

A flat arithmetic sequence such as ``2 + 3 * 4 ^ 2`` is held as a
:class:`TokenStream` of alternating values and operators and reduced to one
value by three passes, highest precedence first:

====  ==========
 3    ``^``
 2    ``*`` ``/``
 1    ``+`` ``-``
====  ==========

Within a pass operators are applied left to right, so every level is
left-associative (``2^3^2 == 64``). Arithmetic is IEEE-754 double precision
through NumPy, with one override: dividing by zero yields NaN rather than a
signed infinity.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

import numpy as np

from .errors import MalformedReduction

__all__ = [
    "OPERATORS",
    "PRECEDENCE",
    "TokenStream",
    "apply_operator",
    "is_operator",
    "reduce",
    "reduce_tokens",
]

PRECEDENCE: Mapping[str, int] = MappingProxyType(
    {"^": 3, "*": 2, "/": 2, "+": 1, "-": 1}
)
OPERATORS = frozenset(PRECEDENCE)

ApplyFn = Callable[[Any, Any, str], Any]


def is_operator(char: str) -> bool:
    """Return True when ``char`` is one of ``+ - * / ^``."""
    return char in OPERATORS


def apply_operator(left: float, right: float, op: str) -> float:
    """Apply binary operator ``op`` to two doubles.

    Examples
    --------
    >>> apply_operator(2.0, 3.0, "^")
    8.0
    >>> apply_operator(1.0, 0.0, "/")
    nan
    """
    a = np.float64(left)
    b = np.float64(right)
    with np.errstate(all="ignore"):
        if op == "+":
            result = a + b
        elif op == "-":
            result = a - b
        elif op == "*":
            result = a * b
        elif op == "/":
            result = np.nan if b == 0 else a / b
        elif op == "^":
            result = np.power(a, b)
        else:
            raise MalformedReduction(f"Unknown operator {op!r}")
    return float(result)


@dataclass
class TokenStream:
    """Parallel value/operator sequences awaiting reduction.

    ``operators[i]`` sits between ``values[i]`` and ``values[i + 1]``.
    """

    values: list[Any] = field(default_factory=list)
    operators: list[str] = field(default_factory=list)

    def push_value(self, value: Any) -> None:
        self.values.append(value)

    def push_operator(self, op: str) -> None:
        self.operators.append(op)

    def is_complete(self) -> bool:
        """Return True when there is exactly one more value than operators."""
        return len(self.values) == len(self.operators) + 1


def reduce_tokens(stream: TokenStream, apply: ApplyFn = apply_operator) -> Any:
    """Reduce ``stream`` to a single value.

    ``stream`` is not modified. ``apply`` defaults to double arithmetic; the
    symbolic exporter passes its own so both share one precedence walk.

    Raises
    ------
    MalformedReduction
        If the stream is incomplete, contains an unknown operator, or does not
        collapse to exactly one value.
    """
    if not stream.is_complete():
        raise MalformedReduction(
            f"Token stream has {len(stream.values)} values for "
            f"{len(stream.operators)} operators"
        )
    values = list(stream.values)
    operators = list(stream.operators)
    unknown = [op for op in operators if op not in PRECEDENCE]
    if unknown:
        raise MalformedReduction(f"Unknown operator {unknown[0]!r}")

    for level in (3, 2, 1):
        i = 0
        while i < len(operators):
            if PRECEDENCE[operators[i]] != level:
                i += 1
                continue
            values[i] = apply(values[i], values[i + 1], operators[i])
            del values[i + 1]
            del operators[i]

    if len(values) != 1:
        raise MalformedReduction(f"Reduction left {len(values)} values")
    return values[0]


def reduce(pure_arith: str) -> float:
    """Evaluate an arithmetic-only string such as ``"2*(3+4)^-1"``.

    The input may contain numeric literals, ``+ - * / ^`` and parentheses.
    Names of any kind (including ``x``) are rejected.

    Raises
    ------
    EvaluationError
        ``InvalidToken``, ``UnbalancedParens`` or ``MalformedReduction``.
    """
    from .expression_parser import parse_expression

    tree = parse_expression(pure_arith, allow_names=False, max_length=None)
    return tree.evaluate(0.0)
