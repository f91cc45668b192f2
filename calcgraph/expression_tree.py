"""Parsed expression nodes.

The parser produces a small tree whose root is always a :class:`Chain`: a
flat run of operands joined by binary operators, reduced by precedence at
evaluation time (see :mod:`calcgraph.reducer`). Parenthesised groups and
function arguments are nested chains, so nested calls are evaluated bottom-up
by ordinary recursion.

Each node supports three walks:

- ``evaluate(x)`` returns a float,
- ``substitute(x)`` renders pure arithmetic text with the variable, constants
  and function calls replaced by their decimal values,
- ``to_sympy(symbol)`` builds the equivalent SymPy expression.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

import numpy as np
import sympy as sp

from .reducer import TokenStream, reduce_tokens
from .registry import CONSTANTS, FunctionKind

__all__ = [
    "Call",
    "Chain",
    "Constant",
    "Group",
    "Negate",
    "Node",
    "Number",
    "Variable",
    "format_number",
]


def format_number(value: float) -> str:
    """Render ``value`` as positional (never scientific) decimal text.

    The shortest text that round-trips to the same double is used, so
    re-reading the output and formatting again gives identical text.

    Examples
    --------
    >>> format_number(2.0)
    '2'
    >>> format_number(-0.25)
    '-0.25'
    """
    return np.format_float_positional(np.float64(value), trim="-")


def _sympy_number(value: float) -> sp.Expr:
    if np.isnan(value):
        return sp.nan
    if np.isinf(value):
        return sp.oo if value > 0 else -sp.oo
    if float(value).is_integer():
        return sp.Integer(int(value))
    return sp.Float(value)


def _sympy_apply(left: sp.Expr, right: sp.Expr, op: str) -> sp.Expr:
    if op == "+":
        return left + right
    if op == "-":
        return left - right
    if op == "*":
        return left * right
    if op == "/":
        return left / right
    return left**right


def _sympy_entropy(p: sp.Expr) -> sp.Expr:
    q = 1 - p
    return sp.Piecewise(
        (-p * sp.log(p, 2) - q * sp.log(q, 2), sp.And(p > 0, p < 1)),
        (0, True),
    )


_SYMPY_FUNCTIONS = {
    FunctionKind.SIN: sp.sin,
    FunctionKind.COS: sp.cos,
    FunctionKind.TAN: sp.tan,
    FunctionKind.ASIN: sp.asin,
    FunctionKind.ACOS: sp.acos,
    FunctionKind.ATAN: sp.atan,
    FunctionKind.LOG: lambda arg: sp.log(arg, 10),
    FunctionKind.LN: sp.log,
    FunctionKind.SQRT: sp.sqrt,
    FunctionKind.EXP: sp.exp,
    FunctionKind.ENTROPY: _sympy_entropy,
}

_SYMPY_CONSTANTS = {
    "pi": sp.pi,
    "tau": 2 * sp.pi,
    "e": sp.E,
}


@dataclass(frozen=True)
class Number:
    """A numeric literal."""

    value: float

    def evaluate(self, x: float) -> float:
        return self.value

    def substitute(self, x: float) -> str:
        return format_number(self.value)

    def to_sympy(self, symbol: sp.Symbol) -> sp.Expr:
        return _sympy_number(self.value)


@dataclass(frozen=True)
class Variable:
    """The free variable."""

    def evaluate(self, x: float) -> float:
        return float(x)

    def substitute(self, x: float) -> str:
        return format_number(x)

    def to_sympy(self, symbol: sp.Symbol) -> sp.Expr:
        return symbol


@dataclass(frozen=True)
class Constant:
    """A named constant such as ``pi``."""

    name: str

    @property
    def value(self) -> float:
        return CONSTANTS[self.name]

    def evaluate(self, x: float) -> float:
        return self.value

    def substitute(self, x: float) -> str:
        return format_number(self.value)

    def to_sympy(self, symbol: sp.Symbol) -> sp.Expr:
        return _SYMPY_CONSTANTS[self.name]


@dataclass(frozen=True)
class Negate:
    """Unary minus applied to the operand that immediately follows it.

    The sign binds tighter than every binary operator, so ``-2^2`` is ``4``.
    """

    operand: "Node"

    def evaluate(self, x: float) -> float:
        return -self.operand.evaluate(x)

    def substitute(self, x: float) -> str:
        return "-" + self.operand.substitute(x)

    def to_sympy(self, symbol: sp.Symbol) -> sp.Expr:
        return -self.operand.to_sympy(symbol)


@dataclass(frozen=True)
class Chain:
    """Operands joined by binary operators; ``operators[i]`` follows ``operands[i]``."""

    operands: tuple["Node", ...]
    operators: tuple[str, ...]

    def _stream(self, values: list) -> TokenStream:
        return TokenStream(values=values, operators=list(self.operators))

    def evaluate(self, x: float) -> float:
        stream = self._stream([operand.evaluate(x) for operand in self.operands])
        return reduce_tokens(stream)

    def substitute(self, x: float) -> str:
        parts = [self.operands[0].substitute(x)]
        for op, operand in zip(self.operators, self.operands[1:]):
            parts.append(op)
            parts.append(operand.substitute(x))
        return "".join(parts)

    def to_sympy(self, symbol: sp.Symbol) -> sp.Expr:
        stream = self._stream([operand.to_sympy(symbol) for operand in self.operands])
        return reduce_tokens(stream, apply=_sympy_apply)


@dataclass(frozen=True)
class Group:
    """A parenthesised sub-expression."""

    body: Chain

    def evaluate(self, x: float) -> float:
        return self.body.evaluate(x)

    def substitute(self, x: float) -> str:
        return "(" + self.body.substitute(x) + ")"

    def to_sympy(self, symbol: sp.Symbol) -> sp.Expr:
        return self.body.to_sympy(symbol)


@dataclass(frozen=True)
class Call:
    """A registry function applied to a parenthesised argument."""

    kind: FunctionKind
    argument: Chain

    def evaluate(self, x: float) -> float:
        return self.kind(self.argument.evaluate(x))

    def substitute(self, x: float) -> str:
        return format_number(self.evaluate(x))

    def to_sympy(self, symbol: sp.Symbol) -> sp.Expr:
        return _SYMPY_FUNCTIONS[self.kind](self.argument.to_sympy(symbol))


Node = Union[Number, Variable, Constant, Negate, Chain, Group, Call]
