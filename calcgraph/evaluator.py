"""Evaluator entry points.

:func:`evaluate` is what the calculator's "=" action and the grapher call: it
never raises for a malformed expression and instead returns NaN, which callers
test for and show as "Error". :func:`evaluate_strict` and
:func:`compile_expression` expose the underlying
:class:`~calcgraph.errors.EvaluationError` for callers that want the reason.

Parsing is separated from evaluation so the sampler can parse once and then
evaluate the same tree for every pixel column.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

import sympy as sp

from .config import ENTROPY_ERROR_TEXT, ERROR_TEXT, MAX_EXPRESSION_LENGTH, RESULT_FORMAT
from .errors import EvaluationError
from .expression_parser import parse_expression
from .expression_tree import Call, Chain, Group, Negate, Node, Variable
from .registry import VARIABLE_NAME, binary_entropy

__all__ = [
    "CompiledExpression",
    "compile_expression",
    "entropy_action",
    "equals_action",
    "evaluate",
    "evaluate_strict",
    "format_result",
]

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


def _uses_variable(node: Node) -> bool:
    if isinstance(node, Variable):
        return True
    if isinstance(node, Chain):
        return any(_uses_variable(operand) for operand in node.operands)
    if isinstance(node, Group):
        return _uses_variable(node.body)
    if isinstance(node, Call):
        return _uses_variable(node.argument)
    if isinstance(node, Negate):
        return _uses_variable(node.operand)
    return False


class CompiledExpression:
    """A parsed expression that can be evaluated for many values of ``x``.

    Parameters
    ----------
    source : str
        Raw expression text.
    tree : Chain
        Parsed tree for ``source``.

    Examples
    --------
    >>> f = compile_expression("x^2 + 1")
    >>> f(3.0)
    10.0
    """

    __slots__ = ("source", "tree")

    def __init__(self, source: str, tree: Chain) -> None:
        self.source = source
        self.tree = tree

    def __repr__(self) -> str:
        return f"CompiledExpression({self.source!r})"

    @property
    def uses_variable(self) -> bool:
        """Return True when the expression depends on ``x``."""
        return _uses_variable(self.tree)

    def evaluate_strict(self, x: float = 0.0) -> float:
        """Evaluate at ``x``, raising :class:`EvaluationError` on failure."""
        return float(self.tree.evaluate(float(x)))

    def __call__(self, x: float = 0.0) -> float:
        """Evaluate at ``x``; any :class:`EvaluationError` becomes NaN."""
        try:
            return self.evaluate_strict(x)
        except EvaluationError as exc:
            logger.debug("evaluation of %r at x=%r failed: %s", self.source, x, exc)
            return math.nan

    def substitute(self, x: float) -> str:
        """Return the pure arithmetic text for this expression at ``x``."""
        return self.tree.substitute(float(x))

    def to_sympy(self, symbol: Optional[sp.Symbol] = None) -> sp.Expr:
        """Return an equivalent SymPy expression.

        Operator precedence and left-associativity match :meth:`__call__`,
        e.g. ``2^3^2`` becomes ``(2**3)**2``. Division by zero follows SymPy
        (``zoo``) rather than the evaluator's NaN.
        """
        if symbol is None:
            symbol = sp.Symbol(VARIABLE_NAME, real=True)
        return self.tree.to_sympy(symbol)


def compile_expression(
    expression: str, *, max_length: Optional[int] = MAX_EXPRESSION_LENGTH
) -> CompiledExpression:
    """Parse ``expression`` once for repeated evaluation.

    Raises
    ------
    EvaluationError
        If the expression is too long, has a stray ``)``, or cannot be read.
    """
    return CompiledExpression(expression, parse_expression(expression, max_length=max_length))


def evaluate_strict(expression: str, x: float = 0.0) -> float:
    """Evaluate ``expression`` at ``x``, raising :class:`EvaluationError` on failure."""
    return compile_expression(expression).evaluate_strict(x)


def evaluate(expression: str, x: float = 0.0) -> float:
    """Evaluate ``expression`` at ``x``.

    Returns NaN for any malformed expression. Undefined arithmetic follows
    IEEE-754, except that division by zero is NaN.

    Examples
    --------
    >>> evaluate("2+3*4")
    14.0
    >>> evaluate("x^2", 3.0)
    9.0
    """
    try:
        return evaluate_strict(expression, x)
    except EvaluationError as exc:
        logger.debug("evaluate(%r, x=%r) is invalid: %s", expression, x, exc)
        return math.nan


def format_result(value: float) -> str:
    """Format a result for the calculator display (``"Error"`` for NaN)."""
    if math.isnan(value):
        return ERROR_TEXT
    return RESULT_FORMAT % value


def equals_action(expression: str) -> str:
    """Evaluate ``expression`` with ``x = 0`` and format the result."""
    return format_result(evaluate(expression, 0.0))


def entropy_action(expression: str) -> str:
    """Treat ``expression`` as a probability and format its binary entropy.

    The probability must lie strictly between 0 and 1.
    """
    p = evaluate(expression, 0.0)
    if 0 < p < 1:
        return RESULT_FORMAT % binary_entropy(p)
    return ENTROPY_ERROR_TEXT
