"""Exception taxonomy for expression evaluation.

Every failure raised while evaluating an expression derives from
:class:`EvaluationError`. The public :func:`calcgraph.evaluate` entry point
collapses all of them into a NaN result; :func:`calcgraph.evaluate_strict`
lets them propagate.

Division by zero is deliberately absent: it produces NaN and is not an error.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "EvaluationError",
    "ExpressionTooLong",
    "InvalidToken",
    "MalformedReduction",
    "UnbalancedParens",
]


class EvaluationError(ValueError):
    """Base class for expressions that cannot be evaluated.

    Parameters
    ----------
    message : str
        Human-readable description.
    expression : str, optional
        The text being evaluated when the error was raised.
    position : int or None, optional
        Zero-based index into ``expression`` where the problem was found.
    """

    def __init__(
        self,
        message: str,
        *,
        expression: str = "",
        position: Optional[int] = None,
    ) -> None:
        self.expression = expression
        self.position = position
        if position is not None:
            message = f"{message} (at position {position} in {expression!r})"
        elif expression:
            message = f"{message} (in {expression!r})"
        super().__init__(message)


class UnbalancedParens(EvaluationError):
    """A closing parenthesis appeared without a matching opening one."""


class InvalidToken(EvaluationError):
    """A value position could not be read as a number, name, or group."""


class MalformedReduction(EvaluationError):
    """The token stream did not reduce to exactly one value."""


class ExpressionTooLong(EvaluationError):
    """The raw expression exceeds the configured length cap."""
