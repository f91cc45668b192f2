"""Rewrite an expression into pure arithmetic text.

:func:`preprocess` is the textual view of an evaluation: the variable,
constants and every function call (evaluated recursively, innermost first)
are replaced by decimal literals, implicit multiplication is written out and
open groups are closed. What remains contains only numbers, ``+ - * / ^`` and
parentheses, and can be handed to :func:`calcgraph.reducer.reduce`.

>>> preprocess("2x + sqrt(16", 1.5)
'2*1.5+4'
"""

from __future__ import annotations

from typing import Optional

from .expression_parser import parse_expression

__all__ = ["preprocess"]


def preprocess(expr: str, x: float, *, max_length: Optional[int] = None) -> str:
    """Return ``expr`` as pure arithmetic text with ``x`` bound.

    Running ``preprocess`` on its own output returns the same text. Decimal
    expansion can make the output longer than the input, so no length cap is
    applied unless ``max_length`` is given.

    Raises
    ------
    EvaluationError
        If ``expr`` cannot be parsed.
    """
    return parse_expression(expr, max_length=max_length).substitute(float(x))
