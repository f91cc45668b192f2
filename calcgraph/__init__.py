"""Top-level public API for the ``calcgraph`` package.

This module re-exports the calculator/grapher surface so users can import
from a single namespace, for example:

>>> from calcgraph import GraphView, evaluate
>>> evaluate("2+3*4")
14.0

It exposes both the high-level entry points (``evaluate``, ``GraphView``) and
the lower-level building blocks (parser, reducer, registry) for integrations
that need them.
"""

from .config import GraphDefaults
from .errors import (
    EvaluationError,
    ExpressionTooLong,
    InvalidToken,
    MalformedReduction,
    UnbalancedParens,
)
from .evaluator import (
    CompiledExpression,
    compile_expression,
    entropy_action,
    equals_action,
    evaluate,
    evaluate_strict,
    format_result,
)
from .expression_parser import parse_expression, repair_parentheses, tokenize
from .graph_view import GAP, GraphSnapshot, GraphView, PixelPoint, sample, split_segments
from .InputConvert import InputConvert
from .preprocess import preprocess
from .reducer import TokenStream, apply_operator, reduce, reduce_tokens
from .registry import CONSTANTS, FunctionKind, binary_entropy, lookup_function
from .viewport import AxisTicks, Viewport

__version__ = "0.1.0"
