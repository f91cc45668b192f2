"""Graph view state and domain sampling.

Purpose
-------
Turns an expression into a polyline in pixel space. :func:`sample` evaluates
the expression once per pixel column of a canvas; :class:`GraphView` owns the
state a plotting widget needs between redraws (viewport, canvas size and the
last graphed expression) and is the only place that state changes.

Concepts and structure
----------------------
- A sample is either a :class:`PixelPoint` or the :data:`GAP` sentinel. A gap
  is emitted for every column whose value is NaN or infinite; the renderer
  must not connect the points on either side of it.
- :func:`split_segments` groups samples into the disconnected polylines a
  renderer draws.
- :meth:`GraphView.figure` renders the same samples as a Plotly figure in
  domain coordinates.

Important gotchas
-----------------
- Pixel rows grow downwards and are clamped to ``[0, height]``, so a curve
  leaving the viewport runs along the top or bottom edge instead of
  disappearing.
- An expression that cannot be parsed samples as all gaps; it is not an
  error.

Examples
--------
>>> view = GraphView("x^2")
>>> view.zoom_in()
>>> len(view.sample()) == view.width
True
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
import plotly.graph_objects as go

from .config import CLICK_FORMAT, GraphDefaults
from .errors import EvaluationError
from .evaluator import CompiledExpression, compile_expression
from .InputConvert import InputConvert
from .viewport import AxisTicks, RangeLike, Viewport

__all__ = [
    "GAP",
    "GraphSnapshot",
    "GraphView",
    "PixelPoint",
    "Sample",
    "sample",
    "split_segments",
]

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


class _GapSentinel:
    """Sentinel marking a pixel column with no finite value."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "GAP"


GAP = _GapSentinel()


class PixelPoint(NamedTuple):
    """A polyline vertex: integer pixel column and clamped pixel row."""

    px: int
    py: float


Sample = Union[PixelPoint, _GapSentinel]
ExpressionLike = Union[str, CompiledExpression]


def _canvas_size(value: Union[int, float, str], name: str) -> int:
    size = InputConvert(value, int, truncate=False)
    if size <= 0:
        raise ValueError(f"{name} must be > 0, got {size}")
    return size


def _compile_or_none(expr: ExpressionLike) -> Optional[CompiledExpression]:
    if isinstance(expr, CompiledExpression):
        return expr
    try:
        return compile_expression(expr)
    except EvaluationError as exc:
        logger.debug("cannot graph %r: %s", expr, exc)
        return None


def sample(
    expr: ExpressionLike,
    viewport: Viewport,
    pixel_width: int,
    pixel_height: int,
) -> Tuple[Sample, ...]:
    """Evaluate ``expr`` once per pixel column of a ``pixel_width`` canvas.

    Parameters
    ----------
    expr : str or CompiledExpression
        Expression in ``x``.
    viewport : Viewport
        Domain window mapped onto the canvas.
    pixel_width, pixel_height : int
        Canvas size in pixels.

    Returns
    -------
    tuple
        One entry per column, in column order: a :class:`PixelPoint` or
        :data:`GAP`.
    """
    width = _canvas_size(pixel_width, "pixel_width")
    height = _canvas_size(pixel_height, "pixel_height")

    compiled = _compile_or_none(expr)
    if compiled is None:
        return (GAP,) * width

    samples: list[Sample] = []
    for column in range(width):
        y = compiled(viewport.sample_x(column, width))
        if not math.isfinite(y):
            samples.append(GAP)
            continue
        py = height - (y - viewport.y_min) / viewport.y_span * height
        samples.append(PixelPoint(column, min(max(py, 0.0), float(height))))

    if logger.isEnabledFor(logging.INFO):
        gaps = sum(1 for s in samples if s is GAP)
        logger.info(
            "sampled %r: %d columns, %d gaps, %d segments",
            compiled.source,
            width,
            gaps,
            len(split_segments(samples)),
        )
    return tuple(samples)


def split_segments(samples: Sequence[Sample]) -> list[list[PixelPoint]]:
    """Group samples into connected polylines, breaking at every gap."""
    segments: list[list[PixelPoint]] = []
    current: list[PixelPoint] = []
    for item in samples:
        if item is GAP:
            if current:
                segments.append(current)
                current = []
            continue
        current.append(item)
    if current:
        segments.append(current)
    return segments


@dataclass(frozen=True)
class GraphSnapshot:
    """Immutable record of a graph view's reproducible state.

    Parameters
    ----------
    expression : str or None
        Last graphed expression.
    viewport : Viewport
        Current domain window.
    width, height : int
        Canvas size in pixels.
    """

    expression: Optional[str]
    viewport: Viewport
    width: int
    height: int

    def __repr__(self) -> str:
        return (
            f"GraphSnapshot(expression={self.expression!r}, "
            f"x_range={self.viewport.x_range}, y_range={self.viewport.y_range})"
        )


class GraphView:
    """State for one function plot: viewport, canvas size and expression.

    Parameters
    ----------
    expression : str or None, optional
        Expression to graph initially.
    defaults : GraphDefaults or None, optional
        Reset viewport, canvas size and zoom factors.
    x_range, y_range : RangeLike or None, optional
        Initial viewport; defaults to ``defaults.x_range`` / ``y_range``.
        Bounds may be numeric strings such as ``"-2pi"``.
    """

    def __init__(
        self,
        expression: Optional[str] = None,
        *,
        defaults: Optional[GraphDefaults] = None,
        x_range: Optional[RangeLike] = None,
        y_range: Optional[RangeLike] = None,
    ) -> None:
        self.defaults = defaults if defaults is not None else GraphDefaults()
        self.width = _canvas_size(self.defaults.width, "width")
        self.height = _canvas_size(self.defaults.height, "height")
        self._viewport = Viewport.from_ranges(
            x_range if x_range is not None else self.defaults.x_range,
            y_range if y_range is not None else self.defaults.y_range,
        )
        self._expression: Optional[str] = None
        self._compiled: Optional[CompiledExpression] = None
        if expression is not None:
            self.graph(expression)

    def __repr__(self) -> str:
        return (
            f"GraphView(expression={self._expression!r}, "
            f"x_range={self._viewport.x_range}, y_range={self._viewport.y_range})"
        )

    @property
    def viewport(self) -> Viewport:
        """Return the current viewport (change it with zoom/reset)."""
        return self._viewport

    @property
    def expression(self) -> Optional[str]:
        """Return the last graphed expression, or ``None``."""
        return self._expression

    @property
    def is_valid(self) -> bool:
        """Return True when the graphed expression parsed successfully."""
        return self._compiled is not None

    def graph(self, expression: str) -> None:
        """Set the expression to plot. Unparseable input samples as all gaps."""
        self._expression = expression
        self._compiled = _compile_or_none(expression)

    def resize(self, width: int, height: int) -> None:
        """Set the canvas size in pixels."""
        self.width = _canvas_size(width, "width")
        self.height = _canvas_size(height, "height")

    def zoom(self, factor: float) -> None:
        """Rescale both axes about the centre; ``factor < 1`` zooms in."""
        self._viewport = self._viewport.zoomed(factor)
        logger.debug("zoom(%s) -> %s", factor, self._viewport)

    def zoom_in(self) -> None:
        self.zoom(self.defaults.zoom_in_factor)

    def zoom_out(self) -> None:
        self.zoom(self.defaults.zoom_out_factor)

    def reset(self) -> None:
        """Restore the default viewport."""
        self._viewport = Viewport.from_ranges(self.defaults.x_range, self.defaults.y_range)
        logger.debug("reset -> %s", self._viewport)

    def sample(self) -> Tuple[Sample, ...]:
        """Sample the graphed expression; empty when nothing is graphed."""
        if self._expression is None:
            return ()
        target: ExpressionLike = self._compiled if self._compiled is not None else self._expression
        return sample(target, self._viewport, self.width, self.height)

    def segments(self) -> list[list[PixelPoint]]:
        """Return the connected polylines of the current plot."""
        return split_segments(self.sample())

    def pixel_to_domain(self, px: float, py: float) -> tuple[float, float]:
        """Convert a canvas position to domain coordinates."""
        return self._viewport.pixel_to_domain(px, py, self.width, self.height)

    def describe_click(self, px: float, py: float) -> str:
        """Return the coordinate label shown after clicking the canvas."""
        return CLICK_FORMAT % self.pixel_to_domain(px, py)

    def axis_ticks(self) -> AxisTicks:
        """Return integer tick marks for the current viewport and canvas."""
        return self._viewport.axis_ticks(self.width, self.height)

    def domain_samples(self) -> tuple[np.ndarray, np.ndarray]:
        """Return sampled ``x`` and ``y`` arrays in domain coordinates.

        Columns without a finite value hold NaN in ``y``.
        """
        columns = np.arange(self.width, dtype=float)
        x_values = self._viewport.x_min + self._viewport.x_span * columns / self.width
        if self._compiled is None:
            return x_values, np.full(self.width, np.nan)
        y_values = np.array([self._compiled(x) for x in x_values], dtype=float)
        y_values[~np.isfinite(y_values)] = np.nan
        return x_values, y_values

    def figure(self, *, color: str = "#3366e6") -> go.Figure:
        """Render the current plot as a Plotly figure.

        Gaps are passed as ``None`` with ``connectgaps=False`` so undefined
        regions break the line.
        """
        x_values, y_values = self.domain_samples()
        fig = go.Figure()
        fig.add_scatter(
            x=x_values.tolist(),
            y=[None if np.isnan(y) else float(y) for y in y_values],
            mode="lines",
            name=self._expression or "",
            connectgaps=False,
            line={"color": color, "width": 2},
        )
        fig.update_layout(
            width=self.width,
            height=self.height,
            showlegend=False,
            margin={"l": 0, "r": 0, "t": 0, "b": 0},
        )
        fig.update_xaxes(range=list(self._viewport.x_range), zeroline=True)
        fig.update_yaxes(range=list(self._viewport.y_range), zeroline=True)
        return fig

    def snapshot(self) -> GraphSnapshot:
        """Return an immutable snapshot of this view's state."""
        return GraphSnapshot(
            expression=self._expression,
            viewport=self._viewport,
            width=self.width,
            height=self.height,
        )
