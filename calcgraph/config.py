"""Package-wide defaults.

Values here mirror the calculator's fixed behaviour: a square ``[-10, 10]``
viewport, 20% zoom steps and a 380x200 pixel canvas. :class:`GraphDefaults`
bundles the graph-related ones so a :class:`~calcgraph.graph_view.GraphView`
can be configured without touching module globals.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_X_RANGE: tuple[float, float] = (-10.0, 10.0)
DEFAULT_Y_RANGE: tuple[float, float] = (-10.0, 10.0)

# Exact reciprocals, so zooming in then out restores the viewport.
ZOOM_IN_FACTOR = 0.8
ZOOM_OUT_FACTOR = 1.25

GRAPH_WIDTH = 380
GRAPH_HEIGHT = 200

MAX_EXPRESSION_LENGTH = 256

# Deepest run of nested groups, calls and signs the parser accepts.
MAX_NESTING_DEPTH = 128

RESULT_FORMAT = "%.6g"
ERROR_TEXT = "Error"
ENTROPY_ERROR_TEXT = "Error: 0 < p < 1"
CLICK_FORMAT = "Clicked: (%.2f, %.2f)"


@dataclass(frozen=True)
class GraphDefaults:
    """Configuration for a graph view.

    Parameters
    ----------
    x_range, y_range : tuple[float, float]
        Viewport restored by :meth:`GraphView.reset`.
    width, height : int
        Canvas size in pixels.
    zoom_in_factor, zoom_out_factor : float
        Scale factors applied by ``zoom_in`` / ``zoom_out``.
    """

    x_range: tuple[float, float] = DEFAULT_X_RANGE
    y_range: tuple[float, float] = DEFAULT_Y_RANGE
    width: int = GRAPH_WIDTH
    height: int = GRAPH_HEIGHT
    zoom_in_factor: float = ZOOM_IN_FACTOR
    zoom_out_factor: float = ZOOM_OUT_FACTOR

    def __post_init__(self) -> None:
        if int(self.width) <= 0 or int(self.height) <= 0:
            raise ValueError(
                f"Canvas size must be positive, got {self.width}x{self.height}"
            )
        for name in ("zoom_in_factor", "zoom_out_factor"):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be > 0")
