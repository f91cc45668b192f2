"""Viewport: the affine map between domain space and pixel space.

Pixel space has its origin in the top-left corner with ``y`` growing
downwards, so the domain's ``y_max`` is pixel row ``0`` and ``y_min`` is pixel
row ``height``.

A :class:`Viewport` is immutable; zooming returns a new instance. The owning
:class:`~calcgraph.graph_view.GraphView` swaps it in.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .InputConvert import InputConvert
from .config import DEFAULT_X_RANGE, DEFAULT_Y_RANGE

NumberLikeOrStr = Union[int, float, str]
RangeLike = Tuple[NumberLikeOrStr, NumberLikeOrStr]


@dataclass(frozen=True)
class AxisTicks:
    """Integer tick marks for both axes as ``(value, pixel)`` pairs."""

    x: tuple[tuple[int, float], ...]
    y: tuple[tuple[int, float], ...]


@dataclass(frozen=True)
class Viewport:
    """Rectangular domain window ``[x_min, x_max] x [y_min, y_max]``.

    Parameters
    ----------
    x_min, x_max : float
        Horizontal domain bounds, ``x_min < x_max``.
    y_min, y_max : float
        Vertical domain bounds, ``y_min < y_max``.

    Raises
    ------
    ValueError
        If a bound is not finite or a range is empty.
    """

    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def __post_init__(self) -> None:
        bounds = (self.x_min, self.x_max, self.y_min, self.y_max)
        if not all(math.isfinite(b) for b in bounds):
            raise ValueError(f"Viewport bounds must be finite, got {bounds}")
        if not self.x_min < self.x_max:
            raise ValueError(f"Empty x range: ({self.x_min}, {self.x_max})")
        if not self.y_min < self.y_max:
            raise ValueError(f"Empty y range: ({self.y_min}, {self.y_max})")
        if not (math.isfinite(self.x_span) and math.isfinite(self.y_span)):
            raise ValueError(f"Viewport span overflows: {bounds}")

    @classmethod
    def from_ranges(
        cls,
        x_range: Optional[RangeLike] = None,
        y_range: Optional[RangeLike] = None,
    ) -> "Viewport":
        """Build a viewport from ``(min, max)`` pairs of numbers or numeric strings.

        Examples
        --------
        >>> Viewport.from_ranges(("-pi", "pi"), (-1, 1)).x_max
        3.141592653589793
        """
        xr = x_range if x_range is not None else DEFAULT_X_RANGE
        yr = y_range if y_range is not None else DEFAULT_Y_RANGE
        return cls(
            x_min=InputConvert(xr[0], float),
            x_max=InputConvert(xr[1], float),
            y_min=InputConvert(yr[0], float),
            y_max=InputConvert(yr[1], float),
        )

    @property
    def x_range(self) -> tuple[float, float]:
        return (self.x_min, self.x_max)

    @property
    def y_range(self) -> tuple[float, float]:
        return (self.y_min, self.y_max)

    @property
    def x_span(self) -> float:
        return self.x_max - self.x_min

    @property
    def y_span(self) -> float:
        return self.y_max - self.y_min

    @property
    def center(self) -> tuple[float, float]:
        return ((self.x_max + self.x_min) / 2, (self.y_max + self.y_min) / 2)

    def zoomed(self, factor: float) -> "Viewport":
        """Return this viewport rescaled about its centre by ``factor``.

        ``factor < 1`` zooms in, ``factor > 1`` zooms out.

        Raises
        ------
        ValueError
            If ``factor`` is not a finite positive number, or the result would
            collapse or overflow a range.
        """
        factor = float(factor)
        if not (math.isfinite(factor) and factor > 0):
            raise ValueError(f"Zoom factor must be finite and > 0, got {factor!r}")
        center_x, center_y = self.center
        new_width = self.x_span * factor
        new_height = self.y_span * factor
        return Viewport(
            x_min=center_x - new_width / 2,
            x_max=center_x + new_width / 2,
            y_min=center_y - new_height / 2,
            y_max=center_y + new_height / 2,
        )

    def sample_x(self, column: int, width: int) -> float:
        """Return the domain ``x`` sampled at pixel ``column`` of ``width``."""
        return self.x_min + self.x_span * column / width

    def domain_to_pixel(
        self, x: float, y: float, width: int, height: int
    ) -> tuple[float, float]:
        """Map a domain point to (unclamped) pixel coordinates."""
        px = (x - self.x_min) / self.x_span * width
        py = height - (y - self.y_min) / self.y_span * height
        return (px, py)

    def pixel_to_domain(
        self, px: float, py: float, width: int, height: int
    ) -> tuple[float, float]:
        """Map pixel coordinates back to a domain point.

        Examples
        --------
        >>> Viewport(-10, 10, -10, 10).pixel_to_domain(190, 100, 380, 200)
        (0.0, 0.0)
        """
        x = self.x_min + (px / width) * self.x_span
        y = self.y_max - (py / height) * self.y_span
        return (x, y)

    def axis_ticks(self, width: int, height: int, *, max_ticks: int = 200) -> AxisTicks:
        """Return integer tick positions inside the viewport, skipping zero.

        An axis whose range holds more than ``max_ticks`` integers gets no
        ticks.
        """

        def _ticks(low: float, high: float, to_pixel) -> tuple[tuple[int, float], ...]:
            first, last = int(low), int(high)
            if last - first + 1 > max_ticks:
                return ()
            return tuple((i, to_pixel(i)) for i in range(first, last + 1) if i != 0)

        return AxisTicks(
            x=_ticks(self.x_min, self.x_max, lambda i: self.domain_to_pixel(i, 0.0, width, height)[0]),
            y=_ticks(self.y_min, self.y_max, lambda i: self.domain_to_pixel(0.0, i, width, height)[1]),
        )
