"""Viewport model: window bounds, data/pixel transforms, and nice tick steps.

Purpose
-------
This module defines ``Window`` (the data-space rectangle being shown),
``Viewport`` (a window paired with a pixel size), and the "nice numbers" tick
rule shared by both axes and by grid-line placement.

Important gotchas
-----------------
- Pixel y grows downwards, so ``data_y_to_pixel`` inverts the axis.
- ``Window`` does not validate ``min < max``; callers keep the ordering.
- Transforms are plain arithmetic and also work element-wise on NumPy arrays.

Examples
--------
>>> nice_step(0, 1)
0.2
>>> grid_ticks(-10, 10)
(-10.0, -5.0, 5.0, 10.0)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any

__all__ = [
    "DEFAULT_WINDOW",
    "TARGET_DIVISIONS",
    "Viewport",
    "Window",
    "grid_ticks",
    "nice_step",
]

TARGET_DIVISIONS = 8
ZERO_TICK_TOLERANCE = 1e-10


@dataclass(frozen=True)
class Window:
    """Data-space bounds mapped onto the pixel viewport.

    Parameters
    ----------
    x_min, x_max : float
        Horizontal data range.
    y_min, y_max : float
        Vertical data range.
    """

    x_min: float = -10.0
    x_max: float = 10.0
    y_min: float = -10.0
    y_max: float = 10.0

    @property
    def x_range(self) -> tuple[float, float]:
        return (self.x_min, self.x_max)

    @property
    def y_range(self) -> tuple[float, float]:
        return (self.y_min, self.y_max)

    def updated(self, **changes: float | None) -> "Window":
        """Return a copy with the given bounds replaced; ``None`` keeps a bound."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})

    def to_dict(self) -> dict[str, float]:
        return {
            "x_min": self.x_min,
            "x_max": self.x_max,
            "y_min": self.y_min,
            "y_max": self.y_max,
        }


DEFAULT_WINDOW = Window()


@dataclass(frozen=True)
class Viewport:
    """A window rendered onto a ``width`` x ``height`` pixel surface."""

    window: Window
    width: int
    height: int

    def data_x_to_pixel(self, x: Any) -> Any:
        w = self.window
        return (x - w.x_min) / (w.x_max - w.x_min) * self.width

    def data_y_to_pixel(self, y: Any) -> Any:
        w = self.window
        return self.height - (y - w.y_min) / (w.y_max - w.y_min) * self.height

    def pixel_x_to_data(self, px: Any) -> Any:
        w = self.window
        return w.x_min + px / self.width * (w.x_max - w.x_min)


def nice_step(lo: float, hi: float) -> float:
    """Return a tick spacing from {1, 2, 5, 10} x 10^k for the range ``[lo, hi]``.

    The spacing targets roughly eight divisions across the range.

    Raises
    ------
    ValueError
        If ``hi - lo`` is not a positive finite number.
    """
    span = hi - lo
    if not (math.isfinite(span) and span > 0):
        raise ValueError(f"nice_step requires lo < hi with a finite span, got ({lo!r}, {hi!r})")
    raw = span / TARGET_DIVISIONS
    mag = 10.0 ** math.floor(math.log10(raw))
    norm = raw / mag
    if norm <= 1:
        return mag
    if norm <= 2:
        return 2 * mag
    if norm <= 5:
        return 5 * mag
    return 10 * mag


def grid_ticks(lo: float, hi: float, step: float | None = None) -> tuple[float, ...]:
    """Return every multiple of ``step`` inside ``[lo, hi]`` except zero.

    Zero is left to the axis line. ``step`` defaults to :func:`nice_step`; an
    empty tuple is returned for a degenerate range.
    """
    if step is None:
        try:
            step = nice_step(lo, hi)
        except ValueError:
            return ()
    first = math.ceil(lo / step - 1e-9)
    last = math.floor(hi / step + 1e-9)
    ticks = []
    for k in range(first, last + 1):
        value = k * step
        if abs(value) < ZERO_TICK_TOLERANCE:
            continue
        ticks.append(value)
    return tuple(ticks)
