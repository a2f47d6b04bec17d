"""Plot geometry orchestration for the graphing calculator.

Purpose
-------
This module provides ``GraphEngine``, which owns the current window and pixel
size and turns up to four expression slots into drawable geometry: sampled
polylines (``Plot``), grid ticks (``GridLines``), and axis positions
(``AxisLines``).

Concepts and structure
----------------------
``GraphEngine`` delegates to focused collaborators:

- ``expression_engine`` compiles slot text into evaluators,
- ``sampling`` evaluates and filters points,
- ``plot_window`` provides the data/pixel transform and nice tick steps,
- ``plot_style`` provides slot colors.

Important gotchas
-----------------
- A blank slot or a syntax failure yields no plot for that slot and never
  affects the other slots.
- ``render_all`` reads the window once per pass, so every slot in the pass is
  sampled against the same bounds.
- ``set_window`` does not check ``min < max``.

Examples
--------
>>> engine = GraphEngine()
>>> plots = engine.render_all(["x^2", "", "sin(x", "2+3)"])
>>> [p.slot for p in plots]
[0, 2]

Logging
-------
This module uses the standard Python ``logging`` framework and installs a
``NullHandler``. Render passes are logged at INFO (rate-limited), skipped slots
and ranges at DEBUG::

    import logging
    logging.getLogger("graphcalc.graph_engine").setLevel(logging.DEBUG)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

import numpy as np

from .expression_engine import AngleMode, AngleModeLike, Evaluator, compile_cached, resolve_angle_mode
from .input_convert import coerce_real
from .plot_style import PALETTE, slot_color
from .plot_window import DEFAULT_WINDOW, Viewport, Window, grid_ticks, nice_step
from .sampling import BreakPolicy, SamplePoint, never_break, sample_function, sample_step, split_segments

# Module logger
# - Uses a NullHandler so importing this module never configures global logging.
# - Callers can enable logs via standard logging configuration.
logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

DEFAULT_WIDTH = 320
DEFAULT_HEIGHT = 180
MIN_PLOT_POINTS = 2


@dataclass(frozen=True)
class Plot:
    """One drawable curve produced by a render pass.

    Parameters
    ----------
    slot : int
        Index of the expression slot the curve came from.
    expression : str
        Slot text.
    color : str
        Display color chosen by slot index.
    points : tuple[SamplePoint, ...]
        Surviving sample points in increasing x order (at least two).
    evaluator : Evaluator
        Compiled expression, kept for tracing or re-sampling.
    """

    slot: int
    expression: str
    color: str
    points: tuple[SamplePoint, ...]
    evaluator: Evaluator

    @property
    def x_values(self) -> np.ndarray:
        return np.array([p.x for p in self.points], dtype=float)

    @property
    def y_values(self) -> np.ndarray:
        return np.array([p.y for p in self.points], dtype=float)

    def segments(self, should_break: BreakPolicy = never_break) -> list[list[SamplePoint]]:
        """Split the curve into polylines using ``should_break``.

        The default policy returns a single polyline through every point.
        """
        return split_segments(self.points, should_break)


@dataclass(frozen=True)
class GridLines:
    """Grid tick values in data units, zero excluded."""

    x_step: float | None
    y_step: float | None
    x_ticks: tuple[float, ...]
    y_ticks: tuple[float, ...]


@dataclass(frozen=True)
class AxisLines:
    """Pixel positions of the axis lines, ``None`` when off-screen.

    ``vertical_px`` is the x pixel of the line ``x = 0``; ``horizontal_px`` is
    the y pixel of the line ``y = 0``.
    """

    vertical_px: float | None
    horizontal_px: float | None


class GraphEngine:
    """Viewport owner and render pipeline for the expression slots.

    Parameters
    ----------
    width, height : int, default=320, 180
        Pixel size of the drawing surface.
    window : Window or None, optional
        Initial window; defaults to ``-10..10`` on both axes.
    palette : tuple[str, ...], optional
        Slot colors; slot ``i`` uses ``palette[i % len(palette)]``.
    samples_per_pixel : int, default=2
        Sampling density along x.
    y_slack : float, default=1.0
        Extra data units kept above and below the window when sampling.
    """

    def __init__(
        self,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        window: Optional[Window] = None,
        *,
        palette: tuple[str, ...] = PALETTE,
        samples_per_pixel: int = 2,
        y_slack: float = 1.0,
    ) -> None:
        if not palette:
            raise ValueError("palette must contain at least one color")
        if samples_per_pixel < 1:
            raise ValueError("samples_per_pixel must be >= 1")
        self._width, self._height = self._validate_size(width, height)
        self._window = window if window is not None else DEFAULT_WINDOW
        self._palette = tuple(palette)
        self._samples_per_pixel = int(samples_per_pixel)
        self._y_slack = float(y_slack)
        self._render_info_last_log_t = 0.0
        self._render_debug_last_log_t = 0.0

    @staticmethod
    def _validate_size(width: int, height: int) -> tuple[int, int]:
        w, h = int(width), int(height)
        if w <= 0 or h <= 0:
            raise ValueError(f"width and height must be positive, got {width}x{height}")
        return w, h

    # --- viewport -------------------------------------------------------

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def palette(self) -> tuple[str, ...]:
        return self._palette

    def resize(self, width: int, height: int) -> None:
        """Set the pixel size of the drawing surface."""
        self._width, self._height = self._validate_size(width, height)

    def get_window(self) -> Window:
        """Return the current window (an immutable snapshot)."""
        return self._window

    def set_window(
        self,
        *,
        x_min: Any = None,
        x_max: Any = None,
        y_min: Any = None,
        y_max: Any = None,
    ) -> Window:
        """Update some or all window bounds.

        Bounds left as ``None`` keep their previous value. Values may be numbers
        or text such as ``"-2*pi"``. Ordering is the caller's responsibility.

        Returns
        -------
        Window
            The new window.

        Raises
        ------
        ValueError
            If a bound cannot be converted to a finite real number.
        """
        changes = {
            key: coerce_real(value, name=key)
            for key, value in (("x_min", x_min), ("x_max", x_max), ("y_min", y_min), ("y_max", y_max))
            if value is not None
        }
        self._window = self._window.updated(**changes)
        return self._window

    @property
    def viewport(self) -> Viewport:
        return Viewport(self._window, self._width, self._height)

    def data_x_to_pixel(self, x: Any) -> Any:
        return self.viewport.data_x_to_pixel(x)

    def data_y_to_pixel(self, y: Any) -> Any:
        return self.viewport.data_y_to_pixel(y)

    def pixel_x_to_data(self, px: Any) -> Any:
        return self.viewport.pixel_x_to_data(px)

    # --- grid and axes ----------------------------------------------------

    def grid(self) -> GridLines:
        """Return grid tick positions for the current window."""
        window = self._window
        x_step = _safe_step(window.x_min, window.x_max)
        y_step = _safe_step(window.y_min, window.y_max)
        return GridLines(
            x_step=x_step,
            y_step=y_step,
            x_ticks=grid_ticks(window.x_min, window.x_max, x_step) if x_step else (),
            y_ticks=grid_ticks(window.y_min, window.y_max, y_step) if y_step else (),
        )

    def axes(self) -> AxisLines:
        """Return the pixel positions of the ``x = 0`` and ``y = 0`` lines."""
        viewport = self.viewport
        window = viewport.window
        vertical = horizontal = None
        if window.x_max != window.x_min:
            zero_x = float(viewport.data_x_to_pixel(0.0))
            if 0 <= zero_x <= self._width:
                vertical = zero_x
        if window.y_max != window.y_min:
            zero_y = float(viewport.data_y_to_pixel(0.0))
            if 0 <= zero_y <= self._height:
                horizontal = zero_y
        return AxisLines(vertical_px=vertical, horizontal_px=horizontal)

    # --- sampling and render ---------------------------------------------

    @property
    def sample_step(self) -> float:
        """Return the x increment used by :meth:`sample`."""
        return sample_step(self._window, self._width, self._samples_per_pixel)

    def sample(self, fn: Callable[[Any], Any], window: Optional[Window] = None) -> list[SamplePoint]:
        """Sample ``fn`` across ``window`` (default: the current window)."""
        return sample_function(
            fn,
            window if window is not None else self._window,
            self._width,
            samples_per_pixel=self._samples_per_pixel,
            y_slack=self._y_slack,
        )

    def render_all(
        self,
        expressions: Sequence[str],
        angle_mode: AngleModeLike = AngleMode.RADIANS,
    ) -> list[Plot]:
        """Compile and sample every non-blank slot.

        Parameters
        ----------
        expressions : sequence of str
            Slot texts; ``None`` or blank entries are skipped.
        angle_mode : AngleMode or str, default=AngleMode.RADIANS
            Angle mode for trig functions in every slot.

        Returns
        -------
        list[Plot]
            One plot per slot that compiled and kept at least two points, in
            slot order.
        """
        mode = resolve_angle_mode(angle_mode)
        window = self._window
        plots: list[Plot] = []
        for slot, text in enumerate(expressions):
            if text is None or not str(text).strip():
                continue
            evaluator = compile_cached(text, mode)
            if evaluator is None:
                logger.debug("render_all: slot %d skipped (syntax failure in %r)", slot, text)
                continue
            points = self.sample(evaluator, window)
            if len(points) < MIN_PLOT_POINTS:
                logger.debug("render_all: slot %d skipped (%d points survived)", slot, len(points))
                continue
            plots.append(
                Plot(
                    slot=slot,
                    expression=str(text),
                    color=slot_color(slot, self._palette),
                    points=tuple(points),
                    evaluator=evaluator,
                )
            )
        self._log_render(len(expressions), plots, window)
        return plots

    def _log_render(self, slot_count: int, plots: list[Plot], window: Window) -> None:
        # Simple rate-limited logging implementation
        now = time.monotonic()
        if logger.isEnabledFor(logging.INFO) and (now - self._render_info_last_log_t) > 1.0:
            self._render_info_last_log_t = now
            logger.info(f"render_all(slots={slot_count}) plots={len(plots)}")

        if logger.isEnabledFor(logging.DEBUG) and (now - self._render_debug_last_log_t) > 0.5:
            self._render_debug_last_log_t = now
            logger.debug(f"ranges x={window.x_range} y={window.y_range}")


def _safe_step(lo: float, hi: float) -> float | None:
    try:
        return nice_step(lo, hi)
    except ValueError:
        return None


__all__ = [
    "AxisLines",
    "DEFAULT_HEIGHT",
    "DEFAULT_WIDTH",
    "GraphEngine",
    "GridLines",
    "Plot",
]
