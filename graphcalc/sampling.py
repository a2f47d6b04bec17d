"""Adaptive point sampling of compiled expressions across a window.

Purpose
-------
``sample_function`` walks the visible x-range at two samples per pixel column,
evaluates the function, and keeps only finite points within one unit of the
visible y-range. The result is one flat ordered point list; a consumer joins
consecutive surviving points with straight segments.

Discontinuities
---------------
Sampling never marks discontinuities, so a curve such as ``1/x`` is joined
across its asymptote. Splitting a point list into separate polylines is a
separate, opt-in step: :func:`split_segments` with a break policy. The default
policy :func:`never_break` keeps the single connected polyline;
:func:`break_on_gaps` breaks wherever samples were dropped.

Logging
-------
The vectorised-to-pointwise fallback is logged at DEBUG.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, NamedTuple, Sequence

import numpy as np

from .plot_window import Window

__all__ = [
    "BreakPolicy",
    "SamplePoint",
    "break_on_gaps",
    "never_break",
    "sample_function",
    "sample_step",
    "sample_x_values",
    "split_segments",
]

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class SamplePoint(NamedTuple):
    x: float
    y: float


BreakPolicy = Callable[[SamplePoint, SamplePoint], bool]


def sample_step(window: Window, width: int, samples_per_pixel: int = 2) -> float:
    """Return the x increment between samples."""
    return (window.x_max - window.x_min) / (samples_per_pixel * width)


def sample_x_values(window: Window, width: int, samples_per_pixel: int = 2) -> np.ndarray:
    """Return the sample abscissae from ``x_min`` to ``x_max`` inclusive."""
    count = int(samples_per_pixel * width) + 1
    return np.linspace(window.x_min, window.x_max, num=count)


def _evaluate_vectorised(fn: Callable[[Any], Any], xs: np.ndarray) -> np.ndarray | None:
    try:
        with np.errstate(all="ignore"):
            ys = np.asarray(fn(xs), dtype=float)
    except Exception as exc:
        logger.debug("sample_function: vectorised call failed (%s); evaluating pointwise", exc)
        return None
    if ys.ndim == 0:
        return np.full_like(xs, float(ys))
    if ys.shape != xs.shape:
        logger.debug(
            "sample_function: vectorised call returned shape %s for %s inputs; evaluating pointwise",
            ys.shape,
            xs.shape,
        )
        return None
    return ys


def _evaluate_pointwise(fn: Callable[[Any], Any], xs: np.ndarray) -> np.ndarray:
    ys = np.full_like(xs, np.nan)
    for i, x in enumerate(xs):
        try:
            with np.errstate(all="ignore"):
                ys[i] = float(fn(float(x)))
        except Exception:
            # A faulting point is dropped; sampling continues.
            continue
    return ys


def sample_function(
    fn: Callable[[Any], Any],
    window: Window,
    width: int,
    *,
    samples_per_pixel: int = 2,
    y_slack: float = 1.0,
) -> list[SamplePoint]:
    """Sample ``fn`` across ``window`` for a surface ``width`` pixels wide.

    Parameters
    ----------
    fn : callable
        Function of one real argument. Vectorised callables (such as
        :class:`~graphcalc.expression_engine.Evaluator`) are evaluated in one
        call; other callables fall back to one call per x.
    window : Window
        Visible data range.
    width : int
        Pixel width of the drawing surface.
    samples_per_pixel : int, default=2
        Samples per pixel column.
    y_slack : float, default=1.0
        Points are kept while ``y_min - y_slack <= y <= y_max + y_slack``.

    Returns
    -------
    list[SamplePoint]
        Surviving points in increasing x order.
    """
    xs = sample_x_values(window, width, samples_per_pixel)
    ys = _evaluate_vectorised(fn, xs)
    if ys is None:
        ys = _evaluate_pointwise(fn, xs)

    keep = np.isfinite(ys) & (ys >= window.y_min - y_slack) & (ys <= window.y_max + y_slack)
    return [SamplePoint(float(x), float(y)) for x, y in zip(xs[keep], ys[keep])]


def never_break(prev: SamplePoint, cur: SamplePoint) -> bool:
    """Break policy that joins every pair of consecutive points."""
    return False


def break_on_gaps(step: float, *, tolerance: float = 1.5) -> BreakPolicy:
    """Return a policy that breaks where consecutive points skip a sample.

    Parameters
    ----------
    step : float
        Sample increment used to produce the points (see :func:`sample_step`).
    tolerance : float, default=1.5
        Break when the x distance exceeds ``tolerance * step``.
    """
    limit = abs(step) * tolerance

    def _policy(prev: SamplePoint, cur: SamplePoint) -> bool:
        return abs(cur.x - prev.x) > limit

    return _policy


def split_segments(
    points: Sequence[SamplePoint], should_break: BreakPolicy = never_break
) -> list[list[SamplePoint]]:
    """Split ``points`` into polylines wherever ``should_break`` says so.

    Segments with a single point are kept so callers can decide whether to
    draw them as dots.
    """
    segments: list[list[SamplePoint]] = []
    current: list[SamplePoint] = []
    for point in points:
        if current and should_break(current[-1], point):
            segments.append(current)
            current = []
        current.append(point)
    if current:
        segments.append(current)
    return segments
