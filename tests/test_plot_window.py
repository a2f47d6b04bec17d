from __future__ import annotations

import math

import numpy as np
import pytest

from graphcalc.plot_window import DEFAULT_WINDOW, Viewport, Window, grid_ticks, nice_step


@pytest.mark.parametrize(
    "lo, hi, expected",
    [
        (0, 1, 0.2),
        (-10, 10, 5.0),
        (0, 8, 1.0),
        (0, 100, 20.0),
        (0, 0.024, 0.005),
        (-1000, 1000, 500.0),
        (0, 90, 20.0),
    ],
)
def test_nice_step_known_values(lo: float, hi: float, expected: float) -> None:
    assert nice_step(lo, hi) == pytest.approx(expected)


@pytest.mark.parametrize("lo, hi", [(0, 0), (1, -1), (0, math.inf), (math.nan, 1)])
def test_nice_step_rejects_degenerate_ranges(lo: float, hi: float) -> None:
    with pytest.raises(ValueError, match="nice_step requires"):
        nice_step(lo, hi)


def test_grid_ticks_skip_zero_and_stay_inside_range() -> None:
    assert grid_ticks(-10, 10) == (-10.0, -5.0, 5.0, 10.0)
    ticks = grid_ticks(-1, 1)
    assert 0.0 not in ticks
    assert all(-1 <= t <= 1 for t in ticks)
    assert ticks == (-1.0, -0.5, 0.5, 1.0)


def test_grid_ticks_for_range_without_zero() -> None:
    assert grid_ticks(3, 7) == pytest.approx((3.0, 3.5, 4.0, 4.5, 5.0, 5.5, 6.0, 6.5, 7.0))


def test_grid_ticks_degenerate_range_is_empty() -> None:
    assert grid_ticks(5, 5) == ()


def test_default_window() -> None:
    assert DEFAULT_WINDOW == Window(-10.0, 10.0, -10.0, 10.0)
    assert DEFAULT_WINDOW.to_dict() == {"x_min": -10.0, "x_max": 10.0, "y_min": -10.0, "y_max": 10.0}


def test_window_partial_update_keeps_unspecified_bounds() -> None:
    w = Window().updated(x_min=-2.0, y_max=None)
    assert w == Window(-2.0, 10.0, -10.0, 10.0)


def test_viewport_transforms() -> None:
    vp = Viewport(Window(-10, 10, -10, 10), width=320, height=180)
    assert vp.data_x_to_pixel(-10) == 0
    assert vp.data_x_to_pixel(10) == 320
    assert vp.data_x_to_pixel(0) == 160
    assert vp.data_y_to_pixel(10) == 0
    assert vp.data_y_to_pixel(-10) == 180
    assert vp.data_y_to_pixel(0) == 90
    assert vp.pixel_x_to_data(160) == 0
    assert vp.pixel_x_to_data(vp.data_x_to_pixel(3.7)) == pytest.approx(3.7)


def test_viewport_transforms_are_elementwise_on_arrays() -> None:
    vp = Viewport(Window(0, 4, 0, 2), width=8, height=4)
    np.testing.assert_allclose(vp.data_x_to_pixel(np.array([0.0, 1.0, 4.0])), [0.0, 2.0, 8.0])
    np.testing.assert_allclose(vp.data_y_to_pixel(np.array([0.0, 1.0, 2.0])), [4.0, 2.0, 0.0])
