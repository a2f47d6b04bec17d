from __future__ import annotations

import logging

import numpy as np
import pytest

from graphcalc.graph_engine import AxisLines, GraphEngine
from graphcalc.plot_style import PALETTE
from graphcalc.plot_window import Window
from graphcalc.sampling import break_on_gaps


def test_defaults_match_calculator_screen() -> None:
    engine = GraphEngine()
    assert (engine.width, engine.height) == (320, 180)
    assert engine.get_window() == Window(-10.0, 10.0, -10.0, 10.0)


def test_set_window_is_partial_and_returns_snapshot() -> None:
    engine = GraphEngine()
    before = engine.get_window()
    after = engine.set_window(x_min=-2, y_max="2*pi")
    assert after == Window(-2.0, 10.0, -10.0, pytest.approx(2 * np.pi))
    assert engine.get_window() is after
    assert before == Window(-10.0, 10.0, -10.0, 10.0)


def test_set_window_does_not_validate_ordering() -> None:
    engine = GraphEngine()
    window = engine.set_window(x_min=5, x_max=1)
    assert (window.x_min, window.x_max) == (5.0, 1.0)


@pytest.mark.parametrize("bad", ["nope", float("inf"), "sqrt(-1)"])
def test_set_window_rejects_non_finite_or_non_real(bad: object) -> None:
    engine = GraphEngine()
    with pytest.raises(ValueError):
        engine.set_window(y_min=bad)
    assert engine.get_window() == Window()


def test_constructor_and_resize_validate_size() -> None:
    with pytest.raises(ValueError, match="must be positive"):
        GraphEngine(width=0)
    engine = GraphEngine()
    engine.resize(640, 360)
    assert (engine.width, engine.height) == (640, 360)
    with pytest.raises(ValueError):
        engine.resize(10, -1)


def test_pixel_transforms_follow_current_window() -> None:
    engine = GraphEngine(width=200, height=100)
    engine.set_window(x_min=0, x_max=20, y_min=0, y_max=10)
    assert engine.data_x_to_pixel(10) == 100
    assert engine.data_y_to_pixel(10) == 0
    assert engine.pixel_x_to_data(50) == 5


def test_render_all_skips_blank_and_invalid_slots_independently() -> None:
    engine = GraphEngine()
    plots = engine.render_all(["x", "2+3)", "x^2", "   "], angle_mode="rad")
    assert [p.slot for p in plots] == [0, 2]
    assert [p.color for p in plots] == [PALETTE[0], PALETTE[2]]
    assert plots[0].expression == "x"


def test_slot_failure_does_not_block_other_slots() -> None:
    engine = GraphEngine()
    plots = engine.render_all(["sin(x)", "foo(x)", "cos(x)", "x/2"])
    assert [p.slot for p in plots] == [0, 2, 3]


def test_long_expression_in_one_slot_does_not_break_the_pass() -> None:
    engine = GraphEngine()
    long_identity = "+".join(["x"] + ["0"] * 2999)
    plots = engine.render_all(["x", long_identity, "x^2", "-x"])
    assert [p.slot for p in plots] == [0, 1, 2, 3]
    assert plots[1].y_values.tolist() == plots[0].y_values.tolist()


def test_default_palette_has_one_color_per_slot() -> None:
    assert len(PALETTE) == 4
    plots = GraphEngine().render_all(["1", "2", "3", "4", "5"])
    assert [p.color for p in plots] == [*PALETTE, PALETTE[0]]


def test_render_all_requires_two_surviving_points() -> None:
    engine = GraphEngine()
    plots = engine.render_all(["100", "sqrt(-1)", "1"])
    assert [p.slot for p in plots] == [2]


def test_colors_cycle_past_palette() -> None:
    engine = GraphEngine(palette=("red", "blue"))
    plots = engine.render_all(["1", "2", "3"])
    assert [p.color for p in plots] == ["red", "blue", "red"]


def test_render_uses_angle_mode() -> None:
    engine = GraphEngine()
    engine.set_window(x_min=0, x_max=360, y_min=-2, y_max=2)
    (deg,) = engine.render_all(["sin(x)"], angle_mode="deg")
    peak = max(deg.points, key=lambda p: p.y)
    assert peak.x == pytest.approx(90, abs=1.0)
    assert peak.y == pytest.approx(1.0, abs=1e-4)


def test_plot_arrays_and_segments() -> None:
    engine = GraphEngine()
    (plot,) = engine.render_all(["1/x"])
    assert plot.x_values.shape == plot.y_values.shape == (len(plot.points),)
    assert len(plot.segments()) == 1
    assert len(plot.segments(break_on_gaps(engine.sample_step))) == 2


def test_grid_and_axes_for_default_window() -> None:
    engine = GraphEngine()
    grid = engine.grid()
    assert grid.x_step == grid.y_step == 5.0
    assert grid.x_ticks == (-10.0, -5.0, 5.0, 10.0)
    assert engine.axes() == AxisLines(vertical_px=160.0, horizontal_px=90.0)


def test_axes_off_screen_and_degenerate_grid() -> None:
    engine = GraphEngine()
    engine.set_window(x_min=1, x_max=5, y_min=3, y_max=3)
    axes = engine.axes()
    assert axes.vertical_px is None
    grid = engine.grid()
    assert grid.y_step is None
    assert grid.y_ticks == ()
    assert grid.x_step == 0.5


def test_render_logs_skipped_slots(caplog: pytest.LogCaptureFixture) -> None:
    engine = GraphEngine()
    with caplog.at_level(logging.DEBUG, logger="graphcalc.graph_engine"):
        engine.render_all(["x", "2+3)"])
    assert any("slot 1 skipped" in record.getMessage() for record in caplog.records)
