from __future__ import annotations

import pytest

from graphcalc.calculator import ERROR_TEXT, calculate, format_number, normalize_display_text


def test_display_glyphs_are_normalised() -> None:
    assert normalize_display_text("6×7−2÷1") == "6*7-2/1"


@pytest.mark.parametrize(
    "text, mode, expected",
    [
        ("2+3×4", "rad", "14"),
        ("−3^2", "rad", "9"),
        ("10÷4", "rad", "2.5"),
        ("sin(90)", "deg", "1"),
        ("sqrt(2)", "rad", "1.4142135623730951"),
        ("x+1", "rad", "1"),
    ],
)
def test_calculate_formats_results(text: str, mode: str, expected: str) -> None:
    assert calculate(text, mode) == expected


@pytest.mark.parametrize("text", ["", "2+", "1÷0", "log(-1)", "2+3)"])
def test_calculate_reports_error(text: str) -> None:
    assert calculate(text) == ERROR_TEXT


@pytest.mark.parametrize(
    "value, expected",
    [
        (0.0, "0"),
        (-0.0, "0"),
        (-2.5, "-2.5"),
        (1e20, "100000000000000000000"),
        (1e21, "1e+21"),
        (1e-6, "0.000001"),
        (1e-7, "1e-7"),
        (1.5e-10, "1.5e-10"),
    ],
)
def test_format_number(value: float, expected: str) -> None:
    assert format_number(value) == expected
