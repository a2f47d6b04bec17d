"""Property-based checks for the expression engine and tick rule."""

from __future__ import annotations

import math

import pytest

from graphcalc.expression_engine import compile_expression, evaluate
from graphcalc.expression_parser import parse_expression
from graphcalc.plot_window import Window, nice_step
from graphcalc.sampling import sample_function

try:
    from hypothesis import given
    from hypothesis import strategies as st
except ImportError:  # pragma: no cover
    pytest.skip("hypothesis is required for property-based tests", allow_module_level=True)

SAFE_FLOATS = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)
POSITIVE_SPANS = st.floats(min_value=1e-6, max_value=1e9, allow_nan=False, allow_infinity=False)

_EXPRESSIONS = st.recursive(
    st.sampled_from(["x", "2", "0.5", "pi", "e"]),
    lambda inner: st.one_of(
        st.tuples(inner, st.sampled_from(["+", "-", "*", "/", "^"]), inner).map(
            lambda t: f"({t[0]}){t[1]}({t[2]})"
        ),
        st.tuples(st.sampled_from(["sin", "cos", "abs", "sqrt", "ln", "log"]), inner).map(
            lambda t: f"{t[0]}({t[1]})"
        ),
        inner.map(lambda s: f"-({s})"),
    ),
    max_leaves=8,
)


@given(x=SAFE_FLOATS)
def test_square_matches_multiplication(x: float) -> None:
    assert evaluate("x^2", x) == pytest.approx(x * x)
    assert evaluate("x^2", x) == evaluate("x^2", -x)


@given(lo=SAFE_FLOATS, span=POSITIVE_SPANS)
def test_nice_step_is_one_two_or_five_times_power_of_ten(lo: float, span: float) -> None:
    hi = lo + span
    step = nice_step(lo, hi)
    exponent = math.floor(math.log10(step) + 1e-9)
    leading = step / 10.0**exponent
    assert min(abs(leading - m) for m in (1.0, 2.0, 5.0, 10.0)) < 1e-6
    divisions = (hi - lo) / step
    assert 3.2 - 1e-9 <= divisions <= 8.0 + 1e-9


@given(source=_EXPRESSIONS)
def test_canonical_text_reparses_to_same_tree(source: str) -> None:
    tree = parse_expression(source)
    assert parse_expression(str(tree)) == tree


@given(source=_EXPRESSIONS, x=SAFE_FLOATS)
def test_evaluate_never_raises(source: str, x: float) -> None:
    result = evaluate(source, x)
    assert isinstance(result, float)


@given(source=_EXPRESSIONS)
def test_sampled_points_stay_within_slack(source: str) -> None:
    evaluator = compile_expression(source)
    assert evaluator is not None
    window = Window(-5.0, 5.0, -3.0, 3.0)
    for point in sample_function(evaluator, window, 40):
        assert -4.0 <= point.y <= 4.0
        assert math.isfinite(point.y)
