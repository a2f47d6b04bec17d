"""Top-level public API for the ``graphcalc`` package.

This module re-exports the graphing-calculator core so callers can import
from a single namespace, for example:

>>> from graphcalc import GraphEngine, compile_expression, evaluate  # doctest: +SKIP

It exposes both the high-level render pipeline (``GraphEngine``) and the
lower-level building blocks (parser, expression tree, sampler, tick rule) for
custom drawing layers.
"""

from .calculator import calculate, format_number
from .expression_engine import (
    AngleMode,
    Evaluator,
    compile_cached,
    compile_expression,
    evaluate,
    resolve_angle_mode,
)
from .expression_nodes import BinaryOp, Call, Constant, Number, UnaryMinus, Variable
from .expression_parser import ExpressionSyntaxError, parse_expression
from .graph_engine import AxisLines, GraphEngine, GridLines, Plot
from .input_convert import coerce_real
from .plot_style import PALETTE
from .plot_window import DEFAULT_WINDOW, Viewport, Window, grid_ticks, nice_step
from .plotly_render import figure_for
from .sampling import SamplePoint, break_on_gaps, never_break, sample_function, split_segments
from .value_table import TABLE_ROWS, ValueTable, build_value_table, format_significant

__all__ = [
    "AngleMode",
    "AxisLines",
    "BinaryOp",
    "Call",
    "Constant",
    "DEFAULT_WINDOW",
    "Evaluator",
    "ExpressionSyntaxError",
    "GraphEngine",
    "GridLines",
    "Number",
    "PALETTE",
    "Plot",
    "SamplePoint",
    "TABLE_ROWS",
    "UnaryMinus",
    "ValueTable",
    "Variable",
    "Viewport",
    "Window",
    "break_on_gaps",
    "build_value_table",
    "calculate",
    "coerce_real",
    "compile_cached",
    "compile_expression",
    "evaluate",
    "figure_for",
    "format_number",
    "format_significant",
    "grid_ticks",
    "never_break",
    "nice_step",
    "parse_expression",
    "resolve_angle_mode",
    "sample_function",
    "split_segments",
]
