"""Table-of-values builder for the expression slots.

The table samples the current window at ``TABLE_ROWS`` evenly spaced x-values
and evaluates every slot with :func:`graphcalc.expression_engine.evaluate`.
Formatting mirrors a calculator display: x with 4 significant digits, y with
5, and an empty cell for blank slots or non-finite results.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .expression_engine import AngleMode, AngleModeLike, evaluate, resolve_angle_mode
from .plot_style import slot_label
from .plot_window import Window

__all__ = [
    "TABLE_ROWS",
    "TableRow",
    "ValueTable",
    "build_value_table",
    "format_significant",
]

TABLE_ROWS = 16
X_DIGITS = 4
Y_DIGITS = 5


def format_significant(value: Optional[float], digits: int) -> str:
    """Format ``value`` with ``digits`` significant digits.

    Trailing zeros are kept, and exponent notation is used for exponents below
    -6 or at least ``digits`` (``1.2346e+5``). ``None`` and non-finite values
    format as ``""``.

    Examples
    --------
    >>> format_significant(1.0, 5)
    '1.0000'
    >>> format_significant(123456.0, 5)
    '1.2346e+5'
    >>> format_significant(float("inf"), 5)
    ''
    """
    if digits < 1:
        raise ValueError("digits must be >= 1")
    if value is None or not math.isfinite(value):
        return ""
    if value == 0:
        value = 0.0  # drop the sign of -0.0
    mantissa, exp_text = f"{value:.{digits - 1}e}".split("e")
    exponent = int(exp_text)
    if exponent < -6 or exponent >= digits:
        sign = "+" if exponent >= 0 else "-"
        return f"{mantissa}e{sign}{abs(exponent)}"
    return f"{value:.{digits - 1 - exponent}f}"


@dataclass(frozen=True)
class TableRow:
    """One table row: an x-value and one y-value per slot (``None`` if blank)."""

    x: float
    values: tuple[Optional[float], ...]

    def cells(self) -> list[str]:
        return [format_significant(self.x, X_DIGITS)] + [
            format_significant(v, Y_DIGITS) for v in self.values
        ]


@dataclass(frozen=True)
class ValueTable:
    headers: tuple[str, ...]
    rows: tuple[TableRow, ...]

    def formatted(self) -> list[list[str]]:
        """Return every row as display strings, headers excluded."""
        return [row.cells() for row in self.rows]


def build_value_table(
    expressions: Sequence[Optional[str]],
    window: Window,
    angle_mode: AngleModeLike = AngleMode.RADIANS,
    *,
    rows: int = TABLE_ROWS,
) -> ValueTable:
    """Evaluate each slot at ``rows`` evenly spaced x-values across ``window``.

    Parameters
    ----------
    expressions : sequence of str or None
        Slot texts; blank slots produce ``None`` values.
    window : Window
        Only ``x_min`` and ``x_max`` are used.
    angle_mode : AngleMode or str, default=AngleMode.RADIANS
        Angle mode for trig functions.
    rows : int, default=16
        Number of x-values, both window ends included.

    Returns
    -------
    ValueTable
    """
    if rows < 2:
        raise ValueError("rows must be >= 2")
    mode = resolve_angle_mode(angle_mode)
    slots = [text if text is not None and str(text).strip() else None for text in expressions]
    table_rows = []
    for x in np.linspace(window.x_min, window.x_max, num=int(rows)):
        x_value = float(x)
        values = tuple(
            None if text is None else evaluate(text, x_value, mode) for text in slots
        )
        table_rows.append(TableRow(x=x_value, values=values))
    headers = ("X", *(slot_label(i) for i in range(len(slots))))
    return ValueTable(headers=headers, rows=tuple(table_rows))
