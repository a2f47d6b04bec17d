"""Calculator-mode evaluation of the display line.

The keypad writes typographic operators (``×``, ``÷``, ``−``) into the display;
:func:`calculate` normalises them, evaluates the expression at ``x = 0``, and
formats the result the way the display shows it.
"""

from __future__ import annotations

import math

import numpy as np

from .expression_engine import AngleMode, AngleModeLike, evaluate

__all__ = ["ERROR_TEXT", "calculate", "format_number", "normalize_display_text"]

ERROR_TEXT = "Error"

_DISPLAY_OPERATORS = str.maketrans({"×": "*", "÷": "/", "−": "-"})


def normalize_display_text(text: str) -> str:
    """Replace display operator glyphs with their ASCII counterparts."""
    return text.translate(_DISPLAY_OPERATORS)


def format_number(value: float) -> str:
    """Format a finite float like a JavaScript number-to-string conversion.

    Positional notation is used for decimal exponents from -7 to 20; outside
    that range the shortest scientific form is used (``1e+21``, ``1e-7``).

    Examples
    --------
    >>> format_number(14.0)
    '14'
    >>> format_number(0.1 + 0.2)
    '0.30000000000000004'
    >>> format_number(1e21)
    '1e+21'
    """
    if value == 0:
        return "0"
    exponent = math.floor(math.log10(abs(value)))
    if -7 < exponent < 21:
        return np.format_float_positional(value, trim="-")
    return np.format_float_scientific(value, trim="-", exp_digits=1)


def calculate(text: str, angle_mode: AngleModeLike = AngleMode.RADIANS) -> str:
    """Evaluate a display line and return the text to show.

    Returns
    -------
    str
        The formatted result, or ``"Error"`` when the expression does not
        parse or its value is not finite.

    Examples
    --------
    >>> calculate("2+3×4")
    '14'
    >>> calculate("1÷0")
    'Error'
    """
    result = evaluate(normalize_display_text(text), 0.0, angle_mode)
    if not math.isfinite(result):
        return ERROR_TEXT
    return format_number(result)
