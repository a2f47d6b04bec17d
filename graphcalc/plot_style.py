"""Display constants shared by the geometry engine and drawing adapters.

This module centralizes slot colors and grid/axis styling so the plot
assembly in ``graph_engine`` and the Plotly adapter in ``plotly_render`` agree
on one palette. The palette size is also the number of expression slots.
"""

from __future__ import annotations

PALETTE: tuple[str, ...] = ("#22c55e", "#3b82f6", "#f59e0b", "#ef4444")

BACKGROUND_COLOR = "#0a0a0c"
GRID_COLOR = "rgba(255,255,255,0.08)"
AXIS_COLOR = "rgba(255,255,255,0.35)"

CURVE_WIDTH = 2.0
GRID_WIDTH = 1.0
AXIS_WIDTH = 1.5


def slot_color(index: int, palette: tuple[str, ...] = PALETTE) -> str:
    """Return the display color for slot ``index``; colors repeat past the palette.

    Raises
    ------
    ValueError
        If ``palette`` is empty or ``index`` is negative.
    """
    if not palette:
        raise ValueError("palette must contain at least one color")
    if index < 0:
        raise ValueError(f"slot index must be >= 0, got {index}")
    return palette[index % len(palette)]


def slot_label(index: int) -> str:
    """Return the calculator-style name of slot ``index`` (``Y1``, ``Y2``, ...)."""
    return f"Y{index + 1}"


__all__ = [
    "AXIS_COLOR",
    "AXIS_WIDTH",
    "BACKGROUND_COLOR",
    "CURVE_WIDTH",
    "GRID_COLOR",
    "GRID_WIDTH",
    "PALETTE",
    "slot_color",
    "slot_label",
]
