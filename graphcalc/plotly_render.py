"""Plotly drawing adapter for :class:`graphcalc.graph_engine.GraphEngine`.

Purpose
-------
Turn one render pass into a ``plotly.graph_objects.Figure``: the window becomes
fixed axis ranges, grid lines follow the engine's nice tick step, the zero
lines stand in for the axes, and every ``Plot`` becomes one line trace in its
slot color.

Important gotchas
-----------------
- The figure is rebuilt on each call; nothing here holds state between passes.
- Segments produced by a break policy are joined with ``None`` gaps and
  ``connectgaps=False``. The default policy draws one connected line.

Examples
--------
>>> from graphcalc.graph_engine import GraphEngine
>>> engine = GraphEngine()
>>> fig = figure_for(engine, engine.render_all(["sin(x)"]))  # doctest: +SKIP
>>> fig.show()  # doctest: +SKIP
"""

from __future__ import annotations

from typing import Any, Optional, Sequence

import plotly.graph_objects as go

from .graph_engine import GraphEngine, Plot
from .plot_style import AXIS_COLOR, AXIS_WIDTH, BACKGROUND_COLOR, CURVE_WIDTH, GRID_COLOR, GRID_WIDTH, slot_label
from .sampling import BreakPolicy, never_break

__all__ = ["figure_for", "trace_for"]


def _axis_layout(lo: float, hi: float, step: Optional[float]) -> dict[str, Any]:
    axis: dict[str, Any] = dict(
        range=[lo, hi],
        fixedrange=True,
        zeroline=True,
        zerolinewidth=AXIS_WIDTH,
        zerolinecolor=AXIS_COLOR,
        showline=False,
        showgrid=step is not None,
        gridcolor=GRID_COLOR,
        gridwidth=GRID_WIDTH,
        ticks="",
    )
    if step is not None:
        axis.update(tick0=0.0, dtick=step)
    return axis


def trace_for(plot: Plot, should_break: BreakPolicy = never_break) -> go.Scatter:
    """Return a line trace for ``plot``; segments are separated by ``None``."""
    xs: list[Optional[float]] = []
    ys: list[Optional[float]] = []
    for i, segment in enumerate(plot.segments(should_break)):
        if i:
            xs.append(None)
            ys.append(None)
        xs.extend(p.x for p in segment)
        ys.extend(p.y for p in segment)
    return go.Scatter(
        x=xs,
        y=ys,
        mode="lines",
        name=f"{slot_label(plot.slot)} = {plot.expression}",
        line=dict(color=plot.color, width=CURVE_WIDTH),
        connectgaps=False,
    )


def figure_for(
    engine: GraphEngine,
    plots: Sequence[Plot],
    *,
    should_break: BreakPolicy = never_break,
    title: Optional[str] = None,
) -> go.Figure:
    """Build a Plotly figure for ``plots`` using ``engine``'s window and size.

    Parameters
    ----------
    engine : GraphEngine
        Source of the window, pixel size, and grid spacing.
    plots : sequence of Plot
        Output of :meth:`GraphEngine.render_all`.
    should_break : callable, optional
        Break policy forwarded to :meth:`Plot.segments`.
    title : str or None, optional
        Figure title.

    Returns
    -------
    plotly.graph_objects.Figure
    """
    window = engine.get_window()
    grid = engine.grid()
    fig = go.Figure(data=[trace_for(plot, should_break) for plot in plots])
    fig.update_layout(
        width=engine.width,
        height=engine.height,
        margin=dict(l=0, r=0, t=30 if title else 0, b=0),
        paper_bgcolor=BACKGROUND_COLOR,
        plot_bgcolor=BACKGROUND_COLOR,
        showlegend=False,
        xaxis=_axis_layout(window.x_min, window.x_max, grid.x_step),
        yaxis=_axis_layout(window.y_min, window.y_max, grid.y_step),
    )
    if title:
        fig.update_layout(title=dict(text=title))
    return fig
