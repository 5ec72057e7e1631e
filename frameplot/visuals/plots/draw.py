"""Draw a ``BuiltPlot`` with matplotlib."""

from __future__ import annotations

import math

import matplotlib.dates as mdates
import matplotlib.pyplot as plt
import pandas as pd

from frameplot.visuals.core import constants
from frameplot.visuals.core.style import setup_axes_style
from frameplot.visuals.plots.build import BuiltPlot


def _panel_rows(d: pd.DataFrame, panel) -> pd.DataFrame:
    if panel is None:
        return d
    return d[d["PANEL"].isna() | (d["PANEL"] == panel)]


def _draw_layer(ax: plt.Axes, geom: str, d: pd.DataFrame) -> None:
    if d.empty:
        return
    if geom == "point":
        ax.scatter(d["x"], d["y"], s=d["size"], c=list(d["colour"]), alpha=0.8, linewidths=0)
    elif geom == "line":
        for _, g in d.groupby("group", sort=False):
            g = g.sort_values("x")
            ax.plot(g["x"], g["y"], color=g["colour"].iloc[0], linewidth=1.8)
    elif geom == "bar":
        ax.bar(d["x"], d["y"], width=d["width"], color=list(d["colour"]), align="center")


def draw_built(built: BuiltPlot, figsize: tuple[float, float] | None = None, dpi: int | None = None):
    """Draw every layer of ``built`` into a new figure.

    Limits come from the built plot, not the drawn rows, so every frame of an
    animation lands on the same axes.

    Returns:
        matplotlib.figure.Figure
    """
    n = len(built.panels)
    ncols = math.ceil(math.sqrt(n))
    nrows = math.ceil(n / ncols)
    fig, axes = plt.subplots(
        nrows,
        ncols,
        figsize=figsize or constants.figsize,
        dpi=dpi or constants.dpi,
        squeeze=False,
        sharex=True,
        sharey=True,
    )
    flat = axes.ravel()
    for ax, panel in zip(flat, built.panels):
        for spec, d in zip(built.layers, built.data):
            _draw_layer(ax, spec.geom, _panel_rows(d, panel))
        setup_axes_style(ax, built.layers[0].geom)
        ax.set_xlim(*built.limits["x"])
        ax.set_ylim(*built.limits["y"])
        if built.x_scale == "discrete":
            ax.set_xticks(list(built.x_breaks.keys()))
            ax.set_xticklabels(list(built.x_breaks.values()), rotation=45, ha="right")
        elif built.x_scale == "date":
            ax.xaxis.set_major_locator(mdates.AutoDateLocator())
            ax.xaxis.set_major_formatter(mdates.DateFormatter("%Y-%m-%d"))
            ax.tick_params(axis="x", labelrotation=30)
        if panel is not None:
            ax.set_title(str(panel), fontsize=10)
    for ax in flat[n:]:
        ax.set_visible(False)

    title = built.labels.get("title")
    if title is not None:
        if n == 1:
            flat[0].set_title(str(title), fontsize=14, fontweight="bold")
        else:
            fig.suptitle(str(title), fontsize=14, fontweight="bold")
    fig.supxlabel(str(built.labels.get("x") or ""))
    fig.supylabel(str(built.labels.get("y") or ""))
    fig.tight_layout()
    return fig
