"""Declarative plots and the build step that resolves them for drawing.

A ``Plot`` is a list of ``Layer`` mappings over pandas data. ``build_plot``
turns it into a ``BuiltPlot``: one geometry-ready DataFrame per layer with
normalized columns (``x``, ``y``, ``colour``, ``size``, ``group``, ``PANEL``
and, when mapped, ``frame`` and ``cumulative``) plus the plot-level
metadata every frame of an animation shares (labels, limits, ticks).
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import Any

import matplotlib.dates as mdates
import numpy as np
import pandas as pd

from frameplot.core.errors import InvalidFrameValueError
from frameplot.visuals.core.colors import map_colours
from frameplot.visuals.core.constants import default_colour, default_size, size_range

logger = logging.getLogger(__name__)

GEOMS = ("point", "line", "bar")


@dataclass
class Layer:
    """One geometry drawn from one table.

    Args:
        data: Source rows.
        x, y: Column names for the position aesthetics.
        geom: "point", "line" or "bar".
        frame: Column whose distinct values become animation frames.
        cumulative: ``True`` to accumulate rows across frames, or the name of a
            boolean column marking which rows accumulate.
        color: Column mapped to color.
        size: Column mapped to marker area (points only).
    """

    data: pd.DataFrame
    x: str
    y: str
    geom: str = "point"
    frame: str | None = None
    cumulative: bool | str = False
    color: str | None = None
    size: str | None = None


@dataclass
class Plot:
    layers: list[Layer] = field(default_factory=list)
    title: str | None = None
    xlabel: str | None = None
    ylabel: str | None = None
    facet: str | None = None

    def add(self, layer: Layer) -> "Plot":
        self.layers.append(layer)
        return self


@dataclass(frozen=True)
class LayerSpec:
    geom: str
    has_frame: bool
    cumulative: bool


@dataclass
class BuiltPlot:
    """Resolved plot data, one DataFrame per layer."""

    data: list[pd.DataFrame]
    layers: list[LayerSpec]
    labels: dict[str, Any]
    panels: list[Any]
    limits: dict[str, tuple[float, float]]
    x_scale: str = "continuous"
    x_breaks: dict[float, str] = field(default_factory=dict)
    frame_order: list[Any] | None = None

    def replace(
        self, data: list[pd.DataFrame] | None = None, labels: dict | None = None
    ) -> "BuiltPlot":
        """Return an independent copy, optionally with new layer data or labels."""
        return BuiltPlot(
            data=[d.copy() for d in (data if data is not None else self.data)],
            layers=list(self.layers),
            labels=dict(labels if labels is not None else self.labels),
            panels=list(self.panels),
            limits=dict(self.limits),
            x_scale=self.x_scale,
            x_breaks=dict(self.x_breaks),
            frame_order=copy.copy(self.frame_order),
        )

    @property
    def n_rows(self) -> int:
        return sum(len(d) for d in self.data)


def _check_columns(layer: Layer) -> None:
    if layer.geom not in GEOMS:
        raise ValueError(f"unknown geom {layer.geom!r}; expected one of {GEOMS}")
    wanted = [layer.x, layer.y, layer.frame, layer.color, layer.size]
    if isinstance(layer.cumulative, str):
        wanted.append(layer.cumulative)
    for col in wanted:
        if col is not None and col not in layer.data.columns:
            raise KeyError(f"column {col!r} not found in layer data")


def _x_scale(layers: list[Layer]) -> tuple[str, list[Any]]:
    """Decide how x is positioned across all layers."""
    columns = [layer.data[layer.x] for layer in layers]
    if all(pd.api.types.is_datetime64_any_dtype(c) for c in columns):
        return "date", []
    if all(
        pd.api.types.is_numeric_dtype(c) and not pd.api.types.is_bool_dtype(c)
        for c in columns
    ):
        return "continuous", []
    categories: list[Any] = []
    for c in columns:
        if isinstance(c.dtype, pd.CategoricalDtype):
            levels = list(c.cat.categories)
        else:
            levels = list(pd.unique(c.dropna()))
            try:
                levels = sorted(levels)
            except TypeError:
                pass
        categories.extend(v for v in levels if v not in categories)
    return "discrete", categories


def _cumulative_column(layer: Layer) -> pd.Series | None:
    marker = layer.cumulative
    if isinstance(marker, str):
        col = layer.data[marker]
        if not pd.api.types.is_bool_dtype(col):
            raise InvalidFrameValueError(
                f"cumulative column {marker!r} must be boolean, got {col.dtype}"
            )
        return col.astype(bool)
    if not isinstance(marker, (bool, np.bool_)):
        raise InvalidFrameValueError(
            f"cumulative must be a bool or a column name, got {marker!r}"
        )
    if not marker:
        return None
    return pd.Series(True, index=layer.data.index)


def _frame_order(layers: list[Layer]) -> list[Any] | None:
    """Level order of categorical frame columns, merged across layers."""
    order: list[Any] = []
    found = False
    for layer in layers:
        if layer.frame is not None and isinstance(
            layer.data[layer.frame].dtype, pd.CategoricalDtype
        ):
            found = True
            order.extend(
                v for v in layer.data[layer.frame].cat.categories if v not in order
            )
    return order if found else None


def _scale_sizes(values: pd.Series) -> pd.Series:
    lo, hi = size_range
    vmin, vmax = values.min(), values.max()
    if pd.isna(vmin) or vmax == vmin:
        return pd.Series((lo + hi) / 2, index=values.index)
    return lo + (values - vmin) / (vmax - vmin) * (hi - lo)


def _bar_width(x: pd.Series, x_scale: str) -> float:
    if x_scale == "discrete":
        return 0.8
    xs = np.sort(pd.unique(x.dropna()))
    if len(xs) < 2:
        return 0.8
    return float(np.min(np.diff(xs))) * 0.9


def _build_layer(
    layer: Layer, facet: str | None, x_scale: str, categories: list[Any]
) -> pd.DataFrame:
    src = layer.data
    out = pd.DataFrame(index=src.index)
    if x_scale == "discrete":
        positions = {v: float(i) for i, v in enumerate(categories)}
        out["x"] = src[layer.x].map(positions).astype(float)
    elif x_scale == "date":
        out["x"] = mdates.date2num(pd.to_datetime(src[layer.x]))
    else:
        out["x"] = src[layer.x].astype(float)
    out["y"] = pd.to_numeric(src[layer.y], errors="coerce")

    if layer.color is not None:
        out["colour"] = map_colours(src[layer.color])
        out["group"] = src[layer.color].astype(str)
    else:
        out["colour"] = default_colour
        out["group"] = "1"

    if layer.size is not None:
        out["size"] = _scale_sizes(pd.to_numeric(src[layer.size], errors="coerce"))
    else:
        out["size"] = default_size

    if facet is not None and facet in src.columns:
        out["PANEL"] = src[facet]
    else:
        out["PANEL"] = None

    if layer.geom == "bar":
        out["width"] = _bar_width(out["x"], x_scale)

    if layer.frame is not None:
        frame = src[layer.frame]
        if isinstance(frame.dtype, pd.CategoricalDtype):
            frame = frame.astype(object).where(frame.notna(), None)
        out["frame"] = frame
        cumulative = _cumulative_column(layer)
        if cumulative is not None:
            out["cumulative"] = cumulative
    else:
        # validated even without a frame so bad markers fail early
        _cumulative_column(layer)

    return out.reset_index(drop=True)


def _limits(data: list[pd.DataFrame], layers: list[Layer], x_scale: str, n_categories: int):
    xs = pd.concat([d["x"] for d in data]) if data else pd.Series(dtype=float)
    ys = pd.concat([d["y"] for d in data]) if data else pd.Series(dtype=float)
    if x_scale == "discrete":
        x_lim = (-0.6, max(n_categories, 1) - 0.4)
    else:
        x_lo, x_hi = float(xs.min()), float(xs.max())
        widths = [d["width"].max() for d in data if "width" in d and len(d)]
        half = max(widths) / 2 if widths else 0.0
        x_lo, x_hi = x_lo - half, x_hi + half
        pad = (x_hi - x_lo) * 0.05 or 0.5
        x_lim = (x_lo - pad, x_hi + pad)

    y_lo, y_hi = float(ys.min()), float(ys.max())
    if any(layer.geom == "bar" for layer in layers):
        y_lo, y_hi = min(y_lo, 0.0), max(y_hi, 0.0)
    pad = (y_hi - y_lo) * 0.05 or 0.5
    return {"x": x_lim, "y": (y_lo - pad, y_hi + pad)}


def build_plot(plot: Plot) -> BuiltPlot:
    """Resolve a ``Plot`` into per-layer drawing data and shared metadata.

    Args:
        plot: Declarative plot with at least one layer.

    Returns:
        BuiltPlot: independent of the source DataFrames.

    Raises:
        ValueError: No layers, or an unknown geom.
        KeyError: A mapped column is missing from a layer's data.
        InvalidFrameValueError: A cumulative marker is not boolean.
    """
    if not plot.layers:
        raise ValueError("plot has no layers")
    for layer in plot.layers:
        _check_columns(layer)

    x_scale, categories = _x_scale(plot.layers)
    data = [_build_layer(layer, plot.facet, x_scale, categories) for layer in plot.layers]
    specs = [
        LayerSpec(
            geom=layer.geom,
            has_frame=layer.frame is not None,
            cumulative="cumulative" in d.columns,
        )
        for layer, d in zip(plot.layers, data)
    ]

    panels: list[Any] = [None]
    if plot.facet is not None:
        values = pd.unique(pd.concat([d["PANEL"] for d in data]).dropna())
        try:
            panels = sorted(values)
        except TypeError:
            panels = list(values)

    first = plot.layers[0]
    labels = {
        "title": plot.title,
        "x": plot.xlabel if plot.xlabel is not None else first.x,
        "y": plot.ylabel if plot.ylabel is not None else first.y,
    }
    built = BuiltPlot(
        data=data,
        layers=specs,
        labels=labels,
        panels=panels,
        limits=_limits(data, plot.layers, x_scale, len(categories)),
        x_scale=x_scale,
        x_breaks={float(i): str(v) for i, v in enumerate(categories)},
        frame_order=_frame_order(plot.layers),
    )
    logger.debug(
        "built plot: %d layers, %d rows, %d panels, x=%s",
        len(data),
        built.n_rows,
        len(panels),
        x_scale,
    )
    return built
