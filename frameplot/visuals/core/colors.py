"""Color utilities for visuals."""

from __future__ import annotations

import matplotlib as mpl
import pandas as pd
from matplotlib.colors import Normalize, to_hex


def discrete_palette(levels: list, cmap_name: str = "tab10") -> dict:
    """Map each level to a hex color from a qualitative colormap.

    Args:
        levels: Distinct values, in legend order.
        cmap_name: Matplotlib colormap; cycles when there are more levels than colors.

    Returns:
        dict mapping level -> "#rrggbb".
    """
    cmap = mpl.colormaps[cmap_name]
    n = getattr(cmap, "N", 256)
    return {level: to_hex(cmap(i % n)) for i, level in enumerate(levels)}


def map_colours(values: pd.Series, cmap_name: str | None = None) -> pd.Series:
    """Resolve a mapped color column to hex strings.

    Numeric columns use a continuous colormap over the full data range, so
    every frame shares the same scale; anything else gets a discrete palette.
    """
    if pd.api.types.is_numeric_dtype(values) and not pd.api.types.is_bool_dtype(values):
        cmap = mpl.colormaps[cmap_name or "viridis"]
        finite = values.dropna()
        vmin = float(finite.min()) if len(finite) else 0.0
        vmax = float(finite.max()) if len(finite) else 1.0
        norm = Normalize(vmin=vmin, vmax=vmax if vmax > vmin else vmin + 1.0)
        return values.map(lambda v: to_hex(cmap(norm(v))) if pd.notna(v) else "#999999")
    levels = list(pd.unique(values.dropna()))
    palette = discrete_palette(levels, cmap_name or "tab10")
    return values.map(lambda v: palette.get(v, "#999999"))
