"""Split a built plot into per-frame snapshots."""

from __future__ import annotations

import logging
from typing import Any, Callable

import pandas as pd

from frameplot.core.errors import InvalidFrameValueError, NoFrameFieldError
from frameplot.visuals.anims.state import Animation
from frameplot.visuals.io.savers import save
from frameplot.visuals.plots.build import BuiltPlot, Plot, build_plot

logger = logging.getLogger(__name__)


def frame_values(built: BuiltPlot) -> list[Any]:
    """Return the distinct frame values across all layers, in frame order.

    Categorical levels come first in level order; any other values follow,
    sorted.

    Raises:
        NoFrameFieldError: No layer has a ``frame`` column.
        InvalidFrameValueError: The values cannot be ordered together.
    """
    columns = [d["frame"] for spec, d in zip(built.layers, built.data) if spec.has_frame]
    if not columns:
        raise NoFrameFieldError()
    values = list(pd.unique(pd.concat(columns, ignore_index=True).dropna()))
    if len(values) == 0:
        raise NoFrameFieldError("frame column has no values; cannot create animation")
    ordered: list[Any] = []
    if built.frame_order is not None:
        present = set(values)
        ordered = [v for v in built.frame_order if v in present]
    rest = [v for v in values if v not in ordered]
    try:
        return ordered + sorted(rest)
    except TypeError as e:
        raise InvalidFrameValueError(f"frame values cannot be ordered: {e}") from e


def _title(title: Any, frame: Any) -> str:
    if title is not None:
        return f"{title} {frame}"
    return str(frame)


def snapshot(
    built: BuiltPlot,
    frame: Any,
    frames: list[Any],
    title_frame: bool = True,
) -> BuiltPlot:
    """Copy ``built`` keeping only the rows visible at ``frame``.

    Rows without a frame value are background and stay in every snapshot.
    Cumulative rows stay from their own frame onwards; ordering follows
    ``frames`` so categorical frames accumulate in their level order.
    """
    rank = {v: i for i, v in enumerate(frames)}
    current = rank[frame]
    data = []
    for spec, d in zip(built.layers, built.data):
        if not spec.has_frame:
            data.append(d)
            continue
        keep = d["frame"].isna() | (d["frame"] == frame)
        if spec.cumulative:
            earlier = d["frame"].map(rank).le(current)
            keep = keep | (d["cumulative"].astype(bool) & earlier)
        data.append(d[keep])

    labels = dict(built.labels)
    if title_frame:
        labels["title"] = _title(labels.get("title"), frame)
    return built.replace(data=data, labels=labels)


def animate(
    plot: Plot | None,
    filename: str | None = None,
    saver: str | Callable | None = None,
    title_frame: bool = True,
    **options,
) -> Animation:
    """Animate a plot that maps a ``frame`` column.

    Each distinct value of the frame column becomes one frame of the
    animation: categorical levels first, in level order, then any other
    values sorted. A layer built with ``cumulative=True`` accumulates its
    rows instead of showing only the current frame.

    Args:
        plot: Plot to animate.
        filename: Optional output file. If omitted the snapshots are kept in
            memory and nothing is rendered.
        saver: Saver name such as "gif" or "mp4", or a render callable.
            Inferred from ``filename`` when omitted.
        title_frame: Append the current frame value to each frame's title.
        **options: Passed on to the saver (``fps``, ``loop``, ``dpi``, ...).

    Returns:
        Animation: saved if ``filename`` was given.
    """
    if plot is None:
        raise ValueError("no plot to animate")
    built = build_plot(plot)
    frames = frame_values(built)
    plots = [snapshot(built, f, frames, title_frame=title_frame) for f in frames]
    logger.info("animation with %d frames (%s .. %s)", len(frames), frames[0], frames[-1])

    anim = Animation(plots=plots, frames=frames)
    if filename is not None:
        return save(anim, filename, saver, **options)
    anim.options = dict(options)
    return anim
