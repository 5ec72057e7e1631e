"""Render frame snapshots to still images."""

from __future__ import annotations

import io
import logging
import os
from typing import Iterable, Iterator

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg as FigureCanvas
from PIL import Image

from frameplot.services.system import log_mem
from frameplot.visuals.core import constants
from frameplot.visuals.plots.build import BuiltPlot
from frameplot.visuals.plots.draw import draw_built

logger = logging.getLogger(__name__)

FRAME_PREFIX = "frame_"
FRAME_EXT = ".png"


def _snapshot_image(built: BuiltPlot, figsize, dpi) -> Image.Image:
    fig = draw_built(built, figsize=figsize, dpi=dpi)
    try:
        fig.set_facecolor(constants.facecolor)
        canvas = FigureCanvas(fig)
        canvas.draw()
        w, h = canvas.get_width_height()
        buf = np.frombuffer(canvas.buffer_rgba(), dtype=np.uint8).reshape(h, w, 4)
        return Image.fromarray(buf[:, :, :3].copy())
    finally:
        plt.close(fig)


def iter_frames_png(
    snapshots: Iterable[BuiltPlot],
    figsize: tuple[float, float] | None = None,
    dpi: int | None = None,
) -> Iterator[bytes]:
    """Yield PNG bytes frame-by-frame without holding every figure open.

    Every image is forced to the size of the first one so that frames stay
    aligned even if tight layout shifts a pixel.
    """
    size = None
    for idx, built in enumerate(snapshots):
        img = _snapshot_image(built, figsize or constants.figsize, dpi or constants.dpi)
        if size is None:
            size = img.size
        elif img.size != size:
            img = img.resize(size, Image.Resampling.BILINEAR)
        out = io.BytesIO()
        img.save(out, format="PNG")
        if idx % 50 == 0:
            logger.info("prepared frame %s", idx)
        yield out.getvalue()


def frame_filename(index: int, prefix: str = FRAME_PREFIX) -> str:
    return f"{prefix}{index:06d}{FRAME_EXT}"


def write_frames(
    snapshots: Iterable[BuiltPlot],
    workdir: str,
    prefix: str = FRAME_PREFIX,
    figsize: tuple[float, float] | None = None,
    dpi: int | None = None,
) -> list[str]:
    """Write one numbered PNG per snapshot into ``workdir``.

    Returns:
        Paths of the written images, in frame order (1-based numbering).
    """
    os.makedirs(workdir, exist_ok=True)
    paths: list[str] = []
    for i, png in enumerate(iter_frames_png(snapshots, figsize=figsize, dpi=dpi), start=1):
        path = os.path.join(workdir, frame_filename(i, prefix))
        with open(path, "wb") as f:
            f.write(png)
        paths.append(path)
    log_mem(f"After writing {len(paths)} frames")
    return paths
