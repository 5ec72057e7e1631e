"""Saving animations: saver registry, output paths and renderers.

Each saver turns the ordered frame snapshots into one artifact. Stills are
drawn with matplotlib and stitched by an external tool (ImageMagick for
GIF, ffmpeg for video, pdflatex for PDF); HTML and LaTeX sources are
written in-process.
"""

from __future__ import annotations

import base64
import logging
import os
import tempfile
import uuid
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Callable

from frameplot.core.config import TEMP_DIR
from frameplot.core.errors import UnknownSaverError
from frameplot.services.encoding import compile_latex, convert_gif, encode_video
from frameplot.services.system import cleanup_old_files, ensure_temp_dir, log_mem
from frameplot.visuals.anims.state import Animation
from frameplot.visuals.core import constants
from frameplot.visuals.io.frames import FRAME_EXT, FRAME_PREFIX, iter_frames_png, write_frames
from frameplot.visuals.plots.build import BuiltPlot

logger = logging.getLogger(__name__)


class SaverName(str, Enum):
    GIF = "gif"
    MP4 = "mp4"
    WEBM = "webm"
    AVI = "avi"
    HTML = "html"
    TEX = "tex"
    PDF = "pdf"
    SWF = "swf"


# Formats that can be embedded inline once saved
MIME_TYPES: dict[SaverName, str] = {
    SaverName.GIF: "image/gif",
    SaverName.MP4: "video/mp4",
    SaverName.WEBM: "video/webm",
    SaverName.AVI: "video/avi",
}

CUSTOM = "custom"


@dataclass(frozen=True)
class Saver:
    name: str
    render: Callable[..., str]
    mime_type: str | None = None


def _frame_options(options: dict) -> dict:
    return {"figsize": options.get("figsize"), "dpi": options.get("dpi")}


def save_gif(snapshots: list[BuiltPlot], path: str, fps: int, loop: int, **options) -> str:
    with tempfile.TemporaryDirectory(dir=ensure_temp_dir(TEMP_DIR)) as workdir:
        paths = write_frames(snapshots, workdir, **_frame_options(options))
        return convert_gif(paths, path, fps=fps, loop=loop)


def save_video(
    snapshots: list[BuiltPlot], path: str, fps: int, loop: int, fmt: str = "mp4", **options
) -> str:
    """Encode stills with ffmpeg; ``loop`` has no meaning for video containers."""
    with tempfile.TemporaryDirectory(dir=ensure_temp_dir(TEMP_DIR)) as workdir:
        write_frames(snapshots, workdir, **_frame_options(options))
        pattern = os.path.join(workdir, f"{FRAME_PREFIX}%06d{FRAME_EXT}")
        return encode_video(pattern, path, fmt=fmt, fps=fps)


_HTML_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
  body {{ font-family: sans-serif; text-align: center; }}
  #frame {{ max-width: 100%; }}
</style>
</head>
<body>
<img id="frame" src="{first}" alt="animation frame">
<div>
  <button id="prev">&lsaquo;</button>
  <button id="play">pause</button>
  <button id="next">&rsaquo;</button>
  <span id="label"></span>
</div>
<script>
var frames = [{frames}];
var labels = [{labels}];
var interval = {interval};
var loops = {loop};
var i = 0, done = 0, timer = null;
var img = document.getElementById("frame");
var label = document.getElementById("label");
function show(k) {{ i = k; img.src = frames[i]; label.textContent = labels[i]; }}
function step() {{
  if (i + 1 < frames.length) {{ show(i + 1); return; }}
  done += 1;
  if (loops === 0 || done < loops) {{ show(0); }} else {{ stop(); }}
}}
function play() {{ timer = setInterval(step, interval); document.getElementById("play").textContent = "pause"; }}
function stop() {{ clearInterval(timer); timer = null; document.getElementById("play").textContent = "play"; }}
document.getElementById("play").onclick = function () {{ timer ? stop() : play(); }};
document.getElementById("prev").onclick = function () {{ stop(); show((i + frames.length - 1) % frames.length); }};
document.getElementById("next").onclick = function () {{ stop(); show((i + 1) % frames.length); }};
show(0);
play();
</script>
</body>
</html>
"""


def save_html(snapshots: list[BuiltPlot], path: str, fps: int, loop: int, **options) -> str:
    uris = [
        "data:image/png;base64," + base64.b64encode(png).decode("utf-8")
        for png in iter_frames_png(snapshots, **_frame_options(options))
    ]
    labels = [str(s.labels.get("title") or "") for s in snapshots]
    html = _HTML_TEMPLATE.format(
        title=options.get("title", "animation"),
        first=uris[0] if uris else "",
        frames=",".join(f'"{u}"' for u in uris),
        labels=",".join('"' + lbl.replace("\\", "\\\\").replace('"', '\\"') + '"' for lbl in labels),
        interval=int(1000 / fps),
        loop=int(loop),
    )
    with open(path, "w", encoding="utf-8") as f:
        f.write(html)
    return path


_TEX_TEMPLATE = r"""\documentclass{{article}}
\usepackage{{graphicx}}
\usepackage{{animate}}
\begin{{document}}
\begin{{center}}
\animategraphics[controls,autoplay{loop},width=\linewidth]{{{fps}}}{{{prefix}}}{{{first}}}{{{last}}}
\end{{center}}
\end{{document}}
"""


def save_tex(snapshots: list[BuiltPlot], path: str, fps: int, loop: int, **options) -> str:
    """Write a LaTeX document animating stills stored beside it."""
    stem = os.path.splitext(os.path.basename(path))[0]
    frame_dir = os.path.join(os.path.dirname(os.path.abspath(path)), f"{stem}_frames")
    paths = write_frames(snapshots, frame_dir, **_frame_options(options))
    tex = _TEX_TEMPLATE.format(
        loop=",loop" if loop == 0 else "",
        fps=fps,
        prefix=f"{stem}_frames/{FRAME_PREFIX}",
        first=f"{1:06d}",
        last=f"{len(paths):06d}",
    )
    with open(path, "w", encoding="utf-8") as f:
        f.write(tex)
    return path


def save_pdf(snapshots: list[BuiltPlot], path: str, fps: int, loop: int, **options) -> str:
    tex_path = os.path.splitext(path)[0] + ".tex"
    save_tex(snapshots, tex_path, fps, loop, **options)
    return compile_latex(tex_path)


SAVERS: dict[SaverName, Callable[..., str]] = {
    SaverName.GIF: save_gif,
    SaverName.MP4: partial(save_video, fmt="mp4"),
    SaverName.WEBM: partial(save_video, fmt="webm"),
    SaverName.AVI: partial(save_video, fmt="avi"),
    SaverName.HTML: save_html,
    SaverName.TEX: save_tex,
    SaverName.PDF: save_pdf,
    SaverName.SWF: partial(save_video, fmt="swf"),
}


def _file_ext(filename: str) -> str:
    base = os.path.basename(filename)
    if "." not in base.lstrip("."):
        return ""
    return base.rsplit(".", 1)[-1].lower()


def animation_saver(
    saver: str | Callable | None, filename: str, mime_type: str | None = None
) -> Saver:
    """Resolve a saver from a name, a callable, or the filename extension.

    Args:
        saver: Saver name ("gif", "mp4", ...), a render callable, or None.
        filename: Output file; its extension names the saver when ``saver`` is None.
        mime_type: MIME type for a callable saver. Without it the output can
            be saved but not embedded inline.

    Raises:
        UnknownSaverError: The name is not a registered saver.
    """
    if callable(saver):
        return Saver(name=CUSTOM, render=saver, mime_type=mime_type)
    key = saver if saver is not None else _file_ext(filename)
    try:
        name = SaverName(str(getattr(key, "value", key)).lower())
    except ValueError:
        raise UnknownSaverError(str(key)) from None
    return Saver(name=name.value, render=SAVERS[name], mime_type=MIME_TYPES.get(name))


def tempfile_path(pattern: str = "file", fileext: str = "", temp_dir: str | None = None) -> str:
    """Return a fresh path inside frameplot's private temp directory.

    Paths live under ``TEMP_DIR``, never directly in the system temp dir.
    Files named with the same ``pattern`` that are older than a day are
    deleted first, so a temporary animation is only kept for a day.
    """
    temp_dir = temp_dir or TEMP_DIR
    ensure_temp_dir(temp_dir)
    cleanup_old_files(temp_dir, prefix=pattern)
    return os.path.join(temp_dir, f"{pattern}{uuid.uuid4().hex}{fileext}")


def data_uri(path: str, mime_type: str) -> str:
    with open(path, "rb") as f:
        payload = base64.b64encode(f.read()).decode("utf-8")
    return f"data:{mime_type};base64,{payload}"


def save(
    anim: Animation,
    filename: str | None = None,
    saver: str | Callable | None = None,
    mime_type: str | None = None,
    **options,
) -> Animation:
    """Render an animation to a file.

    Args:
        anim: Result of ``animate``.
        filename: Output path. A temporary file is used when omitted, with the
            saver's extension (GIF by default).
        saver: Saver name or render callable; inferred from ``filename`` if None.
        mime_type: MIME type for a callable ``saver``.
        **options: Merged over the options stored on ``anim``; ``fps`` and
            ``loop`` go to every renderer, the rest (``dpi``, ``figsize``, ...)
            are passed through.

    Returns:
        The same handle, marked saved. When the format can be embedded,
        ``src`` holds a base64 data URI of the file.

    Raises:
        UnknownSaverError: Before anything is written.
        ValueError: ``fps`` is not positive, before anything is written.
    """
    opts = {**anim.options, **options}
    fps = opts.pop("fps", constants.fps)
    loop = opts.pop("loop", constants.loop)
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps!r}")

    if filename is None:
        if saver is None or callable(saver):
            ext = SaverName.GIF.value
        else:
            ext = str(getattr(saver, "value", saver)).lower()
        s = animation_saver(saver, f"file.{ext}", mime_type)
        filename = tempfile_path(fileext=f".{ext}")
    else:
        s = animation_saver(saver, filename, mime_type)
        filename = os.path.abspath(filename)

    logger.info("saving %d frames with %s saver to %s", len(anim.plots), s.name, filename)
    s.render(anim.plots, filename, fps=fps, loop=loop, **opts)
    log_mem(f"After {s.name} save")

    anim.filename = filename
    if s.mime_type is not None:
        anim.src = data_uri(filename, s.mime_type)
        anim.mime_type = s.mime_type
    anim.saved = True
    return anim
