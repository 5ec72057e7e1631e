"""Wrappers around the external tools that stitch stills together.

ffmpeg encodes the video formats, ImageMagick's ``convert`` builds GIFs
and ``pdflatex`` compiles the LaTeX animation. Failures are logged and
re-raised as-is; nothing here retries.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time

from frameplot.core.config import CONVERT_BIN, FFMPEG_BIN, PDFLATEX_BIN

logger = logging.getLogger(__name__)


def run_tool(cmd: list[str], cwd: str | None = None) -> subprocess.CompletedProcess:
    """Run an external command to completion.

    Raises:
        FileNotFoundError: The executable is not installed.
        subprocess.CalledProcessError: The command exited non-zero.
    """
    logger.info("running %s", " ".join(cmd))
    t0 = time.perf_counter()
    proc = subprocess.run(cmd, capture_output=True, text=True, cwd=cwd)
    if proc.returncode != 0:
        logger.error(
            "%s failed rc=%s stdout=%s stderr=%s",
            cmd[0],
            proc.returncode,
            proc.stdout,
            proc.stderr,
        )
        raise subprocess.CalledProcessError(
            proc.returncode, cmd, output=proc.stdout, stderr=proc.stderr
        )
    logger.info("%s finished in %.2fs", os.path.basename(cmd[0]), time.perf_counter() - t0)
    return proc


def get_ffmpeg_args(fmt: str, fps: int) -> list[str]:
    """Codec arguments for one output container."""
    if fmt == "mp4":
        return [
            "-c:v",
            "libx264",
            "-pix_fmt",
            "yuv420p",
            # yuv420p needs even dimensions
            "-vf",
            "scale=trunc(iw/2)*2:trunc(ih/2)*2",
            "-g",
            str(int(fps * 2)),
            "-movflags",
            "+faststart",
            "-an",
        ]
    if fmt == "webm":
        return ["-c:v", "libvpx-vp9", "-b:v", "0", "-crf", "32", "-pix_fmt", "yuv420p", "-an"]
    if fmt == "avi":
        return ["-c:v", "mpeg4", "-q:v", "3", "-an"]
    if fmt == "swf":
        return ["-c:v", "flv", "-f", "swf", "-an"]
    raise ValueError(f"no ffmpeg arguments for {fmt!r}")


def encode_video(input_pattern: str, out_path: str, fmt: str, fps: int) -> str:
    """Encode a numbered image sequence (``frame_%06d.png``) with ffmpeg."""
    cmd = [
        FFMPEG_BIN,
        "-hide_banner",
        "-loglevel",
        "warning",
        "-y",
        "-framerate",
        str(fps),
        "-i",
        input_pattern,
        *get_ffmpeg_args(fmt, fps),
        out_path,
    ]
    run_tool(cmd)
    return out_path


def convert_gif(image_paths: list[str], out_path: str, fps: int, loop: int = 0) -> str:
    """Merge stills into a GIF with a fixed per-frame delay.

    ``loop=0`` loops forever.
    """
    delay = max(1, round(100 / fps))  # centiseconds
    cmd = [CONVERT_BIN, "-loop", str(loop), "-delay", str(delay), *image_paths, out_path]
    run_tool(cmd)
    return out_path


def compile_latex(tex_path: str) -> str:
    """Compile ``tex_path`` with pdflatex next to itself and return the pdf path."""
    out_dir = os.path.dirname(os.path.abspath(tex_path))
    cmd = [
        PDFLATEX_BIN,
        "-interaction=nonstopmode",
        "-halt-on-error",
        f"-output-directory={out_dir}",
        os.path.basename(tex_path),
    ]
    run_tool(cmd, cwd=out_dir)
    return os.path.splitext(os.path.abspath(tex_path))[0] + ".pdf"
