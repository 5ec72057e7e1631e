"""Showing saved animations.

Display depends on the environment, so it sits behind ``Viewer``; nothing
in the animation or saving code imports this module.
"""

from __future__ import annotations

import html
import logging
import os
import platform
import subprocess
import webbrowser

from frameplot.visuals.anims.state import Animation
from frameplot.visuals.io.savers import save, tempfile_path

logger = logging.getLogger(__name__)


class Viewer:
    """Where markup and files are shown."""

    def show_markup(self, markup: str) -> None:
        raise NotImplementedError

    def open_file(self, path: str) -> None:
        raise NotImplementedError


class SystemViewer(Viewer):
    """Uses the desktop: the web browser for markup, the default app for files.

    A machine without a display only gets a log line.
    """

    def show_markup(self, markup: str) -> None:
        page = tempfile_path(pattern="view", fileext=".html")
        with open(page, "w", encoding="utf-8") as f:
            f.write(f"<!DOCTYPE html>\n<html><body>{markup}</body></html>\n")
        try:
            opened = webbrowser.open(f"file://{page}")
        except webbrowser.Error as e:
            logger.warning("could not open a browser for %s: %s", page, e)
            return
        if not opened:
            logger.warning("no browser available; animation page written to %s", page)

    def open_file(self, path: str) -> None:
        system = platform.system()
        try:
            if system == "Windows":
                os.startfile(path)  # type: ignore[attr-defined]
            elif system == "Darwin":
                subprocess.run(["open", path], check=False)
            else:
                subprocess.run(["xdg-open", path], check=False)
        except OSError as e:
            logger.warning("could not open %s with the default application: %s", path, e)


def _attrs(attrs: dict) -> str:
    parts = []
    for key, value in attrs.items():
        if value is True:
            parts.append(key)
        elif value is not None and value is not False:
            parts.append(f'{key}="{html.escape(str(value))}"')
    return (" " + " ".join(parts)) if parts else ""


def animation_markup(anim: Animation, **attrs) -> str | None:
    """Build an ``<img>`` or ``<video>`` tag for a saved animation.

    Extra keyword arguments become tag attributes (``width``, ``height``...).
    Returns None when the MIME type is unknown or nothing is saved.
    """
    if not anim.saved or anim.mime_type is None or anim.src is None:
        return None
    if anim.mime_type.startswith("video"):
        tag_attrs = _attrs({"autoplay": True, "loop": True, **attrs})
        return f'<video{tag_attrs}><source src="{anim.src}" type="{anim.mime_type}"></video>'
    if anim.mime_type.startswith("image"):
        return f'<img src="{anim.src}"{_attrs(attrs)}>'
    return None


def show(anim: Animation, format: str = "gif", viewer: Viewer | None = None, **attrs) -> str | None:
    """Display an animation, saving it to a temporary file first if needed.

    Args:
        anim: Animation handle.
        format: Saver used when ``anim`` has not been saved yet.
        viewer: Display surface; defaults to ``SystemViewer``.
        **attrs: Attributes for the ``<img>``/``<video>`` tag.

    Returns:
        The markup shown, or None if the file was opened externally.
    """
    viewer = viewer or SystemViewer()
    if not anim.saved:
        anim = save(anim, saver=format)
    markup = animation_markup(anim, **attrs)
    if markup is None:
        logger.info("opening animation file stored at %s", anim.filename)
        viewer.open_file(anim.filename)
        return None
    viewer.show_markup(markup)
    return markup
