"""Visuals package public API.
This module re-exports key functions and constants from submodules
to provide a simplified interface.
"""

from .anims.animate import animate, frame_values, snapshot
from .anims.state import Animation
from .core.constants import dpi, figsize, fps, loop
from .io.display import SystemViewer, Viewer, animation_markup, show
from .io.savers import MIME_TYPES, SAVERS, SaverName, animation_saver, save
from .plots.build import BuiltPlot, Layer, Plot, build_plot
from .plots.draw import draw_built

__all__ = [
    "dpi",
    "figsize",
    "fps",
    "loop",
    "Animation",
    "BuiltPlot",
    "Layer",
    "Plot",
    "build_plot",
    "draw_built",
    "animate",
    "frame_values",
    "snapshot",
    "save",
    "animation_saver",
    "SaverName",
    "SAVERS",
    "MIME_TYPES",
    "show",
    "animation_markup",
    "Viewer",
    "SystemViewer",
]
