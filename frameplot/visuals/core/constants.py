"""Common visualization constants used across modules."""

from frameplot.core.config import OUTPUT_DPI

# Animation/layout defaults
dpi: int = OUTPUT_DPI
figsize: tuple[float, float] = (8, 6)
fps: int = 1
loop: int = 0
facecolor: str = "#FFFFFF"

# Marker area range for the size aesthetic, in points^2
size_range: tuple[float, float] = (20.0, 300.0)
default_size: float = 36.0
default_colour: str = "#333333"
