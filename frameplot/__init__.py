"""frameplot: animate matplotlib plots frame by frame."""

__version__ = "0.1.0"
