"""Exceptions raised by frameplot.

All of them are fatal to the current call; nothing here retries.
"""


class FrameplotError(Exception):
    """Base class for frameplot errors."""


class NoFrameFieldError(FrameplotError):
    """No layer of the built plot maps a ``frame`` field."""

    def __init__(self, message: str = "No frame aesthetic found; cannot create animation"):
        super().__init__(message)


class UnknownSaverError(FrameplotError):
    """The requested saver name or file extension is not registered."""

    def __init__(self, saver: str):
        self.saver = saver
        super().__init__(f"Don't know how to save animation of type {saver!r}")


class OutOfRangeError(FrameplotError):
    """A fixed row-range table reaches past the end of the input table."""

    def __init__(self, required: int, available: int, message: str | None = None):
        self.required = required
        self.available = available
        super().__init__(
            message or f"month table needs {required} rows but the input has {available}"
        )


class InvalidFrameValueError(FrameplotError):
    """Frame values cannot be ordered, or a cumulative marker is not boolean."""
