"""Animation handle returned by ``animate``.

Holds the ordered frame snapshots and, once saved, where the output
went and how to embed it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from frameplot.visuals.plots.build import BuiltPlot


@dataclass
class Animation:
    """Frame snapshots of one plot plus save state.

    Args:
        plots: One ``BuiltPlot`` per frame value, in frame order.
        frames: Sorted distinct frame values.
        options: Saver options remembered for a later ``save``/``show``.
    """

    plots: list[BuiltPlot]
    frames: list[Any]
    options: dict[str, Any] = field(default_factory=dict)
    saved: bool = False
    filename: str | None = None
    src: str | None = None
    mime_type: str | None = None

    def __len__(self) -> int:
        return len(self.plots)
