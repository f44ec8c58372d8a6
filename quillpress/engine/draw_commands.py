"""
Positioned draw commands produced by the layout engine.

Coordinates are in points with a top-left origin; the renderer converts them
to PDF space. Commands are final: the renderer does no further layout other
than wrapping text inside a text box.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Tuple, Union

from ..models.blocks import BLACK, Color
from .fonts import BASE_FONT, FontRef
from .geometry import PageGeometry, Rect
from .text_metrics import estimate_text_width

###############################################################################
# Commands
###############################################################################


@dataclass(slots=True)
class DrawText:
    """Single line of text; ``y`` is the baseline."""

    x: float
    y: float
    text: str
    font_size: float
    font: FontRef = BASE_FONT
    bold: bool = False
    color: Color = BLACK

    @property
    def bounds(self) -> Rect:
        return Rect(self.x, self.y - self.font_size, estimate_text_width(self.text, self.font_size), self.font_size)


@dataclass(slots=True)
class DrawTextBox:
    """Text wrapped inside ``rect``; overflowing lines are clipped."""

    rect: Rect
    text: str
    font_size: float
    font: FontRef = BASE_FONT
    bold: bool = False
    color: Color = BLACK

    @property
    def bounds(self) -> Rect:
        return self.rect


@dataclass(slots=True)
class DrawImage:
    """Raster image scaled into ``rect``."""

    rect: Rect
    data: bytes

    @property
    def bounds(self) -> Rect:
        return self.rect


DrawCommand = Union[DrawText, DrawTextBox, DrawImage]


###############################################################################
# Pages
###############################################################################


@dataclass(slots=True)
class PageLayout:
    index: int
    commands: List[DrawCommand] = field(default_factory=list)

    def add(self, command: DrawCommand) -> None:
        self.commands.append(command)


@dataclass(slots=True)
class LayoutResult:
    """Ordered pages of draw commands for one document."""

    geometry: PageGeometry
    pages: List[PageLayout] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def commands(self) -> Iterator[Tuple[int, DrawCommand]]:
        """Yield ``(page_index, command)`` in page order, then command order."""
        for page in self.pages:
            for command in page.commands:
                yield page.index, command
