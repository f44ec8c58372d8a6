"""
Content blocks produced by the format parsers.

Every parser emits an ordered list of these blocks; the order is document
order and the layout engine consumes it without regrouping by type.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple, Union


Color = Tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)
GRAY: Color = (0.5, 0.5, 0.5)
RED: Color = (1.0, 0.0, 0.0)


@dataclass(slots=True)
class Run:
    """A stretch of text sharing the same emphasis."""

    text: str
    bold: bool = False
    is_heading: bool = False


@dataclass(slots=True)
class Paragraph:
    """Flowing text. ``font_size`` overrides the style-derived size when set."""

    runs: List[Run] = field(default_factory=list)
    style_name: str = "Normal"
    font_size: Optional[float] = None

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)

    @property
    def bold(self) -> bool:
        """A paragraph renders bold when every non-blank run is bold or a heading."""
        visible = [run for run in self.runs if run.text.strip()]
        return bool(visible) and all(run.bold or run.is_heading for run in visible)

    @classmethod
    def from_text(cls, text: str, **kwargs) -> "Paragraph":
        return cls(runs=[Run(text=text)], **kwargs)


@dataclass(slots=True)
class Cell:
    text: str = ""


@dataclass(slots=True)
class Row:
    cells: List[Cell] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not any(cell.text for cell in self.cells)

    @classmethod
    def from_values(cls, values: List[str]) -> "Row":
        return cls(cells=[Cell(text=value) for value in values])


ColumnSizing = Literal["even", "content"]


@dataclass(slots=True)
class Table:
    """Grid of plain-text cells.

    ``column_sizing`` selects between evenly divided columns and columns sized
    from a sample of the cell contents.
    """

    rows: List[Row] = field(default_factory=list)
    column_sizing: ColumnSizing = "even"
    font_size: float = 10.0
    row_height: Optional[float] = None
    columns: Optional[int] = None

    @property
    def column_count(self) -> int:
        """Declared column count, widened when a row carries more cells."""
        widest = max((len(row.cells) for row in self.rows), default=0)
        return max(self.columns or 0, widest)


@dataclass(slots=True)
class Image:
    """Embedded raster image with its intended display size in EMU."""

    data: bytes
    width_emu: int
    height_emu: int


@dataclass(slots=True)
class Position:
    """Absolute placement in the source coordinate frame, in points."""

    x: float
    y: float
    width: Optional[float] = None
    height: Optional[float] = None


ShapeKind = Literal["picture", "textbox"]


@dataclass(slots=True)
class Shape:
    """Slide-style shape: a picture or a text box, optionally positioned.

    ``frame_width``/``frame_height`` describe the coordinate frame the
    position refers to (e.g. the slide size) so layout can map it onto a page.
    """

    kind: ShapeKind
    position: Optional[Position] = None
    runs: List[Run] = field(default_factory=list)
    image: Optional[Image] = None
    font_size: float = 14.0
    color: Color = BLACK
    frame_width: Optional[float] = None
    frame_height: Optional[float] = None

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


@dataclass(slots=True)
class PageBreak:
    """Start of a new structural unit (sheet, slide, chapter) on a fresh page."""

    reason: str = ""


@dataclass(slots=True)
class ErrorMarker:
    """Inline replacement for a unit that failed to parse or lay out."""

    message: str


ContentBlock = Union[Paragraph, Table, Image, Shape, PageBreak, ErrorMarker]
