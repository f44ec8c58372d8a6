"""Content model shared by every format parser."""

from .blocks import (
    BLACK,
    GRAY,
    RED,
    Cell,
    ContentBlock,
    ErrorMarker,
    Image,
    PageBreak,
    Paragraph,
    Position,
    Row,
    Run,
    Shape,
    Table,
)

__all__ = [
    "BLACK",
    "GRAY",
    "RED",
    "Cell",
    "ContentBlock",
    "ErrorMarker",
    "Image",
    "PageBreak",
    "Paragraph",
    "Position",
    "Row",
    "Run",
    "Shape",
    "Table",
]
