"""Geometry primitives and unit helpers for layout calculations.

All layout coordinates use a top-left origin with y growing downwards,
matching the order in which content is laid out. The renderer flips them
into PDF space.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..exceptions import GeometryError


EMU_PER_POINT = 12700
EMU_PER_INCH = 914400
POINTS_PER_INCH = 72.0


@dataclass(slots=True)
class Size:
    width: float
    height: float


@dataclass(slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, other: "Rect", tolerance: float = 1e-6) -> bool:
        """Check whether ``other`` lies fully inside this rectangle."""
        return (
            other.left >= self.left - tolerance
            and other.top >= self.top - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )


@dataclass(frozen=True, slots=True)
class PageGeometry:
    """Page size and uniform margin, in points."""

    width: float
    height: float
    margin: float

    def __post_init__(self):
        if self.margin < 0:
            raise GeometryError("Margin must not be negative", details=str(self.margin))
        if self.width <= 2 * self.margin or self.height <= 2 * self.margin:
            raise GeometryError(
                "Page leaves no usable area inside the margins",
                details=f"{self.width}x{self.height} with margin {self.margin}",
            )

    @property
    def text_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def usable_height(self) -> float:
        return self.height - 2 * self.margin

    @property
    def bottom_limit(self) -> float:
        """Largest y a block may reach before it spills into the bottom margin."""
        return self.height - self.margin

    @property
    def page_rect(self) -> Rect:
        return Rect(0.0, 0.0, self.width, self.height)

    @property
    def content_rect(self) -> Rect:
        return Rect(self.margin, self.margin, self.text_width, self.usable_height)

    @classmethod
    def parse(cls, page_size: str, margin: float) -> "PageGeometry":
        """Build geometry from a ``WIDTHxHEIGHT`` string (points) or a named size."""
        named = NAMED_PAGE_SIZES.get(page_size.strip().lower())
        if named is not None:
            return cls(named.width, named.height, margin)
        try:
            width_text, height_text = page_size.lower().split("x", 1)
            return cls(float(width_text), float(height_text), margin)
        except ValueError as exc:
            raise GeometryError("Invalid page size", details=page_size) from exc


NAMED_PAGE_SIZES = {
    "a4": Size(595.0, 842.0),
    "a4-landscape": Size(842.0, 595.0),
    "letter": Size(612.0, 792.0),
    "letter-landscape": Size(792.0, 612.0),
}


def emu_to_points(value: Optional[float]) -> float:
    if value is None:
        return 0.0
    return float(value) / EMU_PER_POINT


def points_to_emu(value: float) -> int:
    return int(round(value * EMU_PER_POINT))


def px_to_points(value: Optional[float], dpi: float = 96.0) -> float:
    if value is None:
        return 0.0
    return float(value) * POINTS_PER_INCH / dpi
