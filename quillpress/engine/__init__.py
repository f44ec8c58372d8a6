"""
Layout engine package: geometry, fonts, text measurement and pagination.

:mod:`quillpress.engine.layout_engine` and the draw commands are imported
from their modules directly; this package only re-exports the primitives
that configuration depends on.
"""

from .geometry import EMU_PER_POINT, PageGeometry, Rect, Size, emu_to_points, points_to_emu, px_to_points

__all__ = [
    "EMU_PER_POINT",
    "PageGeometry",
    "Rect",
    "Size",
    "emu_to_points",
    "points_to_emu",
    "px_to_points",
]
