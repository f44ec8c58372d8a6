"""
Conversion configuration.

Options are plain dataclasses; :meth:`ConversionOptions.for_format` returns
the defaults each input format is rendered with.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Dict, Literal, Optional, Tuple

from .engine.geometry import PageGeometry
from .exceptions import UnsupportedFormatError

Quality = Literal["low", "medium", "high"]

SUPPORTED_FORMATS: Tuple[str, ...] = ("xlsx", "pptx", "docx", "rtf", "epub")

FONT_ENV_VAR = "QUILLPRESS_FONT"

FORMAT_ALIASES: Dict[str, str] = {
    "xlsm": "xlsx",
    "excel": "xlsx",
    "pptm": "pptx",
    "powerpoint": "pptx",
    "docm": "docx",
    "word": "docx",
}


@dataclass(frozen=True, slots=True)
class LayoutOptions:
    """Tunables of the layout engine."""

    line_spacing: float = 1.4
    paragraph_spacing: float = 0.5
    default_font_size: float = 11.0
    cell_padding: float = 4.0
    min_column_width: float = 40.0
    max_column_width: float = 200.0
    column_sample_rows: int = 50
    image_gap: float = 5.0
    image_reserve: float = 10.0
    table_spacing: float = 10.0
    error_font_size: float = 10.0


@dataclass(frozen=True, slots=True)
class ImageQuality:
    max_dimension: int
    use_jpeg: bool
    jpeg_quality: int


QUALITY_PRESETS: Dict[str, ImageQuality] = {
    "low": ImageQuality(max_dimension=1500, use_jpeg=True, jpeg_quality=80),
    "medium": ImageQuality(max_dimension=2000, use_jpeg=True, jpeg_quality=90),
    "high": ImageQuality(max_dimension=2500, use_jpeg=False, jpeg_quality=95),
}


@dataclass(frozen=True, slots=True)
class ConversionOptions:
    """Everything one conversion call needs besides the input bytes."""

    geometry: PageGeometry
    layout: LayoutOptions = field(default_factory=LayoutOptions)
    font_path: Optional[Path] = None
    quality: Quality = "medium"
    sheet_titles: bool = False
    slide_numbers: bool = True
    title: Optional[str] = None
    author: Optional[str] = None

    @property
    def image_quality(self) -> ImageQuality:
        return QUALITY_PRESETS.get(self.quality, QUALITY_PRESETS["medium"])

    def with_overrides(self, **changes) -> "ConversionOptions":
        """Return a copy with the given non-None fields replaced."""
        return replace(self, **{key: value for key, value in changes.items() if value is not None})

    @classmethod
    def for_format(cls, fmt: str, **overrides) -> "ConversionOptions":
        """Per-format defaults: landscape grids for sheets and slides, portrait text pages."""
        fmt = normalize_format(fmt)
        options = cls(geometry=DEFAULT_GEOMETRIES[fmt], layout=DEFAULT_LAYOUTS.get(fmt, LayoutOptions()))
        env_font = os.environ.get(FONT_ENV_VAR)
        if env_font and overrides.get("font_path") is None:
            overrides["font_path"] = Path(env_font)
        return options.with_overrides(**overrides)


DEFAULT_GEOMETRIES: Dict[str, PageGeometry] = {
    "xlsx": PageGeometry(width=842.0, height=595.0, margin=40.0),
    "pptx": PageGeometry(width=842.0, height=595.0, margin=40.0),
    "docx": PageGeometry(width=595.0, height=842.0, margin=72.0),
    "rtf": PageGeometry(width=595.0, height=842.0, margin=72.0),
    "epub": PageGeometry(width=595.0, height=842.0, margin=30.0),
}

DEFAULT_LAYOUTS: Dict[str, LayoutOptions] = {
    "rtf": LayoutOptions(line_spacing=1.5, paragraph_spacing=0.0),
    "pptx": LayoutOptions(line_spacing=1.5, paragraph_spacing=0.0, default_font_size=12.0),
}


def normalize_format(fmt: str) -> str:
    """Map an extension or alias (``.XLSX``, ``word``) onto a supported format name."""
    key = (fmt or "").strip().lower().lstrip(".")
    key = FORMAT_ALIASES.get(key, key)
    if key not in SUPPORTED_FORMATS:
        raise UnsupportedFormatError(f"Unsupported input format: {fmt!r}", details=", ".join(SUPPORTED_FORMATS))
    return key
