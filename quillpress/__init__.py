"""
quillpress - paginated PDF output for office documents.

Spreadsheets (XLSX), presentations (PPTX), word-processor documents (DOCX),
rich text (RTF) and EPUB books are parsed into a common block model, laid
out on fixed-size pages and rendered with reportlab.

Main Components:
- parser: per-format model builders over a shared zip package reader
- engine: geometry, text measurement, fonts and the layout engine
- renderers: reportlab PDF output
- api: one-call conversion functions
- worker: message-driven job handling
"""

from .version import __version__, __version_info__

from .exceptions import (
    QuillpressError,
    FatalConversionError,
    CorruptArchiveError,
    EntryNotFoundError,
    FormatError,
    UnsupportedFormatError,
    GeometryError,
    UnitParseError,
    ResourceResolutionError,
    FontUnavailable,
    LayoutError,
    RenderingError,
)

from .config import ConversionOptions, LayoutOptions
from .engine.geometry import PageGeometry

from .api import (
    build_blocks,
    convert,
    convert_docx,
    convert_epub,
    convert_file,
    convert_pptx,
    convert_rtf,
    convert_xlsx,
    detect_format,
    document_info,
    layout_document,
)

__all__ = [
    "__version__",
    "__version_info__",
    "QuillpressError",
    "FatalConversionError",
    "CorruptArchiveError",
    "EntryNotFoundError",
    "FormatError",
    "UnsupportedFormatError",
    "GeometryError",
    "UnitParseError",
    "ResourceResolutionError",
    "FontUnavailable",
    "LayoutError",
    "RenderingError",
    "ConversionOptions",
    "LayoutOptions",
    "PageGeometry",
    "build_blocks",
    "convert",
    "convert_docx",
    "convert_epub",
    "convert_file",
    "convert_pptx",
    "convert_rtf",
    "convert_xlsx",
    "detect_format",
    "document_info",
    "layout_document",
]
