"""
Public conversion API.

    >>> from quillpress import convert_file
    >>> convert_file("report.xlsx")          # writes report.pdf

``convert`` runs the whole pipeline on in-memory bytes: the format's model
builder produces content blocks, the layout engine paginates them and the
reportlab renderer writes the PDF. ``build_blocks`` and ``layout_document``
expose the intermediate stages.
"""

from __future__ import annotations

import logging
import zipfile
from collections import Counter
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .config import ConversionOptions, Quality, normalize_format
from .engine.draw_commands import LayoutResult
from .engine.fonts import FontRef, resolve_font
from .engine.geometry import PageGeometry
from .engine.layout_engine import LayoutEngine
from .exceptions import UnsupportedFormatError
from .media.image_processing import prepare_image
from .models.blocks import ContentBlock, Image, PageBreak, Shape
from .parser import PACKAGE_BUILDERS, PackageReader, RTFParser, SharedStringTable
from .renderers.pdf_renderer import PDFRenderer

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Marker parts that identify a zip container's format when no name is given.
_PACKAGE_MARKERS = (
    ("xl/workbook.xml", "xlsx"),
    ("ppt/presentation.xml", "pptx"),
    ("word/document.xml", "docx"),
    ("META-INF/container.xml", "epub"),
)


def detect_format(name: Optional[str] = None, data: Optional[bytes] = None) -> str:
    """
    Determine the input format from a file name, falling back to the content.

    Raises:
        UnsupportedFormatError: neither the extension nor the bytes are recognized
    """
    if name and "." in name:
        try:
            return normalize_format(Path(name).suffix)
        except UnsupportedFormatError:
            if data is None:
                raise
    if data:
        if data.lstrip()[:5] == b"{\\rtf":
            return "rtf"
        if zipfile.is_zipfile(BytesIO(data)):
            with zipfile.ZipFile(BytesIO(data)) as archive:
                names = set(archive.namelist())
            for marker, fmt in _PACKAGE_MARKERS:
                if marker in names:
                    return fmt
    raise UnsupportedFormatError("Cannot determine input format", details=name or "<bytes>")


def _resolve_options(fmt: str, options: Optional[ConversionOptions], **overrides) -> ConversionOptions:
    base = options or ConversionOptions.for_format(fmt)
    return base.with_overrides(**overrides)


def _build(data: bytes, fmt: str, options: ConversionOptions) -> Tuple[List[ContentBlock], Optional[str]]:
    if fmt == "rtf":
        return RTFParser(data, options).build(), None

    with PackageReader.open(data) as package:
        shared_strings = SharedStringTable.build(package) if fmt == "xlsx" else None
        builder = PACKAGE_BUILDERS[fmt](package, shared_strings=shared_strings, options=options)
        blocks = builder.build()
        return blocks, getattr(builder, "title", None)


def build_blocks(data: bytes, fmt: str, options: Optional[ConversionOptions] = None) -> List[ContentBlock]:
    """Parse ``data`` into the ordered content blocks of format ``fmt``."""
    fmt = normalize_format(fmt)
    blocks, _ = _build(data, fmt, _resolve_options(fmt, options))
    return blocks


def prepare_images(blocks: List[ContentBlock], options: ConversionOptions) -> None:
    """Downscale and re-encode every embedded image for the configured quality."""
    quality = options.image_quality
    for block in blocks:
        image = block if isinstance(block, Image) else block.image if isinstance(block, Shape) else None
        if image is not None:
            image.data = prepare_image(image.data, quality)


def layout_document(
    blocks: List[ContentBlock],
    options: ConversionOptions,
    font: Optional[FontRef] = None,
) -> LayoutResult:
    """Paginate content blocks into draw commands."""
    engine = LayoutEngine(options.geometry, font or resolve_font(options.font_path), options.layout)
    return engine.layout(blocks)


def convert(
    data: bytes,
    fmt: str,
    *,
    geometry: Optional[PageGeometry] = None,
    font_path: Optional[PathLike] = None,
    quality: Optional[Quality] = None,
    options: Optional[ConversionOptions] = None,
) -> bytes:
    """
    Convert a document held in memory to PDF bytes.

    Args:
        data: Raw input file bytes
        fmt: Input format or extension (``xlsx``, ``.docx``, ``word`` ...)
        geometry: Page size and margin; defaults depend on the format
        font_path: TrueType file used for all text instead of Helvetica
        quality: Image quality preset (``low``, ``medium``, ``high``)
        options: Full option set; the keyword arguments above override it

    Returns:
        The PDF document

    Raises:
        CorruptArchiveError: the input is not a readable container
        FormatError: the container does not hold a document of this format
        UnsupportedFormatError: no builder exists for ``fmt``
    """
    fmt = normalize_format(fmt)
    opts = _resolve_options(
        fmt,
        options,
        geometry=geometry,
        font_path=Path(font_path) if font_path else None,
        quality=quality,
    )
    font = resolve_font(opts.font_path)

    blocks, document_title = _build(data, fmt, opts)
    logger.debug(f"{fmt}: {len(blocks)} content block(s)")
    prepare_images(blocks, opts)

    layout = layout_document(blocks, opts, font)
    renderer = PDFRenderer(opts.geometry, font, title=opts.title or document_title, author=opts.author)
    pdf = renderer.render(layout)
    logger.info(f"Converted {fmt} input ({len(data)} bytes) to {layout.page_count} page(s)")
    return pdf


def convert_xlsx(data: bytes, **kwargs) -> bytes:
    return convert(data, "xlsx", **kwargs)


def convert_pptx(data: bytes, **kwargs) -> bytes:
    return convert(data, "pptx", **kwargs)


def convert_docx(data: bytes, **kwargs) -> bytes:
    return convert(data, "docx", **kwargs)


def convert_rtf(data: bytes, **kwargs) -> bytes:
    return convert(data, "rtf", **kwargs)


def convert_epub(data: bytes, **kwargs) -> bytes:
    return convert(data, "epub", **kwargs)


def convert_file(
    input_path: PathLike,
    output_path: Optional[PathLike] = None,
    fmt: Optional[str] = None,
    **kwargs,
) -> Path:
    """
    Convert a file on disk; the output defaults to the input name with ``.pdf``.

    Returns:
        Path of the written PDF
    """
    source = Path(input_path)
    data = source.read_bytes()
    fmt = normalize_format(fmt) if fmt else detect_format(source.name, data)
    target = Path(output_path) if output_path else source.with_suffix(".pdf")
    target.write_bytes(convert(data, fmt, **kwargs))
    return target


def document_info(data: bytes, fmt: str, options: Optional[ConversionOptions] = None) -> Dict[str, Any]:
    """Summarize a document: unit count, block kinds and the resulting page count."""
    fmt = normalize_format(fmt)
    opts = _resolve_options(fmt, options)
    blocks, title = _build(data, fmt, opts)
    layout = layout_document(blocks, opts)
    kinds = Counter(type(block).__name__ for block in blocks)
    return {
        "format": fmt,
        "title": title,
        "units": (kinds.get(PageBreak.__name__, 0) + 1) if blocks else 0,
        "blocks": dict(sorted(kinds.items())),
        "pages": layout.page_count,
    }
