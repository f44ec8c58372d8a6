"""
Word-processor (WordprocessingML / DOCX) model builder.

The body is walked in document order so that paragraphs, tables and inline
images keep their original interleaving.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from ..exceptions import EntryNotFoundError, FormatError, UnitParseError
from ..engine.isolation import collect_blocks, isolate
from ..models.blocks import ContentBlock, Image, Paragraph, Row, Run, Table
from .base import PackageModelBuilder
from .namespaces import NS, OFFICE_REL_NS, WORD_DRAWING_NS, WORD_NS, local_name, qn

logger = logging.getLogger(__name__)

DOCUMENT_PART = "word/document.xml"
STYLES_PART = "word/styles.xml"

DEFAULT_FONT_SIZE = 11.0
DEFAULT_IMAGE_EMU = 1270000
TABLE_FONT_SIZE = 10.0
TABLE_ROW_HEIGHT = 22.0

HEADING_FONT_SIZES: Dict[str, float] = {
    "title": 18.0,
    "subtitle": 14.0,
    "heading 1": 14.0,
    "heading 2": 13.0,
    "heading 3": 12.0,
    "normal": 11.0,
}

_STYLE_ID_HEADING = re.compile(r"^heading\s*(\d)$", re.IGNORECASE)
_FALSE_VALUES = ("0", "false", "off")


def style_font_size(style_name: Optional[str]) -> float:
    """Base font size for a paragraph style name; unknown styles use the body size."""
    if not style_name:
        return DEFAULT_FONT_SIZE
    key = style_name.strip().lower()
    match = _STYLE_ID_HEADING.match(key)
    if match:
        key = f"heading {match.group(1)}"
    return HEADING_FONT_SIZES.get(key, DEFAULT_FONT_SIZE)


def is_heading_style(style_name: Optional[str]) -> bool:
    return style_font_size(style_name) != DEFAULT_FONT_SIZE or (style_name or "").strip().lower() == "title"


def _toggle_on(element) -> bool:
    """Evaluate an OOXML on/off property such as ``w:b``."""
    if element is None:
        return False
    return element.get(qn(WORD_NS, "val"), "1").lower() not in _FALSE_VALUES


class DocumentParser(PackageModelBuilder):
    """Builds paragraphs, tables and images from ``word/document.xml``."""

    format_name = "docx"

    def build(self) -> List[ContentBlock]:
        try:
            root = self.package.read_xml(DOCUMENT_PART)
        except EntryNotFoundError as exc:
            raise FormatError("Not a word-processor package", details=f"{DOCUMENT_PART} missing") from exc
        except UnitParseError as exc:
            raise FormatError("Document body cannot be parsed", details=str(exc)) from exc

        body = root.find("w:body", NS)
        if body is None:
            raise FormatError("Document has no body element")

        self.style_names = self._style_names()
        blocks: List[ContentBlock] = []
        self._walk_body(body, blocks)
        logger.info(f"Document body produced {len(blocks)} block(s)")
        return blocks

    def _style_names(self) -> Dict[str, str]:
        """Map style ids (``Heading1``) to display names (``heading 1``)."""
        try:
            root = self.package.read_xml(STYLES_PART)
        except (EntryNotFoundError, UnitParseError) as exc:
            logger.debug(f"Styles unavailable, using style ids: {exc}")
            return {}
        names: Dict[str, str] = {}
        for style in root.iter(qn(WORD_NS, "style")):
            style_id = style.get(qn(WORD_NS, "styleId"))
            name = style.find("w:name", NS)
            if style_id and name is not None and name.get(qn(WORD_NS, "val")):
                names[style_id] = name.get(qn(WORD_NS, "val"))
        return names

    def _walk_body(self, container, blocks: List[ContentBlock]) -> None:
        for index, child in enumerate(container):
            kind = local_name(child.tag)
            if kind == "p":
                blocks.extend(collect_blocks(isolate(f"paragraph {index}", self._paragraph, child)))
            elif kind == "tbl":
                blocks.extend(collect_blocks(isolate(f"table {index}", self._table, child)))
            elif kind == "sdt":
                content = child.find("w:sdtContent", NS)
                if content is not None:
                    self._walk_body(content, blocks)

    def _paragraph_style(self, paragraph) -> str:
        style = paragraph.find("w:pPr/w:pStyle", NS)
        style_id = style.get(qn(WORD_NS, "val")) if style is not None else None
        if not style_id:
            return "Normal"
        return self.style_names.get(style_id, style_id)

    def _paragraph(self, paragraph) -> List[ContentBlock]:
        style_name = self._paragraph_style(paragraph)
        font_size = style_font_size(style_name)
        heading = is_heading_style(style_name)

        blocks: List[ContentBlock] = []
        pending: List[Run] = []

        def flush() -> None:
            nonlocal pending
            if any(run.text for run in pending):
                blocks.append(Paragraph(runs=pending, style_name=style_name, font_size=font_size))
            pending = []

        for run in paragraph.iter(qn(WORD_NS, "r")):
            if self._inside_textbox(run, paragraph):
                continue
            bold = _toggle_on(run.find("w:rPr/w:b", NS))
            text_parts: List[str] = []
            for child in run:
                kind = local_name(child.tag)
                if kind == "t":
                    text_parts.append(child.text or "")
                elif kind == "tab":
                    text_parts.append(" ")
                elif kind in ("br", "cr"):
                    text_parts.append("\n")
                elif kind == "drawing":
                    if text_parts:
                        pending.append(Run(text="".join(text_parts), bold=bold, is_heading=heading))
                        text_parts = []
                    flush()
                    image = self._drawing_image(child)
                    if image is not None:
                        blocks.append(image)
            if text_parts:
                pending.append(Run(text="".join(text_parts), bold=bold, is_heading=heading))

        flush()
        if not blocks:
            # An empty paragraph still occupies its spacing.
            blocks.append(Paragraph(runs=[], style_name=style_name, font_size=font_size))
        return blocks

    @staticmethod
    def _inside_textbox(run, paragraph) -> bool:
        parent = run.getparent()
        while parent is not None and parent is not paragraph:
            if local_name(parent.tag) in ("txbxContent", "drawing"):
                return True
            parent = parent.getparent()
        return False

    def _drawing_image(self, drawing) -> Optional[Image]:
        blip = drawing.find(".//a:blip", NS)
        if blip is None:
            return None
        data = self.relationships.image_bytes(DOCUMENT_PART, blip.get(qn(OFFICE_REL_NS, "embed")))
        if data is None:
            return None

        cx = cy = DEFAULT_IMAGE_EMU
        extent = drawing.find(f".//{qn(WORD_DRAWING_NS, 'extent')}")
        if extent is not None:
            try:
                cx = int(extent.get("cx", cx))
                cy = int(extent.get("cy", cy))
            except ValueError:
                logger.warning("Invalid drawing extent, using default image size")
                cx = cy = DEFAULT_IMAGE_EMU
        return Image(data=data, width_emu=cx, height_emu=cy)

    def _table(self, table) -> List[ContentBlock]:
        rows: List[Row] = []
        for row in table.findall("w:tr", NS):
            values = []
            for cell in row.findall("w:tc", NS):
                paragraphs = [
                    "".join(t.text or "" for t in p.iter(qn(WORD_NS, "t")))
                    for p in cell.iter(qn(WORD_NS, "p"))
                ]
                values.append("\n".join(paragraphs).strip())
            rows.append(Row.from_values(values))
        if not rows:
            return []
        first_row_columns = len(rows[0].cells)
        return [
            Table(
                rows=rows,
                column_sizing="even",
                font_size=TABLE_FONT_SIZE,
                row_height=TABLE_ROW_HEIGHT,
                columns=first_row_columns or None,
            )
        ]
