"""
EPUB model builder.

``META-INF/container.xml`` names the OPF package document; its spine lists
the XHTML content documents in reading order. Each content document is one
unit and starts on a new page.
"""

from __future__ import annotations

import logging
import posixpath
import re
from typing import Dict, List, Optional
from urllib.parse import unquote

import lxml.html

from ..exceptions import EntryNotFoundError, FormatError, UnitParseError
from ..media.image_processing import image_size_emu
from ..models.blocks import ContentBlock, Image, Paragraph, Row, Run, Table
from .base import PackageModelBuilder
from .namespaces import NS, local_name

logger = logging.getLogger(__name__)

CONTAINER_PART = "META-INF/container.xml"

HEADING_SIZES: Dict[str, float] = {
    "h1": 20.0,
    "h2": 17.0,
    "h3": 15.0,
    "h4": 13.0,
    "h5": 12.0,
    "h6": 11.0,
}
BODY_FONT_SIZE = 11.0
TABLE_FONT_SIZE = 10.0
DEFAULT_IMAGE_EMU = 1270000
EMU_PER_PIXEL = 9525

TEXT_BLOCKS = frozenset({"p", "li", "blockquote", "dd", "dt", "figcaption", "caption", "address"})
CONTAINERS = frozenset(
    {"body", "div", "section", "article", "main", "header", "footer", "aside", "nav", "figure", "ul", "ol", "dl"}
)
SKIPPED = frozenset({"head", "script", "style", "noscript", "template"})
CONTENT_TYPES = ("application/xhtml+xml", "text/html")

_WHITESPACE = re.compile(r"[ \t\r\n\f\v]+")


def _inline_text(element) -> str:
    """Text of an element with collapsed whitespace; ``<br>`` becomes a line break."""
    parts: List[str] = []

    def walk(node) -> None:
        if node.text:
            parts.append(_WHITESPACE.sub(" ", node.text))
        for child in node:
            name = local_name(child.tag)
            if name == "br":
                parts.append("\n")
            elif name and name not in SKIPPED:
                walk(child)
            if child.tail:
                parts.append(_WHITESPACE.sub(" ", child.tail))

    walk(element)
    lines = "".join(parts).split("\n")
    return "\n".join(line.strip() for line in lines).strip()


def _has_block_children(element) -> bool:
    for child in element:
        name = local_name(child.tag)
        if name in TEXT_BLOCKS or name in CONTAINERS or name in HEADING_SIZES or name in ("table", "pre", "img"):
            return True
    return False


def _px(value: Optional[str]) -> Optional[float]:
    if not value:
        return None
    match = re.match(r"^\s*(\d+(?:\.\d+)?)\s*(px)?\s*$", value)
    return float(match.group(1)) if match else None


class EpubParser(PackageModelBuilder):
    """Builds blocks from the spine documents of an EPUB container."""

    format_name = "epub"

    def build(self) -> List[ContentBlock]:
        opf_path = self._package_document_path()
        try:
            opf = self.package.read_xml(opf_path)
        except (EntryNotFoundError, UnitParseError) as exc:
            raise FormatError("EPUB package document unreadable", details=str(exc)) from exc

        self.title = self._metadata_title(opf)
        base = posixpath.dirname(opf_path)
        manifest: Dict[str, tuple] = {}
        for item in opf.iter("{%s}item" % NS["opf"]):
            href = item.get("href")
            if item.get("id") and href:
                manifest[item.get("id")] = (posixpath.normpath(posixpath.join(base, unquote(href))), item.get("media-type", ""))

        units = []
        for itemref in opf.iter("{%s}itemref" % NS["opf"]):
            entry = manifest.get(itemref.get("idref"))
            if entry is None:
                logger.warning(f"Spine references unknown item {itemref.get('idref')!r}")
                continue
            part_name, media_type = entry
            if media_type and media_type not in CONTENT_TYPES:
                logger.debug(f"Skipping non-document spine item {part_name} ({media_type})")
                continue
            units.append((f"Chapter {len(units) + 1}", part_name))

        logger.info(f"EPUB spine has {len(units)} document(s)")
        return self.build_units(units, self._build_document)

    def _package_document_path(self) -> str:
        try:
            container = self.package.read_xml(CONTAINER_PART)
        except (EntryNotFoundError, UnitParseError) as exc:
            raise FormatError("Not an EPUB container", details=str(exc)) from exc
        rootfile = container.find(".//ocf:rootfile", NS)
        if rootfile is None or not rootfile.get("full-path"):
            raise FormatError("EPUB container names no package document")
        return rootfile.get("full-path")

    @staticmethod
    def _metadata_title(opf) -> Optional[str]:
        for element in opf.iter():
            if local_name(element.tag) == "title" and element.text and element.text.strip():
                return element.text.strip()
        return None

    def _build_document(self, index: int, part_name: str) -> List[ContentBlock]:
        data = self.package.read(part_name)
        try:
            root = self.package.read_xml(part_name)
        except UnitParseError:
            logger.debug(f"{part_name} is not well-formed XML, parsing as HTML")
            root = lxml.html.document_fromstring(data)

        body = next((el for el in root.iter() if local_name(el.tag) == "body"), None)
        blocks: List[ContentBlock] = []
        if body is not None:
            self._walk(body, part_name, blocks)
        return blocks

    def _walk(self, container, part_name: str, blocks: List[ContentBlock]) -> None:
        for child in container:
            name = local_name(child.tag).lower()
            if not name or name in SKIPPED:
                continue
            if name in HEADING_SIZES:
                text = _inline_text(child)
                if text:
                    blocks.append(
                        Paragraph(
                            runs=[Run(text=text, is_heading=True)],
                            style_name=name.upper(),
                            font_size=HEADING_SIZES[name],
                        )
                    )
            elif name == "pre":
                text = "".join(child.itertext()).strip("\n")
                if text.strip():
                    blocks.append(Paragraph.from_text(text, style_name="Preformatted", font_size=BODY_FONT_SIZE))
            elif name == "img":
                image = self._image(child, part_name)
                if image is not None:
                    blocks.append(image)
            elif name == "table":
                table = self._table(child)
                if table is not None:
                    blocks.append(table)
            elif name in CONTAINERS and _has_block_children(child):
                self._walk(child, part_name, blocks)
            else:
                self._text_block(child, part_name, blocks)

    def _text_block(self, element, part_name: str, blocks: List[ContentBlock]) -> None:
        text = _inline_text(element)
        if text:
            blocks.append(Paragraph.from_text(text, font_size=BODY_FONT_SIZE))
        for img in element.iter():
            if local_name(img.tag).lower() == "img":
                image = self._image(img, part_name)
                if image is not None:
                    blocks.append(image)

    def _image(self, element, part_name: str) -> Optional[Image]:
        src = element.get("src")
        if not src or src.startswith(("http:", "https:", "data:")):
            return None
        target = posixpath.normpath(posixpath.join(posixpath.dirname(part_name), unquote(src.split("#", 1)[0])))
        data = self.package.read_if_exists(target)
        if data is None:
            logger.warning(f"Image {target} referenced from {part_name} is missing")
            return None

        size = image_size_emu(data)
        width_emu, height_emu = size if size else (DEFAULT_IMAGE_EMU, DEFAULT_IMAGE_EMU)
        width_px, height_px = _px(element.get("width")), _px(element.get("height"))
        if width_px and height_px:
            width_emu, height_emu = int(width_px * EMU_PER_PIXEL), int(height_px * EMU_PER_PIXEL)
        return Image(data=data, width_emu=width_emu, height_emu=height_emu)

    def _table(self, element) -> Optional[Table]:
        rows: List[Row] = []
        for row in element.iter():
            if local_name(row.tag).lower() != "tr":
                continue
            values = [_inline_text(cell) for cell in row if local_name(cell.tag).lower() in ("td", "th")]
            if any(values):
                rows.append(Row.from_values(values))
        if not rows:
            return None
        return Table(rows=rows, column_sizing="even", font_size=TABLE_FONT_SIZE)
