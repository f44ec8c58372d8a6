"""
Presentation (PresentationML / PPTX) model builder.

Slides are ordered by the number in their part name. Within a slide the shape
tree is walked in z-order: pictures and positioned text boxes become
:class:`Shape` blocks placed in slide coordinates, text without a transform
flows down the page as paragraphs. Children of group shapes are mapped from
the group's child frame onto the slide.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..engine.geometry import emu_to_points
from ..exceptions import EntryNotFoundError, FormatError, UnitParseError
from ..models.blocks import (
    GRAY,
    ContentBlock,
    Image,
    Paragraph,
    Position,
    Row,
    Run,
    Shape,
    Table,
)
from .base import PackageModelBuilder
from .namespaces import NS, OFFICE_REL_NS, local_name, qn, DRAWING_NS

logger = logging.getLogger(__name__)

PRESENTATION_PART = "ppt/presentation.xml"
SLIDE_PREFIX = "ppt/slides/"

# 10in x 7.5in, the PowerPoint default when sldSz is absent.
DEFAULT_SLIDE_SIZE = (720.0, 540.0)
DEFAULT_PICTURE_EMU = 1270000

TITLE_FONT_SIZE = 24.0
BODY_FONT_SIZE = 14.0
FLOW_FONT_SIZE = 12.0
SLIDE_NUMBER_FONT_SIZE = 10.0
TITLE_ZONE = 100.0


@dataclass(frozen=True, slots=True)
class GroupTransform:
    """Maps a shape's EMU coordinates from its group's child space onto the slide."""

    scale_x: float = 1.0
    scale_y: float = 1.0
    shift_x: float = 0.0
    shift_y: float = 0.0

    def apply(self, x: int, y: int, cx: int, cy: int) -> Tuple[float, float, int, int]:
        return (
            x * self.scale_x + self.shift_x,
            y * self.scale_y + self.shift_y,
            int(round(cx * self.scale_x)),
            int(round(cy * self.scale_y)),
        )

    def nested(self, group) -> "GroupTransform":
        """Compose with the ``a:off``/``a:ext`` versus ``a:chOff``/``a:chExt`` frame of ``p:grpSp``."""
        xfrm = group.find("p:grpSpPr/a:xfrm", NS)
        if xfrm is None:
            return self
        try:
            off_x, off_y = _pair(xfrm.find("a:off", NS), "x", "y")
            ext_x, ext_y = _pair(xfrm.find("a:ext", NS), "cx", "cy")
            child_x, child_y = _pair(xfrm.find("a:chOff", NS), "x", "y")
            child_cx, child_cy = _pair(xfrm.find("a:chExt", NS), "cx", "cy")
        except ValueError:
            logger.warning("Group transform is not numeric, keeping parent coordinates")
            return self
        inner_x = ext_x / child_cx if ext_x > 0 and child_cx > 0 else 1.0
        inner_y = ext_y / child_cy if ext_y > 0 and child_cy > 0 else 1.0
        return GroupTransform(
            scale_x=self.scale_x * inner_x,
            scale_y=self.scale_y * inner_y,
            shift_x=self.scale_x * (off_x - child_x * inner_x) + self.shift_x,
            shift_y=self.scale_y * (off_y - child_y * inner_y) + self.shift_y,
        )


SLIDE_SPACE = GroupTransform()


def _pair(element, first: str, second: str) -> Tuple[int, int]:
    if element is None:
        return 0, 0
    return int(element.get(first, 0)), int(element.get(second, 0))


class PresentationParser(PackageModelBuilder):
    """Builds shapes and paragraphs from the slides of a PPTX package."""

    format_name = "pptx"

    def build(self) -> List[ContentBlock]:
        slides = self.numbered_parts(SLIDE_PREFIX, "slide")
        if not slides and not self.package.exists(PRESENTATION_PART):
            raise FormatError("Not a presentation package", details="no presentation or slide parts")

        self.slide_size = self._slide_size()
        units = [(f"Slide {position}", part) for position, (_, part) in enumerate(slides, start=1)]
        logger.info(f"Presentation has {len(units)} slide(s), slide size {self.slide_size}")
        return self.build_units(units, self._build_slide)

    def _slide_size(self) -> Tuple[float, float]:
        try:
            root = self.package.read_xml(PRESENTATION_PART)
        except (EntryNotFoundError, UnitParseError):
            return DEFAULT_SLIDE_SIZE
        size = root.find("p:sldSz", NS)
        if size is None:
            return DEFAULT_SLIDE_SIZE
        try:
            width = emu_to_points(int(size.get("cx")))
            height = emu_to_points(int(size.get("cy")))
        except (TypeError, ValueError):
            return DEFAULT_SLIDE_SIZE
        if width <= 0 or height <= 0:
            return DEFAULT_SLIDE_SIZE
        return width, height

    def _build_slide(self, index: int, part_name: str) -> List[ContentBlock]:
        root = self.package.read_xml(part_name)
        blocks: List[ContentBlock] = []
        shape_tree = root.find(".//p:spTree", NS)
        if shape_tree is not None:
            self._walk_shapes(shape_tree, part_name, blocks)
        if self.options.slide_numbers:
            blocks.append(self._slide_number(index + 1))
        return blocks

    def _walk_shapes(
        self,
        container,
        part_name: str,
        blocks: List[ContentBlock],
        transform: GroupTransform = SLIDE_SPACE,
    ) -> None:
        for child in container:
            kind = local_name(child.tag)
            if kind == "pic":
                shape = self._picture(child, part_name, transform)
                if shape is not None:
                    blocks.append(shape)
            elif kind == "sp":
                blocks.extend(self._text_shape(child, transform))
            elif kind == "grpSp":
                self._walk_shapes(child, part_name, blocks, transform.nested(child))
            elif kind == "graphicFrame":
                table = self._table(child)
                if table is not None:
                    blocks.append(table)

    def _picture(self, element, part_name: str, transform: GroupTransform = SLIDE_SPACE) -> Optional[Shape]:
        blip = element.find(".//a:blip", NS)
        if blip is None:
            return None
        data = self.relationships.image_bytes(part_name, blip.get(qn(OFFICE_REL_NS, "embed")))
        if data is None:
            return None

        position, cx, cy = self._transform(element.find(".//a:xfrm", NS), transform)
        if cx <= 0 or cy <= 0:
            cx = cy = DEFAULT_PICTURE_EMU
        return Shape(
            kind="picture",
            position=position,
            image=Image(data=data, width_emu=cx, height_emu=cy),
            frame_width=self.slide_size[0],
            frame_height=self.slide_size[1],
        )

    def _text_shape(self, element, transform: GroupTransform = SLIDE_SPACE) -> List[ContentBlock]:
        text_body = element.find("p:txBody", NS)
        if text_body is None:
            return []
        paragraphs = [runs for runs in (self._paragraph_runs(p) for p in text_body.iter(qn(DRAWING_NS, "p"))) if runs]
        if not paragraphs:
            return []

        shape_properties = element.find("p:spPr", NS)
        xfrm = shape_properties.find("a:xfrm", NS) if shape_properties is not None else None
        position, _, _ = self._transform(xfrm, transform)

        if position is None:
            return [Paragraph(runs=runs, style_name="Slide Text", font_size=FLOW_FONT_SIZE) for runs in paragraphs]

        runs: List[Run] = []
        for number, paragraph_runs in enumerate(paragraphs):
            if number:
                runs.append(Run(text="\n"))
            runs.extend(paragraph_runs)
        font_size = TITLE_FONT_SIZE if position.y < TITLE_ZONE else BODY_FONT_SIZE
        return [
            Shape(
                kind="textbox",
                position=position,
                runs=runs,
                font_size=font_size,
                frame_width=self.slide_size[0],
                frame_height=self.slide_size[1],
            )
        ]

    def _paragraph_runs(self, paragraph) -> List[Run]:
        runs: List[Run] = []
        for child in paragraph:
            kind = local_name(child.tag)
            if kind in ("r", "fld"):
                text = "".join(t.text or "" for t in child.iter(qn(DRAWING_NS, "t")))
                if text:
                    properties = child.find("a:rPr", NS)
                    bold = properties is not None and properties.get("b") in ("1", "true")
                    runs.append(Run(text=text, bold=bold))
            elif kind == "br":
                runs.append(Run(text="\n"))
        if not any(run.text.strip() for run in runs):
            return []
        return runs

    def _table(self, frame) -> Optional[Table]:
        table = frame.find(".//a:tbl", NS)
        if table is None:
            return None
        rows: List[Row] = []
        for row in table.iter(qn(DRAWING_NS, "tr")):
            values = []
            for cell in row.iter(qn(DRAWING_NS, "tc")):
                values.append("".join(t.text or "" for t in cell.iter(qn(DRAWING_NS, "t"))))
            if any(values):
                rows.append(Row.from_values(values))
        if not rows:
            return None
        return Table(rows=rows, column_sizing="even", font_size=10.0)

    @staticmethod
    def _transform(xfrm, transform: GroupTransform = SLIDE_SPACE) -> Tuple[Optional[Position], int, int]:
        """Read ``a:off``/``a:ext`` of a transform in slide space; offsets in points, extents in EMU."""
        if xfrm is None:
            return None, 0, 0
        offset = xfrm.find("a:off", NS)
        try:
            cx, cy = _pair(xfrm.find("a:ext", NS), "cx", "cy")
        except ValueError:
            cx = cy = 0
        try:
            x, y = _pair(offset, "x", "y")
        except ValueError:
            offset = None
            x = y = 0
        slide_x, slide_y, cx, cy = transform.apply(x, y, cx, cy)
        if offset is None:
            return None, cx, cy
        position = Position(
            x=emu_to_points(slide_x),
            y=emu_to_points(slide_y),
            width=emu_to_points(cx) if cx > 0 else None,
            height=emu_to_points(cy) if cy > 0 else None,
        )
        return position, cx, cy

    def _slide_number(self, number: int) -> Shape:
        slide_width, slide_height = self.slide_size
        return Shape(
            kind="textbox",
            position=Position(x=slide_width - 40.0, y=slide_height - 24.0, width=30.0, height=14.0),
            runs=[Run(text=str(number))],
            font_size=SLIDE_NUMBER_FONT_SIZE,
            color=GRAY,
            frame_width=slide_width,
            frame_height=slide_height,
        )
