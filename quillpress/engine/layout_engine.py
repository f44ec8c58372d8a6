"""
Layout engine: content blocks in, paginated draw commands out.

Blocks are placed in document order by a single top-to-bottom cursor. Each
block is laid out in isolation so a failure costs one red error line, not
the document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..config import LayoutOptions
from ..exceptions import LayoutError
from ..models.blocks import (
    BLACK,
    RED,
    Color,
    ContentBlock,
    ErrorMarker,
    Image,
    PageBreak,
    Paragraph,
    Shape,
    Table,
)
from .draw_commands import DrawImage, DrawText, DrawTextBox, LayoutResult, PageLayout
from .fonts import BASE_FONT, FontRef
from .geometry import PageGeometry, Rect, emu_to_points
from .isolation import Degraded, Ok, isolate
from .text_metrics import WidthFunction, estimate_text_width, wrap_text

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_POINTS = 100.0


@dataclass(slots=True)
class LayoutContext:
    """Mutable cursor state of one layout pass."""

    geometry: PageGeometry
    result: LayoutResult
    page: PageLayout
    y: float

    @property
    def at_page_top(self) -> bool:
        return self.y <= self.geometry.margin + 1e-6

    def new_page(self) -> None:
        self.page = PageLayout(index=len(self.result.pages))
        self.result.pages.append(self.page)
        self.y = self.geometry.margin

    def ensure_space(self, height: float) -> None:
        """
        Make room for ``height`` points below the cursor.

        Content taller than the usable area starts on a fresh page (unless the
        cursor is already at the top) and is emitted regardless.
        """
        if height > self.geometry.usable_height:
            if not self.at_page_top:
                self.new_page()
            return
        if self.y + height > self.geometry.bottom_limit:
            self.new_page()


class LayoutEngine:
    """Places content blocks on pages of a fixed geometry."""

    def __init__(
        self,
        geometry: PageGeometry,
        font: FontRef = BASE_FONT,
        options: Optional[LayoutOptions] = None,
        measure: WidthFunction = estimate_text_width,
    ):
        self.geometry = geometry
        self.font = font
        self.options = options or LayoutOptions()
        self.measure = measure

    def layout(self, blocks: Iterable[ContentBlock]) -> LayoutResult:
        result = LayoutResult(geometry=self.geometry)
        first_page = PageLayout(index=0)
        result.pages.append(first_page)
        ctx = LayoutContext(geometry=self.geometry, result=result, page=first_page, y=self.geometry.margin)

        degraded = 0
        for index, block in enumerate(blocks):
            match isolate(f"block {index} ({type(block).__name__})", self.layout_block, ctx, block):
                case Ok():
                    pass
                case Degraded(marker=marker):
                    degraded += 1
                    self._layout_error(ctx, marker.message)

        page_rect = self.geometry.page_rect
        overflowing = sum(1 for _, command in result.commands() if not page_rect.contains(command.bounds))
        if overflowing:
            logger.warning(f"{overflowing} draw command(s) extend past the page edge")
        logger.info(f"Layout produced {result.page_count} page(s), {degraded} degraded block(s)")
        return result

    def layout_block(self, ctx: LayoutContext, block: ContentBlock) -> None:
        match block:
            case Paragraph():
                self._layout_paragraph(ctx, block)
            case Table():
                self._layout_table(ctx, block)
            case Image():
                self._layout_image(ctx, block)
            case Shape():
                self._layout_shape(ctx, block)
            case PageBreak():
                ctx.new_page()
            case ErrorMarker(message=message):
                self._layout_error(ctx, message)
            case _:
                raise LayoutError(f"Unknown content block: {type(block).__name__}")

    # ------------------------------------------------------------------
    # Text
    # ------------------------------------------------------------------

    def _layout_lines(
        self,
        ctx: LayoutContext,
        text: str,
        font_size: float,
        bold: bool,
        color: Color = BLACK,
        measure: Optional[WidthFunction] = None,
    ) -> None:
        line_height = font_size * self.options.line_spacing
        lines = wrap_text(text, font_size, self.geometry.text_width, measure or self.measure)
        last = len(lines) - 1
        for number, line in enumerate(lines):
            # A trailing break only advances the cursor.
            if line or number < last:
                ctx.ensure_space(line_height)
            if line:
                command = DrawText(
                    x=self.geometry.margin,
                    y=ctx.y + font_size,
                    text=line,
                    font_size=font_size,
                    font=self.font,
                    bold=bold,
                    color=color,
                )
                ctx.page.add(command)
            ctx.y += line_height

    def _layout_paragraph(self, ctx: LayoutContext, paragraph: Paragraph) -> None:
        font_size = paragraph.font_size or self.options.default_font_size
        text = paragraph.text
        if text.strip():
            self._layout_lines(ctx, text, font_size, paragraph.bold)
        ctx.y += font_size * self.options.paragraph_spacing

    def _layout_error(self, ctx: LayoutContext, message: str) -> None:
        # The configured measure may be what failed.
        self._layout_lines(
            ctx, f"Error: {message}", self.options.error_font_size, False, color=RED, measure=estimate_text_width
        )

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def column_widths(self, table: Table) -> List[float]:
        count = table.column_count
        available = self.geometry.text_width
        if count == 0:
            return []
        if table.column_sizing == "even":
            return [available / count] * count

        padding = 2 * self.options.cell_padding
        widths = [0.0] * count
        for row in table.rows[: self.options.column_sample_rows]:
            for column, cell in enumerate(row.cells[:count]):
                widths[column] = max(widths[column], self.measure(cell.text, table.font_size) + padding)
        widths = [
            min(max(width, self.options.min_column_width), self.options.max_column_width) for width in widths
        ]
        total = sum(widths)
        if total > available:
            factor = available / total
            widths = [width * factor for width in widths]
        return widths

    def _layout_table(self, ctx: LayoutContext, table: Table) -> None:
        widths = self.column_widths(table)
        if not widths:
            return
        row_height = table.row_height or table.font_size + 2 * self.options.cell_padding

        for row in table.rows:
            ctx.ensure_space(row_height)
            x = self.geometry.margin
            for width, cell in zip(widths, row.cells):
                if cell.text:
                    ctx.page.add(
                        DrawTextBox(
                            rect=Rect(x + 2, ctx.y + 2, max(width - 4, 0.0), max(row_height - 3, 0.0)),
                            text=cell.text,
                            font_size=table.font_size,
                            font=self.font,
                        )
                    )
                x += width
            ctx.y += row_height
        ctx.y += self.options.table_spacing

    # ------------------------------------------------------------------
    # Images and shapes
    # ------------------------------------------------------------------

    def fit_image(self, image: Image) -> Tuple[float, float]:
        """Display size in points: EMU size shrunk to the text width, then to the usable height."""
        width = emu_to_points(image.width_emu)
        height = emu_to_points(image.height_emu)
        if width <= 0 or height <= 0:
            width = height = DEFAULT_IMAGE_POINTS
        if width > self.geometry.text_width:
            scale = self.geometry.text_width / width
            width, height = width * scale, height * scale
        if height > self.geometry.usable_height:
            scale = self.geometry.usable_height / height
            width, height = width * scale, height * scale
        return width, height

    def _layout_image(self, ctx: LayoutContext, image: Image) -> None:
        width, height = self.fit_image(image)
        ctx.ensure_space(height + self.options.image_reserve)
        x = self.geometry.margin + (self.geometry.text_width - width) / 2
        ctx.page.add(DrawImage(rect=Rect(x, ctx.y, width, height), data=image.data))
        ctx.y += height + self.options.image_gap

    def place_shape(self, shape: Shape) -> Rect:
        """Map a positioned shape from its source frame into the page's margin box."""
        position = shape.position
        frame_width = shape.frame_width or 0.0
        frame_height = shape.frame_height or 0.0

        if shape.kind == "picture" and shape.image is not None:
            width = emu_to_points(shape.image.width_emu)
            height = emu_to_points(shape.image.height_emu)
        else:
            width = position.width or max(frame_width - position.x, 0.0) or self.geometry.text_width
            height = position.height or max(frame_height - position.y, 0.0) or shape.font_size * 1.5
        if width <= 0 or height <= 0:
            width = height = DEFAULT_IMAGE_POINTS

        content = self.geometry.content_rect
        x, y = position.x, position.y
        if frame_width > 0 and frame_height > 0:
            scale = min(content.width / frame_width, content.height / frame_height)
            x, y = content.left + x * scale, content.top + y * scale
            width, height = width * scale, height * scale

        if width > content.width or height > content.height:
            shrink = min(content.width / width, content.height / height)
            width, height = width * shrink, height * shrink
        x = min(max(x, content.left), content.right - width)
        y = min(max(y, content.top), content.bottom - height)
        return Rect(x, y, width, height)

    def _layout_shape(self, ctx: LayoutContext, shape: Shape) -> None:
        if shape.position is None:
            if shape.kind == "picture" and shape.image is not None:
                self._layout_image(ctx, shape.image)
            elif shape.text.strip():
                bold = Paragraph(runs=shape.runs).bold
                self._layout_lines(ctx, shape.text, shape.font_size, bold, color=shape.color)
            return

        rect = self.place_shape(shape)
        if shape.kind == "picture":
            if shape.image is not None:
                ctx.page.add(DrawImage(rect=rect, data=shape.image.data))
            return
        if shape.text.strip():
            ctx.page.add(
                DrawTextBox(
                    rect=rect,
                    text=shape.text,
                    font_size=shape.font_size,
                    font=self.font,
                    bold=Paragraph(runs=shape.runs).bold,
                    color=shape.color,
                )
            )
