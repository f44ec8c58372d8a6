"""
PDF output through the reportlab canvas.

The renderer replays a :class:`LayoutResult` page by page. Layout uses a
top-left origin; reportlab's is bottom-left, so every y is flipped against
the page height here and nowhere else.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional

from reportlab.lib.utils import ImageReader, simpleSplit  # type: ignore
from reportlab.pdfgen import canvas as pdf_canvas  # type: ignore

from ..engine.draw_commands import DrawCommand, DrawImage, DrawText, DrawTextBox, LayoutResult
from ..engine.fonts import BASE_FONT, FontRef
from ..engine.geometry import PageGeometry
from ..exceptions import RenderingError
from ..models.blocks import RED
from ..version import __version__

logger = logging.getLogger(__name__)

TEXT_BOX_LEADING = 1.2
IMAGE_ERROR_TEXT = "[Image Error]"
IMAGE_ERROR_FONT_SIZE = 10.0


class PDFRenderer:
    """Writes laid-out pages to PDF bytes."""

    def __init__(
        self,
        geometry: PageGeometry,
        font: FontRef = BASE_FONT,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ):
        self.geometry = geometry
        self.font = font
        self.title = title
        self.author = author

    def render(self, layout: LayoutResult) -> bytes:
        output = BytesIO()
        c = pdf_canvas.Canvas(output, pagesize=(self.geometry.width, self.geometry.height))
        c.setCreator(f"quillpress {__version__}")
        if self.title:
            c.setTitle(self.title)
        if self.author:
            c.setAuthor(self.author)

        if not layout.pages:
            logger.debug("Layout has no pages, emitting a blank page")
            c.showPage()
        for page in layout.pages:
            for command in page.commands:
                self._draw(c, command)
            c.showPage()

        try:
            c.save()
        except Exception as exc:
            raise RenderingError("Failed to write PDF", details=str(exc)) from exc
        data = output.getvalue()
        logger.info(f"Rendered {max(layout.page_count, 1)} page(s), {len(data)} bytes")
        return data

    def _y(self, top_y: float) -> float:
        return self.geometry.height - top_y

    def _draw(self, c: pdf_canvas.Canvas, command: DrawCommand) -> None:
        match command:
            case DrawText():
                self._draw_text(c, command)
            case DrawTextBox():
                self._draw_text_box(c, command)
            case DrawImage():
                self._draw_image(c, command)
            case _:
                raise RenderingError(f"Unknown draw command: {type(command).__name__}")

    def _draw_text(self, c: pdf_canvas.Canvas, command: DrawText) -> None:
        c.setFillColorRGB(*command.color)
        c.setFont(command.font.face(command.bold), command.font_size)
        c.drawString(command.x, self._y(command.y), command.text)

    def _draw_text_box(self, c: pdf_canvas.Canvas, command: DrawTextBox) -> None:
        rect = command.rect
        font_name = command.font.face(command.bold)
        lines = simpleSplit(command.text, font_name, command.font_size, rect.width)
        leading = command.font_size * TEXT_BOX_LEADING

        c.setFillColorRGB(*command.color)
        c.setFont(font_name, command.font_size)
        baseline = rect.top + command.font_size
        for line in lines:
            if baseline > rect.bottom:
                break
            c.drawString(rect.left, self._y(baseline), line)
            baseline += leading

    def _draw_image(self, c: pdf_canvas.Canvas, command: DrawImage) -> None:
        rect = command.rect
        try:
            reader = ImageReader(BytesIO(command.data))
            c.drawImage(
                reader,
                rect.left,
                self._y(rect.bottom),
                width=rect.width,
                height=rect.height,
                mask="auto",
            )
        except Exception as exc:
            logger.warning(f"Image could not be drawn: {exc}")
            c.setFillColorRGB(*RED)
            c.setFont(self.font.face(), IMAGE_ERROR_FONT_SIZE)
            c.drawString(rect.left, self._y(rect.top + IMAGE_ERROR_FONT_SIZE), IMAGE_ERROR_TEXT)
