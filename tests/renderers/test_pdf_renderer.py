"""
Tests for PDFRenderer class.

This module contains unit tests for writing laid-out pages with reportlab.
"""

import re
from unittest.mock import patch

import pytest
from reportlab.pdfgen.canvas import Canvas

from quillpress.engine.draw_commands import DrawImage, DrawText, DrawTextBox, LayoutResult, PageLayout
from quillpress.engine.geometry import Rect
from quillpress.exceptions import RenderingError
from quillpress.models.blocks import RED
from quillpress.renderers import PDFRenderer

PAGE_OBJECT = re.compile(rb"/Type\s*/Page\b(?!s)")


def page_count(pdf: bytes) -> int:
    return len(PAGE_OBJECT.findall(pdf))


def layout_with(geometry, *pages):
    return LayoutResult(
        geometry=geometry,
        pages=[PageLayout(index=index, commands=list(commands)) for index, commands in enumerate(pages)],
    )


class TestPDFRenderer:
    """Test cases for PDFRenderer class."""

    def test_output_is_pdf(self, portrait_geometry):
        pdf = PDFRenderer(portrait_geometry).render(layout_with(portrait_geometry, [DrawText(72, 100, "Hello", 11.0)]))
        assert pdf.startswith(b"%PDF")
        assert pdf.rstrip().endswith(b"%%EOF")

    def test_one_pdf_page_per_layout_page(self, portrait_geometry):
        layout = layout_with(portrait_geometry, [DrawText(72, 100, "one", 11.0)], [], [DrawText(72, 100, "three", 11.0)])
        assert page_count(PDFRenderer(portrait_geometry).render(layout)) == 3

    def test_zero_pages_renders_blank_page(self, portrait_geometry):
        pdf = PDFRenderer(portrait_geometry).render(LayoutResult(geometry=portrait_geometry))
        assert page_count(pdf) == 1

    def test_page_size(self, landscape_geometry):
        pdf = PDFRenderer(landscape_geometry).render(layout_with(landscape_geometry, []))
        assert re.search(rb"/MediaBox\s*\[\s*0 0 842 595\s*\]", pdf)

    def test_metadata(self, portrait_geometry):
        pdf = PDFRenderer(portrait_geometry, title="Quarterly", author="Finance").render(
            layout_with(portrait_geometry, [])
        )
        assert b"Quarterly" in pdf
        assert b"Finance" in pdf
        assert b"quillpress" in pdf

    def test_text_y_is_flipped(self, portrait_geometry):
        with patch.object(Canvas, "drawString", autospec=True) as draw_string:
            PDFRenderer(portrait_geometry).render(layout_with(portrait_geometry, [DrawText(72, 100, "Hi", 11.0)]))
        _, x, y, text = draw_string.call_args.args
        assert (x, y, text) == (72, 742.0, "Hi")

    def test_bold_face_selected(self, portrait_geometry):
        with patch.object(Canvas, "setFont", autospec=True) as set_font:
            PDFRenderer(portrait_geometry).render(
                layout_with(portrait_geometry, [DrawText(72, 100, "Bold", 12.0, bold=True)])
            )
        assert any(call.args[1:] == ("Helvetica-Bold", 12.0) for call in set_font.call_args_list)

    def test_text_box_clips_overflow(self, portrait_geometry):
        box = DrawTextBox(rect=Rect(72, 100, 60, 15), text="many words that cannot fit in one line", font_size=10.0)
        with patch.object(Canvas, "drawString", autospec=True) as draw_string:
            PDFRenderer(portrait_geometry).render(layout_with(portrait_geometry, [box]))
        assert draw_string.call_count == 1

    def test_text_box_wraps(self, portrait_geometry):
        box = DrawTextBox(rect=Rect(72, 100, 60, 200), text="many words that cannot fit in one line", font_size=10.0)
        with patch.object(Canvas, "drawString", autospec=True) as draw_string:
            PDFRenderer(portrait_geometry).render(layout_with(portrait_geometry, [box]))
        assert draw_string.call_count > 1
        baselines = [call.args[2] for call in draw_string.call_args_list]
        assert baselines == sorted(baselines, reverse=True)

    def test_image_drawn(self, portrait_geometry, png):
        image = DrawImage(rect=Rect(100, 100, 40, 20), data=png)
        with patch.object(Canvas, "drawImage", autospec=True) as draw_image:
            PDFRenderer(portrait_geometry).render(layout_with(portrait_geometry, [image]))
        args = draw_image.call_args
        assert args.args[2:4] == (100, 842.0 - 120.0)
        assert (args.kwargs["width"], args.kwargs["height"]) == (40, 20)

    def test_real_image_embeds(self, portrait_geometry, png):
        pdf = PDFRenderer(portrait_geometry).render(
            layout_with(portrait_geometry, [DrawImage(rect=Rect(100, 100, 40, 20), data=png)])
        )
        assert b"/Subtype /Image" in pdf

    def test_broken_image_draws_marker(self, portrait_geometry):
        image = DrawImage(rect=Rect(100, 100, 40, 20), data=b"not an image")
        with patch.object(Canvas, "drawString", autospec=True) as draw_string, patch.object(
            Canvas, "setFillColorRGB", autospec=True
        ) as set_fill:
            pdf_bytes = PDFRenderer(portrait_geometry).render(layout_with(portrait_geometry, [image]))
        assert draw_string.call_args.args[3] == "[Image Error]"
        assert set_fill.call_args.args[1:] == RED
        assert pdf_bytes.startswith(b"%PDF")

    def test_unknown_command(self, portrait_geometry):
        with pytest.raises(RenderingError):
            PDFRenderer(portrait_geometry).render(layout_with(portrait_geometry, [object()]))
