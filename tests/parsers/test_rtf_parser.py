"""
Tests for RTF text extraction.
"""

import pytest

from quillpress.models.blocks import Paragraph
from quillpress.parser.rtf_parser import RTFParser, decode_rtf_bytes, strip_rtf


class TestStripRtf:
    """Test cases for strip_rtf."""

    def test_paragraphs(self):
        assert strip_rtf(r"{\rtf1 Hello\par World}") == "Hello\nWorld"

    @pytest.mark.parametrize("word", ["line", "sect", "page", "row"])
    def test_other_line_breaks(self, word):
        assert strip_rtf("{\\rtf1 a\\" + word + " b}") == "a\nb"

    def test_tabs_and_cells_become_spaces(self):
        assert strip_rtf(r"{\rtf1 a\tab b\cell c}") == "a b c"

    def test_font_table_is_dropped(self):
        source = r"{\rtf1\ansi{\fonttbl{\f0\fswiss Arial;}{\f1 Times;}}\f0\fs24 Body text\par}"
        assert strip_rtf(source) == "Body text"

    def test_ignorable_destinations_are_dropped(self):
        source = r"{\rtf1{\*\generator Writer 1.0;}{\info{\title Secret}}Visible}"
        assert strip_rtf(source) == "Visible"

    def test_escaped_literals(self):
        assert strip_rtf(r"{\rtf1 a\{b\}c\\d}") == "a{b}c\\d"

    def test_hex_escape_uses_windows_code_page(self):
        assert strip_rtf(r"{\rtf1 caf\'e9 \'80}") == "café €"

    def test_hex_escaped_braces_survive(self):
        assert strip_rtf(r"{\rtf1 a\'7bb\'7dc}") == "a{b}c"

    def test_hex_escaped_backslash_keeps_following_word(self):
        assert strip_rtf(r"{\rtf1 C:\'5cpath}") == "C:\\path"

    def test_unicode_escaped_brace(self):
        assert strip_rtf(r"{\rtf1 x\u123?y}") == "x{y"

    def test_unicode_escape_skips_fallback(self):
        assert strip_rtf(r"{\rtf1 price \u8364? total}") == "price € total"

    def test_negative_unicode_escape(self):
        assert strip_rtf(r"{\rtf1 \u-3913?}") == chr(65536 - 3913)

    def test_control_symbols(self):
        assert strip_rtf(r"{\rtf1 non\~breaking soft\-hyphen non\_breaking}") == "non breaking softhyphen non-breaking"

    def test_source_newlines_only_delimit(self):
        assert strip_rtf("{\\rtf1 Hello\\par\nWorld\n again}") == "Hello\nWorld again"

    def test_blank_paragraphs_collapse(self):
        assert strip_rtf(r"{\rtf1 one\par\par\par two}") == "one\ntwo"

    def test_trailing_spaces_trimmed(self):
        assert strip_rtf(r"{\rtf1 padded   \par next}") == "padded\nnext"


class TestDecodeRtfBytes:
    def test_utf8(self):
        assert decode_rtf_bytes("café".encode("utf-8")) == "café"

    def test_latin1_fallback(self):
        assert decode_rtf_bytes(b"caf\xe9") == "café"


class TestRTFParser:
    """Test cases for RTFParser."""

    def test_one_paragraph_per_line(self):
        blocks = RTFParser(rb"{\rtf1\ansi First line\par Second line\par}").build()
        assert all(isinstance(block, Paragraph) for block in blocks)
        assert [block.text for block in blocks] == ["First line", "Second line"]
        assert blocks[0].style_name == "RTF Line"
        assert blocks[0].font_size == 11.0

    def test_empty_document(self):
        assert RTFParser(rb"{\rtf1}").build() == []

    def test_missing_header_still_converts(self):
        blocks = RTFParser(b"plain words").build()
        assert [block.text for block in blocks] == ["plain words"]

    def test_default_options(self):
        parser = RTFParser(rb"{\rtf1 x}")
        assert parser.options.geometry.width == 595.0
        assert parser.options.layout.line_spacing == 1.5
