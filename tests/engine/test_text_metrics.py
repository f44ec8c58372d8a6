"""Tests for text width estimation and wrapping."""

import pytest

from quillpress.engine.text_metrics import estimate_glyph_width, estimate_text_width, wrap_text


class TestEstimateWidth:
    @pytest.mark.parametrize(
        "char,expected",
        [("a", 5.0), ("W", 5.0), ("é", 5.0), ("ÿ", 5.0), ("Ā", 10.0), ("中", 10.0)],
    )
    def test_glyph_width(self, char, expected):
        assert estimate_glyph_width(ord(char), 10.0) == expected

    def test_text_width(self):
        assert estimate_text_width("ab中", 12.0) == pytest.approx(6.0 + 6.0 + 12.0)

    def test_empty_text(self):
        assert estimate_text_width("", 12.0) == 0.0


class TestWrapText:
    """Test cases for greedy wrapping."""

    def test_fits_on_one_line(self):
        assert wrap_text("short text", 10.0, 500.0) == ["short text"]

    def test_greedy_packing(self):
        # Each four-letter word is 20 points wide at size 10.
        assert wrap_text("aaaa bbbb cccc", 10.0, 45.0) == ["aaaa bbbb", "cccc"]

    def test_explicit_newlines(self):
        assert wrap_text("one\n\ntwo", 10.0, 500.0) == ["one", "", "two"]

    def test_empty_text_is_one_empty_line(self):
        assert wrap_text("", 10.0, 500.0) == [""]

    def test_whitespace_is_collapsed(self):
        assert wrap_text("a    b\tc", 10.0, 500.0) == ["a b c"]

    def test_long_word_split_by_character(self):
        assert wrap_text("abcdefghij", 10.0, 25.0) == ["abcde", "fghij"]

    def test_long_word_after_text(self):
        assert wrap_text("hi abcdefghij", 10.0, 25.0) == ["hi", "abcde", "fghij"]

    def test_lines_never_exceed_width(self):
        text = "The quick brown fox jumps over the lazy dog " * 20
        for line in wrap_text(text, 11.0, 200.0):
            assert estimate_text_width(line, 11.0) <= 200.0

    def test_wide_characters(self):
        assert wrap_text("中文中文", 10.0, 25.0) == ["中文", "中文"]

    def test_custom_measure(self):
        def per_word(text, font_size):
            return len(text.split()) * 100.0

        assert wrap_text("a b c", 10.0, 200.0, measure=per_word) == ["a b", "c"]
