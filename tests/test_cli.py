"""
Tests for the command-line interface.
"""

import json

import pytest

from quillpress.cli import build_options, create_parser, main


class TestBuildOptions:
    def parse(self, *argv):
        return create_parser().parse_args(["convert", "input.xlsx", *argv])

    def test_format_defaults(self):
        options = build_options(self.parse(), "xlsx")
        assert (options.geometry.width, options.geometry.height, options.geometry.margin) == (842.0, 595.0, 40.0)
        assert options.quality == "medium"
        assert not options.sheet_titles
        assert options.slide_numbers

    def test_flags(self):
        options = build_options(
            self.parse("--sheet-titles", "--no-slide-numbers", "--quality", "high", "--title", "T", "--author", "A"),
            "xlsx",
        )
        assert options.sheet_titles
        assert not options.slide_numbers
        assert options.quality == "high"
        assert (options.title, options.author) == ("T", "A")

    def test_page_size_and_margin(self):
        options = build_options(self.parse("--page-size", "letter", "--margin", "36"), "docx")
        assert (options.geometry.width, options.geometry.height, options.geometry.margin) == (612.0, 792.0, 36.0)

    def test_margin_only_keeps_page_size(self):
        options = build_options(self.parse("--margin", "10"), "docx")
        assert (options.geometry.width, options.geometry.margin) == (595.0, 10.0)

    def test_font_path(self):
        options = build_options(self.parse("--font", "/fonts/Noto.ttf"), "docx")
        assert str(options.font_path) == "/fonts/Noto.ttf"


class TestMain:
    """Test cases for main()."""

    def test_convert_default_output(self, temp_dir, simple_xlsx, capsys):
        source = temp_dir / "grid.xlsx"
        source.write_bytes(simple_xlsx)
        assert main(["convert", str(source)]) == 0
        assert (temp_dir / "grid.pdf").read_bytes().startswith(b"%PDF")
        assert "Saved" in capsys.readouterr().out

    def test_convert_with_output_and_format(self, temp_dir, simple_docx):
        source = temp_dir / "upload.bin"
        source.write_bytes(simple_docx)
        target = temp_dir / "letter.pdf"
        assert main(["convert", str(source), "-o", str(target), "-f", "docx"]) == 0
        assert target.exists()

    def test_convert_missing_file(self, temp_dir, capsys):
        assert main(["convert", str(temp_dir / "missing.xlsx")]) == 1
        assert "File not found" in capsys.readouterr().err

    def test_convert_corrupt_file(self, temp_dir, capsys):
        source = temp_dir / "broken.xlsx"
        source.write_bytes(b"not a zip")
        assert main(["convert", str(source)]) == 1
        assert capsys.readouterr().err.startswith("Error:")
        assert not (temp_dir / "broken.pdf").exists()

    def test_convert_bad_page_size(self, temp_dir, simple_docx, capsys):
        source = temp_dir / "doc.docx"
        source.write_bytes(simple_docx)
        assert main(["convert", str(source), "--page-size", "giant"]) == 1
        assert "Invalid page size" in capsys.readouterr().err

    def test_info_json(self, temp_dir, simple_pptx, capsys):
        source = temp_dir / "deck.pptx"
        source.write_bytes(simple_pptx)
        assert main(["info", str(source), "--json"]) == 0
        info = json.loads(capsys.readouterr().out)
        assert info["format"] == "pptx"
        assert info["units"] == 2
        assert info["pages"] == 2
        assert info["size_bytes"] == len(simple_pptx)

    def test_info_text(self, temp_dir, simple_epub, capsys):
        source = temp_dir / "book.epub"
        source.write_bytes(simple_epub)
        assert main(["info", str(source)]) == 0
        out = capsys.readouterr().out
        assert "Title: Test Book" in out
        assert "pages: 2" in out

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert "quillpress v" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage" in capsys.readouterr().out.lower()

    def test_invalid_format_choice(self):
        with pytest.raises(SystemExit):
            main(["convert", "file.xlsx", "-f", "odt"])
