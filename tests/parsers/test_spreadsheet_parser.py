"""
Tests for the spreadsheet model builder.
"""

import pytest

from quillpress.config import ConversionOptions
from quillpress.exceptions import FormatError
from quillpress.models.blocks import ErrorMarker, PageBreak, Paragraph, Table
from quillpress.parser.package_reader import PackageReader
from quillpress.parser.shared_strings import SharedStringTable
from quillpress.parser.spreadsheet_parser import SpreadsheetParser, column_index

from ..builders import S_NS, build_zip, make_xlsx


def build(data, **overrides):
    options = ConversionOptions.for_format("xlsx", **overrides)
    with PackageReader.open(data) as package:
        parser = SpreadsheetParser(package, shared_strings=SharedStringTable.build(package), options=options)
        return parser.build()


class TestColumnIndex:
    @pytest.mark.parametrize(
        "ref,expected",
        [("A1", 0), ("C5", 2), ("Z10", 25), ("AA1", 26), ("AB3", 27), ("c7", 2)],
    )
    def test_references(self, ref, expected):
        assert column_index(ref) == expected

    @pytest.mark.parametrize("ref", [None, "", "1A", "A-1"])
    def test_invalid_references(self, ref):
        assert column_index(ref) is None


class TestSpreadsheetParser:
    """Test cases for SpreadsheetParser."""

    def test_single_sheet_table(self, simple_xlsx):
        blocks = build(simple_xlsx)
        assert len(blocks) == 1
        table = blocks[0]
        assert isinstance(table, Table)
        assert table.column_sizing == "content"
        assert table.font_size == 9.0
        assert [[cell.text for cell in row.cells] for row in table.rows] == [["A", "B"], ["1", "2"]]

    def test_sheets_separated_by_page_breaks(self):
        blocks = build(make_xlsx([[["one"]], [["two"]], [["three"]]]))
        assert [type(block) for block in blocks] == [Table, PageBreak, Table, PageBreak, Table]

    def test_sheets_ordered_numerically(self):
        sheets = [[[f"sheet {number}"]] for number in range(1, 12)]
        blocks = build(make_xlsx(sheets))
        tables = [block for block in blocks if isinstance(block, Table)]
        assert [table.rows[0].cells[0].text for table in tables][-2:] == ["sheet 10", "sheet 11"]

    def test_empty_rows_dropped(self):
        blocks = build(make_xlsx([[["a"], [""], ["b"]]]))
        assert [row.cells[0].text for row in blocks[0].rows] == ["a", "b"]

    def test_sparse_cells_keep_their_column(self):
        sheet = (
            f'<worksheet xmlns="{S_NS}"><sheetData><row r="1">'
            '<c r="A1" t="inlineStr"><is><t>first</t></is></c>'
            '<c r="C1"><v>3</v></c>'
            "</row></sheetData></worksheet>"
        )
        data = build_zip({"xl/workbook.xml": f'<workbook xmlns="{S_NS}"/>', "xl/worksheets/sheet1.xml": sheet})
        row = build(data)[0].rows[0]
        assert [cell.text for cell in row.cells] == ["first", "", "3"]

    def test_boolean_cells(self):
        sheet = (
            f'<worksheet xmlns="{S_NS}"><sheetData><row r="1">'
            '<c r="A1" t="b"><v>1</v></c><c r="B1" t="b"><v>0</v></c>'
            "</row></sheetData></worksheet>"
        )
        data = build_zip({"xl/workbook.xml": f'<workbook xmlns="{S_NS}"/>', "xl/worksheets/sheet1.xml": sheet})
        assert [cell.text for cell in build(data)[0].rows[0].cells] == ["TRUE", "FALSE"]

    def test_shared_string_out_of_range_is_literal(self):
        sheet = (
            f'<worksheet xmlns="{S_NS}"><sheetData><row r="1">'
            '<c r="A1" t="s"><v>7</v></c>'
            "</row></sheetData></worksheet>"
        )
        data = build_zip({"xl/workbook.xml": f'<workbook xmlns="{S_NS}"/>', "xl/worksheets/sheet1.xml": sheet})
        assert build(data)[0].rows[0].cells[0].text == "7"

    def test_sheet_titles_option(self):
        blocks = build(make_xlsx([[["x"]]], names=["Budget"]), sheet_titles=True)
        assert isinstance(blocks[0], Paragraph)
        assert blocks[0].text == "Budget"
        assert blocks[0].bold
        assert isinstance(blocks[1], Table)

    def test_malformed_sheet_degrades(self):
        data = build_zip(
            {
                "xl/workbook.xml": f'<workbook xmlns="{S_NS}"/>',
                "xl/worksheets/sheet1.xml": "<worksheet><sheetData>",
                "xl/worksheets/sheet2.xml": f'<worksheet xmlns="{S_NS}"><sheetData><row r="1"><c r="A1"><v>5</v></c></row></sheetData></worksheet>',
            }
        )
        blocks = build(data)
        assert isinstance(blocks[0], ErrorMarker)
        assert isinstance(blocks[1], PageBreak)
        assert isinstance(blocks[2], Table)

    def test_empty_sheet_has_no_blocks(self):
        blocks = build(make_xlsx([[]]))
        assert blocks == []

    def test_not_a_workbook(self):
        with pytest.raises(FormatError):
            build(build_zip({"word/document.xml": "<document/>"}))
