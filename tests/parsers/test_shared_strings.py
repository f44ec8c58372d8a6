"""
Tests for the shared string table.
"""

from quillpress.parser.package_reader import PackageReader
from quillpress.parser.shared_strings import SharedStringTable

from ..builders import S_NS, build_zip


def _table(xml):
    with PackageReader.open(build_zip({"xl/sharedStrings.xml": xml})) as package:
        return SharedStringTable.build(package)


class TestSharedStringTable:
    """Test cases for SharedStringTable."""

    def test_plain_entries(self):
        table = _table(f'<sst xmlns="{S_NS}"><si><t>Alpha</t></si><si><t>Beta</t></si></sst>')
        assert len(table) == 2
        assert table.lookup("1") == "Beta"

    def test_rich_text_runs_are_concatenated(self):
        table = _table(f'<sst xmlns="{S_NS}"><si><r><t>Hel</t></r><r><t>lo</t></r></si></sst>')
        assert table[0] == "Hello"

    def test_phonetic_runs_are_skipped(self):
        table = _table(f'<sst xmlns="{S_NS}"><si><t>Kanji</t><rPh><t>kana</t></rPh></si></sst>')
        assert table[0] == "Kanji"

    def test_out_of_range_index_returns_literal(self):
        table = _table(f'<sst xmlns="{S_NS}"><si><t>Only</t></si></sst>')
        assert table.lookup("5") == "5"

    def test_non_numeric_index_returns_literal(self):
        assert SharedStringTable(["x"]).lookup("abc") == "abc"

    def test_missing_part_is_empty(self):
        with PackageReader.open(build_zip({"xl/workbook.xml": "<workbook/>"})) as package:
            assert len(SharedStringTable.build(package)) == 0

    def test_malformed_part_is_empty(self):
        assert len(_table("<sst><si>")) == 0
