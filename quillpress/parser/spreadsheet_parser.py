"""
Spreadsheet (SpreadsheetML / XLSX) model builder.

Each worksheet becomes one table block; worksheets are separated by page
breaks and ordered by the number in their part name.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from ..exceptions import EntryNotFoundError, FormatError, UnitParseError
from ..models.blocks import ContentBlock, Paragraph, Row, Run, Table
from .base import PackageModelBuilder
from .namespaces import OFFICE_REL_NS, SPREADSHEET_NS, qn

logger = logging.getLogger(__name__)

WORKBOOK_PART = "xl/workbook.xml"
WORKSHEET_PREFIX = "xl/worksheets/"

SHEET_FONT_SIZE = 9.0
SHEET_TITLE_FONT_SIZE = 12.0

_CELL_REF = re.compile(r"^([A-Za-z]+)(\d*)$")


def column_index(cell_ref: Optional[str]) -> Optional[int]:
    """Zero-based column of an ``A1``-style reference (``C5`` -> 2)."""
    if not cell_ref:
        return None
    match = _CELL_REF.match(cell_ref.strip())
    if not match:
        return None
    index = 0
    for char in match.group(1).upper():
        index = index * 26 + (ord(char) - ord("A") + 1)
    return index - 1


class SpreadsheetParser(PackageModelBuilder):
    """Builds table blocks from the worksheets of an XLSX package."""

    format_name = "xlsx"

    def build(self) -> List[ContentBlock]:
        sheets = self.numbered_parts(WORKSHEET_PREFIX, "sheet")
        if not sheets and not self.package.exists(WORKBOOK_PART):
            raise FormatError("Not a spreadsheet package", details="no workbook or worksheet parts")

        names = self._sheet_names()
        units = []
        for position, (number, part_name) in enumerate(sheets, start=1):
            units.append((names.get(part_name) or f"Sheet {position}", part_name))

        logger.info(f"Spreadsheet has {len(units)} worksheet(s)")
        return self.build_units(units, lambda index, part: self._build_sheet(units[index][0], part))

    def _sheet_names(self) -> Dict[str, str]:
        """Map worksheet part names to their display names from the workbook."""
        try:
            workbook = self.package.read_xml(WORKBOOK_PART)
        except (EntryNotFoundError, UnitParseError) as exc:
            logger.debug(f"Workbook sheet names unavailable: {exc}")
            return {}

        rel_map = self.relationships.resolve(WORKBOOK_PART)
        names: Dict[str, str] = {}
        for sheet in workbook.iter(qn(SPREADSHEET_NS, "sheet")):
            rel_id = sheet.get(qn(OFFICE_REL_NS, "id"))
            name = sheet.get("name")
            if rel_id and name and rel_id in rel_map:
                names[rel_map[rel_id]] = name
        return names

    def _build_sheet(self, title: str, part_name: str) -> List[ContentBlock]:
        root = self.package.read_xml(part_name)
        rows: List[Row] = []
        for row_element in root.iter(qn(SPREADSHEET_NS, "row")):
            values = self._row_values(row_element)
            if any(values):
                rows.append(Row.from_values(values))

        blocks: List[ContentBlock] = []
        if self.options.sheet_titles:
            blocks.append(
                Paragraph(
                    runs=[Run(text=title, bold=True, is_heading=True)],
                    style_name="Sheet Title",
                    font_size=SHEET_TITLE_FONT_SIZE,
                )
            )
        if rows:
            blocks.append(Table(rows=rows, column_sizing="content", font_size=SHEET_FONT_SIZE))
        logger.debug(f"Sheet {title!r}: {len(rows)} non-empty row(s)")
        return blocks

    def _row_values(self, row_element) -> List[str]:
        values: List[str] = []
        for cell in row_element.iter(qn(SPREADSHEET_NS, "c")):
            column = column_index(cell.get("r"))
            if column is not None and column > len(values):
                values.extend([""] * (column - len(values)))
            value = self._cell_value(cell)
            if column is not None and column < len(values):
                values[column] = value
            else:
                values.append(value)
        return values

    def _cell_value(self, cell) -> str:
        cell_type = cell.get("t")
        value_node = cell.find(qn(SPREADSHEET_NS, "v"))
        raw = value_node.text if value_node is not None and value_node.text is not None else None

        if raw is not None:
            if cell_type == "s":
                return self.shared_strings.lookup(raw)
            if cell_type == "b":
                return "TRUE" if raw.strip() == "1" else "FALSE"
            return raw

        inline = cell.find(qn(SPREADSHEET_NS, "is"))
        if inline is not None:
            return "".join(node.text or "" for node in inline.iter(qn(SPREADSHEET_NS, "t")))
        return ""
