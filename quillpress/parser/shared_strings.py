"""Shared string table of a spreadsheet package."""

from __future__ import annotations

import logging
from typing import Iterable, List

from ..exceptions import EntryNotFoundError, UnitParseError
from .namespaces import SPREADSHEET_NS, qn
from .package_reader import PackageReader

logger = logging.getLogger(__name__)

SHARED_STRINGS_PART = "xl/sharedStrings.xml"


class SharedStringTable:
    """Ordered, read-only pool of strings referenced by index from cells."""

    def __init__(self, strings: Iterable[str] = ()):
        self._strings: List[str] = list(strings)

    @classmethod
    def build(cls, package: PackageReader, part_name: str = SHARED_STRINGS_PART) -> "SharedStringTable":
        """
        Parse the shared strings part.

        Each ``si`` entry concatenates its ``t`` runs in document order with no
        separator. Phonetic hints (``rPh``) are not part of the cell text. A
        missing part is an empty table; a malformed part is logged and also
        yields an empty table.
        """
        try:
            root = package.read_xml(part_name)
        except EntryNotFoundError:
            return cls()
        except UnitParseError as exc:
            logger.warning(f"Ignoring malformed shared strings: {exc}")
            return cls()

        strings = [cls._string_item_text(item) for item in root.iter(qn(SPREADSHEET_NS, "si"))]
        logger.debug(f"Loaded {len(strings)} shared strings")
        return cls(strings)

    @staticmethod
    def _string_item_text(item) -> str:
        parts: List[str] = []
        phonetic_tag = qn(SPREADSHEET_NS, "rPh")
        for text_node in item.iter(qn(SPREADSHEET_NS, "t")):
            parent = text_node.getparent()
            if parent is not None and parent.tag == phonetic_tag:
                continue
            if text_node.text:
                parts.append(text_node.text)
        return "".join(parts)

    def __len__(self) -> int:
        return len(self._strings)

    def __getitem__(self, index: int) -> str:
        return self._strings[index]

    def lookup(self, index_text: str) -> str:
        """
        Resolve a cell's shared string reference.

        Non-numeric or out-of-range references fall back to the literal
        reference text instead of failing the caller.
        """
        try:
            index = int(str(index_text).strip())
        except (TypeError, ValueError):
            logger.warning(f"Shared string reference {index_text!r} is not an index")
            return str(index_text)
        if 0 <= index < len(self._strings):
            return self._strings[index]
        logger.warning(f"Shared string index {index} out of range ({len(self._strings)} entries)")
        return str(index_text)
