"""
Package reader for zip-based office containers.

Opens an in-memory XLSX/PPTX/DOCX/EPUB buffer, lists its parts and reads
part bytes or parsed XML.
"""

import io
import logging
import zipfile
from typing import Dict, List, Optional

from lxml import etree

from ..exceptions import CorruptArchiveError, EntryNotFoundError, UnitParseError

logger = logging.getLogger(__name__)

# Entities and network lookups are never needed for office parts.
_XML_PARSER = etree.XMLParser(resolve_entities=False, no_network=True, huge_tree=False, remove_blank_text=False)


def parse_xml_bytes(data: bytes, part_name: str = "<memory>") -> etree._Element:
    """Parse XML bytes with the hardened parser, raising UnitParseError on failure."""
    try:
        return etree.fromstring(data, parser=_XML_PARSER)
    except (etree.XMLSyntaxError, ValueError) as exc:
        raise UnitParseError(f"Malformed XML in {part_name}", details=str(exc)) from exc


class PackageReader:
    """
    Read-only view over a zip container held in memory.

    The central directory is validated when the reader is opened; a buffer
    that is not a zip archive fails before any entry is exposed.
    """

    def __init__(self, zip_file: zipfile.ZipFile, size: int = 0):
        """
        Initialize package reader.

        Args:
            zip_file: Already opened and validated ZipFile
            size: Size of the source buffer in bytes
        """
        self._zip_file: Optional[zipfile.ZipFile] = zip_file
        self._names: List[str] = [info.filename for info in zip_file.infolist() if not info.is_dir()]
        self._name_set = set(self._names)
        self._cache: Dict[str, bytes] = {}
        self.size = size

    @classmethod
    def open(cls, data: bytes) -> "PackageReader":
        """
        Open a zip container from raw bytes.

        Raises:
            CorruptArchiveError: If the buffer is not a structurally valid zip archive
        """
        if not data:
            raise CorruptArchiveError("Empty input is not a zip container")

        stream = io.BytesIO(bytes(data))
        if not zipfile.is_zipfile(stream):
            raise CorruptArchiveError("Input is not a zip container", details="end of central directory not found")

        stream.seek(0)
        try:
            zip_file = zipfile.ZipFile(stream, "r")
        except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, OSError, ValueError) as exc:
            raise CorruptArchiveError("Corrupt zip container", details=str(exc)) from exc

        logger.debug(f"Opened container with {len(zip_file.infolist())} entries ({len(data)} bytes)")
        return cls(zip_file, size=len(data))

    @property
    def closed(self) -> bool:
        return self._zip_file is None

    def list(self) -> List[str]:
        """Return entry names in archive order (directories excluded)."""
        return list(self._names)

    def exists(self, part_name: str) -> bool:
        return part_name in self._name_set

    def read(self, part_name: str) -> bytes:
        """
        Read the bytes of a part.

        Raises:
            EntryNotFoundError: If the part does not exist
            CorruptArchiveError: If the entry data cannot be decompressed
        """
        if part_name in self._cache:
            return self._cache[part_name]
        if self._zip_file is None:
            raise ValueError("Package is closed")
        if part_name not in self._name_set:
            raise EntryNotFoundError(f"Part not found: {part_name}")

        try:
            content = self._zip_file.read(part_name)
        except (zipfile.BadZipFile, EOFError, OSError) as exc:
            raise CorruptArchiveError(f"Cannot read part {part_name}", details=str(exc)) from exc

        self._cache[part_name] = content
        return content

    def read_if_exists(self, part_name: str) -> Optional[bytes]:
        """Read a part, returning None when it is absent."""
        try:
            return self.read(part_name)
        except EntryNotFoundError:
            return None

    def read_xml(self, part_name: str) -> etree._Element:
        """
        Read and parse an XML part.

        Raises:
            EntryNotFoundError: If the part does not exist
            UnitParseError: If the part is not well-formed XML
        """
        return parse_xml_bytes(self.read(part_name), part_name)

    def close(self) -> None:
        if self._zip_file is not None:
            self._zip_file.close()
        self._zip_file = None
        self._cache.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
