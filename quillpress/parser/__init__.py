"""
Input parsers.

Each supported format has a model builder that turns the input into an
ordered list of content blocks. Zip-based formats share the package reader,
relationship resolution and shared-string table.
"""

from typing import Dict, Type

from .base import ModelBuilder, PackageModelBuilder
from .document_parser import DocumentParser
from .epub_parser import EpubParser
from .package_reader import PackageReader
from .presentation_parser import PresentationParser
from .relationships_parser import RelationshipMap, RelationshipsParser
from .rtf_parser import RTFParser, strip_rtf
from .shared_strings import SharedStringTable
from .spreadsheet_parser import SpreadsheetParser

PACKAGE_BUILDERS: Dict[str, Type[PackageModelBuilder]] = {
    "xlsx": SpreadsheetParser,
    "pptx": PresentationParser,
    "docx": DocumentParser,
    "epub": EpubParser,
}

__all__ = [
    "ModelBuilder",
    "PackageModelBuilder",
    "DocumentParser",
    "EpubParser",
    "PackageReader",
    "PresentationParser",
    "RelationshipMap",
    "RelationshipsParser",
    "RTFParser",
    "strip_rtf",
    "SharedStringTable",
    "SpreadsheetParser",
    "PACKAGE_BUILDERS",
]
