"""Common machinery for the per-format model builders."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Tuple

from ..config import ConversionOptions
from ..engine.isolation import collect_blocks, isolate
from ..models.blocks import ContentBlock, PageBreak
from .package_reader import PackageReader
from .relationships_parser import RelationshipsParser
from .shared_strings import SharedStringTable

logger = logging.getLogger(__name__)


class ModelBuilder(ABC):
    """Turns one input document into an ordered list of content blocks."""

    format_name: str = ""

    def __init__(self, options: Optional[ConversionOptions] = None):
        self.options = options or ConversionOptions.for_format(self.format_name)

    @abstractmethod
    def build(self) -> List[ContentBlock]:
        """Return the document's content blocks in document order."""


class PackageModelBuilder(ModelBuilder):
    """Builder for zip-based containers; one instance per conversion."""

    def __init__(
        self,
        package: PackageReader,
        relationships: Optional[RelationshipsParser] = None,
        shared_strings: Optional[SharedStringTable] = None,
        options: Optional[ConversionOptions] = None,
    ):
        super().__init__(options)
        self.package = package
        self.relationships = relationships or RelationshipsParser(package)
        self.shared_strings = shared_strings or SharedStringTable()

    def numbered_parts(self, prefix: str, stem: str) -> List[Tuple[int, str]]:
        """
        Find ``{prefix}{stem}N.xml`` parts ordered by N.

        Archive listing order is not meaningful, so ``sheet10`` must follow
        ``sheet2``.
        """
        pattern = re.compile(rf"^{re.escape(prefix)}{re.escape(stem)}(\d+)\.xml$")
        found: List[Tuple[int, str]] = []
        for name in self.package.list():
            match = pattern.match(name)
            if match:
                found.append((int(match.group(1)), name))
        found.sort(key=lambda item: item[0])
        return found

    def build_units(
        self,
        units: List[Tuple[str, str]],
        build_unit: Callable[[int, str], List[ContentBlock]],
    ) -> List[ContentBlock]:
        """
        Build each ``(label, part)`` unit in isolation, separated by page breaks.

        A failing unit contributes an error marker and the next unit is still
        processed.
        """
        blocks: List[ContentBlock] = []
        for index, (label, part_name) in enumerate(units):
            if index > 0:
                blocks.append(PageBreak(reason=label))
            result = isolate(label, build_unit, index, part_name)
            blocks.extend(collect_blocks(result))
            logger.debug(f"Built unit {label} from {part_name}")
        return blocks
