"""Relationships parser for OPC packages."""

from __future__ import annotations

import logging
import posixpath
from dataclasses import dataclass, field
from typing import Dict, Iterator, Mapping, Optional

from ..exceptions import EntryNotFoundError, ResourceResolutionError, UnitParseError
from .namespaces import REL_NS, qn
from .package_reader import PackageReader

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Relationship:
    id: str
    type: str
    target: str
    external: bool = False


@dataclass(slots=True)
class RelationshipMap(Mapping[str, str]):
    """Read-only mapping of relationship id to resolved archive path."""

    owner: str
    relationships: Dict[str, Relationship] = field(default_factory=dict)

    def __getitem__(self, rel_id: str) -> str:
        return self.relationships[rel_id].target

    def __iter__(self) -> Iterator[str]:
        return iter(self.relationships)

    def __len__(self) -> int:
        return len(self.relationships)

    def get_relationship(self, rel_id: str) -> Optional[Relationship]:
        return self.relationships.get(rel_id)

    def by_type(self, suffix: str) -> Dict[str, str]:
        """Return ``id -> target`` for relationships whose type ends with ``suffix``."""
        return {rel.id: rel.target for rel in self.relationships.values() if rel.type.endswith(suffix)}


def rels_path_for(owner_part: str) -> str:
    """``dir/name.xml`` -> ``dir/_rels/name.xml.rels``."""
    directory, name = posixpath.split(owner_part)
    if directory:
        return f"{directory}/_rels/{name}.rels"
    return f"_rels/{name}.rels"


def resolve_target(target: str, owner_part: str) -> str:
    """
    Resolve a relationship target against the part that owns it.

    ``../`` targets drop the leading ``../`` and are prefixed with the archive
    root segment of the owner's directory, so ``../media/x.png`` owned by
    ``ppt/slides/slide1.xml`` becomes ``ppt/media/x.png``.
    """
    if not target:
        return ""
    if target.startswith("/"):
        return target.lstrip("/")

    owner_dir = posixpath.dirname(owner_part)
    if target.startswith("../"):
        root_segment = owner_dir.split("/", 1)[0] if owner_dir else ""
        remainder = target
        while remainder.startswith("../"):
            remainder = remainder[3:]
        return f"{root_segment}/{remainder}" if root_segment else remainder

    if owner_dir:
        return posixpath.normpath(f"{owner_dir}/{target}")
    return posixpath.normpath(target)


class RelationshipsParser:
    """Parse and cache the ``_rels/*.rels`` parts of one package."""

    def __init__(self, package_reader: PackageReader):
        self.package_reader = package_reader
        self._cache: Dict[str, RelationshipMap] = {}

    def resolve(self, owner_part: str) -> RelationshipMap:
        """
        Build the relationship map of ``owner_part``.

        A missing ``.rels`` part yields an empty map; malformed XML is logged
        and also yields an empty map.
        """
        if owner_part in self._cache:
            return self._cache[owner_part]

        rel_map = RelationshipMap(owner=owner_part)
        rels_path = rels_path_for(owner_part)
        try:
            root = self.package_reader.read_xml(rels_path)
        except EntryNotFoundError:
            self._cache[owner_part] = rel_map
            return rel_map
        except UnitParseError as exc:
            logger.warning(f"Ignoring malformed relationships for {owner_part}: {exc}")
            self._cache[owner_part] = rel_map
            return rel_map

        for rel_element in root.iter(qn(REL_NS, "Relationship")):
            rel_id = rel_element.get("Id", "")
            target = rel_element.get("Target", "")
            if not rel_id or not target:
                continue
            external = rel_element.get("TargetMode", "Internal") == "External"
            resolved = target if external else resolve_target(target, owner_part)
            rel_map.relationships[rel_id] = Relationship(
                id=rel_id,
                type=rel_element.get("Type", ""),
                target=resolved,
                external=external,
            )

        logger.debug(f"Resolved {len(rel_map)} relationships for {owner_part}")
        self._cache[owner_part] = rel_map
        return rel_map

    def target_bytes(self, owner_part: str, rel_id: Optional[str]) -> bytes:
        """
        Read the bytes a relationship points to.

        Raises:
            ResourceResolutionError: If the id is unknown, external or dangling
        """
        if not rel_id:
            raise ResourceResolutionError(f"Missing relationship id in {owner_part}")
        rel = self.resolve(owner_part).get_relationship(rel_id)
        if rel is None:
            raise ResourceResolutionError(f"Unknown relationship {rel_id}", details=owner_part)
        if rel.external:
            raise ResourceResolutionError(f"Relationship {rel_id} points outside the package", details=rel.target)
        try:
            return self.package_reader.read(rel.target)
        except EntryNotFoundError as exc:
            raise ResourceResolutionError(f"Relationship {rel_id} target is missing", details=rel.target) from exc

    def image_bytes(self, owner_part: str, rel_id: Optional[str]) -> Optional[bytes]:
        """Like :meth:`target_bytes` but logs and returns None instead of raising."""
        try:
            return self.target_bytes(owner_part, rel_id)
        except ResourceResolutionError as exc:
            logger.warning(f"Skipping image: {exc}")
            return None
