"""XML namespaces used across the format parsers."""

from __future__ import annotations

REL_NS = "http://schemas.openxmlformats.org/package/2006/relationships"
OFFICE_REL_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
SPREADSHEET_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
PRESENTATION_NS = "http://schemas.openxmlformats.org/presentationml/2006/main"
DRAWING_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
WORD_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
WORD_DRAWING_NS = "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing"
PICTURE_NS = "http://schemas.openxmlformats.org/drawingml/2006/picture"
CONTAINER_NS = "urn:oasis:names:tc:opendocument:xmlns:container"
OPF_NS = "http://www.idpf.org/2007/opf"
XHTML_NS = "http://www.w3.org/1999/xhtml"

NS = {
    "a": DRAWING_NS,
    "p": PRESENTATION_NS,
    "r": OFFICE_REL_NS,
    "s": SPREADSHEET_NS,
    "w": WORD_NS,
    "wp": WORD_DRAWING_NS,
    "pic": PICTURE_NS,
    "rel": REL_NS,
    "ocf": CONTAINER_NS,
    "opf": OPF_NS,
}


def qn(namespace: str, tag: str) -> str:
    """Clark-notation qualified name: ``{namespace}tag``."""
    return f"{{{namespace}}}{tag}"


def local_name(tag) -> str:
    """Strip the namespace from an element tag. Comments and PIs yield ''."""
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]
