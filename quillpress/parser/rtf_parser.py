"""
Rich Text Format model builder.

RTF is reduced to plain text by a sequence of regex passes; only paragraph
breaks survive. Formatting, tables and pictures are discarded.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from ..config import ConversionOptions
from ..models.blocks import ContentBlock, Paragraph
from .base import ModelBuilder

logger = logging.getLogger(__name__)

RTF_FONT_SIZE = 11.0

# Private-use placeholders keep escaped and decoded literals out of the control-word passes.
_ESCAPES = {"\\": "\ue000", "{": "\ue001", "}": "\ue002"}
_RESTORE = {placeholder: literal for literal, placeholder in _ESCAPES.items()}

_ESCAPED_LITERAL = re.compile(r"\\([\\{}])")
_DESTINATION_START = re.compile(r"\{\s*\\(?:\*|fonttbl|colortbl|stylesheet|info|pict|listtable|listoverridetable|generator)(?![a-zA-Z])")
_UNICODE_ESCAPE = re.compile(r"\\u(-?\d+) ?(?:\\'[0-9a-fA-F]{2}|[^\\{}\s])?")
_LINE_BREAK = re.compile(r"\\(?:par|line|sect|page|row)(?![a-zA-Z])-?\d* ?")
_SPACE_BREAK = re.compile(r"\\(?:tab|cell)(?![a-zA-Z])-?\d* ?")
_CONTROL_SYMBOLS = {"~": " ", "-": "", "_": "-"}
_CONTROL_SYMBOL = re.compile(r"\\([~\-_])")
_CONTROL_WORD = re.compile(r"\\[a-zA-Z]+-?\d* ?")
_HEX_ESCAPE = re.compile(r"\\'([0-9a-fA-F]{2})")
_NEWLINES = re.compile(r"\n+")
_DELIMITING_NEWLINE = re.compile(r"(\\[a-zA-Z]+-?\d*)\r?\n")


def _remove_destinations(text: str) -> str:
    """Drop whole groups that never carry body text (font tables, metadata, pictures)."""
    pieces: List[str] = []
    position = 0
    while True:
        match = _DESTINATION_START.search(text, position)
        if match is None:
            pieces.append(text[position:])
            break
        pieces.append(text[position:match.start()])
        depth = 0
        index = match.start()
        while index < len(text):
            char = text[index]
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    break
            index += 1
        position = index + 1
    return "".join(pieces)


def _protect(char: str) -> str:
    return _ESCAPES.get(char, char)


def _decode_hex(match: re.Match) -> str:
    value = int(match.group(1), 16)
    try:
        return _protect(bytes([value]).decode("cp1252"))
    except UnicodeDecodeError:
        return _protect(chr(value))


def _decode_unicode(match: re.Match) -> str:
    value = int(match.group(1))
    if value < 0:
        value += 65536
    return _protect(chr(value))


def strip_rtf(text: str) -> str:
    """
    Convert RTF source to plain text with one line per paragraph.

    ``\\par``, ``\\line``, ``\\sect``, ``\\page`` and ``\\row`` become line
    breaks; ``\\tab`` and ``\\cell`` become spaces. Line breaks in the RTF
    source only delimit control words and are otherwise ignored.
    """
    text = _DELIMITING_NEWLINE.sub(r"\1 ", text)
    text = text.replace("\r", "").replace("\n", "")
    text = _ESCAPED_LITERAL.sub(lambda m: _ESCAPES[m.group(1)], text)
    text = _remove_destinations(text)
    text = _UNICODE_ESCAPE.sub(_decode_unicode, text)
    text = _LINE_BREAK.sub("\n", text)
    text = _SPACE_BREAK.sub(" ", text)
    text = _CONTROL_SYMBOL.sub(lambda m: _CONTROL_SYMBOLS[m.group(1)], text)
    text = _HEX_ESCAPE.sub(_decode_hex, text)
    text = _CONTROL_WORD.sub("", text)
    text = text.replace("{", "").replace("}", "")
    text = "".join(_RESTORE.get(char, char) for char in text)
    text = _NEWLINES.sub("\n", text)
    return "\n".join(line.rstrip() for line in text.strip().split("\n"))


def decode_rtf_bytes(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


class RTFParser(ModelBuilder):
    """Builds one paragraph per non-empty line of an RTF document."""

    format_name = "rtf"

    def __init__(self, data: bytes, options: Optional[ConversionOptions] = None):
        super().__init__(options)
        self.data = data

    def build(self) -> List[ContentBlock]:
        source = decode_rtf_bytes(self.data)
        if not source.lstrip().startswith("{\\rtf"):
            logger.warning("Input lacks an RTF header, treating it as RTF anyway")
        text = strip_rtf(source)
        blocks: List[ContentBlock] = [
            Paragraph.from_text(line, style_name="RTF Line", font_size=RTF_FONT_SIZE)
            for line in text.split("\n")
            if line.strip()
        ]
        logger.info(f"RTF text produced {len(blocks)} line(s)")
        return blocks
