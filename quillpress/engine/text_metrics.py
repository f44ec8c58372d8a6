"""
Text width estimation and greedy line wrapping.

Widths are estimated per code point rather than measured with font metrics:
Latin-1 glyphs count as half an em, everything else as a full em. The
estimator is a plain function so callers can pass a different one.
"""

from __future__ import annotations

from typing import Callable, List

WidthFunction = Callable[[str, float], float]


def estimate_glyph_width(codepoint: int, font_size: float) -> float:
    if codepoint > 255:
        return font_size
    return font_size * 0.5


def estimate_text_width(text: str, font_size: float) -> float:
    return sum(estimate_glyph_width(ord(char), font_size) for char in text)


def _split_word(word: str, font_size: float, max_width: float, measure: WidthFunction) -> List[str]:
    """Break a word that is wider than a line at character boundaries."""
    chunks: List[str] = []
    current = ""
    for char in word:
        if current and measure(current + char, font_size) > max_width:
            chunks.append(current)
            current = char
        else:
            current += char
    if current:
        chunks.append(current)
    return chunks


def wrap_text(
    text: str,
    font_size: float,
    max_width: float,
    measure: WidthFunction = estimate_text_width,
) -> List[str]:
    """
    Wrap ``text`` into lines no wider than ``max_width``.

    Words are packed greedily; explicit newlines always start a new line and
    an empty segment yields an empty line. A word that cannot fit on a line of
    its own is split across lines.
    """
    lines: List[str] = []
    for segment in text.split("\n"):
        words = segment.split()
        if not words:
            lines.append("")
            continue
        current = ""
        for word in words:
            candidate = f"{current} {word}" if current else word
            if measure(candidate, font_size) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
                current = ""
            if measure(word, font_size) <= max_width:
                current = word
            else:
                chunks = _split_word(word, font_size, max_width, measure)
                lines.extend(chunks[:-1])
                current = chunks[-1]
        if current:
            lines.append(current)
    return lines
