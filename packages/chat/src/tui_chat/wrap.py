"""
Line wrapping by terminal cells.

wrap() splits text on explicit line breaks, then packs each logical line into
visual lines holding the longest run of scalar values that fits in ``width``
columns. Breaks may fall mid-word.
"""
from __future__ import annotations

from typing import NamedTuple

from .utils import char_width


class WrappedLine(NamedTuple):
    """One visual line produced by wrap()."""

    source_line: int
    text: str
    start: int = 0  # scalar offset of text inside its logical line


def wrap(text: str, width: int) -> list[WrappedLine]:
    """
    Wrap *text* into visual lines at most *width* columns wide.

    Each explicit ``\\n`` segment wraps independently, so an explicit break
    always starts a new visual line and an empty segment yields exactly one
    empty visual line. A character wider than *width* gets a line to itself,
    and zero-width marks stay on the line of the character they follow.
    ``width <= 0`` cannot wrap: every segment comes back whole and callers
    are expected to have handled that case already.
    """
    segments = text.split("\n")
    if width <= 0:
        return [WrappedLine(i, seg) for i, seg in enumerate(segments)]

    lines: list[WrappedLine] = []
    for i, seg in enumerate(segments):
        start = 0
        cells = 0
        for pos, ch in enumerate(seg):
            w = char_width(ch)
            if cells + w > width and pos > start:
                lines.append(WrappedLine(i, seg[start:pos], start))
                start, cells = pos, 0
            cells += w
        lines.append(WrappedLine(i, seg[start:], start))
    return lines


def wrap_text(text: str, width: int) -> list[str]:
    """Like wrap() but returns only the visual text of each line."""
    return [line.text for line in wrap(text, width)]


def count_visual_lines(text: str, width: int) -> int:
    """Number of visual lines *text* occupies at *width* (min 1 per segment)."""
    if width <= 0:
        return text.count("\n") + 1
    return len(wrap(text, width))
