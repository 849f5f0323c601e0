"""
Screen layout and frame composition.

Provides:
- Rect: a screen rectangle in terminal cells
- split_vertical() / split_scrollbar(): carve the screen into panels
- draw_block(): a bordered, titled panel around a list of lines
- draw_scrollbar(): a one-column vertical scrollbar
- Frame: the composed screen (rows + optional cursor)

Every row produced here is exactly as wide, in terminal cells, as the
rectangle it was drawn for.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .utils import char_width, fit_to_width, truncate_to_width, visible_width

H_LINE = "─"
V_LINE = "│"
TOP_LEFT = "┌"
TOP_RIGHT = "┐"
BOTTOM_LEFT = "└"
BOTTOM_RIGHT = "┘"

SCROLL_BEGIN = "↑"
SCROLL_END = "↓"
SCROLL_TRACK = "║"
SCROLL_THUMB = "█"


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def inner(self) -> "Rect":
        """The area inside a one-cell border."""
        return Rect(self.x + 1, self.y + 1, max(0, self.width - 2), max(0, self.height - 2))


def split_vertical(area: Rect, bottom_height: int) -> tuple[Rect, Rect]:
    """
    Split *area* into a top panel and a bottom panel of *bottom_height* rows.

    The top panel keeps at least one row whenever the area has one to give.
    """
    bottom = max(0, min(bottom_height, area.height - 1))
    top = area.height - bottom
    return (
        Rect(area.x, area.y, area.width, top),
        Rect(area.x, area.y + top, area.width, bottom),
    )


def split_scrollbar(area: Rect) -> tuple[Rect, Rect]:
    """Split off the rightmost column of *area* for a scrollbar."""
    bar = 1 if area.width >= 1 else 0
    return (
        Rect(area.x, area.y, area.width - bar, area.height),
        Rect(area.x + area.width - bar, area.y, bar, area.height),
    )


# ─────────────────────────────────────────────────────────────────────────────
# Drawing
# ─────────────────────────────────────────────────────────────────────────────

def draw_block(area: Rect, title: str, lines: list[str]) -> list[str]:
    """Draw *lines* inside a titled border filling *area*."""
    if area.is_empty:
        return [""] * max(0, area.height)
    if area.width < 2 or area.height < 2:
        return [" " * area.width for _ in range(area.height)]

    inner_width = area.width - 2
    label = truncate_to_width(title, inner_width)
    top = TOP_LEFT + label + H_LINE * (inner_width - visible_width(label)) + TOP_RIGHT
    rows = [top]
    for i in range(area.height - 2):
        text = lines[i] if i < len(lines) else ""
        rows.append(V_LINE + fit_to_width(text, inner_width) + V_LINE)
    rows.append(BOTTOM_LEFT + H_LINE * inner_width + BOTTOM_RIGHT)
    return rows


def draw_scrollbar(height: int, position: int, length: int) -> list[str]:
    """
    Draw a vertical scrollbar *height* cells tall.

    *length* is the number of scroll positions (the max offset) and
    *position* the current one. Nothing to scroll draws an empty column.
    """
    if height <= 0:
        return []
    if length <= 0 or height < 3:
        return [" "] * height

    track = height - 2
    total = length + track
    thumb = max(1, min(track, round(track * track / total)))
    position = max(0, min(position, length))
    start = round(position * (track - thumb) / length)

    cells = [SCROLL_BEGIN]
    for i in range(track):
        cells.append(SCROLL_THUMB if start <= i < start + thumb else SCROLL_TRACK)
    cells.append(SCROLL_END)
    return cells


@dataclass
class Frame:
    """One composed screen: ``rows`` are exactly ``width`` cells each."""

    width: int
    height: int
    rows: list[str]
    cursor: Optional[tuple[int, int]] = None

    @classmethod
    def blank(cls, width: int, height: int) -> "Frame":
        return cls(width, height, [" " * max(0, width) for _ in range(max(0, height))])

    def paste(self, area: Rect, rows: list[str]) -> None:
        """Overwrite the cells of *area* with *rows* (each ``area.width`` cells)."""
        for i, text in enumerate(rows[:area.height]):
            y = area.y + i
            if not 0 <= y < self.height:
                continue
            row = self.rows[y]
            left = fit_to_width(truncate_to_width(row, area.x), area.x)
            right = _drop_columns(row, area.x + area.width)
            self.rows[y] = fit_to_width(left + fit_to_width(text, area.width) + right, self.width)


def _drop_columns(text: str, columns: int) -> str:
    """Remove the first *columns* cells of *text*."""
    taken = 0
    for i, ch in enumerate(text):
        if taken >= columns:
            return text[i:]
        taken += char_width(ch)
    return ""
