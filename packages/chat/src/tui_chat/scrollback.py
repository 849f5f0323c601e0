"""
Scrollback — the chat history viewport.

Entries are wrapped lazily against the last rendered width and flattened into
one list of visual lines. The view follows the bottom until the user scrolls
up, and follows again once they scroll back down to the bottom.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from .wrap import wrap_text


@dataclass(frozen=True)
class ChatEntry:
    sender: str
    content: str

    def display_text(self) -> str:
        return f"{self.sender}: {self.content}"


class ScrollbackView(NamedTuple):
    lines: list[str]
    position: int  # scroll offset of the first visible line
    length: int    # max scroll, the scrollbar's content length


class Scrollback:
    """
    Ordered chat entries plus scroll state.

    Invariant: while ``auto_follow`` is set, ``scroll_offset`` equals
    ``max_scroll`` after every append and render.
    """

    def __init__(self) -> None:
        self._entries: list[ChatEntry] = []
        self._lines: list[str] = []
        self._wrapped_count = 0
        self._width: int | None = None
        self._capacity = 0
        self._scroll_offset = 0
        self._auto_follow = True

    # ── Accessors ──────────────────────────────────────────────────────────────

    @property
    def entries(self) -> tuple[ChatEntry, ...]:
        return tuple(self._entries)

    @property
    def scroll_offset(self) -> int:
        return self._scroll_offset

    @property
    def auto_follow(self) -> bool:
        return self._auto_follow

    @property
    def max_scroll(self) -> int:
        """Largest valid offset for the last rendered width and capacity (0 before any render)."""
        if self._width is None:
            return 0
        return max(0, len(self._layout()) - self._capacity)

    def __len__(self) -> int:
        return len(self._entries)

    # ── Mutation ────────────────────────────────────────────────────────────────

    def append(self, entry: ChatEntry) -> None:
        self._entries.append(entry)
        if self._auto_follow:
            self._scroll_offset = self.max_scroll

    def add(self, sender: str, content: str) -> ChatEntry:
        entry = ChatEntry(sender, content)
        self.append(entry)
        return entry

    def scroll_up(self, lines: int) -> None:
        self._scroll_offset = self._clamp(self._scroll_offset - lines)
        self._auto_follow = False

    def scroll_down(self, lines: int) -> None:
        max_scroll = self.max_scroll
        self._scroll_offset = self._clamp(self._scroll_offset + lines)
        if self._scroll_offset == max_scroll:
            self._auto_follow = True

    def scroll_to_bottom(self) -> None:
        self._auto_follow = True
        self._scroll_offset = self.max_scroll

    # ── Render ──────────────────────────────────────────────────────────────────

    def render(self, width: int, visible_capacity: int) -> ScrollbackView:
        """
        Lay the entries out at *width*, settle the offset for
        *visible_capacity* rows and return the visible slice.
        """
        if width <= 0:
            return ScrollbackView([], self._scroll_offset, self.max_scroll)

        if width != self._width:
            self._width = width
            self._lines = []
            self._wrapped_count = 0
        self._capacity = max(0, visible_capacity)

        lines = self._layout()
        max_scroll = max(0, len(lines) - self._capacity)
        self._scroll_offset = min(self._scroll_offset, max_scroll)
        if self._auto_follow:
            self._scroll_offset = max_scroll

        visible = lines[self._scroll_offset:self._scroll_offset + self._capacity]
        return ScrollbackView(visible, self._scroll_offset, max_scroll)

    # ── Private helpers ────────────────────────────────────────────────────────

    def _layout(self) -> list[str]:
        # Only entries appended since the last layout need wrapping.
        if self._width is None:
            return self._lines
        for entry in self._entries[self._wrapped_count:]:
            self._lines.extend(wrap_text(entry.display_text(), self._width))
        self._wrapped_count = len(self._entries)
        return self._lines

    def _clamp(self, offset: int) -> int:
        return max(0, min(offset, self.max_scroll))
