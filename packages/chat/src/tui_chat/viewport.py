"""
Input viewport — the wrapped, scrolled view over a TextBuffer.

The input panel reserves two columns for its border and two for the prompt
prefix, shows at most ``max_visible_lines`` visual lines and scrolls so the
cursor's visual line is always visible.
"""
from __future__ import annotations

from typing import NamedTuple

from .buffer import TextBuffer
from .wrap import WrappedLine, wrap

PROMPT = "> "
CONTINUATION = "  "
BORDER_ROWS = 2
RESERVED_COLUMNS = 4  # 2 for the border, 2 for the prompt
MAX_VISIBLE_LINES = 10


class InputView(NamedTuple):
    lines: list[str]
    scroll_offset: int


def content_width(width: int) -> int:
    """Columns left for text once the border and prompt are taken out."""
    return max(0, width - RESERVED_COLUMNS)


def decorate(line: WrappedLine) -> str:
    """Prefix a visual line: prompt on a logical line's first row, indent on wrapped rows."""
    return (PROMPT if line.start == 0 else CONTINUATION) + line.text


def locate_cursor_row(buffer: TextBuffer, rows: list[WrappedLine]) -> int:
    """
    Index of the visual row holding the buffer cursor.

    A cursor right after the last character of a full-width row stays on
    that row when it ends its logical line, and moves to the next row when
    the logical line continues.
    """
    line, col = buffer.line_col()
    found = 0
    for i, row in enumerate(rows):
        if row.source_line > line:
            break
        if row.source_line == line and row.start <= col:
            found = i
    return found


class InputViewport:
    """
    Scroll state for the input panel.

    Owns a TextBuffer (or shares one handed in by the caller) and keeps
    ``scroll_offset`` inside ``[0, max(0, total - capacity)]`` on every render.
    """

    def __init__(
        self,
        buffer: TextBuffer | None = None,
        max_visible_lines: int = MAX_VISIBLE_LINES,
    ) -> None:
        self._buffer = buffer if buffer is not None else TextBuffer()
        self._max_visible_lines = max(1, max_visible_lines)
        self._scroll_offset = 0

    @property
    def buffer(self) -> TextBuffer:
        return self._buffer

    @property
    def scroll_offset(self) -> int:
        return self._scroll_offset

    @property
    def max_visible_lines(self) -> int:
        return self._max_visible_lines

    def reset(self) -> None:
        self._scroll_offset = 0

    # ── Layout ──────────────────────────────────────────────────────────────────

    def layout(self, width: int) -> list[WrappedLine]:
        """Wrap the buffer for a panel *width* columns wide."""
        return wrap(self._buffer.content, content_width(width))

    def display_rows(self, width: int) -> list[str]:
        """Every visual row of the buffer with its prompt prefix."""
        return [decorate(line) for line in self.layout(width)]

    def height_for(self, width: int) -> int:
        """Rows the panel needs at *width*: visible lines plus the two borders."""
        if content_width(width) == 0:
            return BORDER_ROWS
        total = len(self.layout(width))
        return min(total, self._max_visible_lines) + BORDER_ROWS

    def visible_capacity(self, height: int | None = None) -> int:
        """Visual lines shown at once, reduced when the panel is shorter than usual."""
        if height is None:
            return self._max_visible_lines
        return max(1, min(self._max_visible_lines, height - BORDER_ROWS))

    def cursor_row(self, rows: list[WrappedLine]) -> int:
        return locate_cursor_row(self._buffer, rows)

    # ── Render ──────────────────────────────────────────────────────────────────

    def render(self, width: int, height: int | None = None) -> InputView:
        """
        Recompute the wrap at *width*, scroll to keep the cursor in view and
        return the visible decorated rows together with the settled offset.
        """
        if content_width(width) == 0:
            return InputView([], self._scroll_offset)

        rows = self.layout(width)
        capacity = self.visible_capacity(height)
        cursor_row = self.cursor_row(rows)

        if cursor_row < self._scroll_offset:
            self._scroll_offset = cursor_row
        elif cursor_row >= self._scroll_offset + capacity:
            self._scroll_offset = cursor_row - capacity + 1

        max_scroll = max(0, len(rows) - capacity)
        self._scroll_offset = max(0, min(self._scroll_offset, max_scroll))

        visible = rows[self._scroll_offset:self._scroll_offset + capacity]
        return InputView([decorate(row) for row in visible], self._scroll_offset)
