"""
Editable text buffer with a scalar-value cursor.

The buffer holds a Python ``str`` and a cursor expressed as an offset in
Unicode scalar values (code points). Every offset is therefore a character
boundary; ``byte_cursor`` gives the same position in UTF-8 bytes.
"""
from __future__ import annotations

_TAB_EXPANSION = "    "


def _clean_pasted_text(text: str) -> str:
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    expanded = normalized.replace("\t", _TAB_EXPANSION)
    return "".join(c for c in expanded if c == "\n" or ord(c) >= 32)


class TextBuffer:
    """
    Multi-line editable text with cursor navigation.

    All operations are total: out-of-range cursors are clamped, moves past an
    edge are no-ops, and nothing raises for any reachable state.
    """

    def __init__(self, text: str = "") -> None:
        self._content = text
        self._cursor = len(text)

    # ── Accessors ──────────────────────────────────────────────────────────────

    @property
    def content(self) -> str:
        return self._content

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def byte_cursor(self) -> int:
        """Cursor position as a UTF-8 byte offset into the content."""
        return len(self._content[:self._cursor].encode("utf-8"))

    def __len__(self) -> int:
        return len(self._content)

    def is_empty(self) -> bool:
        return not self._content

    def lines(self) -> list[str]:
        """Logical lines (split on explicit breaks)."""
        return self._content.split("\n")

    def line_col(self) -> tuple[int, int]:
        """
        Return the (logical line, column) of the cursor.

        Scans from line 0 and picks the first line whose cumulative span
        reaches the cursor, so a cursor sitting right after a line's last
        character belongs to that line rather than the next one.
        """
        self._clamp_cursor()
        pos = 0
        lines = self.lines()
        for i, line in enumerate(lines):
            if pos + len(line) >= self._cursor:
                return i, self._cursor - pos
            pos += len(line) + 1
        return len(lines) - 1, len(lines[-1])

    # ── Editing ────────────────────────────────────────────────────────────────

    def insert(self, ch: str) -> None:
        """Insert *ch* at the cursor and move the cursor past it."""
        if not ch:
            return
        self._clamp_cursor()
        self._content = self._content[:self._cursor] + ch + self._content[self._cursor:]
        self._cursor += len(ch)

    def insert_text(self, text: str) -> None:
        """
        Insert a pasted block as a single mutation.

        Line endings are normalized to ``\\n``, tabs expanded and other
        control characters dropped.
        """
        self.insert(_clean_pasted_text(text))

    def newline(self) -> None:
        self.insert("\n")

    def backspace(self) -> None:
        """Remove the scalar value before the cursor."""
        self._clamp_cursor()
        if self._cursor == 0:
            return
        self._content = self._content[:self._cursor - 1] + self._content[self._cursor:]
        self._cursor -= 1

    def delete(self) -> None:
        """Remove the scalar value after the cursor."""
        self._clamp_cursor()
        if self._cursor >= len(self._content):
            return
        self._content = self._content[:self._cursor] + self._content[self._cursor + 1:]

    def set_text(self, text: str) -> None:
        """Replace the whole content; the cursor moves to the end."""
        self._content = text
        self._cursor = len(text)

    def clear(self) -> None:
        self._content = ""
        self._cursor = 0

    def submit(self) -> str:
        """Return the content and reset the buffer. The only destructive read."""
        text = self._content
        self.clear()
        return text

    # ── Cursor movement ────────────────────────────────────────────────────────

    def cursor_left(self) -> None:
        self._clamp_cursor()
        if self._cursor > 0:
            self._cursor -= 1

    def cursor_right(self) -> None:
        self._clamp_cursor()
        if self._cursor < len(self._content):
            self._cursor += 1

    def cursor_up(self) -> None:
        line, col = self.line_col()
        if line > 0:
            self._move_to_line(line - 1, col)

    def cursor_down(self) -> None:
        line, col = self.line_col()
        if line < len(self.lines()) - 1:
            self._move_to_line(line + 1, col)

    def cursor_home(self) -> None:
        _, col = self.line_col()
        self._cursor -= col

    def cursor_end(self) -> None:
        line, col = self.line_col()
        self._cursor += len(self.lines()[line]) - col

    def move_cursor_to(self, index: int) -> None:
        """Place the cursor at *index*, clamped to the content."""
        self._cursor = max(0, min(index, len(self._content)))

    # ── Private helpers ────────────────────────────────────────────────────────

    def _clamp_cursor(self) -> None:
        # The cursor can go stale if the content was replaced underneath it.
        if self._cursor > len(self._content):
            self._cursor = len(self._content)
        elif self._cursor < 0:
            self._cursor = 0

    def _move_to_line(self, target: int, col: int) -> None:
        lines = self.lines()
        line_start = sum(len(lines[i]) + 1 for i in range(target))
        self._cursor = line_start + min(col, len(lines[target]))
