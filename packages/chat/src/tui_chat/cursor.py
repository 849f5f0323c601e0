"""
Cursor projection — buffer cursor to (row, col) inside the visible input window.
"""
from __future__ import annotations

from .buffer import TextBuffer
from .utils import char_width
from .viewport import MAX_VISIBLE_LINES, content_width, decorate, locate_cursor_row
from .wrap import wrap


def project_cursor(
    buffer: TextBuffer,
    scroll_offset: int,
    width: int,
    capacity: int = MAX_VISIBLE_LINES,
) -> tuple[int, int] | None:
    """
    Map the buffer cursor onto the rendered input window.

    Rebuilds the same prefixed rows the viewport renders, joins the visible
    slice with ``\\n`` and walks it one scalar value at a time until the
    running offset reaches the cursor's display index. Rows count the breaks
    passed, columns add up cell widths and reset on each break. The returned
    row is relative to the first visible row and the column, in terminal
    cells, includes the prompt prefix.

    Returns None when the panel has no content area or when the cursor falls
    outside the visible slice (mismatched offset or capacity).
    """
    cw = content_width(width)
    if cw == 0 or capacity <= 0:
        return None

    rows = wrap(buffer.content, cw)
    display = [decorate(row) for row in rows]
    window = display[scroll_offset:scroll_offset + capacity]
    if scroll_offset < 0 or not window:
        return None

    _, col = buffer.line_col()
    cursor_row = locate_cursor_row(buffer, rows)
    row = rows[cursor_row]

    # Display index: every row before the cursor row plus its break, then the
    # row's prefix and the cursor's column inside the row.
    display_index = sum(len(display[i]) + 1 for i in range(cursor_row))
    display_index += len(display[cursor_row]) - len(row.text) + col - row.start
    skipped = sum(len(display[i]) + 1 for i in range(scroll_offset))
    target = display_index - skipped
    if target < 0:
        return None

    visible_text = "\n".join(window)
    current_row = 0
    current_col = 0
    offset = 0
    for ch in visible_text:
        if offset == target:
            return current_row, current_col
        if ch == "\n":
            current_row += 1
            current_col = 0
        else:
            current_col += char_width(ch)
        offset += 1
    if offset == target:
        return current_row, current_col
    return None
