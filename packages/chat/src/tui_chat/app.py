"""
ChatApp — the chat controller.

Maps terminal input onto the input buffer and the scrollback, runs the
submit/reply flow and composes a Frame for a given screen size. The app
never touches the terminal itself; the runner feeds it input and draws the
frames it returns.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from .buffer import TextBuffer
from .config import ChatSettings
from .cursor import project_cursor
from .keybindings import ChatKeybindingsManager
from .keys import decode_kitty_printable, is_key_release
from .layout import Frame, Rect, draw_block, draw_scrollbar, split_scrollbar, split_vertical
from .scrollback import Scrollback
from .stdin_buffer import BRACKETED_PASTE_END, BRACKETED_PASTE_START
from .viewport import InputViewport

logger = logging.getLogger(__name__)

SIMULATED_REPLY = "Hello! This is a simulated response."

# Takes the submitted text, returns the reply to show (or None for no reply)
Responder = Callable[[str], Optional[str]]


def simulated_responder(text: str) -> str:
    return SIMULATED_REPLY


class ChatApp:
    """
    Interactive chat state: an input panel over a scrollback.

    ``handle_input`` consumes one raw terminal sequence, ``render`` lays the
    screen out and returns the frame plus the absolute cursor position.
    """

    def __init__(
        self,
        settings: ChatSettings | None = None,
        responder: Responder | None = simulated_responder,
        keybindings: ChatKeybindingsManager | None = None,
    ) -> None:
        self.settings = settings or ChatSettings()
        self.responder = responder
        self._keybindings = keybindings or ChatKeybindingsManager(self.settings.keybindings)
        self._buffer = TextBuffer()
        self._input = InputViewport(self._buffer, self.settings.max_input_lines)
        self._scrollback = Scrollback()
        self._should_quit = False
        self._cursor_pos: tuple[int, int] | None = None

    # ── Accessors ──────────────────────────────────────────────────────────────

    @property
    def buffer(self) -> TextBuffer:
        return self._buffer

    @property
    def input_viewport(self) -> InputViewport:
        return self._input

    @property
    def scrollback(self) -> Scrollback:
        return self._scrollback

    @property
    def keybindings(self) -> ChatKeybindingsManager:
        return self._keybindings

    @property
    def should_quit(self) -> bool:
        return self._should_quit

    @property
    def cursor_pos(self) -> tuple[int, int] | None:
        """Absolute (x, y) of the input cursor from the last render, if visible."""
        return self._cursor_pos

    def quit(self) -> None:
        self._should_quit = True

    # ── Input handling ──────────────────────────────────────────────────────────

    def handle_input(self, data: str) -> bool:
        """Apply one raw input sequence. Returns False if nothing used it."""
        if data.startswith(BRACKETED_PASTE_START) and data.endswith(BRACKETED_PASTE_END):
            self.on_paste(data[len(BRACKETED_PASTE_START):-len(BRACKETED_PASTE_END)])
            return True

        if is_key_release(data):
            return False

        action = self._keybindings.resolve(data)
        if action is not None:
            self._run_action(action)
            return True

        text = decode_kitty_printable(data)
        if text is None and _is_plain_text(data):
            text = data
        if text:
            self._buffer.insert(text)
            return True

        logger.debug("Unhandled input %r", data)
        return False

    def on_paste(self, text: str) -> None:
        self._buffer.insert_text(text)

    def _run_action(self, action: str) -> None:
        step = self.settings.scroll_step
        if action == "quit":
            self.quit()
        elif action == "submit":
            self.submit()
        elif action == "newLine":
            self._buffer.newline()
        elif action == "deleteCharBackward":
            self._buffer.backspace()
        elif action == "deleteCharForward":
            self._buffer.delete()
        elif action == "cursorLeft":
            self._buffer.cursor_left()
        elif action == "cursorRight":
            self._buffer.cursor_right()
        elif action == "cursorUp":
            self._buffer.cursor_up()
        elif action == "cursorDown":
            self._buffer.cursor_down()
        elif action == "cursorLineStart":
            self._buffer.cursor_home()
        elif action == "cursorLineEnd":
            self._buffer.cursor_end()
        elif action == "scrollUp":
            self._scrollback.scroll_up(step)
        elif action == "scrollDown":
            self._scrollback.scroll_down(step)
        elif action == "scrollLineUp":
            self._scrollback.scroll_up(1)
        elif action == "scrollLineDown":
            self._scrollback.scroll_down(1)

    def submit(self) -> str | None:
        """
        Take the input buffer and post it to the scrollback.

        Whitespace-only input is discarded (the buffer is still cleared).
        Returns the posted text, or None if nothing was posted.
        """
        text = self._buffer.submit()
        self._input.reset()
        if not text.strip():
            return None

        self._scrollback.add(self.settings.user_name, text)
        if self.responder is not None:
            try:
                reply = self.responder(text)
            except Exception:
                logger.exception("Responder failed for %d-character message", len(text))
                raise
            if reply is not None:
                self._scrollback.add(self.settings.reply_name, reply)
        return text

    # ── Render ──────────────────────────────────────────────────────────────────

    def render(self, columns: int, rows: int) -> Frame:
        frame = Frame.blank(columns, rows)
        screen = Rect(0, 0, max(0, columns), max(0, rows))

        chat_area, input_area = split_vertical(screen, self._input.height_for(screen.width))

        # Chat panel with the scrollbar in its own column to the right
        list_area, bar_area = split_scrollbar(chat_area)
        chat_inner = list_area.inner()
        view = self._scrollback.render(chat_inner.width, chat_inner.height)
        frame.paste(list_area, draw_block(list_area, self.settings.chat_title, view.lines))
        frame.paste(bar_area, draw_scrollbar(bar_area.height, view.position, view.length))

        # Input panel
        input_view = self._input.render(input_area.width, input_area.height)
        frame.paste(input_area, draw_block(input_area, self.settings.input_title, input_view.lines))

        capacity = self._input.visible_capacity(input_area.height)
        position = None
        if input_area.height > 2:
            position = project_cursor(
                self._buffer, input_view.scroll_offset, input_area.width, capacity,
            )
        if position is None:
            self._cursor_pos = None
        else:
            row, col = position
            # A line that exactly fills the row would put the cursor on the border
            col = min(col, input_area.width - 3)
            self._cursor_pos = (input_area.x + 1 + col, input_area.y + 1 + row)
        frame.cursor = self._cursor_pos
        return frame


def _is_plain_text(data: str) -> bool:
    return bool(data) and data.isprintable()
