"""
ChatRunner — the synchronous event loop.

The terminal's reader thread only enqueues events; everything else happens
on the calling thread: render, block for the next event, dispatch it to the
app, render again. The loop ends once the app asks to quit, and the terminal
is restored on the way out whatever happened inside the loop.
"""
from __future__ import annotations

import logging
import queue
from typing import Optional

from .app import ChatApp
from .layout import Frame
from .terminal import Terminal

logger = logging.getLogger(__name__)

SYNC_START = "\x1b[?2026h"
SYNC_END = "\x1b[?2026l"

_INPUT = "input"
_RESIZE = "resize"


class ChatRunner:
    """Drives a ChatApp against a Terminal until the app quits."""

    def __init__(self, app: ChatApp, terminal: Terminal) -> None:
        self.app = app
        self.terminal = terminal
        # SimpleQueue.put is reentrant, so the SIGWINCH handler can post while
        # the loop is blocked in get()
        self._events: queue.SimpleQueue[tuple[str, Optional[str]]] = queue.SimpleQueue()
        self._previous: Frame | None = None
        self._render_count = 0

    @property
    def render_count(self) -> int:
        return self._render_count

    def post_input(self, data: str) -> None:
        """Queue one input sequence (safe to call from any thread)."""
        self._events.put((_INPUT, data))

    def post_resize(self) -> None:
        """Queue a resize (safe to call from a signal handler)."""
        self._events.put((_RESIZE, None))

    def run(self) -> None:
        self.terminal.start(self.post_input, self.post_resize)
        try:
            self.terminal.hide_cursor()
            self.render()
            while not self.app.should_quit:
                kind, data = self._events.get()
                if kind == _RESIZE:
                    self._previous = None
                elif data is not None:
                    self.app.handle_input(data)
                if self.app.should_quit:
                    break
                self.render()
        finally:
            self.terminal.stop()
            logger.debug("Runner stopped after %d renders", self._render_count)

    def render(self) -> None:
        """Draw one frame, rewriting only the rows that changed."""
        frame = self.app.render(self.terminal.columns, self.terminal.rows)
        previous = self._previous
        full = previous is None or (previous.width, previous.height) != (frame.width, frame.height)

        out = [SYNC_START]
        if full:
            out.append("\x1b[2J")
        for y, row in enumerate(frame.rows):
            if full or previous.rows[y] != row:
                out.append(f"\x1b[{y + 1};1H{row}")
        if frame.cursor is not None:
            x, y = frame.cursor
            out.append(f"\x1b[{y + 1};{x + 1}H\x1b[?25h")
        else:
            out.append("\x1b[?25l")
        out.append(SYNC_END)

        self.terminal.write("".join(out))
        self._previous = frame
        self._render_count += 1
