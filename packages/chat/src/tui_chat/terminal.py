"""
Terminal abstraction.

Provides:
- Terminal: abstract base class (interface)
- ProcessTerminal: real terminal using sys.stdin/sys.stdout + raw mode
"""
from __future__ import annotations

import logging
import os
import re
import select
import signal
import sys
import threading
from abc import ABC, abstractmethod
from typing import Callable

from .keys import set_kitty_protocol_active
from .stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

ENTER_ALT_SCREEN = "\x1b[?1049h"
LEAVE_ALT_SCREEN = "\x1b[?1049l"
ENABLE_BRACKETED_PASTE = "\x1b[?2004h"
DISABLE_BRACKETED_PASTE = "\x1b[?2004l"
HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
KITTY_QUERY = "\x1b[?u"
# Flags 1+2+4: disambiguate, report event types, report alternate keys
KITTY_ENABLE = "\x1b[>7u"
KITTY_DISABLE = "\x1b[<u"

_KITTY_RESPONSE_RE = re.compile(r"^\x1b\[\?(\d+)u$")


# ─────────────────────────────────────────────────────────────────────────────
# Terminal ABC
# ─────────────────────────────────────────────────────────────────────────────

class Terminal(ABC):
    """Minimal terminal interface the chat runner draws through."""

    @abstractmethod
    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        """Start the terminal with input and resize handlers."""

    @abstractmethod
    def stop(self) -> None:
        """Stop the terminal and restore state."""

    @abstractmethod
    def write(self, data: str) -> None:
        """Write output to the terminal."""

    @property
    @abstractmethod
    def columns(self) -> int:
        """Terminal width in columns."""

    @property
    @abstractmethod
    def rows(self) -> int:
        """Terminal height in rows."""

    @property
    def kitty_protocol_active(self) -> bool:
        return False

    def move_to(self, x: int, y: int) -> None:
        """Move the cursor to zero-based column *x*, row *y*."""
        self.write(f"\x1b[{y + 1};{x + 1}H")

    def hide_cursor(self) -> None:
        self.write(HIDE_CURSOR)

    def show_cursor(self) -> None:
        self.write(SHOW_CURSOR)


# ─────────────────────────────────────────────────────────────────────────────
# ProcessTerminal
# ─────────────────────────────────────────────────────────────────────────────

class ProcessTerminal(Terminal):
    """
    Real terminal using sys.stdin/sys.stdout.

    ``start`` switches to raw mode and the alternate screen, enables
    bracketed paste and queries the Kitty keyboard protocol; ``stop`` undoes
    all of it in reverse order. Input is read on a daemon thread and handed
    to ``on_input`` one sequence at a time.
    """

    def __init__(self, alternate_screen: bool = True) -> None:
        self._alternate_screen = alternate_screen
        self._input_handler: Callable[[str], None] | None = None
        self._resize_handler: Callable[[], None] | None = None
        self._kitty_protocol_active = False
        self._stdin_buffer: StdinBuffer | None = None
        self._read_thread: threading.Thread | None = None
        self._write_log_path = os.environ.get("TUI_CHAT_WRITE_LOG", "")
        self._old_termios: list | None = None
        self._prev_sigwinch = None
        self._started = False

    @property
    def kitty_protocol_active(self) -> bool:
        return self._kitty_protocol_active

    def start(
        self,
        on_input: Callable[[str], None],
        on_resize: Callable[[], None],
    ) -> None:
        self._input_handler = on_input
        self._resize_handler = on_resize

        self._enable_raw_mode()
        self._started = True

        if self._alternate_screen:
            self.write(ENTER_ALT_SCREEN)
        self.write(ENABLE_BRACKETED_PASTE)

        if hasattr(signal, "SIGWINCH") and threading.current_thread() is threading.main_thread():
            self._prev_sigwinch = signal.signal(signal.SIGWINCH, self._on_sigwinch)

        self._setup_stdin_buffer()
        self.write(KITTY_QUERY)
        logger.debug("Terminal started (%dx%d)", self.columns, self.rows)

    def _on_sigwinch(self, signum, frame) -> None:
        if self._resize_handler:
            self._resize_handler()

    def _enable_raw_mode(self) -> None:
        """Put stdin in raw mode (no echo, no line buffering)."""
        import termios
        import tty

        fd = sys.stdin.fileno()
        try:
            self._old_termios = termios.tcgetattr(fd)
            tty.setraw(fd)
        except termios.error:
            logger.error("stdin is not a terminal; cannot enter raw mode")
            raise

    def _disable_raw_mode(self) -> None:
        import termios

        if self._old_termios is None:
            return
        try:
            termios.tcsetattr(sys.stdin.fileno(), termios.TCSADRAIN, self._old_termios)
        except (termios.error, OSError):
            logger.warning("Failed to restore terminal attributes", exc_info=True)
        self._old_termios = None

    def _setup_stdin_buffer(self) -> None:
        """Set up StdinBuffer to split batched input into individual sequences."""
        self._stdin_buffer = StdinBuffer(timeout_ms=10)

        def on_data(sequence: str) -> None:
            if not self._kitty_protocol_active and _KITTY_RESPONSE_RE.match(sequence):
                self._kitty_protocol_active = True
                set_kitty_protocol_active(True)
                self.write(KITTY_ENABLE)
                logger.debug("Kitty keyboard protocol enabled")
                return  # protocol response is not user input
            if self._input_handler:
                self._input_handler(sequence)

        def on_paste(content: str) -> None:
            if self._input_handler:
                self._input_handler(f"\x1b[200~{content}\x1b[201~")

        self._stdin_buffer.on("data", on_data)
        self._stdin_buffer.on("paste", on_paste)

        self._read_thread = threading.Thread(
            target=self._read_loop, name="tui-chat-stdin", daemon=True,
        )
        self._read_thread.start()

    def _read_loop(self) -> None:
        fd = sys.stdin.fileno()
        while self._stdin_buffer is not None:
            try:
                ready, _, _ = select.select([fd], [], [], 0.05)
                if not ready:
                    continue
                data = os.read(fd, 1024)
            except (OSError, ValueError):
                logger.debug("stdin reader stopped", exc_info=True)
                break
            if not data:
                break
            buf = self._stdin_buffer
            if buf is not None:
                buf.process(data)

    def stop(self) -> None:
        """Disable bracketed paste and Kitty protocol, leave the alternate screen, restore tty."""
        if not self._started:
            return
        self._started = False

        if self._kitty_protocol_active:
            self.write(KITTY_DISABLE)
            self._kitty_protocol_active = False
            set_kitty_protocol_active(False)
        self.write(DISABLE_BRACKETED_PASTE)
        self.show_cursor()
        if self._alternate_screen:
            self.write(LEAVE_ALT_SCREEN)

        if self._stdin_buffer:
            self._stdin_buffer.destroy()
            self._stdin_buffer = None
        if self._read_thread is not None:
            self._read_thread.join(timeout=0.2)
            self._read_thread = None

        self._input_handler = None
        self._resize_handler = None

        if self._prev_sigwinch is not None:
            signal.signal(signal.SIGWINCH, self._prev_sigwinch)
            self._prev_sigwinch = None

        self._disable_raw_mode()
        logger.debug("Terminal stopped")

    def write(self, data: str) -> None:
        sys.stdout.write(data)
        sys.stdout.flush()
        if self._write_log_path:
            try:
                with open(self._write_log_path, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError:
                logger.warning("Cannot append to %s", self._write_log_path, exc_info=True)
                self._write_log_path = ""

    @property
    def columns(self) -> int:
        try:
            return os.get_terminal_size().columns
        except OSError:
            return int(os.environ.get("COLUMNS", "80"))

    @property
    def rows(self) -> int:
        try:
            return os.get_terminal_size().lines
        except OSError:
            return int(os.environ.get("LINES", "24"))
