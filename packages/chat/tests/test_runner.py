"""Tests for tui_chat.runner"""
import queue
import signal
from typing import Callable

import pytest

from tui_chat.app import ChatApp
from tui_chat.runner import SYNC_END, SYNC_START, ChatRunner
from tui_chat.terminal import Terminal


class ScriptedTerminal(Terminal):
    """Feeds a fixed list of input sequences as soon as it is started."""

    def __init__(self, script: list[str], columns: int = 30, rows: int = 12) -> None:
        self.script = script
        self._columns = columns
        self._rows = rows
        self.output: list[str] = []
        self.started = False
        self.stopped = False
        self.on_resize: Callable[[], None] | None = None

    def start(self, on_input, on_resize) -> None:
        self.started = True
        self.on_resize = on_resize
        for data in self.script:
            on_input(data)

    def stop(self) -> None:
        self.stopped = True

    def write(self, data: str) -> None:
        self.output.append(data)

    @property
    def columns(self) -> int:
        return self._columns

    @property
    def rows(self) -> int:
        return self._rows


class TestChatRunner:
    def test_runs_until_quit(self):
        terminal = ScriptedTerminal(["h", "i", "\r", "\x03"])
        app = ChatApp()
        ChatRunner(app, terminal).run()
        assert terminal.started and terminal.stopped
        assert [e.content for e in app.scrollback.entries][0] == "hi"

    def test_first_frame_is_full_redraw(self):
        terminal = ScriptedTerminal(["\x03"])
        runner = ChatRunner(ChatApp(), terminal)
        runner.run()
        frame_writes = [w for w in terminal.output if w.startswith(SYNC_START)]
        assert len(frame_writes) == 1
        assert "\x1b[2J" in frame_writes[0]
        assert frame_writes[0].endswith(SYNC_END)
        assert runner.render_count == 1

    def test_only_changed_rows_rewritten(self):
        terminal = ScriptedTerminal(["x", "\x03"], columns=30, rows=12)
        ChatRunner(ChatApp(), terminal).run()
        frames = [w for w in terminal.output if w.startswith(SYNC_START)]
        assert len(frames) == 2
        second = frames[1]
        assert "\x1b[2J" not in second
        # Only the input line changed: row 11 of 12
        assert "\x1b[11;1H" in second
        assert "\x1b[1;1H" not in second

    def test_cursor_positioned(self):
        terminal = ScriptedTerminal(["\x03"], columns=20, rows=10)
        ChatRunner(ChatApp(), terminal).run()
        frame = next(w for w in terminal.output if w.startswith(SYNC_START))
        assert "\x1b[9;4H\x1b[?25h" in frame

    def test_terminal_restored_when_responder_fails(self):
        def broken(text):
            raise RuntimeError("boom")

        terminal = ScriptedTerminal(["a", "\r", "\x03"])
        with pytest.raises(RuntimeError):
            ChatRunner(ChatApp(responder=broken), terminal).run()
        assert terminal.stopped

    def test_resize_forces_full_redraw(self):
        terminal = ScriptedTerminal([])
        runner = ChatRunner(ChatApp(), terminal)
        runner.post_resize()
        runner.post_input("\x03")
        runner.run()
        frames = [w for w in terminal.output if w.startswith(SYNC_START)]
        assert len(frames) == 2
        assert all("\x1b[2J" in f for f in frames)

    @pytest.mark.skipif(not hasattr(signal, "SIGUSR1"), reason="needs POSIX signals")
    def test_resize_posted_from_signal_handler(self):
        class SignalTerminal(ScriptedTerminal):
            def start(self, on_input, on_resize):
                self.previous = signal.signal(signal.SIGUSR1, lambda signum, frame: on_resize())
                super().start(on_input, on_resize)
                signal.raise_signal(signal.SIGUSR1)
                on_input("\x03")

            def stop(self):
                signal.signal(signal.SIGUSR1, self.previous)
                super().stop()

        terminal = SignalTerminal(["x"])
        runner = ChatRunner(ChatApp(), terminal)
        runner.run()
        frames = [w for w in terminal.output if w.startswith(SYNC_START)]
        # initial frame, the "x" input, then the resize forces a full redraw
        assert len(frames) == 3
        assert "\x1b[2J" in frames[2]
        assert isinstance(runner._events, queue.SimpleQueue)
