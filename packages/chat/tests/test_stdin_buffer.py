"""Tests for tui_chat.stdin_buffer"""
import pytest

from tui_chat.stdin_buffer import StdinBuffer, split_sequences


def _collect(timeout_ms: int = 10_000):
    received: list[str] = []
    pasted: list[str] = []
    buf = StdinBuffer(timeout_ms=timeout_ms, on_data=received.append, on_paste=pasted.append)
    return buf, received, pasted


class TestSplitSequences:
    def test_plain_chars(self):
        assert split_sequences("abc") == (["a", "b", "c"], "")

    def test_csi_and_chars(self):
        assert split_sequences("\x1b[Aa\x1b[5~") == (["\x1b[A", "a", "\x1b[5~"], "")

    def test_incomplete_csi_remainder(self):
        assert split_sequences("a\x1b[1;2") == (["a"], "\x1b[1;2")

    def test_ss3(self):
        assert split_sequences("\x1bOA\x1bO") == (["\x1bOA"], "\x1bO")

    def test_alt_key(self):
        assert split_sequences("\x1bx") == (["\x1bx"], "")

    def test_osc_needs_terminator(self):
        assert split_sequences("\x1b]0;title") == ([], "\x1b]0;title")
        assert split_sequences("\x1b]0;title\x07z") == (["\x1b]0;title\x07", "z"], "")

    def test_kitty_csi_u(self):
        assert split_sequences("\x1b[97;1:3u") == (["\x1b[97;1:3u"], "")


class TestStdinBuffer:
    def test_basic_chars_emitted(self):
        buf, received, _ = _collect()
        buf.process(b"ab")
        assert received == ["a", "b"]

    def test_escape_split_across_reads(self):
        buf, received, _ = _collect()
        buf.process(b"\x1b[")
        assert received == []
        assert buf.pending == "\x1b["
        buf.process(b"A")
        assert received == ["\x1b[A"]
        assert buf.pending == ""
        buf.destroy()

    def test_multibyte_split_across_reads(self):
        buf, received, _ = _collect()
        data = "é中".encode("utf-8")
        for i in range(len(data)):
            buf.process(data[i:i + 1])
        assert received == ["é", "中"]

    def test_lone_escape_flushed(self):
        buf, received, _ = _collect()
        buf.process(b"\x1b")
        assert received == []
        assert buf.flush() == ["\x1b"]

    def test_bracketed_paste(self):
        buf, received, pasted = _collect()
        buf.process(b"x\x1b[200~hello\nworld\x1b[201~y")
        assert pasted == ["hello\nworld"]
        assert received == ["x", "y"]

    def test_paste_across_reads(self):
        buf, received, pasted = _collect()
        buf.process(b"\x1b[200~hel")
        assert buf.in_paste
        buf.process(b"lo\x1b[201~")
        assert pasted == ["hello"]
        assert not buf.in_paste
        assert received == []

    def test_paste_keeps_escape_sequences_verbatim(self):
        buf, _, pasted = _collect()
        buf.process("\x1b[200~a\x1b[Ab\x1b[201~")
        assert pasted == ["a\x1b[Ab"]

    def test_str_input(self):
        buf, received, _ = _collect()
        buf.process("\x1b[13;2u")
        assert received == ["\x1b[13;2u"]

    def test_timer_flushes_escape(self):
        import threading

        flushed = threading.Event()
        received: list[str] = []

        def on_data(seq: str) -> None:
            received.append(seq)
            flushed.set()

        buf = StdinBuffer(timeout_ms=1, on_data=on_data)
        buf.process(b"\x1b")
        assert flushed.wait(2.0)
        assert received == ["\x1b"]

    def test_unknown_event_rejected(self):
        with pytest.raises(ValueError):
            StdinBuffer().on("resize", lambda _: None)

    def test_clear(self):
        buf, _, _ = _collect()
        buf.process(b"\x1b[200~partial")
        buf.clear()
        assert not buf.in_paste
        assert buf.pending == ""
