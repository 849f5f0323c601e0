"""
StdinBuffer — splits raw terminal input into key sequences and pastes.

Reads arrive in arbitrary chunks: a multi-byte character or an escape
sequence can straddle two reads, and one read can carry several keys. The
buffer decodes UTF-8 incrementally, holds back incomplete escape sequences
and reassembles bracketed pastes into a single event.
"""
from __future__ import annotations

import codecs
import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"


# ─────────────────────────────────────────────────────────────────────────────
# Sequence completeness detection
# ─────────────────────────────────────────────────────────────────────────────

def _string_terminator_end(data: str, start: int, allow_bel: bool) -> int | None:
    """End index of an OSC/DCS/APC payload (ST or, for OSC, BEL), or None."""
    for i in range(start, len(data)):
        if allow_bel and data[i] == "\x07":
            return i + 1
        if data[i] == ESC and i + 1 < len(data) and data[i + 1] == "\\":
            return i + 2
    return None


def _sequence_length(data: str) -> int | None:
    """
    Length of the complete sequence at the start of *data*.

    Returns None when *data* starts with an escape sequence that is still
    missing bytes.
    """
    if not data.startswith(ESC):
        return 1
    if len(data) == 1:
        return None
    kind = data[1]

    if kind == "[":
        if data.startswith(ESC + "[M"):
            # Legacy mouse report: three raw bytes follow
            return 6 if len(data) >= 6 else None
        for i in range(2, len(data)):
            if 0x40 <= ord(data[i]) <= 0x7E:
                return i + 1
        return None

    if kind == "]":
        return _string_terminator_end(data, 2, allow_bel=True)

    if kind in ("P", "_"):
        return _string_terminator_end(data, 2, allow_bel=False)

    if kind == "O":
        return 3 if len(data) >= 3 else None

    # ESC followed by one character (alt+key, ESC ESC, ESC CR)
    return 2


def split_sequences(data: str) -> tuple[list[str], str]:
    """Split *data* into complete sequences plus an incomplete remainder."""
    sequences: list[str] = []
    pos = 0
    while pos < len(data):
        length = _sequence_length(data[pos:])
        if length is None:
            return sequences, data[pos:]
        sequences.append(data[pos:pos + length])
        pos += length
    return sequences, ""


# ─────────────────────────────────────────────────────────────────────────────
# StdinBuffer
# ─────────────────────────────────────────────────────────────────────────────

class StdinBuffer:
    """
    Buffers stdin input and emits complete sequences via callbacks.

    ``data`` callbacks receive one key sequence (or one character) at a time;
    ``paste`` callbacks receive the text between the bracketed paste markers.
    A lone ESC is held back for ``timeout_ms`` in case the rest of a sequence
    is still in flight, then flushed as the escape key.
    """

    def __init__(
        self,
        timeout_ms: int = 10,
        on_data: Callable[[str], None] | None = None,
        on_paste: Callable[[str], None] | None = None,
    ) -> None:
        self._timeout_ms = timeout_ms
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._paste_mode = False
        self._paste_buffer = ""
        self._timer: threading.Timer | None = None
        self._lock = threading.RLock()
        self._on_data: list[Callable[[str], None]] = []
        self._on_paste: list[Callable[[str], None]] = []
        if on_data:
            self._on_data.append(on_data)
        if on_paste:
            self._on_paste.append(on_paste)

    def on(self, event: str, callback: Callable[[str], None]) -> None:
        """Register a callback for 'data' or 'paste' events."""
        if event == "data":
            self._on_data.append(callback)
        elif event == "paste":
            self._on_paste.append(callback)
        else:
            raise ValueError(f"Unknown StdinBuffer event: {event!r}")

    @property
    def pending(self) -> str:
        """Input held back as an incomplete sequence."""
        return self._buffer

    @property
    def in_paste(self) -> bool:
        return self._paste_mode

    def _emit_data(self, seq: str) -> None:
        for cb in self._on_data:
            cb(seq)

    def _emit_paste(self, content: str) -> None:
        for cb in self._on_paste:
            cb(content)

    def _cancel_timer(self) -> None:
        if self._timer:
            self._timer.cancel()
            self._timer = None

    def process(self, data: str | bytes) -> None:
        """Feed one read's worth of input."""
        with self._lock:
            self._cancel_timer()
            if isinstance(data, bytes):
                text = self._decoder.decode(data)
            else:
                text = data
            self._buffer += text
            self._drain()
            if self._buffer and not self._paste_mode:
                self._schedule_flush()

    def _drain(self) -> None:
        while self._buffer:
            if self._paste_mode:
                self._paste_buffer += self._buffer
                self._buffer = ""
                end_idx = self._paste_buffer.find(BRACKETED_PASTE_END)
                if end_idx == -1:
                    return
                pasted = self._paste_buffer[:end_idx]
                self._buffer = self._paste_buffer[end_idx + len(BRACKETED_PASTE_END):]
                self._paste_buffer = ""
                self._paste_mode = False
                logger.debug("Bracketed paste of %d characters", len(pasted))
                self._emit_paste(pasted)
                continue

            start_idx = self._buffer.find(BRACKETED_PASTE_START)
            if start_idx != -1:
                seqs, _ = split_sequences(self._buffer[:start_idx])
                for seq in seqs:
                    self._emit_data(seq)
                self._buffer = self._buffer[start_idx + len(BRACKETED_PASTE_START):]
                self._paste_mode = True
                continue

            seqs, self._buffer = split_sequences(self._buffer)
            for seq in seqs:
                self._emit_data(seq)
            return

    def _schedule_flush(self) -> None:
        def _flush_timer() -> None:
            for seq in self.flush():
                self._emit_data(seq)

        self._timer = threading.Timer(self._timeout_ms / 1000.0, _flush_timer)
        self._timer.daemon = True
        self._timer.start()

    def flush(self) -> list[str]:
        """Give up waiting on a held-back sequence and return it as-is."""
        with self._lock:
            self._cancel_timer()
            if not self._buffer:
                return []
            seqs = [self._buffer]
            self._buffer = ""
            return seqs

    def clear(self) -> None:
        """Clear buffer and cancel pending timer."""
        with self._lock:
            self._cancel_timer()
            self._decoder.reset()
            self._buffer = ""
            self._paste_mode = False
            self._paste_buffer = ""

    def destroy(self) -> None:
        self.clear()
        self._on_data.clear()
        self._on_paste.clear()
