"""
Keyboard input decoding.

Turns one raw terminal input sequence into a key identifier such as
``"enter"``, ``"shift+enter"``, ``"ctrl+c"`` or ``"pageUp"``. Understands the
legacy xterm/rxvt sequences and the Kitty keyboard protocol (CSI-u, with event
types). See: https://sw.kovidgoyal.net/kitty/keyboard-protocol/

API:
- parse_key(data): key identifier for a sequence, or None
- matches_key(data, key_id): check if a sequence matches a key identifier
- normalize_key_id(key_id): canonical spelling used for comparisons
- is_key_release(data) / is_key_repeat(data): Kitty event types
- decode_kitty_printable(data): text produced by a Kitty-encoded printable key
- set_kitty_protocol_active(active): global Kitty protocol state
"""
from __future__ import annotations

import re

# ─────────────────────────────────────────────────────────────────────────────
# Global Kitty Protocol state
# ─────────────────────────────────────────────────────────────────────────────

_kitty_protocol_active = False


def set_kitty_protocol_active(active: bool) -> None:
    global _kitty_protocol_active
    _kitty_protocol_active = active


def is_kitty_protocol_active() -> bool:
    return _kitty_protocol_active


KeyId = str

# ─────────────────────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────────────────────

_MOD_SHIFT = 1
_MOD_ALT = 2
_MOD_CTRL = 4
_LOCK_MASK = 64 + 128

_MODIFIER_ORDER = ("ctrl", "alt", "shift")

_KEY_ALIASES: dict[str, str] = {
    "esc": "escape",
    "return": "enter",
    "pageup": "pageUp",
    "pagedown": "pageDown",
}

# Kitty functional codepoints (non-printable keys)
_KITTY_FUNCTIONAL: dict[int, str] = {
    27: "escape",
    9: "tab",
    13: "enter",
    57414: "enter",  # keypad enter
    32: "space",
    127: "backspace",
}

_CSI_FINAL_KEYS: dict[str, str] = {
    "A": "up",
    "B": "down",
    "C": "right",
    "D": "left",
    "H": "home",
    "F": "end",
    "E": "clear",
}

_CSI_TILDE_KEYS: dict[int, str] = {
    1: "home",
    2: "insert",
    3: "delete",
    4: "end",
    5: "pageUp",
    6: "pageDown",
    7: "home",
    8: "end",
}

_LEGACY_SEQ_KEY_IDS: dict[str, str] = {
    "\x1bOA": "up",
    "\x1bOB": "down",
    "\x1bOC": "right",
    "\x1bOD": "left",
    "\x1bOH": "home",
    "\x1bOF": "end",
    "\x1bOM": "enter",
    "\x1b[[5~": "pageUp",
    "\x1b[[6~": "pageDown",
    "\x1b[a": "shift+up",
    "\x1b[b": "shift+down",
    "\x1b[c": "shift+right",
    "\x1b[d": "shift+left",
    "\x1bOa": "ctrl+up",
    "\x1bOb": "ctrl+down",
    "\x1bOc": "ctrl+right",
    "\x1bOd": "ctrl+left",
    "\x1b[5$": "shift+pageUp",
    "\x1b[6$": "shift+pageDown",
    "\x1b[Z": "shift+tab",
}

_CSI_U_RE = re.compile(r"^\x1b\[(\d+)(?::(\d*))?(?::(\d+))?(?:;(\d+))?(?::(\d+))?u$")
_CSI_FINAL_RE = re.compile(r"^\x1b\[(?:1;(\d+)(?::(\d+))?)?([ABCDEFH])$")
_CSI_TILDE_RE = re.compile(r"^\x1b\[(\d+)(?:;(\d+))?(?::(\d+))?~$")
_MODIFY_OTHER_KEYS_RE = re.compile(r"^\x1b\[27;(\d+);(\d+)~$")

_EVENT_PRESS = 1
_EVENT_REPEAT = 2
_EVENT_RELEASE = 3


# ─────────────────────────────────────────────────────────────────────────────
# Key identifiers
# ─────────────────────────────────────────────────────────────────────────────

def _format_key(name: str, modifier: int) -> str:
    mods: list[str] = []
    if modifier & _MOD_CTRL:
        mods.append("ctrl")
    if modifier & _MOD_ALT:
        mods.append("alt")
    if modifier & _MOD_SHIFT:
        mods.append("shift")
    return "+".join(mods + [name])


def normalize_key_id(key_id: KeyId) -> str:
    """Canonical form of a key identifier: modifiers in ctrl, alt, shift order."""
    if key_id.endswith("++"):
        parts = key_id[:-2].split("+") + ["+"]
    else:
        parts = key_id.split("+")
    key = parts[-1]
    key = _KEY_ALIASES.get(key.lower(), key.lower())
    mods = {p.lower() for p in parts[:-1]}
    ordered = [m for m in _MODIFIER_ORDER if m in mods]
    return "+".join(ordered + [key])


def _name_for_codepoint(cp: int) -> str | None:
    if cp in _KITTY_FUNCTIONAL:
        return _KITTY_FUNCTIONAL[cp]
    if 0x20 < cp <= 0x10FFFF and not (0xD800 <= cp <= 0xDFFF):
        return chr(cp).lower()
    return None


def _event_type(data: str) -> int:
    for pattern, group in ((_CSI_U_RE, 5), (_CSI_FINAL_RE, 2), (_CSI_TILDE_RE, 3)):
        m = pattern.match(data)
        if m:
            return int(m.group(group)) if m.group(group) else _EVENT_PRESS
    return _EVENT_PRESS


def is_key_release(data: str) -> bool:
    """Check if data is a Kitty key-release event."""
    return _event_type(data) == _EVENT_RELEASE


def is_key_repeat(data: str) -> bool:
    """Check if data is a Kitty key-repeat event."""
    return _event_type(data) == _EVENT_REPEAT


# ─────────────────────────────────────────────────────────────────────────────
# parse_key
# ─────────────────────────────────────────────────────────────────────────────

def parse_key(data: str) -> str | None:
    """Parse raw terminal input and return a key identifier string, or None."""
    if not data:
        return None

    m = _CSI_U_RE.match(data)
    if m:
        name = _name_for_codepoint(int(m.group(1)))
        if name is None:
            return None
        modifier = (int(m.group(4)) - 1 if m.group(4) else 0) & ~_LOCK_MASK
        return _format_key(name, modifier)

    m = _MODIFY_OTHER_KEYS_RE.match(data)
    if m:
        name = _name_for_codepoint(int(m.group(2)))
        if name is None:
            return None
        return _format_key(name, (int(m.group(1)) - 1) & ~_LOCK_MASK)

    m = _CSI_FINAL_RE.match(data)
    if m:
        modifier = int(m.group(1)) - 1 if m.group(1) else 0
        return _format_key(_CSI_FINAL_KEYS[m.group(3)], modifier & ~_LOCK_MASK)

    m = _CSI_TILDE_RE.match(data)
    if m and int(m.group(1)) in _CSI_TILDE_KEYS:
        modifier = int(m.group(2)) - 1 if m.group(2) else 0
        return _format_key(_CSI_TILDE_KEYS[int(m.group(1))], modifier & ~_LOCK_MASK)

    seq_id = _LEGACY_SEQ_KEY_IDS.get(data)
    if seq_id:
        return seq_id

    # With the Kitty protocol on, plain enter arrives as CSI-u, so a bare
    # LF or ESC CR can only be shift+enter.
    if _kitty_protocol_active and data in ("\x1b\r", "\n"):
        return "shift+enter"

    if data in ("\r", "\n"):
        return "enter"
    if data == "\x1b\r":
        return "alt+enter"
    if data == "\t":
        return "tab"
    if data in ("\x7f", "\x08"):
        return "backspace"
    if data in ("\x1b\x7f", "\x1b\x08"):
        return "alt+backspace"
    if data == "\x1b":
        return "escape"
    if data == "\x00":
        return "ctrl+space"
    if data == " ":
        return "space"
    if data == "\x1c":
        return "ctrl+\\"
    if data == "\x1d":
        return "ctrl+]"
    if data == "\x1f":
        return "ctrl+-"

    if len(data) == 2 and data[0] == "\x1b":
        inner = parse_key(data[1])
        if inner is not None:
            return normalize_key_id(f"alt+{inner}")
        return None

    if len(data) == 1:
        code = ord(data)
        if 1 <= code <= 26:
            return f"ctrl+{chr(code + 96)}"
        if "A" <= data <= "Z":
            return f"shift+{data.lower()}"
        if data.isprintable():
            return data

    return None


def matches_key(data: str, key_id: KeyId) -> bool:
    """Check if *data* (raw terminal input) matches the given key identifier."""
    parsed = parse_key(data)
    if parsed is None:
        return False
    return normalize_key_id(parsed) == normalize_key_id(key_id)


# ─────────────────────────────────────────────────────────────────────────────
# Kitty CSI-u printable key decoder
# ─────────────────────────────────────────────────────────────────────────────

def decode_kitty_printable(data: str) -> str | None:
    """
    Return the text a Kitty-encoded printable key would have produced, or None.

    Keys carrying ctrl or alt are commands, not text.
    """
    m = _CSI_U_RE.match(data)
    if not m:
        return None
    codepoint = int(m.group(1) or "0")
    shifted_key = int(m.group(2)) if m.group(2) else None
    modifier = (int(m.group(4)) - 1 if m.group(4) else 0) & ~_LOCK_MASK
    if modifier & (_MOD_ALT | _MOD_CTRL):
        return None
    if m.group(5) and int(m.group(5)) == _EVENT_RELEASE:
        return None
    effective = codepoint
    if (modifier & _MOD_SHIFT) and shifted_key is not None:
        effective = shifted_key
    if effective < 32 or effective == 127 or (effective in _KITTY_FUNCTIONAL and effective != 32):
        return None
    try:
        return chr(effective)
    except (ValueError, OverflowError):
        return None
