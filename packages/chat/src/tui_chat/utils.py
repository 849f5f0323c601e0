"""
Terminal text utilities.

Provides:
- char_width(): terminal column width of one scalar value
- visible_width(): terminal column width of a string
- truncate_to_width(): cut a string so it fits in N columns
- fit_to_width(): truncate and pad a string to exactly N columns

Wrapping, cursor projection and the compositor all measure in terminal cells;
buffer offsets count scalar values.
"""
from __future__ import annotations

from wcwidth import wcwidth

# ─────────────────────────────────────────────────────────────────────────────
# Width cache (LRU-style, insertion ordered)
# ─────────────────────────────────────────────────────────────────────────────
_WIDTH_CACHE_SIZE = 512
_width_cache: dict[str, int] = {}


def char_width(ch: str) -> int:
    """Column width of a single scalar value. Control characters take no cells."""
    if " " <= ch <= "~":
        return 1
    if ch == "\t":
        return 3
    w = wcwidth(ch)
    return w if w > 0 else 0


def visible_width(s: str) -> int:
    """
    Calculate the visible terminal column width of a string.
    Wide (CJK, emoji) characters count 2, combining marks and controls 0.
    """
    if not s:
        return 0

    # Fast path: pure ASCII printable
    if s.isascii() and s.isprintable():
        return len(s)

    cached = _width_cache.get(s)
    if cached is not None:
        return cached

    width = sum(char_width(ch) for ch in s)

    if len(_width_cache) >= _WIDTH_CACHE_SIZE:
        _width_cache.pop(next(iter(_width_cache)))
    _width_cache[s] = width
    return width


def truncate_to_width(text: str, max_width: int) -> str:
    """Cut *text* to at most *max_width* columns without splitting a wide character."""
    if max_width <= 0:
        return ""
    if visible_width(text) <= max_width:
        return text

    result: list[str] = []
    current = 0
    for ch in text:
        w = char_width(ch)
        if current + w > max_width:
            break
        result.append(ch)
        current += w
    return "".join(result)


def fit_to_width(text: str, width: int, fill: str = " ") -> str:
    """Truncate and pad *text* so it occupies exactly *width* columns."""
    clipped = truncate_to_width(text, width)
    return clipped + fill * max(0, width - visible_width(clipped))
