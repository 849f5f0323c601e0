"""Tests for tui_chat.layout"""
import pytest

from tui_chat.layout import (
    SCROLL_BEGIN,
    SCROLL_END,
    SCROLL_THUMB,
    SCROLL_TRACK,
    Frame,
    Rect,
    draw_block,
    draw_scrollbar,
    split_scrollbar,
    split_vertical,
)
from tui_chat.utils import visible_width


class TestRect:
    def test_inner(self):
        assert Rect(2, 3, 10, 5).inner() == Rect(3, 4, 8, 3)

    def test_inner_never_negative(self):
        assert Rect(0, 0, 1, 1).inner() == Rect(1, 1, 0, 0)

    def test_is_empty(self):
        assert Rect(0, 0, 0, 5).is_empty
        assert not Rect(0, 0, 1, 1).is_empty


class TestSplits:
    def test_split_vertical(self):
        top, bottom = split_vertical(Rect(0, 0, 20, 24), 3)
        assert top == Rect(0, 0, 20, 21)
        assert bottom == Rect(0, 21, 20, 3)

    def test_split_vertical_keeps_one_top_row(self):
        top, bottom = split_vertical(Rect(0, 0, 20, 4), 12)
        assert top.height == 1
        assert bottom == Rect(0, 1, 20, 3)

    def test_split_scrollbar(self):
        body, bar = split_scrollbar(Rect(0, 0, 20, 10))
        assert body == Rect(0, 0, 19, 10)
        assert bar == Rect(19, 0, 1, 10)


class TestDrawBlock:
    def test_border_and_title(self):
        rows = draw_block(Rect(0, 0, 10, 4), "Chat", ["hello"])
        assert rows == [
            "┌Chat────┐",
            "│hello   │",
            "│        │",
            "└────────┘",
        ]

    def test_long_lines_and_title_truncated(self):
        rows = draw_block(Rect(0, 0, 6, 3), "Conversation", ["abcdefgh"])
        assert rows == ["┌Conv┐", "│abcd│", "└────┘"]

    def test_wide_characters_fill_exact_width(self):
        rows = draw_block(Rect(0, 0, 7, 3), "", ["中文字"])
        assert all(visible_width(r) == 7 for r in rows)

    def test_too_small(self):
        assert draw_block(Rect(0, 0, 1, 3), "x", []) == [" ", " ", " "]


class TestDrawScrollbar:
    def test_nothing_to_scroll(self):
        assert draw_scrollbar(5, 0, 0) == [" "] * 5

    def test_thumb_at_top_and_bottom(self):
        top = draw_scrollbar(6, 0, 10)
        bottom = draw_scrollbar(6, 10, 10)
        assert top[0] == SCROLL_BEGIN and top[-1] == SCROLL_END
        assert top[1] == SCROLL_THUMB
        assert bottom[-2] == SCROLL_THUMB
        assert bottom[1] == SCROLL_TRACK

    def test_height(self):
        assert len(draw_scrollbar(8, 3, 4)) == 8
        assert draw_scrollbar(0, 0, 4) == []


class TestFrame:
    def test_blank(self):
        frame = Frame.blank(4, 2)
        assert frame.rows == ["    ", "    "]
        assert frame.cursor is None

    def test_paste_overwrites_area(self):
        frame = Frame.blank(6, 3)
        frame.paste(Rect(2, 1, 3, 2), ["abc", "de"])
        assert frame.rows == ["      ", "  abc ", "  de  "]

    def test_paste_clips_to_frame(self):
        frame = Frame.blank(3, 1)
        frame.paste(Rect(0, 0, 3, 5), ["abcdef", "x", "y"])
        assert frame.rows == ["abc"]
