"""
tui_chat — terminal chat panel: a wrapped, cursor-addressable input editor
over an auto-following scrollback.
"""
from .app import SIMULATED_REPLY, ChatApp, Responder, simulated_responder
from .buffer import TextBuffer
from .config import VERSION, ChatSettings, ConfigError, load_settings
from .cursor import project_cursor
from .keybindings import (
    DEFAULT_CHAT_KEYBINDINGS,
    ChatAction,
    ChatKeybindingsManager,
)
from .keys import is_key_release, is_key_repeat, matches_key, parse_key, set_kitty_protocol_active
from .layout import Frame, Rect
from .runner import ChatRunner
from .scrollback import ChatEntry, Scrollback, ScrollbackView
from .stdin_buffer import StdinBuffer
from .terminal import ProcessTerminal, Terminal
from .utils import truncate_to_width, visible_width
from .viewport import InputView, InputViewport
from .wrap import WrappedLine, count_visual_lines, wrap, wrap_text

__version__ = VERSION

__all__ = [
    # app
    "SIMULATED_REPLY",
    "ChatApp",
    "Responder",
    "simulated_responder",
    # buffer
    "TextBuffer",
    # config
    "ChatSettings",
    "ConfigError",
    "load_settings",
    # cursor
    "project_cursor",
    # keybindings
    "DEFAULT_CHAT_KEYBINDINGS",
    "ChatAction",
    "ChatKeybindingsManager",
    # keys
    "is_key_release",
    "is_key_repeat",
    "matches_key",
    "parse_key",
    "set_kitty_protocol_active",
    # layout
    "Frame",
    "Rect",
    # runner
    "ChatRunner",
    # scrollback
    "ChatEntry",
    "Scrollback",
    "ScrollbackView",
    # stdin buffer
    "StdinBuffer",
    # terminal
    "ProcessTerminal",
    "Terminal",
    # utils
    "truncate_to_width",
    "visible_width",
    # viewport
    "InputView",
    "InputViewport",
    # wrap
    "WrappedLine",
    "count_visual_lines",
    "wrap",
    "wrap_text",
]
