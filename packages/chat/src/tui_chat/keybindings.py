"""
Chat keybindings.

Provides the ChatAction type, DEFAULT_CHAT_KEYBINDINGS and the
ChatKeybindingsManager that resolves raw input to actions, with per-user
overrides layered over the defaults.
"""
from __future__ import annotations

from typing import Literal, Union

from .keys import KeyId, matches_key, normalize_key_id

# ─────────────────────────────────────────────────────────────────────────────
# ChatAction type
# ─────────────────────────────────────────────────────────────────────────────

ChatAction = Literal[
    # Cursor movement
    "cursorUp",
    "cursorDown",
    "cursorLeft",
    "cursorRight",
    "cursorLineStart",
    "cursorLineEnd",
    # Deletion
    "deleteCharBackward",
    "deleteCharForward",
    # Text input
    "newLine",
    "submit",
    # Scrollback
    "scrollUp",
    "scrollDown",
    "scrollLineUp",
    "scrollLineDown",
    # Application
    "quit",
]

# ─────────────────────────────────────────────────────────────────────────────
# Default keybindings
# ─────────────────────────────────────────────────────────────────────────────

ChatKeybindingsConfig = dict[str, Union[KeyId, list[KeyId]]]

DEFAULT_CHAT_KEYBINDINGS: dict[str, list[KeyId]] = {
    # Cursor movement
    "cursorUp":        ["up"],
    "cursorDown":      ["down"],
    "cursorLeft":      ["left", "ctrl+b"],
    "cursorRight":     ["right", "ctrl+f"],
    "cursorLineStart": ["home", "ctrl+a"],
    "cursorLineEnd":   ["end", "ctrl+e"],
    # Deletion
    "deleteCharBackward": ["backspace"],
    "deleteCharForward":  ["delete", "ctrl+d"],
    # Text input
    "newLine": ["shift+enter", "alt+enter"],
    "submit":  ["enter"],
    # Scrollback
    "scrollUp":       ["pageUp"],
    "scrollDown":     ["pageDown"],
    "scrollLineUp":   ["shift+up"],
    "scrollLineDown": ["shift+down"],
    # Application
    "quit": ["ctrl+c"],
}

# Resolution order for resolve(): first match wins.
_ACTION_PRIORITY: tuple[str, ...] = (
    "quit",
    "newLine",
    "submit",
    "scrollLineUp",
    "scrollLineDown",
    "scrollUp",
    "scrollDown",
    "deleteCharBackward",
    "deleteCharForward",
    "cursorLineStart",
    "cursorLineEnd",
    "cursorUp",
    "cursorDown",
    "cursorLeft",
    "cursorRight",
)


class ChatKeybindingsManager:
    """Resolves terminal input to chat actions."""

    def __init__(self, config: ChatKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[str, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: ChatKeybindingsConfig) -> None:
        self._action_to_keys.clear()
        for action, keys in DEFAULT_CHAT_KEYBINDINGS.items():
            self._action_to_keys[action] = list(keys)
        # User overrides replace the default list for that action
        for action, keys in config.items():
            if keys is None:
                continue
            if action not in DEFAULT_CHAT_KEYBINDINGS:
                raise ValueError(f"Unknown chat action: {action!r}")
            self._action_to_keys[action] = list(keys) if isinstance(keys, list) else [keys]

    def matches(self, data: str, action: str) -> bool:
        """Check if input data matches a specific action."""
        return any(matches_key(data, k) for k in self._action_to_keys.get(action, []))

    def resolve(self, data: str) -> str | None:
        """Return the action bound to *data*, or None if it is not a bound key."""
        for action in _ACTION_PRIORITY:
            if self.matches(data, action):
                return action
        return None

    def get_keys(self, action: str) -> list[KeyId]:
        """Get keys bound to an action."""
        return list(self._action_to_keys.get(action, []))

    def get_bindings(self) -> dict[str, list[KeyId]]:
        return {action: list(keys) for action, keys in self._action_to_keys.items()}

    def find_conflicts(self) -> dict[str, list[str]]:
        """Key ids bound to more than one action, mapped to those actions."""
        owners: dict[str, list[str]] = {}
        for action, keys in self._action_to_keys.items():
            for key in keys:
                owners.setdefault(normalize_key_id(key), []).append(action)
        return {key: actions for key, actions in owners.items() if len(actions) > 1}

    def set_config(self, config: ChatKeybindingsConfig) -> None:
        self._build_maps(config)
