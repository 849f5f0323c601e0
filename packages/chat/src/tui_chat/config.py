"""
Configuration paths and chat settings.

Settings live in ``~/.tui-chat/settings.json`` (or ``$TUI_CHAT_DIR``). Keys
are camelCase in JSON and snake_case on ``ChatSettings``; unknown keys are
ignored so older binaries can read newer files.
"""
from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field, fields
from typing import Any, Union

logger = logging.getLogger(__name__)


APP_NAME: str = "tui-chat"
CONFIG_DIR_NAME: str = ".tui-chat"
VERSION: str = "0.1.0"

ENV_CONFIG_DIR: str = "TUI_CHAT_DIR"


class ConfigError(ValueError):
    """A settings file that cannot be used."""


# ============================================================================
# User Config Paths (~/.tui-chat/*)
# ============================================================================


def get_config_dir() -> str:
    """Get the config directory (e.g., ~/.tui-chat/)."""
    env_dir = os.environ.get(ENV_CONFIG_DIR)
    if env_dir:
        return os.path.expanduser(env_dir)
    return os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)


def get_settings_path() -> str:
    """Get path to settings.json."""
    return os.path.join(get_config_dir(), "settings.json")


def get_debug_log_path() -> str:
    """Get path to debug log file."""
    return os.path.join(get_config_dir(), f"{APP_NAME}-debug.log")


# ============================================================================
# Settings
# ============================================================================

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _to_snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


def _to_camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass
class ChatSettings:
    user_name: str = "User"
    reply_name: str = "AI"
    scroll_step: int = 5
    max_input_lines: int = 10
    chat_title: str = "Chat"
    input_title: str = "Input"
    # action -> key id or list of key ids, layered over the defaults
    keybindings: dict[str, Union[str, list[str]]] = field(default_factory=dict)
    log_file: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {_to_camel(f.name): getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatSettings":
        known = {f.name: f for f in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            name = _to_snake(key)
            if name not in known:
                logger.debug("Ignoring unknown setting %r", key)
                continue
            values[name] = value
        settings = cls(**values)
        settings.validate()
        return settings

    def validate(self) -> None:
        for name in ("user_name", "reply_name", "chat_title", "input_title"):
            if not isinstance(getattr(self, name), str):
                raise ConfigError(f"{_to_camel(name)} must be a string")
        for name in ("scroll_step", "max_input_lines"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigError(f"{_to_camel(name)} must be a positive integer")
        if self.log_file is not None and not isinstance(self.log_file, str):
            raise ConfigError("logFile must be a string")
        if not isinstance(self.keybindings, dict):
            raise ConfigError("keybindings must be an object")
        for action, keys in self.keybindings.items():
            if isinstance(keys, str):
                continue
            if not isinstance(keys, list) or not all(isinstance(k, str) for k in keys):
                raise ConfigError(f"keybindings.{action} must be a key id or a list of key ids")


def load_settings(path: str | None = None) -> ChatSettings:
    """
    Load settings from *path*, or from the default settings file.

    A missing default file yields the defaults; a missing explicit path, bad
    JSON or a wrong-typed field raises ConfigError.
    """
    explicit = path is not None
    settings_path = path or get_settings_path()
    if not os.path.exists(settings_path):
        if explicit:
            raise ConfigError(f"Settings file not found: {settings_path}")
        return ChatSettings()

    try:
        with open(settings_path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"{settings_path}: invalid JSON ({e})") from e
    except OSError as e:
        raise ConfigError(f"{settings_path}: {e.strerror or e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{settings_path}: expected a JSON object")
    logger.debug("Loaded settings from %s", settings_path)
    return ChatSettings.from_dict(raw)


def save_settings(settings: ChatSettings, path: str | None = None) -> str:
    """Write *settings* as camelCase JSON and return the path written."""
    settings_path = path or get_settings_path()
    os.makedirs(os.path.dirname(settings_path) or ".", exist_ok=True)
    with open(settings_path, "w", encoding="utf-8") as f:
        json.dump(settings.to_dict(), f, indent=2)
    return settings_path
