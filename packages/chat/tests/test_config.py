"""Tests for tui_chat.config"""
import json
import os

import pytest

from tui_chat.config import (
    CONFIG_DIR_NAME,
    ChatSettings,
    ConfigError,
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
)


class TestPaths:
    def test_default_dir(self, monkeypatch):
        monkeypatch.delenv("TUI_CHAT_DIR", raising=False)
        assert get_config_dir() == os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)

    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TUI_CHAT_DIR", str(tmp_path))
        assert get_settings_path() == str(tmp_path / "settings.json")


class TestChatSettings:
    def test_defaults(self):
        s = ChatSettings()
        assert (s.user_name, s.reply_name, s.scroll_step, s.max_input_lines) == ("User", "AI", 5, 10)

    def test_from_dict_maps_camel_case(self):
        s = ChatSettings.from_dict({"userName": "me", "scrollStep": 3, "maxInputLines": 4})
        assert s.user_name == "me"
        assert s.scroll_step == 3
        assert s.max_input_lines == 4

    def test_unknown_keys_ignored(self):
        s = ChatSettings.from_dict({"theme": "dark", "replyName": "bot"})
        assert s.reply_name == "bot"

    def test_to_dict_round_trip(self):
        s = ChatSettings(user_name="me", keybindings={"quit": "ctrl+q"})
        data = s.to_dict()
        assert data["userName"] == "me"
        assert ChatSettings.from_dict(data) == s

    @pytest.mark.parametrize(
        "data",
        [{"scrollStep": 0}, {"scrollStep": "5"}, {"maxInputLines": True}, {"userName": 3},
         {"keybindings": []}, {"keybindings": {"quit": 3}}, {"logFile": 1}],
    )
    def test_invalid_values(self, data):
        with pytest.raises(ConfigError):
            ChatSettings.from_dict(data)


class TestLoadSettings:
    def test_missing_default_file_gives_defaults(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TUI_CHAT_DIR", str(tmp_path))
        assert load_settings() == ChatSettings()

    def test_missing_explicit_file_is_error(self, tmp_path):
        with pytest.raises(ConfigError):
            load_settings(str(tmp_path / "nope.json"))

    def test_load_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"chatTitle": "Room", "keybindings": {"submit": ["ctrl+s"]}}))
        s = load_settings(str(path))
        assert s.chat_title == "Room"
        assert s.keybindings == {"submit": ["ctrl+s"]}

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError, match="invalid JSON"):
            load_settings(str(path))

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2]")
        with pytest.raises(ConfigError):
            load_settings(str(path))

    def test_config_error_is_value_error(self):
        assert issubclass(ConfigError, ValueError)

    def test_save_then_load(self, tmp_path):
        path = str(tmp_path / "sub" / "settings.json")
        save_settings(ChatSettings(input_title="Say"), path)
        assert load_settings(path).input_title == "Say"
