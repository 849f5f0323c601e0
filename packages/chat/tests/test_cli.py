"""Tests for tui_chat.cli"""
import json
import logging

from typer.testing import CliRunner

from tui_chat.cli import app
from tui_chat.config import VERSION

runner = CliRunner()


class TestVersion:
    def test_prints_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert VERSION in result.output


class TestKeys:
    def test_lists_default_bindings(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TUI_CHAT_DIR", str(tmp_path))
        monkeypatch.setenv("COLUMNS", "120")
        result = runner.invoke(app, ["keys"])
        assert result.exit_code == 0
        assert "submit" in result.output
        assert "ctrl+c" in result.output

    def test_uses_settings_overrides(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"keybindings": {"quit": "ctrl+q"}}))
        result = runner.invoke(app, ["keys", "--settings", str(path)], env={"COLUMNS": "120"})
        assert result.exit_code == 0
        assert "ctrl+q" in result.output

    def test_bad_settings_exit_code(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("{broken")
        result = runner.invoke(app, ["keys", "--settings", str(path)])
        assert result.exit_code == 2

    def test_unknown_action_exit_code(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"keybindings": {"fly": "f"}}))
        result = runner.invoke(app, ["keys", "--settings", str(path)])
        assert result.exit_code == 2


class TestRun:
    def test_requires_terminal(self, monkeypatch, tmp_path):
        monkeypatch.setenv("TUI_CHAT_DIR", str(tmp_path))
        result = runner.invoke(app, ["run"])
        assert result.exit_code == 1

    def test_bad_settings_exit_code(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"scrollStep": -1}))
        result = runner.invoke(app, ["run", "--settings", str(path)])
        assert result.exit_code == 2

    def test_debug_logs_to_config_dir(self, monkeypatch, tmp_path):
        config_dir = tmp_path / "config"
        monkeypatch.setenv("TUI_CHAT_DIR", str(config_dir))
        logger = logging.getLogger("tui_chat")
        handlers = list(logger.handlers)
        try:
            result = runner.invoke(app, ["run", "--debug"])
            assert result.exit_code == 1
            assert (config_dir / "tui-chat-debug.log").exists()
        finally:
            for handler in logger.handlers[len(handlers):]:
                handler.close()
                logger.removeHandler(handler)
