"""
Root conftest.py — registers custom markers and shared fixtures.

Markers:
  @pytest.mark.tty   — needs a real interactive terminal; skipped unless
                       TUI_CHAT_TTY_TESTS=1 or --tty
"""
from __future__ import annotations

import os

import pytest

from tui_chat.keys import set_kitty_protocol_active


# ---------------------------------------------------------------------------
# Custom markers
# ---------------------------------------------------------------------------

def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "tty: mark test as requiring an interactive terminal (run with TUI_CHAT_TTY_TESTS=1 or --tty flag)",
    )


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--tty",
        action="store_true",
        default=False,
        help="Run tests marked with @pytest.mark.tty (requires a real terminal)",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Skip @pytest.mark.tty tests unless --tty flag or TUI_CHAT_TTY_TESTS=1 is set."""
    run_tty = config.getoption("--tty") or os.environ.get("TUI_CHAT_TTY_TESTS", "").lower() in ("1", "true", "yes")
    skip_tty = pytest.mark.skip(reason="Terminal test — run with --tty or TUI_CHAT_TTY_TESTS=1")
    for item in items:
        if "tty" in item.keywords and not run_tty:
            item.add_marker(skip_tty)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _reset_kitty_protocol():
    """Key decoding depends on global Kitty state; keep tests independent."""
    set_kitty_protocol_active(False)
    yield
    set_kitty_protocol_active(False)
