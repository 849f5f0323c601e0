"""
CLI entry point for tui-chat.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from .app import ChatApp, simulated_responder
from .config import (
    APP_NAME,
    VERSION,
    ChatSettings,
    ConfigError,
    get_debug_log_path,
    get_settings_path,
    load_settings,
)
from .keybindings import ChatKeybindingsManager

app = typer.Typer(
    name=APP_NAME,
    help="Terminal chat panel with a wrapped input editor and scrollback",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def _load(settings_path: Optional[str]) -> ChatSettings:
    try:
        return load_settings(settings_path)
    except ConfigError as e:
        err_console.print(f"[red]Invalid settings:[/red] {e}")
        raise typer.Exit(code=2)


def _configure_logging(log_file: Optional[str]) -> None:
    # stdout belongs to the TUI, so logs only ever go to a file
    if not log_file:
        return
    os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger("tui_chat")
    root.addHandler(handler)
    root.setLevel(logging.DEBUG)


@app.command()
def run(
    settings_path: Optional[str] = typer.Option(None, "--settings", "-s", help="Path to settings.json"),
    no_reply: bool = typer.Option(False, "--no-reply", help="Do not answer submitted messages"),
    reply: Optional[str] = typer.Option(None, "--reply", help="Fixed reply text for every message"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write debug logs to this file"),
    debug: bool = typer.Option(False, "--debug", help="Write debug logs to the default debug log file"),
) -> None:
    """Start the interactive chat."""
    from .runner import ChatRunner
    from .terminal import ProcessTerminal

    settings = _load(settings_path)
    if debug and not (log_file or settings.log_file):
        log_file = get_debug_log_path()
    _configure_logging(log_file or settings.log_file)

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        err_console.print("[red]tui-chat needs an interactive terminal.[/red]")
        raise typer.Exit(code=1)

    if no_reply:
        responder = None
    elif reply is not None:
        responder = lambda _text: reply  # noqa: E731
    else:
        responder = simulated_responder

    try:
        keybindings = ChatKeybindingsManager(settings.keybindings)
    except ValueError as e:
        err_console.print(f"[red]Invalid keybindings:[/red] {e}")
        raise typer.Exit(code=2)

    chat = ChatApp(settings, responder=responder, keybindings=keybindings)
    ChatRunner(chat, ProcessTerminal()).run()


@app.command()
def keys(
    settings_path: Optional[str] = typer.Option(None, "--settings", "-s", help="Path to settings.json"),
) -> None:
    """Show the effective keybindings."""
    settings = _load(settings_path)
    try:
        manager = ChatKeybindingsManager(settings.keybindings)
    except ValueError as e:
        err_console.print(f"[red]Invalid keybindings:[/red] {e}")
        raise typer.Exit(code=2)

    table = Table(title="Keybindings")
    table.add_column("Action")
    table.add_column("Keys")
    for action, bound in manager.get_bindings().items():
        table.add_row(action, ", ".join(bound) if bound else "[dim](unbound)[/dim]")
    console.print(table)

    conflicts = manager.find_conflicts()
    for key, actions in conflicts.items():
        console.print(f"[yellow]Warning:[/yellow] {key} is bound to {', '.join(actions)}")
    if settings_path is None:
        console.print(f"[dim]Settings: {get_settings_path()}[/dim]")


@app.command()
def version() -> None:
    """Print the version."""
    console.print(f"{APP_NAME} {VERSION}")


def main() -> None:
    """Main CLI entrypoint."""
    app()


if __name__ == "__main__":
    main()
