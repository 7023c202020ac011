"""Interactive mode: a question-and-answer front end over the same actions."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import ValidationError
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from portable_mcp.actions import TransferAction, store, transfer
from portable_mcp.errors import PortableMcpError
from portable_mcp.models.source import GistSource, UrlSource
from portable_mcp.operations import default_file_name
from portable_mcp.paths import ClientApp, default_config_path

if TYPE_CHECKING:
    from rich.console import Console

    from portable_mcp.config import Settings

ACTIONS: list[tuple[str, str]] = [
    ("replace", "Replace configuration file"),
    ("merge", "Merge with existing configuration"),
    ("store", "Upload configuration to Gist"),
    ("path", "Show default configuration path"),
    ("exit", "Exit"),
]

CUSTOM = "custom"


def _app_choices() -> list[tuple[str, str]]:
    return [(app.value, app.label) for app in ClientApp]


def choose(console: Console, message: str, options: list[tuple[str, str]]) -> str:
    """Print a numbered menu and return the value of the picked option."""
    console.print(f"[bold]{escape(message)}[/bold]")
    for index, (_, label) in enumerate(options, start=1):
        console.print(f"  {index}. {escape(label)}")
    picked = Prompt.ask(
        "Select",
        choices=[str(i) for i in range(1, len(options) + 1)],
        default="1",
        console=console,
    )
    return options[int(picked) - 1][0]


def ask_text(console: Console, message: str, what: str) -> str:
    while True:
        value = Prompt.ask(message, console=console).strip()
        if value:
            return value
        console.print(f"[red]Please enter a valid {what}[/red]")


def ask_url(console: Console) -> UrlSource:
    while True:
        value = Prompt.ask("Enter the JSON URL", console=console).strip()
        try:
            return UrlSource(url=value)
        except ValidationError:
            console.print("[red]Please enter a valid URL[/red]")


def run_prompt(settings: Settings, console: Console) -> None:
    console.print("[blue]Welcome to Interactive MCP Manager![/blue]")
    console.print("[bright_black]Let's help you manage your MCP configurations.[/bright_black]\n")

    action = choose(console, "What would you like to do?", ACTIONS)
    if action == "exit":
        console.print("[bright_black]Goodbye![/bright_black]")
        return

    if action == "path":
        app = choose(console, "Which application?", _app_choices())
        console.print("\n[blue]Default configuration path:[/blue]")
        console.print(escape(str(default_config_path(app))))
        return

    if action == "store":
        _store_prompt(settings, console)
        return

    _transfer_prompt(settings, console, "replace" if action == "replace" else "merge")


def _store_prompt(settings: Settings, console: Console) -> None:
    app = choose(
        console,
        "Which configuration do you want to upload?",
        [*_app_choices(), (CUSTOM, "Custom path")],
    )
    if app == CUSTOM:
        source_path = Path(ask_text(console, "Enter the path to your configuration file", "path"))
    else:
        source_path = default_config_path(app)

    gist_id = None
    if Confirm.ask("Do you want to update an existing Gist?", default=False, console=console):
        gist_id = ask_text(console, "Enter the Gist ID", "Gist ID")
    private = Confirm.ask("Make the Gist private?", default=False, console=console)

    try:
        store(
            settings,
            source_path.expanduser(),
            console,
            file_name=default_file_name(None if app == CUSTOM else app),
            gist_id=gist_id,
            private=private,
        )
    except PortableMcpError as exc:
        console.print(f"\n[red]Failed to upload configuration:[/red] {escape(str(exc))}")


def _transfer_prompt(settings: Settings, console: Console, action: TransferAction) -> None:
    console.print(f"\n[blue]{action.capitalize()} Configuration[/blue]")

    source_kind = choose(
        console,
        "Where is the configuration you want to download?",
        [("url", "Direct URL"), ("gist", "GitHub Gist")],
    )
    source: UrlSource | GistSource
    if source_kind == "url":
        source = ask_url(console)
    else:
        while True:
            descriptor = ask_text(
                console, "Enter Gist ID or ID/filename (for multi-file Gists)", "Gist ID"
            )
            try:
                source = GistSource.parse(descriptor)
                break
            except PortableMcpError as exc:
                console.print(f"[red]{escape(str(exc))}[/red]")

    target = choose(
        console,
        "Where should the configuration be saved?",
        [*_app_choices(), (CUSTOM, "Custom path")],
    )
    if target == CUSTOM:
        destination = Path(ask_text(console, "Enter the destination path", "path")).expanduser()
    else:
        destination = default_config_path(target)

    console.print(f"\n[yellow]This will {action} the configuration at:[/yellow]")
    console.print(escape(str(destination)))
    if not Confirm.ask(
        f"Are you sure you want to {action} this configuration?", default=False, console=console
    ):
        console.print("[bright_black]Operation cancelled.[/bright_black]")
        return

    try:
        transfer(settings, action, source, destination, console)
    except PortableMcpError as exc:
        console.print(f"\n[red]Failed to {action} configuration:[/red] {escape(str(exc))}")
