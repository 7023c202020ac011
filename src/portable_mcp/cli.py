"""portable-mcp command line interface."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from portable_mcp import __version__
from portable_mcp.actions import TransferAction, store, transfer
from portable_mcp.config import Settings
from portable_mcp.errors import PortableMcpError, SourceError
from portable_mcp.log_config import setup_logging
from portable_mcp.models.source import source_from_options
from portable_mcp.operations import default_file_name, resolve_destination
from portable_mcp.paths import ClientApp, default_config_path
from portable_mcp.prompt import run_prompt

console = Console()
err_console = Console(stderr=True)

CLIENT_CHOICE = click.Choice([app.value for app in ClientApp], case_sensitive=False)


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Render typed errors and exit with status 1."""
    try:
        yield
    except PortableMcpError as exc:
        err_console.print(f"[red]{escape(f'Error [{exc.code}]:')}[/red] {escape(str(exc))}")
        if exc.recoverable:
            err_console.print("[dim]This is usually temporary; try again shortly.[/dim]")
        sys.exit(1)


def _source_options(func: Callable[..., Any]) -> Callable[..., Any]:
    func = click.option(
        "--destination",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Custom destination path for the configuration file",
    )(func)
    func = click.option(
        "--gist", help="GitHub Gist ID or ID/filename for multi-file gists"
    )(func)
    func = click.option("--json-url", help="URL to download the JSON configuration from")(func)
    func = click.option(
        "--type", "app", type=CLIENT_CHOICE, help="Target application type"
    )(func)
    return func


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="portable-mcp")
@click.pass_context
def main(ctx: click.Context) -> None:
    """Manage MCP configurations across different environments."""
    try:
        settings = Settings()
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration: {exc}") from exc
    setup_logging(settings.logging)
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        console.print("[yellow]Welcome to Portable MCP Manager![/yellow]")
        console.print("[bright_black]Starting interactive mode...[/bright_black]\n")
        with reporting_errors():
            run_prompt(settings, console)


def _run_transfer(
    settings: Settings,
    action: TransferAction,
    app: str | None,
    json_url: str | None,
    gist: str | None,
    destination: Path | None,
) -> None:
    with reporting_errors():
        source = source_from_options(json_url, gist)
        target = resolve_destination(destination, app)
        transfer(settings, action, source, target, console)


@main.command()
@_source_options
@click.pass_obj
def replace(
    settings: Settings,
    app: str | None,
    json_url: str | None,
    gist: str | None,
    destination: Path | None,
) -> None:
    """Replace the MCP configuration file."""
    _run_transfer(settings, "replace", app, json_url, gist, destination)


@main.command()
@_source_options
@click.pass_obj
def merge(
    settings: Settings,
    app: str | None,
    json_url: str | None,
    gist: str | None,
    destination: Path | None,
) -> None:
    """Merge configuration with existing MCP file."""
    _run_transfer(settings, "merge", app, json_url, gist, destination)


@main.command()
@click.option("--type", "app", type=CLIENT_CHOICE, default="cursor", show_default=True)
def path(app: str) -> None:
    """Get the default configuration path for a type."""
    with reporting_errors():
        console.print(f"[blue]Default path:[/blue] {escape(str(default_config_path(app)))}")


@main.command("store")
@click.option("--type", "app", type=CLIENT_CHOICE, help="Source application type")
@click.option("--gist", "gist_id", help="GitHub Gist ID to update (creates a new gist if omitted)")
@click.option("--private", is_flag=True, default=False, help="Create a secret gist")
@click.option(
    "--source",
    "source_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Custom source path for the configuration file",
)
@click.pass_obj
def store_command(
    settings: Settings,
    app: str | None,
    gist_id: str | None,
    private: bool,
    source_path: Path | None,
) -> None:
    """Upload configuration to GitHub Gist."""
    with reporting_errors():
        if source_path is None:
            if app is None:
                raise SourceError("Either --type or --source must be provided")
            source_path = default_config_path(app)
        store(
            settings,
            source_path.expanduser(),
            console,
            file_name=default_file_name(app),
            gist_id=gist_id,
            private=private,
        )


@main.command()
@click.pass_obj
def prompt(settings: Settings) -> None:
    """Interactive mode - asks questions to guide you through the process."""
    with reporting_errors():
        run_prompt(settings, console)
