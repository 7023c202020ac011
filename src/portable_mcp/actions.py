"""Synchronous entry points shared by the CLI commands and interactive mode.

Each call builds its own ``AppState`` and runs one pipeline under
``asyncio.run``; results are rendered on the given rich console.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from rich.markup import escape

from portable_mcp.operations import merge_config, replace_config, store_config
from portable_mcp.state import open_app_state

if TYPE_CHECKING:
    from rich.console import Console

    from portable_mcp.config import Settings
    from portable_mcp.models.gist import GistReference
    from portable_mcp.models.source import GistSource, UrlSource

TransferAction = Literal["replace", "merge"]


def transfer(
    settings: Settings,
    action: TransferAction,
    source: UrlSource | GistSource,
    destination: Path,
    console: Console,
) -> None:
    """Download ``source`` and replace or merge it into ``destination``."""

    async def _run() -> None:
        async with open_app_state(settings) as state:
            if action == "replace":
                with console.status("Downloading and writing configuration..."):
                    await replace_config(state.resolver, source, destination)
            else:
                with console.status("Downloading and merging configuration..."):
                    await merge_config(state.resolver, source, destination)

    asyncio.run(_run())
    verb = "replaced" if action == "replace" else "merged"
    console.print(f"[green]Configuration {verb} at:[/green] {escape(str(destination))}")


def store(
    settings: Settings,
    source_path: Path,
    console: Console,
    *,
    file_name: str,
    gist_id: str | None = None,
    private: bool = False,
) -> GistReference:
    async def _run() -> GistReference:
        async with open_app_state(settings) as state:
            with console.status("Uploading configuration to Gist..."):
                return await store_config(
                    settings,
                    state.http_client,
                    source_path,
                    file_name=file_name,
                    gist_id=gist_id,
                    private=private,
                )

    reference = asyncio.run(_run())
    display_store_result(reference, console)
    return reference


def display_store_result(reference: GistReference, console: Console) -> None:
    console.print("[green]Configuration uploaded to Gist![/green]")
    console.print(f"[blue]Gist URL:[/blue] {escape(reference.url or '(unknown)')}")
    console.print(f"[blue]Gist ID:[/blue] {escape(reference.id)}")
    console.print(f"[blue]View with:[/blue] {escape(reference.view_command)}")
