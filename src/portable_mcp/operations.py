"""The replace, merge and store pipelines behind each CLI command."""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

import structlog

from portable_mcp.errors import DestinationError, SourceError
from portable_mcp.merge import deep_merge, load_merge_base
from portable_mcp.paths import ClientApp, default_config_path, parse_client
from portable_mcp.publisher import select_publisher

if TYPE_CHECKING:
    import httpx

    from portable_mcp.config import Settings
    from portable_mcp.models.gist import GistReference
    from portable_mcp.models.source import GistSource, UrlSource
    from portable_mcp.publisher import Publisher
    from portable_mcp.resolver import Resolver

log = structlog.get_logger()


def resolve_destination(destination: str | Path | None, app: ClientApp | str | None) -> Path:
    if destination:
        return Path(destination).expanduser()
    if app:
        return default_config_path(app)
    raise DestinationError("Either --type or --destination must be provided")


def default_file_name(app: ClientApp | str | None) -> str:
    if app:
        return f"{parse_client(app).value}.json"
    return "mcp.json"


def write_document(path: Path, document: Any) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    except OSError as exc:
        raise DestinationError(f"Failed to write configuration to {path}: {exc}") from exc


async def replace_config(resolver: Resolver, source: UrlSource | GistSource, destination: Path) -> Path:
    document = await resolver.resolve(source)
    write_document(destination, document)
    log.info("config_replaced", destination=str(destination))
    return destination


async def merge_config(resolver: Resolver, source: UrlSource | GistSource, destination: Path) -> Any:
    """Deep-merge the remote document over the destination's current content."""
    overlay = await resolver.resolve(source)
    merged = deep_merge(load_merge_base(destination), overlay)
    write_document(destination, merged)
    log.info("config_merged", destination=str(destination))
    return merged


def read_source_file(path: Path) -> str:
    """Return the file's text after checking it parses as JSON."""
    try:
        content = path.read_text(encoding="utf-8")
        json.loads(content)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise SourceError(f"Cannot read source file: {path}. {exc}") from exc
    return content


async def store_config(
    settings: Settings,
    client: httpx.AsyncClient,
    source_path: Path,
    *,
    file_name: str = "mcp.json",
    gist_id: str | None = None,
    private: bool = False,
    publisher: Publisher | None = None,
) -> GistReference:
    """Upload ``source_path`` to a new gist, or to ``gist_id`` when given."""
    content = read_source_file(source_path)
    if publisher is None:
        publisher = select_publisher(settings, client)
    return await publisher.publish(content, file_name, gist_id=gist_id, private=private)
