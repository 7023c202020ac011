"""Resolve a source descriptor into a parsed configuration document.

Direct URLs go through the download cache. Gist sources are first resolved
to one file's ``raw_url`` through the gist API, then downloaded exactly like
a direct URL, so the cache is keyed by the raw URL.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from portable_mcp.errors import (
    AmbiguousSourceError,
    NotFoundError,
    ParseError,
    SourceError,
)
from portable_mcp.fetcher import Fetcher, github_headers
from portable_mcp.models.gist import GistFile, GistMetadata
from portable_mcp.models.source import GistSource, UrlSource

if TYPE_CHECKING:
    from portable_mcp.cache import FileCache
    from portable_mcp.config import Settings

log = structlog.get_logger()


def select_gist_file(source: GistSource, metadata: GistMetadata) -> GistFile:
    """Pick the file to download from a gist listing.

    Priority: the explicitly named file, the only file, the only ``.json``
    file. Anything else is ambiguous.
    """
    names = list(metadata.files)
    if not names:
        raise NotFoundError(f"Gist {source.gist_id} contains no files")

    if source.file_name:
        selected = metadata.files.get(source.file_name)
        if selected is None:
            raise NotFoundError(
                f"File '{source.file_name}' not found in gist {source.gist_id}",
                suggestion="available files: " + ", ".join(names),
            )
        return selected

    if len(names) == 1:
        return metadata.files[names[0]]

    json_names = [name for name in names if name.endswith(".json")]
    if len(json_names) == 1:
        return metadata.files[json_names[0]]

    raise AmbiguousSourceError(
        f"Multiple files in gist {source.gist_id}; specify a file name",
        candidates=[f"{source.gist_id}/{name}" for name in names],
    )


def parse_document(text: str, origin: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"Invalid JSON from {origin}: {exc}") from exc


class Resolver:
    """Turns a ``UrlSource`` or ``GistSource`` into a ConfigDocument."""

    def __init__(self, fetcher: Fetcher, cache: FileCache, settings: Settings) -> None:
        self._fetcher = fetcher
        self._cache = cache
        self._settings = settings

    async def resolve(self, source: UrlSource | GistSource | None) -> Any:
        if isinstance(source, UrlSource):
            return await self.fetch_url(source.url)
        if isinstance(source, GistSource):
            return await self.resolve_gist(source)
        raise SourceError("Either --json-url or --gist must be provided")

    async def fetch_url(self, url: str) -> Any:
        entry = self._cache.get(url)
        if entry is not None and not entry.stale:
            try:
                document = json.loads(entry.content)
            except json.JSONDecodeError:
                log.warning("cache_entry_corrupt", url=url, path=str(entry.path))
            else:
                log.info("cache_hit", url=url, fetched_at=entry.fetched_at.isoformat())
                return document

        log.info("cache_miss", url=url, stale=entry is not None)
        text = await self._fetcher.fetch(url)
        document = parse_document(text, url)
        self._cache.set(url, text)
        return document

    async def resolve_gist(self, source: GistSource) -> Any:
        api_url = f"{self._settings.github.api_base.rstrip('/')}/gists/{source.gist_id}"
        text = await self._fetcher.fetch(api_url, headers=github_headers(self._settings.github_token))
        try:
            metadata = GistMetadata.model_validate(parse_document(text, api_url))
        except ValidationError as exc:
            raise ParseError(f"Unexpected gist response for {source.gist_id}: {exc}") from exc

        selected = select_gist_file(source, metadata)
        log.info("gist_file_selected", gist_id=source.gist_id, raw_url=selected.raw_url)
        return await self.fetch_url(selected.raw_url)
