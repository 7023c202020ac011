"""Per-invocation component wiring."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx

from portable_mcp.cache import FileCache
from portable_mcp.config import Settings
from portable_mcp.fetcher import Fetcher, build_http_client
from portable_mcp.resolver import Resolver


@dataclass
class AppState:
    """Everything a single command needs, built from one ``Settings``."""

    settings: Settings
    http_client: httpx.AsyncClient
    cache: FileCache
    fetcher: Fetcher
    resolver: Resolver


@asynccontextmanager
async def open_app_state(settings: Settings) -> AsyncIterator[AppState]:
    async with build_http_client(settings.github) as client:
        cache = FileCache(settings.cache.directory, settings.cache.ttl_seconds)
        fetcher = Fetcher(client)
        yield AppState(
            settings=settings,
            http_client=client,
            cache=cache,
            fetcher=fetcher,
            resolver=Resolver(fetcher, cache, settings),
        )
