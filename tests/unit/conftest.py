"""Unit-specific fixtures (no I/O beyond tmp_path and mocked HTTP)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from portable_mcp.fetcher import Fetcher
from portable_mcp.resolver import Resolver

if TYPE_CHECKING:
    from portable_mcp.cache import FileCache
    from portable_mcp.config import Settings


@pytest.fixture()
async def http_client():
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
def resolver(http_client: httpx.AsyncClient, cache: FileCache, settings: Settings) -> Resolver:
    return Resolver(Fetcher(http_client), cache, settings)
