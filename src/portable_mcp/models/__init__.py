from __future__ import annotations

from portable_mcp.models.cache import CacheEntry
from portable_mcp.models.gist import GistFile, GistMetadata, GistReference
from portable_mcp.models.source import GistSource, UrlSource, source_from_options

__all__ = [
    # cache
    "CacheEntry",
    # gist
    "GistFile",
    "GistMetadata",
    "GistReference",
    # source
    "GistSource",
    "UrlSource",
    "source_from_options",
]
