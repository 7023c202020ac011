from __future__ import annotations

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """Raw JSON text downloaded from a source URL."""

    key: str  # Source URL
    path: Path  # <cache_dir>/<sha256(key)>.json
    content: str
    fetched_at: datetime  # File mtime, UTC
    stale: bool = False
