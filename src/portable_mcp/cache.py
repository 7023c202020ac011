"""File-backed download cache with a fixed freshness window.

Each source URL maps to ``<directory>/<sha256(url)>.json`` holding the raw
response body. The file's modification time is the freshness clock: an entry
older than ``ttl_seconds`` is stale and callers re-fetch.

All cache operations catch ``OSError`` internally and degrade gracefully:
read failures return ``None`` (treated as cache miss by callers), write
failures are logged and ignored (fetched content is still returned).
Entries are never evicted; the next successful fetch overwrites them.
"""

from __future__ import annotations

import hashlib
import os
import tempfile
import time
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path

import structlog

from portable_mcp.models.cache import CacheEntry

log = structlog.get_logger()


def cache_key_hash(key: str) -> str:
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


class FileCache:
    """Directory of cached JSON bodies keyed by source URL."""

    def __init__(
        self,
        directory: str | Path,
        ttl_seconds: int,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._directory = Path(directory).expanduser()
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, key: str) -> Path:
        return self._directory / f"{cache_key_hash(key)}.json"

    def get(self, key: str) -> CacheEntry | None:
        """Read an entry. Returns ``None`` on cache miss or read failure."""
        path = self.path_for(key)
        try:
            mtime = path.stat().st_mtime
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError):
            log.warning("cache_read_error", key=key, path=str(path), exc_info=True)
            return None

        age = self._clock() - mtime
        return CacheEntry(
            key=key,
            path=path,
            content=content,
            fetched_at=datetime.fromtimestamp(mtime, UTC),
            stale=age >= self._ttl_seconds,
        )

    def set(self, key: str, content: str) -> None:
        """Write an entry as a whole-file replace. Non-fatal on failure."""
        path = self.path_for(key)
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._directory, prefix=".", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
            now = self._clock()
            os.utime(path, (now, now))
        except OSError:
            log.warning("cache_write_error", key=key, path=str(path), exc_info=True)
