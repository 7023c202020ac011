"""Shared fixtures: isolated environment, settings and a controllable clock."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
import structlog

from portable_mcp.cache import FileCache
from portable_mcp.config import Settings

if TYPE_CHECKING:
    from pathlib import Path


class FakeClock:
    """Stands in for ``time.time`` so cache ages can be set exactly."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's token and cache overrides out of the tests."""
    for name in list(os.environ):
        if name.startswith("PORTABLE_MCP") or name == "GITHUB_TOKEN":
            monkeypatch.delenv(name)


@pytest.fixture(autouse=True)
def _reset_structlog():
    # The CLI reconfigures structlog against click's captured streams
    yield
    structlog.reset_defaults()


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Anonymous settings with the cache under tmp_path."""
    return Settings(cache={"directory": str(tmp_path / "cache")})


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def cache(tmp_path: Path, clock: FakeClock) -> FileCache:
    return FileCache(tmp_path / "cache", ttl_seconds=3600, clock=clock)
