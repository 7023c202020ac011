"""Integration test fixtures.

Provides a fully wired AppState (real file cache under tmp_path, real
httpx client whose traffic tests intercept with respx).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from portable_mcp.state import AppState, open_app_state

if TYPE_CHECKING:
    from portable_mcp.config import Settings


@pytest.fixture()
async def app_state(settings: Settings) -> AppState:
    async with open_app_state(settings) as state:
        yield state
