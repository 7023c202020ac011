"""Default MCP configuration locations for the supported client applications."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path

from portable_mcp.errors import UnsupportedClientError


class ClientApp(StrEnum):
    CURSOR = "cursor"
    CLAUDE = "claude"

    @property
    def label(self) -> str:
        return {ClientApp.CURSOR: "Cursor", ClientApp.CLAUDE: "Claude Desktop"}[self]


def parse_client(value: str) -> ClientApp:
    try:
        return ClientApp(value.strip().lower())
    except ValueError:
        supported = ", ".join(app.value for app in ClientApp)
        raise UnsupportedClientError(
            f"Unsupported type: {value}", suggestion=f"supported types: {supported}"
        ) from None


def default_config_path(
    app: ClientApp | str,
    *,
    platform: str = sys.platform,
    home: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> Path:
    """Where ``app`` reads its MCP server configuration on ``platform``.

    Claude Desktop keeps its file under ``%APPDATA%\\Claude`` on Windows and
    ``~/.config/Claude`` on Linux, not ``~/.claude`` (which belongs to the
    Claude CLI), so those are the paths returned.
    """
    app = app if isinstance(app, ClientApp) else parse_client(app)
    home = home if home is not None else Path.home()
    env = env if env is not None else os.environ
    mac_support = home / "Library" / "Application Support"

    if app is ClientApp.CURSOR:
        if platform == "darwin":
            return mac_support / "Cursor" / "User" / "mcp.json"
        return home / ".cursor" / "mcp.json"

    if platform == "darwin":
        return mac_support / "Claude" / "claude_desktop_config.json"
    if platform == "win32":
        appdata = env.get("APPDATA") or str(home / "AppData" / "Roaming")
        return Path(appdata) / "Claude" / "claude_desktop_config.json"
    return home / ".config" / "Claude" / "claude_desktop_config.json"
