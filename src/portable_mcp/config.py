"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments
  2. Environment variables       (PORTABLE_MCP__GITHUB__TOKEN=...)
  3. Legacy environment variables (GITHUB_TOKEN, PORTABLE_MCP_TMP)
  4. portable-mcp.yaml           (searched in cwd, then ~/.config/portable-mcp/)
  5. Hardcoded defaults

The config file is optional — all fields have sensible defaults. Core
components receive a ``Settings`` instance and never read the environment.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, SecretStr
from pydantic.fields import FieldInfo
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_CACHE_DIR = platformdirs.user_cache_dir("portable-mcp")

# Freshness window for downloaded configurations
DEFAULT_CACHE_TTL_SECONDS = 60 * 60


def _find_config_file() -> str | None:
    """Return the path of the first portable-mcp.yaml found, or None."""
    candidates = [
        Path("portable-mcp.yaml"),
        Path.home() / ".config" / "portable-mcp" / "portable-mcp.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    directory: str = _DEFAULT_CACHE_DIR
    ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS


class GitHubSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    token: SecretStr | None = None
    api_base: str = "https://api.github.com"
    cli: str = "gh"
    timeout_seconds: float = 30.0


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    format: Literal["json", "text"] = "text"


class _LegacyEnvSource(PydanticBaseSettingsSource):
    """Unprefixed variables understood by earlier releases of the tool."""

    def get_field_value(self, field: FieldInfo, field_name: str) -> tuple[Any, str, bool]:
        return None, field_name, False

    def __call__(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        token = os.environ.get("GITHUB_TOKEN")
        if token:
            data["github"] = {"token": token}
        cache_dir = os.environ.get("PORTABLE_MCP_TMP")
        if cache_dir:
            data["cache"] = {"directory": cache_dir}
        return data


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: PORTABLE_MCP__CACHE__TTL_SECONDS=60
        env_prefix="PORTABLE_MCP__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    cache: CacheSettings = CacheSettings()
    github: GitHubSettings = GitHubSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def github_token(self) -> str | None:
        if self.github.token is None:
            return None
        return self.github.token.get_secret_value() or None

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # PORTABLE_MCP__* variables
            _LegacyEnvSource(settings_cls),  # GITHUB_TOKEN, PORTABLE_MCP_TMP
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
