"""HTTP client construction and plain GET fetching."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from portable_mcp import __version__
from portable_mcp.errors import FetchError

if TYPE_CHECKING:
    from portable_mcp.config import GitHubSettings

log = structlog.get_logger()

USER_AGENT = f"portable-mcp/{__version__}"


def build_http_client(settings: GitHubSettings | None = None) -> httpx.AsyncClient:
    """Shared client for the whole command. Gist raw URLs may redirect."""
    timeout = settings.timeout_seconds if settings is not None else 30.0
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
    )


def github_headers(token: str | None) -> dict[str, str]:
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class Fetcher:
    """GET a URL and return its body, mapping every failure to ``FetchError``."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def fetch(self, url: str, headers: dict[str, str] | None = None) -> str:
        try:
            response = await self._client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            log.warning("fetch_network_error", url=url, error=str(exc))
            raise FetchError(f"Failed to download {url}: {exc}") from exc

        if not response.is_success:
            log.warning("fetch_http_error", url=url, status_code=response.status_code)
            raise FetchError(
                f"Failed to download {url}: {response.status_code} {response.reason_phrase}",
                status=response.status_code,
            )

        log.debug("fetch_complete", url=url, size=len(response.content))
        return response.text
