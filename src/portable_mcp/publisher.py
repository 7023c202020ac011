"""Upload a configuration file to a GitHub gist.

Two strategies share the ``Publisher`` interface: ``ApiPublisher`` talks to
the GitHub REST API with a token, ``GhCliPublisher`` shells out to an already
authenticated GitHub CLI. ``select_publisher`` picks one per invocation.
"""

from __future__ import annotations

import asyncio
import shutil
import tempfile
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

import httpx
import structlog

from portable_mcp.errors import ConfigError, PublishError
from portable_mcp.fetcher import github_headers
from portable_mcp.models.gist import GistReference

if TYPE_CHECKING:
    from portable_mcp.config import Settings

log = structlog.get_logger()

GIST_WEB_BASE = "https://gist.github.com"


class Publisher(Protocol):
    async def publish(
        self,
        content: str,
        file_name: str,
        *,
        gist_id: str | None = None,
        private: bool = False,
    ) -> GistReference: ...


# ---------------------------------------------------------------------------
# GitHub REST API
# ---------------------------------------------------------------------------


class ApiPublisher:
    def __init__(self, client: httpx.AsyncClient, token: str, api_base: str) -> None:
        self._client = client
        self._token = token
        self._api_base = api_base.rstrip("/")

    async def publish(
        self,
        content: str,
        file_name: str,
        *,
        gist_id: str | None = None,
        private: bool = False,
    ) -> GistReference:
        body = {"files": {file_name: {"content": content}}, "public": not private}
        if gist_id:
            method, url = "PATCH", f"{self._api_base}/gists/{gist_id}"
        else:
            method, url = "POST", f"{self._api_base}/gists"

        try:
            response = await self._client.request(
                method, url, json=body, headers=github_headers(self._token)
            )
        except httpx.HTTPError as exc:
            raise PublishError(f"GitHub API request failed: {exc}") from exc

        if not response.is_success:
            log.warning("gist_publish_http_error", method=method, status_code=response.status_code)
            raise PublishError(
                f"GitHub API error: {response.status_code} {response.reason_phrase}",
                status=response.status_code,
            )

        try:
            payload = response.json()
            new_id = str(payload["id"])
        except (ValueError, KeyError, TypeError) as exc:
            raise PublishError("GitHub API returned an unexpected response") from exc

        log.info("gist_published", strategy="api", gist_id=new_id)
        return GistReference.for_gist(new_id, payload.get("html_url"))


# ---------------------------------------------------------------------------
# GitHub CLI
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CommandResult:
    returncode: int
    stdout: str
    stderr: str


CommandRunner = Callable[[Sequence[str]], Awaitable[CommandResult]]


async def run_command(args: Sequence[str]) -> CommandResult:
    proc = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    stdout, stderr = await proc.communicate()
    return CommandResult(
        returncode=proc.returncode if proc.returncode is not None else -1,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


def gist_id_from_url(output: str) -> str | None:
    """Extract the id from the gist URL ``gh gist create`` prints last."""
    lines = [line.strip() for line in output.strip().splitlines() if line.strip()]
    if not lines or "gist.github.com" not in lines[-1]:
        return None
    gist_id = lines[-1].rstrip("/").rsplit("/", 1)[-1]
    return gist_id or None


class GhCliPublisher:
    def __init__(self, executable: str = "gh", run: CommandRunner = run_command) -> None:
        self._executable = executable
        self._run = run

    async def publish(
        self,
        content: str,
        file_name: str,
        *,
        gist_id: str | None = None,
        private: bool = False,
    ) -> GistReference:
        # The gist file takes the local file's name, so write under file_name
        with tempfile.TemporaryDirectory(prefix="portable-mcp-") as tmp:
            path = Path(tmp) / file_name
            path.write_text(content, encoding="utf-8")
            if gist_id:
                await self._edit(gist_id, file_name, path)
            else:
                gist_id = await self._create(path, private)

        username = await self._username()
        if username:
            url = f"{GIST_WEB_BASE}/{username}/{gist_id}"
        else:
            url = f"{GIST_WEB_BASE}/{gist_id}"
        log.info("gist_published", strategy="gh", gist_id=gist_id)
        return GistReference.for_gist(gist_id, url)

    async def _invoke(self, args: list[str]) -> CommandResult:
        try:
            return await self._run(args)
        except OSError as exc:
            raise PublishError(f"Could not run GitHub CLI: {exc}") from exc

    async def _create(self, path: Path, private: bool) -> str:
        visibility = "--secret" if private else "--public"
        result = await self._invoke([self._executable, "gist", "create", visibility, str(path)])
        if result.returncode != 0:
            raise PublishError(f"GitHub CLI failed to create gist: {result.stderr.strip()}")
        gist_id = gist_id_from_url(result.stdout)
        if gist_id is None:
            raise PublishError(
                "GitHub CLI did not return a valid gist URL",
                suggestion="the gist may have been created; check `gh gist list`",
            )
        return gist_id

    async def _edit(self, gist_id: str, file_name: str, path: Path) -> None:
        result = await self._invoke(
            [self._executable, "gist", "edit", gist_id, "--filename", file_name, str(path)]
        )
        if result.returncode != 0 and "has no file" in result.stderr:
            # --filename only selects existing files; --add names the new one after path
            log.debug("gh_gist_file_missing", gist_id=gist_id, file_name=file_name)
            result = await self._invoke(
                [self._executable, "gist", "edit", gist_id, "--add", str(path)]
            )
        if result.returncode != 0:
            raise PublishError(f"GitHub CLI failed to edit gist {gist_id}: {result.stderr.strip()}")

    async def _username(self) -> str | None:
        try:
            result = await self._run([self._executable, "api", "user", "--jq", ".login"])
        except OSError:
            log.debug("gh_username_lookup_failed", exc_info=True)
            return None
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None


# ---------------------------------------------------------------------------
# Strategy selection
# ---------------------------------------------------------------------------


def select_publisher(
    settings: Settings,
    client: httpx.AsyncClient,
    which: Callable[[str], str | None] = shutil.which,
    run: CommandRunner = run_command,
) -> Publisher:
    """Token first, then the GitHub CLI, else ``ConfigError``. Makes no network calls."""
    token = settings.github_token
    if token:
        return ApiPublisher(client, token, settings.github.api_base)

    executable = which(settings.github.cli)
    if executable:
        return GhCliPublisher(executable, run)

    raise ConfigError(
        "No GitHub credential or CLI available",
        suggestion="set GITHUB_TOKEN or install and authenticate the GitHub CLI (gh auth login)",
    )
