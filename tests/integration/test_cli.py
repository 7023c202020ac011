"""CLI tests through click's CliRunner with HTTP intercepted by respx."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import httpx
import pytest
import respx
from click.testing import CliRunner

from portable_mcp import __version__
from portable_mcp.cli import main
from portable_mcp.paths import default_config_path

if TYPE_CHECKING:
    from pathlib import Path

REMOTE = {"mcpServers": {"a": {"cmd": "x"}}}


@pytest.fixture()
def runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    monkeypatch.setenv("PORTABLE_MCP_TMP", str(tmp_path / "cache"))
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    return CliRunner()


class TestReplaceAndMerge:
    def test_replace_writes_destination(self, runner: CliRunner, tmp_path: Path) -> None:
        destination = tmp_path / "out.json"
        with respx.mock:
            respx.get("https://x/cfg.json").mock(return_value=httpx.Response(200, json=REMOTE))
            result = runner.invoke(
                main, ["replace", "--json-url", "https://x/cfg.json", "--destination", str(destination)]
            )
        assert result.exit_code == 0, result.output
        assert "replaced" in result.output
        assert json.loads(destination.read_text(encoding="utf-8")) == REMOTE

    def test_merge_keeps_existing_keys(self, runner: CliRunner, tmp_path: Path) -> None:
        destination = tmp_path / "out.json"
        destination.write_text('{"mcpServers": {"b": {"cmd": "y"}}, "other": 1}', encoding="utf-8")
        with respx.mock:
            respx.get("https://x/cfg.json").mock(return_value=httpx.Response(200, json=REMOTE))
            result = runner.invoke(
                main, ["merge", "--json-url", "https://x/cfg.json", "--destination", str(destination)]
            )
        assert result.exit_code == 0, result.output
        assert json.loads(destination.read_text(encoding="utf-8")) == {
            "mcpServers": {"a": {"cmd": "x"}, "b": {"cmd": "y"}},
            "other": 1,
        }

    def test_type_writes_client_default_path(self, runner: CliRunner, tmp_path: Path) -> None:
        with respx.mock:
            respx.get("https://x/cfg.json").mock(return_value=httpx.Response(200, json=REMOTE))
            result = runner.invoke(
                main, ["replace", "--json-url", "https://x/cfg.json", "--type", "cursor"]
            )
        assert result.exit_code == 0, result.output
        written = default_config_path("cursor")
        assert written.is_relative_to(tmp_path / "home")
        assert json.loads(written.read_text(encoding="utf-8")) == REMOTE

    def test_missing_source_exits_1(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(main, ["replace", "--destination", str(tmp_path / "out.json")])
        assert result.exit_code == 1
        assert "Error [SOURCE_INVALID]:" in result.output

    def test_missing_destination_exits_1(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["merge", "--json-url", "https://x/cfg.json"])
        assert result.exit_code == 1
        assert "--destination" in result.output

    def test_ambiguous_gist_exits_1(self, runner: CliRunner, tmp_path: Path) -> None:
        files = {
            name: {"raw_url": f"https://gist.example/raw/{name}"} for name in ("a.json", "b.json")
        }
        with respx.mock:
            respx.get("https://api.github.com/gists/abc").mock(
                return_value=httpx.Response(200, json={"files": files})
            )
            result = runner.invoke(
                main, ["replace", "--gist", "abc", "--destination", str(tmp_path / "out.json")]
            )
        assert result.exit_code == 1
        assert "Error [AMBIGUOUS_SOURCE]:" in result.output
        assert "abc/a.json" in result.output
        assert not (tmp_path / "out.json").exists()

    def test_server_error_reported_as_retryable(self, runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "out.json"
        with respx.mock:
            respx.get("https://x/cfg.json").mock(return_value=httpx.Response(503))
            result = runner.invoke(
                main,
                ["replace", "--json-url", "https://x/cfg.json", "--destination", str(out)],
            )
        assert result.exit_code == 1
        assert "Error [FETCH_FAILED]:" in result.output
        assert "try again" in result.output

    def test_client_error_not_reported_as_retryable(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        out = tmp_path / "out.json"
        with respx.mock:
            respx.get("https://x/cfg.json").mock(return_value=httpx.Response(404))
            result = runner.invoke(
                main,
                ["replace", "--json-url", "https://x/cfg.json", "--destination", str(out)],
            )
        assert result.exit_code == 1
        assert "Error [FETCH_FAILED]:" in result.output
        assert "try again" not in result.output

    def test_unknown_type_rejected_by_click(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["replace", "--json-url", "https://x/cfg.json", "--type", "vim"])
        assert result.exit_code == 2


class TestPathCommand:
    def test_prints_default_path(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["path", "--type", "claude"])
        assert result.exit_code == 0
        assert "Default path:" in result.output
        assert "claude_desktop_config.json" in result.output.replace("\n", "")


class TestStoreCommand:
    def test_store_with_token(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("GITHUB_TOKEN", "ghp_token")
        source = tmp_path / "mcp.json"
        source.write_text("{}", encoding="utf-8")
        with respx.mock:
            route = respx.post("https://api.github.com/gists").mock(
                return_value=httpx.Response(
                    201, json={"id": "g1", "html_url": "https://gist.github.com/me/g1"}
                )
            )
            result = runner.invoke(main, ["store", "--source", str(source), "--private"])
        assert result.exit_code == 0, result.output
        assert "g1" in result.output
        body = json.loads(route.calls.last.request.content)
        assert body == {"files": {"mcp.json": {"content": "{}"}}, "public": False}

    def test_store_without_credentials_exits_1(
        self, runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PORTABLE_MCP__GITHUB__CLI", "portable-mcp-test-no-such-gh")
        source = tmp_path / "mcp.json"
        source.write_text("{}", encoding="utf-8")
        result = runner.invoke(main, ["store", "--source", str(source)])
        assert result.exit_code == 1
        assert "GitHub" in result.output

    def test_store_needs_type_or_source(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["store"])
        assert result.exit_code == 1


class TestGroup:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_invalid_settings_reported(
        self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PORTABLE_MCP__CACHE__TTL_SECONDS", "soon")
        result = runner.invoke(main, ["path"])
        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
