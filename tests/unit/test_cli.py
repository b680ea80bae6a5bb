"""Tests for the CLI commands: argument parsing, output formatting, errors."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from fbpages.cli.app import _call_async, _JsonFormatter, _setup_logging, cli
from fbpages.config.schema import FbPagesConfig, GraphConfig, LoggingConfig
from fbpages.tools.base import ErrorKind, Failure, Success

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def _no_logging_setup() -> Iterator[None]:
    with patch("fbpages.cli.app._setup_logging"):
        yield


# ── CLI group ────────────────────────────────────────────────────


class TestCliGroup:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "fbpages" in result.output
        assert "1.0.0" in result.output

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        for command in ("stdio", "serve", "tools", "call"):
            assert command in result.output

    def test_no_command_runs_stdio(self, runner: CliRunner) -> None:
        with patch("fbpages.mcp.server.run_stdio", new_callable=AsyncMock) as run:
            result = runner.invoke(cli, [])
        assert result.exit_code == 0
        run.assert_awaited_once()

    def test_missing_config_file(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--config", "/nonexistent.toml", "tools"])
        assert result.exit_code != 0

    def test_invalid_config_file(self, runner: CliRunner, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[graph\n")
        with patch("fbpages.mcp.server.run_stdio", new_callable=AsyncMock):
            result = runner.invoke(cli, ["--config", str(path), "stdio"])
        assert result.exit_code == 1
        assert "Invalid TOML" in result.output


# ── stdio / serve ────────────────────────────────────────────────


class TestStdio:
    def test_passes_config(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FACEBOOK_PAGE_ACCESS_TOKEN", "EAAB-env")
        with patch("fbpages.mcp.server.run_stdio", new_callable=AsyncMock) as run:
            result = runner.invoke(cli, ["stdio"])
        assert result.exit_code == 0
        config = run.await_args.args[0]
        assert config.graph.access_token == "EAAB-env"

    def test_keyboard_interrupt_exits_cleanly(self, runner: CliRunner) -> None:
        with patch(
            "fbpages.mcp.server.run_stdio",
            new_callable=AsyncMock,
            side_effect=KeyboardInterrupt,
        ):
            result = runner.invoke(cli, ["stdio"])
        assert result.exit_code == 0


class TestServe:
    def test_defaults(self, runner: CliRunner) -> None:
        with patch("uvicorn.run") as run:
            result = runner.invoke(cli, ["serve"])
        assert result.exit_code == 0
        assert "http://0.0.0.0:3000/mcp" in result.output
        kwargs = run.call_args.kwargs
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 3000
        assert kwargs["log_level"] == "info"

    def test_port_env(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PORT", "8123")
        with patch("uvicorn.run") as run:
            runner.invoke(cli, ["serve"])
        assert run.call_args.kwargs["port"] == 8123

    def test_flags_override(self, runner: CliRunner) -> None:
        with patch("uvicorn.run") as run:
            runner.invoke(cli, ["serve", "--host", "127.0.0.1", "--port", "9000"])
        assert run.call_args.kwargs["host"] == "127.0.0.1"
        assert run.call_args.kwargs["port"] == 9000


# ── tools ────────────────────────────────────────────────────────


class TestToolsCommand:
    def test_lists_catalog(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["tools"])
        assert result.exit_code == 0
        assert "28 tools" in result.output
        assert "fb_get_page" in result.output

    def test_verbose(self, runner: CliRunner, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("COLUMNS", "250")
        result = runner.invoke(cli, ["tools", "-v"])
        assert result.exit_code == 0
        assert "Description" in result.output


# ── call ─────────────────────────────────────────────────────────


class TestCallCommand:
    def test_invalid_json(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["call", "fb_get_page", "{not json"])
        assert result.exit_code == 1
        assert "not valid JSON" in result.output

    def test_non_object(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["call", "fb_get_page", "[1, 2]"])
        assert result.exit_code == 1
        assert "must be a JSON object" in result.output

    def test_unknown_tool(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["call", "fb_nope"])
        assert result.exit_code == 1
        assert "unknown_tool" in result.output
        assert "Unknown tool: fb_nope" in result.output

    def test_not_configured(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["call", "fb_get_page", '{"page_id": "1"}'])
        assert result.exit_code == 1
        assert "not_configured" in result.output

    def test_success(self, runner: CliRunner) -> None:
        mock = AsyncMock(return_value=Success({"id": "123", "name": "Cafe"}))
        with patch("fbpages.cli.app._call_async", mock):
            result = runner.invoke(cli, ["call", "fb_get_page", '{"page_id": "123"}'])
        assert result.exit_code == 0
        assert '"name": "Cafe"' in result.output
        assert mock.await_args.args[1:] == ("fb_get_page", {"page_id": "123"})

    def test_remote_failure(self, runner: CliRunner) -> None:
        mock = AsyncMock(return_value=Failure(ErrorKind.REMOTE_API, "bad token", 190))
        with patch("fbpages.cli.app._call_async", mock):
            result = runner.invoke(cli, ["call", "fb_get_page", '{"page_id": "123"}'])
        assert result.exit_code == 1
        assert "Facebook API Error (190): bad token" in result.output


class TestCallAsync:
    async def test_uses_configured_credential(self) -> None:
        config = FbPagesConfig(
            graph=GraphConfig(access_token="EAAB-test", base_url="http://127.0.0.1:9")
        )
        result = await _call_async(config, "fb_nope", {})
        assert result == Failure(ErrorKind.UNKNOWN_TOOL, "Unknown tool: fb_nope")


# ── Logging ──────────────────────────────────────────────────────


class TestSetupLogging:
    @pytest.fixture(autouse=True)
    def _restore_root(self) -> Iterator[None]:
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_level_and_quiet_httpx(self) -> None:
        _setup_logging(LoggingConfig(level="debug"))
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_file_handler(self, tmp_path: Path) -> None:
        log_file = tmp_path / "fbpages.log"
        _setup_logging(LoggingConfig(file=str(log_file)))
        logging.getLogger("fbpages.test").info("hello file")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello file" in log_file.read_text()

    def test_json_formatter(self) -> None:
        record = logging.LogRecord("fbpages.x", logging.INFO, __file__, 1, "hi %s", ("there",), None)
        entry = json.loads(_JsonFormatter().format(record))
        assert entry["message"] == "hi there"
        assert entry["level"] == "INFO"
        assert entry["logger"] == "fbpages.x"
