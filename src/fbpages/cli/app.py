"""Main CLI application.

Click commands for the Facebook Pages MCP server: stdio, serve,
tools, call.
"""

from __future__ import annotations

import asyncio
import json as json_mod
import logging
import sys
from typing import TYPE_CHECKING, Any

import click

from fbpages import __version__
from fbpages.config.loader import load_config
from fbpages.core.errors import ConfigError

if TYPE_CHECKING:
    from fbpages.config.schema import FbPagesConfig, LoggingConfig
    from fbpages.tools.base import InvocationResult


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(config_path: str | None) -> FbPagesConfig:
    """Load config with user-friendly error handling."""
    try:
        return load_config(path=config_path)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy


class _JsonFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json_mod.dumps(entry)


def _setup_logging(config: LoggingConfig) -> None:
    """Configure the root logger.

    Logs go to stderr: stdout carries the stdio transport.
    """
    formatter: logging.Formatter
    if config.structured:
        formatter = _JsonFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if config.file:
        handlers.append(logging.FileHandler(config.file))
    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=config.level.upper(), handlers=handlers, force=True)

    # httpx logs full request URLs, and every Graph URL carries the token.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


# ── Group ────────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="fbpages")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """fbpages - Facebook Pages tools for MCP clients.

    Runs the MCP server on stdio when no command is given.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is None:
        ctx.invoke(stdio)


# ── stdio ────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def stdio(ctx: click.Context) -> None:
    """Start the MCP server on stdio (Claude Desktop, Cursor, VS Code)."""
    from fbpages.mcp.server import run_stdio

    config = _load_config(ctx.obj["config_path"])
    _setup_logging(config.logging)

    try:
        asyncio.run(run_stdio(config))
    except KeyboardInterrupt:
        pass


# ── serve ────────────────────────────────────────────────────────


@cli.command()
@click.option("--host", default=None, help="Host to bind to (overrides config).")
@click.option(
    "--port", type=int, default=None, help="Port to bind to (overrides config)."
)
@click.pass_context
def serve(ctx: click.Context, host: str | None, port: int | None) -> None:
    """Start the MCP server over Streamable HTTP."""
    import uvicorn

    from fbpages.api.app import create_app

    config = _load_config(ctx.obj["config_path"])
    _setup_logging(config.logging)

    effective_host = host or config.server.host
    effective_port = port or config.server.port

    click.echo(f"MCP endpoint: http://{effective_host}:{effective_port}/mcp", err=True)

    app = create_app(config)
    uvicorn.run(
        app,
        host=effective_host,
        port=effective_port,
        log_level=config.logging.level.lower(),
    )


# ── tools ────────────────────────────────────────────────────────


@cli.command()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Show descriptions.")
def tools(verbose: bool) -> None:
    """List the tool catalog."""
    from fbpages.cli.display import CatalogDisplay
    from fbpages.tools.catalog import default_catalog

    CatalogDisplay().show_tools(default_catalog().list_tools(), verbose=verbose)


# ── call ─────────────────────────────────────────────────────────


@cli.command()
@click.argument("name")
@click.argument("arguments", default="{}")
@click.pass_context
def call(ctx: click.Context, name: str, arguments: str) -> None:
    """Invoke one tool with a JSON object of ARGUMENTS and print the result."""
    from fbpages.cli.display import CatalogDisplay
    from fbpages.tools.base import Failure

    try:
        parsed = json_mod.loads(arguments)
    except ValueError as e:
        _error(f"ARGUMENTS is not valid JSON: {e}")
        return
    if not isinstance(parsed, dict):
        _error("ARGUMENTS must be a JSON object")
        return

    config = _load_config(ctx.obj["config_path"])
    _setup_logging(config.logging)

    result = asyncio.run(_call_async(config, name, parsed))

    display = CatalogDisplay()
    if isinstance(result, Failure):
        display.show_failure(result)
        sys.exit(1)
    display.show_success(result)


async def _call_async(
    config: FbPagesConfig, name: str, arguments: dict[str, Any]
) -> InvocationResult:
    """Dispatch a single tool call with a fresh HTTP client."""
    from fbpages.graph.client import Credential, create_http_client
    from fbpages.tools.catalog import default_catalog
    from fbpages.tools.dispatch import Dispatcher

    credential = Credential.from_config(config.graph)
    async with create_http_client(config.graph) as http:
        dispatcher = Dispatcher.for_credential(default_catalog(), credential, http)
        return await dispatcher.dispatch(name, arguments)
