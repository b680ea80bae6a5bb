"""MCP server for the Facebook Pages tools."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool, ToolAnnotations

from fbpages import __version__
from fbpages.core.errors import ToolCallError
from fbpages.tools.base import Failure

if TYPE_CHECKING:
    from fbpages.config.schema import FbPagesConfig
    from fbpages.tools.base import ToolDescriptor
    from fbpages.tools.dispatch import Dispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "facebook-pages-mcp"


def to_mcp_tool(descriptor: ToolDescriptor) -> Tool:
    """Convert a catalog descriptor into the MCP wire type."""
    hints = descriptor.hints
    return Tool(
        name=descriptor.name,
        title=descriptor.title,
        description=descriptor.description,
        inputSchema=descriptor.input_schema,
        annotations=ToolAnnotations(
            title=descriptor.title,
            readOnlyHint=hints.read_only,
            destructiveHint=hints.destructive,
            idempotentHint=hints.idempotent,
            openWorldHint=hints.open_world,
        ),
    )


class ToolBridge:
    """MCP request handlers backed by a :class:`Dispatcher`."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    async def list_tools(self) -> list[Tool]:
        """List available MCP tools."""
        return [to_mcp_tool(d) for d in self._dispatcher.catalog.list_tools()]

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> list[TextContent]:
        """Handle tool calls.

        Raises:
            ToolCallError: On any failed call. The SDK turns it into a
                ``CallToolResult`` with ``isError=True``.
        """
        result = await self._dispatcher.dispatch(name, arguments)
        if isinstance(result, Failure):
            raise ToolCallError(result)
        return [TextContent(type="text", text=json.dumps(result.payload, indent=2))]


def create_server(dispatcher: Dispatcher) -> Server:
    """Build a low-level MCP server exposing the dispatcher's catalog."""
    bridge = ToolBridge(dispatcher)
    server: Server = Server(SERVER_NAME, version=__version__)
    server.list_tools()(bridge.list_tools)
    # Arguments are validated by the dispatcher, not by the SDK.
    server.call_tool(validate_input=False)(bridge.call_tool)
    return server


async def run_stdio(config: FbPagesConfig) -> None:
    """Start the MCP server on stdio."""
    from fbpages.graph.client import Credential, create_http_client
    from fbpages.tools.catalog import default_catalog
    from fbpages.tools.dispatch import Dispatcher

    catalog = default_catalog()
    credential = Credential.from_config(config.graph)

    async with create_http_client(config.graph) as http:
        server = create_server(Dispatcher.for_credential(catalog, credential, http))

        logger.info("Facebook Pages MCP Server running on stdio")
        logger.info(
            "Token: %s", credential.masked() if credential else "(not configured yet)"
        )
        logger.info("Tools available: %d", len(catalog))

        async with stdio_server() as (read_stream, write_stream):
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
