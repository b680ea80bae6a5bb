"""FastAPI application factory for the Streamable HTTP transport."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from mcp.server import Server

    from fbpages.config.schema import FbPagesConfig
    from fbpages.graph.client import Credential

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan handler: open the Graph HTTP client and the session registry.

    On shutdown every open session is closed best-effort before the
    HTTP client is released.
    """
    from fbpages.graph.client import create_http_client

    config: FbPagesConfig = app.state.config
    credential = app.state.credential

    async with create_http_client(config.graph) as http:
        app.state.http_client = http
        async with app.state.sessions.run():
            logger.info(
                "Token: %s",
                credential.masked() if credential else "(not configured yet)",
            )
            logger.info("Tools available: %d", len(app.state.catalog))
            yield
            logger.info("Shutting down, closing %d session(s)", len(app.state.sessions))


def create_app(config: FbPagesConfig | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    from fbpages import __version__
    from fbpages.config.loader import load_config
    from fbpages.graph.client import Credential
    from fbpages.mcp.server import SERVER_NAME, create_server
    from fbpages.mcp.sessions import SessionRegistry, StreamableHttpEndpoint
    from fbpages.tools.catalog import default_catalog
    from fbpages.tools.dispatch import Dispatcher

    if config is None:
        config = load_config()

    app = FastAPI(
        title=SERVER_NAME,
        description="Facebook Pages tools over the Model Context Protocol",
        version=__version__,
        lifespan=lifespan,
    )
    catalog = default_catalog()

    def _server_factory(credential: Credential | None) -> Server:
        dispatcher = Dispatcher.for_credential(catalog, credential, app.state.http_client)
        return create_server(dispatcher)

    credential = Credential.from_config(config.graph)
    sessions = SessionRegistry(
        _server_factory,
        default_credential=credential,
        json_response=config.server.json_response,
    )

    app.state.config = config
    app.state.catalog = catalog
    app.state.credential = credential
    app.state.sessions = sessions

    from fastapi.middleware.cors import CORSMiddleware

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["*"],
        expose_headers=["mcp-session-id"],
    )

    app.add_route("/mcp", StreamableHttpEndpoint(sessions), methods=["GET", "POST", "DELETE"])

    from fbpages.api.health import router as health_router

    app.include_router(health_router)

    return app
