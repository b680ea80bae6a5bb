"""Health check endpoints."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/")
async def index(request: Request) -> dict[str, Any]:
    """Server identity and tool count."""
    from fbpages import __version__
    from fbpages.mcp.server import SERVER_NAME

    return {
        "name": SERVER_NAME,
        "version": __version__,
        "status": "ok",
        "tools": len(request.app.state.catalog),
        "transport": "streamable-http",
        "endpoints": {"mcp": "/mcp"},
    }


@router.get("/health")
async def health(request: Request) -> dict[str, Any]:
    """Basic health check -- always returns quickly."""
    return {
        "status": "ok",
        "configured": request.app.state.credential is not None,
        "sessions": len(request.app.state.sessions),
    }
