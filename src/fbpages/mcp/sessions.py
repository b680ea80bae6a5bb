"""Session registry for the Streamable HTTP transport.

One listener serves many MCP sessions. Each session owns a
``StreamableHTTPServerTransport`` and an MCP server loop running in the
registry's task group; the ``mcp-session-id`` header selects the
session. Registry mutation never spans an ``await``, so the
single-threaded event loop needs no lock.
"""

from __future__ import annotations

import json
import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, Protocol
from uuid import uuid4

import anyio
from fastapi import Request
from fastapi.responses import JSONResponse
from mcp.server.streamable_http import MCP_SESSION_ID_HEADER, StreamableHTTPServerTransport
from mcp.types import JSONRPCRequest
from pydantic import ValidationError

from fbpages.graph.client import Credential

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from anyio.abc import TaskGroup, TaskStatus
    from mcp.server import Server
    from starlette.types import Message, Receive, Scope, Send

logger = logging.getLogger(__name__)

TOKEN_QUERY_PARAM = "FACEBOOK_PAGE_ACCESS_TOKEN"
PAGE_ID_QUERY_PARAM = "FACEBOOK_PAGE_ID"


class SessionTransport(Protocol):
    """The part of ``StreamableHTTPServerTransport`` the registry relies on."""

    def connect(self) -> Any: ...

    async def handle_request(self, scope: Scope, receive: Receive, send: Send) -> None: ...

    async def terminate(self) -> None: ...


class SessionRegistry:
    """Map session ids to open transports.

    Usage::

        registry = SessionRegistry(make_server)
        async with registry.run():
            transport = await registry.open()
            ...
    """

    def __init__(
        self,
        server_factory: Callable[[Credential | None], Server],
        *,
        default_credential: Credential | None = None,
        json_response: bool = False,
        transport_factory: Callable[..., SessionTransport] | None = None,
    ) -> None:
        self._server_factory = server_factory
        self._default_credential = default_credential
        self._json_response = json_response
        self._transport_factory = transport_factory or StreamableHTTPServerTransport
        self._transports: dict[str, SessionTransport] = {}
        self._task_group: TaskGroup | None = None

    @property
    def running(self) -> bool:
        return self._task_group is not None

    @asynccontextmanager
    async def run(self) -> AsyncIterator[SessionRegistry]:
        """Own the task group that session server loops run in.

        On exit every open session is closed, then remaining loops are
        cancelled.
        """
        async with anyio.create_task_group() as tg:
            self._task_group = tg
            try:
                yield self
            finally:
                await self.close_all()
                tg.cancel_scope.cancel()
                self._task_group = None

    def get(self, session_id: str) -> SessionTransport | None:
        return self._transports.get(session_id)

    def session_ids(self) -> list[str]:
        return list(self._transports.keys())

    async def open(self, credential: Credential | None = None) -> SessionTransport:
        """Create, register, and start a new session.

        Args:
            credential: Session-specific credential; falls back to the
                registry default.

        Raises:
            RuntimeError: If the registry is not running.
        """
        if self._task_group is None:
            msg = "Session registry is not running"
            raise RuntimeError(msg)

        session_id = uuid4().hex
        while session_id in self._transports:
            session_id = uuid4().hex
        transport = self._transport_factory(
            mcp_session_id=session_id,
            is_json_response_enabled=self._json_response,
        )
        self._transports[session_id] = transport

        server = self._server_factory(credential or self._default_credential)
        await self._task_group.start(self._serve, session_id, transport, server)
        logger.info("Session %s opened (%d active)", session_id, len(self))
        return transport

    async def _serve(
        self,
        session_id: str,
        transport: SessionTransport,
        server: Server,
        *,
        task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED,
    ) -> None:
        try:
            async with transport.connect() as (read_stream, write_stream):
                task_status.started()
                await server.run(
                    read_stream,
                    write_stream,
                    server.create_initialization_options(),
                    stateless=False,
                )
        except Exception:
            logger.exception("Session %s crashed", session_id)
        finally:
            self.discard(session_id)

    def discard(self, session_id: str) -> None:
        """Forget a session. Unknown ids are ignored."""
        if self._transports.pop(session_id, None) is not None:
            logger.info("Session %s closed (%d active)", session_id, len(self))

    async def close(self, session_id: str) -> None:
        """Terminate one session's transport and forget it."""
        transport = self._transports.get(session_id)
        if transport is None:
            return
        try:
            await transport.terminate()
        finally:
            self.discard(session_id)

    async def close_all(self) -> None:
        """Best-effort close of every session.

        A failure on one session is logged and does not stop the others.
        """
        for session_id in self.session_ids():
            try:
                await self.close(session_id)
            except Exception:
                logger.warning("Error closing session %s", session_id, exc_info=True)

    def __len__(self) -> int:
        return len(self._transports)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._transports


def _jsonrpc_error(status_code: int, code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"jsonrpc": "2.0", "error": {"code": code, "message": message}, "id": None},
    )


def is_initialize_request(body: bytes) -> bool:
    """True if ``body`` is a single JSON-RPC ``initialize`` request."""
    try:
        payload = json.loads(body)
    except ValueError:
        return False
    if not isinstance(payload, dict):
        return False
    try:
        request = JSONRPCRequest.model_validate(payload)
    except ValidationError:
        return False
    return request.method == "initialize"


def _credential_from_query(request: Request) -> Credential | None:
    token = request.query_params.get(TOKEN_QUERY_PARAM)
    if not token:
        return None
    return Credential(access_token=token, page_id=request.query_params.get(PAGE_ID_QUERY_PARAM))


def _replay_body(body: bytes, receive: Receive) -> Receive:
    """Receive callable that yields an already-read body once, then defers."""
    sent = False

    async def _receive() -> Message:
        nonlocal sent
        if not sent:
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        return await receive()

    return _receive


class StreamableHttpEndpoint:
    """ASGI app serving ``/mcp`` (POST, GET, DELETE) through a registry."""

    def __init__(self, registry: SessionRegistry) -> None:
        self._registry = registry

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        started = False

        async def _send(message: Message) -> None:
            nonlocal started
            if message["type"] == "http.response.start":
                started = True
            await send(message)

        try:
            await self._route(scope, receive, _send)
        except Exception:
            logger.exception("Error handling MCP request")
            if not started:
                response = _jsonrpc_error(500, -32603, "Internal server error")
                await response(scope, receive, send)

    async def _route(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        session_id = request.headers.get(MCP_SESSION_ID_HEADER)

        if session_id:
            transport = self._registry.get(session_id)
            if transport is None:
                response = _jsonrpc_error(
                    400, -32000, "Bad Request: No valid session ID provided"
                )
                await response(scope, receive, send)
                return
            await transport.handle_request(scope, receive, send)
            if request.method == "DELETE":
                self._registry.discard(session_id)
            return

        if request.method != "POST":
            response = _jsonrpc_error(400, -32000, "Invalid or missing session ID")
            await response(scope, receive, send)
            return

        body = await request.body()
        if not is_initialize_request(body):
            response = _jsonrpc_error(400, -32000, "Bad Request: No valid session ID provided")
            await response(scope, receive, send)
            return

        transport = await self._registry.open(_credential_from_query(request))
        await transport.handle_request(scope, _replay_body(body, receive), send)
