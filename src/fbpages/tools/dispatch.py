"""Dispatch handler -- the single entry point for tool calls.

Resolves a tool name against the catalog, validates the arguments,
and invokes the matching :class:`~fbpages.graph.client.GraphClient`
operation. Nothing raised below this boundary reaches the protocol
layer: every outcome is a :class:`Success` or a :class:`Failure`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from fbpages.graph.client import Credential, GraphClient
from fbpages.tools.base import ErrorKind, Failure, InvocationRequest, InvocationResult

if TYPE_CHECKING:
    import httpx

    from fbpages.tools.catalog import ToolCatalog

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = (
    "Facebook Page Access Token is not configured. "
    "Set FACEBOOK_PAGE_ACCESS_TOKEN and restart the server."
)


def _format_validation_error(tool_name: str, exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "arguments"
        problems.append(f"{location}: {error['msg']}")
    return f"Invalid arguments for {tool_name}: " + "; ".join(problems)


class Dispatcher:
    """Route tool calls to Graph API operations.

    ``client`` is ``None`` when no Page Access Token is configured; the
    catalog is still served and calls fail with ``not_configured``.
    """

    def __init__(self, catalog: ToolCatalog, client: GraphClient | None = None) -> None:
        self._catalog = catalog
        self._client = client

    @classmethod
    def for_credential(
        cls,
        catalog: ToolCatalog,
        credential: Credential | None,
        http: httpx.AsyncClient,
    ) -> Dispatcher:
        client = GraphClient(credential, http=http) if credential is not None else None
        return cls(catalog, client)

    @property
    def catalog(self) -> ToolCatalog:
        return self._catalog

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def dispatch(
        self, tool_name: str, arguments: dict[str, Any] | None = None
    ) -> InvocationResult:
        """Run one tool call and return its result."""
        try:
            descriptor = self._catalog.get(tool_name)
        except KeyError:
            return Failure(ErrorKind.UNKNOWN_TOOL, f"Unknown tool: {tool_name}")

        try:
            params = self._catalog.validate(tool_name, arguments or {})
        except ValidationError as exc:
            return Failure(
                ErrorKind.INVALID_ARGUMENTS,
                _format_validation_error(tool_name, exc),
            )

        if self._client is None:
            return Failure(ErrorKind.NOT_CONFIGURED, NOT_CONFIGURED_MESSAGE)

        operation = getattr(self._client, descriptor.operation)
        try:
            result: InvocationResult = await operation(**params)
        except Exception as exc:
            # Exception text can include the request URL and its access_token.
            logger.warning("%s failed: %s", tool_name, type(exc).__name__)
            return Failure(
                ErrorKind.TRANSPORT,
                f"Request to the Facebook Graph API failed ({type(exc).__name__})",
            )

        if isinstance(result, Failure):
            logger.info("%s returned %s error %s", tool_name, result.kind, result.code)
        return result

    async def invoke(self, request: InvocationRequest) -> InvocationResult:
        return await self.dispatch(request.tool_name, request.arguments)
