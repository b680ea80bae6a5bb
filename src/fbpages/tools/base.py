"""Tool descriptors and invocation data types.

Descriptors are immutable and built once at import time. Results are
a closed pair of variants: :class:`Success` carries the Graph API
payload, :class:`Failure` carries an :class:`ErrorKind`, a message and
the remote numeric code when there is one.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class ToolHints:
    """Behavioral hints advertised to MCP clients."""

    read_only: bool = False
    destructive: bool = False
    idempotent: bool = False
    open_world: bool = True


@dataclass(frozen=True, slots=True)
class ToolDescriptor:
    """Static description of one tool and the adapter operation it maps to."""

    name: str
    title: str
    description: str
    input_schema: dict[str, Any]
    operation: str  # GraphClient method name
    hints: ToolHints = field(default_factory=ToolHints)

    @property
    def required(self) -> list[str]:
        """Names of the required arguments."""
        return list(self.input_schema.get("required", []))

    @property
    def properties(self) -> dict[str, dict[str, Any]]:
        return dict(self.input_schema.get("properties", {}))


@dataclass(frozen=True, slots=True)
class InvocationRequest:
    """A single tool call as received from a client."""

    tool_name: str
    arguments: dict[str, Any] = field(default_factory=dict)


class ErrorKind(enum.StrEnum):
    """Why a tool call failed."""

    UNKNOWN_TOOL = "unknown_tool"
    INVALID_ARGUMENTS = "invalid_arguments"
    NOT_CONFIGURED = "not_configured"
    REMOTE_API = "remote_api"
    TRANSPORT = "transport"


@dataclass(frozen=True, slots=True)
class Success:
    """Normalized Graph API payload (an object or a list of objects)."""

    payload: Any

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Failure:
    """A failed tool call."""

    kind: ErrorKind
    message: str
    code: int | None = None

    @property
    def ok(self) -> bool:
        return False

    def describe(self) -> str:
        """Client-facing error text."""
        if self.kind is ErrorKind.REMOTE_API:
            return f"Facebook API Error ({self.code}): {self.message}"
        return self.message


InvocationResult = Success | Failure
