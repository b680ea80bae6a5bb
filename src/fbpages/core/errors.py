"""Exception hierarchy for fbpages.

Tool calls report failures as :class:`~fbpages.tools.base.Failure`
values, not exceptions. The hierarchy below covers the remaining
edges:

    FbPagesError
    ├── ConfigError
    └── ToolCallError(failure)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fbpages.tools.base import Failure


class FbPagesError(Exception):
    """Base exception for all fbpages errors."""


# ─── Configuration Errors ─────────────────────────────────────


class ConfigError(FbPagesError):
    """Invalid configuration."""


# ─── Tool Call Errors ─────────────────────────────────────────


class ToolCallError(FbPagesError):
    """A dispatched tool call failed.

    Raised by the MCP binding so the SDK wraps it into a
    ``CallToolResult`` with ``isError=True``.
    """

    def __init__(self, failure: Failure) -> None:
        self.failure = failure
        super().__init__(failure.describe())

    @property
    def code(self) -> int | None:
        return self.failure.code
