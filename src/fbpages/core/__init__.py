"""Core errors shared by every fbpages module."""

from fbpages.core.errors import ConfigError, FbPagesError, ToolCallError

__all__ = [
    "ConfigError",
    "FbPagesError",
    "ToolCallError",
]
