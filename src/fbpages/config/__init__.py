"""Configuration loading and validation."""

from fbpages.config.loader import load_config
from fbpages.config.schema import (
    FbPagesConfig,
    GraphConfig,
    LoggingConfig,
    ServerConfig,
)

__all__ = [
    "FbPagesConfig",
    "GraphConfig",
    "LoggingConfig",
    "ServerConfig",
    "load_config",
]
