"""Pydantic models for fbpages configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class GraphConfig(BaseModel):
    """Facebook Graph API connection settings."""

    access_token: str | None = Field(default=None, repr=False)
    access_token_env: str | None = "FACEBOOK_PAGE_ACCESS_TOKEN"
    page_id: str | None = None
    page_id_env: str | None = "FACEBOOK_PAGE_ID"
    base_url: str = "https://graph.facebook.com"
    api_version: str = "v22.0"
    timeout: float = 30.0

    @property
    def api_url(self) -> str:
        """Versioned base URL, e.g. ``https://graph.facebook.com/v22.0``."""
        return f"{self.base_url.rstrip('/')}/{self.api_version}"


class ServerConfig(BaseModel):
    """Streamable HTTP listener settings."""

    host: str = "0.0.0.0"
    port: int = 3000
    port_env: str | None = "PORT"
    json_response: bool = False
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    structured: bool = False


class FbPagesConfig(BaseModel):
    """Top-level configuration for fbpages."""

    graph: GraphConfig = Field(default_factory=GraphConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
