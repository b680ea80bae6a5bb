"""Facebook Graph API adapter."""

from fbpages.graph.client import Credential, GraphClient, create_http_client

__all__ = [
    "Credential",
    "GraphClient",
    "create_http_client",
]
