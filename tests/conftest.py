"""Shared test fixtures for fbpages."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from fbpages.graph.client import Credential, GraphClient
from fbpages.tools.catalog import ToolCatalog, default_catalog
from fbpages.tools.dispatch import Dispatcher
from tests.fixtures.graph import MockGraph

if TYPE_CHECKING:
    from collections.abc import AsyncIterator
    from pathlib import Path

    import httpx


@pytest.fixture
def mock_graph() -> MockGraph:
    """Stub Graph API recording every request."""
    return MockGraph()


@pytest.fixture
async def http(mock_graph: MockGraph) -> AsyncIterator[httpx.AsyncClient]:
    """httpx client routed to the stub Graph API."""
    async with mock_graph.http_client() as client:
        yield client


@pytest.fixture
def credential() -> Credential:
    return Credential(access_token="test-token", page_id="111")


@pytest.fixture
def graph_client(credential: Credential, http: httpx.AsyncClient) -> GraphClient:
    return GraphClient(credential, http=http)


@pytest.fixture
def catalog() -> ToolCatalog:
    return default_catalog()


@pytest.fixture
def dispatcher(catalog: ToolCatalog, graph_client: GraphClient) -> Dispatcher:
    """Configured dispatcher backed by the stub Graph API."""
    return Dispatcher(catalog, graph_client)


@pytest.fixture
def unconfigured_dispatcher(catalog: ToolCatalog) -> Dispatcher:
    """Dispatcher with no Page Access Token."""
    return Dispatcher(catalog)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep the developer's environment and config files out of tests."""
    for var in ("FACEBOOK_PAGE_ACCESS_TOKEN", "FACEBOOK_PAGE_ID", "PORT", "FBPAGES_CONFIG"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
