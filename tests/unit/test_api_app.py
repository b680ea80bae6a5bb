"""Tests for the HTTP application: health endpoints and the MCP session flow."""

from __future__ import annotations

from fastapi.testclient import TestClient

from fbpages.api.app import create_app
from fbpages.config.schema import FbPagesConfig, GraphConfig, ServerConfig

PROTOCOL_VERSION = "2025-03-26"
MCP_HEADERS = {
    "Accept": "application/json, text/event-stream",
    "Content-Type": "application/json",
}
INITIALIZE = {
    "jsonrpc": "2.0",
    "id": 1,
    "method": "initialize",
    "params": {
        "protocolVersion": PROTOCOL_VERSION,
        "capabilities": {},
        "clientInfo": {"name": "test-client", "version": "0.0.1"},
    },
}


def _config(token: str | None = None) -> FbPagesConfig:
    return FbPagesConfig(
        graph=GraphConfig(access_token=token),
        server=ServerConfig(json_response=True),
    )


def _open_session(client: TestClient) -> dict[str, str]:
    """Initialize a session and return headers that address it."""
    resp = client.post("/mcp", json=INITIALIZE, headers=MCP_HEADERS)
    assert resp.status_code == 200
    headers = {
        **MCP_HEADERS,
        "mcp-session-id": resp.headers["mcp-session-id"],
        "mcp-protocol-version": PROTOCOL_VERSION,
    }
    resp = client.post(
        "/mcp",
        json={"jsonrpc": "2.0", "method": "notifications/initialized"},
        headers=headers,
    )
    assert resp.status_code == 202
    return headers


# ── Health ───────────────────────────────────────────────────────


class TestHealth:
    def test_index(self):
        with TestClient(create_app(_config())) as client:
            resp = client.get("/")
        assert resp.status_code == 200
        data = resp.json()
        assert data["name"] == "facebook-pages-mcp"
        assert data["status"] == "ok"
        assert data["tools"] == 28
        assert data["transport"] == "streamable-http"
        assert data["endpoints"] == {"mcp": "/mcp"}

    def test_health_unconfigured(self):
        with TestClient(create_app(_config())) as client:
            resp = client.get("/health")
        assert resp.json() == {"status": "ok", "configured": False, "sessions": 0}

    def test_health_configured(self):
        with TestClient(create_app(_config("EAAB-test"))) as client:
            resp = client.get("/health")
        assert resp.json()["configured"] is True

    def test_cors_exposes_session_header(self):
        with TestClient(create_app(_config())) as client:
            resp = client.options(
                "/mcp",
                headers={
                    "Origin": "http://localhost:6274",
                    "Access-Control-Request-Method": "POST",
                },
            )
        assert resp.status_code == 200
        assert resp.headers["access-control-allow-origin"] == "*"


# ── MCP routing ──────────────────────────────────────────────────


class TestMcpRouting:
    def test_post_without_session(self):
        with TestClient(create_app(_config())) as client:
            resp = client.post(
                "/mcp",
                json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"},
                headers=MCP_HEADERS,
            )
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == -32000

    def test_get_without_session(self):
        with TestClient(create_app(_config())) as client:
            resp = client.get("/mcp")
        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "Invalid or missing session ID"

    def test_unknown_session(self):
        with TestClient(create_app(_config())) as client:
            resp = client.post(
                "/mcp",
                json={"jsonrpc": "2.0", "id": 1, "method": "tools/list"},
                headers={**MCP_HEADERS, "mcp-session-id": "no-such-session"},
            )
        assert resp.status_code == 400
        assert resp.json()["error"]["message"] == "Bad Request: No valid session ID provided"


class TestMcpSessionFlow:
    def test_initialize_list_call_delete(self):
        app = create_app(_config())
        with TestClient(app) as client:
            resp = client.post("/mcp", json=INITIALIZE, headers=MCP_HEADERS)
            assert resp.status_code == 200
            assert resp.json()["result"]["serverInfo"]["name"] == "facebook-pages-mcp"
            session_id = resp.headers["mcp-session-id"]
            assert session_id in app.state.sessions

            headers = {
                **MCP_HEADERS,
                "mcp-session-id": session_id,
                "mcp-protocol-version": PROTOCOL_VERSION,
            }
            resp = client.post(
                "/mcp",
                json={"jsonrpc": "2.0", "method": "notifications/initialized"},
                headers=headers,
            )
            assert resp.status_code == 202

            resp = client.post(
                "/mcp",
                json={"jsonrpc": "2.0", "id": 2, "method": "tools/list"},
                headers=headers,
            )
            tools = resp.json()["result"]["tools"]
            assert len(tools) == 28
            assert tools[0]["name"] == "fb_list_pages"

            resp = client.post(
                "/mcp",
                json={
                    "jsonrpc": "2.0",
                    "id": 3,
                    "method": "tools/call",
                    "params": {"name": "fb_create_post", "arguments": {"page_id": "1"}},
                },
                headers=headers,
            )
            result = resp.json()["result"]
            assert result["isError"] is True
            assert "not configured" in result["content"][0]["text"]

            assert client.get("/health").json()["sessions"] == 1

            resp = client.delete("/mcp", headers=headers)
            assert resp.status_code == 200
            assert session_id not in app.state.sessions

            resp = client.post(
                "/mcp",
                json={"jsonrpc": "2.0", "id": 4, "method": "tools/list"},
                headers=headers,
            )
            assert resp.status_code == 400

    def test_sessions_are_independent(self):
        app = create_app(_config())
        with TestClient(app) as client:
            first = _open_session(client)
            second = _open_session(client)
            assert first["mcp-session-id"] != second["mcp-session-id"]
            assert len(app.state.sessions) == 2

            client.delete("/mcp", headers=first)
            resp = client.post(
                "/mcp",
                json={"jsonrpc": "2.0", "id": 2, "method": "tools/list"},
                headers=second,
            )
            assert resp.status_code == 200
            assert len(resp.json()["result"]["tools"]) == 28

    def test_shutdown_closes_sessions(self):
        app = create_app(_config())
        with TestClient(app) as client:
            _open_session(client)
            _open_session(client)
        assert len(app.state.sessions) == 0
