"""MCP protocol binding: server handlers, stdio runner, HTTP sessions."""
