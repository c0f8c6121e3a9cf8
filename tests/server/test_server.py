"""Tests for the MCPServer facade."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from mcpkit.config import ServerSettings
from mcpkit.core.errors import RegistrationError
from mcpkit.protocol.models import ServerCapabilities, Tool
from mcpkit.server.server import MCPServer
from tests.conftest import AddParams, add, calculator_registrations


class TestMCPServer:
    def test_default_capabilities(self) -> None:
        server = MCPServer("s", "1")
        assert server.capabilities.to_wire() == {"tools": {}}

    def test_capabilities_from_mapping(self) -> None:
        server = MCPServer("s", "1", {"tools": {"listChanged": True}})
        assert isinstance(server.capabilities, ServerCapabilities)
        assert server.capabilities.to_wire() == {"tools": {"listChanged": True}}

    def test_servers_do_not_share_state(self) -> None:
        first = MCPServer("a", "1")
        second = MCPServer("b", "1")
        first.register_tools(calculator_registrations())
        assert len(first.registry) == 2
        assert len(second.registry) == 0

    def test_register_tool_duplicate(self) -> None:
        server = MCPServer("s", "1")
        server.register_tool(Tool(name="calculator/add"), add)
        with pytest.raises(RegistrationError):
            server.register_tool(Tool(name="calculator/add"), add)

    def test_tool_decorator(self) -> None:
        server = MCPServer("s", "1")

        @server.tool("calculator/multiply")
        def multiply(params: AddParams) -> float:
            """Multiplies a and b."""
            return params.a * params.b

        [tool] = server.list_tools()
        assert tool.description == "Multiplies a and b."
        result = server.dispatcher.call("calculator/multiply", {"a": 4, "b": 2.5})
        assert result.content[0].text == "10"

    def test_from_settings(self) -> None:
        settings = ServerSettings(name="configured", version="2.0", instructions="Be nice.")
        server = MCPServer.from_settings(settings)
        assert server.name == "configured"
        assert server.version == "2.0"
        assert server.router._instructions == "Be nice."

    def test_serve_runs_uvicorn(self, server: MCPServer) -> None:
        with patch("uvicorn.run") as run:
            server.serve("0.0.0.0", 9000, path="/rpc", log_level="DEBUG")
        run.assert_called_once()
        kwargs = run.call_args.kwargs
        assert kwargs == {"host": "0.0.0.0", "port": 9000, "log_level": "debug"}
