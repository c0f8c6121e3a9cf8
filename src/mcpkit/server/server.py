"""MCPServer: wires the registry, dispatcher, sessions and router together."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import TYPE_CHECKING, Any, TypeVar

from mcpkit.core.dispatcher import ToolDispatcher
from mcpkit.core.registry import RegisteredTool, ToolRegistration, ToolRegistry
from mcpkit.protocol.models import Implementation, ServerCapabilities, Tool, ToolsCapability
from mcpkit.server.router import ProtocolRouter, RouterReply
from mcpkit.server.sessions import SessionStore

if TYPE_CHECKING:
    from fastapi import FastAPI

    from mcpkit.config import ServerSettings

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class MCPServer:
    """An MCP tool server.

    Usage::

        server = MCPServer("calculator", "1.0.0")
        server.register_tools([
            ToolRegistration(Tool(name="calculator/add"), add),
            ToolRegistration(Tool(name="calculator/subtract"), subtract),
        ])
        server.serve(port=8080)

    Each server owns its own registry and session store.
    """

    def __init__(
        self,
        name: str,
        version: str,
        capabilities: ServerCapabilities | Mapping[str, Any] | None = None,
        *,
        title: str | None = None,
        instructions: str | None = None,
    ) -> None:
        self.info = Implementation(name=name, version=version, title=title)
        self.instructions = instructions
        if capabilities is None:
            self.capabilities = ServerCapabilities(tools=ToolsCapability())
        elif isinstance(capabilities, ServerCapabilities):
            self.capabilities = capabilities
        else:
            self.capabilities = ServerCapabilities.model_validate(dict(capabilities))

        self.registry = ToolRegistry()
        self.sessions = SessionStore()
        self.dispatcher = ToolDispatcher(self.registry)
        self.router = ProtocolRouter(
            self.dispatcher,
            self.sessions,
            self.info,
            self.capabilities,
            instructions=instructions,
        )

    @classmethod
    def from_settings(cls, settings: ServerSettings) -> MCPServer:
        """Build a server from the identity fields of *settings*."""
        return cls(
            settings.name,
            settings.version,
            settings.capabilities.model_copy(deep=True),
            title=settings.title,
            instructions=settings.instructions,
        )

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def version(self) -> str:
        return self.info.version

    def register_tools(self, registrations: Iterable[ToolRegistration]) -> list[RegisteredTool]:
        """Register a batch of tools; nothing is registered if any entry fails."""
        return self.registry.register_many(registrations)

    def register_tool(
        self, definition: Tool | Mapping[str, Any], handler: Callable[..., Any]
    ) -> RegisteredTool:
        return self.registry.register_tool(definition, handler)

    def tool(
        self,
        name: str,
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> Callable[[F], F]:
        """Decorator registering a handler as tool *name*."""
        return self.registry.tool(name, title=title, description=description)

    def list_tools(self) -> list[Tool]:
        return self.registry.list_all()

    def handle_message(self, raw: bytes | str) -> RouterReply:
        return self.router.handle_message(raw)

    def create_app(self, path: str = "/mcp") -> FastAPI:
        """Return an ASGI application serving this server at *path*."""
        from mcpkit.server.http import create_app

        return create_app(self, path=path)

    def serve(
        self,
        host: str = "127.0.0.1",
        port: int = 8080,
        *,
        path: str = "/mcp",
        log_level: str = "info",
    ) -> None:
        """Serve over HTTP with uvicorn until interrupted."""
        import uvicorn

        logger.info(
            "MCP Server '%s' version '%s' listening on %s:%d%s",
            self.name,
            self.version,
            host,
            port,
            path,
        )
        uvicorn.run(self.create_app(path), host=host, port=port, log_level=log_level.lower())
