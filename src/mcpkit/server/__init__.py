"""Server side: protocol router, session store, HTTP transport."""

from mcpkit.server.router import SESSION_HEADER, ProtocolRouter, RouterReply
from mcpkit.server.server import MCPServer
from mcpkit.server.sessions import Session, SessionStore

__all__ = [
    "SESSION_HEADER",
    "MCPServer",
    "ProtocolRouter",
    "RouterReply",
    "Session",
    "SessionStore",
]
