"""mcpkit: a small framework for building MCP tool servers over JSON-RPC 2.0."""

from __future__ import annotations

from typing import TYPE_CHECKING

__version__ = "0.1.0"

if TYPE_CHECKING:
    from mcpkit.core.cancellation import CancellationToken as CancellationToken
    from mcpkit.core.registry import ToolRegistration as ToolRegistration
    from mcpkit.protocol.models import Tool as Tool
    from mcpkit.server.server import MCPServer as MCPServer

_EXPORTS = {
    "CancellationToken": "mcpkit.core.cancellation",
    "MCPServer": "mcpkit.server.server",
    "Tool": "mcpkit.protocol.models",
    "ToolRegistration": "mcpkit.core.registry",
}


def __getattr__(name: str) -> object:
    module_path = _EXPORTS.get(name)
    if module_path is not None:
        import importlib

        mod = importlib.import_module(module_path)
        return getattr(mod, name)
    raise AttributeError(f"module 'mcpkit' has no attribute {name!r}")
