"""Shared CLI output formatters and target loading."""

from __future__ import annotations

import importlib
import json
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from mcpkit.config import ServerSettings
    from mcpkit.protocol.models import Tool
    from mcpkit.server.server import MCPServer

console = Console()


class TargetError(Exception):
    """A ``module:attribute`` target could not be resolved to a server."""


def load_server(target: str) -> MCPServer:
    """Import ``module:attribute`` and return the :class:`MCPServer` it names.

    The attribute may also be a zero-argument factory returning a server.
    """
    from mcpkit.server.server import MCPServer

    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise TargetError(f"Target must look like 'module:attribute', got {target!r}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise TargetError(f"Cannot import module {module_name!r}: {exc}") from exc

    try:
        obj = getattr(module, attr)
    except AttributeError as exc:
        raise TargetError(f"Module {module_name!r} has no attribute {attr!r}") from exc

    if not isinstance(obj, MCPServer) and callable(obj):
        obj = obj()
    if not isinstance(obj, MCPServer):
        raise TargetError(f"{target!r} is not an MCPServer (got {type(obj).__name__})")
    return obj


def print_tools_table(tools: list[Tool], *, title: str = "Registered Tools") -> None:
    """Pretty-print tool definitions as a table."""
    table = Table(title=title)
    table.add_column("Name", style="cyan")
    table.add_column("Title")
    table.add_column("Description")
    table.add_column("Parameters")

    for tool in tools:
        params = ", ".join(tool.input_schema.get("properties", {})) or "-"
        table.add_row(
            tool.name,
            tool.title or "",
            _truncate(tool.description or ""),
            params,
        )

    console.print(table)


def print_tools_json(tools: list[Tool]) -> None:
    console.print_json(json.dumps([t.to_wire() for t in tools]))


def print_settings(settings: ServerSettings) -> None:
    console.print(f"  Name: {settings.name}")
    console.print(f"  Version: {settings.version}")
    console.print(f"  Endpoint: http://{settings.host}:{settings.port}{settings.path}")
    console.print(f"  Log level: {settings.log_level}")
    console.print(f"  Telemetry: {'enabled' if settings.telemetry.enabled else 'disabled'}")


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
