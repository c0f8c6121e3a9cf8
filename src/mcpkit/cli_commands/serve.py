"""``mcpkit serve``: run an MCP server over HTTP."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from mcpkit.cli_commands._output import TargetError, console, load_server

if TYPE_CHECKING:
    from mcpkit.config import ServerSettings
    from mcpkit.server.server import MCPServer


@click.command()
@click.argument("target")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    default=None,
    help="Settings YAML file.",
)
@click.option("--host", default=None, help="Interface to bind.")
@click.option("--port", type=int, default=None, help="Port to listen on.")
@click.option("--path", default=None, help="Endpoint path (default /mcp).")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Log level.",
)
@click.option("--telemetry", is_flag=True, help="Enable tracing.")
def serve(
    target: str,
    config_path: str | None,
    host: str | None,
    port: int | None,
    path: str | None,
    log_level: str | None,
    telemetry: bool,
) -> None:
    """Serve the MCPServer named by TARGET (``module:attribute``).

    The settings file supplies transport, logging and telemetry options.
    Server identity keys (name, version, title, instructions, capabilities)
    belong to the TARGET itself; when the file sets them to different values
    a warning is printed and the TARGET's values are served.
    """
    from mcpkit.config import ServerSettings, SettingsError, SettingsLoader
    from mcpkit.utils.logging_setup import configure_logging

    try:
        file_settings = (
            SettingsLoader(Path(config_path)).load() if config_path else ServerSettings()
        )
        settings = file_settings.with_env_overrides()
        overrides = {
            k: v
            for k, v in {"host": host, "port": port, "path": path, "log_level": log_level}.items()
            if v is not None
        }
        if overrides:
            if "log_level" in overrides:
                overrides["log_level"] = overrides["log_level"].upper()
            settings = ServerSettings.model_validate({**settings.model_dump(), **overrides})
    except SettingsError as exc:
        console.print(f"[red]Settings error:[/red] {exc}")
        sys.exit(1)
    except ValueError as exc:
        console.print(f"[red]Invalid option:[/red] {exc}")
        sys.exit(1)

    configure_logging(settings.log_level, rich=settings.rich_logging)

    try:
        server = load_server(target)
    except TargetError as exc:
        console.print(f"[red]Target error:[/red] {exc}")
        sys.exit(1)

    for key, configured, served in _identity_conflicts(file_settings, server):
        console.print(
            f"[yellow]Warning:[/yellow] settings key '{key}' ({configured!r}) is ignored; "
            f"{target} serves {served!r}"
        )

    tracing = settings.telemetry
    if telemetry:
        tracing = tracing.model_copy(update={"enabled": True})
    if tracing.enabled:
        from mcpkit.utils.telemetry import configure_telemetry

        try:
            configure_telemetry(tracing, service_name=server.name)
        except ImportError as exc:
            console.print(f"[red]Telemetry error:[/red] {exc}")
            sys.exit(1)

    server.serve(settings.host, settings.port, path=settings.path, log_level=settings.log_level)


def _identity_conflicts(
    settings: ServerSettings, server: MCPServer
) -> list[tuple[str, Any, Any]]:
    """Identity keys set explicitly in *settings* that disagree with *server*."""
    served: dict[str, Any] = {
        "name": server.name,
        "version": server.version,
        "title": server.info.title,
        "instructions": server.instructions,
        "capabilities": server.capabilities.to_wire(),
    }
    conflicts: list[tuple[str, Any, Any]] = []
    for key, actual in served.items():
        if key not in settings.model_fields_set:
            continue
        configured = getattr(settings, key)
        if key == "capabilities":
            configured = configured.to_wire()
        if configured != actual:
            conflicts.append((key, configured, actual))
    return conflicts
