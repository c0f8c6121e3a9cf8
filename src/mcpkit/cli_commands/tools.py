"""``mcpkit tools``: inspect the tools a server registers."""

from __future__ import annotations

import sys

import click

from mcpkit.cli_commands._output import (
    TargetError,
    console,
    load_server,
    print_tools_json,
    print_tools_table,
)


@click.group()
def tools() -> None:
    """Inspect registered tools."""


@tools.command("list")
@click.argument("target")
@click.option("--json", "as_json", is_flag=True, help="Print tool definitions as JSON.")
def list_tools(target: str, as_json: bool) -> None:
    """List the tools registered on the MCPServer named by TARGET."""
    try:
        server = load_server(target)
    except TargetError as exc:
        console.print(f"[red]Target error:[/red] {exc}")
        sys.exit(1)

    definitions = server.list_tools()
    if as_json:
        print_tools_json(definitions)
        return

    if not definitions:
        console.print("[yellow]No tools registered.[/yellow]")
        return

    print_tools_table(definitions, title=f"Tools on {server.name} {server.version}")
