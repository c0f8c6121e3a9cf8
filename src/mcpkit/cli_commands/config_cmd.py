"""``mcpkit config``: validate settings files."""

from __future__ import annotations

import sys
from pathlib import Path

import click

from mcpkit.cli_commands._output import console, print_settings


@click.group()
def config() -> None:
    """Work with settings files."""


@config.command("check")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--no-env", is_flag=True, help="Ignore MCPKIT_* environment overrides.")
def check(file: str, no_env: bool) -> None:
    """Validate the settings FILE and print the effective values."""
    from mcpkit.config import SettingsError, load_settings

    try:
        settings = load_settings(Path(file), apply_env=not no_env)
    except SettingsError as exc:
        console.print(f"[red]Validation error:[/red] {exc}")
        sys.exit(1)

    console.print("[green]Settings validated successfully.[/green]")
    print_settings(settings)
