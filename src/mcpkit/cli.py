"""mcpkit CLI entrypoint."""

from __future__ import annotations

import click

from mcpkit import __version__


@click.group()
@click.version_option(version=__version__, prog_name="mcpkit")
def main() -> None:
    """mcpkit: serve and inspect MCP tool servers."""


# Register subcommands
from mcpkit.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
