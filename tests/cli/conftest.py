"""Fixtures for CLI tests: an importable server module on sys.path."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path

_SERVER_MODULE = """\
from pydantic import BaseModel, Field

from mcpkit import MCPServer, Tool


class EchoParams(BaseModel):
    text: str = Field(description="Text to echo back.")


server = MCPServer("cli-echo", "0.3.0")


@server.tool("echo", title="Echo")
def echo(params: EchoParams) -> str:
    \"\"\"Returns the text unchanged.\"\"\"
    return params.text


def make_server():
    return server


empty = MCPServer("cli-empty", "0.0.1")
not_a_server = 42
"""


@pytest.fixture
def server_module(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Write a throwaway server module and return its import name."""
    name = f"cli_target_{tmp_path.name.replace('-', '_')}"
    (tmp_path / f"{name}.py").write_text(_SERVER_MODULE)
    monkeypatch.syspath_prepend(str(tmp_path))
    return name
