"""Shared fixtures: a calculator server and its parameter models."""

from __future__ import annotations

import pytest
from pydantic import BaseModel, Field

from mcpkit.core.registry import ToolRegistration
from mcpkit.protocol.models import Tool
from mcpkit.server.server import MCPServer


class AddParams(BaseModel):
    a: float = Field(description="The first number to add.")
    b: float = Field(description="The second number to add.")


class SubtractParams(BaseModel):
    a: float = Field(description="The number to subtract from (minuend).")
    b: float = Field(description="The number to subtract (subtrahend).")


def add(params: AddParams) -> float:
    return params.a + params.b


def subtract(params: SubtractParams) -> float:
    return params.a - params.b


def fail(params: AddParams) -> float:
    raise ValueError("division by zero is not allowed")


def calculator_registrations() -> list[ToolRegistration]:
    return [
        ToolRegistration(
            Tool(name="calculator/add", title="Add Numbers", description="Adds a and b."),
            add,
        ),
        ToolRegistration(
            Tool(name="calculator/subtract", description="Computes a - b."),
            subtract,
        ),
    ]


@pytest.fixture
def server() -> MCPServer:
    srv = MCPServer("TestCalculator", "1.0.0")
    srv.register_tools(calculator_registrations())
    srv.register_tool(Tool(name="calculator/fail"), fail)
    return srv
