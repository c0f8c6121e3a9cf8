"""A calculator MCP server exposing ``calculator/add`` and ``calculator/subtract``.

Run it directly::

    python examples/calculator_server.py

or through the CLI::

    mcpkit serve calculator_server:server --port 8080
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from mcpkit import MCPServer, Tool, ToolRegistration
from mcpkit.utils.logging_setup import configure_logging


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


server = MCPServer("PyCalculatorServer", "1.0.0")
server.register_tools(
    [
        ToolRegistration(
            Tool(
                name="calculator/add",
                title="Add Numbers",
                description="Calculates the sum of two numbers, a and b.",
            ),
            add,
        ),
        ToolRegistration(
            Tool(
                name="calculator/subtract",
                title="Subtract Numbers",
                description="Calculates the difference between two numbers, a - b.",
            ),
            subtract,
        ),
    ]
)


if __name__ == "__main__":
    configure_logging("INFO")
    server.serve(port=8080)
