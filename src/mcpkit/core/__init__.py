"""Core engine: schema synthesis, tool registry and dispatch."""

from mcpkit.core.cancellation import CancellationToken
from mcpkit.core.dispatcher import COMPLETION_MESSAGE, ToolDispatcher, ToolOutcome
from mcpkit.core.errors import RegistrationError, RegistrationRule, SchemaGenerationError
from mcpkit.core.registry import RegisteredTool, ToolRegistration, ToolRegistry
from mcpkit.core.schema import FieldShape, ParameterShape, describe, synthesize

__all__ = [
    "COMPLETION_MESSAGE",
    "CancellationToken",
    "FieldShape",
    "ParameterShape",
    "RegisteredTool",
    "RegistrationError",
    "RegistrationRule",
    "SchemaGenerationError",
    "ToolDispatcher",
    "ToolOutcome",
    "ToolRegistration",
    "ToolRegistry",
    "describe",
    "synthesize",
]
