"""Error types raised while registering tools."""

from __future__ import annotations

from enum import Enum

from mcpkit.protocol.errors import MCPError


class RegistrationRule(str, Enum):
    """The registration check that rejected a tool."""

    NAME = "name"
    HANDLER = "handler"
    ARITY = "arity"
    CANCELLATION_TOKEN = "cancellation_token"
    PARAMETER_TYPE = "parameter_type"
    SCHEMA = "schema"
    DUPLICATE = "duplicate"


class SchemaGenerationError(MCPError):
    """A parameter type could not be described as a JSON Schema."""

    def __init__(self, type_name: str, detail: str = "") -> None:
        self.type_name = type_name
        self.detail = detail
        msg = f"Could not generate schema for type {type_name}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class RegistrationError(MCPError):
    """A tool was rejected at registration time."""

    def __init__(self, tool_name: str, rule: RegistrationRule, detail: str) -> None:
        self.tool_name = tool_name
        self.rule = rule
        self.detail = detail
        super().__init__(f"Failed to register tool '{tool_name}' ({rule.value}): {detail}")
