"""ToolDispatcher: decodes arguments and invokes registered handlers."""

from __future__ import annotations

import dataclasses
import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ValidationError

from mcpkit.core.cancellation import CancellationToken
from mcpkit.protocol.errors import InvalidArgumentsError, summarize_validation_error
from mcpkit.protocol.models import CallToolResult
from mcpkit.utils.telemetry import ATTR_TOOL_IS_ERROR, ATTR_TOOL_NAME, get_tracer

if TYPE_CHECKING:
    from mcpkit.core.registry import RegisteredTool, ToolRegistry

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

COMPLETION_MESSAGE = "Operation completed successfully."


@dataclass(frozen=True)
class ToolOutcome:
    """Text produced by one tool invocation.

    ``is_error`` marks a failure raised by the handler itself; it is still
    delivered to the caller as a normal result.
    """

    text: str
    is_error: bool = False

    def to_result(self) -> CallToolResult:
        return CallToolResult.from_text(self.text, is_error=self.is_error)


class ToolDispatcher:
    """Routes a tool call to its registered handler.

    Usage::

        dispatcher = ToolDispatcher(registry)
        outcome = dispatcher.invoke("calculator/add", {"a": 2, "b": 3})
        outcome.text  # "5"

    Each call is executed exactly once, synchronously, on the calling
    thread. No timeout is applied.
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> ToolRegistry:
        return self._registry

    def invoke(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
        token: CancellationToken | None = None,
    ) -> ToolOutcome:
        """Decode *arguments* for tool *name* and run its handler.

        Raises:
            ToolNotFoundError: If *name* is not registered.
            InvalidArgumentsError: If *arguments* do not fit the tool's
                parameter type. The handler is not called.
        """
        tool = self._registry.lookup(name)
        params = _decode(tool, arguments)

        with _tracer.start_as_current_span("mcpkit.tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            outcome = _call(tool, params, token or CancellationToken())
            span.set_attribute(ATTR_TOOL_IS_ERROR, outcome.is_error)
        return outcome

    def call(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
        token: CancellationToken | None = None,
    ) -> CallToolResult:
        """Like :meth:`invoke`, wrapped as a ``tools/call`` result."""
        return self.invoke(name, arguments, token).to_result()


def render_text(value: Any) -> str:
    """Render a handler's return value as result text."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, BaseModel):
        return value.model_dump_json()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return json.dumps(dataclasses.asdict(value), default=str)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, default=str)
    return str(value)


def _decode(tool: RegisteredTool, arguments: Mapping[str, Any] | None) -> Any:
    """Decode *arguments* strictly: no string-to-number or bool-to-number coercion."""
    payload = {} if arguments is None else arguments
    if not isinstance(payload, Mapping):
        raise InvalidArgumentsError(tool.name, "arguments must be an object")
    try:
        raw = json.dumps(dict(payload))
    except (TypeError, ValueError, RecursionError) as exc:
        raise InvalidArgumentsError(tool.name, f"arguments are not JSON data: {exc}") from exc
    try:
        return tool.adapter.validate_json(raw, strict=True)
    except ValidationError as exc:
        raise InvalidArgumentsError(tool.name, summarize_validation_error(exc)) from exc


def _call(tool: RegisteredTool, params: Any, token: CancellationToken) -> ToolOutcome:
    args = (token, params) if tool.accepts_cancellation_token else (params,)
    try:
        value = tool.handler(*args)
    except Exception as exc:
        logger.warning("Tool %s returned an error: %s", tool.name, exc, exc_info=True)
        return ToolOutcome(text=str(exc) or type(exc).__name__, is_error=True)

    if tool.returns_none or value is None:
        return ToolOutcome(text=COMPLETION_MESSAGE)
    return ToolOutcome(text=render_text(value))

