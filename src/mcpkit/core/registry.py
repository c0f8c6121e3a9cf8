"""ToolRegistry: validated, name-unique storage for tool handlers.

Handlers are plain synchronous callables taking a single record parameter
(a pydantic model or dataclass), optionally preceded by a
:class:`~mcpkit.core.cancellation.CancellationToken`::

    def add(params: AddParams) -> float: ...
    def slow_add(token: CancellationToken, params: AddParams) -> float: ...

Registration inspects the signature once, synthesizes the input schema, and
builds the pydantic adapter later used to decode call arguments.
"""

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from mcpkit.core.cancellation import CancellationToken
from mcpkit.core.errors import RegistrationError, RegistrationRule, SchemaGenerationError
from mcpkit.core.locks import ReadWriteLock
from mcpkit.core.schema import ParameterShape, describe, is_record_type, schema_for_shape
from mcpkit.protocol.errors import ToolNotFoundError
from mcpkit.protocol.models import Tool

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


@dataclass(frozen=True)
class ToolRegistration:
    """A tool definition paired with the handler that implements it."""

    definition: Tool | Mapping[str, Any]
    handler: Callable[..., Any]


@dataclass(frozen=True)
class RegisteredTool:
    """A tool that passed registration, with everything needed to call it."""

    definition: Tool
    handler: Callable[..., Any]
    shape: ParameterShape
    adapter: TypeAdapter[Any]
    accepts_cancellation_token: bool
    returns_none: bool = False

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def parameter_type(self) -> Any:
        return self.shape.type


class ToolRegistry:
    """Maintains the name-to-tool map.

    Usage::

        registry = ToolRegistry()
        registry.register_tool(Tool(name="calculator/add"), add)

        @registry.tool("calculator/subtract", title="Subtract Numbers")
        def subtract(params: SubtractParams) -> float:
            return params.a - params.b

    Registration takes the write side of the registry lock; lookups and
    listings take the read side.
    """

    def __init__(self) -> None:
        self._tools: dict[str, RegisteredTool] = {}
        self._lock = ReadWriteLock()

    def register_tool(
        self, definition: Tool | Mapping[str, Any], handler: Callable[..., Any]
    ) -> RegisteredTool:
        """Validate and register a single tool.

        Raises:
            RegistrationError: If any registration check fails.
        """
        return self.register_many([ToolRegistration(definition, handler)])[0]

    def register_many(
        self, registrations: Iterable[ToolRegistration]
    ) -> list[RegisteredTool]:
        """Validate and register a batch of tools, all or nothing.

        Every entry is validated before any is committed, so the first
        failure leaves the registry unchanged.

        Raises:
            RegistrationError: Naming the first offending tool and rule.
        """
        prepared: list[RegisteredTool] = []
        batch_names: set[str] = set()
        for registration in registrations:
            tool = _prepare(registration.definition, registration.handler)
            if tool.name in batch_names:
                raise RegistrationError(
                    tool.name,
                    RegistrationRule.DUPLICATE,
                    f"tool with name '{tool.name}' appears more than once in the batch",
                )
            batch_names.add(tool.name)
            prepared.append(tool)

        with self._lock.write():
            for tool in prepared:
                if tool.name in self._tools:
                    raise RegistrationError(
                        tool.name,
                        RegistrationRule.DUPLICATE,
                        f"tool with name '{tool.name}' already registered",
                    )
            for tool in prepared:
                self._tools[tool.name] = tool

        for tool in prepared:
            logger.info("Registered tool: %s", tool.name)
        return prepared

    def tool(
        self,
        name: str,
        *,
        title: str | None = None,
        description: str | None = None,
    ) -> Callable[[F], F]:
        """Decorator form of :meth:`register_tool`.

        The description defaults to the first paragraph of the handler's
        docstring. The handler is returned unchanged.
        """

        def decorator(fn: F) -> F:
            doc = description if description is not None else _first_paragraph(fn)
            self.register_tool(Tool(name=name, title=title, description=doc), fn)
            return fn

        return decorator

    def lookup(self, name: str) -> RegisteredTool:
        """Return the registered tool called *name*.

        Raises:
            ToolNotFoundError: If no such tool exists.
        """
        with self._lock.read():
            tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def list_all(self) -> list[Tool]:
        """Return a snapshot of every tool definition."""
        with self._lock.read():
            tools = list(self._tools.values())
        return [t.definition.model_copy(deep=True) for t in tools]

    def names(self) -> list[str]:
        with self._lock.read():
            return list(self._tools)

    def __contains__(self, name: object) -> bool:
        with self._lock.read():
            return name in self._tools

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._tools)


# ---------------------------------------------------------------------------
# Registration checks
# ---------------------------------------------------------------------------


def _prepare(definition: Tool | Mapping[str, Any], handler: Callable[..., Any]) -> RegisteredTool:
    """Run every registration check except the registry-wide name clash."""
    tool_def = _coerce_definition(definition)
    name = tool_def.name

    if not name:
        raise RegistrationError(name, RegistrationRule.NAME, "tool definition must include a name")

    target = _call_target(handler)
    if target is None:
        raise RegistrationError(name, RegistrationRule.HANDLER, "handler must be callable")
    if inspect.iscoroutinefunction(target) or inspect.isasyncgenfunction(target):
        raise RegistrationError(
            name, RegistrationRule.HANDLER, "handler must be a synchronous callable"
        )

    try:
        signature = inspect.signature(handler)
    except (TypeError, ValueError) as exc:
        raise RegistrationError(
            name, RegistrationRule.HANDLER, f"cannot inspect handler signature: {exc}"
        ) from exc

    params = list(signature.parameters.values())
    if len(params) not in (1, 2) or any(p.kind not in _POSITIONAL for p in params):
        raise RegistrationError(
            name,
            RegistrationRule.ARITY,
            f"handler must take one or two positional parameters, got {signature}",
        )

    try:
        hints = typing.get_type_hints(target)
    except Exception as exc:
        raise RegistrationError(
            name, RegistrationRule.PARAMETER_TYPE, f"cannot resolve handler annotations: {exc}"
        ) from exc

    accepts_token = len(params) == 2
    if accepts_token:
        first = hints.get(params[0].name)
        if not (isinstance(first, type) and issubclass(first, CancellationToken)):
            raise RegistrationError(
                name,
                RegistrationRule.CANCELLATION_TOKEN,
                "the first of two handler parameters must be a CancellationToken, "
                f"but got {_annotation_name(first)}",
            )

    parameter_type = hints.get(params[-1].name)
    if not is_record_type(parameter_type):
        raise RegistrationError(
            name,
            RegistrationRule.PARAMETER_TYPE,
            "handler's parameter type must be a pydantic model or dataclass, "
            f"but got {_annotation_name(parameter_type)}",
        )

    try:
        shape = describe(parameter_type)
        input_schema = schema_for_shape(shape)
        adapter: TypeAdapter[Any] = TypeAdapter(parameter_type)
    except (SchemaGenerationError, ValidationError, TypeError, NameError) as exc:
        raise RegistrationError(
            name,
            RegistrationRule.SCHEMA,
            f"could not generate schema for type {_annotation_name(parameter_type)}: {exc}",
        ) from exc

    return RegisteredTool(
        definition=tool_def.model_copy(update={"input_schema": input_schema}),
        handler=handler,
        shape=shape,
        adapter=adapter,
        accepts_cancellation_token=accepts_token,
        returns_none=hints.get("return", inspect.Signature.empty) is type(None),
    )


def _coerce_definition(definition: Tool | Mapping[str, Any]) -> Tool:
    if isinstance(definition, Tool):
        return definition
    try:
        return Tool.model_validate(dict(definition))
    except (ValidationError, TypeError, ValueError) as exc:
        raw_name = definition.get("name", "") if isinstance(definition, Mapping) else ""
        raise RegistrationError(
            str(raw_name), RegistrationRule.NAME, f"invalid tool definition: {exc}"
        ) from exc


def _call_target(handler: Any) -> Any:
    """Return the function whose signature and annotations describe *handler*."""
    if inspect.isfunction(handler) or inspect.ismethod(handler):
        return handler
    if isinstance(handler, type) or not callable(handler):
        return None
    return getattr(handler, "__call__", None)


def _annotation_name(annotation: Any) -> str:
    if annotation is None:
        return "no annotation"
    return getattr(annotation, "__qualname__", None) or repr(annotation)


def _first_paragraph(fn: Callable[..., Any]) -> str | None:
    doc = inspect.getdoc(fn)
    if not doc:
        return None
    return doc.split("\n\n", 1)[0].replace("\n", " ").strip()
