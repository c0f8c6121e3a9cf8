"""Error types for the JSON-RPC protocol layer.

Every :class:`ProtocolError` maps onto one JSON-RPC 2.0 error object, so the
router can turn any raised protocol failure into a response envelope.
"""

from __future__ import annotations

from typing import Any

from pydantic import ValidationError

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

_HTTP_STATUS_BY_CODE = {
    PARSE_ERROR: 400,
    INVALID_REQUEST: 400,
    INVALID_PARAMS: 400,
    METHOD_NOT_FOUND: 404,
}


def http_status_for(code: int) -> int:
    """Return the HTTP status used to carry a JSON-RPC error with *code*."""
    return _HTTP_STATUS_BY_CODE.get(code, 500)


class MCPError(Exception):
    """Base error for all mcpkit failures."""


class ProtocolError(MCPError):
    """A failure that is reported to the caller as a JSON-RPC error object."""

    code: int = INTERNAL_ERROR

    def __init__(self, message: str, data: Any = None) -> None:
        self.message = message
        self.data = data
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON-RPC ``error`` member."""
        error: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error


class ParseError(ProtocolError):
    """The payload is not valid JSON or not a valid envelope."""

    code = PARSE_ERROR


class InvalidRequestError(ProtocolError):
    """The envelope is JSON but not an acceptable request."""

    code = INVALID_REQUEST


class MethodNotFoundError(ProtocolError):
    """No handler exists for the requested method."""

    code = METHOD_NOT_FOUND

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__("Method not found")


class InvalidParamsError(ProtocolError):
    """The ``params`` member does not match what the method expects."""

    code = INVALID_PARAMS


class InternalError(ProtocolError):
    """The server failed while handling an otherwise valid request."""

    code = INTERNAL_ERROR


class ToolNotFoundError(InvalidParamsError):
    """Requested tool does not exist in the registry."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Tool not found: {name}")


class InvalidArgumentsError(InvalidParamsError):
    """Tool arguments could not be decoded into the tool's parameter type."""

    def __init__(self, name: str, detail: str = "") -> None:
        self.name = name
        self.detail = detail
        super().__init__(f"Invalid arguments for tool {name}", data=detail or None)


def summarize_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ValidationError into one ``loc: msg; ...`` line."""
    parts: list[str] = []
    for error in exc.errors():
        loc = ".".join(str(p) for p in error["loc"])
        parts.append(f"{loc}: {error['msg']}" if loc else error["msg"])
    return "; ".join(parts)
