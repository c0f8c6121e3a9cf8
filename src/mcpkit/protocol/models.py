"""MCP models: JSON-RPC 2.0 envelopes and the tool protocol payloads.

Implements the message format used by the Model Context Protocol for
session setup (``initialize``), tool discovery (``tools/list``) and
execution (``tools/call``).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, StrictStr, model_validator

JSONRPC_VERSION = "2.0"

RequestId = StrictInt | StrictFloat | StrictStr | None

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message (carries an ``id``, possibly null)."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId = None
    method: StrictStr
    params: dict[str, Any] | None = None


class JsonRpcNotification(BaseModel):
    """A JSON-RPC 2.0 notification: a request without an ``id`` member."""

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    method: StrictStr
    params: dict[str, Any] | None = None


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message.

    Exactly one of ``result`` and ``error`` is set.
    """

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @model_validator(mode="after")
    def _result_xor_error(self) -> JsonRpcResponse:
        if (self.result is None) == (self.error is None):
            msg = "a response carries exactly one of 'result' or 'error'"
            raise ValueError(msg)
        return self

    @classmethod
    def success(cls, request_id: Any, result: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls, request_id: Any, code: int, message: str, data: Any = None
    ) -> JsonRpcResponse:
        return cls(id=request_id, error=JsonRpcError(code=code, message=message, data=data))

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the wire: ``id`` is always present, the unused member is not."""
        body: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            body["error"] = self.error.model_dump(exclude_none=True)
        else:
            body["result"] = self.result
        return body


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class _WireModel(BaseModel):
    """Base for payloads whose wire names are camelCase."""

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class Implementation(_WireModel):
    """Name and version of a client or server implementation."""

    name: StrictStr
    version: StrictStr
    title: StrictStr | None = None


class ToolsCapability(_WireModel):
    list_changed: bool | None = Field(default=None, alias="listChanged")


class ServerCapabilities(_WireModel):
    """Features the server advertises in its ``initialize`` result."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    tools: ToolsCapability | None = None
    resources: dict[str, Any] | None = None
    prompts: dict[str, Any] | None = None
    logging: dict[str, Any] | None = None


class InitializeRequest(_WireModel):
    """Parameters of the ``initialize`` request."""

    protocol_version: StrictStr = Field(alias="protocolVersion")
    client_info: Implementation = Field(alias="clientInfo")
    capabilities: dict[str, Any] = Field(default_factory=dict)


class InitializeResult(_WireModel):
    """Result of a successful ``initialize`` request."""

    protocol_version: str = Field(alias="protocolVersion")
    capabilities: ServerCapabilities
    server_info: Implementation = Field(alias="serverInfo")
    instructions: str | None = None


class Tool(_WireModel):
    """A tool definition as returned by ``tools/list``."""

    name: str
    title: str | None = None
    description: str | None = None
    input_schema: dict[str, Any] = Field(default_factory=dict, alias="inputSchema")


class ListToolsResult(_WireModel):
    tools: list[Tool] = []


class CallToolRequest(_WireModel):
    """Parameters of the ``tools/call`` request."""

    name: StrictStr
    arguments: dict[str, Any] | None = None


class TextContent(_WireModel):
    """Plain text content block."""

    type: Literal["text"] = "text"
    text: str


class CallToolResult(_WireModel):
    """Result of ``tools/call``; ``isError`` marks a failure reported by the tool itself."""

    content: list[TextContent] = []
    is_error: bool = Field(default=False, alias="isError")

    @classmethod
    def from_text(cls, text: str, *, is_error: bool = False) -> CallToolResult:
        """Create a CallToolResult with a single text content block."""
        return cls(content=[TextContent(text=text)], is_error=is_error)
