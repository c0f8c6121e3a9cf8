"""Protocol layer: JSON-RPC 2.0 envelopes, MCP payloads and error codes."""

from mcpkit.protocol.errors import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    InternalError,
    InvalidArgumentsError,
    InvalidParamsError,
    InvalidRequestError,
    MCPError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
    ToolNotFoundError,
    http_status_for,
)
from mcpkit.protocol.models import (
    CallToolRequest,
    CallToolResult,
    Implementation,
    InitializeRequest,
    InitializeResult,
    JsonRpcError,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    ListToolsResult,
    ServerCapabilities,
    TextContent,
    Tool,
    ToolsCapability,
)

__all__ = [
    "INTERNAL_ERROR",
    "INVALID_PARAMS",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "PARSE_ERROR",
    "CallToolRequest",
    "CallToolResult",
    "Implementation",
    "InitializeRequest",
    "InitializeResult",
    "InternalError",
    "InvalidArgumentsError",
    "InvalidParamsError",
    "InvalidRequestError",
    "JsonRpcError",
    "JsonRpcNotification",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "ListToolsResult",
    "MCPError",
    "MethodNotFoundError",
    "ParseError",
    "ProtocolError",
    "ServerCapabilities",
    "TextContent",
    "Tool",
    "ToolNotFoundError",
    "ToolsCapability",
    "http_status_for",
]
