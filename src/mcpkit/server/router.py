"""ProtocolRouter: turns raw JSON-RPC messages into replies.

The router is transport-neutral.  It takes the request body bytes and
returns a :class:`RouterReply` holding the HTTP status, the JSON body (or
``None`` when no JSON-RPC response is due) and any extra headers.

Messages carrying an ``id`` member (even ``null``) are requests and always
get a response envelope.  Messages without one are notifications: they are
acknowledged with ``202 Accepted`` and never answered with a JSON-RPC error.

Session state is recorded on ``initialize`` but not enforced: ``tools/list``
and ``tools/call`` are served without a prior handshake.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from opentelemetry import trace
from pydantic import BaseModel, ValidationError

from mcpkit.protocol.errors import (
    InternalError,
    InvalidParamsError,
    MethodNotFoundError,
    ParseError,
    ProtocolError,
    http_status_for,
    summarize_validation_error,
)
from mcpkit.protocol.models import (
    CallToolRequest,
    Implementation,
    InitializeRequest,
    InitializeResult,
    JsonRpcNotification,
    JsonRpcRequest,
    JsonRpcResponse,
    ListToolsResult,
    ServerCapabilities,
)
from mcpkit.utils.telemetry import ATTR_RPC_ERROR_CODE, ATTR_RPC_METHOD, ATTR_SESSION_ID, get_tracer

if TYPE_CHECKING:
    from mcpkit.core.dispatcher import ToolDispatcher
    from mcpkit.server.sessions import SessionStore

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

SESSION_HEADER = "Mcp-Session-Id"

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class RouterReply:
    """What the transport should send back for one inbound message."""

    status_code: int
    body: dict[str, Any] | None = None
    headers: dict[str, str] = field(default_factory=dict)

    def body_bytes(self) -> bytes:
        if self.body is None:
            return b""
        return json.dumps(self.body).encode("utf-8")


class ProtocolRouter:
    """Dispatches JSON-RPC messages to the MCP method handlers."""

    def __init__(
        self,
        dispatcher: ToolDispatcher,
        sessions: SessionStore,
        server_info: Implementation,
        capabilities: ServerCapabilities | None = None,
        *,
        instructions: str | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._sessions = sessions
        self._server_info = server_info
        self._capabilities = capabilities or ServerCapabilities()
        self._instructions = instructions
        self._methods: dict[str, Callable[[JsonRpcRequest], RouterReply]] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    @property
    def methods(self) -> list[str]:
        return list(self._methods)

    def handle_message(self, raw: bytes | str) -> RouterReply:
        """Parse one message and produce the reply for it."""
        try:
            message = json.loads(raw)
        except (ValueError, RecursionError) as exc:
            return _error_reply(None, ParseError("Parse error: Invalid JSON", data=str(exc)))

        if not isinstance(message, dict):
            return _error_reply(
                None,
                ParseError("Parse error: Invalid JSON", data="message must be a JSON object"),
            )

        if "id" in message:
            return self._handle_request(message)
        return self._handle_notification(message)

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def _handle_request(self, message: dict[str, Any]) -> RouterReply:
        try:
            request = JsonRpcRequest.model_validate(message)
        except ValidationError as exc:
            detail = summarize_validation_error(exc)
            return _error_reply(
                None, ParseError("Parse error: Invalid Request structure", data=detail)
            )

        logger.info("Received request: Method=%s, ID=%s", request.method, request.id)
        with _tracer.start_as_current_span("mcpkit.rpc.request") as span:
            span.set_attribute(ATTR_RPC_METHOD, request.method)
            try:
                handler = self._methods.get(request.method)
                if handler is None:
                    logger.info("Unknown method: %s", request.method)
                    raise MethodNotFoundError(request.method)
                return handler(request)
            except ProtocolError as exc:
                span.set_attribute(ATTR_RPC_ERROR_CODE, exc.code)
                return _error_reply(request.id, exc)
            except Exception:
                logger.exception("Internal error while handling %s", request.method)
                span.set_attribute(ATTR_RPC_ERROR_CODE, InternalError.code)
                return _error_reply(request.id, InternalError("Internal error"))

    def _initialize(self, request: JsonRpcRequest) -> RouterReply:
        params = _decode_params(request, InitializeRequest, "Invalid params for initialize")
        logger.info(
            "Client '%s' version '%s' connecting with protocol version '%s'",
            params.client_info.name,
            params.client_info.version,
            params.protocol_version,
        )

        session = self._sessions.create(
            client_capabilities=params.capabilities,
            client_info=params.client_info.to_wire(),
            protocol_version=params.protocol_version,
        )
        trace.get_current_span().set_attribute(ATTR_SESSION_ID, session.session_id)

        result = InitializeResult(
            protocol_version=params.protocol_version,
            capabilities=self._capabilities,
            server_info=self._server_info,
            instructions=self._instructions,
        )
        return _success(
            request.id, result.to_wire(), headers={SESSION_HEADER: session.session_id}
        )

    def _ping(self, request: JsonRpcRequest) -> RouterReply:
        return _success(request.id, {})

    def _list_tools(self, request: JsonRpcRequest) -> RouterReply:
        result = ListToolsResult(tools=self._dispatcher.registry.list_all())
        return _success(request.id, result.to_wire())

    def _call_tool(self, request: JsonRpcRequest) -> RouterReply:
        params = _decode_params(request, CallToolRequest, "Invalid params for tools/call")
        logger.info("Received tools/call request for tool '%s': ID=%s", params.name, request.id)
        outcome = self._dispatcher.invoke(params.name, params.arguments)
        return _success(request.id, outcome.to_result().to_wire())

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _handle_notification(self, message: dict[str, Any]) -> RouterReply:
        try:
            notification = JsonRpcNotification.model_validate(message)
        except ValidationError as exc:
            logger.warning("Error parsing notification: %s", summarize_validation_error(exc))
            return RouterReply(status_code=400)

        logger.info("Received notification: Method=%s", notification.method)
        if notification.method == "notifications/initialized":
            logger.info("Client confirmed initialization.")
        else:
            logger.info("Received unhandled notification: %s", notification.method)
        return RouterReply(status_code=202)


def _decode_params(request: JsonRpcRequest, model: type[M], message: str) -> M:
    try:
        return model.model_validate(request.params or {})
    except ValidationError as exc:
        raise InvalidParamsError(message, data=summarize_validation_error(exc)) from exc


def _success(
    request_id: Any, result: dict[str, Any], headers: dict[str, str] | None = None
) -> RouterReply:
    body = JsonRpcResponse.success(request_id, result).to_wire()
    return RouterReply(status_code=200, body=body, headers=headers or {})


def _error_reply(request_id: Any, exc: ProtocolError) -> RouterReply:
    body = JsonRpcResponse.failure(request_id, exc.code, exc.message, exc.data).to_wire()
    return RouterReply(status_code=http_status_for(exc.code), body=body)

