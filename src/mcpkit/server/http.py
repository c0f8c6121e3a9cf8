"""HTTP transport: a FastAPI app exposing one MCP endpoint.

``POST`` bodies are handed to the :class:`~mcpkit.server.router.ProtocolRouter`
on Starlette's worker thread pool, one thread per request.  ``GET`` is
reserved for a future streaming channel and returns an empty ``200``.  Other
verbs on the endpoint are answered with ``405 Method Not Allowed``.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from starlette.concurrency import run_in_threadpool

if TYPE_CHECKING:
    from mcpkit.server.server import MCPServer

logger = logging.getLogger(__name__)


def create_app(server: MCPServer, *, path: str = "/mcp") -> FastAPI:
    """Build the FastAPI application serving *server* at *path*."""
    app = FastAPI(title=f"MCP Server: {server.name}", version=server.version)
    app.state.mcp_server = server

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "healthy", "server": server.name}

    @app.get(path)
    async def stream() -> Response:
        logger.info("Received GET request for SSE stream (not yet implemented). Returning OK.")
        return Response(status_code=200)

    @app.post(path)
    async def mcp_endpoint(request: Request) -> Response:
        body = await request.body()
        reply = await run_in_threadpool(server.handle_message, body)
        if reply.body is None:
            return Response(status_code=reply.status_code, headers=reply.headers)
        return JSONResponse(
            status_code=reply.status_code, content=reply.body, headers=reply.headers
        )

    return app
