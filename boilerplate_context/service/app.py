"""FastAPI application exposing the MCP endpoint over HTTP."""

from __future__ import annotations

import json
from typing import Any, Iterator, List, Optional, Union

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse
from pydantic import BaseModel

from ..config import ServerConfig
from ..content.reader import ContentReader
from ..errors import TransportError
from ..git.repository import RepositoryCache
from ..logging import get_logger
from ..mcp.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    PARSE_ERROR,
    SERVER_ERROR,
    jsonrpc_error,
)
from ..mcp.server import ContextServer

SERVICE_NAME = "boilerplate-context-mcp"
MCP_PATH = "/mcp"
EVENT_STREAM = "text/event-stream"

logger = get_logger("service")


class HealthResponse(BaseModel):
    status: str
    service: str


def build_server(config: ServerConfig) -> ContextServer:
    """Wire the repository cache and content reader for ``config``."""
    cache = RepositoryCache(
        config.repo_url,
        config.repo_dir,
        timeout=config.git_timeout,
        min_refresh_interval=config.refresh_interval,
    )
    reader = ContentReader(
        config.content_root,
        config.platforms,
        guideline_filename=config.guideline_filename,
    )
    return ContextServer(cache, reader)


def create_app(server: ContextServer) -> FastAPI:
    """Create the FastAPI application serving ``server`` on ``/mcp``."""

    app = FastAPI(title="Boilerplate Context MCP Server", version=server.version)
    app.state.context_server = server

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service=SERVICE_NAME)

    @app.post(MCP_PATH)
    async def mcp_endpoint(request: Request) -> Response:
        body = await request.body()
        try:
            payload = json.loads(body)
        except (UnicodeDecodeError, ValueError) as exc:
            raise TransportError("Parse error", status_code=400, code=PARSE_ERROR) from exc

        if payload == []:
            raise TransportError("Invalid Request", status_code=400, code=INVALID_REQUEST)

        result: Union[dict, List[dict], None]
        if isinstance(payload, list):
            batch = await server.handle_batch(payload)
            result = batch or None
        else:
            result = await server.handle(payload)

        if result is None:
            return Response(status_code=202)
        if _wants_event_stream(request.headers.get("accept")):
            return StreamingResponse(_event_stream(result), media_type=EVENT_STREAM)
        return JSONResponse(result)

    @app.api_route(MCP_PATH, methods=["GET", "PUT", "PATCH", "DELETE"])
    async def mcp_other_methods(request: Request) -> JSONResponse:
        if request.method == "GET":
            return _method_not_allowed("Method not allowed. Use POST.")
        return _method_not_allowed("Method not allowed.")

    @app.exception_handler(TransportError)
    async def transport_error_handler(_: Any, exc: TransportError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code, content=jsonrpc_error(None, exc.code, str(exc))
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(_: Any, exc: Exception) -> JSONResponse:
        logger.error("Error handling MCP request: %s", exc, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=jsonrpc_error(None, INTERNAL_ERROR, "Internal server error"),
        )

    return app


def run_service(
    config: ServerConfig, server: Optional[ContextServer] = None
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(server or build_server(config))
    logger.info("Boilerplate Context MCP Server listening on port %d", config.port)
    logger.info("Health check: http://localhost:%d/health", config.port)
    logger.info("MCP endpoint: http://localhost:%d%s", config.port, MCP_PATH)
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


def _method_not_allowed(message: str) -> JSONResponse:
    return JSONResponse(status_code=405, content=jsonrpc_error(None, SERVER_ERROR, message))


def _wants_event_stream(accept: Optional[str]) -> bool:
    if not accept:
        return False
    media_types = {part.split(";", 1)[0].strip().lower() for part in accept.split(",")}
    if "application/json" in media_types or "*/*" in media_types:
        return False
    return EVENT_STREAM in media_types


def _event_stream(result: Union[dict, List[dict]]) -> Iterator[str]:
    yield f"event: message\ndata: {json.dumps(result)}\n\n"


__all__ = ["HealthResponse", "build_server", "create_app", "run_service"]
