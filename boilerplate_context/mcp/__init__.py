"""Model Context Protocol surface for the boilerplate context server.

- JSON-RPC 2.0 helpers
- Tool definitions and argument models for ``tools/list`` and ``tools/call``
- ``ContextServer``, which dispatches protocol methods
"""

from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PARSE_ERROR,
    SERVER_ERROR,
    jsonrpc_error,
    jsonrpc_response,
)
from .server import ContextServer

__all__ = [
    "ContextServer",
    # JSON-RPC helpers
    "jsonrpc_response",
    "jsonrpc_error",
    "PARSE_ERROR",
    "INVALID_REQUEST",
    "METHOD_NOT_FOUND",
    "INVALID_PARAMS",
    "INTERNAL_ERROR",
    "SERVER_ERROR",
]
