"""MCP request dispatch over the repository cache and content reader."""

from __future__ import annotations

import asyncio
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    List,
    Optional,
    Sequence,
    Tuple,
    Type,
    TypeVar,
)

from pydantic import BaseModel, ValidationError

from ..config import Platform
from ..content.reader import ContentReader
from ..content.search import search
from ..errors import ContextServerError, InvalidPlatform
from ..git.repository import RefreshStatus, RepositoryCache
from ..logging import get_logger
from .formatting import (
    RESOURCE_SCHEME,
    format_all_contexts,
    format_search_results,
    format_structure,
    resource_uri,
)
from .jsonrpc import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    JSONRPC_VERSION,
    METHOD_NOT_FOUND,
    RESOURCE_NOT_FOUND,
    SERVER_ERROR,
    jsonrpc_error,
    jsonrpc_response,
)
from .tools import (
    GET_ALL_CONTEXTS,
    GET_BOILERPLATE_STRUCTURE,
    SEARCH_BEST_PRACTICES,
    AllContextsParams,
    SearchParams,
    StructureParams,
    tool_definitions,
)

SERVER_NAME = "boilerplate-context-server"
SERVER_VERSION = "1.0.0"
LATEST_PROTOCOL_VERSION = "2025-03-26"
SUPPORTED_PROTOCOL_VERSIONS = ("2025-03-26", "2024-11-05")

MARKDOWN_MIME = "text/markdown"


class InvalidParams(ContextServerError):
    """Raised when a call's arguments fail validation."""


class ResourceNotFound(ContextServerError):
    """Raised for a resource URI this server does not publish."""


class ContextServer:
    """Serves boilerplate structure and guideline documents to MCP clients.

    One instance is built at startup and shared by every request; the
    repository cache it holds is the only mutable state.
    """

    def __init__(
        self,
        cache: RepositoryCache,
        reader: ContentReader,
        *,
        name: str = SERVER_NAME,
        version: str = SERVER_VERSION,
    ) -> None:
        self.cache = cache
        self.reader = reader
        self.name = name
        self.version = version
        self.logger = get_logger("mcp")
        self._methods: Dict[str, Callable[[Dict[str, Any]], Awaitable[Any]]] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
            "resources/list": self._list_resources,
            "resources/read": self._read_resource,
        }

    @property
    def platforms(self) -> Tuple[Platform, ...]:
        return self.reader.platforms

    # ------------------------------------------------------------------
    # Operations

    def ensure_repository(self) -> RefreshStatus:
        return self.cache.ensure()

    def get_boilerplate_structure(self, platform: Platform) -> str:
        self._check_platform(platform)
        self.cache.ensure()
        entries = self.reader.directory_structure(platform)
        return format_structure(platform, entries)

    def search_best_practices(self, platform: Platform, query: str) -> str:
        self._check_platform(platform)
        self.cache.ensure()
        content = self.reader.read_guideline(platform)
        matches = search(content, query)
        self.logger.debug(
            "Search for %r in %s returned %d matches", query, platform.value, len(matches)
        )
        return format_search_results(
            platform, query, matches, document=self.reader.guideline_filename
        )

    def get_all_contexts(self) -> str:
        self.cache.ensure()
        documents = [
            (platform, self.reader.read_guideline(platform)) for platform in self.platforms
        ]
        return format_all_contexts(documents, document=self.reader.guideline_filename)

    def read_guideline(self, platform: Platform) -> str:
        self._check_platform(platform)
        self.cache.ensure()
        return self.reader.read_guideline(platform)

    # ------------------------------------------------------------------
    # JSON-RPC dispatch

    async def handle(self, message: Any) -> Optional[dict]:
        """Process one JSON-RPC message; notifications yield ``None``."""
        if not isinstance(message, dict):
            return jsonrpc_error(None, INVALID_REQUEST, "Invalid Request")

        request_id = message.get("id")
        method = message.get("method")
        if message.get("jsonrpc") != JSONRPC_VERSION or not isinstance(method, str):
            return jsonrpc_error(request_id, INVALID_REQUEST, "Invalid Request")

        if "id" not in message:
            self.logger.debug("Received notification %s", method)
            return None

        handler = self._methods.get(method)
        if handler is None:
            return jsonrpc_error(request_id, METHOD_NOT_FOUND, f"Method not found: {method}")

        params = message.get("params") or {}
        if not isinstance(params, dict):
            return jsonrpc_error(request_id, INVALID_PARAMS, "params must be an object")

        try:
            result = await handler(params)
        except (InvalidParams, InvalidPlatform) as exc:
            return jsonrpc_error(request_id, INVALID_PARAMS, str(exc))
        except ResourceNotFound as exc:
            return jsonrpc_error(request_id, RESOURCE_NOT_FOUND, str(exc))
        except ContextServerError as exc:
            self.logger.warning("%s failed: %s", method, exc)
            return jsonrpc_error(request_id, SERVER_ERROR, str(exc))
        except Exception:
            self.logger.exception("Unhandled error while processing %s", method)
            return jsonrpc_error(request_id, INTERNAL_ERROR, "Internal server error")
        return jsonrpc_response(request_id, result)

    async def handle_batch(self, messages: Sequence[Any]) -> List[dict]:
        responses: List[dict] = []
        for message in messages:
            response = await self.handle(message)
            if response is not None:
                responses.append(response)
        return responses

    async def _initialize(self, params: Dict[str, Any]) -> Dict[str, Any]:
        requested = params.get("protocolVersion")
        version = (
            requested if requested in SUPPORTED_PROTOCOL_VERSIONS else LATEST_PROTOCOL_VERSION
        )
        client = params.get("clientInfo")
        client_name = client.get("name") if isinstance(client, dict) else None
        self.logger.info("Initializing MCP session for client %s", client_name or "unknown")
        return {
            "protocolVersion": version,
            "capabilities": {"resources": {}, "tools": {}, "logging": {}},
            "serverInfo": {"name": self.name, "version": self.version},
        }

    async def _ping(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    async def _list_tools(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"tools": tool_definitions(self.platforms)}

    async def _call_tool(self, params: Dict[str, Any]) -> Dict[str, Any]:
        name = params.get("name")
        raw_arguments = params.get("arguments") or {}
        if name == GET_BOILERPLATE_STRUCTURE:
            structure_args = _parse_arguments(StructureParams, name, raw_arguments)
            text = await _in_executor(self.get_boilerplate_structure, structure_args.platform)
        elif name == SEARCH_BEST_PRACTICES:
            search_args = _parse_arguments(SearchParams, name, raw_arguments)
            text = await _in_executor(
                self.search_best_practices, search_args.platform, search_args.query
            )
        elif name == GET_ALL_CONTEXTS:
            _parse_arguments(AllContextsParams, name, raw_arguments)
            text = await _in_executor(self.get_all_contexts)
        else:
            raise InvalidParams(f"Unknown tool: {name}")
        return {"content": [{"type": "text", "text": text}]}

    async def _list_resources(self, params: Dict[str, Any]) -> Dict[str, Any]:
        filename = self.reader.guideline_filename
        return {
            "resources": [
                {
                    "uri": resource_uri(platform),
                    "name": f"{platform.value}-agents",
                    "title": f"{platform.display_name} Boilerplate {filename}",
                    "description": (
                        f"Best practices and guidelines for {platform.value} development"
                    ),
                    "mimeType": MARKDOWN_MIME,
                }
                for platform in self.platforms
            ]
        }

    async def _read_resource(self, params: Dict[str, Any]) -> Dict[str, Any]:
        uri = params.get("uri")
        if not isinstance(uri, str):
            raise InvalidParams("resources/read requires a 'uri' string")
        platform = self._platform_for_uri(uri)
        text = await _in_executor(self.read_guideline, platform)
        return {"contents": [{"uri": uri, "mimeType": MARKDOWN_MIME, "text": text}]}

    # ------------------------------------------------------------------
    # Helpers

    def _check_platform(self, platform: Platform) -> None:
        if platform not in self.platforms:
            allowed = ", ".join(item.value for item in self.platforms)
            raise InvalidPlatform(
                f"Platform {platform.value!r} is not configured; expected one of: {allowed}"
            )

    def _platform_for_uri(self, uri: str) -> Platform:
        for platform in self.platforms:
            if uri == resource_uri(platform):
                return platform
        raise ResourceNotFound(
            f"Unknown resource: {uri} (expected {RESOURCE_SCHEME}://<platform>/agents.md)"
        )


_ParamsT = TypeVar("_ParamsT", bound=BaseModel)


def _parse_arguments(model: Type[_ParamsT], tool: str, arguments: Any) -> _ParamsT:
    try:
        return model.model_validate(arguments)
    except ValidationError as exc:
        raise InvalidParams(_describe_validation_error(tool, exc)) from exc


async def _in_executor(func: Callable[..., str], *args: Any) -> str:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, func, *args)


def _describe_validation_error(tool: str, exc: ValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())) or "arguments"
        problems.append(f"{location}: {error.get('msg', 'invalid value')}")
    return f"Invalid arguments for {tool}: " + "; ".join(problems)


__all__ = [
    "ContextServer",
    "InvalidParams",
    "LATEST_PROTOCOL_VERSION",
    "ResourceNotFound",
    "SERVER_NAME",
    "SERVER_VERSION",
]
