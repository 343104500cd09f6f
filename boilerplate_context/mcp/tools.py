"""Tool argument models and the definitions returned by ``tools/list``."""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

from pydantic import BaseModel, ConfigDict, Field

from ..config import Platform

GET_BOILERPLATE_STRUCTURE = "get_boilerplate_structure"
SEARCH_BEST_PRACTICES = "search_best_practices"
GET_ALL_CONTEXTS = "get_all_contexts"


class StructureParams(BaseModel):
    """Arguments for ``get_boilerplate_structure``."""

    model_config = ConfigDict(extra="ignore")

    platform: Platform = Field(..., description="The platform to get structure for")


class SearchParams(StructureParams):
    """Arguments for ``search_best_practices``."""

    query: str = Field(
        ..., description="The search query to find relevant best practices or patterns"
    )


class AllContextsParams(BaseModel):
    """``get_all_contexts`` takes no arguments."""

    model_config = ConfigDict(extra="ignore")


def tool_definitions(platforms: Sequence[Platform]) -> List[Dict[str, Any]]:
    """Return MCP tool definitions whose platform enum lists ``platforms``."""
    names = [platform.value for platform in platforms]
    platform_schema = {
        "type": "string",
        "enum": names,
        "description": f"The platform to get structure for ({', '.join(names)})",
    }
    return [
        {
            "name": GET_BOILERPLATE_STRUCTURE,
            "description": "Get the file structure of a boilerplate project",
            "inputSchema": {
                "type": "object",
                "properties": {"platform": platform_schema},
                "required": ["platform"],
            },
        },
        {
            "name": SEARCH_BEST_PRACTICES,
            "description": "Search for specific best practices or patterns in AGENTS.md",
            "inputSchema": {
                "type": "object",
                "properties": {
                    "platform": platform_schema,
                    "query": {
                        "type": "string",
                        "description": (
                            "The search query to find relevant best practices or patterns"
                        ),
                    },
                },
                "required": ["platform", "query"],
            },
        },
        {
            "name": GET_ALL_CONTEXTS,
            "description": (
                "Get AGENTS.md content for all platforms at once "
                "(useful for cross-platform features)"
            ),
            "inputSchema": {"type": "object", "properties": {}},
        },
    ]


__all__ = [
    "AllContextsParams",
    "GET_ALL_CONTEXTS",
    "GET_BOILERPLATE_STRUCTURE",
    "SEARCH_BEST_PRACTICES",
    "SearchParams",
    "StructureParams",
    "tool_definitions",
]
