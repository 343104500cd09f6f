"""Text rendering for tool results; clients display free text, not structured data."""

from __future__ import annotations

from typing import Sequence, Tuple

from ..config import Platform
from ..content.search import Match

RESOURCE_SCHEME = "boilerplate"
SECTION_SEPARATOR = "\n\n---\n\n"


def resource_uri(platform: Platform) -> str:
    return f"{RESOURCE_SCHEME}://{platform.value}/agents.md"


def format_structure(platform: Platform, entries: Sequence[str]) -> str:
    return f"File structure for {platform.value} boilerplate:\n\n" + "\n".join(entries)


def format_search_results(
    platform: Platform, query: str, matches: Sequence[Match], *, document: str = "AGENTS.md"
) -> str:
    if not matches:
        return f'No matches found for "{query}" in {platform.value} {document}'
    blocks = [f"\n--- Line {match.line_number} ---\n{match.context}\n" for match in matches]
    header = f'Found {len(matches)} matches for "{query}" in {platform.value} {document}:'
    return header + "\n" + "\n".join(blocks)


def format_all_contexts(
    documents: Sequence[Tuple[Platform, str]], *, document: str = "AGENTS.md"
) -> str:
    sections = [
        f"## {platform.value.upper()} {document}\n\n{content}" for platform, content in documents
    ]
    return SECTION_SEPARATOR.join(sections)


__all__ = [
    "RESOURCE_SCHEME",
    "SECTION_SEPARATOR",
    "format_all_contexts",
    "format_search_results",
    "format_structure",
    "resource_uri",
]
