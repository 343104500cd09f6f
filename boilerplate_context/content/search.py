"""Line-oriented substring search over guideline documents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

CONTEXT_LINES = 2


@dataclass(frozen=True)
class Match:
    """A matching line and the window of text around it."""

    line_number: int
    context: str


def search(text: str, query: str, *, context_lines: int = CONTEXT_LINES) -> List[Match]:
    """Return every line of ``text`` containing ``query``, case-insensitively.

    Each match carries its 1-based line number and up to ``context_lines``
    lines on either side, clipped to the document. Overlapping windows are
    reported independently. An empty query matches every line.
    """
    lines = _split_lines(text)
    needle = query.lower()
    matches: List[Match] = []
    for index, line in enumerate(lines):
        if needle not in line.lower():
            continue
        start = max(0, index - context_lines)
        end = min(len(lines), index + context_lines + 1)
        matches.append(Match(line_number=index + 1, context="\n".join(lines[start:end])))
    return matches


def _split_lines(text: str) -> List[str]:
    if not text:
        return []
    # Only "\n" ends a line; a final newline does not open an empty last line.
    lines = [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]
    if len(lines) > 1 and lines[-1] == "":
        lines.pop()
    return lines


__all__ = ["CONTEXT_LINES", "Match", "search"]
