"""Helper utilities for constructing temporary boilerplate working copies in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable, Mapping, Sequence

from boilerplate_context.config import Platform
from boilerplate_context.content.reader import ContentReader
from boilerplate_context.git.repository import RepositoryCache
from boilerplate_context.mcp.server import ContextServer


class RecordingRunner:
    """Stands in for the git subprocess runner and records every invocation."""

    def __init__(self, handler: Callable[..., str] | None = None) -> None:
        self.calls: list[dict[str, object]] = []
        self._handler = handler

    def __call__(self, args, *, cwd, timeout=None) -> str:  # type: ignore[no-untyped-def]
        args = list(args)
        self.calls.append({"args": args, "cwd": Path(cwd), "timeout": timeout})
        if self._handler is not None:
            return self._handler(args, cwd=Path(cwd), timeout=timeout)
        return ""

    @property
    def commands(self) -> list[list[str]]:
        return [call["args"] for call in self.calls]  # type: ignore[misc]


class BoilerplateBuilder:
    """Writes files into a throwaway working copy and wires servers around it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "repo"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the working copy."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def mkdir(self, relative: str) -> Path:
        path = self.root / relative
        path.mkdir(parents=True, exist_ok=True)
        return path

    def reader(
        self,
        platforms: Sequence[Platform] = tuple(Platform),
        *,
        guideline_filename: str = "AGENTS.md",
    ) -> ContentReader:
        return ContentReader(self.root, platforms, guideline_filename=guideline_filename)

    def server(
        self,
        platforms: Sequence[Platform] = tuple(Platform),
        *,
        runner: RecordingRunner | None = None,
    ) -> ContextServer:
        cache = RepositoryCache(
            "https://example.com/boilerplates.git",
            self.root,
            runner=runner or RecordingRunner(),
        )
        return ContextServer(cache, self.reader(platforms))

    def path(self) -> Path:
        """Return the working copy root path."""
        return self.root


__all__ = ["BoilerplateBuilder", "RecordingRunner"]
