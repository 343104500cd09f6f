"""Platform-scoped reads over the working copy."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Sequence

from ..config import DEFAULT_GUIDELINE_FILENAME, Platform
from ..errors import DirectoryNotFound, DocumentNotFound, InvalidPlatform
from ..logging import get_logger

_EXCLUDED_DIRS = {"node_modules"}
_HIDDEN_PREFIX = "."


class ContentReader:
    """Lists boilerplate trees and loads guideline documents for configured platforms."""

    def __init__(
        self,
        root: Path,
        platforms: Sequence[Platform],
        *,
        guideline_filename: str = DEFAULT_GUIDELINE_FILENAME,
    ) -> None:
        self.root = Path(root)
        self.platforms = tuple(platforms)
        self.guideline_filename = guideline_filename
        self.logger = get_logger("reader")

    def platform_dir(self, platform: Platform) -> Path:
        if platform not in self.platforms:
            raise InvalidPlatform(f"Platform {platform.value!r} is not configured")
        return self.root / platform.value

    def directory_structure(self, platform: Platform) -> List[str]:
        """Return relative paths under the platform subtree in depth-first order.

        Directories carry a trailing ``/`` and are immediately followed by
        their children. Hidden entries and ``node_modules`` are skipped.
        """
        base = self.platform_dir(platform)
        if not base.is_dir():
            raise DirectoryNotFound(
                f"Boilerplate directory for {platform.value} not found: {base}"
            )
        entries: List[str] = []
        try:
            self._walk(base, "", entries)
        except OSError as exc:
            raise DirectoryNotFound(
                f"Failed to list boilerplate directory for {platform.value}: {exc}"
            ) from exc
        return entries

    def read_guideline(self, platform: Platform) -> str:
        """Return the guideline document for ``platform``."""
        path = self.platform_dir(platform) / self.guideline_filename
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentNotFound(
                f"Failed to read {self.guideline_filename} for {platform.value}: {exc}"
            ) from exc

    # ------------------------------------------------------------------
    # Internals

    def _walk(self, directory: Path, prefix: str, entries: List[str]) -> None:
        self.logger.debug("Reading directory: %s", directory)
        with os.scandir(directory) as iterator:
            children = list(iterator)
        for entry in children:
            if entry.name.startswith(_HIDDEN_PREFIX) or entry.name in _EXCLUDED_DIRS:
                continue
            relative = f"{prefix}{entry.name}"
            if entry.is_dir(follow_symlinks=False):
                entries.append(f"{relative}/")
                self._walk(Path(entry.path), f"{relative}/", entries)
            else:
                entries.append(relative)


__all__ = ["ContentReader"]
