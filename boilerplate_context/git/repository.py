"""Local working copy of the reference repository."""

from __future__ import annotations

import os
import shutil
import subprocess
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable

from ..errors import RepositoryStale, RepositoryUnavailable
from ..logging import get_logger


class RefreshStatus(str, Enum):
    """Outcome of a single ``RepositoryCache.ensure`` call."""

    CLONED = "cloned"
    PULLED = "pulled"
    STALE = "stale"
    SKIPPED = "skipped"


class RepositoryCache:
    """Keeps one working copy of a remote repository present and up to date.

    Clone and pull run under a single lock, so concurrent callers never run two
    git network operations against the same directory at once.
    """

    def __init__(
        self,
        url: str,
        directory: Path,
        *,
        timeout: float = 60.0,
        min_refresh_interval: float = 0.0,
        runner: Callable[..., str] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.url = url
        self.directory = Path(directory)
        self.timeout = timeout
        self.min_refresh_interval = min_refresh_interval
        self._runner = runner or self._default_runner
        self._clock = clock
        self._lock = threading.Lock()
        self._last_refresh: float | None = None
        self.logger = get_logger("repository")

    def ensure(self) -> RefreshStatus:
        """Clone the repository if absent, otherwise pull the latest changes.

        Raises ``RepositoryUnavailable`` when the clone fails. A failed pull is
        logged and reported as ``RefreshStatus.STALE``; the existing content
        keeps being served.
        """
        with self._lock:
            if not self._has_working_copy():
                self._clone_or_raise()
                self._last_refresh = self._clock()
                return RefreshStatus.CLONED

            if self._is_fresh():
                self.logger.debug("Skipping pull; last refresh is recent")
                return RefreshStatus.SKIPPED

            try:
                self._pull()
            except RepositoryStale as exc:
                self.logger.warning("%s; serving cached content", exc)
                return RefreshStatus.STALE
            self._last_refresh = self._clock()
            return RefreshStatus.PULLED

    @property
    def exists(self) -> bool:
        return self._has_working_copy()

    # ------------------------------------------------------------------
    # Internals

    def _has_working_copy(self) -> bool:
        if not self.directory.is_dir():
            return False
        return any(self.directory.iterdir())

    def _is_fresh(self) -> bool:
        if self.min_refresh_interval <= 0 or self._last_refresh is None:
            return False
        return self._clock() - self._last_refresh < self.min_refresh_interval

    def _clone(self) -> None:
        self.logger.info("Cloning repository %s into %s", self.url, self.directory)
        self.directory.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._run(["git", "clone", self.url, str(self.directory)], cwd=self.directory.parent)
        except (subprocess.TimeoutExpired, subprocess.CalledProcessError, OSError):
            self._discard_partial_clone()
            raise

    def _discard_partial_clone(self) -> None:
        # A killed clone leaves a half-written .git behind; the next ensure() must clone again.
        if not self.directory.is_dir():
            return
        self.logger.warning("Removing incomplete clone in %s", self.directory)
        for child in list(self.directory.iterdir()):
            if child.is_dir() and not child.is_symlink():
                shutil.rmtree(child)
            else:
                child.unlink()

    def _clone_or_raise(self) -> None:
        try:
            self._clone()
        except subprocess.TimeoutExpired as exc:
            raise RepositoryUnavailable(
                f"Cloning {self.url} timed out after {self.timeout:g}s"
            ) from exc
        except subprocess.CalledProcessError as exc:
            raise RepositoryUnavailable(
                f"Cloning {self.url} failed with exit code {exc.returncode}: {_stderr(exc)}"
            ) from exc
        except OSError as exc:
            raise RepositoryUnavailable(f"Unable to clone {self.url}: {exc}") from exc

    def _pull(self) -> None:
        self.logger.info("Pulling repository in %s", self.directory)
        try:
            self._run(["git", "pull", "--ff-only"], cwd=self.directory)
        except subprocess.TimeoutExpired as exc:
            raise RepositoryStale(f"Pull timed out after {self.timeout:g}s") from exc
        except subprocess.CalledProcessError as exc:
            raise RepositoryStale(
                f"Pull failed with exit code {exc.returncode}: {_stderr(exc)}"
            ) from exc
        except OSError as exc:
            raise RepositoryStale(f"Unable to pull: {exc}") from exc

    def _run(self, args: Iterable[str], *, cwd: Path) -> str:
        return self._runner(args, cwd=cwd, timeout=self.timeout)

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path, timeout: float | None = None) -> str:
        env = os.environ.copy()
        # Never block on a credential prompt while holding the refresh lock.
        env["GIT_TERMINAL_PROMPT"] = "0"
        completed = subprocess.run(
            list(args),
            cwd=str(cwd),
            env=env,
            check=True,
            text=True,
            capture_output=True,
            timeout=timeout,
        )
        return completed.stdout


def _stderr(exc: subprocess.CalledProcessError) -> str:
    output = exc.stderr or ""
    if isinstance(output, bytes):
        output = output.decode("utf-8", errors="replace")
    return output.strip() or "no output"


__all__ = ["RefreshStatus", "RepositoryCache"]
