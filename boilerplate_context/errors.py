"""Error taxonomy shared by the repository cache, content reader and request surface."""

from __future__ import annotations


class ContextServerError(RuntimeError):
    """Base class for failures the request surface knows how to report."""


class RepositoryUnavailable(ContextServerError):
    """Raised when no working copy exists and the initial clone failed."""


class RepositoryStale(ContextServerError):
    """Raised when refreshing an existing working copy failed.

    The cache recovers from this locally; previously fetched content stays valid.
    """


class InvalidPlatform(ContextServerError):
    """Raised when a request names a platform that is not configured."""


class DirectoryNotFound(ContextServerError):
    """Raised when a platform subtree is missing from the working copy."""


class DocumentNotFound(ContextServerError):
    """Raised when a guideline document cannot be read."""


class TransportError(ContextServerError):
    """Malformed request or disallowed verb at the HTTP layer."""

    def __init__(self, message: str, *, status_code: int, code: int) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code


__all__ = [
    "ContextServerError",
    "DirectoryNotFound",
    "DocumentNotFound",
    "InvalidPlatform",
    "RepositoryStale",
    "RepositoryUnavailable",
    "TransportError",
]
