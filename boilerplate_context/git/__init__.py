"""Git-backed working copy management."""

from .repository import RefreshStatus, RepositoryCache

__all__ = ["RefreshStatus", "RepositoryCache"]
