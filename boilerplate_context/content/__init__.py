"""Readers and search over the boilerplate working copy."""

from .reader import ContentReader
from .search import Match, search

__all__ = ["ContentReader", "Match", "search"]
