"""HTTP service mode."""

from .app import build_server, create_app, run_service

__all__ = ["build_server", "create_app", "run_service"]
