"""Logging setup shared by the CLI and the HTTP server."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Sequence

_LOGGER_NAME = "boilerplate_context"
_CONSOLE_FORMAT = "[boilerplate-context] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# uvicorn runs with log_config=None, so its loggers share our handlers.
SERVER_LOGGERS: Sequence[str] = ("uvicorn", "uvicorn.access")


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the boilerplate_context hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    server_loggers: Sequence[str] = SERVER_LOGGERS,
) -> logging.Logger:
    """Attach console (and optional file) handlers to the package and server loggers."""
    level = logging.DEBUG if verbose else logging.INFO
    handlers = _build_handlers(level, log_file)

    logger = logging.getLogger(_LOGGER_NAME)
    _install(logger, handlers, level)
    for name in server_loggers:
        # Access logs stay at INFO even in verbose mode.
        _install(logging.getLogger(name), handlers, max(level, logging.INFO))
    return logger


def _build_handlers(level: int, log_file: Path | None) -> List[logging.Handler]:
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    handlers: List[logging.Handler] = [stream_handler]

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        handlers.append(file_handler)
    return handlers


def _install(logger: logging.Logger, handlers: Sequence[logging.Handler], level: int) -> None:
    logger.setLevel(level)
    logger.propagate = False
    # Replace previous handlers so repeated configuration never duplicates output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        logger.addHandler(handler)


__all__ = ["SERVER_LOGGERS", "configure_logging", "get_logger"]
