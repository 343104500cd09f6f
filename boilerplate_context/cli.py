"""CLI entrypoints for the boilerplate context server."""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

from .config import ConfigError, Platform, ServerConfig, load_config, parse_platform
from .errors import ContextServerError, RepositoryUnavailable
from .git.repository import RefreshStatus
from .logging import configure_logging, get_logger
from .mcp.server import ContextServer
from .service.app import build_server, run_service

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boilerplate-context",
        description="Serve boilerplate structure and guideline documents over MCP.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional YAML file with defaults; environment variables take precedence.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Clone or refresh the repository, then start the HTTP server.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default=None, help="Interface to bind (overrides HOST).")
    serve_parser.add_argument(
        "--port", type=int, default=None, help="Port to listen on (overrides PORT)."
    )

    sync_parser = subparsers.add_parser(
        "sync",
        help="Clone or pull the reference repository once and report the outcome.",
    )
    _add_verbose_option(sync_parser, suppress_default=True)

    structure_parser = subparsers.add_parser(
        "structure",
        help="Print the file structure of a platform boilerplate.",
    )
    _add_verbose_option(structure_parser, suppress_default=True)
    structure_parser.add_argument("platform", help="Platform name (backend, frontend, mobile).")

    search_parser = subparsers.add_parser(
        "search",
        help="Search a platform's guideline document.",
    )
    _add_verbose_option(search_parser, suppress_default=True)
    search_parser.add_argument("platform", help="Platform name (backend, frontend, mobile).")
    search_parser.add_argument("query", help="Case-insensitive text to look for.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for boilerplate-context commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(config_file=args.config)
    except ConfigError as exc:
        logger.error("%s", exc)
        parser.exit(1, f"Configuration error: {exc}\n")

    if args.command == "serve":
        config = _apply_overrides(config, host=args.host, port=args.port)

    server = build_server(config)

    if args.command == "serve":
        _ensure_or_exit(parser, server)
        run_service(config, server)
    elif args.command == "sync":
        status = _ensure_or_exit(parser, server)
        print(f"Repository {status.value}: {config.repo_dir}")
    elif args.command in {"structure", "search"}:
        platform = _platform_or_exit(parser, args.platform)
        try:
            if args.command == "structure":
                output = server.get_boilerplate_structure(platform)
            else:
                output = server.search_best_practices(platform, args.query)
        except ContextServerError as exc:
            parser.exit(1, f"{exc}\n")
        print(output)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _apply_overrides(config: ServerConfig, *, host: str | None, port: int | None) -> ServerConfig:
    changes: dict[str, object] = {}
    if host:
        changes["host"] = host
    if port is not None:
        changes["port"] = port
    return replace(config, **changes) if changes else config


def _ensure_or_exit(parser: argparse.ArgumentParser, server: ContextServer) -> RefreshStatus:
    try:
        return server.ensure_repository()
    except RepositoryUnavailable as exc:
        logger.error("Failed to initialize repository: %s", exc)
        parser.exit(1, f"Failed to initialize repository: {exc}\n")


def _platform_or_exit(parser: argparse.ArgumentParser, value: str) -> Platform:
    try:
        return parse_platform(value)
    except ConfigError as exc:
        parser.exit(2, f"{exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
