"""Configuration loading for the context server (environment plus optional YAML file)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml


class ConfigError(RuntimeError):
    """Raised when the server configuration is missing or invalid."""


class Platform(str, Enum):
    """Target application categories served by the reference repository."""

    BACKEND = "backend"
    FRONTEND = "frontend"
    MOBILE = "mobile"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()


DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_GIT_TIMEOUT = 60.0
DEFAULT_GUIDELINE_FILENAME = "AGENTS.md"

# File keys map onto the same names as the environment variables, lower-cased.
_ENV_KEYS = {
    "repo_url": "REPO_URL",
    "repo_dir": "REPO_DIR",
    "boilerplate_dir": "BOILERPLATE_DIR",
    "port": "PORT",
    "host": "HOST",
    "git_timeout": "GIT_TIMEOUT",
    "refresh_interval": "REFRESH_INTERVAL",
    "platforms": "PLATFORMS",
    "guideline_filename": "GUIDELINE_FILENAME",
}


@dataclass(frozen=True)
class ServerConfig:
    """Effective settings for one server process."""

    repo_url: str
    repo_dir: Path
    boilerplate_dir: str = ""
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    git_timeout: float = DEFAULT_GIT_TIMEOUT
    refresh_interval: float = 0.0
    platforms: Sequence[Platform] = field(default_factory=lambda: tuple(Platform))
    guideline_filename: str = DEFAULT_GUIDELINE_FILENAME

    @property
    def content_root(self) -> Path:
        """Directory holding one subtree per platform inside the working copy."""
        if self.boilerplate_dir:
            return self.repo_dir / self.boilerplate_dir
        return self.repo_dir


def load_config(
    environ: Mapping[str, str] | None = None,
    config_file: Path | None = None,
) -> ServerConfig:
    """Build the server configuration.

    Values from ``config_file`` act as defaults; environment variables win.
    """
    env = os.environ if environ is None else environ
    values: Dict[str, Any] = {}
    if config_file is not None:
        values.update(_read_config_file(config_file))

    for key, env_key in _ENV_KEYS.items():
        raw = env.get(env_key)
        if raw is not None and raw.strip() != "":
            values[key] = raw

    repo_url = _as_str(values.get("repo_url"))
    repo_dir = _as_str(values.get("repo_dir"))
    if not repo_url or not repo_dir:
        raise ConfigError(
            "Repository URL and directory must be specified (REPO_URL and REPO_DIR)."
        )

    guideline_filename = _as_str(values.get("guideline_filename")) or DEFAULT_GUIDELINE_FILENAME
    if "/" in guideline_filename or "\\" in guideline_filename:
        raise ConfigError("GUIDELINE_FILENAME must be a bare file name")

    return ServerConfig(
        repo_url=repo_url,
        repo_dir=Path(repo_dir).expanduser().resolve(),
        boilerplate_dir=(_as_str(values.get("boilerplate_dir")) or "").strip("/"),
        port=_as_int(values.get("port"), "PORT", DEFAULT_PORT),
        host=_as_str(values.get("host")) or DEFAULT_HOST,
        git_timeout=_as_positive_float(
            values.get("git_timeout"), "GIT_TIMEOUT", DEFAULT_GIT_TIMEOUT
        ),
        refresh_interval=_as_float(values.get("refresh_interval"), "REFRESH_INTERVAL", 0.0),
        platforms=_parse_platforms(values.get("platforms")),
        guideline_filename=guideline_filename,
    )


def parse_platform(value: str) -> Platform:
    """Return the ``Platform`` for ``value`` or raise ``ConfigError``."""
    try:
        return Platform(value.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(platform.value for platform in Platform)
        raise ConfigError(f"Unknown platform {value!r}; expected one of: {allowed}") from exc


def _read_config_file(path: Path) -> Dict[str, Any]:
    try:
        text = path.expanduser().read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read config file {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return {str(key).lower(): value for key, value in loaded.items()}


def _parse_platforms(value: Any) -> tuple[Platform, ...]:
    if value is None:
        return tuple(Platform)
    if isinstance(value, str):
        items: List[str] = [part for part in value.split(",") if part.strip()]
    elif isinstance(value, Sequence):
        items = [str(part) for part in value]
    else:
        raise ConfigError("PLATFORMS must be a comma separated list")

    platforms: List[Platform] = []
    for item in items:
        platform = parse_platform(item)
        if platform not in platforms:
            platforms.append(platform)
    if not platforms:
        raise ConfigError("At least one platform must be configured")
    return tuple(platforms)


def _as_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (str, int, float)):
        return str(value).strip()
    return None


def _as_int(value: Any, name: str, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from exc


def _as_float(value: Any, name: str, default: float) -> float:
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name} must be a number, got {value!r}") from exc
    if number < 0:
        raise ConfigError(f"{name} must not be negative")
    return number


def _as_positive_float(value: Any, name: str, default: float) -> float:
    number = _as_float(value, name, default)
    if number == 0:
        raise ConfigError(f"{name} must be greater than zero")
    return number


__all__ = [
    "ConfigError",
    "Platform",
    "ServerConfig",
    "load_config",
    "parse_platform",
]
