"""Tests for boilerplate_context.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from boilerplate_context.config import ConfigError, Platform, ServerConfig, load_config

BASE_ENV = {"REPO_URL": "https://example.com/boilerplates.git", "REPO_DIR": "cache/boilerplates"}


def test_load_config_applies_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.chdir(tmp_path)

    config = load_config(BASE_ENV)

    assert isinstance(config, ServerConfig)
    assert config.repo_url == "https://example.com/boilerplates.git"
    assert config.repo_dir == (tmp_path / "cache" / "boilerplates").resolve()
    assert config.boilerplate_dir == ""
    assert config.content_root == config.repo_dir
    assert config.port == 3000
    assert config.host == "0.0.0.0"
    assert config.git_timeout == pytest.approx(60.0)
    assert config.refresh_interval == 0
    assert config.platforms == (Platform.BACKEND, Platform.FRONTEND, Platform.MOBILE)
    assert config.guideline_filename == "AGENTS.md"


@pytest.mark.parametrize("missing", ["REPO_URL", "REPO_DIR"])
def test_load_config_requires_url_and_directory(missing: str) -> None:
    env = dict(BASE_ENV)
    env[missing] = ""

    with pytest.raises(ConfigError):
        load_config(env)


def test_load_config_parses_environment(tmp_path: Path) -> None:
    env = {
        **BASE_ENV,
        "REPO_DIR": str(tmp_path / "clone"),
        "BOILERPLATE_DIR": "boilerplates/",
        "PORT": "8080",
        "HOST": "127.0.0.1",
        "GIT_TIMEOUT": "15",
        "REFRESH_INTERVAL": "300",
        "PLATFORMS": "frontend, backend,frontend",
        "GUIDELINE_FILENAME": "GUIDELINES.md",
    }

    config = load_config(env)

    assert config.content_root == (tmp_path / "clone").resolve() / "boilerplates"
    assert config.port == 8080
    assert config.host == "127.0.0.1"
    assert config.git_timeout == pytest.approx(15.0)
    assert config.refresh_interval == pytest.approx(300.0)
    assert config.platforms == (Platform.FRONTEND, Platform.BACKEND)
    assert config.guideline_filename == "GUIDELINES.md"


@pytest.mark.parametrize(
    "key, value",
    [
        ("PLATFORMS", "backend,desktop"),
        ("PORT", "eighty"),
        ("GIT_TIMEOUT", "0"),
        ("REFRESH_INTERVAL", "-5"),
        ("GUIDELINE_FILENAME", "../AGENTS.md"),
    ],
)
def test_load_config_rejects_invalid_values(key: str, value: str) -> None:
    with pytest.raises(ConfigError):
        load_config({**BASE_ENV, key: value})


def test_load_config_reads_yaml_file_with_env_precedence(tmp_path: Path) -> None:
    config_file = tmp_path / "boilerplate-context.yml"
    config_file.write_text(
        """
repo_url: "https://example.com/from-file.git"
repo_dir: "/srv/boilerplates"
boilerplate_dir: "templates"
port: 4000
platforms:
  - backend
  - mobile
""",
        encoding="utf-8",
    )

    config = load_config({"PORT": "5000"}, config_file=config_file)

    assert config.repo_url == "https://example.com/from-file.git"
    assert config.repo_dir == Path("/srv/boilerplates").resolve()
    assert config.boilerplate_dir == "templates"
    assert config.port == 5000
    assert config.platforms == (Platform.BACKEND, Platform.MOBILE)


def test_load_config_rejects_non_mapping_yaml(tmp_path: Path) -> None:
    config_file = tmp_path / "boilerplate-context.yml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(BASE_ENV, config_file=config_file)


def test_load_config_reports_unreadable_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(BASE_ENV, config_file=tmp_path / "missing.yml")
