"""Tests for configuration functionality."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from setlister.core.config import Settings, get_settings, load_settings_file, reload_settings
from setlister.core.matching import (
    DEFAULT_CONFIG,
    get_matching_config,
    reload_matching_config,
)


def write_settings(data_dir: Path, content: object) -> Path:
    settings_file = data_dir / "config" / "settings.json"
    settings_file.parent.mkdir(parents=True, exist_ok=True)
    settings_file.write_text(content if isinstance(content, str) else json.dumps(content))
    return settings_file


def test_settings_defaults(data_dir: Path) -> None:
    """Test that settings have correct defaults."""
    settings = get_settings()

    assert settings.env == "testing"
    assert settings.host_bind_address == "127.0.0.1"
    assert settings.host_port == 8000
    assert settings.log_level == "INFO"
    assert settings.is_testing is True
    assert settings.is_debug is False
    assert settings.is_production is False

    assert settings.data_dir == data_dir.resolve()
    assert settings.config_dir == settings.data_dir / "config"
    assert settings.database_dir == settings.data_dir / "database"
    assert settings.logs_dir == settings.data_dir / "logs"
    assert settings.database_file == settings.database_dir / "setlister.db"


def test_settings_create_directories(data_dir: Path) -> None:
    """Test that the data directories are created on load."""
    settings = get_settings()

    assert settings.config_dir.is_dir()
    assert settings.database_dir.is_dir()
    assert settings.logs_dir.is_dir()


def test_settings_from_env_vars(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that settings can be loaded from environment variables."""
    monkeypatch.setenv("SETLISTER_ENV", "production")
    monkeypatch.setenv("SETLISTER_HOST_BIND_ADDRESS", "0.0.0.0")
    monkeypatch.setenv("SETLISTER_HOST_PORT", "9000")

    settings = reload_settings()

    assert settings.env == "production"
    assert settings.host_bind_address == "0.0.0.0"
    assert settings.host_port == 9000
    assert settings.is_production is True


def test_settings_from_json_file(data_dir: Path) -> None:
    """Test that settings.json is read, including the nested host block."""
    write_settings(
        data_dir,
        {"host": {"bind_address": "0.0.0.0", "port": 8123}, "log_level": "DEBUG"},
    )

    settings = reload_settings()

    assert settings.host_bind_address == "0.0.0.0"
    assert settings.host_port == 8123
    assert settings.log_level == "DEBUG"


def test_env_vars_override_json_file(data_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Test that environment variables take priority over settings.json."""
    write_settings(data_dir, {"host": {"port": 8123}})
    monkeypatch.setenv("SETLISTER_HOST_PORT", "9001")

    settings = reload_settings()

    assert settings.host_port == 9001


def test_invalid_json_file_is_ignored(data_dir: Path) -> None:
    """Test that an unreadable settings.json falls back to defaults."""
    write_settings(data_dir, "{not json")

    assert load_settings_file() == {}
    assert reload_settings().host_port == 8000


def test_settings_validation(data_dir: Path) -> None:
    """Test that invalid values are rejected."""
    with pytest.raises(ValidationError):
        Settings(host_port=70000)

    with pytest.raises(ValidationError):
        Settings(env="staging")


def test_get_settings_is_cached() -> None:
    """Test that get_settings returns the same instance until reloaded."""
    first = get_settings()

    assert get_settings() is first
    assert reload_settings() is not first


def test_matching_config_defaults() -> None:
    """Test that matching defaults apply without a settings file."""
    config = reload_matching_config()

    assert config == DEFAULT_CONFIG
    assert config.exact_search_limit == 20
    assert config.partial_search_limit == 20
    assert config.partial_min_score == 0.4
    assert config.sample_size == 200
    assert config.similarity_min_title == 0.3
    assert config.similarity_top_n == 10
    assert config.similarity_min_score == 0.3
    assert config.title_weight + config.artist_weight == pytest.approx(1.0)


def test_matching_config_from_json_file(data_dir: Path) -> None:
    """Test that the matching block overrides defaults and ignores unknown keys."""
    write_settings(data_dir, {"matching": {"sample_size": 50, "not_a_setting": True}})

    config = reload_matching_config()

    assert config.sample_size == 50
    assert config.partial_min_score == DEFAULT_CONFIG.partial_min_score
    assert not hasattr(config, "not_a_setting")


def test_matching_config_is_cached(data_dir: Path) -> None:
    """Test that file changes apply only after a reload."""
    reload_matching_config()
    write_settings(data_dir, {"matching": {"sample_size": 75}})

    assert get_matching_config().sample_size == DEFAULT_CONFIG.sample_size
    assert reload_matching_config().sample_size == 75


def test_matching_config_ignores_malformed_block(data_dir: Path) -> None:
    """Test that a non-object matching block falls back to defaults."""
    write_settings(data_dir, {"matching": "fast"})

    assert reload_matching_config() == DEFAULT_CONFIG
