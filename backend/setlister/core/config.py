"""Application configuration using Pydantic Settings."""

from __future__ import annotations

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


def _default_data_dir() -> Path:
    """Resolve the default data directory.

    /config when running in a container, otherwise backend/data next to the package.
    """
    if Path("/config").exists():
        return Path("/config")
    # __file__ is backend/setlister/core/config.py, so go up to backend/
    return (Path(__file__).parent.parent.parent / "data").resolve()


def settings_file_path() -> Path:
    """Location of settings.json, honouring SETLISTER_DATA_DIR."""
    data_dir_env = os.environ.get("SETLISTER_DATA_DIR", "")
    if data_dir_env and Path(data_dir_env).exists():
        data_dir = Path(data_dir_env)
    else:
        data_dir = _default_data_dir()
    return data_dir / "config" / "settings.json"


def load_settings_file() -> dict[str, Any]:
    """Read settings.json as a dict.

    Returns an empty dict when the file is missing or unreadable.
    """
    settings_file = settings_file_path()
    if not settings_file.exists():
        return {}

    try:
        with settings_file.open("r") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError):
        return {}

    return data if isinstance(data, dict) else {}


def json_config_settings_source(
    settings: BaseSettings | None = None,
) -> dict[str, Any]:  # noqa: ANN001
    """Load settings from settings.json file.

    This source has lowest priority - env vars will override JSON values.

    Supports a nested "host" block ({"host": {"bind_address": ..., "port": ...}})
    alongside flat keys. The "matching" block is left to MatchingConfig.
    """
    data = load_settings_file()
    if not data:
        return {}

    flattened: dict[str, Any] = {}
    if isinstance(data.get("host"), dict):
        host_dict = data["host"]
        flattened["host_bind_address"] = host_dict.get("bind_address", "127.0.0.1")
        flattened["host_port"] = host_dict.get("port", 8000)

    for key, value in data.items():
        if key in ("host", "matching"):
            continue
        flattened[key] = value

    return {k.lower(): v for k, v in flattened.items()}


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from:
    1. JSON file (settings.json in config directory) - lowest priority
    2. .env file
    3. Environment variables - highest priority (override JSON/.env)

    All settings are prefixed with SETLISTER_ (e.g., SETLISTER_ENV=production).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SETLISTER_",
        case_sensitive=False,
        extra="ignore",
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority (lowest to highest): JSON file, .env, env vars, init values."""
        return (  # type: ignore[return-value]
            json_config_settings_source,
            dotenv_settings,
            env_settings,
            init_settings,
        )

    # Application
    env: Literal["development", "production", "testing"] = Field(
        default="development",
        description="Application environment (development, production, testing)",
    )

    # Host settings
    host_bind_address: str = Field(
        default="127.0.0.1",
        description="Host address to bind the server to",
    )

    host_port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Port number to bind the server to",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )

    data_dir: Path = Field(
        default_factory=_default_data_dir,
        description="Base directory for application data (config, database, logs)",
    )

    @property
    def config_dir(self) -> Path:
        """Directory for configuration files (settings.json)."""
        return self.data_dir / "config"

    @property
    def database_dir(self) -> Path:
        """Directory for database files."""
        return self.data_dir / "database"

    @property
    def logs_dir(self) -> Path:
        """Directory for JSON log files."""
        return self.data_dir / "logs"

    @property
    def database_file(self) -> Path:
        """SQLite catalog database file."""
        return self.database_dir / "setlister.db"

    @property
    def is_debug(self) -> bool:
        """Check if running in debug/development mode."""
        return self.env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env == "production"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.env == "testing"

    def model_post_init(self, __context: object) -> None:
        """Post-initialization: create data directories if they don't exist."""
        self.data_dir = self.data_dir.resolve()

        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.database_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached settings instance.

    The cache is cleared when reload_settings() is called.
    """
    return Settings()


def reload_settings() -> Settings:
    """Reload settings from all sources (JSON, .env, env vars).

    Returns:
        New Settings instance
    """
    get_settings.cache_clear()
    return get_settings()
