"""
Configuration Management.

Loads overrides from the environment (or config/.env) and settings from
config/settings/*.yaml.

Environment (NOTEKEEPER_ prefix):
    NOTEKEEPER_DATA_FILE, NOTEKEEPER_HOST, NOTEKEEPER_PORT,
    NOTEKEEPER_ENVIRONMENT

Settings (YAML):
    application.yaml   - App identity, server, cors
    logging.yaml       - Logging configuration
    storage.yaml       - Location and formatting of the notes file
    preferences.yaml   - UI preference defaults (view mode, theme, fonts)
    concurrency.yaml   - I/O thread pool size
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from notekeeper.backend.core.config_schema import (
    ApplicationSchema,
    ConcurrencySchema,
    LoggingSchema,
    PreferencesSchema,
    StorageSchema,
)


def find_project_root() -> Path:
    """Find project root by looking for .project_root marker file."""
    current = Path.cwd()
    while current != current.parent:
        if (current / ".project_root").exists():
            return current
        current = current.parent
    raise RuntimeError("Project root not found. Ensure .project_root file exists.")


def validate_project_root() -> Path:
    """
    Validate that the project root can be found.

    Raises SystemExit with a clear message if .project_root is not found.
    Use this in entry scripts before any configuration loading.
    """
    try:
        return find_project_root()
    except RuntimeError as e:
        raise SystemExit(f"Error: {e}") from e


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML configuration file from config/settings/."""
    project_root = find_project_root()
    config_path = project_root / "config" / "settings" / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


class Settings(BaseSettings):
    """Environment overrides. Unset values fall back to the YAML settings."""

    data_file: str | None = None
    host: str | None = None
    port: int | None = None
    environment: str | None = None

    model_config = SettingsConfigDict(
        env_prefix="NOTEKEEPER_",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Missing keys, wrong types, or unknown fields raise a clear error
    immediately instead of causing cryptic KeyErrors later.

    Properties return typed Pydantic model instances with attribute access.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._storage = _load_validated(StorageSchema, "storage.yaml")
        self._preferences = _load_validated(PreferencesSchema, "preferences.yaml")
        self._concurrency = _load_validated(ConcurrencySchema, "concurrency.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def storage(self) -> StorageSchema:
        """Notes file settings."""
        return self._storage

    @property
    def preferences(self) -> PreferencesSchema:
        """UI preference defaults."""
        return self._preferences

    @property
    def concurrency(self) -> ConcurrencySchema:
        """Concurrency settings (I/O pool)."""
        return self._concurrency


@lru_cache
def get_settings() -> Settings:
    """Get cached environment settings. Reads config/.env when present."""
    env_path = find_project_root() / "config" / ".env"
    if env_path.exists():
        return Settings(_env_file=str(env_path))
    return Settings()


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_data_file() -> Path:
    """
    Resolve the notes file path.

    NOTEKEEPER_DATA_FILE wins over storage.yaml. Relative paths are resolved
    against the project root.
    """
    configured = get_settings().data_file or get_app_config().storage.data_file
    path = Path(configured).expanduser()
    if not path.is_absolute():
        path = find_project_root() / path
    return path


def get_server_address() -> tuple[str, int]:
    """
    Get the server host and port.

    Returns:
        Tuple of (host, port), environment overrides applied.
    """
    settings = get_settings()
    server = get_app_config().application.server
    return settings.host or server.host, settings.port or server.port


def get_environment() -> str:
    """Get the deployment environment name."""
    return get_settings().environment or get_app_config().application.environment
