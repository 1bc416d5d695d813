"""
Unit Tests for Configuration Management.

Black box tests against the public interface of config.py.
Tests run against the real project YAML configs.
Failure scenarios use tmp_path to create controlled filesystems.
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from notekeeper.backend.core.config import (
    AppConfig,
    Settings,
    find_project_root,
    get_app_config,
    get_data_file,
    get_environment,
    get_server_address,
    get_settings,
    load_yaml_config,
    validate_project_root,
)
from notekeeper.backend.core.config_schema import (
    ApplicationSchema,
    LoggingSchema,
    PreferencesSchema,
    StorageSchema,
)


@pytest.fixture(autouse=True)
def _clear_config_cache(monkeypatch):
    """Clear lru_cache between tests so each test gets a fresh load."""
    for var in ("DATA_FILE", "HOST", "PORT", "ENVIRONMENT"):
        monkeypatch.delenv(f"NOTEKEEPER_{var}", raising=False)
    get_settings.cache_clear()
    get_app_config.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_config.cache_clear()


# =============================================================================
# find_project_root
# =============================================================================


class TestFindProjectRoot:
    """Tests for .project_root marker discovery."""

    def test_finds_root_from_project_directory(self):
        root = find_project_root()
        assert (root / ".project_root").exists()
        assert (root / "config" / "settings").is_dir()

    def test_raises_outside_project(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(RuntimeError, match="Project root not found"):
            find_project_root()

    def test_validate_exits_outside_project(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(SystemExit):
            validate_project_root()


# =============================================================================
# YAML loading
# =============================================================================


class TestLoadYamlConfig:
    """Tests for raw YAML loading."""

    def test_loads_storage_yaml(self):
        raw = load_yaml_config("storage.yaml")
        assert "data_file" in raw

    def test_missing_file_raises(self):
        with pytest.raises(FileNotFoundError):
            load_yaml_config("does_not_exist.yaml")


class TestAppConfig:
    """Tests for validated application config."""

    def test_sections_are_typed(self):
        config = AppConfig()

        assert isinstance(config.application, ApplicationSchema)
        assert isinstance(config.logging, LoggingSchema)
        assert isinstance(config.storage, StorageSchema)
        assert isinstance(config.preferences, PreferencesSchema)
        assert config.concurrency.thread_pool.max_workers >= 1

    def test_shipped_preferences(self):
        prefs = get_app_config().preferences

        assert prefs.view_mode == "grid"
        assert prefs.dark_mode is False
        assert prefs.font_size == "medium"
        assert prefs.font_family == "sans"

    def test_get_app_config_is_cached(self):
        assert get_app_config() is get_app_config()

    def test_schema_rejects_unknown_keys(self):
        with pytest.raises(PydanticValidationError):
            StorageSchema(data_file="data/notes.json", indent=2, unexpected=True)

    def test_schema_rejects_bad_preference(self):
        with pytest.raises(PydanticValidationError):
            PreferencesSchema(
                view_mode="carousel", dark_mode=False, font_size="medium", font_family="sans"
            )


# =============================================================================
# Environment overrides
# =============================================================================


class TestSettings:
    """Tests for NOTEKEEPER_ environment overrides."""

    def test_reads_prefixed_environment(self, monkeypatch):
        monkeypatch.setenv("NOTEKEEPER_PORT", "9100")
        monkeypatch.setenv("NOTEKEEPER_HOST", "0.0.0.0")

        settings = Settings()

        assert settings.port == 9100
        assert settings.host == "0.0.0.0"

    def test_server_address_prefers_environment(self, monkeypatch):
        monkeypatch.setenv("NOTEKEEPER_PORT", "9100")

        host, port = get_server_address()

        assert port == 9100
        assert host == get_app_config().application.server.host

    def test_server_address_defaults_to_yaml(self):
        server = get_app_config().application.server
        assert get_server_address() == (server.host, server.port)

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("NOTEKEEPER_ENVIRONMENT", "staging")
        assert get_environment() == "staging"


class TestGetDataFile:
    """Tests for notes file resolution."""

    def test_relative_yaml_path_resolves_against_root(self):
        path = get_data_file()

        assert path.is_absolute()
        assert path == find_project_root() / get_app_config().storage.data_file

    def test_environment_override_absolute(self, monkeypatch, tmp_path):
        target = tmp_path / "elsewhere.json"
        monkeypatch.setenv("NOTEKEEPER_DATA_FILE", str(target))

        assert get_data_file() == target

    def test_environment_override_relative(self, monkeypatch):
        monkeypatch.setenv("NOTEKEEPER_DATA_FILE", "data/other.json")

        assert get_data_file() == find_project_root() / "data" / "other.json"
