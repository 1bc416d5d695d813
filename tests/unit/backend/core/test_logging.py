"""
Unit Tests for Centralized Logging.

Tests the logging configuration, handler setup, and source handling.
"""

import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import MagicMock, patch

import pytest

from notekeeper.backend.core.config_schema import LoggingSchema
from notekeeper.backend.core.logging import (
    FRONTENDS,
    VALID_SOURCES,
    _flatten_extra,
    get_logger,
    log_with_source,
    setup_logging,
)

TEST_CONFIG = LoggingSchema.model_validate({
    "level": "DEBUG",
    "format": "console",
    "handlers": {
        "console": {"enabled": True},
        "file": {
            "enabled": False,
            "path": "logs/system.jsonl",
            "max_bytes": 5242880,
            "backup_count": 3,
        },
    },
})


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Keep handler changes from leaking into other tests."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def test_config():
    """Serve TEST_CONFIG in place of logging.yaml."""
    with patch(
        "notekeeper.backend.core.logging.get_app_config",
        return_value=MagicMock(logging=TEST_CONFIG),
    ):
        yield TEST_CONFIG


class TestSources:
    """Tests for the recognised log sources."""

    def test_frontends(self):
        assert FRONTENDS == frozenset({"web", "cli"})

    def test_valid_sources(self):
        assert VALID_SOURCES == frozenset({"web", "cli", "server", "unknown"})


class TestFlattenExtra:
    """Tests for lifting ``extra`` fields into the record."""

    def test_lifts_extra_keys(self):
        event = {"event": "Note created", "extra": {"note_id": "n1", "type": "text"}}

        assert _flatten_extra(None, "info", event) == {
            "event": "Note created",
            "note_id": "n1",
            "type": "text",
        }

    def test_bound_keys_win(self):
        event = {"event": "x", "request_id": "bound", "extra": {"request_id": "other"}}

        assert _flatten_extra(None, "info", event)["request_id"] == "bound"

    def test_record_without_extra_untouched(self):
        assert _flatten_extra(None, "info", {"event": "x"}) == {"event": "x"}


class TestSetupLogging:
    """Tests for setup_logging handler wiring."""

    def test_uses_configured_level(self, test_config):
        setup_logging()

        assert logging.getLogger().level == logging.DEBUG

    def test_level_override(self, test_config):
        setup_logging(level="WARNING")

        assert logging.getLogger().level == logging.WARNING

    def test_console_disabled_leaves_no_handlers(self, test_config):
        setup_logging(enable_console=False)

        assert logging.getLogger().handlers == []

    def test_file_logging_writes_under_project_root(self, test_config, tmp_path):
        with patch(
            "notekeeper.backend.core.logging.find_project_root",
            return_value=tmp_path,
        ):
            setup_logging(enable_console=False, enable_file_logging=True)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], RotatingFileHandler)
        assert (tmp_path / "logs").is_dir()

    def test_shipped_config_loads(self):
        setup_logging(enable_console=False)

        assert logging.getLogger().handlers == []


class TestLogWithSource:
    """Tests for explicit source logging."""

    def test_passes_source_to_level_method(self):
        logger = MagicMock()

        log_with_source(logger, "cli", "INFO", "Server starting", port=8000)

        logger.info.assert_called_once_with("Server starting", source="cli", port=8000)

    def test_unknown_source_raises(self):
        logger = MagicMock()

        with pytest.raises(ValueError, match="internal"):
            log_with_source(logger, "internal", "info", "message")

        logger.info.assert_not_called()

    def test_invalid_level_raises(self):
        with pytest.raises(AttributeError):
            log_with_source(object(), "cli", "loud", "message")

    def test_get_logger_returns_bound_logger(self):
        assert hasattr(get_logger(__name__), "info")
