"""
Centralized Logging Configuration.

structlog on top of the stdlib root logger, configured from
config/settings/logging.yaml. Modules get their logger from get_logger()
and never build handlers of their own.

Records carry timestamp, level, logger, event, func_name and lineno, plus
whatever the request middleware binds (request_id, frontend, method, path).
Fields passed as ``extra={...}`` are lifted to the top level so a record
reads ``{"event": "Note created", "note_id": ...}`` rather than nesting them.

Usage:
    from notekeeper.backend.core.logging import get_logger, setup_logging

    setup_logging()                      # values from logging.yaml
    setup_logging(level="DEBUG")         # CLI override

    logger = get_logger(__name__)
    logger.info("Note created", extra={"note_id": note.id})
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from notekeeper.backend.core.config import find_project_root, get_app_config
from notekeeper.backend.core.config_schema import FileHandlerSchema

FRONTENDS = frozenset({"web", "cli"})
"""Clients that identify themselves with X-Frontend-ID."""

VALID_SOURCES = FRONTENDS | {"server", "unknown"}
"""Values accepted for the ``source`` field; ``server`` marks startup and shutdown."""


def _flatten_extra(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Merge an ``extra`` dict into the record without overwriting bound keys."""
    extra = event_dict.pop("extra", None)
    if isinstance(extra, dict):
        for key, value in extra.items():
            event_dict.setdefault(key, value)
    return event_dict


def _shared_processors() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        _flatten_extra,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
    ]


def _formatter(renderer: Processor, chain: list[Processor]) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=chain)


def _file_handler(config: FileHandlerSchema, formatter: logging.Formatter) -> logging.Handler:
    """Rotating JSONL handler; relative paths resolve against the project root."""
    log_path = find_project_root() / config.path
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        filename=str(log_path),
        maxBytes=config.max_bytes,
        backupCount=config.backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(
    level: str | None = None,
    format_type: str | None = None,
    enable_console: bool | None = None,
    enable_file_logging: bool | None = None,
) -> None:
    """
    Configure structured logging for the application.

    Arguments left as None take their value from logging.yaml.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Console output format, 'json' or 'console'
        enable_console: Write records to stdout
        enable_file_logging: Write JSON records to the rotating log file
    """
    config = get_app_config().logging
    handlers = config.handlers

    level = level if level is not None else config.level
    format_type = format_type if format_type is not None else config.format
    if enable_console is None:
        enable_console = handlers.console.enabled
    if enable_file_logging is None:
        enable_file_logging = handlers.file.enabled

    chain = _shared_processors()
    structlog.configure(
        processors=chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    json_formatter = _formatter(structlog.processors.JSONRenderer(), chain)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        if format_type == "console":
            console_handler.setFormatter(
                _formatter(structlog.dev.ConsoleRenderer(colors=True), chain)
            )
        else:
            console_handler.setFormatter(json_formatter)
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        root_logger.addHandler(_file_handler(handlers.file, json_formatter))

    # The request middleware already logs every request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> Any:
    """Get a structlog logger, typically for ``__name__``."""
    return structlog.get_logger(name)


def log_with_source(logger: Any, source: str, level: str, message: str, **kwargs: Any) -> None:
    """
    Log a message with an explicit source.

    Used outside of HTTP request context, where no frontend is bound:
    ``cli`` for run.py commands and ``server`` for startup and shutdown.

    Raises:
        ValueError: If source is not one of VALID_SOURCES
        AttributeError: If level is not a valid log level

    Example:
        log_with_source(logger, "cli", "info", "Server starting", port=8000)
    """
    if source not in VALID_SOURCES:
        raise ValueError(f"Unknown log source: {source}")
    log_method = getattr(logger, level.lower())
    log_method(message, source=source, **kwargs)
