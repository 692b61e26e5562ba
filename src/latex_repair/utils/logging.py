"""Structured logging for latex-repair.

Library modules only ever call `structlog.get_logger()`. A host application
calls `configure_logging` once at startup to choose the level, the renderer
and an optional log file. Every entry passes through a redaction processor
first, because documents and compiler logs can contain pasted API keys.
"""

from __future__ import annotations

import functools
import logging
import sys
from collections.abc import MutableMapping
from enum import StrEnum
from typing import Any

import structlog
from structlog.typing import Processor

from latex_repair.config.schema import FileLoggingConfig, LoggingConfig
from latex_repair.utils.security import SecretRedactor

SERVICE_NAME = "latex-repair"


class LogFormat(StrEnum):
    """Renderer used for log output."""

    JSON = "json"
    CONSOLE = "console"


@functools.cache
def _redactor() -> SecretRedactor:
    return SecretRedactor()


def sanitize_log_value(value: Any) -> Any:
    """Redact credentials from a log value, descending into dicts, lists and tuples."""
    match value:
        case str():
            return _redactor().redact(value)
        case dict():
            return {key: sanitize_log_value(item) for key, item in value.items()}
        case list() | tuple():
            return type(value)(sanitize_log_value(item) for item in value)
        case _:
            return value


def secret_sanitizer(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor: redact every value of the entry."""
    return {key: sanitize_log_value(value) for key, value in event_dict.items()}


def add_service_info(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor: tag entries with the service name and version."""
    event_dict.setdefault("service", SERVICE_NAME)
    try:
        from latex_repair._version import __version__
    except (ImportError, RuntimeError):
        return event_dict
    event_dict.setdefault("version", __version__)
    return event_dict


def _renderer(log_format: LogFormat) -> Processor:
    if log_format == LogFormat.JSON:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def _handlers(level: int, file_config: FileLoggingConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if file_config.enabled:
        try:
            file_config.path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(file_config.path))
        except OSError as e:
            # Console output still works; report and continue without the file
            logging.getLogger(__name__).warning(
                "Could not open log file %s: %s", file_config.path, e
            )

    for handler in handlers:
        handler.setLevel(level)
    return handlers


def configure_logging(config: LoggingConfig | None = None) -> None:
    """Route structlog through the standard library with redaction enabled.

    Args:
        config: Logging section of RepairConfig. Defaults to INFO/JSON on stderr.

    Example:
        configure_logging(LoggingConfig(level="DEBUG", format="console"))
    """
    config = config or LoggingConfig()
    level = logging.getLevelName(config.level)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_info,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        secret_sanitizer,
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        _renderer(LogFormat(config.format)),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=_handlers(level, config.file),
        force=True,
    )


def bind_context(**kwargs: Any) -> None:
    """Attach values to every later log entry in this context.

    Example:
        bind_context(project_id="p-42", compilation_id="c-7")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
