"""Shared helpers: errors and timeouts, redaction, logging, text utilities."""

from latex_repair.utils.async_helpers import (
    AIServiceError,
    RateLimitError,
    RepairError,
    SecurityError,
    TimeoutError,
    create_retry,
    with_timeout,
)
from latex_repair.utils.logging import (
    LogFormat,
    bind_context,
    clear_context,
    configure_logging,
    unbind_context,
)
from latex_repair.utils.security import RedactionError, SecretRedactor
from latex_repair.utils.text import (
    EnvironmentBalance,
    count_braces,
    count_environment,
    find_extra_closing_brace,
    levenshtein,
)

__all__ = [
    # Errors
    "AIServiceError",
    "RateLimitError",
    "RedactionError",
    "RepairError",
    "SecurityError",
    "TimeoutError",
    # Async
    "create_retry",
    "with_timeout",
    # Logging
    "LogFormat",
    "bind_context",
    "clear_context",
    "configure_logging",
    "unbind_context",
    # Redaction
    "SecretRedactor",
    # Text helpers
    "EnvironmentBalance",
    "count_braces",
    "count_environment",
    "find_extra_closing_brace",
    "levenshtein",
]
