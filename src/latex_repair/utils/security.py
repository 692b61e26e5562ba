"""Credential redaction for text leaving the process.

Document sources and compiler logs are sent to third-party AI services and
written to log sinks. API keys pasted into either must be masked first.
Redaction fails closed: if a pattern cannot be applied the caller gets a
RedactionError, never the unredacted text.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import NamedTuple

import structlog

from .async_helpers import SecurityError

log = structlog.get_logger()


class RedactionError(SecurityError):
    """Raised when secret redaction fails."""


class SecretPattern(NamedTuple):
    name: str
    regex: str


DEFAULT_PATTERNS: tuple[SecretPattern, ...] = (
    SecretPattern(
        "generic assignment",
        r"(?i)(api[_-]?key|secret|token|password|credential)\s*[=:]\s*[\"']?[\w-]{16,}",
    ),
    SecretPattern("openrouter", r"sk-or-(?:v1-)?[a-zA-Z0-9]{32,}"),
    SecretPattern("anthropic", r"sk-ant-[\w-]{40,}"),
    SecretPattern("openai legacy", r"sk-[a-zA-Z0-9]{48}"),
    SecretPattern("openai project", r"sk-proj-[a-zA-Z0-9]{20,}"),
    SecretPattern("github token", r"ghp_[a-zA-Z0-9]{36}"),
    SecretPattern("github fine-grained token", r"github_pat_[a-zA-Z0-9_]{22,}"),
    SecretPattern("aws access key", r"AKIA[0-9A-Z]{16}"),
    SecretPattern("private key", r"-----BEGIN (?:RSA |EC |DSA |OPENSSH )?PRIVATE KEY-----"),
)


class SecretRedactor:
    """Masks API keys and similar credentials in free text.

    Usage:
        redactor = SecretRedactor()
        prompt = redactor.redact(prompt)
    """

    def __init__(
        self,
        placeholder: str = "[REDACTED]",
        extra_patterns: Iterable[SecretPattern | tuple[str, str]] = (),
    ) -> None:
        """Compile the default patterns plus any extras.

        Args:
            placeholder: Replacement text for each match.
            extra_patterns: Additional (name, regex) pairs.

        Raises:
            RedactionError: If a pattern does not compile.
        """
        self.placeholder = placeholder
        self._compiled: list[tuple[str, re.Pattern[str]]] = []

        for name, regex in (*DEFAULT_PATTERNS, *extra_patterns):
            try:
                self._compiled.append((name, re.compile(regex)))
            except re.error as e:
                log.error("secret_pattern_invalid", pattern=name, error=str(e))
                raise RedactionError(f"Invalid secret pattern {name!r}: {e}") from e

    @property
    def pattern_names(self) -> list[str]:
        return [name for name, _ in self._compiled]

    def redact(self, text: str) -> str:
        """Return `text` with every credential replaced by the placeholder.

        Raises:
            RedactionError: If any substitution fails.
        """
        if not text:
            return text
        try:
            for _, pattern in self._compiled:
                text = pattern.sub(self.placeholder, text)
        except Exception as e:
            log.error("redaction_failed", error=str(e))
            raise RedactionError(f"Redaction failed: {e}") from e
        return text

    def detect(self, text: str) -> list[str]:
        """Names of the patterns that match somewhere in `text`."""
        if not text:
            return []
        return [name for name, pattern in self._compiled if pattern.search(text)]

    def contains_secret(self, text: str) -> bool:
        return bool(self.detect(text))
