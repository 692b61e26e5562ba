"""Data models for parsed compiler diagnostics."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class Severity(StrEnum):
    """Severity of a single diagnostic."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ErrorCategory(StrEnum):
    """Closed taxonomy of compiler diagnostics."""

    UNDEFINED_CONTROL_SEQUENCE = "undefined_control_sequence"
    MISSING_PACKAGE = "missing_package"
    UNCLOSED_BRACE = "unclosed_brace"
    UNCLOSED_ENVIRONMENT = "unclosed_environment"
    MISSING_MATH_DELIMITER = "missing_math_delimiter"
    FILE_NOT_FOUND = "file_not_found"
    MISSING_ARGUMENT = "missing_argument"
    EXTRA_BRACE = "extra_brace"
    EXTRA_ALIGNMENT_TAB = "extra_alignment_tab"
    OVERFULL_HBOX = "overfull_hbox"
    UNDERFULL_HBOX = "underfull_hbox"
    FONT_WARNING = "font_warning"
    CITATION_WARNING = "citation_warning"
    REFERENCE_WARNING = "reference_warning"
    GENERAL_ERROR = "general_error"
    GENERAL_WARNING = "general_warning"


# Categories whose errors are flagged as automatically fixable.
# EXTRA_BRACE has a rule but is not flagged.
AUTO_FIXABLE_CATEGORIES: frozenset[ErrorCategory] = frozenset(
    {
        ErrorCategory.UNDEFINED_CONTROL_SEQUENCE,
        ErrorCategory.MISSING_PACKAGE,
        ErrorCategory.UNCLOSED_BRACE,
        ErrorCategory.UNCLOSED_ENVIRONMENT,
        ErrorCategory.MISSING_MATH_DELIMITER,
    }
)


def has_auto_fix(category: ErrorCategory) -> bool:
    """Return True if errors of this category carry an automatic fix."""
    return category in AUTO_FIXABLE_CATEGORIES


@dataclass(frozen=True)
class LatexError:
    """A single error or warning extracted from a compiler log."""

    id: str  # e.g., "err_3", unique within one parse
    severity: Severity
    category: ErrorCategory
    message: str
    raw_log: str  # Verbatim log text the record was built from
    file: str | None = None
    line: int | None = None  # 1-indexed source line
    offending_text: str | None = None  # e.g., "\\mathbb" or "figure.png"
    has_auto_fix: bool = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "has_auto_fix", has_auto_fix(self.category))

    def to_dict(self) -> dict[str, Any]:
        """Render the record in the camelCase shape used by the editor UI."""
        data: dict[str, Any] = {
            "id": self.id,
            "severity": str(self.severity),
            "category": str(self.category),
            "message": self.message,
            "rawLog": self.raw_log,
            "hasAutoFix": self.has_auto_fix,
        }
        if self.file is not None:
            data["file"] = self.file
        if self.line is not None:
            data["line"] = self.line
        if self.offending_text is not None:
            data["offendingText"] = self.offending_text
        return data


@dataclass(frozen=True)
class ParsedLog:
    """Result of parsing one compiler log."""

    errors: tuple[LatexError, ...] = ()
    warnings: tuple[LatexError, ...] = ()
    pdf_produced: bool = False

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)

    @property
    def succeeded(self) -> bool:
        """True when a PDF was written and no errors were reported."""
        return self.pdf_produced and not self.errors

    def find(self, error_id: str) -> LatexError | None:
        """Look up an error or warning by its identifier."""
        for record in (*self.errors, *self.warnings):
            if record.id == error_id:
                return record
        return None

    def by_category(self, category: ErrorCategory) -> tuple[LatexError, ...]:
        """Errors and warnings of the given category, in log order."""
        return tuple(r for r in (*self.errors, *self.warnings) if r.category == category)

    def to_dict(self) -> dict[str, Any]:
        return {
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "errorCount": self.error_count,
            "warningCount": self.warning_count,
            "pdfProduced": self.pdf_produced,
        }
