"""Data models and transfer objects."""

from .diagnostic import (
    AUTO_FIXABLE_CATEGORIES,
    ErrorCategory,
    LatexError,
    ParsedLog,
    Severity,
    has_auto_fix,
)
from .diagnosis import Diagnosis
from .fix import EditAction, FixEdit, FixSuggestion, FixType

__all__ = [
    # Diagnostic models
    "AUTO_FIXABLE_CATEGORIES",
    "ErrorCategory",
    "LatexError",
    "ParsedLog",
    "Severity",
    "has_auto_fix",
    "Diagnosis",
    # Fix models
    "EditAction",
    "FixEdit",
    "FixSuggestion",
    "FixType",
]
