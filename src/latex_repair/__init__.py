"""latex-repair: compiler log diagnosis and automatic fixes for LaTeX documents."""

from latex_repair._version import __version__
from latex_repair.core import (
    AIFixer,
    Diagnoser,
    LogParser,
    RuleFixer,
    apply_suggestions,
    create_diagnoser,
    fix,
    fix_with_ai,
    parse_log,
)
from latex_repair.models import (
    Diagnosis,
    ErrorCategory,
    FixSuggestion,
    LatexError,
    ParsedLog,
    Severity,
)

__all__ = [
    "AIFixer",
    "Diagnoser",
    "Diagnosis",
    "ErrorCategory",
    "FixSuggestion",
    "LatexError",
    "LogParser",
    "ParsedLog",
    "RuleFixer",
    "Severity",
    "__version__",
    "apply_suggestions",
    "create_diagnoser",
    "fix",
    "fix_with_ai",
    "parse_log",
]
