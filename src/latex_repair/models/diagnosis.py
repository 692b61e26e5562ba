"""Data model for the result of one diagnosis run."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from .diagnostic import ParsedLog
from .fix import FixSuggestion


@dataclass(frozen=True)
class Diagnosis:
    """A parsed log together with the fixes proposed for its errors."""

    parsed: ParsedLog
    fixes: tuple[FixSuggestion, ...] = ()

    @property
    def has_fixable_errors(self) -> bool:
        return bool(self.fixes)

    def fix_for(self, error_id: str) -> FixSuggestion | None:
        """Return the suggestion proposed for an error, if any."""
        for suggestion in self.fixes:
            if suggestion.error_id == error_id:
                return suggestion
        return None

    def with_fix(self, suggestion: FixSuggestion) -> Diagnosis:
        """Copy of this diagnosis with the suggestion replacing any for the same error."""
        kept = tuple(f for f in self.fixes if f.error_id != suggestion.error_id)
        return replace(self, fixes=(*kept, suggestion))

    def apply_all(self, source: str) -> str:
        """Apply every proposed edit to the document, highest line first."""
        from latex_repair.core.edits import apply_suggestions

        return apply_suggestions(source, self.fixes)

    def to_dict(self) -> dict[str, Any]:
        data = self.parsed.to_dict()
        data["fixes"] = [f.to_dict() for f in self.fixes]
        return data
