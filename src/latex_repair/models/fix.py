"""Data models for proposed source edits."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class EditAction(StrEnum):
    """Kind of change a FixEdit performs."""

    REPLACE_LINE = "replace_line"
    INSERT_BEFORE = "insert_before"
    INSERT_AFTER = "insert_after"
    DELETE_LINE = "delete_line"
    REPLACE_RANGE = "replace_range"


class FixType(StrEnum):
    """Origin of a fix suggestion."""

    RULE = "rule"
    AI = "ai"


@dataclass(frozen=True)
class FixEdit:
    """A declarative patch against 1-indexed source lines."""

    action: EditAction
    line: int
    end_line: int | None = None  # Only for REPLACE_RANGE
    new_text: str | None = None
    original_text: str | None = None  # Shown in confirmation UIs

    def __post_init__(self) -> None:
        if self.line < 1:
            raise ValueError(f"Edit line must be >= 1, got {self.line}")
        if self.action == EditAction.REPLACE_RANGE and (
            self.end_line is None or self.end_line < self.line
        ):
            raise ValueError("replace_range requires end_line >= line")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"action": str(self.action), "line": self.line}
        if self.end_line is not None:
            data["endLine"] = self.end_line
        if self.new_text is not None:
            data["newText"] = self.new_text
        if self.original_text is not None:
            data["originalText"] = self.original_text
        return data


@dataclass(frozen=True)
class FixSuggestion:
    """One proposed fix for one error."""

    error_id: str
    description: str
    type: FixType
    edit: FixEdit
    confidence: float  # 0.0 to 1.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be within [0, 1], got {self.confidence}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "errorId": self.error_id,
            "description": self.description,
            "type": str(self.type),
            "edit": self.edit.to_dict(),
            "confidence": self.confidence,
        }
