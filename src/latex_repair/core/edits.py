"""Apply FixEdit values to document lines.

Edits address 1-indexed lines. When several edits are applied together
they run from the highest line to the lowest so earlier edits do not shift
the targets of later ones. On the same line, inserts run last so a
replacement cannot overwrite an inserted line.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from latex_repair.models.fix import EditAction, FixEdit, FixSuggestion

_INSERTS = frozenset({EditAction.INSERT_BEFORE, EditAction.INSERT_AFTER})


def apply_edit(lines: Sequence[str], edit: FixEdit) -> list[str]:
    """Return a new list of lines with one edit applied.

    Edits that point outside the document or lack the text they need leave
    the lines unchanged.
    """
    result = list(lines)
    idx = edit.line - 1

    match edit.action:
        case EditAction.REPLACE_LINE:
            if idx < len(result) and edit.new_text is not None:
                result[idx] = edit.new_text
        case EditAction.INSERT_BEFORE:
            if edit.new_text is not None:
                result.insert(idx, edit.new_text)
        case EditAction.INSERT_AFTER:
            if edit.new_text is not None:
                result.insert(idx + 1, edit.new_text)
        case EditAction.DELETE_LINE:
            if idx < len(result):
                del result[idx]
        case EditAction.REPLACE_RANGE:
            if edit.end_line is not None and edit.new_text is not None:
                result[idx : edit.end_line] = [edit.new_text]

    return result


def apply_edits(lines: Sequence[str], edits: Iterable[FixEdit]) -> list[str]:
    """Apply several edits, highest line first and inserts after other edits on a line."""
    result = list(lines)
    ordered = sorted(edits, key=lambda e: (e.line, e.action not in _INSERTS), reverse=True)
    for edit in ordered:
        result = apply_edit(result, edit)
    return result


def apply_suggestions(source: str, suggestions: Iterable[FixSuggestion]) -> str:
    """Apply every suggestion's edit to a document and rejoin it."""
    lines = apply_edits(source.split("\n"), (s.edit for s in suggestions))
    return "\n".join(lines)
