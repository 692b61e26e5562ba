"""Tests for applying edits to documents."""

from __future__ import annotations

import pytest

from latex_repair.core.edits import apply_edit, apply_edits, apply_suggestions
from latex_repair.models.fix import EditAction, FixEdit, FixSuggestion, FixType

LINES = ["one", "two", "three"]


class TestApplyEdit:
    """Test single edits."""

    def test_replace_line(self) -> None:
        """Test a line is replaced in place."""
        edit = FixEdit(action=EditAction.REPLACE_LINE, line=2, new_text="TWO")
        assert apply_edit(LINES, edit) == ["one", "TWO", "three"]

    def test_insert_before(self) -> None:
        """Test text is inserted above the target line."""
        edit = FixEdit(action=EditAction.INSERT_BEFORE, line=1, new_text="zero")
        assert apply_edit(LINES, edit) == ["zero", "one", "two", "three"]

    def test_insert_after(self) -> None:
        """Test text is inserted below the target line."""
        edit = FixEdit(action=EditAction.INSERT_AFTER, line=3, new_text="four")
        assert apply_edit(LINES, edit) == ["one", "two", "three", "four"]

    def test_delete_line(self) -> None:
        """Test a line is removed."""
        edit = FixEdit(action=EditAction.DELETE_LINE, line=2)
        assert apply_edit(LINES, edit) == ["one", "three"]

    def test_replace_range(self) -> None:
        """Test an inclusive range collapses into the new text."""
        edit = FixEdit(action=EditAction.REPLACE_RANGE, line=1, end_line=2, new_text="x")
        assert apply_edit(LINES, edit) == ["x", "three"]

    @pytest.mark.parametrize(
        "edit",
        [
            FixEdit(action=EditAction.REPLACE_LINE, line=9, new_text="x"),
            FixEdit(action=EditAction.DELETE_LINE, line=9),
            FixEdit(action=EditAction.REPLACE_LINE, line=1),
        ],
    )
    def test_inapplicable_edits_are_ignored(self, edit: FixEdit) -> None:
        """Test out-of-range or textless edits leave the lines unchanged."""
        assert apply_edit(LINES, edit) == LINES

    def test_input_is_not_mutated(self) -> None:
        """Test a new list is returned."""
        lines = list(LINES)
        apply_edit(lines, FixEdit(action=EditAction.DELETE_LINE, line=1))
        assert lines == LINES


class TestApplyEdits:
    """Test applying several edits together."""

    def test_edits_apply_bottom_up(self) -> None:
        """Test earlier insertions do not shift later targets."""
        edits = [
            FixEdit(action=EditAction.INSERT_AFTER, line=1, new_text="after one"),
            FixEdit(action=EditAction.REPLACE_LINE, line=3, new_text="THREE"),
        ]

        assert apply_edits(LINES, edits) == ["one", "after one", "two", "THREE"]

    @pytest.mark.parametrize(
        "insert,expected",
        [
            (
                FixEdit(action=EditAction.INSERT_BEFORE, line=2, new_text="new"),
                ["one", "new", "TWO", "three"],
            ),
            (
                FixEdit(action=EditAction.INSERT_AFTER, line=2, new_text="new"),
                ["one", "TWO", "new", "three"],
            ),
        ],
    )
    def test_same_line_insert_survives_replace(
        self, insert: FixEdit, expected: list[str]
    ) -> None:
        """Test a replacement on the same line never overwrites an inserted line."""
        replace = FixEdit(action=EditAction.REPLACE_LINE, line=2, new_text="TWO")

        assert apply_edits(LINES, [insert, replace]) == expected
        assert apply_edits(LINES, [replace, insert]) == expected

    def test_apply_suggestions(self) -> None:
        """Test suggestions are applied to a whole document string."""
        suggestion = FixSuggestion(
            error_id="err_1",
            description="test",
            type=FixType.RULE,
            edit=FixEdit(action=EditAction.REPLACE_LINE, line=2, new_text="TWO"),
            confidence=0.8,
        )

        assert apply_suggestions("one\ntwo\nthree", [suggestion]) == "one\nTWO\nthree"
