"""Deterministic fix rules for categorized LaTeX errors.

Each rule inspects one error and the current document and proposes at most
one edit. A rule returning None means "no automatic fix", not a failure;
callers may then fall back to the AI fixer.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

import structlog

from latex_repair.core.knowledge import (
    COMMAND_TO_PACKAGE,
    COMMON_COMMANDS,
    COMMON_TYPOS,
    MATH_TOKENS,
)
from latex_repair.models.diagnostic import ErrorCategory, LatexError
from latex_repair.models.fix import EditAction, FixEdit, FixSuggestion, FixType
from latex_repair.utils.text import (
    count_braces,
    count_environment,
    find_extra_closing_brace,
    levenshtein,
)

log = structlog.get_logger()


def find_typo_fix(command: str) -> str | None:
    """Suggest the intended command for a misspelled one.

    The typo dictionary is consulted first; otherwise the first common
    command at edit distance exactly 1 wins.
    """
    direct = COMMON_TYPOS.get(command)
    if direct:
        return direct

    for candidate in COMMON_COMMANDS:
        if levenshtein(command, candidate) == 1:
            return candidate

    return None


def package_insert_line(source_lines: Sequence[str]) -> int:
    """Line after which a new \\usepackage belongs.

    The last \\usepackage line in the preamble, else the line just before
    \\begin{document}, clamped to line 1.
    """
    insert_line = 0
    for i, line in enumerate(source_lines):
        if "\\usepackage" in line:
            insert_line = i + 1
        if "\\begin{document}" in line:
            if insert_line == 0:
                insert_line = i
            break
    return max(1, insert_line)


def is_package_imported(source_lines: Sequence[str], package: str) -> bool:
    """Check whether any \\usepackage line already names the package."""
    pattern = re.compile(rf"\\usepackage(\[.*?\])?\{{.*{re.escape(package)}.*\}}")
    return any(pattern.search(line) for line in source_lines)


class RuleFixer:
    """Maps a categorized error onto a single proposed source edit.

    Confidence values per rule:
    - missing package for a known command: 0.95
    - explicit missing package: 0.9
    - command typo: 0.8
    - missing \\end{env}: 0.8
    - wrap in math mode / remove extra brace: 0.75
    - missing closing brace / missing \\begin{env}: 0.7

    Example:
        fixer = RuleFixer()
        suggestion = fixer.fix(error, source.split("\\n"))
        if suggestion is None:
            ...  # try the AI fallback
    """

    MATH_EXPRESSION = re.compile(r"^(\\?[a-zA-Z]+(?:\{[^}]*\})?(?:\^|_)?(?:\{[^}]*\})?)")
    ENVIRONMENT = re.compile(r"\\(?:begin|end)\{([^}]+)\}")

    def fix(self, error: LatexError, source_lines: Sequence[str]) -> FixSuggestion | None:
        """Propose a fix for one error.

        Args:
            error: The error to fix
            source_lines: Document lines, 1-indexed against error.line

        Returns:
            A rule-based FixSuggestion, or None when no rule applies
        """
        match error.category:
            case ErrorCategory.UNDEFINED_CONTROL_SEQUENCE:
                suggestion = self._fix_undefined_control_sequence(error, source_lines)
            case ErrorCategory.MISSING_PACKAGE:
                suggestion = self._fix_missing_package(error, source_lines)
            case ErrorCategory.UNCLOSED_BRACE:
                suggestion = self._fix_unclosed_brace(error, source_lines)
            case ErrorCategory.MISSING_MATH_DELIMITER:
                suggestion = self._fix_missing_math_delimiter(error, source_lines)
            case ErrorCategory.UNCLOSED_ENVIRONMENT:
                suggestion = self._fix_unclosed_environment(error, source_lines)
            case ErrorCategory.EXTRA_BRACE:
                suggestion = self._fix_extra_brace(error, source_lines)
            case (
                ErrorCategory.FILE_NOT_FOUND
                | ErrorCategory.MISSING_ARGUMENT
                | ErrorCategory.EXTRA_ALIGNMENT_TAB
                | ErrorCategory.OVERFULL_HBOX
                | ErrorCategory.UNDERFULL_HBOX
                | ErrorCategory.FONT_WARNING
                | ErrorCategory.CITATION_WARNING
                | ErrorCategory.REFERENCE_WARNING
                | ErrorCategory.GENERAL_ERROR
                | ErrorCategory.GENERAL_WARNING
            ):
                suggestion = None

        if suggestion is None:
            log.debug("rule_fix_unavailable", error_id=error.id, category=str(error.category))
        else:
            log.debug(
                "rule_fix_proposed",
                error_id=error.id,
                action=str(suggestion.edit.action),
                line=suggestion.edit.line,
            )
        return suggestion

    def _fix_undefined_control_sequence(
        self,
        error: LatexError,
        source_lines: Sequence[str],
    ) -> FixSuggestion | None:
        """Import the package defining the command, else correct a typo."""
        command = error.offending_text
        if not command:
            return None

        package = COMMAND_TO_PACKAGE.get(command)
        if package and not is_package_imported(source_lines, package):
            return FixSuggestion(
                error_id=error.id,
                description=f"Add \\usepackage{{{package}}} (provides {command})",
                type=FixType.RULE,
                edit=FixEdit(
                    action=EditAction.INSERT_AFTER,
                    line=package_insert_line(source_lines),
                    new_text=f"\\usepackage{{{package}}}",
                ),
                confidence=0.95,
            )

        correction = find_typo_fix(command)
        source_line = _source_line(error, source_lines)
        if correction and source_line:
            return FixSuggestion(
                error_id=error.id,
                description=f"Fix typo: {command} -> {correction}",
                type=FixType.RULE,
                edit=FixEdit(
                    action=EditAction.REPLACE_LINE,
                    line=error.line or 1,
                    new_text=source_line.replace(command, correction, 1),
                    original_text=source_line,
                ),
                confidence=0.8,
            )

        return None

    def _fix_missing_package(
        self,
        error: LatexError,
        source_lines: Sequence[str],
    ) -> FixSuggestion | None:
        package = error.offending_text
        if not package:
            return None

        return FixSuggestion(
            error_id=error.id,
            description=f"Add \\usepackage{{{package}}}",
            type=FixType.RULE,
            edit=FixEdit(
                action=EditAction.INSERT_AFTER,
                line=package_insert_line(source_lines),
                new_text=f"\\usepackage{{{package}}}",
            ),
            confidence=0.9,
        )

    def _fix_unclosed_brace(
        self,
        error: LatexError,
        source_lines: Sequence[str],
    ) -> FixSuggestion | None:
        """Append one `}` when the error line opens more braces than it closes."""
        line = _source_line(error, source_lines)
        if not line:
            return None

        opens, closes = count_braces(line)
        if opens <= closes:
            return None

        return FixSuggestion(
            error_id=error.id,
            description=f"Add missing closing brace on line {error.line}",
            type=FixType.RULE,
            edit=FixEdit(
                action=EditAction.REPLACE_LINE,
                line=error.line or 1,
                new_text=line + "}",
                original_text=line,
            ),
            confidence=0.7,
        )

    def _fix_missing_math_delimiter(
        self,
        error: LatexError,
        source_lines: Sequence[str],
    ) -> FixSuggestion | None:
        """Wrap the first math-only token found outside math mode in `$...$`."""
        line = _source_line(error, source_lines)
        if not line:
            return None

        for token in MATH_TOKENS:
            idx = line.find(token)
            if idx < 0:
                continue
            # An odd number of dollars before the token means we are already in math
            if line[:idx].count("$") % 2 != 0:
                continue

            expression_match = self.MATH_EXPRESSION.match(line[idx:])
            expression = expression_match.group(1) if expression_match else token
            new_line = f"{line[:idx]}${expression}${line[idx + len(expression):]}"

            return FixSuggestion(
                error_id=error.id,
                description=f'Wrap "{expression}" in math mode ($...$)',
                type=FixType.RULE,
                edit=FixEdit(
                    action=EditAction.REPLACE_LINE,
                    line=error.line or 1,
                    new_text=new_line,
                    original_text=line,
                ),
                confidence=0.75,
            )

        return None

    def _fix_unclosed_environment(
        self,
        error: LatexError,
        source_lines: Sequence[str],
    ) -> FixSuggestion | None:
        """Insert the missing half of an unbalanced \\begin/\\end pair."""
        if not error.offending_text:
            return None

        env_match = self.ENVIRONMENT.search(error.offending_text)
        if not env_match:
            return None

        name = env_match.group(1)
        balance = count_environment(source_lines, name)
        anchor = error.line if error.line and error.line > 0 else None

        if balance.begins > balance.ends:
            return FixSuggestion(
                error_id=error.id,
                description=f"Add missing \\end{{{name}}}",
                type=FixType.RULE,
                edit=FixEdit(
                    action=EditAction.INSERT_AFTER,
                    line=anchor or balance.last_begin_line or max(1, len(source_lines)),
                    new_text=f"\\end{{{name}}}",
                ),
                confidence=0.8,
            )

        if balance.ends > balance.begins:
            return FixSuggestion(
                error_id=error.id,
                description=f"Add missing \\begin{{{name}}}",
                type=FixType.RULE,
                edit=FixEdit(
                    action=EditAction.INSERT_BEFORE,
                    line=anchor or balance.last_end_line or 1,
                    new_text=f"\\begin{{{name}}}",
                ),
                confidence=0.7,
            )

        return None

    def _fix_extra_brace(
        self,
        error: LatexError,
        source_lines: Sequence[str],
    ) -> FixSuggestion | None:
        """Remove the first `}` that has no matching `{` before it."""
        line = _source_line(error, source_lines)
        if not line:
            return None

        extra = find_extra_closing_brace(line)
        if extra is None:
            return None

        return FixSuggestion(
            error_id=error.id,
            description=f"Remove extra }} on line {error.line}",
            type=FixType.RULE,
            edit=FixEdit(
                action=EditAction.REPLACE_LINE,
                line=error.line or 1,
                new_text=line[:extra] + line[extra + 1 :],
                original_text=line,
            ),
            confidence=0.75,
        )


def _source_line(error: LatexError, source_lines: Sequence[str]) -> str | None:
    """The non-empty source line an error points at, if there is one."""
    if error.line is None or not 1 <= error.line <= len(source_lines):
        return None
    return source_lines[error.line - 1] or None


_default_fixer = RuleFixer()


def fix(error: LatexError, source_lines: Sequence[str]) -> FixSuggestion | None:
    """Propose a rule-based fix with the default fixer."""
    return _default_fixer.fix(error, source_lines)
