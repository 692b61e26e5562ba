"""Parser for LaTeX compiler logs.

This module implements the LogParser class that turns the free-text log of
a pdflatex/xelatex/lualatex run into typed error and warning records. It
handles:
- Lines hard-wrapped at 79 characters by the compiler
- `! ...` error blocks with an `l.<N>` source marker
- `file:line: message` errors (-file-line-error mode)
- LaTeX and package warnings spanning several lines
- Overfull/Underfull box diagnostics

Parsing is best-effort: lines that match no rule are skipped and the parser
never raises.
"""

from __future__ import annotations

import itertools
import re
from collections.abc import Iterator

import structlog

from latex_repair.models.diagnostic import (
    ErrorCategory,
    LatexError,
    ParsedLog,
    Severity,
)

log = structlog.get_logger()


def classify_message(text: str) -> ErrorCategory:
    """Categorize an error message by its trigger substrings.

    Shared by `! ...` blocks and file-line errors. Rules are tried in order
    and the first hit wins.
    """
    if "Undefined control sequence" in text:
        return ErrorCategory.UNDEFINED_CONTROL_SEQUENCE
    if "Missing $" in text:
        return ErrorCategory.MISSING_MATH_DELIMITER
    if "Missing }" in text or "Missing {" in text:
        return ErrorCategory.UNCLOSED_BRACE
    if "Extra }" in text or "Too many }" in text:
        return ErrorCategory.EXTRA_BRACE
    if "\\begin" in text or "\\end" in text:
        return ErrorCategory.UNCLOSED_ENVIRONMENT
    if ("File" in text and "not found" in text) or "No file" in text:
        return ErrorCategory.FILE_NOT_FOUND
    if "Package" in text and "Error" in text:
        return ErrorCategory.GENERAL_ERROR
    if "Extra alignment tab" in text:
        return ErrorCategory.EXTRA_ALIGNMENT_TAB
    return ErrorCategory.GENERAL_ERROR


class LogParser:
    """Parser for LaTeX compiler logs.

    Responsibilities:
    - Reassemble logical lines from the compiler's 79-column wrapping
    - Track the source file currently being read
    - Classify each logical line into errors and warnings
    - Report whether the run wrote a PDF

    Example:
        parser = LogParser()
        parsed = parser.parse(log_text)
        for error in parsed.errors:
            print(error.line, error.category, error.message)
    """

    LOG_WRAP_WIDTH = 79
    PDF_MARKER = "Output written on"

    FILE_MARKER = re.compile(r"^\(([^\s()]+\.(?:tex|sty|cls|bbl|aux))")
    FILE_LINE_ERROR = re.compile(r"^([^\s:]+):(\d+):\s*(.+)", re.ASCII)
    LINE_MARKER = re.compile(r"^l\.(\d+)(?:\s|$)", re.ASCII)
    INPUT_LINE = re.compile(r"on input line (\d+)", re.ASCII)
    BOX_PATTERN = re.compile(
        r"((?:Over|Under)full \\[hv]box)[^)]*\) in paragraph at lines? (\d+)",
        re.ASCII,
    )
    TRAILING_COMMAND = re.compile(r"\\([a-zA-Z@]+)\s*$", re.MULTILINE)
    ANY_COMMAND = re.compile(r"\\([a-zA-Z@]+)")
    ENVIRONMENT = re.compile(r"\\(?:begin|end)\{([^}]+)\}")
    QUOTED = re.compile(r"[`']([^'`]+)[`']")
    PACKAGE_NAME = re.compile(r"Package\s+(\S+)\s+Error")
    WARNING_PREFIX = re.compile(r"^.*Warning:\s*", re.IGNORECASE)
    ERROR_PREFIX = re.compile(r"^!\s*")

    def __init__(
        self,
        context_lines: int = 5,
        warning_continuation_lines: int = 3,
        warning_message_limit: int = 200,
        box_message_limit: int = 120,
    ) -> None:
        """Initialize the LogParser.

        Args:
            context_lines: Lines collected after a `!` line when looking for `l.<N>`
            warning_continuation_lines: Indented lines a warning may absorb
            warning_message_limit: Maximum length of a warning message
            box_message_limit: Maximum length of an over/underfull box message
        """
        self._context_lines = context_lines
        self._warning_continuation_lines = warning_continuation_lines
        self._warning_message_limit = warning_message_limit
        self._box_message_limit = box_message_limit

    def parse(self, log_text: str) -> ParsedLog:
        """Parse a compiler log into structured errors and warnings.

        Args:
            log_text: Raw log text

        Returns:
            ParsedLog with errors and warnings in log order
        """
        ids = (f"err_{n}" for n in itertools.count(1))
        errors: list[LatexError] = []
        warnings: list[LatexError] = []

        lines = list(self.logical_lines(log_text))
        current_file: str | None = None

        for i, line in enumerate(lines):
            file_match = self.FILE_MARKER.match(line)
            if file_match:
                current_file = file_match.group(1)

            if line.startswith("!"):
                errors.append(self._parse_error_block(lines, i, current_file, next(ids)))
                continue

            file_line_match = self.FILE_LINE_ERROR.match(line)
            if file_line_match:
                errors.append(self._parse_file_line_error(file_line_match, next(ids)))
                continue

            if "LaTeX Warning:" in line or ("Package" in line and "Warning:" in line):
                warnings.append(self._parse_warning(lines, i, current_file, next(ids)))
                continue

            if line.startswith("Overfull") or line.startswith("Underfull"):
                warnings.append(self._parse_box_warning(line, current_file, next(ids)))

        pdf_produced = self.PDF_MARKER in log_text

        log.debug(
            "log_parsed",
            error_count=len(errors),
            warning_count=len(warnings),
            pdf_produced=pdf_produced,
        )

        return ParsedLog(
            errors=tuple(errors),
            warnings=tuple(warnings),
            pdf_produced=pdf_produced,
        )

    def logical_lines(self, log_text: str) -> Iterator[str]:
        """Rejoin lines the compiler hard-wrapped at 79 characters.

        A raw line of exactly 79 characters continues onto the next one; any
        other length ends the logical line.
        """
        buffer: list[str] = []
        for raw in log_text.replace("\r\n", "\n").split("\n"):
            buffer.append(raw)
            if len(raw) == self.LOG_WRAP_WIDTH:
                continue
            yield "".join(buffer)
            buffer = []
        if buffer:
            yield "".join(buffer)

    def _parse_error_block(
        self,
        lines: list[str],
        start: int,
        current_file: str | None,
        error_id: str,
    ) -> LatexError:
        """Parse a `! ...` error and the context lines that follow it."""
        error_line = lines[start]
        block = [error_line]
        line_number: int | None = None

        for following in lines[start + 1 : start + 1 + self._context_lines]:
            block.append(following)
            marker = self.LINE_MARKER.match(following)
            if marker:
                line_number = _to_int(marker.group(1))
                break

        raw_log = "\n".join(block)
        category = classify_message(error_line)
        offending = self._extract_offending_text(category, error_line, raw_log)

        return LatexError(
            id=error_id,
            severity=Severity.ERROR,
            category=category,
            message=self._error_message(category, error_line, offending),
            raw_log=raw_log,
            file=current_file,
            line=line_number,
            offending_text=offending,
        )

    def _parse_file_line_error(self, match: re.Match[str], error_id: str) -> LatexError:
        """Parse a `file:line: message` error."""
        file, line, message = match.group(1), match.group(2), match.group(3)
        category = classify_message(message)

        return LatexError(
            id=error_id,
            severity=Severity.ERROR,
            category=category,
            message=message.strip(),
            raw_log=f"{file}:{line}: {message}",
            file=file,
            line=_to_int(line),
            offending_text=self._extract_message_token(message),
        )

    def _parse_warning(
        self,
        lines: list[str],
        start: int,
        current_file: str | None,
        error_id: str,
    ) -> LatexError:
        """Parse a LaTeX or package warning, absorbing indented continuation lines."""
        full_warning = lines[start]
        stop = start + 1 + self._warning_continuation_lines
        for following in lines[start + 1 : stop]:
            if following.startswith(" ") or following == "":
                full_warning += " " + following.strip()
            else:
                break

        input_line = self.INPUT_LINE.search(full_warning)

        if "Citation" in full_warning and "undefined" in full_warning:
            category = ErrorCategory.CITATION_WARNING
        elif "Reference" in full_warning and "undefined" in full_warning:
            category = ErrorCategory.REFERENCE_WARNING
        elif "Font" in full_warning:
            category = ErrorCategory.FONT_WARNING
        else:
            category = ErrorCategory.GENERAL_WARNING

        message = self.WARNING_PREFIX.sub("", full_warning, count=1).strip()

        return LatexError(
            id=error_id,
            severity=Severity.WARNING,
            category=category,
            message=message[: self._warning_message_limit],
            raw_log=full_warning,
            file=current_file,
            line=_to_int(input_line.group(1)) if input_line else None,
        )

    def _parse_box_warning(self, line: str, current_file: str | None, error_id: str) -> LatexError:
        """Parse an Overfull/Underfull hbox or vbox diagnostic."""
        box_match = self.BOX_PATTERN.search(line)
        if line.startswith("Overfull"):
            category = ErrorCategory.OVERFULL_HBOX
        else:
            category = ErrorCategory.UNDERFULL_HBOX

        return LatexError(
            id=error_id,
            severity=Severity.WARNING,
            category=category,
            message=line[: self._box_message_limit],
            raw_log=line,
            file=current_file,
            line=_to_int(box_match.group(2)) if box_match else None,
        )

    def _extract_offending_text(
        self,
        category: ErrorCategory,
        headline: str,
        block: str,
    ) -> str | None:
        """Pull the token a fix rule keys on out of the error text.

        Args:
            category: Category chosen for the error
            headline: The line that triggered the error
            block: Headline plus any collected context lines
        """
        match category:
            case ErrorCategory.UNDEFINED_CONTROL_SEQUENCE:
                command = self.TRAILING_COMMAND.search(block) or self.ANY_COMMAND.search(block)
                return f"\\{command.group(1)}" if command else None
            case ErrorCategory.UNCLOSED_ENVIRONMENT:
                environment = self.ENVIRONMENT.search(block)
                return environment.group(0) if environment else None
            case ErrorCategory.FILE_NOT_FOUND:
                quoted = self.QUOTED.search(headline)
                return quoted.group(1) if quoted else None
            case ErrorCategory.GENERAL_ERROR:
                package = self.PACKAGE_NAME.search(headline)
                return package.group(1) if package else None
            case (
                ErrorCategory.MISSING_PACKAGE
                | ErrorCategory.UNCLOSED_BRACE
                | ErrorCategory.MISSING_MATH_DELIMITER
                | ErrorCategory.MISSING_ARGUMENT
                | ErrorCategory.EXTRA_BRACE
                | ErrorCategory.EXTRA_ALIGNMENT_TAB
                | ErrorCategory.OVERFULL_HBOX
                | ErrorCategory.UNDERFULL_HBOX
                | ErrorCategory.FONT_WARNING
                | ErrorCategory.CITATION_WARNING
                | ErrorCategory.REFERENCE_WARNING
                | ErrorCategory.GENERAL_WARNING
            ):
                return None

    def _extract_message_token(self, message: str) -> str | None:
        """First \\command in a one-line message, else its first quoted literal."""
        command = self.ANY_COMMAND.search(message)
        if command:
            return f"\\{command.group(1)}"
        quoted = self.QUOTED.search(message)
        return quoted.group(1) if quoted else None

    def _error_message(
        self,
        category: ErrorCategory,
        error_line: str,
        offending: str | None,
    ) -> str:
        """Human-readable message for a `! ...` error."""
        bare = self.ERROR_PREFIX.sub("", error_line, count=1).strip()

        if category == ErrorCategory.UNDEFINED_CONTROL_SEQUENCE:
            return f"Undefined control sequence: {offending or 'unknown'}"
        if category == ErrorCategory.MISSING_MATH_DELIMITER:
            return "Missing $ inserted: math mode required here"
        if category == ErrorCategory.UNCLOSED_ENVIRONMENT:
            name = self.ENVIRONMENT.search(offending or "")
            return f"Environment mismatch: {name.group(1) if name else 'unknown'}"
        if category == ErrorCategory.FILE_NOT_FOUND:
            return f"File not found: {offending or 'unknown'}"
        return bare


def _to_int(digits: str) -> int | None:
    """Convert a matched digit run, tolerating absurdly long numbers."""
    try:
        return int(digits)
    except ValueError:
        return None


_default_parser = LogParser()


def parse_log(log_text: str) -> ParsedLog:
    """Parse a compiler log with default settings."""
    return _default_parser.parse(log_text)
