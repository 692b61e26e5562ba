"""Tests for the compiler log parser."""

from __future__ import annotations

import pytest

from latex_repair.core.log_parser import LogParser, classify_message, parse_log
from latex_repair.models.diagnostic import ErrorCategory, Severity


@pytest.fixture
def parser() -> LogParser:
    """Create a parser with default settings."""
    return LogParser()


class TestClassifyMessage:
    """Test message classification."""

    @pytest.mark.parametrize(
        "message,expected",
        [
            ("! Undefined control sequence.", ErrorCategory.UNDEFINED_CONTROL_SEQUENCE),
            ("! Missing $ inserted.", ErrorCategory.MISSING_MATH_DELIMITER),
            ("! Missing } inserted.", ErrorCategory.UNCLOSED_BRACE),
            ("! Missing { inserted.", ErrorCategory.UNCLOSED_BRACE),
            ("! Extra }, or forgotten $.", ErrorCategory.EXTRA_BRACE),
            ("! Too many }'s.", ErrorCategory.EXTRA_BRACE),
            (
                "! LaTeX Error: \\begin{figure} on input line 3 ended by \\end{table}.",
                ErrorCategory.UNCLOSED_ENVIRONMENT,
            ),
            ("! LaTeX Error: File `foo.sty' not found.", ErrorCategory.FILE_NOT_FOUND),
            ("No file main.bbl.", ErrorCategory.FILE_NOT_FOUND),
            ("! Package babel Error: Unknown option.", ErrorCategory.GENERAL_ERROR),
            (
                "! Extra alignment tab has been changed to \\cr.",
                ErrorCategory.EXTRA_ALIGNMENT_TAB,
            ),
            ("! Emergency stop.", ErrorCategory.GENERAL_ERROR),
        ],
    )
    def test_categories(self, message: str, expected: ErrorCategory) -> None:
        """Test each trigger substring maps to its category."""
        assert classify_message(message) == expected

    def test_first_rule_wins(self) -> None:
        """Test that earlier rules take precedence over later ones."""
        message = "! Undefined control sequence \\begin"
        assert classify_message(message) == ErrorCategory.UNDEFINED_CONTROL_SEQUENCE


class TestLogicalLines:
    """Test reassembly of hard-wrapped log lines."""

    def test_joins_79_character_lines(self, parser: LogParser) -> None:
        """Test a 79-character line continues onto the next."""
        first = "x" * 79
        assert list(parser.logical_lines(f"{first}\ntail")) == [first + "tail"]

    def test_joins_consecutive_wrapped_lines(self, parser: LogParser) -> None:
        """Test several wrapped lines collapse into one."""
        text = "a" * 79 + "\n" + "b" * 79 + "\n" + "c"
        assert list(parser.logical_lines(text)) == ["a" * 79 + "b" * 79 + "c"]

    @pytest.mark.parametrize("width", [78, 80])
    def test_other_lengths_end_the_line(self, parser: LogParser, width: int) -> None:
        """Test lines of any other length are not joined."""
        first = "x" * width
        assert list(parser.logical_lines(f"{first}\ntail")) == [first, "tail"]

    def test_normalizes_crlf(self, parser: LogParser) -> None:
        """Test Windows line endings are treated like plain newlines."""
        assert list(parser.logical_lines("one\r\ntwo")) == ["one", "two"]

    def test_wrapped_warning_is_classified_after_join(self, parser: LogParser) -> None:
        """Test a warning split by the wrap is parsed as one warning."""
        prefix = "LaTeX Warning: Reference `"
        label = "r" * (79 - len(prefix))
        log_text = f"{prefix}{label}\n' on page 1 undefined on input line 42.\n"

        result = parser.parse(log_text)

        assert result.warning_count == 1
        warning = result.warnings[0]
        assert warning.category == ErrorCategory.REFERENCE_WARNING
        assert warning.line == 42


class TestErrorBlocks:
    """Test parsing of `! ...` error blocks."""

    def test_undefined_control_sequence(self, parser: LogParser) -> None:
        """Test the canonical undefined control sequence block."""
        result = parser.parse("! Undefined control sequence.\nl.12 \\foo")

        assert result.error_count == 1
        error = result.errors[0]
        assert error.id == "err_1"
        assert error.severity == Severity.ERROR
        assert error.category == ErrorCategory.UNDEFINED_CONTROL_SEQUENCE
        assert error.line == 12
        assert error.offending_text == "\\foo"
        assert error.message == "Undefined control sequence: \\foo"
        assert error.has_auto_fix is True

    def test_raw_log_includes_context(self, parser: LogParser) -> None:
        """Test raw_log holds the error line through the l.<N> marker."""
        log_text = "! Missing } inserted.\n<inserted text>\n                }\nl.8 \\textbf{bold"

        error = parser.parse(log_text).errors[0]

        assert error.raw_log == log_text
        assert error.line == 8

    def test_line_marker_beyond_context_is_ignored(self) -> None:
        """Test l.<N> is only searched within the context window."""
        parser = LogParser(context_lines=2)
        log_text = "! Emergency stop.\none\ntwo\nl.40 text"

        error = parser.parse(log_text).errors[0]

        assert error.line is None
        assert error.raw_log == "! Emergency stop.\none\ntwo"

    def test_line_marker_at_end_of_line(self, parser: LogParser) -> None:
        """Test a bare l.<N> with nothing after it still counts."""
        error = parser.parse("! Missing $ inserted.\nl.3").errors[0]
        assert error.line == 3

    def test_missing_math_message(self, parser: LogParser) -> None:
        """Test the message for a missing math delimiter."""
        error = parser.parse("! Missing $ inserted.\nl.9 x^2").errors[0]

        assert error.category == ErrorCategory.MISSING_MATH_DELIMITER
        assert error.message == "Missing $ inserted: math mode required here"

    def test_environment_mismatch(self, parser: LogParser) -> None:
        """Test the environment name is extracted from the error line."""
        log_text = (
            "! LaTeX Error: \\begin{itemize} on input line 10 ended by \\end{document}.\n"
            "l.13 \\end{document}"
        )

        error = parser.parse(log_text).errors[0]

        assert error.category == ErrorCategory.UNCLOSED_ENVIRONMENT
        assert error.offending_text == "\\begin{itemize}"
        assert error.message == "Environment mismatch: itemize"
        assert error.line == 13

    def test_file_not_found(self, parser: LogParser) -> None:
        """Test the missing file name is taken from the quotes."""
        error = parser.parse("! LaTeX Error: File `figure.png' not found.").errors[0]

        assert error.category == ErrorCategory.FILE_NOT_FOUND
        assert error.offending_text == "figure.png"
        assert error.message == "File not found: figure.png"
        assert error.has_auto_fix is False

    def test_package_error(self, parser: LogParser) -> None:
        """Test the package name of a package error is kept."""
        error = parser.parse("! Package babel Error: Unknown option `klingon'.").errors[0]

        assert error.category == ErrorCategory.GENERAL_ERROR
        assert error.offending_text == "babel"
        assert error.message == "Package babel Error: Unknown option `klingon'."

    def test_absurd_line_number(self, parser: LogParser) -> None:
        """Test a line number too long to convert leaves line unset."""
        error = parser.parse("! Emergency stop.\nl." + "9" * 5000).errors[0]
        assert error.line is None


class TestFileLineErrors:
    """Test parsing of `file:line: message` errors."""

    def test_file_line_error(self, parser: LogParser) -> None:
        """Test file, line and category come from the single line."""
        result = parser.parse("./chapter.tex:3: LaTeX Error: File `missing.sty' not found.")

        error = result.errors[0]
        assert error.file == "./chapter.tex"
        assert error.line == 3
        assert error.category == ErrorCategory.FILE_NOT_FOUND
        assert error.offending_text == "missing.sty"
        assert error.message == "LaTeX Error: File `missing.sty' not found."

    def test_file_line_undefined_command(self, parser: LogParser) -> None:
        """Test an undefined command named in the message is extracted."""
        error = parser.parse("main.tex:7: Undefined control sequence \\foo").errors[0]

        assert error.category == ErrorCategory.UNDEFINED_CONTROL_SEQUENCE
        assert error.offending_text == "\\foo"


class TestWarnings:
    """Test parsing of warnings."""

    def test_citation_warning(self, parser: LogParser) -> None:
        """Test undefined citations are categorized with their line."""
        result = parser.parse(
            "LaTeX Warning: Citation `knuth84' on page 1 undefined on input line 11."
        )

        warning = result.warnings[0]
        assert warning.severity == Severity.WARNING
        assert warning.category == ErrorCategory.CITATION_WARNING
        assert warning.line == 11
        assert warning.message.startswith("Citation `knuth84'")

    def test_unindented_lines_are_not_absorbed(self, parser: LogParser) -> None:
        """Test only indented lines continue a warning."""
        log_text = (
            "Package hyperref Warning: Token not allowed in a PDF string\n"
            "(hyperref)                removing `math shift' on input line 21.\n"
            "next line"
        )

        warning = parser.parse(log_text).warnings[0]

        assert warning.line is None
        assert "removing" not in warning.message

    def test_indented_continuation_provides_line(self, parser: LogParser) -> None:
        """Test an input line given on a continuation is picked up."""
        log_text = (
            "LaTeX Warning: Reference `fig:x' on page 2 undefined\n"
            "               on input line 30.\n"
        )

        warning = parser.parse(log_text).warnings[0]

        assert warning.category == ErrorCategory.REFERENCE_WARNING
        assert warning.line == 30

    def test_font_warning(self, parser: LogParser) -> None:
        """Test package font warnings are categorized."""
        log_text = 'Package fontspec Warning: Font "Foo" does not contain requested Script'
        warning = parser.parse(log_text).warnings[0]
        assert warning.category == ErrorCategory.FONT_WARNING

    def test_message_is_truncated(self) -> None:
        """Test warning messages respect the configured limit."""
        parser = LogParser(warning_message_limit=30)
        warning = parser.parse("LaTeX Warning: " + "long " * 20).warnings[0]
        assert len(warning.message) == 30

    def test_overfull_box(self, parser: LogParser) -> None:
        """Test overfull boxes are warnings with their paragraph line."""
        log_text = "Overfull \\hbox (12.3pt too wide) in paragraph at lines 5--6"

        warning = parser.parse(log_text).warnings[0]

        assert warning.category == ErrorCategory.OVERFULL_HBOX
        assert warning.line == 5
        assert warning.message == log_text

    def test_underfull_vbox(self, parser: LogParser) -> None:
        """Test underfull vboxes share the underfull category."""
        log_text = "Underfull \\vbox (badness 10000) in paragraph at line 14"
        warning = parser.parse(log_text).warnings[0]

        assert warning.category == ErrorCategory.UNDERFULL_HBOX
        assert warning.line == 14

    def test_box_without_paragraph_line(self, parser: LogParser) -> None:
        """Test boxes reported outside paragraphs have no line."""
        warning = parser.parse("Overfull \\hbox (3.0pt too wide) detected at line 9").warnings[0]
        assert warning.line is None


class TestFileAttribution:
    """Test tracking of the file currently being read."""

    def test_records_are_attributed_to_last_opened_file(self, parser: LogParser) -> None:
        """Test errors carry the most recently opened source file."""
        log_text = (
            "(./main.tex\n"
            "(./chapters/intro.tex\n"
            "! Undefined control sequence.\n"
            "l.4 \\foo\n"
        )

        error = parser.parse(log_text).errors[0]

        assert error.file == "./chapters/intro.tex"

    def test_no_file_before_any_marker(self, parser: LogParser) -> None:
        """Test records before any file marker have no file."""
        error = parser.parse("! Emergency stop.").errors[0]
        assert error.file is None


class TestParse:
    """Test whole-log parsing."""

    def test_broken_fixture(self, parser: LogParser, broken_log: str) -> None:
        """Test a realistic log yields every error and warning in order."""
        result = parser.parse(broken_log)

        assert [e.category for e in result.errors] == [
            ErrorCategory.UNDEFINED_CONTROL_SEQUENCE,
            ErrorCategory.UNDEFINED_CONTROL_SEQUENCE,
            ErrorCategory.UNCLOSED_BRACE,
            ErrorCategory.MISSING_MATH_DELIMITER,
            ErrorCategory.UNCLOSED_ENVIRONMENT,
        ]
        assert [e.line for e in result.errors] == [6, 7, 8, 9, 13]
        assert [e.offending_text for e in result.errors[:2]] == ["\\mathbb", "\\sectino"]
        assert [w.category for w in result.warnings] == [
            ErrorCategory.CITATION_WARNING,
            ErrorCategory.OVERFULL_HBOX,
            ErrorCategory.GENERAL_WARNING,
        ]
        assert result.pdf_produced is True
        assert result.succeeded is False

    def test_ids_are_unique_and_sequential(self, parser: LogParser, broken_log: str) -> None:
        """Test ids are numbered across errors and warnings in log order."""
        result = parser.parse(broken_log)
        ids = [r.id for r in (*result.errors, *result.warnings)]

        assert ids == [f"err_{n}" for n in range(1, 9)]

    def test_ids_restart_per_parse(self, parser: LogParser, broken_log: str) -> None:
        """Test each parse numbers from err_1 again."""
        parser.parse(broken_log)
        assert parser.parse(broken_log).errors[0].id == "err_1"

    def test_clean_fixture(self, parser: LogParser, clean_log: str) -> None:
        """Test a successful run has no errors and a PDF."""
        result = parser.parse(clean_log)

        assert result.error_count == 0
        assert result.warning_count == 0
        assert result.succeeded is True

    def test_empty_log(self, parser: LogParser) -> None:
        """Test an empty log produces an empty result."""
        result = parser.parse("")

        assert result.errors == ()
        assert result.warnings == ()
        assert result.pdf_produced is False

    def test_garbage_input_never_raises(self, parser: LogParser) -> None:
        """Test binary-looking text is skipped rather than rejected."""
        result = parser.parse("\x00\xff\ufffd(((((\n:::\n!\nl.\n" * 50)

        assert result.pdf_produced is False
        assert all(e.category == ErrorCategory.GENERAL_ERROR for e in result.errors)

    def test_large_log(self, parser: LogParser) -> None:
        """Test a long log with many errors is parsed completely."""
        block = "! Undefined control sequence.\nl.1 \\foo\n"
        result = parser.parse(block * 500)

        assert result.error_count == 500
        assert result.errors[-1].id == "err_500"

    def test_multi_megabyte_wrapped_line(self, parser: LogParser) -> None:
        """Test one logical line spanning megabytes of wrapped output."""
        wrapped = ("a" * 79 + "\n") * 40_000
        log_text = (
            wrapped
            + "end of line\n"
            + "! Undefined control sequence.\n"
            + "l.12 \\foo\n"
            + "Output written on paper.pdf (1 page)."
        )
        assert len(log_text) > 3_000_000

        result = parser.parse(log_text)

        assert result.error_count == 1
        assert result.warning_count == 0
        error = result.errors[0]
        assert error.id == "err_1"
        assert error.line == 12
        assert error.offending_text == "\\foo"
        assert result.pdf_produced is True

    def test_multi_megabyte_log_lines_are_joined(self, parser: LogParser) -> None:
        """Test reassembly keeps every character of a multi-megabyte wrapped line."""
        wrapped = ("b" * 79 + "\n") * 40_000 + "tail"

        lines = list(parser.logical_lines(wrapped))

        assert len(lines) == 1
        assert len(lines[0]) == 79 * 40_000 + len("tail")

    def test_parse_log_uses_defaults(self, broken_log: str) -> None:
        """Test the module-level helper matches a default parser."""
        assert parse_log(broken_log) == LogParser().parse(broken_log)
