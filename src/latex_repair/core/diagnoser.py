"""Diagnosis pipeline orchestrator.

This module implements the Diagnoser class that ties the components
together the way the editor uses them:
1. Parse the compiler log into errors and warnings
2. Run the rule-based fixer over every error
3. On request, fix one specific error, trying rules first and the AI
   fallback only when no rule applies
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import structlog

from latex_repair.config.schema import RepairConfig
from latex_repair.core.ai_fixer import AIFixer, create_llm_provider
from latex_repair.core.log_parser import LogParser
from latex_repair.core.rule_fixer import RuleFixer
from latex_repair.models.diagnosis import Diagnosis

if TYPE_CHECKING:
    from latex_repair.models.fix import FixSuggestion

log = structlog.get_logger()


class Diagnoser:
    """Runs log parsing and fix generation for one document.

    The Diagnoser holds no per-document state: every call works only on its
    arguments, so one instance can serve concurrent requests.

    Example:
        diagnoser = Diagnoser()
        diagnosis = diagnoser.diagnose(log_text, source)
        patched = diagnosis.apply_all(source)

        # Errors without a rule:
        suggestion = await diagnoser.request_ai_fix(diagnosis, "err_2", source)
    """

    def __init__(
        self,
        parser: LogParser | None = None,
        rule_fixer: RuleFixer | None = None,
        ai_fixer: AIFixer | None = None,
    ) -> None:
        """Initialize the Diagnoser.

        Args:
            parser: Log parser. If None, creates default.
            rule_fixer: Rule-based fixer. If None, creates default.
            ai_fixer: AI fallback. If None, only rule-based fixes are produced.
        """
        self._parser = parser or LogParser()
        self._rule_fixer = rule_fixer or RuleFixer()
        self._ai_fixer = ai_fixer

    @property
    def ai_enabled(self) -> bool:
        return self._ai_fixer is not None

    def diagnose(self, log_text: str, source: str) -> Diagnosis:
        """Parse a log and propose rule-based fixes for all of its errors.

        Args:
            log_text: Raw compiler log
            source: Full document source

        Returns:
            Diagnosis with the parsed log and every non-null rule fix
        """
        start = time.monotonic()
        parsed = self._parser.parse(log_text)
        source_lines = source.split("\n")

        fixes = []
        for error in parsed.errors:
            suggestion = self._rule_fixer.fix(error, source_lines)
            if suggestion is not None:
                fixes.append(suggestion)

        log.info(
            "diagnosis_complete",
            error_count=parsed.error_count,
            warning_count=parsed.warning_count,
            fix_count=len(fixes),
            pdf_produced=parsed.pdf_produced,
            duration_ms=round((time.monotonic() - start) * 1000, 2),
        )
        return Diagnosis(parsed=parsed, fixes=tuple(fixes))

    async def request_ai_fix(
        self,
        diagnosis: Diagnosis,
        error_id: str,
        source: str,
    ) -> FixSuggestion | None:
        """Fix one error, using the AI fallback only if no rule applies.

        Args:
            diagnosis: Result of an earlier diagnose() call
            error_id: Identifier of the error to fix
            source: Current document source

        Returns:
            A rule or AI suggestion, or None if neither is available
        """
        error = diagnosis.parsed.find(error_id)
        if error is None:
            log.warning("ai_fix_unknown_error", error_id=error_id)
            return None

        source_lines = source.split("\n")
        suggestion = self._rule_fixer.fix(error, source_lines)
        if suggestion is not None:
            return suggestion

        if self._ai_fixer is None:
            return None

        log.info("ai_fix_requested", error_id=error_id, category=str(error.category))
        return await self._ai_fixer.fix(error, source_lines)


def create_diagnoser(config: RepairConfig, credential: str | None = None) -> Diagnoser:
    """Create a Diagnoser from configuration.

    The AI fallback is wired in only when it is enabled and either the
    provider section or an explicit credential supplies an API key.

    Args:
        config: Application configuration
        credential: API key overriding the configured one
    """
    parser = LogParser(
        context_lines=config.parser.context_lines,
        warning_continuation_lines=config.parser.warning_continuation_lines,
        warning_message_limit=config.parser.warning_message_limit,
        box_message_limit=config.parser.box_message_limit,
    )

    ai_fixer: AIFixer | None = None
    if config.ai.enabled:
        try:
            provider = create_llm_provider(config.ai, credential)
        except ValueError as e:
            log.warning("ai_fallback_disabled", reason=str(e))
        else:
            ai_fixer = AIFixer(
                provider,
                timeout=config.ai.timeout,
                context_lines=config.ai.context_lines,
            )

    return Diagnoser(parser=parser, ai_fixer=ai_fixer)
