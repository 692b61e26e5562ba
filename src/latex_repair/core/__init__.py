"""Core business logic components.

This module exports the main business logic classes:
- LogParser: Parses compiler logs into typed errors and warnings
- RuleFixer: Proposes deterministic edits for categorized errors
- AIFixer: Falls back to a text-generation service
- Diagnoser: Runs the parse and fix pipeline for one document
"""

from latex_repair.core.ai_fixer import AIFixer, clean_ai_output, create_llm_provider, fix_with_ai
from latex_repair.core.diagnoser import Diagnoser, create_diagnoser
from latex_repair.core.edits import apply_edit, apply_edits, apply_suggestions
from latex_repair.core.log_parser import LogParser, classify_message, parse_log
from latex_repair.core.rule_fixer import RuleFixer, find_typo_fix, fix

__all__ = [
    "AIFixer",
    "Diagnoser",
    "LogParser",
    "RuleFixer",
    "apply_edit",
    "apply_edits",
    "apply_suggestions",
    "classify_message",
    "clean_ai_output",
    "create_diagnoser",
    "create_llm_provider",
    "find_typo_fix",
    "fix",
    "fix_with_ai",
    "parse_log",
]
