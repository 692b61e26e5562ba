"""Shared test fixtures for latex-repair."""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from latex_repair.models.diagnostic import ErrorCategory, LatexError, Severity

# Get the fixtures directory
FIXTURES_DIR = Path(__file__).parent / "fixtures"
LOGS_DIR = FIXTURES_DIR / "logs"
DOCUMENTS_DIR = FIXTURES_DIR / "documents"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def broken_log() -> str:
    """Load the log of a compilation with several typical errors."""
    return (LOGS_DIR / "broken.log").read_text()


@pytest.fixture
def clean_log() -> str:
    """Load the log of a compilation without errors."""
    return (LOGS_DIR / "clean.log").read_text()


@pytest.fixture
def broken_source() -> str:
    """Load the document that produced broken.log."""
    return (DOCUMENTS_DIR / "broken.tex").read_text()


@pytest.fixture
def broken_lines(broken_source: str) -> list[str]:
    """The broken document split into lines."""
    return broken_source.split("\n")


@pytest.fixture
def make_error():
    """Factory for LatexError records with sensible defaults."""

    def _make(
        category: ErrorCategory = ErrorCategory.GENERAL_ERROR,
        *,
        line: int | None = 1,
        offending_text: str | None = None,
        message: str = "test error",
        error_id: str = "err_1",
    ) -> LatexError:
        return LatexError(
            id=error_id,
            severity=Severity.ERROR,
            category=category,
            message=message,
            raw_log=f"! {message}",
            line=line,
            offending_text=offending_text,
        )

    return _make


@pytest.fixture
def mock_provider() -> AsyncMock:
    """An LLMProvider double whose complete() is an AsyncMock."""
    provider = AsyncMock()
    provider.model_name = "test-model"
    provider.complete.return_value = "\\section{Fixed}"
    return provider
