"""Protocol definitions for pluggable adapters."""

from .llm import LLMProvider

__all__ = ["LLMProvider"]
