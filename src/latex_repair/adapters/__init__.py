"""Concrete implementations of provider interfaces."""

from .llm.anthropic import AnthropicAdapter
from .llm.openrouter import OpenRouterAdapter

__all__ = [
    "AnthropicAdapter",
    "OpenRouterAdapter",
]
