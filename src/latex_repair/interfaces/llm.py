"""Abstract interface for text-generation services used by the AI fixer."""

from typing import Protocol


class LLMProvider(Protocol):
    """Abstract interface for LLM integrations.

    This protocol defines the contract that AI fallback adapters
    (Anthropic, OpenRouter, test doubles) must implement.
    """

    async def complete(self, system_prompt: str, user_content: str) -> str:
        """
        Generate text for a single system/user prompt pair.

        Security: user_content MUST be redacted using SecretRedactor
        before being passed to this method.

        Args:
            system_prompt: Instructions constraining the output
            user_content: The error, its log text and numbered source context

        Returns:
            The generated text, possibly empty

        Raises:
            AIServiceError: If generation fails
            RateLimitError: If rate limit exceeded
            TimeoutError: If request times out
        """
        ...

    @property
    def model_name(self) -> str:
        """
        Return the model identifier being used.

        Examples:
            - "claude-3-5-sonnet-20241022"
            - "stepfun/step-3.5-flash:free"
        """
        ...
