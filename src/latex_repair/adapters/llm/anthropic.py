"""Anthropic Messages API adapter for the AI fixer.

Implements the LLMProvider protocol on top of the official async SDK, which
retries connection errors on its own.
"""

from __future__ import annotations

import anthropic
import structlog

from ...config.schema import AnthropicConfig
from ...utils.async_helpers import AIServiceError, RateLimitError, RepairError, TimeoutError

log = structlog.get_logger()

# Longest reply accepted, in characters
MAX_RESPONSE_LENGTH = 20000


def _map_sdk_error(error: anthropic.APIError) -> RepairError:
    match error:
        case anthropic.RateLimitError():
            return RateLimitError(f"Anthropic rate limit exceeded: {error}")
        case anthropic.APITimeoutError():
            return TimeoutError(f"Anthropic request timed out: {error}")
        case _:
            return AIServiceError(f"Anthropic API error: {error}")


class AnthropicAdapter:
    """LLMProvider backed by Claude.

    Example:
        adapter = AnthropicAdapter(AnthropicConfig(api_key="sk-ant-..."))
        line = await adapter.complete(SYSTEM_PROMPT, prompt)
    """

    def __init__(
        self,
        config: AnthropicConfig,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        """Create the adapter.

        Args:
            config: Model and sampling settings plus the API key.
            client: Preconfigured SDK client. If None, one is built from config.
        """
        self._config = config
        self._client = client or anthropic.AsyncAnthropic(api_key=config.api_key)

    @property
    def model_name(self) -> str:
        return self._config.model

    async def complete(self, system_prompt: str, user_content: str) -> str:
        """Send one system/user exchange and return the text of the reply.

        Raises:
            RateLimitError: On HTTP 429.
            TimeoutError: If the SDK gives up waiting.
            AIServiceError: On any other API failure or an oversized reply.
        """
        try:
            message = await self._client.messages.create(
                model=self._config.model,
                max_tokens=self._config.max_tokens,
                temperature=self._config.temperature,
                system=system_prompt,
                messages=[{"role": "user", "content": user_content}],
            )
        except anthropic.APIError as e:
            mapped = _map_sdk_error(e)
            log.warning("llm_request_error", provider="anthropic", error_type=type(mapped).__name__)
            raise mapped from e

        text = "".join(getattr(block, "text", "") for block in message.content)
        if len(text) > MAX_RESPONSE_LENGTH:
            raise AIServiceError(f"Response exceeds maximum length: {len(text)}")

        log.info("llm_request_complete", provider="anthropic", length=len(text))
        return text
