"""OpenRouter chat-completions adapter.

Implements the LLMProvider protocol over OpenRouter's OpenAI-compatible
HTTP API using httpx. Transient network failures are retried with
exponential backoff; HTTP errors and malformed payloads are raised as
AIServiceError.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from ...config.schema import OpenRouterConfig
from ...utils.async_helpers import (
    AIServiceError,
    RateLimitError,
    TimeoutError,
    create_retry,
)

log = structlog.get_logger()

MAX_RESPONSE_LENGTH = 20000


class _Message(BaseModel):
    content: str | None = None


class _Choice(BaseModel):
    message: _Message


class ChatCompletionResponse(BaseModel):
    """The subset of a chat-completions payload the adapter reads."""

    choices: list[_Choice]


class OpenRouterAdapter:
    """OpenRouter LLM adapter implementing the LLMProvider protocol.

    Example:
        adapter = OpenRouterAdapter(OpenRouterConfig(api_key="sk-or-..."))
        text = await adapter.complete(SYSTEM_PROMPT, prompt)
    """

    def __init__(
        self,
        config: OpenRouterConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the OpenRouter adapter.

        Args:
            config: OpenRouter-specific configuration.
            transport: Optional httpx transport (used by tests).
        """
        self._config = config
        self._transport = transport
        self._post = create_retry(max_attempts=config.max_attempts)(self._send)

    @property
    def model_name(self) -> str:
        """Return the model identifier being used."""
        return self._config.model

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": self._config.referer,
            "X-Title": self._config.title,
        }

    async def _send(self, payload: dict[str, Any]) -> httpx.Response:
        async with httpx.AsyncClient(
            base_url=self._config.base_url,
            timeout=self._config.request_timeout,
            transport=self._transport,
        ) as client:
            return await client.post("/chat/completions", json=payload, headers=self._headers())

    async def complete(self, system_prompt: str, user_content: str) -> str:
        """Generate text for one system/user prompt pair.

        Raises:
            AIServiceError: On HTTP errors or malformed responses.
            RateLimitError: If OpenRouter answers 429.
            TimeoutError: If the request times out after retries.
        """
        payload = {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content},
            ],
            "max_tokens": self._config.max_tokens,
            "temperature": self._config.temperature,
            "top_p": self._config.top_p,
        }

        try:
            response = await self._post(payload)
        except httpx.TimeoutException as e:
            log.error("llm_request_error", provider="openrouter", error=str(e))
            raise TimeoutError(f"OpenRouter request timed out: {e}") from e
        except httpx.HTTPError as e:
            log.error("llm_request_error", provider="openrouter", error=str(e))
            raise AIServiceError(f"OpenRouter request failed: {e}") from e

        if response.status_code == 429:
            retry_after = response.headers.get("retry-after", "")
            log.warning("rate_limit_hit", provider="openrouter", retry_after=retry_after)
            raise RateLimitError(
                "OpenRouter rate limit exceeded",
                retry_after=int(retry_after) if retry_after.isdigit() else None,
            )

        if response.is_error:
            log.error("llm_request_error", provider="openrouter", status=response.status_code)
            raise AIServiceError(
                f"OpenRouter API error ({response.status_code}): {response.text[:200]}"
            )

        try:
            data = ChatCompletionResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            log.error("llm_request_error", provider="openrouter", error=str(e))
            raise AIServiceError(f"Malformed OpenRouter response: {e}") from e

        if not data.choices:
            return ""

        text = (data.choices[0].message.content or "").strip()
        if len(text) > MAX_RESPONSE_LENGTH:
            raise AIServiceError(f"Response exceeds maximum length: {len(text)}")

        log.info("llm_request_complete", provider="openrouter", length=len(text))
        return text
