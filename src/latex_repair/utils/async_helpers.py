"""Error types and async call helpers for the AI fallback.

The parser and the rule fixer never raise; everything here exists for the
network boundary:
- RepairError and its subclasses, raised by adapters
- create_retry, a tenacity policy for transient HTTP failures
- with_timeout, which bounds one generation call
"""

from __future__ import annotations

import asyncio
import builtins
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

import httpx
import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger()

P = ParamSpec("P")
T = TypeVar("T")

# Errors worth another attempt: the request may not have reached the service.
TRANSIENT_HTTP_ERRORS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


class RepairError(Exception):
    """Root of every error raised by latex-repair."""


class AIServiceError(RepairError):
    """A text-generation service failed or returned unusable output."""


class RateLimitError(RepairError):
    """The text-generation service refused the request for rate reasons.

    Attributes:
        retry_after: Seconds the service asked us to wait, when it said.
    """

    def __init__(self, message: str, retry_after: int | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class SecurityError(RepairError):
    """Text could not be made safe to send or log."""


class TimeoutError(RepairError):
    """An AI call exceeded its time budget."""


def _before_retry(retry_state: RetryCallState) -> None:
    if retry_state.outcome is None or not retry_state.outcome.failed:
        return
    error = retry_state.outcome.exception()
    log.warning(
        "ai_request_retry",
        attempt=retry_state.attempt_number,
        exception_type=type(error).__name__,
        error=str(error),
        sleep=retry_state.next_action.sleep if retry_state.next_action else 0,
    )


def create_retry(
    max_attempts: int = 3,
    min_wait: float = 1.0,
    max_wait: float = 30.0,
    retry_on: tuple[type[Exception], ...] = TRANSIENT_HTTP_ERRORS,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Build a retry decorator with exponential backoff.

    The last exception is re-raised once attempts run out, so callers see
    the original httpx error rather than a tenacity wrapper.

    Args:
        max_attempts: Total attempts including the first.
        min_wait: Shortest pause between attempts, in seconds.
        max_wait: Longest pause between attempts, in seconds.
        retry_on: Exception types that trigger another attempt.
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_before_retry,
        reraise=True,
    )


async def with_timeout(
    coro: Awaitable[T],
    timeout: float,
    error_message: str | None = None,
) -> T:
    """Await `coro`, raising our TimeoutError if it takes longer than `timeout` seconds."""
    try:
        return await asyncio.wait_for(coro, timeout=timeout)
    except builtins.TimeoutError as e:
        log.warning("ai_request_timeout", timeout=timeout)
        raise TimeoutError(error_message or f"Timed out after {timeout}s") from e
