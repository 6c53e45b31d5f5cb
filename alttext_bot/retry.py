"""Bounded retry wrapper for outbound calls.

Only rate limiting (429) and timeouts are retried. Rate-limited attempts
back off longer than timed-out ones. Exhaustion or a non-retryable
failure yields None instead of raising.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
)

from alttext_bot.errors import AltTextError, GenerationTimeout, RateLimited, RetryableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryingCaller:
    """Runs a coroutine factory with per-attempt timeouts and retries."""

    def __init__(
        self,
        name: str,
        timeout: float,
        max_attempts: int = 3,
        rate_limit_delay: float = 10.0,
        timeout_delay: float = 5.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.name = name
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.rate_limit_delay = rate_limit_delay
        self.timeout_delay = timeout_delay
        self._sleep = sleep

    def _backoff(self, retry_state: RetryCallState) -> float:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(error, RateLimited):
            return self.rate_limit_delay
        return self.timeout_delay

    def _log_retry(self, retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        remaining = self.max_attempts - retry_state.attempt_number
        delay = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f"[{self.name}] attempt {retry_state.attempt_number}/{self.max_attempts} "
            f"failed: {error!r}; retrying in {delay:.0f}s ({remaining} retries remaining)"
        )

    async def _attempt(self, call: Callable[[], Awaitable[T]]) -> T:
        try:
            return await asyncio.wait_for(call(), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise GenerationTimeout(f"Request timeout after {self.timeout:.0f}s") from e

    async def call(self, call: Callable[[], Awaitable[T]]) -> T | None:
        """Return the call's result, or None once retries are exhausted."""
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            retry=retry_if_exception_type(RetryableError),
            wait=self._backoff,
            sleep=self._sleep,
            before_sleep=self._log_retry,
            reraise=True,
        )
        try:
            return await retrying(self._attempt, call)
        except RetryableError as e:
            logger.error(f"[{self.name}] failed after {self.max_attempts} attempts: {e}")
        except (AltTextError, httpx.HTTPError) as e:
            logger.error(f"[{self.name}] failed without retry: {e}")
        return None
