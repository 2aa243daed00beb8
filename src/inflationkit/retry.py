"""Bounded exponential-backoff retry for data fetches."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from inflationkit.config import RetryConfig
from inflationkit.exceptions import DataSourceError, DataValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Retry policy for base-series fetches."""

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 8.0

    @classmethod
    def from_config(cls, retry: RetryConfig) -> RetryPolicy:
        max_attempts = max(1, min(10, int(retry.max_attempts or 1)))
        base_delay = max(0.0, float(retry.base_delay_seconds))
        max_delay = max(base_delay, max(0.0, float(retry.max_delay_seconds)))
        return cls(
            max_attempts=max_attempts,
            base_delay_seconds=base_delay,
            max_delay_seconds=max_delay,
        )

    def delay_for(self, attempt: int) -> float:
        """Delay after the given 1-indexed failed attempt: 1s, 2s, 4s, ..."""
        return min(self.max_delay_seconds, self.base_delay_seconds * (2 ** (attempt - 1)))


def is_retryable_fetch_error(error: BaseException) -> bool:
    """Return True when a fetch failure is likely transient."""
    if isinstance(error, DataValidationError):
        return False
    if isinstance(error, DataSourceError):
        return error.transient
    return not isinstance(error, (asyncio.CancelledError, KeyboardInterrupt, SystemExit))


async def call_with_retry(
    invoke: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy,
    should_retry: Callable[[BaseException], bool] | None = None,
    on_failure: Callable[[int, int, BaseException, int], None] | None = None,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """Invoke an async fetch, retrying transient failures with backoff."""
    decider = should_retry or is_retryable_fetch_error
    attempts = deque(range(1, policy.max_attempts + 1))
    last_error: BaseException | None = None

    while attempts:
        attempt = attempts.popleft()
        try:
            return await invoke()
        except Exception as error:
            last_error = error
            remaining = len(attempts)
            retryable = decider(error)
            if on_failure is not None:
                on_failure(attempt, policy.max_attempts, error, remaining)
            if not retryable or remaining <= 0:
                raise
            delay = policy.delay_for(attempt)
            logger.debug(
                "Attempt %d/%d failed (%s); retrying in %.1fs",
                attempt, policy.max_attempts, error, delay,
            )
            if delay > 0:
                await sleep(delay)

    if last_error is not None:
        raise last_error
    raise RuntimeError("retry queue exhausted without attempts")
