"""Bounded retry with pluggable backoff."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Backoff = Callable[[int], float]


def linear_backoff(base_delay: float) -> Backoff:
    """Return a backoff that waits ``attempt * base_delay`` seconds."""

    def _delay(attempt: int) -> float:
        return attempt * base_delay

    return _delay


async def retry_async(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int,
    backoff: Backoff,
    should_retry: Callable[[BaseException], bool],
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    on_retry: Callable[[int, float, BaseException], None] | None = None,
) -> T:
    """Await *operation* until it succeeds or the attempt budget is spent.

    Parameters
    ----------
    operation:
        Zero-argument coroutine factory; called once per attempt.
    max_attempts:
        Total number of calls allowed, including the first.
    backoff:
        Maps the 1-based index of the failed attempt to a delay in seconds.
    should_retry:
        Predicate deciding whether an exception is transient.  Anything
        it rejects is re-raised immediately.
    sleep:
        Awaitable sleep, injectable for tests.
    on_retry:
        Optional hook called as ``on_retry(attempt, delay, exc)`` before
        each wait.

    Raises
    ------
    The last exception raised by *operation* once the budget is exhausted
    or the exception is not retryable.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    attempt = 1
    while True:
        try:
            return await operation()
        except Exception as exc:
            if attempt >= max_attempts or not should_retry(exc):
                raise
            delay = backoff(attempt)
            if on_retry is not None:
                on_retry(attempt, delay, exc)
            else:
                logger.warning("Retry %d/%d in %.1fs: %s", attempt, max_attempts, delay, exc)
            await sleep(delay)
            attempt += 1
