"""Retry logic with exponential backoff for read-only gateway calls.

Writes are never retried here: a ledger call whose response was lost has
an unknown outcome and is reconciled by the caller instead.
"""

import asyncio
import random
from typing import Awaitable, Callable, TypeVar

import httpx

# Retryable HTTP status codes
RETRYABLE_STATUS_CODES = {502, 503, 504}

# Retryable exceptions
RETRYABLE_EXCEPTIONS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.ReadTimeout,
    httpx.PoolTimeout,
)

T = TypeVar("T")


def calculate_backoff(
    attempt: int,
    base_delay: float = 0.25,
    max_delay: float = 5.0,
    jitter: bool = True,
) -> float:
    """Calculate exponential backoff delay with optional jitter.

    Args:
        attempt: The current attempt number (0-indexed)
        base_delay: Base delay in seconds
        max_delay: Maximum delay in seconds
        jitter: Whether to add random jitter

    Returns:
        Delay in seconds
    """
    delay = min(base_delay * (2**attempt), max_delay)
    if jitter:
        delay = delay * (0.5 + random.random())
    return delay


def is_retryable(exception: Exception) -> bool:
    """Check if the exception is worth another attempt."""
    if isinstance(exception, RETRYABLE_EXCEPTIONS):
        return True
    if isinstance(exception, httpx.HTTPStatusError):
        return exception.response.status_code in RETRYABLE_STATUS_CODES
    return False


async def retry_async(
    func: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 0.25,
    max_delay: float = 5.0,
) -> T:
    """Await ``func()`` until it succeeds or a non-retryable error occurs."""
    for attempt in range(max_retries + 1):
        try:
            return await func()
        except Exception as e:
            if not is_retryable(e) or attempt == max_retries:
                raise
            await asyncio.sleep(calculate_backoff(attempt, base_delay, max_delay))
    raise RuntimeError("Unexpected state in retry logic")
