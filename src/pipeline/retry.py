"""Fixed-attempt retry with exponential backoff for model calls (async).

The whole attempt (model call, JSON extraction, schema validation) is retried,
so a malformed answer costs one attempt just like a transport failure. The
last failure is re-raised unchanged; callers cannot tell from the exception
alone how many attempts were made, only from the attempt logs.
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from src.utils.logger import logger

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[None]]


def backoff_delay(attempt: int, base_delay: float = 1.0) -> float:
    """Delay after failed attempt `attempt` (1-based): base, 2*base, 4*base, ..."""
    return base_delay * (2 ** (attempt - 1))


async def invoke_with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    sleep: Optional[SleepFunc] = None,
    request_id: Optional[str] = None,
) -> T:
    """Run `operation` up to `max_attempts` times.

    Args:
        operation: Zero-argument coroutine function performing one attempt.
        max_attempts: Total attempts, including the first (default: 3).
        base_delay: Delay in seconds after the first failure, doubled after each
            further failure (default: 1 -> waits 1s, then 2s).
        sleep: Awaitable sleep used between attempts (default: asyncio.sleep).
        request_id: Included in log records.

    Returns:
        The first successful result.

    Raises:
        Exception: The exception of the final attempt, unmodified.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got: {max_attempts}")
    sleep = sleep or asyncio.sleep
    extra = {"request_id": request_id} if request_id else {}

    for attempt in range(1, max_attempts + 1):
        try:
            logger.debug(f"Attempt {attempt}/{max_attempts}", extra={**extra, "attempt": attempt})
            return await operation()
        except Exception as e:
            will_retry = attempt < max_attempts
            logger.warning(
                f"Attempt {attempt}/{max_attempts} failed: {e!r}"
                + (f", retrying in {backoff_delay(attempt, base_delay):g}s" if will_retry else ""),
                extra={**extra, "attempt": attempt},
            )
            if not will_retry:
                raise
            await sleep(backoff_delay(attempt, base_delay))

    # Unreachable: the loop either returns or re-raises on the final attempt
    raise RuntimeError("All retry attempts failed")
