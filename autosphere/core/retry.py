"""Backoff for idempotent calls to the identity provider.

Entity-store writes are never retried here: a failed transition surfaces
to the caller, who decides whether to try again.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_ATTEMPTS = 2
DEFAULT_BASE_DELAY = 0.2  # seconds


def _calculate_delay(attempt: int, base_delay: float = DEFAULT_BASE_DELAY) -> float:
    """Delay before the retry that follows zero-indexed ``attempt``."""
    return base_delay * (2**attempt)


async def with_retry[T](
    fn: Callable[[], Awaitable[T]],
    attempts: int = DEFAULT_ATTEMPTS,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    base_delay: float = DEFAULT_BASE_DELAY,
) -> T:
    """Await ``fn()`` up to ``attempts`` times, sleeping between failures.

    Only ``exceptions`` trigger another attempt; anything else propagates
    at once. When every attempt fails the last error is re-raised.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    for attempt in range(attempts - 1):
        try:
            return await fn()
        except exceptions as e:
            delay = _calculate_delay(attempt, base_delay)
            logger.debug(
                "Attempt %d/%d failed with %s; next in %.2fs",
                attempt + 1,
                attempts,
                type(e).__name__,
                delay,
            )
            await asyncio.sleep(delay)

    return await fn()
