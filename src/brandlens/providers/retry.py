"""Generic retry combinator for async calls."""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

RetryCallback = Callable[[int, BaseException], None]
"""Called with (attempt_number, error) before each retry sleep."""


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    *,
    max_attempts: int = 3,
    delay: float = 2.0,
    exponential: bool = False,
    on_retry: RetryCallback | None = None,
) -> T:
    """Await ``fn()`` until it succeeds or ``max_attempts`` calls have failed.

    Any ``Exception`` is retried.  The delay is fixed unless ``exponential``
    is set, in which case it doubles after each failure.  The final error is
    re-raised unchanged.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(1, max_attempts + 1):
        try:
            return await fn()
        except Exception as exc:
            if attempt == max_attempts:
                raise
            wait = delay * (2 ** (attempt - 1)) if exponential else delay
            logger.warning(
                "Attempt %d/%d failed, retrying in %.1fs: %s",
                attempt, max_attempts, wait, exc,
            )
            if on_retry:
                on_retry(attempt, exc)
            await asyncio.sleep(wait)

    raise AssertionError("unreachable")  # pragma: no cover
