"""Retry utilities for async operations."""

import asyncio
import logging
from typing import Awaitable, Callable, Type, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class RetryExhaustedError(RuntimeError):
    """Every attempt failed with a retryable error."""

    def __init__(self, message: str, attempts: int):
        self.attempts = attempts
        super().__init__(message)


def pacing_delay(base_delay: float, attempt: int) -> float:
    """Delay before attempt N (0-based): one base unit, then two, then three."""
    return base_delay * (1 + attempt)


async def with_paced_retry(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    base_delay: float = 1.0,
    retry_on: Type[Exception] | tuple[Type[Exception], ...] = Exception,
    sleep: Sleep = asyncio.sleep,
    error_message: str = "Operation failed after {attempts} attempts",
) -> T:
    """Execute async function, pacing every call and retrying on `retry_on`.

    Waits pacing_delay(base_delay, attempt) before each attempt, including
    the first. Errors outside `retry_on` propagate immediately. After
    max_retries + 1 calls, raises RetryExhaustedError chained from the last
    retryable error.
    """
    attempts = max_retries + 1
    last_error: Exception | None = None
    for attempt in range(attempts):
        delay = pacing_delay(base_delay, attempt)
        if delay > 0:
            await sleep(delay)
        try:
            return await fn()
        except retry_on as e:
            last_error = e
            logger.debug(f"Retryable failure on attempt {attempt + 1}/{attempts}: {e}")
    raise RetryExhaustedError(error_message.format(attempts=attempts), attempts) from last_error
