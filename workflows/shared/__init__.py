"""Shared utilities for citation workflows."""

from .async_utils import chunked, run_in_batches
from .persistent_cache import CacheWriteError, get_cached, set_cached
from .retry_utils import RetryExhaustedError, pacing_delay, with_paced_retry

__all__ = [
    # Concurrency
    "chunked",
    "run_in_batches",
    # Persistent cache
    "CacheWriteError",
    "get_cached",
    "set_cached",
    # Retry
    "RetryExhaustedError",
    "pacing_delay",
    "with_paced_retry",
]
