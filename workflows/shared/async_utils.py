"""Async utilities for concurrent processing."""

import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")

logger = logging.getLogger(__name__)


def chunked(items: Sequence[T], size: int) -> List[Sequence[T]]:
    """Split items into consecutive groups of at most `size`."""
    if size < 1:
        raise ValueError(f"Group size must be positive, got {size}")
    return [items[i:i + size] for i in range(0, len(items), size)]


async def run_in_batches(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    batch_size: int = 3,
    batch_delay: float = 0.0,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> List[R]:
    """Run `worker` over items one group at a time.

    Members of a group run concurrently and the whole group is awaited
    before the next one starts. `batch_delay` is slept between consecutive
    groups, never before the first or after the last. Results keep the
    order of `items`.
    """
    results: List[R] = []
    batches = chunked(items, batch_size)
    logger.debug(f"Running {len(items)} items in {len(batches)} groups of <= {batch_size}")
    for index, batch in enumerate(batches):
        if index > 0 and batch_delay > 0:
            await sleep(batch_delay)
        results.extend(await asyncio.gather(*(worker(item) for item in batch)))
    return results

