"""Public API for running a citation tally."""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from arxiv_tools import ArxivClient

from .cache_store import FilePaperCache, PaperCache
from .fetcher import PaperFetcher
from .identifiers import extract_identifier
from .traversal import CitationTraversal
from .types import (
    BATCH_DELAY_SECONDS,
    BATCH_SIZE,
    DEFAULT_MAX_DEPTH,
    FETCHER_AND_CACHE_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    MAX_MAX_DEPTH,
    MIN_MAX_DEPTH,
    NO_CITATIONS_MESSAGE,
    ROOT_FETCH_FAILED_MESSAGE,
    AnalysisResult,
    CitationTally,
)

logger = logging.getLogger(__name__)


async def analyze(
    root_locator: str,
    max_depth: int = DEFAULT_MAX_DEPTH,
    *,
    fetcher: Optional[PaperFetcher] = None,
    cache: Optional[PaperCache] = None,
    batch_size: int = BATCH_SIZE,
    batch_delay: float = BATCH_DELAY_SECONDS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AnalysisResult:
    """Count how often each title appears in the citation graph below a paper.

    Args:
        root_locator: Paper page address, e.g. https://arxiv.org/abs/1706.03762
        max_depth: Citation levels to follow below the root (1-10)
        fetcher: Preconfigured fetcher; by default an ArxivClient with the
            persistent file cache (or `cache`, if given) is used
        cache: Cache for the default fetcher. Mutually exclusive with
            `fetcher`, which already owns its cache
        batch_size: Sibling papers fetched concurrently per group
        batch_delay: Seconds between groups
        sleep: Delay function, injectable for tests

    Returns:
        AnalysisResult with a tally, or an error message for a bad locator,
        an out-of-range depth, both fetcher and cache given, a root paper
        that could not be fetched, an empty tally or an unexpected failure.
        Never raises.
    """
    result = AnalysisResult(root_locator=root_locator, max_depth=max_depth)

    if fetcher is not None and cache is not None:
        result.error = FETCHER_AND_CACHE_MESSAGE
        return result

    if not MIN_MAX_DEPTH <= max_depth <= MAX_MAX_DEPTH:
        result.error = f"max_depth must be between {MIN_MAX_DEPTH} and {MAX_MAX_DEPTH}, got {max_depth}"
        return result

    root_id = extract_identifier(root_locator)
    if root_id is None:
        result.error = (
            f"Could not find an arXiv identifier in {root_locator!r}. "
            "Please enter a valid arXiv paper URL (e.g., https://arxiv.org/abs/1234.5678)"
        )
        return result

    logger.info(f"Analyzing citations of {root_id} to depth {max_depth}")

    try:
        if fetcher is not None:
            tally, traversal = await _run_traversal(
                fetcher, root_locator, max_depth, batch_size, batch_delay, sleep
            )
        else:
            async with ArxivClient() as client:
                fetcher = PaperFetcher(
                    client, cache if cache is not None else FilePaperCache(), sleep=sleep
                )
                tally, traversal = await _run_traversal(
                    fetcher, root_locator, max_depth, batch_size, batch_delay, sleep
                )
                logger.info(f"Fetch stats for {root_id}: {fetcher.stats}")
    except Exception as e:
        logger.error(f"Analysis error for {root_locator}: {e}", exc_info=True)
        result.error = str(e) or GENERIC_FAILURE_MESSAGE
        return result

    result.expanded_count = traversal.expanded_count
    if not tally:
        reason = fetcher.failure_reasons.get(root_id)
        if reason is not None:
            logger.warning(f"Root paper {root_id} could not be fetched: {reason}")
            result.error = ROOT_FETCH_FAILED_MESSAGE.format(arxiv_id=root_id, reason=reason)
        else:
            logger.warning(f"No citations found for {root_id}")
            result.error = NO_CITATIONS_MESSAGE
        return result

    result.tally = tally
    return result


async def _run_traversal(
    fetcher: PaperFetcher,
    root_locator: str,
    max_depth: int,
    batch_size: int,
    batch_delay: float,
    sleep: Callable[[float], Awaitable[None]],
) -> tuple[CitationTally, CitationTraversal]:
    traversal = CitationTraversal(
        fetcher, batch_size=batch_size, batch_delay=batch_delay, sleep=sleep
    )
    tally = await traversal.run(root_locator, max_depth)
    return tally, traversal
