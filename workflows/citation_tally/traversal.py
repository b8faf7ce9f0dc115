"""Depth-bounded, cycle-safe expansion of the arXiv citation graph.

Each run owns a VisitedSet: an identifier is claimed before its fetch, so
cycles and diamonds expand it once. Children of a paper are walked in
groups of `batch_size`; a group runs concurrently and is fully awaited
before `batch_delay` elapses and the next group starts. The result folds
every expanded paper's title into one tally.

Recursion depth is bounded by max_depth (at most 10 through analyze()),
so the async call chain stays shallow.
"""

import asyncio
import logging
from typing import Awaitable, Callable

from workflows.shared.async_utils import run_in_batches

from .fetcher import PaperFetcher
from .identifiers import abs_url, extract_identifier
from .tally import fold_tallies, merge_tallies
from .types import BATCH_DELAY_SECONDS, BATCH_SIZE, CitationTally
from .visited import VisitedSet

logger = logging.getLogger(__name__)


class CitationTraversal:
    """Tally titles reachable from a root paper through its citations."""

    def __init__(
        self,
        fetcher: PaperFetcher,
        *,
        batch_size: int = BATCH_SIZE,
        batch_delay: float = BATCH_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.fetcher = fetcher
        self.batch_size = batch_size
        self.batch_delay = batch_delay
        self._sleep = sleep
        self.expanded_count = 0

    async def run(self, root_locator: str, max_depth: int) -> CitationTally:
        """Traverse from root_locator with a fresh visited set.

        Afterwards expanded_count holds the number of papers whose record was
        fetched and tallied; claimed ids whose fetch failed are not counted.
        """
        visited = VisitedSet()
        self.expanded_count = 0
        tally = await self.traverse(root_locator, 0, max_depth, visited)
        logger.info(
            f"Traversal from {root_locator} (max_depth={max_depth}) expanded "
            f"{self.expanded_count} of {len(visited)} claimed papers, {len(tally)} distinct titles"
        )
        return tally

    async def traverse(
        self,
        locator: str,
        depth: int,
        max_depth: int,
        visited: VisitedSet,
    ) -> CitationTally:
        """Tally for the paper at locator and, below max_depth, its citations.

        Unparsable locators, already-visited papers and failed fetches all
        contribute an empty tally.
        """
        arxiv_id = extract_identifier(locator)
        if arxiv_id is None:
            logger.debug(f"No arXiv identifier in {locator!r}")
            return {}
        if not visited.claim(arxiv_id):
            return {}

        record = await self.fetcher.fetch_paper_data(arxiv_id)
        if record is None:
            return {}
        self.expanded_count += 1

        tally: CitationTally = {record.title: 1}
        if depth < max_depth and record.cited_ids:
            logger.debug(
                f"Expanding {len(record.cited_ids)} citations of {arxiv_id} at depth {depth + 1}"
            )
            subtally = await self.expand_children(
                list(record.cited_ids), depth + 1, max_depth, visited
            )
            tally = merge_tallies(tally, subtally)
        return tally

    async def expand_children(
        self,
        cited_ids: list[str],
        depth: int,
        max_depth: int,
        visited: VisitedSet,
    ) -> CitationTally:
        """Traverse cited papers group by group and sum their tallies."""

        async def visit(cited_id: str) -> CitationTally:
            return await self.traverse(abs_url(cited_id), depth, max_depth, visited)

        results = await run_in_batches(
            cited_ids,
            visit,
            batch_size=self.batch_size,
            batch_delay=self.batch_delay,
            sleep=self._sleep,
        )
        return fold_tallies(results)
