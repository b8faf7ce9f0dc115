"""Cache-first paper lookups with paced retries on rate limiting."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Protocol

from pydantic import ValidationError

from arxiv_tools import ArxivEntry, ArxivError
from core.utils import HttpRequestError, RateLimitedError
from workflows.shared.retry_utils import RetryExhaustedError, with_paced_retry

from .cache_store import PaperCache
from .identifiers import find_identifiers
from .types import MAX_RETRIES, PACING_SECONDS, PaperRecord

logger = logging.getLogger(__name__)


class PaperSource(Protocol):
    """Remote bibliographic service (ArxivClient in production)."""

    async def get_entry(self, arxiv_id: str) -> ArxivEntry: ...


@dataclass
class FetchStats:
    """Counters for one fetcher instance."""

    cache_hits: int = 0
    remote_calls: int = 0
    successes: int = 0
    failures: int = 0
    cache_write_failures: int = 0


class PaperFetcher:
    """Resolve an identifier to a PaperRecord, or None on any failure.

    Cache hits are returned as-is. On a miss the remote call is preceded by
    a pacing delay of pacing_seconds * (1 + attempt); rate-limited responses
    are retried up to max_retries times, every other failure is final.
    Citations are found by scanning the entry's journal ref, comment, title
    and abstract for arXiv identifiers.
    """

    def __init__(
        self,
        source: PaperSource,
        cache: PaperCache,
        *,
        pacing_seconds: float = PACING_SECONDS,
        max_retries: int = MAX_RETRIES,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.source = source
        self.cache = cache
        self.pacing_seconds = pacing_seconds
        self.max_retries = max_retries
        self._sleep = sleep
        self.stats = FetchStats()
        self.failure_reasons: dict[str, str] = {}

    async def fetch_paper_data(self, arxiv_id: str) -> Optional[PaperRecord]:
        """Never raises; failures are logged and reported as None."""
        cached = await self._read_cache(arxiv_id)
        if cached is not None:
            self.stats.cache_hits += 1
            logger.debug(f"Cache hit for {arxiv_id}")
            return cached

        try:
            entry = await with_paced_retry(
                lambda: self._call_source(arxiv_id),
                max_retries=self.max_retries,
                base_delay=self.pacing_seconds,
                retry_on=RateLimitedError,
                sleep=self._sleep,
                error_message=f"Still rate limited after {{attempts}} attempts for {arxiv_id}",
            )
            record = PaperRecord(
                arxiv_id=arxiv_id,
                title=entry.title,
                cited_ids=tuple(find_identifiers(entry.citation_text())),
            )
        except RetryExhaustedError as e:
            return self._fail(arxiv_id, str(e))
        except (HttpRequestError, ArxivError) as e:
            return self._fail(arxiv_id, str(e))
        except ValidationError as e:
            return self._fail(arxiv_id, f"incomplete paper data: {e.error_count()} invalid field(s)")
        except Exception as e:
            logger.exception(f"Unexpected error fetching {arxiv_id}")
            return self._fail(arxiv_id, f"unexpected {type(e).__name__}: {e}")

        self.stats.successes += 1
        logger.info(f"Found {len(record.cited_ids)} citations for paper: {record.title}")
        await self._write_cache(arxiv_id, record)
        return record

    async def _call_source(self, arxiv_id: str) -> ArxivEntry:
        self.stats.remote_calls += 1
        return await self.source.get_entry(arxiv_id)

    async def _read_cache(self, arxiv_id: str) -> Optional[PaperRecord]:
        try:
            return await self.cache.get(arxiv_id)
        except Exception as e:
            logger.warning(f"Cache read failed for {arxiv_id}, fetching instead: {e}")
            return None

    async def _write_cache(self, arxiv_id: str, record: PaperRecord) -> None:
        try:
            await self.cache.set(arxiv_id, record)
        except Exception as e:
            self.stats.cache_write_failures += 1
            logger.warning(f"Cache write failed for {arxiv_id}: {e}")

    def _fail(self, arxiv_id: str, reason: str) -> None:
        self.stats.failures += 1
        self.failure_reasons[arxiv_id] = reason
        logger.warning(f"Error fetching paper data for {arxiv_id}: {reason}")
        return None
