"""Paper record caches keyed by arXiv identifier.

The fetcher only needs get/set; records are treated as permanently valid,
so neither implementation expires entries.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from workflows.shared.persistent_cache import get_cached, set_cached

from .types import PAPER_CACHE_NAMESPACE, PaperRecord

logger = logging.getLogger(__name__)


class PaperCache(Protocol):
    """Storage collaborator for fetched paper records."""

    async def get(self, arxiv_id: str) -> Optional[PaperRecord]: ...

    async def set(self, arxiv_id: str, record: PaperRecord) -> None: ...


class InMemoryPaperCache:
    """Process-local cache; also the test double for PaperCache."""

    def __init__(self) -> None:
        self._records: dict[str, PaperRecord] = {}

    async def get(self, arxiv_id: str) -> Optional[PaperRecord]:
        return self._records.get(arxiv_id)

    async def set(self, arxiv_id: str, record: PaperRecord) -> None:
        self._records[arxiv_id] = record

    def __contains__(self, arxiv_id: object) -> bool:
        return arxiv_id in self._records

    def __len__(self) -> int:
        return len(self._records)


class FilePaperCache:
    """JSON files under CITATION_CACHE_DIR/arxiv_papers, one per paper."""

    def __init__(
        self,
        cache_dir: Optional[Path] = None,
        namespace: str = PAPER_CACHE_NAMESPACE,
    ):
        self.cache_dir = cache_dir
        self.namespace = namespace

    async def get(self, arxiv_id: str) -> Optional[PaperRecord]:
        payload = get_cached(
            self.namespace,
            arxiv_id,
            cache_dir=self.cache_dir,
        )
        if payload is None:
            return None
        try:
            return PaperRecord.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Ignoring unreadable cache entry for {arxiv_id}: {e}")
            return None

    async def set(self, arxiv_id: str, record: PaperRecord) -> None:
        """Persist a record. Raises CacheWriteError on I/O failure."""
        set_cached(
            self.namespace,
            arxiv_id,
            record.model_dump(mode="json"),
            cache_dir=self.cache_dir,
        )
