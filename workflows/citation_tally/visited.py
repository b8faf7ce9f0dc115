"""Per-run set of identifiers already claimed for expansion."""

import logging

logger = logging.getLogger(__name__)


class VisitedSet:
    """Identifiers claimed during one traversal run.

    claim() tests membership and inserts in one synchronous step. Under
    asyncio no other coroutine can run between the two, so two branches can
    never both claim the same identifier. Create one per run; never share
    between concurrent traversals.
    """

    def __init__(self) -> None:
        self._claimed: set[str] = set()

    def claim(self, arxiv_id: str) -> bool:
        """Mark arxiv_id as visited. False if it was already claimed."""
        if arxiv_id in self._claimed:
            logger.debug(f"Skipping {arxiv_id}: already visited")
            return False
        self._claimed.add(arxiv_id)
        return True

    def __contains__(self, arxiv_id: object) -> bool:
        return arxiv_id in self._claimed

    def __len__(self) -> int:
        return len(self._claimed)
