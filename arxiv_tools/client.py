"""HTTP client for the arXiv export API."""

import logging
import os
from typing import Optional

import httpx

from core.utils import BaseAsyncHttpClient, safe_http_request

from .models import ArxivEntry
from .parsing import parse_entry_feed

logger = logging.getLogger(__name__)

ARXIV_API_BASE_URL = "https://export.arxiv.org"
DEFAULT_TIMEOUT_SECONDS = float(os.getenv("ARXIV_TIMEOUT_SECONDS", "30"))
USER_AGENT = "citation-tally/0.1 (+https://arxiv.org/help/api)"


class ArxivClient(BaseAsyncHttpClient):
    """Look up single papers through /api/query?id_list=<id>.

    Errors surface as exceptions so callers can tell throttling from
    terminal failures:
        RateLimitedError -- 429/503, retry later
        HttpRequestError -- transport error or other non-2xx
        ArxivNotFoundError / ArxivParseError -- 2xx but unusable feed
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(
            base_url=base_url,
            timeout=timeout,
            base_url_env_var="ARXIV_API_BASE_URL",
            base_url_default=ARXIV_API_BASE_URL,
            headers={"User-Agent": USER_AGENT},
            transport=transport,
        )

    async def get_entry(self, arxiv_id: str) -> ArxivEntry:
        """Fetch and parse metadata for one identifier."""
        client = await self._get_client()
        response = await safe_http_request(
            client,
            "GET",
            "/api/query",
            params={"id_list": arxiv_id, "max_results": 1},
        )
        entry = parse_entry_feed(response.text, arxiv_id)
        logger.debug(f"arXiv entry {arxiv_id}: {entry.title[:60]}")
        return entry
