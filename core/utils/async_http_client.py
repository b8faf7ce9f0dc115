"""Base async HTTP client with lazy initialization and context manager support."""

import logging
import os
from typing import Optional

import httpx

from .async_context import AsyncContextManager

logger = logging.getLogger(__name__)


class BaseAsyncHttpClient(AsyncContextManager):
    """
    Base async HTTP client with lazy initialization.

    Provides:
    - Lazy httpx.AsyncClient initialization
    - Base URL from argument, environment variable or default
    - Context manager support and cleanup
    - Optional transport injection (httpx.MockTransport in tests)
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        base_url_env_var: Optional[str] = None,
        base_url_default: str = "http://localhost:8000",
        headers: Optional[dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = (
            base_url
            or os.environ.get(base_url_env_var or "", "")
            or base_url_default
        ).rstrip("/")
        self.timeout = timeout
        self.headers = headers or {}
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            logger.debug(f"Closed HTTP client for {self.base_url}")
        self._client = None
