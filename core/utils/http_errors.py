"""HTTP error translation for async clients."""

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

# The arXiv export API throttles with 503 + Retry-After as well as 429
RATE_LIMIT_STATUS_CODES = frozenset({429, 503})


class HttpRequestError(Exception):
    """Request failed: transport error or unexpected status."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class RateLimitedError(HttpRequestError):
    """Remote service asked us to slow down; safe to retry later."""

    def __init__(self, message: str, status_code: int, retry_after: str | None = None):
        self.retry_after = retry_after
        super().__init__(message, status_code=status_code)


async def safe_http_request(
    client: httpx.AsyncClient,
    method: str,
    path: str,
    **kwargs: Any,
) -> httpx.Response:
    """
    Make HTTP request, translating every failure into HttpRequestError.

    Args:
        client: httpx.AsyncClient instance
        method: HTTP method (GET, POST, etc.)
        path: Request path
        **kwargs: Additional arguments for request

    Returns:
        Response object with a 2xx status

    Raises:
        RateLimitedError: On 429/503 responses
        HttpRequestError: On any other status, connection error or timeout
    """
    try:
        response = await client.request(method, path, **kwargs)
    except httpx.TimeoutException as e:
        logger.warning(f"Request timeout for {client.base_url}{path}: {e}")
        raise HttpRequestError(f"Request timeout: {e}") from e
    except httpx.HTTPError as e:
        logger.warning(f"Connection failed to {client.base_url}{path}: {e}")
        raise HttpRequestError(f"Connection failed: {e}") from e

    if response.status_code in RATE_LIMIT_STATUS_CODES:
        retry_after = response.headers.get("retry-after")
        logger.info(
            f"Rate limited by {client.base_url}{path} "
            f"(HTTP {response.status_code}, retry-after={retry_after})"
        )
        raise RateLimitedError(
            f"HTTP {response.status_code}: rate limited",
            status_code=response.status_code,
            retry_after=retry_after,
        )

    if not response.is_success:
        logger.warning(f"HTTP {response.status_code} error for {client.base_url}{path}")
        raise HttpRequestError(
            f"HTTP {response.status_code}: {response.text[:200]}",
            status_code=response.status_code,
        )

    return response
