"""Core utilities for async HTTP clients and error handling."""

from .async_context import AsyncContextManager
from .async_http_client import BaseAsyncHttpClient
from .http_errors import (
    RATE_LIMIT_STATUS_CODES,
    HttpRequestError,
    RateLimitedError,
    safe_http_request,
)

__all__ = [
    "AsyncContextManager",
    "BaseAsyncHttpClient",
    "HttpRequestError",
    "RateLimitedError",
    "RATE_LIMIT_STATUS_CODES",
    "safe_http_request",
]
