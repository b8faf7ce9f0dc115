"""
arXiv export API access.

arXiv serves paper metadata as an Atom feed keyed by identifier.
Provides: ArxivClient, ArxivEntry, parse_entry_feed
"""

from .client import ArxivClient
from .errors import ArxivError, ArxivNotFoundError, ArxivParseError
from .models import ArxivEntry
from .parsing import parse_entry_feed

__all__ = [
    "ArxivClient",
    "ArxivEntry",
    "ArxivError",
    "ArxivNotFoundError",
    "ArxivParseError",
    "parse_entry_feed",
]
