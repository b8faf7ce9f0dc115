"""Persistent file-based JSON cache for remote lookups.

Entries never expire; they live until the cache directory is removed.
"""

import hashlib
import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

CACHE_DIR = Path(
    os.getenv("CITATION_CACHE_DIR", str(Path.home() / ".cache" / "citation-tally"))
)

# Global cache disable flag - set CITATION_CACHE_DISABLED=1 to disable all caching
CACHE_DISABLED = os.getenv("CITATION_CACHE_DISABLED", "").lower() in ("1", "true", "yes")


class CacheWriteError(Exception):
    """Cache entry could not be written."""


def _get_cache_path(cache_type: str, key: str, cache_dir: Optional[Path] = None) -> Path:
    """Get cache file path for a given type and key."""
    cache_subdir = (cache_dir or CACHE_DIR) / cache_type
    cache_subdir.mkdir(parents=True, exist_ok=True)

    key_hash = hashlib.sha256(key.encode()).hexdigest()[:16]
    return cache_subdir / f"{key_hash}.json"


def get_cached(
    cache_type: str,
    key: str,
    cache_dir: Optional[Path] = None,
) -> Optional[Any]:
    """Get cached value.

    Args:
        cache_type: Cache category (e.g., 'arxiv_papers')
        key: Cache key (will be hashed)
        cache_dir: Override for CACHE_DIR

    Returns:
        Cached value or None if not found/unreadable
    """
    if CACHE_DISABLED:
        return None

    cache_path = _get_cache_path(cache_type, key, cache_dir)
    if not cache_path.exists():
        return None

    try:
        with open(cache_path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Failed to read cache {cache_path}: {e}")
        return None


def set_cached(
    cache_type: str,
    key: str,
    value: Any,
    cache_dir: Optional[Path] = None,
) -> None:
    """Save a JSON-serializable value to cache.

    Args:
        cache_type: Cache category (e.g., 'arxiv_papers')
        key: Cache key (will be hashed)
        value: Value to cache
        cache_dir: Override for CACHE_DIR

    Raises:
        CacheWriteError: If the entry could not be serialized or written
    """
    if CACHE_DISABLED:
        return

    try:
        cache_path = _get_cache_path(cache_type, key, cache_dir)
        payload = json.dumps(value)
        with open(cache_path, "w", encoding="utf-8") as f:
            f.write(payload)
    except (OSError, TypeError, ValueError) as e:
        raise CacheWriteError(f"Failed to write cache entry {cache_type}/{key}: {e}") from e

    logger.debug(f"Cached to {cache_path}")
