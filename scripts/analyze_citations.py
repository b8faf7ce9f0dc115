#!/usr/bin/env python3
"""
Rank the papers most often reached through an arXiv paper's citations.

This script:
1. Extracts the arXiv identifier from the given abstract page URL
2. Follows cited arXiv identifiers recursively up to --depth levels
3. Prints the most frequent titles with their counts

Usage:
    python scripts/analyze_citations.py https://arxiv.org/abs/1706.03762
    python scripts/analyze_citations.py https://arxiv.org/abs/1706.03762 --depth 2 --limit 20
    python scripts/analyze_citations.py https://arxiv.org/abs/1706.03762 --no-cache
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import configure_logging
from core.logging import end_run
from workflows.citation_tally import InMemoryPaperCache, analyze, format_report
from workflows.citation_tally.types import DEFAULT_MAX_DEPTH, MAX_MAX_DEPTH, MIN_MAX_DEPTH

logger = logging.getLogger("scripts.analyze_citations")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Count recursively cited arXiv papers",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("url", help="arXiv abstract page, e.g. https://arxiv.org/abs/1234.5678")
    parser.add_argument(
        "--depth",
        type=int,
        default=DEFAULT_MAX_DEPTH,
        help=f"Citation levels to follow ({MIN_MAX_DEPTH}-{MAX_MAX_DEPTH}, default: {DEFAULT_MAX_DEPTH})",
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=10,
        help="Number of titles to print (default: 10)",
    )
    parser.add_argument(
        "--no-cache",
        action="store_true",
        help="Do not read or write the persistent paper cache",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    url = args.url.strip()

    if not url:
        print("Please enter an arXiv paper URL", file=sys.stderr)
        return 2
    if "arxiv.org/abs/" not in url:
        print(
            "Please enter a valid arXiv paper URL (e.g., https://arxiv.org/abs/1234.5678)",
            file=sys.stderr,
        )
        return 2

    configure_logging(f"analyze-{url.rsplit('/', 1)[-1]}")
    try:
        cache = InMemoryPaperCache() if args.no_cache else None
        result = asyncio.run(analyze(url, args.depth, cache=cache))
    finally:
        end_run()

    print(format_report(result, limit=args.limit))
    if not result.ok:
        logger.error(f"Analysis of {url} failed: {result.error}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
