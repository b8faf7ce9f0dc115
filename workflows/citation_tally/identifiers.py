"""arXiv identifier extraction from locators and free text.

Citation text is unstructured (reference lists, inline mentions, journal
refs), so several overlapping loose patterns are tried in order and every
raw match must then pass the strict NNNN.NNNN(N) check. Loose patterns buy
recall; the strict gate restores precision.
"""

import re
from typing import Optional

from .types import ABS_URL_TEMPLATE

_STRICT_ID_RE = re.compile(r"\d{4}\.\d{4,5}")

# Single identifier in a paper page address, optional version suffix
_LOCATOR_RE = re.compile(
    r"arxiv\.org/(?:abs|pdf)/(\d{4}\.\d{4,5})(?:v\d+)?(?!\d)",
    re.IGNORECASE,
)

# Ordered heuristics; group 1 is the candidate identifier
_CITATION_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"arXiv:\s?(\d+\.\d+)", re.IGNORECASE),  # arXiv:1234.5678
    re.compile(r"\[(\d+\.\d+)\]"),  # [1234.5678]
    re.compile(r"\[arXiv:(\d{4}\.\d{4,5})\]", re.IGNORECASE),  # [arXiv:1234.56789]
    re.compile(r"(\d+\.\d+)"),  # 1234.5678
    re.compile(r"arxiv\.org/abs/(\d+\.\d+)", re.IGNORECASE),  # arxiv.org/abs/1234.5678
)


def is_valid_identifier(candidate: str) -> bool:
    """True if candidate is exactly NNNN.NNNN or NNNN.NNNNN."""
    return _STRICT_ID_RE.fullmatch(candidate) is not None


def extract_identifier(locator: str) -> Optional[str]:
    """Pull the identifier out of an arxiv.org/abs/<id> (or /pdf/<id>) address.

    Returns None when the locator holds no well-formed identifier.
    """
    if not locator:
        return None
    match = _LOCATOR_RE.search(locator)
    return match.group(1) if match else None


def find_identifiers(text: str) -> list[str]:
    """Identifiers mentioned in text, deduplicated, in first-seen order.

    Order follows pattern priority, then position within the text.
    """
    found: dict[str, None] = {}
    if not text:
        return []
    for pattern in _CITATION_PATTERNS:
        for match in pattern.finditer(text):
            candidate = match.group(1)
            if is_valid_identifier(candidate):
                found.setdefault(candidate, None)
    return list(found)


def extract_identifiers(text: str) -> set[str]:
    """Set of well-formed identifiers found anywhere in text."""
    return set(find_identifiers(text))


def abs_url(arxiv_id: str) -> str:
    """Canonical abstract page address for an identifier."""
    return ABS_URL_TEMPLATE.format(arxiv_id=arxiv_id)
