"""Data transformation functions for arXiv Atom feeds."""

import re
from xml.etree import ElementTree as ET

from .errors import ArxivNotFoundError, ArxivParseError
from .models import ArxivEntry

NS = {
    "atom": "http://www.w3.org/2005/Atom",
    "arxiv": "http://arxiv.org/schemas/atom",
}

_WHITESPACE_RE = re.compile(r"\s+")


def _normalize_whitespace(value: str | None) -> str:
    """Collapse the line wrapping arXiv puts into titles and abstracts."""
    if not value:
        return ""
    return _WHITESPACE_RE.sub(" ", value).strip()


def _optional_text(entry: ET.Element, path: str) -> str | None:
    return _normalize_whitespace(entry.findtext(path, default="", namespaces=NS)) or None


def parse_entry_feed(xml_text: str, arxiv_id: str) -> ArxivEntry:
    """Parse an id_list query feed into our model.

    The feed-level <title> ("ArXiv Query: ...") is ignored; only the first
    <entry> is read.

    Raises:
        ArxivNotFoundError: Feed has no entry, or the entry is arXiv's error stub
        ArxivParseError: Feed is not XML or the entry has no title
    """
    try:
        root = ET.fromstring(xml_text)
    except ET.ParseError as e:
        raise ArxivParseError(f"Malformed feed for {arxiv_id}: {e}", arxiv_id) from e

    entry = root.find("atom:entry", NS)
    if entry is None:
        raise ArxivNotFoundError(arxiv_id)

    # Unknown ids come back as an entry whose id is http://arxiv.org/api/errors#...
    entry_id = entry.findtext("atom:id", default="", namespaces=NS)
    if "arxiv.org/api/errors" in entry_id:
        raise ArxivNotFoundError(arxiv_id)

    title = _normalize_whitespace(entry.findtext("atom:title", default="", namespaces=NS))
    if not title:
        raise ArxivParseError(f"Missing title for {arxiv_id}", arxiv_id)

    return ArxivEntry(
        arxiv_id=arxiv_id,
        title=title,
        abstract=_normalize_whitespace(
            entry.findtext("atom:summary", default="", namespaces=NS)
        ),
        comment=_optional_text(entry, "arxiv:comment"),
        journal_ref=_optional_text(entry, "arxiv:journal_ref"),
        published=_optional_text(entry, "atom:published"),
    )
