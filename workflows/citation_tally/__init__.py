"""Citation tally: recursive arXiv citation counting from one root paper."""

from .api import analyze
from .cache_store import FilePaperCache, InMemoryPaperCache, PaperCache
from .fetcher import FetchStats, PaperFetcher, PaperSource
from .identifiers import abs_url, extract_identifier, extract_identifiers, find_identifiers
from .report import format_report, top_cited
from .tally import fold_tallies, merge_tallies
from .traversal import CitationTraversal
from .types import AnalysisResult, CitationTally, PaperRecord
from .visited import VisitedSet

__all__ = [
    "analyze",
    "AnalysisResult",
    "CitationTally",
    "CitationTraversal",
    "FetchStats",
    "FilePaperCache",
    "InMemoryPaperCache",
    "PaperCache",
    "PaperFetcher",
    "PaperRecord",
    "PaperSource",
    "VisitedSet",
    "abs_url",
    "extract_identifier",
    "extract_identifiers",
    "find_identifiers",
    "fold_tallies",
    "format_report",
    "merge_tallies",
    "top_cited",
]
