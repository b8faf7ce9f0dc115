"""Records, result types and tuning constants for citation tallies."""

import os
from datetime import datetime, timezone
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field

# Four digits, dot, four or five digits (post-2007 arXiv identifiers)
ARXIV_ID_PATTERN = r"^\d{4}\.\d{4,5}$"

ABS_URL_TEMPLATE = "https://arxiv.org/abs/{arxiv_id}"

DEFAULT_MAX_DEPTH = 5
MIN_MAX_DEPTH = 1
MAX_MAX_DEPTH = 10

BATCH_SIZE = int(os.getenv("CITATION_BATCH_SIZE", "3"))
BATCH_DELAY_SECONDS = float(os.getenv("CITATION_BATCH_DELAY_SECONDS", "2.0"))
PACING_SECONDS = float(os.getenv("ARXIV_PACING_SECONDS", "1.0"))
MAX_RETRIES = int(os.getenv("ARXIV_MAX_RETRIES", "3"))

PAPER_CACHE_NAMESPACE = "arxiv_papers"

NO_CITATIONS_MESSAGE = (
    "No citations found for this paper. "
    "Please check if the paper contains arXiv citations."
)
GENERIC_FAILURE_MESSAGE = "Failed to analyze citations"
ROOT_FETCH_FAILED_MESSAGE = "Could not fetch paper {arxiv_id} from arXiv: {reason}"
FETCHER_AND_CACHE_MESSAGE = "Pass either fetcher or cache to analyze(), not both"

ArxivId = Annotated[str, Field(pattern=ARXIV_ID_PATTERN)]

# Paper title -> number of expanded papers carrying that title
CitationTally = dict[str, int]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PaperRecord(BaseModel):
    """Title and outgoing citations of one paper, as fetched or cached."""

    model_config = ConfigDict(frozen=True)

    arxiv_id: ArxivId
    title: str = Field(min_length=1)
    cited_ids: tuple[ArxivId, ...] = ()  # may repeat; VisitedSet absorbs duplicates
    fetched_at: datetime = Field(default_factory=_utcnow)


class AnalysisResult(BaseModel):
    """Outcome of analyze(): a tally or an error message, never both."""

    root_locator: str
    max_depth: int
    tally: Optional[CitationTally] = None
    error: Optional[str] = None
    expanded_count: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None
