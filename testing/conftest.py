"""
Pytest configuration and shared fakes for citation tally tests.

Usage:
    pytest testing/
    pytest testing/test_traversal.py -k cycle
"""

import asyncio
from collections import Counter
from collections.abc import Generator
from typing import Union

import pytest

from arxiv_tools import ArxivEntry, ArxivNotFoundError
from core.logging import end_run, start_run
from workflows.citation_tally import InMemoryPaperCache, PaperFetcher

# A scripted response is either an entry to return or an exception to raise
ScriptedResponse = Union[ArxivEntry, Exception]


class EventLog(list):
    """Ordered record of source calls and sleeps shared by fakes."""


class FakeArxivSource:
    """In-memory stand-in for ArxivClient.

    `papers` maps id -> (title, cited ids). Cited ids are written into the
    entry comment as "arXiv:<id>" markers, so the fetcher finds them through
    the real identifier extractor. `script` queues per-id responses that
    take precedence over `papers` until exhausted.
    """

    def __init__(
        self,
        papers: dict[str, tuple[str, list[str]]] | None = None,
        script: dict[str, list[ScriptedResponse]] | None = None,
        events: EventLog | None = None,
    ):
        self.papers = papers or {}
        self.script = {key: list(value) for key, value in (script or {}).items()}
        self.events = events if events is not None else EventLog()
        self.calls: Counter[str] = Counter()
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_entry(self, arxiv_id: str) -> ArxivEntry:
        self.calls[arxiv_id] += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.events.append(("start", arxiv_id))
        try:
            await asyncio.sleep(0)
            return self._respond(arxiv_id)
        finally:
            self.in_flight -= 1
            self.events.append(("end", arxiv_id))

    def _respond(self, arxiv_id: str) -> ArxivEntry:
        queued = self.script.get(arxiv_id)
        if queued:
            response = queued.pop(0)
            if isinstance(response, Exception):
                raise response
            return response
        if arxiv_id not in self.papers:
            raise ArxivNotFoundError(arxiv_id)
        title, cited = self.papers[arxiv_id]
        return make_entry(arxiv_id, title, cited)


class RecordingSleep:
    """Async sleep replacement that records delays instead of waiting."""

    def __init__(self, events: EventLog | None = None):
        self.delays: list[float] = []
        self.events = events

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)
        if self.events is not None:
            self.events.append(("sleep", seconds))
        await asyncio.sleep(0)


def make_entry(arxiv_id: str, title: str, cited: list[str] | None = None, **fields) -> ArxivEntry:
    comment = " ".join(f"arXiv:{cited_id}" for cited_id in cited or []) or None
    return ArxivEntry(arxiv_id=arxiv_id, title=title, comment=comment, **fields)


def make_fetcher(source: FakeArxivSource, cache=None, sleep=None, **kwargs) -> PaperFetcher:
    """PaperFetcher with zero pacing unless overridden."""
    kwargs.setdefault("pacing_seconds", 0.0)
    return PaperFetcher(
        source,
        cache if cache is not None else InMemoryPaperCache(),
        sleep=sleep or RecordingSleep(),
        **kwargs,
    )


@pytest.fixture(autouse=True)
def logging_run(request: pytest.FixtureRequest) -> Generator[None, None, None]:
    """Give each test module its own logging run (rotates module log files)."""
    test_path = request.node.nodeid.split("::")[0]
    test_name = test_path.replace("/", "-").replace(".py", "")
    start_run(f"test-{test_name}")
    yield
    end_run()


@pytest.fixture
def events() -> EventLog:
    return EventLog()


@pytest.fixture
def recording_sleep(events: EventLog) -> RecordingSleep:
    return RecordingSleep(events)


@pytest.fixture
def memory_cache() -> InMemoryPaperCache:
    return InMemoryPaperCache()


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests requiring the live arXiv API",
    )
