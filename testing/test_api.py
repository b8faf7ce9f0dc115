"""
Tests for analyze(): the public entry point and its error contract.
"""

from conftest import FakeArxivSource, RecordingSleep, make_fetcher

from core.utils import RateLimitedError
from workflows.citation_tally import PaperFetcher, PaperRecord, analyze
from workflows.citation_tally.types import (
    FETCHER_AND_CACHE_MESSAGE,
    GENERIC_FAILURE_MESSAGE,
    NO_CITATIONS_MESSAGE,
)

ROOT_URL = "https://arxiv.org/abs/1234.5678"

CYCLE_PAPERS = {
    "1234.5678": ("Root Paper", ["2345.6789"]),
    "2345.6789": ("Middle Paper", ["1234.5678", "3456.7890"]),
    "3456.7890": ("Leaf Paper", []),
}


class ExplodingFetcher(PaperFetcher):
    def __init__(self, message: str):
        super().__init__(FakeArxivSource(), cache=None)
        self.message = message

    async def fetch_paper_data(self, arxiv_id):
        raise RuntimeError(self.message)


class SilentFetcher(PaperFetcher):
    def __init__(self):
        super().__init__(FakeArxivSource(), cache=None)

    async def fetch_paper_data(self, arxiv_id):
        return None


async def run(fetcher, url=ROOT_URL, depth=5):
    return await analyze(url, depth, fetcher=fetcher, batch_delay=0.0, sleep=RecordingSleep())


class TestSuccess:
    async def test_cycle_scenario(self):
        result = await run(make_fetcher(FakeArxivSource(CYCLE_PAPERS)))

        assert result.ok
        assert result.error is None
        assert result.tally == {"Root Paper": 1, "Middle Paper": 1, "Leaf Paper": 1}
        assert result.expanded_count == 3
        assert result.root_locator == ROOT_URL
        assert result.max_depth == 5

    async def test_root_without_citations_is_not_an_error(self):
        source = FakeArxivSource({"1234.5678": ("Lonely Paper", [])})

        result = await run(make_fetcher(source), depth=1)

        assert result.ok
        assert result.tally == {"Lonely Paper": 1}

    async def test_default_fetcher_uses_given_cache(self, memory_cache):
        # served entirely from cache, so the real client never sends a request
        await memory_cache.set("1234.5678", PaperRecord(arxiv_id="1234.5678", title="Cached Root"))

        result = await analyze(ROOT_URL, 1, cache=memory_cache, sleep=RecordingSleep())

        assert result.tally == {"Cached Root": 1}


class TestErrors:
    async def test_unparsable_root(self):
        result = await run(make_fetcher(FakeArxivSource()), url="https://example.org/paper")

        assert not result.ok
        assert result.tally is None
        assert "Could not find an arXiv identifier" in result.error

    async def test_root_not_found_reports_fetch_failure(self):
        result = await run(make_fetcher(FakeArxivSource()))

        assert result.error == "Could not fetch paper 1234.5678 from arXiv: No arXiv entry for 1234.5678"
        assert result.error != NO_CITATIONS_MESSAGE
        assert result.tally is None
        assert result.expanded_count == 0

    async def test_root_rate_limited_reports_fetch_failure(self):
        source = FakeArxivSource(
            script={"1234.5678": [RateLimitedError("HTTP 429: rate limited", status_code=429)] * 4}
        )

        result = await run(make_fetcher(source))

        assert source.calls["1234.5678"] == 4
        assert result.error.startswith("Could not fetch paper 1234.5678 from arXiv: ")
        assert "rate limited" in result.error.lower()

    async def test_empty_tally_without_fetch_failure_reports_no_citations(self):
        result = await run(SilentFetcher())

        assert result.error == NO_CITATIONS_MESSAGE
        assert result.tally is None

    async def test_fetcher_and_cache_together_rejected(self, memory_cache):
        source = FakeArxivSource(CYCLE_PAPERS)

        result = await analyze(ROOT_URL, 2, fetcher=make_fetcher(source), cache=memory_cache)

        assert result.error == FETCHER_AND_CACHE_MESSAGE
        assert sum(source.calls.values()) == 0

    async def test_depth_out_of_range(self):
        fetcher = make_fetcher(FakeArxivSource(CYCLE_PAPERS))

        for depth in (0, 11, -1):
            result = await run(fetcher, depth=depth)
            assert not result.ok
            assert "max_depth must be between 1 and 10" in result.error

        assert sum(fetcher.source.calls.values()) == 0

    async def test_unexpected_failure_message_surfaced(self):
        result = await run(ExplodingFetcher("kaboom"))

        assert result.error == "kaboom"
        assert result.tally is None

    async def test_unexpected_failure_without_message(self):
        result = await run(ExplodingFetcher(""))

        assert result.error == GENERIC_FAILURE_MESSAGE
