"""
Tests for PaperFetcher: cache-first lookups, pacing and rate-limit retries.
"""

import logging

from conftest import FakeArxivSource, RecordingSleep, make_entry, make_fetcher

from arxiv_tools import ArxivEntry, ArxivParseError
from core.utils import HttpRequestError, RateLimitedError
from workflows.citation_tally import InMemoryPaperCache, PaperRecord


def rate_limited() -> RateLimitedError:
    return RateLimitedError("HTTP 429: rate limited", status_code=429)


class FailingWriteCache(InMemoryPaperCache):
    async def set(self, arxiv_id, record):
        raise OSError("disk full")


class FailingReadCache(InMemoryPaperCache):
    async def get(self, arxiv_id):
        raise OSError("cache offline")


class TestSuccessfulFetch:
    async def test_builds_record_from_entry(self):
        source = FakeArxivSource({"1234.5678": ("Root Paper", ["2345.6789", "3456.7890"])})
        fetcher = make_fetcher(source)

        record = await fetcher.fetch_paper_data("1234.5678")

        assert record is not None
        assert record.arxiv_id == "1234.5678"
        assert record.title == "Root Paper"
        assert record.cited_ids == ("2345.6789", "3456.7890")
        assert record.fetched_at.tzinfo is not None

    async def test_citations_from_journal_ref_and_abstract(self):
        entry = ArxivEntry(
            arxiv_id="1234.5678",
            title="Scanned",
            journal_ref="Extended version of arXiv:1111.2222",
            abstract="We build on [3333.44444] and 3.5 percent of 1999 data.",
        )
        fetcher = make_fetcher(FakeArxivSource(script={"1234.5678": [entry]}))

        record = await fetcher.fetch_paper_data("1234.5678")

        assert record.cited_ids == ("1111.2222", "3333.44444")

    async def test_zero_citations_is_success_and_cached(self, memory_cache):
        source = FakeArxivSource({"1234.5678": ("Lonely Paper", [])})
        fetcher = make_fetcher(source, cache=memory_cache)

        record = await fetcher.fetch_paper_data("1234.5678")

        assert record is not None
        assert record.cited_ids == ()
        assert "1234.5678" in memory_cache
        assert fetcher.stats.successes == 1

    async def test_success_writes_cache(self, memory_cache):
        source = FakeArxivSource({"1234.5678": ("Root Paper", ["2345.6789"])})
        fetcher = make_fetcher(source, cache=memory_cache)

        record = await fetcher.fetch_paper_data("1234.5678")

        assert await memory_cache.get("1234.5678") == record


class TestCache:
    async def test_cache_hit_skips_remote(self, memory_cache):
        cached = PaperRecord(arxiv_id="1234.5678", title="Cached Title", cited_ids=("2345.6789",))
        await memory_cache.set("1234.5678", cached)
        source = FakeArxivSource({"1234.5678": ("Remote Title", [])})
        sleep = RecordingSleep()
        fetcher = make_fetcher(source, cache=memory_cache, sleep=sleep, pacing_seconds=1.0)

        record = await fetcher.fetch_paper_data("1234.5678")

        assert record == cached
        assert source.calls["1234.5678"] == 0
        assert sleep.delays == []
        assert fetcher.stats.cache_hits == 1

    async def test_cache_write_failure_is_not_fatal(self, caplog):
        source = FakeArxivSource({"1234.5678": ("Root Paper", [])})
        fetcher = make_fetcher(source, cache=FailingWriteCache())

        with caplog.at_level(logging.WARNING):
            record = await fetcher.fetch_paper_data("1234.5678")

        assert record is not None
        assert record.title == "Root Paper"
        assert fetcher.stats.cache_write_failures == 1
        assert "Cache write failed for 1234.5678" in caplog.text

    async def test_cache_read_failure_falls_back_to_remote(self):
        source = FakeArxivSource({"1234.5678": ("Root Paper", [])})
        fetcher = make_fetcher(source, cache=FailingReadCache())

        record = await fetcher.fetch_paper_data("1234.5678")

        assert record is not None
        assert source.calls["1234.5678"] == 1


class TestRateLimiting:
    async def test_exhausted_retries_make_four_calls(self):
        source = FakeArxivSource(script={"1234.5678": [rate_limited() for _ in range(10)]})
        sleep = RecordingSleep()
        fetcher = make_fetcher(source, sleep=sleep, pacing_seconds=1.0)

        record = await fetcher.fetch_paper_data("1234.5678")

        assert record is None
        assert source.calls["1234.5678"] == 4
        assert sleep.delays == [1.0, 2.0, 3.0, 4.0]
        assert fetcher.stats.failures == 1

    async def test_success_after_three_rate_limits(self, memory_cache):
        entry = make_entry("1234.5678", "Patient Paper")
        source = FakeArxivSource(
            script={"1234.5678": [rate_limited(), rate_limited(), rate_limited(), entry]}
        )
        sleep = RecordingSleep()
        fetcher = make_fetcher(source, cache=memory_cache, sleep=sleep, pacing_seconds=0.5)

        record = await fetcher.fetch_paper_data("1234.5678")

        assert record is not None
        assert record.title == "Patient Paper"
        assert source.calls["1234.5678"] == 4
        assert sleep.delays == [0.5, 1.0, 1.5, 2.0]

    async def test_single_pacing_delay_on_first_success(self):
        source = FakeArxivSource({"1234.5678": ("Root Paper", [])})
        sleep = RecordingSleep()
        fetcher = make_fetcher(source, sleep=sleep, pacing_seconds=1.0)

        await fetcher.fetch_paper_data("1234.5678")

        assert sleep.delays == [1.0]

    async def test_custom_retry_cap(self):
        source = FakeArxivSource(script={"1234.5678": [rate_limited() for _ in range(5)]})
        fetcher = make_fetcher(source, max_retries=1)

        assert await fetcher.fetch_paper_data("1234.5678") is None
        assert source.calls["1234.5678"] == 2


class TestTerminalFailures:
    async def test_http_error_not_retried(self):
        error = HttpRequestError("HTTP 400: bad id", status_code=400)
        source = FakeArxivSource(script={"1234.5678": [error]})
        fetcher = make_fetcher(source)

        assert await fetcher.fetch_paper_data("1234.5678") is None
        assert source.calls["1234.5678"] == 1

    async def test_unknown_paper(self):
        fetcher = make_fetcher(FakeArxivSource())

        assert await fetcher.fetch_paper_data("9999.99999") is None

    async def test_parse_error(self):
        source = FakeArxivSource(
            script={"1234.5678": [ArxivParseError("Missing title for 1234.5678", "1234.5678")]}
        )
        fetcher = make_fetcher(source)

        assert await fetcher.fetch_paper_data("1234.5678") is None

    async def test_empty_title_is_failure(self, memory_cache):
        source = FakeArxivSource(script={"1234.5678": [ArxivEntry(arxiv_id="1234.5678", title="")]})
        fetcher = make_fetcher(source, cache=memory_cache)

        assert await fetcher.fetch_paper_data("1234.5678") is None
        assert "1234.5678" not in memory_cache

    async def test_unexpected_error_contained(self, caplog):
        source = FakeArxivSource(script={"1234.5678": [KeyError("surprise")]})
        fetcher = make_fetcher(source)

        with caplog.at_level(logging.WARNING):
            record = await fetcher.fetch_paper_data("1234.5678")

        assert record is None
        assert "Error fetching paper data for 1234.5678" in caplog.text
