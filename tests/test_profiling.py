"""Tests for marklet.profiling: parse profiling API."""

from marklet import LRUParseCache, parse
from marklet.profiling import (
    ParseAccumulator,
    get_parse_accumulator,
    profiled_parse,
)


class TestGetParseAccumulator:
    def test_returns_none_when_disabled(self) -> None:
        assert get_parse_accumulator() is None

    def test_returns_none_outside_context(self) -> None:
        with profiled_parse():
            pass
        assert get_parse_accumulator() is None


class TestProfiledParse:
    def test_yields_accumulator(self) -> None:
        with profiled_parse() as acc:
            assert isinstance(acc, ParseAccumulator)
            assert get_parse_accumulator() is acc

    def test_records_parse_call(self) -> None:
        with profiled_parse() as acc:
            parse("a **b** c")
        assert acc.parse_calls == 1
        assert acc.source_length == len("a **b** c")
        assert acc.node_count == 3

    def test_records_multiple_parse_calls(self) -> None:
        with profiled_parse() as acc:
            parse("one")
            parse("**two**")
        assert acc.parse_calls == 2
        assert acc.node_count == 2

    def test_no_cache_no_cache_counts(self) -> None:
        with profiled_parse() as acc:
            parse("**x**")
        assert (acc.cache_hits, acc.cache_misses) == (0, 0)

    def test_records_cache_hits_and_misses(self) -> None:
        cache = LRUParseCache()
        with profiled_parse() as acc:
            parse("**x**", cache=cache)
            parse("**x**", cache=cache)
            parse("**y**", cache=cache)
        assert acc.cache_hits == 1
        assert acc.cache_misses == 2
        assert acc.parse_calls == 3


class TestParseAccumulator:
    def test_summary_keys(self) -> None:
        acc = ParseAccumulator()
        acc.record_parse(source_length=10, node_count=2)
        acc.record_cache(hit=True)
        summary = acc.summary()
        assert summary["source_length"] == 10
        assert summary["node_count"] == 2
        assert summary["parse_calls"] == 1
        assert summary["cache_hits"] == 1
        assert summary["cache_misses"] == 0
        assert summary["total_ms"] >= 0

    def test_duration_is_non_negative(self) -> None:
        assert ParseAccumulator().total_duration_ms >= 0
