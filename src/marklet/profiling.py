"""Marklet ParseAccumulator: opt-in profiling for inline parsing.

This module provides accumulated metrics during parsing:
- Total profiling time
- Source length and node count
- Cache hits and misses

Zero overhead when disabled (get_parse_accumulator() returns None).

Example:
    from marklet import parse
    from marklet.profiling import profiled_parse

    with profiled_parse() as metrics:
        nodes = parse("Hello **World**")

    print(metrics.summary())
    # {"total_ms": 0.2, "source_length": 15, "node_count": 2, ...}

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from time import perf_counter
from typing import Any


@dataclass
class ParseAccumulator:
    """Accumulated metrics during inline parsing.

    Attributes:
        start_time: Profiling start timestamp.
        source_length: Total length of texts parsed (cache hits included).
        node_count: Number of top-level nodes returned.
        parse_calls: Number of parse() calls recorded.
        cache_hits: Calls answered from a cache.
        cache_misses: Calls that consulted a cache and had to build.

    """

    start_time: float = field(default_factory=perf_counter)
    source_length: int = 0
    node_count: int = 0
    parse_calls: int = 0
    cache_hits: int = 0
    cache_misses: int = 0

    def record_parse(self, source_length: int, node_count: int) -> None:
        """Record a parse call.

        Args:
            source_length: Length of the text parsed.
            node_count: Number of top-level nodes in the result.

        """
        self.parse_calls += 1
        self.source_length += source_length
        self.node_count += node_count

    def record_cache(self, hit: bool) -> None:
        if hit:
            self.cache_hits += 1
        else:
            self.cache_misses += 1

    @property
    def total_duration_ms(self) -> float:
        """Total profiling duration in milliseconds."""
        return (perf_counter() - self.start_time) * 1000

    def summary(self) -> dict[str, Any]:
        """Get summary of parse metrics."""
        return {
            "total_ms": round(self.total_duration_ms, 2),
            "source_length": self.source_length,
            "node_count": self.node_count,
            "parse_calls": self.parse_calls,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
        }


# Module-level ContextVar
_accumulator: ContextVar[ParseAccumulator | None] = ContextVar(
    "parse_accumulator",
    default=None,
)


def get_parse_accumulator() -> ParseAccumulator | None:
    """Get current accumulator (None if profiling disabled)."""
    return _accumulator.get()


@contextmanager
def profiled_parse() -> Iterator[ParseAccumulator]:
    """Context manager for profiled parsing.

    Creates a ParseAccumulator and makes it available via
    get_parse_accumulator() for the duration of the with block.

    Example:
        with profiled_parse() as metrics:
            session.parse(text, style)
        print(metrics.cache_hits)

    """
    acc = ParseAccumulator()
    token: Token[ParseAccumulator | None] = _accumulator.set(acc)
    try:
        yield acc
    finally:
        _accumulator.reset(token)


__all__ = ["ParseAccumulator", "get_parse_accumulator", "profiled_parse"]
