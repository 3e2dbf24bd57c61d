"""Long-lived parse owner for Marklet.

A ParseSession bundles a StyleProvider, a ParseConfig and a cache, the way a
text widget or controller owns them across rebuilds. Every parse() call goes
through the cache; invalidate() drops all cached trees explicitly.

Example:
    >>> session = ParseSession()
    >>> nodes = session.parse("**Hello**", Style(font_size=16))
    >>> session.parse("**Hello**", Style(font_size=16)) is nodes
    True

Thread Safety:
    Config is applied via ContextVar for each call. The default cache is not
    thread-safe; give each thread its own session or a locked cache.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from marklet.cache import LayoutParams, LRUParseCache, ParseCache, compute_fingerprint
from marklet.config import ParseConfig, get_parse_config, parse_config_context
from marklet.nodes import ContentNode
from marklet.parsing.builder import parse_inline
from marklet.profiling import get_parse_accumulator
from marklet.protocols import StyleProvider
from marklet.styles import EMPTY_STYLE, Style
from marklet.theme import DEFAULT_PROVIDER


def run_parse(
    text: str,
    base_style: Style,
    provider: StyleProvider,
    *,
    cache: ParseCache | None = None,
    placeholders: Mapping[str, Any] | None = None,
    embedded_content: Sequence[Any] | None = None,
    text_scale: float = 1.0,
    layout: LayoutParams | None = None,
) -> tuple[ContentNode, ...]:
    """Parse with the active config, consulting ``cache`` when given."""
    config = get_parse_config()
    acc = get_parse_accumulator()

    fingerprint = None
    if cache is not None:
        fingerprint = compute_fingerprint(
            text,
            base_style,
            provider,
            placeholders=placeholders,
            embedded_content=embedded_content,
            text_scale=text_scale,
            layout=layout,
            config=config,
        )
        cached = cache.get(fingerprint)
        if acc is not None:
            acc.record_cache(hit=cached is not None)
        if cached is not None:
            if acc is not None:
                acc.record_parse(source_length=len(text), node_count=len(cached))
            return cached

    nodes = parse_inline(
        text,
        base_style,
        provider,
        placeholders=placeholders,
        embedded_content=embedded_content,
        text_scale=text_scale,
        config=config,
    )

    if cache is not None and fingerprint is not None:
        cache.put(fingerprint, nodes)

    # Record profiling metrics if accumulator is active
    if acc is not None:
        acc.record_parse(source_length=len(text), node_count=len(nodes))
    return nodes


class ParseSession:
    """Owns a provider, config and cache across many parse calls.

    Args:
        provider: Style provider (DEFAULT_PROVIDER if omitted).
        cache: Parse cache; a new LRUParseCache sized from ``config`` if None.
        config: ParseConfig applied to every call (current context if None).

    """

    __slots__ = ("_provider", "_cache", "_config")

    def __init__(
        self,
        provider: StyleProvider = DEFAULT_PROVIDER,
        *,
        cache: ParseCache | None = None,
        config: ParseConfig | None = None,
    ) -> None:
        self._provider = provider
        self._config = config if config is not None else get_parse_config()
        if cache is None:
            cache = LRUParseCache(
                max_entries=self._config.max_cache_entries,
                max_text_length=self._config.max_cache_text_length,
            )
        self._cache = cache

    @property
    def provider(self) -> StyleProvider:
        return self._provider

    @property
    def config(self) -> ParseConfig:
        return self._config

    @property
    def cache(self) -> ParseCache:
        return self._cache

    def parse(
        self,
        text: str,
        base_style: Style = EMPTY_STYLE,
        *,
        placeholders: Mapping[str, Any] | None = None,
        embedded_content: Sequence[Any] | None = None,
        text_scale: float = 1.0,
        layout: LayoutParams | None = None,
    ) -> tuple[ContentNode, ...]:
        """Parse text into a content tree, reusing cached trees.

        Thread Safety:
            Sets config via ContextVar (thread-local) for the duration of
            the call.

        """
        with parse_config_context(self._config):
            return run_parse(
                text,
                base_style,
                self._provider,
                cache=self._cache,
                placeholders=placeholders,
                embedded_content=embedded_content,
                text_scale=text_scale,
                layout=layout,
            )

    def invalidate(self) -> None:
        """Drop every cached tree, e.g. after the host theme changed."""
        self._cache.invalidate()


__all__ = ["ParseSession", "run_parse"]
