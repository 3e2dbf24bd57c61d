"""Tree builder for Marklet.

Walks the token list once with a style stack and turns matched regions into
content nodes. Text is buffered and flushed into a Run only when the active
style changes, so adjacent text in one style always ends up in one Run.

Links and scripts recurse:
- A link's display tokens are matched on their own (inheriting the current
  nesting depth) and built with the resolved link style as base.
- A script's inner tokens are built with the provider's script style as base
  and wrapped in an Embedded node carrying scale and baseline shift.

Placeholders splice the host payload into a Group carrying the current style;
unknown keys fall back to the literal ``{key}`` text.

Thread Safety:
    TreeBuilder instances are single-use per parse call.

"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from marklet.config import ParseConfig, get_parse_config
from marklet.nodes import ContentNode, EmbedMetadata, EmbedRole, Embedded, Group, Run
from marklet.parsing.links import build_link, normalize_url
from marklet.parsing.pairing import (
    PairRegistry,
    find_link_end,
    find_link_separator,
    identify_pairs,
    verify_pairs,
)
from marklet.protocols import StyleProvider
from marklet.styles import Style
from marklet.tokenizer import tokenize, verify_tokens
from marklet.tokens import (
    LinkEndToken,
    LinkSeparatorToken,
    LinkStartToken,
    MarkerKind,
    MarkerToken,
    PlaceholderToken,
    TextToken,
    Token,
)


class TreeBuilder:
    """Builds a content tree from tokens of one source string.

    Usage:
        builder = TreeBuilder(text, tokenize(text), provider)
        nodes = builder.build(base_style)

    """

    __slots__ = (
        "_source",
        "_tokens",
        "_provider",
        "_placeholders",
        "_embedded_content",
        "_text_scale",
        "_config",
    )

    def __init__(
        self,
        source: str,
        tokens: Sequence[Token],
        provider: StyleProvider,
        placeholders: Mapping[str, Any] | None = None,
        embedded_content: Sequence[Any] | None = None,
        text_scale: float = 1.0,
        config: ParseConfig | None = None,
    ) -> None:
        self._source = source
        self._tokens = tokens
        self._provider = provider
        self._placeholders = placeholders or {}
        self._embedded_content = embedded_content or ()
        self._text_scale = text_scale
        self._config = config or get_parse_config()

    def build(self, base_style: Style) -> tuple[ContentNode, ...]:
        registry = identify_pairs(self._tokens, max_depth=self._config.max_nesting_depth)
        if self._config.debug_checks:
            verify_pairs(self._tokens, registry)
        return self._build_range(0, len(self._tokens), registry, base_style, 0)

    def _build_range(
        self,
        start: int,
        end: int,
        registry: PairRegistry,
        base: Style,
        depth: int,
    ) -> tuple[ContentNode, ...]:
        """Build nodes for ``tokens[start:end]``.

        ``depth`` is the number of scopes open around this range; it seeds
        the nesting depth of links found inside it.
        """
        tokens = self._tokens
        nodes: list[ContentNode] = []
        parts: list[str] = []
        stack = [base]

        idx = start
        while idx < end:
            token = tokens[idx]
            match token:
                case TextToken(value=value):
                    parts.append(value)

                case MarkerToken(kind=kind, literal=literal):
                    closer = registry.closer_of(idx)
                    if closer is not None:
                        _flush(nodes, parts, stack[-1])
                        if kind.is_script:
                            nodes.append(
                                self._build_script(kind, idx, closer, registry, stack[-1], depth + len(stack))
                            )
                            idx = closer + 1
                            continue
                        stack.append(self._provider.resolve_style(kind, stack[-1]))
                    elif registry.opener_of(idx) is not None:
                        _flush(nodes, parts, stack[-1])
                        stack.pop()
                    else:
                        parts.append(literal)

                case LinkStartToken():
                    link_end = find_link_end(tokens, idx, end)
                    separator = find_link_separator(tokens, idx, link_end)
                    if separator < link_end and isinstance(tokens[link_end], LinkEndToken):
                        _flush(nodes, parts, stack[-1])
                        nodes.append(
                            self._build_link(idx, separator, link_end, stack[-1], depth + len(stack) - 1)
                        )
                        idx = link_end + 1
                        continue
                    parts.append(token.literal)

                case PlaceholderToken(key=key):
                    payload = self._lookup_placeholder(key)
                    if payload is None:
                        parts.append(token.literal)
                    else:
                        _flush(nodes, parts, stack[-1])
                        embedded = Embedded(payload, EmbedMetadata(EmbedRole.PLACEHOLDER))
                        nodes.append(Group((embedded,), stack[-1]))

                case LinkSeparatorToken() | LinkEndToken():
                    parts.append(token.literal)

            idx += 1

        _flush(nodes, parts, stack[-1])
        return tuple(nodes)

    def _build_script(
        self,
        kind: MarkerKind,
        opener: int,
        closer: int,
        registry: PairRegistry,
        current: Style,
        depth: int,
    ) -> Embedded:
        metrics = self._provider.resolve_script_metrics(kind)
        # Offsets use the logical size; text_scale is applied once, here
        logical_size = current.get("font_size")
        if logical_size is None:
            # Pin the size so the shrink and the shift read the same config
            logical_size = self._config.default_font_size
            current = current.with_(font_size=logical_size)
        inner_base = self._provider.resolve_style(kind, current)
        children = self._build_range(opener + 1, closer, registry, inner_base, depth)

        shift = abs(logical_size * metrics.baseline_factor) * self._text_scale
        if kind is MarkerKind.SUPERSCRIPT:
            shift = -shift
        metadata = EmbedMetadata(
            role=EmbedRole.SUPERSCRIPT if kind is MarkerKind.SUPERSCRIPT else EmbedRole.SUBSCRIPT,
            scale=metrics.scale,
            baseline_shift=shift,
            font_size=inner_base.get("font_size", logical_size * metrics.scale),
        )
        return Embedded(children, metadata)

    def _build_link(
        self,
        link_start: int,
        separator: int,
        link_end: int,
        current: Style,
        depth: int,
    ) -> ContentNode:
        tokens = self._tokens
        display_start = tokens[link_start].position + 1
        display_end = tokens[separator].position
        url_start = display_end + 2
        url_end = tokens[link_end].position

        display_registry = identify_pairs(
            tokens,
            link_start + 1,
            separator,
            max_depth=self._config.max_nesting_depth,
            base_depth=depth,
        )
        if self._config.debug_checks:
            verify_pairs(tokens, display_registry)
        link_base = self._provider.resolve_link_style(current)
        children = self._build_range(link_start + 1, separator, display_registry, link_base, depth)

        return build_link(
            url=normalize_url(self._source[url_start:url_end], self._config.default_url_scheme),
            raw_display_text=self._source[display_start:display_end],
            children=children,
            provider=self._provider,
            current=current,
        )

    def _lookup_placeholder(self, key: str) -> Any:
        payload = self._placeholders.get(key)
        if payload is None and key.isdigit():
            index = int(key)
            if index < len(self._embedded_content):
                payload = self._embedded_content[index]
        return payload


def _flush(nodes: list[ContentNode], parts: list[str], style: Style) -> None:
    """Emit buffered text as one Run in ``style``."""
    if parts:
        nodes.append(Run("".join(parts), style))
        parts.clear()


def parse_inline(
    text: str,
    base_style: Style,
    provider: StyleProvider,
    *,
    placeholders: Mapping[str, Any] | None = None,
    embedded_content: Sequence[Any] | None = None,
    text_scale: float = 1.0,
    config: ParseConfig | None = None,
) -> tuple[ContentNode, ...]:
    """Tokenize, match and build ``text`` without any caching.

    Returns:
        The content tree. Empty text yields an empty tuple and text without
        markup yields a single Run in ``base_style``.

    """
    if not text:
        return ()
    if config is None:
        config = get_parse_config()

    tokens = tokenize(text)
    if config.debug_checks:
        verify_tokens(text, tokens)

    # Fast path: nothing to match or build
    if len(tokens) == 1 and isinstance(tokens[0], TextToken):
        return (Run(tokens[0].value, base_style),)

    builder = TreeBuilder(
        text,
        tokens,
        provider,
        placeholders=placeholders,
        embedded_content=embedded_content,
        text_scale=text_scale,
        config=config,
    )
    return builder.build(base_style)


__all__ = ["TreeBuilder", "parse_inline"]
