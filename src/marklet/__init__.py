"""
Marklet: inline markup to styled content trees.

Turns short strings with lightweight markup (``**bold**``, ``~~strike~~``,
``^sup^``, ``[links](url)``, ``{placeholders}``) into an immutable tree of
styled runs, links and embedded objects for a host renderer to lay out.
Malformed markup never raises; it degrades to literal text.

Quick Start:
    >>> from marklet import parse, Style
    >>> parse("**Hello** world", Style(font_size=16))
    (Run(text='Hello', style=...), Run(text=' world', style=...))

Long-lived hosts (widgets, controllers) should keep a ParseSession, which
owns a style provider and a bounded cache:
    >>> from marklet import ParseSession, LayeredStyleProvider, StyleOptions
    >>> session = ParseSession(LayeredStyleProvider([StyleOptions(
    ...     bold_style=Style(color="#d32f2f"))]))
    >>> nodes = session.parse("Visit [**docs**](example.com)")

Installation:
    pip install marklet              # zero runtime dependencies
    pip install marklet[test]        # + pytest and hypothesis
"""

from collections.abc import Mapping, Sequence
from typing import Any

from marklet.cache import (
    DictParseCache,
    Fingerprint,
    LayoutParams,
    LRUParseCache,
    ParseCache,
    compute_fingerprint,
    hash_content,
)
from marklet.config import (
    ParseConfig,
    get_parse_config,
    parse_config_context,
    reset_parse_config,
    set_parse_config,
)
from marklet.errors import ConfigError, InvariantError, MarkletError
from marklet.nodes import ContentNode, EmbedMetadata, EmbedRole, Embedded, Group, Link, Run
from marklet.parsing.links import normalize_url
from marklet.profiling import ParseAccumulator, get_parse_accumulator, profiled_parse
from marklet.protocols import ScriptMetrics, StyleProvider
from marklet.session import ParseSession, run_parse
from marklet.styles import EMPTY_STYLE, CursorHint, Style, merge_styles
from marklet.theme import DEFAULT_PROVIDER, LayeredStyleProvider, StyleOptions, Theme
from marklet.tokenizer import has_formatting, tokenize
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
from marklet.visitor import BaseVisitor, plain_text

__version__ = "0.1.0"


def parse(
    text: str,
    base_style: Style = EMPTY_STYLE,
    placeholders: Mapping[str, Any] | None = None,
    embedded_content: Sequence[Any] | None = None,
    *,
    provider: StyleProvider | None = None,
    text_scale: float = 1.0,
    layout: LayoutParams | None = None,
    cache: ParseCache | None = None,
) -> tuple[ContentNode, ...]:
    """Parse inline markup into a content tree.

    Args:
        text: Source text.
        base_style: Style of unformatted text.
        placeholders: ``{key}`` -> host payload. Unknown keys stay literal.
        embedded_content: Payloads addressed positionally as ``{0}``, ``{1}``...
            when the key is not in ``placeholders``.
        provider: Style provider (DEFAULT_PROVIDER if None).
        text_scale: Host text scale factor, applied to script offsets.
        layout: Layout parameters that participate in the cache key.
        cache: Optional parse cache. When provided, checks the cache before
            parsing; on miss, parses and stores the result.

    Returns:
        Tuple of content nodes.

    Example:
        >>> parse("")
        ()
        >>> parse("Hello {icon}")
        (Run(text='Hello {icon}', style=Style()),)

    """
    return run_parse(
        text,
        base_style,
        provider if provider is not None else DEFAULT_PROVIDER,
        cache=cache,
        placeholders=placeholders,
        embedded_content=embedded_content,
        text_scale=text_scale,
        layout=layout,
    )


__all__ = [  # noqa: RUF022 - grouped by category for maintainability
    # Version
    "__version__",
    # Core API
    "parse",
    "tokenize",
    "has_formatting",
    "normalize_url",
    "plain_text",
    "ParseSession",
    "run_parse",
    # Configuration
    "ParseConfig",
    "get_parse_config",
    "set_parse_config",
    "reset_parse_config",
    "parse_config_context",
    # Styles
    "Style",
    "EMPTY_STYLE",
    "CursorHint",
    "merge_styles",
    "StyleProvider",
    "ScriptMetrics",
    "LayeredStyleProvider",
    "StyleOptions",
    "Theme",
    "DEFAULT_PROVIDER",
    # Tokens
    "Token",
    "MarkerKind",
    "TextToken",
    "MarkerToken",
    "LinkStartToken",
    "LinkSeparatorToken",
    "LinkEndToken",
    "PlaceholderToken",
    # Nodes
    "ContentNode",
    "Run",
    "Group",
    "Embedded",
    "EmbedMetadata",
    "EmbedRole",
    "Link",
    # Cache
    "ParseCache",
    "DictParseCache",
    "LRUParseCache",
    "Fingerprint",
    "LayoutParams",
    "compute_fingerprint",
    "hash_content",
    # Profiling
    "ParseAccumulator",
    "get_parse_accumulator",
    "profiled_parse",
    # Visitor
    "BaseVisitor",
    # Errors
    "MarkletError",
    "InvariantError",
    "ConfigError",
]
