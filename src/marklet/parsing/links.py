"""Link target normalization and link node assembly.

URLs are normalized, never validated: the host decides what to do with a
``javascript:`` or malformed target when the link is tapped.
"""

from __future__ import annotations

import re

from marklet.config import get_parse_config
from marklet.nodes import ContentNode, Link
from marklet.protocols import StyleProvider
from marklet.styles import Style

# Bare alphanumeric scheme: http:, mailto:, tel:, myapp:
_SCHEME_PATTERN = re.compile(r"^[A-Za-z0-9]+:")


def has_scheme(url: str) -> bool:
    """Check whether url starts with ``scheme:``."""
    return _SCHEME_PATTERN.match(url) is not None


def normalize_url(raw: str, default_scheme: str | None = None) -> str:
    """Normalize a link target.

    - Surrounding whitespace is stripped.
    - Targets with a scheme, absolute paths (``/x``) and fragments (``#x``)
      are kept as they are.
    - Anything else gets ``default_scheme`` prefixed
      (ParseConfig.default_url_scheme when omitted).

    Example:
        >>> normalize_url("flutter.dev")
        'https://flutter.dev'
        >>> normalize_url("mailto:a@b.c")
        'mailto:a@b.c'

    """
    url = raw.strip()
    if not url or has_scheme(url) or url[0] in "/#":
        return url
    if default_scheme is None:
        default_scheme = get_parse_config().default_url_scheme
    return default_scheme + url


def build_link(
    url: str,
    raw_display_text: str,
    children: tuple[ContentNode, ...],
    provider: StyleProvider,
    current: Style,
) -> Link:
    """Assemble a Link node with styles and callbacks from the provider."""
    return Link(
        url=url,
        raw_display_text=raw_display_text,
        children=children,
        normal_style=provider.resolve_link_style(current),
        hover_style=provider.resolve_link_hover_style(current),
        cursor=provider.resolve_link_cursor(),
        on_tap=provider.resolve_on_link_tap(),
        on_hover=provider.resolve_on_link_hover(),
    )


__all__ = ["build_link", "has_scheme", "normalize_url"]
