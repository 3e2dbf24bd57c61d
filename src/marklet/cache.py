"""Fingerprint-addressed parse cache for Marklet.

Provides Fingerprint -> content tree caching so a host can call parse() on
every rebuild and only pay for tokenizing when something that shapes the
tree actually changed.

A Fingerprint is built from the values the parser consumes, not from the
objects the host passes in:
- the text (hashed), base style and text scale
- layout parameters that change how embedded and link nodes are built
- the provider fingerprint (effective styles, cursor, callbacks)
- placeholder payloads by identity
- the active ParseConfig

Value-equal styles and options therefore hit the cache, while a freshly
created callback closure misses it.

Thread Safety:
    LRUParseCache and DictParseCache are not thread-safe. Callers sharing a
    cache across threads must serialize access (e.g. threading.Lock around
    get/put).

Example:
    >>> from marklet import parse, LRUParseCache
    >>> cache = LRUParseCache()
    >>> nodes1 = parse("**Hello**", cache=cache)
    >>> nodes2 = parse("**Hello**", cache=cache)  # Cache hit, no re-parse
"""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Hashable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

from marklet.config import ParseConfig, get_parse_config
from marklet.errors import ConfigError
from marklet.styles import Style
from marklet.utils.hashing import hash_str
from marklet.utils.logger import get_logger

if TYPE_CHECKING:
    from marklet.nodes import ContentNode
    from marklet.protocols import StyleProvider

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class LayoutParams:
    """Paragraph layout settings that affect the shape of the tree.

    Attributes:
        text_align: "start", "end", "left", "right", "center" or "justify".
        max_lines: Line limit, or None for unlimited.
        overflow: "clip", "fade", "ellipsis" or "visible".
        text_direction: "ltr" or "rtl".
        locale: BCP 47 tag used for shaping, if any.
        soft_wrap: Whether lines wrap at soft breaks.
        height_behavior: (apply_to_first_ascent, apply_to_last_descent).
        link_alignment: Vertical alignment of embedded link content.

    """

    text_align: str = "start"
    max_lines: int | None = None
    overflow: str = "clip"
    text_direction: str = "ltr"
    locale: str | None = None
    soft_wrap: bool = True
    height_behavior: tuple[bool, bool] = (True, True)
    link_alignment: str = "baseline"


DEFAULT_LAYOUT = LayoutParams()


@dataclass(frozen=True, slots=True)
class Fingerprint:
    """Composite cache key for one parse call.

    Compared by value. ``text_length`` lets caches skip oversized texts
    without keeping the text itself.
    """

    content_hash: str
    text_length: int
    base_style: Style
    text_scale: float
    layout: LayoutParams
    styles: Hashable
    placeholders: tuple[Hashable, ...]
    config_key: ParseConfig


def hash_content(text: str) -> str:
    """Compute SHA256 hash of text for the cache key."""
    return hash_str(text)


def placeholder_key(
    placeholders: Mapping[str, Any] | None,
    embedded_content: Sequence[Any] | None,
) -> tuple[Hashable, ...]:
    """Identity summary of placeholder payloads.

    Payloads are opaque host objects, so only their identity is used.
    """
    named = tuple(sorted((key, id(value)) for key, value in (placeholders or {}).items()))
    positional = tuple(id(value) for value in (embedded_content or ()))
    return (named, positional)


def compute_fingerprint(
    text: str,
    base_style: Style,
    provider: StyleProvider,
    *,
    placeholders: Mapping[str, Any] | None = None,
    embedded_content: Sequence[Any] | None = None,
    text_scale: float = 1.0,
    layout: LayoutParams | None = None,
    config: ParseConfig | None = None,
) -> Fingerprint:
    """Build the cache key for a parse call."""
    return Fingerprint(
        content_hash=hash_content(text),
        text_length=len(text),
        base_style=base_style,
        text_scale=text_scale,
        layout=layout or DEFAULT_LAYOUT,
        styles=provider.fingerprint(base_style),
        placeholders=placeholder_key(placeholders, embedded_content),
        config_key=config or get_parse_config(),
    )


class ParseCache(Protocol):
    """Protocol for fingerprint-addressed parse caches.

    Cached values are content trees (tuples of frozen nodes), safe to share.
    """

    def get(self, fingerprint: Fingerprint) -> tuple[ContentNode, ...] | None:
        """Return the cached tree if present, else None."""
        ...

    def put(self, fingerprint: Fingerprint, nodes: tuple[ContentNode, ...]) -> None:
        """Store a tree in the cache."""
        ...

    def invalidate(self) -> None:
        """Drop every entry."""
        ...

    def __len__(self) -> int: ...


class DictParseCache:
    """Unbounded in-memory parse cache using a dict.

    Not thread-safe. Grows by one entry per distinct fingerprint; prefer
    LRUParseCache for long-lived sessions.
    """

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data: dict[Fingerprint, tuple[ContentNode, ...]] = {}

    def get(self, fingerprint: Fingerprint) -> tuple[ContentNode, ...] | None:
        return self._data.get(fingerprint)

    def put(self, fingerprint: Fingerprint, nodes: tuple[ContentNode, ...]) -> None:
        self._data[fingerprint] = nodes

    def invalidate(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)


class LRUParseCache:
    """Bounded parse cache with least-recently-used eviction.

    Texts longer than ``max_text_length`` are parsed but never stored.

    Not thread-safe. For parallel use, wrap get/put in a lock.

    Attributes:
        hits: Number of get() calls that found an entry.
        misses: Number of get() calls that did not.

    """

    __slots__ = ("_data", "_max_entries", "_max_text_length", "hits", "misses")

    def __init__(
        self,
        max_entries: int | None = None,
        max_text_length: int | None = None,
    ) -> None:
        config = get_parse_config()
        if max_entries is None:
            max_entries = config.max_cache_entries
        if max_text_length is None:
            max_text_length = config.max_cache_text_length
        if max_entries < 1:
            raise ConfigError("max_entries", "must be >= 1")
        if max_text_length < 0:
            raise ConfigError("max_text_length", "must be >= 0")

        self._data: OrderedDict[Fingerprint, tuple[ContentNode, ...]] = OrderedDict()
        self._max_entries = max_entries
        self._max_text_length = max_text_length
        self.hits = 0
        self.misses = 0

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def max_text_length(self) -> int:
        return self._max_text_length

    def get(self, fingerprint: Fingerprint) -> tuple[ContentNode, ...] | None:
        nodes = self._data.get(fingerprint)
        if nodes is None:
            self.misses += 1
            return None
        self._data.move_to_end(fingerprint)
        self.hits += 1
        return nodes

    def put(self, fingerprint: Fingerprint, nodes: tuple[ContentNode, ...]) -> None:
        if fingerprint.text_length > self._max_text_length:
            logger.debug(
                "Cache bypass: text length %d exceeds %d",
                fingerprint.text_length,
                self._max_text_length,
            )
            return
        self._data[fingerprint] = nodes
        self._data.move_to_end(fingerprint)
        while len(self._data) > self._max_entries:
            evicted, _ = self._data.popitem(last=False)
            logger.debug("Cache evicted entry %s", evicted.content_hash[:12])

    def invalidate(self) -> None:
        if self._data:
            logger.debug("Cache invalidated (%d entries)", len(self._data))
        self._data.clear()

    def __contains__(self, fingerprint: object) -> bool:
        return fingerprint in self._data

    def __len__(self) -> int:
        return len(self._data)


__all__ = [
    "DEFAULT_LAYOUT",
    "DictParseCache",
    "Fingerprint",
    "LRUParseCache",
    "LayoutParams",
    "ParseCache",
    "compute_fingerprint",
    "hash_content",
    "placeholder_key",
]
