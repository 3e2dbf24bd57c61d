"""Immutable style values for Marklet content trees.

A Style is an opaque bag of attributes (``font_weight``, ``color``,
``decoration``, ...) that the parser passes between the StyleProvider and the
content tree without interpreting. It behaves like a read-only mapping with
value equality and a stable hash, which the cache fingerprint relies on.

Common attribute names:
    font_weight, font_style, font_size, font_family, font_family_fallback,
    color, background_color, decoration, decoration_color,
    decoration_thickness

``decoration`` is always stored as a frozenset of decoration names
(``"underline"``, ``"line_through"``, ``"overline"``). An empty frozenset means
"explicitly no decoration".

Thread Safety:
    Styles are immutable and safe to share across threads.

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
from typing import Any


class CursorHint(Enum):
    """Pointer cursor a renderer should show over a node."""

    BASIC = "basic"
    CLICK = "click"
    TEXT = "text"


def _normalize_decoration(value: Any) -> frozenset[str]:
    if isinstance(value, str):
        return frozenset() if value == "none" else frozenset({value})
    return frozenset(value)


def _freeze(value: Any) -> Any:
    """Convert list, set and dict values (e.g. from JSON) to hashable forms."""
    if isinstance(value, list | tuple):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, set | frozenset):
        return frozenset(_freeze(item) for item in value)
    if isinstance(value, Mapping) and not isinstance(value, Style):
        return tuple((key, _freeze(item)) for key, item in value.items())
    return value


class Style(Mapping[str, Any]):
    """Immutable, hashable mapping of style attributes.

    ``None`` values are dropped, so ``Style(color=None)`` equals ``Style()``.
    Lists become tuples, sets become frozensets and nested mappings become
    tuples of items. Any other value must be hashable.

    Example:
        >>> bold = Style(font_weight="bold")
        >>> bold.with_(color="#ff0000")["color"]
        '#ff0000'
        >>> Style(font_size=14) == Style({"font_size": 14})
        True
    """

    __slots__ = ("_attrs", "_hash")

    def __init__(self, attrs: Mapping[str, Any] | None = None, /, **kwargs: Any) -> None:
        merged: dict[str, Any] = dict(attrs) if attrs else {}
        merged.update(kwargs)
        cleaned = {name: _freeze(value) for name, value in merged.items() if value is not None}
        if "decoration" in cleaned:
            cleaned["decoration"] = _normalize_decoration(cleaned["decoration"])
        self._attrs = cleaned
        self._hash: int | None = None

    @classmethod
    def from_mapping(cls, attrs: Mapping[str, Any]) -> Style:
        """Build a Style from any mapping (e.g. parsed JSON/TOML)."""
        return cls(attrs)

    def __getitem__(self, name: str) -> Any:
        return self._attrs[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attrs)

    def __len__(self) -> int:
        return len(self._attrs)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Style):
            return self._attrs == other._attrs
        return NotImplemented

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(frozenset(self._attrs.items()))
        return self._hash

    def __repr__(self) -> str:
        inner = ", ".join(f"{name}={value!r}" for name, value in sorted(self._attrs.items()))
        return f"Style({inner})"

    @property
    def decoration(self) -> frozenset[str] | None:
        return self._attrs.get("decoration")

    def merge(self, other: Style | None) -> Style:
        """Return a style where attributes of ``other`` override this one."""
        if not other:
            return self
        combined = dict(self._attrs)
        combined.update(other._attrs)
        return Style(combined)

    def with_(self, **attrs: Any) -> Style:
        """Return a copy with the given attributes set."""
        return self.merge(Style(attrs))

    def without(self, *names: str) -> Style:
        """Return a copy with the given attributes removed."""
        return Style({k: v for k, v in self._attrs.items() if k not in names})


EMPTY_STYLE = Style()


def combine_decorations(*decorations: Iterable[str] | None) -> frozenset[str]:
    """Union of several decoration sets, ignoring None."""
    result: set[str] = set()
    for decoration in decorations:
        if decoration:
            result.update(decoration)
    return frozenset(result)


def merge_styles(base: Style, override: Style | None) -> Style:
    """Merge two styles, combining decorations instead of replacing them.

    Unlike Style.merge, this never drops a decoration from ``base`` when the
    override adds a different one: underline over line-through yields both.

    - override has no decoration: base decoration is kept
    - override decoration is empty: all decorations are cleared
    - both have decorations: their union is used
    """
    if override is None:
        return base
    merged = base.merge(override)
    override_decoration = override.decoration
    base_decoration = base.decoration
    if override_decoration and base_decoration:
        return merged.with_(decoration=base_decoration | override_decoration)
    return merged


__all__ = [
    "EMPTY_STYLE",
    "CursorHint",
    "Style",
    "combine_decorations",
    "merge_styles",
]
