"""Protocols for Marklet.

Defines the StyleProvider contract the tree builder consumes. The parser never
walks a theme or options hierarchy itself; it only calls these methods and
treats them as pure for the duration of one parse call.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Protocol

from marklet.styles import CursorHint, Style
from marklet.tokens import MarkerKind

type LinkTapCallback = Callable[[str, str], None]
type LinkHoverCallback = Callable[[str, str, bool], None]


@dataclass(frozen=True, slots=True)
class ScriptMetrics:
    """Size and offset factors for superscript/subscript runs.

    Attributes:
        scale: Font size multiplier applied to the logical (unscaled) size.
        baseline_factor: Vertical offset as a fraction of the logical font
            size. Negative moves up (superscript), positive moves down.

    """

    scale: float
    baseline_factor: float


class StyleProvider(Protocol):
    """Resolves effective styles for markers and links.

    Thread Safety:
        Implementations should be immutable. The parser may call any method
        many times per parse and assumes identical answers for identical
        arguments.

    """

    def resolve_style(self, kind: MarkerKind, base: Style) -> Style:
        """Return ``base`` with the formatting for ``kind`` applied."""
        ...

    def resolve_link_style(self, base: Style) -> Style:
        """Return the normal (not hovered) style of a link inside ``base``."""
        ...

    def resolve_link_hover_style(self, base: Style) -> Style:
        """Return the hovered style of a link inside ``base``."""
        ...

    def resolve_link_cursor(self) -> CursorHint:
        """Return the pointer cursor for links."""
        ...

    def resolve_on_link_tap(self) -> LinkTapCallback | None:
        """Return the tap callback, called with (url, display_text)."""
        ...

    def resolve_on_link_hover(self) -> LinkHoverCallback | None:
        """Return the hover callback, called with (url, display_text, hovering)."""
        ...

    def resolve_script_metrics(self, kind: MarkerKind) -> ScriptMetrics:
        """Return size/offset factors for SUPERSCRIPT or SUBSCRIPT."""
        ...

    def fingerprint(self, base: Style) -> Hashable:
        """Return a value-comparable summary of everything the parser reads.

        Two providers whose fingerprints are equal for a given base style
        must produce identical trees. Callbacks participate by identity.
        """
        ...


__all__ = [
    "LinkHoverCallback",
    "LinkTapCallback",
    "ScriptMetrics",
    "StyleProvider",
]
