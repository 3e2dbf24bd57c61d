"""Content tree nodes produced by Marklet.

All nodes are frozen dataclasses with slots, so a parsed tree can be cached
and shared between renders and threads.

Node Hierarchy:
ContentNode
├── Run        styled text leaf
├── Group      styled container (placeholder wrappers)
├── Embedded   host payload or an offset script run
└── Link       tappable region with its own children

Thread Safety:
All nodes are frozen (immutable) and safe to share across threads. Embedded
placeholder payloads are the host's objects and are shared by reference.

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Literal

from marklet.protocols import LinkHoverCallback, LinkTapCallback
from marklet.styles import CursorHint, Style


class EmbedRole(Enum):
    """What an Embedded node stands for."""

    PLACEHOLDER = "placeholder"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"


@dataclass(frozen=True, slots=True)
class EmbedMetadata:
    """Layout hints for an Embedded node.

    Attributes:
        role: Placeholder payload or script run.
        scale: Font size multiplier relative to the surrounding text.
        baseline_shift: Vertical offset in layout units. Negative moves up.
        font_size: Resolved font size of script content, None for placeholders.

    """

    role: EmbedRole
    scale: float = 1.0
    baseline_shift: float = 0.0
    font_size: float | None = None

    @property
    def direction(self) -> Literal["up", "down", "none"]:
        if self.baseline_shift < 0:
            return "up"
        if self.baseline_shift > 0:
            return "down"
        return "none"


@dataclass(frozen=True, slots=True)
class Run:
    """A run of text in one style."""

    text: str
    style: Style


@dataclass(frozen=True, slots=True)
class Group:
    """Children sharing an inherited style."""

    children: tuple[ContentNode, ...]
    style: Style


@dataclass(frozen=True, slots=True)
class Embedded:
    """Inline object placed among text.

    For placeholders ``payload`` is the host object, passed through untouched.
    For superscript and subscript it is the tuple of child nodes to draw
    shifted and scaled.

    """

    payload: Any
    metadata: EmbedMetadata

    @property
    def is_script(self) -> bool:
        return self.metadata.role is not EmbedRole.PLACEHOLDER


@dataclass(frozen=True, slots=True)
class Link:
    """Interactive link region.

    Attributes:
        url: Normalized target URL.
        raw_display_text: Display text exactly as written, markers included.
        children: Formatted display content.
        normal_style: Style of the link when not hovered.
        hover_style: Style of the link while hovered.
        cursor: Pointer cursor over the link.
        on_tap: Called with (url, raw_display_text), if set.
        on_hover: Called with (url, raw_display_text, hovering), if set.

    """

    url: str
    raw_display_text: str
    children: tuple[ContentNode, ...]
    normal_style: Style
    hover_style: Style
    cursor: CursorHint = CursorHint.CLICK
    on_tap: LinkTapCallback | None = None
    on_hover: LinkHoverCallback | None = None


type ContentNode = Run | Group | Embedded | Link


__all__ = [
    "ContentNode",
    "EmbedMetadata",
    "EmbedRole",
    "Embedded",
    "Group",
    "Link",
    "Run",
]
