"""Typed tokens for the Marklet tokenizer.

Uses NamedTuples for token representation, providing:
- Immutability by default (pair state is tracked externally in PairRegistry)
- Tuple unpacking support
- Low memory footprint and fast attribute access
- Exhaustive ``match`` dispatch over a closed union

Every token carries ``position`` and ``length``: the slice of the original
string it was produced from. Offsets count Python string indices (code
points), so a multi-unit emoji or a combining sequence is never split.

Thread Safety:
All tokens are immutable and safe to share across threads.

Usage:
    match token:
        case MarkerToken(kind=MarkerKind.BOLD):
            ...
        case TextToken(value=value):
            ...

"""

from __future__ import annotations

from enum import Enum
from typing import Literal, NamedTuple


class MarkerKind(Enum):
    """Formatting applied by a marker pair."""

    BOLD = "bold"
    ITALIC = "italic"
    BOLD_ITALIC = "bold_italic"
    STRIKETHROUGH = "strikethrough"
    UNDERLINE = "underline"
    HIGHLIGHT = "highlight"
    CODE = "code"
    SUPERSCRIPT = "superscript"
    SUBSCRIPT = "subscript"

    @property
    def is_script(self) -> bool:
        """Superscript and subscript are rendered as embedded, offset runs."""
        return self is MarkerKind.SUPERSCRIPT or self is MarkerKind.SUBSCRIPT


class TextToken(NamedTuple):
    """Plain text token.

    ``value`` is the text to display. It differs from the source slice when
    the run contains backslash escapes (``\\*`` displays as ``*``).

    Attributes:
        value: Display text with escapes resolved.
        position: Start offset of the source slice.
        length: Length of the source slice.

    """

    value: str
    position: int
    length: int

    @property
    def type(self) -> Literal["text"]:
        """Token type identifier for dispatch."""
        return "text"


class MarkerToken(NamedTuple):
    """Formatting marker token such as ``**``, ``~~`` or ``^``.

    Attributes:
        kind: The formatting this marker toggles.
        literal: The raw marker characters, used when the marker is unmatched.
        position: Start offset in the source.
        length: Number of marker characters.

    """

    kind: MarkerKind
    literal: str
    position: int
    length: int

    @property
    def type(self) -> Literal["marker"]:
        """Token type identifier for dispatch."""
        return "marker"


class LinkStartToken(NamedTuple):
    """Opening ``[`` of a well-formed ``[display](url)`` link."""

    position: int
    length: int = 1

    @property
    def type(self) -> Literal["link_start"]:
        """Token type identifier for dispatch."""
        return "link_start"

    @property
    def literal(self) -> str:
        """Source text of the token."""
        return "["


class LinkSeparatorToken(NamedTuple):
    """The ``](`` between link display text and URL."""

    position: int
    length: int = 2

    @property
    def type(self) -> Literal["link_separator"]:
        """Token type identifier for dispatch."""
        return "link_separator"

    @property
    def literal(self) -> str:
        """Source text, used when a stray separator renders as text."""
        return "]("


class LinkEndToken(NamedTuple):
    """Closing ``)`` of a link."""

    position: int
    length: int = 1

    @property
    def type(self) -> Literal["link_end"]:
        """Token type identifier for dispatch."""
        return "link_end"

    @property
    def literal(self) -> str:
        """Source text, used when a stray link end renders as text."""
        return ")"


class PlaceholderToken(NamedTuple):
    """Named placeholder ``{key}``.

    Attributes:
        key: Identifier between the braces, matching ``[A-Za-z0-9_]+``.
        position: Offset of the opening brace.
        length: Length including both braces.

    """

    key: str
    position: int
    length: int

    @property
    def type(self) -> Literal["placeholder"]:
        """Token type identifier for dispatch."""
        return "placeholder"

    @property
    def literal(self) -> str:
        """Source text, rendered when the key has no payload."""
        return "{" + self.key + "}"


# PEP 695 type alias for all tokens
type Token = (
    TextToken
    | MarkerToken
    | LinkStartToken
    | LinkSeparatorToken
    | LinkEndToken
    | PlaceholderToken
)


__all__ = [
    "LinkEndToken",
    "LinkSeparatorToken",
    "LinkStartToken",
    "MarkerKind",
    "MarkerToken",
    "PlaceholderToken",
    "TextToken",
    "Token",
]
