"""Single-pass tokenizer for Marklet inline markup.

Turns raw text into a flat, ordered list of typed tokens with exact source
positions. The tokenizer knows nothing about pairing or nesting: every ``**``
becomes a marker token and the pair matcher later decides which markers are
real.

Recognized syntax:
    **bold** __bold__ *italic* _italic_ ***both*** ___both___
    ~~strike~~ ++underline++ ==highlight== `code` ^super^ ~sub~
    [display](url) {placeholder} and backslash escapes

Complexity:
    O(n) in the length of the text. Bracket and paren partners are indexed
    once with stacks; placeholder shapes are found by short forward scans.
    On failure the opening character is emitted as text and scanning resumes
    right after it.

Thread Safety:
    tokenize() is pure. Each call uses its own scanner instance.

"""

from __future__ import annotations

from marklet.errors import InvariantError
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

# Characters that can start a token other than plain text.
# ], (, ) and } only matter after [ or {, so they are not listed.
SPECIAL_CHARS = frozenset("*_~`^+=[{\\")

# Characters a backslash can escape
ESCAPABLE_CHARS = frozenset("*_~`^+=[](){}\\")

PLACEHOLDER_KEY_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_"
)

# Run length -> kind, for * and _
_EMPHASIS_KINDS = {
    1: MarkerKind.ITALIC,
    2: MarkerKind.BOLD,
    3: MarkerKind.BOLD_ITALIC,
}

_PAIRED_KINDS = {
    "+": MarkerKind.UNDERLINE,
    "=": MarkerKind.HIGHLIGHT,
}


def has_formatting(text: str) -> bool:
    """Check whether text contains any character that could start markup.

    A False result guarantees tokenize() returns a single text token.
    """
    return not SPECIAL_CHARS.isdisjoint(text)


def tokenize(text: str) -> list[Token]:
    """Tokenize inline markup into typed tokens.

    Args:
        text: Raw text, possibly containing markers, links and placeholders.

    Returns:
        Tokens in source order. Their source slices tile ``text`` exactly.

    Example:
        >>> [t.type for t in tokenize("Hello **world**")]
        ['text', 'marker', 'text', 'marker']
    """
    if not text:
        return []
    if not has_formatting(text):
        return [TextToken(text, 0, len(text))]
    return _Scanner(text).run()


def token_source(text: str, token: Token) -> str:
    """Return the slice of ``text`` a token was produced from."""
    return text[token.position : token.position + token.length]


def verify_tokens(text: str, tokens: list[Token]) -> None:
    """Check that token slices tile the source without gaps or overlaps.

    Raises:
        InvariantError: If a token is empty, misplaced or the tiling is
            incomplete.
    """
    expected = 0
    for token in tokens:
        if token.length <= 0:
            raise InvariantError(f"empty {token.type} token", token.position)
        if token.position != expected:
            raise InvariantError(
                f"{token.type} token starts at {token.position}, expected {expected}",
                token.position,
            )
        expected = token.position + token.length
    if expected != len(text):
        raise InvariantError(
            f"tokens cover {expected} of {len(text)} characters", expected
        )


class _Scanner:
    """Character scanner that accumulates tokens for one tokenize() call.

    Adjacent text (plain runs, escapes, stray characters) is buffered and
    emitted as one TextToken when a structural token interrupts it.
    """

    __slots__ = ("_text", "_tokens", "_parts", "_text_start", "_text_end", "_closers")

    def __init__(self, text: str) -> None:
        self._text = text
        self._tokens: list[Token] = []
        self._parts: list[str] = []
        self._text_start = 0
        self._text_end = 0
        self._closers: dict[int, int] | None = None

    def run(self) -> list[Token]:
        self._scan(0, len(self._text), allow_links=True)
        return self._tokens

    def _scan(self, start: int, end: int, *, allow_links: bool) -> None:
        text = self._text
        pos = start

        while pos < end:
            char = text[pos]

            if char == "\\":
                if pos + 1 < end and text[pos + 1] in ESCAPABLE_CHARS:
                    self._add_text(text[pos + 1], pos, 2)
                    pos += 2
                else:
                    # Backslash before a non-escapable char (or at end) is literal
                    self._add_text("\\", pos, 1)
                    pos += 1
                continue

            if char == "*" or char == "_":
                run = _run_length(text, pos, end, char)
                while run > 0:
                    size = min(run, 3)
                    self._add_marker(_EMPHASIS_KINDS[size], char * size, pos)
                    pos += size
                    run -= size
                continue

            if char == "~":
                run = _run_length(text, pos, end, char)
                while run > 0:
                    if run >= 2:
                        self._add_marker(MarkerKind.STRIKETHROUGH, "~~", pos)
                        pos += 2
                        run -= 2
                    else:
                        self._add_marker(MarkerKind.SUBSCRIPT, "~", pos)
                        pos += 1
                        run -= 1
                continue

            if char == "+" or char == "=":
                run = _run_length(text, pos, end, char)
                while run >= 2:
                    self._add_marker(_PAIRED_KINDS[char], char * 2, pos)
                    pos += 2
                    run -= 2
                if run:
                    # Only doubled + and = form markers
                    self._add_text(char, pos, 1)
                    pos += 1
                continue

            if char == "`":
                self._add_marker(MarkerKind.CODE, "`", pos)
                pos += 1
                continue

            if char == "^":
                self._add_marker(MarkerKind.SUPERSCRIPT, "^", pos)
                pos += 1
                continue

            if char == "[":
                if allow_links:
                    shape = self._match_link(pos, end)
                    if shape is not None:
                        pos = self._add_link(pos, *shape)
                        continue
                self._add_text("[", pos, 1)
                pos += 1
                continue

            if char == "{":
                close = self._match_placeholder(pos, end)
                if close is not None:
                    self._flush_text()
                    self._tokens.append(
                        PlaceholderToken(text[pos + 1 : close], pos, close + 1 - pos)
                    )
                    pos = close + 1
                    continue
                self._add_text("{", pos, 1)
                pos += 1
                continue

            # Regular text - accumulate using frozenset lookup (O(1) per char)
            text_start = pos
            pos += 1
            while pos < end and text[pos] not in SPECIAL_CHARS:
                pos += 1
            self._add_text(text[text_start:pos], text_start, pos - text_start)

        self._flush_text()

    def _match_link(self, start: int, end: int) -> tuple[int, int] | None:
        """Find ``](`` and the closing ``)`` for a link opening at start.

        Bracket and paren partners come from one indexing pass over the text,
        built on the first ``[``.

        Returns:
            (separator_pos, close_pos) or None if the shape is incomplete.
        """
        closers = self._closers
        if closers is None:
            closers = self._closers = _match_brackets(self._text, end)
        separator = closers.get(start)
        if separator is None or separator + 1 >= end or self._text[separator + 1] != "(":
            return None
        close = closers.get(separator + 1)
        if close is None:
            return None
        return separator, close

    def _add_link(self, start: int, separator: int, close: int) -> int:
        """Emit tokens for a link whose shape was already matched."""
        self._flush_text()
        tokens = self._tokens
        tokens.append(LinkStartToken(start))
        # Display text is tokenized normally, minus nested links
        self._scan(start + 1, separator, allow_links=False)
        tokens.append(LinkSeparatorToken(separator))
        url_start = separator + 2
        if close > url_start:
            tokens.append(TextToken(self._text[url_start:close], url_start, close - url_start))
        tokens.append(LinkEndToken(close))
        return close + 1

    def _match_placeholder(self, start: int, end: int) -> int | None:
        """Return the index of the closing brace of ``{key}`` or None."""
        text = self._text
        pos = start + 1
        while pos < end and text[pos] in PLACEHOLDER_KEY_CHARS:
            pos += 1
        if pos > start + 1 and pos < end and text[pos] == "}":
            return pos
        return None

    def _add_marker(self, kind: MarkerKind, literal: str, position: int) -> None:
        self._flush_text()
        self._tokens.append(MarkerToken(kind, literal, position, len(literal)))

    def _add_text(self, value: str, position: int, length: int) -> None:
        if not self._parts:
            self._text_start = position
        self._parts.append(value)
        self._text_end = position + length

    def _flush_text(self) -> None:
        if self._parts:
            value = "".join(self._parts)
            self._tokens.append(
                TextToken(value, self._text_start, self._text_end - self._text_start)
            )
            self._parts.clear()


def _run_length(text: str, pos: int, end: int, char: str) -> int:
    """Count consecutive occurrences of char starting at pos."""
    run_end = pos
    while run_end < end and text[run_end] == char:
        run_end += 1
    return run_end - pos


def _match_brackets(text: str, end: int) -> dict[int, int]:
    """Pair ``[``/``]`` and ``(``/``)`` in ``text[:end]`` with two stacks.

    Escaped characters are skipped. Returns a map from each matched opener
    position to its closer position.
    """
    closers: dict[int, int] = {}
    brackets: list[int] = []
    parens: list[int] = []
    pos = 0
    while pos < end:
        char = text[pos]
        if char == "\\" and pos + 1 < end:
            pos += 2
            continue
        if char == "[":
            brackets.append(pos)
        elif char == "]":
            if brackets:
                closers[brackets.pop()] = pos
        elif char == "(":
            parens.append(pos)
        elif char == ")":
            if parens:
                closers[parens.pop()] = pos
        pos += 1
    return closers


__all__ = [
    "ESCAPABLE_CHARS",
    "SPECIAL_CHARS",
    "has_formatting",
    "token_source",
    "tokenize",
    "verify_tokens",
]
