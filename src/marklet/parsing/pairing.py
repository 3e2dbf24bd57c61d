"""Pair matching for Marklet marker tokens.

Decides which marker tokens open and close a formatting scope. Tokens stay
immutable; all pairing state lives in a PairRegistry keyed by token index.

Rules:
- Markers pair per MarkerKind in source order: the first unpaired marker of
  a kind opens, the next one of the same kind closes. ``**`` and ``__`` are
  both BOLD and pair with each other.
- Link interiors are skipped. The builder matches each link's display tokens
  on their own, so no pair ever straddles a link boundary.
- Nesting is limited by ``max_depth`` across all kinds together. An opener
  that would exceed it is demoted with its closer.
- Crossing pairs (``**a ~~b** c~~``) are demoted from the crossed opener
  upwards.

Demoted and unpaired markers are rendered as literal text by the builder.

Thread Safety:
    PairRegistry instances are single-use per build. identify_pairs() is pure.

"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from marklet.config import get_parse_config
from marklet.errors import InvariantError
from marklet.tokens import LinkEndToken, LinkSeparatorToken, LinkStartToken, MarkerKind, MarkerToken, Token
from marklet.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(slots=True)
class PairRegistry:
    """Bidirectional opener/closer map over token indices.

    Usage:
        registry = PairRegistry()
        registry.record_pair(opener=1, closer=4)
        registry.closer_of(1)  # 4
        registry.demote(1)     # both ends become literal text

    Complexity:
        All lookups and updates are O(1).

    """

    closers: dict[int, int] = field(default_factory=dict)
    openers: dict[int, int] = field(default_factory=dict)
    demoted: set[int] = field(default_factory=set)

    def record_pair(self, opener: int, closer: int) -> None:
        self.closers[opener] = closer
        self.openers[closer] = opener

    def demote(self, opener: int) -> None:
        """Remove a pair so both of its markers render literally."""
        closer = self.closers.pop(opener)
        del self.openers[closer]
        self.demoted.add(opener)
        self.demoted.add(closer)

    def closer_of(self, idx: int) -> int | None:
        return self.closers.get(idx)

    def opener_of(self, idx: int) -> int | None:
        return self.openers.get(idx)

    def is_opener(self, idx: int) -> bool:
        return idx in self.closers

    def is_paired(self, idx: int) -> bool:
        return idx in self.closers or idx in self.openers

    def pairs(self) -> Iterator[tuple[int, int]]:
        """Iterate (opener, closer) pairs in opener order."""
        for opener in sorted(self.closers):
            yield opener, self.closers[opener]

    def __contains__(self, idx: object) -> bool:
        return idx in self.closers or idx in self.openers

    def __len__(self) -> int:
        return len(self.closers)


def identify_pairs(
    tokens: Sequence[Token],
    start: int = 0,
    end: int | None = None,
    *,
    max_depth: int | None = None,
    base_depth: int = 0,
) -> PairRegistry:
    """Match marker tokens in ``tokens[start:end]``.

    Args:
        tokens: Token list from tokenize().
        start: First index to consider.
        end: One past the last index (default: end of list).
        max_depth: Nesting limit (default: ParseConfig.max_nesting_depth).
        base_depth: Scopes already open around this range, e.g. for the
            display text of a link inside bold.

    Returns:
        Registry of surviving pairs; indices are positions in ``tokens``.

    """
    if end is None:
        end = len(tokens)
    if max_depth is None:
        max_depth = get_parse_config().max_nesting_depth

    registry = PairRegistry()
    open_by_kind: dict[MarkerKind, int] = {}

    idx = start
    while idx < end:
        match tokens[idx]:
            case MarkerToken(kind=kind):
                opener = open_by_kind.pop(kind, None)
                if opener is None:
                    open_by_kind[kind] = idx
                else:
                    registry.record_pair(opener, idx)
            case LinkStartToken():
                idx = find_link_end(tokens, idx, end)
        idx += 1

    if registry:
        _enforce_nesting(tokens, registry, start, end, max_depth, base_depth)
    return registry


def find_link_end(tokens: Sequence[Token], link_start: int, end: int) -> int:
    """Return the index of the LinkEndToken closing the link at link_start."""
    idx = link_start + 1
    while idx < end:
        if isinstance(tokens[idx], LinkEndToken):
            return idx
        idx += 1
    return end - 1


def find_link_separator(tokens: Sequence[Token], link_start: int, link_end: int) -> int:
    """Return the index of the ``](`` token between link_start and link_end."""
    for idx in range(link_start + 1, link_end):
        if isinstance(tokens[idx], LinkSeparatorToken):
            return idx
    return link_end


def _enforce_nesting(
    tokens: Sequence[Token],
    registry: PairRegistry,
    start: int,
    end: int,
    max_depth: int,
    base_depth: int,
) -> None:
    """Demote pairs that nest too deeply or cross each other."""
    stack: list[int] = []

    for idx in range(start, end):
        if idx not in registry:
            continue
        if registry.is_opener(idx):
            if base_depth + len(stack) >= max_depth:
                logger.debug(
                    "Demoted %r at offset %d: nesting depth %d reached",
                    tokens[idx].literal,
                    tokens[idx].position,
                    max_depth,
                )
                registry.demote(idx)
            else:
                stack.append(idx)
            continue

        opener = registry.opener_of(idx)
        if stack and stack[-1] == opener:
            stack.pop()
            continue

        # Crossing: everything opened since the partner loses its pairing
        crossed_at = stack.index(opener)
        for crossed in stack[crossed_at:]:
            logger.debug(
                "Demoted %r at offset %d: crosses another pair",
                tokens[crossed].literal,
                tokens[crossed].position,
            )
            registry.demote(crossed)
        del stack[crossed_at:]


def verify_pairs(tokens: Sequence[Token], registry: PairRegistry) -> None:
    """Check registry symmetry and that pairs stay within one link region.

    Raises:
        InvariantError: On the first violation found.

    """
    regions: list[int] = []
    region = -1
    for idx, token in enumerate(tokens):
        match token:
            case LinkStartToken():
                region = idx
                regions.append(-1)
            case LinkSeparatorToken() | LinkEndToken():
                region = -1
                regions.append(-1)
            case _:
                regions.append(region)

    for opener, closer in registry.pairs():
        if registry.opener_of(closer) != opener:
            raise InvariantError("asymmetric pair registry", tokens[opener].position)
        if not opener < closer:
            raise InvariantError("pair closes before it opens", tokens[closer].position)
        for idx in (opener, closer):
            if not isinstance(tokens[idx], MarkerToken):
                raise InvariantError(f"paired {tokens[idx].type} token", tokens[idx].position)
        if regions[opener] != regions[closer]:
            raise InvariantError("pair straddles a link boundary", tokens[opener].position)
    if len(registry.openers) != len(registry.closers):
        raise InvariantError("asymmetric pair registry")


__all__ = [
    "PairRegistry",
    "find_link_end",
    "find_link_separator",
    "identify_pairs",
    "verify_pairs",
]
