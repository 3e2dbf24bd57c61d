"""Parsing subsystem for Marklet.

Turns tokenizer output into content trees:
- `pairing`: PairRegistry and identify_pairs (pair matching, nesting limit)
- `links`: URL normalization and Link node assembly
- `builder`: TreeBuilder and parse_inline (style stack, placeholders, scripts)

"""

from marklet.parsing.builder import TreeBuilder, parse_inline
from marklet.parsing.links import normalize_url
from marklet.parsing.pairing import PairRegistry, identify_pairs, verify_pairs

__all__ = [
    "PairRegistry",
    "TreeBuilder",
    "identify_pairs",
    "normalize_url",
    "parse_inline",
    "verify_pairs",
]
