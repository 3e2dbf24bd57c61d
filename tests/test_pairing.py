"""Unit tests for PairRegistry and the pair matcher.

Tests per-kind pairing, the global nesting limit, crossing pairs and link
isolation.
"""

from __future__ import annotations

import logging

import pytest

from marklet import ParseConfig, parse_config_context, tokenize
from marklet.errors import InvariantError
from marklet.parsing.pairing import PairRegistry, identify_pairs, verify_pairs


class TestPairRegistry:
    """Tests for PairRegistry."""

    def test_empty_registry(self):
        registry = PairRegistry()
        assert len(registry) == 0
        assert not registry.demoted

    def test_record_pair(self):
        registry = PairRegistry()
        registry.record_pair(1, 4)
        assert registry.closer_of(1) == 4
        assert registry.opener_of(4) == 1
        assert registry.is_opener(1)
        assert not registry.is_opener(4)
        assert registry.is_paired(4)
        assert 1 in registry
        assert 2 not in registry
        assert len(registry) == 1

    def test_demote_removes_both_ends(self):
        registry = PairRegistry()
        registry.record_pair(0, 3)
        registry.demote(0)
        assert len(registry) == 0
        assert registry.closer_of(0) is None
        assert registry.opener_of(3) is None
        assert registry.demoted == {0, 3}

    def test_pairs_in_opener_order(self):
        registry = PairRegistry()
        registry.record_pair(4, 6)
        registry.record_pair(0, 2)
        assert list(registry.pairs()) == [(0, 2), (4, 6)]

    def test_registry_is_slotted(self):
        assert hasattr(PairRegistry(), "__slots__")


class TestIdentifyPairs:
    """Per-kind pairing."""

    def test_simple_pairs(self):
        tokens = tokenize("**a** *b*")
        registry = identify_pairs(tokens)
        assert list(registry.pairs()) == [(0, 2), (4, 6)]

    def test_unmatched_marker(self):
        assert len(identify_pairs(tokenize("**a"))) == 0

    def test_stars_and_underscores_of_same_kind_pair(self):
        registry = identify_pairs(tokenize("**a__"))
        assert list(registry.pairs()) == [(0, 2)]

    def test_third_marker_stays_unpaired(self):
        tokens = tokenize("*a*b*")
        registry = identify_pairs(tokens)
        assert list(registry.pairs()) == [(0, 2)]
        assert not registry.is_paired(4)

    def test_sub_range(self):
        tokens = tokenize("**a** **b**")
        registry = identify_pairs(tokens, 4, len(tokens))
        assert list(registry.pairs()) == [(4, 6)]


class TestNestingLimit:
    """Global nesting depth across all marker kinds."""

    TEXT = "**a _b ~~c~~ d_ e**"

    def test_default_depth_demotes_third_level(self):
        registry = identify_pairs(tokenize(self.TEXT))
        assert list(registry.pairs()) == [(0, 10), (2, 8)]
        assert registry.demoted == {4, 6}

    def test_depth_from_config(self):
        with parse_config_context(ParseConfig(max_nesting_depth=3)):
            registry = identify_pairs(tokenize(self.TEXT))
        assert len(registry) == 3

    def test_explicit_max_depth(self):
        registry = identify_pairs(tokenize(self.TEXT), max_depth=1)
        assert list(registry.pairs()) == [(0, 10)]

    def test_zero_depth_disables_formatting(self):
        registry = identify_pairs(tokenize("**a** _b_"), max_depth=0)
        assert len(registry) == 0
        assert registry.demoted == {0, 2, 4, 6}

    def test_base_depth_counts_outer_scopes(self):
        tokens = tokenize("**a _b_**")
        registry = identify_pairs(tokens, max_depth=2, base_depth=1)
        assert list(registry.pairs()) == [(0, 5)]

    def test_sibling_pairs_do_not_accumulate_depth(self):
        registry = identify_pairs(tokenize("**a** _b_ ~~c~~"), max_depth=1)
        assert len(registry) == 3

    def test_demotion_is_logged(self, caplog: pytest.LogCaptureFixture):
        caplog.set_level(logging.DEBUG, logger="marklet")
        identify_pairs(tokenize(self.TEXT))
        assert "nesting depth" in caplog.text


class TestCrossingPairs:
    """Pairs that cross each other are demoted."""

    def test_crossing_demotes_both(self):
        registry = identify_pairs(tokenize("**a ~~b** c~~"))
        assert len(registry) == 0
        assert registry.demoted == {0, 2, 4, 6}

    def test_crossing_keeps_enclosing_pair(self):
        # 0:** 1:"x " 2:_ 3:"a " 4:~~ 5:"b" 6:_ 7:" c" 8:~~ 9:" y" 10:**
        registry = identify_pairs(tokenize("**x _a ~~b_ c~~ y**"), max_depth=3)
        assert list(registry.pairs()) == [(0, 10)]

    def test_crossing_is_logged(self, caplog: pytest.LogCaptureFixture):
        caplog.set_level(logging.DEBUG, logger="marklet")
        identify_pairs(tokenize("**a ~~b** c~~"))
        assert "crosses" in caplog.text


class TestLinkIsolation:
    """Link interiors are matched separately."""

    def test_pair_around_link(self):
        # 0:** 1:[ 2:a 3:]( 4:b 5:) 6:**
        registry = identify_pairs(tokenize("**[a](b)**"))
        assert list(registry.pairs()) == [(0, 6)]

    def test_marker_inside_display_does_not_pair_outside(self):
        # 0:** 1:[ 2:a 3:** 4:]( 5:b 6:)
        tokens = tokenize("**[a**](b)")
        assert len(identify_pairs(tokens)) == 0

    def test_display_range_matched_on_its_own(self):
        # 0:[ 1:** 2:a 3:** 4:]( 5:u 6:)
        tokens = tokenize("[**a**](u)")
        assert len(identify_pairs(tokens)) == 0
        assert list(identify_pairs(tokens, 1, 4).pairs()) == [(1, 3)]


class TestVerifyPairs:
    """Debug invariant checks."""

    def test_accepts_matcher_output(self):
        tokens = tokenize("**a** [_b_](c) ~~d~~")
        verify_pairs(tokens, identify_pairs(tokens))

    def test_rejects_pair_across_link_boundary(self):
        tokens = tokenize("**[a**](b)")
        registry = PairRegistry()
        registry.record_pair(0, 3)
        with pytest.raises(InvariantError, match="link boundary"):
            verify_pairs(tokens, registry)

    def test_rejects_asymmetric_registry(self):
        tokens = tokenize("**a**")
        registry = PairRegistry()
        registry.closers[0] = 2
        with pytest.raises(InvariantError, match="asymmetric"):
            verify_pairs(tokens, registry)

    def test_rejects_paired_text_token(self):
        tokens = tokenize("**a**")
        registry = PairRegistry()
        registry.record_pair(1, 2)
        with pytest.raises(InvariantError, match="paired text"):
            verify_pairs(tokens, registry)
