"""Tests for the Style value type and decoration merging."""

import pytest

from marklet import EMPTY_STYLE, Style, merge_styles
from marklet.styles import combine_decorations


class TestStyle:
    """Style behaves like an immutable, hashable mapping."""

    def test_value_equality(self) -> None:
        assert Style(font_size=14) == Style({"font_size": 14})
        assert Style(font_size=14) != Style(font_size=15)
        assert hash(Style(color="#fff", font_size=14)) == hash(Style(font_size=14, color="#fff"))

    def test_none_values_are_dropped(self) -> None:
        assert Style(color=None) == EMPTY_STYLE
        assert len(Style(color=None, font_size=12)) == 1

    def test_mapping_access(self) -> None:
        style = Style(font_weight="bold")
        assert style["font_weight"] == "bold"
        assert style.get("color") is None
        assert "font_weight" in style
        assert dict(style) == {"font_weight": "bold"}

    def test_is_read_only(self) -> None:
        style = Style(font_weight="bold")
        with pytest.raises(TypeError):
            style["color"] = "#000"  # type: ignore[index]

    def test_from_mapping(self) -> None:
        assert Style.from_mapping({"font_size": 12.0}) == Style(font_size=12.0)

    def test_decoration_is_normalized(self) -> None:
        assert Style(decoration="underline").decoration == frozenset({"underline"})
        assert Style(decoration=["underline", "overline"]).decoration == {"underline", "overline"}
        assert Style(decoration="none").decoration == frozenset()
        assert Style().decoration is None

    def test_with_and_without(self) -> None:
        style = Style(font_weight="bold").with_(color="#f00")
        assert style == Style(font_weight="bold", color="#f00")
        assert style.without("color") == Style(font_weight="bold")

    def test_merge_overrides(self) -> None:
        merged = Style(color="#000", font_size=12).merge(Style(color="#fff"))
        assert merged == Style(color="#fff", font_size=12)

    def test_merge_with_empty_returns_self(self) -> None:
        style = Style(color="#000")
        assert style.merge(EMPTY_STYLE) is style
        assert style.merge(None) is style

    def test_repr_is_sorted(self) -> None:
        assert repr(Style(font_size=12, color="#000")) == "Style(color='#000', font_size=12)"

    def test_json_values_are_frozen(self) -> None:
        style = Style.from_mapping(
            {"font_family_fallback": ["A", "B"], "shadow": {"dx": 1, "tags": ["x"]}}
        )
        assert style["font_family_fallback"] == ("A", "B")
        assert style["shadow"] == (("dx", 1), ("tags", ("x",)))
        assert style == Style(font_family_fallback=("A", "B"), shadow=(("dx", 1), ("tags", ("x",))))
        hash(style)

    def test_set_values_are_frozen(self) -> None:
        style = Style(features={"liga", "kern"})
        assert style["features"] == frozenset({"liga", "kern"})
        hash(style)

    def test_decoration_list(self) -> None:
        assert Style(decoration=["underline", "overline"]).decoration == {"underline", "overline"}


class TestMergeStyles:
    """Decorations combine instead of replacing each other."""

    def test_decorations_union(self) -> None:
        merged = merge_styles(Style(decoration="line_through"), Style(decoration="underline"))
        assert merged.decoration == {"line_through", "underline"}

    def test_override_without_decoration_keeps_base(self) -> None:
        merged = merge_styles(Style(decoration="underline"), Style(color="#f00"))
        assert merged.decoration == {"underline"}
        assert merged["color"] == "#f00"

    def test_empty_decoration_clears(self) -> None:
        merged = merge_styles(Style(decoration="underline"), Style(decoration="none"))
        assert merged.decoration == frozenset()

    def test_none_override(self) -> None:
        base = Style(color="#f00")
        assert merge_styles(base, None) is base

    def test_combine_decorations(self) -> None:
        assert combine_decorations({"underline"}, None, frozenset({"overline"})) == {"underline", "overline"}
        assert combine_decorations() == frozenset()
