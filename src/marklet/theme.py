"""Style inheritance chain and the default StyleProvider.

Hosts describe formatting as an ordered list of StyleOptions layers, nearest
first (a per-widget layer, then a screen layer, then an app layer). The
LayeredStyleProvider folds them into the answers the tree builder asks for:

- Mergeable styles (bold_style, link_style, ...) are merged from the
  furthest layer down to the nearest with merge_styles.
- Scalars and callbacks (link_cursor, on_link_tap, factors) use the nearest
  layer that sets them.
- Without any layer override, the defaults below apply, some of them
  derived from the Theme.

Example:
    >>> app = StyleOptions(link_style=Style(color="#00ff00"))
    >>> local = StyleOptions(bold_style=Style(color="#ff0000"))
    >>> provider = LayeredStyleProvider([local, app])
    >>> provider.resolve_style(MarkerKind.BOLD, Style())["color"]
    '#ff0000'

"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Literal

from marklet.config import get_parse_config
from marklet.protocols import LinkHoverCallback, LinkTapCallback, ScriptMetrics
from marklet.styles import CursorHint, Style, merge_styles
from marklet.tokens import MarkerKind

# Defaults shared by every provider
DEFAULT_STRIKETHROUGH_THICKNESS = 1.5
DEFAULT_SCRIPT_FONT_SIZE_FACTOR = 0.6
DEFAULT_SUPERSCRIPT_BASELINE_FACTOR = -0.4
DEFAULT_SUBSCRIPT_BASELINE_FACTOR = 0.4
DEFAULT_CODE_FONT_FAMILY_FALLBACK = ("RobotoMono", "Menlo", "Courier New", "monospace")
HIGHLIGHT_COLOR_LIGHT = "rgba(255, 235, 59, 0.5)"
HIGHLIGHT_COLOR_DARK = "rgba(255, 235, 59, 0.4)"


@dataclass(frozen=True, slots=True)
class Theme:
    """Ambient host colours.

    The provider reads primary_color, code colours and brightness. Other
    fields belong to the host renderer and never affect parsing, so
    changing them does not invalidate cached trees.

    """

    primary_color: str = "#1565c0"
    code_background: str = "#eeeeee"
    code_foreground: str = "#c2185b"
    brightness: Literal["light", "dark"] = "light"
    selection_color: str = "#90caf9"
    error_color: str = "#b00020"


DEFAULT_THEME = Theme()


@dataclass(frozen=True, slots=True)
class StyleOptions:
    """One layer of formatting overrides.

    Every field is optional; None means "inherit from further layers or
    the defaults".

    """

    bold_style: Style | None = None
    italic_style: Style | None = None
    bold_italic_style: Style | None = None
    strikethrough_style: Style | None = None
    underline_style: Style | None = None
    highlight_style: Style | None = None
    code_style: Style | None = None
    superscript_style: Style | None = None
    subscript_style: Style | None = None
    link_style: Style | None = None
    link_hover_style: Style | None = None
    link_cursor: CursorHint | None = None
    on_link_tap: LinkTapCallback | None = None
    on_link_hover: LinkHoverCallback | None = None
    strikethrough_thickness: float | None = None
    script_font_size_factor: float | None = None
    superscript_baseline_factor: float | None = None
    subscript_baseline_factor: float | None = None


_KIND_FIELDS: dict[MarkerKind, str] = {
    MarkerKind.BOLD: "bold_style",
    MarkerKind.ITALIC: "italic_style",
    MarkerKind.BOLD_ITALIC: "bold_italic_style",
    MarkerKind.STRIKETHROUGH: "strikethrough_style",
    MarkerKind.UNDERLINE: "underline_style",
    MarkerKind.HIGHLIGHT: "highlight_style",
    MarkerKind.CODE: "code_style",
    MarkerKind.SUPERSCRIPT: "superscript_style",
    MarkerKind.SUBSCRIPT: "subscript_style",
}

_MERGEABLE_FIELDS = (*_KIND_FIELDS.values(), "link_style", "link_hover_style")

_NEAREST_FIELDS = (
    "link_cursor",
    "on_link_tap",
    "on_link_hover",
    "strikethrough_thickness",
    "script_font_size_factor",
    "superscript_baseline_factor",
    "subscript_baseline_factor",
)


def _add_decoration(base: Style, name: str, thickness: float | None) -> Style:
    decoration = (base.decoration or frozenset()) | {name}
    return base.with_(
        decoration=decoration,
        decoration_color=base.get("decoration_color", base.get("color")),
        decoration_thickness=thickness if thickness is not None else base.get("decoration_thickness", 1.0),
    )


class LayeredStyleProvider:
    """StyleProvider backed by StyleOptions layers and a Theme.

    Layers are resolved once at construction; every resolve_* call is then
    a dictionary lookup plus a merge.

    Thread Safety:
        Immutable after construction. Safe to share across threads.

    """

    __slots__ = ("_layers", "_theme", "_styles", "_scalars")

    def __init__(
        self,
        layers: Sequence[StyleOptions] = (),
        theme: Theme = DEFAULT_THEME,
    ) -> None:
        self._layers = tuple(layers)
        self._theme = theme
        self._styles: dict[str, Style | None] = {}
        self._scalars: dict[str, object] = {}

        # Single pass from the furthest layer to the nearest
        for name in _MERGEABLE_FIELDS:
            self._styles[name] = None
        for name in _NEAREST_FIELDS:
            self._scalars[name] = None
        for layer in reversed(self._layers):
            for name in _MERGEABLE_FIELDS:
                local = getattr(layer, name)
                if local is not None:
                    current = self._styles[name]
                    self._styles[name] = local if current is None else merge_styles(current, local)
            for name in _NEAREST_FIELDS:
                value = getattr(layer, name)
                if value is not None:
                    self._scalars[name] = value

    @property
    def layers(self) -> tuple[StyleOptions, ...]:
        return self._layers

    @property
    def theme(self) -> Theme:
        return self._theme

    def resolve_style(self, kind: MarkerKind, base: Style) -> Style:
        override = self._styles[_KIND_FIELDS[kind]]
        if override is None:
            return self._default_style(kind, base)
        if kind.is_script:
            # Script runs are always shrunk; overrides only restyle them
            return merge_styles(self._default_style(kind, base), override)
        return merge_styles(base, override)

    def resolve_link_style(self, base: Style) -> Style:
        override = self._styles["link_style"]
        if override is not None:
            return merge_styles(base, override)
        return _add_decoration(base.with_(color=self._theme.primary_color), "underline", None)

    def resolve_link_hover_style(self, base: Style) -> Style:
        normal = self.resolve_link_style(base)
        override = self._styles["link_hover_style"]
        if override is not None:
            return merge_styles(normal, override)
        return normal.with_(color=self._theme.primary_color, decoration_thickness=2.0)

    def resolve_link_cursor(self) -> CursorHint:
        cursor = self._scalars["link_cursor"]
        return cursor if cursor is not None else CursorHint.CLICK  # type: ignore[return-value]

    def resolve_on_link_tap(self) -> LinkTapCallback | None:
        return self._scalars["on_link_tap"]  # type: ignore[return-value]

    def resolve_on_link_hover(self) -> LinkHoverCallback | None:
        return self._scalars["on_link_hover"]  # type: ignore[return-value]

    def resolve_script_metrics(self, kind: MarkerKind) -> ScriptMetrics:
        scale = self._scalar("script_font_size_factor", DEFAULT_SCRIPT_FONT_SIZE_FACTOR)
        if kind is MarkerKind.SUPERSCRIPT:
            factor = self._scalar("superscript_baseline_factor", DEFAULT_SUPERSCRIPT_BASELINE_FACTOR)
        else:
            factor = self._scalar("subscript_baseline_factor", DEFAULT_SUBSCRIPT_BASELINE_FACTOR)
        return ScriptMetrics(scale=scale, baseline_factor=factor)

    def fingerprint(self, base: Style) -> Hashable:
        """Resolved values the tree builder can observe for ``base``.

        Built from effective styles rather than from the layers or the theme,
        so an unrelated theme colour or a value-equal copy of a layer keeps
        the same fingerprint.
        """
        return (
            tuple(self.resolve_style(kind, base) for kind in MarkerKind),
            self.resolve_link_style(base),
            self.resolve_link_hover_style(base),
            self.resolve_link_cursor(),
            self.resolve_script_metrics(MarkerKind.SUPERSCRIPT),
            self.resolve_script_metrics(MarkerKind.SUBSCRIPT),
            self.resolve_on_link_tap(),
            self.resolve_on_link_hover(),
        )

    def _scalar(self, name: str, default: float) -> float:
        value = self._scalars[name]
        return default if value is None else value  # type: ignore[return-value]

    def _default_style(self, kind: MarkerKind, base: Style) -> Style:
        match kind:
            case MarkerKind.BOLD:
                return base.with_(font_weight="bold")
            case MarkerKind.ITALIC:
                return base.with_(font_style="italic")
            case MarkerKind.BOLD_ITALIC:
                return base.with_(font_weight="bold", font_style="italic")
            case MarkerKind.STRIKETHROUGH:
                thickness = self._scalar("strikethrough_thickness", DEFAULT_STRIKETHROUGH_THICKNESS)
                return _add_decoration(base, "line_through", thickness)
            case MarkerKind.UNDERLINE:
                return _add_decoration(base, "underline", None)
            case MarkerKind.HIGHLIGHT:
                dark = self._theme.brightness == "dark"
                return base.with_(background_color=HIGHLIGHT_COLOR_DARK if dark else HIGHLIGHT_COLOR_LIGHT)
            case MarkerKind.CODE:
                return base.with_(
                    font_family="monospace",
                    font_family_fallback=DEFAULT_CODE_FONT_FAMILY_FALLBACK,
                    color=self._theme.code_foreground,
                    background_color=self._theme.code_background,
                )
            case MarkerKind.SUPERSCRIPT | MarkerKind.SUBSCRIPT:
                scale = self._scalar("script_font_size_factor", DEFAULT_SCRIPT_FONT_SIZE_FACTOR)
                font_size = base.get("font_size", get_parse_config().default_font_size)
                return base.with_(font_size=font_size * scale)


DEFAULT_PROVIDER = LayeredStyleProvider()


__all__ = [
    "DEFAULT_PROVIDER",
    "DEFAULT_THEME",
    "LayeredStyleProvider",
    "StyleOptions",
    "Theme",
]
