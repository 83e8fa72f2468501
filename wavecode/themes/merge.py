"""Field-by-field merging of partial themes onto a base theme."""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

from wavecode.themes.constants import DEFAULT_THEME
from wavecode.themes.models import BarStyle, ColorScheme, Dimensions, Effects, ThemeConfig

_COLOR_SCHEME_FIELDS = {
    "type": "type",
    "primary": "primary",
    "secondary": "secondary",
    "background": "background",
    "gradientAngle": "gradient_angle",
}
_BAR_STYLE_FIELDS = {
    "shape": "shape",
    "thickness": "thickness",
    "spacing": "spacing",
    "roundness": "roundness",
}
_EFFECTS_FIELDS = {
    "shadow": "shadow",
    "shadowColor": "shadow_color",
    "shadowBlur": "shadow_blur",
    "opacity": "opacity",
}
_DIMENSIONS_FIELDS = {
    "width": "width",
    "height": "height",
    "dpi": "dpi",
}


def merge_with_default(
    partial: Mapping[str, Any] | ThemeConfig | None,
    default: ThemeConfig = DEFAULT_THEME,
) -> ThemeConfig:
    """Merge a partial theme onto ``default`` one section and one field at a time.

    A missing or None partial returns ``default`` unchanged. Within each
    section, absent or None fields keep the base value.
    """
    if partial is None:
        return default
    if isinstance(partial, ThemeConfig):
        return partial
    return ThemeConfig(
        color_scheme=merge_color_scheme(partial.get("colorScheme"), default.color_scheme),
        bar_style=merge_bar_style(partial.get("barStyle"), default.bar_style),
        effects=merge_effects(partial.get("effects"), default.effects),
        dimensions=merge_dimensions(partial.get("dimensions"), default.dimensions),
    )


def merge_color_scheme(section: Mapping[str, Any] | None, base: ColorScheme) -> ColorScheme:
    return replace(base, **_overrides(section, _COLOR_SCHEME_FIELDS))


def merge_bar_style(section: Mapping[str, Any] | None, base: BarStyle) -> BarStyle:
    return replace(base, **_overrides(section, _BAR_STYLE_FIELDS))


def merge_effects(section: Mapping[str, Any] | None, base: Effects) -> Effects:
    return replace(base, **_overrides(section, _EFFECTS_FIELDS))


def merge_dimensions(section: Mapping[str, Any] | None, base: Dimensions) -> Dimensions:
    return replace(base, **_overrides(section, _DIMENSIONS_FIELDS))


def _overrides(section: Mapping[str, Any] | None, fields: Mapping[str, str]) -> dict[str, Any]:
    if not section:
        return {}
    return {
        attr: section[key]
        for key, attr in fields.items()
        if section.get(key) is not None
    }
