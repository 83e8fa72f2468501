"""Tests for partial theme merging."""

from __future__ import annotations

from dataclasses import replace

from wavecode.themes.constants import DEFAULT_THEME
from wavecode.themes.merge import merge_bar_style, merge_with_default


def test_none_returns_default_theme():
    assert merge_with_default(None) == DEFAULT_THEME


def test_empty_mapping_returns_default_values():
    assert merge_with_default({}) == DEFAULT_THEME


def test_primary_only_keeps_other_fields():
    theme = merge_with_default({"colorScheme": {"primary": "#FF0000"}})
    assert theme.color_scheme.primary == "#FF0000"
    assert theme.color_scheme.background == "#FFFFFF"
    assert theme.color_scheme.type == "solid"
    assert theme.bar_style == DEFAULT_THEME.bar_style
    assert theme.effects == DEFAULT_THEME.effects
    assert theme.dimensions == DEFAULT_THEME.dimensions


def test_sections_merge_independently():
    theme = merge_with_default(
        {
            "barStyle": {"shape": "rounded", "roundness": 40},
            "dimensions": {"dpi": 600},
        }
    )
    assert theme.bar_style.shape == "rounded"
    assert theme.bar_style.roundness == 40
    assert theme.bar_style.thickness == 5
    assert theme.bar_style.spacing == 3
    assert theme.dimensions.dpi == 600
    assert theme.dimensions.width == 15
    assert theme.dimensions.height == 5


def test_camel_case_keys_map_to_fields():
    theme = merge_with_default(
        {
            "colorScheme": {"type": "gradient", "secondary": "#00FF00", "gradientAngle": 45},
            "effects": {"shadow": True, "shadowColor": "#333333", "shadowBlur": 4},
        }
    )
    assert theme.color_scheme.gradient_angle == 45
    assert theme.color_scheme.secondary == "#00FF00"
    assert theme.effects.shadow is True
    assert theme.effects.shadow_color == "#333333"
    assert theme.effects.shadow_blur == 4
    assert theme.effects.opacity == 100


def test_none_fields_fall_back():
    theme = merge_with_default({"colorScheme": {"primary": None, "background": "#EEEEEE"}})
    assert theme.color_scheme.primary == "#000000"
    assert theme.color_scheme.background == "#EEEEEE"


def test_explicit_base_theme():
    base = replace(DEFAULT_THEME, bar_style=replace(DEFAULT_THEME.bar_style, thickness=8))
    theme = merge_with_default({"barStyle": {"spacing": 1}}, default=base)
    assert theme.bar_style.thickness == 8
    assert theme.bar_style.spacing == 1


def test_full_theme_passes_through():
    theme = merge_with_default({"effects": {"opacity": 80}})
    assert merge_with_default(theme) is theme


def test_default_theme_is_not_mutated():
    merge_with_default({"colorScheme": {"primary": "#123456"}})
    assert DEFAULT_THEME.color_scheme.primary == "#000000"


def test_section_merge_function():
    merged = merge_bar_style({"thickness": 2}, DEFAULT_THEME.bar_style)
    assert merged.thickness == 2
    assert merged.shape == "rectangle"


def test_to_dict_round_trips_through_merge():
    theme = merge_with_default({"colorScheme": {"type": "dual-tone", "secondary": "#7CB342"}})
    assert merge_with_default(theme.to_dict()) == theme
