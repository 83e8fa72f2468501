"""Tests for theme contrast math, warnings and boundary checks."""

from __future__ import annotations

import pytest

from wavecode.themes.constants import DEFAULT_THEME
from wavecode.themes.merge import merge_with_default
from wavecode.themes.models import ThemeValidationError
from wavecode.themes.validation import (
    get_contrast_ratio,
    hex_to_rgb,
    parse_theme_config,
    validate_theme,
)


class TestContrast:
    def test_black_on_white(self):
        assert get_contrast_ratio("#000000", "#FFFFFF") > 20
        assert get_contrast_ratio("#000000", "#FFFFFF") == pytest.approx(21.0)

    @pytest.mark.parametrize("color", ["#000000", "#FFFFFF", "#7F3A9C", "#d4af37"])
    def test_same_color_is_one(self, color):
        assert get_contrast_ratio(color, color) == pytest.approx(1.0)

    def test_symmetric(self):
        assert get_contrast_ratio("#0077BE", "#F0F8FF") == pytest.approx(
            get_contrast_ratio("#F0F8FF", "#0077BE")
        )

    def test_hex_to_rgb(self):
        assert hex_to_rgb("#FF8000") == (255, 128, 0)
        assert hex_to_rgb("ff8000") == (255, 128, 0)
        assert hex_to_rgb("#FFF") is None


class TestValidateTheme:
    def test_default_theme_has_no_warnings(self):
        assert validate_theme(DEFAULT_THEME) == []

    def test_low_dpi_is_error(self):
        theme = merge_with_default({"dimensions": {"dpi": 72}})
        warnings = validate_theme(theme)
        assert [(w.type, w.severity) for w in warnings] == [("dpi", "error")]

    def test_thin_bars_warn(self):
        theme = merge_with_default({"barStyle": {"thickness": 1}})
        assert [w.type for w in validate_theme(theme)] == ["thickness"]

    def test_low_opacity_warns(self):
        theme = merge_with_default({"effects": {"opacity": 50}})
        warnings = validate_theme(theme)
        assert [(w.type, w.severity) for w in warnings] == [("opacity", "warning")]

    def test_narrow_width_warns(self):
        theme = merge_with_default({"dimensions": {"width": 4}})
        assert [w.type for w in validate_theme(theme)] == ["size"]

    def test_moderate_contrast_is_warning(self):
        # #777777 on white is about 4.48:1
        theme = merge_with_default({"colorScheme": {"primary": "#777777"}})
        warnings = validate_theme(theme)
        assert len(warnings) == 1
        assert warnings[0].type == "contrast"
        assert warnings[0].severity == "warning"
        assert "4.48:1" in warnings[0].message

    def test_poor_contrast_is_error(self):
        theme = merge_with_default({"colorScheme": {"primary": "#CCCCCC"}})
        warnings = validate_theme(theme)
        assert warnings[0].type == "contrast"
        assert warnings[0].severity == "error"

    def test_all_checks_reported_together(self):
        theme = merge_with_default(
            {
                "colorScheme": {"primary": "#FFFFFF"},
                "barStyle": {"thickness": 1},
                "effects": {"opacity": 10},
                "dimensions": {"width": 2, "dpi": 150},
            }
        )
        assert [w.type for w in validate_theme(theme)] == [
            "contrast",
            "thickness",
            "opacity",
            "size",
            "dpi",
        ]

    def test_warning_to_dict(self):
        theme = merge_with_default({"dimensions": {"dpi": 72}})
        assert validate_theme(theme)[0].to_dict()["severity"] == "error"


class TestParseThemeConfig:
    def test_none_is_empty(self):
        assert parse_theme_config(None) == {}

    def test_valid_sections_pass(self):
        data = {
            "colorScheme": {
                "type": "gradient",
                "primary": "#0077BE",
                "secondary": "#00C9FF",
                "background": "#F0F8FF",
                "gradientAngle": 45,
            },
            "dimensions": {"width": 20, "height": 6, "dpi": 600},
        }
        assert parse_theme_config(data) == data

    def test_rejects_unknown_top_level_key(self):
        with pytest.raises(ThemeValidationError):
            parse_theme_config({"preset": "classic"})

    def test_rejects_unknown_section_key(self):
        with pytest.raises(ThemeValidationError):
            parse_theme_config({"effects": {"shadow": False, "opacity": 100, "glow": True}})

    def test_rejects_missing_required_field(self):
        with pytest.raises(ThemeValidationError, match="missing required fields"):
            parse_theme_config({"barStyle": {"shape": "rounded"}})

    @pytest.mark.parametrize("color", ["#FFF", "red", "#GGGGGG", 0])
    def test_rejects_bad_color(self, color):
        with pytest.raises(ThemeValidationError):
            parse_theme_config(
                {"colorScheme": {"type": "solid", "primary": color, "background": "#FFFFFF"}}
            )

    @pytest.mark.parametrize(
        "dimensions",
        [
            {"width": 0, "height": 5, "dpi": 300},
            {"width": 15, "height": 51, "dpi": 300},
            {"width": 15, "height": 5, "dpi": 1500},
            {"width": 15, "height": 5, "dpi": True},
            {"width": "15", "height": 5, "dpi": 300},
        ],
    )
    def test_rejects_out_of_range_numbers(self, dimensions):
        with pytest.raises(ThemeValidationError):
            parse_theme_config({"dimensions": dimensions})

    def test_rejects_unknown_shape(self):
        with pytest.raises(ThemeValidationError):
            parse_theme_config({"barStyle": {"shape": "hexagon", "thickness": 5, "spacing": 3}})

    def test_rejects_non_bool_shadow(self):
        with pytest.raises(ThemeValidationError):
            parse_theme_config({"effects": {"shadow": "yes", "opacity": 100}})

    def test_rejects_non_mapping(self):
        with pytest.raises(ThemeValidationError):
            parse_theme_config(["colorScheme"])
