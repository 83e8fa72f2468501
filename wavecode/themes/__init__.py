"""Theme configuration exports."""

from wavecode.themes.constants import DEFAULT_PRESET_ID, DEFAULT_THEME
from wavecode.themes.merge import merge_with_default
from wavecode.themes.models import ThemeConfig, ThemePreset, ThemeValidationError, ThemeWarning
from wavecode.themes.registry import ThemeRegistry
from wavecode.themes.validation import get_contrast_ratio, parse_theme_config, validate_theme

__all__ = [
    "DEFAULT_PRESET_ID",
    "DEFAULT_THEME",
    "ThemeConfig",
    "ThemePreset",
    "ThemeRegistry",
    "ThemeValidationError",
    "ThemeWarning",
    "get_contrast_ratio",
    "merge_with_default",
    "parse_theme_config",
    "validate_theme",
]
