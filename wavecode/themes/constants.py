"""Theme defaults, enumerations and numeric limits."""

from __future__ import annotations

from wavecode.themes.models import BarStyle, ColorScheme, Dimensions, Effects, ThemeConfig

DEFAULT_PRESET_ID = "classic"
THEME_SCHEMA_VERSION = "1"

DEFAULT_THEME = ThemeConfig(
    color_scheme=ColorScheme(type="solid", primary="#000000", background="#FFFFFF"),
    bar_style=BarStyle(shape="rectangle", thickness=5, spacing=3),
    effects=Effects(shadow=False, opacity=100),
    dimensions=Dimensions(width=15, height=5, dpi=300),
)

COLOR_SCHEME_TYPES: tuple[str, ...] = ("solid", "gradient", "dual-tone")
BAR_SHAPES: tuple[str, ...] = ("rectangle", "rounded", "circular", "triangle")

SECTION_KEYS: tuple[str, ...] = ("colorScheme", "barStyle", "effects", "dimensions")

# Inclusive (min, max) ranges accepted at the theme boundary.
NUMERIC_RANGES: dict[str, dict[str, tuple[float, float]]] = {
    "colorScheme": {"gradientAngle": (0, 360)},
    "barStyle": {"thickness": (1, 10), "spacing": (1, 5), "roundness": (0, 100)},
    "effects": {"shadowBlur": (0, 10), "opacity": (0, 100)},
    "dimensions": {"width": (1, 100), "height": (1, 50), "dpi": (72, 1200)},
}

# Warning thresholds for validate_theme.
CONTRAST_WARNING_RATIO = 4.5
CONTRAST_ERROR_RATIO = 3.0
MIN_THICKNESS = 2
MIN_OPACITY = 70
MIN_WIDTH_MM = 5
MIN_PRINT_DPI = 300

PREVIEW_DPI = 72
PREVIEW_SAMPLE_CODES: tuple[str, ...] = ("ABC123", "XYZ789", "TEST01")
MAX_PREVIEW_SAMPLES = 5
