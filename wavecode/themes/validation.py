"""Theme schema checks, contrast math and legibility warnings."""

from __future__ import annotations

import re
from typing import Any, Mapping

from wavecode.themes.constants import (
    BAR_SHAPES,
    COLOR_SCHEME_TYPES,
    CONTRAST_ERROR_RATIO,
    CONTRAST_WARNING_RATIO,
    MIN_OPACITY,
    MIN_PRINT_DPI,
    MIN_THICKNESS,
    MIN_WIDTH_MM,
    NUMERIC_RANGES,
    SECTION_KEYS,
)
from wavecode.themes.models import ThemeConfig, ThemeValidationError, ThemeWarning

_HEX_COLOR_RE = re.compile(r"^#[0-9A-Fa-f]{6}$")
_HEX_RGB_RE = re.compile(r"^#?([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)

# field -> (kind, required) per section; kind is "color", "number", "bool" or a choice tuple.
_SECTION_SCHEMA: dict[str, dict[str, tuple[object, bool]]] = {
    "colorScheme": {
        "type": (COLOR_SCHEME_TYPES, True),
        "primary": ("color", True),
        "secondary": ("color", False),
        "background": ("color", True),
        "gradientAngle": ("number", False),
    },
    "barStyle": {
        "shape": (BAR_SHAPES, True),
        "thickness": ("number", True),
        "spacing": ("number", True),
        "roundness": ("number", False),
    },
    "effects": {
        "shadow": ("bool", True),
        "shadowColor": ("color", False),
        "shadowBlur": ("number", False),
        "opacity": ("number", True),
    },
    "dimensions": {
        "width": ("number", True),
        "height": ("number", True),
        "dpi": ("number", True),
    },
}


def parse_theme_config(data: object, *, context: str = "theme") -> dict[str, dict[str, Any]]:
    """Check a partial theme mapping at the boundary and return a clean copy.

    Every section is optional. A section that is present must carry its
    required fields, known keys only, hex colors and in-range numbers.
    """
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ThemeValidationError(f"{context}: expected an object, got {type(data).__name__}")
    reject_unknown_keys(data, allowed=set(SECTION_KEYS), context=context)

    cleaned: dict[str, dict[str, Any]] = {}
    for section_key in SECTION_KEYS:
        section = data.get(section_key)
        if section is None:
            continue
        section_context = f"{context}.{section_key}"
        if not isinstance(section, Mapping):
            raise ThemeValidationError(f"{section_context}: expected an object")
        schema = _SECTION_SCHEMA[section_key]
        reject_unknown_keys(section, allowed=set(schema), context=section_context)
        cleaned[section_key] = _parse_section(section, schema, section_key, section_context)
    return cleaned


def hex_to_rgb(value: str) -> tuple[int, int, int] | None:
    """Parse ``#RRGGBB`` (leading # optional); None when malformed."""
    match = _HEX_RGB_RE.match(value or "")
    if match is None:
        return None
    return (int(match.group(1), 16), int(match.group(2), 16), int(match.group(3), 16))


def relative_luminance(value: str) -> float:
    rgb = hex_to_rgb(value)
    if rgb is None:
        return 0.0
    red, green, blue = (_linearize(channel / 255) for channel in rgb)
    return 0.2126 * red + 0.7152 * green + 0.0722 * blue


def get_contrast_ratio(color1: str, color2: str) -> float:
    """WCAG contrast ratio between two hex colors, from 1.0 up to 21.0."""
    first = relative_luminance(color1)
    second = relative_luminance(color2)
    lighter = max(first, second)
    darker = min(first, second)
    return (lighter + 0.05) / (darker + 0.05)


def validate_theme(theme: ThemeConfig) -> list[ThemeWarning]:
    """Return every legibility and print-quality warning that applies."""
    warnings: list[ThemeWarning] = []

    contrast = get_contrast_ratio(theme.color_scheme.primary, theme.color_scheme.background)
    if contrast < CONTRAST_WARNING_RATIO:
        warnings.append(
            ThemeWarning(
                type="contrast",
                severity="error" if contrast < CONTRAST_ERROR_RATIO else "warning",
                message=(
                    f"Low contrast ratio ({contrast:.2f}:1). "
                    f"Recommended minimum is {CONTRAST_WARNING_RATIO}:1 for readability."
                ),
            )
        )

    if theme.bar_style.thickness < MIN_THICKNESS:
        warnings.append(
            ThemeWarning(
                type="thickness",
                severity="warning",
                message="Bar thickness is very thin. This may affect scanning reliability.",
            )
        )

    if theme.effects.opacity < MIN_OPACITY:
        warnings.append(
            ThemeWarning(
                type="opacity",
                severity="warning",
                message="Low opacity may affect print and scan quality.",
            )
        )

    if theme.dimensions.width < MIN_WIDTH_MM:
        warnings.append(
            ThemeWarning(
                type="size",
                severity="warning",
                message=f"Width is very small. Minimum recommended is {MIN_WIDTH_MM}mm.",
            )
        )

    if theme.dimensions.dpi < MIN_PRINT_DPI:
        warnings.append(
            ThemeWarning(
                type="dpi",
                severity="error",
                message=(
                    "DPI is too low for print quality. "
                    f"Minimum recommended is {MIN_PRINT_DPI} DPI."
                ),
            )
        )

    return warnings


def _linearize(channel: float) -> float:
    if channel <= 0.03928:
        return channel / 12.92
    return ((channel + 0.055) / 1.055) ** 2.4


def _parse_section(
    section: Mapping[str, object],
    schema: Mapping[str, tuple[object, bool]],
    section_key: str,
    context: str,
) -> dict[str, Any]:
    missing = sorted(key for key, (_kind, required) in schema.items() if required and key not in section)
    if missing:
        raise ThemeValidationError(f"{context}: missing required fields: {', '.join(missing)}")

    cleaned: dict[str, Any] = {}
    for key, (kind, _required) in schema.items():
        if key not in section:
            continue
        value = section[key]
        if kind == "color":
            if not isinstance(value, str) or not _HEX_COLOR_RE.match(value):
                raise ThemeValidationError(f"{context}: {key!r} must be a #RRGGBB color, got {value!r}")
        elif kind == "bool":
            if not isinstance(value, bool):
                raise ThemeValidationError(f"{context}: {key!r} must be true or false")
        elif kind == "number":
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ThemeValidationError(f"{context}: {key!r} must be a number, got {value!r}")
            low, high = NUMERIC_RANGES[section_key][key]
            if not low <= value <= high:
                raise ThemeValidationError(
                    f"{context}: {key!r} must be between {low} and {high}, got {value!r}"
                )
        elif isinstance(kind, tuple):
            if value not in kind:
                choices = ", ".join(kind)
                raise ThemeValidationError(f"{context}: {key!r} must be one of {choices}, got {value!r}")
        cleaned[key] = value
    return cleaned


def reject_unknown_keys(
    data: Mapping[str, object],
    *,
    allowed: set[str],
    context: str,
) -> None:
    unknown = sorted(str(key) for key in data.keys() if key not in allowed)
    if unknown:
        joined = ", ".join(unknown)
        raise ThemeValidationError(f"{context}: unsupported keys found: {joined}")
