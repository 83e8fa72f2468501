"""Theme configuration models."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

ColorSchemeType = Literal["solid", "gradient", "dual-tone"]
BarShape = Literal["rectangle", "rounded", "circular", "triangle"]
WarningType = Literal["contrast", "thickness", "opacity", "size", "dpi"]
Severity = Literal["warning", "error"]


class ThemeValidationError(ValueError):
    """Raised when a theme configuration or theme file fails validation."""


@dataclass(frozen=True, slots=True)
class ColorScheme:
    type: ColorSchemeType
    primary: str
    background: str
    secondary: str | None = None
    gradient_angle: float | None = None


@dataclass(frozen=True, slots=True)
class BarStyle:
    shape: BarShape
    thickness: float
    spacing: float
    roundness: float | None = None


@dataclass(frozen=True, slots=True)
class Effects:
    shadow: bool
    opacity: float
    shadow_color: str | None = None
    shadow_blur: float | None = None


@dataclass(frozen=True, slots=True)
class Dimensions:
    """Physical print size in millimeters plus output resolution."""

    width: float
    height: float
    dpi: int


@dataclass(frozen=True, slots=True)
class ThemeConfig:
    """A complete theme. Partial themes are plain mappings merged onto one of these."""

    color_scheme: ColorScheme
    bar_style: BarStyle
    effects: Effects
    dimensions: Dimensions

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used by stored theme JSON."""
        color_scheme: dict[str, Any] = {
            "type": self.color_scheme.type,
            "primary": self.color_scheme.primary,
            "background": self.color_scheme.background,
        }
        if self.color_scheme.secondary is not None:
            color_scheme["secondary"] = self.color_scheme.secondary
        if self.color_scheme.gradient_angle is not None:
            color_scheme["gradientAngle"] = self.color_scheme.gradient_angle

        bar_style: dict[str, Any] = {
            "shape": self.bar_style.shape,
            "thickness": self.bar_style.thickness,
            "spacing": self.bar_style.spacing,
        }
        if self.bar_style.roundness is not None:
            bar_style["roundness"] = self.bar_style.roundness

        effects: dict[str, Any] = {
            "shadow": self.effects.shadow,
            "opacity": self.effects.opacity,
        }
        if self.effects.shadow_color is not None:
            effects["shadowColor"] = self.effects.shadow_color
        if self.effects.shadow_blur is not None:
            effects["shadowBlur"] = self.effects.shadow_blur

        return {
            "colorScheme": color_scheme,
            "barStyle": bar_style,
            "effects": effects,
            "dimensions": {
                "width": self.dimensions.width,
                "height": self.dimensions.height,
                "dpi": self.dimensions.dpi,
            },
        }


@dataclass(frozen=True, slots=True)
class ThemeWarning:
    """Legibility or print-safety finding for a theme. Never persisted."""

    type: WarningType
    severity: Severity
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"type": self.type, "severity": self.severity, "message": self.message}


@dataclass(frozen=True, slots=True)
class ThemePreset:
    """A named partial theme loaded from a builtin or user theme file."""

    theme_id: str
    name: str
    description: str
    config: dict[str, Any]
    source_path: Path
    is_builtin: bool
