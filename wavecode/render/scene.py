"""Geometry for wave code images as typed shape descriptors.

Nothing here touches a rasterizer. ``build_scene`` turns a code and a full
theme into a ``WaveScene`` that any backend can draw; the Qt backend lives
in ``wavecode.render.raster``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from wavecode.core.codes import code_to_wave_pattern
from wavecode.themes.models import ThemeConfig

MM_PER_INCH = 25.4
REFERENCE_DPI = 300

# Unscaled theme values and the pixel sizes they map to at REFERENCE_DPI.
BASE_THICKNESS = 5
BASE_SPACING = 3
BASE_BAR_WIDTH_PX = 4
BASE_BAR_GAP_PX = 2
MIN_BAR_WIDTH_PX = 2
MIN_BAR_GAP_PX = 1

MIN_BAR_HEIGHT_PX = 4
VERTICAL_MARGIN_PX = 8

DEFAULT_GRADIENT_ANGLE = 90
DEFAULT_SHADOW_BLUR = 2
DEFAULT_SHADOW_COLOR = "#000000"
SHADOW_OFFSET_PX = 1
SHADOW_OPACITY = 0.5


@dataclass(frozen=True, slots=True)
class SolidFill:
    color: str


@dataclass(frozen=True, slots=True)
class LinearGradientFill:
    """Two-stop gradient; endpoints are percentages of each shape's bounding box."""

    start_color: str
    end_color: str
    x1: float
    y1: float
    x2: float
    y2: float


Fill = Union[SolidFill, LinearGradientFill]


@dataclass(frozen=True, slots=True)
class DropShadow:
    dx: float
    dy: float
    blur: float
    color: str
    opacity: float


@dataclass(frozen=True, slots=True)
class RectShape:
    x: float
    y: float
    width: float
    height: float
    fill: Fill
    shadow: DropShadow | None = None


@dataclass(frozen=True, slots=True)
class RoundedRectShape:
    x: float
    y: float
    width: float
    height: float
    radius: float
    fill: Fill
    shadow: DropShadow | None = None


@dataclass(frozen=True, slots=True)
class CircleShape:
    cx: float
    cy: float
    radius: float
    fill: Fill
    shadow: DropShadow | None = None


@dataclass(frozen=True, slots=True)
class TriangleShape:
    points: tuple[tuple[float, float], tuple[float, float], tuple[float, float]]
    fill: Fill
    shadow: DropShadow | None = None


Shape = Union[RectShape, RoundedRectShape, CircleShape, TriangleShape]


@dataclass(frozen=True, slots=True)
class BarLayout:
    """Pixel metrics shared by every bar in one image."""

    width_px: int
    height_px: int
    bar_width: int
    bar_gap: int
    bar_count: int
    start_x: int


@dataclass(frozen=True, slots=True)
class WaveScene:
    width: int
    height: int
    dpi: int
    background: str
    opacity: float
    shapes: tuple[Shape, ...]
    layout: BarLayout


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def mm_to_pixels(mm: float, dpi: float) -> int:
    return round_half_up(mm / MM_PER_INCH * dpi)


def compute_layout(theme: ThemeConfig, pattern_length: int) -> BarLayout:
    """Resolve canvas size, bar pitch and how many bars fit, centered as a group."""
    dims = theme.dimensions
    width_px = mm_to_pixels(dims.width, dims.dpi)
    height_px = mm_to_pixels(dims.height, dims.dpi)

    dpi_scale = dims.dpi / REFERENCE_DPI
    bar_width = max(
        MIN_BAR_WIDTH_PX,
        round_half_up(BASE_BAR_WIDTH_PX * (theme.bar_style.thickness / BASE_THICKNESS) * dpi_scale),
    )
    bar_gap = max(
        MIN_BAR_GAP_PX,
        round_half_up(BASE_BAR_GAP_PX * (theme.bar_style.spacing / BASE_SPACING) * dpi_scale),
    )

    pitch = bar_width + bar_gap
    bar_count = max(0, min(pattern_length, width_px // pitch))
    group_width = bar_count * pitch - bar_gap if bar_count else 0
    start_x = (width_px - group_width) // 2
    return BarLayout(
        width_px=width_px,
        height_px=height_px,
        bar_width=bar_width,
        bar_gap=bar_gap,
        bar_count=bar_count,
        start_x=start_x,
    )


def bar_height_px(amplitude: float, canvas_height: int) -> int:
    return max(MIN_BAR_HEIGHT_PX, math.floor(amplitude * (canvas_height - VERTICAL_MARGIN_PX)))


def gradient_endpoints(angle_degrees: float) -> tuple[float, float, float, float]:
    rad = math.radians(angle_degrees)
    cos_a = math.cos(rad)
    sin_a = math.sin(rad)
    return (50 - 50 * cos_a, 50 - 50 * sin_a, 50 + 50 * cos_a, 50 + 50 * sin_a)


def resolve_fill(theme: ThemeConfig, bar_index: int) -> Fill:
    scheme = theme.color_scheme
    if scheme.type == "gradient" and scheme.secondary:
        angle = scheme.gradient_angle if scheme.gradient_angle is not None else DEFAULT_GRADIENT_ANGLE
        x1, y1, x2, y2 = gradient_endpoints(angle)
        return LinearGradientFill(scheme.primary, scheme.secondary, x1, y1, x2, y2)
    if scheme.type == "dual-tone" and scheme.secondary:
        return SolidFill(scheme.primary if bar_index % 2 == 0 else scheme.secondary)
    return SolidFill(scheme.primary)


def resolve_shadow(theme: ThemeConfig) -> DropShadow | None:
    effects = theme.effects
    if not effects.shadow:
        return None
    return DropShadow(
        dx=SHADOW_OFFSET_PX,
        dy=SHADOW_OFFSET_PX,
        blur=effects.shadow_blur if effects.shadow_blur is not None else DEFAULT_SHADOW_BLUR,
        color=effects.shadow_color or DEFAULT_SHADOW_COLOR,
        opacity=SHADOW_OPACITY,
    )


def bar_shapes(
    x: float,
    y: float,
    width: float,
    height: float,
    theme: ThemeConfig,
    fill: Fill,
    shadow: DropShadow | None,
) -> list[Shape]:
    """Shapes for one bar occupying the box (x, y, width, height)."""
    style = theme.bar_style
    if style.shape == "rounded":
        roundness = style.roundness or 0
        radius = min(width / 2, (roundness / 100) * (width / 2))
        return [RoundedRectShape(x, y, width, height, radius, fill, shadow)]
    if style.shape == "circular":
        radius = width / 2
        count = max(1, math.floor(height / (width + 1)))
        step = height / count
        return [
            CircleShape(x + radius, y + step / 2 + i * step, radius, fill, shadow)
            for i in range(count)
        ]
    if style.shape == "triangle":
        points = ((x + width / 2, y), (x + width, y + height), (x, y + height))
        return [TriangleShape(points, fill, shadow)]
    return [RectShape(x, y, width, height, fill, shadow)]


def build_scene(code: str, theme: ThemeConfig) -> WaveScene:
    """Lay out the bars for ``code`` under a full ``theme``."""
    pattern = code_to_wave_pattern(code)
    layout = compute_layout(theme, len(pattern))
    shadow = resolve_shadow(theme)

    shapes: list[Shape] = []
    pitch = layout.bar_width + layout.bar_gap
    for index, amplitude in enumerate(pattern[: layout.bar_count]):
        x = layout.start_x + index * pitch
        height = bar_height_px(amplitude, layout.height_px)
        y = (layout.height_px - height) // 2
        fill = resolve_fill(theme, index)
        shapes.extend(bar_shapes(x, y, layout.bar_width, height, theme, fill, shadow))

    return WaveScene(
        width=layout.width_px,
        height=layout.height_px,
        dpi=int(theme.dimensions.dpi),
        background=theme.color_scheme.background,
        opacity=max(0.0, min(100.0, theme.effects.opacity)) / 100,
        shapes=tuple(shapes),
        layout=layout,
    )
