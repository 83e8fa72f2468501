"""Themed wave code rendering to PNG."""

from __future__ import annotations

import base64
from dataclasses import replace
from typing import Any, Iterable, Mapping

from wavecode.render.raster import encode_png, rasterize
from wavecode.render.scene import build_scene
from wavecode.themes.constants import MAX_PREVIEW_SAMPLES, PREVIEW_DPI, PREVIEW_SAMPLE_CODES
from wavecode.themes.merge import merge_with_default
from wavecode.themes.models import ThemeConfig

ThemeInput = ThemeConfig | Mapping[str, Any] | None


def render_wave_code(code: str, theme: ThemeInput = None) -> bytes:
    """Render ``code`` as PNG bytes.

    ``theme`` may be a full ThemeConfig, a partial theme mapping merged onto
    the default theme, or None for the default theme. The same code and theme
    always produce the same bytes.
    """
    scene = build_scene(code, merge_with_default(theme))
    return encode_png(rasterize(scene))


def render_preview(code: str, theme: ThemeInput = None) -> bytes:
    """Render at screen resolution, keeping the theme's physical size."""
    full = merge_with_default(theme)
    preview = replace(full, dimensions=replace(full.dimensions, dpi=PREVIEW_DPI))
    return render_wave_code(code, preview)


def render_data_url(code: str, theme: ThemeInput = None) -> str:
    encoded = base64.b64encode(render_preview(code, theme)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def render_preview_samples(
    theme: ThemeInput = None,
    sample_codes: Iterable[str] | None = None,
) -> list[dict[str, str]]:
    """Preview data URLs for up to five codes, falling back to stock samples."""
    codes = list(sample_codes or [])[:MAX_PREVIEW_SAMPLES]
    if not codes:
        codes = list(PREVIEW_SAMPLE_CODES)
    full = merge_with_default(theme)
    return [{"code": code, "image_url": render_data_url(code, full)} for code in codes]
