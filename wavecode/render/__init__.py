"""Wave code image rendering."""

from wavecode.render.renderer import (
    render_data_url,
    render_preview,
    render_preview_samples,
    render_wave_code,
)
from wavecode.render.scene import WaveScene, build_scene

__all__ = [
    "WaveScene",
    "build_scene",
    "render_data_url",
    "render_preview",
    "render_preview_samples",
    "render_wave_code",
]
