"""Theme preset discovery and registry."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping

from wavecode.themes.loader import THEME_FILE_SUFFIXES, load_theme_preset
from wavecode.themes.merge import merge_with_default
from wavecode.themes.models import ThemeConfig, ThemePreset, ThemeValidationError

_MAX_THEME_FILE_CANDIDATES = 512


class ThemeRegistry:
    """Loads preset theme files from builtin and user directories."""

    def __init__(self, builtin_root: Path, user_root: Path | None = None) -> None:
        self._builtin_root = builtin_root
        self._user_root = user_root
        self._presets: dict[str, ThemePreset] = {}
        self._load_errors: list[str] = []

    @property
    def builtin_root(self) -> Path:
        return self._builtin_root

    @property
    def user_root(self) -> Path | None:
        return self._user_root

    def set_user_root(self, path: Path | None) -> None:
        self._user_root = path

    def reload(self) -> None:
        self._presets = {}
        self._load_errors = []
        self._load_from_root(self._builtin_root, is_builtin=True, can_override=False)
        if self._user_root is not None:
            self._load_from_root(self._user_root, is_builtin=False, can_override=True)

    def list_presets(self) -> list[ThemePreset]:
        rows = list(self._presets.values())
        return sorted(rows, key=lambda row: (0 if row.is_builtin else 1, row.name.lower()))

    def preset_ids(self) -> list[str]:
        return [preset.theme_id for preset in self.list_presets()]

    def get_preset(self, theme_id: str) -> ThemePreset | None:
        return self._presets.get(theme_id)

    def resolve(self, theme_id: str, overrides: Mapping[str, Any] | None = None) -> ThemeConfig:
        """Return the full theme for a preset, with optional per-field overrides on top."""
        preset = self.get_preset(theme_id)
        if preset is None:
            raise KeyError(theme_id)
        theme = merge_with_default(preset.config)
        if overrides:
            theme = merge_with_default(overrides, default=theme)
        return theme

    def load_errors(self) -> list[str]:
        return list(self._load_errors)

    def _load_from_root(self, root: Path, *, is_builtin: bool, can_override: bool) -> None:
        if not root.exists():
            return
        try:
            all_files = sorted(
                path
                for path in root.iterdir()
                if path.is_file() and path.suffix.lower() in THEME_FILE_SUFFIXES
            )
        except OSError as exc:
            self._load_errors.append(f"Failed to list themes in {root}: {exc}")
            return

        if len(all_files) > _MAX_THEME_FILE_CANDIDATES:
            self._load_errors.append(
                f"Theme file limit exceeded in {root}; "
                f"only first {_MAX_THEME_FILE_CANDIDATES} files were scanned."
            )
            all_files = all_files[:_MAX_THEME_FILE_CANDIDATES]

        for theme_path in all_files:
            try:
                preset = load_theme_preset(theme_path, is_builtin=is_builtin)
            except ThemeValidationError as exc:
                self._load_errors.append(str(exc))
                continue

            theme_id = preset.theme_id
            existing = self._presets.get(theme_id)
            if existing is not None and not can_override:
                self._load_errors.append(
                    f"Duplicate builtin theme id {theme_id!r} at {theme_path}; skipping."
                )
                continue
            if existing is not None and existing.is_builtin and can_override:
                self._load_errors.append(
                    f"User theme {theme_id!r} overrides built-in theme."
                )
            self._presets[theme_id] = preset
