"""Theme file parsing and validation."""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Mapping

import yaml

from wavecode.themes.constants import THEME_SCHEMA_VERSION
from wavecode.themes.models import ThemePreset, ThemeValidationError
from wavecode.themes.validation import parse_theme_config, reject_unknown_keys

THEME_FILE_SUFFIXES: tuple[str, ...] = (".json", ".yaml", ".yml")

_THEME_ID_RE = re.compile(r"^[a-z0-9][a-z0-9-]*$")

_MAX_THEME_FILE_BYTES = 64 * 1024
_MAX_THEME_ID_LEN = 64
_MAX_SHORT_FIELD_LEN = 120
_MAX_DESC_LEN = 240


def load_theme_config(path: Path) -> dict[str, dict[str, Any]]:
    """Load a bare partial theme (colorScheme/barStyle/effects/dimensions) from a file."""
    data = _load_mapping(path)
    return parse_theme_config(data, context=str(path))


def load_theme_preset(path: Path, *, is_builtin: bool = False) -> ThemePreset:
    """Load and validate a named preset file."""
    if path.is_symlink():
        raise ThemeValidationError(f"Theme file cannot be a symlink: {path}")
    data = _load_mapping(path)
    reject_unknown_keys(
        data,
        allowed={"schema_version", "theme_id", "name", "description", "config"},
        context=str(path),
    )

    schema_version = _required_str(data, "schema_version", path, max_len=8)
    if schema_version != THEME_SCHEMA_VERSION:
        raise ThemeValidationError(
            f"{path}: unsupported schema_version {schema_version!r}; "
            f"expected {THEME_SCHEMA_VERSION!r}"
        )

    theme_id = _required_str(data, "theme_id", path, max_len=_MAX_THEME_ID_LEN)
    if not _THEME_ID_RE.match(theme_id):
        raise ThemeValidationError(
            f"{path}: theme_id must match pattern [a-z0-9-], got {theme_id!r}"
        )

    description = ""
    if data.get("description") is not None:
        description = _required_str(data, "description", path, max_len=_MAX_DESC_LEN)

    return ThemePreset(
        theme_id=theme_id,
        name=_required_str(data, "name", path, max_len=_MAX_SHORT_FIELD_LEN),
        description=description,
        config=parse_theme_config(data.get("config"), context=f"{path}:config"),
        source_path=path,
        is_builtin=is_builtin,
    )


def _load_mapping(path: Path) -> Mapping[str, object]:
    if path.suffix.lower() not in THEME_FILE_SUFFIXES:
        raise ThemeValidationError(f"{path}: unsupported theme file type {path.suffix!r}")
    content = _read_text_limited(path, max_bytes=_MAX_THEME_FILE_BYTES)
    try:
        if path.suffix.lower() == ".json":
            data = json.loads(content)
        else:
            data = yaml.safe_load(content)
    except json.JSONDecodeError as exc:
        raise ThemeValidationError(f"Invalid JSON in {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ThemeValidationError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ThemeValidationError(f"Expected an object in {path}")
    return data


def _required_str(data: Mapping[str, object], key: str, path: Path, *, max_len: int) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ThemeValidationError(f"{path}: field {key!r} must be a non-empty string")
    cleaned = value.strip()
    if len(cleaned) > max_len:
        raise ThemeValidationError(f"{path}: field {key!r} exceeds max length {max_len}")
    if any(ch in cleaned for ch in ("\n", "\r", "\t")):
        raise ThemeValidationError(f"{path}: field {key!r} must be a single line string")
    return cleaned


def _read_text_limited(path: Path, *, max_bytes: int) -> str:
    try:
        size = path.stat().st_size
    except OSError as exc:
        raise ThemeValidationError(f"Unable to stat {path}: {exc}") from exc
    if size > max_bytes:
        raise ThemeValidationError(f"{path}: file exceeds max size ({max_bytes} bytes)")
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ThemeValidationError(f"Unable to read {path}: {exc}") from exc
