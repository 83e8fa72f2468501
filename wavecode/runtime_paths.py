"""Runtime path helpers for source and frozen executable modes."""

from __future__ import annotations

from pathlib import Path
import sys


def is_frozen() -> bool:
    """Return True when running from a PyInstaller bundle."""
    return bool(getattr(sys, "frozen", False))


def bundle_root() -> Path:
    """Return the runtime extraction root for frozen mode, else package parent."""
    if is_frozen():
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass)
    return Path(__file__).resolve().parent.parent


def package_root() -> Path:
    """Return the root path that contains the `wavecode` package resources."""
    if is_frozen():
        root = bundle_root()
        candidate = root / "wavecode"
        if candidate.exists():
            return candidate
        return root
    return Path(__file__).resolve().parent


def builtin_themes_root() -> Path:
    """Resolve the built-in preset directory across source/frozen layouts."""
    return package_root() / "themes" / "builtin"
