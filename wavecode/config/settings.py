"""Application settings via QSettings."""

from __future__ import annotations

import os
from pathlib import Path

from PySide6.QtCore import QSettings

from wavecode.themes.constants import DEFAULT_PRESET_ID

DEFAULT_RENDER_BATCH_SIZE = 50
DEFAULT_ISSUE_MAX_ATTEMPTS = 10


class AppSettings:
    """Wraps QSettings for persistent app configuration."""

    def __init__(self, qsettings: QSettings | None = None) -> None:
        self._qs = qsettings if qsettings is not None else QSettings("WaveCode", "WaveCode")

    # -- directories --

    @property
    def output_dir(self) -> str:
        default = str(Path.cwd() / "wave-codes")
        return self._qs.value("dirs/output", default, type=str) or default

    @output_dir.setter
    def output_dir(self, value: str) -> None:
        self._qs.setValue("dirs/output", (value or "").strip())

    @property
    def user_themes_dir(self) -> Path:
        raw = (self._qs.value("dirs/themes", "", type=str) or "").strip()
        path = Path(raw) if raw else self.app_data_dir / "themes"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @user_themes_dir.setter
    def user_themes_dir(self, value: str | Path) -> None:
        self._qs.setValue("dirs/themes", str(value).strip())

    # -- page store --

    @property
    def page_store_db_path(self) -> str:
        raw = (self._qs.value("store/db_path", "", type=str) or "").strip()
        return raw or str(self.app_data_dir / "pages.db")

    @page_store_db_path.setter
    def page_store_db_path(self, value: str) -> None:
        self._qs.setValue("store/db_path", (value or "").strip())

    # -- rendering --

    @property
    def render_batch_size(self) -> int:
        value = self._qs.value("render/batch_size", DEFAULT_RENDER_BATCH_SIZE, type=int)
        return value if value and value > 0 else DEFAULT_RENDER_BATCH_SIZE

    @render_batch_size.setter
    def render_batch_size(self, value: int) -> None:
        cleaned = int(value) if value and int(value) > 0 else DEFAULT_RENDER_BATCH_SIZE
        self._qs.setValue("render/batch_size", cleaned)

    @property
    def default_preset_id(self) -> str:
        raw = self._qs.value("render/default_preset", DEFAULT_PRESET_ID, type=str)
        value = (raw or "").strip()
        return value or DEFAULT_PRESET_ID

    @default_preset_id.setter
    def default_preset_id(self, value: str) -> None:
        cleaned = (value or "").strip() or DEFAULT_PRESET_ID
        self._qs.setValue("render/default_preset", cleaned)

    # -- issuance --

    @property
    def issue_max_attempts(self) -> int:
        value = self._qs.value("issue/max_attempts", DEFAULT_ISSUE_MAX_ATTEMPTS, type=int)
        return value if value and value > 0 else DEFAULT_ISSUE_MAX_ATTEMPTS

    @issue_max_attempts.setter
    def issue_max_attempts(self, value: int) -> None:
        cleaned = int(value) if value and int(value) > 0 else DEFAULT_ISSUE_MAX_ATTEMPTS
        self._qs.setValue("issue/max_attempts", cleaned)

    # -- helpers --

    @property
    def app_data_dir(self) -> Path:
        path = self._app_data_dir()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def log_dir(self) -> Path:
        path = self.app_data_dir / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _app_data_dir() -> Path:
        base = Path(os.environ.get("APPDATA", Path.home() / ".config"))
        return base / "wavecode"
