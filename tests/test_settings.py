"""Tests for AppSettings backed by an INI QSettings file."""

from __future__ import annotations

from pathlib import Path

import pytest
from PySide6.QtCore import QSettings

from wavecode.config.settings import AppSettings


@pytest.fixture
def settings(tmp_path: Path, monkeypatch) -> AppSettings:
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    qs = QSettings(str(tmp_path / "settings.ini"), QSettings.Format.IniFormat)
    return AppSettings(qs)


def test_defaults(settings: AppSettings, tmp_path: Path) -> None:
    assert settings.render_batch_size == 50
    assert settings.issue_max_attempts == 10
    assert settings.default_preset_id == "classic"
    assert settings.app_data_dir == tmp_path / "appdata" / "wavecode"
    assert settings.page_store_db_path == str(tmp_path / "appdata" / "wavecode" / "pages.db")


def test_dirs_are_created(settings: AppSettings) -> None:
    assert settings.log_dir.is_dir()
    assert settings.log_dir.name == "logs"
    assert settings.user_themes_dir.is_dir()
    assert settings.user_themes_dir.name == "themes"


def test_round_trip_values(settings: AppSettings, tmp_path: Path) -> None:
    settings.render_batch_size = 20
    settings.issue_max_attempts = 3
    settings.default_preset_id = "ocean-blue"
    settings.output_dir = str(tmp_path / "out")
    settings.page_store_db_path = str(tmp_path / "custom.db")
    settings.user_themes_dir = tmp_path / "my-themes"

    assert settings.render_batch_size == 20
    assert settings.issue_max_attempts == 3
    assert settings.default_preset_id == "ocean-blue"
    assert settings.output_dir == str(tmp_path / "out")
    assert settings.page_store_db_path == str(tmp_path / "custom.db")
    assert settings.user_themes_dir == tmp_path / "my-themes"


def test_invalid_values_fall_back(settings: AppSettings) -> None:
    settings.render_batch_size = 0
    settings.issue_max_attempts = -4
    settings.default_preset_id = "   "

    assert settings.render_batch_size == 50
    assert settings.issue_max_attempts == 10
    assert settings.default_preset_id == "classic"
