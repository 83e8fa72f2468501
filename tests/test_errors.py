"""Tests for wavecode.errors."""

import sqlite3
from pathlib import Path

from wavecode.errors import (
    ErrorCode,
    WaveCodeError,
    classify_exception,
    format_error_for_user,
)
from wavecode.themes.models import ThemeValidationError


class TestWaveCodeError:
    def test_default_message(self):
        err = WaveCodeError(ErrorCode.THEME_NOT_FOUND)
        assert err.message == "Theme preset not found."

    def test_str_includes_details(self):
        err = WaveCodeError(ErrorCode.CODE_INVALID_FORMAT, details={"code": "AB"})
        assert "code=AB" in str(err)

    def test_to_dict(self):
        err = WaveCodeError(ErrorCode.FILE_NOT_FOUND, path=Path("/tmp/x.json"))
        payload = err.to_dict()
        assert payload["code"] == "FILE_NOT_FOUND"
        assert payload["path"].endswith("x.json")


class TestClassifyException:
    def test_passthrough(self):
        err = WaveCodeError(ErrorCode.RENDER_FAILED)
        assert classify_exception(err) is err

    def test_theme_validation(self):
        err = classify_exception(ThemeValidationError("bad color"))
        assert err.code is ErrorCode.THEME_INVALID
        assert err.message == "bad color"

    def test_file_errors(self):
        assert classify_exception(FileNotFoundError("x")).code is ErrorCode.FILE_NOT_FOUND
        assert classify_exception(PermissionError("x")).code is ErrorCode.FILE_ACCESS_DENIED

    def test_store_errors(self):
        assert classify_exception(sqlite3.IntegrityError("UNIQUE")).code is ErrorCode.STORE_CONFLICT
        assert classify_exception(sqlite3.OperationalError("locked")).code is ErrorCode.STORE_UNAVAILABLE

    def test_encode_errors(self):
        assert classify_exception(RuntimeError("PNG write")).code is ErrorCode.IMAGE_ENCODE_FAILED

    def test_unknown(self):
        err = classify_exception(ValueError("odd"))
        assert err.code is ErrorCode.OPERATION_FAILED
        assert err.message == "ValueError: odd"


def test_format_error_for_user():
    text = format_error_for_user(WaveCodeError(ErrorCode.STORE_CONFLICT, path=Path("/a/pages.db")))
    assert text.startswith("A page with this code")
    assert "File: pages.db" in text
    assert "Access denied" in format_error_for_user(PermissionError("nope"))
