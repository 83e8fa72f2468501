"""Error codes and error handling utilities for wavecode."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for wavecode operations."""

    # Code errors
    CODE_INVALID_FORMAT = auto()
    CODE_NOT_FOUND = auto()
    CODE_ISSUE_EXHAUSTED = auto()
    BOOK_NOT_FOUND = auto()

    # Theme errors
    THEME_INVALID = auto()
    THEME_NOT_FOUND = auto()

    # Rendering errors
    RENDER_FAILED = auto()
    IMAGE_ENCODE_FAILED = auto()

    # Storage errors
    STORE_UNAVAILABLE = auto()
    STORE_CONFLICT = auto()
    FILE_NOT_FOUND = auto()
    FILE_ACCESS_DENIED = auto()

    # Operation errors
    OPERATION_CANCELLED = auto()
    OPERATION_FAILED = auto()
    OPERATION_PARTIAL = auto()

    # Configuration errors
    CONFIG_INVALID = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.CODE_INVALID_FORMAT: "Codes are 6 characters using letters A-Z and digits 0-9.",
    ErrorCode.CODE_NOT_FOUND: "No page is registered for this code.",
    ErrorCode.CODE_ISSUE_EXHAUSTED: "Failed to generate a unique code. Try issuing the page again.",
    ErrorCode.BOOK_NOT_FOUND: "No pages are registered for this book.",

    ErrorCode.THEME_INVALID: "The theme configuration is invalid. Check colors and numeric ranges.",
    ErrorCode.THEME_NOT_FOUND: "Theme preset not found.",

    ErrorCode.RENDER_FAILED: "The wave code image could not be rendered.",
    ErrorCode.IMAGE_ENCODE_FAILED: "The rendered image could not be encoded as PNG.",

    ErrorCode.STORE_UNAVAILABLE: "The page store could not be opened. Check the database path.",
    ErrorCode.STORE_CONFLICT: "A page with this code or page number already exists.",
    ErrorCode.FILE_NOT_FOUND: "The file was not found. It may have been moved or deleted.",
    ErrorCode.FILE_ACCESS_DENIED: "Access denied. Check file permissions.",

    ErrorCode.OPERATION_CANCELLED: "Operation was cancelled.",
    ErrorCode.OPERATION_FAILED: "Operation failed. See details for more information.",
    ErrorCode.OPERATION_PARTIAL: "Operation completed with some errors. Review the log.",

    ErrorCode.CONFIG_INVALID: "Configuration is invalid. Reset to defaults?",
}


@dataclass
class WaveCodeError(Exception):
    """Base exception for wavecode with error code and context."""

    code: ErrorCode
    message: str = ""
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")
        if not self.suggestion and self.code in ERROR_MESSAGES:
            self.suggestion = ERROR_MESSAGES[self.code]

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f"\nFile: {self.path}")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or API responses."""
        return {
            "code": self.code.name,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "details": self.details,
            "suggestion": self.suggestion,
        }


def classify_exception(exc: Exception, path: Path | None = None) -> WaveCodeError:
    """Classify a generic exception into a WaveCodeError with appropriate code."""
    if isinstance(exc, WaveCodeError):
        return exc

    # Imported lazily: the theme package imports this module.
    from wavecode.themes.models import ThemeValidationError

    exc_name = type(exc).__name__
    exc_str = str(exc).lower()

    if isinstance(exc, ThemeValidationError):
        return WaveCodeError(
            ErrorCode.THEME_INVALID,
            message=str(exc),
            path=path,
            details={"original": exc_str},
        )
    if isinstance(exc, FileNotFoundError):
        return WaveCodeError(ErrorCode.FILE_NOT_FOUND, path=path, details={"original": exc_str})
    if isinstance(exc, PermissionError):
        return WaveCodeError(ErrorCode.FILE_ACCESS_DENIED, path=path, details={"original": exc_str})
    if isinstance(exc, sqlite3.IntegrityError):
        return WaveCodeError(ErrorCode.STORE_CONFLICT, path=path, details={"original": exc_str})
    if isinstance(exc, sqlite3.Error):
        return WaveCodeError(ErrorCode.STORE_UNAVAILABLE, path=path, details={"original": exc_str})
    if "png" in exc_str or "encode" in exc_str:
        return WaveCodeError(ErrorCode.IMAGE_ENCODE_FAILED, path=path, details={"original": exc_str})

    return WaveCodeError(
        ErrorCode.OPERATION_FAILED,
        message=f"{exc_name}: {exc}",
        path=path,
        details={"original": exc_str},
    )


def format_error_for_user(error: WaveCodeError | Exception) -> str:
    """Format an error for display with actionable suggestions."""
    if isinstance(error, WaveCodeError):
        parts = [error.message]
        if error.suggestion and error.suggestion != error.message:
            parts.append(f"\n\n{error.suggestion}")
        if error.path:
            parts.append(f"\n\nFile: {error.path.name}")
        return "".join(parts)

    classified = classify_exception(error)
    return format_error_for_user(classified)
