"""Issuing codes for book pages against a persistent uniqueness store."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import sqlite3
from threading import Event
from typing import Any, Callable, Iterable, Mapping, Protocol
from urllib.parse import urlparse

from wavecode.core.batch import render_batch, render_one
from wavecode.core.codes import generate_code, is_valid_format
from wavecode.core.page_store import PageRecord, PageStore
from wavecode.errors import ERROR_MESSAGES, ErrorCode, WaveCodeError, classify_exception
from wavecode.render.renderer import ThemeInput
from wavecode.themes.merge import merge_with_default
from wavecode.themes.models import ThemeConfig

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10


class CodeOracle(Protocol):
    def exists(self, code: str) -> bool: ...


@dataclass(frozen=True, slots=True)
class PageInput:
    page_number: int
    audio_link: str


@dataclass(slots=True)
class IssueResult:
    page_number: int
    audio_link: str
    code: str = ""
    image: bytes | None = None
    error: str = ""

    @property
    def success(self) -> bool:
        return bool(self.code) and not self.error


def parse_audio_links(text: str) -> tuple[list[PageInput], list[str]]:
    """Parse one audio URL per line into pages numbered from 1.

    Blank lines are skipped. Returns the parsed pages and one message per
    malformed line; callers should reject the input when messages exist.
    """
    pages: list[PageInput] = []
    issues: list[str] = []
    lines = [line.strip() for line in text.strip().splitlines() if line.strip()]
    for index, line in enumerate(lines, start=1):
        if is_valid_url(line):
            pages.append(PageInput(page_number=index, audio_link=line))
        else:
            issues.append(f"Invalid URL on line {index}: {line}")
    return pages, issues


def is_valid_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc or parsed.path)


def issue_code(
    oracle: CodeOracle,
    reserved: set[str] | None = None,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    generate: Callable[[], str] = generate_code,
) -> str | None:
    """Draw candidates until one is free in both ``reserved`` and the store.

    Returns None once ``max_attempts`` candidates have all collided.
    """
    reserved = reserved if reserved is not None else set()
    for _attempt in range(max_attempts):
        candidate = generate()
        if candidate in reserved or oracle.exists(candidate):
            continue
        reserved.add(candidate)
        return candidate
    return None


def issue_codes(
    pages: Iterable[PageInput],
    oracle: CodeOracle,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    generate: Callable[[], str] = generate_code,
) -> list[IssueResult]:
    """Assign a fresh code to each page; exhaustion fails only that page."""
    reserved: set[str] = set()
    results: list[IssueResult] = []
    for page in pages:
        result = IssueResult(page_number=page.page_number, audio_link=page.audio_link)
        code = issue_code(oracle, reserved, max_attempts=max_attempts, generate=generate)
        if code is None:
            result.error = ERROR_MESSAGES[ErrorCode.CODE_ISSUE_EXHAUSTED]
            logger.warning(
                "no unique code for page %d after %d attempts",
                page.page_number,
                max_attempts,
            )
        else:
            result.code = code
        results.append(result)
    return results


def theme_to_mapping(theme: ThemeConfig | Mapping[str, Any]) -> dict[str, Any]:
    """Storable partial theme for a full ThemeConfig or a partial mapping."""
    if isinstance(theme, ThemeConfig):
        return theme.to_dict()
    return {key: dict(section) for key, section in theme.items() if section is not None}


def resolve_book_theme(store: PageStore, book_id: str) -> ThemeConfig:
    return merge_with_default(store.book_theme(book_id))


def issue_book_pages(
    store: PageStore,
    book_id: str,
    pages: Iterable[PageInput],
    theme: ThemeInput = None,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    chunk_size: int = 50,
    replace_existing: bool = True,
) -> list[IssueResult]:
    """Issue codes and images for a book's pages and store the successful ones.

    A given ``theme`` becomes the book's stored theme. With no theme the
    book's stored theme is used, or the default when it has none.
    """
    if theme is None:
        theme = store.book_theme(book_id)
    else:
        store.set_book_theme(book_id, theme_to_mapping(theme))

    if replace_existing:
        removed = store.delete_book_pages(book_id)
        if removed:
            logger.info("removed %d existing pages for book %s", removed, book_id)

    results = issue_codes(pages, store, max_attempts=max_attempts)
    issued = [r for r in results if r.success]
    batch = render_batch([r.code for r in issued], theme, chunk_size=chunk_size)
    outcomes = {o.code: o for o in batch.outcomes}

    for result in issued:
        outcome = outcomes.get(result.code)
        if outcome is None or outcome.image is None:
            result.error = outcome.error if outcome is not None else "Not rendered"
            continue
        result.image = outcome.image
        try:
            store.add_page(
                PageRecord(
                    code=result.code,
                    book_id=book_id,
                    page_number=result.page_number,
                    audio_link=result.audio_link,
                )
            )
        except sqlite3.Error as exc:
            result.error = classify_exception(exc).message
            result.image = None
            logger.warning("could not store page %d: %s", result.page_number, exc)

    failed = sum(1 for r in results if not r.success)
    logger.info(
        "issued %d of %d pages for book %s",
        len(results) - failed,
        len(results),
        book_id,
    )
    return results


def regenerate_book_images(
    store: PageStore,
    book_id: str,
    codes: Iterable[str] | None = None,
    *,
    chunk_size: int = 50,
    cancel_event: Event | None = None,
) -> list[IssueResult]:
    """Render a book's pages again under its stored theme.

    Codes stay the same. ``codes`` limits the run to those pages of the book;
    codes from other books are ignored. Pages skipped by a cancel request are
    reported as failed.
    """
    pages = store.book_pages(book_id)
    if not pages:
        raise WaveCodeError(ErrorCode.BOOK_NOT_FOUND, details={"book_id": book_id})
    wanted = {code.upper() for code in codes or ()}
    if wanted:
        pages = [p for p in pages if p.code in wanted]

    batch = render_batch(
        [p.code for p in pages],
        resolve_book_theme(store, book_id),
        chunk_size=chunk_size,
        cancel_event=cancel_event,
    )
    outcomes = {o.code: o for o in batch.outcomes}

    results: list[IssueResult] = []
    for page in pages:
        result = IssueResult(
            page_number=page.page_number,
            audio_link=page.audio_link,
            code=page.code,
        )
        outcome = outcomes.get(page.code)
        if outcome is None:
            result.error = ERROR_MESSAGES[ErrorCode.OPERATION_CANCELLED]
        elif outcome.image is None:
            result.error = outcome.error
        else:
            result.image = outcome.image
        results.append(result)

    logger.info(
        "regenerated %d of %d pages for book %s",
        sum(1 for r in results if r.success),
        len(results),
        book_id,
    )
    return results


def regenerate_page(
    store: PageStore,
    code: str,
    *,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    generate: Callable[[], str] = generate_code,
) -> IssueResult:
    """Move one page to a fresh code and render it under its book's theme.

    The page keeps its number and audio link. When no free code turns up or
    the image fails, the page keeps its old code and the result has the error.
    """
    page = store.get(code) if is_valid_format(code) else None
    if page is None:
        raise WaveCodeError(ErrorCode.CODE_NOT_FOUND, details={"code": code})

    result = IssueResult(page_number=page.page_number, audio_link=page.audio_link)
    new_code = issue_code(store, {page.code}, max_attempts=max_attempts, generate=generate)
    if new_code is None:
        result.error = ERROR_MESSAGES[ErrorCode.CODE_ISSUE_EXHAUSTED]
        logger.warning("no unique replacement for %s after %d attempts", page.code, max_attempts)
        return result

    outcome = render_one(new_code, resolve_book_theme(store, page.book_id))
    if outcome.image is None:
        result.error = outcome.error
        return result

    try:
        store.replace_page_code(page.code, new_code)
    except sqlite3.Error as exc:
        result.error = classify_exception(exc).message
        logger.warning("could not move page %s to %s: %s", page.code, new_code, exc)
        return result

    result.code = new_code
    result.image = outcome.image
    logger.info(
        "page %d of book %s moved from %s to %s",
        page.page_number,
        page.book_id,
        page.code,
        new_code,
    )
    return result
