"""SQLite-backed store of issued page codes."""

from __future__ import annotations

from dataclasses import dataclass, field
import json
import sqlite3
from pathlib import Path
from typing import Any, Iterable, Mapping

from wavecode.core.codes import is_valid_format

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS pages (
    code         TEXT    PRIMARY KEY,
    book_id      TEXT    NOT NULL,
    page_number  INTEGER NOT NULL,
    audio_link   TEXT    NOT NULL,
    UNIQUE (book_id, page_number)
);
"""

BOOK_THEMES_SQL = """
CREATE TABLE IF NOT EXISTS book_themes (
    book_id      TEXT PRIMARY KEY,
    theme_json   TEXT NOT NULL
);
"""

PREFETCH_PAGES = 2


@dataclass(frozen=True, slots=True)
class PageRecord:
    code: str
    book_id: str
    page_number: int
    audio_link: str


@dataclass(frozen=True, slots=True)
class PageLookup:
    """A resolved scan: the page plus navigation around it."""

    page: PageRecord
    total_pages: int
    next_code: str | None = None
    prev_code: str | None = None
    prefetch: list[PageRecord] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "valid": True,
            "book_id": self.page.book_id,
            "page_number": self.page.page_number,
            "total_pages": self.total_pages,
            "audio_link": self.page.audio_link,
            "next_code": self.next_code,
            "prev_code": self.prev_code,
            "prefetch": [
                {
                    "code": p.code,
                    "page_number": p.page_number,
                    "audio_link": p.audio_link,
                }
                for p in self.prefetch
            ],
        }


class PageStore:
    """Persists page codes and answers uniqueness and lookup queries."""

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)
        self._conn: sqlite3.Connection | None = None

    def open(self) -> None:
        """Open the DB and initialize schema."""
        if self._conn is not None:
            return
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self._db_path, check_same_thread=False)
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute(SCHEMA_SQL)
        conn.execute(BOOK_THEMES_SQL)
        conn.commit()
        self._conn = conn

    def close(self) -> None:
        """Close the active DB connection."""
        if self._conn is None:
            return
        self._conn.close()
        self._conn = None

    def __enter__(self) -> PageStore:
        self.open()
        return self

    def __exit__(self, *_exc) -> None:
        self.close()

    def exists(self, code: str) -> bool:
        """Return True when ``code`` is already issued."""
        row = self._conn_or_raise().execute(
            "SELECT 1 FROM pages WHERE code = ?",
            (code.upper(),),
        ).fetchone()
        return row is not None

    def add_page(self, record: PageRecord) -> None:
        """Insert one page; raises sqlite3.IntegrityError on code or page clash."""
        self.add_pages([record])

    def add_pages(self, records: Iterable[PageRecord]) -> None:
        rows = [
            (r.code.upper(), r.book_id, int(r.page_number), r.audio_link)
            for r in records
        ]
        if not rows:
            return
        conn = self._conn_or_raise()
        with conn:
            conn.executemany(
                "INSERT INTO pages (code, book_id, page_number, audio_link) VALUES (?, ?, ?, ?)",
                rows,
            )

    def delete_book_pages(self, book_id: str) -> int:
        """Remove every page of a book, returning how many were removed."""
        conn = self._conn_or_raise()
        with conn:
            cursor = conn.execute("DELETE FROM pages WHERE book_id = ?", (book_id,))
        return cursor.rowcount

    def replace_page_code(self, old_code: str, new_code: str) -> PageRecord | None:
        """Move a page to ``new_code``; None when ``old_code`` is unknown."""
        conn = self._conn_or_raise()
        with conn:
            cursor = conn.execute(
                "UPDATE pages SET code = ? WHERE code = ?",
                (new_code.upper(), old_code.upper()),
            )
        if cursor.rowcount == 0:
            return None
        return self.get(new_code)

    def book_exists(self, book_id: str) -> bool:
        row = self._conn_or_raise().execute(
            "SELECT 1 FROM pages WHERE book_id = ? LIMIT 1",
            (book_id,),
        ).fetchone()
        return row is not None

    def book_theme(self, book_id: str) -> dict[str, Any] | None:
        """Return the partial theme stored for a book, or None for the default."""
        row = self._conn_or_raise().execute(
            "SELECT theme_json FROM book_themes WHERE book_id = ?",
            (book_id,),
        ).fetchone()
        if row is None:
            return None
        return json.loads(row[0])

    def set_book_theme(self, book_id: str, config: Mapping[str, Any] | None) -> None:
        """Store a partial theme for a book; None resets it to the default."""
        conn = self._conn_or_raise()
        with conn:
            if config is None:
                conn.execute("DELETE FROM book_themes WHERE book_id = ?", (book_id,))
                return
            conn.execute(
                """
                INSERT INTO book_themes (book_id, theme_json) VALUES (?, ?)
                ON CONFLICT(book_id) DO UPDATE SET theme_json = excluded.theme_json
                """,
                (book_id, json.dumps(dict(config), sort_keys=True)),
            )

    def book_pages(self, book_id: str) -> list[PageRecord]:
        rows = self._conn_or_raise().execute(
            """
            SELECT code, book_id, page_number, audio_link
            FROM pages
            WHERE book_id = ?
            ORDER BY page_number
            """,
            (book_id,),
        ).fetchall()
        return [self._record(row) for row in rows]

    def get(self, code: str) -> PageRecord | None:
        row = self._conn_or_raise().execute(
            "SELECT code, book_id, page_number, audio_link FROM pages WHERE code = ?",
            (code.upper(),),
        ).fetchone()
        return self._record(row) if row is not None else None

    def lookup(self, code: str) -> PageLookup | None:
        """Resolve a scanned code; None for malformed or unknown codes."""
        if not is_valid_format(code):
            return None
        page = self.get(code)
        if page is None:
            return None

        conn = self._conn_or_raise()
        total = conn.execute(
            "SELECT COUNT(*) FROM pages WHERE book_id = ?",
            (page.book_id,),
        ).fetchone()[0]
        prev_row = conn.execute(
            "SELECT code FROM pages WHERE book_id = ? AND page_number = ?",
            (page.book_id, page.page_number - 1),
        ).fetchone()
        following = conn.execute(
            """
            SELECT code, book_id, page_number, audio_link
            FROM pages
            WHERE book_id = ? AND page_number > ? AND page_number <= ?
            ORDER BY page_number
            """,
            (page.book_id, page.page_number, page.page_number + PREFETCH_PAGES),
        ).fetchall()
        prefetch = [self._record(row) for row in following]
        next_code = next(
            (p.code for p in prefetch if p.page_number == page.page_number + 1),
            None,
        )
        return PageLookup(
            page=page,
            total_pages=int(total),
            next_code=next_code,
            prev_code=prev_row[0] if prev_row is not None else None,
            prefetch=prefetch,
        )

    def _conn_or_raise(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("PageStore is not open")
        return self._conn

    @staticmethod
    def _record(row: tuple) -> PageRecord:
        return PageRecord(
            code=str(row[0]),
            book_id=str(row[1]),
            page_number=int(row[2]),
            audio_link=str(row[3]),
        )
