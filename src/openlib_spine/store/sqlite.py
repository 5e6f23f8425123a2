"""SQLite-backed record store."""

from __future__ import annotations

import sqlite3
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from openlib_spine.core.errors import StorageError
from openlib_spine.core.logging import get_logger
from openlib_spine.core.timestamps import from_iso8601, to_iso8601
from openlib_spine.domain.models import AuthorRecord
from openlib_spine.store.base import TransactionAck, require_identifiers
from openlib_spine.store.schema import (
    COUNT_AUTHORS,
    SCHEMA_STATEMENTS,
    SEARCH_AUTHORS,
    SELECT_AUTHOR,
    UPSERT_AUTHOR,
)

logger = get_logger(__name__)


def _fts_query(text: str) -> str:
    """Quote every term so user input is never read as FTS5 syntax."""
    terms = text.split()
    return " ".join('"' + term.replace('"', '""') + '"' for term in terms)


def _row_to_record(row: sqlite3.Row) -> AuthorRecord:
    return AuthorRecord(
        name=row["name"],
        modified=from_iso8601(row["modified"]),
        identifier=row["identifier"],
        revision=row["revision"],
    )


class SQLiteRecordStore:
    """
    Record store on a single SQLite file.

    One connection is shared by all threads; a lock serializes access so
    concurrent ``transact`` calls from the batch submitter are safe. Each
    batch is one SQLite transaction: committed whole or rolled back.

    Suitable for:
    - local imports of a full dump
    - tests (``path=":memory:"``)
    """

    def __init__(self, path: str | Path = ":memory:", *, timeout: float = 30.0):
        self._path = str(path)
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    @property
    def path(self) -> str:
        return self._path

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> None:
        """Open the database, creating the parent directory for file paths."""
        if self._conn is not None:
            return
        uri = self._path.startswith("file:")
        if self._path != ":memory:" and not uri:
            Path(self._path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(
                self._path,
                timeout=self._timeout,
                check_same_thread=False,
                uri=uri,
            )
            self._conn.row_factory = sqlite3.Row
        except sqlite3.Error as e:
            raise StorageError(f"Failed to open SQLite store {self._path}: {e}", cause=e) from e

    def disconnect(self) -> None:
        """Close the connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.connect()
        return self._conn

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        with self._lock:
            conn = self._connection()
            try:
                yield conn
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageError(f"SQLite transaction failed: {e}", cause=e) from e
            except Exception:
                conn.rollback()
                raise

    def ensure_schema(self) -> None:
        """Create tables, the name index and triggers; safe to call repeatedly."""
        with self._transaction() as conn:
            for statement in SCHEMA_STATEMENTS:
                conn.execute(statement)
        logger.debug("schema_ensured", path=self._path)

    # ── Write interface ──────────────────────────────────────────

    def transact(self, records: Sequence[AuthorRecord]) -> TransactionAck:
        """Upsert a batch keyed on identifier."""
        require_identifiers(records)
        rows = [
            (r.identifier, r.name, r.revision, to_iso8601(r.modified))
            for r in records
        ]
        with self._transaction() as conn:
            conn.executemany(UPSERT_AUTHOR, rows)
        return TransactionAck.new(len(rows))

    # ── Lookups ──────────────────────────────────────────────────

    def _query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        with self._lock:
            try:
                return self._connection().execute(sql, params).fetchall()
            except sqlite3.Error as e:
                raise StorageError(f"SQLite query failed: {e}", cause=e) from e

    def get(self, identifier: str) -> AuthorRecord | None:
        rows = self._query(SELECT_AUTHOR, (identifier,))
        return _row_to_record(rows[0]) if rows else None

    def search_name(self, text: str, limit: int = 20) -> list[AuthorRecord]:
        """Full-text search over names, best matches first."""
        query = _fts_query(text)
        if not query:
            return []
        return [_row_to_record(row) for row in self._query(SEARCH_AUTHORS, (query, limit))]

    def count(self) -> int:
        return self._query(COUNT_AUTHORS)[0][0]

    def __enter__(self) -> SQLiteRecordStore:
        self.connect()
        self.ensure_schema()
        return self

    def __exit__(self, *args: Any) -> None:
        self.disconnect()

    def __repr__(self) -> str:
        return f"SQLiteRecordStore({self._path!r})"


__all__ = ["SQLiteRecordStore"]
