"""In-memory record store for tests and dry runs."""

from __future__ import annotations

import re
import threading
from collections.abc import Sequence

from openlib_spine.domain.models import AuthorRecord
from openlib_spine.store.base import TransactionAck, require_identifiers

_WORD = re.compile(r"\w+")


class InMemoryRecordStore:
    """
    Dict-backed record store with the same upsert semantics as SQLite.

    ``transactions`` keeps the size of every acknowledged batch in commit
    order, which lets tests assert on batching.
    """

    def __init__(self) -> None:
        self._records: dict[str, AuthorRecord] = {}
        self._lock = threading.Lock()
        self.transactions: list[int] = []

    def transact(self, records: Sequence[AuthorRecord]) -> TransactionAck:
        require_identifiers(records)
        with self._lock:
            for record in records:
                self._records[record.identifier] = record
            self.transactions.append(len(records))
        return TransactionAck.new(len(records))

    def get(self, identifier: str) -> AuthorRecord | None:
        with self._lock:
            return self._records.get(identifier)

    def search_name(self, text: str, limit: int = 20) -> list[AuthorRecord]:
        """Case-insensitive match of every term against the name's words."""
        terms = [t.casefold() for t in _WORD.findall(text)]
        if not terms:
            return []
        with self._lock:
            candidates = list(self._records.values())
        matches = []
        for record in candidates:
            words = set(_WORD.findall((record.name or "").casefold()))
            if all(term in words for term in terms):
                matches.append(record)
        return matches[:limit]

    def count(self) -> int:
        with self._lock:
            return len(self._records)


__all__ = ["InMemoryRecordStore"]
