"""
Structural protocols for openlib-spine.

The pipeline depends on the *shape* of the record store, never on a
concrete backend: anything with ``transact`` and the read methods below
can receive batches. ``SQLiteRecordStore`` and ``InMemoryRecordStore``
both satisfy it.

Architecture:
    ::

        RecordStore Protocol:
        ┌────────────────────────────────────────────────────────┐
        │ transact(records)      → TransactionAck (write)        │
        │ get(identifier)        → AuthorRecord | None           │
        │ search_name(text, n)   → list[AuthorRecord]            │
        │ count()                → int                           │
        └────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from openlib_spine.domain.models import AuthorRecord
    from openlib_spine.store.base import TransactionAck


@runtime_checkable
class RecordStore(Protocol):
    """
    Write and lookup interface of the record store.

    ``transact`` must be safe to call from several threads at once and must
    apply a batch atomically: either every record is written or none is.
    """

    def transact(self, records: Sequence[AuthorRecord]) -> TransactionAck:
        """Upsert a batch keyed on identifier and acknowledge it."""
        ...

    def get(self, identifier: str) -> AuthorRecord | None:
        ...

    def search_name(self, text: str, limit: int = 20) -> list[AuthorRecord]:
        ...

    def count(self) -> int:
        ...


__all__ = ["RecordStore"]
