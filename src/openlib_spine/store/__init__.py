"""Record store backends."""

from openlib_spine.store.base import TransactionAck
from openlib_spine.store.memory import InMemoryRecordStore
from openlib_spine.store.sqlite import SQLiteRecordStore

__all__ = ["TransactionAck", "InMemoryRecordStore", "SQLiteRecordStore"]
