"""Tests for the in-memory record store."""

import pytest

from openlib_spine.core.errors import StorageError
from openlib_spine.core.protocols import RecordStore
from openlib_spine.domain.models import AuthorRecord


def test_satisfies_protocol(memory_store):
    assert isinstance(memory_store, RecordStore)


def test_upsert_and_transactions_log(memory_store):
    memory_store.transact([AuthorRecord(name="A", identifier="OL1A")])
    memory_store.transact([AuthorRecord(name="B", identifier="OL1A"), AuthorRecord(identifier="OL2A")])
    assert memory_store.count() == 2
    assert memory_store.get("OL1A").name == "B"
    assert memory_store.transactions == [1, 2]


def test_refuses_missing_identifier(memory_store):
    with pytest.raises(StorageError):
        memory_store.transact([AuthorRecord(name="nobody")])
    assert memory_store.transactions == []


def test_search_matches_whole_words(memory_store):
    memory_store.transact(
        [
            AuthorRecord(name="Jane Doe", identifier="OL1A"),
            AuthorRecord(name="Janet Smith", identifier="OL2A"),
        ]
    )
    assert [r.identifier for r in memory_store.search_name("JANE")] == ["OL1A"]
    assert memory_store.search_name("") == []
