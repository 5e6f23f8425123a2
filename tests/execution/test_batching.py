"""Tests for batching helpers."""

import pytest

from openlib_spine.domain.models import AuthorRecord
from openlib_spine.execution.batching import batched, with_identifier


class TestBatched:
    def test_2500_by_1000(self):
        assert [len(b) for b in batched(range(2500), 1000)] == [1000, 1000, 500]

    def test_exact_multiple(self):
        assert [len(b) for b in batched(range(2000), 1000)] == [1000, 1000]

    def test_empty(self):
        assert list(batched([], 10)) == []

    def test_preserves_order(self):
        assert list(batched("abcde", 2)) == [["a", "b"], ["c", "d"], ["e"]]

    def test_lazy(self):
        pulled = []

        def source():
            for i in range(100):
                pulled.append(i)
                yield i

        batches = batched(source(), 10)
        next(batches)
        assert len(pulled) == 10

    @pytest.mark.parametrize("size", [0, -1])
    def test_invalid_size(self, size):
        with pytest.raises(ValueError):
            list(batched(range(3), size))


class TestWithIdentifier:
    def test_drops_and_counts(self):
        records = [
            AuthorRecord(identifier="OL1A"),
            AuthorRecord(name="no key"),
            AuthorRecord(identifier=""),
            AuthorRecord(identifier="OL2A"),
        ]
        kept = with_identifier(records)
        assert [r.identifier for r in kept] == ["OL1A", "OL2A"]
        assert kept.dropped == 2
