"""Lazy batching helpers."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from itertools import islice
from typing import TypeVar

from openlib_spine.domain.models import AuthorRecord

T = TypeVar("T")


def batched(items: Iterable[T], size: int) -> Iterator[list[T]]:
    """Yield lists of at most ``size`` items without reading ahead further.

    >>> [len(b) for b in batched(range(2500), 1000)]
    [1000, 1000, 500]
    """
    if size < 1:
        raise ValueError(f"batch size must be >= 1, got {size}")
    iterator = iter(items)
    while batch := list(islice(iterator, size)):
        yield batch


class IdentifierFilter:
    """Iterate records that have an identifier, counting the ones dropped."""

    def __init__(self, records: Iterable[AuthorRecord]):
        self._records = records
        self.dropped = 0

    def __iter__(self) -> Iterator[AuthorRecord]:
        for record in self._records:
            if record.has_identifier:
                yield record
            else:
                self.dropped += 1


def with_identifier(records: Iterable[AuthorRecord]) -> IdentifierFilter:
    """Drop records lacking the identifier; ``.dropped`` counts them."""
    return IdentifierFilter(records)


__all__ = ["batched", "with_identifier", "IdentifierFilter"]
