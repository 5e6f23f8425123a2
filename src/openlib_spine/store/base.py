"""Record store acknowledgment and shared helpers."""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from openlib_spine.core.errors import StorageError
from openlib_spine.core.timestamps import utc_now
from openlib_spine.domain.models import AuthorRecord


@dataclass(frozen=True)
class TransactionAck:
    """Acknowledgment of one committed batch."""

    tx_id: str
    records: int
    committed_at: datetime = field(default_factory=utc_now)

    @classmethod
    def new(cls, records: int) -> TransactionAck:
        return cls(tx_id=str(uuid.uuid4()), records=records)


def require_identifiers(records: Sequence[AuthorRecord]) -> None:
    """The identifier is the record's identity; refuse a batch lacking one."""
    missing = sum(1 for record in records if not record.has_identifier)
    if missing:
        raise StorageError(f"{missing} record(s) in batch have no identifier")


__all__ = ["TransactionAck", "require_identifiers"]
