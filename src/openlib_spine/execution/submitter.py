"""Batch Submitter: bounded-parallel writes of record batches.

WHY
───
A full author dump is millions of records. Submitting them one by one is
slow; submitting everything at once needs the whole dump in memory. The
submitter cuts the lazy record stream into fixed-size batches and keeps at
most ``max_parallel`` of them in flight, so input is pulled no faster than
the store acknowledges it.

ARCHITECTURE
────────────
::

    records ──▶ with_identifier ──▶ batched(size) ──▶ ThreadPoolExecutor
                (drops, counts)                        (≤ max_parallel in flight)
                                                              │
                                                 store.transact(batch) → ack
                                                              │
                                                        SubmitReport

FAILURE POLICY
──────────────
- ``fail_fast=True`` (default): the first failed batch stops scheduling,
  batches already in flight are awaited, then ``SubmissionError`` is raised
  carrying the report.
- ``fail_fast=False``: failures are recorded and the run continues.

Either way every submitted batch is awaited before ``submit`` returns or
raises; nothing is left running in the background.

Example::

    submitter = BatchSubmitter(store, batch_size=1000, max_parallel=4)
    report = submitter.submit(records)
    print(report.acknowledged, report.records_submitted)
"""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from openlib_spine.core.errors import SubmissionError
from openlib_spine.core.logging import get_logger
from openlib_spine.core.protocols import RecordStore
from openlib_spine.core.timestamps import utc_now
from openlib_spine.domain.models import AuthorRecord
from openlib_spine.execution.batching import batched, with_identifier

logger = get_logger(__name__)

DEFAULT_BATCH_SIZE = 1000
DEFAULT_MAX_PARALLEL = 4


class BatchStatus(str, Enum):
    """Submission status of one batch."""

    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class BatchOutcome:
    """A single batch and what the store said about it."""

    batch_id: str
    sequence: int
    size: int
    status: BatchStatus = BatchStatus.PENDING
    tx_id: str | None = None
    error: str | None = None
    exception: Exception | None = field(default=None, repr=False)
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at and self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None


@dataclass
class SubmitReport:
    """Aggregate result of one ``submit`` call."""

    started_at: datetime
    completed_at: datetime | None = None
    outcomes: list[BatchOutcome] = field(default_factory=list)
    records_dropped: int = 0

    @property
    def batches(self) -> int:
        return len(self.outcomes)

    @property
    def acknowledged(self) -> int:
        return sum(1 for o in self.outcomes if o.status == BatchStatus.COMPLETED)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.status == BatchStatus.FAILED)

    @property
    def records_submitted(self) -> int:
        """Records in acknowledged batches."""
        return sum(o.size for o in self.outcomes if o.status == BatchStatus.COMPLETED)

    @property
    def batch_sizes(self) -> list[int]:
        return [o.size for o in self.outcomes]

    @property
    def first_failure(self) -> BatchOutcome | None:
        failures = [o for o in self.outcomes if o.status == BatchStatus.FAILED]
        return min(failures, key=lambda o: o.sequence) if failures else None

    @property
    def duration_seconds(self) -> float | None:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Serialise for logging / CLI output."""
        return {
            "batches": self.batches,
            "acknowledged": self.acknowledged,
            "failed": self.failed,
            "records_submitted": self.records_submitted,
            "records_dropped": self.records_dropped,
            "duration_seconds": self.duration_seconds,
        }


class BatchSubmitter:
    """Submit a lazy stream of records to a record store in batches."""

    def __init__(
        self,
        store: RecordStore,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_parallel: int = DEFAULT_MAX_PARALLEL,
        fail_fast: bool = True,
        on_progress: Callable[[BatchOutcome], None] | None = None,
    ):
        """Initialize the submitter.

        Args:
            store: Explicit record store handle every batch is written to
            batch_size: Records per batch
            max_parallel: Maximum batches in flight at once
            fail_fast: Stop scheduling after the first failed batch
            on_progress: Callback for each finished batch (called from worker threads)
        """
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        if max_parallel < 1:
            raise ValueError(f"max_parallel must be >= 1, got {max_parallel}")
        self._store = store
        self._batch_size = batch_size
        self._max_parallel = max_parallel
        self._fail_fast = fail_fast
        self._on_progress = on_progress

    @property
    def batch_size(self) -> int:
        return self._batch_size

    @property
    def max_parallel(self) -> int:
        return self._max_parallel

    def _submit_batch(self, batch: list[AuthorRecord], outcome: BatchOutcome) -> None:
        outcome.started_at = utc_now()
        try:
            ack = self._store.transact(batch)
            outcome.tx_id = ack.tx_id
            outcome.status = BatchStatus.COMPLETED
            logger.debug(
                "batch_acknowledged",
                batch_id=outcome.batch_id,
                sequence=outcome.sequence,
                records=outcome.size,
                tx_id=ack.tx_id,
            )
        except Exception as e:
            outcome.status = BatchStatus.FAILED
            outcome.error = str(e)
            outcome.exception = e
            logger.warning(
                "batch_failed",
                batch_id=outcome.batch_id,
                sequence=outcome.sequence,
                records=outcome.size,
                error=str(e),
            )
        finally:
            outcome.completed_at = utc_now()
            if self._on_progress:
                self._on_progress(outcome)

    def submit(self, records: Iterable[AuthorRecord]) -> SubmitReport:
        """Drop records without identifier, batch the rest and submit every batch.

        Raises:
            SubmissionError: ``fail_fast`` is set and a batch failed.
        """
        report = SubmitReport(started_at=utc_now())
        kept = with_identifier(records)

        with ThreadPoolExecutor(
            max_workers=self._max_parallel, thread_name_prefix="submit"
        ) as pool:
            in_flight: set[Future] = set()
            try:
                for sequence, batch in enumerate(batched(kept, self._batch_size), start=1):
                    outcome = BatchOutcome(
                        batch_id=str(uuid.uuid4()),
                        sequence=sequence,
                        size=len(batch),
                    )
                    report.outcomes.append(outcome)
                    in_flight.add(pool.submit(self._submit_batch, batch, outcome))

                    if len(in_flight) >= self._max_parallel:
                        _, in_flight = wait(in_flight, return_when=FIRST_COMPLETED)
                    if self._fail_fast and report.failed:
                        break
            finally:
                # Every batch already handed to the store gets its acknowledgment.
                wait(in_flight)

        report.records_dropped = kept.dropped
        report.completed_at = utc_now()
        logger.info("submit_completed", **report.to_dict())

        if report.failed and self._fail_fast:
            first = report.first_failure
            raise SubmissionError(
                f"Batch {first.sequence} failed: {first.error}",
                report=report,
                cause=first.exception,
            ).with_context(batch_id=first.batch_id)
        return report


__all__ = [
    "BatchStatus",
    "BatchOutcome",
    "SubmitReport",
    "BatchSubmitter",
    "DEFAULT_BATCH_SIZE",
    "DEFAULT_MAX_PARALLEL",
]
