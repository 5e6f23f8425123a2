"""Batching and bounded-parallel submission."""

from openlib_spine.execution.batching import batched, with_identifier
from openlib_spine.execution.submitter import (
    BatchOutcome,
    BatchStatus,
    BatchSubmitter,
    SubmitReport,
)

__all__ = [
    "batched",
    "with_identifier",
    "BatchOutcome",
    "BatchStatus",
    "BatchSubmitter",
    "SubmitReport",
]
