# src/openlib_spine/domain/models.py

"""
Author dump data models.

Two stages, mirroring the pipeline:

- ``DumpLine``: one line of the dump split into its positional fields,
  payload decoded but otherwise untouched.
- ``AuthorRecord``: the normalized record submitted to the record store.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any


# =============================================================================
# RAW DATA (one dump line, before any normalization)
# =============================================================================


@dataclass(frozen=True)
class DumpLine:
    """
    One tab-separated line of an Open Library dump.

    Layout: ``type \\t key \\t revision \\t last_modified \\t json``.
    Only the decoded ``payload`` feeds normalization; the other columns are
    kept as text for diagnostics.
    """

    record_type: str  # "/type/author"
    key: str  # "/authors/OL1000057A"
    revision: str  # "2"
    last_modified: str  # "2008-08-20T17:57:09.66187"
    payload: dict[str, Any] = field(default_factory=dict)
    line_number: int | None = None


# =============================================================================
# NORMALIZED DATA
# =============================================================================


@dataclass(frozen=True)
class AuthorRecord:
    """
    A normalized author.

    Every field is optional at this stage; records without an
    ``identifier`` are dropped before submission.
    """

    name: str | None = None
    modified: datetime | None = None
    identifier: str | None = None  # "OL1000057A"
    revision: int | None = None

    @property
    def has_identifier(self) -> bool:
        return bool(self.identifier)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["modified"] = self.modified.isoformat() if self.modified else None
        return data


# =============================================================================
# REJECTS
# =============================================================================


@dataclass(frozen=True)
class Reject:
    """A line that failed parsing or normalizing under the skip policy."""

    stage: str  # "PARSE" or "NORMALIZE"
    reason_code: str  # error class name
    reason_detail: str
    line_number: int | None = None
    raw_line: str | None = None
