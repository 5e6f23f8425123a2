"""Author dump domain: models, line parser, field normalizer."""

from openlib_spine.domain.models import AuthorRecord, DumpLine, Reject
from openlib_spine.domain.normalizer import (
    normalize_identifier,
    normalize_record,
    normalize_revision,
    normalize_timestamp,
)
from openlib_spine.domain.parser import parse_line

__all__ = [
    "AuthorRecord",
    "DumpLine",
    "Reject",
    "normalize_identifier",
    "normalize_record",
    "normalize_revision",
    "normalize_timestamp",
    "parse_line",
]
