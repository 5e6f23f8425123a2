"""
UTC timestamp utilities.

The dump's ``last_modified`` values are written in UTC without an offset;
``parse_layouts`` tries a fixed, ordered list of ``strptime`` layouts and
returns the first match instead of nesting try/except fallbacks.
"""

from collections.abc import Sequence
from datetime import UTC, datetime


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string."""
    if dt is None:
        return None
    return dt.isoformat()


def from_iso8601(s: str | None) -> datetime | None:
    """Parse ISO 8601 string to datetime."""
    if s is None:
        return None
    return datetime.fromisoformat(s)


def parse_layouts(text: str, layouts: Sequence[str]) -> datetime | None:
    """
    Parse ``text`` with the first matching layout, as an aware UTC datetime.

    Returns None when no layout matches; the caller decides how to report it.
    """
    for layout in layouts:
        try:
            parsed = datetime.strptime(text, layout)
        except ValueError:
            continue
        return parsed.replace(tzinfo=UTC)
    return None
