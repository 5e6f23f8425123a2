# src/openlib_spine/domain/normalizer.py

"""
Normalization of parsed dump lines into ``AuthorRecord``.

Transformations:
- ``last_modified`` text -> aware UTC datetime (two known layouts)
- ``/authors/OL1000057A`` -> ``OL1000057A``
- ``revision`` -> int

Missing payload keys become ``None`` fields; values present in an unknown
format raise ``FormatError``.
"""

import re
from datetime import datetime
from typing import Any

from openlib_spine.core.errors import FormatError
from openlib_spine.core.timestamps import parse_layouts
from openlib_spine.domain.models import AuthorRecord, DumpLine

# Tried in order; the sub-second layout must come first.
TIMESTAMP_LAYOUTS: tuple[str, ...] = (
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%dT%H:%M:%S",
)

IDENTIFIER_PATTERN = re.compile(r"[A-Za-z0-9]+")


def normalize_timestamp(text: str) -> datetime:
    """
    Parse a dump timestamp, with or without sub-second precision.

    Raises:
        FormatError: if no layout in ``TIMESTAMP_LAYOUTS`` matches.
    """
    if not isinstance(text, str):
        raise FormatError(
            f"Timestamp must be text, got {type(text).__name__}",
            field="last_modified",
            value=text,
        )
    parsed = parse_layouts(text, TIMESTAMP_LAYOUTS)
    if parsed is None:
        raise FormatError(
            f"Unrecognized timestamp {text!r}; tried {', '.join(TIMESTAMP_LAYOUTS)}",
            field="last_modified",
            value=text,
            constraint=" | ".join(TIMESTAMP_LAYOUTS),
        )
    return parsed


def normalize_identifier(text: str) -> str:
    """
    Reduce a key path to its short code: ``/authors/OL1000057A`` -> ``OL1000057A``.

    Raises:
        FormatError: if the last path segment is empty or not alphanumeric.
    """
    if not isinstance(text, str):
        raise FormatError(
            f"Identifier must be text, got {type(text).__name__}",
            field="key",
            value=text,
        )
    code = text.rsplit("/", 1)[-1]
    if not IDENTIFIER_PATTERN.fullmatch(code):
        raise FormatError(
            f"Unrecognized identifier {text!r}",
            field="key",
            value=text,
            constraint=IDENTIFIER_PATTERN.pattern,
        )
    return code


def normalize_revision(value: Any) -> int:
    """Accept an int or a string of ASCII digits."""
    if isinstance(value, bool):
        raise FormatError("Revision must be an integer", field="revision", value=value)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    raise FormatError("Revision must be an integer", field="revision", value=value)


def _timestamp_text(value: Any) -> Any:
    # {"type": "/type/datetime", "value": "..."} or a bare string
    if isinstance(value, dict):
        return value.get("value")
    return value


def normalize_record(line: DumpLine) -> AuthorRecord:
    """
    Extract the four author fields from a parsed line's payload.

    Raises:
        FormatError: a present value has an unknown format. The error carries
            the line number when the line has one.
    """
    payload = line.payload
    try:
        name = payload.get("name")
        if name is not None and not isinstance(name, str):
            raise FormatError("Name must be text", field="name", value=name)

        modified_text = _timestamp_text(payload.get("last_modified"))
        modified = normalize_timestamp(modified_text) if modified_text is not None else None

        key = payload.get("key")
        identifier = normalize_identifier(key) if key is not None else None

        revision_value = payload.get("revision")
        revision = normalize_revision(revision_value) if revision_value is not None else None
    except FormatError as e:
        e.with_context(line_number=line.line_number)
        raise

    return AuthorRecord(
        name=name,
        modified=modified,
        identifier=identifier,
        revision=revision,
    )
