# src/openlib_spine/domain/parser.py

"""
Open Library dump line parsing.

Each line has five tab-separated columns; the fifth is a JSON document.
JSON escapes raw tabs inside strings, so splitting with ``maxsplit=4``
leaves the payload intact.
"""

import json

from openlib_spine.core.errors import ParseError
from openlib_spine.domain.models import DumpLine

FIELD_COUNT = 5
DELIMITER = "\t"


def parse_line(line: str, line_number: int | None = None) -> DumpLine:
    """
    Split one dump line into a ``DumpLine``.

    Raises:
        ParseError: fewer than five fields, or a payload that is not a
            well-formed JSON object.
    """
    fields = line.rstrip("\r\n").split(DELIMITER, FIELD_COUNT - 1)
    if len(fields) < FIELD_COUNT:
        raise ParseError(
            f"Expected {FIELD_COUNT} tab-separated fields, found {len(fields)}"
        ).with_context(line_number=line_number)

    record_type, key, revision, last_modified, raw_payload = fields

    try:
        payload = json.loads(raw_payload)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Malformed JSON payload: {e.msg} at column {e.colno}", cause=e
        ).with_context(line_number=line_number) from e

    if not isinstance(payload, dict):
        raise ParseError(
            f"JSON payload must be an object, got {type(payload).__name__}"
        ).with_context(line_number=line_number)

    return DumpLine(
        record_type=record_type,
        key=key,
        revision=revision,
        last_modified=last_modified,
        payload=payload,
        line_number=line_number,
    )
