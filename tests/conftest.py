"""
Shared pytest fixtures for openlib-spine tests.

This module provides:
- Logging reset between tests (the CLI reconfigures structlog)
- A builder for Open Library dump lines
- Dump files on disk (plain and gzipped)
- Record store fixtures
"""

import gzip
import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from openlib_spine.core.logging import clear_context, configure_logging
from openlib_spine.store.memory import InMemoryRecordStore
from openlib_spine.store.sqlite import SQLiteRecordStore


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests based on their location."""
    for item in items:
        test_path = Path(item.fspath).relative_to(Path(__file__).parent)
        if test_path.parts[0] in ("cli", "pipelines") or "sqlite" in test_path.name:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Fresh structlog config per test, bound to the current stderr."""
    configure_logging(level="WARNING", json_format=False)
    yield
    clear_context()


# =============================================================================
# Dump lines
# =============================================================================


def _build_line(
    key: str | None = "/authors/OL1000057A",
    name: str | None = "Jane Doe",
    revision: Any = 2,
    modified: str | None = "2008-08-20T17:57:09.66187",
    **extra: Any,
) -> str:
    payload: dict[str, Any] = {"type": {"key": "/type/author"}}
    if name is not None:
        payload["name"] = name
    if key is not None:
        payload["key"] = key
    if revision is not None:
        payload["revision"] = revision
    if modified is not None:
        payload["last_modified"] = {"type": "/type/datetime", "value": modified}
    payload.update(extra)
    return "\t".join(
        [
            "/type/author",
            key or "",
            str(revision),
            modified or "",
            json.dumps(payload),
        ]
    )


@pytest.fixture
def make_line() -> Callable[..., str]:
    """Build one dump line; keyword arguments override payload fields."""
    return _build_line


@pytest.fixture
def sample_lines() -> list[str]:
    return [
        _build_line("/authors/OL1000057A", "Jane Doe", 2, "2008-08-20T17:57:09.66187"),
        _build_line("/authors/OL1000058A", "John Smith", 1, "2008-08-20T17:57:09"),
        _build_line("/authors/OL1000059A", "Ada Lovelace", 5, "2010-04-14T02:53:47.187351"),
        _build_line("/authors/OL1000060A", "Mary Shelley", 3, "2009-12-11T01:57:19.964652"),
        _build_line("/authors/OL1000061A", "Jane Austen", 7, "2012-05-30T04:01:52.447613"),
    ]


@pytest.fixture
def write_dump(tmp_path: Path) -> Callable[..., Path]:
    """Write lines to a dump file; ``.gz`` names are gzipped."""

    def _write(lines: list[str], name: str = "authors.txt") -> Path:
        path = tmp_path / name
        text = "".join(line + "\n" for line in lines)
        if name.endswith(".gz"):
            with gzip.open(path, "wt", encoding="utf-8") as f:
                f.write(text)
        else:
            path.write_text(text, encoding="utf-8")
        return path

    return _write


# =============================================================================
# Stores
# =============================================================================


@pytest.fixture
def memory_store() -> InMemoryRecordStore:
    return InMemoryRecordStore()


@pytest.fixture
def sqlite_store():
    with SQLiteRecordStore(":memory:") as store:
        yield store
