"""
Line source for large dump files.

Open Library dumps run to tens of gigabytes, so lines are streamed straight
off the file handle and never collected. A ``LineSource`` is restartable:
every ``iter()`` reopens the file and starts again from the first line.

Supports:
- plain text files
- gzip-compressed files (``.gz``), decompressed on the fly

Usage:
    from openlib_spine.sources.lines import LineSource

    source = LineSource("ol_dump_authors_latest.txt.gz")
    for line_number, line in source.numbered():
        ...
"""

from __future__ import annotations

import gzip
from collections.abc import Iterator
from pathlib import Path
from typing import IO

from openlib_spine.core.errors import SourceError, SourceNotFoundError
from openlib_spine.core.logging import get_logger

logger = get_logger(__name__)


class LineSource:
    """
    Lazy, restartable sequence of text lines from one file.

    Trailing newlines are stripped and blank lines skipped. Opening happens
    as soon as iteration is requested, so a missing or unreadable file
    raises from ``iter()`` rather than from the first ``next()``.
    """

    def __init__(self, path: str | Path, *, encoding: str = "utf-8"):
        self._path = Path(path) if isinstance(path, str) else path
        self._encoding = encoding

    @property
    def path(self) -> Path:
        """File path."""
        return self._path

    @property
    def compressed(self) -> bool:
        """True when the file is read through gzip."""
        return self._path.suffix.lower() == ".gz"

    def _open(self) -> IO[str]:
        try:
            if self.compressed:
                return gzip.open(self._path, "rt", encoding=self._encoding, newline="")
            return open(self._path, "r", encoding=self._encoding, newline="")
        except FileNotFoundError as e:
            raise SourceNotFoundError(
                f"File not found: {self._path}", cause=e
            ).with_context(path=str(self._path)) from e
        except OSError as e:
            raise SourceError(
                f"Cannot open {self._path}: {e}", cause=e
            ).with_context(path=str(self._path)) from e

    def numbered(self) -> Iterator[tuple[int, str]]:
        """Iterate ``(line_number, line)`` pairs; numbers are 1-based file lines."""
        handle = self._open()
        logger.debug("source_opened", path=str(self._path), compressed=self.compressed)
        return self._read(handle)

    def _read(self, handle: IO[str]) -> Iterator[tuple[int, str]]:
        with handle:
            line_number = 0
            try:
                for line_number, raw in enumerate(handle, start=1):
                    line = raw.rstrip("\r\n")
                    if line:
                        yield line_number, line
            except (OSError, UnicodeDecodeError, EOFError) as e:
                raise SourceError(
                    f"Failed reading {self._path} after line {line_number}: {e}",
                    cause=e,
                ).with_context(path=str(self._path), line_number=line_number + 1) from e

    def __iter__(self) -> Iterator[str]:
        return (line for _, line in self.numbered())

    def __repr__(self) -> str:
        return f"LineSource({str(self._path)!r})"


__all__ = ["LineSource"]
