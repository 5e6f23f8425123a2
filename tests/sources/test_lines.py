"""Tests for openlib_spine.sources.lines."""

from __future__ import annotations

import pytest

from openlib_spine.core.errors import SourceError, SourceNotFoundError
from openlib_spine.sources.lines import LineSource


class TestLineSource:
    def test_yields_lines_without_newlines(self, tmp_path):
        path = tmp_path / "dump.txt"
        path.write_text("a\tb\r\nc\td\n")
        assert list(LineSource(path)) == ["a\tb", "c\td"]

    def test_skips_blank_lines_but_keeps_numbering(self, tmp_path):
        path = tmp_path / "dump.txt"
        path.write_text("first\n\n\nfourth\n")
        assert list(LineSource(path).numbered()) == [(1, "first"), (4, "fourth")]

    def test_restartable(self, tmp_path):
        path = tmp_path / "dump.txt"
        path.write_text("one\ntwo\n")
        source = LineSource(str(path))
        assert list(source) == list(source) == ["one", "two"]

    def test_lazy(self, tmp_path):
        path = tmp_path / "dump.txt"
        path.write_text("".join(f"line {i}\n" for i in range(10_000)))
        iterator = iter(LineSource(path))
        assert next(iterator) == "line 0"
        assert next(iterator) == "line 1"

    def test_gzip(self, write_dump, sample_lines):
        path = write_dump(sample_lines, name="authors.txt.gz")
        source = LineSource(path)
        assert source.compressed
        assert list(source) == sample_lines

    def test_missing_file_raises_on_iter(self, tmp_path):
        source = LineSource(tmp_path / "nope.txt")
        with pytest.raises(SourceNotFoundError) as exc_info:
            iter(source)
        assert exc_info.value.context.path.endswith("nope.txt")

    def test_directory_raises_source_error(self, tmp_path):
        with pytest.raises(SourceError):
            iter(LineSource(tmp_path))

    def test_undecodable_bytes_raise_source_error(self, tmp_path):
        path = tmp_path / "dump.txt"
        path.write_bytes(b"ok\n\xff\xfe\xfa broken\n")
        with pytest.raises(SourceError):
            list(LineSource(path, encoding="utf-8"))

    def test_corrupt_gzip_raises_source_error(self, tmp_path):
        path = tmp_path / "dump.txt.gz"
        path.write_bytes(b"not gzip at all")
        with pytest.raises(SourceError):
            list(LineSource(path))
