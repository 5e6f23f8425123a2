"""End-to-end tests for the author import pipeline."""

from __future__ import annotations

import pytest

from openlib_spine.core.errors import StorageError
from openlib_spine.core.settings import ErrorPolicy, ImportSettings
from openlib_spine.pipelines.author_import import AuthorImportPipeline
from openlib_spine.pipelines.base import PipelineStatus
from openlib_spine.sources.lines import LineSource
from openlib_spine.store.memory import InMemoryRecordStore
from openlib_spine.store.sqlite import SQLiteRecordStore


@pytest.fixture
def settings(tmp_path) -> ImportSettings:
    return ImportSettings(database=tmp_path / "authors.db", batch_size=2, max_parallel=2)


def run(path, store, settings, **updates):
    settings = settings.model_copy(update=updates)
    pipeline = AuthorImportPipeline(LineSource(path), store, settings, run_id="test-run")
    return pipeline, pipeline.run()


class RefusingStore(InMemoryRecordStore):
    """Refuses any batch that contains one of the given identifiers."""

    def __init__(self, *refused: str):
        super().__init__()
        self._refused = set(refused)

    def transact(self, records):
        if any(r.identifier in self._refused for r in records):
            raise StorageError("disk full")
        return super().transact(records)


class TestSuccessfulImport:
    def test_all_lines_stored(self, write_dump, sample_lines, memory_store, settings):
        _, result = run(write_dump(sample_lines), memory_store, settings)

        assert result.status == PipelineStatus.COMPLETED
        assert result.succeeded
        assert result.metrics["lines_read"] == 5
        assert result.metrics["records_normalized"] == 5
        assert result.metrics["records_submitted"] == 5
        assert result.metrics["batches"] == 3
        assert sorted(memory_store.transactions) == [1, 2, 2]
        assert memory_store.get("OL1000059A").name == "Ada Lovelace"

    def test_gzip_input(self, write_dump, sample_lines, memory_store, settings):
        _, result = run(write_dump(sample_lines, "authors.txt.gz"), memory_store, settings)
        assert result.succeeded
        assert memory_store.count() == 5

    def test_records_without_key_are_dropped(self, write_dump, sample_lines, make_line, memory_store, settings):
        path = write_dump(sample_lines + [make_line(key=None, name="Anonymous")])
        _, result = run(path, memory_store, settings)

        assert result.succeeded
        assert result.metrics["records_normalized"] == 6
        assert result.metrics["records_dropped"] == 1
        assert result.metrics["records_submitted"] == 5

    def test_reimport_is_idempotent(self, write_dump, sample_lines, settings):
        path = write_dump(sample_lines)
        with SQLiteRecordStore(settings.database) as store:
            run(path, store, settings)
            run(path, store, settings)
            assert store.count() == 5
            assert [r.identifier for r in store.search_name("lovelace")] == ["OL1000059A"]


class TestErrorPolicy:
    def test_strict_aborts_on_malformed_line(self, write_dump, sample_lines, memory_store, settings):
        path = write_dump(sample_lines[:2] + ["/type/author\tbroken"] + sample_lines[2:])
        _, result = run(path, memory_store, settings)

        assert result.status == PipelineStatus.FAILED
        assert result.error_detail["category"] == "PARSE"
        assert result.error_detail["context"]["line_number"] == 3
        assert result.error_detail["context"]["path"] == str(path)

    def test_strict_aborts_on_bad_timestamp(self, write_dump, make_line, memory_store, settings):
        path = write_dump([make_line(modified="last tuesday")])
        _, result = run(path, memory_store, settings)

        assert result.status == PipelineStatus.FAILED
        assert result.error_detail["error_type"] == "FormatError"
        assert result.error_detail["field"] == "last_modified"
        assert memory_store.count() == 0

    def test_skip_collects_rejects(self, write_dump, sample_lines, make_line, memory_store, settings):
        lines = sample_lines + ["not a dump line", make_line(key="/authors/OL-1A", name="Bad Key")]
        pipeline, result = run(write_dump(lines), memory_store, settings, error_policy=ErrorPolicy.SKIP)

        assert result.succeeded
        assert result.metrics["records_rejected"] == 2
        assert memory_store.count() == 5
        assert [(r.stage, r.line_number) for r in pipeline.rejects] == [("PARSE", 6), ("NORMALIZE", 7)]
        assert pipeline.rejects[0].raw_line == "not a dump line"
        assert pipeline.rejects[1].reason_code == "FormatError"

    def test_skip_rejects_non_ascii_revision(self, write_dump, sample_lines, make_line, memory_store, settings):
        lines = sample_lines[:1] + [make_line(key="/authors/OL77A", revision="²")]
        pipeline, result = run(write_dump(lines), memory_store, settings, error_policy=ErrorPolicy.SKIP)

        assert result.succeeded
        assert result.metrics["records_rejected"] == 1
        assert pipeline.rejects[0].stage == "NORMALIZE"
        assert pipeline.rejects[0].line_number == 2
        assert memory_store.get("OL77A") is None

    def test_strict_fails_on_non_ascii_revision(self, write_dump, make_line, memory_store, settings):
        _, result = run(write_dump([make_line(revision="²")]), memory_store, settings)

        assert result.status == PipelineStatus.FAILED
        assert result.error_detail["field"] == "revision"

    def test_kept_rejects_are_capped(self, write_dump, sample_lines, memory_store, settings):
        lines = sample_lines + [f"junk {i}" for i in range(5)]
        pipeline, result = run(write_dump(lines), memory_store, settings, error_policy=ErrorPolicy.SKIP, max_rejects=2)

        assert result.succeeded
        assert result.metrics["records_rejected"] == 5
        assert [r.line_number for r in pipeline.rejects] == [6, 7]

    def test_no_rejects_kept_when_cap_is_zero(self, write_dump, sample_lines, memory_store, settings):
        lines = sample_lines + ["junk"]
        pipeline, result = run(write_dump(lines), memory_store, settings, error_policy=ErrorPolicy.SKIP, max_rejects=0)

        assert result.metrics["records_rejected"] == 1
        assert pipeline.rejects == []


class TestBatchFailures:
    def test_fail_fast_stops_the_run(self, write_dump, sample_lines, settings):
        store = RefusingStore("OL1000059A")
        _, result = run(write_dump(sample_lines), store, settings, max_parallel=1)

        assert result.status == PipelineStatus.FAILED
        assert result.error_detail["error_type"] == "SubmissionError"
        assert result.error_detail["category"] == "PIPELINE"
        assert result.error_detail["cause"] == "disk full"
        assert "batch_id" in result.error_detail["context"]
        assert result.metrics["batches"] == 2
        assert result.metrics["batches_failed"] == 1
        assert result.metrics["records_submitted"] == 2
        assert store.transactions == [2]

    def test_keep_going_commits_other_batches(self, write_dump, sample_lines, settings):
        store = RefusingStore("OL1000059A")
        _, result = run(write_dump(sample_lines), store, settings, fail_fast=False)

        assert result.status == PipelineStatus.FAILED
        assert result.error == "1 batch(es) failed"
        assert result.metrics["batches"] == 3
        assert result.metrics["batches_failed"] == 1
        assert result.metrics["records_submitted"] == 3
        assert store.count() == 3
        assert store.get("OL1000061A") is not None


class TestSourceErrors:
    def test_missing_file_fails_run(self, tmp_path, memory_store, settings):
        _, result = run(tmp_path / "nope.txt", memory_store, settings)

        assert result.status == PipelineStatus.FAILED
        assert result.error_detail["error_type"] == "SourceNotFoundError"
        assert result.error_detail["context"]["run_id"] == "test-run"
        assert memory_store.transactions == []


def test_repr_and_name(tmp_path, memory_store):
    pipeline = AuthorImportPipeline(LineSource(tmp_path / "a.txt"), memory_store)
    assert pipeline.name == "authors.import"
    assert "authors.import" in repr(pipeline)
