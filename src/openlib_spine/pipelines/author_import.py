"""
Author import pipeline: read, parse, normalize, submit.

Usage:
    from openlib_spine.pipelines.author_import import AuthorImportPipeline

    with SQLiteRecordStore("authors.db") as store:
        pipeline = AuthorImportPipeline(LineSource("ol_dump_authors.txt.gz"), store)
        result = pipeline.run()

Error policy (``ImportSettings.error_policy``):
    strict  A ParseError or FormatError aborts the run (default).
    skip    The line becomes a ``Reject`` and the run continues. Only the
            first ``max_rejects`` are kept on ``rejects``; the
            ``records_rejected`` metric counts all of them.

I/O errors always abort. The run result is FAILED for any ``SpineError``;
other exceptions propagate.
"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Iterator

from openlib_spine.core.errors import FormatError, ParseError, SpineError
from openlib_spine.core.logging import LogContext, get_logger
from openlib_spine.core.protocols import RecordStore
from openlib_spine.core.settings import ErrorPolicy, ImportSettings
from openlib_spine.core.timestamps import utc_now
from openlib_spine.domain.models import AuthorRecord, Reject
from openlib_spine.domain.normalizer import normalize_record
from openlib_spine.domain.parser import parse_line
from openlib_spine.execution.submitter import BatchOutcome, BatchStatus, BatchSubmitter
from openlib_spine.pipelines.base import Pipeline, PipelineResult, PipelineStatus
from openlib_spine.sources.lines import LineSource

logger = get_logger(__name__)


class AuthorImportPipeline(Pipeline):
    """Import one author dump file into a record store."""

    name = "authors.import"
    description = "Load an Open Library author dump into the record store"

    def __init__(
        self,
        source: LineSource,
        store: RecordStore,
        settings: ImportSettings | None = None,
        *,
        run_id: str | None = None,
    ):
        self.source = source
        self.store = store
        self.settings = settings or ImportSettings()
        self.run_id = run_id or str(uuid.uuid4())
        self.rejects: list[Reject] = []

        self._lock = threading.Lock()
        self._counters = {
            "lines_read": 0,
            "records_normalized": 0,
            "records_rejected": 0,
            "records_dropped": 0,
            "records_submitted": 0,
            "batches": 0,
            "batches_failed": 0,
        }

    @property
    def metrics(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counters)

    def _count(self, key: str, amount: int = 1) -> None:
        with self._lock:
            self._counters[key] += amount

    def _on_batch(self, outcome: BatchOutcome) -> None:
        self._count("batches")
        if outcome.status == BatchStatus.COMPLETED:
            self._count("records_submitted", outcome.size)
        else:
            self._count("batches_failed")

    def _reject(self, stage: str, error: SpineError, line_number: int, line: str) -> None:
        # Only the first max_rejects are kept; metrics count every one.
        if len(self.rejects) < self.settings.max_rejects:
            self.rejects.append(
                Reject(
                    stage=stage,
                    reason_code=type(error).__name__,
                    reason_detail=error.message,
                    line_number=line_number,
                    raw_line=line,
                )
            )
        self._count("records_rejected")
        logger.warning(
            "line_rejected",
            stage=stage,
            line_number=line_number,
            reason=error.message,
        )

    def records(self) -> Iterator[AuthorRecord]:
        """Lazily parse and normalize every line of the source."""
        strict = self.settings.error_policy == ErrorPolicy.STRICT
        path = str(self.source.path)

        for line_number, line in self.source.numbered():
            self._count("lines_read")
            stage = "PARSE"
            try:
                dump_line = parse_line(line, line_number)
                stage = "NORMALIZE"
                record = normalize_record(dump_line)
            except (ParseError, FormatError) as e:
                e.with_context(path=path, line_number=line_number, pipeline=self.name)
                if strict:
                    raise
                self._reject(stage, e, line_number, line)
                continue
            self._count("records_normalized")
            yield record

    def run(self) -> PipelineResult:
        started_at = utc_now()
        submitter = BatchSubmitter(
            self.store,
            batch_size=self.settings.batch_size,
            max_parallel=self.settings.max_parallel,
            fail_fast=self.settings.fail_fast,
            on_progress=self._on_batch,
        )

        with LogContext(pipeline=self.name, run_id=self.run_id):
            logger.info(
                "import_started",
                path=str(self.source.path),
                batch_size=submitter.batch_size,
                max_parallel=submitter.max_parallel,
                error_policy=self.settings.error_policy.value,
            )
            try:
                report = submitter.submit(self.records())
            except SpineError as e:
                e.with_context(run_id=self.run_id, pipeline=self.name)
                report = getattr(e, "report", None)
                if report is not None:
                    self._count("records_dropped", report.records_dropped)
                logger.error("import_failed", **e.to_dict())
                return PipelineResult(
                    status=PipelineStatus.FAILED,
                    started_at=started_at,
                    completed_at=utc_now(),
                    error=e.message,
                    error_detail=e.to_dict(),
                    metrics=self.metrics,
                )

            self._count("records_dropped", report.records_dropped)
            status = PipelineStatus.FAILED if report.failed else PipelineStatus.COMPLETED
            result = PipelineResult(
                status=status,
                started_at=started_at,
                completed_at=utc_now(),
                error=f"{report.failed} batch(es) failed" if report.failed else None,
                metrics=self.metrics,
            )
            logger.info("import_completed", status=status.value, **result.metrics)
            return result


__all__ = ["AuthorImportPipeline"]
