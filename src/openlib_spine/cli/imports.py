"""
CLI: ``openlib-spine import``: load an author dump into the record store.
"""

from __future__ import annotations

from pathlib import Path

import typer

from openlib_spine.cli.utils import echo_json, err_console, fail, print_dict, resolve_settings
from openlib_spine.core.errors import SpineError
from openlib_spine.core.settings import ErrorPolicy
from openlib_spine.pipelines.author_import import AuthorImportPipeline
from openlib_spine.sources.lines import LineSource
from openlib_spine.store.sqlite import SQLiteRecordStore


def import_dump(
    path: Path = typer.Argument(..., help="Dump file (.txt or .txt.gz)"),
    database: Path | None = typer.Option(None, "--database", "-d", help="SQLite store path"),
    batch_size: int | None = typer.Option(None, "--batch-size", "-b", help="Records per batch"),
    max_parallel: int | None = typer.Option(None, "--max-parallel", "-p", help="Batches in flight"),
    skip_invalid: bool = typer.Option(False, "--skip-invalid", help="Reject bad lines instead of aborting"),
    keep_going: bool = typer.Option(False, "--keep-going", help="Continue after a failed batch"),
    encoding: str | None = typer.Option(None, "--encoding", help="Input text encoding"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Import an Open Library author dump."""
    settings = resolve_settings(
        database=database,
        batch_size=batch_size,
        max_parallel=max_parallel,
        encoding=encoding,
        error_policy=ErrorPolicy.SKIP if skip_invalid else None,
        fail_fast=False if keep_going else None,
    )
    source = LineSource(path, encoding=settings.encoding)

    try:
        with SQLiteRecordStore(settings.database) as store:
            pipeline = AuthorImportPipeline(source, store, settings)
            result = pipeline.run()
    except SpineError as e:
        fail(e)

    if json_out:
        payload = result.to_dict()
        payload["rejects"] = [
            {"line_number": r.line_number, "stage": r.stage, "reason": r.reason_detail}
            for r in pipeline.rejects
        ]
        echo_json(payload)
    else:
        print_dict(result.metrics, title=f"Import {result.status.value}")
        for reject in pipeline.rejects[:10]:
            err_console.print(f"[yellow]line {reject.line_number}[/yellow] {reject.stage}: {reject.reason_detail}")
        shown = min(len(pipeline.rejects), 10)
        rejected = result.metrics["records_rejected"]
        if rejected > shown:
            err_console.print(f"[dim]... {rejected - shown} more rejects[/dim]")

    if not result.succeeded:
        err_console.print(f"[bold red]Import failed[/bold red]: {result.error}")
        raise typer.Exit(code=1)
