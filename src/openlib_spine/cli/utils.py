"""
CLI utility helpers: output formatting and store management.
"""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.table import Table

from openlib_spine.core.errors import SpineError, StorageError
from openlib_spine.core.settings import ImportSettings, load_settings
from openlib_spine.store.sqlite import SQLiteRecordStore

console = Console()
err_console = Console(stderr=True)


# ── Settings / store helpers ─────────────────────────────────────────────


def resolve_settings(**overrides: Any) -> ImportSettings:
    """Load settings, turning configuration errors into a clean exit."""
    try:
        return load_settings(**overrides)
    except SpineError as e:
        fail(e)


@contextmanager
def open_store(database: Path | str | None, *, create: bool = False) -> Iterator[SQLiteRecordStore]:
    """Open the SQLite store with its schema in place.

    Read commands leave ``create`` off, so a mistyped path is reported
    instead of silently becoming a new empty database.
    """
    path = database if database is not None else resolve_settings().database
    if not create and str(path) != ":memory:" and not Path(path).exists():
        raise StorageError(f"No record store at {path}; run `import` or `db init` first")
    with SQLiteRecordStore(path) as store:
        yield store


def fail(error: SpineError) -> None:
    """Print a SpineError and exit with status 1."""
    err_console.print(f"[bold red]Error[/bold red] ({type(error).__name__}): {error.message}")
    context = error.context.to_dict()
    if context:
        err_console.print(f"[dim]{context}[/dim]")
    raise typer.Exit(code=1)


# ── Output helpers ───────────────────────────────────────────────────────


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert record / dataclass / dict to plain dict."""
    if hasattr(obj, "to_dict"):
        return obj.to_dict()
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    if isinstance(obj, dict):
        return obj
    return {"value": str(obj)}


def echo_json(payload: Any) -> None:
    """Write JSON to stdout unwrapped, so it stays parseable at any width."""
    typer.echo(json.dumps(payload, default=str, indent=2))


def print_table(items: list, *, title: str = "") -> None:
    """Render a list of records/dicts as a Rich table."""
    if not items:
        console.print("[dim]No items.[/dim]")
        return
    first = _to_dict(items[0])
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in first:
        table.add_column(col, overflow="fold")
    for item in items:
        d = _to_dict(item)
        table.add_row(*("" if v is None else str(v) for v in d.values()))
    console.print(table)


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {v}")
