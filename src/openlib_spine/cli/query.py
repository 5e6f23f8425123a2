"""
CLI: ``openlib-spine search`` / ``show``: look up imported authors.
"""

from __future__ import annotations

from pathlib import Path

import typer

from openlib_spine.cli.utils import echo_json, fail, open_store, print_dict, print_table
from openlib_spine.core.errors import SpineError


def search(
    text: str = typer.Argument(..., help="Words to find in author names"),
    database: Path | None = typer.Option(None, "--database", "-d"),
    limit: int = typer.Option(20, "--limit", "-n", min=1),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Full-text search over author names."""
    try:
        with open_store(database) as store:
            records = store.search_name(text, limit=limit)
    except SpineError as e:
        fail(e)

    if json_out:
        echo_json([r.to_dict() for r in records])
    else:
        print_table(records, title=f"Authors matching {text!r}")


def show(
    identifier: str = typer.Argument(..., help="Author identifier, e.g. OL1000057A"),
    database: Path | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show one author by identifier."""
    try:
        with open_store(database) as store:
            record = store.get(identifier)
    except SpineError as e:
        fail(e)

    if record is None:
        typer.echo(f"No author {identifier}", err=True)
        raise typer.Exit(code=1)
    if json_out:
        echo_json(record.to_dict())
    else:
        print_dict(record.to_dict(), title=identifier)
