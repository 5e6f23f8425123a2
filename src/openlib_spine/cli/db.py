"""
CLI: ``openlib-spine db``: record store management commands.
"""

from __future__ import annotations

from pathlib import Path

import typer

from openlib_spine.cli.utils import echo_json, fail, open_store, print_dict
from openlib_spine.core.errors import SpineError

app = typer.Typer(no_args_is_help=True)


@app.command()
def init(
    database: Path | None = typer.Option(None, "--database", "-d", help="Database path"),
) -> None:
    """Create the author schema (tables, name index, triggers)."""
    try:
        with open_store(database, create=True) as store:
            path = store.path
    except SpineError as e:
        fail(e)
    typer.echo(f"Schema ready at {path}")


@app.command()
def stats(
    database: Path | None = typer.Option(None, "--database", "-d"),
    json_out: bool = typer.Option(False, "--json"),
) -> None:
    """Show record counts."""
    try:
        with open_store(database) as store:
            data = {"path": store.path, "authors": store.count()}
    except SpineError as e:
        fail(e)

    if json_out:
        echo_json(data)
    else:
        print_dict(data, title="Record Store")
