"""
Root Typer application for openlib-spine.
"""

from __future__ import annotations

import typer
from typer import Typer

from openlib_spine.cli.utils import resolve_settings
from openlib_spine.core.logging import configure_logging

app = Typer(
    name="openlib-spine",
    help="openlib-spine: import Open Library author dumps into a searchable record store.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# ── Version callback ─────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        from importlib.metadata import PackageNotFoundError
        from importlib.metadata import version as pkg_version

        try:
            v = pkg_version("openlib-spine")
        except PackageNotFoundError:
            from openlib_spine import __version__ as v
        typer.echo(f"openlib-spine {v}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool | None = typer.Option(  # noqa: UP007
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    log_level: str | None = typer.Option(None, "--log-level", "-l", help="DEBUG, INFO, WARNING, ERROR"),
    json_logs: bool = typer.Option(False, "--json-logs", help="Force JSON log lines"),
) -> None:
    """openlib-spine CLI: import, search and inspect authors."""
    settings = resolve_settings(log_level=log_level, json_logs=True if json_logs else None)
    configure_logging(level=settings.log_level, json_format=settings.json_logs)


# ── Sub-command registration ─────────────────────────────────────────────

from openlib_spine.cli.db import app as db_app  # noqa: E402
from openlib_spine.cli.imports import import_dump  # noqa: E402
from openlib_spine.cli.query import search, show  # noqa: E402

app.command("import")(import_dump)
app.command("search")(search)
app.command("show")(show)
app.add_typer(db_app, name="db", help="Record store management.")
