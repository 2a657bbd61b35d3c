"""
Root Typer application for the seqgap CLI.
"""

from __future__ import annotations

import typer
from pydantic import ValidationError
from typer import Typer

from seqgap.cli.utils import fail

app = Typer(
    name="seqgap",
    help="seqgap — find missing sequential identifiers in SQLite and PostgreSQL tables.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    if value:
        from seqgap import __version__

        typer.echo(f"seqgap {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """seqgap CLI — gap reports, backfills, and demo data."""
    from seqgap.core.logging import configure_logging
    from seqgap.core.settings import get_settings

    try:
        settings = get_settings()
    except ValidationError as exc:
        fail("CONFIG_ERROR", str(exc))
    configure_logging(
        level="DEBUG" if verbose else settings.log_level,
        json_format=settings.json_logs,
    )


from seqgap.cli.config import app as config_app  # noqa: E402
from seqgap.cli.db import app as db_app  # noqa: E402
from seqgap.cli.gaps import app as gaps_app  # noqa: E402

app.add_typer(gaps_app, name="gaps", help="Find and fill missing identifiers.")
app.add_typer(db_app, name="db", help="Demo schema and SQL scripts.")
app.add_typer(config_app, name="config", help="Configuration inspection.")
