"""
CLI utility helpers — output formatting and connection management.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import asdict
from typing import Any, NoReturn

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from seqgap.core.connection import create_connection
from seqgap.core.errors import SeqgapError
from seqgap.core.settings import get_settings
from seqgap.ops.context import OperationContext
from seqgap.ops.result import OperationResult

console = Console()
err_console = Console(stderr=True)


# ── Connection helper ────────────────────────────────────────────────────


@contextmanager
def open_context(
    database: str | None = None,
    *,
    dry_run: bool = False,
) -> Iterator[OperationContext]:
    """Open *database* (or ``SEQGAP_DATABASE_URL``) for one command.

    The connection is closed when the block exits, including via
    ``typer.Exit``.
    """
    url = database or get_settings().database_url
    try:
        conn, info = create_connection(url)
    except SeqgapError as exc:
        fail(exc.code, exc.message)
    try:
        yield OperationContext(conn=conn, dialect=info.dialect, caller="cli", dry_run=dry_run)
    finally:
        conn.close()


# ── Output helpers ───────────────────────────────────────────────────────


def fail(code: str, message: str) -> NoReturn:
    """Print an error to stderr and exit with status 1."""
    err_console.print(f"[bold red]Error[/bold red] ({code}): {escape(message)}", soft_wrap=True)
    raise typer.Exit(code=1)


def to_dict(obj: Any) -> Any:
    """Convert dataclass / pydantic model / dict to plain data."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    if hasattr(obj, "__dataclass_fields__"):
        return asdict(obj)
    return obj


def print_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, default=str, indent=2))


def output_result(
    result: OperationResult,
    *,
    as_json: bool = False,
    title: str = "",
    render: Callable[[Any], None] | None = None,
) -> None:
    """Render an ``OperationResult`` to the terminal.

    Failures exit with status 1; with *as_json* the failure envelope is
    printed to stdout first.  *render* replaces the default key/value
    rendering of the payload.
    """
    if not result.success:
        if as_json:
            print_json(result.to_dict())
            raise typer.Exit(code=1)
        err = result.error
        fail(err.code if err else "ERROR", err.message if err else "Unknown error")

    if as_json:
        print_json(to_dict(result.data))
        return

    if render is not None:
        render(result.data)
    else:
        print_dict(to_dict(result.data), title=title)

    for warning in result.warnings:
        err_console.print(f"[yellow]Warning:[/yellow] {escape(warning)}", soft_wrap=True)


def print_dict(data: dict[str, Any], *, title: str = "") -> None:
    """Render a single dict as key-value pairs."""
    if title:
        console.print(f"[bold]{title}[/bold]")
    for k, v in data.items():
        console.print(f"  [cyan]{k}[/cyan]: {escape(str(v))}", soft_wrap=True)


def print_table(rows: list[dict[str, Any]], *, title: str = "") -> None:
    """Render a list of dicts as a Rich table."""
    table = Table(title=title or None, show_lines=False, pad_edge=False)
    for col in rows[0]:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*(str(v) for v in row.values()))
    console.print(table)
