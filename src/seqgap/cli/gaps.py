"""
CLI: ``seqgap gaps`` — find and fill missing identifiers.
"""

from __future__ import annotations

import re
import sys
from typing import Any

import typer

from seqgap.cli.utils import console, fail, open_context, output_result, print_table
from seqgap.ops.responses import GapScanResult

app = typer.Typer(no_args_is_help=True)

_INT = re.compile(r"[+-]?\d+")


def _render_scan(result: GapScanResult) -> None:
    source = f"{result.table}.{result.column}" if result.table else "input"
    if result.lo is None:
        console.print(f"[dim]{source}: no identifiers.[/dim]")
        return
    console.print(
        f"[bold]{source}[/bold]  range {result.lo}..{result.hi}  "
        f"present {result.present}  missing {result.missing}  "
        f"density {result.density:.2%}  [dim]({result.strategy})[/dim]",
        soft_wrap=True,
    )
    if not result.gaps:
        console.print("[green]No gaps.[/green]")
        return
    console.print(f"gaps: {' '.join(str(g) for g in result.gaps)}", soft_wrap=True)
    console.print(f"ranges: {', '.join(result.ranges)}", soft_wrap=True)


def _parse_fill(pairs: list[str]) -> dict[str, Any]:
    fill: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            fail("VALIDATION_FAILED", f"--fill expects column=value, got {pair!r}")
        # Only canonical integers convert; "007" stays text.
        fill[key.strip()] = int(value) if _INT.fullmatch(value) and str(int(value)) == value else value
    return fill


@app.command()
def check(
    ids: list[str] | None = typer.Argument(None, help="Identifiers to check."),
    stdin: bool = typer.Option(False, "--stdin", help="Read whitespace-separated identifiers from stdin."),
    limit: int | None = typer.Option(None, "--limit", "-n", min=0, help="Show at most N gaps."),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Report the gaps in a list of identifiers."""
    from seqgap.ops.gaps import check_identifiers

    values = list(ids or [])
    if stdin:
        values.extend(sys.stdin.read().split())
    result = check_identifiers(values, parse_strings=True, limit=limit)
    output_result(result, as_json=json_out, render=_render_scan)


@app.command()
def scan(
    table: str = typer.Option(..., "--table", "-t", help="Table to scan"),
    column: str = typer.Option("id", "--column", "-c", help="Integer identifier column"),
    database: str | None = typer.Option(None, "--database", "-d", help="Database URL or path"),
    strategy: str | None = typer.Option(None, "--strategy", "-s", help="python or sql"),
    limit: int | None = typer.Option(None, "--limit", "-n", min=0, help="Show at most N gaps."),
    max_span: int | None = typer.Option(None, "--max-span", min=1, help="Refuse wider unlimited scans."),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Report the missing identifiers of a table column."""
    from seqgap.core.settings import get_settings
    from seqgap.ops.gaps import scan_gaps
    from seqgap.ops.requests import ScanGapsRequest

    request = ScanGapsRequest(
        table=table,
        column=column,
        strategy=strategy or get_settings().default_strategy,
        limit=limit,
        max_span=max_span,
    )
    with open_context(database) as ctx:
        output_result(scan_gaps(ctx, request), as_json=json_out, render=_render_scan)


@app.command()
def backfill(
    table: str = typer.Option(..., "--table", "-t", help="Table to backfill"),
    column: str = typer.Option("id", "--column", "-c", help="Integer identifier column"),
    fill: list[str] | None = typer.Option(None, "--fill", "-f", help="column=value for other NOT NULL columns"),
    database: str | None = typer.Option(None, "--database", "-d", help="Database URL or path"),
    limit: int | None = typer.Option(None, "--limit", "-n", min=0, help="Fill at most N gaps."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without changes"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Insert a synthetic row for every missing identifier."""
    from seqgap.ops.backfill import backfill_gaps
    from seqgap.ops.requests import BackfillRequest

    request = BackfillRequest(table=table, column=column, fill=_parse_fill(fill or []), limit=limit)

    def render(data: Any) -> None:
        plan = data.plan
        if not plan["ids"]:
            console.print("[green]Nothing to backfill.[/green]")
            return
        verb = "Would insert" if data.dry_run else "Inserted"
        count = len(plan["ids"]) if data.dry_run else data.inserted
        console.print(f"{verb} {count} row(s) into {plan['table']}.", soft_wrap=True)
        ids = plan["ids"] if data.dry_run else plan["inserted_ids"]
        if ids:
            print_table([{plan["column"]: i, **plan["fill"]} for i in ids], title="Backfill")
        if data.skipped:
            console.print(f"[dim]Skipped {data.skipped} id(s) that already existed.[/dim]")

    with open_context(database, dry_run=dry_run) as ctx:
        output_result(backfill_gaps(ctx, request), as_json=json_out, render=render)
