"""
CLI: ``seqgap db`` — demo schema and SQL scripts.
"""

from __future__ import annotations

import typer

from seqgap.cli.utils import open_context, output_result

app = typer.Typer(no_args_is_help=True)


@app.command("seed-demo")
def seed_demo(
    database: str | None = typer.Option(None, "--database", "-d", help="Database URL or path"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without changes"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Create the demo departments/employees tables (ids with gaps)."""
    from seqgap.ops.scripts import seed_demo as _seed_demo

    with open_context(database, dry_run=dry_run) as ctx:
        output_result(_seed_demo(ctx), as_json=json_out, title="Demo Schema")


@app.command("run-script")
def run_script(
    files: list[str] = typer.Argument(..., help="SQL files, executed in order"),
    database: str | None = typer.Option(None, "--database", "-d", help="Database URL or path"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Preview without changes"),
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Execute SQL files statement by statement."""
    from seqgap.ops.requests import RunScriptRequest
    from seqgap.ops.scripts import run_scripts

    with open_context(database, dry_run=dry_run) as ctx:
        output_result(run_scripts(ctx, RunScriptRequest(paths=files)), as_json=json_out, title="Scripts")
