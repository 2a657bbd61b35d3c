"""
CLI: ``seqgap config`` — configuration inspection.
"""

from __future__ import annotations

import typer

from seqgap.cli.utils import print_dict, print_json

app = typer.Typer(no_args_is_help=True)


@app.command("show")
def show_config(
    json_out: bool = typer.Option(False, "--json", help="JSON output"),
) -> None:
    """Show the effective configuration."""
    from seqgap.core.connection import mask_url
    from seqgap.core.settings import get_settings

    data = get_settings().model_dump()
    if data.get("database_url"):
        data["database_url"] = mask_url(data["database_url"])

    if json_out:
        print_json(data)
        return
    print_dict(data, title="Settings")
