"""SQL script loading utilities.

Executes ``.sql`` files statement by statement through a ``Connection``,
so the same script runs on SQLite and PostgreSQL without shelling out to
``sqlite3`` or ``psql``.  The bundled demo schema lives in ``schema/``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from seqgap.core.logging import get_logger
from seqgap.core.protocols import Connection

logger = get_logger(__name__)

SCHEMA_DIR = Path(__file__).resolve().parent / "schema"


def split_sql(sql: str) -> list[str]:
    """Split a SQL script into individual statements.

    Semicolons inside single-quoted literals and ``--`` comments do not
    terminate a statement.  Comments are dropped; the trailing semicolon is
    kept off each statement.
    """
    statements: list[str] = []
    current: list[str] = []
    in_string = False
    i = 0
    while i < len(sql):
        ch = sql[i]
        if in_string:
            current.append(ch)
            if ch == "'":
                # '' is an escaped quote inside a literal
                if i + 1 < len(sql) and sql[i + 1] == "'":
                    current.append("'")
                    i += 1
                else:
                    in_string = False
        elif ch == "'":
            in_string = True
            current.append(ch)
        elif ch == "-" and sql.startswith("--", i):
            newline = sql.find("\n", i)
            i = len(sql) if newline == -1 else newline
            continue
        elif ch == ";":
            stmt = "".join(current).strip()
            if stmt:
                statements.append(stmt)
            current = []
        else:
            current.append(ch)
        i += 1

    stmt = "".join(current).strip()
    if stmt:
        statements.append(stmt)
    return statements


def get_script_files(script_dir: Path | str | None = None) -> list[Path]:
    """Sorted ``.sql`` files in *script_dir* (defaults to the demo schema)."""
    directory = Path(script_dir) if script_dir else SCHEMA_DIR
    if not directory.exists():
        return []
    return sorted(directory.glob("*.sql"))


def run_sql_file(conn: Connection, path: Path | str, *, commit: bool = True) -> int:
    """Execute every statement in *path*; return the statement count."""
    path = Path(path)
    statements = split_sql(path.read_text(encoding="utf-8"))
    for statement in statements:
        conn.execute(statement)
    if commit:
        conn.commit()
    logger.debug("script.applied", file=path.name, statements=len(statements))
    return len(statements)


def apply_scripts(
    conn: Connection,
    paths: Sequence[Path | str] | None = None,
) -> list[str]:
    """Execute several script files in order inside one transaction.

    Defaults to the bundled demo schema.  Rolls back and re-raises on the
    first failing statement.

    Returns:
        Names of the files applied.
    """
    files = [Path(p) for p in paths] if paths is not None else get_script_files()
    applied: list[str] = []
    try:
        for path in files:
            run_sql_file(conn, path, commit=False)
            applied.append(path.name)
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    logger.info("script.all_applied", count=len(applied))
    return applied


__all__ = ["SCHEMA_DIR", "split_sql", "get_script_files", "run_sql_file", "apply_scripts"]
