"""SQL dialect abstraction for gap queries.

Provides a ``Dialect`` protocol and concrete implementations for the two
supported engines.  Operations use ``Dialect`` methods to build SQL
(placeholders, identifier reads, in-engine gap queries, idempotent inserts)
without referencing a specific database driver.

Architecture::

    ┌──────────────────────────────────────────────────────────────────┐
    │                     Dialect Abstraction Layer                     │
    └──────────────────────────────────────────────────────────────────┘

    ops.gaps / ops.backfill:
    ┌────────────────────────────────────────────────────────────────┐
    │  conn.execute(d.select_identifiers("employees", "id"))         │
    │  conn.execute(d.gap_query("employees", "id", limit=100))       │
    │  conn.executemany(d.insert_or_ignore(t, cols), rows)           │
    └────────────────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────┐   ┌─────────────────────────────┐
    │ SQLite                      │   │ PostgreSQL                  │
    │ ?, ?, ?                     │   │ %s, %s, %s                  │
    │ WITH RECURSIVE seq(n) ...   │   │ generate_series(lo, hi)     │
    │ INSERT ... ON CONFLICT      │   │ INSERT ... ON CONFLICT      │
    └─────────────────────────────┘   └─────────────────────────────┘

Examples:
    >>> from seqgap.core.dialect import SQLiteDialect
    >>> d = SQLiteDialect()
    >>> d.placeholders(3)
    '?, ?, ?'
    >>> d.select_identifiers("employees", "id")
    'SELECT DISTINCT id FROM employees WHERE id IS NOT NULL ORDER BY id'

Guardrails:
    ❌ DON'T: Pass user-supplied table or column names without validation
    ✅ DO: Run them through ``validate_sql_identifier`` (the dialect does)

Tags:
    dialect, sql, sqlite, postgresql, recursive-cte, generate-series
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from seqgap.core.errors import ConfigError
from seqgap.core.identifiers import validate_sql_identifier


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract.

    Every method returns a SQL fragment or statement valid for the target
    database.  Table and column arguments are validated before use.
    """

    @property
    def name(self) -> str:
        """Human-readable dialect name (e.g. ``'sqlite'``)."""
        ...

    def placeholder(self, index: int) -> str:
        """Single positional placeholder (0-based index)."""
        ...

    def placeholders(self, count: int) -> str:
        """Comma-separated placeholder list."""
        ...

    def select_identifiers(self, table: str, column: str) -> str:
        """Distinct non-NULL values of *column*, ascending."""
        ...

    def select_bounds(self, table: str, column: str) -> str:
        """``MIN``, ``MAX`` and distinct ``COUNT`` of *column* in one row."""
        ...

    def gap_query(self, table: str, column: str, limit: int | None = None) -> str:
        """In-engine gap computation returning one ``n`` column, ascending.

        An empty table (``MIN`` is ``NULL``) yields no rows.
        """
        ...

    def insert_or_ignore(self, table: str, columns: list[str]) -> str:
        """``INSERT … ON CONFLICT DO NOTHING`` with placeholders."""
        ...

    def non_integer_query(self, table: str, column: str) -> str:
        """First non-NULL value of *column* that is not stored as an integer, if any."""
        ...


def _checked(table: str, column: str) -> tuple[str, str]:
    return (
        validate_sql_identifier(table, kind="table", allow_schema=True),
        validate_sql_identifier(column, kind="column"),
    )


def _limit_clause(limit: int | None) -> str:
    if limit is None:
        return ""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValueError(f"limit must be a non-negative integer, got {limit!r}")
    return f" LIMIT {limit}"


class _BaseDialect:
    """Statements shared by both engines."""

    _placeholder = "?"

    def placeholder(self, index: int) -> str:  # noqa: ARG002
        return self._placeholder

    def placeholders(self, count: int) -> str:
        return ", ".join(self._placeholder for _ in range(count))

    def select_identifiers(self, table: str, column: str) -> str:
        table, column = _checked(table, column)
        return (
            f"SELECT DISTINCT {column} FROM {table} "  # noqa: S608
            f"WHERE {column} IS NOT NULL ORDER BY {column}"
        )

    def select_bounds(self, table: str, column: str) -> str:
        table, column = _checked(table, column)
        return f"SELECT MIN({column}), MAX({column}), COUNT(DISTINCT {column}) FROM {table}"  # noqa: S608

    def insert_or_ignore(self, table: str, columns: list[str]) -> str:
        table = validate_sql_identifier(table, kind="table", allow_schema=True)
        cols = ", ".join(validate_sql_identifier(c, kind="column") for c in columns)
        ph = self.placeholders(len(columns))
        return f"INSERT INTO {table} ({cols}) VALUES ({ph}) ON CONFLICT DO NOTHING"

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class SQLiteDialect(_BaseDialect):
    """SQLite dialect — ``?`` placeholders, recursive CTE range walk."""

    _placeholder = "?"

    @property
    def name(self) -> str:
        return "sqlite"

    def gap_query(self, table: str, column: str, limit: int | None = None) -> str:
        table, column = _checked(table, column)
        # The recursion stops at hi; bounds is empty for an empty table.
        return (
            "WITH RECURSIVE "
            f"bounds(lo, hi) AS (SELECT MIN({column}), MAX({column}) FROM {table}), "
            "seq(n) AS ("
            "SELECT lo FROM bounds WHERE lo IS NOT NULL "
            "UNION ALL "
            "SELECT seq.n + 1 FROM seq, bounds WHERE seq.n < bounds.hi"
            ") "
            "SELECT n FROM seq "
            f"WHERE NOT EXISTS (SELECT 1 FROM {table} t WHERE t.{column} = seq.n) "
            f"ORDER BY n{_limit_clause(limit)}"
        )

    def non_integer_query(self, table: str, column: str) -> str:
        table, column = _checked(table, column)
        # Column affinity is advisory in SQLite; check the storage class per row.
        return (
            f"SELECT {column} FROM {table} "  # noqa: S608
            f"WHERE {column} IS NOT NULL AND typeof({column}) <> 'integer' LIMIT 1"
        )


class PostgreSQLDialect(_BaseDialect):
    """PostgreSQL dialect — ``%s`` placeholders, ``generate_series`` range walk."""

    _placeholder = "%s"

    @property
    def name(self) -> str:
        return "postgresql"

    def gap_query(self, table: str, column: str, limit: int | None = None) -> str:
        table, column = _checked(table, column)
        # generate_series(NULL, NULL) is empty, so an empty table yields no rows.
        return (
            "SELECT s.n FROM generate_series("
            f"(SELECT MIN({column}) FROM {table}), "
            f"(SELECT MAX({column}) FROM {table})"
            ") AS s(n) "
            f"WHERE NOT EXISTS (SELECT 1 FROM {table} t WHERE t.{column} = s.n) "
            f"ORDER BY s.n{_limit_clause(limit)}"
        )

    def non_integer_query(self, table: str, column: str) -> str:
        table, column = _checked(table, column)
        # Column types are fixed, so any row answers for the whole column.
        return (
            f"SELECT {column}::text FROM {table} "  # noqa: S608
            f"WHERE {column} IS NOT NULL "
            f"AND pg_typeof({column}) NOT IN ('smallint'::regtype, 'integer'::regtype, 'bigint'::regtype) "
            "LIMIT 1"
        )


_DIALECTS: dict[str, type[_BaseDialect]] = {
    "sqlite": SQLiteDialect,
    "postgresql": PostgreSQLDialect,
    "postgres": PostgreSQLDialect,
}


def get_dialect(target: Any = None) -> Dialect:
    """Resolve a dialect from a name, a connection, or ``None`` (SQLite).

    Connections are recognised by type name: anything wrapping a SQLAlchemy
    session is PostgreSQL, everything else is treated as SQLite.
    """
    if target is None:
        return SQLiteDialect()
    if isinstance(target, str):
        try:
            return _DIALECTS[target.lower()]()
        except KeyError:
            raise ConfigError(f"Unsupported dialect: {target!r}") from None
    if type(target).__name__ == "SAConnectionBridge":
        return PostgreSQLDialect()
    return SQLiteDialect()


__all__ = [
    "Dialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "get_dialect",
]
