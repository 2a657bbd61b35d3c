"""
Connection protocol shared by every database-touching module.

Operations accept any object with this shape: the ``SqliteConnection``
adapter, the ``SAConnectionBridge`` over SQLAlchemy, or a test double.
Raw ``sqlite3.Connection`` objects do not qualify because they have no
connection-level ``fetchone()`` / ``fetchall()``.

Architecture:
    ::

        Connection Protocol:
        ┌────────────────────────────────────────────────────────┐
        │ execute(sql, params)   → Execute single statement      │
        │ executemany(sql, list) → Execute for multiple params   │
        │ fetchone()             → Get one result row            │
        │ fetchall()             → Get all result rows           │
        │ commit()               → Commit transaction            │
        │ rollback()             → Rollback transaction          │
        │ close()                → Release the connection        │
        └────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """Minimal synchronous connection interface."""

    def execute(self, sql: str, params: tuple = ()) -> Any:
        """Execute SQL statement with optional parameters."""
        ...

    def executemany(self, sql: str, params: list[tuple]) -> Any:
        """Execute SQL statement for multiple parameter sets."""
        ...

    def fetchone(self) -> Any:
        """Fetch one row from last query."""
        ...

    def fetchall(self) -> list:
        """Fetch all rows from last query."""
        ...

    def commit(self) -> None:
        """Commit current transaction."""
        ...

    def rollback(self) -> None:
        """Rollback current transaction."""
        ...

    def close(self) -> None:
        """Release the connection and anything it owns."""
        ...

    @property
    def rowcount(self) -> int:
        """Rows changed by the last statement."""
        ...


__all__ = ["Connection"]
