"""
Shared pytest fixtures for seqgap tests.

This module provides:
- Settings/environment isolation (no SEQGAP_* leakage between tests)
- structlog reset so a test's log stream never outlives it
- In-memory SQLite connections, empty and seeded with the demo schema

Usage:
    def test_scan(demo_ctx):
        result = scan_gaps(demo_ctx, ScanGapsRequest(table="employees"))
"""

from __future__ import annotations

import os
from collections.abc import Generator
from pathlib import Path

import pytest
import structlog

from seqgap.core.scripts import apply_scripts
from seqgap.core.settings import clear_settings_cache
from seqgap.core.sqlite_conn import SqliteConnection
from seqgap.ops.context import OperationContext


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Auto-mark tests without explicit markers as unit tests."""
    for item in items:
        markers = {mark.name for mark in item.iter_markers()}
        if not markers.intersection({"unit", "integration", "slow"}):
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Strip SEQGAP_* variables and run from a directory without a .env file."""
    for key in list(os.environ):
        if key.startswith("SEQGAP_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


# =============================================================================
# Connections
# =============================================================================


@pytest.fixture
def conn() -> Generator[SqliteConnection, None, None]:
    """Empty in-memory SQLite connection."""
    connection = SqliteConnection(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def demo_conn(conn: SqliteConnection) -> SqliteConnection:
    """In-memory SQLite with the demo schema (employee ids 1, 2, 4, 5, 7)."""
    apply_scripts(conn)
    return conn


@pytest.fixture
def ctx(conn: SqliteConnection) -> OperationContext:
    return OperationContext(conn=conn)


@pytest.fixture
def demo_ctx(demo_conn: SqliteConnection) -> OperationContext:
    return OperationContext(conn=demo_conn)


@pytest.fixture
def make_table(conn: SqliteConnection):
    """Create ``name(id INTEGER PRIMARY KEY)`` holding *ids*."""

    def _make(name: str, ids: list, *, column_type: str = "INTEGER PRIMARY KEY") -> SqliteConnection:
        conn.execute(f"CREATE TABLE {name} (id {column_type})")
        conn.executemany(f"INSERT INTO {name} (id) VALUES (?)", [(i,) for i in ids])
        conn.commit()
        return conn

    return _make
