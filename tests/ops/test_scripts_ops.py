"""Tests for seqgap.ops.scripts — run_scripts and seed_demo."""

from __future__ import annotations

from pathlib import Path

from seqgap.ops.context import OperationContext
from seqgap.ops.requests import RunScriptRequest
from seqgap.ops.scripts import run_scripts, seed_demo


class TestSeedDemo:
    def test_creates_tables(self, ctx):
        result = seed_demo(ctx)
        assert result.success
        assert result.data.applied == ["00_demo_schema.sql", "01_demo_data.sql"]
        ctx.conn.execute("SELECT COUNT(*) FROM employees")
        assert ctx.conn.fetchone() == (5,)

    def test_idempotent(self, ctx):
        seed_demo(ctx)
        assert seed_demo(ctx).success
        ctx.conn.execute("SELECT COUNT(*) FROM employees")
        assert ctx.conn.fetchone() == (5,)

    def test_dry_run(self, conn):
        result = seed_demo(OperationContext(conn=conn, dry_run=True))
        assert result.success
        assert result.data.dry_run
        conn.execute("SELECT name FROM sqlite_master WHERE type = 'table' AND name = ?", ("employees",))
        assert conn.fetchone() is None


class TestRunScripts:
    def test_custom_files(self, ctx, tmp_path: Path):
        script = tmp_path / "t.sql"
        script.write_text("CREATE TABLE t (id INTEGER PRIMARY KEY);\nINSERT INTO t VALUES (1);\nINSERT INTO t VALUES (5);\n")
        result = run_scripts(ctx, RunScriptRequest(paths=[str(script)]))
        assert result.success
        assert result.data.applied == ["t.sql"]
        ctx.conn.execute("SELECT id FROM t ORDER BY id")
        assert ctx.conn.fetchall() == [(1,), (5,)]

    def test_missing_file(self, ctx, tmp_path: Path):
        result = run_scripts(ctx, RunScriptRequest(paths=[str(tmp_path / "nope.sql")]))
        assert not result.success
        assert result.error.code == "NOT_FOUND"
        assert "nope.sql" in result.error.message

    def test_bad_sql(self, ctx, tmp_path: Path):
        script = tmp_path / "bad.sql"
        script.write_text("INSERT INTO missing VALUES (1);")
        result = run_scripts(ctx, RunScriptRequest(paths=[str(script)]))
        assert result.error.code == "QUERY_FAILED"
