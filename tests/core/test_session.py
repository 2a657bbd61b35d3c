"""Tests for seqgap.core.session — the SQLAlchemy Connection bridge.

Runs against an in-memory SQLite engine so no PostgreSQL server is needed;
the bridge only relies on ``text()`` execution.
"""

from __future__ import annotations

import pytest

from seqgap.core.dialect import PostgreSQLDialect, get_dialect
from seqgap.core.protocols import Connection
from seqgap.core.session import SAConnectionBridge, SeqgapSession, _bind_positional, create_seqgap_engine


class TestBindPositional:
    def test_rewrites_placeholders(self):
        sql, params = _bind_positional("INSERT INTO t (id, name) VALUES (%s, %s)", (3, "x"))
        assert sql == "INSERT INTO t (id, name) VALUES (:p0, :p1)"
        assert params == {"p0": 3, "p1": "x"}

    def test_no_placeholders(self):
        assert _bind_positional("SELECT 1", ()) == ("SELECT 1", {})


class TestSAConnectionBridge:
    def setup_method(self):
        engine = create_seqgap_engine("sqlite://")
        self.bridge = SAConnectionBridge(SeqgapSession(bind=engine))
        self.bridge.execute("CREATE TABLE t (id INTEGER PRIMARY KEY)")

    def teardown_method(self):
        self.bridge.close()

    def test_satisfies_protocol(self):
        assert isinstance(self.bridge, Connection)

    def test_detected_as_postgres_dialect(self):
        assert isinstance(get_dialect(self.bridge), PostgreSQLDialect)

    def test_execute_and_fetch(self):
        self.bridge.executemany("INSERT INTO t (id) VALUES (%s)", [(1,), (2,), (4,)])
        self.bridge.commit()
        self.bridge.execute("SELECT id FROM t ORDER BY id")
        assert self.bridge.fetchall() == [(1,), (2,), (4,)]

    def test_fetchone(self):
        self.bridge.execute("INSERT INTO t (id) VALUES (%s)", (7,))
        self.bridge.execute("SELECT id FROM t")
        assert self.bridge.fetchone() == (7,)

    def test_rowcount_for_ignored_insert(self):
        sql = "INSERT INTO t (id) VALUES (%s) ON CONFLICT DO NOTHING"
        self.bridge.execute(sql, (1,))
        assert self.bridge.rowcount == 1
        self.bridge.execute(sql, (1,))
        assert self.bridge.rowcount == 0

    def test_rollback(self):
        self.bridge.execute("INSERT INTO t (id) VALUES (%s)", (1,))
        self.bridge.rollback()
        self.bridge.execute("SELECT COUNT(*) FROM t")
        assert self.bridge.fetchone() == (0,)

    def test_nothing_executed(self):
        bridge = SAConnectionBridge(SeqgapSession(bind=create_seqgap_engine("sqlite://")))
        assert bridge.fetchone() is None
        assert bridge.fetchall() == []
        assert bridge.rowcount == -1


def test_session_does_not_expire_on_commit():
    session = SeqgapSession(bind=create_seqgap_engine("sqlite://"))
    assert session.expire_on_commit is False
    session.close()


@pytest.mark.parametrize("url", ["sqlite://", "sqlite:///:memory:"])
def test_engine_for_sqlite(url):
    engine = create_seqgap_engine(url)
    assert engine.dialect.name == "sqlite"
    engine.dispose()


class TestBridgeOwnsEngine:
    def test_close_disposes_owned_engine(self, monkeypatch):
        engine = create_seqgap_engine("sqlite://")
        disposed = []
        monkeypatch.setattr(engine, "dispose", lambda *a, **kw: disposed.append(True))
        bridge = SAConnectionBridge(SeqgapSession(bind=engine), engine=engine)
        bridge.execute("SELECT 1")
        bridge.close()
        assert disposed == [True]

    def test_close_leaves_shared_engine(self, monkeypatch):
        engine = create_seqgap_engine("sqlite://")
        disposed = []
        monkeypatch.setattr(engine, "dispose", lambda *a, **kw: disposed.append(True))
        bridge = SAConnectionBridge(SeqgapSession(bind=engine))
        bridge.close()
        assert disposed == []
