"""Tests for seqgap.core.dialect — SQL generation and in-engine gap queries."""

import pytest

from seqgap.core.dialect import Dialect, PostgreSQLDialect, SQLiteDialect, get_dialect
from seqgap.core.errors import ConfigError, InvalidSqlIdentifierError
from seqgap.core.sqlite_conn import SqliteConnection


class TestSQLiteDialect:
    def setup_method(self):
        self.d = SQLiteDialect()

    def test_protocol(self):
        assert isinstance(self.d, Dialect)
        assert self.d.name == "sqlite"

    def test_placeholders(self):
        assert self.d.placeholder(0) == "?"
        assert self.d.placeholders(3) == "?, ?, ?"

    def test_select_identifiers(self):
        assert self.d.select_identifiers("employees", "id") == (
            "SELECT DISTINCT id FROM employees WHERE id IS NOT NULL ORDER BY id"
        )

    def test_select_bounds(self):
        sql = self.d.select_bounds("employees", "id")
        assert sql == "SELECT MIN(id), MAX(id), COUNT(DISTINCT id) FROM employees"

    def test_insert_or_ignore(self):
        sql = self.d.insert_or_ignore("employees", ["id", "name"])
        assert sql == "INSERT INTO employees (id, name) VALUES (?, ?) ON CONFLICT DO NOTHING"

    def test_gap_query_shape(self):
        sql = self.d.gap_query("employees", "id", limit=5)
        assert sql.startswith("WITH RECURSIVE")
        assert "NOT EXISTS" in sql
        assert sql.endswith("ORDER BY n LIMIT 5")

    def test_rejects_injection(self):
        with pytest.raises(InvalidSqlIdentifierError):
            self.d.gap_query("employees; DROP TABLE employees", "id")
        with pytest.raises(InvalidSqlIdentifierError):
            self.d.select_identifiers("employees", "id OR 1=1")

    def test_rejects_bad_limit(self):
        with pytest.raises(ValueError):
            self.d.gap_query("employees", "id", limit=-1)


class TestSQLiteGapQueryExecution:
    """Run the recursive CTE against a real in-memory database."""

    def setup_method(self):
        self.conn = SqliteConnection()
        self.conn.execute("CREATE TABLE t (id INTEGER PRIMARY KEY)")
        self.d = SQLiteDialect()

    def teardown_method(self):
        self.conn.close()

    def _gaps(self, ids, limit=None):
        self.conn.executemany("INSERT INTO t (id) VALUES (?)", [(i,) for i in ids])
        self.conn.execute(self.d.gap_query("t", "id", limit=limit))
        return [row[0] for row in self.conn.fetchall()]

    def test_demo_ids(self):
        assert self._gaps([1, 2, 4, 5, 7]) == [3, 6]

    def test_empty_table(self):
        assert self._gaps([]) == []

    def test_single_row(self):
        assert self._gaps([9]) == []

    def test_negative(self):
        assert self._gaps([-2, 2]) == [-1, 0, 1]

    def test_limit(self):
        assert self._gaps([1, 10], limit=3) == [2, 3, 4]

    def test_limit_zero(self):
        assert self._gaps([1, 10], limit=0) == []

    def test_non_integer_query_finds_real(self):
        self.conn.execute("CREATE TABLE u (id)")
        self.conn.executemany("INSERT INTO u (id) VALUES (?)", [(1,), (None,), (2.5,), (3,)])
        self.conn.execute(self.d.non_integer_query("u", "id"))
        assert self.conn.fetchall() == [(2.5,)]

    def test_non_integer_query_integer_column(self):
        self.conn.executemany("INSERT INTO t (id) VALUES (?)", [(1,), (3,)])
        self.conn.execute(self.d.non_integer_query("t", "id"))
        assert self.conn.fetchall() == []


class TestPostgreSQLDialect:
    def setup_method(self):
        self.d = PostgreSQLDialect()

    def test_name_and_placeholders(self):
        assert self.d.name == "postgresql"
        assert self.d.placeholders(2) == "%s, %s"

    def test_gap_query(self):
        sql = self.d.gap_query("hr.employees", "id")
        assert "generate_series((SELECT MIN(id) FROM hr.employees), (SELECT MAX(id) FROM hr.employees))" in sql
        assert "NOT EXISTS (SELECT 1 FROM hr.employees t WHERE t.id = s.n)" in sql
        assert sql.endswith("ORDER BY s.n")

    def test_insert_or_ignore(self):
        sql = self.d.insert_or_ignore("employees", ["id", "name"])
        assert sql == "INSERT INTO employees (id, name) VALUES (%s, %s) ON CONFLICT DO NOTHING"

    def test_non_integer_query(self):
        sql = self.d.non_integer_query("employees", "id")
        assert "pg_typeof(id) NOT IN" in sql
        assert sql.endswith("LIMIT 1")


class TestGetDialect:
    def test_default_is_sqlite(self):
        assert isinstance(get_dialect(), SQLiteDialect)

    @pytest.mark.parametrize("name", ["postgresql", "postgres", "PostgreSQL"])
    def test_postgres_names(self, name):
        assert isinstance(get_dialect(name), PostgreSQLDialect)

    def test_unknown_name(self):
        with pytest.raises(ConfigError, match="oracle"):
            get_dialect("oracle")

    def test_from_connection(self):
        conn = SqliteConnection()
        try:
            assert isinstance(get_dialect(conn), SQLiteDialect)
        finally:
            conn.close()
