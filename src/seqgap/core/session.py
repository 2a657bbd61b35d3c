"""SQLAlchemy engine factory and Connection bridge.

PostgreSQL access goes through SQLAlchemy so the driver, pooling and URL
handling stay in one well-known place.  ``SAConnectionBridge`` wraps a
``Session`` to satisfy the ``seqgap.core.protocols.Connection`` protocol,
letting the same ops code run on SQLite and PostgreSQL.

This module provides:

* ``create_seqgap_engine`` -- Create a SA engine from a URL.
* ``SeqgapSession``        -- A pre-configured ``Session`` subclass.
* ``SAConnectionBridge``   -- Wraps a SA ``Session`` as a ``Connection``.

Tags:
    seqgap, sqlalchemy, session, engine, bridge, connection
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from typing import Any

from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

# psycopg-style positional placeholder, as emitted by PostgreSQLDialect.
_FORMAT_PLACEHOLDER = re.compile(r"%s")


def create_seqgap_engine(
    url: str,
    *,
    echo: bool = False,
    pool_size: int | None = None,
    pool_timeout: int | None = None,
    **kwargs: Any,
) -> Engine:
    """Create a SQLAlchemy engine with sane defaults.

    Parameters
    ----------
    url:
        Database URL (``postgresql://…``, ``sqlite:///…``).
    echo:
        If ``True``, log all SQL.
    pool_size, pool_timeout:
        Connection pool parameters (ignored for SQLite).
    **kwargs:
        Extra arguments forwarded to ``sqlalchemy.create_engine``.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        return _sa_create_engine(url, echo=echo, **kwargs)

    pool_kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if pool_size is not None:
        pool_kwargs["pool_size"] = pool_size
    if pool_timeout is not None:
        pool_kwargs["pool_timeout"] = pool_timeout
    return _sa_create_engine(url, echo=echo, **pool_kwargs, **kwargs)


class SeqgapSession(Session):
    """Session with ``expire_on_commit=False``."""

    def __init__(self, bind: Engine | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("expire_on_commit", False)
        super().__init__(bind=bind, **kwargs)


def _bind_positional(sql: str, parameters: Sequence[Any]) -> tuple[str, dict[str, Any]]:
    """Rewrite ``%s`` placeholders to ``:p0, :p1, …`` for ``text()``."""
    counter = iter(range(len(parameters) + 1))
    rewritten = _FORMAT_PLACEHOLDER.sub(lambda _m: f":p{next(counter)}", sql)
    mapping = {f"p{i}": v for i, v in enumerate(parameters)}
    return rewritten, mapping


class SAConnectionBridge:
    """Adapter that makes a SQLAlchemy ``Session`` look like ``Connection``.

    Implements: ``execute``, ``executemany``, ``fetchone``, ``fetchall``,
    ``commit``, ``rollback``, ``close``.  Rows are returned as tuples.
    When *engine* is given the bridge owns it and disposes it on ``close``.
    """

    def __init__(self, session: Session, *, engine: Engine | None = None) -> None:
        self._session = session
        self._engine = engine
        self._last_result: Any = None

    def execute(self, sql: str, parameters: Sequence[Any] | None = None) -> SAConnectionBridge:
        if parameters:
            rewritten, mapping = _bind_positional(sql, parameters)
            self._last_result = self._session.execute(text(rewritten), mapping)
        else:
            self._last_result = self._session.execute(text(sql))
        return self

    def executemany(self, sql: str, seq_of_parameters: Sequence[Sequence[Any]]) -> None:
        for params in seq_of_parameters:
            self.execute(sql, params)

    def fetchone(self) -> tuple[Any, ...] | None:
        if self._last_result is None:
            return None
        row = self._last_result.fetchone()
        return tuple(row) if row is not None else None

    def fetchall(self) -> list[tuple[Any, ...]]:
        if self._last_result is None:
            return []
        return [tuple(r) for r in self._last_result.fetchall()]

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()

    def close(self) -> None:
        self._session.close()
        if self._engine is not None:
            self._engine.dispose()

    @property
    def rowcount(self) -> int:
        if self._last_result is None:
            return -1
        return self._last_result.rowcount

    @property
    def session(self) -> Session:
        """Access the underlying SA session."""
        return self._session
