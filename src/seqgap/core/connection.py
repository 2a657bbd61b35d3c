"""Connection factory — create database connections from URL strings.

This is the single entry point for opening a database in seqgap.  The CLI
and the ops layer call ``create_connection()`` rather than importing
backend-specific classes directly.

Supported URL schemes
---------------------
==================  ==========================================  ============
Scheme              Example                                     Backend
==================  ==========================================  ============
``memory``          ``memory`` or ``:memory:`` or ``None``       SQLite RAM
``sqlite``          ``sqlite:///path/to/file.db``                SQLite file
``(file path)``     ``./data/my.db`` or ``/tmp/lab.db``          SQLite file
``postgresql``      ``postgresql://user:pw@host:port/db``        PostgreSQL
``postgres``        ``postgres://user:pw@host:port/db``          PostgreSQL
==================  ==========================================  ============

Usage
-----
::

    from seqgap.core.connection import create_connection

    conn, info = create_connection("lab.db")
    info.dialect.gap_query("employees", "id")

PostgreSQL connections that cannot be established raise
:class:`~seqgap.core.errors.DatabaseError`; a gap report computed against
an accidental empty in-memory database would be silently wrong.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from seqgap.core.dialect import Dialect, get_dialect
from seqgap.core.errors import ConfigError, DatabaseError
from seqgap.core.logging import get_logger
from seqgap.core.sqlite_conn import SqliteConnection

logger = get_logger(__name__)


# ── ConnectionInfo ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class ConnectionInfo:
    """Metadata about a database connection."""

    backend: str
    """Backend identifier: ``"sqlite"`` or ``"postgresql"``."""

    persistent: bool
    """Whether data survives process exit."""

    url: str
    """The original URL or path, with any password masked."""

    resolved_path: str | None = None
    """For file-based SQLite, the resolved absolute path."""

    def __repr__(self) -> str:
        parts = [f"backend={self.backend!r}", f"persistent={self.persistent}"]
        if self.resolved_path:
            parts.append(f"path={self.resolved_path!r}")
        else:
            parts.append(f"url={self.url!r}")
        return f"ConnectionInfo({', '.join(parts)})"

    @property
    def is_sqlite(self) -> bool:
        return self.backend == "sqlite"

    @property
    def is_postgres(self) -> bool:
        return self.backend == "postgresql"

    @property
    def dialect(self) -> Dialect:
        return get_dialect(self.backend)


def mask_url(url: str) -> str:
    """Replace the password in *url* with ``***``."""
    parts = urlsplit(url)
    if not parts.password:
        return url
    netloc = parts.netloc.replace(f":{parts.password}@", ":***@", 1)
    return urlunsplit(parts._replace(netloc=netloc))


# ── Backends ─────────────────────────────────────────────────────────────


def _create_sqlite_memory() -> tuple[SqliteConnection, ConnectionInfo]:
    conn = SqliteConnection(":memory:")
    return conn, ConnectionInfo(backend="sqlite", persistent=False, url=":memory:")


def _create_sqlite_file(path_str: str) -> tuple[SqliteConnection, ConnectionInfo]:
    path = Path(path_str)
    path.parent.mkdir(parents=True, exist_ok=True)
    resolved = str(path.resolve())
    conn = SqliteConnection(resolved)
    info = ConnectionInfo(
        backend="sqlite",
        persistent=True,
        url=path_str,
        resolved_path=resolved,
    )
    return conn, info


def _create_postgresql(url: str) -> tuple[Any, ConnectionInfo]:
    """Create a PostgreSQL connection via the SQLAlchemy bridge."""
    from sqlalchemy.exc import SQLAlchemyError

    from seqgap.core.session import SAConnectionBridge, SeqgapSession, create_seqgap_engine

    masked = mask_url(url)
    engine = session = None
    try:
        engine = create_seqgap_engine(url)
        session = SeqgapSession(bind=engine)
        conn = SAConnectionBridge(session, engine=engine)
        conn.execute("SELECT 1")
    except (SQLAlchemyError, ImportError) as e:
        if session is not None:
            session.close()
        if engine is not None:
            engine.dispose()
        raise DatabaseError(f"Cannot connect to PostgreSQL: {e}", cause=e).with_context(
            database=masked,
        ) from e
    return conn, ConnectionInfo(backend="postgresql", persistent=True, url=masked)


# ── URL parsing ──────────────────────────────────────────────────────────


def parse_url(db: str | None) -> tuple[str, str]:
    """Parse a database URL into ``(scheme, target)``.

    ``scheme`` is one of ``"memory"``, ``"sqlite"``, ``"postgresql"``,
    ``"file"``.

    Raises:
        ConfigError: For a URL with an unsupported ``scheme://`` prefix.
    """
    if db is None or db in ("", "memory", ":memory:"):
        return "memory", ":memory:"

    if db.startswith("sqlite://"):
        path = db[len("sqlite:///"):] if db.startswith("sqlite:///") else db[len("sqlite://"):]
        if not path or path == ":memory:":
            return "memory", ":memory:"
        return "sqlite", path

    if db.startswith(("postgresql://", "postgres://")):
        # SQLAlchemy 2.x no longer accepts the ``postgres://`` alias.
        return "postgresql", "postgresql://" + db.split("://", 1)[1]

    if db.startswith(("postgresql+", "postgres+")):
        # Keep the explicit driver: postgresql+psycopg2://...
        scheme, rest = db.split("://", 1)
        return "postgresql", f"postgresql+{scheme.split('+', 1)[1]}://{rest}"

    if "://" in db:
        raise ConfigError(f"Unsupported database URL scheme: {db.split('://', 1)[0]!r}")

    return "file", db


# ── Main factory ─────────────────────────────────────────────────────────


def create_connection(
    db: str | None = None,
    *,
    data_dir: str | None = None,
) -> tuple[Any, ConnectionInfo]:
    """Create a database connection from a URL, path, or keyword.

    Parameters
    ----------
    db:
        Database URL, file path, or keyword (see module docstring).
    data_dir:
        For SQLite paths, resolve relative paths within this directory.

    Returns
    -------
    tuple[Connection, ConnectionInfo]
        The connection object (satisfies ``Connection``) and metadata.

    Raises
    ------
    ConfigError
        Unsupported URL scheme.
    DatabaseError
        PostgreSQL unreachable or driver missing.
    """
    scheme, target = parse_url(db)

    if scheme == "memory":
        conn, info = _create_sqlite_memory()
    elif scheme in ("sqlite", "file"):
        if data_dir and not Path(target).is_absolute():
            target = str(Path(data_dir) / target)
        conn, info = _create_sqlite_file(target)
    else:
        conn, info = _create_postgresql(target)

    logger.debug("db.connected", backend=info.backend, persistent=info.persistent, url=info.url)
    return conn, info


__all__ = [
    "ConnectionInfo",
    "create_connection",
    "mask_url",
    "parse_url",
]
