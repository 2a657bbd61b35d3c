"""
Request-scoped context for operations.

Every operation function receives an :class:`OperationContext` as its first
argument.  The context carries the database connection, the SQL dialect for
that connection, caller identity, the dry-run flag, and arbitrary metadata.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any

from seqgap.core.dialect import Dialect, SQLiteDialect
from seqgap.core.protocols import Connection


@dataclass
class OperationContext:
    """Context passed to every operation function.

    Attributes:
        conn: Database connection satisfying :class:`seqgap.core.protocols.Connection`.
        dialect: SQL dialect matching *conn*.
        request_id: Unique ID for this operation invocation (auto-generated).
        caller: Origin of the request — ``"cli"`` or ``"sdk"``.
        dry_run: When ``True``, operations return a preview without side effects.
        metadata: Arbitrary key/value pairs forwarded to logging.
    """

    conn: Connection
    dialect: Dialect = field(default_factory=SQLiteDialect)
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    caller: str = "sdk"
    dry_run: bool = False
    metadata: dict[str, Any] = field(default_factory=dict)
