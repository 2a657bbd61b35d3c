"""
Operations layer — the functions the CLI (and SDK callers) invoke.

- All functions accept ``OperationContext`` as first argument
- All functions return ``OperationResult[T]`` instead of raising
- All functions support ``dry_run`` mode where they write

Usage::

    from seqgap.core.connection import create_connection
    from seqgap.ops import OperationContext
    from seqgap.ops.gaps import scan_gaps
    from seqgap.ops.requests import ScanGapsRequest

    conn, info = create_connection("lab.db")
    ctx = OperationContext(conn=conn, dialect=info.dialect)
    result = scan_gaps(ctx, ScanGapsRequest(table="employees"))
    result.data.gaps   # [3, 6]
"""

from seqgap.ops.context import OperationContext
from seqgap.ops.result import OperationError, OperationResult

__all__ = [
    "OperationContext",
    "OperationError",
    "OperationResult",
]
