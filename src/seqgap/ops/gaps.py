"""
Gap operations.

Reads an identifier column through the ``Connection`` protocol and reports
the missing identifiers, either by walking the range in Python or by
running the equivalent query inside the database engine.  The column read
is the only I/O; isolation is whatever the caller's connection provides.
"""

from __future__ import annotations

from collections.abc import Iterable
from itertools import islice
from typing import Any

from seqgap.core.errors import (
    InvalidIdentifierError,
    QueryError,
    RangeTooLargeError,
    SeqgapError,
    ValidationError,
)
from seqgap.core.gaps import find_gaps, gap_ranges, iter_gaps
from seqgap.core.identifiers import coerce_identifier, coerce_identifiers
from seqgap.core.logging import LogContext, get_logger
from seqgap.core.settings import get_settings
from seqgap.ops.context import OperationContext
from seqgap.ops.requests import ScanGapsRequest
from seqgap.ops.responses import GapScanResult
from seqgap.ops.result import OperationResult, start_timer

logger = get_logger(__name__)

_STRATEGIES = ("python", "sql")


def read_identifiers(ctx: OperationContext, table: str, column: str) -> list[int]:
    """Read the distinct non-NULL values of ``table.column`` as ints.

    Raises:
        InvalidSqlIdentifierError: *table* or *column* is not a plain name.
        QueryError: The SELECT failed (missing table or column).
        InvalidIdentifierError: A stored value is not an integer.
    """
    sql = ctx.dialect.select_identifiers(table, column)
    rows = _fetch_all(ctx, sql, table=table, column=column)
    return coerce_identifiers(row[0] for row in rows)


def _fetch_all(ctx: OperationContext, sql: str, *, table: str, column: str) -> list[Any]:
    try:
        ctx.conn.execute(sql)
        return ctx.conn.fetchall()
    except Exception as exc:
        raise QueryError(f"Query on {table}.{column} failed: {exc}", cause=exc).with_context(
            table=table, column=column,
        ) from exc


def _read_bounds(ctx: OperationContext, table: str, column: str) -> tuple[int | None, int | None, int]:
    rows = _fetch_all(ctx, ctx.dialect.select_bounds(table, column), table=table, column=column)
    lo, hi, count = rows[0] if rows else (None, None, 0)
    if lo is None:
        return None, None, 0
    return coerce_identifier(lo), coerce_identifier(hi), int(count)


def _check_integer_column(ctx: OperationContext, table: str, column: str) -> None:
    rows = _fetch_all(ctx, ctx.dialect.non_integer_query(table, column), table=table, column=column)
    if rows:
        raise InvalidIdentifierError(rows[0][0], reason=f"{table}.{column} holds non-integer values").with_context(
            table=table, column=column,
        )


def _check_limit(limit: int | None) -> None:
    if limit is None:
        return
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValidationError(f"limit must be a non-negative integer, got {limit!r}", field="limit", value=limit)


def _check_span(lo: int, hi: int, max_span: int, limit: int | None) -> None:
    if limit is None and hi - lo + 1 > max_span:
        raise RangeTooLargeError(lo, hi, max_span)


def _build_result(
    *,
    table: str | None,
    column: str | None,
    strategy: str,
    lo: int | None,
    hi: int | None,
    present: int,
    gaps: list[int],
) -> GapScanResult:
    missing = 0 if lo is None else (hi - lo + 1) - present
    return GapScanResult(
        table=table,
        column=column,
        strategy=strategy,
        lo=lo,
        hi=hi,
        present=present,
        missing=missing,
        gaps=gaps,
        ranges=[str(r) for r in gap_ranges(gaps)],
        truncated=len(gaps) < missing,
    )


def _scan_python(ctx: OperationContext, request: ScanGapsRequest, max_span: int) -> GapScanResult:
    present = set(read_identifiers(ctx, request.table, request.column))
    if not present:
        return _build_result(
            table=request.table, column=request.column, strategy="python",
            lo=None, hi=None, present=0, gaps=[],
        )
    lo, hi = min(present), max(present)
    _check_span(lo, hi, max_span, request.limit)
    if request.limit is None:
        gaps = find_gaps(present)
    else:
        gaps = list(islice(iter_gaps(present), request.limit))
    return _build_result(
        table=request.table, column=request.column, strategy="python",
        lo=lo, hi=hi, present=len(present), gaps=gaps,
    )


def _scan_sql(ctx: OperationContext, request: ScanGapsRequest, max_span: int) -> GapScanResult:
    _check_integer_column(ctx, request.table, request.column)
    lo, hi, present = _read_bounds(ctx, request.table, request.column)
    if lo is None:
        return _build_result(
            table=request.table, column=request.column, strategy="sql",
            lo=None, hi=None, present=0, gaps=[],
        )
    _check_span(lo, hi, max_span, request.limit)
    sql = ctx.dialect.gap_query(request.table, request.column, limit=request.limit)
    rows = _fetch_all(ctx, sql, table=request.table, column=request.column)
    gaps = coerce_identifiers(row[0] for row in rows)
    return _build_result(
        table=request.table, column=request.column, strategy="sql",
        lo=lo, hi=hi, present=present, gaps=gaps,
    )


def scan_gaps(
    ctx: OperationContext,
    request: ScanGapsRequest,
) -> OperationResult[GapScanResult]:
    """Report the missing identifiers of ``request.table.request.column``.

    Failure codes: ``INVALID_NAME``, ``INVALID_IDENTIFIER``,
    ``VALIDATION_FAILED``, ``RANGE_TOO_LARGE``, ``QUERY_FAILED``.
    """
    timer = start_timer()
    max_span = request.max_span if request.max_span is not None else get_settings().max_span

    with LogContext(request_id=ctx.request_id, table=request.table, column=request.column):
        try:
            if request.strategy not in _STRATEGIES:
                raise ValidationError(
                    f"Unknown strategy {request.strategy!r}; expected one of {', '.join(_STRATEGIES)}",
                    field="strategy",
                    value=request.strategy,
                )
            _check_limit(request.limit)
            if request.strategy == "python":
                result = _scan_python(ctx, request, max_span)
            else:
                result = _scan_sql(ctx, request, max_span)
        except SeqgapError as exc:
            logger.warning("gaps.scan.failed", code=exc.code, error=exc.message)
            return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)

        logger.info(
            "gaps.scan.completed",
            strategy=result.strategy,
            lo=result.lo,
            hi=result.hi,
            present=result.present,
            missing=result.missing,
        )

    warnings = []
    if result.truncated:
        warnings.append(f"Showing first {len(result.gaps)} of {result.missing} missing identifiers")
    return OperationResult.ok(result, warnings=warnings, elapsed_ms=timer.elapsed_ms)


def check_identifiers(
    values: Iterable[Any],
    *,
    parse_strings: bool = False,
    limit: int | None = None,
) -> OperationResult[GapScanResult]:
    """Gap report for an in-memory identifier collection.

    Failure codes: ``INVALID_IDENTIFIER``, ``VALIDATION_FAILED``.
    """
    timer = start_timer()
    try:
        _check_limit(limit)
        present = set(coerce_identifiers(values, parse_strings=parse_strings))
    except SeqgapError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)

    if not present:
        lo = hi = None
        gaps: list[int] = []
    else:
        lo, hi = min(present), max(present)
        gaps = list(islice(iter_gaps(present), limit)) if limit is not None else find_gaps(present)

    result = _build_result(
        table=None, column=None, strategy="python",
        lo=lo, hi=hi, present=len(present), gaps=gaps,
    )
    return OperationResult.ok(result, elapsed_ms=timer.elapsed_ms)


__all__ = ["read_identifiers", "scan_gaps", "check_identifiers"]
