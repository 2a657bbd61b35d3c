"""
Backfill operations.

Synthesizes one row per missing identifier so a sequential column becomes
dense again.  Each row carries the identifier plus the constant ``fill``
values; rows that appeared concurrently are skipped by
``INSERT … ON CONFLICT DO NOTHING``.  Everything commits once at the end.
"""

from __future__ import annotations

from seqgap.core.backfill import BackfillPlan
from seqgap.core.errors import ErrorCategory, SeqgapError
from seqgap.core.logging import LogContext, get_logger
from seqgap.ops.context import OperationContext
from seqgap.ops.gaps import scan_gaps
from seqgap.ops.requests import BackfillRequest, ScanGapsRequest
from seqgap.ops.responses import BackfillResult
from seqgap.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def backfill_gaps(
    ctx: OperationContext,
    request: BackfillRequest,
) -> OperationResult[BackfillResult]:
    """Scan ``request.table.request.column`` and insert a row for every gap.

    With ``ctx.dry_run`` the plan is returned without writing anything.
    """
    timer = start_timer()

    scan = scan_gaps(
        ctx,
        ScanGapsRequest(
            table=request.table,
            column=request.column,
            limit=request.limit,
            max_span=request.max_span,
        ),
    )
    if not scan.success:
        return OperationResult(success=False, error=scan.error, elapsed_ms=timer.elapsed_ms)

    try:
        plan = BackfillPlan.create(request.table, request.column, scan.data.gaps, fill=request.fill)
        sql = ctx.dialect.insert_or_ignore(request.table, plan.columns)
    except SeqgapError as exc:
        return OperationResult.from_error(exc, elapsed_ms=timer.elapsed_ms)

    if ctx.dry_run:
        return OperationResult.ok(
            BackfillResult(plan=plan.to_dict(), dry_run=True),
            warnings=scan.warnings,
            elapsed_ms=timer.elapsed_ms,
        )

    with LogContext(request_id=ctx.request_id, plan_id=plan.plan_id):
        plan.start()
        current: int | None = None
        try:
            for current in plan.ids:
                ctx.conn.execute(sql, plan.row_for(current))
                if ctx.conn.rowcount == 0:
                    plan.mark_skipped(current)
                else:
                    plan.mark_inserted(current)
            ctx.conn.commit()
        except Exception as exc:
            ctx.conn.rollback()
            if current is not None:
                plan.mark_failed(current, str(exc))
            logger.exception("backfill.failed", failed_id=current, error=str(exc))
            return OperationResult.fail(
                "QUERY_FAILED",
                f"Backfill of {request.table}.{request.column} failed at id {current}: {exc}",
                category=ErrorCategory.DATABASE,
                details={"plan": plan.to_dict(), "failed_id": current, "rolled_back": True},
                elapsed_ms=timer.elapsed_ms,
            )

        logger.info(
            "backfill.applied",
            table=request.table,
            inserted=len(plan.inserted_ids),
            skipped=len(plan.skipped_ids),
        )

    return OperationResult.ok(
        BackfillResult(
            plan=plan.to_dict(),
            inserted=len(plan.inserted_ids),
            skipped=len(plan.skipped_ids),
        ),
        warnings=scan.warnings,
        elapsed_ms=timer.elapsed_ms,
    )


__all__ = ["backfill_gaps"]
