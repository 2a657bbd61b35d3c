"""
Script operations.

Runs ``.sql`` files against the connection in order: the bundled demo
schema for ``seed_demo``, or caller-supplied files for ``run_scripts``.
"""

from __future__ import annotations

from pathlib import Path

from seqgap.core.errors import ErrorCategory
from seqgap.core.logging import get_logger
from seqgap.core.scripts import apply_scripts, get_script_files
from seqgap.ops.context import OperationContext
from seqgap.ops.requests import RunScriptRequest
from seqgap.ops.responses import ScriptResult
from seqgap.ops.result import OperationResult, start_timer

logger = get_logger(__name__)


def run_scripts(
    ctx: OperationContext,
    request: RunScriptRequest | None = None,
) -> OperationResult[ScriptResult]:
    """Execute SQL files in one transaction.

    Failure codes: ``NOT_FOUND`` (missing file), ``QUERY_FAILED``.
    """
    request = request or RunScriptRequest()
    timer = start_timer()

    paths = [Path(p) for p in request.paths] if request.paths else get_script_files()
    missing = [str(p) for p in paths if not p.is_file()]
    if missing:
        return OperationResult.fail(
            "NOT_FOUND",
            f"SQL file not found: {', '.join(missing)}",
            category=ErrorCategory.VALIDATION,
            details={"paths": missing},
            elapsed_ms=timer.elapsed_ms,
        )

    if ctx.dry_run:
        return OperationResult.ok(
            ScriptResult(applied=[p.name for p in paths], dry_run=True),
            elapsed_ms=timer.elapsed_ms,
        )

    try:
        applied = apply_scripts(ctx.conn, paths)
    except Exception as exc:
        logger.exception("op_failed", error=str(exc))
        return OperationResult.fail(
            "QUERY_FAILED",
            f"Script failed: {exc}",
            category=ErrorCategory.DATABASE,
            elapsed_ms=timer.elapsed_ms,
        )

    return OperationResult.ok(ScriptResult(applied=applied), elapsed_ms=timer.elapsed_ms)


def seed_demo(ctx: OperationContext) -> OperationResult[ScriptResult]:
    """Create and populate the demo ``departments`` / ``employees`` tables.

    Employee ids are ``{1, 2, 4, 5, 7}``; department ids are ``{1, 2, 4}``.
    Idempotent.
    """
    return run_scripts(ctx, RunScriptRequest())


__all__ = ["run_scripts", "seed_demo"]
