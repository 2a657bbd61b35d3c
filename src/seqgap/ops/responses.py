"""
Typed response objects for operations.

Each dataclass represents the *output* of a single operation beyond the
generic :class:`OperationResult` envelope.  Responses carry only domain
data — no CLI formatting.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class GapScanResult:
    """Result payload for :func:`seqgap.ops.gaps.scan_gaps`.

    ``missing`` is always the full count for the span; ``gaps`` may hold
    fewer entries when a limit was applied (``truncated`` is then set).
    """

    table: str | None
    column: str | None
    strategy: str
    lo: int | None
    hi: int | None
    present: int
    missing: int
    gaps: list[int] = field(default_factory=list)
    ranges: list[str] = field(default_factory=list)
    truncated: bool = False

    @property
    def span(self) -> int:
        if self.lo is None or self.hi is None:
            return 0
        return self.hi - self.lo + 1

    @property
    def density(self) -> float:
        return 1.0 if self.span == 0 else self.present / self.span


@dataclass(frozen=True, slots=True)
class BackfillResult:
    """Result payload for :func:`seqgap.ops.backfill.backfill_gaps`."""

    plan: dict[str, Any]
    inserted: int = 0
    skipped: int = 0
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class ScriptResult:
    """Result payload for :func:`seqgap.ops.scripts.run_scripts`."""

    applied: list[str]
    dry_run: bool = False
