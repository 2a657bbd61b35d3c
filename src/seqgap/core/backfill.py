"""
Backfill planning for missing identifiers.

A gap report says *which* identifiers are missing; a :class:`BackfillPlan`
records the decision to synthesize rows for them and tracks how far that
went.  ``ops.backfill.backfill_gaps`` drives a plan against a live table.

Architecture:
    ::

        scan_gaps(...)  ──►  gaps = [3, 6]
              │
              ▼
        BackfillPlan.create("employees", "id", [3, 6])
              │  status: PLANNED
              ▼
        plan.start()                 → RUNNING
              ├── plan.mark_inserted(3)     progress: 50%
              └── plan.mark_skipped(6)      progress: 100%
                    │
                    ▼
        status: COMPLETED (FAILED as soon as a write fails)

Examples:
    >>> from seqgap.core.backfill import BackfillPlan
    >>> plan = BackfillPlan.create("employees", "id", [3, 6])
    >>> plan.start().mark_inserted(3).progress_pct
    50.0

Guardrails:
    ❌ DON'T: Backfill a column you have not just scanned
    ✅ DO: Build the plan from a fresh GapReport in the same session

    ❌ DON'T: Reuse a COMPLETED plan for a second pass
    ✅ DO: Scan again and create a new plan
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from seqgap.core.errors import BackfillError


class BackfillStatus(str, Enum):
    """Lifecycle status of a backfill plan."""

    PLANNED = "planned"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(slots=True)
class BackfillPlan:
    """Tracks a synthetic backfill of missing identifiers.

    The definition fields (``table``, ``column``, ``ids``, ``fill``)
    define what is being backfilled; the progress fields are mutated as
    rows are written.

    Attributes:
        plan_id: Unique identifier for this plan.
        table: Target table.
        column: Identifier column.
        ids: Missing identifiers to synthesize, ascending.
        fill: Constant values for other columns of each synthesized row.
        status: Current lifecycle status.
        inserted_ids: Ids whose row was written.
        skipped_ids: Ids that already existed when the insert ran.
        failed_ids: Ids that failed, with the error message.
        created_at: When the plan was created.
        started_at: When execution began.
        completed_at: When execution finished.
    """

    plan_id: str
    table: str
    column: str
    ids: list[int]
    fill: dict[str, Any] = field(default_factory=dict)
    status: BackfillStatus = BackfillStatus.PLANNED
    inserted_ids: list[int] = field(default_factory=list)
    skipped_ids: list[int] = field(default_factory=list)
    failed_ids: dict[int, str] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    started_at: datetime | None = None
    completed_at: datetime | None = None

    @classmethod
    def create(
        cls,
        table: str,
        column: str,
        ids: list[int],
        *,
        fill: dict[str, Any] | None = None,
    ) -> BackfillPlan:
        """Create a plan in ``PLANNED`` status.

        Raises:
            BackfillError: If *fill* names the identifier column.
        """
        fill = dict(fill or {})
        if column in fill:
            raise BackfillError(f"fill values must not include the identifier column {column!r}")
        return cls(
            plan_id=uuid.uuid4().hex,
            table=table,
            column=column,
            ids=sorted(set(ids)),
            fill=fill,
        )

    # -- properties ----------------------------------------------------------

    @property
    def columns(self) -> list[str]:
        """Insert column order: identifier first, then fill columns."""
        return [self.column, *self.fill]

    def row_for(self, identifier: int) -> tuple[Any, ...]:
        """Parameter tuple for the synthesized row of *identifier*."""
        return (identifier, *self.fill.values())

    @property
    def remaining_ids(self) -> list[int]:
        done = set(self.inserted_ids) | set(self.skipped_ids) | set(self.failed_ids)
        return [i for i in self.ids if i not in done]

    @property
    def progress_pct(self) -> float:
        """Completion percentage (0.0 – 100.0)."""
        total = len(self.ids)
        if total == 0:
            return 100.0
        done = total - len(self.remaining_ids)
        return round(done / total * 100, 2)

    # -- lifecycle transitions -----------------------------------------------

    def start(self) -> BackfillPlan:
        """Transition to ``RUNNING``.

        Raises:
            BackfillError: If the plan is not ``PLANNED``.
        """
        if self.status is not BackfillStatus.PLANNED:
            raise BackfillError(f"Cannot start plan in status {self.status.value}")
        self.status = BackfillStatus.RUNNING
        self.started_at = datetime.now(UTC)
        if not self.ids:
            self._finish()
        return self

    def mark_inserted(self, identifier: int) -> BackfillPlan:
        self._check_running(identifier)
        if identifier not in self.inserted_ids:
            self.inserted_ids.append(identifier)
        return self._maybe_finish()

    def mark_skipped(self, identifier: int) -> BackfillPlan:
        """Record that *identifier* already existed (a concurrent writer won)."""
        self._check_running(identifier)
        if identifier not in self.skipped_ids:
            self.skipped_ids.append(identifier)
        return self._maybe_finish()

    def mark_failed(self, identifier: int, error: str) -> BackfillPlan:
        """Record that writing *identifier* failed and stop the plan as ``FAILED``.

        A backfill commits once, so the rows already written are rolled back
        with the failure; their ids return to ``remaining_ids``.  Also valid on
        a ``COMPLETED`` plan whose final commit failed.
        """
        if self.status not in (BackfillStatus.RUNNING, BackfillStatus.COMPLETED):
            raise BackfillError(f"Plan is {self.status.value}, cannot fail it")
        if identifier not in self.ids:
            raise BackfillError(f"Identifier {identifier} is not part of plan {self.plan_id}")
        self.failed_ids[identifier] = error
        self.inserted_ids.clear()
        self.skipped_ids.clear()
        self.status = BackfillStatus.FAILED
        self.completed_at = datetime.now(UTC)
        return self

    def _check_running(self, identifier: int) -> None:
        if self.status is not BackfillStatus.RUNNING:
            raise BackfillError(f"Plan is {self.status.value}, not running")
        if identifier not in self.ids:
            raise BackfillError(f"Identifier {identifier} is not part of plan {self.plan_id}")

    def _maybe_finish(self) -> BackfillPlan:
        if not self.remaining_ids:
            self._finish()
        return self

    def _finish(self) -> None:
        self.status = BackfillStatus.COMPLETED
        self.completed_at = datetime.now(UTC)

    # -- serialisation -------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a JSON-safe dict."""
        return {
            "plan_id": self.plan_id,
            "table": self.table,
            "column": self.column,
            "ids": list(self.ids),
            "fill": dict(self.fill),
            "status": self.status.value,
            "inserted_ids": list(self.inserted_ids),
            "skipped_ids": list(self.skipped_ids),
            "failed_ids": {str(k): v for k, v in self.failed_ids.items()},
            "progress_pct": self.progress_pct,
            "created_at": self.created_at.isoformat(),
            "started_at": self.started_at.isoformat() if self.started_at else None,
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
        }


__all__ = ["BackfillPlan", "BackfillStatus"]
