"""
Typed request objects for operations.

Each dataclass represents the *input* contract for a single operation
function.  Requests carry only transport-agnostic data — no Typer params,
no raw argv.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

Strategy = Literal["python", "sql"]


@dataclass(frozen=True, slots=True)
class ScanGapsRequest:
    """Request for :func:`seqgap.ops.gaps.scan_gaps`.

    Attributes:
        table: Table holding the identifier column (``schema.table`` allowed).
        column: Integer identifier column.
        strategy: ``"python"`` reads the ids and walks the range locally;
            ``"sql"`` runs the walk inside the database engine.
        limit: Return at most this many gaps (ascending).
        max_span: Refuse unlimited scans wider than this; ``None`` uses settings.
    """

    table: str
    column: str = "id"
    strategy: Strategy = "python"
    limit: int | None = None
    max_span: int | None = None


@dataclass(frozen=True, slots=True)
class BackfillRequest:
    """Request for :func:`seqgap.ops.backfill.backfill_gaps`.

    ``fill`` supplies constant values for the other NOT NULL columns of each
    synthesized row.
    """

    table: str
    column: str = "id"
    fill: dict[str, Any] = field(default_factory=dict)
    limit: int | None = None
    max_span: int | None = None


@dataclass(frozen=True, slots=True)
class RunScriptRequest:
    """Request for :func:`seqgap.ops.scripts.run_scripts`.

    ``paths`` empty means the bundled demo schema.
    """

    paths: list[str] = field(default_factory=list)
