"""
Gap detection over integer identifier sets.

Given a collection of integer identifiers (typically the primary-key column
of a table), report every integer inside the observed ``[min, max]`` range
that has no corresponding value.

Manifesto:
    Identifier columns are expected to be densely sequential, but deletes,
    rolled-back inserts, and sequence caching all leave holes.  Finding them
    is a linear walk over the observed range with a set-membership test —
    no recursion, no engine round-trips, no state.

    - **Total:** Every finite integer collection has an answer, empty included
    - **Pure:** No I/O, no mutation of the input, deterministic output
    - **Set semantics:** Duplicates and input order never change the result
    - **Lazy option:** ``iter_gaps`` yields a prefix without walking the rest

Architecture:
    ::

        ids = [7, 1, 4, 2, 5, 2]
              │
              ▼
        present = {1, 2, 4, 5, 7}      lo = 1, hi = 7
              │
              ▼
        walk range(lo, hi + 1) ──► 3, 6
              │
              ▼
        gap_ranges([3, 6]) ──► [GapRange(3, 3), GapRange(6, 6)]

Examples:
    >>> from seqgap.core.gaps import find_gaps, gap_ranges, summarize
    >>> find_gaps([1, 2, 4, 5, 7])
    [3, 6]
    >>> find_gaps([])
    []
    >>> gap_ranges([3, 4, 5, 9])
    [GapRange(start=3, end=5), GapRange(start=9, end=9)]
    >>> summarize([1, 2, 4, 5, 7]).missing
    2

Performance:
    - find_gaps(): O(n + span) time, O(n) extra memory
    - iter_gaps(): O(n) setup, O(1) per yielded gap amortised over the span
    - gap_ranges(): O(g) over the gap list

Guardrails:
    ❌ DON'T: Pass unvalidated strings or floats into find_gaps
    ✅ DO: Run ingestion through ``coerce_identifiers`` first

    ❌ DON'T: Materialise ``find_gaps`` over a billion-wide sparse span
    ✅ DO: Use ``iter_gaps`` with ``itertools.islice`` for a prefix

Tags:
    gaps, identifiers, sequence, primary-key, audit, seqgap
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class GapRange:
    """A maximal run of consecutive missing identifiers (inclusive).

    Attributes:
        start: First missing identifier of the run.
        end: Last missing identifier of the run (``>= start``).
    """

    start: int
    end: int

    @property
    def size(self) -> int:
        """Number of identifiers in the run."""
        return self.end - self.start + 1

    def __str__(self) -> str:
        if self.start == self.end:
            return str(self.start)
        return f"{self.start}-{self.end}"


@dataclass(frozen=True, slots=True)
class GapReport:
    """Summary of one gap computation.

    ``lo`` and ``hi`` are ``None`` when the input was empty.  ``density`` is
    the fraction of the span that is present; an empty or single-valued
    input is fully dense.

    Attributes:
        lo: Smallest identifier observed.
        hi: Largest identifier observed.
        present: Number of distinct identifiers observed.
        gaps: Missing identifiers, ascending.
        ranges: ``gaps`` collapsed into consecutive runs.
    """

    lo: int | None
    hi: int | None
    present: int
    gaps: list[int] = field(default_factory=list)
    ranges: list[GapRange] = field(default_factory=list)

    @property
    def span(self) -> int:
        """Width of ``[lo, hi]``; zero for empty input."""
        if self.lo is None or self.hi is None:
            return 0
        return self.hi - self.lo + 1

    @property
    def missing(self) -> int:
        return len(self.gaps)

    @property
    def density(self) -> float:
        if self.span == 0:
            return 1.0
        return self.present / self.span

    @property
    def is_dense(self) -> bool:
        return not self.gaps

    def to_dict(self) -> dict:
        """Serialise to a JSON-safe dict."""
        return {
            "lo": self.lo,
            "hi": self.hi,
            "present": self.present,
            "missing": self.missing,
            "span": self.span,
            "density": round(self.density, 6),
            "gaps": list(self.gaps),
            "ranges": [[r.start, r.end] for r in self.ranges],
        }


def iter_gaps(ids: Iterable[int]) -> Iterator[int]:
    """Yield the missing identifiers of *ids* in ascending order.

    The input is consumed eagerly (to find the bounds); the range walk is
    lazy, so taking a prefix of a very wide span is cheap.
    """
    present = set(ids)
    if len(present) < 2:
        return
    lo = min(present)
    hi = max(present)
    for candidate in range(lo, hi + 1):
        if candidate not in present:
            yield candidate


def find_gaps(ids: Iterable[int]) -> list[int]:
    """Return every integer strictly inside ``[min(ids), max(ids)]`` not in *ids*.

    Duplicates and order are irrelevant.  Empty input and input with a
    single distinct value produce ``[]``.

    Args:
        ids: Finite collection of integers.

    Returns:
        Missing identifiers, ascending.

    Examples:
        >>> find_gaps({1, 2, 4, 5, 7})
        [3, 6]
        >>> find_gaps([5])
        []
        >>> find_gaps([-2, 2])
        [-1, 0, 1]
    """
    return list(iter_gaps(ids))


def gap_ranges(gaps: Iterable[int]) -> list[GapRange]:
    """Collapse an ascending gap sequence into consecutive runs."""
    ranges: list[GapRange] = []
    start: int | None = None
    prev: int | None = None
    for value in gaps:
        if start is None:
            start = prev = value
            continue
        if value == prev + 1:
            prev = value
            continue
        ranges.append(GapRange(start, prev))
        start = prev = value
    if start is not None:
        ranges.append(GapRange(start, prev))
    return ranges


def summarize(ids: Iterable[int]) -> GapReport:
    """Compute a :class:`GapReport` for *ids*."""
    present = set(ids)
    if not present:
        return GapReport(lo=None, hi=None, present=0)
    gaps = find_gaps(present)
    return GapReport(
        lo=min(present),
        hi=max(present),
        present=len(present),
        gaps=gaps,
        ranges=gap_ranges(gaps),
    )


__all__ = [
    "GapRange",
    "GapReport",
    "iter_gaps",
    "find_gaps",
    "gap_ranges",
    "summarize",
]
