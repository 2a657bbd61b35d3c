"""
seqgap - find missing sequential identifiers.

Reports the integers absent from a collection of integer IDs (between its
minimum and maximum), from Python lists or straight from a SQLite or
PostgreSQL column.

    >>> from seqgap import find_gaps
    >>> find_gaps([1, 2, 4, 5, 7])
    [3, 6]
"""

__version__ = "0.1.0"

from seqgap.core.gaps import GapRange, GapReport, find_gaps, gap_ranges, iter_gaps, summarize  # noqa: E402
from seqgap.core.identifiers import coerce_identifiers  # noqa: E402

__all__ = [
    "__version__",
    "GapRange",
    "GapReport",
    "coerce_identifiers",
    "find_gaps",
    "gap_ranges",
    "iter_gaps",
    "summarize",
]
