"""Boundary validation for identifier values and SQL names.

Everything that enters the gap finder passes through here first.  Values
are rejected eagerly, before any computation, so a bad row in a column
never produces a partial report.
"""

from __future__ import annotations

import operator
import re
from collections.abc import Iterable
from decimal import Decimal
from typing import Any

from seqgap.core.errors import InvalidIdentifierError, InvalidSqlIdentifierError

_INT_LITERAL = re.compile(r"[+-]?\d+")
_SQL_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def coerce_identifier(value: Any, *, position: int | None = None, parse_strings: bool = False) -> int:
    """Return *value* as an ``int`` or raise :class:`InvalidIdentifierError`.

    ``bool`` is rejected even though it subclasses ``int``.  Floats and
    decimals are rejected even when integral, since a REAL column holding
    ``2.0`` is not an identifier column.
    """
    if isinstance(value, bool):
        raise InvalidIdentifierError(value, position=position, reason="booleans are not identifiers")
    if isinstance(value, (float, Decimal)):
        raise InvalidIdentifierError(value, position=position)
    if isinstance(value, str):
        if not parse_strings:
            raise InvalidIdentifierError(value, position=position)
        text = value.strip()
        if not _INT_LITERAL.fullmatch(text):
            raise InvalidIdentifierError(value, position=position, reason="not a base-10 integer")
        return int(text)
    try:
        return operator.index(value)
    except TypeError:
        raise InvalidIdentifierError(value, position=position) from None


def coerce_identifiers(values: Iterable[Any], *, parse_strings: bool = False) -> list[int]:
    """Validate an identifier collection, failing on the first bad value.

    Args:
        values: Any finite iterable of candidate identifiers.
        parse_strings: Accept base-10 integer strings (CLI / text input).

    Returns:
        The values as ``int``, in input order, duplicates preserved.

    Raises:
        InvalidIdentifierError: Naming the offending value and its position.
    """
    return [
        coerce_identifier(value, position=i, parse_strings=parse_strings)
        for i, value in enumerate(values)
    ]


def validate_sql_identifier(name: Any, *, kind: str = "identifier", allow_schema: bool = False) -> str:
    """Return *name* if it is safe to interpolate into SQL.

    Accepts a plain SQL identifier, or ``schema.name`` when *allow_schema*
    is set.  Quoted identifiers are not supported.
    """
    if not isinstance(name, str) or not name:
        raise InvalidSqlIdentifierError(name, kind=kind)
    parts = name.split(".")
    if len(parts) > (2 if allow_schema else 1) or not all(_SQL_NAME.fullmatch(p) for p in parts):
        raise InvalidSqlIdentifierError(name, kind=kind)
    return name


__all__ = [
    "coerce_identifier",
    "coerce_identifiers",
    "validate_sql_identifier",
]
