"""
Structured error types for seqgap.

Every failure seqgap can report is a :class:`SeqgapError` carrying a
category, a retryable flag, structured context, and an optional chained
cause.  The ops layer maps these onto ``OperationResult.fail`` codes and the
CLI renders them as ``Error (CODE): message``.

Architecture:
    ::

        ┌───────────────────────────────────────────────────────────────┐
        │                         SeqgapError                            │
        │        (category, retryable, context, cause)                   │
        ├───────────────────────────────────────────────────────────────┤
        │  ValidationError          ConfigError        DatabaseError     │
        │  (VALIDATION)             (CONFIG)           (DATABASE)        │
        │       │                       │                   │            │
        │  InvalidIdentifierError                       QueryError       │
        │  InvalidSqlIdentifierError                                     │
        │  RangeTooLargeError                                            │
        │                                                                │
        │  BackfillError (BACKFILL)                                      │
        └───────────────────────────────────────────────────────────────┘

Examples:
    >>> error = InvalidIdentifierError(3.5, position=2)
    >>> error.category
    <ErrorCategory.VALIDATION: 'VALIDATION'>
    >>> error.retryable
    False

    >>> try:
    ...     raise OSError("connection refused")
    ... except OSError as e:
    ...     error = DatabaseError("Cannot reach PostgreSQL", cause=e)
    >>> error.retryable
    True

Guardrails:
    ❌ DON'T: Raise bare ValueError from ingestion code
    ✅ DO: Raise InvalidIdentifierError naming the value and its position

    ❌ DON'T: Swallow the driver exception
    ✅ DO: Pass it as cause= for error chaining
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    DATABASE = "DATABASE"         # Connection, query failures
    VALIDATION = "VALIDATION"     # Bad identifiers, bad names, oversize ranges
    CONFIG = "CONFIG"             # Invalid settings, unknown URL scheme
    BACKFILL = "BACKFILL"         # Illegal backfill transitions
    INTERNAL = "INTERNAL"         # Bugs, unexpected state


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        table: Table being scanned or backfilled.
        column: Identifier column.
        database: Database URL or path (never with credentials).
        metadata: Additional key-value pairs.
    """

    table: str | None = None
    column: str | None = None
    database: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["table", "column", "database"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class SeqgapError(Exception):
    """
    Base exception for all seqgap errors.

    Subclasses set ``default_category`` and ``default_retryable``; callers
    may override either per instance.  ``code`` is the machine-readable
    string used in ``OperationResult.fail``.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False
    code: str = "INTERNAL"

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> SeqgapError:
        """
        Add context to this error (fluent API).

        Usage:
            raise QueryError("no such table").with_context(
                table="employees", column="id"
            )
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(SeqgapError):
    """
    Input validation error.

    Never retryable - the input must be fixed.
    """

    default_category = ErrorCategory.VALIDATION
    default_retryable = False
    code = "VALIDATION_FAILED"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.constraint = constraint

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        if self.constraint:
            result["constraint"] = self.constraint
        return result


class InvalidIdentifierError(ValidationError):
    """A value in an identifier collection is not an integer."""

    code = "INVALID_IDENTIFIER"

    def __init__(self, value: Any, *, position: int | None = None, reason: str | None = None):
        self.position = position
        where = f" at position {position}" if position is not None else ""
        detail = reason or f"expected an integer, got {type(value).__name__}"
        super().__init__(
            f"Invalid identifier {value!r}{where}: {detail}",
            field="ids",
            value=value,
            constraint="integer",
        )

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.position is not None:
            result["position"] = self.position
        return result


class InvalidSqlIdentifierError(ValidationError):
    """A table or column name is not a plain SQL identifier."""

    code = "INVALID_NAME"

    def __init__(self, name: Any, *, kind: str = "identifier"):
        self.kind = kind
        super().__init__(
            f"Invalid SQL {kind} name: {name!r}",
            field=kind,
            value=name,
            constraint="[A-Za-z_][A-Za-z0-9_]*",
        )


class RangeTooLargeError(ValidationError):
    """The ``[min, max]`` span of a scan exceeds the configured limit."""

    code = "RANGE_TOO_LARGE"

    def __init__(self, lo: int, hi: int, max_span: int):
        self.lo = lo
        self.hi = hi
        self.max_span = max_span
        super().__init__(
            f"Identifier span {hi - lo + 1} ({lo}..{hi}) exceeds max_span={max_span}; "
            "pass a limit or raise SEQGAP_MAX_SPAN",
            field="max_span",
            value=hi - lo + 1,
            constraint=f"<= {max_span}",
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(SeqgapError):
    """
    Configuration error.

    Never retryable - configuration must be fixed.
    """

    default_category = ErrorCategory.CONFIG
    default_retryable = False
    code = "CONFIG_ERROR"


# =============================================================================
# DATABASE ERRORS
# =============================================================================


class DatabaseError(SeqgapError):
    """Database connection error; usually transient."""

    default_category = ErrorCategory.DATABASE
    default_retryable = True
    code = "DATABASE_ERROR"


class QueryError(DatabaseError):
    """SQL statement failed (missing table, bad column, constraint)."""

    default_retryable = False
    code = "QUERY_FAILED"


# =============================================================================
# BACKFILL ERRORS
# =============================================================================


class BackfillError(SeqgapError):
    """Illegal backfill plan transition or unknown id."""

    default_category = ErrorCategory.BACKFILL
    default_retryable = False
    code = "BACKFILL_ERROR"


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "SeqgapError",
    "ValidationError",
    "InvalidIdentifierError",
    "InvalidSqlIdentifierError",
    "RangeTooLargeError",
    "ConfigError",
    "DatabaseError",
    "QueryError",
    "BackfillError",
]
