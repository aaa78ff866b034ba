"""Custom exception hierarchy for sqlaide.

All public errors inherit from SqlAideError so callers can catch the base
class for any sqlaide-specific failure.  Structural concerns that should not
stop rendering (missing primary keys, naming conventions, undiscovered
foreign key targets) are reported as lint issues instead; see
:mod:`sqlaide.emit.lint`.
"""
from __future__ import annotations

from typing import Any


class SqlAideError(Exception):
    """Base exception for all sqlaide errors."""


class DomainTypeError(SqlAideError):
    """Raised when a python type cannot be mapped to a SQL domain.

    Args:
        message: Human-readable description.
        annotation: The annotation that could not be mapped.
    """

    def __init__(self, message: str, annotation: Any = None) -> None:
        super().__init__(message)
        self.annotation = annotation


class DialectError(SqlAideError):
    """Raised when a dialect name is not registered."""


class TableDefinitionError(SqlAideError):
    """Raised when a table definition refers to columns it does not have.

    Args:
        message: Human-readable description.
        table_name: The table being defined.
        column_names: The offending column names.
    """

    def __init__(
        self,
        message: str,
        table_name: str,
        column_names: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.table_name = table_name
        self.column_names = column_names or []


class StatementError(SqlAideError):
    """Raised when a statement cannot be prepared from the supplied record.

    Args:
        message: Human-readable description.
        code: Machine-readable error code (e.g. INSERT_VALIDATION).
        details: Extra context about the failure.
    """

    def __init__(
        self,
        message: str,
        code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details: dict[str, Any] = details or {}

    def to_error_response(self) -> dict[str, Any]:
        """Returns a structured error response."""
        return {
            "error": self.code,
            "message": str(self),
            "details": self.details,
        }


class InsertValidationError(StatementError):
    """Raised when an insertable record fails schema revalidation.

    Values that are themselves SQL fragments are never revalidated, so the
    errors carried here always refer to plain values.

    Args:
        table_name: The table the record was destined for.
        errors: The pydantic error list (``ValidationError.errors()``).
    """

    def __init__(self, table_name: str, errors: list[dict[str, Any]]) -> None:
        fields = sorted({str(e["loc"][0]) for e in errors if e.get("loc")})
        super().__init__(
            f"Insertable record for table '{table_name}' failed validation "
            f"on {fields}.",
            code="INSERT_VALIDATION",
            details={"table": table_name, "fields": fields},
        )
        self.table_name = table_name
        self.errors = errors


class UnresolvedReferenceError(StatementError):
    """Raised by the entity graph when a foreign key target is missing and
    the graph policy is ``"fatal"``."""

    def __init__(
        self,
        source_table: str,
        source_column: str,
        target_table: str,
        available: list[str],
    ) -> None:
        super().__init__(
            f"Entity '{target_table}' referenced in "
            f"'{source_table}.{source_column}' not found in graph.",
            code="UNRESOLVED_REFERENCE",
            details={
                "source_table": source_table,
                "source_column": source_column,
                "target_table": target_table,
                "available": available,
            },
        )
