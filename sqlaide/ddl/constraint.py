"""Table-level constraints rendered after all column definitions."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlaide.emit.supplier import SqlTextSupplier
from sqlaide.errors import TableDefinitionError

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext


@dataclass(frozen=True)
class UniqueConstraint(SqlTextSupplier):
    """``UNIQUE(col, ...)``; ``constraint_identity`` names it for callers
    but is not rendered."""

    constrained_column_names: tuple[str, ...]
    constraint_identity: str | None = None

    def sql(self, ctx: SqlEmitContext) -> str:
        ns = ctx.naming(quote_identifiers=True)
        columns = ", ".join(ns.domain_name(c) for c in self.constrained_column_names)
        return f"UNIQUE({columns})"


def check_column_names(table_name: str, known: Iterable[str], names: Iterable[str]) -> None:
    known = set(known)
    unknown = [n for n in names if n not in known]
    if unknown:
        raise TableDefinitionError(
            f"Table '{table_name}' has no column(s) {unknown}.",
            table_name,
            unknown,
        )


class TableConstraints:
    """Builds constraints for one table, checking column names.

    Args:
        table_name: The owning table.
        column_names: The table's columns.
    """

    def __init__(self, table_name: str, column_names: Iterable[str]) -> None:
        self.table_name = table_name
        self.column_names = list(column_names)
        self.constraints: list[UniqueConstraint] = []

    def unique_named(self, constraint_identity: str | None, *column_names: str) -> UniqueConstraint:
        check_column_names(self.table_name, self.column_names, column_names)
        identity = constraint_identity or f"unique{len(self.constraints)}"
        constraint = UniqueConstraint(tuple(column_names), identity)
        self.constraints.append(constraint)
        return constraint

    def unique(self, *column_names: str) -> UniqueConstraint:
        return self.unique_named(None, *column_names)
