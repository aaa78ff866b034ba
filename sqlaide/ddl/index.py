"""``CREATE [UNIQUE] INDEX`` statements for a table."""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlaide.ddl.constraint import check_column_names
from sqlaide.emit.naming import QualifiedNamingStrategySupplier
from sqlaide.emit.supplier import SqlTextSupplier

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext


@dataclass(frozen=True)
class TableIndex(SqlTextSupplier):
    """An index on one or more columns.

    Attributes:
        table_name: Indexed table.
        indexed_column_names: Columns in index order.
        index_identity: Rendered as-is when given; otherwise the naming
            strategy's quoted ``idx_<table>__<cols>`` name is used.
        is_unique: Render ``CREATE UNIQUE INDEX``.
        sql_ns: Optional namespace qualifying the table name.
    """

    table_name: str
    indexed_column_names: tuple[str, ...]
    index_identity: str | None = None
    is_unique: bool = False
    sql_ns: QualifiedNamingStrategySupplier | None = None

    def sql(self, ctx: SqlEmitContext) -> str:
        ns = ctx.naming(quote_identifiers=True)
        identity = self.index_identity or ns.table_index_name(
            self.table_name, list(self.indexed_column_names)
        )
        table_ns = ctx.naming(quote_identifiers=True, qnss=self.sql_ns)
        columns = ", ".join(ns.domain_name(c) for c in self.indexed_column_names)
        unique = "UNIQUE " if self.is_unique else ""
        return f"CREATE {unique}INDEX {identity} ON {table_ns.table_name(self.table_name)}({columns})"


class TableIndexes:
    """Builds indexes for one table, checking column names."""

    def __init__(
        self,
        table_name: str,
        column_names: Iterable[str],
        sql_ns: QualifiedNamingStrategySupplier | None = None,
    ) -> None:
        self.table_name = table_name
        self.column_names = list(column_names)
        self.sql_ns = sql_ns
        self.indexes: list[TableIndex] = []

    def index(
        self,
        *column_names: str,
        index_identity: str | None = None,
        is_unique: bool = False,
    ) -> TableIndex:
        check_column_names(self.table_name, self.column_names, column_names)
        index = TableIndex(self.table_name, tuple(column_names), index_identity, is_unique, self.sql_ns)
        self.indexes.append(index)
        return index
