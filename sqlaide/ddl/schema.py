"""``CREATE SCHEMA`` and schema-qualified naming."""
from __future__ import annotations

from typing import TYPE_CHECKING

from sqlaide.emit.naming import QualifiedNamingStrategySupplier, QualifiedSqlObjectNames, qualify_name
from sqlaide.emit.supplier import SqlTextSupplier

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext
    from sqlaide.emit.naming import SqlObjectNames


class SchemaDefinition(QualifiedNamingStrategySupplier, SqlTextSupplier):
    """A schema that renders its own DDL and qualifies other objects.

    Pass it as ``sql_ns`` to tables and views to emit ``"schema"."name"``.

    Attributes:
        sql_namespace: The schema name.
        is_idempotent: Render ``IF NOT EXISTS``.
    """

    is_valid = True

    def __init__(self, sql_namespace: str, is_idempotent: bool = False) -> None:
        self.sql_namespace = sql_namespace
        self.is_idempotent = is_idempotent

    def sql(self, ctx: SqlEmitContext) -> str:
        if_not_exists = "IF NOT EXISTS " if self.is_idempotent else ""
        name = ctx.naming(quote_identifiers=True).schema_name(self.sql_namespace)
        return f"CREATE SCHEMA {if_not_exists}{name}"

    def qualified_names(
        self,
        ctx: SqlEmitContext,
        base_ns: SqlObjectNames | None = None,
    ) -> SqlObjectNames:
        ns = base_ns if base_ns is not None else ctx.naming()
        return QualifiedSqlObjectNames(ns, qualify_name(ns.schema_name(self.sql_namespace)))

    def __repr__(self) -> str:
        return f"SchemaDefinition({self.sql_namespace!r})"


def sql_schema_defn(schema_name: str, is_idempotent: bool = False) -> SchemaDefinition:
    return SchemaDefinition(schema_name, is_idempotent)


def is_schema_definition(o: object) -> bool:
    return isinstance(o, SchemaDefinition)
