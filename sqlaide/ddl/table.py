"""Table definitions: a shape of fields finalized into ``CREATE TABLE``.

Example::

    from sqlaide.ddl import auto_inc_primary_key, table_definition
    from sqlaide.domain import integer, text

    author = table_definition("author", {
        "author_id": auto_inc_primary_key(),
        "name": text(),
    })
    book = table_definition("book", {
        "book_id": auto_inc_primary_key(),
        "author_id": author.belongs_to("author_id"),
        "title": text(),
        "pages": integer().optional(),
    })

    print(book.sql(ctx))
    # CREATE TABLE "book" (
    #     "book_id" INTEGER PRIMARY KEY AUTOINCREMENT,
    #     "author_id" INTEGER NOT NULL,
    #     "title" TEXT NOT NULL,
    #     "pages" INTEGER,
    #     FOREIGN KEY("author_id") REFERENCES "author"("author_id")
    # )

Finalization binds every field to its shape key, resolves foreign key and
self reference placeholders, and builds the constraints and indexes the
caller asked for.  After that, columns and constraints are fixed; only the
table's lint issues may still grow.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel

from sqlaide.ddl.column import table_column_defn_sql
from sqlaide.ddl.constraint import TableConstraints, UniqueConstraint
from sqlaide.ddl.foreign_key import (
    BelongsTo,
    ForeignKeyDestination,
    ForeignKeyNature,
    ForeignKeySource,
    forward_ref,
    pascal_case,
    resolve_foreign_keys,
)
from sqlaide.ddl.index import TableIndex, TableIndexes
from sqlaide.domain.domain import SqlDomain, SqlField
from sqlaide.domain.domains import Shape, SqlDomains, SqlDomainSymbol
from sqlaide.emit.comment import SqlObjectComment, SqlObjectsCommentsSupplier
from sqlaide.emit.lint import SqlLintIssue, SqlLintIssues
from sqlaide.emit.naming import QualifiedNamingStrategySupplier
from sqlaide.emit.supplier import SqlSymbolSupplier, SqlTextLintIssuesPopulator, SqlTextSupplier
from sqlaide.errors import TableDefinitionError

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext

logger = logging.getLogger(__name__)


@dataclass
class TableDefnOptions:
    """How a table is finalized and rendered.

    Attributes:
        is_idempotent: Render ``IF NOT EXISTS`` where the dialect allows it.
        is_temp: Render ``CREATE TEMP TABLE``.
        description: Table documentation, emitted as ``COMMENT ON table``.
        sql_ns: Namespace (schema) qualifying the table name.
        after_column_defns: Extra fragments placed last among the
            after-all-column definitions.
        constraints: ``(TableConstraints) -> ...``; register constraints on
            the builder it receives.
        indexes: ``(TableIndexes) -> ...``; register indexes on the builder
            it receives.
    """

    is_idempotent: bool = False
    is_temp: bool = False
    description: str | None = None
    sql_ns: QualifiedNamingStrategySupplier | None = None
    after_column_defns: list[SqlTextSupplier] = field(default_factory=list)
    constraints: Callable[[TableConstraints], Any] | None = None
    indexes: Callable[[TableIndexes], Any] | None = None


class TableDefinition(
    SqlTextSupplier,
    SqlSymbolSupplier,
    SqlTextLintIssuesPopulator,
    SqlObjectsCommentsSupplier,
):
    """A finalized table.

    Attributes:
        table_name: Logical table name.
        options: The options the table was finalized with.
        fields: Bound and resolved fields in declaration order.
        constraints: Table constraints, in registration order.
        indexes: Table indexes, in registration order.
        foreign_key_sources: One referenceable source per column.
        lint_issues: Table-level lint issues; append-only.
    """

    def __init__(self, table_name: str, shape: Shape, options: TableDefnOptions | None = None) -> None:
        self.table_name = table_name
        self.options = options or TableDefnOptions()
        model_name = pascal_case(table_name)
        bound = SqlDomains(shape, model_name).fields
        self.foreign_key_sources = {
            identity: ForeignKeySource(table_name, identity) for identity in bound
        }
        resolved = resolve_foreign_keys(table_name, bound, self.foreign_key_sources)
        self._sql_domains = SqlDomains(resolved, model_name)
        self.fields: dict[str, SqlField] = self._sql_domains.fields

        builder = TableConstraints(table_name, self.fields)
        if self.options.constraints is not None:
            self.options.constraints(builder)
        self.constraints: list[UniqueConstraint] = builder.constraints

        indexes = TableIndexes(table_name, self.fields, self.options.sql_ns)
        if self.options.indexes is not None:
            self.options.indexes(indexes)
        self.indexes: list[TableIndex] = indexes.indexes

        self.lint_issues: list[SqlLintIssue] = []
        logger.debug(
            "table %s finalized with %d columns, %d foreign keys",
            table_name,
            len(self.fields),
            len(self.foreign_keys),
        )

    # -- column accessors -----------------------------------------------------

    @property
    def domains(self) -> list[SqlDomain]:
        return self._sql_domains.domains

    @property
    def columns(self) -> dict[str, SqlDomain]:
        return {identity: f.domain for identity, f in self.fields.items()}

    @property
    def primary_key(self) -> dict[str, SqlDomain]:
        return {i: d for i, d in self.columns.items() if d.is_primary_key}

    @property
    def unique(self) -> dict[str, SqlDomain]:
        return {i: d for i, d in self.columns.items() if d.is_unique}

    @property
    def foreign_keys(self) -> dict[str, ForeignKeyDestination]:
        return {
            i: d.foreign_key for i, d in self.columns.items() if d.foreign_key is not None
        }

    @property
    def symbols(self) -> dict[str, SqlDomainSymbol]:
        return self._sql_domains.symbols

    @property
    def description(self) -> str | None:
        return self.options.description

    def validation_model(self) -> type[BaseModel]:
        return self._sql_domains.validation_model()

    # -- reference builders ---------------------------------------------------

    def references(self, column_name: str, nature: ForeignKeyNature | None = None) -> SqlField:
        """A field referencing ``column_name`` of this table."""
        target = self.fields.get(column_name)
        if target is None:
            raise TableDefinitionError(
                f"Table '{self.table_name}' has no column '{column_name}' to reference.",
                self.table_name,
                [column_name],
            )
        return forward_ref(
            self.table_name,
            column_name,
            target,
            nature,
            self.foreign_key_sources[column_name],
        )

    def belongs_to(
        self,
        column_name: str,
        singular: str | None = None,
        plural: str | None = None,
    ) -> SqlField:
        """Like :meth:`references`, marking the referencing table as a child
        collection of this one."""
        return self.references(column_name, BelongsTo(singular, plural))

    # -- rendering ------------------------------------------------------------

    def sql_symbol(self, ctx: SqlEmitContext) -> str:
        return ctx.naming(quote_identifiers=True, qnss=self.options.sql_ns).table_name(self.table_name)

    def after_column_defns(self) -> list[SqlTextSupplier]:
        """FK clauses, then ``UNIQUE`` per unique column, then constraints,
        then the caller's extra fragments."""
        result: list[SqlTextSupplier] = []
        for domain in self.domains:
            result.extend(domain.sql_partial("create table, after all column definitions") or [])
        result.extend(UniqueConstraint((identity,)) for identity in self.unique)
        result.extend(self.constraints)
        result.extend(self.options.after_column_defns)
        return result

    def sql(self, ctx: SqlEmitContext) -> str:
        steo = ctx.sql_text_emit_options
        options = self.options
        indent = steo.indentation("define table column")
        lines = [table_column_defn_sql(ctx, self.table_name, d) for d in self.domains]
        lines.extend(f"{indent}{s.sql(ctx)}" for s in self.after_column_defns())
        temp = "TEMP " if options.is_temp else ""
        if_not_exists = ctx.sql_dialect.table_if_not_exists(options.is_idempotent)
        return (
            f"{steo.indentation('create table')}CREATE {temp}TABLE {if_not_exists}"
            f"{self.sql_symbol(ctx)} (\n" + ",\n".join(lines) + "\n)"
        )

    # -- lint & documentation -------------------------------------------------

    def register_lint_issue(self, *issues: SqlLintIssue) -> None:
        self.lint_issues.extend(issues)

    def populate_sql_text_lint_issues(self, lint_issues: SqlLintIssues, ctx: SqlEmitContext) -> None:
        for domain in self.domains:
            lint_issues.register_lint_issue(*domain.lint_issues)
        lint_issues.register_lint_issue(*self.lint_issues)

    def sql_objects_comments(self) -> list[SqlObjectComment]:
        sql_ns = self.options.sql_ns
        comments: list[SqlObjectComment] = []
        if self.description:
            comments.append(SqlObjectComment("table", self.table_name, self.description, sql_ns=sql_ns))
        for domain in self.domains:
            if domain.description:
                comments.append(
                    SqlObjectComment(
                        "column",
                        self.table_name,
                        domain.description,
                        column_name=domain.identity,
                        sql_ns=sql_ns,
                    )
                )
        return comments

    def __repr__(self) -> str:
        return f"TableDefinition({self.table_name!r}, columns={list(self.fields)})"


def table_definition(
    table_name: str,
    shape: Shape,
    options: TableDefnOptions | None = None,
    **option_fields: Any,
) -> TableDefinition:
    """Finalize ``shape`` into a :class:`TableDefinition`.

    Options may be passed as a :class:`TableDefnOptions` or as keyword
    arguments (``is_idempotent=True, description="..."``).
    """
    if options is None:
        options = TableDefnOptions(**option_fields)
    return TableDefinition(table_name, shape, options)


def is_table_definition(o: object, table_name: str | None = None) -> bool:
    if not isinstance(o, TableDefinition):
        return False
    return table_name is None or o.table_name == table_name


def table_definitions(objects: Iterable[object]) -> list[TableDefinition]:
    """The table definitions among ``objects``, in order."""
    return [o for o in objects if isinstance(o, TableDefinition)]
