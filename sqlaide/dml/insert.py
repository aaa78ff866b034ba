"""``INSERT`` statements from insertable records.

Example::

    rows = TableRowFactory.from_table(person)
    rows.insert_dml({"name": "O'Brien", "age": 42}, InsertStmtPreparerOptions(returning="*")).sql(ctx)
    # INSERT INTO "person" ("name", "age") VALUES ('O''Brien', 42) RETURNING *

Records are revalidated against the table's pydantic model before they are
rendered (defaults are filled in, types coerced).  Values that are SQL
fragments (any :class:`~sqlaide.emit.supplier.SqlTextSupplier`, typically a
sub-select) skip validation and render parenthesized.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Optional, Union

from pydantic import BaseModel, ValidationError, create_model

from sqlaide.domain.domain import SqlDomain, SqlField
from sqlaide.domain.domains import SqlDomains
from sqlaide.emit.supplier import SqlTextSupplier
from sqlaide.errors import InsertValidationError

if TYPE_CHECKING:
    from sqlaide.ddl.table import TableDefinition
    from sqlaide.emit.context import SqlEmitContext

logger = logging.getLogger(__name__)

InsertableRecord = Mapping[str, Any]
CandidateGroup = Literal["all", "primary-keys"]

#: ``(group) -> domains``; ``"all"`` yields the insertable columns in order.
CandidateColumns = Callable[[CandidateGroup], list[SqlDomain]]

#: A fragment, or ``(ctx) -> fragment``.
SqlFragmentArg = Union[SqlTextSupplier, str, Callable[["SqlEmitContext"], SqlTextSupplier]]


@dataclass(frozen=True)
class InsertReturning:
    """Explicit ``RETURNING`` list: column names or raw expressions."""

    columns: Sequence[str] | None = None
    exprs: Sequence[str] | None = None


InsertStmtReturning = Union[Literal["*", "primary-keys"], InsertReturning]


@dataclass
class InsertStmtPreparerOptions:
    """How an insert statement is rendered.

    Attributes:
        is_column_emittable: ``(column, record, domain, table) -> bool``;
            columns it rejects are left out of the statement.
        returning: ``"*"``, ``"primary-keys"``, an :class:`InsertReturning`
            or ``(ctx) -> one of those``.
        where: Fragment appended after ``VALUES``.
        on_conflict: Fragment appended after ``where``.
        transform_sql: ``(suggested_sql, statement, ctx) -> sql``; last
            chance rewrite of the generated text.
    """

    is_column_emittable: Callable[[str, InsertableRecord, SqlDomain, str], bool] | None = None
    returning: InsertStmtReturning | Callable[[SqlEmitContext], InsertStmtReturning] | None = None
    where: SqlFragmentArg | None = None
    on_conflict: SqlFragmentArg | None = None
    transform_sql: Callable[[str, InsertStatement, SqlEmitContext], str] | None = None


def _fragment_sql(ctx: SqlEmitContext, fragment: SqlFragmentArg | None) -> str:
    if fragment is None:
        return ""
    if isinstance(fragment, str):
        return f" {fragment}"
    if isinstance(fragment, SqlTextSupplier):
        return f" {fragment.sql(ctx)}"
    return f" {fragment(ctx).sql(ctx)}"


def insert_value_sql(ctx: SqlEmitContext, value: Any) -> tuple[Any, str]:
    """Quote one insertable value; SQL fragments are parenthesized."""
    if isinstance(value, SqlTextSupplier):
        return value, f"({value.sql(ctx)})"
    return ctx.sql_text_emit_options.quoted_literal(value)


class InsertStatement(SqlTextSupplier):
    """An insert of one or more records into one table.

    Attributes:
        table_name: Target table.
        records: The (already revalidated) rows.
        candidate_columns: Supplies the insertable columns.
        options: Rendering options.
    """

    def __init__(
        self,
        table_name: str,
        records: list[InsertableRecord],
        candidate_columns: CandidateColumns,
        options: InsertStmtPreparerOptions,
    ) -> None:
        self.table_name = table_name
        self.records = records
        self.candidate_columns = candidate_columns
        self.options = options

    @property
    def insertable(self) -> InsertableRecord | list[InsertableRecord]:
        return self.records[0] if len(self.records) == 1 else self.records

    def values(self, ctx: SqlEmitContext) -> tuple[list[str], list[list[tuple[Any, str]]]]:
        """Column identities (from the first row) and quoted values per row."""
        emittable = self.options.is_column_emittable
        names: list[str] = []
        rows: list[list[tuple[Any, str]]] = []
        for row_num, record in enumerate(self.records):
            row: list[tuple[Any, str]] = []
            for domain in self.candidate_columns("all"):
                if emittable is not None and not emittable(domain.identity, record, domain, self.table_name):
                    continue
                if row_num == 0:
                    names.append(domain.identity)
                row.append(insert_value_sql(ctx, record.get(domain.identity)))
            rows.append(row)
        return names, rows

    def _returning_sql(self, ctx: SqlEmitContext) -> str:
        returning = self.options.returning
        if callable(returning):
            returning = returning(ctx)
        if returning is None:
            return ""
        ns = ctx.naming(quote_identifiers=True)
        if returning == "*":
            return " RETURNING *"
        if returning == "primary-keys":
            columns = [d.identity for d in self.candidate_columns("primary-keys")]
            return " RETURNING " + ", ".join(ns.table_column_name(self.table_name, c) for c in columns)
        if returning.columns:
            return " RETURNING " + ", ".join(
                ns.table_column_name(self.table_name, c) for c in returning.columns
            )
        return " RETURNING " + ", ".join(returning.exprs or ())

    def sql(self, ctx: SqlEmitContext) -> str:
        ns = ctx.naming(quote_identifiers=True)
        names, rows = self.values(ctx)
        columns = ", ".join(ns.table_column_name(self.table_name, n) for n in names)
        values = ",\n              ".join(
            "(" + ", ".join(text for _, text in row) + ")" for row in rows
        )
        separator = "\n       " if len(rows) > 1 else " "
        text = (
            f"INSERT INTO {ns.table_name(self.table_name)} ({columns}){separator}VALUES {values}"
            f"{_fragment_sql(ctx, self.options.where)}"
            f"{_fragment_sql(ctx, self.options.on_conflict)}"
            f"{self._returning_sql(ctx)}"
        )
        if self.options.transform_sql is not None:
            return self.options.transform_sql(text, self, ctx)
        return text

    def __repr__(self) -> str:
        return f"InsertStatement({self.table_name!r}, rows={len(self.records)})"


def insert_stmt_preparer(
    table_name: str,
    candidate_columns: CandidateColumns,
    record_revalidator: Callable[[InsertableRecord], InsertableRecord] | None = None,
    default_options: InsertStmtPreparerOptions | None = None,
) -> Callable[..., InsertStatement]:
    """Return ``(record_or_records, options=None) -> InsertStatement``.

    ``record_revalidator`` is applied to every record when the statement is
    prepared, so validation errors surface immediately rather than at
    render time.
    """

    def prepare(
        records: InsertableRecord | Sequence[InsertableRecord],
        options: InsertStmtPreparerOptions | None = None,
    ) -> InsertStatement:
        rows = [records] if isinstance(records, Mapping) else list(records)
        if record_revalidator is not None:
            rows = [record_revalidator(r) for r in rows]
        logger.debug("prepared insert into %s with %d row(s)", table_name, len(rows))
        return InsertStatement(
            table_name,
            rows,
            candidate_columns,
            options or default_options or InsertStmtPreparerOptions(),
        )

    return prepare


class TableRowFactory:
    """Insertable records and insert statements for one table.

    Args:
        table_name: The table.
        fields: The table's fields in declaration order.
        model: Pydantic model used for revalidation; built from ``fields``
            when omitted.
        default_options: Used when no options are passed per statement.
    """

    def __init__(
        self,
        table_name: str,
        fields: Mapping[str, SqlField],
        model: type[BaseModel] | None = None,
        default_options: InsertStmtPreparerOptions | None = None,
    ) -> None:
        self.table_name = table_name
        self.fields = dict(fields)
        if model is None:
            model = SqlDomains(self.fields, f"{table_name}_row").validation_model()
        self.model = model
        self.default_options = default_options
        self._insertable_models: dict[frozenset[str], type[BaseModel]] = {}
        self._insert_dml = insert_stmt_preparer(table_name, self.candidate_columns, self.revalidate, default_options)
        self._insert_raw_dml = insert_stmt_preparer(table_name, self.candidate_columns, None, default_options)

    @classmethod
    def from_table(
        cls,
        table: TableDefinition,
        default_options: InsertStmtPreparerOptions | None = None,
    ) -> TableRowFactory:
        return cls(table.table_name, table.fields, table.validation_model(), default_options)

    def candidate_columns(self, group: CandidateGroup = "all") -> list[SqlDomain]:
        domains = [f.domain for f in self.fields.values()]
        if group == "primary-keys":
            return [d for d in domains if d.is_primary_key]
        return [d for d in domains if not d.is_excluded_from_insert_dml]

    def prepare_insertable(self, record: InsertableRecord) -> dict[str, Any]:
        """A mutable copy of ``record``; nothing is validated yet."""
        return dict(record)

    def _insertable_model(self, sql_valued: frozenset[str]) -> type[BaseModel]:
        model = self._insertable_models.get(sql_valued)
        if model is not None:
            return model
        overrides: dict[str, Any] = {}
        for identity, f in self.fields.items():
            domain = f.domain
            if identity in sql_valued:
                overrides[identity] = (Any, None)
            elif not f.has_default and not domain.is_optional and (
                domain.is_optional_in_insertable_record or domain.is_excluded_from_insert_dml
            ):
                overrides[identity] = (Optional[f.annotation], None)
        model = (
            create_model(f"{self.model.__name__}Insertable", __base__=self.model, **overrides)
            if overrides
            else self.model
        )
        self._insertable_models[sql_valued] = model
        return model

    def revalidate(self, record: InsertableRecord) -> dict[str, Any]:
        """Validate the plain values of ``record`` and fill in defaults.

        Raises:
            InsertValidationError: If a plain value fails validation.
        """
        sql_values = {
            k: v for k, v in record.items() if k in self.fields and isinstance(v, SqlTextSupplier)
        }
        plain = {k: v for k, v in record.items() if k not in sql_values}
        model = self._insertable_model(frozenset(sql_values))
        try:
            validated = model.model_validate(plain)
        except ValidationError as exc:
            raise InsertValidationError(self.table_name, exc.errors(include_url=False)) from exc
        result = {identity: getattr(validated, identity) for identity in self.fields}
        result.update(sql_values)
        return result

    def insert_dml(
        self,
        records: InsertableRecord | Sequence[InsertableRecord],
        options: InsertStmtPreparerOptions | None = None,
    ) -> InsertStatement:
        """Revalidate ``records`` and return their insert statement."""
        return self._insert_dml(records, options)

    def insert_raw_dml(
        self,
        records: InsertableRecord | Sequence[InsertableRecord],
        options: InsertStmtPreparerOptions | None = None,
    ) -> InsertStatement:
        """Like :meth:`insert_dml` without revalidation."""
        return self._insert_raw_dml(records, options)


def table_row_factory(
    table: TableDefinition,
    default_options: InsertStmtPreparerOptions | None = None,
) -> TableRowFactory:
    return TableRowFactory.from_table(table, default_options)
