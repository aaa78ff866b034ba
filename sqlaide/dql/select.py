"""``SELECT`` statements: free-form compositions and record-driven preparers."""
from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Union

from sqlaide.domain.domain import SqlField
from sqlaide.dql.criteria import CandidateGroup, FilterCriteriaPreparer, filter_criteria_preparer
from sqlaide.emit.lint import SqlLintIssue, SqlLintIssues, template_string_lint_issue
from sqlaide.emit.sql import ComposedSql, SqlComposer, SqlTextSupplierOptions, typical_sql_text_supplier_options
from sqlaide.emit.supplier import SqlTextLintIssuesPopulator, SqlTextSupplier

if TYPE_CHECKING:
    from sqlaide.ddl.table import TableDefinition
    from sqlaide.emit.context import SqlEmitContext
    from sqlaide.emit.naming import SqlObjectNames

# ---------------------------------------------------------------------------
# Free-form selects
# ---------------------------------------------------------------------------

_FIRST_WORD_RE = re.compile(r"^\s*([a-zA-Z0-9]+)")


def first_word(text: str) -> str | None:
    match = _FIRST_WORD_RE.match(text)
    return match.group(1).upper() if match else None


def select_first_token_guard(token: str) -> bool:
    return token == "SELECT"


class Select(SqlTextSupplier, SqlTextLintIssuesPopulator):
    """A select composition; renders a comment instead when it is invalid.

    Attributes:
        select_stmt: The underlying composition.
        select_stmt_name: Optional caller-assigned name.
        invalid: The lint issue that made the statement invalid, if any.
    """

    def __init__(
        self,
        select_stmt: ComposedSql,
        select_stmt_name: str | None = None,
        invalid: SqlLintIssue | None = None,
    ) -> None:
        self.select_stmt = select_stmt
        self.select_stmt_name = select_stmt_name
        self.invalid = invalid

    @property
    def is_valid(self) -> bool:
        return self.invalid is None

    def sql(self, ctx: SqlEmitContext) -> str:
        if self.invalid is not None:
            return ctx.sql_text_emit_options.single_line_src_comment(self.invalid.lint_issue)
        return self.select_stmt.sql(ctx)

    def populate_sql_text_lint_issues(self, lint_issues: SqlLintIssues, ctx: SqlEmitContext) -> None:
        if self.invalid is not None:
            lint_issues.register_lint_issue(self.invalid)
        self.select_stmt.populate_sql_text_lint_issues(lint_issues, ctx)


@dataclass
class SelectTemplateOptions:
    """Options for :func:`untyped_select`.

    Attributes:
        symbols_first: Render tables and columns as their names.
        select_stmt_name: Name carried by the resulting :class:`Select`.
        first_token_guard: ``(FIRST_WORD) -> bool``; ``None`` disables the
            guard.
        embedded_options: Builds the options of the inner composition.
    """

    symbols_first: bool = False
    select_stmt_name: str | None = None
    first_token_guard: Callable[[str], bool] | None = select_first_token_guard
    embedded_options: Callable[[bool], SqlTextSupplierOptions] | None = None


class SelectComposer:
    """Composes :class:`Select` statements; see :func:`untyped_select`."""

    def __init__(self, options: SelectTemplateOptions | None = None) -> None:
        self.options = options or SelectTemplateOptions()

    def _composer(self) -> SqlComposer:
        build = self.options.embedded_options
        if build is not None:
            return SqlComposer(build(self.options.symbols_first))
        return SqlComposer(typical_sql_text_supplier_options(symbols_first=self.options.symbols_first))

    def _select(self, composed: ComposedSql) -> Select:
        invalid = None
        guard = self.options.first_token_guard
        token = first_word(composed.literals[0])
        if guard is not None and token and not guard(token):
            invalid = template_string_lint_issue(
                "SQL statement does not start with SELECT",
                composed.literals,
                composed.expressions,
            )
        return Select(composed, self.options.select_stmt_name, invalid)

    def __call__(self, *parts: Any) -> Select:
        return self._select(self._composer()(*parts))

    def template(self, literals: Sequence[str], *expressions: Any) -> Select:
        return self._select(self._composer().template(literals, *expressions))


def untyped_select(options: SelectTemplateOptions | None = None, **option_fields: Any) -> SelectComposer:
    """Return a composer for free-form selects.

    Example::

        untyped_select(symbols_first=True)("select ", table.symbols["name"], " from ", table)
    """
    return SelectComposer(options or SelectTemplateOptions(**option_fields))


# ---------------------------------------------------------------------------
# Record-driven selects
# ---------------------------------------------------------------------------

SelectStmtReturning = Union[Literal["*", "primary-keys"], Sequence[Union[str, SqlTextSupplier]]]


@dataclass
class SelectStmtPreparerOptions:
    """How :func:`entity_select_stmt_preparer` renders a statement.

    Attributes:
        identity: Optional statement name.
        sql_fmt: ``"single-line"`` or ``"multi-line"``.
        returning: ``"*"``, ``"primary-keys"`` (default), a list of column
            names and SQL fragments, or ``(ctx) -> one of those``.
        entity_name_supplier: ``(entity, names) -> text``.
        attr_name_supplier: ``(entity, attr, names) -> text``.
    """

    identity: str | None = None
    sql_fmt: Literal["single-line", "multi-line"] = "single-line"
    returning: SelectStmtReturning | Callable[[SqlEmitContext], SelectStmtReturning] | None = None
    entity_name_supplier: Callable[[str, SqlObjectNames], str] | None = None
    attr_name_supplier: Callable[[str, str, SqlObjectNames], str] | None = None


class PreparedSelect(SqlTextSupplier):
    """A select built from one filterable record."""

    def __init__(
        self,
        entity_name: str,
        criteria_preparer: FilterCriteriaPreparer,
        filterable: Mapping[str, Any],
        options: SelectStmtPreparerOptions,
    ) -> None:
        self.entity_name = entity_name
        self.criteria_preparer = criteria_preparer
        self.filterable = filterable
        self.options = options

    @property
    def select_stmt_name(self) -> str | None:
        return self.options.identity

    def sql(self, ctx: SqlEmitContext) -> str:
        options = self.options
        entity = self.entity_name
        ns = ctx.naming(quote_identifiers=True)
        entity_name = (options.entity_name_supplier or (lambda e, n: n.table_name(e)))(entity, ns)
        attr_name = options.attr_name_supplier or (lambda e, a, n: n.table_column_name(e, a))

        fc = self.criteria_preparer(ctx, self.filterable)
        criteria_sql = fc.sql(ctx, lambda attr, names: attr_name(entity, attr, names))

        returning = options.returning
        if callable(returning):
            returning = returning(ctx)
        if returning is None or returning == "primary-keys":
            returning_sql = ", ".join(attr_name(entity, a, ns) for a in fc.candidate_attrs("primary-keys"))
        elif returning == "*":
            returning_sql = "*"
        else:
            returning_sql = ", ".join(
                r.sql(ctx) if isinstance(r, SqlTextSupplier) else attr_name(entity, r, ns)
                for r in returning
            )

        if options.sql_fmt == "single-line":
            where = f" WHERE {criteria_sql}" if criteria_sql else ""
            return f"SELECT {returning_sql} FROM {entity_name}{where}"
        where = f"\n WHERE {criteria_sql}" if criteria_sql else ""
        return f"SELECT {returning_sql}\n  FROM {entity_name}{where}"


def entity_select_stmt_preparer(
    entity_name: str,
    criteria_preparer: FilterCriteriaPreparer,
    default_options: SelectStmtPreparerOptions | None = None,
) -> Callable[..., PreparedSelect]:
    """Return ``(record, options=None) -> PreparedSelect`` for ``entity_name``."""

    def prepare(record: Mapping[str, Any], options: SelectStmtPreparerOptions | None = None) -> PreparedSelect:
        return PreparedSelect(
            entity_name,
            criteria_preparer,
            record,
            options or default_options or SelectStmtPreparerOptions(),
        )

    return prepare


class TableSelectFactory:
    """Selects against one table, filtering on its declared columns.

    Args:
        table_name: The table.
        fields: The table's fields in declaration order.
        default_options: Used when ``select`` is not given options.
    """

    def __init__(
        self,
        table_name: str,
        fields: Mapping[str, SqlField],
        default_options: SelectStmtPreparerOptions | None = None,
    ) -> None:
        self.table_name = table_name
        self.fields = dict(fields)
        self.criteria_preparer = filter_criteria_preparer(self.candidate_attrs)
        self._preparer = entity_select_stmt_preparer(table_name, self.criteria_preparer, default_options)

    @classmethod
    def from_table(cls, table: TableDefinition, default_options: SelectStmtPreparerOptions | None = None) -> TableSelectFactory:
        return cls(table.table_name, table.fields, default_options)

    def candidate_attrs(self, group: CandidateGroup = "all") -> list[str]:
        if group == "primary-keys":
            return [i for i, f in self.fields.items() if f.domain.is_primary_key]
        return [
            i for i, f in self.fields.items() if not f.domain.is_excluded_from_filter_criteria_dql
        ]

    def prepare_filterable(self, record: Mapping[str, Any]) -> dict[str, Any]:
        """Keep only the record's known, filterable attributes."""
        attrs = set(self.candidate_attrs())
        return {k: v for k, v in record.items() if k in attrs}

    def select(self, record: Mapping[str, Any], options: SelectStmtPreparerOptions | None = None) -> PreparedSelect:
        return self._preparer(record, options)


def table_select_factory(
    table: TableDefinition,
    default_options: SelectStmtPreparerOptions | None = None,
) -> TableSelectFactory:
    return TableSelectFactory.from_table(table, default_options)


def selects(objects: Iterable[object]) -> list[Select]:
    return [o for o in objects if isinstance(o, Select)]
