"""``CREATE VIEW`` from a free-form select composition.

Example::

    active_people = view_definition("active_person", is_temp=True)(
        '''
        SELECT person_id, name
          FROM person
         WHERE active = 1'''
    )
    active_people.sql(ctx)
    # CREATE TEMP VIEW IF NOT EXISTS "active_person" AS
    #     SELECT person_id, name
    #       FROM person
    #      WHERE active = 1

The ``CREATE`` head depends on the dialect: PostgreSQL renders
``CREATE OR REPLACE VIEW`` and SQL Server ``CREATE OR ALTER VIEW`` when the
view is idempotent; every other dialect renders ``IF NOT EXISTS``.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlaide.dql.select import Select, SelectComposer, SelectTemplateOptions
from sqlaide.emit.naming import QualifiedNamingStrategySupplier
from sqlaide.emit.sql import SqlComposer, SqlTextSupplierOptions, typical_sql_text_supplier_options
from sqlaide.emit.supplier import SqlSymbolSupplier, SqlText, SqlTextLintIssuesPopulator, SqlTextSupplier

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext
    from sqlaide.emit.lint import SqlLintIssues


@dataclass
class ViewDefnOptions:
    """How a view is rendered.

    Attributes:
        is_temp: Render ``CREATE TEMP VIEW``.
        is_idempotent: Render the dialect's idempotent form (default on).
        sql_ns: Namespace qualifying the view name.
        columns: Optional explicit column list ``("a", "b")``.
        before: ``(view_name, options) -> SqlTextSupplier`` rendered ahead
            of the ``CREATE`` statement (e.g. :func:`drop_view`).
        embedded_options: Options of the composition joining ``before`` and
            the ``CREATE`` statement; typical options when omitted.
    """

    is_temp: bool = False
    is_idempotent: bool = True
    sql_ns: QualifiedNamingStrategySupplier | None = None
    columns: Sequence[str] | None = None
    before: Callable[[str, ViewDefnOptions], SqlTextSupplier] | None = None
    embedded_options: SqlTextSupplierOptions | None = None


def drop_view(
    view_name: str,
    if_exists: bool = True,
    sql_ns: QualifiedNamingStrategySupplier | None = None,
) -> SqlText:
    def render(ctx: SqlEmitContext) -> str:
        name = ctx.naming(quote_identifiers=True, qnss=sql_ns).view_name(view_name)
        return f"DROP VIEW {'IF EXISTS ' if if_exists else ''}{name}"

    return SqlText(render)


class ViewDefinition(SqlTextSupplier, SqlSymbolSupplier, SqlTextLintIssuesPopulator):
    """A view over a :class:`~sqlaide.dql.select.Select`.

    Attributes:
        view_name: Logical view name.
        select_stmt: The view body.
        options: Rendering options.
    """

    def __init__(self, view_name: str, select_stmt: Select, options: ViewDefnOptions) -> None:
        self.view_name = view_name
        self.select_stmt = select_stmt
        self.options = options

    @property
    def is_valid(self) -> bool:
        return self.select_stmt.is_valid

    @property
    def is_temp(self) -> bool:
        return self.options.is_temp

    @property
    def is_idempotent(self) -> bool:
        return self.options.is_idempotent

    def sql_symbol(self, ctx: SqlEmitContext) -> str:
        return ctx.naming(quote_identifiers=True, qnss=self.options.sql_ns).view_name(self.view_name)

    def sql(self, ctx: SqlEmitContext) -> str:
        options = self.options
        ns = ctx.naming(quote_identifiers=True, qnss=options.sql_ns)
        body = ctx.sql_text_emit_options.indentation(
            "create view select statement", self.select_stmt.sql(ctx)
        )
        columns = ""
        if options.columns:
            columns = "(" + ", ".join(ns.view_column_name(self.view_name, c) for c in options.columns) + ")"
        head = ctx.sql_dialect.create_view_head(options.is_temp, options.is_idempotent)
        create = f"{head}{ns.view_name(self.view_name)}{columns} AS\n{body}"
        if options.before is None:
            return create
        embedded = options.embedded_options or typical_sql_text_supplier_options()
        return SqlComposer(embedded)([options.before(self.view_name, options), create]).sql(ctx)

    def populate_sql_text_lint_issues(self, lint_issues: SqlLintIssues, ctx: SqlEmitContext) -> None:
        self.select_stmt.populate_sql_text_lint_issues(lint_issues, ctx)

    def drop(self, if_exists: bool = True) -> SqlText:
        return drop_view(self.view_name, if_exists, self.options.sql_ns)

    def __repr__(self) -> str:
        return f"ViewDefinition({self.view_name!r})"


class ViewComposer:
    """Composes :class:`ViewDefinition` objects; see :func:`view_definition`."""

    def __init__(self, view_name: str, options: ViewDefnOptions) -> None:
        self.view_name = view_name
        self.options = options
        self._select = SelectComposer(SelectTemplateOptions())

    def __call__(self, *parts: Any) -> ViewDefinition:
        return ViewDefinition(self.view_name, self._select(*parts), self.options)

    def template(self, literals: Sequence[str], *expressions: Any) -> ViewDefinition:
        return ViewDefinition(self.view_name, self._select.template(literals, *expressions), self.options)


def view_definition(
    view_name: str,
    options: ViewDefnOptions | None = None,
    **option_fields: Any,
) -> ViewComposer:
    """Return a composer whose result is the view named ``view_name``.

    Options may be given as a :class:`ViewDefnOptions` or as keyword
    arguments.
    """
    return ViewComposer(view_name, options or ViewDefnOptions(**option_fields))


def is_view_definition(o: object, view_name: str | None = None) -> bool:
    if not isinstance(o, ViewDefinition):
        return False
    return view_name is None or o.view_name == view_name


def view_definitions(objects: Iterable[object]) -> list[ViewDefinition]:
    return [o for o in objects if isinstance(o, ViewDefinition)]
