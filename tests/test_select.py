"""Unit tests for free-form selects and record-driven select preparers."""

from __future__ import annotations

from sqlaide.dql import (
    SelectStmtPreparerOptions,
    TableSelectFactory,
    entity_select_stmt_preparer,
    filter_criteria_preparer,
    or_,
    table_select_factory,
    untyped_select,
)
from sqlaide.dql.select import first_word
from sqlaide.emit import SqlEmitContext, SqlLintIssues, SqlText
from tests.fixtures import SyntheticSchema

TABLE = '"synthetic_table_with_auto_inc_pk"'


# ---------------------------------------------------------------------------
# Record-driven selects
# ---------------------------------------------------------------------------


def test_single_line_select(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    selects = TableSelectFactory.from_table(synthetic.auto_inc_pk)
    stmt = selects.select({"text": "text-value", "int": 423})
    assert stmt.sql(ctx) == (
        f'SELECT "auto_inc_primary_key" FROM {TABLE} WHERE "text" = \'text-value\' AND "int" = 423'
    )


def test_multi_line_select(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    selects = table_select_factory(synthetic.auto_inc_pk)
    stmt = selects.select(
        {"text": "text-value", "int": 423},
        SelectStmtPreparerOptions(sql_fmt="multi-line"),
    )
    assert stmt.sql(ctx) == (
        'SELECT "auto_inc_primary_key"\n'
        f"  FROM {TABLE}\n"
        " WHERE \"text\" = 'text-value' AND \"int\" = 423"
    )


def test_criteria_follow_declaration_order(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    stmt = table_select_factory(synthetic.auto_inc_pk).select({"int": 1, "text": "a"})
    assert stmt.sql(ctx).endswith("WHERE \"text\" = 'a' AND \"int\" = 1")


def test_none_renders_is_null(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    stmt = table_select_factory(synthetic.auto_inc_pk).select({"text_nullable": None})
    assert stmt.sql(ctx).endswith('WHERE "text_nullable" IS NULL')


def test_or_connective(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    stmt = table_select_factory(synthetic.auto_inc_pk).select({"text": "a", "int": or_(1)})
    assert stmt.sql(ctx).endswith("WHERE \"text\" = 'a' OR \"int\" = 1")


def test_sql_value_is_parenthesized(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    stmt = table_select_factory(synthetic.auto_inc_pk).select({"int": SqlText("select max(x) from y")})
    assert stmt.sql(ctx).endswith('WHERE "int" = (select max(x) from y)')


def test_without_criteria(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    stmt = table_select_factory(synthetic.auto_inc_pk).select({})
    assert stmt.sql(ctx) == f'SELECT "auto_inc_primary_key" FROM {TABLE}'


def test_returning_variants(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    selects = table_select_factory(synthetic.auto_inc_pk)
    star = selects.select({}, SelectStmtPreparerOptions(returning="*"))
    assert star.sql(ctx) == f"SELECT * FROM {TABLE}"
    listed = selects.select({}, SelectStmtPreparerOptions(returning=["text", SqlText("count(*)")]))
    assert listed.sql(ctx) == f'SELECT "text", count(*) FROM {TABLE}'


def test_name_suppliers(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    options = SelectStmtPreparerOptions(
        entity_name_supplier=lambda entity, ns: f"main.{ns.table_name(entity)}",
        attr_name_supplier=lambda entity, attr, ns: ns.table_column_name(entity, attr, "."),
    )
    stmt = table_select_factory(synthetic.auto_inc_pk).select({"int": 1}, options)
    assert stmt.sql(ctx) == (
        f"SELECT {TABLE}.\"auto_inc_primary_key\" FROM main.{TABLE} WHERE {TABLE}.\"int\" = 1"
    )


def test_prepare_filterable_drops_unknown_attrs(synthetic: SyntheticSchema) -> None:
    selects = table_select_factory(synthetic.auto_inc_pk)
    assert selects.prepare_filterable({"text": "a", "nope": 1}) == {"text": "a"}


def test_entity_preparer_without_table(ctx: SqlEmitContext) -> None:
    def candidates(group: str) -> list[str]:
        return ["id"] if group == "primary-keys" else ["id", "name"]

    prepare = entity_select_stmt_preparer("person", filter_criteria_preparer(candidates))
    assert prepare({"name": "Ann"}).sql(ctx) == 'SELECT "id" FROM "person" WHERE "name" = \'Ann\''


# ---------------------------------------------------------------------------
# Free-form selects
# ---------------------------------------------------------------------------


def test_first_word() -> None:
    assert first_word("\n  select a") == "SELECT"
    assert first_word("   ") is None


def test_untyped_select(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    table = synthetic.auto_inc_pk
    select = untyped_select(symbols_first=True)("select ", table.symbols["text"], " from ", table)
    assert select.is_valid
    assert select.sql(ctx) == f'select "text" from {TABLE}'


def test_non_select_is_invalid(ctx: SqlEmitContext) -> None:
    select = untyped_select()("delete from x")
    assert not select.is_valid
    assert select.sql(ctx) == "-- SQL statement does not start with SELECT"
    registry = SqlLintIssues()
    select.populate_sql_text_lint_issues(registry, ctx)
    [issue] = registry.lint_issues
    assert issue.location == "delete from x"


def test_guard_can_be_disabled(ctx: SqlEmitContext) -> None:
    select = untyped_select(first_token_guard=None)("with t as (select 1) select * from t")
    assert select.is_valid
    assert select.sql(ctx) == "with t as (select 1) select * from t"
