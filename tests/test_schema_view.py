"""Unit tests for schema and view definitions."""

from __future__ import annotations

import pytest

from sqlaide.ddl import (
    ViewDefnOptions,
    drop_view,
    is_schema_definition,
    is_view_definition,
    sql_schema_defn,
    table_definition,
    view_definition,
)
from sqlaide.domain import text
from sqlaide.emit import (
    SQL,
    SqlEmitContext,
    SqlLintIssues,
    SqlTextLintIssuesPopulator,
    typical_sql_emit_context,
    typical_sql_text_supplier_options,
)


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------


def test_idempotent_schema(ctx: SqlEmitContext) -> None:
    schema = sql_schema_defn("synthetic_schema1", is_idempotent=True)
    assert schema.sql(ctx) == 'CREATE SCHEMA IF NOT EXISTS "synthetic_schema1"'


def test_schema(ctx: SqlEmitContext) -> None:
    schema = sql_schema_defn("synthetic_schema2")
    assert schema.sql(ctx) == 'CREATE SCHEMA "synthetic_schema2"'
    assert is_schema_definition(schema)


def test_schema_contributes_no_lint_issues(ctx: SqlEmitContext) -> None:
    schema = sql_schema_defn("s")
    assert not isinstance(schema, SqlTextLintIssuesPopulator)
    options = typical_sql_text_supplier_options()
    SQL(options)(schema).sql(ctx)
    assert len(options.sql_text_lint_state.lint_sql_text) == 0


def test_schema_qualifies_names(ctx: SqlEmitContext) -> None:
    schema = sql_schema_defn("s")
    assert schema.qualified_names(ctx).table_name("t") == "s.t"
    assert ctx.naming(quote_identifiers=True, qnss=schema).view_name("v") == '"s"."v"'


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


def test_view(ctx: SqlEmitContext) -> None:
    view = view_definition("v")("select a from b")
    assert view.sql(ctx) == 'CREATE VIEW IF NOT EXISTS "v" AS\n    select a from b'
    assert view.is_valid
    assert is_view_definition(view, "v")


def test_multi_line_view_body_is_indented(ctx: SqlEmitContext) -> None:
    view = view_definition("v")(
        """
        select a
          from b"""
    )
    assert view.sql(ctx) == 'CREATE VIEW IF NOT EXISTS "v" AS\n    select a\n      from b'


def test_temp_view_with_columns(ctx: SqlEmitContext) -> None:
    view = view_definition("v", is_temp=True, is_idempotent=False, columns=["x", "y"])("select a, b from t")
    assert view.sql(ctx) == 'CREATE TEMP VIEW "v"("x", "y") AS\n    select a, b from t'


@pytest.mark.parametrize(
    ("dialect", "head"),
    [
        ("ansi", 'CREATE VIEW IF NOT EXISTS "v"'),
        ("sqlite", 'CREATE VIEW IF NOT EXISTS "v"'),
        ("postgres", 'CREATE OR REPLACE VIEW "v"'),
        ("mssql", 'CREATE OR ALTER VIEW "v"'),
    ],
)
def test_view_head_per_dialect(dialect: str, head: str) -> None:
    view = view_definition("v")("select 1")
    assert view.sql(typical_sql_emit_context(dialect)) == f"{head} AS\n    select 1"


def test_view_with_drop_before(ctx: SqlEmitContext) -> None:
    view = view_definition("v", before=lambda name, options: drop_view(name))("select 1")
    assert view.sql(ctx) == 'DROP VIEW IF EXISTS "v";\nCREATE VIEW IF NOT EXISTS "v" AS\n    select 1'


def test_view_drop(ctx: SqlEmitContext) -> None:
    view = view_definition("v", ViewDefnOptions(sql_ns=sql_schema_defn("s")))("select 1")
    assert view.drop().sql(ctx) == 'DROP VIEW IF EXISTS "s"."v"'
    assert view.drop(if_exists=False).sql(ctx) == 'DROP VIEW "s"."v"'


def test_view_with_column_symbols(ctx: SqlEmitContext) -> None:
    person = table_definition("person", {"name": text()})
    view = view_definition("person_name")("select ", person.symbols["name"], " from person")
    assert view.sql(ctx) == 'CREATE VIEW IF NOT EXISTS "person_name" AS\n    select "name" from person'


def test_invalid_view_body(ctx: SqlEmitContext) -> None:
    view = view_definition("v")("delete from x")
    assert not view.is_valid
    assert view.sql(ctx) == (
        'CREATE VIEW IF NOT EXISTS "v" AS\n    -- SQL statement does not start with SELECT'
    )
    registry = SqlLintIssues()
    view.populate_sql_text_lint_issues(registry, ctx)
    assert len(registry) == 1
