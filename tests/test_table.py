"""Unit tests for table definitions: columns, keys, constraints and indexes."""

from __future__ import annotations

from typing import Optional

import pytest

from sqlaide.ddl import (
    BelongsTo,
    SelfRef,
    TableDefnOptions,
    is_table_definition,
    primary_key,
    self_ref,
    sql_schema_defn,
    table_definition,
    typical_table_lint_rules,
)
from sqlaide.ddl.foreign_key import camel_case, forward_ref, pascal_case
from sqlaide.domain import integer, text
from sqlaide.emit import (
    SqlEmitContext,
    SqlLintIssue,
    SqlLintIssueConsequence,
    SqlLintIssues,
    SqlNamespace,
    SqlText,
    typical_sql_emit_context,
)
from sqlaide.errors import TableDefinitionError
from tests.fixtures import PublishingSchema, SyntheticSchema


# ---------------------------------------------------------------------------
# Column definitions
# ---------------------------------------------------------------------------


def test_simple_table(ctx: SqlEmitContext) -> None:
    t = table_definition("t", {"id": primary_key(text()), "name": text()})
    assert t.sql(ctx) == (
        'CREATE TABLE "t" (\n'
        '    "id" TEXT PRIMARY KEY NOT NULL,\n'
        '    "name" TEXT NOT NULL\n'
        ")"
    )


def test_nullable_columns_omit_not_null(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    assert synthetic.without_pk.sql(ctx) == (
        'CREATE TABLE "synthetic_table_without_pk" (\n'
        '    "text" TEXT NOT NULL,\n'
        '    "text_nullable" TEXT,\n'
        '    "int" INTEGER NOT NULL,\n'
        '    "int_nullable" INTEGER\n'
        ")"
    )


def test_auto_inc_primary_key(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    sql = synthetic.auto_inc_pk.sql(ctx)
    assert '    "auto_inc_primary_key" INTEGER PRIMARY KEY AUTOINCREMENT,\n' in sql
    assert list(synthetic.auto_inc_pk.primary_key) == ["auto_inc_primary_key"]


def test_on_demand_primary_key_and_defaults(ctx: SqlEmitContext, synthetic: SyntheticSchema) -> None:
    assert synthetic.on_demand_pk.sql(ctx) == (
        'CREATE TABLE "synthetic_table_with_uaod_pk" (\n'
        "    \"ua_on_demand_primary_key\" TEXT PRIMARY KEY NOT NULL DEFAULT 'ON_DEMAND_PK',\n"
        '    "text" TEXT NOT NULL,\n'
        '    "text_nullable" TEXT,\n'
        '    "int" INTEGER NOT NULL,\n'
        '    "int_nullable" INTEGER,\n'
        '    "created_at" DATETIME DEFAULT CURRENT_TIMESTAMP\n'
        ")"
    )


def test_unique_column(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    assert publishing.author.sql(ctx) == (
        'CREATE TABLE "author" (\n'
        '    "author_id" INTEGER PRIMARY KEY AUTOINCREMENT,\n'
        '    "name" TEXT NOT NULL,\n'
        '    "email" TEXT /* UNIQUE COLUMN */ NOT NULL,\n'
        '    UNIQUE("email")\n'
        ")"
    )
    assert list(publishing.author.unique) == ["email"]


def test_full_column_definition_override(ctx: SqlEmitContext) -> None:
    raw = text().with_domain(full_column_defn=SqlText('"payload" BLOB'))
    t = table_definition("t", {"payload": raw})
    assert t.sql(ctx) == 'CREATE TABLE "t" (\n    "payload" BLOB\n)'


# ---------------------------------------------------------------------------
# Table options
# ---------------------------------------------------------------------------


def test_idempotent_temp_table(ctx: SqlEmitContext) -> None:
    t = table_definition("t", {"a": text()}, is_idempotent=True, is_temp=True)
    assert t.sql(ctx).startswith('CREATE TEMP TABLE IF NOT EXISTS "t" (')


def test_mssql_has_no_if_not_exists() -> None:
    t = table_definition("t", {"a": text()}, is_idempotent=True)
    assert t.sql(typical_sql_emit_context("mssql")).startswith('CREATE TABLE "t" (')


def test_schema_qualified_table(ctx: SqlEmitContext) -> None:
    schema = sql_schema_defn("sales")
    t = table_definition("t", {"a": text()}, sql_ns=schema)
    assert t.sql(ctx).startswith('CREATE TABLE "sales"."t" (')
    assert t.sql_symbol(ctx) == '"sales"."t"'


def test_options_object(ctx: SqlEmitContext) -> None:
    options = TableDefnOptions(sql_ns=SqlNamespace("s"), description="doc")
    t = table_definition("t", {"a": text()}, options)
    assert t.description == "doc"
    assert t.sql_symbol(ctx) == '"s"."t"'


def test_constraints_follow_unique_columns(ctx: SqlEmitContext) -> None:
    t = table_definition(
        "t",
        {"a": text(), "b": integer(), "c": text()},
        constraints=lambda c: c.unique("a", "b"),
        after_column_defns=[SqlText("CHECK (b > 0)")],
    )
    assert t.sql(ctx).endswith('    UNIQUE("a", "b"),\n    CHECK (b > 0)\n)')
    assert t.constraints[0].constraint_identity == "unique0"


def test_constraint_on_unknown_column_raises() -> None:
    with pytest.raises(TableDefinitionError) as exc_info:
        table_definition("t", {"a": text()}, constraints=lambda c: c.unique("a", "zz"))
    assert exc_info.value.column_names == ["zz"]


def test_indexes(ctx: SqlEmitContext) -> None:
    t = table_definition(
        "t",
        {"a": text(), "b": text()},
        indexes=lambda i: (
            i.index("a", "b"),
            i.index("a", index_identity="custom_index_name", is_unique=True),
        ),
    )
    assert [idx.sql(ctx) for idx in t.indexes] == [
        'CREATE INDEX "idx_t__a__b" ON "t"("a", "b")',
        'CREATE UNIQUE INDEX custom_index_name ON "t"("a")',
    ]


def test_index_on_unknown_column_raises() -> None:
    with pytest.raises(TableDefinitionError):
        table_definition("t", {"a": text()}, indexes=lambda i: i.index("b"))


def test_comments(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    assert [c.sql(ctx) for c in publishing.author.sql_objects_comments()] == [
        "COMMENT ON table \"author\" IS 'People who write books'",
        "COMMENT ON column \"author\".\"name\" IS 'Name as printed on the cover'",
    ]


def test_is_table_definition(publishing: PublishingSchema) -> None:
    assert is_table_definition(publishing.book)
    assert is_table_definition(publishing.book, "book")
    assert not is_table_definition(publishing.book, "author")
    assert not is_table_definition("book")


# ---------------------------------------------------------------------------
# Foreign keys
# ---------------------------------------------------------------------------


def test_foreign_keys_follow_column_definitions(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    assert publishing.book.sql(ctx) == (
        'CREATE TABLE "book" (\n'
        '    "book_id" INTEGER PRIMARY KEY AUTOINCREMENT,\n'
        '    "author_id" INTEGER NOT NULL,\n'
        '    "title" TEXT NOT NULL,\n'
        '    "pages" INTEGER,\n'
        '    "sequel_of_id" INTEGER,\n'
        '    FOREIGN KEY("author_id") REFERENCES "author"("author_id"),\n'
        '    FOREIGN KEY("sequel_of_id") REFERENCES "book"("book_id")\n'
        ")"
    )


def test_reference_copies_target_type(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    sql = publishing.review.sql(ctx)
    assert '    "reviewer_id" TEXT NOT NULL,\n' in sql
    assert 'FOREIGN KEY("reviewer_id") REFERENCES "reviewer"("reviewer_id")' in sql
    # references never inherit the target's key
    assert not publishing.review.columns["reviewer_id"].is_primary_key


def test_self_reference_resolves_against_owning_table(publishing: PublishingSchema) -> None:
    dest = publishing.book.foreign_keys["sequel_of_id"]
    assert dest.is_self_ref
    assert (dest.source.table_name, dest.source.column_name) == ("book", "book_id")
    assert isinstance(dest.nature, SelfRef)
    assert publishing.book.fields["sequel_of_id"].annotation == Optional[int]
    assert dest in publishing.book.foreign_key_sources["book_id"].incoming_refs


def test_belongs_to_registers_on_target(publishing: PublishingSchema) -> None:
    dest = publishing.book.foreign_keys["author_id"]
    assert isinstance(dest.nature, BelongsTo)
    assert dest in publishing.author.foreign_key_sources["author_id"].incoming_refs


def test_forward_reference_to_undeclared_table(ctx: SqlEmitContext) -> None:
    t = table_definition("episode", {"series_id": forward_ref("series", "series_id", integer())})
    assert t.sql(ctx).endswith('    FOREIGN KEY("series_id") REFERENCES "series"("series_id")\n)')


def test_reference_to_unknown_column_raises(publishing: PublishingSchema) -> None:
    with pytest.raises(TableDefinitionError, match="no column 'nope'"):
        publishing.author.references("nope")


def test_self_reference_to_unknown_column_raises() -> None:
    with pytest.raises(TableDefinitionError, match="unknown column 'nope'"):
        table_definition("t", {"id": primary_key(), "parent": self_ref("nope")})


def test_validation_model_from_table(publishing: PublishingSchema) -> None:
    book = publishing.book.validation_model().model_validate({"author_id": 1, "title": "Dune"})
    assert book.book_id is None
    assert book.sequel_of_id is None
    assert book.author_id == 1


def test_case_helpers() -> None:
    assert camel_case("book_reviews") == "bookReviews"
    assert pascal_case("book_review") == "BookReview"
    assert BelongsTo().collection_name("book_review") == ("bookReviews", "BookReview")
    assert BelongsTo("entry", "entries").collection_name("x") == ("entries", "Entry")


# ---------------------------------------------------------------------------
# Lint rules
# ---------------------------------------------------------------------------


def test_typical_table_lint_rules() -> None:
    books = table_definition("books", {"title": text()})
    registry = SqlLintIssues()
    typical_table_lint_rules(books).lint(registry)
    assert [li.consequence for li in registry] == [
        SqlLintIssueConsequence.CONVENTION_DDL,
        SqlLintIssueConsequence.WARNING_DDL,
    ]


def test_lint_rules_can_be_ignored() -> None:
    books = table_definition("books", {"title": text()})
    registry = SqlLintIssues()
    typical_table_lint_rules(
        books,
        ignore_plural_table_name=True,
        ignore_table_lacks_primary_key=lambda name: name == "books",
    ).lint(registry)
    assert len(registry) == 0


def test_column_lint_issues_are_located_at_table() -> None:
    odd = text()
    odd.domain.register_lint_issue(SqlLintIssue(lint_issue="odd column"))
    t = table_definition("t", {"id": primary_key(), "odd": odd})
    registry = SqlLintIssues()
    typical_table_lint_rules(t).lint(registry)
    [issue] = registry.lint_issues
    assert issue.location == "table t definition"
