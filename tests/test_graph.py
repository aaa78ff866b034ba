"""Unit tests for the caller-owned catalog and the entity graph."""

from __future__ import annotations

import logging

import pytest
from pydantic import ValidationError

from sqlaide.catalog import SqlCatalog
from sqlaide.ddl import BelongsTo, SelfRef, primary_key, sql_schema_defn, table_definition, view_definition
from sqlaide.emit import SQL, SqlEmitContext, SqlLintIssueConsequence, SqlText, typical_sql_text_supplier_options
from sqlaide.errors import UnresolvedReferenceError
from sqlaide.graph import EntityGraphPolicy, entities_graph
from tests.fixtures import PublishingSchema


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


def test_catalog_collects_rendered_objects(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    catalog = SqlCatalog()
    options = typical_sql_text_supplier_options(catalog=catalog)
    schema = sql_schema_defn("library", is_idempotent=True)
    view = view_definition("book_title")("select title from book")
    SQL(options)(schema, "\n", publishing.author, "\n", publishing.book, "\n", view).sql(ctx)
    assert catalog.tables == [publishing.author, publishing.book]
    assert catalog.views == [view]
    assert catalog.schemas == [schema]
    assert len(catalog) == 4
    assert catalog.table("book") is publishing.book
    assert catalog.table("nope") is None


def test_catalog_collects_symbols(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    catalog = SqlCatalog()
    options = typical_sql_text_supplier_options(catalog=catalog, symbols_first=True)
    SQL(options)("select * from ", publishing.author).sql(ctx)
    assert publishing.author in catalog


def test_catalog_deduplicates_and_ignores_fragments(publishing: PublishingSchema) -> None:
    catalog = SqlCatalog(publishing.author, publishing.author)
    catalog.register(SqlText("select 1"), publishing.book)
    assert list(catalog) == [publishing.author, publishing.book]


def test_catalogs_are_independent(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    first, second = SqlCatalog(), SqlCatalog()
    SQL(typical_sql_text_supplier_options(catalog=first))(publishing.author).sql(ctx)
    assert len(first) == 1
    assert len(second) == 0


# ---------------------------------------------------------------------------
# Graph
# ---------------------------------------------------------------------------


def test_parent_child_has_exactly_one_edge(ctx: SqlEmitContext) -> None:
    parent = table_definition("parent", {"id": primary_key()})
    child = table_definition("child", {"id": primary_key(), "parent_id": parent.references("id")})
    graph = entities_graph(ctx, [parent, child])
    [edge] = graph.edges
    assert (edge.source.entity.table_name, edge.source.attr.identity) == ("child", "parent_id")
    assert (edge.ref.entity.table_name, edge.ref.attr.identity) == ("parent", "id")
    assert graph.lint_issues == []


def test_publishing_graph(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    graph = entities_graph(ctx, publishing.tables)
    assert [
        (e.source.entity.table_name, e.source.attr.identity, e.ref.entity.table_name) for e in graph.edges
    ] == [
        ("book", "author_id", "author"),
        ("book", "sequel_of_id", "book"),
        ("review", "book_id", "book"),
        ("review", "reviewer_id", "reviewer"),
    ]
    inbound = graph.inbound_rels("book")
    assert [type(r.nature) for r in inbound] == [SelfRef, BelongsTo]
    assert inbound[1].is_belongs_to
    assert graph.inbound_rels("review") == []


def test_graph_ignores_non_tables(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    view = view_definition("v")("select 1")
    graph = entities_graph(ctx, [view, publishing.reviewer, SqlText("x")])
    assert [e.table_name for e in graph.entities] == ["reviewer"]


def test_graph_from_catalog(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    graph = entities_graph(ctx, SqlCatalog(*publishing.tables))
    assert len(graph.edges) == 4


def test_unresolved_reference_is_soft_by_default(
    ctx: SqlEmitContext,
    publishing: PublishingSchema,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.WARNING, logger="sqlaide.graph"):
        graph = entities_graph(ctx, [publishing.book])
    [issue] = graph.lint_issues
    assert issue.lint_issue == (
        "entity 'author' referenced in book.author_id not found in graph, available: [book]"
    )
    assert issue.consequence is SqlLintIssueConsequence.WARNING_DDL
    assert len(graph.edges) == 1
    assert "not found in graph" in caplog.text


def test_unresolved_reference_can_be_fatal(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    policy = EntityGraphPolicy(unresolved_reference="fatal")
    with pytest.raises(UnresolvedReferenceError) as exc_info:
        entities_graph(ctx, [publishing.book, publishing.review], policy)
    err = exc_info.value
    assert err.code == "UNRESOLVED_REFERENCE"
    assert err.details["target_table"] == "author"
    assert err.details["available"] == ["book", "review"]


def test_graph_policy_is_validated() -> None:
    with pytest.raises(ValidationError):
        EntityGraphPolicy(unresolved_reference="lenient")
