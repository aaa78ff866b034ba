"""Unit tests for the PlantUML IE diagram renderer."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from sqlaide.diagram import PlantUmlIeOptions, plantuml_ie_notation
from sqlaide.emit import SqlEmitContext
from sqlaide.errors import UnresolvedReferenceError
from sqlaide.graph import EntityGraphPolicy
from tests.fixtures import PublishingSchema

PUBLISHING_PUML = """\
@startuml IE
  hide circle
  skinparam linetype ortho
  skinparam roundcorner 20
  skinparam class {
    BackgroundColor White
    ArrowColor Silver
    BorderColor Silver
    FontColor Black
    FontSize 12
  }

  entity "author" as author {
      **author_id**: INTEGER
    --
    * name: TEXT
    * email: TEXT
    --
    books: Book[]
  }

  entity "book" as book {
      **book_id**: INTEGER
    --
    * author_id: INTEGER
    * title: TEXT
      pages: INTEGER
      sequel_of_id: INTEGER
    --
    reviews: Review[]
  }

  entity "reviewer" as reviewer {
    * **reviewer_id**: TEXT
    --
    * display_name: TEXT
  }

  entity "review" as review {
      **review_id**: INTEGER
    --
    * book_id: INTEGER
    * reviewer_id: TEXT
    * rating: INTEGER
  }

  author |o..o{ book
  book |o..o{ book
  book |o..o{ review
  reviewer |o..o{ review
@enduml"""


def test_publishing_diagram(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    diagram = plantuml_ie_notation(ctx, publishing.tables)
    assert diagram.content == PUBLISHING_PUML
    assert len(diagram.graph.edges) == 4


def test_diagram_name(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    diagram = plantuml_ie_notation(ctx, publishing.tables, diagram_name="publishing")
    assert diagram.content.startswith("@startuml publishing\n")


def test_children_and_relationships_can_be_hidden(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    options = PlantUmlIeOptions(
        include_children=lambda rel: False,
        relationship_indicator=lambda edge: None,
    )
    content = plantuml_ie_notation(ctx, publishing.tables, options).content
    assert "books: Book[]" not in content
    assert "|o..o{" not in content
    assert content.endswith("  }\n@enduml")


def test_entities_can_be_filtered(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    content = plantuml_ie_notation(
        ctx,
        publishing.tables,
        include_entity=lambda table: table.table_name != "reviewer",
    ).content
    assert 'entity "reviewer"' not in content
    # relationships are drawn from the full graph
    assert "reviewer |o..o{ review" in content


def test_attributes_can_be_elaborated(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    def fk_marker(ea, entity_by_name, ns) -> str:
        return " <<FK>>" if ea.attr.foreign_key is not None else ""

    content = plantuml_ie_notation(ctx, [publishing.author, publishing.book], elaborate_entity_attr=fk_marker).content
    assert "    * author_id: INTEGER <<FK>>" in content
    assert "    * title: TEXT\n" in content


def test_unresolved_reference_in_diagram(ctx: SqlEmitContext, publishing: PublishingSchema) -> None:
    diagram = plantuml_ie_notation(ctx, [publishing.review])
    assert len(diagram.graph.lint_issues) == 2
    with pytest.raises(UnresolvedReferenceError):
        plantuml_ie_notation(
            ctx,
            [publishing.review],
            graph_policy=EntityGraphPolicy(unresolved_reference="fatal"),
        )


def test_options_reject_unknown_fields() -> None:
    with pytest.raises(ValidationError):
        PlantUmlIeOptions(show_everything=True)
