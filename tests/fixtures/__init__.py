"""Test fixtures: synthetic tables and a small publishing schema."""

from __future__ import annotations

from dataclasses import dataclass

from sqlaide.ddl import (
    TableDefinition,
    auto_inc_primary_key,
    primary_key,
    self_ref,
    table_definition,
    ua_defaultable_text_primary_key,
    unique,
)
from sqlaide.domain import SqlField, created_at, integer, text


def common_columns() -> dict[str, SqlField]:
    """The non-key columns every synthetic table shares."""
    return {
        "text": text(),
        "text_nullable": text().optional(),
        "int": integer(),
        "int_nullable": integer().optional(),
    }


@dataclass(frozen=True)
class SyntheticSchema:
    without_pk: TableDefinition
    auto_inc_pk: TableDefinition
    text_pk: TableDefinition
    on_demand_pk: TableDefinition


def synthetic_schema() -> SyntheticSchema:
    """Four tables that differ only in their primary key."""
    return SyntheticSchema(
        without_pk=table_definition("synthetic_table_without_pk", common_columns()),
        auto_inc_pk=table_definition(
            "synthetic_table_with_auto_inc_pk",
            {"auto_inc_primary_key": auto_inc_primary_key(), **common_columns()},
        ),
        text_pk=table_definition(
            "synthetic_table_with_text_pk",
            {"text_primary_key": primary_key(), **common_columns()},
        ),
        on_demand_pk=table_definition(
            "synthetic_table_with_uaod_pk",
            {
                "ua_on_demand_primary_key": ua_defaultable_text_primary_key(
                    text().default_to("ON_DEMAND_PK")
                ),
                **common_columns(),
                "created_at": created_at(),
            },
        ),
    )


@dataclass(frozen=True)
class PublishingSchema:
    author: TableDefinition
    book: TableDefinition
    reviewer: TableDefinition
    review: TableDefinition

    @property
    def tables(self) -> list[TableDefinition]:
        return [self.author, self.book, self.reviewer, self.review]


def publishing_schema() -> PublishingSchema:
    """Authors write books; reviewers review books; books may have sequels.

    Four foreign keys: book.author_id, book.sequel_of_id (self reference),
    review.book_id and review.reviewer_id.
    """
    author = table_definition(
        "author",
        {
            "author_id": auto_inc_primary_key(),
            "name": text().describe("Name as printed on the cover"),
            "email": unique(text()),
        },
        description="People who write books",
    )
    book = table_definition(
        "book",
        {
            "book_id": auto_inc_primary_key(),
            "author_id": author.belongs_to("author_id"),
            "title": text(),
            "pages": integer().optional(),
            "sequel_of_id": self_ref("book_id").optional(),
        },
    )
    reviewer = table_definition(
        "reviewer",
        {"reviewer_id": primary_key(), "display_name": text()},
    )
    review = table_definition(
        "review",
        {
            "review_id": auto_inc_primary_key(),
            "book_id": book.belongs_to("book_id"),
            "reviewer_id": reviewer.references("reviewer_id"),
            "rating": integer(),
        },
    )
    return PublishingSchema(author, book, reviewer, review)
