"""Integration tests: generated DDL, DML and DQL executed against SQLite.

The publishing schema is rendered as one script, executed in an in-memory
database, then exercised with inserts (including quoted strings, multi-row
inserts and sub-select values), record-driven selects and a view.
"""
from __future__ import annotations

import sqlite3

import pytest

from sqlaide.ddl import view_definition
from sqlaide.dml import TableRowFactory
from sqlaide.dql import TableSelectFactory, untyped_select
from sqlaide.emit import SQL, SqlEmitContext, typical_sql_emit_context, typical_sql_text_supplier_options
from tests.fixtures import PublishingSchema, publishing_schema

SCHEMA = publishing_schema()
CTX: SqlEmitContext = typical_sql_emit_context("sqlite")

BOOK_TITLE = view_definition("book_title")(
    """
    SELECT b.title, a.name AS author_name
      FROM book b
      JOIN author a ON a.author_id = b.author_id"""
)


def _ddl_script(schema: PublishingSchema) -> str:
    options = typical_sql_text_supplier_options()
    return SQL(options)(
        schema.author, "\n\n",
        schema.book, "\n\n",
        schema.reviewer, "\n\n",
        schema.review, "\n\n",
        BOOK_TITLE,
    ).sql(CTX)


@pytest.fixture()
def db() -> sqlite3.Connection:
    conn = sqlite3.connect(":memory:")
    conn.execute("PRAGMA foreign_keys = ON")
    conn.executescript(_ddl_script(SCHEMA))
    yield conn
    conn.close()


def _insert(db: sqlite3.Connection, table, record) -> None:
    db.execute(TableRowFactory.from_table(table).insert_dml(record).sql(CTX))


@pytest.mark.integration
def test_quoted_values_round_trip(db: sqlite3.Connection) -> None:
    _insert(db, SCHEMA.author, {"name": "Flann O'Brien", "email": "flann@example.com"})
    row = db.execute("SELECT author_id, name, email FROM author").fetchone()
    assert row == (1, "Flann O'Brien", "flann@example.com")


@pytest.mark.integration
def test_multi_row_insert(db: sqlite3.Connection) -> None:
    db.execute(
        TableRowFactory.from_table(SCHEMA.reviewer)
        .insert_dml(
            [
                {"reviewer_id": "r1", "display_name": "Ann"},
                {"reviewer_id": "r2", "display_name": "Bob"},
            ]
        )
        .sql(CTX)
    )
    assert db.execute("SELECT reviewer_id FROM reviewer ORDER BY 1").fetchall() == [("r1",), ("r2",)]


@pytest.mark.integration
def test_unique_column_is_enforced(db: sqlite3.Connection) -> None:
    _insert(db, SCHEMA.author, {"name": "A", "email": "same@example.com"})
    with pytest.raises(sqlite3.IntegrityError):
        _insert(db, SCHEMA.author, {"name": "B", "email": "same@example.com"})


@pytest.mark.integration
def test_foreign_keys_are_enforced(db: sqlite3.Connection) -> None:
    with pytest.raises(sqlite3.IntegrityError):
        _insert(db, SCHEMA.book, {"author_id": 99, "title": "Orphan"})


@pytest.mark.integration
def test_sub_select_value_and_self_reference(db: sqlite3.Connection) -> None:
    _insert(db, SCHEMA.author, {"name": "Frank Herbert", "email": "frank@example.com"})
    author_id = untyped_select()("select author_id from author where email = 'frank@example.com'")
    _insert(db, SCHEMA.book, {"author_id": author_id, "title": "Dune", "pages": 412})
    _insert(db, SCHEMA.book, {"author_id": author_id, "title": "Dune Messiah", "sequel_of_id": 1})
    rows = db.execute("SELECT title, author_id, sequel_of_id FROM book ORDER BY book_id").fetchall()
    assert rows == [("Dune", 1, None), ("Dune Messiah", 1, 1)]


@pytest.mark.integration
def test_record_driven_select(db: sqlite3.Connection) -> None:
    _insert(db, SCHEMA.author, {"name": "A", "email": "a@example.com"})
    _insert(db, SCHEMA.author, {"name": "B", "email": "b@example.com"})
    selects = TableSelectFactory.from_table(SCHEMA.author)
    sql = selects.select({"email": "b@example.com"}).sql(CTX)
    assert db.execute(sql).fetchall() == [(2,)]


@pytest.mark.integration
def test_view(db: sqlite3.Connection) -> None:
    _insert(db, SCHEMA.author, {"name": "Frank Herbert", "email": "frank@example.com"})
    _insert(db, SCHEMA.book, {"author_id": 1, "title": "Dune"})
    assert db.execute("SELECT title, author_name FROM book_title").fetchall() == [("Dune", "Frank Herbert")]
