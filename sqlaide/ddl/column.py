"""Column modifiers and the column definition renderer.

Modifiers re-wrap a field with extra domain facts and never mutate it::

    "id": primary_key(),                         # TEXT PRIMARY KEY NOT NULL
    "row_id": auto_inc_primary_key(),            # INTEGER PRIMARY KEY AUTOINCREMENT
    "code": unique(text()),                      # TEXT /* UNIQUE COLUMN */ NOT NULL
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from sqlaide.domain.domain import SqlDomain, SqlField, integer, text
from sqlaide.emit.supplier import SqlText

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext


def unique(f: SqlField) -> SqlField:
    """Mark ``f`` unique; the table adds a ``UNIQUE(col)`` constraint."""
    return f.with_domain(
        is_unique=True,
        decorators=(*f.domain.decorators, SqlText("/* UNIQUE COLUMN */")),
    )


def primary_key(f: SqlField | None = None) -> SqlField:
    """A primary key column; defaults to ``TEXT``."""
    f = f if f is not None else text()
    return f.with_domain(
        is_primary_key=True,
        decorators=(SqlText("PRIMARY KEY"), *f.domain.decorators),
    )


def auto_inc_primary_key() -> SqlField:
    """An ``INTEGER`` key generated by the database, never inserted."""
    f = integer().optional()
    return f.with_domain(
        is_primary_key=True,
        is_auto_increment=True,
        is_excluded_from_insert_dml=True,
        decorators=(SqlText("PRIMARY KEY AUTOINCREMENT"),),
    )


def ua_defaultable_text_primary_key(f: SqlField | None = None) -> SqlField:
    """A text primary key the client fills in from the field's default.

    The key may be omitted from insertable records; revalidation supplies
    the default before the ``INSERT`` is rendered.
    """
    pk = primary_key(f)
    return pk.with_domain(is_optional_in_insertable_record=True)


def is_primary_key_column(domain: SqlDomain) -> bool:
    return domain.is_primary_key


def table_column_defn_sql(ctx: SqlEmitContext, table_name: str, domain: SqlDomain) -> str:
    """Render one column definition line of ``CREATE TABLE``."""
    steo = ctx.sql_text_emit_options
    full = domain.sql_partial("create table, full column defn")
    if full:
        return f"{steo.indentation('define table column')}{full[0].sql(ctx)}"
    ns = ctx.naming(quote_identifiers=True)
    parts = [
        ns.table_column_name(table_name, domain.identity),
        domain.sql_data_type("create table column").sql(ctx),
    ]
    for decorator in domain.sql_partial("create table, column defn decorators") or []:
        parts.append(decorator.sql(ctx))
    if not domain.is_nullable():
        parts.append("NOT NULL")
    if domain.sql_default_value is not None:
        parts.append(f"DEFAULT {domain.sql_default_value.sql(ctx)}")
    return f"{steo.indentation('define table column')}{' '.join(parts)}"
