"""Utilities for building table definitions from external sources.

SQLAlchemy converter
--------------------
:func:`tables_from_sqlalchemy` turns SQLAlchemy ``MetaData`` (declared, or
reflected from an engine the caller supplies) into
:class:`~sqlaide.ddl.table.TableDefinition` objects.

Install the optional dependency before using this module::

    pip install "sqlaide[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from sqlaide.converters import tables_from_sqlalchemy

    engine = create_engine("sqlite:///mydb.db")
    tables = tables_from_sqlalchemy(engine)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Union

from sqlaide.ddl.column import primary_key
from sqlaide.ddl.foreign_key import forward_ref, self_ref
from sqlaide.ddl.table import TableDefinition, TableDefnOptions
from sqlaide.domain.domain import SqlDomain, SqlField
from sqlaide.emit.naming import SqlNamespace

if TYPE_CHECKING:
    from sqlalchemy import Column, Engine, MetaData, Table

logger = logging.getLogger(__name__)


def tables_from_sqlalchemy(
    source: Union[Engine, MetaData],
    *,
    include_tables: list[str] | None = None,
    schema: str | None = None,
) -> list[TableDefinition]:
    """Build table definitions from SQLAlchemy metadata.

    Tables are converted in dependency order so references to earlier tables
    resolve against their definitions; a column referencing its own table
    becomes a self reference, and any other reference is kept as a forward
    reference by name.

    Args:
        source: A ``MetaData`` object, or an ``Engine`` to reflect.
        include_tables: Optional allowlist of table names.
        schema: Database schema name; used for reflection and to qualify
            the resulting table names.

    Returns:
        Table definitions in dependency order.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """
    try:
        from sqlalchemy import MetaData as _MetaData
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for tables_from_sqlalchemy(). "
            'Install it with: pip install "sqlaide[sqlalchemy]"'
        ) from exc

    if isinstance(source, _MetaData):
        metadata = source
    else:
        metadata = _MetaData()
        with source.connect() as conn:
            metadata.reflect(bind=conn, only=include_tables, schema=schema)

    sql_ns = SqlNamespace(schema) if schema else None
    converted: dict[str, TableDefinition] = {}
    for table in metadata.sorted_tables:
        if include_tables is not None and table.name not in include_tables:
            continue
        converted[table.name] = _table_definition(table, converted, sql_ns)
    return list(converted.values())


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _python_type(column: Column) -> Any:
    try:
        return column.type.python_type
    except NotImplementedError:
        return Any


def _column_field(column: Column) -> SqlField:
    return SqlField(annotation=_python_type(column), domain=SqlDomain(data_type=str(column.type)))


def _table_definition(
    table: Table,
    converted: dict[str, TableDefinition],
    sql_ns: SqlNamespace | None,
) -> TableDefinition:
    shape: dict[str, SqlField] = {}
    for column in table.columns:
        f = _column_field(column)
        fk = next(iter(column.foreign_keys), None)
        if fk is not None:
            to_table = fk.column.table.name
            to_column = fk.column.name
            if to_table == table.name:
                f = self_ref(to_column)
            elif to_table in converted:
                f = converted[to_table].references(to_column)
            else:
                f = forward_ref(to_table, to_column, f)
        if column.primary_key:
            f = primary_key(f)
        elif column.nullable is not False:
            # an unset value (None) is treated as nullable
            f = f.optional()
        shape[column.name] = f

    logger.debug("converted SQLAlchemy table %s (%d columns)", table.name, len(shape))
    return TableDefinition(
        table.name,
        shape,
        TableDefnOptions(sql_ns=sql_ns, description=table.comment),
    )
