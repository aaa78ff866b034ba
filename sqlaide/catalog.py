"""Caller-owned catalog of the schema objects a composition encounters.

Attach a catalog to the render session options and every table, view and
schema placed in a composition is recorded, in encounter order::

    catalog = SqlCatalog()
    options = typical_sql_text_supplier_options(catalog=catalog)
    SQL(options)(author, "\\n", book).sql(ctx)
    [t.table_name for t in catalog.tables]   # ['author', 'book']

Objects can also be registered directly, without rendering anything.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any, Union

from sqlaide.ddl.schema import SchemaDefinition
from sqlaide.ddl.table import TableDefinition
from sqlaide.ddl.view import ViewDefinition
from sqlaide.emit.sql import SqlTextEvents

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext
    from sqlaide.emit.supplier import SqlSymbolSupplier, SqlTextSupplier

logger = logging.getLogger(__name__)

CatalogObject = Union[TableDefinition, ViewDefinition, SchemaDefinition]
_CATALOGUED = (TableDefinition, ViewDefinition, SchemaDefinition)


class SqlCatalog(SqlTextEvents):
    """Ordered, de-duplicated record of tables, views and schemas."""

    def __init__(self, *objects: CatalogObject) -> None:
        self._objects: dict[int, CatalogObject] = {}
        self.register(*objects)

    def register(self, *objects: Any) -> None:
        """Record every catalogable object among ``objects``."""
        for o in objects:
            if isinstance(o, _CATALOGUED) and id(o) not in self._objects:
                self._objects[id(o)] = o
                logger.debug("catalogued %r", o)

    # -- composition events ---------------------------------------------------

    def sql_encountered(self, ctx: SqlEmitContext, sts: SqlTextSupplier) -> None:
        self.register(sts)

    def symbol_encountered(self, ctx: SqlEmitContext, sss: SqlSymbolSupplier) -> None:
        # symbols_first renders tables by name; they are still part of the schema
        self.register(sss)

    # -- accessors ------------------------------------------------------------

    @property
    def objects(self) -> list[CatalogObject]:
        return list(self._objects.values())

    @property
    def tables(self) -> list[TableDefinition]:
        return [o for o in self._objects.values() if isinstance(o, TableDefinition)]

    @property
    def views(self) -> list[ViewDefinition]:
        return [o for o in self._objects.values() if isinstance(o, ViewDefinition)]

    @property
    def schemas(self) -> list[SchemaDefinition]:
        return [o for o in self._objects.values() if isinstance(o, SchemaDefinition)]

    def table(self, table_name: str) -> TableDefinition | None:
        return next((t for t in self.tables if t.table_name == table_name), None)

    def __iter__(self) -> Iterator[CatalogObject]:
        return iter(self.objects)

    def __len__(self) -> int:
        return len(self._objects)

    def __contains__(self, o: object) -> bool:
        return id(o) in self._objects
