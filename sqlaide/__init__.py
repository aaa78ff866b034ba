"""sqlaide – Programmatic SQL authoring.

Describe tables once, emit dialect-aware SQL everywhere.

Public API
----------
``SQL``
    Compose SQL from literal text and typed expressions (tables, views,
    fragments, directives).

``table_definition`` / ``view_definition`` / ``sql_schema_defn``
    Typed schema objects that render their own DDL.

``TableRowFactory`` / ``TableSelectFactory``
    Insert and select statements from plain records.

``entities_graph`` / ``plantuml_ie_notation``
    Foreign key graph and its PlantUML ERD.

Extensibility
-------------
New dialects can be registered via::

    from sqlaide.emit.dialect import DialectFactory, SqlDialect

    @DialectFactory.register("oracle")
    class OracleDialect(SqlDialect):
        identity = "Oracle"
"""

from __future__ import annotations

from sqlaide.catalog import SqlCatalog
from sqlaide.ddl import (
    BelongsTo,
    SchemaDefinition,
    TableDefinition,
    TableDefnOptions,
    ViewDefinition,
    ViewDefnOptions,
    auto_inc_primary_key,
    primary_key,
    self_ref,
    sql_schema_defn,
    table_definition,
    typical_table_lint_rules,
    ua_defaultable_text_primary_key,
    unique,
    view_definition,
)
from sqlaide.diagram import PlantUmlIeOptions, plantuml_ie_notation
from sqlaide.dml import InsertReturning, InsertStmtPreparerOptions, TableRowFactory, insert_stmt_preparer
from sqlaide.domain import (
    SqlDomain,
    SqlField,
    bigint,
    boolean,
    created_at,
    date,
    date_time,
    enum_integer,
    enum_text,
    floating,
    integer,
    json_text,
    sql_domains,
    text,
)
from sqlaide.dql import (
    FilterCriteriaValue,
    SelectStmtPreparerOptions,
    TableSelectFactory,
    entity_select_stmt_preparer,
    or_,
    untyped_select,
)
from sqlaide.emit import (
    SQL,
    DialectFactory,
    SqlEmitContext,
    SqlLintIssue,
    SqlLintIssueConsequence,
    SqlNamespace,
    SqlText,
    SqlTextEvents,
    SqlTextSupplier,
    SqlTextSupplierOptions,
    typical_sql_emit_context,
    typical_sql_text_supplier_options,
)
from sqlaide.errors import (
    DialectError,
    DomainTypeError,
    InsertValidationError,
    SqlAideError,
    StatementError,
    TableDefinitionError,
    UnresolvedReferenceError,
)
from sqlaide.graph import EntityGraph, EntityGraphPolicy, entities_graph

__version__ = "0.1.0"

__all__ = [
    "SQL",
    "BelongsTo",
    "DialectError",
    "DialectFactory",
    "DomainTypeError",
    "EntityGraph",
    "EntityGraphPolicy",
    "FilterCriteriaValue",
    "InsertReturning",
    "InsertStmtPreparerOptions",
    "InsertValidationError",
    "PlantUmlIeOptions",
    "SchemaDefinition",
    "SelectStmtPreparerOptions",
    "SqlAideError",
    "SqlCatalog",
    "SqlDomain",
    "SqlEmitContext",
    "SqlField",
    "SqlLintIssue",
    "SqlLintIssueConsequence",
    "SqlNamespace",
    "SqlText",
    "SqlTextEvents",
    "SqlTextSupplier",
    "SqlTextSupplierOptions",
    "StatementError",
    "TableDefinition",
    "TableDefinitionError",
    "TableDefnOptions",
    "TableRowFactory",
    "TableSelectFactory",
    "UnresolvedReferenceError",
    "ViewDefinition",
    "ViewDefnOptions",
    "__version__",
    "auto_inc_primary_key",
    "bigint",
    "boolean",
    "created_at",
    "date",
    "date_time",
    "entities_graph",
    "entity_select_stmt_preparer",
    "enum_integer",
    "enum_text",
    "floating",
    "insert_stmt_preparer",
    "integer",
    "json_text",
    "or_",
    "plantuml_ie_notation",
    "primary_key",
    "self_ref",
    "sql_domains",
    "sql_schema_defn",
    "table_definition",
    "text",
    "typical_sql_emit_context",
    "typical_sql_text_supplier_options",
    "typical_table_lint_rules",
    "ua_defaultable_text_primary_key",
    "unique",
    "untyped_select",
    "view_definition",
]
