"""Data definition: tables, columns, keys, constraints, indexes, views and schemas."""
from sqlaide.ddl.column import (
    auto_inc_primary_key,
    is_primary_key_column,
    primary_key,
    ua_defaultable_text_primary_key,
    unique,
)
from sqlaide.ddl.constraint import TableConstraints, UniqueConstraint
from sqlaide.ddl.foreign_key import (
    BelongsTo,
    Extends,
    ForeignKeyDestination,
    ForeignKeyPlaceholder,
    ForeignKeySource,
    Inherits,
    SelfRef,
    is_belongs_to,
    self_ref,
)
from sqlaide.ddl.index import TableIndex, TableIndexes
from sqlaide.ddl.lint import (
    TableColumnsLintIssuesRule,
    TableLacksPrimaryKeyLintRule,
    TableNameConsistencyLintRule,
    typical_table_lint_rules,
)
from sqlaide.ddl.schema import SchemaDefinition, is_schema_definition, sql_schema_defn
from sqlaide.ddl.table import (
    TableDefinition,
    TableDefnOptions,
    is_table_definition,
    table_definition,
    table_definitions,
)
from sqlaide.ddl.view import (
    ViewDefinition,
    ViewDefnOptions,
    drop_view,
    is_view_definition,
    view_definition,
    view_definitions,
)

__all__ = [
    "BelongsTo",
    "Extends",
    "ForeignKeyDestination",
    "ForeignKeyPlaceholder",
    "ForeignKeySource",
    "Inherits",
    "SchemaDefinition",
    "SelfRef",
    "TableColumnsLintIssuesRule",
    "TableConstraints",
    "TableDefinition",
    "TableDefnOptions",
    "TableIndex",
    "TableIndexes",
    "TableLacksPrimaryKeyLintRule",
    "TableNameConsistencyLintRule",
    "UniqueConstraint",
    "ViewDefinition",
    "ViewDefnOptions",
    "auto_inc_primary_key",
    "drop_view",
    "is_belongs_to",
    "is_primary_key_column",
    "is_schema_definition",
    "is_table_definition",
    "is_view_definition",
    "primary_key",
    "self_ref",
    "sql_schema_defn",
    "table_definition",
    "table_definitions",
    "typical_table_lint_rules",
    "ua_defaultable_text_primary_key",
    "unique",
    "view_definition",
    "view_definitions",
]
