"""Rendering primitives: naming, dialects, context, lint and composition."""
from sqlaide.emit.comment import SqlObjectComment, SqlObjectsCommentsSupplier
from sqlaide.emit.context import (
    SqlEmitContext,
    SqlTextEmitOptions,
    quoted_sql_literal,
    typical_sql_emit_context,
)
from sqlaide.emit.dialect import (
    AnsiSqlDialect,
    DialectFactory,
    DuckDbDialect,
    MsSqlServerDialect,
    PostgreSqlDialect,
    SqlDialect,
    SqliteDialect,
    is_ansi_sql_dialect,
    is_duckdb_dialect,
    is_mssql_server_dialect,
    is_postgresql_dialect,
    is_sqlite_dialect,
)
from sqlaide.emit.lint import (
    AggregatedLintRules,
    SqlLintIssue,
    SqlLintIssueConsequence,
    SqlLintIssues,
    SqlLintRule,
    is_fatal_issue,
    template_string_lint_issue,
)
from sqlaide.emit.naming import (
    QualifiedNamingStrategySupplier,
    QualifiedSqlObjectNames,
    SqlNamespace,
    SqlNamingStrategy,
    SqlObjectNames,
    bracket_sql_naming_strategy,
    qualify_name,
    typical_sql_naming_strategy,
)
from sqlaide.emit.sql import (
    SQL,
    ComposedSql,
    PersistIndexer,
    SqlComposer,
    SqlTextEvents,
    SqlTextLintState,
    SqlTextSupplierOptions,
    sql_objects_comments,
    typical_persist,
    typical_sql_text_supplier_options,
)
from sqlaide.emit.supplier import (
    PersistableSqlText,
    SqlBehavior,
    SqlInjection,
    SqlSymbolSupplier,
    SqlText,
    SqlTextBehaviorSupplier,
    SqlTextEmitTransformer,
    SqlTextLintIssuesPopulator,
    SqlTextSupplier,
    remove_line_from_emit_stream,
)
from sqlaide.emit.whitespace import unindent_whitespace

__all__ = [
    "SQL",
    "AggregatedLintRules",
    "AnsiSqlDialect",
    "ComposedSql",
    "DialectFactory",
    "DuckDbDialect",
    "MsSqlServerDialect",
    "PersistIndexer",
    "PersistableSqlText",
    "PostgreSqlDialect",
    "QualifiedNamingStrategySupplier",
    "QualifiedSqlObjectNames",
    "SqlBehavior",
    "SqlComposer",
    "SqlDialect",
    "SqlEmitContext",
    "SqlInjection",
    "SqlLintIssue",
    "SqlLintIssueConsequence",
    "SqlLintIssues",
    "SqlLintRule",
    "SqlNamespace",
    "SqlNamingStrategy",
    "SqlObjectComment",
    "SqlObjectNames",
    "SqlObjectsCommentsSupplier",
    "SqlSymbolSupplier",
    "SqlText",
    "SqlTextBehaviorSupplier",
    "SqlTextEmitOptions",
    "SqlTextEmitTransformer",
    "SqlTextEvents",
    "SqlTextLintIssuesPopulator",
    "SqlTextLintState",
    "SqlTextSupplier",
    "SqlTextSupplierOptions",
    "SqliteDialect",
    "bracket_sql_naming_strategy",
    "is_ansi_sql_dialect",
    "is_duckdb_dialect",
    "is_fatal_issue",
    "is_mssql_server_dialect",
    "is_postgresql_dialect",
    "is_sqlite_dialect",
    "qualify_name",
    "quoted_sql_literal",
    "remove_line_from_emit_stream",
    "sql_objects_comments",
    "template_string_lint_issue",
    "typical_persist",
    "typical_sql_emit_context",
    "typical_sql_naming_strategy",
    "typical_sql_text_supplier_options",
    "unindent_whitespace",
]
