"""Lint rules for table definitions.

Rules are opt-in; run them against any registry::

    rules = typical_table_lint_rules(book, ignore_plural_table_name=True)
    rules.lint(options.sql_text_lint_state.lint_sql_text)
"""
from __future__ import annotations

from collections.abc import Callable
from typing import Union

from sqlaide.ddl.table import TableDefinition
from sqlaide.emit.lint import (
    AggregatedLintRules,
    SqlLintIssue,
    SqlLintIssueConsequence,
    SqlLintIssues,
    SqlLintRule,
)

#: ``True`` ignores the rule for every table; a callable decides per table.
IgnoreRule = Union[bool, Callable[[str], bool], None]


def _ignored(ignore: IgnoreRule, table_name: str) -> bool:
    if callable(ignore):
        return ignore(table_name)
    return bool(ignore)


class TableLacksPrimaryKeyLintRule(SqlLintRule):
    """Warns when a table has no primary key column."""

    def __init__(self, table: TableDefinition, ignore: IgnoreRule = None) -> None:
        self.table = table
        self.ignore = ignore

    def lint(self, registry: SqlLintIssues) -> None:
        if _ignored(self.ignore, self.table.table_name) or self.table.primary_key:
            return
        registry.register_lint_issue(
            SqlLintIssue(
                lint_issue=f"table '{self.table.table_name}' has no primary key column(s)",
                consequence=SqlLintIssueConsequence.WARNING_DDL,
            )
        )


class TableNameConsistencyLintRule(SqlLintRule):
    """Table names should be singular (must not end with ``s``)."""

    def __init__(self, table_name: str, ignore: IgnoreRule = None) -> None:
        self.table_name = table_name
        self.ignore = ignore

    def lint(self, registry: SqlLintIssues) -> None:
        if _ignored(self.ignore, self.table_name) or not self.table_name.endswith("s"):
            return
        registry.register_lint_issue(
            SqlLintIssue(
                lint_issue=(
                    f"table name '{self.table_name}' ends with an 's' "
                    "(should be singular, not plural)"
                ),
                consequence=SqlLintIssueConsequence.CONVENTION_DDL,
            )
        )


class TableColumnsLintIssuesRule(SqlLintRule):
    """Copies each column's lint issues, located at the table definition."""

    def __init__(self, table: TableDefinition) -> None:
        self.table = table

    def lint(self, registry: SqlLintIssues) -> None:
        location = f"table {self.table.table_name} definition"
        for domain in self.table.domains:
            registry.register_lint_issue(
                *(li.model_copy(update={"location": location}) for li in domain.lint_issues)
            )


def typical_table_lint_rules(
    table: TableDefinition,
    *,
    ignore_table_lacks_primary_key: IgnoreRule = None,
    ignore_plural_table_name: IgnoreRule = None,
) -> AggregatedLintRules:
    return AggregatedLintRules(
        TableNameConsistencyLintRule(table.table_name, ignore_plural_table_name),
        TableLacksPrimaryKeyLintRule(table, ignore_table_lacks_primary_key),
        TableColumnsLintIssuesRule(table),
    )
