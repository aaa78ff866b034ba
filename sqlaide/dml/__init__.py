"""Data manipulation: insert statements from validated records."""
from sqlaide.dml.insert import (
    InsertReturning,
    InsertStatement,
    InsertStmtPreparerOptions,
    TableRowFactory,
    insert_stmt_preparer,
    table_row_factory,
)

__all__ = [
    "InsertReturning",
    "InsertStatement",
    "InsertStmtPreparerOptions",
    "TableRowFactory",
    "insert_stmt_preparer",
    "table_row_factory",
]
