"""Documentation comments (``COMMENT ON ... IS '...'``) for SQL objects."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from sqlaide.emit.naming import QualifiedNamingStrategySupplier
from sqlaide.emit.supplier import SqlTextSupplier

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext

SqlObjectCommentTarget = Literal["table", "column", "view"]


@dataclass(frozen=True)
class SqlObjectComment(SqlTextSupplier):
    """A comment attached to a table, view or column.

    Attributes:
        target_type: The kind of object commented on.
        object_name: Table or view name.
        comment: The documentation text.
        column_name: Set when ``target_type`` is ``"column"``.
        sql_ns: Optional namespace used to qualify the object name.
    """

    target_type: SqlObjectCommentTarget
    object_name: str
    comment: str
    column_name: str | None = None
    sql_ns: QualifiedNamingStrategySupplier | None = None

    def sql(self, ctx: SqlEmitContext) -> str:
        ns = ctx.naming(quote_identifiers=True, qnss=self.sql_ns)
        if self.target_type == "column" and self.column_name:
            target = ns.table_column_name(self.object_name, self.column_name, ".")
        elif self.target_type == "view":
            target = ns.view_name(self.object_name)
        else:
            target = ns.table_name(self.object_name)
        _, quoted = ctx.sql_text_emit_options.quoted_literal(self.comment)
        return f"COMMENT ON {self.target_type} {target} IS {quoted}"


class SqlObjectsCommentsSupplier(ABC):
    """Objects that carry documentation comments for themselves and their
    members."""

    @abstractmethod
    def sql_objects_comments(self) -> list[SqlObjectComment]:
        """Return the comments in declaration order."""
