"""Render context passed to every ``sql(ctx)`` call.

The context is an immutable bundle of the caller's choices: naming strategy,
text emit policies (literal quoting, comments, indentation) and dialect.
All mutable render state (lint issues, documentation comments, catalog,
persistence counter) lives in :class:`~sqlaide.emit.sql.SqlTextSupplierOptions`
instead, so one context can be shared by independent render sessions.
"""
from __future__ import annotations

import datetime as dt
import json
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any, Literal

from sqlaide.emit.dialect import DialectFactory, SqlDialect
from sqlaide.emit.naming import (
    QualifiedNamingStrategySupplier,
    SqlNamingStrategy,
    SqlObjectNames,
    typical_sql_naming_strategy,
)

if TYPE_CHECKING:
    from sqlaide.emit.sql import SqlComposer, SqlTextSupplierOptions

IndentationNature = Literal[
    "create table",
    "define table column",
    "create view",
    "create type",
    "define type field",
    "create view select statement",
    "create routine",
    "create routine body",
]

_TYPICAL_INDENTS: dict[str, str] = {
    "define table column": "    ",
    "create view select statement": "    ",
    "define type field": "    ",
    "create routine body": "  ",
}


def quoted_sql_literal(value: Any) -> tuple[Any, str]:
    """Quote a python value as a SQL literal.

    Returns:
        ``(value, quoted_text)``; strings have embedded ``'`` doubled so
        ``O'Brien`` becomes ``'O''Brien'``.
    """
    if value is None:
        return value, "NULL"
    if isinstance(value, bool):
        return value, "TRUE" if value else "FALSE"
    if isinstance(value, Enum):
        return quoted_sql_literal(value.value)
    if isinstance(value, (int, float, Decimal)):
        return value, str(value)
    if isinstance(value, (dt.date, dt.datetime, dt.time)):
        return value, f"'{value.isoformat()}'"
    if isinstance(value, (dict, list)):
        text = json.dumps(value).replace("'", "''")
        return value, f"'{text}'"
    text = str(value).replace("'", "''")
    return value, f"'{text}'"


@dataclass(frozen=True)
class SqlTextEmitOptions:
    """Literal quoting, comment and indentation policies.

    Attributes:
        comment_prefix: Text placed before every comment line.
        indents: Indentation per construct nature; natures not listed are
            not indented.
    """

    comment_prefix: str = "-- "
    indents: dict[str, str] = field(default_factory=lambda: dict(_TYPICAL_INDENTS))

    def quoted_literal(self, value: Any) -> tuple[Any, str]:
        return quoted_sql_literal(value)

    def comments(self, text: str, indent: str = "") -> str:
        """Render ``text`` as SQL line comments, one per line."""
        return "\n".join(f"{indent}{self.comment_prefix}{line}" for line in text.split("\n"))

    def single_line_src_comment(self, text: str, indent: str = "") -> str:
        return f"{indent}{self.comment_prefix}{' '.join(text.split())}"

    def indentation(self, nature: IndentationNature, content: str | None = None) -> str:
        """Return the indent for ``nature``, or ``content`` with every line
        indented when content is supplied."""
        indent = self.indents.get(nature, "")
        if content is None:
            return indent
        return "\n".join(f"{indent}{line}" for line in content.split("\n"))


@dataclass(frozen=True)
class SqlEmitContext:
    """Everything a renderer needs to turn descriptions into SQL text.

    Attributes:
        sql_naming_strategy: Produces identifier names.
        sql_text_emit_options: Quoting, comment and indentation policies.
        sql_dialect: Target dialect.
    """

    sql_naming_strategy: SqlNamingStrategy = field(default_factory=typical_sql_naming_strategy)
    sql_text_emit_options: SqlTextEmitOptions = field(default_factory=SqlTextEmitOptions)
    sql_dialect: SqlDialect = field(default_factory=lambda: DialectFactory.create("ansi"))

    def naming(
        self,
        *,
        quote_identifiers: bool = False,
        qnss: QualifiedNamingStrategySupplier | None = None,
    ) -> SqlObjectNames:
        """Shortcut for ``self.sql_naming_strategy(self, ...)``."""
        return self.sql_naming_strategy(self, quote_identifiers=quote_identifiers, qnss=qnss)

    def compose_sql(self, options: SqlTextSupplierOptions | None = None) -> SqlComposer:
        """Return a composer bound to ``options`` for nested compositions."""
        from sqlaide.emit.sql import SQL

        return SQL(options)


def typical_sql_emit_context(
    dialect: str | SqlDialect = "ansi",
    *,
    sql_naming_strategy: SqlNamingStrategy | None = None,
    sql_text_emit_options: SqlTextEmitOptions | None = None,
) -> SqlEmitContext:
    """Build a context with the conventional defaults.

    Args:
        dialect: A registered dialect name or a dialect instance.
        sql_naming_strategy: Defaults to double-quoted identifiers.
        sql_text_emit_options: Defaults to :class:`SqlTextEmitOptions`.
    """
    return SqlEmitContext(
        sql_naming_strategy=sql_naming_strategy or typical_sql_naming_strategy(),
        sql_text_emit_options=sql_text_emit_options or SqlTextEmitOptions(),
        sql_dialect=DialectFactory.create(dialect) if isinstance(dialect, str) else dialect,
    )
