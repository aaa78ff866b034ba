"""Naming strategies: logical identifiers to rendered SQL identifiers.

A :class:`SqlNamingStrategy` is called with the render context and returns a
:class:`SqlObjectNames` whose methods map logical names (table, column,
view, ...) to text.  ``quote_identifiers`` toggles quoted vs bare output and
``qnss`` wraps the result so every name is prefixed by a namespace
qualifier::

    ns = ctx.naming(quote_identifiers=True, qnss=schema)
    ns.table_name("person")                 # '"public"."person"'
    ns.table_column_name("person", "name")  # '"public"."name"'
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext

#: ``(unqualified_name) -> qualified_name``
NameQualifier = Callable[[str], str]


def qualify_name(qualifier: str, delim: str = ".") -> NameQualifier:
    """Return a qualifier that prefixes ``qualifier + delim`` to a name."""
    return lambda name: f"{qualifier}{delim}{name}"


def _bare(name: str) -> str:
    return name


def double_quote(name: str) -> str:
    return f'"{name}"'


def bracket_quote(name: str) -> str:
    return f"[{name}]"


class SqlObjectNames:
    """Maps logical object names to rendered identifiers.

    Args:
        quote: Function applied to every bare identifier.
    """

    def __init__(self, quote: Callable[[str], str] = _bare) -> None:
        self._quote = quote

    def schema_name(self, name: str) -> str:
        return self._quote(name)

    def table_name(self, name: str) -> str:
        return self._quote(name)

    def domain_name(self, name: str) -> str:
        return self._quote(name)

    def table_column_name(
        self,
        table_name: str,
        column_name: str,
        qualify_table_name: str | None = None,
    ) -> str:
        """Render a column name, optionally prefixed by its table name.

        Args:
            table_name: Owning table.
            column_name: Column identity.
            qualify_table_name: Delimiter placed between table and column
                (usually ``"."``); ``None`` renders the column alone.
        """
        if qualify_table_name:
            return (
                f"{self.table_name(table_name)}{qualify_table_name}"
                f"{self.domain_name(column_name)}"
            )
        return self.domain_name(column_name)

    def table_index_name(self, table_name: str, column_names: list[str]) -> str:
        """Default index name: ``idx_<table>__<col1>__<col2>``."""
        return self._quote(f"idx_{table_name}__{'__'.join(column_names)}")

    def view_name(self, name: str) -> str:
        return self._quote(name)

    def view_column_name(
        self,
        view_name: str,
        column_name: str,
        qualify_view_name: str | None = None,
    ) -> str:
        if qualify_view_name:
            return (
                f"{self.view_name(view_name)}{qualify_view_name}"
                f"{self.domain_name(column_name)}"
            )
        return self.domain_name(column_name)

    def type_name(self, name: str) -> str:
        return self._quote(name)

    def type_field_name(
        self,
        type_name: str,
        field_name: str,
        qualify_type_name: str | None = None,
    ) -> str:
        if qualify_type_name:
            return (
                f"{self.type_name(type_name)}{qualify_type_name}"
                f"{self.domain_name(field_name)}"
            )
        return self.domain_name(field_name)

    def stored_routine_name(self, name: str) -> str:
        return self._quote(name)

    def stored_routine_arg_name(self, name: str) -> str:
        return self._quote(name)

    def stored_routine_returns(self, name: str) -> str:
        return self._quote(name)

    def injectable(self, text: str) -> str:
        """Return ``text`` unquoted; used for arbitrary SQL tokens."""
        return text


class QualifiedSqlObjectNames(SqlObjectNames):
    """Wraps another :class:`SqlObjectNames`, qualifying every name.

    Args:
        base: The strategy whose output is qualified.
        qualifier: Applied to every name ``base`` produces.
    """

    def __init__(self, base: SqlObjectNames, qualifier: NameQualifier) -> None:
        super().__init__()
        self.base = base
        self.qualifier = qualifier

    def schema_name(self, name: str) -> str:
        return self.qualifier(self.base.schema_name(name))

    def table_name(self, name: str) -> str:
        return self.qualifier(self.base.table_name(name))

    def domain_name(self, name: str) -> str:
        return self.qualifier(self.base.domain_name(name))

    def table_column_name(
        self,
        table_name: str,
        column_name: str,
        qualify_table_name: str | None = None,
    ) -> str:
        return self.qualifier(
            self.base.table_column_name(table_name, column_name, qualify_table_name)
        )

    def table_index_name(self, table_name: str, column_names: list[str]) -> str:
        return self.qualifier(self.base.table_index_name(table_name, column_names))

    def view_name(self, name: str) -> str:
        return self.qualifier(self.base.view_name(name))

    def view_column_name(
        self,
        view_name: str,
        column_name: str,
        qualify_view_name: str | None = None,
    ) -> str:
        return self.qualifier(
            self.base.view_column_name(view_name, column_name, qualify_view_name)
        )

    def type_name(self, name: str) -> str:
        return self.qualifier(self.base.type_name(name))

    def type_field_name(
        self,
        type_name: str,
        field_name: str,
        qualify_type_name: str | None = None,
    ) -> str:
        return self.qualifier(
            self.base.type_field_name(type_name, field_name, qualify_type_name)
        )

    def stored_routine_name(self, name: str) -> str:
        return self.qualifier(self.base.stored_routine_name(name))

    def stored_routine_arg_name(self, name: str) -> str:
        return self.qualifier(self.base.stored_routine_arg_name(name))

    def stored_routine_returns(self, name: str) -> str:
        return self.qualifier(self.base.stored_routine_returns(name))

    def injectable(self, text: str) -> str:
        return self.qualifier(self.base.injectable(text))


class QualifiedNamingStrategySupplier(ABC):
    """Anything that can qualify a naming strategy (schemas, namespaces)."""

    @abstractmethod
    def qualified_names(
        self,
        ctx: SqlEmitContext,
        base_ns: SqlObjectNames | None = None,
    ) -> SqlObjectNames:
        """Return names qualified by this supplier's namespace.

        Args:
            ctx: The render context.
            base_ns: Names to wrap; defaults to the context's bare names.
        """


class SqlNamespace(QualifiedNamingStrategySupplier):
    """A plain named namespace that qualifies names as ``ns.name``.

    Args:
        sql_namespace: The namespace (schema) name.
    """

    def __init__(self, sql_namespace: str) -> None:
        self.sql_namespace = sql_namespace

    def qualified_names(
        self,
        ctx: SqlEmitContext,
        base_ns: SqlObjectNames | None = None,
    ) -> SqlObjectNames:
        ns = base_ns if base_ns is not None else ctx.naming()
        return QualifiedSqlObjectNames(ns, qualify_name(ns.schema_name(self.sql_namespace)))


class SqlNamingStrategy:
    """Produces :class:`SqlObjectNames` for a context.

    Args:
        quote: Identifier quoting used when ``quote_identifiers`` is set.
    """

    def __init__(self, quote: Callable[[str], str] = double_quote) -> None:
        self.quote = quote

    def __call__(
        self,
        ctx: SqlEmitContext,
        *,
        quote_identifiers: bool = False,
        qnss: QualifiedNamingStrategySupplier | None = None,
    ) -> SqlObjectNames:
        names = SqlObjectNames(self.quote if quote_identifiers else _bare)
        if qnss is not None:
            return qnss.qualified_names(ctx, names)
        return names


def typical_sql_naming_strategy() -> SqlNamingStrategy:
    """ANSI double-quoted identifiers."""
    return SqlNamingStrategy(double_quote)


def bracket_sql_naming_strategy() -> SqlNamingStrategy:
    """SQL Server style ``[identifier]`` quoting."""
    return SqlNamingStrategy(bracket_quote)
