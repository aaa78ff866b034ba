"""SQL dialects and the dialect registry.

Each dialect is a small :class:`SqlDialect` subclass.  Renderers never
branch on dialect names; they call the predicates below (``is_*_dialect``)
or the dialect's own hooks, so a new dialect can be added by registering a
subclass::

    @DialectFactory.register("oracle")
    class OracleDialect(SqlDialect):
        identity = "Oracle"
"""
from __future__ import annotations

from abc import ABC
from collections.abc import Callable
from typing import ClassVar

from sqlaide.errors import DialectError


class SqlDialect(ABC):
    """Base class for SQL dialects.

    Attributes:
        identity: Human-readable dialect name (e.g. ``'PostgreSQL'``).
    """

    identity: ClassVar[str] = "ANSI"

    def table_if_not_exists(self, is_idempotent: bool) -> str:
        """Return the ``IF NOT EXISTS `` clause used by ``CREATE TABLE``."""
        return "IF NOT EXISTS " if is_idempotent else ""

    def create_view_head(self, is_temp: bool, is_idempotent: bool) -> str:
        """Return the ``CREATE ... VIEW `` head (without the view name)."""
        temp = "TEMP " if is_temp else ""
        if_not_exists = "IF NOT EXISTS " if is_idempotent else ""
        return f"CREATE {temp}VIEW {if_not_exists}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class DialectFactory:
    """Registry mapping dialect names to :class:`SqlDialect` classes.

    Example::

        dialect = DialectFactory.create("postgres")
    """

    _dialects: ClassVar[dict[str, type[SqlDialect]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[SqlDialect]], type[SqlDialect]]:
        """Decorator that registers a dialect class under ``name``."""

        def decorator(dialect_cls: type[SqlDialect]) -> type[SqlDialect]:
            cls._dialects[name] = dialect_cls
            return dialect_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, dialect_cls: type[SqlDialect]) -> None:
        """Register a dialect class without using the decorator form."""
        cls._dialects[name] = dialect_cls

    @classmethod
    def create(cls, name: str) -> SqlDialect:
        """Instantiate the dialect registered for ``name``.

        Raises:
            DialectError: If no dialect is registered for ``name``.
        """
        dialect_cls = cls._dialects.get(name)
        if dialect_cls is None:
            raise DialectError(
                f"Unsupported dialect: '{name}'. Registered dialects: {sorted(cls._dialects)}."
            )
        return dialect_cls()

    @classmethod
    def registered_dialects(cls) -> list[str]:
        return sorted(cls._dialects)


@DialectFactory.register("ansi")
class AnsiSqlDialect(SqlDialect):
    identity = "ANSI"


@DialectFactory.register("sqlite")
class SqliteDialect(AnsiSqlDialect):
    identity = "SQLite"


@DialectFactory.register("duckdb")
class DuckDbDialect(AnsiSqlDialect):
    identity = "DuckDB"


@DialectFactory.register("postgres")
class PostgreSqlDialect(AnsiSqlDialect):
    identity = "PostgreSQL"

    def create_view_head(self, is_temp: bool, is_idempotent: bool) -> str:
        replace = "OR REPLACE " if is_idempotent else ""
        temp = "TEMP " if is_temp else ""
        return f"CREATE {replace}{temp}VIEW "


@DialectFactory.register("mssql")
class MsSqlServerDialect(AnsiSqlDialect):
    identity = "Microsoft SQL*Server"

    def table_if_not_exists(self, is_idempotent: bool) -> str:
        return ""

    def create_view_head(self, is_temp: bool, is_idempotent: bool) -> str:
        alter = "OR ALTER " if is_idempotent else ""
        temp = "TEMP " if is_temp else ""
        return f"CREATE {alter}{temp}VIEW "


def is_ansi_sql_dialect(dialect: SqlDialect) -> bool:
    """True for the generic ANSI dialect only (not its specializations)."""
    return type(dialect) is AnsiSqlDialect


def is_sqlite_dialect(dialect: SqlDialect) -> bool:
    return isinstance(dialect, SqliteDialect)


def is_duckdb_dialect(dialect: SqlDialect) -> bool:
    return isinstance(dialect, DuckDbDialect)


def is_postgresql_dialect(dialect: SqlDialect) -> bool:
    return isinstance(dialect, PostgreSqlDialect)


def is_mssql_server_dialect(dialect: SqlDialect) -> bool:
    return isinstance(dialect, MsSqlServerDialect)
