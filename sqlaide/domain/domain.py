"""SQL domains and the field descriptors that carry them.

A *field* pairs a validator with a SQL descriptor explicitly::

    name = text().describe("Display name")
    name.annotation      # str            (what pydantic validates)
    name.validator       # TypeAdapter(str)
    name.domain          # SqlDomain(data_type="TEXT", ...)

Column modifiers (``optional()``, ``default()``, ``unique()``, primary key
and foreign key wrappers) never mutate a field; they return a new
:class:`SqlField` whose domain has been re-derived with the extra facts.
"""
from __future__ import annotations

import dataclasses
import datetime as dt
import types
from collections.abc import Callable
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from functools import cached_property
from typing import TYPE_CHECKING, Any, Literal, Optional, Union, get_args, get_origin

from pydantic import Field, TypeAdapter
from pydantic.fields import FieldInfo

from sqlaide.emit.lint import SqlLintIssue
from sqlaide.emit.supplier import SqlSymbolSupplier, SqlText, SqlTextSupplier
from sqlaide.errors import DomainTypeError

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext

SQL_DOMAIN_NOT_IN_COLLECTION = "SQL_DOMAIN_NOT_IN_COLLECTION"

SqlDataTypePurpose = Literal[
    "create table column",
    "stored routine arg",
    "stored function returns scalar",
    "type field",
    "table foreign key ref",
    "diagram",
    "PlantUML",
]

SqlPartialDestination = Literal[
    "create table, full column defn",
    "create table, column defn decorators",
    "create table, after all column definitions",
]


class _Missing:
    """Marks a field without a static default (``None`` is a valid default)."""

    def __repr__(self) -> str:
        return "<missing>"


_MISSING: Any = _Missing()
_LITERAL_DEFAULTS = (str, int, float, Decimal, bool)


@dataclass(frozen=True, eq=False)
class SqlDomain(SqlSymbolSupplier):
    """SQL facts about a single column or field.

    Attributes:
        data_type: The SQL type used in column definitions (e.g. ``TEXT``).
        identity: Logical name; bound when the field is placed in a shape.
        is_optional: Whether NULL is allowed.
        sql_default_value: Rendered after ``DEFAULT`` when present.
        decorators: Fragments placed between the type and ``NOT NULL``.
        after_column_defns: Fragments placed after all column definitions
            (FK clauses and similar).
        full_column_defn: Replaces the generated column definition.
        is_primary_key: Column is (part of) the primary key.
        is_auto_increment: Value is generated by the database.
        is_unique: A ``UNIQUE`` constraint is generated for the column.
        is_excluded_from_insert_dml: Never emitted in ``INSERT``.
        is_optional_in_insertable_record: May be omitted from insertable
            records (a default is supplied by the client side).
        is_excluded_from_filter_criteria_dql: Never used as select criteria.
        description: Documentation, emitted as a ``COMMENT ON column``.
        foreign_key: The resolved reference when this is an FK column.
        lint_issues: Issues found for this domain; append-only.
    """

    data_type: str
    identity: str = SQL_DOMAIN_NOT_IN_COLLECTION
    is_optional: bool = False
    sql_default_value: SqlTextSupplier | None = None
    decorators: tuple[SqlTextSupplier, ...] = ()
    after_column_defns: tuple[SqlTextSupplier, ...] = ()
    full_column_defn: SqlTextSupplier | None = None
    is_primary_key: bool = False
    is_auto_increment: bool = False
    is_unique: bool = False
    is_excluded_from_insert_dml: bool = False
    is_optional_in_insertable_record: bool = False
    is_excluded_from_filter_criteria_dql: bool = False
    description: str | None = None
    foreign_key: Any = None
    lint_issues: list[SqlLintIssue] = field(default_factory=list)

    def evolve(self, **changes: Any) -> SqlDomain:
        """Return a copy with ``changes`` applied and its own lint list."""
        changes.setdefault("lint_issues", list(self.lint_issues))
        return dataclasses.replace(self, **changes)

    def is_nullable(self) -> bool:
        return self.is_optional

    def sql_symbol(self, ctx: SqlEmitContext) -> str:
        return ctx.naming(quote_identifiers=True).domain_name(self.identity)

    def sql_data_type(self, purpose: SqlDataTypePurpose = "create table column") -> SqlTextSupplier:
        return SqlText(self.data_type)

    def sql_partial(self, destination: SqlPartialDestination) -> list[SqlTextSupplier] | None:
        """Return the fragments this domain injects at ``destination``."""
        if destination == "create table, column defn decorators":
            return list(self.decorators) or None
        if destination == "create table, after all column definitions":
            return list(self.after_column_defns) or None
        if destination == "create table, full column defn" and self.full_column_defn:
            return [self.full_column_defn]
        return None

    def register_lint_issue(self, *issues: SqlLintIssue) -> None:
        self.lint_issues.extend(issues)

    def __repr__(self) -> str:
        return f"SqlDomain(identity={self.identity!r}, data_type={self.data_type!r})"


@dataclass(frozen=True, eq=False)
class SqlField:
    """A validator and its SQL descriptor.

    Attributes:
        annotation: The python type pydantic validates values against.
        domain: The SQL descriptor.
        base_annotation: ``annotation`` before ``optional()`` widened it.
        default: Static default value, if any.
        default_factory: Client-side default factory, if any.
        description: Field documentation.
        reference: Foreign key placeholder awaiting table finalization.
    """

    annotation: Any
    domain: SqlDomain
    base_annotation: Any = None
    default: Any = _MISSING
    default_factory: Callable[[], Any] | None = None
    description: str | None = None
    reference: Any = None

    def __post_init__(self) -> None:
        if self.base_annotation is None:
            object.__setattr__(self, "base_annotation", self.annotation)

    @cached_property
    def validator(self) -> TypeAdapter:
        return TypeAdapter(self.annotation)

    @property
    def identity(self) -> str:
        return self.domain.identity

    @property
    def has_default(self) -> bool:
        return self.default is not _MISSING or self.default_factory is not None

    def field_info(self) -> FieldInfo:
        """The pydantic ``FieldInfo`` used when building validation models."""
        if self.default_factory is not None:
            return Field(default_factory=self.default_factory, description=self.description)
        if self.default is not _MISSING:
            return Field(default=self.default, description=self.description)
        if self.domain.is_optional:
            return Field(default=None, description=self.description)
        return Field(description=self.description)

    def default_value(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        if self.default is not _MISSING:
            return self.default
        return None

    def with_domain(self, **changes: Any) -> SqlField:
        """Return a copy whose domain has ``changes`` applied."""
        return dataclasses.replace(self, domain=self.domain.evolve(**changes))

    def bind(self, identity: str) -> SqlField:
        return self.with_domain(identity=identity)

    def optional(self) -> SqlField:
        return dataclasses.replace(
            self,
            annotation=Optional[self.base_annotation],
            domain=self.domain.evolve(is_optional=True),
        )

    def default_to(
        self,
        value: Any = _MISSING,
        *,
        factory: Callable[[], Any] | None = None,
    ) -> SqlField:
        """Attach a default.

        Static scalar defaults are also rendered as ``DEFAULT`` in column
        definitions; factory defaults are applied client-side only.
        """
        sql_default = self.domain.sql_default_value
        if factory is None and isinstance(value, _LITERAL_DEFAULTS):
            sql_default = SqlText(
                lambda ctx: ctx.sql_text_emit_options.quoted_literal(value)[1]
            )
        return dataclasses.replace(
            self,
            default=value,
            default_factory=factory,
            domain=self.domain.evolve(sql_default_value=sql_default),
        )

    def describe(self, description: str) -> SqlField:
        return dataclasses.replace(
            self,
            description=description,
            domain=self.domain.evolve(description=description),
        )

    def __repr__(self) -> str:
        return f"SqlField({self.annotation!r}, {self.domain!r})"


# ---------------------------------------------------------------------------
# Field factories
# ---------------------------------------------------------------------------


def _field(annotation: Any, data_type: str, **domain: Any) -> SqlField:
    return SqlField(annotation=annotation, domain=SqlDomain(data_type=data_type, **domain))


def text() -> SqlField:
    return _field(str, "TEXT")


def integer() -> SqlField:
    return _field(int, "INTEGER")


def bigint() -> SqlField:
    return _field(int, "BIGINT")


def floating() -> SqlField:
    return _field(float, "REAL")


def boolean() -> SqlField:
    return _field(bool, "BOOLEAN")


def date() -> SqlField:
    return _field(dt.date, "DATE")


def date_time() -> SqlField:
    return _field(dt.datetime, "DATETIME")


def created_at() -> SqlField:
    """Housekeeping timestamp filled in by the database."""
    return SqlField(
        annotation=Optional[dt.datetime],
        base_annotation=dt.datetime,
        domain=SqlDomain(
            data_type="DATETIME",
            is_optional=True,
            sql_default_value=SqlText("CURRENT_TIMESTAMP"),
        ),
    )


def json_text() -> SqlField:
    return _field(Union[dict, list], "JSON")


def enum_text(enum_cls: type[Enum]) -> SqlField:
    return _field(enum_cls, "TEXT")


def enum_integer(enum_cls: type[Enum]) -> SqlField:
    return _field(enum_cls, "INTEGER")


_SCALAR_FACTORIES: dict[Any, Callable[[], SqlField]] = {
    str: text,
    int: integer,
    float: floating,
    Decimal: floating,
    bool: boolean,
    dt.date: date,
    dt.datetime: date_time,
    dict: json_text,
    list: json_text,
}


def sql_field(annotation: Any) -> SqlField:
    """Build a field from a plain python annotation.

    ``Optional[X]`` / ``X | None`` produce an optional field of ``X``.

    Raises:
        DomainTypeError: If no SQL type is known for the annotation.
    """
    origin = get_origin(annotation)
    if origin in (Union, types.UnionType):
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1 and len(args) < len(get_args(annotation)):
            return sql_field(args[0]).optional()
        raise DomainTypeError(f"Unable to map union type {annotation!r} to a SQL domain.", annotation)
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        if issubclass(annotation, int):
            return enum_integer(annotation)
        return enum_text(annotation)
    factory = _SCALAR_FACTORIES.get(origin or annotation)
    if factory is None:
        raise DomainTypeError(f"Unable to map type {annotation!r} to a SQL domain.", annotation)
    return factory()
