"""Foreign keys: placeholders, sources, destinations and their resolution.

References are resolved in two phases.  Declaring a reference returns a
field carrying a *placeholder* that names its target by ``table_name`` and
``column_name`` only::

    book = table_definition("book", {
        "book_id": auto_inc_primary_key(),
        "author_id": author.references("author_id"),    # forward reference
        "series_id": forward_ref("series", "series_id", integer()),
        "sequel_of": self_ref("book_id").optional(),    # self reference
    })

When the owning table is finalized, :func:`resolve_foreign_keys` turns every
placeholder into a :class:`ForeignKeyDestination` attached to the column's
domain, together with the ``FOREIGN KEY(...) REFERENCES ...`` fragment that
is emitted after all column definitions.  Because targets are addressed by
name, a table may reference itself or a table that is defined later.
"""
from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Union

from sqlaide.domain.domain import SqlDomain, SqlField
from sqlaide.emit.supplier import SqlTextSupplier
from sqlaide.errors import TableDefinitionError

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Relationship natures
# ---------------------------------------------------------------------------


def _snake_words(name: str) -> list[str]:
    return [w for w in name.split("_") if w]


def camel_case(name: str) -> str:
    words = _snake_words(name)
    if not words:
        return name
    return words[0].lower() + "".join(w.capitalize() for w in words[1:])


def pascal_case(name: str) -> str:
    return "".join(w.capitalize() for w in _snake_words(name)) or name


@dataclass(frozen=True)
class BelongsTo:
    """The referencing table is a child collection of the referenced one.

    Attributes:
        singular: snake_case collection member name; defaults to the
            referencing table name.
        plural: snake_case collection name; defaults to ``singular + "s"``.
    """

    singular: str | None = None
    plural: str | None = None

    def collection_name(self, default_singular: str) -> tuple[str, str]:
        """Return ``(plural member name, singular type name)`` for diagrams."""
        singular = self.singular or default_singular
        plural = self.plural or f"{singular}s"
        return camel_case(plural), pascal_case(singular)


@dataclass(frozen=True)
class SelfRef:
    pass


@dataclass(frozen=True)
class Extends:
    pass


@dataclass(frozen=True)
class Inherits:
    pass


ForeignKeyNature = Union[BelongsTo, SelfRef, Extends, Inherits]


def is_belongs_to(nature: object) -> bool:
    return isinstance(nature, BelongsTo)


# ---------------------------------------------------------------------------
# Sources, placeholders, destinations
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class ForeignKeySource:
    """A column other columns can reference.

    Attributes:
        table_name: Owning table.
        column_name: Referenced column.
        incoming_refs: Destinations registered as tables referencing this
            column are finalized.
    """

    table_name: str
    column_name: str
    incoming_refs: list[ForeignKeyDestination] = field(default_factory=list)

    def register(self, destination: ForeignKeyDestination) -> None:
        if destination not in self.incoming_refs:
            self.incoming_refs.append(destination)


@dataclass(frozen=True)
class ForeignKeyPlaceholder:
    """Phase one of a reference: the target by name, nothing else.

    ``source`` is set when the placeholder was created from a defined
    table so the finalized destination can be registered on it.
    """

    table_name: str
    column_name: str
    nature: ForeignKeyNature | None = None
    source: ForeignKeySource | None = None


@dataclass(frozen=True)
class SelfRefPlaceholder:
    """Phase one of a reference to a column of the table being defined."""

    column_name: str
    nature: ForeignKeyNature | None = SelfRef()


@dataclass(frozen=True, eq=False)
class ForeignKeyDestination(SqlTextSupplier):
    """A finalized foreign key column and the column it references.

    Renders as the ``FOREIGN KEY(...) REFERENCES ...`` clause placed after
    all column definitions.
    """

    table_name: str
    column_name: str
    source: ForeignKeySource
    nature: ForeignKeyNature | None = None

    @property
    def is_self_ref(self) -> bool:
        return self.source.table_name == self.table_name

    def sql(self, ctx: SqlEmitContext) -> str:
        ns = ctx.naming(quote_identifiers=True)
        return (
            f"FOREIGN KEY({ns.table_column_name(self.table_name, self.column_name)}) "
            f"REFERENCES {ns.table_name(self.source.table_name)}"
            f"({ns.table_column_name(self.source.table_name, self.source.column_name)})"
        )

    def __repr__(self) -> str:
        return (
            f"ForeignKeyDestination({self.table_name}.{self.column_name} -> "
            f"{self.source.table_name}.{self.source.column_name})"
        )


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def _reference_field(target: SqlField, reference: Any) -> SqlField:
    # References keep only the target's type: never a key, default or decorator.
    return SqlField(
        annotation=target.base_annotation,
        domain=SqlDomain(data_type=target.domain.data_type),
        reference=reference,
    )


def forward_ref(
    table_name: str,
    column_name: str,
    target: SqlField,
    nature: ForeignKeyNature | None = None,
    source: ForeignKeySource | None = None,
) -> SqlField:
    """A reference to ``table_name.column_name`` whose type matches ``target``.

    The referenced table does not need to exist yet.
    """
    placeholder = ForeignKeyPlaceholder(table_name, column_name, nature, source)
    return _reference_field(target, placeholder)


def self_ref(column_name: str, nature: ForeignKeyNature | None = None) -> SqlField:
    """A reference to ``column_name`` of the table this field is placed in.

    The column's type is copied from the referenced column when the table is
    finalized.
    """
    return SqlField(
        annotation=Any,
        domain=SqlDomain(data_type="SELF_REF"),
        reference=SelfRefPlaceholder(column_name, nature or SelfRef()),
    )


def resolve_foreign_keys(
    table_name: str,
    fields: dict[str, SqlField],
    sources: dict[str, ForeignKeySource] | None = None,
) -> dict[str, SqlField]:
    """Phase two: turn placeholders in ``fields`` into finalized FK columns.

    Args:
        table_name: The table being finalized; target of self references.
        fields: Bound fields of the table, in declaration order.
        sources: The table's own referenceable columns; self references
            register on them.

    Returns:
        A new mapping in the same order with every reference resolved.

    Raises:
        TableDefinitionError: If a self reference names a missing column.
    """
    resolved: dict[str, SqlField] = {}
    for identity, f in fields.items():
        ref = f.reference
        if ref is None:
            resolved[identity] = f
            continue
        if isinstance(ref, SelfRefPlaceholder):
            target = fields.get(ref.column_name)
            if target is None:
                raise TableDefinitionError(
                    f"Self reference in '{table_name}.{identity}' names unknown "
                    f"column '{ref.column_name}'.",
                    table_name,
                    [ref.column_name],
                )
            f = dataclasses.replace(
                f,
                annotation=(
                    Optional[target.base_annotation] if f.domain.is_optional else target.base_annotation
                ),
                base_annotation=target.base_annotation,
                domain=f.domain.evolve(data_type=target.domain.data_type),
            )
            source = (sources or {}).get(ref.column_name) or ForeignKeySource(table_name, ref.column_name)
            nature = ref.nature
        else:
            source = ref.source or ForeignKeySource(ref.table_name, ref.column_name)
            nature = ref.nature
        destination = ForeignKeyDestination(table_name, identity, source, nature)
        source.register(destination)
        logger.debug("resolved foreign key %r", destination)
        resolved[identity] = f.with_domain(
            foreign_key=destination,
            after_column_defns=(*f.domain.after_column_defns, destination),
        )
    return resolved
