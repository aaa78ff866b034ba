"""Shapes: ordered collections of named fields."""
from __future__ import annotations

from collections.abc import Mapping
from functools import cached_property
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, create_model

from sqlaide.domain.domain import SqlDomain, SqlField, sql_field
from sqlaide.emit.supplier import SqlSymbolSupplier

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext

#: A shape maps identities to fields; plain python annotations are accepted
#: and converted with :func:`sql_field`.
Shape = Mapping[str, Any]


class SqlDomainSymbol(SqlSymbolSupplier):
    """The rendered column name of one domain."""

    def __init__(self, domain: SqlDomain) -> None:
        self.domain = domain

    def sql_symbol(self, ctx: SqlEmitContext) -> str:
        return self.domain.sql_symbol(ctx)


class SqlDomains:
    """Fields of a shape bound to their keys.

    Args:
        shape: Mapping of identity to :class:`SqlField` (or annotation).
        model_name: Name used for the generated pydantic model.
    """

    def __init__(self, shape: Shape, model_name: str = "SqlDomains") -> None:
        self.model_name = model_name
        self.fields: dict[str, SqlField] = {}
        for identity, value in shape.items():
            f = value if isinstance(value, SqlField) else sql_field(value)
            self.fields[identity] = f.bind(identity)

    @property
    def domains(self) -> list[SqlDomain]:
        return [f.domain for f in self.fields.values()]

    @property
    def symbols(self) -> dict[str, SqlDomainSymbol]:
        return {identity: SqlDomainSymbol(f.domain) for identity, f in self.fields.items()}

    @cached_property
    def _model(self) -> type[BaseModel]:
        definitions = {
            identity: (f.annotation, f.field_info()) for identity, f in self.fields.items()
        }
        return create_model(
            self.model_name,
            __config__=ConfigDict(extra="forbid"),
            **definitions,
        )

    def validation_model(self) -> type[BaseModel]:
        """Return a pydantic model that validates records of this shape."""
        return self._model

    def __contains__(self, identity: object) -> bool:
        return identity in self.fields

    def __getitem__(self, identity: str) -> SqlField:
        return self.fields[identity]

    def __iter__(self):
        return iter(self.fields.values())

    def __len__(self) -> int:
        return len(self.fields)


def sql_domains(shape: Shape, model_name: str = "SqlDomains") -> SqlDomains:
    return SqlDomains(shape, model_name)
