"""Entity graph: tables as nodes, foreign keys as edges.

The graph is a derived view; build it again whenever the set of tables
changes::

    graph = entities_graph(ctx, [author, book])
    [(e.source.entity.table_name, e.ref.entity.table_name) for e in graph.edges]
    # [('book', 'author')]

A foreign key whose target table is not part of the graph is reported as a
lint issue (the default ``"soft"`` policy) or raised as
:class:`~sqlaide.errors.UnresolvedReferenceError` (``"fatal"``).
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, ConfigDict

from sqlaide.ddl.foreign_key import ForeignKeyNature, is_belongs_to
from sqlaide.ddl.table import TableDefinition, table_definitions
from sqlaide.domain.domain import SqlDomain
from sqlaide.emit.lint import SqlLintIssue, SqlLintIssueConsequence
from sqlaide.errors import UnresolvedReferenceError

if TYPE_CHECKING:
    from sqlaide.emit.context import SqlEmitContext

logger = logging.getLogger(__name__)


class EntityGraphPolicy(BaseModel):
    """How graph construction treats missing foreign key targets."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    unresolved_reference: Literal["soft", "fatal"] = "soft"


@dataclass(frozen=True)
class GraphEntityAttrReference:
    entity: TableDefinition
    attr: SqlDomain


@dataclass(frozen=True)
class GraphEdge:
    """``source`` (the FK column) references ``ref`` (the target column)."""

    source: GraphEntityAttrReference
    ref: GraphEntityAttrReference


@dataclass(frozen=True)
class EntityGraphInboundRelationship:
    """A reference arriving at ``to`` from another entity's column."""

    source: GraphEntityAttrReference
    to: TableDefinition
    nature: ForeignKeyNature | None = None

    @property
    def is_belongs_to(self) -> bool:
        return is_belongs_to(self.nature)


@dataclass
class EntityRels:
    entity: TableDefinition
    inbound_rels: list[EntityGraphInboundRelationship] = field(default_factory=list)


@dataclass
class EntityGraph:
    """Entities in insertion order and the references between them."""

    entities: list[TableDefinition] = field(default_factory=list)
    entities_by_name: dict[str, TableDefinition] = field(default_factory=dict)
    entity_rels: dict[str, EntityRels] = field(default_factory=dict)
    edges: list[GraphEdge] = field(default_factory=list)
    lint_issues: list[SqlLintIssue] = field(default_factory=list)

    def inbound_rels(self, entity_name: str) -> list[EntityGraphInboundRelationship]:
        rels = self.entity_rels.get(entity_name)
        return rels.inbound_rels if rels else []


def entities_graph(
    ctx: SqlEmitContext,
    definitions: Iterable[object],
    policy: EntityGraphPolicy | None = None,
) -> EntityGraph:
    """Build the graph of the table definitions among ``definitions``.

    Args:
        ctx: The render context.
        definitions: Any objects; only table definitions become entities
            (a :class:`~sqlaide.catalog.SqlCatalog` may be passed directly).
        policy: Treatment of unresolved references; soft by default.

    Raises:
        UnresolvedReferenceError: If a reference target is missing and the
            policy is ``"fatal"``.
    """
    policy = policy or EntityGraphPolicy()
    graph = EntityGraph()
    for table in table_definitions(definitions):
        graph.entities.append(table)
        graph.entities_by_name[table.table_name] = table
        graph.entity_rels[table.table_name] = EntityRels(table)

    for src in graph.entities:
        for column_name, dest in src.foreign_keys.items():
            target_name = dest.source.table_name
            target = graph.entities_by_name.get(target_name)
            target_attr = target.columns.get(dest.source.column_name) if target else None
            if target is None or target_attr is None:
                available = list(graph.entities_by_name)
                if policy.unresolved_reference == "fatal":
                    raise UnresolvedReferenceError(src.table_name, column_name, target_name, available)
                logger.warning(
                    "entity %r referenced in %s.%s not found in graph",
                    target_name,
                    src.table_name,
                    column_name,
                )
                graph.lint_issues.append(
                    SqlLintIssue(
                        lint_issue=(
                            f"entity '{target_name}' referenced in {src.table_name}.{column_name} "
                            f"not found in graph, available: [{', '.join(available)}]"
                        ),
                        consequence=SqlLintIssueConsequence.WARNING_DDL,
                    )
                )
                continue
            source_ref = GraphEntityAttrReference(src, src.columns[column_name])
            graph.entity_rels[target_name].inbound_rels.append(
                EntityGraphInboundRelationship(source_ref, target, dest.nature)
            )
            graph.edges.append(GraphEdge(source_ref, GraphEntityAttrReference(target, target_attr)))

    logger.debug(
        "entity graph built: %d entities, %d edges, %d issues",
        len(graph.entities),
        len(graph.edges),
        len(graph.lint_issues),
    )
    return graph
