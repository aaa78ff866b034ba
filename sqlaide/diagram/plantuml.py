"""PlantUML information-engineering (IE) entity relationship diagrams.

Example::

    diagram = plantuml_ie_notation(ctx, [author, book])
    print(diagram.content)
    # @startuml IE
    #   ...
    #   entity "author" as author {
    #       **author_id**: INTEGER
    #     --
    #     * name: TEXT
    #     --
    #     books: Book[]
    #   }
    #   ...
    #   author |o..o{ book
    # @enduml
"""
from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from sqlaide.ddl.foreign_key import BelongsTo
from sqlaide.ddl.table import TableDefinition
from sqlaide.emit.context import SqlEmitContext
from sqlaide.emit.naming import SqlObjectNames
from sqlaide.graph import (
    EntityGraph,
    EntityGraphInboundRelationship,
    EntityGraphPolicy,
    GraphEdge,
    GraphEntityAttrReference,
    entities_graph,
)

_HEADER = [
    "  hide circle",
    "  skinparam linetype ortho",
    "  skinparam roundcorner 20",
    "  skinparam class {",
    "    BackgroundColor White",
    "    ArrowColor Silver",
    "    BorderColor Silver",
    "    FontColor Black",
    "    FontSize 12",
    "  }",
]


def _always(_: Any) -> bool:
    return True


def _zero_or_one_to_many(_: GraphEdge) -> str | None:
    return "|o..o{"


class PlantUmlIeOptions(BaseModel):
    """What the diagram includes and how relationships are drawn.

    Attributes:
        diagram_name: Name after ``@startuml``.
        include_entity: ``(table) -> bool``.
        include_entity_attr: ``(GraphEntityAttrReference) -> bool``.
        include_relationship: ``(GraphEdge) -> bool``.
        include_children: ``(EntityGraphInboundRelationship) -> bool``; only
            ``BelongsTo`` relationships are ever drawn as children.
        relationship_indicator: ``(GraphEdge) -> indicator``; a falsy
            indicator skips the relationship line.
        elaborate_entity_attr: ``(attr_ref, entity_by_name, names) -> text``
            appended to an attribute line.
        graph_policy: Treatment of unresolved references.
    """

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    diagram_name: str = "IE"
    include_entity: Callable[[TableDefinition], bool] = _always
    include_entity_attr: Callable[[GraphEntityAttrReference], bool] = _always
    include_relationship: Callable[[GraphEdge], bool] = _always
    include_children: Callable[[EntityGraphInboundRelationship], bool] = _always
    relationship_indicator: Callable[[GraphEdge], Any] = _zero_or_one_to_many
    elaborate_entity_attr: Callable[..., str] | None = None
    graph_policy: EntityGraphPolicy = Field(default_factory=EntityGraphPolicy)


@dataclass(frozen=True)
class PlantUmlDiagram:
    graph: EntityGraph
    content: str


def _attr_puml(
    ctx: SqlEmitContext,
    graph: EntityGraph,
    ns: SqlObjectNames,
    options: PlantUmlIeOptions,
    ea: GraphEntityAttrReference,
) -> str:
    name = ns.table_column_name(ea.entity.table_name, ea.attr.identity)
    if ea.attr.is_primary_key:
        name = f"**{name}**"
    required = " " if ea.attr.is_nullable() else "*"
    descr = ""
    if options.elaborate_entity_attr is not None:
        descr = options.elaborate_entity_attr(ea, graph.entities_by_name.get, ns) or ""
    return f"    {required} {name}: {ea.attr.sql_data_type('diagram').sql(ctx)}{descr}"


def _entity_puml(
    ctx: SqlEmitContext,
    graph: EntityGraph,
    ns: SqlObjectNames,
    options: PlantUmlIeOptions,
    entity: TableDefinition,
) -> list[str]:
    columns: list[str] = []
    attrs = [GraphEntityAttrReference(entity, d) for d in entity.domains]
    # primary keys first, each followed by a separator
    for ea in attrs:
        if ea.attr.is_primary_key and options.include_entity_attr(ea):
            columns.append(_attr_puml(ctx, graph, ns, options, ea))
            columns.append("    --")
    for ea in attrs:
        if not ea.attr.is_primary_key and options.include_entity_attr(ea):
            columns.append(_attr_puml(ctx, graph, ns, options, ea))

    children: list[str] = []
    for ir in graph.inbound_rels(entity.table_name):
        if not isinstance(ir.nature, BelongsTo) or not options.include_children(ir):
            continue
        plural, singular = ir.nature.collection_name(ir.source.entity.table_name)
        children.append(f"    {plural}: {singular}[]")
    if children:
        children.insert(0, "    --")

    table_name = ns.table_name(entity.table_name)
    return ["", f'  entity "{table_name}" as {table_name} {{', *columns, *children, "  }"]


def _relationships_puml(graph: EntityGraph, ns: SqlObjectNames, options: PlantUmlIeOptions) -> list[str]:
    result: list[str] = []
    for edge in graph.edges:
        if not options.include_relationship(edge):
            continue
        indicator = options.relationship_indicator(edge)
        if indicator:
            result.append(
                f"  {ns.table_name(edge.ref.entity.table_name)} {indicator} "
                f"{ns.table_name(edge.source.entity.table_name)}"
            )
    if result:
        result.insert(0, "")
    return result


def plantuml_ie_notation(
    ctx: SqlEmitContext,
    definitions: Iterable[object],
    options: PlantUmlIeOptions | None = None,
    **option_fields: Any,
) -> PlantUmlDiagram:
    """Render the tables among ``definitions`` as a PlantUML IE diagram.

    Entities appear in the order given; relationship lines follow, one per
    foreign key whose target is part of the diagram.

    Raises:
        UnresolvedReferenceError: If ``options.graph_policy`` is fatal and
            a reference target is missing.
    """
    options = options or PlantUmlIeOptions(**option_fields)
    definitions = list(definitions)
    graph = entities_graph(ctx, definitions, options.graph_policy)
    ns = ctx.naming()

    lines = [f"@startuml {options.diagram_name}", *_HEADER]
    for entity in graph.entities:
        if options.include_entity(entity):
            lines.extend(_entity_puml(ctx, graph, ns, options, entity))
    lines.extend(_relationships_puml(graph, ns, options))
    lines.append("@enduml")
    return PlantUmlDiagram(graph, "\n".join(lines))
