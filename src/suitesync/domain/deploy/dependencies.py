"""Dependency information for one SDF deploy group.

Built once from the full batch before the first submission:

- ``dependency_map`` maps every changed element to the script ids its payloads
  reference, whether or not those objects are part of the batch
- ``dependency_graph`` has an edge ``A -> B`` when B references A and A is being
  created; references to objects that already exist impose no ordering
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, replace
from logging import getLogger
from typing import TYPE_CHECKING, Any

from suitesync.domain.model import (
    CUSTOM_RECORD_FIELDS,
    CUSTOM_RECORD_TYPE,
    SCRIPT_ID,
    ChangeKind,
    Field,
    get_script_id,
    is_addition_or_modification,
)

from .graph import Graph, GraphNode

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from suitesync.domain.model import Change
    from suitesync.domain.ports import CustomizationInfo, ReferenceExtractor, Serializer

log = getLogger(__name__)

ELEM_ID_KEY = "elem_full_name"


@dataclass(frozen=True, slots=True)
class ObjectNode:
    elem_full_name: str
    scriptid: str | None
    change_kind: ChangeKind
    payloads: tuple[CustomizationInfo, ...]


@dataclass(frozen=True, slots=True)
class DependencyInfo:
    dependency_map: Mapping[str, frozenset[str]]
    dependency_graph: Graph[ObjectNode]

    def payloads_for(self, elem_full_name: str) -> tuple[CustomizationInfo, ...] | None:
        node = self.dependency_graph.find_by_key(elem_full_name)
        return None if node is None else node.value.payloads

    def transitive_dependents(self, elem_full_names: Iterable[str]) -> set[str]:
        """Expand element names to themselves plus everything depending on them.

        Names without a node in the graph are ignored.
        """

        graph = self.dependency_graph
        expanded: set[str] = set()
        for name in elem_full_names:
            node = graph.find_by_key(name)
            if node is None:
                continue
            expanded.update(
                dependent.value.elem_full_name
                for dependent in graph.get_transitive_dependents(node)
            )
        return expanded


def with_field_definitions(
    payloads: Sequence[CustomizationInfo],
    field_changes: Iterable[Change],
) -> tuple[CustomizationInfo, ...]:
    """Fold changed field definitions into the record type payload, keyed by field name."""

    definitions: dict[str, dict[str, Any]] = {}
    for change in field_changes:
        element = change.data
        if isinstance(element, Field) and is_addition_or_modification(change):
            definitions[element.name] = copy.deepcopy(element.annotations)
    if not definitions:
        return tuple(payloads)

    folded: list[CustomizationInfo] = []
    for payload in payloads:
        if payload.type_name != CUSTOM_RECORD_TYPE:
            folded.append(payload)
            continue
        values = dict(payload.values)
        values[CUSTOM_RECORD_FIELDS] = {**values.get(CUSTOM_RECORD_FIELDS, {}), **definitions}
        folded.append(replace(payload, values=values))
    return tuple(folded)


def build_object_nodes(
    changes: Iterable[Change],
    *,
    serialize: Serializer,
    field_changes_by_parent: Mapping[str, Sequence[Change]] | None = None,
) -> list[ObjectNode]:
    field_changes_by_parent = field_changes_by_parent or {}
    nodes: list[ObjectNode] = []
    for change in changes:
        if not is_addition_or_modification(change):
            continue
        element = change.data
        elem_full_name = element.elem_id.full_name
        nodes.append(
            ObjectNode(
                elem_full_name=elem_full_name,
                scriptid=get_script_id(element),
                change_kind=change.kind,
                payloads=with_field_definitions(
                    serialize(element), field_changes_by_parent.get(elem_full_name, ())
                ),
            )
        )
    return nodes


def build_dependency_info(
    changes: Iterable[Change],
    *,
    serialize: Serializer,
    extract_references: ReferenceExtractor,
    field_changes_by_parent: Mapping[str, Sequence[Change]] | None = None,
) -> DependencyInfo:
    """Build nodes and edges for ``changes``.

    Field changes in ``field_changes_by_parent`` are folded into their record
    type's payload, so references inside field definitions create edges too.
    """

    object_nodes = build_object_nodes(
        changes,
        serialize=serialize,
        field_changes_by_parent=field_changes_by_parent,
    )
    graph = Graph[ObjectNode](
        ELEM_ID_KEY,
        (GraphNode(object_node) for object_node in object_nodes),
        index_fields=(SCRIPT_ID,),
    )

    dependency_map: dict[str, frozenset[str]] = {}
    for end_node in graph:
        referenced: set[str] = set()
        for payload in end_node.value.payloads:
            for script_id in extract_references(payload):
                referenced.add(script_id)
                start_node = graph.find_by_field(SCRIPT_ID, script_id)
                if (
                    start_node is not None
                    and start_node is not end_node
                    and start_node.value.change_kind is ChangeKind.ADDITION
                ):
                    graph.add_edge(start_node, end_node)
        dependency_map[end_node.value.elem_full_name] = frozenset(referenced)

    log.debug(
        "built dependency graph: nodes=%d, edges=%d",
        len(graph),
        sum(1 for _ in graph.edges()),
    )
    return DependencyInfo(dependency_map=dependency_map, dependency_graph=graph)
