"""Directed graph over keyed values.

Nodes live in an arena and are addressed by their slot. Two kinds of index are
kept alongside the arena and updated on every insert:

- the primary index maps ``key_field`` values to slots
- one secondary index per ``index_fields`` entry maps that field's values to slots

Edges point from a node to the nodes that depend on it.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Iterator


@dataclass(eq=False, slots=True)
class GraphNode[T]:
    value: T
    slot: int = field(default=-1, repr=False)


class Graph[T]:
    def __init__(
        self,
        key_field: str,
        nodes: Iterable[GraphNode[T]] = (),
        *,
        index_fields: Iterable[str] = (),
    ) -> None:
        self.key_field = key_field
        self._nodes: list[GraphNode[T]] = []
        self._edges: list[set[int]] = []
        self._index: dict[Hashable, int] = {}
        self._field_indexes: dict[str, dict[Hashable, int]] = {
            name: {} for name in index_fields
        }
        self.insert(nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[GraphNode[T]]:
        return iter(self._nodes)

    def insert(self, nodes: Iterable[GraphNode[T]]) -> None:
        """Add nodes to the arena; a node whose key is already present is skipped."""

        for node in nodes:
            key = getattr(node.value, self.key_field)
            if key in self._index:
                continue
            node.slot = len(self._nodes)
            self._nodes.append(node)
            self._edges.append(set())
            self._index[key] = node.slot
            for name, index in self._field_indexes.items():
                value = getattr(node.value, name)
                if value is not None:
                    index.setdefault(value, node.slot)

    def find_by_key(self, key: Hashable) -> GraphNode[T] | None:
        slot = self._index.get(key)
        return None if slot is None else self._nodes[slot]

    def find_by_field(self, field_name: str, value: Hashable) -> GraphNode[T] | None:
        index = self._field_indexes.get(field_name)
        if index is None:
            raise KeyError(f"Field {field_name!r} is not indexed")
        slot = index.get(value)
        return None if slot is None else self._nodes[slot]

    def add_edge(self, source: GraphNode[T], target: GraphNode[T]) -> None:
        """Record that ``target`` depends on ``source``."""

        self._assert_member(source)
        self._assert_member(target)
        self._edges[source.slot].add(target.slot)

    def dependents_of(self, node: GraphNode[T]) -> tuple[GraphNode[T], ...]:
        self._assert_member(node)
        return tuple(self._nodes[slot] for slot in sorted(self._edges[node.slot]))

    def edges(self) -> Iterator[tuple[GraphNode[T], GraphNode[T]]]:
        for slot, targets in enumerate(self._edges):
            for target in sorted(targets):
                yield self._nodes[slot], self._nodes[target]

    def get_transitive_dependents(self, node: GraphNode[T]) -> tuple[GraphNode[T], ...]:
        """Return ``node`` and every node reachable from it, in breadth-first order.

        Cycles are allowed between objects that already exist in the account.
        """

        self._assert_member(node)
        visited = {node.slot}
        order = [node.slot]
        queue = deque([node.slot])
        while queue:
            current = queue.popleft()
            for target in sorted(self._edges[current]):
                if target in visited:
                    continue
                visited.add(target)
                order.append(target)
                queue.append(target)
        return tuple(self._nodes[slot] for slot in order)

    def _assert_member(self, node: GraphNode[T]) -> None:
        if not (0 <= node.slot < len(self._nodes)) or self._nodes[node.slot] is not node:
            raise ValueError(f"Node is not part of this graph: {node.value!r}")
