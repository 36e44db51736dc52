"""Core game-graph data structures and completability analysis.

A directed multigraph of areas (nodes) and passages (edges) with stable
edge references, plus strongly-connected-component condensation used to
decide whether a world can be completed from a single starting region.

Node identifiers are opaque caller values: anything hashable and
orderable (ints and strings in practice). Internally nodes live in a dense
slot store and edges in a slot store addressed by ``EdgeRef`` integers.

EdgeRef allocation contract:
    Freed edge slots are reused in strict last-in-first-out order. Removing
    edges ``x`` then ``y`` and adding two new edges hands back ``y`` then
    ``x``. The rewiring engine relies on this so that exchanging a pair of
    connections twice restores the original EdgeRefs, not just the
    original endpoints.

Thread Safety:
    Not thread-safe. A graph is owned by a single generation run at a time.
"""

from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field
from typing import Any

NodeID = Hashable
EdgeRef = int


class GameUnbeatableError(ValueError):
    """The seed graph cannot be completed from a single root region.

    Attributes:
        nodes: NodeIDs of every area in every root component of the
            condensation (components with no incoming passage).
    """

    def __init__(self, nodes: list[NodeID]) -> None:
        self.nodes = list(nodes)
        super().__init__(
            "Input game graph is unbeatable. Change the input data so that the game "
            f"can be completed.\nThe source scc nodes are: {self.nodes!r}"
        )


class GraphInvariantError(RuntimeError):
    """An internal invariant was violated (stale EdgeRef, pool/graph desync).

    Signals a bug in the caller or the engine, never a recoverable condition.
    """


@dataclass
class Condensation:
    """Acyclic graph of strongly connected components.

    Attributes:
        components: NodeIDs of each component. Components are ordered by the
            insertion position of their earliest node, and NodeIDs within a
            component are in insertion order.
        edges: Pairs of component indexes (source, target) for every passage
            that crosses between two different components.
    """

    components: list[list[NodeID]] = field(default_factory=list)
    edges: set[tuple[int, int]] = field(default_factory=set)

    def roots(self) -> list[int]:
        """Indexes of components with no incoming condensed edge."""
        has_incoming = {target for _, target in self.edges}
        return [i for i in range(len(self.components)) if i not in has_incoming]

    def root_nodes(self) -> list[NodeID]:
        """Flattened NodeIDs of all root components."""
        return [node for i in self.roots() for node in self.components[i]]


class GameGraph:
    """Directed multigraph of game areas with stable edge references.

    Nodes are created implicitly the first time an edge mentions them and
    are never removed. Parallel edges and self-loops are allowed; each edge
    is addressed by its own EdgeRef, which stays valid until that edge is
    removed.
    """

    def __init__(self) -> None:
        self._nodes: list[NodeID] = []
        self._node_slots: dict[NodeID, int] = {}
        # Edge slot store: None marks a freed slot
        self._edges: list[tuple[int, int] | None] = []
        # Freed slots, reused from the top (LIFO)
        self._free: list[int] = []
        self._edge_count = 0

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[NodeID, NodeID]]) -> "GameGraph":
        """Build a graph from (source, target) pairs, creating nodes lazily."""
        graph = cls()
        for a, b in edges:
            graph.add_edge(a, b)
        return graph

    # ========== Node Operations ==========

    def _slot(self, node_id: NodeID) -> int:
        slot = self._node_slots.get(node_id)
        if slot is None:
            slot = len(self._nodes)
            self._nodes.append(node_id)
            self._node_slots[node_id] = slot
        return slot

    def has_node(self, node_id: NodeID) -> bool:
        return node_id in self._node_slots

    def nodes(self) -> list[NodeID]:
        """All NodeIDs in insertion order."""
        return list(self._nodes)

    def node_count(self) -> int:
        return len(self._nodes)

    def out_degree(self, node_id: NodeID) -> int:
        slot = self._node_slots.get(node_id)
        if slot is None:
            return 0
        return sum(1 for e in self._edges if e is not None and e[0] == slot)

    def in_degree(self, node_id: NodeID) -> int:
        slot = self._node_slots.get(node_id)
        if slot is None:
            return 0
        return sum(1 for e in self._edges if e is not None and e[1] == slot)

    # ========== Edge Operations ==========

    def add_edge(self, a: NodeID, b: NodeID) -> EdgeRef:
        """Insert a directed edge a -> b and return its EdgeRef.

        Unseen NodeIDs are added as nodes. Reuses the most recently freed
        edge slot if there is one.
        """
        endpoints = (self._slot(a), self._slot(b))
        if self._free:
            ref = self._free.pop()
            self._edges[ref] = endpoints
        else:
            ref = len(self._edges)
            self._edges.append(endpoints)
        self._edge_count += 1
        return ref

    def remove_edge(self, ref: EdgeRef) -> bool:
        """Remove an edge. Returns True if it was live, False otherwise.

        Nodes are kept even if they become edge-less.
        """
        if not 0 <= ref < len(self._edges) or self._edges[ref] is None:
            return False
        self._edges[ref] = None
        self._free.append(ref)
        self._edge_count -= 1
        return True

    def edge_endpoints(self, ref: EdgeRef) -> tuple[NodeID, NodeID] | None:
        """Current (source, target) of a live edge, or None."""
        if not 0 <= ref < len(self._edges):
            return None
        endpoints = self._edges[ref]
        if endpoints is None:
            return None
        return (self._nodes[endpoints[0]], self._nodes[endpoints[1]])

    def edge_count(self) -> int:
        return self._edge_count

    def edge_refs(self) -> list[EdgeRef]:
        """EdgeRefs of all live edges, in ascending slot order."""
        return [ref for ref, e in enumerate(self._edges) if e is not None]

    def edges(self) -> list[tuple[EdgeRef, NodeID, NodeID]]:
        """All live edges as (ref, source, target)."""
        return [
            (ref, self._nodes[e[0]], self._nodes[e[1]])
            for ref, e in enumerate(self._edges)
            if e is not None
        ]

    # ========== Completability ==========

    def condensation(self) -> Condensation:
        return condensation(self)

    def game_beatable(self) -> None:
        """Raise GameUnbeatableError unless exactly one root component exists."""
        condensed = condensation(self)
        roots = condensed.roots()
        if len(roots) != 1:
            raise GameUnbeatableError(condensed.root_nodes())

    def is_completable(self) -> bool:
        """Non-raising form of game_beatable()."""
        return len(condensation(self).roots()) == 1

    # ========== Serialization ==========

    def to_dict(self) -> dict[str, Any]:
        """Export slot-level state, free-slot stack included."""
        return {
            "nodes": list(self._nodes),
            "edges": [list(e) if e is not None else None for e in self._edges],
            "free": list(self._free),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "GameGraph":
        """Restore a graph exported by to_dict(), preserving every EdgeRef."""
        graph = cls()
        for node_id in data["nodes"]:
            graph._slot(node_id)
        for e in data["edges"]:
            if e is None:
                graph._edges.append(None)
            else:
                graph._edges.append((e[0], e[1]))
                graph._edge_count += 1
        graph._free = list(data.get("free", []))
        return graph


def _adjacency(graph: GameGraph) -> list[list[int]]:
    adjacency: list[list[int]] = [[] for _ in graph._nodes]
    for e in graph._edges:
        if e is not None:
            adjacency[e[0]].append(e[1])
    return adjacency


def _strongly_connected(adjacency: list[list[int]]) -> list[int]:
    """Tarjan's algorithm, iterative. Returns a component label per slot.

    Labels are assigned in the order components are completed, which is a
    reverse topological order of the condensation.
    """
    n = len(adjacency)
    index = [-1] * n
    lowlink = [0] * n
    on_stack = [False] * n
    component = [-1] * n
    stack: list[int] = []
    counter = 0
    label = 0

    for start in range(n):
        if index[start] != -1:
            continue
        # Work stack of (slot, next neighbour position)
        work: list[tuple[int, int]] = [(start, 0)]
        index[start] = lowlink[start] = counter
        counter += 1
        stack.append(start)
        on_stack[start] = True

        while work:
            v, pos = work[-1]
            neighbours = adjacency[v]
            if pos < len(neighbours):
                work[-1] = (v, pos + 1)
                w = neighbours[pos]
                if index[w] == -1:
                    index[w] = lowlink[w] = counter
                    counter += 1
                    stack.append(w)
                    on_stack[w] = True
                    work.append((w, 0))
                elif on_stack[w]:
                    lowlink[v] = min(lowlink[v], index[w])
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[v])
            if lowlink[v] == index[v]:
                while True:
                    w = stack.pop()
                    on_stack[w] = False
                    component[w] = label
                    if w == v:
                        break
                label += 1

    return component


def condensation(graph: GameGraph) -> Condensation:
    """Collapse each strongly connected component of the graph into one node.

    Self-loops and intra-component edges are dropped, so the result is a DAG.
    Runs in O(nodes + edges).
    """
    labels = _strongly_connected(_adjacency(graph))

    # Renumber components by the first slot (insertion order) they contain
    order: dict[int, int] = {}
    components: list[list[NodeID]] = []
    for slot, label in enumerate(labels):
        if label not in order:
            order[label] = len(components)
            components.append([])
        components[order[label]].append(graph._nodes[slot])

    edges: set[tuple[int, int]] = set()
    for e in graph._edges:
        if e is None:
            continue
        source, target = order[labels[e[0]]], order[labels[e[1]]]
        if source != target:
            edges.add((source, target))

    return Condensation(components=components, edges=edges)
