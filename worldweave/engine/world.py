"""Randomized, completability-preserving rewiring of a game world.

Swappable passages come in two kinds:

    - OneWay: a single directed passage a -> b.
    - TwoWay: a matched pair a -> b / b -> a that is always moved together.

Exchanging two connections permutes their endpoints (a -> b, c -> d becomes
a -> d, c -> b). ``build_game`` repeatedly exchanges random pairs and keeps
the result only while the world stays completable.

Example:
    graph = GameGraph.from_edges([(1, 2), (2, 1)])
    pool = CandidatePool([OneWay(graph.add_edge(0, 1)), OneWay(graph.add_edge(2, 3))])
    world = GameWorld(graph, one_ways=pool)
    build_game(world, random.Random(3), 500)
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from .core import EdgeRef, GameGraph, GraphInvariantError, NodeID

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 500


def swap_edges(edge1: EdgeRef, edge2: EdgeRef, graph: GameGraph) -> tuple[EdgeRef, EdgeRef]:
    """Exchange the targets of two edges.

    For edge1 = (a -> b) and edge2 = (c -> d), removes both edges and then
    adds (a -> d) and (c -> b), in that order. Both removals happen before
    either insertion so edges sharing an endpoint never collide.

    Returns:
        EdgeRefs of (a -> d, c -> b)

    Raises:
        GraphInvariantError: If either EdgeRef is not a live edge
    """
    endpoints1 = graph.edge_endpoints(edge1)
    if endpoints1 is None:
        raise GraphInvariantError(f"Edge {edge1} is not live")
    endpoints2 = graph.edge_endpoints(edge2)
    if endpoints2 is None:
        raise GraphInvariantError(f"Edge {edge2} is not live")
    a, b = endpoints1
    c, d = endpoints2

    if not graph.remove_edge(edge1):
        raise GraphInvariantError(f"Failed to remove edge ({a!r}, {b!r})")
    if not graph.remove_edge(edge2):
        raise GraphInvariantError(f"Failed to remove edge ({c!r}, {d!r})")

    new_edge1 = graph.add_edge(a, d)
    new_edge2 = graph.add_edge(c, b)
    return new_edge1, new_edge2


@dataclass(frozen=True)
class OneWay:
    """A single swappable directed passage."""

    idx: EdgeRef

    def exchange(self, other: OneWay, graph: GameGraph) -> tuple[OneWay, OneWay]:
        e1, e2 = swap_edges(self.idx, other.idx, graph)
        return OneWay(e1), OneWay(e2)


@dataclass(frozen=True)
class TwoWay:
    """A swappable bidirectional passage.

    Attributes:
        idx1: Forward edge a -> b
        idx2: Backward edge b -> a
    """

    idx1: EdgeRef
    idx2: EdgeRef

    def exchange(self, other: TwoWay, graph: GameGraph) -> tuple[TwoWay, TwoWay]:
        """Exchange forward edges and backward edges separately, then pair
        each forward result with the opposite backward result.

        a <-> b and c <-> d become a <-> d and c <-> b.
        """
        e1, e2 = swap_edges(self.idx1, other.idx1, graph)
        e3, e4 = swap_edges(self.idx2, other.idx2, graph)
        return TwoWay(e1, e4), TwoWay(e2, e3)


C = TypeVar("C", OneWay, TwoWay)


class CandidatePool(Generic[C]):
    """Insertion-ordered, duplicate-free set of swappable connections."""

    def __init__(self, connections: Iterable[C] = ()) -> None:
        self._members: dict[C, None] = dict.fromkeys(connections)

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[C]:
        return iter(self._members)

    def __contains__(self, connection: object) -> bool:
        return connection in self._members

    def __repr__(self) -> str:
        return f"CandidatePool({list(self._members)!r})"

    def add(self, connection: C) -> None:
        self._members[connection] = None

    def remove(self, connection: C) -> None:
        """Remove a member.

        Raises:
            GraphInvariantError: If the connection is not in the pool
        """
        try:
            del self._members[connection]
        except KeyError:
            raise GraphInvariantError(
                f"Failed to remove {connection!r} from swappable edges"
            ) from None

    def sample_pair(self, rng: random.Random) -> tuple[C, C] | None:
        """Pick two distinct members uniformly, or None if fewer than two.

        Single-pass reservoir sampling over the current contents, so the
        draws consumed from rng depend only on the pool size.
        """
        if len(self._members) < 2:
            return None
        reservoir: list[C] = []
        for i, connection in enumerate(self._members):
            if i < 2:
                reservoir.append(connection)
                continue
            k = rng.randrange(i + 1)
            if k < 2:
                reservoir[k] = connection
        return reservoir[0], reservoir[1]


@dataclass
class RewireStats:
    """Counters for a single build_game() run."""

    attempts: int = 0
    skipped: int = 0
    committed: int = 0
    rolled_back: int = 0


@dataclass
class GameWorld:
    """A game graph plus the connections the engine is allowed to move.

    Edges that are in neither pool are fixed and never touched.
    """

    graph: GameGraph
    one_ways: CandidatePool[OneWay] = field(default_factory=CandidatePool)
    two_ways: CandidatePool[TwoWay] = field(default_factory=CandidatePool)
    last_run: RewireStats | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.one_ways, CandidatePool):
            self.one_ways = CandidatePool(self.one_ways)
        if not isinstance(self.two_ways, CandidatePool):
            self.two_ways = CandidatePool(self.two_ways)

    def check_pools(self) -> None:
        """Verify every pool member resolves to live edges.

        Raises:
            GraphInvariantError: On the first stale EdgeRef
        """
        refs: list[EdgeRef] = [c.idx for c in self.one_ways]
        for c in self.two_ways:
            refs.extend((c.idx1, c.idx2))
        for ref in refs:
            if self.graph.edge_endpoints(ref) is None:
                raise GraphInvariantError(f"Pool references removed edge {ref}")

    def passages(self) -> list[dict[str, Any]]:
        """Every live passage as {source, target, kind}, in EdgeRef order.

        A TwoWay is reported once, at the position of its forward edge.
        """
        one_way_refs = {c.idx for c in self.one_ways}
        forward = {c.idx1 for c in self.two_ways}
        backward = {c.idx2 for c in self.two_ways}

        result: list[dict[str, Any]] = []
        for ref, source, target in self.graph.edges():
            if ref in backward:
                continue
            if ref in one_way_refs:
                kind = "one_way"
            elif ref in forward:
                kind = "two_way"
            else:
                kind = "fixed"
            result.append({"source": source, "target": target, "kind": kind})
        return result

    def add_passage(self, source: NodeID, target: NodeID, kind: str = "fixed") -> None:
        """Add a passage of the given kind ("fixed", "one_way" or "two_way")."""
        if kind == "fixed":
            self.graph.add_edge(source, target)
        elif kind == "one_way":
            self.one_ways.add(OneWay(self.graph.add_edge(source, target)))
        elif kind == "two_way":
            forward = self.graph.add_edge(source, target)
            backward = self.graph.add_edge(target, source)
            self.two_ways.add(TwoWay(forward, backward))
        else:
            raise ValueError(
                f"Passage kind must be 'fixed', 'one_way', or 'two_way', got: {kind!r}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {"passages": self.passages()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameWorld:
        """Rebuild a world from to_dict() output or a hand-written seed file."""
        world = cls(GameGraph())
        for passage in data.get("passages", []):
            world.add_passage(passage["source"], passage["target"], passage.get("kind", "fixed"))
        return world


def _try_swap(
    graph: GameGraph, pool: CandidatePool[C], rng: random.Random, stats: RewireStats
) -> None:
    pair = pool.sample_pair(rng)
    if pair is None:
        stats.skipped += 1
        return

    edge1, edge2 = pair
    stats.attempts += 1
    new_edge1, new_edge2 = edge1.exchange(edge2, graph)

    if graph.is_completable():
        pool.remove(edge1)
        pool.remove(edge2)
        pool.add(new_edge1)
        pool.add(new_edge2)
        stats.committed += 1
        logger.debug("Committed swap %r, %r -> %r, %r", edge1, edge2, new_edge1, new_edge2)
        return

    restored1, restored2 = new_edge1.exchange(new_edge2, graph)
    stats.rolled_back += 1
    if (restored1, restored2) != (edge1, edge2):
        # Allocator handed back different refs; keep the pool pointing at live edges
        pool.remove(edge1)
        pool.remove(edge2)
        pool.add(restored1)
        pool.add(restored2)
    logger.debug("Rolled back swap %r, %r", edge1, edge2)


def build_game(game_world: GameWorld, rng: random.Random, iterations: int) -> GameWorld:
    """Shuffle the world's swappable connections while keeping it completable.

    Each iteration draws one boolean to pick the OneWay or TwoWay pool, then
    samples two members, exchanges them, and keeps the exchange only if the
    graph is still completable. Pools with fewer than two members make the
    iteration a no-op.

    Args:
        game_world: World to mutate in place
        rng: Random source; a fixed seed gives a reproducible result
        iterations: Number of iterations to run

    Returns:
        The same GameWorld, mutated

    Raises:
        GameUnbeatableError: If the initial graph is not completable. No
            mutation happens in that case.
    """
    if iterations < 0:
        raise ValueError(f"iterations must be non-negative, got: {iterations}")

    game_world.graph.game_beatable()

    stats = RewireStats()
    for _ in range(iterations):
        if rng.random() < 0.5:
            _try_swap(game_world.graph, game_world.one_ways, rng, stats)
        else:
            _try_swap(game_world.graph, game_world.two_ways, rng, stats)

    game_world.last_run = stats
    logger.info(
        "Built world in %d iterations: %d committed, %d rolled back, %d skipped",
        iterations,
        stats.committed,
        stats.rolled_back,
        stats.skipped,
    )
    return game_world
