"""Shared fixtures for Worldweave tests."""

import pytest

from worldweave import Worldweave
from worldweave.engine import CandidatePool, GameGraph, GameWorld, OneWay

# Areas 0..10: two-way clusters joined into one chain by one-way bridges
CLUSTER_EDGES = [
    (1, 2),
    (2, 1),
    (3, 4),
    (4, 3),
    (4, 5),
    (5, 4),
    (3, 5),
    (5, 3),
    (6, 8),
    (8, 6),
    (7, 9),
    (9, 7),
]

BRIDGE_EDGES = [(0, 1), (2, 3), (4, 6), (5, 7), (8, 10), (9, 10)]


@pytest.fixture()
def seed_graph():
    """Completable reference graph rooted at area 0.

    Edges (18):
        0 -> 1, 1 <-> 2, 2 -> 3, 3 <-> 4 <-> 5 <-> 3,
        4 -> 6, 6 <-> 8, 5 -> 7, 7 <-> 9, 8 -> 10, 9 -> 10
    """
    return GameGraph.from_edges(
        [
            (0, 1),
            (1, 2),
            (2, 1),
            (2, 3),
            (3, 4),
            (4, 3),
            (4, 5),
            (5, 4),
            (3, 5),
            (5, 3),
            (4, 6),
            (6, 8),
            (8, 6),
            (5, 7),
            (7, 9),
            (9, 7),
            (8, 10),
            (9, 10),
        ]
    )


def _bridge_world() -> GameWorld:
    graph = GameGraph.from_edges(CLUSTER_EDGES)
    bridges = [OneWay(graph.add_edge(a, b)) for a, b in BRIDGE_EDGES]
    return GameWorld(graph, one_ways=CandidatePool(bridges))


@pytest.fixture()
def make_bridge_world():
    """Factory for independent copies of the bridge world.

    Fixed two-way clusters plus 6 swappable one-way bridges (18 edges).
    """
    return _bridge_world


@pytest.fixture()
def bridge_world():
    return _bridge_world()


@pytest.fixture()
def ww():
    """Fresh, empty Worldweave client."""
    return Worldweave(name="test")


@pytest.fixture()
def bridge_ww():
    """Worldweave client holding the bridge world."""
    ww = Worldweave(name="bridges")
    for a, b in CLUSTER_EDGES:
        ww.passage(a, b)
    for a, b in BRIDGE_EDGES:
        ww.one_way(a, b)
    return ww
