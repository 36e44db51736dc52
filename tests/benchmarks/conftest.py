"""Benchmark fixtures for world generation performance tests."""

import random

import pytest

from worldweave.engine import GameGraph, GameWorld


def generate_random_world(
    num_clusters: int,
    cluster_size: int = 4,
    two_way_ratio: float = 0.5,
    seed: int = 42,
) -> GameWorld:
    """Generate a completable world for benchmarking.

    Clusters are rings of fixed two-way passages. Cluster i is linked to
    cluster i + 1 by a swappable passage, so the world is a chain rooted at
    cluster 0.

    Args:
        num_clusters: Number of ring clusters
        cluster_size: Areas per cluster
        two_way_ratio: Fraction of links that are two-way
        seed: Random seed for reproducibility

    Returns:
        GameWorld with swappable one-way and two-way links
    """
    rng = random.Random(seed)
    world = GameWorld(GameGraph())

    for c in range(num_clusters):
        areas = [f"c{c}_a{i}" for i in range(cluster_size)]
        for i, area in enumerate(areas):
            nxt = areas[(i + 1) % cluster_size]
            world.add_passage(area, nxt)
            world.add_passage(nxt, area)

    for c in range(num_clusters - 1):
        source = f"c{c}_a{rng.randrange(cluster_size)}"
        target = f"c{c + 1}_a{rng.randrange(cluster_size)}"
        kind = "two_way" if rng.random() < two_way_ratio else "one_way"
        world.add_passage(source, target, kind)

    return world


@pytest.fixture
def world_100():
    """100 clusters, 400 areas - small benchmark world."""
    return generate_random_world(num_clusters=100)


@pytest.fixture
def world_1k():
    """1K clusters, 4K areas - medium benchmark world."""
    return generate_random_world(num_clusters=1000)
