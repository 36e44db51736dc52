"""Worldweave client: the primary interface for authoring and building worlds."""

from __future__ import annotations

import random
from pathlib import Path
from typing import Any

from worldweave.engine.core import GameGraph, NodeID
from worldweave.engine.persistence import load_document, save_world
from worldweave.engine.world import DEFAULT_ITERATIONS, GameWorld, build_game
from worldweave.models import (
    BuildReport,
    CompletabilityReport,
    Passage,
    WorldSpec,
    WorldStats,
)


class Worldweave:
    """A game world under construction.

    Wraps a GameWorld with a validated, model-based API. Passages are added
    as fixed, one-way or two-way; ``build()`` then rewires the one-way and
    two-way passages while keeping the world completable.

    Example:
        ```python
        ww = Worldweave(name="caves")
        ww.two_way(1, 2)
        ww.one_way(0, 1)
        ww.one_way(2, 3)
        ww.check().completable        # True
        ww.build(iterations=500, seed=3)
        ww.save("caves.json")
        ```
    """

    def __init__(self, world: GameWorld | None = None, *, name: str | None = None) -> None:
        self._world = world if world is not None else GameWorld(GameGraph())
        self.name = name

    @property
    def world(self) -> GameWorld:
        """The underlying engine world."""
        return self._world

    # ========== Authoring ==========

    def passage(self, source: NodeID, target: NodeID) -> Passage:
        """Add a fixed passage source -> target that is never rewired."""
        return self.add(Passage(source=source, target=target, kind="fixed"))

    def one_way(self, source: NodeID, target: NodeID) -> Passage:
        """Add a swappable one-way passage source -> target."""
        return self.add(Passage(source=source, target=target, kind="one_way"))

    def two_way(self, source: NodeID, target: NodeID) -> Passage:
        """Add a swappable two-way passage source <-> target."""
        return self.add(Passage(source=source, target=target, kind="two_way"))

    def add(self, passage: Passage) -> Passage:
        self._world.add_passage(passage.source, passage.target, passage.kind)
        return passage

    def passages(self) -> list[Passage]:
        """Current passages, swappable kinds included."""
        return [Passage(**p) for p in self._world.passages()]

    # ========== Analysis ==========

    def check(self) -> CompletabilityReport:
        """Check whether every area is reachable from a single root region."""
        condensed = self._world.graph.condensation()
        return CompletabilityReport(
            completable=len(condensed.roots()) == 1,
            root_nodes=condensed.root_nodes(),
            component_count=len(condensed.components),
        )

    def stats(self) -> WorldStats:
        graph = self._world.graph
        one_way_count = len(self._world.one_ways)
        two_way_count = len(self._world.two_ways)
        return WorldStats(
            node_count=graph.node_count(),
            edge_count=graph.edge_count(),
            fixed_count=graph.edge_count() - one_way_count - 2 * two_way_count,
            one_way_count=one_way_count,
            two_way_count=two_way_count,
            component_count=len(graph.condensation().components),
        )

    # ========== Generation ==========

    def build(
        self,
        iterations: int = DEFAULT_ITERATIONS,
        seed: int | None = None,
        rng: random.Random | None = None,
    ) -> BuildReport:
        """Rewire swappable passages in place.

        Args:
            iterations: Number of swap attempts (no-op iterations included)
            seed: Seed for a fresh random.Random; ignored if rng is given
            rng: Random source to draw from

        Returns:
            BuildReport with commit/rollback counters

        Raises:
            GameUnbeatableError: If the world is not completable to begin with
        """
        if rng is None:
            rng = random.Random(seed)
        build_game(self._world, rng, iterations)
        stats = self._world.last_run
        assert stats is not None
        return BuildReport(
            iterations=iterations,
            seed=seed,
            attempts=stats.attempts,
            skipped=stats.skipped,
            committed=stats.committed,
            rolled_back=stats.rolled_back,
        )

    # ========== Serialization ==========

    def to_spec(self) -> WorldSpec:
        return WorldSpec(name=self.name, passages=self.passages())

    @classmethod
    def from_spec(cls, spec: WorldSpec | dict[str, Any]) -> Worldweave:
        """Create a client from a WorldSpec or its dict form."""
        if not isinstance(spec, WorldSpec):
            spec = WorldSpec.model_validate(spec)
        ww = cls(name=spec.name)
        for passage in spec.passages:
            ww.add(passage)
        return ww

    def save(self, path: str | Path) -> None:
        save_world(self._world, path, name=self.name)

    @classmethod
    def load(cls, path: str | Path) -> Worldweave:
        """Load and validate a world file.

        Raises:
            pydantic.ValidationError: If the file content is malformed
            FileNotFoundError: If file does not exist
        """
        return cls.from_spec(load_document(path))

    def __repr__(self) -> str:
        s = self.stats()
        return (
            f"Worldweave(name={self.name!r}, nodes={s.node_count}, edges={s.edge_count}, "
            f"one_way={s.one_way_count}, two_way={s.two_way_count})"
        )
