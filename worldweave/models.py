"""Pydantic models for the Worldweave public API.

These are thin wrappers over the engine types (engine.core, engine.world),
providing validation and serialization for the client, CLI and MCP surfaces.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, model_validator

NodeKey = int | str
PassageKind = Literal["fixed", "one_way", "two_way"]


class Passage(BaseModel):
    """A directed traversal between two areas.

    ``fixed`` passages are never moved. ``one_way`` and ``two_way`` passages
    are candidates for rewiring; a ``two_way`` passage also implies the
    reverse edge target -> source.
    """

    source: NodeKey
    target: NodeKey
    kind: PassageKind = "fixed"

    def __repr__(self) -> str:
        arrow = "<->" if self.kind == "two_way" else "->"
        return f"Passage({self.source!r} {arrow} {self.target!r}, kind={self.kind!r})"


class WorldSpec(BaseModel):
    """A complete world file: an optional name and its passages."""

    version: str = "1.0"
    name: str | None = None
    passages: list[Passage] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_version(self) -> WorldSpec:
        if self.version != "1.0":
            raise ValueError(f"Unsupported world file version: {self.version!r}")
        return self


class CompletabilityReport(BaseModel):
    """Result of a completability check.

    ``root_nodes`` lists every area in every component with no incoming
    passage. A completable world has exactly one such component.
    """

    completable: bool
    root_nodes: list[NodeKey] = Field(default_factory=list)
    component_count: int = 0


class WorldStats(BaseModel):
    """Summary counts for a world."""

    node_count: int
    edge_count: int
    fixed_count: int
    one_way_count: int
    two_way_count: int
    component_count: int


class BuildReport(BaseModel):
    """Outcome of one generation run."""

    iterations: int
    seed: int | None = None
    attempts: int = 0
    skipped: int = 0
    committed: int = 0
    rolled_back: int = 0
