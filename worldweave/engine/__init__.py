from worldweave.engine.core import (
    Condensation,
    EdgeRef,
    GameGraph,
    GameUnbeatableError,
    GraphInvariantError,
    NodeID,
    condensation,
)
from worldweave.engine.persistence import load_world, save_world
from worldweave.engine.world import (
    DEFAULT_ITERATIONS,
    CandidatePool,
    GameWorld,
    OneWay,
    RewireStats,
    TwoWay,
    build_game,
    swap_edges,
)

__all__ = [
    "NodeID",
    "EdgeRef",
    "GameGraph",
    "Condensation",
    "condensation",
    "GameUnbeatableError",
    "GraphInvariantError",
    "OneWay",
    "TwoWay",
    "swap_edges",
    "CandidatePool",
    "GameWorld",
    "RewireStats",
    "build_game",
    "DEFAULT_ITERATIONS",
    "save_world",
    "load_world",
]
