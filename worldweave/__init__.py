"""Worldweave: completability-preserving procedural layout of game world graphs."""

__version__ = "0.1.0"

from worldweave.client import Worldweave
from worldweave.engine.core import GameUnbeatableError
from worldweave.models import BuildReport, CompletabilityReport, Passage, WorldSpec, WorldStats

__all__ = [
    "BuildReport",
    "CompletabilityReport",
    "GameUnbeatableError",
    "Passage",
    "WorldSpec",
    "WorldStats",
    "Worldweave",
    "__version__",
]
