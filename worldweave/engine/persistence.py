"""Persistence utilities for world save/load.

Worlds are stored as a single JSON file:

    {
      "version": "1.0",
      "name": "caves",
      "passages": [
        {"source": 0, "target": 1, "kind": "one_way"},
        {"source": 1, "target": 2, "kind": "two_way"},
        {"source": 2, "target": 3, "kind": "fixed"}
      ]
    }

A ``two_way`` passage expands to both directed edges. Saving a built world
writes its current layout, so the file can be loaded and built again.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .world import GameWorld

FORMAT_VERSION = "1.0"


def _validate_path(path: str | Path) -> Path:
    """Resolve a file path, rejecting null bytes.

    Raises:
        ValueError: If path is invalid
    """
    path = str(path)
    if "\x00" in path:
        raise ValueError(f"Invalid path (contains null bytes): {path!r}")
    return Path(path).resolve()


def world_to_document(world: GameWorld, name: str | None = None) -> dict[str, Any]:
    document: dict[str, Any] = {"version": FORMAT_VERSION}
    if name is not None:
        document["name"] = name
    document.update(world.to_dict())
    return document


def save_world(world: GameWorld, path: str | Path, name: str | None = None) -> None:
    """Save a world to a JSON file, creating parent directories as needed.

    Raises:
        ValueError: If path is invalid
    """
    validated_path = _validate_path(path)
    validated_path.parent.mkdir(parents=True, exist_ok=True)

    with open(validated_path, "w", encoding="utf-8") as f:
        json.dump(world_to_document(world, name), f, indent=2, ensure_ascii=False)


def load_document(path: str | Path) -> dict[str, Any]:
    """Read a world file without building it.

    Raises:
        ValueError: If path is invalid or the file version is unsupported
        FileNotFoundError: If file does not exist
    """
    validated_path = _validate_path(path)

    with open(validated_path, encoding="utf-8") as f:
        data: dict[str, Any] = json.load(f)

    version = data.get("version", FORMAT_VERSION)
    if version != FORMAT_VERSION:
        raise ValueError(f"Unsupported world file version: {version!r}")
    return data


def load_world(path: str | Path) -> GameWorld:
    """Load a world from a JSON file.

    Raises:
        ValueError: If path is invalid, the version is unsupported, or a
            passage has an unknown kind
        FileNotFoundError: If file does not exist
    """
    return GameWorld.from_dict(load_document(path))
