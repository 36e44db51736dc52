"""Worldweave MCP server, exposing world authoring and generation as tools for AI agents."""

from __future__ import annotations

import functools
import logging
import os
import sys
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from mcp.server.fastmcp import FastMCP

from worldweave.client import Worldweave
from worldweave.engine.world import DEFAULT_ITERATIONS
from worldweave.models import Passage

# All logging goes to stderr; stdout is reserved for JSON-RPC
logging.basicConfig(stream=sys.stderr, level=logging.INFO, format="%(levelname)s: %(message)s")
logger = logging.getLogger("worldweave.mcp")

# ---------------------------------------------------------------------------
# Client singleton, safe for single-process stdio MCP
# ---------------------------------------------------------------------------

_CLIENT: Worldweave | None = None
_WORLD_PATH: str | None = None


@asynccontextmanager
async def app_lifespan(server: FastMCP) -> AsyncIterator[dict]:
    global _CLIENT, _WORLD_PATH
    _WORLD_PATH = os.environ.get("WORLDWEAVE_WORLD_PATH", "world.json")
    if Path(_WORLD_PATH).exists():
        logger.info("Loading world: %s", _WORLD_PATH)
        _CLIENT = Worldweave.load(_WORLD_PATH)
    else:
        logger.info("Starting empty world (will save to %s)", _WORLD_PATH)
        _CLIENT = Worldweave()
    try:
        yield {}
    finally:
        _CLIENT = None


mcp = FastMCP(
    "Worldweave",
    instructions=(
        "Worldweave builds game world layouts as directed graphs of areas and passages. "
        "Key behaviors: Areas are auto-created when referenced by a passage. "
        "Passages are 'fixed' (never moved), 'one_way' or 'two_way' (swappable). "
        "A world is completable when every area is reachable from exactly one root region. "
        "build_world rewires swappable passages and never produces an uncompletable world; "
        "it refuses to start if the world is already uncompletable. "
        "Call save_world to persist changes."
    ),
    lifespan=app_lifespan,
)


def _get_client() -> Worldweave:
    """Return the active Worldweave client."""
    if _CLIENT is None:
        raise RuntimeError("Worldweave client is not initialized")
    return _CLIENT


def _safe_tool(fn: Callable[..., dict]) -> Callable[..., dict]:
    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> dict:
        try:
            return fn(*args, **kwargs)
        except Exception as exc:
            logger.exception("Tool %s failed", fn.__name__)
            return {"error": True, "message": f"{type(exc).__name__}: {exc}"}
    return wrapper


def _passage_dict(passage: Passage) -> dict:
    return {"source": passage.source, "target": passage.target, "kind": passage.kind}


# ===================================================================
# Authoring tools (2)
# ===================================================================


@mcp.tool()
@_safe_tool
def add_passage(
    source: int | str,
    target: int | str,
    kind: str = "fixed",
) -> dict:
    """Add a passage between two areas.

    Args:
        source: Area the passage starts in.
        target: Area the passage leads to.
        kind: "fixed", "one_way" or "two_way". A two-way passage also
            connects target back to source.
    """
    ww = _get_client()
    passage = ww.add(Passage(source=source, target=target, kind=kind))
    return _passage_dict(passage)


@mcp.tool()
@_safe_tool
def list_passages() -> dict:
    """List every passage in the world."""
    passages = _get_client().passages()
    return {"count": len(passages), "passages": [_passage_dict(p) for p in passages]}


# ===================================================================
# Analysis and generation tools (3)
# ===================================================================


@mcp.tool()
@_safe_tool
def check_world() -> dict:
    """Check whether every area is reachable from a single root region.

    On failure, root_nodes lists the areas of every region nothing leads into.
    """
    return _get_client().check().model_dump()


@mcp.tool()
@_safe_tool
def build_world(
    iterations: int = DEFAULT_ITERATIONS,
    seed: int | None = None,
) -> dict:
    """Randomly rewire swappable passages while keeping the world completable.

    Args:
        iterations: Number of swap iterations.
        seed: Random seed for a reproducible layout.
    """
    report = _get_client().build(iterations=iterations, seed=seed)
    return report.model_dump()


@mcp.tool()
@_safe_tool
def get_stats() -> dict:
    """Get node, edge and passage counts for the world."""
    return _get_client().stats().model_dump()


# ===================================================================
# Persistence tools (1)
# ===================================================================


@mcp.tool()
@_safe_tool
def save_world(path: str | None = None) -> dict:
    """Save the world to disk.

    Args:
        path: Output file. Defaults to WORLDWEAVE_WORLD_PATH.
    """
    target = path or _WORLD_PATH or "world.json"
    _get_client().save(target)
    return {"saved": True, "path": target}


# ===================================================================
# Resources (2)
# ===================================================================


@mcp.resource("worldweave://schema")
def schema_resource() -> str:
    """Worldweave data model reference."""
    return (
        "# Worldweave Data Model\n\n"
        "## Areas\n"
        "Areas are identified by an int or string ID and created on first use.\n\n"
        "## Passages\n"
        "A passage is a directed traversal from `source` to `target`.\n"
        "- `fixed`: never moved by build_world\n"
        "- `one_way`: swappable single passage\n"
        "- `two_way`: swappable matched pair source -> target and target -> source\n\n"
        "## Completability\n"
        "Collapse each strongly connected group of areas into one region. "
        "The world is completable when exactly one region has no passage leading into it.\n\n"
        "## Rewiring\n"
        "build_world repeatedly exchanges the targets of two swappable passages of the "
        "same kind and keeps the exchange only if the world stays completable.\n"
    )


@mcp.resource("worldweave://stats")
def stats_resource() -> str:
    """Live world statistics."""
    if _CLIENT is None:
        raise RuntimeError("Worldweave client is not initialized")
    stats = _CLIENT.stats()
    report = _CLIENT.check()
    lines = [
        "# Worldweave Statistics\n",
        f"Areas: {stats.node_count}",
        f"Edges: {stats.edge_count}",
        f"Regions: {stats.component_count}",
        "\n## Passages by Kind",
        f"- fixed: {stats.fixed_count}",
        f"- one_way: {stats.one_way_count}",
        f"- two_way: {stats.two_way_count}",
        f"\n## Completable\n{'yes' if report.completable else 'no'}",
    ]
    if not report.completable:
        lines.append(f"Root areas: {', '.join(str(n) for n in report.root_nodes)}")
    return "\n".join(lines)


# ===================================================================
# Entry point
# ===================================================================


def run_server() -> None:
    """Run the Worldweave MCP server over stdio."""
    mcp.run(transport="stdio")
