"""Worldweave CLI: command-line interface for world files."""

from __future__ import annotations

from pathlib import Path

import click

from worldweave.client import Worldweave
from worldweave.engine.core import GameUnbeatableError
from worldweave.engine.world import DEFAULT_ITERATIONS

DEFAULT_WORLD = "world.json"


def _parse_node(value: str) -> int | str:
    """Node IDs written as canonical integers are read as ints."""
    if value.removeprefix("-").isdecimal() and str(int(value)) == value:
        return int(value)
    return value


def _load(path: str) -> Worldweave:
    if not Path(path).exists():
        raise click.ClickException(f"No world file at {path}. Run 'worldweave init' first.")
    return Worldweave.load(path)


@click.group()
@click.option(
    "--world",
    default=DEFAULT_WORLD,
    envvar="WORLDWEAVE_WORLD_PATH",
    help="Path to the world file.",
)
@click.pass_context
def cli(ctx: click.Context, world: str) -> None:
    """Worldweave CLI: author, check and rewire game world graphs."""
    ctx.ensure_object(dict)
    ctx.obj["world"] = world


@cli.command()
@click.option("--name", default=None, help="World name.")
@click.pass_context
def init(ctx: click.Context, name: str | None) -> None:
    """Create an empty world file."""
    path = ctx.obj["world"]
    if Path(path).exists():
        click.echo(f"World already exists at {path}")
        return
    Worldweave(name=name).save(path)
    click.echo(f"Initialized world at {path}")


@cli.command()
@click.argument("source")
@click.argument("target")
@click.option(
    "--kind",
    type=click.Choice(["fixed", "one_way", "two_way"]),
    default="fixed",
    help="Passage kind.",
)
@click.pass_context
def passage(ctx: click.Context, source: str, target: str, kind: str) -> None:
    """Add a passage from SOURCE to TARGET."""
    path = ctx.obj["world"]
    ww = _load(path)
    if kind == "one_way":
        result = ww.one_way(_parse_node(source), _parse_node(target))
    elif kind == "two_way":
        result = ww.two_way(_parse_node(source), _parse_node(target))
    else:
        result = ww.passage(_parse_node(source), _parse_node(target))
    ww.save(path)
    click.echo(f"Passage: {result.source} -> {result.target} (kind={result.kind})")


@cli.command()
@click.pass_context
def show(ctx: click.Context) -> None:
    """List all passages."""
    ww = _load(ctx.obj["world"])
    passages = ww.passages()
    if not passages:
        click.echo("No passages found.")
        return
    for p in passages:
        arrow = "<->" if p.kind == "two_way" else "->"
        click.echo(f"  {p.source} {arrow} {p.target}  kind={p.kind}")


@cli.command()
@click.pass_context
def check(ctx: click.Context) -> None:
    """Check that every area is reachable from a single root region."""
    report = _load(ctx.obj["world"]).check()
    if report.completable:
        click.echo(f"World is completable ({report.component_count} components).")
        return
    raise click.ClickException(
        f"World is unbeatable. Root areas: {', '.join(str(n) for n in report.root_nodes)}"
    )


@cli.command()
@click.pass_context
def stats(ctx: click.Context) -> None:
    """Show world statistics."""
    s = _load(ctx.obj["world"]).stats()
    click.echo(f"Nodes: {s.node_count}  Edges: {s.edge_count}  Components: {s.component_count}")
    click.echo(f"  fixed: {s.fixed_count}")
    click.echo(f"  one_way: {s.one_way_count}")
    click.echo(f"  two_way: {s.two_way_count}")


@cli.command()
@click.option(
    "--iterations",
    default=DEFAULT_ITERATIONS,
    type=click.IntRange(min=0),
    envvar="WORLDWEAVE_ITERATIONS",
    show_default=True,
    help="Number of swap iterations.",
)
@click.option("--seed", default=None, type=int, envvar="WORLDWEAVE_SEED", help="Random seed.")
@click.option(
    "--output",
    default=None,
    type=click.Path(),
    help="Write the built world here instead of overwriting the input.",
)
@click.pass_context
def build(ctx: click.Context, iterations: int, seed: int | None, output: str | None) -> None:
    """Rewire swappable passages while keeping the world completable."""
    path = ctx.obj["world"]
    ww = _load(path)
    try:
        report = ww.build(iterations=iterations, seed=seed)
    except GameUnbeatableError as exc:
        raise click.ClickException(
            f"World is unbeatable. Root areas: {', '.join(str(n) for n in exc.nodes)}"
        ) from exc
    target = output or path
    ww.save(target)
    click.echo(
        f"Built world in {report.iterations} iterations: "
        f"{report.committed} committed, {report.rolled_back} rolled back, "
        f"{report.skipped} skipped"
    )
    click.echo(f"Saved to {target}")


@cli.command()
@click.option("--world", default=None, help="World path (overrides WORLDWEAVE_WORLD_PATH).")
def mcp(world: str | None) -> None:
    """Start the MCP server for AI agent integration."""
    import os

    if world:
        os.environ["WORLDWEAVE_WORLD_PATH"] = world
    from worldweave.mcp.server import run_server

    run_server()


if __name__ == "__main__":
    cli()
