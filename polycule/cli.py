"""CLI entrypoint for polycule."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import find_config, load_config
from .models import Position


@click.group()
@click.version_option(__version__, prog_name="polycule")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to polycule.toml (defaults to the nearest one above the working directory)",
)
@click.option("--verbose", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """polycule - Edit relationship graphs as DOT text.

    Format, share, inspect and edit polycule graphs from the command line.
    """
    if verbose:
        from rich.console import Console
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )

    ctx.ensure_object(dict)
    if config_path is None:
        config_path = find_config(Path.cwd())
    try:
        ctx.obj["config"] = load_config(config_path)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--config") from exc


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--check", is_flag=True, help="Exit 1 if the file is not already canonical")
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file path (default: stdout)",
)
def fmt(file: Path, check: bool, out: Path | None) -> None:
    """Rewrite a DOT file in canonical form."""
    from .commands.dot_cmd import run_fmt

    sys.exit(run_fmt(file, check=check, out=out))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--link", is_flag=True, help="Print the fragment (#g=<token>) instead of the bare token")
@click.pass_context
def encode(ctx: click.Context, file: Path, link: bool) -> None:
    """Encode a DOT file as a share token."""
    from .commands.dot_cmd import run_encode

    sys.exit(run_encode(file, link=link, prefix=ctx.obj["config"].persistence.fragment_prefix))


@cli.command()
@click.argument("token")
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file path (default: stdout)",
)
@click.pass_context
def decode(ctx: click.Context, token: str, out: Path | None) -> None:
    """Decode a share token, fragment or link back to DOT.

    Examples:

        polycule decode 'https://example.org/#g=eNpL...'

        polycule decode eNpL... --out graph.dot
    """
    from .commands.dot_cmd import run_decode

    sys.exit(run_decode(token, out=out, prefix=ctx.obj["config"].persistence.fragment_prefix))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def show(ctx: click.Context, file: Path) -> None:
    """List nodes and edges with the colors a renderer would use."""
    from .commands.dot_cmd import run_show

    sys.exit(run_show(file, ctx.obj["config"]))


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("node")
@click.option("--depth", type=click.IntRange(min=1), default=1, show_default=True, help="Hops from NODE")
@click.option(
    "--out",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file path (default: stdout)",
)
def focus(file: Path, node: str, depth: int, out: Path | None) -> None:
    """Print the neighborhood of NODE as DOT."""
    from .commands.dot_cmd import run_focus

    sys.exit(run_focus(file, node, depth=depth, out=out))


@cli.command()
@click.option("--fragment", default="", help="Location fragment or share URL to load first")
@click.option("--save", is_flag=True, help="Write the loaded graph back to storage")
@click.pass_context
def load(ctx: click.Context, fragment: str, save: bool) -> None:
    """Resolve the startup graph: fragment, then storage, then the default."""
    from .commands.state_cmd import run_load

    sys.exit(run_load(ctx.obj["config"], fragment=fragment, save=save))


@cli.command()
@click.option("--last", type=click.IntRange(min=1), default=None, help="Show only the last N entries")
@click.pass_context
def history(ctx: click.Context, last: int | None) -> None:
    """Show recorded graph changes."""
    from .commands.state_cmd import run_history

    sys.exit(run_history(ctx.obj["config"].change_log_path, last=last))


@cli.group()
def edit() -> None:
    """Direct-manipulation edits applied to a DOT file in place."""
    pass


_file_argument = click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))


@edit.command("add")
@_file_argument
@click.argument("node", required=False)
@click.option("--label", default=None, help="Display label")
@click.pass_context
def edit_add(ctx: click.Context, file: Path, node: str | None, label: str | None) -> None:
    """Add a node (the id is generated when NODE is omitted)."""
    from .commands.edit_cmd import run_edit

    def operation(store):
        new_id = store.add_node(node, label)
        return f"Added node {new_id}" if new_id else "No free node id"

    sys.exit(run_edit(file, ctx.obj["config"], operation))


@edit.command("rename")
@_file_argument
@click.argument("old")
@click.argument("new")
@click.option("--label", default=None, help="New display label (defaults to the new id)")
@click.pass_context
def edit_rename(ctx: click.Context, file: Path, old: str, new: str, label: str | None) -> None:
    """Rename node OLD to NEW, updating every edge."""
    from .commands.edit_cmd import run_edit

    def operation(store):
        return f"Renamed {old} to {store.rename_node(old, new, label)}"

    sys.exit(run_edit(file, ctx.obj["config"], operation))


@edit.command("delete")
@_file_argument
@click.argument("entity")
@click.option("--edge", "is_edge", is_flag=True, help="ENTITY is an edge id (e.g. 'A--B')")
@click.pass_context
def edit_delete(ctx: click.Context, file: Path, entity: str, is_edge: bool) -> None:
    """Delete a node (and its edges) or a single edge."""
    from .commands.edit_cmd import run_edit

    def operation(store):
        if is_edge:
            store.delete_edge(entity)
            return f"Deleted edge {entity}"
        store.delete_node(entity)
        return f"Deleted node {entity}"

    sys.exit(run_edit(file, ctx.obj["config"], operation))


@edit.command("connect")
@_file_argument
@click.argument("source")
@click.argument("target")
@click.option("--label", default=None, help="Edge label")
@click.option("--color", default=None, help="Edge color")
@click.pass_context
def edit_connect(
    ctx: click.Context,
    file: Path,
    source: str,
    target: str,
    label: str | None,
    color: str | None,
) -> None:
    """Connect SOURCE and TARGET with a new edge."""
    from .commands.edit_cmd import run_edit

    def operation(store):
        edge_id = store.add_edge(source, target)
        if label is not None or color is not None:
            store.update_edge(edge_id, label=label or None, color=color)
        return f"Connected {source} and {target}"

    sys.exit(run_edit(file, ctx.obj["config"], operation))


@edit.command("pin")
@_file_argument
@click.argument("node")
@click.argument("x", type=float)
@click.argument("y", type=float)
@click.pass_context
def edit_pin(ctx: click.Context, file: Path, node: str, x: float, y: float) -> None:
    """Pin NODE at canvas coordinates X, Y."""
    from .commands.edit_cmd import require_node, run_edit

    def operation(store):
        require_node(store, node)
        store.set_node_position(node, Position(x, y))
        return f"Pinned {node} at {x:g}, {y:g}"

    sys.exit(run_edit(file, ctx.obj["config"], operation))


@edit.command("unpin")
@_file_argument
@click.argument("node")
@click.pass_context
def edit_unpin(ctx: click.Context, file: Path, node: str) -> None:
    """Let the layout engine place NODE again."""
    from .commands.edit_cmd import require_node, run_edit

    def operation(store):
        require_node(store, node)
        store.set_node_position(node, None)
        return f"Unpinned {node}"

    sys.exit(run_edit(file, ctx.obj["config"], operation))


if __name__ == "__main__":
    cli()
