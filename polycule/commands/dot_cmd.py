"""DOT file commands - format, encode, decode, inspect and focus."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import PolyculeConfig
from ..dot.colors import string_to_color
from ..dot.grammar import validate_dot
from ..dot.reducer import dot_ast_to_graph
from ..dot.serializer import to_dot
from ..errors import DotSyntaxError
from ..graph.elements import layout_mode
from ..graph.focus import focus_subgraph
from ..models import GraphSnapshot
from ..persistence.codec import decode_graph, encode_graph
from ..persistence.sync import token_from_fragment


def read_graph(path: Path) -> GraphSnapshot:
    """Parse and reduce a DOT file.

    Raises:
        DotSyntaxError: if the file is not valid DOT.
    """
    return dot_ast_to_graph(validate_dot(path.read_text(encoding="utf-8")))


def _write_or_print(text: str, out: Path | None, console: Console) -> None:
    if out:
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote {out}", style="green")
    else:
        print(text, end="" if text.endswith("\n") else "\n")


def run_fmt(path: Path, *, check: bool = False, out: Path | None = None) -> int:
    """Rewrite a DOT file in canonical form.

    Returns:
        Exit code (0 = ok, 1 = invalid DOT or, with check, not canonical)
    """
    console = Console(stderr=True)
    original = path.read_text(encoding="utf-8")
    try:
        canonical = to_dot(dot_ast_to_graph(validate_dot(original)))
    except DotSyntaxError as exc:
        console.print(f"Error: {path}: {exc}", style="bold red")
        return 1

    if check:
        if canonical != original:
            console.print(f"{path} is not canonical", style="yellow")
            return 1
        console.print(f"{path} is canonical", style="green")
        return 0

    _write_or_print(canonical, out, console)
    return 0


def run_encode(path: Path, *, link: bool = False, prefix: str = "#g=") -> int:
    console = Console(stderr=True)
    try:
        snapshot = read_graph(path)
    except DotSyntaxError as exc:
        console.print(f"Error: {path}: {exc}", style="bold red")
        return 1

    token = encode_graph(snapshot)
    if not token:
        console.print("Error: could not encode graph", style="bold red")
        return 1
    print(f"{prefix}{token}" if link else token)
    return 0


def run_decode(value: str, *, out: Path | None = None, prefix: str = "#g=") -> int:
    """Decode a token, a `#g=` fragment or a full share URL to DOT."""
    console = Console(stderr=True)
    token = token_from_fragment(value, prefix) or value.strip()
    snapshot = decode_graph(token)
    if snapshot is None:
        console.print("Error: token does not decode to a graph", style="bold red")
        return 1
    _write_or_print(to_dot(snapshot), out, console)
    return 0


def run_show(path: Path, config: PolyculeConfig) -> int:
    """Print nodes and edges as tables, with the colors a renderer would use."""
    console = Console(stderr=True)
    try:
        snapshot = read_graph(path)
    except DotSyntaxError as exc:
        console.print(f"Error: {path}: {exc}", style="bold red")
        return 1

    out = Console()
    nodes = Table(title=f"Nodes ({len(snapshot.nodes)}) - layout: {layout_mode(snapshot)}")
    nodes.add_column("id", style="bold")
    nodes.add_column("label")
    nodes.add_column("color")
    nodes.add_column("position")
    for node in snapshot.nodes:
        color = node.data.color or string_to_color(node.label)
        pos = f"{node.position.x:g}, {node.position.y:g}" if node.position else "auto"
        swatch = f"[{color}]■[/] {color}" if color.startswith("#") else escape(color)
        nodes.add_row(escape(node.id), escape(node.label), swatch, pos)
    out.print(nodes)

    edges = Table(title=f"Edges ({len(snapshot.edges)})")
    edges.add_column("source", style="bold")
    edges.add_column("target", style="bold")
    edges.add_column("label")
    edges.add_column("color")
    edges.add_column("width", justify="right")
    edges.add_column("pattern")
    for edge in snapshot.edges:
        width = edge.data.width if edge.data.width is not None else config.default_edge_width
        edges.add_row(
            escape(edge.source),
            escape(edge.target),
            escape(edge.data.label or ""),
            escape(edge.data.color or config.fallback_color),
            f"{width:g}",
            edge.data.pattern or "solid",
        )
    out.print(edges)
    return 0


def run_focus(path: Path, node_id: str, *, depth: int = 1, out: Path | None = None) -> int:
    console = Console(stderr=True)
    try:
        snapshot = read_graph(path)
    except DotSyntaxError as exc:
        console.print(f"Error: {path}: {exc}", style="bold red")
        return 1

    if not snapshot.has_node(node_id):
        console.print(f"Error: node '{node_id}' not found", style="bold red")
        return 1

    _write_or_print(to_dot(focus_subgraph(snapshot, node_id, depth)), out, console)
    return 0
