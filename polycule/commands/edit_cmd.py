"""Edit command - direct-manipulation operations applied to a DOT file."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from rich.console import Console

from ..change_log import ChangeLog
from ..config import PolyculeConfig
from ..dot.serializer import to_dot
from ..errors import DotSyntaxError, GraphEditError
from ..graph.store import GraphStore
from .dot_cmd import read_graph


def require_node(store: GraphStore, node_id: str) -> None:
    if not store.snapshot.has_node(node_id):
        raise GraphEditError(f"Node '{node_id}' does not exist.")


def run_edit(path: Path, config: PolyculeConfig, operation: Callable[[GraphStore], str | None]) -> int:
    """Load `path`, apply `operation` to a store, write the result back.

    The operation is recorded in the change log when one is configured.

    Returns:
        Exit code (0 = written or unchanged, 1 = invalid file or rejected edit)
    """
    console = Console(stderr=True)
    try:
        snapshot = read_graph(path)
    except DotSyntaxError as exc:
        console.print(f"Error: {path}: {exc}", style="bold red")
        return 1

    store = GraphStore(snapshot, id_policy=config.node_id_policy)  # type: ignore[arg-type]
    if config.change_log_path is not None:
        store.subscribe(ChangeLog(config.change_log_path, metadata={"file": str(path)}))

    try:
        message = operation(store)
    except GraphEditError as exc:
        console.print(f"Error: {exc}", style="bold red")
        return 1

    if store.snapshot == snapshot:
        console.print("No change", style="yellow")
        return 0

    path.write_text(to_dot(store.snapshot), encoding="utf-8")
    console.print(message or f"Updated {path}", style="green")
    return 0
