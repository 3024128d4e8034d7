"""Persisted state commands - startup load and change history."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from ..change_log import format_change_entry, read_change_log
from ..config import PolyculeConfig
from ..dot.serializer import to_dot
from ..persistence.sync import FileStorage, LocationFragment, PersistenceSync
from ..graph.store import GraphStore


def run_load(config: PolyculeConfig, *, fragment: str = "", save: bool = False) -> int:
    """Resolve the startup graph (fragment, then storage, then default) and print it.

    With `save`, the chosen graph is written back to storage the way a session
    does right after loading.
    """
    console = Console(stderr=True)
    storage = FileStorage(config.persistence.storage_path, config.persistence.storage_key)
    store = GraphStore()
    sync = PersistenceSync(store, LocationFragment(fragment), storage, prefix=config.persistence.fragment_prefix)

    if save:
        result = sync.load()
        console.print(f"Saved to {config.persistence.storage_path}", style="green")
    else:
        result = sync.resolve()

    console.print(f"Loaded from {result.source}", style="cyan")
    print(to_dot(result.snapshot), end="")
    return 0


def run_history(log_path: Path | None, *, last: int | None = None) -> int:
    console = Console(stderr=True)
    if log_path is None:
        console.print("Change log is disabled", style="yellow")
        return 0

    entries = read_change_log(log_path, last_n=last)
    if not entries:
        console.print("No changes recorded", style="yellow")
        return 0

    for entry in entries:
        print(format_change_entry(entry))
    return 0
