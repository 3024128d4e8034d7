"""Wires the store, the DOT draft and persistence together."""

from __future__ import annotations

from dataclasses import dataclass

from .change_log import ChangeLog
from .config import PolyculeConfig
from .draft import DotDraft
from .graph.elements import to_elements
from .graph.intents import Intent, dispatch
from .graph.store import GraphStore
from .persistence.sync import FileStorage, LoadResult, LocationFragment, PersistenceSync, TokenStorage


@dataclass
class GraphSession:
    """One editing session: the graph-state owner and everything bound to it."""

    config: PolyculeConfig
    store: GraphStore
    draft: DotDraft
    sync: PersistenceSync
    fragment: LocationFragment

    @classmethod
    def open(
        cls,
        config: PolyculeConfig,
        fragment: LocationFragment | None = None,
        storage: TokenStorage | None = None,
        *,
        record_changes: bool = False,
    ) -> tuple["GraphSession", LoadResult]:
        """Build a session and run the startup load."""
        fragment = fragment or LocationFragment()
        if storage is None:
            storage = FileStorage(config.persistence.storage_path, config.persistence.storage_key)

        store = GraphStore(id_policy=config.node_id_policy)  # type: ignore[arg-type]
        draft = DotDraft(store)
        sync = PersistenceSync(store, fragment, storage, prefix=config.persistence.fragment_prefix)
        result = sync.load()
        if record_changes and config.change_log_path is not None:
            store.subscribe(ChangeLog(config.change_log_path))
        return cls(config=config, store=store, draft=draft, sync=sync, fragment=fragment), result

    def dispatch(self, intent: Intent) -> str | None:
        return dispatch(self.store, intent, min_node_distance=self.config.min_node_distance)

    def elements(self) -> list[dict]:
        return to_elements(
            self.store.snapshot,
            fallback_color=self.config.fallback_color,
            default_edge_width=self.config.default_edge_width,
        )
