"""The graph-state owner.

`GraphStore` holds the single canonical snapshot plus the current selection.
Other components read `store.snapshot` and mutate only through the methods
below; subscribers are told about every completed change.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Mapping

from ..models import GraphSnapshot, Position
from . import ops

logger = logging.getLogger(__name__)

EntityKind = Literal["node", "edge"]

# listener(operation, before, after)
Listener = Callable[[str, GraphSnapshot, GraphSnapshot], None]


@dataclass(frozen=True)
class Selection:
    kind: EntityKind
    id: str


class GraphStore:
    """Single writer of the graph snapshot."""

    def __init__(self, snapshot: GraphSnapshot | None = None, *, id_policy: ops.IdPolicy = "numbered"):
        self._snapshot = snapshot or GraphSnapshot()
        self._listeners: list[Listener] = []
        self.selected: Selection | None = None
        self.id_policy: ops.IdPolicy = id_policy

    @property
    def snapshot(self) -> GraphSnapshot:
        return self._snapshot

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, operation: str, after: GraphSnapshot, *, force: bool = False) -> bool:
        before = self._snapshot
        if not force and after == before:
            return False
        self._snapshot = after
        self._prune_selection()
        logger.debug("%s: %d nodes, %d edges", operation, len(after.nodes), len(after.edges))
        for listener in list(self._listeners):
            listener(operation, before, after)
        return True

    def _prune_selection(self) -> None:
        sel = self.selected
        if sel is None:
            return
        if sel.kind == "node" and not self._snapshot.has_node(sel.id):
            self.selected = None
        elif sel.kind == "edge" and self._snapshot.get_edge(sel.id) is None:
            self.selected = None

    # Selection

    def select(self, kind: EntityKind, entity_id: str) -> None:
        self.selected = Selection(kind, entity_id)

    def clear_selection(self) -> None:
        self.selected = None

    # Mutations

    def replace_graph(self, snapshot: GraphSnapshot, operation: str = "replace") -> None:
        """Swap in a whole new snapshot (draft commit or load). Always notifies."""
        self._commit(operation, snapshot, force=True)

    def add_node(
        self,
        node_id: str | None = None,
        label: str | None = None,
        position: Position | None = None,
        *,
        id_policy: ops.IdPolicy | None = None,
    ) -> str | None:
        """Add a node and return its id (None when the letter namespace is full)."""
        before = self._snapshot
        after = ops.add_node(
            before, node_id=node_id, label=label, position=position, id_policy=id_policy or self.id_policy
        )
        if not self._commit("add-node", after):
            return None
        return after.nodes[-1].id

    def add_edge(self, source: str, target: str, *, directed: bool = True) -> str:
        after = ops.add_edge(self._snapshot, source, target, directed=directed)
        self._commit("add-edge", after)
        return after.edges[-1].id

    def rename_node(self, old_id: str, new_id: str, new_label: str | None = None) -> str:
        after = ops.rename_node(self._snapshot, old_id, new_id, new_label)
        new_sanitized = ops.sanitize_node_id(new_id)
        if self.selected == Selection("node", old_id):
            self.selected = Selection("node", new_sanitized)
        self._commit("rename-node", after)
        return new_sanitized

    def update_node(self, node_id: str, **changes) -> None:
        self._commit("update-node", ops.update_node(self._snapshot, node_id, **changes))

    def update_edge(self, edge_id: str, **changes) -> None:
        self._commit("update-edge", ops.update_edge(self._snapshot, edge_id, **changes))

    def delete_node(self, node_id: str) -> None:
        self._commit("delete-node", ops.delete_node(self._snapshot, node_id))

    def delete_edge(self, edge_id: str) -> None:
        self._commit("delete-edge", ops.delete_edge(self._snapshot, edge_id))

    def delete_selected(self) -> None:
        sel = self.selected
        if sel is None:
            return
        if sel.kind == "node":
            self.delete_node(sel.id)
        else:
            self.delete_edge(sel.id)
        self.selected = None

    def set_node_position(self, node_id: str, position: Position | None) -> None:
        self._commit("set-position", ops.set_node_position(self._snapshot, node_id, position))

    def save_positions(self, positions: Mapping[str, Position]) -> None:
        self._commit("save-positions", ops.save_positions(self._snapshot, positions))
