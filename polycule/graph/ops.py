"""Direct-manipulation operations over graph snapshots.

Every function here is pure: it takes a snapshot and returns the next one
(or the same object when nothing changes). `GraphStore` is the only caller
that swaps the result in.
"""

from __future__ import annotations

import math
import re
import string
from dataclasses import replace
from typing import Any, Literal, Mapping

from ..dot.colors import canonical_color
from ..errors import GraphEditError
from ..models import EDGE_PATTERNS, LABEL_MODES, Edge, GraphSnapshot, Node, NodeData, Position, make_edge_id

IdPolicy = Literal["numbered", "letter"]

ALPHABET = string.ascii_uppercase
_NON_ALNUM = re.compile(r"[^a-z0-9]")

EMPTY_ID_ERROR = "ID must include at least one letter or number."
DUPLICATE_ID_ERROR = "ID already exists."


def sanitize_node_id(value: str) -> str:
    return _NON_ALNUM.sub("", value.lower())


def first_unused_letter(snapshot: GraphSnapshot) -> str | None:
    used = set(snapshot.node_ids())
    for letter in ALPHABET:
        if letter not in used:
            return letter
    return None


def _numbered_id(snapshot: GraphSnapshot) -> str:
    used = set(snapshot.node_ids())
    n = len(snapshot.nodes) + 1
    while f"Node{n}" in used:
        n += 1
    return f"Node{n}"


def place_near(snapshot: GraphSnapshot, position: Position, min_distance: float = 150.0) -> Position:
    """Move `position` out of the first pinned node closer than `min_distance`."""
    for node in snapshot.nodes:
        if node.position is None:
            continue
        dx = node.position.x - position.x
        dy = node.position.y - position.y
        if math.hypot(dx, dy) < min_distance:
            angle = math.atan2(dy, dx)
            return Position(
                node.position.x + math.cos(angle) * min_distance,
                node.position.y + math.sin(angle) * min_distance,
            )
    return position


def add_node(
    snapshot: GraphSnapshot,
    *,
    node_id: str | None = None,
    label: str | None = None,
    position: Position | None = None,
    id_policy: IdPolicy = "numbered",
) -> GraphSnapshot:
    """Append a node. With the letter policy and A-Z exhausted this is a no-op."""
    if node_id is None:
        if id_policy == "letter":
            node_id = first_unused_letter(snapshot)
            if node_id is None:
                return snapshot
        else:
            node_id = _numbered_id(snapshot)
    elif snapshot.has_node(node_id):
        raise GraphEditError(f"Node '{node_id}' already exists.")

    node = Node(id=node_id, data=NodeData(label=label if label is not None else node_id), position=position)
    return replace(snapshot, nodes=snapshot.nodes + (node,))


def add_edge(snapshot: GraphSnapshot, source: str, target: str, *, directed: bool = True) -> GraphSnapshot:
    if source == target:
        raise GraphEditError("An edge needs two different nodes.")
    for endpoint in (source, target):
        if not snapshot.has_node(endpoint):
            raise GraphEditError(f"Node '{endpoint}' does not exist.")

    taken = {e.id for e in snapshot.edges}
    edge = Edge(id=make_edge_id(source, target, directed, taken), source=source, target=target, directed=directed)
    return replace(snapshot, edges=snapshot.edges + (edge,))


def rename_node(snapshot: GraphSnapshot, old_id: str, new_id: str, new_label: str | None = None) -> GraphSnapshot:
    """Rename a node and point every edge at the new id.

    `new_id` is sanitized first (lower-case, alphanumerics only).

    Raises:
        GraphEditError: unknown node, empty id after sanitizing, or collision.
    """
    node = snapshot.get_node(old_id)
    if node is None:
        raise GraphEditError(f"Node '{old_id}' does not exist.")

    sanitized = sanitize_node_id(new_id)
    if not sanitized:
        raise GraphEditError(EMPTY_ID_ERROR)
    if sanitized != old_id and snapshot.has_node(sanitized):
        raise GraphEditError(DUPLICATE_ID_ERROR)

    label = (new_label or "").strip() or sanitized
    renamed = replace(node, id=sanitized, data=replace(node.data, label=label))
    nodes = tuple(renamed if n.id == old_id else n for n in snapshot.nodes)
    edges = tuple(
        replace(
            e,
            source=sanitized if e.source == old_id else e.source,
            target=sanitized if e.target == old_id else e.target,
        )
        if e.touches(old_id)
        else e
        for e in snapshot.edges
    )
    return GraphSnapshot(nodes=nodes, edges=edges)


_NUMBER_FIELDS = ("size", "width")
_CHOICE_FIELDS = {"pattern": EDGE_PATTERNS, "label_mode": LABEL_MODES}


def _check_change(key: str, value: Any) -> Any:
    if value is None:
        return None
    if key == "label":
        if not isinstance(value, str):
            raise GraphEditError("label must be text.")
        return value
    if key == "color":
        if not isinstance(value, str):
            raise GraphEditError("color must be text.")
        return canonical_color(value)
    if key in _NUMBER_FIELDS:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
            raise GraphEditError(f"{key} must be a finite number.")
        return float(value)
    if key in _CHOICE_FIELDS:
        if value not in _CHOICE_FIELDS[key]:
            raise GraphEditError(f"{key} must be one of: {', '.join(_CHOICE_FIELDS[key])}.")
        return value
    return value


def _merge(data: Any, changes: Mapping[str, Any]) -> Any:
    """Apply validated `changes`; unknown field names raise TypeError."""
    return replace(data, **{key: _check_change(key, value) for key, value in changes.items()})


def update_node(snapshot: GraphSnapshot, node_id: str, **changes: Any) -> GraphSnapshot:
    """Shallow-merge `changes` into a node's data."""
    if not snapshot.has_node(node_id):
        return snapshot
    nodes = tuple(replace(n, data=_merge(n.data, changes)) if n.id == node_id else n for n in snapshot.nodes)
    return replace(snapshot, nodes=nodes)


def update_edge(snapshot: GraphSnapshot, edge_id: str, **changes: Any) -> GraphSnapshot:
    """Shallow-merge `changes` into an edge's data."""
    if snapshot.get_edge(edge_id) is None:
        return snapshot
    edges = tuple(replace(e, data=_merge(e.data, changes)) if e.id == edge_id else e for e in snapshot.edges)
    return replace(snapshot, edges=edges)


def delete_node(snapshot: GraphSnapshot, node_id: str) -> GraphSnapshot:
    """Remove a node and every edge touching it."""
    if not snapshot.has_node(node_id):
        return snapshot
    return GraphSnapshot(
        nodes=tuple(n for n in snapshot.nodes if n.id != node_id),
        edges=tuple(e for e in snapshot.edges if not e.touches(node_id)),
    )


def delete_edge(snapshot: GraphSnapshot, edge_id: str) -> GraphSnapshot:
    if snapshot.get_edge(edge_id) is None:
        return snapshot
    return replace(snapshot, edges=tuple(e for e in snapshot.edges if e.id != edge_id))


def set_node_position(snapshot: GraphSnapshot, node_id: str, position: Position | None) -> GraphSnapshot:
    """Pin a node at `position`, or unpin it when `position` is None."""
    if not snapshot.has_node(node_id):
        return snapshot
    nodes = tuple(replace(n, position=position) if n.id == node_id else n for n in snapshot.nodes)
    return replace(snapshot, nodes=nodes)


def save_positions(snapshot: GraphSnapshot, positions: Mapping[str, Position]) -> GraphSnapshot:
    """Pin every node named in `positions` (ids not in the graph are ignored)."""
    if not any(snapshot.has_node(node_id) for node_id in positions):
        return snapshot
    nodes = tuple(replace(n, position=positions[n.id]) if n.id in positions else n for n in snapshot.nodes)
    return replace(snapshot, nodes=nodes)
