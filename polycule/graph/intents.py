"""Gesture intents coming back from the render collaborator.

The renderer recognizes taps, long presses and context-menu picks; it hands
the core one of these intents and `dispatch` turns it into store operations.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Union

from ..models import Position
from . import ops
from .store import EntityKind, GraphStore


@dataclass(frozen=True)
class SelectEntity:
    kind: EntityKind
    id: str


@dataclass(frozen=True)
class ClearSelection:
    pass


@dataclass(frozen=True)
class CreateNodeAt:
    position: Position


@dataclass(frozen=True)
class CreateEdge:
    source: str
    target: str


@dataclass(frozen=True)
class RequestRename:
    id: str
    new_id: str
    label: str | None = None


@dataclass(frozen=True)
class RequestDelete:
    kind: EntityKind
    id: str


@dataclass(frozen=True)
class MoveNode:
    id: str
    position: Position


@dataclass(frozen=True)
class SavePositions:
    positions: Mapping[str, Position] = field(default_factory=dict)


Intent = Union[
    SelectEntity, ClearSelection, CreateNodeAt, CreateEdge, RequestRename, RequestDelete, MoveNode, SavePositions
]


def dispatch(store: GraphStore, intent: Intent, *, min_node_distance: float = 150.0) -> str | None:
    """Apply `intent` to `store`.

    Returns the id of a created or renamed entity, else None. Rejected edits
    raise `GraphEditError` for the caller to show.
    """
    if isinstance(intent, SelectEntity):
        store.select(intent.kind, intent.id)
    elif isinstance(intent, ClearSelection):
        store.clear_selection()
    elif isinstance(intent, CreateNodeAt):
        position = ops.place_near(store.snapshot, intent.position, min_node_distance)
        return store.add_node(position=position, id_policy="letter")
    elif isinstance(intent, CreateEdge):
        return store.add_edge(intent.source, intent.target)
    elif isinstance(intent, RequestRename):
        return store.rename_node(intent.id, intent.new_id, intent.label)
    elif isinstance(intent, RequestDelete):
        if intent.kind == "node":
            store.delete_node(intent.id)
        else:
            store.delete_edge(intent.id)
    elif isinstance(intent, MoveNode):
        store.set_node_position(intent.id, intent.position)
    elif isinstance(intent, SavePositions):
        store.save_positions(intent.positions)
    else:
        raise TypeError(f"Unknown intent: {intent!r}")
    return None
