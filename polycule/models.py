"""Data models for graph snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

EdgePattern = Literal["solid", "dashed", "dotted"]
LabelMode = Literal["always", "hover"]

EDGE_PATTERNS: tuple[str, ...] = ("solid", "dashed", "dotted")
LABEL_MODES: tuple[str, ...] = ("always", "hover")


@dataclass(frozen=True)
class Position:
    """Pinned canvas coordinates."""

    x: float
    y: float


@dataclass(frozen=True)
class NodeData:
    label: str | None = None
    color: str | None = None
    size: float | None = None


@dataclass(frozen=True)
class Node:
    """A person in the graph. `id` is unique and doubles as the display key."""

    id: str
    data: NodeData = field(default_factory=NodeData)
    position: Position | None = None  # None = let the layout engine place it

    @property
    def label(self) -> str:
        """Display label, falling back to the id."""
        return self.data.label or self.id

    @property
    def pinned(self) -> bool:
        return self.position is not None

    @property
    def style(self) -> dict[str, Any]:
        """Presentational fields mirrored from `data`."""
        style: dict[str, Any] = {}
        if self.data.color:
            style["background"] = self.data.color
        if self.data.size is not None:
            style["width"] = self.data.size
            style["height"] = self.data.size
        return style


@dataclass(frozen=True)
class EdgeData:
    label: str | None = None
    color: str | None = None
    width: float | None = None
    pattern: EdgePattern | None = None  # None renders as solid
    label_mode: LabelMode | None = None  # None renders as always


@dataclass(frozen=True)
class Edge:
    """A relationship between two nodes."""

    id: str
    source: str
    target: str
    data: EdgeData = field(default_factory=EdgeData)
    directed: bool = True  # rendering hint only

    @property
    def op(self) -> str:
        return "->" if self.directed else "--"

    def touches(self, node_id: str) -> bool:
        return self.source == node_id or self.target == node_id

    @property
    def style(self) -> dict[str, Any]:
        """Presentational fields mirrored from `data`."""
        style: dict[str, Any] = {}
        if self.data.color:
            style["stroke"] = self.data.color
        if self.data.width is not None:
            style["stroke_width"] = self.data.width
        return style


@dataclass(frozen=True)
class GraphSnapshot:
    """The full graph state at one point in time (insertion ordered)."""

    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()

    def node_ids(self) -> list[str]:
        return [n.id for n in self.nodes]

    def has_node(self, node_id: str) -> bool:
        return any(n.id == node_id for n in self.nodes)

    def get_node(self, node_id: str) -> Node | None:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def get_edge(self, edge_id: str) -> Edge | None:
        for edge in self.edges:
            if edge.id == edge_id:
                return edge
        return None

    def edge_pairs(self) -> list[tuple[str, str]]:
        return [(e.source, e.target) for e in self.edges]


def make_edge_id(source: str, target: str, directed: bool, taken: set[str] | None = None) -> str:
    """Build `<source><op><target>`, suffixed `#2`, `#3`... if already taken."""
    base = f"{source}{'->' if directed else '--'}{target}"
    taken = taken or set()
    if base not in taken:
        return base
    n = 2
    while f"{base}#{n}" in taken:
        n += 1
    return f"{base}#{n}"
