"""DOT AST -> graph snapshot.

The reducer is tolerant: attributes it cannot coerce are dropped one by one
instead of failing the whole parse, and edge endpoints that were never
declared become bare nodes so no edge can dangle.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

from ..models import (
    EDGE_PATTERNS,
    LABEL_MODES,
    Edge,
    EdgeData,
    GraphSnapshot,
    Node,
    NodeData,
    Position,
    make_edge_id,
)
from .ast import DotAttr, DotGraph, EdgeStmt, NodeStmt, Statement, Subgraph, unquote
from .colors import canonical_color

logger = logging.getLogger(__name__)

# Graphviz node width is in inches; the canvas uses 40px per inch
PX_PER_INCH = 40


def get_attrs(attrs: Iterable[DotAttr]) -> dict[str, str]:
    """Flatten an attribute list into an unquoted map (later keys win)."""
    return {attr.id: unquote(attr.value) for attr in attrs}


def parse_number(raw: str | None) -> float | None:
    """Finite float or None."""
    if raw is None:
        return None
    try:
        value = float(raw.strip())
    except ValueError:
        logger.debug("Dropping non-numeric value %r", raw)
        return None
    return value if math.isfinite(value) else None


def parse_pos(pos_raw: str | None, x_raw: str | None = None, y_raw: str | None = None) -> Position | None:
    """Position from x/y attributes, else from a Graphviz-style `pos="x,y[!]"`."""
    if x_raw is not None or y_raw is not None:
        x, y = parse_number(x_raw), parse_number(y_raw)
        if x is not None and y is not None:
            return Position(x, y)

    if not pos_raw:
        return None
    cleaned = pos_raw.strip()
    if cleaned.endswith("!"):
        cleaned = cleaned[:-1]
    parts = [p.strip() for p in cleaned.split(",")]
    if len(parts) < 2:
        return None
    x, y = parse_number(parts[0]), parse_number(parts[1])
    if x is None or y is None:
        return None
    return Position(x, y)


def _enum(raw: str | None, allowed: Sequence[str]) -> str | None:
    if raw is None:
        return None
    value = raw.strip().lower()
    if value in allowed:
        return value
    logger.debug("Dropping unsupported value %r", raw)
    return None


def _text(raw: str | None) -> str | None:
    return raw if raw else None


def _node_size(attrs: dict[str, str]) -> float | None:
    size = parse_number(attrs.get("size"))
    if size is not None:
        return size
    width = parse_number(attrs.get("width"))
    return width * PX_PER_INCH if width is not None else None


def _node_data(node_id: str, attrs: dict[str, str]) -> NodeData:
    label = attrs.get("label")
    return NodeData(
        label=label if label and label != node_id else None,
        color=canonical_color(attrs.get("color")),
        size=_node_size(attrs),
    )


def _edge_data(attrs: dict[str, str]) -> EdgeData:
    return EdgeData(
        label=_text(attrs.get("label")),
        color=canonical_color(attrs.get("color")),
        width=parse_number(attrs.get("penwidth")),
        pattern=_enum(attrs.get("style"), EDGE_PATTERNS),  # type: ignore[arg-type]
        label_mode=_enum(attrs.get("labelmode"), LABEL_MODES),  # type: ignore[arg-type]
    )


class _Reducer:
    def __init__(self) -> None:
        self.node_attrs: dict[str, dict[str, str]] = {}  # declared nodes, first-seen order
        self.referenced: dict[str, None] = {}  # every id seen, first-seen order
        self.edges: list[Edge] = []
        self.edge_ids: set[str] = set()

    def walk(self, children: Iterable[Statement]) -> None:
        for child in children:
            if isinstance(child, NodeStmt):
                self._node(child)
            elif isinstance(child, EdgeStmt):
                self._edge(child)
            elif isinstance(child, Subgraph):
                self.walk(child.children)

    def _node(self, stmt: NodeStmt) -> None:
        self.referenced.setdefault(stmt.node_id)
        # repeated declarations merge, later attributes win
        self.node_attrs.setdefault(stmt.node_id, {}).update(get_attrs(stmt.attrs))

    def _edge(self, stmt: EdgeStmt) -> None:
        attrs = get_attrs(stmt.attrs)
        directed = False  # the DOT surface carries no direction
        for source, target in zip(stmt.edge_list, stmt.edge_list[1:]):
            self.referenced.setdefault(source)
            self.referenced.setdefault(target)
            edge_id = make_edge_id(source, target, directed, self.edge_ids)
            self.edge_ids.add(edge_id)
            self.edges.append(
                Edge(id=edge_id, source=source, target=target, data=_edge_data(attrs), directed=directed)
            )

    def snapshot(self) -> GraphSnapshot:
        nodes = [
            Node(
                id=node_id,
                data=_node_data(node_id, attrs),
                position=parse_pos(attrs.get("pos"), attrs.get("x"), attrs.get("y")),
            )
            for node_id, attrs in self.node_attrs.items()
        ]
        # endpoints never declared become bare nodes
        nodes.extend(Node(id=node_id) for node_id in self.referenced if node_id not in self.node_attrs)
        return GraphSnapshot(nodes=tuple(nodes), edges=tuple(self.edges))


def dot_ast_to_graph(ast: Sequence[DotGraph]) -> GraphSnapshot:
    """Reduce parsed DOT graphs to a single snapshot."""
    reducer = _Reducer()
    for graph in ast:
        reducer.walk(graph.children)
    return reducer.snapshot()
