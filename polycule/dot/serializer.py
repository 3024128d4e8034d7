"""Graph snapshot -> DOT text."""

from __future__ import annotations

import math
from decimal import Decimal

from ..models import Edge, GraphSnapshot, Node

GRAPH_HEADER = "graph G {"


def esc(s: str) -> str:
    return s.replace("\\", "\\\\").replace('"', '\\"')


def format_number(value: float) -> str:
    """Render a number as given: integral values without a trailing `.0`."""
    if isinstance(value, bool):
        return str(int(value))
    if isinstance(value, int):
        return str(value)
    if math.isfinite(value) and float(value).is_integer():
        return str(int(value))
    text = repr(float(value))
    if "e" in text:
        # DOT numerals have no exponent form
        text = format(Decimal(text), "f")
    return text


def _finite(value: float | None) -> bool:
    return value is not None and math.isfinite(value)


def node_attrs(node: Node) -> list[str]:
    attrs: list[str] = []
    if node.data.label and node.data.label != node.id:
        attrs.append(f'label="{esc(node.data.label)}"')
    if node.data.color:
        attrs.append(f'color="{esc(node.data.color)}"')
    if _finite(node.data.size):
        attrs.append(f"size={format_number(node.data.size)}")
    if node.position is not None and _finite(node.position.x) and _finite(node.position.y):
        attrs.append(f'x="{format_number(node.position.x)}"')
        attrs.append(f'y="{format_number(node.position.y)}"')
    return attrs


def edge_attrs(edge: Edge) -> list[str]:
    attrs: list[str] = []
    if edge.data.label:
        attrs.append(f'label="{esc(edge.data.label)}"')
    if edge.data.color:
        attrs.append(f'color="{esc(edge.data.color)}"')
    if _finite(edge.data.width):
        attrs.append(f"penwidth={format_number(edge.data.width)}")
    if edge.data.pattern and edge.data.pattern != "solid":
        attrs.append(f'style="{edge.data.pattern}"')
    if edge.data.label_mode and edge.data.label_mode != "always":
        attrs.append(f'labelmode="{edge.data.label_mode}"')
    return attrs


def _statement(head: str, attrs: list[str]) -> str:
    if attrs:
        return f"  {head} [{', '.join(attrs)}];"
    return f"  {head};"


def to_dot(snapshot: GraphSnapshot) -> str:
    """Serialize a snapshot to the DOT subset.

    Always emits an undirected `graph`; edge direction is not part of the
    text surface. Output is byte-identical for equal snapshots.
    """
    lines = [GRAPH_HEADER]
    for node in snapshot.nodes:
        lines.append(_statement(f'"{esc(node.id)}"', node_attrs(node)))
    for edge in snapshot.edges:
        lines.append(_statement(f'"{esc(edge.source)}" -- "{esc(edge.target)}"', edge_attrs(edge)))
    lines.append("}")
    return "\n".join(lines) + "\n"
