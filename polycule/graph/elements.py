"""Flat element list handed to the layout/render collaborator."""

from __future__ import annotations

from typing import Any

from ..dot.colors import DEFAULT_FALLBACK, string_to_color
from ..models import GraphSnapshot

DEFAULT_EDGE_WIDTH = 3.0


def layout_mode(snapshot: GraphSnapshot) -> str:
    """`preset` when any node is pinned, otherwise the force-directed `cose`."""
    return "preset" if any(n.pinned for n in snapshot.nodes) else "cose"


def to_elements(
    snapshot: GraphSnapshot,
    *,
    fallback_color: str = DEFAULT_FALLBACK,
    default_edge_width: float = DEFAULT_EDGE_WIDTH,
) -> list[dict[str, Any]]:
    elements: list[dict[str, Any]] = []
    for node in snapshot.nodes:
        label = node.label
        data: dict[str, Any] = {
            "id": node.id,
            "label": label,
            "color": node.data.color or string_to_color(label),
        }
        if node.data.size is not None:
            data["size"] = node.data.size
        element: dict[str, Any] = {"group": "nodes", "data": data}
        if node.position is not None:
            element["position"] = {"x": node.position.x, "y": node.position.y}
        elements.append(element)

    for edge in snapshot.edges:
        elements.append(
            {
                "group": "edges",
                "data": {
                    "id": edge.id,
                    "source": edge.source,
                    "target": edge.target,
                    "label": edge.data.label or "",
                    "color": edge.data.color or fallback_color,
                    "width": edge.data.width if edge.data.width is not None else default_edge_width,
                    "pattern": edge.data.pattern or "solid",
                    "label_mode": edge.data.label_mode or "always",
                    "directed": edge.directed,
                },
            }
        )
    return elements
