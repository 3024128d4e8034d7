"""The illustrative graph shown when nothing was persisted."""

from __future__ import annotations

from .models import Edge, GraphSnapshot, Node


def default_snapshot() -> GraphSnapshot:
    return GraphSnapshot(
        nodes=(Node(id="Alice"), Node(id="Lily"), Node(id="Rose")),
        edges=(
            Edge(id="Alice->Lily", source="Alice", target="Lily", directed=True),
            Edge(id="Lily--Rose", source="Lily", target="Rose", directed=False),
        ),
    )
