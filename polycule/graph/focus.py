"""Neighborhood (focus mode) traversal."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from ..models import GraphSnapshot


@dataclass
class Adjacency:
    """Undirected adjacency view of a snapshot."""

    neighbors: dict[str, set[str]] = field(default_factory=dict)

    @classmethod
    def from_snapshot(cls, snapshot: GraphSnapshot) -> "Adjacency":
        adj = cls()
        for node in snapshot.nodes:
            adj.neighbors.setdefault(node.id, set())
        for edge in snapshot.edges:
            adj.neighbors.setdefault(edge.source, set()).add(edge.target)
            adj.neighbors.setdefault(edge.target, set()).add(edge.source)
        return adj

    def distances(self, start: str, limit: int) -> dict[str, int]:
        """Hop distance of every node within `limit` hops of `start`."""
        dist = {start: 0}
        queue = deque([start])
        while queue:
            current = queue.popleft()
            if dist[current] >= limit:
                continue
            for nxt in sorted(self.neighbors.get(current, set())):
                if nxt not in dist:
                    dist[nxt] = dist[current] + 1
                    queue.append(nxt)
        return dist


def focus_subgraph(snapshot: GraphSnapshot, node_id: str, depth: int = 1) -> GraphSnapshot:
    """Nodes within `depth` hops of `node_id`, and the edges reaching out from
    the inner `depth - 1` hops (so every kept edge has both endpoints kept).

    Returns an empty snapshot for an unknown node.
    """
    if depth < 1:
        raise ValueError("depth must be at least 1")
    if not snapshot.has_node(node_id):
        return GraphSnapshot()

    dist = Adjacency.from_snapshot(snapshot).distances(node_id, depth)
    nodes = tuple(n for n in snapshot.nodes if n.id in dist)
    edges = tuple(
        e
        for e in snapshot.edges
        if (dist.get(e.source, depth) < depth or dist.get(e.target, depth) < depth)
        and e.source in dist
        and e.target in dist
    )
    return GraphSnapshot(nodes=nodes, edges=edges)
