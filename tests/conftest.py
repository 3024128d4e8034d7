"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from polycule.config import PersistenceConfig, PolyculeConfig
from polycule.graph.store import GraphStore
from polycule.models import Edge, EdgeData, GraphSnapshot, Node, NodeData, Position

SAMPLE_DOT = """graph G {
  "Alice" [label="Alice Smith", color="#ff0000", size=40, x="10", y="-20.5"];
  "Bob";
  "Alice" -- "Bob" [label="dating", color="#00ff00", penwidth=2.5, style="dashed", labelmode="hover"];
}
"""


@pytest.fixture
def sample_snapshot() -> GraphSnapshot:
    """Snapshot matching SAMPLE_DOT exactly."""
    return GraphSnapshot(
        nodes=(
            Node(
                id="Alice",
                data=NodeData(label="Alice Smith", color="#ff0000", size=40.0),
                position=Position(10.0, -20.5),
            ),
            Node(id="Bob"),
        ),
        edges=(
            Edge(
                id="Alice--Bob",
                source="Alice",
                target="Bob",
                data=EdgeData(label="dating", color="#00ff00", width=2.5, pattern="dashed", label_mode="hover"),
                directed=False,
            ),
        ),
    )


@pytest.fixture
def triangle() -> GraphSnapshot:
    """Three nodes, edges A-B and C-A."""
    return GraphSnapshot(
        nodes=(Node(id="A"), Node(id="B"), Node(id="C")),
        edges=(
            Edge(id="A--B", source="A", target="B", directed=False),
            Edge(id="C--A", source="C", target="A", directed=False),
        ),
    )


@pytest.fixture
def store(triangle: GraphSnapshot) -> GraphStore:
    return GraphStore(triangle)


@pytest.fixture
def config(tmp_path: Path) -> PolyculeConfig:
    """Config with storage and change log under tmp_path."""
    return PolyculeConfig(
        persistence=PersistenceConfig(storage_path=tmp_path / "storage.json"),
        change_log_path=tmp_path / "changes.log",
    )


@pytest.fixture
def dot_file(tmp_path: Path) -> Path:
    path = tmp_path / "graph.dot"
    path.write_text(SAMPLE_DOT, encoding="utf-8")
    return path


@pytest.fixture
def sample_dot() -> str:
    return SAMPLE_DOT
