import math
import string

import pytest

from polycule.errors import GraphEditError
from polycule.graph import ops
from polycule.models import GraphSnapshot, Node, Position


def test_rename_cascades_to_edges(triangle) -> None:
    renamed = ops.rename_node(triangle, "A", "z", "Zed")
    assert renamed.node_ids() == ["z", "B", "C"]
    assert renamed.get_node("z").label == "Zed"
    assert renamed.edge_pairs() == [("z", "B"), ("C", "z")]
    assert all(not e.touches("A") for e in renamed.edges)
    # edge ids stay stable
    assert [e.id for e in renamed.edges] == ["A--B", "C--A"]


def test_rename_sanitizes_and_defaults_label(triangle) -> None:
    renamed = ops.rename_node(triangle, "B", " Mr. Bee! ", "   ")
    node = renamed.get_node("mrbee")
    assert node is not None
    assert node.label == "mrbee"


def test_rename_collision_is_rejected() -> None:
    snapshot = GraphSnapshot(nodes=(Node(id="alice"), Node(id="bob")))
    with pytest.raises(GraphEditError, match=ops.DUPLICATE_ID_ERROR):
        ops.rename_node(snapshot, "alice", "Bob!")
    assert snapshot.node_ids() == ["alice", "bob"]


def test_rename_to_empty_id_is_rejected(triangle) -> None:
    with pytest.raises(GraphEditError, match=ops.EMPTY_ID_ERROR):
        ops.rename_node(triangle, "A", "!!!")


def test_rename_unknown_node(triangle) -> None:
    with pytest.raises(GraphEditError):
        ops.rename_node(triangle, "nobody", "x")


def test_delete_node_cascades(triangle) -> None:
    after = ops.delete_node(triangle, "A")
    assert after.node_ids() == ["B", "C"]
    assert after.edges == ()


def test_delete_missing_entities_is_a_no_op(triangle) -> None:
    assert ops.delete_node(triangle, "Z") is triangle
    assert ops.delete_edge(triangle, "Z--Y") is triangle


def test_delete_edge(triangle) -> None:
    after = ops.delete_edge(triangle, "A--B")
    assert [e.id for e in after.edges] == ["C--A"]
    assert after.node_ids() == ["A", "B", "C"]


def test_add_edge_defaults_to_directed(triangle) -> None:
    after = ops.add_edge(triangle, "B", "C")
    edge = after.edges[-1]
    assert edge.id == "B->C"
    assert edge.directed


def test_add_edge_repeated_gets_suffix(triangle) -> None:
    after = ops.add_edge(ops.add_edge(triangle, "B", "C"), "B", "C")
    assert [e.id for e in after.edges[-2:]] == ["B->C", "B->C#2"]


def test_add_edge_rejects_self_loop_and_missing_nodes(triangle) -> None:
    with pytest.raises(GraphEditError):
        ops.add_edge(triangle, "A", "A")
    with pytest.raises(GraphEditError):
        ops.add_edge(triangle, "A", "Q")


def test_add_node_id_policies() -> None:
    empty = GraphSnapshot()
    assert ops.add_node(empty).node_ids() == ["Node1"]
    assert ops.add_node(empty, id_policy="letter").node_ids() == ["A"]

    used = GraphSnapshot(nodes=(Node(id="A"), Node(id="C")))
    assert ops.add_node(used, id_policy="letter").node_ids()[-1] == "B"


def test_add_node_letter_policy_exhausted() -> None:
    full = GraphSnapshot(nodes=tuple(Node(id=letter) for letter in string.ascii_uppercase))
    assert ops.add_node(full, id_policy="letter") is full


def test_add_node_explicit_duplicate(triangle) -> None:
    with pytest.raises(GraphEditError):
        ops.add_node(triangle, node_id="A")


def test_place_near_pushes_away_from_pinned_nodes() -> None:
    snapshot = GraphSnapshot(nodes=(Node(id="A", position=Position(0, 0)),))
    placed = ops.place_near(snapshot, Position(10, 0), 150)
    assert math.hypot(placed.x, placed.y) == pytest.approx(150)
    assert placed.x == pytest.approx(-150)

    far = Position(500, 500)
    assert ops.place_near(snapshot, far, 150) == far


def test_update_canonicalizes_colors(triangle) -> None:
    after = ops.update_node(triangle, "A", color="hsl(0, 100%, 50%)", size=30.0)
    assert after.get_node("A").data.color == "#ff0000"
    assert after.get_node("A").data.size == 30.0

    after = ops.update_edge(after, "A--B", color="#ABC", label="partners")
    edge = after.get_edge("A--B")
    assert edge.data.color == "#aabbcc"
    assert edge.data.label == "partners"

    after = ops.update_edge(after, "A--B", color="#xyz")
    assert after.get_edge("A--B").data.color is None


def test_positions(triangle) -> None:
    after = ops.set_node_position(triangle, "A", Position(1, 2))
    assert after.get_node("A").pinned
    after = ops.set_node_position(after, "A", None)
    assert not after.get_node("A").pinned

    saved = ops.save_positions(triangle, {"B": Position(3, 4), "ghost": Position(0, 0)})
    assert saved.get_node("B").position == Position(3, 4)
    assert "ghost" not in saved.node_ids()
    assert ops.save_positions(triangle, {"ghost": Position(0, 0)}) is triangle


@pytest.mark.parametrize(
    ("update", "entity", "changes"),
    [
        (ops.update_edge, "A--B", {"pattern": "wavy"}),
        (ops.update_edge, "A--B", {"label_mode": "sometimes"}),
        (ops.update_edge, "A--B", {"width": float("nan")}),
        (ops.update_node, "A", {"size": "big"}),
        (ops.update_node, "A", {"size": True}),
        (ops.update_node, "A", {"label": 7}),
        (ops.update_node, "A", {"color": 255}),
    ],
)
def test_update_rejects_invalid_values(triangle, update, entity, changes) -> None:
    with pytest.raises(GraphEditError):
        update(triangle, entity, **changes)


def test_update_accepts_valid_values_and_clears(triangle) -> None:
    after = ops.update_edge(triangle, "A--B", pattern="dotted", label_mode="hover", width=4)
    data = after.get_edge("A--B").data
    assert (data.pattern, data.label_mode, data.width) == ("dotted", "hover", 4.0)

    after = ops.update_edge(after, "A--B", pattern=None, width=None)
    assert after.get_edge("A--B").data.pattern is None
    assert after.get_edge("A--B").data.width is None
