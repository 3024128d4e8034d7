from polycule.change_log import read_change_log
from polycule.graph.intents import CreateNodeAt, RequestRename
from polycule.models import Position
from polycule.persistence.codec import decode_graph
from polycule.persistence.sync import LocationFragment, MemoryStorage
from polycule.session import GraphSession


def test_open_loads_default_and_wires_components(config) -> None:
    storage = MemoryStorage()
    session, result = GraphSession.open(config, storage=storage)
    assert result.source == "default"
    assert session.store.snapshot.node_ids() == ["Alice", "Lily", "Rose"]

    assert session.dispatch(CreateNodeAt(Position(400, 400))) == "A"
    assert "A" in decode_graph(storage.token).node_ids()
    assert '"A"' in session.draft.committed_text


def test_elements_follow_config(config) -> None:
    session, _ = GraphSession.open(config, storage=MemoryStorage())
    edges = [e for e in session.elements() if e["group"] == "edges"]
    assert all(e["data"]["color"] == config.fallback_color for e in edges)
    assert all(e["data"]["width"] == config.default_edge_width for e in edges)


def test_draft_commit_is_persisted(config) -> None:
    fragment = LocationFragment()
    session, _ = GraphSession.open(config, fragment, MemoryStorage())
    session.draft.edit("graph { P -- Q }")
    assert session.draft.save()
    assert decode_graph(fragment.value[len("#g="):]).node_ids() == ["P", "Q"]


def test_record_changes(config) -> None:
    session, _ = GraphSession.open(config, storage=MemoryStorage(), record_changes=True)
    session.dispatch(RequestRename("Alice", "ali", "Ali"))
    entries = read_change_log(config.change_log_path)
    assert [e.operation for e in entries] == ["rename-node"]
    assert entries[0].added.nodes == 1
    assert entries[0].removed.nodes == 1


def test_unwritable_storage_does_not_break_the_session(tmp_path) -> None:
    from polycule.config import PersistenceConfig, PolyculeConfig

    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    config = PolyculeConfig(
        persistence=PersistenceConfig(storage_path=blocker / "storage.json"),
        change_log_path=None,
    )
    session, result = GraphSession.open(config)
    assert result.source == "default"

    session.draft.edit("graph { P -- Q }")
    assert session.draft.save() is True
    assert session.store.snapshot.node_ids() == ["P", "Q"]
    assert session.fragment.value.startswith("#g=")
