from __future__ import annotations

import pytest

from sugars.core.build.catalog import make_node
from sugars.core.models.equipment import EquipmentKind
from sugars.core.models.node import Position, ProcessNode

K = EquipmentKind


def _edges_touching(store, node_id):
    return [e for e in store.edges.values() if node_id in (e.source, e.target)]


# ============================================================
# Nodes
# ============================================================

def test_add_node_appends_in_order(store):
    a = make_node(K.INPUT, node_id="a")
    b = make_node(K.MILL, node_id="b")
    store.add_node(a)
    store.add_node(b)
    assert list(store.nodes) == ["a", "b"]
    assert store.nodes["b"] is b


def test_create_node_uses_catalog_defaults_and_fresh_ids(store):
    n1 = store.create_node("mill", (10, 20))
    n2 = store.create_node(K.MILL)
    assert n1.uid != n2.uid
    assert n1.kind is K.MILL
    assert n1.params == {"efficiency": 95, "rollerSpeed": 6, "pressure": 250}
    assert n1.position == Position(10.0, 20.0)
    assert n1.params is not n2.params


def test_update_node_replaces_params_without_validation(store):
    n = store.create_node(K.MILL)
    store.update_node(n.uid, {"params": {"efficiency": 250, "rollerSpeed": "fast"}})
    updated = store.nodes[n.uid]
    assert updated.params == {"efficiency": 250, "rollerSpeed": "fast"}
    assert updated.kind is K.MILL


def test_update_node_unknown_id_is_noop(store):
    store.load_example()
    graph_before = store.graph
    store.update_node("nope", {"params": {"efficiency": 1}})
    assert store.graph is graph_before


def test_update_node_extra_keys_go_to_metadata(store):
    n = store.create_node(K.TANK)
    store.update_node(n.uid, {"label": "Tanque de jugo", "note": "check level"})
    updated = store.nodes[n.uid]
    assert updated.label == "Tanque de jugo"
    assert updated.metadata == {"note": "check level"}


def test_update_node_cannot_change_kind(store):
    n = store.create_node(K.TANK)
    with pytest.raises(ValueError):
        store.update_node(n.uid, {"kind": "mill"})


def test_params_are_read_only_and_not_shared(store):
    params = {"efficiency": 80}
    store.add_node(ProcessNode(uid="m", kind=K.MILL, params=params))
    rev = store.revision

    params["efficiency"] = 10
    assert store.nodes["m"].params["efficiency"] == 80
    with pytest.raises(TypeError):
        store.nodes["m"].params["efficiency"] = 10
    assert store.revision == rev


def test_selected_node_follows_updates(store):
    n = store.create_node(K.MILL)
    store.set_selected(n)
    store.update_node(n.uid, {"params": {"efficiency": 90}})
    assert store.selected.params == {"efficiency": 90}
    store.set_selected(None)
    assert store.selected is None


def test_remove_node_cascades_edges_and_selection(store):
    store.load_example()
    store.set_selected("mill-1")
    assert len(_edges_touching(store, "mill-1")) == 3

    store.remove_node("mill-1")

    assert "mill-1" not in store.nodes
    assert _edges_touching(store, "mill-1") == []
    assert len(store.edges) == 6
    assert store.selected is None


def test_remove_node_keeps_other_selection(store):
    store.load_example()
    store.set_selected("dryer-1")
    store.remove_node("mill-1")
    assert store.selected.uid == "dryer-1"


def test_no_dangling_edges_after_many_removals(store):
    store.load_example()
    for uid in ["evaporator-1", "input-1", "output-1"]:
        store.remove_node(uid)
        for e in store.edges.values():
            assert e.source in store.nodes and e.target in store.nodes


# ============================================================
# Edges
# ============================================================

def test_duplicate_connect_gives_distinct_edges(store):
    a = store.create_node(K.INPUT)
    b = store.create_node(K.MILL)
    e1 = store.connect(a.uid, b.uid)
    e2 = store.connect(a.uid, b.uid)
    assert e1.uid != e2.uid
    assert len(store.edges) == 2
    assert (e1.source, e1.target) == (e2.source, e2.target) == (a.uid, b.uid)


def test_connect_accepts_cycles(store):
    a = store.create_node(K.TANK)
    b = store.create_node(K.PUMP)
    store.connect(a.uid, b.uid)
    store.connect(b.uid, a.uid)
    store.connect(a.uid, a.uid)
    assert len(store.edges) == 3


def test_connect_unknown_node_raises(store):
    a = store.create_node(K.TANK)
    with pytest.raises(KeyError):
        store.connect(a.uid, "ghost")
    assert store.edges == {}


def test_connect_after_example_does_not_collide(store):
    store.load_example()
    e = store.connect("input-1", "output-1")
    assert e.uid not in {"e1", "e2", "e3", "e4", "e5", "e6", "e7", "e8", "e9"}
    assert len(store.edges) == 10


def test_id_factory_collisions_are_retried(example):
    from sugars.core.build.config import ModelConfig
    from sugars.core.store.store import ProcessGraphStore

    ids = iter(["e1", "e2", "e-new"])
    s = ProcessGraphStore(ModelConfig(), id_factory=lambda prefix: next(ids))
    s.set_graph(example)
    assert s.connect("input-1", "output-1").uid == "e-new"


def test_id_factory_that_only_repeats_gives_up(store):
    from sugars.core.build.config import ModelConfig
    from sugars.core.store.store import ProcessGraphStore

    s = ProcessGraphStore(ModelConfig(), id_factory=lambda prefix: f"{prefix}-1")
    s.create_node(K.TANK)
    with pytest.raises(RuntimeError, match="taken ids"):
        s.create_node(K.TANK)
    assert len(s.nodes) == 1


def test_disconnect(store):
    store.load_example()
    store.disconnect("e5")
    store.disconnect("missing")
    assert "e5" not in store.edges
    assert len(store.edges) == 8


# ============================================================
# Bulk changes
# ============================================================

def test_apply_node_changes(store):
    store.load_example()
    rev = store.revision
    store.apply_node_changes([
        {"type": "position", "id": "mill-1", "position": {"x": 1.0, "y": 2.0}},
        {"type": "select", "id": "heater-1", "selected": True},
        {"type": "dimensions", "id": "heater-1"},
    ])
    assert store.nodes["mill-1"].position == Position(1.0, 2.0)
    assert store.selected.uid == "heater-1"
    assert store.revision == rev  # moving nodes does not affect the balance

    store.apply_node_changes([{"type": "remove", "id": "heater-1"}])
    assert "heater-1" not in store.nodes
    assert _edges_touching(store, "heater-1") == []
    assert store.selected is None


def test_apply_edge_changes(store):
    store.load_example()
    store.apply_edge_changes([{"type": "remove", "id": "e1"}, {"type": "select", "id": "e2"}])
    assert "e1" not in store.edges
    assert "e2" in store.edges


# ============================================================
# Whole graph
# ============================================================

def test_load_example_topology(store):
    store.create_node(K.PUMP)
    store.load_example()

    assert len(store.nodes) == 9
    assert len(store.edges) == 9
    pairs = [(e.source, e.target) for e in store.edges.values()]
    assert pairs == [
        ("input-1", "mill-1"),
        ("mill-1", "heater-1"),
        ("mill-1", "clarifier-1"),
        ("heater-1", "evaporator-1"),
        ("clarifier-1", "evaporator-1"),
        ("evaporator-1", "crystallizer-1"),
        ("crystallizer-1", "centrifuge-1"),
        ("centrifuge-1", "dryer-1"),
        ("dryer-1", "output-1"),
    ]
    assert store.result is None
    assert store.selected is None


def test_load_example_is_fresh_every_time(store):
    store.load_example()
    store.update_node("input-1", {"params": {"flowRate": 5}})
    store.load_example()
    assert store.nodes["input-1"].params["flowRate"] == 1000


def test_clear_resets_everything(store):
    store.load_example()
    store.set_selected("mill-1")
    store.clear()
    assert store.nodes == {}
    assert store.edges == {}
    assert store.selected is None
    assert store.result is None
    assert not store.running

    store.clear()
    assert store.nodes == {} and store.edges == {}


def test_to_document_is_plain_data(store):
    store.load_example()
    doc = store.to_document()
    assert set(doc) == {"nodes", "edges", "results"}
    assert doc["results"] is None
    assert doc["nodes"][0]["id"] == "input-1"
    assert doc["nodes"][0]["data"]["type"] == "input"
    assert doc["edges"][0] == {
        "id": "e1", "source": "input-1", "target": "mill-1", "type": "smoothstep", "animated": True,
    }


EXAMPLE_NODES = [
    ("input-1", "input", "Raw Sugar Cane", "🌿", "#22c55e", (50.0, 200.0),
     {"flowRate": 1000, "brixContent": 15, "temperature": 25, "purity": 85}),
    ("mill-1", "mill", "Crushing Mill", "⚙️", "#64748b", (300.0, 200.0),
     {"efficiency": 95, "rollerSpeed": 6, "pressure": 250}),
    ("heater-1", "heater", "Juice Heater", "🔥", "#f97316", (550.0, 100.0),
     {"targetTemp": 105, "heatDuty": 500, "efficiency": 92}),
    ("clarifier-1", "clarifier", "Clarifier", "🧪", "#8b5cf6", (550.0, 300.0),
     {"retentionTime": 45, "limeAddition": 0.5, "flocculant": 3}),
    ("evaporator-1", "evaporator", "Multiple Effect Evaporator", "💨", "#06b6d4", (800.0, 200.0),
     {"effects": 5, "steamPressure": 2.5, "targetBrix": 65, "efficiency": 88}),
    ("crystallizer-1", "crystallizer", "Vacuum Pan", "💎", "#ec4899", (1050.0, 200.0),
     {"vacuum": 0.85, "seedAmount": 5, "boilingTime": 180, "crystalSize": 0.6}),
    ("centrifuge-1", "centrifuge", "Centrifuge", "🌀", "#3b82f6", (1300.0, 200.0),
     {"speed": 1200, "cycleTime": 3, "washWater": 2}),
    ("dryer-1", "dryer", "Rotary Dryer", "🌡️", "#eab308", (1550.0, 200.0),
     {"airTemp": 85, "residenceTime": 20, "targetMoisture": 0.05}),
    ("output-1", "output", "White Sugar", "🍬", "#10b981", (1800.0, 200.0),
     {"purity": 99.8, "moisture": 0.04, "color": 25}),
]


def test_example_fixture_values(store):
    store.load_example()
    got = [
        (n.uid, n.kind.value, n.label, n.icon, n.color, (n.position.x, n.position.y), dict(n.params))
        for n in store.nodes.values()
    ]
    assert got == EXAMPLE_NODES
    assert list(store.edges) == [f"e{i}" for i in range(1, 10)]
