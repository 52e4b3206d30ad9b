from __future__ import annotations

import re

import pytest

from sugars.core.build.catalog import make_node
from sugars.core.models.edge import ProcessEdge
from sugars.core.models.equipment import EquipmentKind
from sugars.core.models.graph import ProcessGraph, new_uid


def test_queries(example):
    assert len(example) == 9
    assert [n.uid for n in example][0] == "input-1"
    assert example.get_node("mill-1").kind is EquipmentKind.MILL
    assert example.get_edge("e3").target == "clarifier-1"
    assert [e.uid for e in example.edges_from("mill-1")] == ["e2", "e3"]
    assert [e.uid for e in example.edges_to("evaporator-1")] == ["e4", "e5"]
    assert example.get_node("output-1").param("purity") == 99.8
    assert example.get_node("output-1").param("missing", 1) == 1
    with pytest.raises(KeyError):
        example.get_node("nope")


def test_mutations_return_new_graphs(example):
    smaller = example.without_node("heater-1")
    assert "heater-1" in example.nodes
    assert len(example.edges) == 9
    assert "heater-1" not in smaller.nodes
    assert set(smaller.edges) == {"e1", "e3", "e5", "e6", "e7", "e8", "e9"}

    assert example.without_node("nope") is example
    assert example.without_edge("nope") is example


def test_replacing_a_node_keeps_its_order(example):
    moved = make_node(EquipmentKind.MILL, (0, 0), node_id="mill-1")
    g = example.with_node(moved)
    assert list(g.nodes) == list(example.nodes)
    assert g.nodes["mill-1"].position.x == 0.0


def test_edges_need_existing_endpoints():
    g = ProcessGraph().with_node(make_node(EquipmentKind.TANK, node_id="t"))
    with pytest.raises(KeyError):
        g.with_edge(ProcessEdge(uid="e", source="t", target="x"))
    with pytest.raises(KeyError):
        g.with_edge(ProcessEdge(uid="e", source="x", target="t"))


def test_new_uid_format():
    a, b = new_uid("mill"), new_uid("mill")
    assert a != b
    assert re.fullmatch(r"mill-[0-9a-f]{12}", a)
