from __future__ import annotations

import pytest

from sugars.core.build.catalog import (
    CATALOG,
    default_params,
    get_spec,
    iter_categories,
    make_node,
    node_from_payload,
)
from sugars.core.build.config import ModelConfig
from sugars.core.build.params import PARAM_SPECS, param_spec
from sugars.core.models.equipment import EquipmentKind
from sugars.core.models.node import Position
from sugars.core.solver.balance import compute_scalars
from sugars.core.solver.streams import STREAM_RULES, stream_for

K = EquipmentKind


def test_every_kind_has_catalog_entry_and_stream_rule():
    assert set(CATALOG) == set(EquipmentKind)
    assert set(STREAM_RULES) == set(EquipmentKind)
    assert len(EquipmentKind) == 17


def test_categories_in_library_order():
    names = [name for name, _ in iter_categories()]
    assert names == [
        "Inputs & Outputs", "Extraction", "Purification", "Concentration",
        "Crystallization", "Separation", "Utilities",
    ]
    assert sum(len(specs) for _, specs in iter_categories()) == 17


def test_parse_kind():
    assert EquipmentKind.parse(" Mill ") is K.MILL
    assert EquipmentKind.parse(K.PUMP) is K.PUMP
    with pytest.raises(ValueError, match="Unknown equipment kind"):
        EquipmentKind.parse("press")


def test_default_params_are_fresh_copies():
    a = default_params("input")
    a["flowRate"] = 1
    assert default_params(K.INPUT) == {"flowRate": 1000, "brixContent": 15, "temperature": 25, "purity": 85}


def test_make_node_copies_catalog_entry():
    n = make_node("evaporator", (3, 4), node_id="ev")
    spec = get_spec(K.EVAPORATOR)
    assert n.uid == "ev"
    assert n.position == Position(3.0, 4.0)
    assert n.label == spec.label == "Evaporator"
    assert n.params == {"effects": 5, "steamPressure": 2.5, "targetBrix": 65, "efficiency": 88}


def test_make_node_uses_id_factory():
    n = make_node(K.TANK, id_factory=lambda prefix: f"{prefix}-x")
    assert n.uid == "tank-x"


def test_node_from_payload_keeps_dragged_fields():
    n = node_from_payload(
        {"type": "boiler", "label": "Caldera 2"}, (10, 10), node_id="b2",
    )
    assert n.kind is K.BOILER
    assert n.label == "Caldera 2"
    assert n.icon == get_spec(K.BOILER).icon
    assert n.params == {"steamPressure": 30, "efficiency": 85, "capacity": 100}

    with pytest.raises(ValueError):
        node_from_payload({"label": "?"})


def test_param_metadata():
    assert param_spec("efficiency").unit == "%"
    assert param_spec("vacuum").step == 0.01
    assert param_spec("flowRate").step == 1.0

    generic = param_spec("mysteryKnob")
    assert (generic.label, generic.min, generic.max) == ("mysteryKnob", 0, 1000)


def test_catalog_defaults_are_within_param_ranges():
    for spec in CATALOG.values():
        for name, value in spec.defaults:
            ps = PARAM_SPECS.get(name)
            if ps is not None:
                assert ps.min <= value <= ps.max, (spec.kind, name, value)


def test_unmodelled_kinds_use_generic_stream():
    s = compute_scalars(make_node(K.INPUT, node_id="in"), None, None, ModelConfig())
    for kind in (K.PUMP, K.TANK, K.CLARIFIER, K.BOILER):
        st = stream_for(kind, s)
        assert st.flow == pytest.approx(900.0)
        assert st.temp == 50.0
        assert st.brix is None and st.purity is None


def test_stream_lookup_accepts_tags_and_rejects_unknown_kinds():
    s = compute_scalars(make_node(K.INPUT, node_id="in"), None, None, ModelConfig())
    st = stream_for("input", s)
    assert (st.flow, st.brix, st.temp) == (1000.0, 15.0, 25.0)
    assert stream_for(" Output ", s).purity == 99.8
    with pytest.raises(ValueError):
        stream_for("reactor", s)
