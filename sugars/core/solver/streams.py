# sugars/core/solver/streams.py
from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict

from sugars.core.models.equipment import EquipmentKind
from sugars.core.models.result import StreamState

if TYPE_CHECKING:
    from sugars.core.solver.balance import BalanceScalars

StreamRule = Callable[["BalanceScalars"], StreamState]


# ============================================================
# Per-kind stream rules
# ============================================================

def _input(s: BalanceScalars) -> StreamState:
    return StreamState(flow=s.feed_flow, brix=s.brix, temp=25.0)


def _mill(s: BalanceScalars) -> StreamState:
    # mixed juice, slightly richer than the cane
    return StreamState(flow=s.juice_extracted, brix=s.brix * 1.1, temp=30.0)


def _heater(s: BalanceScalars) -> StreamState:
    return StreamState(flow=s.juice_extracted, brix=s.brix * 1.1, temp=105.0)


def _evaporator(s: BalanceScalars) -> StreamState:
    return StreamState(flow=s.syrup_flow, brix=65.0, temp=60.0)


def _crystallizer(s: BalanceScalars) -> StreamState:
    return StreamState(flow=s.syrup_flow * 0.6, brix=92.0, temp=70.0)


def _centrifuge(s: BalanceScalars) -> StreamState:
    return StreamState(flow=s.sugar_recovered, brix=99.5, temp=55.0)


def _dryer(s: BalanceScalars) -> StreamState:
    return StreamState(flow=s.sugar_recovered * 0.98, brix=99.8, temp=40.0)


def _output(s: BalanceScalars) -> StreamState:
    return StreamState(flow=s.sugar_recovered * 0.98, purity=99.8, temp=30.0)


def _generic(s: BalanceScalars) -> StreamState:
    return StreamState(flow=s.feed_flow * 0.9, temp=50.0)


K = EquipmentKind

STREAM_RULES: Dict[EquipmentKind, StreamRule] = {
    K.INPUT: _input,
    K.MILL: _mill,
    K.HEATER: _heater,
    K.EVAPORATOR: _evaporator,
    K.CRYSTALLIZER: _crystallizer,
    K.CENTRIFUGE: _centrifuge,
    K.DRYER: _dryer,
    K.OUTPUT: _output,
    # no dedicated model yet
    K.DIFFUSER: _generic,
    K.CLARIFIER: _generic,
    K.FILTER: _generic,
    K.PREHEATER: _generic,
    K.COOLER: _generic,
    K.BOILER: _generic,
    K.CONDENSER: _generic,
    K.TANK: _generic,
    K.PUMP: _generic,
}

# every kind must be handled explicitly
_missing = set(EquipmentKind) - set(STREAM_RULES)
if _missing:
    raise RuntimeError(f"No stream rule for equipment kinds: {sorted(k.value for k in _missing)}")


def stream_for(kind: EquipmentKind | str, scalars: BalanceScalars) -> StreamState:
    return STREAM_RULES[EquipmentKind.parse(kind)](scalars)
