# sugars/core/build/catalog.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from sugars.core.models.equipment import EquipmentKind
from sugars.core.models.graph import new_uid
from sugars.core.models.node import ParameterSet, Position, ProcessNode


@dataclass(frozen=True)
class EquipmentSpec:
    kind: EquipmentKind
    category: str
    label: str
    icon: str
    color: str
    description: str
    defaults: Tuple[Tuple[str, float], ...]   # ordered (name, value) pairs

    def default_params(self) -> ParameterSet:
        return dict(self.defaults)


def _spec(kind, category, label, icon, color, description, defaults) -> EquipmentSpec:
    return EquipmentSpec(
        kind=kind,
        category=category,
        label=label,
        icon=icon,
        color=color,
        description=description,
        defaults=tuple(defaults.items()),
    )


K = EquipmentKind

# ============================================================
# Catalog (category order = library order)
# ============================================================

CATALOG: Dict[EquipmentKind, EquipmentSpec] = {
    s.kind: s for s in (
        # Inputs & Outputs
        _spec(K.INPUT, "Inputs & Outputs", "Raw Material Input", "🌿", "#22c55e",
              "Sugar cane or beet input",
              dict(flowRate=1000, brixContent=15, temperature=25, purity=85)),
        _spec(K.OUTPUT, "Inputs & Outputs", "Product Output", "🍬", "#10b981",
              "Final sugar product",
              dict(purity=99.8, moisture=0.04, color=25)),

        # Extraction
        _spec(K.MILL, "Extraction", "Crushing Mill", "⚙️", "#64748b",
              "Extract juice from cane",
              dict(efficiency=95, rollerSpeed=6, pressure=250)),
        _spec(K.DIFFUSER, "Extraction", "Diffuser", "🔄", "#64748b",
              "Counter-current extraction",
              dict(efficiency=97, temperature=75, retention=60)),

        # Purification
        _spec(K.HEATER, "Purification", "Juice Heater", "🔥", "#f97316",
              "Heat treatment",
              dict(targetTemp=105, heatDuty=500, efficiency=92)),
        _spec(K.CLARIFIER, "Purification", "Clarifier", "🧪", "#8b5cf6",
              "Remove impurities",
              dict(retentionTime=45, limeAddition=0.5, flocculant=3)),
        _spec(K.FILTER, "Purification", "Rotary Filter", "🔘", "#6366f1",
              "Mud filtration",
              dict(filtrationRate=100, vacuumPressure=0.5, cakeWash=2)),

        # Concentration
        _spec(K.EVAPORATOR, "Concentration", "Evaporator", "💨", "#06b6d4",
              "Multi-effect evaporation",
              dict(effects=5, steamPressure=2.5, targetBrix=65, efficiency=88)),
        _spec(K.PREHEATER, "Concentration", "Pre-heater", "♨️", "#f59e0b",
              "Heat recovery",
              dict(targetTemp=95, heatRecovery=80)),

        # Crystallization
        _spec(K.CRYSTALLIZER, "Crystallization", "Vacuum Pan", "💎", "#ec4899",
              "Sugar crystallization",
              dict(vacuum=0.85, seedAmount=5, boilingTime=180, crystalSize=0.6)),
        _spec(K.COOLER, "Crystallization", "Crystallizer Cooler", "❄️", "#0ea5e9",
              "Cooling crystallizer",
              dict(targetTemp=45, coolingRate=2)),

        # Separation
        _spec(K.CENTRIFUGE, "Separation", "Centrifuge", "🌀", "#3b82f6",
              "Separate crystals",
              dict(speed=1200, cycleTime=3, washWater=2)),
        _spec(K.DRYER, "Separation", "Rotary Dryer", "🌡️", "#eab308",
              "Dry sugar crystals",
              dict(airTemp=85, residenceTime=20, targetMoisture=0.05)),

        # Utilities
        _spec(K.BOILER, "Utilities", "Steam Boiler", "🏭", "#ef4444",
              "Generate steam",
              dict(steamPressure=30, efficiency=85, capacity=100)),
        _spec(K.CONDENSER, "Utilities", "Condenser", "💧", "#14b8a6",
              "Condense vapor",
              dict(coolingWater=500, vacuumLevel=0.9)),
        _spec(K.TANK, "Utilities", "Storage Tank", "🛢️", "#78716c",
              "Material storage",
              dict(capacity=1000, level=50)),
        _spec(K.PUMP, "Utilities", "Pump", "⬆️", "#a855f7",
              "Fluid transfer",
              dict(flowRate=100, head=30, efficiency=75)),
    )
}

_missing = set(EquipmentKind) - set(CATALOG)
if _missing:
    raise RuntimeError(f"Equipment catalog has no entry for: {sorted(k.value for k in _missing)}")


# ============================================================
# Public API
# ============================================================

def get_spec(kind: EquipmentKind | str) -> EquipmentSpec:
    return CATALOG[EquipmentKind.parse(kind)]


def default_params(kind: EquipmentKind | str) -> ParameterSet:
    """Fresh copy of the kind's default parameters (safe to mutate)."""
    return get_spec(kind).default_params()


def iter_categories() -> List[Tuple[str, List[EquipmentSpec]]]:
    """Catalog grouped by category, in library order."""
    groups: Dict[str, List[EquipmentSpec]] = {}
    for spec in CATALOG.values():
        groups.setdefault(spec.category, []).append(spec)
    return list(groups.items())


def make_node(
    kind: EquipmentKind | str,
    position: Position | Tuple[float, float] = (0.0, 0.0),
    *,
    node_id: Optional[str] = None,
    id_factory: Callable[[str], str] = new_uid,
) -> ProcessNode:
    """
    New node of `kind` with catalog label/icon/color and a copy of its defaults.
    Id is `node_id` if given, else `id_factory(kind tag)`.
    """
    spec = get_spec(kind)
    if not isinstance(position, Position):
        x, y = position
        position = Position(x=float(x), y=float(y))

    return ProcessNode(
        uid=node_id or id_factory(spec.kind.value),
        kind=spec.kind,
        position=position,
        params=spec.default_params(),
        label=spec.label,
        icon=spec.icon,
        color=spec.color,
        description=spec.description,
    )


def node_from_payload(
    payload: Mapping[str, Any],
    position: Position | Tuple[float, float] = (0.0, 0.0),
    *,
    node_id: Optional[str] = None,
    id_factory: Callable[[str], str] = new_uid,
) -> ProcessNode:
    """
    Node from a drag-and-drop payload {kind|type, label, icon, color, description}.
    Missing payload fields are filled from the catalog; params always start at defaults.
    """
    kind = payload.get("kind", payload.get("type"))
    if kind is None:
        raise ValueError(f"Node payload has no 'kind'/'type': {dict(payload)!r}")

    base = make_node(kind, position, node_id=node_id, id_factory=id_factory)
    return ProcessNode(
        uid=base.uid,
        kind=base.kind,
        position=base.position,
        params=base.params,
        label=str(payload.get("label") or base.label),
        icon=str(payload.get("icon") or base.icon),
        color=str(payload.get("color") or base.color),
        description=str(payload.get("description") or base.description),
    )
