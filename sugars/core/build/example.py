from __future__ import annotations

from typing import Any, Dict, List, Tuple

from sugars.core.models.edge import ProcessEdge
from sugars.core.models.equipment import EquipmentKind
from sugars.core.models.graph import ProcessGraph
from sugars.core.models.node import Position, ProcessNode

K = EquipmentKind

# (uid, kind, label, icon, color, (x, y), params)
_EXAMPLE_NODES: List[Tuple[str, EquipmentKind, str, str, str, Tuple[float, float], Dict[str, Any]]] = [
    ("input-1", K.INPUT, "Raw Sugar Cane", "🌿", "#22c55e", (50, 200),
     {"flowRate": 1000, "brixContent": 15, "temperature": 25, "purity": 85}),
    ("mill-1", K.MILL, "Crushing Mill", "⚙️", "#64748b", (300, 200),
     {"efficiency": 95, "rollerSpeed": 6, "pressure": 250}),
    ("heater-1", K.HEATER, "Juice Heater", "🔥", "#f97316", (550, 100),
     {"targetTemp": 105, "heatDuty": 500, "efficiency": 92}),
    ("clarifier-1", K.CLARIFIER, "Clarifier", "🧪", "#8b5cf6", (550, 300),
     {"retentionTime": 45, "limeAddition": 0.5, "flocculant": 3}),
    ("evaporator-1", K.EVAPORATOR, "Multiple Effect Evaporator", "💨", "#06b6d4", (800, 200),
     {"effects": 5, "steamPressure": 2.5, "targetBrix": 65, "efficiency": 88}),
    ("crystallizer-1", K.CRYSTALLIZER, "Vacuum Pan", "💎", "#ec4899", (1050, 200),
     {"vacuum": 0.85, "seedAmount": 5, "boilingTime": 180, "crystalSize": 0.6}),
    ("centrifuge-1", K.CENTRIFUGE, "Centrifuge", "🌀", "#3b82f6", (1300, 200),
     {"speed": 1200, "cycleTime": 3, "washWater": 2}),
    ("dryer-1", K.DRYER, "Rotary Dryer", "🌡️", "#eab308", (1550, 200),
     {"airTemp": 85, "residenceTime": 20, "targetMoisture": 0.05}),
    ("output-1", K.OUTPUT, "White Sugar", "🍬", "#10b981", (1800, 200),
     {"purity": 99.8, "moisture": 0.04, "color": 25}),
]

# (uid, source, target)
_EXAMPLE_EDGES: List[Tuple[str, str, str]] = [
    ("e1", "input-1", "mill-1"),
    ("e2", "mill-1", "heater-1"),
    ("e3", "mill-1", "clarifier-1"),
    ("e4", "heater-1", "evaporator-1"),
    ("e5", "clarifier-1", "evaporator-1"),
    ("e6", "evaporator-1", "crystallizer-1"),
    ("e7", "crystallizer-1", "centrifuge-1"),
    ("e8", "centrifuge-1", "dryer-1"),
    ("e9", "dryer-1", "output-1"),
]


def example_graph() -> ProcessGraph:
    """
    Reference cane plant: input -> mill -> {heater, clarifier} -> evaporator
    -> crystallizer -> centrifuge -> dryer -> output (9 nodes, 9 edges).

    A new graph (with fresh param dicts) is built on every call.
    """
    nodes: Dict[str, ProcessNode] = {}
    for uid, kind, label, icon, color, (x, y), params in _EXAMPLE_NODES:
        nodes[uid] = ProcessNode(
            uid=uid,
            kind=kind,
            position=Position(x=float(x), y=float(y)),
            params=dict(params),
            label=label,
            icon=icon,
            color=color,
        )

    edges = {uid: ProcessEdge(uid=uid, source=src, target=dst) for uid, src, dst in _EXAMPLE_EDGES}
    return ProcessGraph(nodes=nodes, edges=edges)
