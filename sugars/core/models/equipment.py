from __future__ import annotations

from enum import Enum


class EquipmentKind(str, Enum):
    """
    Closed set of equipment kinds a process node can be.

    The value is the tag used in exported documents ("input", "mill", ...).
    """
    INPUT = "input"
    OUTPUT = "output"
    MILL = "mill"
    DIFFUSER = "diffuser"
    HEATER = "heater"
    CLARIFIER = "clarifier"
    FILTER = "filter"
    EVAPORATOR = "evaporator"
    PREHEATER = "preheater"
    CRYSTALLIZER = "crystallizer"
    COOLER = "cooler"
    CENTRIFUGE = "centrifuge"
    DRYER = "dryer"
    BOILER = "boiler"
    CONDENSER = "condenser"
    TANK = "tank"
    PUMP = "pump"

    @classmethod
    def parse(cls, value: object) -> "EquipmentKind":
        """Accepts an EquipmentKind or its tag (case/whitespace tolerant)."""
        if isinstance(value, cls):
            return value
        tag = str(value).strip().lower()
        try:
            return cls(tag)
        except ValueError as e:
            allowed = sorted(k.value for k in cls)
            raise ValueError(f"Unknown equipment kind {value!r}. Allowed: {allowed}") from e
