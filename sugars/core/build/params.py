from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class ParamSpec:
    """Display/entry metadata for one parameter name. Advisory, not enforced."""
    label: str
    unit: str
    min: float
    max: float

    @property
    def step(self) -> float:
        return 0.01 if self.max <= 1 else 1.0


PARAM_SPECS: Dict[str, ParamSpec] = {
    "flowRate":       ParamSpec("Flow Rate", "t/h", 0, 10000),
    "brixContent":    ParamSpec("Brix Content", "%", 0, 100),
    "temperature":    ParamSpec("Temperature", "°C", 0, 200),
    "purity":         ParamSpec("Purity", "%", 0, 100),
    "efficiency":     ParamSpec("Efficiency", "%", 0, 100),
    "rollerSpeed":    ParamSpec("Roller Speed", "rpm", 0, 20),
    "pressure":       ParamSpec("Pressure", "bar", 0, 500),
    "targetTemp":     ParamSpec("Target Temperature", "°C", 0, 200),
    "heatDuty":       ParamSpec("Heat Duty", "kW", 0, 5000),
    "retentionTime":  ParamSpec("Retention Time", "min", 0, 120),
    "limeAddition":   ParamSpec("Lime Addition", "kg/t", 0, 5),
    "flocculant":     ParamSpec("Flocculant", "ppm", 0, 20),
    "effects":        ParamSpec("Number of Effects", "", 1, 7),
    "steamPressure":  ParamSpec("Steam Pressure", "bar", 0, 50),
    "targetBrix":     ParamSpec("Target Brix", "%", 0, 100),
    "vacuum":         ParamSpec("Vacuum Level", "bar abs", 0, 1),
    "seedAmount":     ParamSpec("Seed Amount", "kg", 0, 50),
    "boilingTime":    ParamSpec("Boiling Time", "min", 0, 300),
    "crystalSize":    ParamSpec("Crystal Size", "mm", 0, 2),
    "speed":          ParamSpec("Rotation Speed", "rpm", 0, 3000),
    "cycleTime":      ParamSpec("Cycle Time", "min", 0, 10),
    "washWater":      ParamSpec("Wash Water", "%", 0, 10),
    "airTemp":        ParamSpec("Air Temperature", "°C", 0, 150),
    "residenceTime":  ParamSpec("Residence Time", "min", 0, 60),
    "targetMoisture": ParamSpec("Target Moisture", "%", 0, 1),
    "moisture":       ParamSpec("Moisture Content", "%", 0, 1),
    "color":          ParamSpec("Color Index", "IU", 0, 100),
    "capacity":       ParamSpec("Capacity", "t", 0, 10000),
    "level":          ParamSpec("Fill Level", "%", 0, 100),
    "head":           ParamSpec("Pump Head", "m", 0, 100),
    "filtrationRate": ParamSpec("Filtration Rate", "m³/h", 0, 500),
    "vacuumPressure": ParamSpec("Vacuum Pressure", "bar", 0, 1),
    "cakeWash":       ParamSpec("Cake Wash Ratio", "", 0, 5),
    "heatRecovery":   ParamSpec("Heat Recovery", "%", 0, 100),
    "coolingRate":    ParamSpec("Cooling Rate", "°C/h", 0, 10),
    "coolingWater":   ParamSpec("Cooling Water", "m³/h", 0, 1000),
    "vacuumLevel":    ParamSpec("Vacuum Level", "bar abs", 0, 1),
}


def param_spec(name: str) -> ParamSpec:
    """Metadata for `name`; unknown names get a generic 0..1000 entry."""
    spec = PARAM_SPECS.get(name)
    if spec is None:
        return ParamSpec(label=name, unit="", min=0, max=1000)
    return spec
