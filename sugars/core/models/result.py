from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True, slots=True)
class StreamState:
    flow: float                      # [t/h]
    temp: float                      # [°C]
    brix: Optional[float] = None     # [%] dissolved solids
    purity: Optional[float] = None   # [%] sugar in dissolved solids

    def to_dict(self) -> Dict[str, float]:
        out: Dict[str, float] = {"flow": self.flow}
        if self.brix is not None:
            out["brix"] = self.brix
        if self.purity is not None:
            out["purity"] = self.purity
        out["temp"] = self.temp
        return out


@dataclass(frozen=True, slots=True)
class ProductionSummary:
    input_flow: float          # [t/h] cane
    sugar_produced: float      # [t/h]
    overall_yield: float       # [%] sugar / cane
    steam_consumption: float   # [t/h]
    power_consumption: float   # [kWh/t]
    water_evaporated: float    # [t/h]
    molasses_produced: float   # [t/h]

    def to_dict(self) -> Dict[str, float]:
        return {
            "inputFlow": self.input_flow,
            "sugarProduced": self.sugar_produced,
            "overallYield": self.overall_yield,
            "steamConsumption": self.steam_consumption,
            "powerConsumption": self.power_consumption,
            "waterEvaporated": self.water_evaporated,
            "molassesProduced": self.molasses_produced,
        }


@dataclass(frozen=True, slots=True)
class MassBalance:
    cane_input: float
    juice_extracted: float
    bagasse: float
    syrup: float
    sugar: float
    molasses: float

    def to_dict(self) -> Dict[str, float]:
        return {
            "caneInput": self.cane_input,
            "juiceExtracted": self.juice_extracted,
            "bagasse": self.bagasse,
            "syrup": self.syrup,
            "sugar": self.sugar,
            "molasses": self.molasses,
        }


@dataclass(frozen=True, slots=True)
class EnergyBalance:
    steam_in: float           # [t/h]
    electricity_in: float     # [kWh/t]
    heat_recovered: float     # [t/h steam equiv.]

    def to_dict(self) -> Dict[str, float]:
        return {
            "steamIn": self.steam_in,
            "electricityIn": self.electricity_in,
            "heatRecovered": self.heat_recovered,
        }


@dataclass(frozen=True, slots=True)
class EfficiencyMetrics:
    extraction: float        # [%] mill
    evaporation: float       # [%] evaporator
    crystallization: float   # [%]
    overall: float           # [%] product of the three

    def to_dict(self) -> Dict[str, float]:
        return {
            "extraction": self.extraction,
            "evaporation": self.evaporation,
            "crystallization": self.crystallization,
            "overall": self.overall,
        }


@dataclass(frozen=True, slots=True)
class SimulationResult:
    """
    Output of one balance run. Replaced wholesale by the next run, never patched.

    stream_data: node uid -> StreamState, in graph node order.
    meta: run diagnostics (nodes used for feed/efficiencies, graph size).
    """
    summary: ProductionSummary
    mass_balance: MassBalance
    energy_balance: EnergyBalance
    efficiency: EfficiencyMetrics
    stream_data: Dict[str, StreamState]
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Plain nested mapping, in the shape of the exported 'results' document."""
        return {
            "summary": self.summary.to_dict(),
            "massBalance": self.mass_balance.to_dict(),
            "energyBalance": self.energy_balance.to_dict(),
            "streamData": {uid: s.to_dict() for uid, s in self.stream_data.items()},
            "efficiency": self.efficiency.to_dict(),
        }
