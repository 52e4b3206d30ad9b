# sugars/core/solver/balance.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from sugars.core.build.config import ModelConfig
from sugars.core.models.equipment import EquipmentKind
from sugars.core.models.graph import ProcessGraph
from sugars.core.models.node import ProcessNode
from sugars.core.models.result import (
    EfficiencyMetrics,
    EnergyBalance,
    MassBalance,
    ProductionSummary,
    SimulationResult,
    StreamState,
)
from sugars.core.solver.streams import stream_for

logger = logging.getLogger(__name__)


# ============================================================
# Plant constants
# ============================================================

JUICE_WATER_FRACTION = 0.7      # evaporable water per t of juice
STEAM_PER_WATER = 0.5           # t steam / t water evaporated (multiple effect)
POWER_PER_CANE = 0.025          # kWh per t cane
HEAT_RECOVERY_FRACTION = 0.3    # share of steam recovered as heat


@dataclass(frozen=True)
class BalanceScalars:
    """Global quantities of one run; all stream rules read from here."""
    feed_flow: float         # F [t/h]
    brix: float              # B [%]
    purity: float            # P [%]

    mill_eff: float          # Em [%]
    evap_eff: float          # Ee [%]
    cryst_eff: float         # Ec [%]

    sugar_in_cane: float
    pure_sugar: float
    juice_extracted: float
    water_evaporated: float
    syrup_flow: float
    sugar_recovered: float
    overall_yield: float     # [%]
    steam_required: float
    power_consumption: float
    molasses: float


# ============================================================
# Helpers
# ============================================================

def read_number(params: Mapping[str, Any], name: str, default: float) -> float:
    """
    Lenient numeric read: missing, None, zero, non-finite or non-numeric -> default.
    Numeric strings ("1200") are accepted.
    """
    raw = params.get(name)
    if raw is None or isinstance(raw, bool):
        return float(default)
    try:
        v = float(raw)
    except (TypeError, ValueError, OverflowError):
        logger.debug("Parameter %r=%r is not numeric, using default %s", name, raw, default)
        return float(default)
    if v == 0.0 or not math.isfinite(v):
        return float(default)
    return v


def _efficiency(node: Optional[ProcessNode], default: float) -> float:
    if node is None:
        return float(default)
    return read_number(node.params, "efficiency", default)


def compute_scalars(
    feed: ProcessNode,
    mill: Optional[ProcessNode],
    evaporator: Optional[ProcessNode],
    cfg: ModelConfig,
) -> BalanceScalars:
    F = read_number(feed.params, "flowRate", cfg.feed.flow_rate)
    B = read_number(feed.params, "brixContent", cfg.feed.brix)
    P = read_number(feed.params, "purity", cfg.feed.purity)

    Em = _efficiency(mill, cfg.efficiency.mill)
    Ee = _efficiency(evaporator, cfg.efficiency.evaporator)
    Ec = float(cfg.efficiency.crystallization)

    sugar_in_cane = F * (B / 100.0)
    pure_sugar = sugar_in_cane * (P / 100.0)

    juice = F * (Em / 100.0)
    water = juice * JUICE_WATER_FRACTION * (Ee / 100.0)
    syrup = juice - water

    sugar = pure_sugar * (Em / 100.0) * (Ee / 100.0) * (Ec / 100.0) / 100.0
    overall_yield = (sugar / F) * 100.0

    return BalanceScalars(
        feed_flow=F,
        brix=B,
        purity=P,
        mill_eff=Em,
        evap_eff=Ee,
        cryst_eff=Ec,
        sugar_in_cane=sugar_in_cane,
        pure_sugar=pure_sugar,
        juice_extracted=juice,
        water_evaporated=water,
        syrup_flow=syrup,
        sugar_recovered=sugar,
        overall_yield=overall_yield,
        steam_required=water * STEAM_PER_WATER,
        power_consumption=F * POWER_PER_CANE,
        molasses=pure_sugar - sugar,
    )


# ============================================================
# Main solver (one pass, topology-independent)
# ============================================================

def run_balance(graph: ProcessGraph, config: Optional[ModelConfig] = None) -> Optional[SimulationResult]:
    """
    One-pass mass/energy balance of a process graph.

    Returns None when the graph has no 'input' node (nothing to compute).

    The feed comes from the first 'input' node; efficiencies from the first
    'mill' and 'evaporator' nodes (defaults when absent). Edges are NOT used:
    the formulas describe a single-feed, single-line plant whatever the
    wiring. Per-node stream data is chosen by node kind only.
    """
    cfg = config or ModelConfig()

    feed = graph.first_of_kind(EquipmentKind.INPUT)
    if feed is None:
        logger.info("No input node in graph (%d nodes); nothing to simulate.", len(graph.nodes))
        return None

    mill = graph.first_of_kind(EquipmentKind.MILL)
    evaporator = graph.first_of_kind(EquipmentKind.EVAPORATOR)
    crystallizer = graph.first_of_kind(EquipmentKind.CRYSTALLIZER)
    centrifuge = graph.first_of_kind(EquipmentKind.CENTRIFUGE)

    s = compute_scalars(feed, mill, evaporator, cfg)

    stream_data: Dict[str, StreamState] = {
        uid: stream_for(node.kind, s) for uid, node in graph.nodes.items()
    }

    result = SimulationResult(
        summary=ProductionSummary(
            input_flow=s.feed_flow,
            sugar_produced=s.sugar_recovered,
            overall_yield=s.overall_yield,
            steam_consumption=s.steam_required,
            power_consumption=s.power_consumption,
            water_evaporated=s.water_evaporated,
            molasses_produced=s.molasses,
        ),
        mass_balance=MassBalance(
            cane_input=s.feed_flow,
            juice_extracted=s.juice_extracted,
            bagasse=s.feed_flow - s.juice_extracted,
            syrup=s.syrup_flow,
            sugar=s.sugar_recovered,
            molasses=s.molasses,
        ),
        energy_balance=EnergyBalance(
            steam_in=s.steam_required,
            electricity_in=s.power_consumption,
            heat_recovered=s.steam_required * HEAT_RECOVERY_FRACTION,
        ),
        efficiency=EfficiencyMetrics(
            extraction=s.mill_eff,
            evaporation=s.evap_eff,
            crystallization=s.cryst_eff,
            overall=(s.mill_eff * s.evap_eff * s.cryst_eff) / 10000.0,
        ),
        stream_data=stream_data,
        meta={
            "engine": "one_pass_v1",
            "input_node": feed.uid,
            "mill_node": mill.uid if mill else None,
            "evaporator_node": evaporator.uid if evaporator else None,
            "crystallizer_node": crystallizer.uid if crystallizer else None,
            "centrifuge_node": centrifuge.uid if centrifuge else None,
            "n_nodes": len(graph.nodes),
            "n_edges": len(graph.edges),
        },
    )

    logger.debug(
        "Balance OK: F=%.4g t/h, sugar=%.4g t/h, yield=%.4g %%",
        s.feed_flow, s.sugar_recovered, s.overall_yield,
    )
    return result
