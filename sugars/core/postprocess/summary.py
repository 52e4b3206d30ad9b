from __future__ import annotations

from typing import Dict, List

import numpy as np
import pandas as pd

from sugars.core.models.graph import ProcessGraph
from sugars.core.models.result import SimulationResult

STREAM_COLUMNS = ["node_id", "kind", "label", "flow_th", "brix_pct", "purity_pct", "temp_c"]


def stream_table(graph: ProcessGraph, result: SimulationResult) -> pd.DataFrame:
    """
    One row per node of `graph` that has stream data, in graph order.
    Missing brix/purity are NaN.
    """
    rows: List[Dict[str, object]] = []
    for uid, node in graph.nodes.items():
        s = result.stream_data.get(uid)
        if s is None:
            continue
        rows.append({
            "node_id": uid,
            "kind": node.kind.value,
            "label": node.label,
            "flow_th": float(s.flow),
            "brix_pct": float(s.brix) if s.brix is not None else np.nan,
            "purity_pct": float(s.purity) if s.purity is not None else np.nan,
            "temp_c": float(s.temp),
        })
    return pd.DataFrame(rows, columns=STREAM_COLUMNS)


def balance_check(result: SimulationResult) -> Dict[str, float]:
    """
    Closure residuals of the mass balance [t/h]:
      cane   = juice + bagasse
      juice  = syrup + water evaporated
    Both are ~0 for results produced by run_balance.
    """
    mb = result.mass_balance
    water = result.summary.water_evaporated
    return {
        "cane_residual": float(mb.cane_input - (mb.juice_extracted + mb.bagasse)),
        "juice_residual": float(mb.juice_extracted - (mb.syrup + water)),
    }
