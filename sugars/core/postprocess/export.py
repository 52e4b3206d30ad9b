from __future__ import annotations

import json
from typing import Any, Dict, Optional

import pandas as pd

from sugars.core.models.edge import ProcessEdge
from sugars.core.models.graph import ProcessGraph
from sugars.core.models.node import ProcessNode
from sugars.core.models.result import SimulationResult
from sugars.core.postprocess.summary import stream_table

# Canvas shape of exported nodes/edges
NODE_TYPE = "processNode"
EDGE_TYPE = "smoothstep"


def node_to_dict(node: ProcessNode) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "type": node.kind.value,
        "label": node.label,
        "icon": node.icon,
        "color": node.color,
    }
    if node.description:
        data["description"] = node.description
    data["params"] = dict(node.params)

    return {
        "id": node.uid,
        "type": NODE_TYPE,
        "position": {"x": node.position.x, "y": node.position.y},
        "data": data,
    }


def edge_to_dict(edge: ProcessEdge) -> Dict[str, Any]:
    return {
        "id": edge.uid,
        "source": edge.source,
        "target": edge.target,
        "type": EDGE_TYPE,
        "animated": True,
    }


def graph_to_document(graph: ProcessGraph, result: Optional[SimulationResult] = None) -> Dict[str, Any]:
    """
    Export document:
      {"nodes": [...], "edges": [...], "results": {...} | None}
    """
    return {
        "nodes": [node_to_dict(n) for n in graph.nodes.values()],
        "edges": [edge_to_dict(e) for e in graph.edges.values()],
        "results": result.to_dict() if result is not None else None,
    }


def export_model_json(
    graph: ProcessGraph,
    result: Optional[SimulationResult],
    path_json: str,
) -> None:
    """
    Export the model (graph + last result) to a JSON document.
    """
    doc = graph_to_document(graph, result)
    with open(path_json, "w", encoding="utf-8") as fh:
        json.dump(doc, fh, indent=2, ensure_ascii=False)


def export_streams_csv(
    graph: ProcessGraph,
    result: SimulationResult,
    path_csv: str,
) -> None:
    """
    Export per-node stream data to CSV.
    Columns:
      node_id, kind, label, flow_th, brix_pct, purity_pct, temp_c
    """
    df = stream_table(graph, result)
    df.to_csv(path_csv, index=False)


def export_streams_excel(
    graph: ProcessGraph,
    result: SimulationResult,
    path_xlsx: str,
    sheet_name: str = "streams",
) -> None:
    """
    Export stream data plus one sheet per balance section to Excel.
    """
    df = stream_table(graph, result)
    sections = {
        "summary": result.summary.to_dict(),
        "mass_balance": result.mass_balance.to_dict(),
        "energy_balance": result.energy_balance.to_dict(),
        "efficiency": result.efficiency.to_dict(),
    }
    with pd.ExcelWriter(path_xlsx, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)
        for name, values in sections.items():
            pd.DataFrame(
                {"metric": list(values.keys()), "value": list(values.values())}
            ).to_excel(writer, sheet_name=name, index=False)
