from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Optional, Tuple

from sugars.core.models.edge import ProcessEdge
from sugars.core.models.equipment import EquipmentKind
from sugars.core.models.graph import ProcessGraph
from sugars.core.models.node import Position, ProcessNode


# -----------------------------
# Document contract (canvas export)
# -----------------------------
REQ_DOC = {"nodes", "edges"}
REQ_NODE = {"id", "data"}
REQ_EDGE = {"id", "source", "target"}


def _norm_str(x: Any) -> str:
    if x is None:
        return ""
    return str(x).strip()


def _require_keys(obj: Mapping[str, Any], required: set[str], what: str) -> None:
    missing = sorted(required - set(obj.keys()))
    if missing:
        raise ValueError(f"{what} is missing required keys: {missing}")


def _as_float(x: Any, field: str, row_hint: str) -> float:
    try:
        if x is None or (isinstance(x, str) and x.strip() == ""):
            raise ValueError("empty")
        return float(x)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid numeric value for '{field}' ({row_hint}): {x!r}") from e


def _parse_params(raw: Any, row_hint: str) -> Dict[str, Any]:
    """
    Parameter values are kept as found (numbers or strings); the solver is lenient.
    """
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"'params' must be an object ({row_hint}): {raw!r}")
    return {str(k): v for k, v in raw.items()}


def node_from_dict(item: Mapping[str, Any]) -> ProcessNode:
    _require_keys(item, REQ_NODE, "Node")
    uid = _norm_str(item["id"])
    if not uid:
        raise ValueError(f"Node has empty id: {dict(item)!r}")
    hint = f"node id={uid}"

    data = item["data"]
    if not isinstance(data, Mapping):
        raise ValueError(f"'data' must be an object ({hint})")

    kind_raw = data.get("type", data.get("kind"))
    try:
        kind = EquipmentKind.parse(kind_raw)
    except ValueError as e:
        raise ValueError(f"Invalid equipment type ({hint}): {e}") from e

    pos = item.get("position") or {}
    position = Position(
        x=_as_float(pos.get("x", 0.0), "position.x", hint),
        y=_as_float(pos.get("y", 0.0), "position.y", hint),
    )

    return ProcessNode(
        uid=uid,
        kind=kind,
        position=position,
        params=_parse_params(data.get("params"), hint),
        label=_norm_str(data.get("label")),
        icon=_norm_str(data.get("icon")),
        color=_norm_str(data.get("color")),
        description=_norm_str(data.get("description")),
    )


def graph_from_document(doc: Mapping[str, Any]) -> Tuple[ProcessGraph, Optional[Dict[str, Any]]]:
    """
    Builds a ProcessGraph from an export document {nodes, edges, results}.

    Returns:
      - ProcessGraph (node/edge order as in the document)
      - the stored 'results' mapping as-is (or None); it is not re-validated

    Raises ValueError on unknown equipment types, duplicate ids or edges
    pointing to missing nodes.
    """
    _require_keys(doc, REQ_DOC, "Document")

    # -----------------------------
    # Nodes
    # -----------------------------
    nodes: Dict[str, ProcessNode] = {}
    for item in doc["nodes"] or []:
        node = node_from_dict(item)
        if node.uid in nodes:
            raise ValueError(f"Duplicate node id in document: {node.uid!r}")
        nodes[node.uid] = node

    # -----------------------------
    # Edges
    # -----------------------------
    edges: Dict[str, ProcessEdge] = {}
    for item in doc["edges"] or []:
        _require_keys(item, REQ_EDGE, "Edge")
        uid = _norm_str(item["id"])
        src = _norm_str(item["source"])
        dst = _norm_str(item["target"])

        if not uid:
            raise ValueError(f"Edge has empty id: {dict(item)!r}")
        if uid in edges:
            raise ValueError(f"Duplicate edge id in document: {uid!r}")
        if src not in nodes:
            raise ValueError(f"Unknown source '{src}' (edge id={uid})")
        if dst not in nodes:
            raise ValueError(f"Unknown target '{dst}' (edge id={uid})")

        edges[uid] = ProcessEdge(uid=uid, source=src, target=dst)

    results = doc.get("results")
    return ProcessGraph(nodes=nodes, edges=edges), (dict(results) if results else None)


def load_graph_from_json(path: str) -> Tuple[ProcessGraph, Optional[Dict[str, Any]]]:
    """
    Reads an exported model document from `path`. See graph_from_document.
    """
    with open(path, "r", encoding="utf-8") as fh:
        try:
            doc = json.load(fh)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path!r}: {e}") from e
    if not isinstance(doc, Mapping):
        raise ValueError(f"Top-level JSON in {path!r} must be an object.")
    return graph_from_document(doc)
