from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from sugars.core.build.params import PARAM_SPECS
from sugars.core.models.equipment import EquipmentKind
from sugars.core.models.graph import ProcessGraph


@dataclass(frozen=True)
class ValidationIssue:
    level: str              # "error" | "warning"
    message: str
    hint: Optional[str] = None


class GraphValidationError(ValueError):
    """Raised when validation finds one or more errors."""
    def __init__(self, issues: List[ValidationIssue]):
        self.issues = issues
        lines = ["Process graph validation failed with errors:"]
        for it in issues:
            if it.level == "error":
                lines.append(f"- {it.message}" + (f" | hint: {it.hint}" if it.hint else ""))
        super().__init__("\n".join(lines))


def _is_number(x: object) -> bool:
    if isinstance(x, bool):
        return False
    try:
        return bool(np.isfinite(float(x)))  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return False


def validate_graph(graph: ProcessGraph) -> List[ValidationIssue]:
    """
    Check a ProcessGraph for basic consistency.
    Returns a list of issues (errors and warnings). If errors exist, caller may raise.

    Advisory only: the store keeps the structural invariants and the solver
    never calls this. Connectivity/topology is deliberately not checked.
    """
    issues: List[ValidationIssue] = []

    # --- Nodes ---
    for uid, n in graph.nodes.items():
        if not uid or not isinstance(uid, str):
            issues.append(ValidationIssue("error", f"Node has invalid uid: {uid!r}"))
        elif n.uid != uid:
            issues.append(ValidationIssue(
                "error",
                f"Node stored under uid={uid!r} reports uid={n.uid!r}.",
                "Node ids must be unique and never reused."
            ))

        for name, value in n.params.items():
            if not _is_number(value):
                issues.append(ValidationIssue(
                    "warning",
                    f"Node(uid={uid}, kind={n.kind.value}) parameter '{name}' is not numeric: {value!r}",
                    "The solver substitutes the default for unusable values."
                ))
                continue
            spec = PARAM_SPECS.get(name)
            if spec is None:
                continue
            v = float(value)
            if v < spec.min or v > spec.max:
                issues.append(ValidationIssue(
                    "warning",
                    f"Node(uid={uid}, kind={n.kind.value}) parameter '{name}'={v} outside "
                    f"[{spec.min}, {spec.max}] {spec.unit}".rstrip(),
                ))

    inputs = graph.nodes_of_kind(EquipmentKind.INPUT)
    if not inputs:
        issues.append(ValidationIssue(
            "warning",
            "Process graph has no 'input' node; simulation will produce no result.",
            "Add a Raw Material Input node."
        ))
    elif len(inputs) > 1:
        issues.append(ValidationIssue(
            "warning",
            f"Process graph has {len(inputs)} 'input' nodes; only uid={inputs[0].uid} feeds the balance.",
        ))

    for kind in (EquipmentKind.MILL, EquipmentKind.EVAPORATOR, EquipmentKind.CRYSTALLIZER, EquipmentKind.CENTRIFUGE):
        found = graph.nodes_of_kind(kind)
        if len(found) > 1:
            issues.append(ValidationIssue(
                "warning",
                f"Process graph has {len(found)} '{kind.value}' nodes; only uid={found[0].uid} is used.",
            ))

    # --- Edges ---
    for uid, e in graph.edges.items():
        if e.uid != uid:
            issues.append(ValidationIssue("error", f"Edge stored under uid={uid!r} reports uid={e.uid!r}."))
        if e.source not in graph.nodes:
            issues.append(ValidationIssue(
                "error",
                f"Edge(uid={uid}) references unknown source uid={e.source!r}.",
                "Remove nodes through the store so their edges are removed too."
            ))
        if e.target not in graph.nodes:
            issues.append(ValidationIssue(
                "error",
                f"Edge(uid={uid}) references unknown target uid={e.target!r}.",
                "Remove nodes through the store so their edges are removed too."
            ))
        if e.is_self_loop:
            issues.append(ValidationIssue("warning", f"Edge(uid={uid}) is a self-loop on node {e.source!r}."))

    return issues


def raise_on_errors(issues: List[ValidationIssue]) -> None:
    errors = [i for i in issues if i.level == "error"]
    if errors:
        raise GraphValidationError(errors)
