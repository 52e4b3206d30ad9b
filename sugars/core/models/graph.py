from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from typing import Dict, Iterator, List, Optional

from .edge import ProcessEdge
from .equipment import EquipmentKind
from .node import ProcessNode


def new_uid(prefix: str) -> str:
    """Fresh unique id, e.g. 'mill-3f2a9c0d1b7e'."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True, slots=True)
class ProcessGraph:
    """
    Canonical process graph container (core model).

    Insertion order of nodes/edges is preserved and meaningful: the solver
    picks the *first* node of a given kind.

    Mutating helpers return a new graph; the instance itself is never changed.
    """
    nodes: Dict[str, ProcessNode] = field(default_factory=dict)   # key: ProcessNode.uid
    edges: Dict[str, ProcessEdge] = field(default_factory=dict)   # key: ProcessEdge.uid

    # -------------------------
    # Queries
    # -------------------------
    def get_node(self, uid: str) -> ProcessNode:
        return self.nodes[uid]

    def get_edge(self, uid: str) -> ProcessEdge:
        return self.edges[uid]

    def edges_from(self, node_uid: str) -> List[ProcessEdge]:
        return [e for e in self.edges.values() if e.source == node_uid]

    def edges_to(self, node_uid: str) -> List[ProcessEdge]:
        return [e for e in self.edges.values() if e.target == node_uid]

    def nodes_of_kind(self, kind: EquipmentKind) -> List[ProcessNode]:
        return [n for n in self.nodes.values() if n.kind == kind]

    def first_of_kind(self, kind: EquipmentKind) -> Optional[ProcessNode]:
        for n in self.nodes.values():
            if n.kind == kind:
                return n
        return None

    def __iter__(self) -> Iterator[ProcessNode]:
        return iter(self.nodes.values())

    def __len__(self) -> int:
        return len(self.nodes)

    # -------------------------
    # Copy-on-write mutations
    # -------------------------
    def with_node(self, node: ProcessNode) -> "ProcessGraph":
        """Adds (or replaces in place, keeping its order) a node."""
        nodes = dict(self.nodes)
        nodes[node.uid] = node
        return replace(self, nodes=nodes)

    def without_node(self, node_uid: str) -> "ProcessGraph":
        """Removes a node and every edge that touches it."""
        if node_uid not in self.nodes:
            return self
        nodes = {uid: n for uid, n in self.nodes.items() if uid != node_uid}
        edges = {
            uid: e for uid, e in self.edges.items()
            if e.source != node_uid and e.target != node_uid
        }
        return ProcessGraph(nodes=nodes, edges=edges)

    def with_edge(self, edge: ProcessEdge) -> "ProcessGraph":
        if edge.source not in self.nodes:
            raise KeyError(f"Edge(uid={edge.uid}) references unknown source node {edge.source!r}")
        if edge.target not in self.nodes:
            raise KeyError(f"Edge(uid={edge.uid}) references unknown target node {edge.target!r}")
        edges = dict(self.edges)
        edges[edge.uid] = edge
        return replace(self, edges=edges)

    def without_edge(self, edge_uid: str) -> "ProcessGraph":
        if edge_uid not in self.edges:
            return self
        edges = {uid: e for uid, e in self.edges.items() if uid != edge_uid}
        return replace(self, edges=edges)
