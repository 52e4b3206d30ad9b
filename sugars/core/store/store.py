# sugars/core/store/store.py
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from sugars.core.build.catalog import make_node
from sugars.core.build.config import ModelConfig
from sugars.core.build.example import example_graph
from sugars.core.models.edge import ProcessEdge
from sugars.core.models.equipment import EquipmentKind
from sugars.core.models.graph import ProcessGraph, new_uid
from sugars.core.models.node import Position, ProcessNode
from sugars.core.models.result import SimulationResult
from sugars.core.solver.balance import run_balance

logger = logging.getLogger(__name__)

# ProcessNode fields that update_node() replaces directly
_NODE_DATA_FIELDS = ("params", "label", "icon", "color", "description")
_IMMUTABLE_FIELDS = ("uid", "id", "kind", "type")
_MAX_ID_ATTEMPTS = 100


class SimulationInProgressError(RuntimeError):
    """A simulation was triggered while another one is still pending."""


class ProcessGraphStore:
    """
    Owns the current process graph, the selection and the last simulation result.

    The graph is an immutable ProcessGraph replaced on every mutation, so a
    pending simulation always works on the snapshot taken when it started.
    `revision` changes whenever the graph changes in a way that affects the
    balance (positions do not count).

    All methods are meant to be called from one thread / event loop.
    """

    def __init__(
        self,
        config: Optional[ModelConfig] = None,
        *,
        id_factory: Callable[[str], str] = new_uid,
    ) -> None:
        self.config = config or ModelConfig()
        self._id_factory = id_factory

        self._graph = ProcessGraph()
        self._revision = 0
        self._selected_id: Optional[str] = None
        self._result: Optional[SimulationResult] = None
        self._task: Optional[asyncio.Task] = None

    # ============================================================
    # State
    # ============================================================

    @property
    def graph(self) -> ProcessGraph:
        return self._graph

    @property
    def nodes(self) -> Dict[str, ProcessNode]:
        return self._graph.nodes

    @property
    def edges(self) -> Dict[str, ProcessEdge]:
        return self._graph.edges

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def selected(self) -> Optional[ProcessNode]:
        if self._selected_id is None:
            return None
        return self._graph.nodes.get(self._selected_id)

    @property
    def result(self) -> Optional[SimulationResult]:
        return self._result

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _set_graph(self, graph: ProcessGraph, *, affects_balance: bool = True) -> None:
        if graph is self._graph:
            return
        self._graph = graph
        if affects_balance:
            self._revision += 1

    def _fresh_id(self, prefix: str, taken: Mapping[str, Any]) -> str:
        for _ in range(_MAX_ID_ATTEMPTS):
            uid = self._id_factory(prefix)
            if uid not in taken:
                return uid
        raise RuntimeError(
            f"Id factory returned only taken ids for prefix {prefix!r} after {_MAX_ID_ATTEMPTS} attempts."
        )

    # ============================================================
    # Nodes
    # ============================================================

    def add_node(self, node: ProcessNode) -> None:
        """Appends `node`. Its uid must be unique (not re-checked here)."""
        self._set_graph(self._graph.with_node(node))
        logger.debug("Node added: %s (%s)", node.uid, node.kind.value)

    def create_node(
        self,
        kind: EquipmentKind | str,
        position: Position | Tuple[float, float] = (0.0, 0.0),
    ) -> ProcessNode:
        """Catalog node with a fresh id and default params, added to the graph."""
        kind = EquipmentKind.parse(kind)
        node = make_node(kind, position, node_id=self._fresh_id(kind.value, self._graph.nodes))
        self.add_node(node)
        return node

    def update_node(self, node_id: str, data: Mapping[str, Any]) -> None:
        """
        Merges `data` into the node: params/label/icon/color/description are
        replaced, position accepts a Position, (x, y) or {"x", "y"}; any other
        key lands in node.metadata. Unknown node_id -> no-op.
        Parameter values are stored as given (no range check).
        """
        node = self._graph.nodes.get(node_id)
        if node is None:
            return

        bad = [k for k in data if k in _IMMUTABLE_FIELDS]
        if bad:
            raise ValueError(f"Node(uid={node_id}) fields {bad} cannot be changed after creation.")

        changes: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for key, value in data.items():
            if key == "params":
                changes["params"] = dict(value)
            elif key in _NODE_DATA_FIELDS:
                changes[key] = str(value)
            elif key == "position":
                changes["position"] = _as_position(value)
            else:
                extra[key] = value

        if extra:
            changes["metadata"] = {**node.metadata, **extra}

        only_cosmetic = set(changes) <= {"position", "label", "icon", "color", "description", "metadata"}
        self._set_graph(self._graph.with_node(replace(node, **changes)), affects_balance=not only_cosmetic)

    def move_node(self, node_id: str, x: float, y: float) -> None:
        node = self._graph.nodes.get(node_id)
        if node is None:
            return
        moved = replace(node, position=Position(x=float(x), y=float(y)))
        self._set_graph(self._graph.with_node(moved), affects_balance=False)

    def remove_node(self, node_id: str) -> None:
        """Deletes the node and every edge touching it; clears it from the selection."""
        if node_id not in self._graph.nodes:
            return
        n_edges = len(self._graph.edges)
        self._set_graph(self._graph.without_node(node_id))
        if self._selected_id == node_id:
            self._selected_id = None
        logger.debug(
            "Node removed: %s (%d edges cascaded)", node_id, n_edges - len(self._graph.edges)
        )

    def set_selected(self, node: ProcessNode | str | None) -> None:
        if isinstance(node, ProcessNode):
            node = node.uid
        self._selected_id = node

    # ============================================================
    # Edges
    # ============================================================

    def connect(self, source_id: str, target_id: str) -> ProcessEdge:
        """
        New edge source -> target with a fresh id. Duplicate and cyclic
        connections are accepted. Unknown endpoints raise KeyError.
        """
        edge = ProcessEdge(
            uid=self._fresh_id("e", self._graph.edges),
            source=source_id,
            target=target_id,
        )
        self._set_graph(self._graph.with_edge(edge))
        logger.debug("Edge added: %s (%s -> %s)", edge.uid, source_id, target_id)
        return edge

    def disconnect(self, edge_id: str) -> None:
        self._set_graph(self._graph.without_edge(edge_id))

    # ============================================================
    # Bulk changes (canvas callbacks)
    # ============================================================

    def apply_node_changes(self, changes: Iterable[Mapping[str, Any]]) -> None:
        """
        Change dicts:
          {"type": "position", "id": ..., "position": {"x": .., "y": ..}}
          {"type": "select", "id": ..., "selected": bool}
          {"type": "remove", "id": ...}
        Other types are ignored.
        """
        for ch in changes:
            kind = ch.get("type")
            uid = ch.get("id")
            if kind == "position" and ch.get("position") is not None:
                p = _as_position(ch["position"])
                self.move_node(uid, p.x, p.y)
            elif kind == "select":
                if ch.get("selected") and uid in self._graph.nodes:
                    self.set_selected(uid)
            elif kind == "remove":
                self.remove_node(uid)

    def apply_edge_changes(self, changes: Iterable[Mapping[str, Any]]) -> None:
        """Only {"type": "remove", "id": ...} is meaningful for edges."""
        for ch in changes:
            if ch.get("type") == "remove":
                self.disconnect(ch.get("id"))

    # ============================================================
    # Whole-graph operations
    # ============================================================

    def clear(self) -> None:
        """Empty graph, no selection, no result; a pending run is cancelled."""
        self.cancel_simulation()
        self._set_graph(ProcessGraph())
        self._selected_id = None
        self._result = None
        logger.info("Store cleared.")

    def set_graph(self, graph: ProcessGraph) -> None:
        """Replaces nodes and edges wholesale (e.g. a loaded document). Selection and result are dropped."""
        self._set_graph(graph)
        self._selected_id = None
        self._result = None

    def load_example(self) -> None:
        """Replaces the graph with the reference cane plant and drops any result."""
        self._set_graph(example_graph())
        self._selected_id = None
        self._result = None
        logger.info("Example plant loaded (%d nodes, %d edges).", len(self.nodes), len(self.edges))

    def to_document(self) -> Dict[str, Any]:
        """{nodes, edges, results} export document (plain JSON types)."""
        from sugars.core.postprocess.export import graph_to_document
        return graph_to_document(self._graph, self._result)

    # ============================================================
    # Simulation
    # ============================================================

    def start_simulation(self) -> "asyncio.Task[Optional[SimulationResult]]":
        """
        Snapshots the graph and schedules the balance after `config.run.delay_s`.
        Must be called with a running event loop. Only one run may be in flight.
        """
        if self.running:
            raise SimulationInProgressError("A simulation is already running.")

        snapshot = self._graph
        revision = self._revision
        self._task = asyncio.get_running_loop().create_task(self._simulate(snapshot, revision))
        logger.info("Simulation started (%d nodes, %d edges).", len(snapshot.nodes), len(snapshot.edges))
        return self._task

    async def run_simulation(self) -> Optional[SimulationResult]:
        """Starts a simulation and waits for it. Returns the stored result (None if discarded/empty)."""
        task = self.start_simulation()
        return await task

    def cancel_simulation(self) -> bool:
        """Cancels the pending run, if any. Returns True if something was cancelled."""
        if not self.running:
            return False
        self._task.cancel()
        self._task = None
        logger.info("Simulation cancelled.")
        return True

    async def _simulate(self, snapshot: ProcessGraph, revision: int) -> Optional[SimulationResult]:
        await asyncio.sleep(self.config.run.delay_s)

        try:
            result = run_balance(snapshot, self.config)
        except Exception:
            logger.exception("Simulation failed.")
            raise

        if revision != self._revision and self.config.run.discard_stale:
            logger.warning(
                "Graph changed while simulating (revision %d -> %d); result discarded.",
                revision, self._revision,
            )
            return None

        self._result = result
        logger.info("Simulation finished: %s", "no input node" if result is None else "OK")
        return result


def _as_position(value: Any) -> Position:
    if isinstance(value, Position):
        return value
    if isinstance(value, Mapping):
        return Position(x=float(value.get("x", 0.0)), y=float(value.get("y", 0.0)))
    x, y = value
    return Position(x=float(x), y=float(y))
