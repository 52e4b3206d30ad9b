from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass(frozen=True, slots=True)
class ProcessEdge:
    """
    Directed connection between two process nodes (core model).

    Notes:
    - source/target reference ProcessNode.uid (source is upstream)
    - several edges may share a source or a target; duplicates are allowed
    """
    uid: str
    source: str
    target: str

    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target
