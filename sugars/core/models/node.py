from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Union

from .equipment import EquipmentKind

ParamValue = Union[float, int, str]
ParameterSet = Dict[str, ParamValue]


@dataclass(frozen=True, slots=True)
class Position:
    """Canvas coordinates [px]. Owned by the drawing layer, ignored by the solver."""
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True, slots=True)
class ProcessNode:
    """
    Canonical process equipment node (core model).

    Notes:
    - uid: unique id, generated once at creation and never reused
    - kind: fixed at creation; decides how the solver reports the node
    - params: equipment parameters (implicit units, see build/params.py);
      read-only view over a private copy; edits replace the node
    - label/icon/color/description: creation payload from the catalog,
      carried so exported documents can be redrawn
    """
    uid: str
    kind: EquipmentKind

    position: Position = field(default_factory=Position)
    params: Mapping[str, ParamValue] = field(default_factory=dict)

    label: str = ""
    icon: str = ""
    color: str = ""
    description: str = ""

    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # params never alias the caller's dict
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def param(self, name: str, default: Any = None) -> Any:
        return self.params.get(name, default)
