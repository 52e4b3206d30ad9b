# sugars/core/build/config.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


def _as_bool(x: Any) -> bool:
    if isinstance(x, str):
        return x.strip().lower() in ("1", "true", "yes", "si", "sí", "y")
    return bool(x)


# ============================================================
# FeedDefaults (alimentación cuando el nodo input no trae dato)
# ============================================================

@dataclass(frozen=True)
class FeedDefaults:
    """
    Fallback feed values used when the input node lacks a parameter.
    """
    flow_rate: float = 1000.0      # [t/h] cane
    brix: float = 15.0             # [%]
    purity: float = 85.0           # [%]

    @staticmethod
    def from_dict(cfg: Dict[str, Any]) -> "FeedDefaults":
        out = FeedDefaults(
            flow_rate=float(cfg.get("feed_flow_rate", cfg.get("flow_rate", cfg.get("flowRate", 1000.0)))),
            brix=float(cfg.get("feed_brix", cfg.get("brix", cfg.get("brixContent", 15.0)))),
            purity=float(cfg.get("feed_purity", cfg.get("purity", 85.0))),
        )
        out.validate()
        return out

    def validate(self) -> None:
        if self.flow_rate <= 0:
            raise ValueError(f"FeedDefaults.flow_rate debe ser > 0 (recibido {self.flow_rate})")
        if not (0.0 < self.brix <= 100.0):
            raise ValueError(f"FeedDefaults.brix fuera de rango (0, 100]: {self.brix}")
        if not (0.0 < self.purity <= 100.0):
            raise ValueError(f"FeedDefaults.purity fuera de rango (0, 100]: {self.purity}")


# ============================================================
# EfficiencyDefaults
# ============================================================

@dataclass(frozen=True)
class EfficiencyDefaults:
    """
    Equipment efficiencies [%]. Mill/evaporator values are used only when the
    graph has no such node (or its 'efficiency' is unusable); crystallization
    is always this constant.
    """
    mill: float = 95.0
    evaporator: float = 88.0
    crystallization: float = 92.0

    @staticmethod
    def from_dict(cfg: Dict[str, Any]) -> "EfficiencyDefaults":
        out = EfficiencyDefaults(
            mill=float(cfg.get("mill_efficiency", cfg.get("eff_mill", 95.0))),
            evaporator=float(cfg.get("evaporator_efficiency", cfg.get("eff_evaporator", 88.0))),
            crystallization=float(cfg.get("crystallization_efficiency", cfg.get("eff_crystallization", 92.0))),
        )
        out.validate()
        return out

    def validate(self) -> None:
        for name in ("mill", "evaporator", "crystallization"):
            v = getattr(self, name)
            if not (0.0 < v <= 100.0):
                raise ValueError(f"EfficiencyDefaults.{name} fuera de rango (0, 100]: {v}")


# ============================================================
# RunConfig (ejecución asíncrona)
# ============================================================

@dataclass(frozen=True)
class RunConfig:
    """
    Simulation trigger settings.
    - delay_s: artificial wait before the balance is computed
    - discard_stale: drop a result whose graph changed while it was pending
    """
    delay_s: float = 1.5
    discard_stale: bool = True

    @staticmethod
    def from_dict(cfg: Dict[str, Any]) -> "RunConfig":
        delay = cfg.get("delay_s", cfg.get("run_delay_s", cfg.get("delay", 1.5)))
        discard = cfg.get("discard_stale", cfg.get("discard_stale_results", True))

        out = RunConfig(delay_s=float(delay), discard_stale=_as_bool(discard))
        out.validate()
        return out

    def validate(self) -> None:
        if self.delay_s < 0:
            raise ValueError(f"RunConfig.delay_s debe ser >= 0 (recibido {self.delay_s})")


# ============================================================
# ModelConfig (agregador)
# ============================================================

@dataclass(frozen=True)
class ModelConfig:
    feed: FeedDefaults = field(default_factory=FeedDefaults)
    efficiency: EfficiencyDefaults = field(default_factory=EfficiencyDefaults)
    run: RunConfig = field(default_factory=RunConfig)
    version: int = 1

    @staticmethod
    def from_dict(cfg: Optional[Dict[str, Any]] = None) -> "ModelConfig":
        cfg = dict(cfg or {})
        out = ModelConfig(
            feed=FeedDefaults.from_dict(cfg),
            efficiency=EfficiencyDefaults.from_dict(cfg),
            run=RunConfig.from_dict(cfg),
            version=int(cfg.get("config_version", cfg.get("version", 1))),
        )
        out.validate()
        return out

    def validate(self) -> None:
        if self.version <= 0:
            raise ValueError(f"ModelConfig.version debe ser > 0 (recibido {self.version})")

        self.feed.validate()
        self.efficiency.validate()
        self.run.validate()
