# -*- coding: utf-8 -*-
"""Result models of a power-flow evaluation (immutable, produced fresh per call)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from core.kinds import NodeKind, Scenario
from core.types import Issue


@dataclass(frozen=True)
class BranchResult:
    """One output of a dual-output converter."""

    id: str
    label: str
    vout: float
    p_in: float
    p_out: float
    i_out: float
    loss: float
    eta: float


@dataclass(frozen=True)
class NodeResult:
    id: str
    kind: NodeKind
    v_upstream: Optional[float] = None
    p_in: float = 0.0
    p_out: float = 0.0
    i_in: float = 0.0
    i_out: float = 0.0
    loss: Optional[float] = None
    eta: Optional[float] = None
    p_in_single: Optional[float] = None
    critical: Optional[bool] = None
    warnings: Tuple[Issue, ...] = ()
    branch_results: Optional[Tuple[BranchResult, ...]] = None
    port_voltages: Optional[Dict[str, float]] = None
    port_power: Optional[Dict[str, float]] = None
    num_paralleled: int = 1
    nested: Optional["ComputeResult"] = None


@dataclass(frozen=True)
class EdgeResult:
    id: str
    from_id: str
    to_id: str
    v_upstream: Optional[float] = None
    i_edge: float = 0.0
    p_edge: float = 0.0
    r_ohm: float = 0.0
    v_drop: float = 0.0
    loss: float = 0.0
    warnings: Tuple[Issue, ...] = ()


@dataclass(frozen=True)
class Totals:
    """Per-level totals (no recursion into subsystems beyond their own P_out)."""

    load_power: float = 0.0
    source_input: float = 0.0
    overall_eta: float = 0.0
    edge_loss: float = 0.0
    converter_loss: float = 0.0


@dataclass(frozen=True)
class ComputeResult:
    nodes: Dict[str, NodeResult] = field(default_factory=dict)
    edges: Dict[str, EdgeResult] = field(default_factory=dict)
    totals: Totals = field(default_factory=Totals)
    global_warnings: Tuple[Issue, ...] = ()
    order: Tuple[str, ...] = ()
    scenario: Scenario = Scenario.TYPICAL

    @property
    def has_fatal(self) -> bool:
        return any(w.is_fatal for w in self.global_warnings)


@dataclass(frozen=True)
class DeepAggregates:
    """Totals over the whole tree, scaled by every enclosing subsystem count."""

    critical_load_power: float = 0.0
    non_critical_load_power: float = 0.0
    edge_loss: float = 0.0
    converter_loss: float = 0.0

    @property
    def total_load_power(self) -> float:
        return self.critical_load_power + self.non_critical_load_power

    def to_dict(self) -> Dict[str, float]:
        return {
            "criticalLoadPower": self.critical_load_power,
            "nonCriticalLoadPower": self.non_critical_load_power,
            "edgeLoss": self.edge_loss,
            "converterLoss": self.converter_loss,
            "totalLoadPower": self.total_load_power,
        }
