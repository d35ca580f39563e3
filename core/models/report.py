# -*- coding: utf-8 -*-
"""Models for report tables (converter summary, per-level breakdown)."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from core.kinds import NodeKind


@dataclass(frozen=True)
class BranchSummary:
    id: str
    label: str
    vout: float
    i_out: float
    p_in: float
    p_out: float
    loss: float
    efficiency: float
    phase_count: int = 1
    loss_per_phase: Optional[float] = None
    edge_loss: float = 0.0


@dataclass(frozen=True)
class ConverterSummary:
    """One converter of the tree, scaled by every enclosing subsystem count."""

    id: str
    key: str
    name: str
    kind: NodeKind
    location_path: Tuple[str, ...]
    vin_min: float
    vin_max: float
    vout: Optional[float]
    i_out: float
    p_in: float
    p_out: float
    loss: float
    efficiency: float
    multiplier: int = 1
    phase_count: int = 1
    loss_per_phase: Optional[float] = None
    edge_loss: float = 0.0
    outputs: Tuple[BranchSummary, ...] = ()

    @property
    def location(self) -> str:
        return " / ".join(self.location_path) if self.location_path else "System"


@dataclass(frozen=True)
class LevelSlice:
    id: str
    label: str
    value: float


LOSSES_SLICE_ID = "__losses__"
