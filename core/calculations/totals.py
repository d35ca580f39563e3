# -*- coding: utf-8 -*-
"""Per-level totals of a computed project level.

NOTE: This module must not depend on PyQt or on the engine internals.
"""

from __future__ import annotations

from typing import Iterable

from core.kinds import CONVERSION_KINDS, SUPPLY_KINDS, NodeKind
from core.models.results import EdgeResult, NodeResult, Totals


def compute_level_totals(nodes: Iterable[NodeResult], edges: Iterable[EdgeResult]) -> Totals:
    """Totals of one level.

    - load_power    : Load P_out + Subsystem P_out (subsystems already scaled)
    - source_input  : Source / SubsystemInput P_out
    - overall_eta   : load_power / source_input (0 without input)
    - edge_loss     : sum of interconnect losses of this level
    - converter_loss: Converter, DualOutputConverter and Bus losses of this level
    """
    load = 0.0
    source = 0.0
    conv = 0.0
    for n in nodes:
        if n.kind in (NodeKind.LOAD, NodeKind.SUBSYSTEM):
            load += n.p_out
        elif n.kind in SUPPLY_KINDS:
            source += n.p_out
        if n.kind in CONVERSION_KINDS:
            conv += n.loss or 0.0
    edge = sum(e.loss for e in edges)
    return Totals(
        load_power=float(load),
        source_input=float(source),
        overall_eta=float(load / source) if source > 0 else 0.0,
        edge_loss=float(edge),
        converter_loss=float(conv),
    )
