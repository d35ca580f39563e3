# -*- coding: utf-8 -*-
"""Deep aggregation over a computed result tree.

Walks every nested subsystem result, scaling each level by the product of
the ``numParalleledSystems`` of all enclosing subsystems.
"""

from __future__ import annotations

from typing import List, Tuple

from core.kinds import CONVERSION_KINDS, NodeKind
from core.models.results import ComputeResult, DeepAggregates


def deep_aggregates(result: ComputeResult) -> DeepAggregates:
    critical = 0.0
    non_critical = 0.0
    edge_loss = 0.0
    conv_loss = 0.0

    stack: List[Tuple[ComputeResult, int]] = [(result, 1)]
    while stack:
        level, mult = stack.pop()
        for n in level.nodes.values():
            if n.kind == NodeKind.LOAD:
                if n.critical is False:
                    non_critical += n.p_out * mult
                else:
                    critical += n.p_out * mult
            elif n.kind in CONVERSION_KINDS:
                conv_loss += (n.loss or 0.0) * mult
            elif n.kind == NodeKind.SUBSYSTEM and n.nested is not None:
                stack.append((n.nested, mult * max(1, n.num_paralleled)))
        for e in level.edges.values():
            edge_loss += e.loss * mult

    return DeepAggregates(
        critical_load_power=critical,
        non_critical_load_power=non_critical,
        edge_loss=edge_loss,
        converter_loss=conv_loss,
    )
