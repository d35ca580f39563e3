# -*- coding: utf-8 -*-
"""
domain/subsystem.py

Recursive evaluation of a Subsystem node.

The nested project is evaluated in isolation through the injected
``evaluate`` callable, with the parent's scenario and the voltages the
parent resolved at each input port. The single-instance numbers are then
scaled by ``numParalleledSystems``.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Mapping

from core.keys import IssueCodes as C
from core.kinds import NodeKind, Scenario
from core.models.results import ComputeResult, NodeResult
from core.types import Severity
from domain.models.nodes import SubsystemNode
from domain.models.project import Project
from domain.warnings import WarningCollector, prefix_nested

log = logging.getLogger(__name__)

# evaluate(project, scenario, injected_port_voltages, depth) -> ComputeResult
NestedEvaluator = Callable[[Project, Scenario, Mapping[str, float], int], ComputeResult]


def port_currents(result: NodeResult) -> Dict[str, float]:
    """External current drawn at each port (all paralleled instances)."""
    nested = result.nested
    if nested is None:
        return {}
    out: Dict[str, float] = {}
    for pid in (result.port_power or {}):
        r = nested.nodes.get(pid)
        out[pid] = (r.i_out if r is not None else 0.0) * result.num_paralleled
    return out


def evaluate_subsystem(
    node: SubsystemNode,
    port_voltages: Mapping[str, float],
    *,
    scenario: Scenario,
    depth: int,
    max_depth: int,
    evaluate: NestedEvaluator,
    warnings: WarningCollector,
) -> NodeResult:
    count = max(1, int(node.num_paralleled_systems or 1))

    project = node.project
    if project is None:
        warnings.node(node.id, C.SUBSYSTEM_EMPTY, "Subsystem has no embedded project; assuming empty project.")
        project = Project()

    if depth + 1 > max_depth:
        warnings.node(
            node.id,
            C.SUBSYSTEM_DEPTH,
            f"Subsystem nesting exceeds {max_depth} levels; not evaluated.",
            Severity.ERROR,
        )
        return NodeResult(
            id=node.id,
            kind=NodeKind.SUBSYSTEM,
            p_in_single=0.0,
            port_voltages=dict(port_voltages),
            port_power={pid: 0.0 for pid in port_voltages},
            num_paralleled=count,
        )

    log.debug("evaluating subsystem %s at depth %d (x%d)", node.id, depth + 1, count)
    nested = evaluate(project, scenario, dict(port_voltages), depth + 1)

    single: Dict[str, float] = {}
    for pid in node.port_ids():
        r = nested.nodes.get(pid)
        single[pid] = r.p_out if r is not None else 0.0

    p_in_single = sum(single.values())
    p_in = count * p_in_single
    p_out = count * nested.totals.load_power
    i_in = count * sum((nested.nodes[pid].i_out if pid in nested.nodes else 0.0) for pid in single)

    warnings.extend(prefix_nested(nested.global_warnings, node.id))

    return NodeResult(
        id=node.id,
        kind=NodeKind.SUBSYSTEM,
        p_in=p_in,
        p_out=p_out,
        i_in=i_in,
        loss=p_in - p_out,
        p_in_single=p_in_single,
        port_voltages=dict(port_voltages),
        port_power={pid: count * p for pid, p in single.items()},
        num_paralleled=count,
        nested=nested,
    )
