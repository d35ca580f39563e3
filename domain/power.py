# -*- coding: utf-8 -*-
"""
domain/power.py

Reverse (load-to-source) demand pass.

Each node's output demand is the sum over its output edges of what the
edge delivers plus the edge's own I^2 R loss. Every edge into a handle
carries that handle's full input demand. Subsystems are delegated to the
injected subsystem evaluator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Dict, List, Mapping, Optional, Tuple, Union

from core.keys import Handles
from core.keys import IssueCodes as C
from core.kinds import Scenario
from core.models.results import BranchResult, NodeResult
from domain.efficiency import OperatingPoint, resolve_efficiency_detail
from domain.graph import GraphIndex
from domain.interconnect import EdgeFlow, compute_edge_flow
from domain.models.nodes import (
    BusNode,
    ConverterNode,
    ConverterOutput,
    DualOutputConverterNode,
    LoadNode,
    SourceNode,
    SubsystemInputNode,
    SubsystemNode,
)
from domain.subsystem import port_currents
from domain.voltage import VoltageMap
from domain.warnings import WarningCollector

log = logging.getLogger(__name__)

# evaluate_subsystem(node, port_voltages) -> NodeResult
SubsystemFn = Callable[[SubsystemNode, Mapping[str, float]], NodeResult]


@dataclass(frozen=True)
class PowerOptions:
    scenario: Scenario = Scenario.TYPICAL
    default_efficiency: float = 0.9
    min_efficiency: float = 1e-9


def load_current(load: LoadNode, scenario: Scenario) -> float:
    """Scenario current of a load, all paralleled devices included."""
    if scenario == Scenario.MAX:
        per_device = load.i_max * load.utilization_max / 100.0
    elif scenario == Scenario.IDLE:
        per_device = max(0.0, load.i_idle or 0.0)
    else:
        per_device = load.i_typ * load.utilization_typ / 100.0
    return per_device * max(1, int(load.num_paralleled_devices or 1))


def _demand(graph: GraphIndex, flows: Mapping[str, EdgeFlow], node_id: str, handle: str) -> Tuple[float, float]:
    i_sum = 0.0
    p_sum = 0.0
    for e in graph.outgoing_from(node_id, handle):
        f = flows.get(e.id)
        if f is None:
            continue
        i_sum += f.i_edge
        p_sum += f.p_upstream
    return i_sum, p_sum


def _input_current(p_in: float, v_in: Optional[float], vin_mid: float) -> float:
    v = v_in if v_in is not None and v_in > 0 else vin_mid
    return p_in / v if v > 0 else 0.0


def _convert(
    owner_id: str,
    out: Union[ConverterNode, ConverterOutput],
    i_out: float,
    p_out: float,
    opts: PowerOptions,
    warnings: WarningCollector,
    label: str = "",
) -> Tuple[float, float]:
    """(eta, p_in) of one regulated output at its operating point."""
    op = OperatingPoint(
        p_out=p_out,
        i_out=i_out,
        vout=out.vout,
        phase_count=out.phase_count,
        iout_max=out.iout_max,
        pout_max=out.pout_max,
    )
    res = resolve_efficiency_detail(out.efficiency, op, default=opts.default_efficiency)
    prefix = f"{label}: " if label else ""
    if res.fallback:
        warnings.node(
            owner_id,
            C.EFFICIENCY_FALLBACK,
            f"{prefix}Malformed efficiency model ({res.reason}); using {opts.default_efficiency:.2f}.",
        )
    eta = res.eta
    if eta <= 0.0 and p_out > 0.0:
        warnings.node(owner_id, C.EFFICIENCY_ZERO, f"{prefix}Efficiency resolves to 0; input power is unbounded.")
    p_in = p_out / max(eta, opts.min_efficiency) if p_out > 0.0 else 0.0
    return eta, p_in


def _warn_unpropagated(graph: GraphIndex, node_id: str, warnings: WarningCollector) -> None:
    for e in graph.outgoing_from(node_id):
        warnings.edge(e.id, C.OUTPUT_NOT_PROPAGATED, f"Node '{node_id}' does not supply power through its outputs.")


def aggregate_power(
    graph: GraphIndex,
    volts: VoltageMap,
    warnings: WarningCollector,
    *,
    opts: PowerOptions,
    evaluate_subsystem: SubsystemFn,
) -> Tuple[Dict[str, NodeResult], Dict[str, EdgeFlow]]:
    """Node results (without warnings attached) and per-edge flows for one level."""
    results: Dict[str, NodeResult] = {}
    flows: Dict[str, EdgeFlow] = {}

    for nid in reversed(graph.order):
        node = graph.nodes[nid]
        v_up = volts.upstream.get(nid)
        # handle -> (I, P) this node draws through that input handle
        draws: Dict[str, Tuple[float, float]] = {}

        if isinstance(node, LoadNode):
            i = load_current(node, opts.scenario)
            p = node.vreq * i
            res = NodeResult(
                id=nid, kind=node.kind, v_upstream=v_up,
                p_in=p, p_out=p, i_in=i, i_out=i,
                critical=node.critical, num_paralleled=node.num_paralleled_devices,
            )
            draws[Handles.INPUT] = (i, p)
            _warn_unpropagated(graph, nid, warnings)

        elif isinstance(node, ConverterNode):
            i_out, p_out = _demand(graph, flows, nid, Handles.OUTPUT)
            eta, p_in = _convert(nid, node, i_out, p_out, opts, warnings)
            i_in = _input_current(p_in, v_up, node.vin_mid)
            res = NodeResult(
                id=nid, kind=node.kind, v_upstream=v_up,
                p_in=p_in, p_out=p_out, i_in=i_in, i_out=i_out,
                loss=p_in - p_out, eta=eta,
            )
            draws[Handles.INPUT] = (i_in, p_in)

        elif isinstance(node, DualOutputConverterNode):
            branches: List[BranchResult] = []
            for b in node.outputs:
                bi, bp = _demand(graph, flows, nid, b.id)
                eta, b_in = _convert(nid, b, bi, bp, opts, warnings, label=b.display_name)
                branches.append(
                    BranchResult(id=b.id, label=b.label, vout=b.vout, p_in=b_in, p_out=bp, i_out=bi, loss=b_in - bp, eta=eta)
                )
            p_in = sum(b.p_in for b in branches)
            p_out = sum(b.p_out for b in branches)
            i_in = _input_current(p_in, v_up, node.vin_mid)
            res = NodeResult(
                id=nid, kind=node.kind, v_upstream=v_up,
                p_in=p_in, p_out=p_out, i_in=i_in, i_out=sum(b.i_out for b in branches),
                loss=p_in - p_out, eta=(p_out / p_in) if p_in > 0 else None,
                branch_results=tuple(branches),
            )
            draws[Handles.INPUT] = (i_in, p_in)

        elif isinstance(node, BusNode):
            i_out, p_out = _demand(graph, flows, nid, Handles.OUTPUT)
            loss = i_out * i_out * node.r_milliohm / 1000.0
            res = NodeResult(
                id=nid, kind=node.kind, v_upstream=v_up,
                p_in=p_out + loss, p_out=p_out, i_in=i_out, i_out=i_out, loss=loss,
            )
            draws[Handles.INPUT] = (i_out, p_out + loss)

        elif isinstance(node, SubsystemNode):
            res = evaluate_subsystem(node, volts.port_voltages.get(nid, {}))
            res = replace(res, v_upstream=v_up)
            currents = port_currents(res)
            for pid, p in (res.port_power or {}).items():
                draws[pid] = (currents.get(pid, 0.0), p)
            _warn_unpropagated(graph, nid, warnings)

        elif isinstance(node, (SourceNode, SubsystemInputNode)):
            i_out, p_out = _demand(graph, flows, nid, Handles.OUTPUT)
            res = NodeResult(
                id=nid, kind=node.kind, v_upstream=v_up,
                p_in=p_out, p_out=p_out, i_in=i_out, i_out=i_out,
            )

        else:  # pragma: no cover - Notes never reach the graph
            continue

        results[nid] = res
        for handle, (i, p) in draws.items():
            for e in graph.incoming_to(nid, handle):
                flows[e.id] = compute_edge_flow(e, i, p)

    for nid in [n for n in graph.nodes if n in graph.cyclic]:
        node = graph.nodes[nid]
        warnings.node(nid, C.CYCLE_MEMBER, "Node is on or downstream of a cycle; not evaluated.")
        results[nid] = NodeResult(id=nid, kind=node.kind)

    log.debug("power pass: %d node(s), %d edge flow(s)", len(results), len(flows))
    return results, flows
