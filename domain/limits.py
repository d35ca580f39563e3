# -*- coding: utf-8 -*-
"""
domain/limits.py

Rating checks run after the demand pass, using the project's default
margins. A rating is exceeded once the operating value passes
``rating * (1 - margin%)``.
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

from core.keys import IssueCodes as C
from core.kinds import Redundancy
from core.models.results import BranchResult, NodeResult
from domain.graph import GraphIndex
from domain.interconnect import EdgeFlow
from domain.models.nodes import ConverterNode, DualOutputConverterNode, LoadNode, SourceNode
from domain.models.project import Margins
from domain.voltage import VoltageMap
from domain.warnings import WarningCollector


def _derated(rating: Optional[float], pct: float) -> Optional[float]:
    if rating is None or rating <= 0:
        return None
    return rating * (1.0 - pct / 100.0)


def _check_source(node: SourceNode, res: NodeResult, m: Margins, w: WarningCollector) -> None:
    if node.redundancy == Redundancy.N_PLUS_1:
        per_unit = node.p_max or ((node.i_max or 0.0) * node.vout)
        available = (node.count - 1) * per_unit
        if available < res.p_out:
            w.node(
                node.id,
                C.SOURCE_REDUNDANCY,
                f"Redundancy shortfall: available {available:.1f}W < required {res.p_out:.1f}W",
            )
    lim = _derated(node.p_max, m.power_pct)
    if lim is not None and res.p_out > lim:
        w.node(node.id, C.SOURCE_OVERPOWER, f"Source overpower {res.p_out:.1f}W > {node.p_max:g}W (incl. margin).")
    lim = _derated(node.i_max, m.current_pct)
    if lim is not None and res.i_out > lim:
        w.node(node.id, C.SOURCE_OVERCURRENT, f"Source overcurrent {res.i_out:.2f}A > {node.i_max:g}A (incl. margin).")


def _check_output(
    node_id: str,
    label: str,
    iout_max: Optional[float],
    pout_max: Optional[float],
    i_out: float,
    p_out: float,
    m: Margins,
    w: WarningCollector,
) -> None:
    prefix = f"{label}: " if label else ""
    lim = _derated(iout_max, m.current_pct)
    if lim is not None and i_out > lim:
        w.node(node_id, C.CONVERTER_OVERCURRENT, f"{prefix}I_out {i_out:.3f}A exceeds limit {iout_max:g}A (incl. margin).")
    lim = _derated(pout_max, m.power_pct)
    if lim is not None and p_out > lim:
        w.node(node_id, C.CONVERTER_OVERPOWER, f"{prefix}P_out {p_out:.2f}W exceeds limit {pout_max:g}W (incl. margin).")


def _check_load(
    node: LoadNode,
    graph: GraphIndex,
    volts: VoltageMap,
    flows: Mapping[str, EdgeFlow],
    m: Margins,
    w: WarningCollector,
) -> None:
    v_up = volts.upstream.get(node.id)
    if v_up is None:
        return
    drops = [flows[e.id].v_drop for e in graph.incoming_to(node.id) if e.id in flows]
    delivered = v_up - (max(drops) if drops else 0.0)
    allowed = node.vreq * (1.0 - m.voltage_margin_pct / 100.0)
    if delivered < allowed:
        w.node(
            node.id,
            C.LOAD_VOLTAGE_MARGIN,
            f"Voltage margin shortfall at load: delivered {delivered:.3f}V < allowed {allowed:.3f}V",
        )


def check_limits(
    graph: GraphIndex,
    volts: VoltageMap,
    results: Mapping[str, NodeResult],
    flows: Mapping[str, EdgeFlow],
    margins: Margins,
    warnings: WarningCollector,
) -> None:
    for nid in graph.order:
        node = graph.nodes[nid]
        res = results.get(nid)
        if res is None:
            continue
        if isinstance(node, SourceNode):
            _check_source(node, res, margins, warnings)
        elif isinstance(node, ConverterNode):
            _check_output(nid, "", node.iout_max, node.pout_max, res.i_out, res.p_out, margins, warnings)
        elif isinstance(node, DualOutputConverterNode):
            by_id: Dict[str, BranchResult] = {b.id: b for b in res.branch_results or ()}
            for out in node.outputs:
                br = by_id.get(out.id)
                if br is None:
                    continue
                _check_output(nid, out.display_name, out.iout_max, out.pout_max, br.i_out, br.p_out, margins, warnings)
        elif isinstance(node, LoadNode):
            _check_load(node, graph, volts, flows, margins, warnings)

    for e in graph.edges:
        f = flows.get(e.id)
        v_up = volts.output(e.from_id, graph.source_handles.get(e.id, ""))
        if f is None or v_up is None or v_up <= 0:
            continue
        if f.v_drop > v_up * margins.voltage_drop_pct / 100.0:
            warnings.edge(
                e.id,
                C.EDGE_VOLTAGE_DROP,
                f"Interconnect drop {f.v_drop:.3f}V exceeds {margins.voltage_drop_pct:g}% of {v_up:.3f}V",
            )
