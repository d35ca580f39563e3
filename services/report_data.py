# -*- coding: utf-8 -*-
"""services/report_data.py

Report-facing views over a computed result tree.

- build_converter_summary: every converter at any depth, numbers scaled
  by the cumulative subsystem multiplier, largest output first.
- build_level_breakdown: what one level's input power is spent on
  (direct loads, whole subsystems, and this level's own losses).

Both read an existing ComputeResult; nothing is recomputed.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from core.calculations.deep_aggregates import deep_aggregates
from core.models.report import LOSSES_SLICE_ID, BranchSummary, ConverterSummary, LevelSlice
from core.models.results import ComputeResult, EdgeResult
from domain.graph import source_handle
from domain.models.nodes import ConverterNode, DualOutputConverterNode, LoadNode, SubsystemNode
from domain.models.project import Project

log = logging.getLogger(__name__)


def _eff(p_in: float, p_out: float) -> float:
    return min(1.0, max(0.0, p_out / p_in)) if p_in > 0 else 0.0


def _per_phase(loss: float, phases: int) -> Optional[float]:
    return loss / phases if phases > 1 else None


def _edge_losses_by_handle(project: Project, result: ComputeResult, node: DualOutputConverterNode) -> Dict[str, float]:
    out: Dict[str, float] = {}
    for e in project.edges:
        if e.from_id != node.id:
            continue
        er: Optional[EdgeResult] = result.edges.get(e.id)
        if er is None:
            continue
        h = source_handle(node, e)
        out[h] = out.get(h, 0.0) + er.loss
    return out


def _sort_key(name: str, p_out: float) -> Tuple[float, str]:
    return (-round(p_out, 9), name)


def build_converter_summary(project: Project, result: ComputeResult) -> List[ConverterSummary]:
    entries: List[ConverterSummary] = []
    # (project, result, names, ids, multiplier)
    stack = [(project, result, (), (), 1)]
    while stack:
        proj, res, names, ids, mult = stack.pop()
        for node in proj.nodes:
            nr = res.nodes.get(node.id)
            if nr is None:
                continue
            key = ">".join(ids + (node.id,))
            edge_loss = sum(er.loss for er in res.edges.values() if er.from_id == node.id) * mult

            if isinstance(node, ConverterNode):
                loss = (nr.loss or 0.0) * mult
                entries.append(
                    ConverterSummary(
                        id=node.id, key=key, name=node.name or "Converter", kind=node.kind,
                        location_path=names, vin_min=node.vin_min, vin_max=node.vin_max, vout=node.vout,
                        i_out=nr.i_out * mult, p_in=nr.p_in * mult, p_out=nr.p_out * mult, loss=loss,
                        efficiency=_eff(nr.p_in, nr.p_out), multiplier=mult,
                        phase_count=node.phase_count, loss_per_phase=_per_phase(loss, node.phase_count),
                        edge_loss=edge_loss,
                    )
                )

            elif isinstance(node, DualOutputConverterNode):
                by_handle = _edge_losses_by_handle(proj, res, node)
                branches = []
                for idx, br in enumerate(nr.branch_results or ()):
                    out = node.outputs[idx]
                    b_loss = br.loss * mult
                    branches.append(
                        BranchSummary(
                            id=br.id, label=out.display_name, vout=br.vout,
                            i_out=br.i_out * mult, p_in=br.p_in * mult, p_out=br.p_out * mult, loss=b_loss,
                            efficiency=_eff(br.p_in, br.p_out), phase_count=out.phase_count,
                            loss_per_phase=_per_phase(b_loss, out.phase_count),
                            edge_loss=by_handle.get(br.id, 0.0) * mult,
                        )
                    )
                branches.sort(key=lambda b: _sort_key(b.label, b.p_out))
                loss = (nr.loss or 0.0) * mult
                entries.append(
                    ConverterSummary(
                        id=node.id, key=key, name=node.name or "Dual-output converter", kind=node.kind,
                        location_path=names, vin_min=node.vin_min, vin_max=node.vin_max, vout=None,
                        i_out=nr.i_out * mult, p_in=nr.p_in * mult, p_out=nr.p_out * mult, loss=loss,
                        efficiency=_eff(nr.p_in, nr.p_out), multiplier=mult,
                        edge_loss=edge_loss, outputs=tuple(branches),
                    )
                )

            elif isinstance(node, SubsystemNode) and node.project is not None and nr.nested is not None:
                stack.append(
                    (node.project, nr.nested, names + (node.name or "Subsystem",), ids + (node.id,), mult * nr.num_paralleled)
                )

    entries.sort(key=lambda e: _sort_key(e.name, e.p_out))
    log.debug("converter summary: %d entr(ies)", len(entries))
    return entries


def build_level_breakdown(project: Project, result: ComputeResult) -> List[LevelSlice]:
    """One level's consumption split; values add up to loads + subsystems + level losses."""
    slices: List[LevelSlice] = []
    for node in project.nodes:
        nr = result.nodes.get(node.id)
        if nr is None:
            continue
        if isinstance(node, LoadNode):
            slices.append(LevelSlice(id=node.id, label=node.name or "Load", value=nr.p_out))
        elif isinstance(node, SubsystemNode) and nr.nested is not None:
            agg = deep_aggregates(nr.nested)
            value = (agg.total_load_power + agg.edge_loss + agg.converter_loss) * nr.num_paralleled
            slices.append(LevelSlice(id=node.id, label=node.name or "Subsystem", value=value))

    losses = result.totals.edge_loss + result.totals.converter_loss
    if losses > 0:
        slices.append(LevelSlice(id=LOSSES_SLICE_ID, label="Copper traces and power converters", value=losses))

    return sorted((s for s in slices if s.value > 1e-9), key=lambda s: -s.value)
