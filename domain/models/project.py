# -*- coding: utf-8 -*-
"""Project snapshot model and the tolerant parser for editing-layer dicts."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, Optional, Set, Tuple

from core.keys import IssueCodes as C
from core.keys import ProjectKeys as K
from core.kinds import NodeKind, Redundancy, Scenario
from core.types import Issue, Severity
from domain.models.efficiency import parse_efficiency
from domain.models.nodes import (
    BusNode,
    ConverterNode,
    ConverterOutput,
    DualOutputConverterNode,
    LoadNode,
    Node,
    NoteNode,
    SourceNode,
    SubsystemInputNode,
    SubsystemNode,
)
from domain.parse import to_bool, to_count, to_float, to_opt_str, to_pct, to_str

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Margins:
    current_pct: float = 10.0
    power_pct: float = 10.0
    voltage_drop_pct: float = 5.0
    voltage_margin_pct: float = 3.0

    @classmethod
    def from_dict(cls, data: Any) -> "Margins":
        raw = data if isinstance(data, Mapping) else {}
        d = cls()
        return cls(
            current_pct=to_float(raw.get(K.MARGIN_CURRENT_PCT), d.current_pct),
            power_pct=to_float(raw.get(K.MARGIN_POWER_PCT), d.power_pct),
            voltage_drop_pct=to_float(raw.get(K.MARGIN_VOLTAGE_DROP_PCT), d.voltage_drop_pct),
            voltage_margin_pct=to_float(raw.get(K.MARGIN_VOLTAGE_MARGIN_PCT), d.voltage_margin_pct),
        )

    def to_dict(self) -> Dict[str, float]:
        return {
            K.MARGIN_CURRENT_PCT: self.current_pct,
            K.MARGIN_POWER_PCT: self.power_pct,
            K.MARGIN_VOLTAGE_DROP_PCT: self.voltage_drop_pct,
            K.MARGIN_VOLTAGE_MARGIN_PCT: self.voltage_margin_pct,
        }


@dataclass(frozen=True)
class Interconnect:
    r_milliohm: float = 0.0

    @property
    def r_ohm(self) -> float:
        return self.r_milliohm / 1000.0


@dataclass(frozen=True)
class Edge:
    id: str
    from_id: str
    to_id: str
    from_handle: Optional[str] = None
    to_handle: Optional[str] = None
    interconnect: Interconnect = field(default_factory=Interconnect)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], idx: int = 0) -> "Edge":
        ic = data.get(K.INTERCONNECT)
        ic = ic if isinstance(ic, Mapping) else {}
        r = to_float(ic.get(K.R_MILLIOHM), 0.0) or 0.0
        return cls(
            id=to_str(data.get(K.ID), f"edge-{idx}"),
            from_id=to_str(data.get(K.FROM)),
            to_id=to_str(data.get(K.TO)),
            from_handle=to_opt_str(data.get(K.FROM_HANDLE)),
            to_handle=to_opt_str(data.get(K.TO_HANDLE)),
            interconnect=Interconnect(r_milliohm=max(0.0, r)),
        )


@dataclass(frozen=True)
class Project:
    """Immutable snapshot of one level of the power tree.

    ``issues`` carries what the parser had to repair; the engine reports
    them as global warnings of this level.
    """

    nodes: Tuple[Node, ...] = ()
    edges: Tuple[Edge, ...] = ()
    current_scenario: Scenario = Scenario.TYPICAL
    scenarios: Tuple[Scenario, ...] = (Scenario.TYPICAL, Scenario.MAX, Scenario.IDLE)
    units: Tuple[Tuple[str, str], ...] = ()
    default_margins: Margins = field(default_factory=Margins)
    name: str = ""
    issues: Tuple[Issue, ...] = ()


def parse_scenario(val: Any, default: Scenario = Scenario.TYPICAL) -> Scenario:
    if isinstance(val, Scenario):
        return val
    s = to_str(val).lower()
    for sc in Scenario:
        if sc.value.lower() == s:
            return sc
    return default


def _name(d: Mapping[str, Any]) -> str:
    return to_str(d.get(K.LABEL) or d.get("label"))


def _parse_source(d: Mapping[str, Any], node_id: str) -> SourceNode:
    vout = to_float(d.get(K.VOUT))
    if vout is None:
        vout = to_float(d.get(K.V_NOM), 0.0)
    redundancy = Redundancy.N_PLUS_1 if to_str(d.get(K.REDUNDANCY)).upper() == "N+1" else Redundancy.N
    return SourceNode(
        id=node_id,
        name=_name(d),
        vout=float(vout or 0.0),
        i_max=to_float(d.get(K.I_MAX)),
        p_max=to_float(d.get(K.P_MAX)),
        count=to_count(d.get(K.COUNT), 1),
        redundancy=redundancy,
    )


def _parse_converter(d: Mapping[str, Any], node_id: str) -> ConverterNode:
    return ConverterNode(
        id=node_id,
        name=_name(d),
        vin_min=to_float(d.get(K.VIN_MIN), 0.0) or 0.0,
        vin_max=to_float(d.get(K.VIN_MAX), 0.0) or 0.0,
        vout=to_float(d.get(K.VOUT), 0.0) or 0.0,
        iout_max=to_float(d.get(K.IOUT_MAX)),
        pout_max=to_float(d.get(K.POUT_MAX)),
        efficiency=parse_efficiency(d.get(K.EFFICIENCY)),
        phase_count=to_count(d.get(K.PHASE_COUNT), 1),
    )


def _parse_dual(d: Mapping[str, Any], node_id: str) -> DualOutputConverterNode:
    outs_raw = d.get(K.OUTPUTS)
    outs_raw = outs_raw if isinstance(outs_raw, list) else []
    outputs: List[ConverterOutput] = []
    for i, o in enumerate(outs_raw):
        if not isinstance(o, Mapping):
            continue
        outputs.append(
            ConverterOutput(
                id=to_str(o.get(K.ID), f"out{i + 1}"),
                label=to_str(o.get(K.OUTPUT_LABEL)),
                vout=to_float(o.get(K.VOUT), 0.0) or 0.0,
                iout_max=to_float(o.get(K.IOUT_MAX)),
                pout_max=to_float(o.get(K.POUT_MAX)),
                efficiency=parse_efficiency(o.get(K.EFFICIENCY)),
                phase_count=to_count(o.get(K.PHASE_COUNT), 1),
            )
        )
    return DualOutputConverterNode(
        id=node_id,
        name=_name(d),
        vin_min=to_float(d.get(K.VIN_MIN), 0.0) or 0.0,
        vin_max=to_float(d.get(K.VIN_MAX), 0.0) or 0.0,
        outputs=tuple(outputs),
    )


def _parse_load(d: Mapping[str, Any], node_id: str) -> LoadNode:
    return LoadNode(
        id=node_id,
        name=_name(d),
        vreq=to_float(d.get(K.VREQ), 0.0) or 0.0,
        i_typ=to_float(d.get(K.I_TYP), 0.0) or 0.0,
        i_max=to_float(d.get(K.I_MAX), 0.0) or 0.0,
        i_idle=to_float(d.get(K.I_IDLE)),
        num_paralleled_devices=to_count(d.get(K.NUM_PARALLEL_DEVICES), 1),
        critical=to_bool(d.get(K.CRITICAL), True),
        utilization_typ=to_pct(d.get(K.UTIL_TYP), 100.0),
        utilization_max=to_pct(d.get(K.UTIL_MAX), 100.0),
    )


def _parse_bus(d: Mapping[str, Any], node_id: str) -> BusNode:
    return BusNode(
        id=node_id,
        name=_name(d),
        v_bus=to_float(d.get(K.V_BUS), 0.0) or 0.0,
        r_milliohm=max(0.0, to_float(d.get(K.R_MILLIOHM), 0.0) or 0.0),
    )


def _parse_subsystem(d: Mapping[str, Any], node_id: str) -> SubsystemNode:
    nested_raw = d.get(K.PROJECT)
    nested = parse_project(nested_raw) if isinstance(nested_raw, Mapping) else None
    order_raw = d.get(K.INPUT_HANDLE_ORDER)
    order = tuple(to_str(x) for x in order_raw) if isinstance(order_raw, list) else ()
    return SubsystemNode(
        id=node_id,
        name=_name(d),
        project=nested,
        num_paralleled_systems=to_count(d.get(K.NUM_PARALLEL_SYSTEMS), 1),
        input_handle_order=order,
    )


def _parse_subsystem_input(d: Mapping[str, Any], node_id: str) -> SubsystemInputNode:
    return SubsystemInputNode(id=node_id, name=_name(d), vout=to_float(d.get(K.VOUT), 0.0) or 0.0)


def _parse_note(d: Mapping[str, Any], node_id: str) -> NoteNode:
    return NoteNode(id=node_id, text=to_str(d.get(K.TEXT)))


_NODE_PARSERS: Dict[NodeKind, Callable[[Mapping[str, Any], str], Node]] = {
    NodeKind.SOURCE: _parse_source,
    NodeKind.CONVERTER: _parse_converter,
    NodeKind.DUAL_OUTPUT_CONVERTER: _parse_dual,
    NodeKind.LOAD: _parse_load,
    NodeKind.BUS: _parse_bus,
    NodeKind.SUBSYSTEM: _parse_subsystem,
    NodeKind.SUBSYSTEM_INPUT: _parse_subsystem_input,
    NodeKind.NOTE: _parse_note,
}


def parse_node(data: Mapping[str, Any]) -> Optional[Node]:
    """Parse one node dict; ``None`` for unknown node types."""
    typ = to_str(data.get(K.TYPE))
    try:
        kind = NodeKind(typ)
    except ValueError:
        return None
    return _NODE_PARSERS[kind](data, to_str(data.get(K.ID)))


def _unique_id(base: str, taken: Set[str]) -> str:
    candidate = base
    n = 1
    while candidate in taken:
        n += 1
        candidate = f"{base}-{n}"
    return candidate


def parse_project(data: Mapping[str, Any]) -> Project:
    """Build a Project from an editing-layer snapshot.

    Never raises for bad field values: missing lists become empty, unknown
    node types are skipped and every repair is recorded in ``Project.issues``.
    """
    issues: List[Issue] = []

    nodes_raw = data.get(K.NODES)
    if not isinstance(nodes_raw, list):
        nodes_raw = []
        issues.append(Issue(C.NODES_MISSING, "Project nodes were missing; using an empty node list."))
    edges_raw = data.get(K.EDGES)
    if not isinstance(edges_raw, list):
        edges_raw = []
        issues.append(Issue(C.EDGES_MISSING, "Project interconnects were missing; using an empty edge list."))

    nodes: List[Node] = []
    seen: Set[str] = set()
    for raw in nodes_raw:
        if not isinstance(raw, Mapping):
            issues.append(Issue(C.UNKNOWN_NODE_TYPE, "Skipped a node entry that is not an object."))
            continue
        node = parse_node(raw)
        if node is None:
            typ = to_str(raw.get(K.TYPE), "?")
            issues.append(
                Issue(C.UNKNOWN_NODE_TYPE, f"Unknown node type '{typ}' skipped.", context=to_str(raw.get(K.ID)) or None)
            )
            continue
        if node.id in seen:
            issues.append(
                Issue(C.DUPLICATE_NODE_ID, f"Duplicate node id '{node.id}'; keeping the first.", Severity.ERROR, node.id)
            )
            continue
        seen.add(node.id)
        nodes.append(node)

    edges: List[Edge] = []
    explicit = {to_str(e.get(K.ID)) for e in edges_raw if isinstance(e, Mapping)} - {""}
    edge_ids: Set[str] = set()
    for i, raw in enumerate(edges_raw):
        if not isinstance(raw, Mapping):
            continue
        edge = Edge.from_dict(raw, i)
        if not to_str(raw.get(K.ID)):
            edge = replace(edge, id=_unique_id(edge.id, explicit | edge_ids))
        if edge.id in edge_ids:
            issues.append(
                Issue(C.DUPLICATE_EDGE_ID, f"Duplicate interconnect id '{edge.id}'; keeping the first.", Severity.ERROR, edge.id)
            )
            continue
        edge_ids.add(edge.id)
        edges.append(edge)

    scen_raw = data.get(K.SCENARIOS)
    scenarios = tuple(parse_scenario(s) for s in scen_raw) if isinstance(scen_raw, list) and scen_raw else tuple(Scenario)
    units_raw = data.get(K.UNITS)
    units = tuple((str(k), str(v)) for k, v in units_raw.items()) if isinstance(units_raw, Mapping) else ()

    if issues:
        log.debug("parse_project repaired %d issue(s)", len(issues))

    return Project(
        nodes=tuple(nodes),
        edges=tuple(edges),
        current_scenario=parse_scenario(data.get(K.CURRENT_SCENARIO)),
        scenarios=scenarios,
        units=units,
        default_margins=Margins.from_dict(data.get(K.DEFAULT_MARGINS)),
        name=to_str(data.get(K.NAME)),
        issues=tuple(issues),
    )
