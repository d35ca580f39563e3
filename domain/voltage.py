# -*- coding: utf-8 -*-
"""
domain/voltage.py

Forward voltage pass over the topological order.

Sources and subsystem inputs provide their own voltage; every other node
reads the output voltage of whatever feeds it. The first resolvable
voltage wins; disagreeing feeds are reported but do not stop the pass.
Regulated outputs (converter, branch, bus) are ideal setpoints.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple

from core.keys import Handles
from core.keys import IssueCodes as C
from domain.graph import GraphIndex
from domain.models.nodes import (
    BusNode,
    ConverterNode,
    DualOutputConverterNode,
    LoadNode,
    Node,
    SourceNode,
    SubsystemInputNode,
    SubsystemNode,
)
from domain.models.project import Edge
from domain.warnings import WarningCollector

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class VoltageMap:
    upstream: Dict[str, Optional[float]] = field(default_factory=dict)
    outputs: Dict[Tuple[str, str], float] = field(default_factory=dict)
    port_voltages: Dict[str, Dict[str, float]] = field(default_factory=dict)

    def output(self, node_id: str, handle: str) -> Optional[float]:
        return self.outputs.get((node_id, handle))


def _fmt(v: float) -> str:
    return f"{v:.3f}V"


def _feed_voltages(graph: GraphIndex, edges: List[Edge], outputs: Mapping[Tuple[str, str], float]) -> List[Tuple[Edge, float]]:
    out = []
    for e in edges:
        v = outputs.get((e.from_id, graph.source_handles.get(e.id, Handles.OUTPUT)))
        if v is not None:
            out.append((e, v))
    return out


def _first_with_check(
    node_id: str,
    feeds: List[Tuple[Edge, float]],
    warnings: WarningCollector,
    tolerance: float,
) -> Optional[float]:
    if not feeds:
        return None
    first = feeds[0][1]
    if any(abs(v - first) > tolerance for _, v in feeds[1:]):
        seen = ", ".join(_fmt(v) for _, v in feeds)
        warnings.node(node_id, C.VIN_DISAGREEMENT, f"Multiple input voltages disagree ({seen}); using {_fmt(first)}.")
    return first


def _check_converter_range(node: Node, feeds, warnings: WarningCollector, tolerance: float) -> None:
    lo, hi = node.vin_min, node.vin_max
    for e, v in feeds:
        if v < lo - tolerance or v > hi + tolerance:
            warnings.edge_into_node(
                e.id,
                node.id,
                C.CONVERTER_VIN_RANGE,
                f"Converter Vin Range Violation: upstream {_fmt(v)} outside [{lo:.3f}, {hi:.3f}]V",
            )


def _check_equal(node_id: str, expected: float, what: str, feeds, warnings: WarningCollector, tolerance: float) -> None:
    for e, v in feeds:
        if abs(v - expected) > tolerance:
            warnings.edge_into_node(
                e.id,
                node_id,
                C.VIN_NE_VOUT,
                f"Vin != Vout: upstream {_fmt(v)} != {what} {_fmt(expected)}",
            )


def propagate_voltages(
    graph: GraphIndex,
    warnings: WarningCollector,
    *,
    injected: Optional[Mapping[str, float]] = None,
    tolerance: float = 1e-6,
) -> VoltageMap:
    """Resolve the input voltage of every node in ``graph.order`` and the voltage on every output handle."""
    injected = injected or {}
    upstream: Dict[str, Optional[float]] = {}
    outputs: Dict[Tuple[str, str], float] = {}
    port_voltages: Dict[str, Dict[str, float]] = {}

    for nid in graph.order:
        node = graph.nodes[nid]

        if isinstance(node, SourceNode):
            upstream[nid] = node.vout
            outputs[(nid, Handles.OUTPUT)] = node.vout
            continue

        if isinstance(node, SubsystemInputNode):
            v = injected.get(nid, node.vout)
            upstream[nid] = v
            outputs[(nid, Handles.OUTPUT)] = v
            continue

        if isinstance(node, SubsystemNode):
            ports: Dict[str, float] = {}
            first_external: Optional[float] = None
            for port in node.ports():
                feeds = _feed_voltages(graph, graph.incoming_to(nid, port.id), outputs)
                v = _first_with_check(nid, feeds, warnings, tolerance)
                _check_equal(nid, port.vout, f"subsystem port '{port.id}'", feeds, warnings, tolerance)
                if v is not None and first_external is None:
                    first_external = v
                ports[port.id] = v if v is not None else port.vout
            port_voltages[nid] = ports
            if first_external is None and len(ports) == 1:
                first_external = next(iter(ports.values()))
            upstream[nid] = first_external
            if len(ports) == 1:
                outputs[(nid, Handles.OUTPUT)] = next(iter(ports.values()))
            continue

        feeds = _feed_voltages(graph, graph.incoming_to(nid), outputs)
        upstream[nid] = _first_with_check(nid, feeds, warnings, tolerance)

        if isinstance(node, (ConverterNode, DualOutputConverterNode)):
            _check_converter_range(node, feeds, warnings, tolerance)
        elif isinstance(node, LoadNode):
            _check_equal(nid, node.vreq, "load Vreq", feeds, warnings, tolerance)
        elif isinstance(node, BusNode):
            _check_equal(nid, node.v_bus, "bus V_bus", feeds, warnings, tolerance)

        if isinstance(node, ConverterNode):
            outputs[(nid, Handles.OUTPUT)] = node.vout
        elif isinstance(node, DualOutputConverterNode):
            for branch in node.outputs:
                outputs[(nid, branch.id)] = branch.vout
        elif isinstance(node, BusNode):
            outputs[(nid, Handles.OUTPUT)] = node.v_bus

    return VoltageMap(upstream=upstream, outputs=outputs, port_voltages=port_voltages)
