# -*- coding: utf-8 -*-
"""services/power_engine.py

Single orchestration point of the power-flow computation.

- Callers (editor, reports, tests) go through this service, not through
  domain/ directly.
- No PyQt dependency, no I/O: a pure function of the project snapshot
  and the EngineSettings it was built with.

Pipeline per level: graph index -> forward voltages -> reverse demand
(recursing into subsystems) -> rating checks -> result assembly.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Mapping, Optional, Union

from core.calculations.deep_aggregates import deep_aggregates
from core.calculations.totals import compute_level_totals
from core.kinds import Scenario
from core.models.results import ComputeResult, DeepAggregates, EdgeResult, NodeResult
from domain.efficiency import OperatingPoint, resolve_efficiency_detail
from domain.graph import build_graph
from domain.interconnect import EdgeFlow
from domain.limits import check_limits
from domain.models.efficiency import CurveEfficiency, FixedEfficiency, TableEfficiency, parse_efficiency
from domain.models.nodes import SubsystemNode
from domain.models.project import Project, parse_project
from domain.power import PowerOptions, aggregate_power
from domain.subsystem import evaluate_subsystem
from domain.voltage import propagate_voltages
from domain.warnings import WarningCollector
from infra.perf import span
from infra.settings import EngineSettings
from services.errors import ProjectFormatError

log = logging.getLogger(__name__)

ProjectLike = Union[Project, Mapping[str, Any]]


def coerce_project(project: ProjectLike) -> Project:
    if isinstance(project, Project):
        return project
    if isinstance(project, Mapping):
        return parse_project(project)
    raise ProjectFormatError(project)


class PowerFlowEngine:
    """Power-flow evaluator.

    Every call produces a fresh ComputeResult; the engine keeps no state
    between calls besides its settings.
    """

    def __init__(self, settings: Optional[EngineSettings] = None) -> None:
        self.settings = settings or EngineSettings()

    def compute(self, project: ProjectLike) -> ComputeResult:
        proj = coerce_project(project)
        with span("power_engine.compute"):
            result = self._evaluate(proj, proj.current_scenario, {}, 0)
        log.debug(
            "compute: %d node(s), %d edge(s), %d warning(s), scenario=%s",
            len(result.nodes), len(result.edges), len(result.global_warnings), result.scenario.value,
        )
        return result

    def compute_deep_aggregates(self, project: ProjectLike) -> DeepAggregates:
        return deep_aggregates(self.compute(project))

    def resolve_efficiency(self, model: Any, op: OperatingPoint) -> float:
        """Efficiency at ``op``; anything that is not a parsed model goes through the snapshot parser first."""
        if not isinstance(model, (FixedEfficiency, CurveEfficiency, TableEfficiency)):
            model = parse_efficiency(model)
        return resolve_efficiency_detail(model, op, default=self.settings.default_efficiency).eta

    # ------------------------------------------------------------------ internals

    def _evaluate(self, project: Project, scenario: Scenario, injected: Mapping[str, float], depth: int) -> ComputeResult:
        s = self.settings
        warnings = WarningCollector()
        warnings.extend(project.issues)

        graph = build_graph(project, warnings)
        volts = propagate_voltages(graph, warnings, injected=injected, tolerance=s.voltage_tolerance)

        def _subsystem(node: SubsystemNode, port_voltages: Mapping[str, float]) -> NodeResult:
            return evaluate_subsystem(
                node,
                port_voltages,
                scenario=scenario,
                depth=depth,
                max_depth=s.max_subsystem_depth,
                evaluate=self._evaluate,
                warnings=warnings,
            )

        opts = PowerOptions(scenario=scenario, default_efficiency=s.default_efficiency, min_efficiency=s.min_efficiency)
        results, flows = aggregate_power(graph, volts, warnings, opts=opts, evaluate_subsystem=_subsystem)
        check_limits(graph, volts, results, flows, project.default_margins, warnings)

        nodes: Dict[str, NodeResult] = {}
        for nid in graph.nodes:
            if nid in results:
                nodes[nid] = replace(results[nid], warnings=warnings.node_warnings(nid))

        edges: Dict[str, EdgeResult] = {}
        for e in project.edges:
            f = flows.get(e.id) or EdgeFlow(r_ohm=e.interconnect.r_ohm)
            handle = graph.source_handles.get(e.id)
            edges[e.id] = EdgeResult(
                id=e.id,
                from_id=e.from_id,
                to_id=e.to_id,
                v_upstream=volts.output(e.from_id, handle) if handle is not None else None,
                i_edge=f.i_edge,
                p_edge=f.p_edge,
                r_ohm=f.r_ohm,
                v_drop=f.v_drop,
                loss=f.loss,
                warnings=warnings.edge_warnings(e.id),
            )

        return ComputeResult(
            nodes=nodes,
            edges=edges,
            totals=compute_level_totals(nodes.values(), edges.values()),
            global_warnings=warnings.global_warnings(),
            order=graph.order,
            scenario=scenario,
        )
