"""PowerTree power-flow engine package entry.

This lightweight package exposes the engine operations while keeping the
existing top-level packages (core/, domain/, services/, infra/) intact.
Module-level helpers use the default EngineSettings; build a
``PowerFlowEngine`` directly for custom settings.
"""

from __future__ import annotations

from typing import Any, List, Optional

from core.calculations.deep_aggregates import deep_aggregates
from core.models.results import ComputeResult, DeepAggregates
from core.types import Issue
from core.validators.project import lint_project as _lint_project
from domain.efficiency import OperatingPoint
from domain.models.project import Project, parse_project
from powertree.version import __version__  # single source of truth
from services.power_engine import PowerFlowEngine, ProjectLike, coerce_project
from services.report_data import build_converter_summary, build_level_breakdown

_ENGINE = PowerFlowEngine()


def compute(project: ProjectLike) -> ComputeResult:
    return _ENGINE.compute(project)


def compute_deep_aggregates(project: ProjectLike) -> DeepAggregates:
    return _ENGINE.compute_deep_aggregates(project)


def resolve_efficiency(model: Any, op: Optional[OperatingPoint] = None) -> float:
    return _ENGINE.resolve_efficiency(model, op or OperatingPoint())


def lint_project(project: ProjectLike) -> List[Issue]:
    return _lint_project(coerce_project(project))


__all__ = [
    "__version__",
    "ComputeResult",
    "DeepAggregates",
    "OperatingPoint",
    "PowerFlowEngine",
    "Project",
    "build_converter_summary",
    "build_level_breakdown",
    "compute",
    "compute_deep_aggregates",
    "deep_aggregates",
    "lint_project",
    "parse_project",
    "resolve_efficiency",
]
