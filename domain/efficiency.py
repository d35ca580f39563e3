# -*- coding: utf-8 -*-
"""
domain/efficiency.py

Efficiency resolution for converters and converter branches.

- Fixed: the declared value.
- 1-D curve: linear interpolation on output current (or % of the rating
  when the curve is expressed in load percent), boundary value held
  outside the sampled range.
- 2-D table: per voltage row along current (undefined cells skipped),
  then along output voltage with clamping to the outer rows.

Malformed models never raise; they resolve to the default efficiency
and flag the fallback so the caller can warn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from core.kinds import EfficiencyKind
from domain.models.efficiency import BASE_POUT_MAX, CurveEfficiency, EfficiencyModel, FixedEfficiency, TableEfficiency

log = logging.getLogger(__name__)

DEFAULT_EFFICIENCY = 0.9


@dataclass(frozen=True)
class OperatingPoint:
    p_out: float = 0.0
    i_out: float = 0.0
    vout: float = 0.0
    phase_count: int = 1
    iout_max: Optional[float] = None
    pout_max: Optional[float] = None


@dataclass(frozen=True)
class EfficiencyResolution:
    eta: float
    fallback: bool = False
    reason: str = ""


def clamp_eta(eta: float) -> float:
    return min(1.0, max(0.0, float(eta)))


def interpolate(points: Sequence[Tuple[float, float]], x: float) -> Optional[float]:
    """Piecewise-linear y(x) over (x, y) samples; holds the boundary value outside the range."""
    pts = sorted(points, key=lambda p: p[0])
    if not pts:
        return None
    if x <= pts[0][0]:
        return pts[0][1]
    if x >= pts[-1][0]:
        return pts[-1][1]
    for (x0, y0), (x1, y1) in zip(pts, pts[1:]):
        if x0 <= x <= x1:
            if x1 == x0:
                return y1
            return y0 + (y1 - y0) * (x - x0) / (x1 - x0)
    return pts[-1][1]


def _phases(per_phase: bool, op: OperatingPoint) -> int:
    return max(1, int(op.phase_count or 1)) if per_phase else 1


def _resolve_fixed(model: FixedEfficiency, op: OperatingPoint, default: float) -> EfficiencyResolution:
    return EfficiencyResolution(clamp_eta(model.value))


def _resolve_curve(model: CurveEfficiency, op: OperatingPoint, default: float) -> EfficiencyResolution:
    if not model.points:
        return EfficiencyResolution(default, True, "efficiency curve has no points")

    div = _phases(model.per_phase, op)

    if not model.uses_load_pct:
        pts = [(float(p.current), p.eta) for p in model.points]
        return EfficiencyResolution(clamp_eta(interpolate(pts, op.i_out / div)))

    # Load-percent curves are relative to the (per-phase) rating.
    rating = op.pout_max if model.base == BASE_POUT_MAX else op.iout_max
    if rating is None or rating <= 0:
        return EfficiencyResolution(default, True, f"load-percent curve needs a positive {model.base}")
    rating = rating / div
    pts = []
    for p in model.points:
        if p.load_pct is not None:
            pct = p.load_pct
        else:
            pct = float(p.current) / rating * 100.0
        pts.append((min(100.0, max(0.0, pct)), p.eta))
    actual = (op.p_out if model.base == BASE_POUT_MAX else op.i_out) / div
    pct_now = min(100.0, max(0.0, actual / rating * 100.0))
    return EfficiencyResolution(clamp_eta(interpolate(pts, pct_now)))


def _resolve_table(model: TableEfficiency, op: OperatingPoint, default: float) -> EfficiencyResolution:
    current = op.i_out / _phases(model.per_phase, op)
    per_row: List[Tuple[float, float]] = []
    for idx, v in enumerate(model.output_voltages):
        cells = model.row(idx)
        eta = interpolate(cells, current)
        if eta is not None:
            per_row.append((v, eta))
    if not per_row:
        return EfficiencyResolution(default, True, "efficiency table has no defined cells")
    if len(per_row) == 1:
        return EfficiencyResolution(clamp_eta(per_row[0][1]))
    return EfficiencyResolution(clamp_eta(interpolate(per_row, op.vout)))


_RESOLVERS: Dict[EfficiencyKind, Callable[..., EfficiencyResolution]] = {
    EfficiencyKind.FIXED: _resolve_fixed,
    EfficiencyKind.CURVE_1D: _resolve_curve,
    EfficiencyKind.CURVE_2D: _resolve_table,
}


def resolve_efficiency_detail(
    model: Optional[EfficiencyModel],
    op: OperatingPoint,
    *,
    default: float = DEFAULT_EFFICIENCY,
) -> EfficiencyResolution:
    default = clamp_eta(default)
    if model is None:
        return EfficiencyResolution(default, True, "efficiency model missing")
    res = _RESOLVERS[model.kind](model, op, default)
    if res.fallback:
        log.debug("efficiency fallback to %.3f: %s", default, res.reason)
    return res


def resolve_efficiency(model: Optional[EfficiencyModel], op: OperatingPoint, *, default: float = DEFAULT_EFFICIENCY) -> float:
    """Efficiency in [0, 1] for ``model`` at ``op``."""
    return resolve_efficiency_detail(model, op, default=default).eta
