# -*- coding: utf-8 -*-
"""Efficiency model variants (fixed value, 1-D curve, 2-D table)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from core.keys import ProjectKeys as K
from core.kinds import EfficiencyKind
from domain.parse import to_bool, to_float, to_str

BASE_IOUT_MAX = "Iout_max"
BASE_POUT_MAX = "Pout_max"


@dataclass(frozen=True)
class FixedEfficiency:
    value: float
    per_phase: bool = False

    kind: ClassVar[EfficiencyKind] = EfficiencyKind.FIXED

    def to_dict(self) -> Dict[str, Any]:
        return {K.EFF_TYPE: "fixed", K.EFF_VALUE: float(self.value), K.EFF_PER_PHASE: self.per_phase}


@dataclass(frozen=True)
class CurvePoint:
    """One curve sample. Either an absolute ``current`` or a ``load_pct`` of the rating."""

    eta: float
    current: Optional[float] = None
    load_pct: Optional[float] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["CurvePoint"]:
        if not isinstance(data, Mapping):
            return None
        eta = to_float(data.get(K.POINT_ETA))
        if eta is None:
            return None
        current = to_float(data.get(K.POINT_CURRENT))
        load_pct = to_float(data.get("loadPct"))
        if current is None and load_pct is None:
            return None
        return cls(eta=eta, current=current, load_pct=load_pct)


@dataclass(frozen=True)
class CurveEfficiency:
    points: Tuple[CurvePoint, ...] = ()
    per_phase: bool = False
    base: str = BASE_IOUT_MAX

    kind: ClassVar[EfficiencyKind] = EfficiencyKind.CURVE_1D

    @property
    def uses_load_pct(self) -> bool:
        return any(p.current is None for p in self.points)

    def to_dict(self) -> Dict[str, Any]:
        pts: List[Dict[str, float]] = []
        for p in self.points:
            row: Dict[str, float] = {K.POINT_ETA: p.eta}
            if p.current is not None:
                row[K.POINT_CURRENT] = p.current
            if p.load_pct is not None:
                row["loadPct"] = p.load_pct
            pts.append(row)
        return {K.EFF_TYPE: "curve", "base": self.base, K.EFF_POINTS: pts, K.EFF_PER_PHASE: self.per_phase}


@dataclass(frozen=True)
class TableEfficiency:
    """eta[v][i] over output voltage rows and output current columns; ``None`` cells are undefined."""

    output_voltages: Tuple[float, ...] = ()
    output_currents: Tuple[float, ...] = ()
    values: Tuple[Tuple[Optional[float], ...], ...] = ()
    per_phase: bool = False

    kind: ClassVar[EfficiencyKind] = EfficiencyKind.CURVE_2D

    def row(self, idx: int) -> List[Tuple[float, float]]:
        """Defined (current, eta) cells of one voltage row."""
        if idx >= len(self.values):
            return []
        cells = self.values[idx]
        out = []
        for j, cur in enumerate(self.output_currents):
            if j < len(cells) and cells[j] is not None:
                out.append((cur, float(cells[j])))
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            K.EFF_TYPE: "curve",
            K.EFF_MODE: "2d",
            K.EFF_PER_PHASE: self.per_phase,
            K.EFF_TABLE: {
                K.TABLE_VOLTAGES: list(self.output_voltages),
                K.TABLE_CURRENTS: list(self.output_currents),
                K.TABLE_VALUES: [list(r) for r in self.values],
            },
        }


EfficiencyModel = Union[FixedEfficiency, CurveEfficiency, TableEfficiency]


def _parse_table(raw: Any, per_phase: bool) -> TableEfficiency:
    table = raw if isinstance(raw, Mapping) else {}
    volts_raw = table.get(K.TABLE_VOLTAGES)
    curs_raw = table.get(K.TABLE_CURRENTS)
    vals_raw = table.get(K.TABLE_VALUES)
    volts_raw = volts_raw if isinstance(volts_raw, list) else []
    curs_raw = curs_raw if isinstance(curs_raw, list) else []
    vals_raw = vals_raw if isinstance(vals_raw, list) else []

    # Axis entries that do not parse drop their whole row / column.
    col_idx = [j for j, c in enumerate(curs_raw) if to_float(c) is not None]
    currents = tuple(float(to_float(curs_raw[j])) for j in col_idx)

    voltages: List[float] = []
    rows: List[Tuple[Optional[float], ...]] = []
    for i, v in enumerate(volts_raw):
        vf = to_float(v)
        if vf is None:
            continue
        cells = vals_raw[i] if i < len(vals_raw) and isinstance(vals_raw[i], list) else []
        rows.append(tuple(to_float(cells[j]) if j < len(cells) else None for j in col_idx))
        voltages.append(vf)

    return TableEfficiency(
        output_voltages=tuple(voltages),
        output_currents=currents,
        values=tuple(rows),
        per_phase=per_phase,
    )


def parse_efficiency(raw: Any) -> Optional[EfficiencyModel]:
    """Build an efficiency model from its snapshot dict.

    A bare number is read as a fixed efficiency. Returns ``None`` when no
    model can be recognised; the resolver turns that into the default.
    """
    if not isinstance(raw, Mapping):
        value = to_float(raw)
        return FixedEfficiency(value=value) if value is not None else None

    per_phase = to_bool(raw.get(K.EFF_PER_PHASE), False)
    typ = to_str(raw.get(K.EFF_TYPE)).lower()

    if typ == "fixed":
        value = to_float(raw.get(K.EFF_VALUE))
        return FixedEfficiency(value=value, per_phase=per_phase) if value is not None else None

    if typ == "curve":
        mode = to_str(raw.get(K.EFF_MODE)).lower()
        if mode == "2d" or (K.EFF_TABLE in raw and K.EFF_POINTS not in raw):
            return _parse_table(raw.get(K.EFF_TABLE), per_phase)
        pts_raw = raw.get(K.EFF_POINTS)
        pts_raw = pts_raw if isinstance(pts_raw, list) else []
        points = tuple(p for p in (CurvePoint.from_dict(x) for x in pts_raw) if p is not None)
        base = BASE_POUT_MAX if to_str(raw.get("base")) == BASE_POUT_MAX else BASE_IOUT_MAX
        return CurveEfficiency(points=points, per_phase=per_phase, base=base)

    return None
