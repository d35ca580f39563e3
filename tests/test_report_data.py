# -*- coding: utf-8 -*-
import pytest

from core.models.report import LOSSES_SLICE_ID
from domain.models.project import parse_project
from powertree import compute
from services.report_data import build_converter_summary, build_level_breakdown


def _project():
    inner = {
        "nodes": [
            {"id": "in", "type": "SubsystemInput", "Vout": 12},
            {"id": "core", "type": "Converter", "name": "Core", "Vin_min": 9, "Vin_max": 14, "Vout": 3.3, "efficiency": {"type": "fixed", "value": 0.8}},
            {"id": "soc", "type": "Load", "Vreq": 3.3, "I_typ": 1, "I_max": 1},
        ],
        "edges": [
            {"id": "i1", "from": "in", "to": "core"},
            {"id": "i2", "from": "core", "to": "soc"},
        ],
    }
    return parse_project(
        {
            "nodes": [
                {"id": "src", "type": "Source", "Vout": 12},
                {"id": "io", "type": "Converter", "name": "IO", "Vin_min": 9, "Vin_max": 14, "Vout": 5, "efficiency": {"type": "fixed", "value": 0.9}},
                {"id": "fan", "type": "Load", "name": "Fan", "Vreq": 5, "I_typ": 1, "I_max": 1},
                {"id": "sub", "type": "Subsystem", "name": "Compute", "numParalleledSystems": 2, "project": inner},
            ],
            "edges": [
                {"id": "e1", "from": "src", "to": "io"},
                {"id": "e2", "from": "io", "to": "fan"},
                {"id": "e3", "from": "src", "to": "sub", "toHandle": "in"},
            ],
        }
    )


def test_converter_summary_scaled_and_sorted():
    proj = _project()
    rows = build_converter_summary(proj, compute(proj))
    assert [r.name for r in rows] == ["Core", "IO"]

    core = rows[0]
    assert core.multiplier == 2
    assert core.location == "Compute"
    assert core.key == "sub>core"
    assert core.p_out == pytest.approx(6.6)
    assert core.loss == pytest.approx(2 * (3.3 / 0.8 - 3.3))
    assert core.efficiency == pytest.approx(0.8)

    io = rows[1]
    assert io.location == "System"
    assert io.multiplier == 1
    assert io.p_out == pytest.approx(5.0)


def test_level_breakdown_slices():
    proj = _project()
    slices = build_level_breakdown(proj, compute(proj))
    assert [s.id for s in slices] == ["sub", "fan", LOSSES_SLICE_ID]
    assert slices[0].value == pytest.approx(2 * 3.3 / 0.8)
    assert slices[1].value == pytest.approx(5.0)
    assert slices[2].value == pytest.approx(5.0 / 0.9 - 5.0)
    assert slices[2].label == "Copper traces and power converters"


def test_level_breakdown_skips_zero_slices():
    proj = parse_project(
        {
            "nodes": [
                {"id": "src", "type": "Source", "Vout": 5},
                {"id": "off", "type": "Load", "Vreq": 5, "I_typ": 0, "I_max": 1},
            ],
            "edges": [{"id": "e", "from": "src", "to": "off"}],
        }
    )
    assert build_level_breakdown(proj, compute(proj)) == []
