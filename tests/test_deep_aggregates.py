# -*- coding: utf-8 -*-
import pytest

from powertree import compute, compute_deep_aggregates


def _tree():
    inner = {
        "nodes": [
            {"id": "in", "type": "SubsystemInput", "Vout": 5},
            {"id": "aux", "type": "Load", "Vreq": 5, "I_typ": 0.4, "I_max": 0.4, "critical": False},
        ],
        "edges": [{"id": "ie", "from": "in", "to": "aux"}],
    }
    return {
        "nodes": [
            {"id": "src", "type": "Source", "Vout": 12},
            {"id": "conv", "type": "Converter", "Vin_min": 9, "Vin_max": 14, "Vout": 5, "efficiency": {"type": "fixed", "value": 0.9}},
            {"id": "cpu", "type": "Load", "Vreq": 5, "I_typ": 1, "I_max": 1},
            {"id": "sub", "type": "Subsystem", "numParalleledSystems": 2, "project": inner},
        ],
        "edges": [
            {"id": "e1", "from": "src", "to": "conv"},
            {"id": "e2", "from": "conv", "to": "cpu", "interconnect": {"R_milliohm": 100}},
            {"id": "e3", "from": "conv", "to": "sub", "toHandle": "in"},
        ],
    }


def test_deep_aggregates_scale_nested_levels():
    agg = compute_deep_aggregates(_tree())
    assert agg.critical_load_power == pytest.approx(5.0)
    assert agg.non_critical_load_power == pytest.approx(4.0)
    assert agg.total_load_power == pytest.approx(9.0)
    assert agg.edge_loss == pytest.approx(0.1)
    assert agg.converter_loss == pytest.approx(9.1 / 0.9 - 9.1)


def test_deep_aggregates_match_source_power():
    res = compute(_tree())
    agg = compute_deep_aggregates(_tree())
    supplied = res.totals.source_input
    assert supplied == pytest.approx(agg.total_load_power + agg.edge_loss + agg.converter_loss)


def test_to_dict_exposes_totals():
    d = compute_deep_aggregates(_tree()).to_dict()
    assert d["criticalLoadPower"] == pytest.approx(5.0)
    assert d["totalLoadPower"] == pytest.approx(9.0)
