# -*- coding: utf-8 -*-
import pytest

from core.keys import IssueCodes as C
from domain.interconnect import compute_edge_flow, edge_loss
from domain.models.project import Edge, Interconnect
from powertree import compute


def _direct(r_milliohm):
    return {
        "nodes": [
            {"id": "src", "type": "Source", "Vout": 12},
            {"id": "load", "type": "Load", "Vreq": 12, "I_typ": 2, "I_max": 2},
        ],
        "edges": [{"id": "e1", "from": "src", "to": "load", "interconnect": {"R_milliohm": r_milliohm}}],
    }


def test_edge_loss_formula():
    assert edge_loss(2.0, 100) == pytest.approx(0.4)
    flow = compute_edge_flow(Edge(id="e", from_id="a", to_id="b", interconnect=Interconnect(250)), 2.0, 24.0)
    assert flow.v_drop == pytest.approx(0.5)
    assert flow.loss == pytest.approx(1.0)
    assert flow.p_upstream == pytest.approx(25.0)


def test_edge_loss_is_paid_by_upstream_node():
    res = compute(_direct(100))
    e = res.edges["e1"]
    assert e.i_edge == pytest.approx(2.0)
    assert e.loss == pytest.approx(0.4)
    assert e.v_drop == pytest.approx(0.2)
    assert e.v_upstream == pytest.approx(12.0)
    assert res.nodes["src"].p_out == pytest.approx(24.4)
    assert res.totals.edge_loss == pytest.approx(0.4)
    assert res.global_warnings == ()


def test_edge_loss_flows_through_converter_efficiency():
    proj = {
        "nodes": [
            {"id": "src", "type": "Source", "Vout": 12},
            {"id": "conv", "type": "Converter", "Vin_min": 9, "Vin_max": 14, "Vout": 5, "efficiency": {"type": "fixed", "value": 0.9}},
            {"id": "load", "type": "Load", "Vreq": 5, "I_typ": 2, "I_max": 2},
        ],
        "edges": [
            {"id": "e1", "from": "src", "to": "conv"},
            {"id": "e2", "from": "conv", "to": "load", "interconnect": {"R_milliohm": 50}},
        ],
    }
    conv = compute(proj).nodes["conv"]
    assert conv.p_out == pytest.approx(10.2)
    assert conv.p_in == pytest.approx(10.2 / 0.9)


def test_fan_in_edges_each_carry_full_demand():
    proj = {
        "nodes": [
            {"id": "a", "type": "Source", "Vout": 12},
            {"id": "b", "type": "Source", "Vout": 12},
            {"id": "load", "type": "Load", "Vreq": 12, "I_typ": 2, "I_max": 2},
        ],
        "edges": [
            {"id": "ea", "from": "a", "to": "load"},
            {"id": "eb", "from": "b", "to": "load"},
        ],
    }
    res = compute(proj)
    assert res.edges["ea"].i_edge == pytest.approx(2.0)
    assert res.edges["eb"].i_edge == pytest.approx(2.0)


def test_large_drop_triggers_edge_and_load_margin_warnings():
    res = compute(_direct(500))
    assert any(w.code == C.EDGE_VOLTAGE_DROP for w in res.edges["e1"].warnings)
    assert any(w.code == C.LOAD_VOLTAGE_MARGIN for w in res.nodes["load"].warnings)
