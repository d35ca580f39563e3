# -*- coding: utf-8 -*-
from core.keys import IssueCodes as C
from powertree import compute


def _codes(node_result):
    return {w.code for w in node_result.warnings}


def _src_load(source, amps):
    return {
        "nodes": [
            dict({"id": "src", "type": "Source", "Vout": 12}, **source),
            {"id": "load", "type": "Load", "Vreq": 12, "I_typ": amps, "I_max": amps},
        ],
        "edges": [{"id": "e1", "from": "src", "to": "load"}],
    }


def test_source_overcurrent_uses_margin():
    # 10 A limit with 10 % margin -> warn above 9 A
    assert C.SOURCE_OVERCURRENT not in _codes(compute(_src_load({"I_max": 10}, 8.9)).nodes["src"])
    assert C.SOURCE_OVERCURRENT in _codes(compute(_src_load({"I_max": 10}, 9.5)).nodes["src"])


def test_source_overpower():
    res = compute(_src_load({"P_max": 100}, 8))
    assert C.SOURCE_OVERPOWER in _codes(res.nodes["src"])


def test_source_redundancy_shortfall():
    ok = compute(_src_load({"P_max": 200, "count": 2, "redundancy": "N+1"}, 5))
    assert C.SOURCE_REDUNDANCY not in _codes(ok.nodes["src"])
    short = compute(_src_load({"P_max": 50, "count": 2, "redundancy": "N+1"}, 5))
    assert C.SOURCE_REDUNDANCY in _codes(short.nodes["src"])


def test_converter_output_limits():
    proj = {
        "nodes": [
            {"id": "src", "type": "Source", "Vout": 12},
            {
                "id": "conv",
                "type": "Converter",
                "Vin_min": 9,
                "Vin_max": 14,
                "Vout": 5,
                "Iout_max": 2,
                "Pout_max": 10,
                "efficiency": {"type": "fixed", "value": 0.9},
            },
            {"id": "load", "type": "Load", "Vreq": 5, "I_typ": 2, "I_max": 2},
        ],
        "edges": [
            {"id": "e1", "from": "src", "to": "conv"},
            {"id": "e2", "from": "conv", "to": "load"},
        ],
    }
    codes = _codes(compute(proj).nodes["conv"])
    assert C.CONVERTER_OVERCURRENT in codes
    assert C.CONVERTER_OVERPOWER in codes


def test_dual_branch_limit_names_the_branch():
    proj = {
        "nodes": [
            {"id": "src", "type": "Source", "Vout": 48},
            {
                "id": "dual",
                "type": "DualOutputConverter",
                "Vin_min": 40,
                "Vin_max": 60,
                "outputs": [{"id": "outA", "label": "Rail A", "Vout": 12, "Iout_max": 1, "efficiency": {"type": "fixed", "value": 0.9}}],
            },
            {"id": "la", "type": "Load", "Vreq": 12, "I_typ": 1, "I_max": 1},
        ],
        "edges": [
            {"id": "e0", "from": "src", "to": "dual"},
            {"id": "ea", "from": "dual", "to": "la", "fromHandle": "outA"},
        ],
    }
    warns = compute(proj).nodes["dual"].warnings
    assert any(w.code == C.CONVERTER_OVERCURRENT and w.message.startswith("Rail A:") for w in warns)


def test_load_voltage_mismatch():
    proj = {
        "nodes": [
            {"id": "src", "type": "Source", "Vout": 5},
            {"id": "load", "type": "Load", "Vreq": 3.3, "I_typ": 1, "I_max": 1},
        ],
        "edges": [{"id": "e1", "from": "src", "to": "load"}],
    }
    res = compute(proj)
    assert C.VIN_NE_VOUT in _codes(res.nodes["load"])
    assert any(w.code == C.VIN_NE_VOUT for w in res.edges["e1"].warnings)
