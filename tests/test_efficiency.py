# -*- coding: utf-8 -*-
import pytest

from domain.efficiency import OperatingPoint, interpolate, resolve_efficiency, resolve_efficiency_detail
from domain.models.efficiency import parse_efficiency


def _table(volts, currents, values, per_phase=False):
    return parse_efficiency(
        {
            "type": "curve",
            "mode": "2d",
            "perPhase": per_phase,
            "table": {"outputVoltages": volts, "outputCurrents": currents, "values": values},
        }
    )


BASIC_TABLE = ([1, 2], [0, 10], [[0.8, 0.9], [0.82, 0.94]])


def test_fixed_value_is_returned_and_clamped():
    assert resolve_efficiency(parse_efficiency({"type": "fixed", "value": 0.87}), OperatingPoint()) == 0.87
    assert resolve_efficiency(parse_efficiency({"type": "fixed", "value": 1.4}), OperatingPoint()) == 1.0
    assert resolve_efficiency(parse_efficiency({"type": "fixed", "value": -0.3}), OperatingPoint()) == 0.0


def test_curve_exact_at_points_and_linear_between():
    model = parse_efficiency({"type": "curve", "points": [{"current": 10, "eta": 0.9}, {"current": 0, "eta": 0.8}]})
    assert resolve_efficiency(model, OperatingPoint(i_out=0)) == pytest.approx(0.8)
    assert resolve_efficiency(model, OperatingPoint(i_out=10)) == pytest.approx(0.9)
    assert resolve_efficiency(model, OperatingPoint(i_out=2.5)) == pytest.approx(0.825)


def test_curve_holds_boundary_values():
    model = parse_efficiency({"type": "curve", "points": [{"current": 1, "eta": 0.7}, {"current": 5, "eta": 0.95}]})
    assert resolve_efficiency(model, OperatingPoint(i_out=0.1)) == pytest.approx(0.7)
    assert resolve_efficiency(model, OperatingPoint(i_out=50)) == pytest.approx(0.95)


def test_per_phase_curve_divides_current_by_phase_count():
    model = parse_efficiency(
        {
            "type": "curve",
            "perPhase": True,
            "points": [{"current": 0, "eta": 0.88}, {"current": 20, "eta": 0.93}, {"current": 40, "eta": 0.96}],
        }
    )
    eta = resolve_efficiency(model, OperatingPoint(i_out=90, phase_count=3))
    assert eta == pytest.approx(0.945, abs=1e-3)


def test_curve_without_per_phase_uses_total_current():
    model = parse_efficiency(
        {"type": "curve", "points": [{"current": 0, "eta": 0.9}, {"current": 60, "eta": 0.95}, {"current": 120, "eta": 0.97}]}
    )
    assert resolve_efficiency(model, OperatingPoint(i_out=90, phase_count=3)) == pytest.approx(0.96, abs=1e-3)


def test_load_percent_curve_against_output_power_rating():
    model = parse_efficiency(
        {
            "type": "curve",
            "base": "Pout_max",
            "perPhase": True,
            "points": [{"loadPct": 50, "eta": 0.94}, {"loadPct": 100, "eta": 0.97}],
        }
    )
    eta = resolve_efficiency(model, OperatingPoint(p_out=1500, pout_max=2000, phase_count=2))
    assert eta == pytest.approx(0.955, abs=1e-3)


def test_load_percent_curve_without_rating_falls_back():
    model = parse_efficiency({"type": "curve", "points": [{"loadPct": 50, "eta": 0.94}]})
    res = resolve_efficiency_detail(model, OperatingPoint(i_out=1))
    assert res.fallback is True
    assert res.eta == pytest.approx(0.9)


def test_table_bilinear_interpolation():
    model = _table(*BASIC_TABLE)
    assert resolve_efficiency(model, OperatingPoint(i_out=5, vout=1.5)) == pytest.approx(0.865, abs=1e-3)


def test_table_exact_row_and_column():
    model = _table(*BASIC_TABLE)
    assert resolve_efficiency(model, OperatingPoint(i_out=5, vout=2)) == pytest.approx(0.88, abs=1e-3)
    assert resolve_efficiency(model, OperatingPoint(i_out=10, vout=1.5)) == pytest.approx(0.92, abs=1e-3)


def test_table_clamps_voltage_outside_range():
    model = _table(*BASIC_TABLE)
    assert resolve_efficiency(model, OperatingPoint(i_out=10, vout=0.5)) == pytest.approx(0.9, abs=1e-3)
    assert resolve_efficiency(model, OperatingPoint(i_out=10, vout=3)) == pytest.approx(0.94, abs=1e-3)


def test_table_clamps_current_outside_range():
    model = _table([1.2], [0, 10], [[0.81, 0.9]])
    assert resolve_efficiency(model, OperatingPoint(i_out=-5, vout=1.2)) == pytest.approx(0.81, abs=1e-3)
    assert resolve_efficiency(model, OperatingPoint(i_out=25, vout=1.2)) == pytest.approx(0.9, abs=1e-3)


def test_table_per_phase():
    model = _table([1.0], [0, 20, 40], [[0.88, 0.93, 0.96]], per_phase=True)
    assert resolve_efficiency(model, OperatingPoint(i_out=90, vout=1.0, phase_count=3)) == pytest.approx(0.945, abs=1e-3)


def test_table_skips_null_cells():
    model = _table([1.0, 1.8], [0, 10, 20], [[0.8, None, 0.9], [0.82, 0.9, None]])
    eta = resolve_efficiency(model, OperatingPoint(i_out=10, vout=1.8))
    assert eta == pytest.approx(0.9, abs=1e-3)


@pytest.mark.parametrize(
    "raw",
    [
        None,
        {"type": "curve", "points": []},
        {"type": "curve", "mode": "2d", "table": {"outputVoltages": [1], "outputCurrents": [0], "values": [[None]]}},
        {"type": "mystery"},
    ],
)
def test_malformed_models_use_default(raw):
    res = resolve_efficiency_detail(parse_efficiency(raw), OperatingPoint(i_out=1, vout=1))
    assert res.eta == pytest.approx(0.9)
    assert res.fallback is True


def test_interpolate_empty_is_none():
    assert interpolate([], 1.0) is None


def test_engine_resolves_raw_values_through_the_parser():
    from powertree import resolve_efficiency as resolve

    assert resolve(0.8) == pytest.approx(0.8)
    assert resolve("0,75") == pytest.approx(0.75)
    assert resolve("junk") == pytest.approx(0.9)
    assert resolve(["x"]) == pytest.approx(0.9)
    assert resolve(None) == pytest.approx(0.9)
    assert resolve({"type": "fixed", "value": 0.7}) == pytest.approx(0.7)
