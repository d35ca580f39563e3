# -*- coding: utf-8 -*-
import pytest

QtCore = pytest.importorskip("PyQt5.QtCore")

from services.compute.qt_compute_orchestrator import QtComputeOrchestrator  # noqa: E402
from services.errors import ProjectFormatError  # noqa: E402

_PROJECT = {
    "nodes": [
        {"id": "src", "type": "Source", "Vout": 5},
        {"id": "load", "type": "Load", "Vreq": 5, "I_typ": 2, "I_max": 2},
    ],
    "edges": [{"id": "e", "from": "src", "to": "load"}],
}


@pytest.fixture(scope="module")
def qapp():
    app = QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])
    yield app


def test_force_compute_emits_result(qapp):
    orch = QtComputeOrchestrator(debounce_ms=10)
    seen = []
    orch.computed.connect(seen.append)
    orch.force_compute(_PROJECT)
    assert len(seen) == 1
    assert seen[0].nodes["src"].p_out == 10.0
    assert orch.last_result is seen[0]
    assert orch.is_pending() is False


def test_unreadable_snapshot_is_reported(qapp):
    orch = QtComputeOrchestrator(debounce_ms=10)
    errors = []
    results = []
    orch.failed.connect(errors.append)
    orch.computed.connect(results.append)
    orch.force_compute(42)
    assert results == []
    assert len(errors) == 1 and isinstance(errors[0], ProjectFormatError)
    assert orch.last_result is None


def test_submit_is_debounced(qapp):
    orch = QtComputeOrchestrator(debounce_ms=10)
    seen = []
    orch.computed.connect(seen.append)
    orch.submit({"nodes": [], "edges": []})
    orch.submit(_PROJECT)
    assert seen == []
    assert orch.is_pending() is True
    orch.force_compute()
    assert len(seen) == 1
    assert seen[0].nodes["load"].p_out == 10.0


def test_submit_from_result_slot_is_rescheduled(qapp):
    orch = QtComputeOrchestrator(debounce_ms=10)
    seen = []

    def on_computed(result):
        seen.append(result)
        if len(seen) == 1:
            orch.submit(_PROJECT)

    orch.computed.connect(on_computed)
    orch.force_compute({"nodes": [], "edges": []})
    assert len(seen) == 1
    assert orch.is_pending() is True
    orch.force_compute()
    assert len(seen) == 2
    assert orch.is_pending() is False
