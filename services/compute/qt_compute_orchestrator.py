# -*- coding: utf-8 -*-
"""Qt-backed compute orchestrator (debounced, synchronous on the Qt thread).

The editor calls ``submit(project)`` on every edit; after the debounce
interval the newest snapshot is evaluated and ``computed`` is emitted.
Unreadable snapshots are reported through ``failed``.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from core.models.results import ComputeResult
from services.compute.orchestrator_core import ComputeOrchestratorCore
from services.errors import ProjectFormatError
from services.power_engine import PowerFlowEngine

log = logging.getLogger(__name__)


class QtComputeOrchestrator(QObject):
    computed = pyqtSignal(object)  # ComputeResult
    failed = pyqtSignal(object)  # exception

    def __init__(self, engine: Optional[PowerFlowEngine] = None, *, debounce_ms: int = 200, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._engine = engine or PowerFlowEngine()
        self._core = ComputeOrchestratorCore(debounce_ms=debounce_ms)
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(int(debounce_ms))
        self._timer.timeout.connect(self._on_timeout)
        self._computing = False
        self._last_result: Optional[ComputeResult] = None

    @property
    def last_result(self) -> Optional[ComputeResult]:
        return self._last_result

    def is_pending(self) -> bool:
        return self._core.has_pending()

    def submit(self, project: Any) -> int:
        revision = self._core.submit(project)
        self._schedule()
        return revision

    def _schedule(self) -> None:
        self._timer.start()

    def force_compute(self, project: Any = None, reason: str = "manual") -> None:
        if project is not None:
            self._core.submit(project)
        self._timer.stop()
        self._run_compute(reason=reason)

    def _on_timeout(self) -> None:
        self._run_compute(reason="auto")

    def _run_compute(self, *, reason: str = "auto") -> None:
        # re-entrant call from a computed/failed slot; the pending snapshot is rescheduled below
        if self._computing:
            return
        popped = self._core.pop_pending()
        if popped is None:
            return
        revision, snapshot = popped
        self._computing = True
        try:
            log.debug("compute start rev=%s reason=%s", revision, reason)
            try:
                result = self._engine.compute(snapshot)
            except ProjectFormatError as exc:
                log.error("compute rejected rev=%s: %s", revision, exc)
                self.failed.emit(exc)
                return
            self._last_result = result
            self.computed.emit(result)
        finally:
            self._computing = False
            if self._core.has_pending():
                self._schedule()
