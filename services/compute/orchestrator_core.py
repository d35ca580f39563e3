# -*- coding: utf-8 -*-
"""Pure compute orchestrator core (no UI dependencies)."""
from __future__ import annotations

from typing import Any, Optional, Tuple
import time


class ComputeOrchestratorCore:
    """Debounced tracker of the latest project snapshot awaiting computation.

    Every edit replaces the pending snapshot; only the newest one is ever
    computed. Each submission gets a monotonically increasing revision.
    """

    def __init__(self, *, debounce_ms: int = 200) -> None:
        self._debounce_ms = int(debounce_ms)
        self._pending: Any = None
        self._has_pending = False
        self._revision = 0
        self._last_mark_ts: float = 0.0

    @property
    def revision(self) -> int:
        return self._revision

    def submit(self, snapshot: Any, *, now: Optional[float] = None) -> int:
        self._pending = snapshot
        self._has_pending = True
        self._revision += 1
        self._last_mark_ts = float(time.time() if now is None else now)
        return self._revision

    def should_run(self, *, now: Optional[float] = None) -> bool:
        if not self._has_pending:
            return False
        ts = float(time.time() if now is None else now)
        return (ts - self._last_mark_ts) * 1000.0 >= float(self._debounce_ms)

    def pop_pending(self) -> Optional[Tuple[int, Any]]:
        if not self._has_pending:
            return None
        snapshot = self._pending
        self._pending = None
        self._has_pending = False
        return self._revision, snapshot

    def has_pending(self) -> bool:
        return self._has_pending

