# -*- coding: utf-8 -*-
"""Lightweight performance instrumentation.

Enable by setting env var:
    POWERTREE_PERF=1

When enabled, timings are written to logger ``powertree.perf``.
Best-effort: a timing problem must never break a computation.
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager

PERF_LOGGER = "powertree.perf"

log = logging.getLogger(PERF_LOGGER)


def is_enabled() -> bool:
    return os.environ.get("POWERTREE_PERF", "").strip().lower() in ("1", "true", "yes", "on")


@contextmanager
def span(label: str, *, threshold_ms: float = 50.0):
    """Measure a block duration and log if above threshold.

    If POWERTREE_PERF is not enabled, this context manager is basically a no-op.
    """
    if not is_enabled():
        yield
        return
    t0 = time.perf_counter()
    try:
        yield
    finally:
        dt_ms = (time.perf_counter() - t0) * 1000.0
        if dt_ms >= float(threshold_ms or 0.0):
            log.info("PERF %s %.1fms", label, dt_ms)
