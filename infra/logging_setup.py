# -*- coding: utf-8 -*-
"""
Logging setup: the host application calls this once; the engine itself only logs.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from infra.paths import logs_dir
from infra.perf import PERF_LOGGER

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _has_file_handler(logger: logging.Logger, log_path: Path) -> bool:
    return any(
        isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", "") == str(log_path)
        for h in logger.handlers
    )


def init_logging(filename: str = "powertree.log", *, level: int = logging.INFO, directory: Optional[Path] = None) -> Path:
    log_path = (directory or logs_dir()) / filename
    root = logging.getLogger()
    # Don't add multiple handlers if init called twice
    if not _has_file_handler(root, log_path):
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setFormatter(logging.Formatter(_FORMAT))
        sh = logging.StreamHandler()
        sh.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(fh)
        root.addHandler(sh)
    root.setLevel(level)
    return log_path


def init_perf_logging(filename: str = "perf.log", *, directory: Optional[Path] = None) -> Path:
    """Attach a dedicated file handler for performance timings.

    Timings are emitted by infra.perf.span when POWERTREE_PERF=1.
    """
    log_path = (directory or logs_dir()) / filename
    logger = logging.getLogger(PERF_LOGGER)
    logger.setLevel(logging.INFO)
    if not _has_file_handler(logger, log_path):
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.INFO)
        fh.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(fh)
    return log_path
