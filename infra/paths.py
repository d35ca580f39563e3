# -*- coding: utf-8 -*-
"""
Centralized path resolver for per-user writable data (no admin required).
"""
from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "PowerTree"


def user_data_dir() -> Path:
    """
    Per-user writable directory. ``POWERTREE_HOME`` wins, then LOCALAPPDATA
    (non-roaming), APPDATA and finally the home folder.
    """
    override = os.getenv("POWERTREE_HOME")
    if override:
        return ensure_dir(Path(override))
    base = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA") or str(Path.home())
    return ensure_dir(Path(base) / APP_NAME)


def ensure_dir(p: Path) -> Path:
    p.mkdir(parents=True, exist_ok=True)
    return p


def logs_dir() -> Path:
    return ensure_dir(user_data_dir() / "logs")


def settings_file() -> Path:
    return user_data_dir() / "powertree_settings.json"
