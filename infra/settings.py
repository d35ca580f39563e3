# -*- coding: utf-8 -*-
"""
Engine settings stored as JSON in the per-user data folder.

Only known keys are read; unknown keys are ignored and a corrupt file is
replaced by the defaults.
"""
from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from domain.parse import to_count, to_float
from infra.paths import settings_file

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineSettings:
    default_efficiency: float = 0.9
    voltage_tolerance: float = 1e-6
    max_subsystem_depth: int = 64
    min_efficiency: float = 1e-9

    @classmethod
    def from_dict(cls, data: Any) -> "EngineSettings":
        raw = data if isinstance(data, dict) else {}
        d = cls()
        eff = to_float(raw.get("default_efficiency"), d.default_efficiency)
        tol = to_float(raw.get("voltage_tolerance"), d.voltage_tolerance)
        min_eff = to_float(raw.get("min_efficiency"), d.min_efficiency)
        return cls(
            default_efficiency=min(1.0, max(0.0, eff)),
            voltage_tolerance=abs(tol),
            max_subsystem_depth=to_count(raw.get("max_subsystem_depth"), d.max_subsystem_depth),
            min_efficiency=min_eff if min_eff > 0 else d.min_efficiency,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


_KNOWN = {f.name for f in fields(EngineSettings)}


def load_settings(path: Optional[Path] = None) -> EngineSettings:
    path = path or settings_file()
    defaults = EngineSettings()
    if not path.exists():
        save_settings(defaults, path)
        return defaults

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        # Recover from corruption gracefully
        log.warning("Settings file %s is unreadable; restoring defaults.", path, exc_info=True)
        save_settings(defaults, path)
        return defaults

    if not isinstance(data, dict):
        log.warning("Settings file %s does not hold an object; restoring defaults.", path)
        save_settings(defaults, path)
        return defaults

    merged = defaults.to_dict()
    merged.update({k: v for k, v in data.items() if k in _KNOWN and v is not None})
    return EngineSettings.from_dict(merged)


def save_settings(settings: EngineSettings, path: Optional[Path] = None) -> None:
    path = path or settings_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(settings.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
