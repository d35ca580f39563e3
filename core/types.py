# -*- coding: utf-8 -*-
"""Shared diagnostic types (pure, test-friendly)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Issue:
    code: str
    message: str
    severity: Severity = Severity.WARNING
    context: Optional[str] = None

    def with_context(self, context: Optional[str]) -> "Issue":
        return Issue(code=self.code, message=self.message, severity=self.severity, context=context)

    @property
    def is_fatal(self) -> bool:
        return self.severity == Severity.ERROR


def issue_to_dict(it: Issue) -> dict:
    """Flatten an Issue for report tables (level names match the editor badges)."""
    sev = str(it.severity.value if hasattr(it.severity, "value") else it.severity)
    level = {
        "info": "info",
        "warning": "warn",
        "error": "error",
    }.get(sev, "warn")
    return {
        "code": it.code,
        "msg": it.message,
        "level": level,
        "context": it.context,
    }
