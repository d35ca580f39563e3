# -*- coding: utf-8 -*-
"""
domain/parse.py

Tolerant parsing helpers for the editing-layer snapshot.
Goals:
- One place for safe_float-style coercion instead of ad-hoc float() calls.
- Never raise on a bad cell: callers get ``default`` back.
- Reject values that would poison the arithmetic (bool, NaN, inf).
"""

from __future__ import annotations

import math
from typing import Any, Optional


_DASH_TOKENS = {"—", "–", "-", "--", "---"}
_TRUE_TOKENS = {"1", "true", "yes", "on", "y"}
_FALSE_TOKENS = {"0", "false", "no", "off", "n"}


def is_blank(val: Any, allow_dash: bool = True) -> bool:
    """True if the value should be treated as empty."""
    if val is None:
        return True

    # bool is a subclass of int; it is NOT blank here.
    if isinstance(val, (int, float)):
        return False

    s = str(val).strip()
    if s == "":
        return True

    if allow_dash and (s in _DASH_TOKENS or all(ch in "—–-" for ch in s)):
        return True

    return False


def to_float(val: Any, default: Optional[float] = None, allow_dash: bool = True) -> Optional[float]:
    """
    Tolerant float conversion.
    - Accepts a decimal comma ("4,5").
    - Handles thousands separators ("1.234,56" or "1,234.56").
    - Blank, bool and non-finite values -> default.
    """
    if is_blank(val, allow_dash=allow_dash):
        return default

    if isinstance(val, bool):
        return default

    if isinstance(val, (int, float)):
        f = float(val)
        return f if math.isfinite(f) else default

    s = str(val).strip().replace(" ", "")

    if "," in s and "." in s:
        # The decimal separator is usually the last one.
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    else:
        s = s.replace(",", ".")

    try:
        f = float(s)
    except ValueError:
        return default
    return f if math.isfinite(f) else default


def to_count(val: Any, default: int = 1) -> int:
    """Parallel multipliers are positive integers; anything else -> default."""
    f = to_float(val, None)
    if f is None:
        return int(default)
    n = int(round(f))
    return n if n >= 1 else int(default)


def to_pct(val: Any, default: float = 100.0) -> float:
    f = to_float(val, None)
    if f is None:
        return float(default)
    return min(100.0, max(0.0, f))


def to_bool(val: Any, default: bool = False) -> bool:
    if isinstance(val, bool):
        return val
    if val is None:
        return default
    if isinstance(val, (int, float)):
        return bool(val)
    s = str(val).strip().lower()
    if s in _TRUE_TOKENS:
        return True
    if s in _FALSE_TOKENS:
        return False
    return default


def to_str(val: Any, default: str = "") -> str:
    if val is None:
        return default
    s = str(val).strip()
    return s or default


def to_opt_str(val: Any) -> Optional[str]:
    s = to_str(val, "")
    return s or None
