# -*- coding: utf-8 -*-
"""PowerTree version single source of truth."""

from __future__ import annotations

__version__ = "0.1.0"
