# -*- coding: utf-8 -*-

"""Pytest configuration.

The top-level packages (core, domain, services, infra) are plain folders
next to ``powertree``. For local testing we add the repository root to
sys.path so that imports like `from core...` work without installing.
"""

from __future__ import annotations

import os
import sys


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
