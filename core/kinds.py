# -*- coding: utf-8 -*-
"""Closed variant tags (node kinds, scenarios, efficiency models)."""

from __future__ import annotations

from enum import Enum


class NodeKind(str, Enum):
    SOURCE = "Source"
    CONVERTER = "Converter"
    DUAL_OUTPUT_CONVERTER = "DualOutputConverter"
    LOAD = "Load"
    BUS = "Bus"
    SUBSYSTEM = "Subsystem"
    SUBSYSTEM_INPUT = "SubsystemInput"
    NOTE = "Note"


class Scenario(str, Enum):
    TYPICAL = "Typical"
    MAX = "Max"
    IDLE = "Idle"


class EfficiencyKind(str, Enum):
    FIXED = "fixed"
    CURVE_1D = "curve"
    CURVE_2D = "curve2d"


class Redundancy(str, Enum):
    N = "N"
    N_PLUS_1 = "N+1"


# Kinds whose losses are counted as conversion loss in aggregates.
CONVERSION_KINDS = frozenset({NodeKind.CONVERTER, NodeKind.DUAL_OUTPUT_CONVERTER, NodeKind.BUS})

# Kinds that originate power at their level.
SUPPLY_KINDS = frozenset({NodeKind.SOURCE, NodeKind.SUBSYSTEM_INPUT})
