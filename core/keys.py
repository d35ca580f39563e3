# -*- coding: utf-8 -*-
"""Single source of truth for project dict keys and diagnostic codes.

The keys are the field names used by the editing layer snapshot
(JSON-like dicts). Python attributes on the parsed dataclasses are
snake_case; only ``domain.models`` should read these raw keys.
"""

from __future__ import annotations


class ProjectKeys:
    # project
    NODES = "nodes"
    EDGES = "edges"
    CURRENT_SCENARIO = "currentScenario"
    SCENARIOS = "scenarios"
    UNITS = "units"
    DEFAULT_MARGINS = "defaultMargins"
    NAME = "name"

    # margins
    MARGIN_CURRENT_PCT = "currentPct"
    MARGIN_POWER_PCT = "powerPct"
    MARGIN_VOLTAGE_DROP_PCT = "voltageDropPct"
    MARGIN_VOLTAGE_MARGIN_PCT = "voltageMarginPct"

    # node (common)
    ID = "id"
    TYPE = "type"
    LABEL = "name"

    # source / converter outputs
    VOUT = "Vout"
    V_NOM = "V_nom"  # legacy source voltage
    I_MAX = "I_max"
    P_MAX = "P_max"
    COUNT = "count"
    REDUNDANCY = "redundancy"
    VIN_MIN = "Vin_min"
    VIN_MAX = "Vin_max"
    IOUT_MAX = "Iout_max"
    POUT_MAX = "Pout_max"
    EFFICIENCY = "efficiency"
    PHASE_COUNT = "phaseCount"
    OUTPUTS = "outputs"
    OUTPUT_LABEL = "label"

    # load
    VREQ = "Vreq"
    I_TYP = "I_typ"
    I_IDLE = "I_idle"
    NUM_PARALLEL_DEVICES = "numParalleledDevices"
    CRITICAL = "critical"
    UTIL_TYP = "Utilization_typ"
    UTIL_MAX = "Utilization_max"

    # bus
    V_BUS = "V_bus"
    R_MILLIOHM = "R_milliohm"

    # subsystem
    PROJECT = "project"
    NUM_PARALLEL_SYSTEMS = "numParalleledSystems"
    INPUT_HANDLE_ORDER = "inputHandleOrder"

    # note
    TEXT = "text"

    # edge
    FROM = "from"
    TO = "to"
    FROM_HANDLE = "fromHandle"
    TO_HANDLE = "toHandle"
    INTERCONNECT = "interconnect"

    # efficiency
    EFF_TYPE = "type"
    EFF_VALUE = "value"
    EFF_POINTS = "points"
    EFF_MODE = "mode"
    EFF_TABLE = "table"
    EFF_PER_PHASE = "perPhase"
    POINT_CURRENT = "current"
    POINT_ETA = "eta"
    TABLE_VOLTAGES = "outputVoltages"
    TABLE_CURRENTS = "outputCurrents"
    TABLE_VALUES = "values"


class Handles:
    OUTPUT = "output"
    INPUT = "input"


class IssueCodes:
    # structural
    CYCLE_DETECTED = "CYCLE_DETECTED"
    CYCLE_MEMBER = "CYCLE_MEMBER"
    DANGLING_EDGE = "DANGLING_EDGE"
    UNKNOWN_NODE_TYPE = "UNKNOWN_NODE_TYPE"
    DUPLICATE_NODE_ID = "DUPLICATE_NODE_ID"
    DUPLICATE_EDGE_ID = "DUPLICATE_EDGE_ID"
    NODES_MISSING = "NODES_MISSING"
    EDGES_MISSING = "EDGES_MISSING"
    OUTPUT_NOT_PROPAGATED = "OUTPUT_NOT_PROPAGATED"

    # compatibility
    VIN_DISAGREEMENT = "VIN_DISAGREEMENT"
    CONVERTER_VIN_RANGE = "CONVERTER_VIN_RANGE"
    VIN_NE_VOUT = "VIN_NE_VOUT"

    # model
    EFFICIENCY_FALLBACK = "EFFICIENCY_FALLBACK"
    EFFICIENCY_ZERO = "EFFICIENCY_ZERO"

    # limits
    SOURCE_OVERCURRENT = "SOURCE_OVERCURRENT"
    SOURCE_OVERPOWER = "SOURCE_OVERPOWER"
    SOURCE_REDUNDANCY = "SOURCE_REDUNDANCY"
    CONVERTER_OVERCURRENT = "CONVERTER_OVERCURRENT"
    CONVERTER_OVERPOWER = "CONVERTER_OVERPOWER"
    LOAD_VOLTAGE_MARGIN = "LOAD_VOLTAGE_MARGIN"
    EDGE_VOLTAGE_DROP = "EDGE_VOLTAGE_DROP"

    # subsystem / scale
    SUBSYSTEM_EMPTY = "SUBSYSTEM_EMPTY"
    SUBSYSTEM_DEPTH = "SUBSYSTEM_DEPTH"
    SUBSYSTEM_PORT_UNRESOLVED = "SUBSYSTEM_PORT_UNRESOLVED"

    # lint
    LINT_NO_NODES = "LINT_NO_NODES"
    LINT_MISSING_REF = "LINT_MISSING_REF"
    LINT_UNCONNECTED = "LINT_UNCONNECTED"
