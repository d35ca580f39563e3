# -*- coding: utf-8 -*-
"""Node variants of the power tree (one frozen dataclass per kind)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar, Iterable, List, Optional, Sequence, Tuple, Union

from core.kinds import NodeKind, Redundancy
from domain.models.efficiency import EfficiencyModel

if TYPE_CHECKING:  # pragma: no cover
    from domain.models.project import Project


@dataclass(frozen=True)
class SourceNode:
    id: str
    name: str = ""
    vout: float = 0.0
    i_max: Optional[float] = None
    p_max: Optional[float] = None
    count: int = 1
    redundancy: Redundancy = Redundancy.N

    kind: ClassVar[NodeKind] = NodeKind.SOURCE


@dataclass(frozen=True)
class ConverterNode:
    id: str
    name: str = ""
    vin_min: float = 0.0
    vin_max: float = 0.0
    vout: float = 0.0
    iout_max: Optional[float] = None
    pout_max: Optional[float] = None
    efficiency: Optional[EfficiencyModel] = None
    phase_count: int = 1

    kind: ClassVar[NodeKind] = NodeKind.CONVERTER

    @property
    def vin_mid(self) -> float:
        return (self.vin_min + self.vin_max) / 2.0


@dataclass(frozen=True)
class ConverterOutput:
    """One regulated branch of a dual-output converter."""

    id: str
    label: str = ""
    vout: float = 0.0
    iout_max: Optional[float] = None
    pout_max: Optional[float] = None
    efficiency: Optional[EfficiencyModel] = None
    phase_count: int = 1

    @property
    def display_name(self) -> str:
        return self.label or self.id


@dataclass(frozen=True)
class DualOutputConverterNode:
    id: str
    name: str = ""
    vin_min: float = 0.0
    vin_max: float = 0.0
    outputs: Tuple[ConverterOutput, ...] = ()

    kind: ClassVar[NodeKind] = NodeKind.DUAL_OUTPUT_CONVERTER

    @property
    def vin_mid(self) -> float:
        return (self.vin_min + self.vin_max) / 2.0

    def branch(self, handle: Optional[str]) -> Optional[ConverterOutput]:
        """Branch addressed by an edge handle; unknown or missing handles fall back to the first branch."""
        if not self.outputs:
            return None
        for out in self.outputs:
            if out.id == handle:
                return out
        return self.outputs[0]


@dataclass(frozen=True)
class LoadNode:
    id: str
    name: str = ""
    vreq: float = 0.0
    i_typ: float = 0.0
    i_max: float = 0.0
    i_idle: Optional[float] = None
    num_paralleled_devices: int = 1
    critical: bool = True
    utilization_typ: float = 100.0
    utilization_max: float = 100.0

    kind: ClassVar[NodeKind] = NodeKind.LOAD


@dataclass(frozen=True)
class BusNode:
    id: str
    name: str = ""
    v_bus: float = 0.0
    r_milliohm: float = 0.0

    kind: ClassVar[NodeKind] = NodeKind.BUS


@dataclass(frozen=True)
class SubsystemInputNode:
    id: str
    name: str = ""
    vout: float = 0.0

    kind: ClassVar[NodeKind] = NodeKind.SUBSYSTEM_INPUT


@dataclass(frozen=True)
class SubsystemNode:
    id: str
    name: str = ""
    project: Optional["Project"] = None
    num_paralleled_systems: int = 1
    input_handle_order: Tuple[str, ...] = ()

    kind: ClassVar[NodeKind] = NodeKind.SUBSYSTEM

    def ports(self) -> List[SubsystemInputNode]:
        """Nested SubsystemInput nodes in external handle order."""
        if self.project is None:
            return []
        inputs = [n for n in self.project.nodes if isinstance(n, SubsystemInputNode)]
        by_id = {n.id: n for n in inputs}
        order = sanitize_handle_order(self.input_handle_order, [n.id for n in inputs])
        return [by_id[i] for i in order]

    def port_ids(self) -> List[str]:
        return [p.id for p in self.ports()]


@dataclass(frozen=True)
class NoteNode:
    id: str
    text: str = ""

    kind: ClassVar[NodeKind] = NodeKind.NOTE


Node = Union[
    SourceNode,
    ConverterNode,
    DualOutputConverterNode,
    LoadNode,
    BusNode,
    SubsystemNode,
    SubsystemInputNode,
    NoteNode,
]


def sanitize_handle_order(stored: Iterable[str], port_ids: Sequence[str]) -> List[str]:
    """Keep the stored order of known ports, drop unknown/duplicate ids, append new ports."""
    known = set(port_ids)
    out: List[str] = []
    seen = set()
    for pid in stored or ():
        if pid in known and pid not in seen:
            out.append(pid)
            seen.add(pid)
    for pid in port_ids:
        if pid not in seen:
            out.append(pid)
            seen.add(pid)
    return out
