# -*- coding: utf-8 -*-
"""
domain/graph.py

Graph index of one project level: node map, handle-keyed incoming and
outgoing edge lists and a source-to-load topological order (Kahn).

Nodes Kahn cannot emit sit on, or downstream of, a cycle. They are
reported in ``cyclic`` and left out of ``order``.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple

from core.keys import Handles
from core.keys import IssueCodes as C
from domain.models.nodes import DualOutputConverterNode, Node, NoteNode, SubsystemNode
from domain.models.project import Edge, Project
from domain.warnings import WarningCollector

log = logging.getLogger(__name__)

HandleMap = Dict[str, Dict[str, List[Edge]]]


@dataclass(frozen=True)
class GraphIndex:
    nodes: Dict[str, Node]
    edges: Tuple[Edge, ...]
    incoming: HandleMap
    outgoing: HandleMap
    order: Tuple[str, ...]
    cyclic: FrozenSet[str] = frozenset()
    dangling: Tuple[Edge, ...] = ()
    unresolved: Tuple[Edge, ...] = ()
    source_handles: Dict[str, str] = field(default_factory=dict)
    target_handles: Dict[str, str] = field(default_factory=dict)

    def incoming_to(self, node_id: str, handle: Optional[str] = None) -> List[Edge]:
        by_handle = self.incoming.get(node_id, {})
        if handle is not None:
            return list(by_handle.get(handle, ()))
        return [e for edges in by_handle.values() for e in edges]

    def outgoing_from(self, node_id: str, handle: Optional[str] = None) -> List[Edge]:
        by_handle = self.outgoing.get(node_id, {})
        if handle is not None:
            return list(by_handle.get(handle, ()))
        return [e for edges in by_handle.values() for e in edges]

    @property
    def has_cycle(self) -> bool:
        return bool(self.cyclic)


def source_handle(node: Node, edge: Edge) -> str:
    if isinstance(node, DualOutputConverterNode):
        branch = node.branch(edge.from_handle)
        if branch is not None:
            return branch.id
    return Handles.OUTPUT


def target_handle(node: Node, edge: Edge) -> Optional[str]:
    """Input handle an edge lands on; ``None`` when a subsystem port cannot be resolved."""
    if isinstance(node, SubsystemNode):
        ports = node.port_ids()
        if edge.to_handle in ports:
            return edge.to_handle
        if len(ports) == 1 and not edge.to_handle:
            return ports[0]
        return None
    return Handles.INPUT


def build_graph(project: Project, warnings: WarningCollector) -> GraphIndex:
    nodes: Dict[str, Node] = {n.id: n for n in project.nodes if not isinstance(n, NoteNode)}

    incoming: HandleMap = {nid: {} for nid in nodes}
    outgoing: HandleMap = {nid: {} for nid in nodes}
    src_handles: Dict[str, str] = {}
    dst_handles: Dict[str, str] = {}
    valid: List[Edge] = []
    dangling: List[Edge] = []
    unresolved: List[Edge] = []
    adj: Dict[str, List[str]] = {nid: [] for nid in nodes}
    indeg: Dict[str, int] = {nid: 0 for nid in nodes}

    for e in project.edges:
        src = nodes.get(e.from_id)
        dst = nodes.get(e.to_id)
        if src is None or dst is None:
            missing = e.from_id if src is None else e.to_id
            warnings.edge(e.id, C.DANGLING_EDGE, f"Edge references missing or non-electrical node '{missing}'.")
            dangling.append(e)
            continue

        adj[e.from_id].append(e.to_id)
        indeg[e.to_id] += 1

        th = target_handle(dst, e)
        if th is None:
            warnings.edge(
                e.id,
                C.SUBSYSTEM_PORT_UNRESOLVED,
                f"Edge into subsystem '{dst.id}' does not name one of its input ports.",
            )
            unresolved.append(e)
            continue

        sh = source_handle(src, e)
        src_handles[e.id] = sh
        dst_handles[e.id] = th
        outgoing[e.from_id].setdefault(sh, []).append(e)
        incoming[e.to_id].setdefault(th, []).append(e)
        valid.append(e)

    # Kahn, seeded and expanded in project order for a deterministic result.
    queue = deque(nid for nid in nodes if indeg[nid] == 0)
    order: List[str] = []
    while queue:
        u = queue.popleft()
        order.append(u)
        for v in adj[u]:
            indeg[v] -= 1
            if indeg[v] == 0:
                queue.append(v)

    emitted = set(order)
    cyclic = frozenset(nid for nid in nodes if nid not in emitted)
    if cyclic:
        warnings.structural(C.CYCLE_DETECTED, "Cycle detected: computation blocked.", fatal=True)
        log.debug("cycle detected; %d node(s) blocked", len(cyclic))

    return GraphIndex(
        nodes=nodes,
        edges=tuple(valid),
        incoming=incoming,
        outgoing=outgoing,
        order=tuple(order),
        cyclic=cyclic,
        dangling=tuple(dangling),
        unresolved=tuple(unresolved),
        source_handles=src_handles,
        target_handles=dst_handles,
    )
