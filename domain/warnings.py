# -*- coding: utf-8 -*-
"""
domain/warnings.py

Collects diagnostics during one evaluation.

Every local warning (node or edge) is also listed centrally with the
owning id as ``context``. Duplicates by (code, message, context) are
dropped, the same rule the validation service applies to its issues.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Set, Tuple

from core.types import Issue, Severity


class WarningCollector:
    def __init__(self) -> None:
        self._global: List[Issue] = []
        self._seen: Set[Tuple[str, str, Optional[str]]] = set()
        self._nodes: Dict[str, List[Issue]] = {}
        self._edges: Dict[str, List[Issue]] = {}

    @staticmethod
    def _key(it: Issue) -> Tuple[str, str, Optional[str]]:
        return (it.code, it.message, it.context)

    def add(self, issue: Issue) -> None:
        key = self._key(issue)
        if key in self._seen:
            return
        self._seen.add(key)
        self._global.append(issue)

    def extend(self, issues: Iterable[Issue]) -> None:
        for it in issues:
            self.add(it)

    def structural(self, code: str, message: str, *, context: Optional[str] = None, fatal: bool = False) -> None:
        self.add(Issue(code, message, Severity.ERROR if fatal else Severity.WARNING, context))

    def node(self, node_id: str, code: str, message: str, severity: Severity = Severity.WARNING) -> None:
        it = Issue(code, message, severity, node_id)
        bucket = self._nodes.setdefault(node_id, [])
        if it not in bucket:
            bucket.append(it)
        self.add(it)

    def edge(self, edge_id: str, code: str, message: str, severity: Severity = Severity.WARNING) -> None:
        it = Issue(code, message, severity, edge_id)
        bucket = self._edges.setdefault(edge_id, [])
        if it not in bucket:
            bucket.append(it)
        self.add(it)

    def edge_into_node(self, edge_id: str, node_id: str, code: str, message: str) -> None:
        """Compatibility finding on an edge, also shown on its target; listed globally once."""
        it = Issue(code, message, Severity.WARNING, edge_id)
        bucket = self._edges.setdefault(edge_id, [])
        if it not in bucket:
            bucket.append(it)
        self.node(node_id, code, message)

    def node_warnings(self, node_id: str) -> Tuple[Issue, ...]:
        return tuple(self._nodes.get(node_id, ()))

    def edge_warnings(self, edge_id: str) -> Tuple[Issue, ...]:
        return tuple(self._edges.get(edge_id, ()))

    def global_warnings(self) -> Tuple[Issue, ...]:
        return tuple(self._global)


def prefix_nested(issues: Iterable[Issue], subsystem_id: str) -> List[Issue]:
    """Re-home nested warnings under the owning subsystem (``sub/inner`` contexts)."""
    out = []
    for it in issues:
        ctx = f"{subsystem_id}/{it.context}" if it.context else subsystem_id
        out.append(it.with_context(ctx))
    return out
