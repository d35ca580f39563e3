# -*- coding: utf-8 -*-
"""Structural lint of a project level (pure).

Cheap checks the editor shows next to the engine warnings:
empty project, edges pointing at unknown nodes and nodes with no
connection at all. Notes are annotations and are never reported.
"""

from __future__ import annotations

from typing import List, Set

from core.keys import IssueCodes as C
from core.types import Issue, Severity
from domain.models.nodes import NoteNode, SubsystemNode
from domain.models.project import Project


def lint_project(project: Project, *, recursive: bool = True, _prefix: str = "") -> List[Issue]:
    issues: List[Issue] = []

    def ctx(x: str) -> str:
        return f"{_prefix}{x}"

    electrical = [n for n in project.nodes if not isinstance(n, NoteNode)]
    if not electrical:
        issues.append(Issue(C.LINT_NO_NODES, "Project has no nodes.", Severity.INFO, _prefix.rstrip("/") or None))
        return issues

    ids: Set[str] = {n.id for n in project.nodes}
    connected: Set[str] = set()
    for e in project.edges:
        for ref in (e.from_id, e.to_id):
            if ref not in ids:
                issues.append(
                    Issue(C.LINT_MISSING_REF, f"Edge references missing node '{ref}'.", Severity.ERROR, ctx(e.id))
                )
            else:
                connected.add(ref)

    for n in electrical:
        if n.id not in connected:
            issues.append(Issue(C.LINT_UNCONNECTED, "Node is not connected.", Severity.WARNING, ctx(n.id)))

    if recursive:
        for n in electrical:
            if isinstance(n, SubsystemNode) and n.project is not None:
                issues.extend(lint_project(n.project, recursive=True, _prefix=ctx(n.id) + "/"))

    return issues
