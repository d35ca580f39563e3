# -*- coding: utf-8 -*-
"""Resistive interconnect losses (I^2 R) and voltage drop for one edge."""

from __future__ import annotations

from dataclasses import dataclass

from domain.models.project import Edge


@dataclass(frozen=True)
class EdgeFlow:
    i_edge: float = 0.0
    p_edge: float = 0.0
    r_ohm: float = 0.0
    v_drop: float = 0.0
    loss: float = 0.0

    @property
    def p_upstream(self) -> float:
        """Power the feeding node has to supply for this edge."""
        return self.p_edge + self.loss


def edge_loss(i_edge: float, r_milliohm: float) -> float:
    return float(i_edge) ** 2 * (float(r_milliohm) / 1000.0)


def compute_edge_flow(edge: Edge, i_edge: float, p_edge: float) -> EdgeFlow:
    """Flow on ``edge`` when its target handle demands ``i_edge`` / ``p_edge``."""
    r_ohm = edge.interconnect.r_ohm
    return EdgeFlow(
        i_edge=i_edge,
        p_edge=p_edge,
        r_ohm=r_ohm,
        v_drop=i_edge * r_ohm,
        loss=edge_loss(i_edge, edge.interconnect.r_milliohm),
    )
