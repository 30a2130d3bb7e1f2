"""Octile cost model shared by every search variant."""

from __future__ import annotations

from typing import Iterable, Sequence

from .node import Coord, Node

STRAIGHT_COST = 10
DIAGONAL_COST = 14


def octile(a: Coord, b: Coord) -> int:
    """Return the integer octile distance between two coordinates.

    Diagonal steps cost 14 and straight steps 10, approximating Euclidean
    distance scaled by ten.
    """

    dx = abs(a[0] - b[0])
    dy = abs(a[1] - b[1])
    if dx > dy:
        return DIAGONAL_COST * dy + STRAIGHT_COST * (dx - dy)
    return DIAGONAL_COST * dx + STRAIGHT_COST * (dy - dx)


def distance(a: Node, b: Node) -> int:
    """Edge cost and heuristic between two nodes."""

    return octile((a.x, a.y), (b.x, b.y))


def path_cost(path: Sequence[Coord]) -> int:
    """Sum of :func:`octile` over consecutive coordinates of ``path``."""

    return sum(octile(p, q) for p, q in zip(path, path[1:]))


def reset_costs(nodes: Iterable[Node]) -> None:
    """Zero ``g_cost``/``h_cost`` and drop backlinks before a new run."""

    for node in nodes:
        node.reset_costs()


__all__ = [
    "STRAIGHT_COST",
    "DIAGONAL_COST",
    "octile",
    "distance",
    "path_cost",
    "reset_costs",
]
