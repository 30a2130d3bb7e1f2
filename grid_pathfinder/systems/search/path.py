"""Backlink walking for finished and in-progress searches."""

from __future__ import annotations

from typing import List

from ...core.errors import InternalInconsistencyError
from ...core.grid import Grid
from ...core.node import Coord, Node


def _walk(grid: Grid, start: Node, node: Node) -> List[Coord]:
    path: List[Coord] = []
    current = node
    hops = 0
    while current is not start:
        if hops >= grid.cell_count:
            raise InternalInconsistencyError(
                f"backlink chain from {node.pos} exceeded {grid.cell_count} hops"
            )
        if current.parent is None:
            raise InternalInconsistencyError(
                f"backlink chain from {node.pos} broke at {current.pos}"
            )
        path.append(current.pos)
        current = grid.at(current.parent)
        hops += 1
    path.append(start.pos)
    path.reverse()
    return path


def reconstruct_path(grid: Grid, start: Node, goal: Node) -> List[Coord]:
    """Return coordinates from ``start`` to ``goal`` by following backlinks.

    Both endpoints are included. A chain that breaks or runs longer than the
    number of cells raises :class:`InternalInconsistencyError`.
    """

    return _walk(grid, start, goal)


def partial_path(grid: Grid, start: Node, node: Node) -> List[Coord]:
    """Best known route from ``start`` to ``node`` during a running search."""

    return _walk(grid, start, node)


__all__ = ["reconstruct_path", "partial_path"]
