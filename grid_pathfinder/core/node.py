"""Grid node component."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

Coord = Tuple[int, int]


@dataclass(slots=True, eq=False)
class Node:
    """Single grid cell with the cost fields of the current search.

    ``parent`` is the coordinate of the node this one was reached from. It is
    only read when rebuilding a path and never owns the referenced node.
    """

    x: int
    y: int
    blocked: bool = False
    g_cost: int = 0
    h_cost: int = 0
    parent: Coord | None = None

    @property
    def pos(self) -> Coord:
        return (self.x, self.y)

    @property
    def f_cost(self) -> int:
        return self.g_cost + self.h_cost

    def reset_costs(self) -> None:
        self.g_cost = 0
        self.h_cost = 0
        self.parent = None

    def __repr__(self) -> str:
        flag = " blocked" if self.blocked else ""
        return f"Node({self.x}, {self.y}, g={self.g_cost}, h={self.h_cost}{flag})"


__all__ = ["Coord", "Node"]
