"""Node grid with obstacle bookkeeping and neighbour queries."""

from __future__ import annotations

from typing import Any, Iterator, List, Tuple
import logging

from .errors import BusyError
from .node import Coord, Node

logger = logging.getLogger(__name__)


class Grid:
    """Fixed-size grid owning every :class:`Node`.

    Nodes live in a flat list indexed by ``x * height + y`` so iteration runs
    column by column, the same order :meth:`neighbors` uses.
    """

    def __init__(self, size: Tuple[int, int]) -> None:
        self._owner: Any | None = None
        self._build(size)

    def _build(self, size: Tuple[int, int]) -> None:
        width, height = int(size[0]), int(size[1])
        if width <= 0 or height <= 0:
            raise ValueError(f"grid size must be positive, got {size!r}")
        self.size: Tuple[int, int] = (width, height)
        self._nodes: List[Node] = [
            Node(x, y) for x in range(width) for y in range(height)
        ]

    # ------------------------------------------------------------------
    # Geometry
    # ------------------------------------------------------------------
    @property
    def width(self) -> int:
        return self.size[0]

    @property
    def height(self) -> int:
        return self.size[1]

    @property
    def cell_count(self) -> int:
        return len(self._nodes)

    def in_range(self, x: int, y: int) -> bool:
        return 0 <= x < self.size[0] and 0 <= y < self.size[1]

    def node(self, x: int, y: int) -> Node:
        """Return the node at ``(x, y)``."""

        if not self.in_range(x, y):
            raise IndexError(f"({x}, {y}) is outside a {self.size[0]}x{self.size[1]} grid")
        return self._nodes[x * self.size[1] + y]

    def at(self, pos: Coord) -> Node:
        return self.node(pos[0], pos[1])

    def neighbors(self, node: Node) -> List[Node]:
        """Return the Moore neighbourhood of ``node`` clipped to the grid.

        Ordered by ascending ``x`` then ascending ``y``.
        """

        result: List[Node] = []
        for x in range(node.x - 1, node.x + 2):
            for y in range(node.y - 1, node.y + 2):
                if x == node.x and y == node.y:
                    continue
                if self.in_range(x, y):
                    result.append(self._nodes[x * self.size[1] + y])
        return result

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    # ------------------------------------------------------------------
    # Obstacles
    # ------------------------------------------------------------------
    def is_blocked(self, node: Node) -> bool:
        return node.blocked

    @property
    def walls(self) -> List[Coord]:
        return [n.pos for n in self._nodes if n.blocked]

    def toggle_blocked(self, node: Node) -> bool:
        """Flip the blocked flag of ``node`` and return the new value."""

        self._ensure_idle("toggle obstacle")
        node.blocked = not node.blocked
        return node.blocked

    def set_blocked(self, node: Node, blocked: bool) -> None:
        self._ensure_idle("place obstacle")
        node.blocked = bool(blocked)

    def clear_walls(self) -> int:
        """Unblock every node. Returns how many walls were removed."""

        self._ensure_idle("clear walls")
        removed = 0
        for n in self._nodes:
            if n.blocked:
                n.blocked = False
                removed += 1
        return removed

    def regenerate(self, size: Tuple[int, int] | None = None) -> None:
        """Tear down every node and rebuild the grid, optionally resized."""

        self._ensure_idle("regenerate grid")
        self._build(size if size is not None else self.size)
        logger.info("Grid regenerated at %sx%s", self.size[0], self.size[1])

    # ------------------------------------------------------------------
    # Search ownership
    # ------------------------------------------------------------------
    @property
    def busy(self) -> bool:
        return self._owner is not None

    def acquire(self, owner: Any) -> None:
        """Mark the grid as exclusively used by ``owner``."""

        if self._owner is not None and self._owner is not owner:
            raise BusyError("grid is already being searched")
        self._owner = owner

    def release(self, owner: Any) -> None:
        if self._owner is owner:
            self._owner = None

    def _ensure_idle(self, action: str) -> None:
        if self._owner is not None:
            raise BusyError(f"cannot {action} while a search is running")


__all__ = ["Grid"]
