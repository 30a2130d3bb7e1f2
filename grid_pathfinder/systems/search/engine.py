"""Incremental A* and Greedy Best-First search over a :class:`Grid`.

Each call to :meth:`SearchEngine.tick` expands exactly one node and returns a
:class:`StepSnapshot` describing the frontier, the visited cells and the best
known path so far. Engines never sleep or wait; pacing, pausing and
cancellation requests come from the execution controller between ticks.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Set, Tuple, Type
import logging

from ...core.costs import distance
from ...core.grid import Grid
from ...core.node import Coord, Node
from .path import partial_path, reconstruct_path

logger = logging.getLogger(__name__)


class SearchState(Enum):
    """Lifecycle of a single search run."""

    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FOUND = "found"
    NOT_FOUND = "not_found"
    CANCELLED = "cancelled"

    @property
    def is_active(self) -> bool:
        return self in (SearchState.RUNNING, SearchState.PAUSED)

    @property
    def is_terminal(self) -> bool:
        return self in (SearchState.FOUND, SearchState.NOT_FOUND, SearchState.CANCELLED)


STATUS_TEXT: Dict[SearchState, str] = {
    SearchState.IDLE: "Idle",
    SearchState.RUNNING: "Generating Path",
    SearchState.PAUSED: "Paused",
    SearchState.FOUND: "Finished Path",
    SearchState.NOT_FOUND: "No path found",
    SearchState.CANCELLED: "Cancelled",
}


@dataclass(frozen=True, slots=True)
class StepSnapshot:
    """Read-only picture of a search after one tick."""

    tick: int
    state: SearchState
    current: Coord | None
    open: Tuple[Coord, ...]
    closed: Tuple[Coord, ...]
    path: Tuple[Coord, ...]

    @property
    def status(self) -> str:
        return STATUS_TEXT[self.state]


class SearchEngine(ABC):
    """Shared expansion and termination logic for grid searches."""

    name: str = "search"

    def __init__(self) -> None:
        self.state: SearchState = SearchState.IDLE
        self.grid: Grid | None = None
        self.start_node: Node | None = None
        self.end_node: Node | None = None
        self.open_set: List[Node] = []
        self._open_members: Set[Coord] = set()
        self.closed_set: List[Node] = []
        self._closed_members: Set[Coord] = set()
        self.path: List[Coord] = []
        self.tick_count: int = 0
        self._cancel_requested: bool = False
        self._last: StepSnapshot | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def start(self, grid: Grid, start: Node, end: Node) -> None:
        """Seed a fresh run from ``start`` towards ``end``.

        Node costs must already be reset; the controller does that before
        calling this.
        """

        self.clear()
        self.grid = grid
        self.start_node = start
        self.end_node = end
        self._push_open(start)
        self.state = SearchState.RUNNING
        logger.debug("%s seeded at %s towards %s", self.name, start.pos, end.pos)

    def clear(self) -> None:
        """Forget the frontier, visited set and path of the previous run."""

        self.open_set.clear()
        self._open_members.clear()
        self.closed_set.clear()
        self._closed_members.clear()
        self.path = []
        self.tick_count = 0
        self._cancel_requested = False
        self._last = None

    def pause(self) -> None:
        if self.state is SearchState.RUNNING:
            self.state = SearchState.PAUSED

    def resume(self) -> None:
        if self.state is SearchState.PAUSED:
            self.state = SearchState.RUNNING

    def request_cancel(self) -> None:
        if self.state.is_active:
            self._cancel_requested = True

    @property
    def cancel_requested(self) -> bool:
        return self._cancel_requested

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------
    def tick(self) -> StepSnapshot:
        """Expand one node and return the resulting snapshot.

        Ticks on a terminal or idle engine return the last snapshot unchanged.
        A paused engine may still be ticked to single-step it.
        """

        if not self.state.is_active:
            return self._last if self._last is not None else self._snapshot(None)

        if self._cancel_requested:
            self._cancel_requested = False
            self.state = SearchState.CANCELLED
            return self._snapshot(None)

        if not self.open_set:
            self.state = SearchState.NOT_FOUND
            return self._snapshot(None)

        assert self.grid is not None and self.start_node is not None and self.end_node is not None
        self.tick_count += 1

        current = self._select()
        self.open_set.remove(current)
        self._open_members.discard(current.pos)
        self.closed_set.append(current)
        self._closed_members.add(current.pos)

        if current is self.end_node:
            self.path = reconstruct_path(self.grid, self.start_node, self.end_node)
            self.state = SearchState.FOUND
            return self._snapshot(current)

        for neighbor in self.grid.neighbors(current):
            if neighbor.blocked or neighbor.pos in self._closed_members:
                continue
            self._admit(current, neighbor)

        return self._snapshot(current)

    def ticks(self) -> Iterator[StepSnapshot]:
        """Lazily tick until the run is no longer active."""

        while self.state.is_active:
            yield self.tick()

    @abstractmethod
    def _select(self) -> Node:
        """Return the open-set node to expand next."""

    @abstractmethod
    def _admit(self, current: Node, neighbor: Node) -> None:
        """Apply the variant's admission/update rule to ``neighbor``."""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def in_open(self, node: Node) -> bool:
        return node.pos in self._open_members

    def in_closed(self, node: Node) -> bool:
        return node.pos in self._closed_members

    def _push_open(self, node: Node) -> None:
        self.open_set.append(node)
        self._open_members.add(node.pos)

    def _snapshot(self, current: Node | None) -> StepSnapshot:
        if self.state is SearchState.FOUND:
            path = tuple(self.path)
        elif current is not None and self.grid is not None and self.start_node is not None:
            path = tuple(partial_path(self.grid, self.start_node, current))
        else:
            path = ()
        snap = StepSnapshot(
            tick=self.tick_count,
            state=self.state,
            current=current.pos if current is not None else None,
            open=tuple(n.pos for n in self.open_set),
            closed=tuple(n.pos for n in self.closed_set),
            path=path,
        )
        self._last = snap
        return snap

    @property
    def last_snapshot(self) -> StepSnapshot | None:
        return self._last


class AStarSearch(SearchEngine):
    """Optimal search ordered by ``f_cost`` with ``h_cost`` tie-breaking."""

    name = "A*"

    def _select(self) -> Node:
        best = self.open_set[0]
        for node in self.open_set[1:]:
            if node.f_cost < best.f_cost or (
                node.f_cost == best.f_cost and node.h_cost < best.h_cost
            ):
                best = node
        return best

    def _admit(self, current: Node, neighbor: Node) -> None:
        assert self.end_node is not None
        candidate = current.g_cost + distance(current, neighbor)
        queued = self.in_open(neighbor)
        if candidate < neighbor.g_cost or not queued:
            neighbor.g_cost = candidate
            neighbor.h_cost = distance(neighbor, self.end_node)
            neighbor.parent = current.pos
            if not queued:
                self._push_open(neighbor)


class GreedyBestFirstSearch(SearchEngine):
    """Heuristic-only search.

    A neighbour already in the open set keeps its first backlink even when a
    cheaper route reaches it later, so paths are not guaranteed shortest.
    """

    name = "Greedy Best-First"

    def _select(self) -> Node:
        best = self.open_set[0]
        for node in self.open_set[1:]:
            if node.f_cost < best.f_cost:
                best = node
        return best

    def _admit(self, current: Node, neighbor: Node) -> None:
        assert self.end_node is not None
        if self.in_open(neighbor):
            return
        neighbor.h_cost = distance(neighbor, self.end_node)
        neighbor.parent = current.pos
        self._push_open(neighbor)


ALGORITHMS: Dict[str, Type[SearchEngine]] = {
    "astar": AStarSearch,
    "greedy": GreedyBestFirstSearch,
}

# Index order used by numeric selectors (0 = A*, 1 = Greedy).
ALGORITHM_ORDER = ("astar", "greedy")

_ALIASES = {
    "a*": "astar",
    "a_star": "astar",
    "greedy_best_first": "greedy",
    "best_first": "greedy",
    "gbfs": "greedy",
}


def resolve_algorithm(selector: str | int) -> str:
    """Return the registry key for a name, alias or dropdown index."""

    if isinstance(selector, bool):
        raise ValueError(f"Unknown algorithm: {selector!r}")
    if isinstance(selector, int):
        if 0 <= selector < len(ALGORITHM_ORDER):
            return ALGORITHM_ORDER[selector]
        raise ValueError(f"Algorithm index out of range: {selector}")
    key = str(selector).strip().lower()
    if key.isdigit():
        return resolve_algorithm(int(key))
    key = _ALIASES.get(key, key)
    if key not in ALGORITHMS:
        raise ValueError(f"Unknown algorithm: {selector!r}")
    return key


def create_engine(selector: str | int) -> SearchEngine:
    return ALGORITHMS[resolve_algorithm(selector)]()


__all__ = [
    "SearchState",
    "StepSnapshot",
    "SearchEngine",
    "AStarSearch",
    "GreedyBestFirstSearch",
    "ALGORITHMS",
    "ALGORITHM_ORDER",
    "STATUS_TEXT",
    "create_engine",
    "resolve_algorithm",
]
