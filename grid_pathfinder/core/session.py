"""Editing session tying the grid, the controller and user selections together."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple
import logging

from .errors import BusyError, PathfinderError
from .grid import Grid
from .node import Coord, Node
from .time_manager import SPEED_ORDER, SPEED_PRESETS, TimeManager
from ..systems.search.controller import ExecutionController
from ..systems.search.engine import (
    ALGORITHMS,
    SearchState,
    StepSnapshot,
    resolve_algorithm,
)

logger = logging.getLogger(__name__)


class EditMode(Enum):
    """What a click on the grid currently does."""

    IDLE = "idle"
    PLACING_START = "placing_start"
    PLACING_END = "placing_end"
    PLACING_WALLS = "placing_walls"
    GENERATING_PATH = "generating_path"
    FINISHED_PATH = "finished_path"


_MODE_TEXT = {
    EditMode.PLACING_START: "Placing Start",
    EditMode.PLACING_END: "Placing End",
    EditMode.PLACING_WALLS: "Placing Walls",
}


class Session:
    """User-facing state for one grid.

    Holds the start/end selection, the chosen algorithm and speed, the
    current edit mode and the status line, and forwards runs to an
    :class:`ExecutionController`.
    """

    def __init__(
        self,
        size: Tuple[int, int],
        algorithm: str | int = "astar",
        speed: str | int | float = "fast",
    ) -> None:
        self.grid = Grid(size)
        self.time_manager = TimeManager(speed)
        self.controller = ExecutionController(self.grid, self.time_manager)
        self.algorithm: str = resolve_algorithm(algorithm)
        self.mode: EditMode = EditMode.IDLE
        # Last mode chosen with set_mode; clicks fall back to it after a run.
        self._edit_mode: EditMode = EditMode.IDLE
        self.start: Coord | None = None
        self.end: Coord | None = None
        self.status: str = "Ready"
        self.snapshot: StepSnapshot | None = None
        self.controller.subscribe(self._on_snapshot)
        self.controller.subscribe_lifecycle(self._on_lifecycle)

    # ------------------------------------------------------------------
    # Derived state
    # ------------------------------------------------------------------
    @property
    def searching(self) -> bool:
        return self.controller.is_running

    @property
    def pause_label(self) -> str:
        return "Resume" if self.controller.is_paused else "Stop"

    @property
    def speed_name(self) -> str:
        delay = self.time_manager.tick_delay
        for name in SPEED_ORDER:
            if SPEED_PRESETS[name] == delay:
                return name
        return f"{delay:.2f}s"

    @property
    def algorithm_name(self) -> str:
        return ALGORITHMS[self.algorithm].name

    def start_node(self) -> Node | None:
        return self.grid.at(self.start) if self.start is not None else None

    def end_node(self) -> Node | None:
        return self.grid.at(self.end) if self.end is not None else None

    # ------------------------------------------------------------------
    # Edit modes
    # ------------------------------------------------------------------
    def set_mode(self, mode: EditMode) -> bool:
        """Switch the click behaviour. Refused while a path is generating."""

        if mode not in _MODE_TEXT:
            raise ValueError(f"{mode} is not an edit mode")
        if self.searching:
            logger.warning("Cannot switch to %s while generating a path", mode.value)
            return False
        self.mode = mode
        self._edit_mode = mode
        self.status = _MODE_TEXT[mode]
        self.clear_markers()
        return True

    def clear_markers(self) -> None:
        """Drop the open/closed/path overlay of the last run."""

        self.snapshot = None
        if self.controller.engine is not None and not self.searching:
            self.controller.engine.clear()

    def on_node_clicked(self, x: int, y: int) -> bool:
        """Apply the current edit mode to ``(x, y)``. Returns ``True`` if it changed.

        After a finished path the last chosen edit mode applies again and the
        path overlay is dropped.
        """

        if not self.grid.in_range(x, y):
            return False
        if self.searching:
            logger.warning("Ignoring click at (%s, %s) while generating a path", x, y)
            return False

        if self.mode is EditMode.FINISHED_PATH:
            if self._edit_mode is EditMode.IDLE:
                return False
            self.set_mode(self._edit_mode)

        node = self.grid.node(x, y)
        pos = node.pos
        if self.mode is EditMode.PLACING_START:
            if node.blocked:
                logger.warning("Start cannot be placed on a wall at %s", pos)
                return False
            if pos == self.end:
                self.end = None
            self.start = pos
            return True
        if self.mode is EditMode.PLACING_END:
            if node.blocked:
                logger.warning("End cannot be placed on a wall at %s", pos)
                return False
            if pos == self.start:
                self.start = None
            self.end = pos
            return True
        if self.mode is EditMode.PLACING_WALLS:
            if pos in (self.start, self.end):
                logger.warning("Cannot place a wall on the start or end node at %s", pos)
                return False
            try:
                self.grid.toggle_blocked(node)
            except BusyError as exc:
                logger.warning("%s", exc)
                return False
            return True
        return False

    def clear_walls(self) -> int:
        if self.searching:
            logger.warning("Cannot clear walls while generating a path")
            return 0
        removed = self.grid.clear_walls()
        logger.info("Cleared %s walls", removed)
        return removed

    def regenerate(self, size: Tuple[int, int] | None = None) -> bool:
        """Rebuild the grid. Start, end and walls are dropped."""

        if self.searching:
            logger.warning("Cannot regenerate the grid while generating a path")
            return False
        self.grid.regenerate(size)
        self.start = None
        self.end = None
        self.clear_markers()
        self.mode = EditMode.IDLE
        self._edit_mode = EditMode.IDLE
        self.status = "Ready"
        return True

    # ------------------------------------------------------------------
    # Selections
    # ------------------------------------------------------------------
    def set_algorithm(self, selector: str | int) -> str:
        self.algorithm = resolve_algorithm(selector)
        logger.info("Algorithm set to %s", self.algorithm_name)
        return self.algorithm

    def set_speed(self, speed: str | int | float) -> float:
        return self.controller.set_speed(speed)

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------
    def generate_path(self) -> bool:
        """Start the selected algorithm. Returns ``False`` if the run was refused."""

        try:
            self.controller.start(self.algorithm, self.start_node(), self.end_node())
        except PathfinderError as exc:
            logger.error("Cannot generate path: %s", exc)
            if not self.searching:
                self.status = str(exc)
            return False
        return True

    def toggle_pause(self) -> bool:
        return self.controller.toggle_pause()

    def cancel(self) -> None:
        self.controller.cancel()

    def update(self, now: float | None = None) -> StepSnapshot | None:
        return self.controller.update(now)

    # ------------------------------------------------------------------
    # Controller callbacks
    # ------------------------------------------------------------------
    def _on_snapshot(self, snapshot: StepSnapshot) -> None:
        self.snapshot = snapshot

    def _on_lifecycle(self, old: SearchState, new: SearchState) -> None:
        self.status = self.controller.status
        if new.is_active:
            self.mode = EditMode.GENERATING_PATH
        elif new is SearchState.FOUND:
            self.mode = EditMode.FINISHED_PATH
        else:
            self.mode = self._edit_mode

    def cell_roles(self) -> Dict[Coord, str]:
        """Map every non-empty cell to start, end, wall, path, closed or open.

        Later roles win, so the endpoints always show over the search trace.
        """

        roles: Dict[Coord, str] = {}
        snap = self.snapshot
        if snap is not None:
            roles.update((pos, "open") for pos in snap.open)
            roles.update((pos, "closed") for pos in snap.closed)
            roles.update((pos, "path") for pos in snap.path)
        roles.update((pos, "wall") for pos in self.grid.walls)
        if self.start is not None:
            roles[self.start] = "start"
        if self.end is not None:
            roles[self.end] = "end"
        return roles


__all__ = ["EditMode", "Session"]
