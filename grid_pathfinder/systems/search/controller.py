"""Run/pause/cancel orchestration for a search engine."""

from __future__ import annotations

from typing import Callable, List
import logging

from ...core.costs import reset_costs
from ...core.errors import BusyError, InvalidInputError
from ...core.grid import Grid
from ...core.node import Node
from ...core.time_manager import TimeManager, resolve_delay
from .engine import STATUS_TEXT, SearchEngine, SearchState, StepSnapshot, create_engine

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[StepSnapshot], None]
LifecycleCallback = Callable[[SearchState, SearchState], None]


class ExecutionController:
    """Drive one :class:`SearchEngine` at a time against ``grid``.

    The controller is the only caller of :meth:`SearchEngine.tick`. Between
    ticks it checks for cancellation and pause requests and waits for the
    :class:`TimeManager` delay to elapse. Nothing here blocks except
    :meth:`run`, which is meant for headless use.
    """

    def __init__(self, grid: Grid, time_manager: TimeManager | None = None) -> None:
        self.grid = grid
        self.time_manager = time_manager if time_manager is not None else TimeManager()
        self.engine: SearchEngine | None = None
        self._snapshot_callbacks: List[SnapshotCallback] = []
        self._lifecycle_callbacks: List[LifecycleCallback] = []
        self._state: SearchState = SearchState.IDLE

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------
    def subscribe(self, callback: SnapshotCallback) -> None:
        if callback not in self._snapshot_callbacks:
            self._snapshot_callbacks.append(callback)

    def subscribe_lifecycle(self, callback: LifecycleCallback) -> None:
        if callback not in self._lifecycle_callbacks:
            self._lifecycle_callbacks.append(callback)

    def _emit(self, snapshot: StepSnapshot) -> None:
        for cb in list(self._snapshot_callbacks):
            cb(snapshot)

    def _sync_state(self) -> None:
        new_state = self.engine.state if self.engine is not None else SearchState.IDLE
        old_state = self._state
        if new_state is old_state:
            return
        self._state = new_state
        if new_state.is_terminal and self.engine is not None:
            self.grid.release(self.engine)
            logger.info(
                "%s finished: %s after %s ticks",
                self.engine.name,
                new_state.value,
                self.engine.tick_count,
            )
        self._notify(old_state, new_state)

    def _notify(self, old_state: SearchState, new_state: SearchState) -> None:
        for cb in list(self._lifecycle_callbacks):
            cb(old_state, new_state)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------
    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state.is_active

    @property
    def is_paused(self) -> bool:
        return self._state is SearchState.PAUSED

    @property
    def status(self) -> str:
        return STATUS_TEXT[self._state]

    @property
    def tick_delay(self) -> float:
        return self.time_manager.tick_delay

    def set_speed(self, speed: str | int | float) -> float:
        delay = self.time_manager.set_speed(speed)
        logger.info("Tick delay set to %.2fs", delay)
        return delay

    # ------------------------------------------------------------------
    # Control surface
    # ------------------------------------------------------------------
    def start(
        self,
        algorithm: str | int,
        start: Node | None,
        end: Node | None,
        tick_delay: str | int | float | None = None,
        preempt: bool = False,
    ) -> SearchEngine:
        """Begin a new run of ``algorithm`` from ``start`` to ``end``.

        Raises :class:`InvalidInputError` for missing, identical or blocked
        endpoints and :class:`BusyError` if a run is active and ``preempt`` is
        false. With ``preempt`` the active run is cancelled first.
        """

        if start is None or end is None:
            raise InvalidInputError("start node and end node must both be set")
        if start is end or start.pos == end.pos:
            raise InvalidInputError("start node and end node must differ")
        if start.blocked:
            raise InvalidInputError(f"start node {start.pos} is blocked")
        engine = create_engine(algorithm)
        delay = resolve_delay(tick_delay) if tick_delay is not None else None

        if self.is_running:
            if not preempt:
                raise BusyError("a search is already running")
            self.cancel()

        # Node costs are shared with any other run on this grid; own it first.
        self.grid.acquire(engine)
        try:
            if delay is not None:
                self.set_speed(delay)
            if self.engine is not None:
                self.engine.clear()
            reset_costs(self.grid)
            engine.start(self.grid, start, end)
        except Exception:
            self.grid.release(engine)
            raise
        self.engine = engine
        self.time_manager.reset()
        logger.info(
            "Starting %s from %s to %s (delay %.2fs)",
            engine.name,
            start.pos,
            end.pos,
            self.time_manager.tick_delay,
        )
        self._sync_state()
        return engine

    def pause(self) -> None:
        if self.engine is None or self._state is not SearchState.RUNNING:
            return
        self.engine.pause()
        logger.info("Search paused")
        self._sync_state()

    def resume(self) -> None:
        if self.engine is None or self._state is not SearchState.PAUSED:
            return
        self.engine.resume()
        logger.info("Search resumed")
        self._sync_state()

    def toggle_pause(self) -> bool:
        """Pause a running search or resume a paused one. Returns paused state."""

        if self.is_paused:
            self.resume()
        else:
            self.pause()
        return self.is_paused

    def cancel(self) -> None:
        """Stop the active run. The engine halts without expanding further."""

        if self.engine is None or not self._state.is_active:
            return
        self.engine.request_cancel()
        logger.info("Search cancelled")
        self._advance()

    # ------------------------------------------------------------------
    # Driving
    # ------------------------------------------------------------------
    def _advance(self) -> StepSnapshot:
        assert self.engine is not None
        try:
            snapshot = self.engine.tick()
        except Exception:
            logger.exception("%s tick failed; abandoning run", self.engine.name)
            self.grid.release(self.engine)
            self.engine = None
            old_state, self._state = self._state, SearchState.IDLE
            self._notify(old_state, SearchState.IDLE)
            raise
        self.time_manager.mark_tick()
        logger.debug(
            "tick %s: current=%s open=%s closed=%s",
            snapshot.tick,
            snapshot.current,
            len(snapshot.open),
            len(snapshot.closed),
        )
        self._emit(snapshot)
        self._sync_state()
        return snapshot

    def update(self, now: float | None = None) -> StepSnapshot | None:
        """Run the next tick if one is due. Call once per host-loop frame."""

        if self.engine is None or not self._state.is_active:
            return None
        if self.engine.cancel_requested:
            return self._advance()
        if self._state is SearchState.PAUSED:
            return None
        if not self.time_manager.is_due(now):
            return None
        return self._advance()

    def step(self) -> StepSnapshot | None:
        """Run exactly one tick now, even while paused."""

        if self.engine is None or not self._state.is_active:
            return None
        return self._advance()

    def run(self, max_ticks: int | None = None) -> SearchState:
        """Tick until the run ends, is paused, or ``max_ticks`` ran."""

        ran = 0
        while self.engine is not None and self._state is SearchState.RUNNING:
            if max_ticks is not None and ran >= max_ticks:
                break
            self.time_manager.sleep_until_next_tick()
            if self._state is not SearchState.RUNNING:
                break
            self._advance()
            ran += 1
        return self._state


__all__ = ["ExecutionController"]
