# tests/conftest.py
import os

# pygame must not try to open a real display or audio device in CI
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

import pytest

from grid_pathfinder.core.grid import Grid
from grid_pathfinder.core.session import Session
from grid_pathfinder.core.time_manager import TimeManager
from grid_pathfinder.systems.search.controller import ExecutionController
from grid_pathfinder.utils import observer


class FakeClock:
    """Manually advanced clock for :class:`TimeManager`."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def build_grid(size, walls=()):
    grid = Grid(size)
    for x, y in walls:
        grid.set_blocked(grid.node(x, y), True)
    return grid


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def controller_factory(clock):
    def make(size=(5, 5), walls=(), delay=0.0):
        grid = build_grid(size, walls)
        tm = TimeManager(delay, clock=clock, sleep=clock.sleep)
        return ExecutionController(grid, tm)

    return make


@pytest.fixture
def session() -> Session:
    s = Session((6, 4), speed=0.0)
    return s


@pytest.fixture(autouse=True)
def _reset_observer():
    observer._tick_durations.clear()
    observer._events.clear()
    observer._live_stats = False
    yield
    observer._tick_durations.clear()
    observer._events.clear()
    observer._live_stats = False


@pytest.fixture
def grid_factory():
    return build_grid
