import pytest

from grid_pathfinder.core.costs import path_cost
from grid_pathfinder.core.errors import BusyError, InvalidInputError
from grid_pathfinder.core.time_manager import TimeManager
from grid_pathfinder.systems.search.controller import ExecutionController
from grid_pathfinder.systems.search.engine import SearchState


def endpoints(ctrl, start=(0, 0), end=(4, 4)):
    return ctrl.grid.node(*start), ctrl.grid.node(*end)


def test_start_requires_both_endpoints(controller_factory):
    ctrl = controller_factory()
    s, _ = endpoints(ctrl)
    with pytest.raises(InvalidInputError):
        ctrl.start("astar", s, None)
    with pytest.raises(InvalidInputError):
        ctrl.start("astar", None, s)
    assert ctrl.state is SearchState.IDLE


def test_start_rejects_identical_or_blocked_start(controller_factory):
    ctrl = controller_factory(walls=[(0, 0)])
    s, e = endpoints(ctrl)
    with pytest.raises(InvalidInputError):
        ctrl.start("astar", e, e)
    with pytest.raises(InvalidInputError):
        ctrl.start("astar", s, e)
    assert not ctrl.grid.busy


def test_unknown_algorithm_is_value_error(controller_factory):
    ctrl = controller_factory()
    with pytest.raises(ValueError):
        ctrl.start("bogus", *endpoints(ctrl))
    assert not ctrl.grid.busy


def test_run_to_completion_releases_grid(controller_factory):
    ctrl = controller_factory()
    ctrl.start("astar", *endpoints(ctrl))
    assert ctrl.is_running
    assert ctrl.grid.busy
    assert ctrl.run() is SearchState.FOUND
    assert not ctrl.grid.busy
    assert ctrl.engine.path[-1] == (4, 4)
    assert ctrl.status == "Finished Path"


def test_second_start_while_running_is_busy(controller_factory):
    ctrl = controller_factory()
    ctrl.start("astar", *endpoints(ctrl))
    with pytest.raises(BusyError):
        ctrl.start("greedy", *endpoints(ctrl))
    assert ctrl.engine.name == "A*"
    assert ctrl.is_running


def test_preempt_cancels_active_run(controller_factory):
    ctrl = controller_factory()
    first = ctrl.start("astar", *endpoints(ctrl))
    ctrl.step()
    second = ctrl.start("greedy", *endpoints(ctrl), preempt=True)
    assert first.state is SearchState.CANCELLED
    assert first.closed_set == []
    assert ctrl.engine is second
    assert ctrl.state is SearchState.RUNNING
    assert ctrl.run() is SearchState.FOUND


def test_grid_edits_rejected_during_run(controller_factory):
    ctrl = controller_factory()
    ctrl.start("astar", *endpoints(ctrl))
    with pytest.raises(BusyError):
        ctrl.grid.toggle_blocked(ctrl.grid.node(2, 2))
    ctrl.cancel()
    assert ctrl.grid.toggle_blocked(ctrl.grid.node(2, 2)) is True


def test_pause_holds_ticks_until_resume(controller_factory, clock):
    ctrl = controller_factory(delay=0.0)
    ctrl.start("astar", *endpoints(ctrl))
    ctrl.update()
    ctrl.pause()
    assert ctrl.is_paused and ctrl.is_running
    ticks = ctrl.engine.tick_count
    for _ in range(5):
        clock.now += 1.0
        assert ctrl.update() is None
    assert ctrl.engine.tick_count == ticks
    assert ctrl.run() is SearchState.PAUSED

    assert ctrl.toggle_pause() is False
    assert ctrl.state is SearchState.RUNNING
    assert ctrl.run() is SearchState.FOUND


def test_step_expands_one_node_while_paused(controller_factory):
    ctrl = controller_factory()
    ctrl.start("astar", *endpoints(ctrl))
    ctrl.pause()
    snap = ctrl.step()
    assert snap.tick == 1
    assert ctrl.step().tick == 2
    assert ctrl.is_paused


def test_cancel_while_paused(controller_factory):
    ctrl = controller_factory()
    ctrl.start("astar", *endpoints(ctrl))
    ctrl.step()
    ctrl.pause()
    ctrl.cancel()
    assert ctrl.state is SearchState.CANCELLED
    assert not ctrl.grid.busy
    assert ctrl.engine.tick_count == 1


def test_restart_after_cancel_clears_previous_state(controller_factory):
    ctrl = controller_factory()
    s, e = endpoints(ctrl)
    ctrl.start("astar", s, e)
    ctrl.step()
    ctrl.step()
    ctrl.cancel()
    stale = ctrl.grid.node(1, 1)
    assert stale.parent is not None

    engine = ctrl.start("astar", s, e)
    assert engine.tick_count == 0
    assert [n.pos for n in engine.open_set] == [(0, 0)]
    assert stale.parent is None and stale.g_cost == 0


def test_update_respects_tick_delay(controller_factory, clock):
    ctrl = controller_factory(delay=0.25)
    ctrl.start("astar", *endpoints(ctrl))
    assert ctrl.update() is not None
    assert ctrl.update() is None
    clock.now = 0.2
    assert ctrl.update() is None
    clock.now = 0.25
    snap = ctrl.update()
    assert snap is not None and snap.tick == 2


def test_run_sleeps_between_ticks(controller_factory, clock):
    ctrl = controller_factory(delay=0.1)
    ctrl.start("astar", *endpoints(ctrl))
    ctrl.run(max_ticks=3)
    assert ctrl.engine.tick_count == 3
    assert clock.sleeps == [pytest.approx(0.1), pytest.approx(0.1)]


def test_set_speed_during_run(controller_factory):
    ctrl = controller_factory(delay=0.1)
    ctrl.start("astar", *endpoints(ctrl), tick_delay="slow")
    assert ctrl.tick_delay == 0.55
    ctrl.set_speed(0.0)
    assert ctrl.tick_delay == 0.0


def test_observers_receive_snapshots_and_transitions(controller_factory):
    ctrl = controller_factory(walls=[(3, 3), (3, 4), (4, 3)])
    snaps, transitions = [], []
    ctrl.subscribe(snaps.append)
    ctrl.subscribe_lifecycle(lambda old, new: transitions.append((old, new)))
    ctrl.start("greedy", *endpoints(ctrl))
    ctrl.pause()
    ctrl.resume()
    ctrl.run()
    assert transitions == [
        (SearchState.IDLE, SearchState.RUNNING),
        (SearchState.RUNNING, SearchState.PAUSED),
        (SearchState.PAUSED, SearchState.RUNNING),
        (SearchState.RUNNING, SearchState.NOT_FOUND),
    ]
    assert snaps[-1].state is SearchState.NOT_FOUND
    assert [s.tick for s in snaps[:-1]] == list(range(1, len(snaps)))


def test_failed_tick_abandons_run(controller_factory):
    ctrl = controller_factory()
    transitions = []
    ctrl.subscribe_lifecycle(lambda old, new: transitions.append((old, new)))
    ctrl.start("astar", *endpoints(ctrl))

    def boom():
        raise RuntimeError("boom")

    ctrl.engine.tick = boom
    with pytest.raises(RuntimeError):
        ctrl.step()
    assert ctrl.state is SearchState.IDLE
    assert ctrl.engine is None
    assert not ctrl.grid.busy
    assert transitions[-1] == (SearchState.RUNNING, SearchState.IDLE)


def test_rejected_start_leaves_other_run_untouched(grid_factory, clock):
    grid = grid_factory((6, 6))
    first = ExecutionController(grid, TimeManager(0.0, clock=clock, sleep=clock.sleep))
    second = ExecutionController(grid, TimeManager(0.0, clock=clock, sleep=clock.sleep))
    first.start("astar", grid.node(0, 0), grid.node(5, 5))
    first.step()
    first.step()
    before = [(n.g_cost, n.h_cost, n.parent) for n in grid]

    with pytest.raises(BusyError):
        second.start("astar", grid.node(0, 5), grid.node(5, 0))

    assert [(n.g_cost, n.h_cost, n.parent) for n in grid] == before
    assert second.state is SearchState.IDLE
    assert first.run() is SearchState.FOUND
    assert first.engine.path[-1] == (5, 5)
    assert path_cost(first.engine.path) == 70


def test_preempt_with_bad_delay_keeps_active_run(controller_factory):
    ctrl = controller_factory()
    engine = ctrl.start("astar", *endpoints(ctrl))
    with pytest.raises(ValueError):
        ctrl.start("greedy", *endpoints(ctrl), tick_delay="warp", preempt=True)
    assert ctrl.engine is engine
    assert ctrl.state is SearchState.RUNNING
    assert ctrl.grid.busy


def test_rerun_on_same_grid_is_identical(controller_factory):
    ctrl = controller_factory(walls=[(2, 1), (2, 2), (2, 3)])
    s, e = endpoints(ctrl, (0, 2), (4, 2))
    ctrl.start("astar", s, e)
    ctrl.run()
    first_path = list(ctrl.engine.path)

    ctrl.start("astar", s, e)
    assert ctrl.run() is SearchState.FOUND
    assert ctrl.engine.path == first_path
    assert path_cost(ctrl.engine.path) == path_cost(first_path)


def test_cell_blocked_between_runs_never_opened(controller_factory):
    ctrl = controller_factory()
    s, e = endpoints(ctrl)
    ctrl.start("astar", s, e)
    ctrl.run()
    on_path = ctrl.engine.path[2]
    ctrl.grid.toggle_blocked(ctrl.grid.at(on_path))

    snaps = []
    ctrl.subscribe(snaps.append)
    ctrl.start("astar", s, e)
    assert ctrl.run() is SearchState.FOUND
    assert snaps
    assert all(on_path not in snap.open for snap in snaps)
    assert on_path not in ctrl.engine.path
