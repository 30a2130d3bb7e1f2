from grid_pathfinder.systems.search.engine import SearchState
from grid_pathfinder.utils import observer


def test_print_stats_without_data(capsys):
    observer.print_stats()
    assert capsys.readouterr().out.strip() == "Ticks: --"


def test_record_and_average(capsys):
    observer.record_tick(0.01)
    observer.record_tick(0.03)
    assert observer.average_tick_ms() == 20.0
    observer.print_stats()
    assert "2 ticks, avg 20.0 ms" in capsys.readouterr().out


def test_live_stats_prints_on_record(capsys):
    assert observer.toggle_live_stats() is True
    observer.record_tick(0.005)
    assert "1 ticks" in capsys.readouterr().out
    assert observer.toggle_live_stats() is False


def test_history_is_bounded():
    for _ in range(1500):
        observer.record_tick(0.001)
    assert len(observer._tick_durations) == 1000


def test_tick_observer_installs_once(controller_factory):
    ctrl = controller_factory()
    observer.install_tick_observer(ctrl)
    observer.install_tick_observer(ctrl)
    ctrl.start("astar", ctrl.grid.node(0, 0), ctrl.grid.node(4, 4))
    ctrl.run()
    assert len(observer._tick_durations) == ctrl.engine.tick_count


def test_log_event_destinations():
    log = []
    observer.log_event("x", {"a": 1}, log)
    observer.log_event("y", {"b": 2})
    assert log == [{"type": "x", "a": 1}]
    assert observer._events == [{"type": "y", "b": 2}]


def test_lifecycle_log(controller_factory):
    ctrl = controller_factory()
    log = []
    observer.install_lifecycle_log(ctrl, log)
    ctrl.start("greedy", ctrl.grid.node(0, 0), ctrl.grid.node(4, 4))
    ctrl.run()
    assert [e["to"] for e in log] == [SearchState.RUNNING.value, SearchState.FOUND.value]
    assert log[-1]["algorithm"] == "Greedy Best-First"
    assert log[-1]["ticks"] == ctrl.engine.tick_count
