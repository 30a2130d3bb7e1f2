import pytest

from grid_pathfinder.core.errors import BusyError
from grid_pathfinder.core.grid import Grid


def test_neighbor_counts_corner_edge_interior():
    grid = Grid((3, 3))
    assert len(grid.neighbors(grid.node(0, 0))) == 3
    assert len(grid.neighbors(grid.node(2, 2))) == 3
    assert len(grid.neighbors(grid.node(1, 0))) == 5
    assert len(grid.neighbors(grid.node(0, 1))) == 5
    assert len(grid.neighbors(grid.node(1, 1))) == 8


def test_neighbors_ordered_by_x_then_y():
    grid = Grid((4, 4))
    positions = [n.pos for n in grid.neighbors(grid.node(1, 1))]
    assert positions == [
        (0, 0), (0, 1), (0, 2),
        (1, 0), (1, 2),
        (2, 0), (2, 1), (2, 2),
    ]


def test_in_range_and_node_lookup():
    grid = Grid((4, 2))
    assert grid.in_range(3, 1)
    assert not grid.in_range(4, 0)
    assert not grid.in_range(0, -1)
    assert grid.node(3, 1).pos == (3, 1)
    assert grid.at((2, 0)) is grid.node(2, 0)
    with pytest.raises(IndexError):
        grid.node(0, 2)
    assert grid.cell_count == len(grid) == 8


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        Grid((0, 5))


def test_toggle_and_clear_walls():
    grid = Grid((3, 3))
    node = grid.node(1, 1)
    assert grid.toggle_blocked(node) is True
    assert grid.is_blocked(node)
    assert grid.walls == [(1, 1)]
    assert grid.toggle_blocked(node) is False
    grid.set_blocked(grid.node(0, 2), True)
    grid.set_blocked(grid.node(2, 0), True)
    assert grid.clear_walls() == 2
    assert grid.walls == []


def test_mutation_rejected_while_owned():
    grid = Grid((3, 3))
    owner = object()
    grid.acquire(owner)
    assert grid.busy
    with pytest.raises(BusyError):
        grid.toggle_blocked(grid.node(0, 0))
    with pytest.raises(BusyError):
        grid.clear_walls()
    with pytest.raises(BusyError):
        grid.regenerate()
    with pytest.raises(BusyError):
        grid.acquire(object())
    assert not grid.node(0, 0).blocked

    grid.release(object())  # not the owner, ignored
    assert grid.busy
    grid.release(owner)
    assert not grid.busy
    grid.toggle_blocked(grid.node(0, 0))
    assert grid.node(0, 0).blocked


def test_regenerate_rebuilds_nodes():
    grid = Grid((3, 3))
    old = grid.node(1, 1)
    grid.toggle_blocked(old)
    grid.regenerate((5, 4))
    assert grid.size == (5, 4)
    assert grid.walls == []
    assert grid.node(1, 1) is not old
