"""Grid model, maze files and maze generation"""

import numpy as np
import pytest

from maze_nav.config import MazeConfig
from maze_nav.grid import (
    CellType,
    Coordinate,
    Grid,
    MazeFormatError,
    MazeGenerator,
    MazeStore,
    format_maze,
    load_maze,
    parse_maze,
    save_maze,
)
from maze_nav.solvers import BFSSolver, is_valid_path

from conftest import build, WEIGHTED, LOOP_MAZE


# ==================== Grid ====================

def test_start_cell_costs_nothing(open_grid):
    assert open_grid.step_cost(open_grid.start) == 0
    assert open_grid.step_cost((1, 1)) == 1
    assert open_grid.step_cost(open_grid.goal) == 1


def test_weighted_cell_cost(weighted_grid):
    assert weighted_grid.cell_type((0, 1)) == CellType.WEIGHTED
    assert weighted_grid.step_cost((0, 1)) == 9
    assert weighted_grid.is_weighted()


def test_step_cost_rejects_walls_and_out_of_bounds(blocked_grid):
    with pytest.raises(ValueError):
        blocked_grid.step_cost((0, 1))
    with pytest.raises(ValueError):
        blocked_grid.step_cost((5, 5))
    with pytest.raises(ValueError):
        blocked_grid.step_cost((-1, 0))


def test_is_walkable_is_false_outside_grid(open_grid):
    assert open_grid.is_walkable((0, 0))
    assert not open_grid.is_walkable((-1, 0))
    assert not open_grid.is_walkable((0, 3))


def test_arrays_are_read_only(open_grid):
    with pytest.raises(ValueError):
        open_grid.cell_types[0, 0] = CellType.WALL
    with pytest.raises(ValueError):
        open_grid.cost_array()[1, 1] = 5


def test_start_and_goal_must_be_walkable():
    types = np.ones((3, 3), dtype=np.int8)
    types[0, 0] = CellType.WALL
    with pytest.raises(ValueError):
        Grid(types, (0, 0), (2, 2))
    with pytest.raises(ValueError):
        Grid(np.ones((3, 3)), (0, 0), (3, 3))


def test_weighted_cells_need_positive_weights():
    types = np.ones((2, 2), dtype=np.int8)
    types[0, 1] = CellType.WEIGHTED
    with pytest.raises(ValueError):
        Grid(types, (0, 0), (1, 1))
    weights = np.ones((2, 2))
    weights[0, 1] = 0
    with pytest.raises(ValueError):
        Grid(types, (0, 0), (1, 1), weights=weights)


def test_walkable_cells_and_stats(loop_grid):
    cells = loop_grid.walkable_cells()
    assert Coordinate(1, 1) in cells
    assert all(loop_grid.is_walkable(c) for c in cells)
    stats = loop_grid.get_stats()
    assert stats['walkable'] == len(cells)
    assert stats['walkable'] + stats['walls'] == 81


# ==================== Maze text ====================

def test_parse_maze_reads_start_goal_and_weights():
    grid = parse_maze(WEIGHTED, name='w')
    assert grid.shape == (2, 3)
    assert grid.start == (0, 0)
    assert grid.goal == (0, 2)
    assert grid.step_cost((0, 1)) == 9
    assert grid.name == 'w'


def test_parse_maze_ignores_blank_lines_and_accepts_spaces():
    grid = parse_maze(["", "S G", "", "..."])
    assert grid.shape == (2, 3)
    assert grid.cell_type((0, 1)) == CellType.OPEN


@pytest.mark.parametrize('rows', [
    ["S..", ".G"],           # ragged
    ["...", "..G"],          # no start
    ["S.G", "..G"],          # two goals
    ["S?G"],                 # unknown symbol
    ['S"0"G'],               # non-positive weight
    ['S"4G'],                # unterminated weight
    [],                      # empty
])
def test_parse_maze_rejects_malformed_text(rows):
    with pytest.raises(MazeFormatError):
        parse_maze(rows)


def test_format_maze_is_parseable(weighted_maze):
    text = format_maze(weighted_maze)
    again = parse_maze(text.splitlines())
    np.testing.assert_array_equal(again.cell_types, weighted_maze.cell_types)
    np.testing.assert_array_equal(again.cost_array(), weighted_maze.cost_array())


def test_save_and_load_maze(tmp_path, loop_grid):
    target = tmp_path / 'nested' / 'loops.txt'
    save_maze(loop_grid, target)
    grid = load_maze(target)
    assert grid.name == 'loops.txt'
    np.testing.assert_array_equal(grid.cell_types, loop_grid.cell_types)


def test_maze_store_shares_loaded_grids(tmp_path, loop_grid):
    save_maze(loop_grid, tmp_path / 'b.txt')
    save_maze(build(WEIGHTED), tmp_path / 'a.txt')
    (tmp_path / 'bad.txt').write_text("S#\n")

    store = MazeStore(tmp_path)
    assert store.list_mazes() == ['a.txt', 'b.txt', 'bad.txt']
    assert 'b.txt' not in store
    first = store.get('b.txt')
    assert store.get('b.txt') is first
    assert 'b.txt' in store

    assert store.is_valid_maze('a.txt')
    assert not store.is_valid_maze('bad.txt')
    assert not store.is_valid_maze('missing.txt')
    with pytest.raises(FileNotFoundError):
        store.get('missing.txt')

    store.clear()
    assert 'b.txt' not in store


def test_maze_store_missing_directory(tmp_path):
    assert MazeStore(tmp_path / 'nope').list_mazes() == []


# ==================== Generator ====================

def test_generator_is_reproducible():
    a = MazeGenerator(seed=3).generate(15, 17)
    b = MazeGenerator(seed=3).generate(15, 17)
    np.testing.assert_array_equal(a.cell_types, b.cell_types)
    assert a.name == 'random_15x17'


def test_generated_maze_is_solvable():
    grid = MazeGenerator(MazeConfig(extra_links=0), seed=11).generate(21, 21)
    assert grid.start == (1, 1)
    assert grid.goal == (19, 19)
    path = BFSSolver().search(grid)
    assert is_valid_path(grid, path)
    assert path[-1] == grid.goal


def test_generator_even_dimensions_keep_goal_on_lattice():
    grid = MazeGenerator(seed=1).generate(10, 12)
    assert grid.goal == (7, 9)
    assert BFSSolver().search(grid)[-1] == grid.goal


def test_generator_weighted_cells():
    config = MazeConfig(weighted_fraction=0.3, max_weight=5)
    grid = MazeGenerator(config, seed=5).generate(15, 15)
    assert grid.is_weighted()
    costs = grid.cost_array()[grid.cell_types == CellType.WEIGHTED]
    assert costs.min() >= 2 and costs.max() <= 5


def test_generator_rejects_tiny_grids():
    with pytest.raises(ValueError):
        MazeGenerator(seed=0).generate(2, 5)
