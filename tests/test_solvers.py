"""Deterministic solver family and the solve() contract"""

import pytest

from maze_nav.config import Config, SearchConfig
from maze_nav.grid import Coordinate
from maze_nav.solvers import (
    AStarSolver,
    BellmanFordSolver,
    BestFirstSolver,
    BFSSolver,
    BidirectionalBFSSolver,
    BidirectionalDijkstraSolver,
    DeadEndFillSolver,
    DFSSolver,
    DijkstraSolver,
    FailureKind,
    IDDFSSolver,
    MazeSolvingError,
    SPFASolver,
    ThetaStarSolver,
    WallFollowerSolver,
    WallSide,
    WeightedAStarSolver,
    has_line_of_sight,
    is_adjacent,
    is_valid_path,
    line_cost,
    path_cost,
    get_solver,
    solve,
)

from conftest import build, same_cell_grid, LOOP_MAZE, WEIGHTED_MAZE


GRID_SOLVERS = [
    BFSSolver, DFSSolver, IDDFSSolver,
    DijkstraSolver, BellmanFordSolver, SPFASolver,
    AStarSolver, WeightedAStarSolver, BestFirstSolver,
    BidirectionalBFSSolver, BidirectionalDijkstraSolver,
    DeadEndFillSolver,
    lambda: WallFollowerSolver(WallSide.LEFT),
    lambda: WallFollowerSolver(WallSide.RIGHT),
]

MIN_COST_SOLVERS = [DijkstraSolver, BellmanFordSolver, SPFASolver,
                    AStarSolver, BidirectionalDijkstraSolver]

MIN_STEP_SOLVERS = [BFSSolver, IDDFSSolver, BidirectionalBFSSolver, DeadEndFillSolver]

ALL_SOLVERS = GRID_SOLVERS + [ThetaStarSolver]


# ==================== Path properties ====================

@pytest.mark.parametrize('make', GRID_SOLVERS)
@pytest.mark.parametrize('rows', [LOOP_MAZE, WEIGHTED_MAZE])
def test_paths_are_valid_and_reach_goal(make, rows):
    grid = build(rows)
    result = solve(make(), grid)
    assert result.path[0] == grid.start
    assert result.path[-1] == grid.goal
    assert is_valid_path(grid, result.path)
    assert result.total_cost == path_cost(grid, result.path)
    assert result.end_time_ns >= result.start_time_ns


@pytest.mark.parametrize('make', MIN_COST_SOLVERS)
def test_minimum_cost_solvers_agree(make, weighted_maze):
    assert solve(make(), weighted_maze).total_cost == 9
    assert solve(make(), build(LOOP_MAZE)).total_cost == 12


@pytest.mark.parametrize('make', MIN_COST_SOLVERS)
def test_minimum_cost_avoids_expensive_cell(make, weighted_grid):
    result = solve(make(), weighted_grid)
    assert result.total_cost == 4
    assert Coordinate(0, 1) not in result.path


@pytest.mark.parametrize('make', MIN_STEP_SOLVERS)
def test_fewest_step_solvers(make, weighted_grid, loop_grid):
    # BFS-style searches ignore weights: the 3-cell route through the 9
    assert solve(make(), weighted_grid).length == 3
    assert solve(make(), loop_grid).length == 13


def test_weighted_astar_cost_is_bounded(weighted_maze, loop_grid):
    for grid in (weighted_maze, loop_grid):
        optimal = solve(DijkstraSolver(), grid).total_cost
        weighted = solve(WeightedAStarSolver(1.5), grid).total_cost
        assert optimal <= weighted <= 1.5 * optimal


def test_weighted_astar_rejects_small_weight():
    with pytest.raises(ValueError):
        WeightedAStarSolver(0.5)


@pytest.mark.parametrize('make', ALL_SOLVERS)
def test_start_equals_goal(make):
    grid = same_cell_grid()
    result = solve(make(), grid)
    assert result.path == [grid.start]
    assert result.total_cost == 0


@pytest.mark.parametrize('make', [
    BFSSolver, DFSSolver, IDDFSSolver, DijkstraSolver, BellmanFordSolver,
    SPFASolver, AStarSolver, WeightedAStarSolver, BestFirstSolver,
    BidirectionalBFSSolver, BidirectionalDijkstraSolver, ThetaStarSolver,
])
def test_unreachable_goal_raises_no_path(make, blocked_grid):
    with pytest.raises(MazeSolvingError) as info:
        solve(make(), blocked_grid)
    assert info.value.kind == FailureKind.NO_PATH


@pytest.mark.parametrize('make', [DeadEndFillSolver, WallFollowerSolver])
def test_enclosed_start_is_trapped(make, enclosed_grid):
    with pytest.raises(MazeSolvingError) as info:
        solve(make(), enclosed_grid)
    assert info.value.kind == FailureKind.TRAPPED


def test_solve_rejects_missing_grid():
    with pytest.raises(TypeError):
        solve(BFSSolver(), None)


# ==================== Per-solver behaviour ====================

def test_dfs_path_need_not_be_shortest(open_grid):
    path = DFSSolver().search(open_grid)
    assert path[-1] == open_grid.goal
    assert len(path) >= 5


def test_iddfs_budget_exhausted(loop_grid):
    with pytest.raises(MazeSolvingError) as info:
        IDDFSSolver(max_expansions=5).search(loop_grid)
    assert info.value.kind == FailureKind.BUDGET_EXHAUSTED


def test_iddfs_keeps_no_per_search_state(loop_grid, open_grid):
    solver = IDDFSSolver(max_expansions=2_000_000)
    first = solver.search(loop_grid)
    solver.search(open_grid)
    assert solver.search(loop_grid) == first
    assert vars(solver) == {'max_expansions': 2_000_000}


def test_dead_end_fill_leaves_only_corridors(loop_grid):
    path = DeadEndFillSolver().search(loop_grid)
    assert len(path) == 13
    assert is_valid_path(loop_grid, path)


def test_dead_end_fill_enclosed_start(blocked_grid):
    with pytest.raises(MazeSolvingError) as info:
        DeadEndFillSolver().search(blocked_grid)
    assert info.value.kind == FailureKind.TRAPPED


def test_dead_end_fill_disconnected_goal():
    grid = build(["S.#G"])
    with pytest.raises(MazeSolvingError) as info:
        DeadEndFillSolver().search(grid)
    assert info.value.kind == FailureKind.NO_PATH


def test_wall_followers_reach_goal_on_loops(loop_grid):
    left = WallFollowerSolver(WallSide.LEFT).search(loop_grid)
    right = WallFollowerSolver(WallSide.RIGHT).search(loop_grid)
    assert left[-1] == right[-1] == loop_grid.goal
    assert WallFollowerSolver(WallSide.LEFT).algorithm_name == "Wall Follower (LEFT)"
    assert WallFollowerSolver(WallSide.RIGHT).algorithm_name == "Wall Follower (RIGHT)"


def test_wall_follower_gives_up_on_unreachable_goal():
    grid = build([
        "S..#G",
        "...#.",
    ])
    with pytest.raises(MazeSolvingError) as info:
        WallFollowerSolver(step_multiplier=1).search(grid)
    assert info.value.kind == FailureKind.BUDGET_EXHAUSTED


def test_theta_star_returns_waypoints(open_grid):
    path = ThetaStarSolver().search(open_grid)
    assert path[0] == open_grid.start
    assert path[-1] == open_grid.goal
    assert len(path) < 5
    assert not all(is_adjacent(path[i], path[i + 1]) for i in range(len(path) - 1))


def test_theta_star_follows_corridors(loop_grid):
    path = ThetaStarSolver().search(loop_grid)
    assert path[0] == loop_grid.start and path[-1] == loop_grid.goal
    assert all(loop_grid.is_walkable(p) for p in path)


# ==================== Line of sight ====================

def test_line_of_sight_blocked_by_sampled_wall():
    grid = build(["S..", ".#.", "..G"])
    assert not has_line_of_sight(grid, (0, 0), (2, 2))
    assert has_line_of_sight(grid, (0, 0), (0, 2))


def test_line_of_sight_misses_corner_walls():
    # The line (0,0)->(2,1) crosses the corner of the wall at (1,0) but only (1,1) is sampled
    grid = build(["S..", "#..", "..G"])
    assert has_line_of_sight(grid, (0, 0), (2, 1))


def test_line_cost_counts_cells_after_origin(weighted_grid):
    assert line_cost(weighted_grid, (0, 0), (0, 0)) == 0
    assert line_cost(weighted_grid, (0, 0), (0, 2)) == 10
    assert line_cost(weighted_grid, (1, 0), (1, 2)) == 2


def test_search_config_defaults_used_by_registry():
    config = Config(search=SearchConfig(weighted_astar_weight=2.0))
    assert get_solver('weighted-astar', config).weight == 2.0
