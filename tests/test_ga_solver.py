"""Genetic algorithm solver: termination, result policy and persistence"""

import logging

import numpy as np
import pytest

from maze_nav.config import GAConfig
from maze_nav.grid import Coordinate
from maze_nav.optimization import (
    FitnessCalculator,
    GAState,
    GeneticAlgorithmSolver,
    GeneticOperators,
    PopulationInitializer,
)
from maze_nav.persistence import CheckpointManager, SolutionCache
from maze_nav.solvers import FailureKind, MazeSolvingError, is_valid_path, solve

from conftest import build, same_cell_grid, small_ga_config, LOOP_MAZE


def test_reaches_goal_on_open_grid(open_grid):
    config = small_ga_config()
    solver = GeneticAlgorithmSolver(config, seed=1)
    result = solve(solver, open_grid)
    assert result.path[-1] == open_grid.goal
    assert is_valid_path(open_grid, result.path)

    ga = solver.last_result
    assert ga.reached_goal
    assert ga.state == GAState.TERMINATED_SUCCESS
    assert solver.state == GAState.TERMINATED_SUCCESS
    assert ga.generations_run == len(ga.fitness_history) >= 1
    assert not ga.cache_hit and not ga.resumed


def test_same_seed_same_result(loop_grid):
    config = small_ga_config()
    a = GeneticAlgorithmSolver(config, seed=42).run(loop_grid)
    b = GeneticAlgorithmSolver(config, seed=42).run(build(LOOP_MAZE, 'loops'))
    assert a.best_path == b.best_path
    assert a.fitness_history == b.fitness_history


def test_repeated_runs_on_one_solver_are_reproducible(loop_grid):
    solver = GeneticAlgorithmSolver(small_ga_config(), seed=9)
    first = solver.run(loop_grid)
    second = solver.run(loop_grid)
    assert first.best_path == second.best_path


def test_start_equals_goal():
    grid = same_cell_grid()
    result = GeneticAlgorithmSolver(small_ga_config(), seed=0).run(grid)
    assert result.best_path == [grid.start]
    assert result.reached_goal


def test_unreachable_goal_is_exhausted(blocked_grid):
    solver = GeneticAlgorithmSolver(small_ga_config(generations=4), seed=0)
    with pytest.raises(MazeSolvingError) as info:
        solver.search(blocked_grid)
    assert info.value.kind == FailureKind.GA_EXHAUSTED
    assert solver.last_result.state == GAState.TERMINATED_EXHAUSTED
    assert not solver.last_result.reached_goal


def test_accept_partial_returns_best_path(blocked_grid):
    solver = GeneticAlgorithmSolver(small_ga_config(generations=4, accept_partial=True), seed=0)
    path = solver.search(blocked_grid)
    assert path == [blocked_grid.start]


def test_stagnation_stops_early(blocked_grid):
    solver = GeneticAlgorithmSolver(small_ga_config(generations=50, stagnation_limit=3), seed=0)
    result = solver.run(blocked_grid)
    assert result.generations_run == 4


def test_requires_grid():
    with pytest.raises(TypeError):
        GeneticAlgorithmSolver(small_ga_config()).run(None)


def test_invalid_ga_config_rejected():
    with pytest.raises(ValueError):
        GeneticAlgorithmSolver(ga_config=GAConfig(pop_size=5))


# ==================== Breeding ====================

def breeding_setup(grid, config, seed=3):
    solver = GeneticAlgorithmSolver(config, seed=seed)
    rng = np.random.default_rng(seed)
    fitness = FitnessCalculator(grid, config.fitness)
    population, _, _ = solver._initial_population(grid, rng, fitness, False)
    operators = GeneticOperators(rng, config.ga)
    initializer = PopulationInitializer(rng, config.ga)
    return solver, population, operators, initializer, fitness


def test_elite_carried_over_unchanged(loop_grid):
    config = small_ga_config(elite_frac=0.25)
    solver, population, operators, initializer, fitness = breeding_setup(loop_grid, config)
    elite = population.elite(0.25)
    assert len(elite) == 3

    offspring = solver._breed(loop_grid, population, operators, initializer, fitness)
    assert len(offspring) == config.ga.pop_size
    carried = [(list(ind.path), ind.fitness) for ind in offspring.individuals[:3]]
    assert carried == [(list(ind.path), ind.fitness) for ind in elite]


def test_spent_budget_fills_with_fresh_chromosomes(loop_grid, caplog):
    caplog.set_level(logging.DEBUG, logger="maze_nav.optimization.ga.solver")
    config = small_ga_config(max_offspring_attempts=0)
    solver, population, operators, initializer, fitness = breeding_setup(loop_grid, config)

    offspring = solver._breed(loop_grid, population, operators, initializer, fitness)
    assert len(offspring) == config.ga.pop_size
    assert all(ind.path[0] == loop_grid.start for ind in offspring)
    assert all(is_valid_path(loop_grid, ind.path) for ind in offspring)
    assert "breeding budget spent" in caplog.text


def test_start_only_offspring_trigger_fresh_chromosomes(blocked_grid, caplog):
    caplog.set_level(logging.DEBUG, logger="maze_nav.optimization.ga.solver")
    config = small_ga_config(max_empty_offspring=0)
    solver, population, operators, initializer, fitness = breeding_setup(blocked_grid, config)

    calls = []
    crossover = operators.crossover

    def counting_crossover(a, b):
        calls.append((a, b))
        return crossover(a, b)

    operators.crossover = counting_crossover
    offspring = solver._breed(blocked_grid, population, operators, initializer, fitness)
    assert len(offspring) == config.ga.pop_size
    assert len(calls) == 1
    assert "breeding budget spent" in caplog.text


def test_result_to_dict(open_grid):
    result = GeneticAlgorithmSolver(small_ga_config(), seed=3).run(open_grid)
    d = result.to_dict()
    assert d['state'] == 'terminated_success'
    assert d['best_path'][0] == [0, 0]


# ==================== Persistence ====================

def test_cached_solution_is_used(tmp_config, loop_grid):
    path = [(1, 1), (1, 2), (1, 3), (1, 4), (1, 5), (1, 6), (1, 7),
            (2, 7), (3, 7), (4, 7), (5, 7), (6, 7), (7, 7)]
    cache = SolutionCache(tmp_config.persistence.cache_dir)
    assert cache.save(loop_grid.name, path)

    result = GeneticAlgorithmSolver(tmp_config, seed=0).run(loop_grid)
    assert result.cache_hit
    assert result.best_path == path
    assert result.generations_run == 0


def test_invalid_cached_solution_is_ignored(tmp_config, loop_grid):
    cache = SolutionCache(tmp_config.persistence.cache_dir)
    # Walkable cells, but with a gap and stopping short of the goal
    cache.save(loop_grid.name, [(1, 1), (1, 3), (1, 4)])
    result = GeneticAlgorithmSolver(tmp_config, seed=0).run(loop_grid)
    assert not result.cache_hit


def test_success_writes_cache(tmp_config, open_grid):
    result = GeneticAlgorithmSolver(tmp_config, seed=0).run(open_grid)
    assert result.reached_goal
    cached = SolutionCache(tmp_config.persistence.cache_dir).load(open_grid)
    assert cached == result.best_path

    again = GeneticAlgorithmSolver(tmp_config, seed=1).run(open_grid)
    assert again.cache_hit


def test_resumes_from_checkpoint(tmp_config, loop_grid):
    checkpoints = CheckpointManager(tmp_config.persistence.cache_dir)
    checkpoints.save(loop_grid.name, 30, [
        ([(1, 1), (1, 2), (1, 3)], 5.0),
        ([(1, 1), (2, 1), (3, 1)], 4.0),
        ([(5, 5), (9, 9)], float('-inf')),
    ])
    solver = GeneticAlgorithmSolver(tmp_config, seed=0)
    result = solver.run(loop_grid)
    assert result.resumed
    assert is_valid_path(loop_grid, result.best_path)


def test_checkpoints_written_during_run(tmp_config, blocked_grid):
    tmp_config.ga.checkpoint_interval = 1
    result = GeneticAlgorithmSolver(tmp_config, seed=0).run(blocked_grid)
    assert result.generations_run == 6

    data = CheckpointManager(tmp_config.persistence.cache_dir).load(blocked_grid.name)
    assert data is not None
    # Generation 5 stops on stagnation before its checkpoint
    assert data.generation == 4
    assert data.population_size == tmp_config.ga.pop_size

    again = GeneticAlgorithmSolver(tmp_config, seed=0).run(blocked_grid)
    assert again.resumed


def test_cache_disabled_ignores_files(tmp_config, loop_grid):
    tmp_config.ga.use_cache = False
    cache = SolutionCache(tmp_config.persistence.cache_dir)
    goal_path = [Coordinate(1, c) for c in range(1, 8)] + [Coordinate(r, 7) for r in range(2, 8)]
    cache.save(loop_grid.name, goal_path)
    result = GeneticAlgorithmSolver(tmp_config, seed=0).run(loop_grid)
    assert not result.cache_hit
    assert not result.resumed
