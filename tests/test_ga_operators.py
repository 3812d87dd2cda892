"""GA fitness, operators and population"""

import math

import numpy as np
import pytest

from maze_nav.config import FitnessConfig, GAConfig
from maze_nav.optimization import (
    FitnessCalculator,
    GAIndividual,
    GeneticOperators,
    PathChromosome,
    Population,
    PopulationInitializer,
)


def individual(grid, path, fitness):
    return GAIndividual(PathChromosome(path, grid), fitness)


# ==================== Fitness ====================

def test_empty_path_scores_negative_infinity(open_grid):
    assert FitnessCalculator(open_grid)([]) == -math.inf


def test_goal_paths_dominate(loop_grid):
    fitness = FitnessCalculator(loop_grid)
    goal_path = [(1, 1), (1, 2), (1, 3), (1, 4), (1, 5), (1, 6), (1, 7),
                 (2, 7), (3, 7), (4, 7), (5, 7), (6, 7), (7, 7)]
    near_path = goal_path[:-1]
    assert fitness(goal_path) == pytest.approx(1_000_000 - 12 * 0.1)
    assert fitness(goal_path) > fitness(near_path)
    assert fitness.evaluations == 3


def test_progress_toward_goal_scores_higher(loop_grid):
    fitness = FitnessCalculator(loop_grid)
    far = [(1, 1), (1, 2)]
    closer = [(1, 1), (1, 2), (1, 3), (1, 4), (1, 5), (1, 6), (1, 7), (2, 7), (3, 7)]
    assert fitness(closer) > fitness(far)


def test_collision_penalty(open_grid):
    fitness = FitnessCalculator(open_grid)
    assert fitness.collision_penalty([(0, 0), (0, 1)]) == 0
    assert fitness.collision_penalty([(0, 0), (5, 5)]) == 1000
    assert fitness.collision_penalty([(0, 0), (1, 1)]) == 500
    assert fitness([(0, 0), (1, 1)]) < fitness([(0, 0), (0, 1), (1, 1)])


def test_invalid_cells_cost_outside_step(blocked_grid):
    fitness = FitnessCalculator(blocked_grid, FitnessConfig(outside_step_cost=1000))
    assert fitness.path_cost([(0, 0), (0, 1), (0, 2)]) == 1001


# ==================== Operators ====================

def test_tournament_select(open_grid):
    rng = np.random.default_rng(0)
    ops = GeneticOperators(rng, GAConfig(tournament_k=200))
    population = [individual(open_grid, [(0, 0)], f) for f in (1.0, 5.0, 3.0)]
    assert ops.tournament_select(population).fitness == 5.0
    with pytest.raises(ValueError):
        ops.tournament_select([])


def test_crossover_at_shared_cell(loop_grid):
    ops = GeneticOperators(np.random.default_rng(0), GAConfig(extend_min=0, extend_factor=0))
    p1 = PathChromosome([(1, 1), (1, 2), (1, 3), (2, 3), (3, 3)], loop_grid, ops.config)
    p2 = PathChromosome([(1, 1), (2, 1), (3, 1)], loop_grid, ops.config)
    c1, c2 = ops.crossover(p1, p2)
    # First shared gene is the start: the children swap whole bodies
    assert c1 == p2
    assert c2 == p1


def test_crossover_children_are_valid(loop_grid):
    rng = np.random.default_rng(3)
    ops = GeneticOperators(rng)
    init = PopulationInitializer(rng)
    parents = init.initialize(loop_grid, 6)
    for a, b in zip(parents, parents[1:]):
        for child in ops.crossover(a, b):
            assert child.is_valid()


def test_average_pads_shorter_parent():
    averaged = GeneticOperators._average([(0, 0), (2, 2), (4, 4)], [(2, 2)])
    assert averaged == [(1, 1), (2, 2), (3, 3)]


@pytest.mark.parametrize('operator', ['perturb', 'smooth', 'regrow', 'mutate'])
def test_mutations_keep_paths_valid(operator, loop_grid):
    rng = np.random.default_rng(11)
    ops = GeneticOperators(rng)
    base = PathChromosome([(1, 1)], loop_grid).extend_toward_goal()
    for _ in range(20):
        mutated = getattr(ops, operator)(base)
        assert mutated.is_valid()


def test_short_paths_are_not_mutated(open_grid):
    ops = GeneticOperators(np.random.default_rng(0))
    single = PathChromosome([(0, 0)], open_grid)
    assert ops.perturb(single) is single
    assert ops.smooth(single) is single
    assert ops.regrow(single) is single


def test_mutate_rate_zero_is_identity(loop_grid):
    config = GAConfig(perturbation_rate=0, smoothing_rate=0, regrowth_rate=0)
    ops = GeneticOperators(np.random.default_rng(0), config)
    base = PathChromosome([(1, 1), (1, 2)], loop_grid)
    assert ops.mutate(base) is base


# ==================== Population ====================

def test_population_sorting_and_elite(open_grid):
    population = Population(individual(open_grid, [(0, 0)], f) for f in range(20))
    assert population.best().fitness == 19
    elite = population.elite(0.1)
    assert [ind.fitness for ind in elite] == [19, 18]
    assert population[0].fitness == 19
    assert len(Population([individual(open_grid, [(0, 0)], 1.0)]).elite(0.05)) == 1


def test_population_fitness_stats(open_grid):
    population = Population([individual(open_grid, [(0, 0)], f)
                             for f in (2.0, 4.0, -math.inf)])
    stats = population.fitness_stats()
    assert stats['best'] == 4.0
    assert stats['mean'] == 3.0
    with pytest.raises(ValueError):
        Population().best()


def test_individual_copy(open_grid):
    ind = individual(open_grid, [(0, 0), (0, 1)], 7.0)
    clone = ind.copy()
    clone.fitness = 1.0
    assert ind.fitness == 7.0
    assert clone.chromosome is ind.chromosome
    assert not ind.reaches_goal()


def test_initializer_builds_valid_walks(loop_grid):
    chromosomes = PopulationInitializer(np.random.default_rng(1)).initialize(loop_grid, 11)
    assert len(chromosomes) == 11
    for c in chromosomes:
        assert c.is_valid()
        assert len(c) <= 2 * 12 + 1


def test_initializer_is_deterministic(loop_grid):
    a = PopulationInitializer(np.random.default_rng(5)).initialize(loop_grid, 8)
    b = PopulationInitializer(np.random.default_rng(5)).initialize(loop_grid, 8)
    assert a == b
