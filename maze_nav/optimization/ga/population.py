"""
Population Module
=================

Fitness-ordered population container and the ramped initializer.
"""

import logging
import numpy as np
from typing import List, Optional, Iterable

from .chromosome import PathChromosome, walkable_neighbors
from .individual import GAIndividual
from ...config import GAConfig
from ...grid import Grid

logger = logging.getLogger(__name__)


class Population:
    """Ordered collection of individuals; replaced wholesale each generation"""

    def __init__(self, individuals: Optional[Iterable[GAIndividual]] = None):
        self.individuals: List[GAIndividual] = list(individuals or [])

    def __len__(self) -> int:
        return len(self.individuals)

    def __iter__(self):
        return iter(self.individuals)

    def __getitem__(self, index) -> GAIndividual:
        return self.individuals[index]

    def add(self, individual: GAIndividual):
        self.individuals.append(individual)

    def sort_by_fitness(self) -> 'Population':
        """Sort in place, fittest first (stable)"""
        self.individuals.sort(key=lambda ind: ind.fitness, reverse=True)
        return self

    def best(self) -> GAIndividual:
        if not self.individuals:
            raise ValueError("Population is empty")
        return max(self.individuals, key=lambda ind: ind.fitness)

    def elite(self, fraction: float) -> List[GAIndividual]:
        """Top ``max(1, int(n * fraction))`` individuals (sorts the population)"""
        self.sort_by_fitness()
        count = max(1, int(len(self.individuals) * fraction))
        return [ind.copy() for ind in self.individuals[:count]]

    def fitness_stats(self) -> dict:
        """Best / mean / std of finite fitness values"""
        values = np.array([ind.fitness for ind in self.individuals], dtype=float)
        finite = values[np.isfinite(values)]
        if finite.size == 0:
            return {'best': float('-inf'), 'mean': float('nan'), 'std': float('nan')}
        return {
            'best': float(finite.max()),
            'mean': float(np.mean(finite)),
            'std': float(np.std(finite)),
        }


class PopulationInitializer:
    """
    Builds generation 0.

    Half of the chromosomes are uniform random walks, the rest are biased
    depth-first walks that step to one of the (up to) three unvisited
    neighbors closest to the goal. Walks are capped at twice the
    start-goal Manhattan distance.
    """

    def __init__(self, rng: np.random.Generator, config: Optional[GAConfig] = None):
        self.rng = rng
        self.config = config or GAConfig()

    def initialize(self, grid: Grid, size: int) -> List[PathChromosome]:
        half = size // 2
        max_length = 2 * (abs(grid.start[0] - grid.goal[0]) + abs(grid.start[1] - grid.goal[1]))

        chromosomes = [self.random_walk(grid, max_length) for _ in range(half)]
        chromosomes.extend(self.biased_walk(grid, max_length) for _ in range(size - half))
        logger.debug("Initialized %d chromosomes (max walk length %d)", size, max_length)
        return chromosomes

    def random_walk(self, grid: Grid, max_length: int) -> PathChromosome:
        current = grid.start
        path = [current]
        for _ in range(max_length):
            if current == grid.goal:
                break
            neighbors = walkable_neighbors(grid, current)
            if not neighbors:
                break
            current = neighbors[int(self.rng.integers(len(neighbors)))]
            path.append(current)
        return PathChromosome(path, grid, self.config)

    def biased_walk(self, grid: Grid, max_length: int) -> PathChromosome:
        goal = grid.goal
        current = grid.start
        path = [current]
        visited = {current}
        for _ in range(max_length):
            if current == goal:
                break
            neighbors = [n for n in walkable_neighbors(grid, current) if n not in visited]
            if not neighbors:
                break
            neighbors.sort(key=lambda n: abs(n[0] - goal[0]) + abs(n[1] - goal[1]))
            current = neighbors[int(self.rng.integers(min(len(neighbors), 3)))]
            path.append(current)
            visited.add(current)
        return PathChromosome(path, grid, self.config)
