"""
GA Individual and Operators Module
===================================

Genetic algorithm individual representation and genetic operators.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import List, Tuple, Optional

from .chromosome import PathChromosome, walkable_neighbors
from ...config import GAConfig
from ...planning import AStarPlanner

logger = logging.getLogger(__name__)


@dataclass
class GAIndividual:
    """
    Individual in GA population.

    Genome:
    - chromosome: PathChromosome (coordinate sequence on a shared grid)

    Fitness:
    - Higher is better (maximization)
    - -inf = empty path / not evaluated
    """
    chromosome: PathChromosome
    fitness: float = float('-inf')

    @property
    def path(self):
        return self.chromosome.path

    def reaches_goal(self) -> bool:
        return self.chromosome.reaches_goal()

    def copy(self) -> 'GAIndividual':
        """Create a copy (chromosomes are immutable and shared)"""
        return GAIndividual(chromosome=self.chromosome, fitness=self.fitness)

    def __repr__(self) -> str:
        return f"GAIndividual(len={len(self.chromosome)}, fitness={self.fitness:.2f})"


class GeneticOperators:
    """
    Genetic operators for path chromosomes.

    Operators:
    - Tournament selection (with replacement)
    - Intersection crossover with positional-average fallback
    - Mutation: perturbation, smoothing, regrowth (disjoint dispatch)

    Every random draw comes from the injected numpy Generator.
    """

    def __init__(self, rng: np.random.Generator, config: Optional[GAConfig] = None):
        """
        Initialize genetic operators.

        Args:
            rng: Random generator shared with the rest of the GA run
            config: GA configuration (rates, caps, tournament size)
        """
        self.rng = rng
        self.config = config or GAConfig()

    # ==================== Selection ====================

    def tournament_select(self, population: List[GAIndividual]) -> GAIndividual:
        """
        Tournament selection.

        Args:
            population: Population to select from

        Returns:
            Fittest of ``tournament_k`` uniformly sampled individuals
        """
        if not population:
            raise ValueError("Cannot select from an empty population")
        best = None
        for _ in range(self.config.tournament_k):
            candidate = population[int(self.rng.integers(len(population)))]
            if best is None or candidate.fitness > best.fitness:
                best = candidate
        return best

    # ==================== Crossover ====================

    def crossover(self,
                  parent1: PathChromosome,
                  parent2: PathChromosome) -> Tuple[PathChromosome, PathChromosome]:
        """
        Intersection crossover.

        Finds the first gene of parent1 that also occurs in parent2 and swaps
        the tails at the matched positions. Without a shared gene, each child
        averages the parents position by position (the shorter parent padded
        with its last gene), keeping its own parent's length. Both children
        are repaired.

        Returns:
            Tuple of two children
        """
        path1, path2 = parent1.path, parent2.path
        if not path1 or not path2:
            return parent1.repair(), parent2.repair()

        index2 = {}
        for j, gene in enumerate(path2):
            index2.setdefault(gene, j)

        for i, gene in enumerate(path1):
            j = index2.get(gene)
            if j is not None:
                child1 = path1[:i] + path2[j:]
                child2 = path2[:j] + path1[i:]
                return parent1.with_path(child1).repair(), parent2.with_path(child2).repair()

        return (parent1.with_path(self._average(path1, path2)).repair(),
                parent2.with_path(self._average(path2, path1)).repair())

    @staticmethod
    def _average(own, other) -> List[Tuple[int, int]]:
        """Positional average over ``own``'s length; ``other`` padded with its last gene"""
        result = []
        for i, (r1, c1) in enumerate(own):
            r2, c2 = other[min(i, len(other) - 1)]
            result.append(((r1 + r2) // 2, (c1 + c2) // 2))
        return result

    # ==================== Mutation ====================

    def mutate(self, chromosome: PathChromosome) -> PathChromosome:
        """
        Apply at most one mutation operator.

        A single draw in [0, 1) selects perturbation, smoothing or regrowth
        by their cumulative rates; the remainder leaves the chromosome
        unchanged.

        Returns:
            Mutated chromosome (repaired), or the input unchanged
        """
        cfg = self.config
        roll = self.rng.random()
        if roll < cfg.perturbation_rate:
            return self.perturb(chromosome)
        if roll < cfg.perturbation_rate + cfg.smoothing_rate:
            return self.smooth(chromosome)
        if roll < cfg.perturbation_rate + cfg.smoothing_rate + cfg.regrowth_rate:
            return self.regrow(chromosome)
        return chromosome

    def perturb(self, chromosome: PathChromosome) -> PathChromosome:
        """Replace one non-head gene with a random walkable neighbor of itself"""
        path = list(chromosome.path)
        if len(path) < 2:
            return chromosome

        index = int(self.rng.integers(1, len(path)))
        neighbors = walkable_neighbors(chromosome.grid, path[index])
        if neighbors:
            path[index] = neighbors[int(self.rng.integers(len(neighbors)))]
        return chromosome.with_path(path).repair()

    def smooth(self, chromosome: PathChromosome) -> PathChromosome:
        """Drop the genes between two random indices joined by a clear straight line"""
        path = chromosome.path
        n = len(path)
        if n < 3:
            return chromosome

        i = int(self.rng.integers(n - 2))
        k = int(self.rng.integers(n - i - 1)) + 2
        if i + k < n and self._axis_line_of_sight(chromosome, path[i], path[i + k]):
            smoothed = path[:i + 1] + path[i + k:]
            return chromosome.with_path(smoothed).repair()
        return chromosome

    def regrow(self, chromosome: PathChromosome) -> PathChromosome:
        """Replace a random segment with a cost-capped A* bridge between its ends"""
        path = chromosome.path
        n = len(path)
        if n < 3:
            return chromosome

        first = int(self.rng.integers(n - 1))
        last = int(self.rng.integers(n - first - 1)) + first + 1

        grid = chromosome.grid
        cap = min(self.config.regrowth_depth_cap, grid.width * grid.height // 4)
        bridge = AStarPlanner(grid, cap).plan(path[first], path[last])
        if not bridge:
            return chromosome

        regrown = path[:first + 1] + tuple(bridge[1:]) + path[last + 1:]
        return chromosome.with_path(regrown).repair()

    @staticmethod
    def _axis_line_of_sight(chromosome: PathChromosome, a, b) -> bool:
        """True if a and b share a row or column and every cell between is walkable"""
        dr, dc = b[0] - a[0], b[1] - a[1]
        if dr and dc:
            return False
        steps = max(abs(dr), abs(dc))
        step_r = (dr > 0) - (dr < 0)
        step_c = (dc > 0) - (dc < 0)
        return all(chromosome.grid.is_walkable((a[0] + s * step_r, a[1] + s * step_c))
                   for s in range(1, steps))
