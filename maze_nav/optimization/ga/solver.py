"""
GA Solver Module
================

Generational genetic algorithm over path chromosomes, with elitism,
stagnation detection, population checkpoints and a best-solution cache.
"""

import logging
import numpy as np
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import List, Tuple, Optional, Dict, Any

from .chromosome import PathChromosome
from .fitness import FitnessCalculator
from .individual import GAIndividual, GeneticOperators
from .population import Population, PopulationInitializer
from ...config import Config, GAConfig
from ...grid import Grid, Coordinate
from ...persistence import SolutionCache, CheckpointManager
from ...solvers.base import MazeSolvingError, FailureKind

logger = logging.getLogger(__name__)


class GAState(Enum):
    """Evolution loop states"""
    INITIALIZING = 'initializing'
    EVALUATING = 'evaluating'
    BREEDING = 'breeding'
    TERMINATED_SUCCESS = 'terminated_success'
    TERMINATED_EXHAUSTED = 'terminated_exhausted'


@dataclass
class GAResult:
    """Result from a GA run"""
    best_path: List[Coordinate]
    best_fitness: float
    generations_run: int = 0
    state: GAState = GAState.TERMINATED_EXHAUSTED
    reached_goal: bool = False
    cache_hit: bool = False
    resumed: bool = False
    fitness_history: List[float] = field(default_factory=list)
    evaluations: int = 0

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['best_path'] = [list(p) for p in self.best_path]
        d['state'] = self.state.value
        return d


class GeneticAlgorithmSolver:
    """
    Genetic algorithm maze solver.

    Each run:
    - returns a cached solution when one exists, is valid and reaches the goal
    - starts from a checkpoint (fitness re-evaluated) or a fresh population
    - per generation: keep the elite, breed the rest by tournament
      selection, crossover, repair, mutation and repair
    - stops when the fittest individual reaches the goal, when the best
      fitness has not improved for ``stagnation_limit`` generations, or
      after ``generations`` generations

    All randomness comes from one numpy Generator seeded at the start of
    every run, so a fixed seed with caching disabled reproduces the same
    result.
    """

    algorithm_name = "Genetic Algorithm"

    def __init__(self,
                 config: Optional[Config] = None,
                 ga_config: Optional[GAConfig] = None,
                 seed: Optional[int] = None,
                 cache: Optional[SolutionCache] = None,
                 checkpoints: Optional[CheckpointManager] = None):
        """
        Initialize GA solver.

        Args:
            config: Main configuration (fitness weights, persistence paths)
            ga_config: GA-specific configuration (defaults to config.ga)
            seed: Random seed (None for OS entropy)
            cache: Best-solution cache (defaults from config.persistence)
            checkpoints: Checkpoint manager (defaults from config.persistence)
        """
        self.config = config or Config()
        self.ga_config = ga_config or self.config.ga
        self.ga_config.validate()
        self.seed = seed

        persistence = self.config.persistence
        if cache is None and persistence.enabled:
            cache = SolutionCache(persistence.cache_dir, persistence.best_suffix)
        if checkpoints is None and persistence.enabled:
            checkpoints = CheckpointManager(persistence.cache_dir, persistence.checkpoint_suffix)
        self.cache = cache
        self.checkpoints = checkpoints

        self.state = GAState.INITIALIZING
        self.last_result: Optional[GAResult] = None

    # ==================== Solver contract ====================

    def search(self, grid: Grid) -> List[Coordinate]:
        """
        Best path found by a GA run.

        Raises:
            MazeSolvingError: (GA_EXHAUSTED) if the best path misses the goal
                and partial results are not accepted
        """
        result = self.run(grid)
        if result.reached_goal or self.ga_config.accept_partial:
            return list(result.best_path)
        raise MazeSolvingError(
            f"Genetic Algorithm did not reach the goal in {result.generations_run} generations "
            f"(best fitness {result.best_fitness:.2f})",
            FailureKind.GA_EXHAUSTED,
        )

    # ==================== Evolution ====================

    def run(self, grid: Grid) -> GAResult:
        """
        Run the evolution loop on a grid.

        Args:
            grid: Grid to solve

        Returns:
            GAResult describing the best individual found
        """
        if grid is None:
            raise TypeError("grid cannot be None")

        ga = self.ga_config
        rng = np.random.default_rng(self.seed)
        fitness = FitnessCalculator(grid, self.config.fitness)
        use_cache = ga.use_cache

        self.state = GAState.INITIALIZING
        if grid.start == grid.goal:
            path = [grid.start]
            return self._finish(GAResult(best_path=path, best_fitness=fitness(path),
                                         state=GAState.TERMINATED_SUCCESS, reached_goal=True))

        if use_cache:
            cached = self._load_cached(grid)
            if cached is not None:
                logger.info("GA on %s: using cached solution of %d cells", grid.name, len(cached))
                return self._finish(GAResult(best_path=cached, best_fitness=fitness(cached),
                                             state=GAState.TERMINATED_SUCCESS,
                                             reached_goal=True, cache_hit=True))

        population, first_generation, resumed = self._initial_population(grid, rng, fitness, use_cache)
        operators = GeneticOperators(rng, ga)
        initializer = PopulationInitializer(rng, ga)

        best: Optional[GAIndividual] = None
        history = []
        stagnation = 0
        winner: Optional[GAIndividual] = None

        for generation in range(first_generation, first_generation + ga.generations):
            if generation > first_generation:
                self.state = GAState.BREEDING
                population = self._breed(grid, population, operators, initializer, fitness)

            self.state = GAState.EVALUATING
            population.sort_by_fitness()
            current = population[0]
            history.append(current.fitness)

            if best is None or current.fitness > best.fitness:
                best = current.copy()
                stagnation = 0
            else:
                stagnation += 1

            logger.debug("GA %s gen %d: best=%.2f len=%d stagnation=%d",
                         grid.name, generation, current.fitness, len(current.chromosome), stagnation)

            winner = next((ind for ind in population if ind.reaches_goal()), None)
            if winner is not None:
                break

            if stagnation >= ga.stagnation_limit:
                logger.debug("GA %s stagnated after %d generations", grid.name, len(history))
                break

            if use_cache and generation % ga.checkpoint_interval == 0:
                self._save_checkpoint(grid, population, generation)

        if winner is not None:
            path = list(winner.path)
            if use_cache and self.cache is not None and len(path) >= ga.min_cached_length:
                self.cache.save(grid.name, path)
            result = GAResult(best_path=path, best_fitness=winner.fitness,
                              generations_run=len(history), state=GAState.TERMINATED_SUCCESS,
                              reached_goal=True, resumed=resumed, fitness_history=history,
                              evaluations=fitness.evaluations)
        else:
            result = GAResult(best_path=list(best.path), best_fitness=best.fitness,
                              generations_run=len(history), state=GAState.TERMINATED_EXHAUSTED,
                              reached_goal=best.reaches_goal(), resumed=resumed,
                              fitness_history=history, evaluations=fitness.evaluations)

        logger.info("GA on %s finished: %s after %d generations (best fitness %.2f, %d cells)",
                    grid.name, result.state.value, result.generations_run,
                    result.best_fitness, len(result.best_path))
        return self._finish(result)

    def _finish(self, result: GAResult) -> GAResult:
        self.state = result.state
        self.last_result = result
        return result

    def _initial_population(self,
                            grid: Grid,
                            rng: np.random.Generator,
                            fitness: FitnessCalculator,
                            use_cache: bool) -> Tuple[Population, int, bool]:
        """Checkpointed population if available, otherwise a fresh one"""
        ga = self.ga_config

        if use_cache and self.checkpoints is not None:
            data = self.checkpoints.load(grid.name)
            if data is not None:
                individuals = []
                for path in data.paths:
                    chromosome = PathChromosome(path, grid, ga).repair()
                    individuals.append(GAIndividual(chromosome, fitness(chromosome.path)))
                population = Population(individuals).sort_by_fitness()
                population.individuals = population.individuals[:ga.pop_size]
                logger.info("GA on %s: resuming from checkpoint at generation %d (%d individuals)",
                            grid.name, data.generation, len(population))
                return population, data.generation + 1, True

        initializer = PopulationInitializer(rng, ga)
        individuals = []
        for chromosome in initializer.initialize(grid, ga.pop_size):
            extended = chromosome.extend_toward_goal()
            individuals.append(GAIndividual(extended, fitness(extended.path)))
        return Population(individuals), 0, False

    def _breed(self,
               grid: Grid,
               population: Population,
               operators: GeneticOperators,
               initializer: PopulationInitializer,
               fitness: FitnessCalculator) -> Population:
        """Next generation: elite carry-over plus repaired, mutated offspring"""
        ga = self.ga_config
        offspring = population.elite(ga.elite_frac)
        budget = ga.max_offspring_attempts * ga.pop_size
        attempts = 0
        stuck = 0

        while len(offspring) < ga.pop_size:
            if attempts >= budget or stuck > ga.max_empty_offspring:
                missing = ga.pop_size - len(offspring)
                logger.debug("GA %s: breeding budget spent, adding %d fresh chromosomes",
                             grid.name, missing)
                for chromosome in initializer.initialize(grid, missing):
                    extended = chromosome.extend_toward_goal()
                    offspring.append(GAIndividual(extended, fitness(extended.path)))
                break

            attempts += 1
            parent1 = operators.tournament_select(population.individuals).chromosome
            parent2 = operators.tournament_select(population.individuals).chromosome

            for child in operators.crossover(parent1, parent2):
                final = operators.mutate(child.repair()).repair()
                if len(final) <= 1:
                    # Collapsed back to the start cell
                    stuck += 1
                    continue
                offspring.append(GAIndividual(final, fitness(final.path)))
                if len(offspring) >= ga.pop_size:
                    break

        return Population(offspring)

    # ==================== Persistence ====================

    def _load_cached(self, grid: Grid) -> Optional[List[Coordinate]]:
        if self.cache is None:
            return None
        cached = self.cache.load(grid)
        if cached is None or len(cached) < self.ga_config.min_cached_length:
            return None
        chromosome = PathChromosome(cached, grid, self.ga_config)
        if not (chromosome.is_valid() and chromosome.reaches_goal()):
            logger.debug("Cached solution for %s is not a complete valid path", grid.name)
            return None
        return cached

    def _save_checkpoint(self, grid: Grid, population: Population, generation: int):
        if self.checkpoints is None:
            return
        self.checkpoints.save(grid.name, generation,
                              [(ind.path, ind.fitness) for ind in population])
