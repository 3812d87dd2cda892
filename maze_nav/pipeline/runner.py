"""
Pipeline Runner Module
======================

Batch profiling of solvers over mazes, and repeated GA training runs on
one maze.
"""

import json
import logging
import numpy as np
from dataclasses import dataclass, field, asdict, replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..config import Config
from ..grid import Grid, MazeStore
from ..metrics import RunClassifier, RunStatus
from ..optimization.ga import GeneticAlgorithmSolver
from ..persistence import SolutionCache
from ..solvers import Solver, MazeSolvingError, solve, available_solvers, get_solver

logger = logging.getLogger(__name__)


@dataclass
class ProfileRecord:
    """Result of one (solver, maze) run"""
    algorithm: str
    maze: str
    status: str
    cost: Optional[int] = None
    length: Optional[int] = None
    time_ms: Optional[float] = None
    reached_goal: bool = False
    error: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status == RunStatus.SUCCESS

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class ProfileReport:
    """All records of a profiling session plus per-algorithm aggregates"""
    algorithms: List[str] = field(default_factory=list)
    mazes: List[str] = field(default_factory=list)
    records: List[ProfileRecord] = field(default_factory=list)
    summary: Dict[str, Dict] = field(default_factory=dict)

    def to_dict(self) -> Dict:
        return asdict(self)

    def save(self, path):
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2, default=str)


class ProfileRunner:
    """
    Runs solvers over mazes and reports cost, length and timing.

    Each (solver, maze) pair is independent: a MazeSolvingError or any
    other exception is recorded as a failed row and the run continues.
    """

    def __init__(self, config: Optional[Config] = None, store: Optional[MazeStore] = None):
        """
        Initialize profile runner.

        Args:
            config: Configuration object (uses default if None)
            store: Maze store (defaults to config.maze.maze_dir)
        """
        self.config = config or Config()
        self.store = store or MazeStore(self.config.maze.maze_dir, self.config.maze.file_glob)
        self.classifier = RunClassifier()

    def select_solvers(self, names: Optional[Sequence[str]] = None) -> List[Solver]:
        """Solvers matching the given names/keys, or all of them"""
        if not names:
            return available_solvers(self.config)
        return [get_solver(name, self.config) for name in names]

    def run_single(self, solver: Solver, grid: Grid) -> ProfileRecord:
        """Profile one solver on one grid"""
        try:
            result = solve(solver, grid)
        except MazeSolvingError as e:
            status, message = self.classifier.classify(grid, error=e)
            logger.info("%s on %s: %s (%s)", solver.algorithm_name, grid.name, status, message)
            return ProfileRecord(solver.algorithm_name, grid.name, status, error=message)
        except Exception as e:
            status, message = self.classifier.classify(grid, error=e)
            logger.warning("%s on %s raised %s", solver.algorithm_name, grid.name, message)
            return ProfileRecord(solver.algorithm_name, grid.name, status, error=message)

        status, message = self.classifier.classify(grid, result=result)
        return ProfileRecord(
            algorithm=solver.algorithm_name,
            maze=grid.name,
            status=status,
            cost=result.total_cost,
            length=result.length,
            time_ms=result.elapsed_ms,
            reached_goal=result.reaches(grid.goal),
            error=message,
        )

    def run(self,
            solvers: Optional[Sequence[str]] = None,
            mazes: Optional[Sequence[str]] = None,
            output_file: Optional[str] = None,
            verbose: bool = True) -> ProfileReport:
        """
        Profile solvers over maze files from the store.

        Args:
            solvers: Solver names or keys (default: all)
            mazes: Maze file names (default: every file in the store)
            output_file: Optional JSON report path
            verbose: Print progress and the results table

        Returns:
            ProfileReport with all records and aggregates
        """
        maze_names = list(mazes) if mazes else self.store.list_mazes()
        grids = []
        for name in maze_names:
            try:
                grids.append(self.store.get(name))
            except (OSError, ValueError) as e:
                logger.error("Skipping maze %s: %s", name, e)
        return self.run_grids(self.select_solvers(solvers), grids, output_file, verbose)

    def run_grids(self,
                  solvers: Sequence[Solver],
                  grids: Sequence[Grid],
                  output_file: Optional[str] = None,
                  verbose: bool = True) -> ProfileReport:
        """Profile already-built solvers over already-loaded grids"""
        report = ProfileReport(
            algorithms=[s.algorithm_name for s in solvers],
            mazes=[g.name for g in grids],
        )

        if verbose:
            print(f"Running {len(solvers)} solver(s) on {len(grids)} maze(s)...")

        for solver in solvers:
            if verbose:
                print(f"\nTesting: {solver.algorithm_name}")
            for grid in grids:
                record = self.run_single(solver, grid)
                report.records.append(record)
                if verbose:
                    mark = "✓" if record.reached_goal else f"✗ {record.error or ''}"
                    print(f"  {grid.name}... {mark}")

        report.summary = self._aggregate(report)

        if output_file:
            report.save(output_file)
            logger.info("Saved profile report to %s", output_file)

        if verbose:
            self.print_table(report)

        return report

    def _aggregate(self, report: ProfileReport) -> Dict[str, Dict]:
        """Per-algorithm success rate and cost/time statistics"""
        summary = {}
        for algorithm in report.algorithms:
            records = [r for r in report.records if r.algorithm == algorithm]
            costs = [r.cost for r in records if r.is_success]
            times = [r.time_ms for r in records if r.time_ms is not None]
            failures: Dict[str, int] = {}
            for r in records:
                if not r.is_success:
                    failures[r.status] = failures.get(r.status, 0) + 1

            n = len(records)
            summary[algorithm] = {
                'success_rate': self.classifier.success_rate([r.status for r in records]),
                'n_success': len(costs),
                'n_total': n,
                'cost_mean': float(np.mean(costs)) if costs else None,
                'cost_std': float(np.std(costs)) if costs else None,
                'time_mean_ms': float(np.mean(times)) if times else None,
                'time_std_ms': float(np.std(times)) if times else None,
                'time_total_ms': float(np.sum(times)) if times else 0.0,
                'failures': failures,
            }
        return summary

    def print_table(self, report: ProfileReport):
        """Print results table and summary"""
        name_w = max([20] + [len(a) for a in report.algorithms])
        maze_w = max([15] + [len(m) for m in report.mazes])

        print("\n" + "=" * 80)
        print("RESULTS")
        print("=" * 80)
        print(f"{'Algorithm':<{name_w}} | {'Maze':<{maze_w}} | {'Cost':>8} | {'Length':>8} | "
              f"{'Time ms':>12} | {'Goal':>6}")
        print("-" * (name_w + maze_w + 55))

        for r in report.records:
            if r.cost is None:
                print(f"{r.algorithm:<{name_w}} | {r.maze:<{maze_w}} | {'ERROR':>8} | {'ERROR':>8} | "
                      f"{'ERROR':>12} | {r.status:>6}")
            else:
                goal = "✓" if r.reached_goal else "✗"
                print(f"{r.algorithm:<{name_w}} | {r.maze:<{maze_w}} | {r.cost:>8d} | {r.length:>8d} | "
                      f"{r.time_ms:>12.3f} | {goal:>6}")

        print("\n" + "=" * 80)
        print("SUMMARY")
        print("=" * 80)
        print(f"{'Algorithm':<{name_w}} {'Success':>10} {'Cost(mean)':>12} {'Time ms(total)':>16}")
        print("-" * (name_w + 40))
        for algorithm in report.algorithms:
            s = report.summary.get(algorithm, {})
            rate = s.get('success_rate', 0) * 100
            cost = s.get('cost_mean')
            cost_str = f"{cost:.1f}" if cost is not None else "N/A"
            print(f"{algorithm:<{name_w}} {rate:>9.1f}% {cost_str:>12} {s.get('time_total_ms', 0.0):>16.3f}")
        print("=" * 80)


@dataclass
class TrainingIteration:
    """One GA training run"""
    iteration: int
    status: str
    cost: Optional[int] = None
    length: Optional[int] = None
    time_ms: Optional[float] = None
    reached_goal: bool = False
    improved: bool = False
    generations: int = 0
    resumed: bool = False


@dataclass
class TrainingReport:
    """Best result over all training iterations"""
    maze: str
    iterations: List[TrainingIteration] = field(default_factory=list)
    best_cost: Optional[int] = None
    best_length: Optional[int] = None
    reached_goal: bool = False

    def to_dict(self) -> Dict:
        return asdict(self)


class TrainingRunner:
    """
    Repeated GA runs on one maze.

    Every iteration builds a fresh solver that resumes from the maze's
    population checkpoint. The best-solution cache is managed here instead
    of by the solver: it is overwritten only when an iteration improves on
    the best goal-reaching cost seen so far.
    """

    DEFAULT_POP_SIZE = 300
    DEFAULT_GENERATIONS = 100

    def __init__(self, config: Optional[Config] = None, store: Optional[MazeStore] = None):
        self.config = config or Config()
        self.store = store or MazeStore(self.config.maze.maze_dir, self.config.maze.file_glob)

    def _make_solver(self, iteration: int, pop_size: int, generations: int) -> GeneticAlgorithmSolver:
        ga_config = replace(self.config.ga, pop_size=pop_size, generations=generations,
                            use_cache=True, accept_partial=True)
        seed = None if self.config.random_seed is None else self.config.random_seed + iteration
        solver = GeneticAlgorithmSolver(self.config, ga_config=ga_config, seed=seed)
        solver.cache = None
        return solver

    def train(self,
              grid: Grid,
              iterations: int = 10,
              pop_size: Optional[int] = None,
              generations: Optional[int] = None,
              verbose: bool = True) -> TrainingReport:
        """
        Train on a grid.

        Args:
            grid: Grid to train on
            iterations: Number of GA runs
            pop_size: Population size per run (default 300)
            generations: Generation cap per run (default 100)
            verbose: Print per-iteration progress

        Returns:
            TrainingReport with per-iteration rows and the best result
        """
        if iterations < 1:
            raise ValueError("iterations must be at least 1")
        pop_size = pop_size or self.DEFAULT_POP_SIZE
        generations = generations or self.DEFAULT_GENERATIONS

        persistence = self.config.persistence
        cache = SolutionCache(persistence.cache_dir, persistence.best_suffix) if persistence.enabled else None
        report = TrainingReport(maze=grid.name)

        if verbose:
            print("=== Genetic Algorithm Training ===")
            print(f"Training on {grid.name} for {iterations} iterations...")

        for iteration in range(1, iterations + 1):
            solver = self._make_solver(iteration, pop_size, generations)
            row = TrainingIteration(iteration=iteration, status=RunStatus.ERROR)
            try:
                result = solve(solver, grid)
            except MazeSolvingError as e:
                logger.info("Training iteration %d on %s failed: %s", iteration, grid.name, e)
                row.status = RunStatus.GA_EXHAUSTED
                report.iterations.append(row)
                continue

            ga_result = solver.last_result
            row.cost = result.total_cost
            row.length = result.length
            row.time_ms = result.elapsed_ms
            row.reached_goal = result.reaches(grid.goal)
            row.status = RunStatus.SUCCESS if row.reached_goal else RunStatus.PARTIAL
            row.generations = ga_result.generations_run if ga_result else 0
            row.resumed = ga_result.resumed if ga_result else False

            if row.reached_goal and (report.best_cost is None
                                     or not report.reached_goal
                                     or row.cost < report.best_cost):
                row.improved = True
                report.best_cost = row.cost
                report.best_length = row.length
                report.reached_goal = True
                if cache is not None:
                    cache.save(grid.name, result.path)
            elif not report.reached_goal and (report.best_cost is None or row.cost < report.best_cost):
                row.improved = True
                report.best_cost = row.cost
                report.best_length = row.length

            report.iterations.append(row)
            if verbose:
                goal = "✓" if row.reached_goal else "✗"
                flag = " (improved)" if row.improved else ""
                print(f"  [{iteration}/{iterations}] cost={row.cost} length={row.length} "
                      f"time={row.time_ms:.1f}ms goal={goal}{flag}")

        if verbose:
            print("\n" + "=" * 80)
            print(f"Best cost: {report.best_cost}  Best length: {report.best_length}  "
                  f"Reached goal: {report.reached_goal}")
            print("=" * 80)
        return report

    def train_maze(self, maze_name: str, iterations: int = 10, **kwargs) -> TrainingReport:
        """Train on a maze file from the store"""
        return self.train(self.store.get(maze_name), iterations=iterations, **kwargs)
