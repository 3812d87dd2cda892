"""
Solver Contract Module
======================

Uniform ``solve(solver, grid) -> SolverResult`` entry point, the result
record, and the single recoverable domain error.
"""

import logging
import time
from dataclasses import dataclass, asdict
from enum import Enum
from typing import List, Protocol, Dict, Any

from ..grid import Grid, Coordinate

logger = logging.getLogger(__name__)


class FailureKind(Enum):
    """Why a search gave up"""
    NO_PATH = 'no_path'
    TRAPPED = 'trapped'
    BUDGET_EXHAUSTED = 'budget_exhausted'
    GA_EXHAUSTED = 'ga_exhausted'


class MazeSolvingError(Exception):
    """
    Recoverable search failure.

    Callers (profiler, trainer, CLI) catch this, report it, and move on to
    the next algorithm or maze.
    """

    def __init__(self, message: str, kind: FailureKind = FailureKind.NO_PATH):
        super().__init__(message)
        self.kind = kind

    def __repr__(self) -> str:
        return f"MazeSolvingError({self.kind.value}: {self})"


@dataclass(frozen=True)
class SolverResult:
    """
    Result of a successful solve.

    ``path`` includes the start cell, ``total_cost`` sums the step cost of
    every path cell, and times come from ``time.perf_counter_ns``.
    """
    path: List[Coordinate]
    total_cost: int
    start_time_ns: int
    end_time_ns: int

    @property
    def elapsed_ns(self) -> int:
        return self.end_time_ns - self.start_time_ns

    @property
    def elapsed_ms(self) -> float:
        return self.elapsed_ns / 1_000_000.0

    @property
    def length(self) -> int:
        return len(self.path)

    def reaches(self, goal: Coordinate) -> bool:
        return bool(self.path) and self.path[-1] == goal

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['path'] = [list(p) for p in self.path]
        d['elapsed_ms'] = self.elapsed_ms
        return d


class Solver(Protocol):
    """Capability every search strategy implements"""
    algorithm_name: str

    def search(self, grid: Grid) -> List[Coordinate]:
        """Return a start-first path, or raise MazeSolvingError"""
        ...


def path_cost(grid: Grid, path: List[Coordinate]) -> int:
    """Sum of step costs over every path cell (start included)"""
    return sum(grid.step_cost(p) for p in path)


def solve(solver: Solver, grid: Grid) -> SolverResult:
    """
    Run a solver with timing and cost accounting.

    Args:
        solver: Any object implementing ``search(grid)``
        grid: Grid to solve

    Returns:
        SolverResult with the solver's path

    Raises:
        TypeError: If grid is missing
        MazeSolvingError: If the search fails
    """
    if grid is None:
        raise TypeError("grid cannot be None")

    start_ns = time.perf_counter_ns()
    path = solver.search(grid)
    end_ns = time.perf_counter_ns()

    if not path:
        raise MazeSolvingError(f"{solver.algorithm_name} returned an empty path")

    path = [Coordinate(int(p[0]), int(p[1])) for p in path]
    total = path_cost(grid, path)
    logger.debug("%s on %s: length=%d cost=%d time=%.3fms",
                 solver.algorithm_name, grid.name, len(path), total,
                 (end_ns - start_ns) / 1e6)
    return SolverResult(path=path, total_cost=total,
                        start_time_ns=start_ns, end_time_ns=end_ns)
