"""
Path Metrics Module
===================

Path statistics and run outcome classification.
"""

import numpy as np
from dataclasses import dataclass, asdict
from typing import Dict, List, Optional, Tuple, Sequence

from ..grid import Grid
from ..solvers.base import SolverResult, MazeSolvingError, FailureKind
from ..solvers.toolkit import is_valid_path


@dataclass
class PathMetrics:
    """
    Metrics for a solver path.

    Tracks:
    - Length and step-cost total
    - Unique cells and revisits
    - Direction changes (turns)
    - Moves that increase the Manhattan distance to the goal
    """
    length: int = 0
    total_cost: int = 0
    unique_cells: int = 0
    revisits: int = 0
    turns: int = 0
    backtrack_steps: int = 0
    reached_goal: bool = False
    valid: bool = False

    @property
    def backtrack_ratio(self) -> float:
        """Fraction of moves that step away from the goal"""
        moves = self.length - 1
        return self.backtrack_steps / moves if moves > 0 else 0.0

    def to_dict(self) -> Dict:
        d = asdict(self)
        d['backtrack_ratio'] = self.backtrack_ratio
        return d


def compute_path_metrics(grid: Grid, path: Sequence[Tuple[int, int]]) -> PathMetrics:
    """
    Compute metrics for a path.

    Cells that are off-grid or walls contribute nothing to the cost.
    Consecutive waypoints need not be adjacent (Theta* paths); a turn is
    any change in the sign pattern of the step direction.

    Args:
        grid: Grid the path runs on
        path: Start-first coordinate sequence

    Returns:
        PathMetrics object
    """
    if not path:
        return PathMetrics()

    cells = np.asarray(path, dtype=np.int64).reshape(-1, 2)
    unique = len({tuple(p) for p in cells.tolist()})

    steps = np.sign(np.diff(cells, axis=0))
    turns = int(np.any(steps[1:] != steps[:-1], axis=1).sum()) if len(steps) > 1 else 0

    goal = np.asarray(grid.goal)
    distances = np.abs(cells - goal).sum(axis=1)
    backtrack = int((np.diff(distances) > 0).sum())

    total = sum(grid.step_cost(p) for p in path if grid.is_walkable(p))

    return PathMetrics(
        length=len(path),
        total_cost=int(total),
        unique_cells=unique,
        revisits=len(path) - unique,
        turns=turns,
        backtrack_steps=backtrack,
        reached_goal=tuple(path[-1]) == tuple(grid.goal),
        valid=is_valid_path(grid, path),
    )


class RunStatus:
    """Enumeration of run status types"""
    SUCCESS = 'success'
    PARTIAL = 'partial'
    NO_PATH = 'no_path'
    TRAPPED = 'trapped'
    BUDGET_EXHAUSTED = 'budget_exhausted'
    GA_EXHAUSTED = 'ga_exhausted'
    ERROR = 'error'


_FAILURE_STATUS = {
    FailureKind.NO_PATH: RunStatus.NO_PATH,
    FailureKind.TRAPPED: RunStatus.TRAPPED,
    FailureKind.BUDGET_EXHAUSTED: RunStatus.BUDGET_EXHAUSTED,
    FailureKind.GA_EXHAUSTED: RunStatus.GA_EXHAUSTED,
}


class RunClassifier:
    """
    Classifies solver run outcomes.

    Categories:
    - success: path reached the goal
    - partial: a path was returned but stops short of the goal
    - no_path / trapped / budget_exhausted / ga_exhausted: MazeSolvingError kinds
    - error: any other exception
    """

    def classify(self,
                 grid: Grid,
                 result: Optional[SolverResult] = None,
                 error: Optional[BaseException] = None) -> Tuple[str, Optional[str]]:
        """
        Classify run outcome.

        Args:
            grid: Grid the run was made on
            result: Result of a completed solve
            error: Exception raised by a failed solve

        Returns:
            Tuple of (status, failure message or None)
        """
        if error is not None:
            if isinstance(error, MazeSolvingError):
                return _FAILURE_STATUS[error.kind], str(error)
            return RunStatus.ERROR, f"{type(error).__name__}: {error}"

        if result is None or not result.path:
            return RunStatus.ERROR, 'no result'

        if result.reaches(grid.goal):
            return RunStatus.SUCCESS, None
        return RunStatus.PARTIAL, 'path ends before the goal'

    @staticmethod
    def success_rate(statuses: List[str]) -> float:
        if not statuses:
            return 0.0
        return sum(s == RunStatus.SUCCESS for s in statuses) / len(statuses)
