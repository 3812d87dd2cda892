"""
Maze Rule Solvers Module
========================

Maze-specific strategies that do not search a frontier: Dead-End Fill
and the wall follower.
"""

import logging
import numpy as np
from collections import deque
from enum import Enum
from scipy.ndimage import convolve
from typing import List

from .base import MazeSolvingError, FailureKind
from .toolkit import FlatGrid, Direction, DIRECTIONS, move
from .uninformed import breadth_first
from ..grid import Grid, Coordinate

logger = logging.getLogger(__name__)

_CROSS_KERNEL = np.array([[0, 1, 0],
                          [1, 0, 1],
                          [0, 1, 0]], dtype=np.int64)


class DeadEndFillSolver:
    """
    Dead-end filling.

    Repeatedly closes every open cell other than start and goal with at
    most one open neighbor until a fixed point, then runs BFS over what
    remains. A cell of degree <= 1 cannot be interior to a simple path, so
    filling it never disconnects start from goal.
    """

    algorithm_name = "Dead-End Fill"

    def search(self, grid: Grid) -> List[Coordinate]:
        fg = FlatGrid(grid)
        if fg.start == fg.goal:
            return [grid.start]

        open_mask = grid.walkable_mask()
        degree = convolve(open_mask.astype(np.int64), _CROSS_KERNEL, mode='constant', cval=0)
        degree = np.where(open_mask, degree, 0).ravel().tolist()
        is_open = open_mask.ravel().tolist()

        if degree[fg.start] == 0:
            raise MazeSolvingError("Starting position is enclosed by walls", FailureKind.TRAPPED)

        filled = self._prune(fg, is_open, degree)
        logger.debug("Dead-End Fill closed %d cells", filled)

        fg.walkable = is_open
        path = breadth_first(fg)
        if path is None:
            raise MazeSolvingError("No path connects start to goal after filling dead ends")
        return path

    @staticmethod
    def _prune(fg: FlatGrid, is_open: List[bool], degree: List[int]) -> int:
        """Close dead ends in place until none remain; returns the number closed"""
        pinned = (fg.start, fg.goal)
        queue = deque(i for i in range(fg.size)
                      if is_open[i] and degree[i] <= 1 and i not in pinned)
        filled = 0

        while queue:
            current = queue.popleft()
            if not is_open[current] or degree[current] > 1:
                continue
            is_open[current] = False
            filled += 1
            # fg.walkable still reflects the unpruned grid, so filter by is_open
            for neighbor in fg.neighbors(current):
                if not is_open[neighbor]:
                    continue
                degree[neighbor] -= 1
                if degree[neighbor] <= 1 and neighbor not in pinned:
                    queue.append(neighbor)
        return filled


class WallSide(Enum):
    LEFT = 'LEFT'
    RIGHT = 'RIGHT'


class WallFollowerSolver:
    """
    Wall follower.

    Local rule at every step: turn toward the followed wall if possible,
    else go forward, else turn away from it, else turn back. Not a
    shortest-path method; bounded by ``width * height * step_multiplier``
    steps.
    """

    def __init__(self, side: WallSide = WallSide.LEFT, step_multiplier: int = 10):
        self.side = WallSide(side)
        self.step_multiplier = step_multiplier

    @property
    def algorithm_name(self) -> str:
        return f"Wall Follower ({self.side.value})"

    def _preferred(self, direction: Direction) -> Direction:
        return direction.left() if self.side == WallSide.LEFT else direction.right()

    def _away(self, direction: Direction) -> Direction:
        return direction.right() if self.side == WallSide.LEFT else direction.left()

    def search(self, grid: Grid) -> List[Coordinate]:
        current = grid.start
        path = [current]
        if current == grid.goal:
            return path

        direction = next((d for d in DIRECTIONS if grid.is_walkable(move(current, d))), None)
        if direction is None:
            raise MazeSolvingError("Starting position is enclosed by walls", FailureKind.TRAPPED)

        max_steps = max(grid.width * grid.height * self.step_multiplier, 1)
        for _ in range(max_steps):
            for candidate in (self._preferred(direction), direction,
                              self._away(direction), direction.opposite()):
                if grid.is_walkable(move(current, candidate)):
                    direction = candidate
                    break
            else:
                raise MazeSolvingError("Solver is trapped and cannot move", FailureKind.TRAPPED)

            current = move(current, direction)
            path.append(current)
            if current == grid.goal:
                logger.debug("%s reached goal in %d steps", self.algorithm_name, len(path) - 1)
                return path

        raise MazeSolvingError(
            f"{self.algorithm_name} failed to reach the goal within {max_steps} steps",
            FailureKind.BUDGET_EXHAUSTED,
        )
