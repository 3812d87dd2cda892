"""
Fitness Module
==============

Shaped fitness for path chromosomes (higher is better).
"""

import math
from typing import Optional, Sequence, Tuple

from ...config import FitnessConfig
from ...grid import Grid


class FitnessCalculator:
    """
    Fitness evaluation for GA paths.

    Paths reaching the goal score ``goal_reward`` minus scaled cost and
    collision terms, which dominates every non-goal score. Other paths
    combine:
    - exponential-decay reward on normalized remaining Manhattan distance
    - exploration bonus on the fraction of unique cells
    - progress bonus on the fractional distance reduction
    - inverse-cost term
    - minus a collision penalty for invalid cells and gaps

    Unrepaired paths (off-grid cells, walls, gaps) are scored without
    raising.
    """

    def __init__(self, grid: Grid, config: Optional[FitnessConfig] = None):
        self.grid = grid
        self.config = config or FitnessConfig()
        self.max_distance = max(grid.width + grid.height, 1)
        self.evaluations = 0

    def __call__(self, path: Sequence[Tuple[int, int]]) -> float:
        return self.evaluate(path)

    def evaluate(self, path: Sequence[Tuple[int, int]]) -> float:
        """
        Score a path.

        Args:
            path: Coordinate sequence (a chromosome or a plain list)

        Returns:
            Fitness, or -inf for an empty path
        """
        path = list(path)
        if not path:
            return -math.inf

        self.evaluations += 1
        cfg = self.config
        goal = self.grid.goal
        distance = _manhattan(path[-1], goal)
        collision = self.collision_penalty(path)
        cost = self.path_cost(path)

        if distance == 0:
            return cfg.goal_reward - cost * cfg.goal_cost_weight - collision * cfg.goal_collision_weight

        normalized = min(distance / self.max_distance, 1.0)
        distance_term = cfg.distance_reward * math.exp(-normalized * cfg.distance_decay)
        exploration = cfg.exploration_bonus * len(set(path)) / len(path)
        progress = self._progress(path)
        cost_term = cfg.cost_reward / (1.0 + cost / cfg.cost_scale)

        return distance_term + exploration + progress + cost_term - collision

    def _progress(self, path) -> float:
        if len(path) < 2:
            return 0.0
        goal = self.grid.goal
        start_distance = _manhattan(path[0], goal)
        if start_distance == 0:
            return 0.0
        ratio = (start_distance - _manhattan(path[-1], goal)) / start_distance
        return self.config.progress_bonus * max(0.0, ratio)

    def collision_penalty(self, path: Sequence[Tuple[int, int]]) -> int:
        """Wall penalty per off-grid or wall cell, gap penalty per non-adjacent step"""
        cfg = self.config
        penalty = 0
        for i, cell in enumerate(path):
            if not self.grid.is_walkable(cell):
                penalty += cfg.wall_penalty
                continue
            if i > 0 and _manhattan(path[i - 1], cell) != 1:
                penalty += cfg.gap_penalty
        return penalty

    def path_cost(self, path: Sequence[Tuple[int, int]]) -> int:
        """Step-cost sum where off-grid and wall cells cost ``outside_step_cost``"""
        total = 0
        for cell in path:
            if self.grid.is_walkable(cell):
                total += self.grid.step_cost(cell)
            else:
                total += self.config.outside_step_cost
        return total


def _manhattan(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])
