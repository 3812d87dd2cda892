"""
A* Planner Module
=================

Cost-capped A* between arbitrary cells, used to bridge gaps in GA
chromosomes, plus the straight row-then-column fallback walk.
"""

import heapq
import logging
from dataclasses import dataclass
from typing import Tuple, List, Dict

from ..grid import Grid, Coordinate

logger = logging.getLogger(__name__)

# Neighbor order used by the GA family: up, down, left, right
_DELTAS = ((-1, 0), (1, 0), (0, -1), (0, 1))


@dataclass
class PlannerStats:
    """Statistics from a planning run"""
    iterations: int = 0
    nodes_expanded: int = 0
    path_length: int = 0
    success: bool = False
    reason: str = ''


class AStarPlanner:
    """
    A* planner with an accumulated-cost cap.

    Features:
    - Manhattan heuristic, 4-connected moves, per-cell step costs
    - Branches whose accumulated cost exceeds ``max_cost`` are abandoned
    - Returns an empty list instead of raising when no bridge exists
    """

    def __init__(self, grid: Grid, max_cost: int):
        """
        Initialize A* planner.

        Args:
            grid: Grid to plan on
            max_cost: Largest accumulated step cost a partial path may reach
        """
        self.grid = grid
        self.max_cost = max_cost

        # Last planning stats
        self.last_stats = PlannerStats()

    def plan(self,
             start: Tuple[int, int],
             goal: Tuple[int, int]) -> List[Coordinate]:
        """
        Find path from start to goal.

        Args:
            start: Start cell (row, col)
            goal: Goal cell (row, col)

        Returns:
            Path as list of coordinates including both ends, or empty list if
            no path exists within the cost cap
        """
        stats = PlannerStats()
        start = Coordinate(int(start[0]), int(start[1]))
        goal = Coordinate(int(goal[0]), int(goal[1]))

        if start == goal:
            stats.success = True
            stats.path_length = 1
            stats.reason = 'trivial'
            self.last_stats = stats
            return [start]

        if not self.grid.is_walkable(start):
            stats.reason = 'invalid_start'
            self.last_stats = stats
            return []

        if not self.grid.is_walkable(goal):
            stats.reason = 'invalid_goal'
            self.last_stats = stats
            return []

        open_set = [(self._heuristic(start, goal), 0, start)]
        came_from: Dict[Coordinate, Coordinate] = {}
        g_score = {start: 0}
        closed = set()

        while open_set:
            stats.iterations += 1
            _, g, current = heapq.heappop(open_set)

            if current == goal:
                path = self._reconstruct_path(came_from, current)
                stats.path_length = len(path)
                stats.success = True
                stats.reason = 'success'
                self.last_stats = stats
                return path

            if current in closed or g > self.max_cost:
                continue
            closed.add(current)
            stats.nodes_expanded += 1

            for dr, dc in _DELTAS:
                neighbor = Coordinate(current.row + dr, current.col + dc)
                if neighbor in closed or not self.grid.is_walkable(neighbor):
                    continue

                tentative_g = g + self.grid.step_cost(neighbor)
                if tentative_g > self.max_cost:
                    continue

                if tentative_g < g_score.get(neighbor, tentative_g + 1):
                    came_from[neighbor] = current
                    g_score[neighbor] = tentative_g
                    f_score = tentative_g + self._heuristic(neighbor, goal)
                    heapq.heappush(open_set, (f_score, tentative_g, neighbor))

        stats.reason = 'no_path_within_cap'
        self.last_stats = stats
        return []

    def _heuristic(self, pos: Tuple[int, int], goal: Tuple[int, int]) -> int:
        """Admissible heuristic (Manhattan distance)"""
        return abs(pos[0] - goal[0]) + abs(pos[1] - goal[1])

    def _reconstruct_path(self, came_from: Dict, current: Coordinate) -> List[Coordinate]:
        """Reconstruct path from came_from dict"""
        path = [current]
        while current in came_from:
            current = came_from[current]
            path.append(current)
        path.reverse()
        return path


def straight_walk(grid: Grid,
                  a: Tuple[int, int],
                  b: Tuple[int, int]) -> List[Coordinate]:
    """
    Walk from a to b closing the row gap first, then the column gap.

    Args:
        grid: Grid to walk on
        a: First cell
        b: Last cell

    Returns:
        Every cell visited including both ends, or empty list as soon as a
        non-walkable cell is hit
    """
    row, col = int(a[0]), int(a[1])
    path = [Coordinate(row, col)]

    while (row, col) != (b[0], b[1]):
        if row != b[0]:
            row += 1 if row < b[0] else -1
        else:
            col += 1 if col < b[1] else -1

        step = Coordinate(row, col)
        if not grid.is_walkable(step):
            return []
        path.append(step)

    return path
