"""
Heuristic Search Module
=======================

Manhattan-guided searches: A*, Weighted A*, greedy Best-First, and the
any-angle Theta*.
"""

import heapq
import logging
import math
from typing import List, Tuple

from .base import MazeSolvingError
from .toolkit import FlatGrid
from ..grid import Grid, Coordinate

logger = logging.getLogger(__name__)


class AStarSolver:
    """
    A* search with f = g + weight * h.

    h is the Manhattan distance, admissible for 4-connectivity with step
    costs of at least 1. With ``weight == 1`` the returned path is minimum
    cost; larger weights trade optimality for fewer expansions.
    """

    algorithm_name = "A* Search"

    def __init__(self, weight: float = 1.0):
        self.weight = weight

    def search(self, grid: Grid) -> List[Coordinate]:
        fg = FlatGrid(grid)
        logger.debug("%s start: %s -> goal: %s grid %dx%d (w=%.2f)",
                     self.algorithm_name, grid.start, grid.goal, fg.rows, fg.cols, self.weight)

        g_score = [math.inf] * fg.size
        parent = [-1] * fg.size
        closed = [False] * fg.size
        g_score[fg.start] = 0
        open_set = [(self.weight * fg.heuristic(fg.start), 0, fg.start)]
        expansions = 0

        while open_set:
            _, g, current = heapq.heappop(open_set)
            if closed[current]:
                continue
            closed[current] = True

            if current == fg.goal:
                logger.debug("%s reached goal after %d expansions", self.algorithm_name, expansions)
                return fg.reconstruct(parent, current)

            for neighbor in fg.neighbors(current):
                if closed[neighbor]:
                    continue
                tentative_g = g + fg.costs[neighbor]
                if tentative_g < g_score[neighbor]:
                    g_score[neighbor] = tentative_g
                    parent[neighbor] = current
                    f_score = tentative_g + self.weight * fg.heuristic(neighbor)
                    heapq.heappush(open_set, (f_score, tentative_g, neighbor))
            expansions += 1

        logger.debug("%s exhausted search after expanding %d nodes with no path",
                     self.algorithm_name, expansions)
        raise MazeSolvingError("No path found from start to goal")


class WeightedAStarSolver(AStarSolver):
    """A* with an inflated heuristic; faster but only approximately minimal"""

    algorithm_name = "Weighted A*"

    def __init__(self, weight: float = 1.5):
        if weight < 1.0:
            raise ValueError("Weighted A* requires weight >= 1.0")
        super().__init__(weight=weight)


class BestFirstSolver:
    """Greedy best-first search keyed on the heuristic only; ignores step costs"""

    algorithm_name = "Best-First Search (Greedy)"

    def search(self, grid: Grid) -> List[Coordinate]:
        fg = FlatGrid(grid)
        logger.debug("Best-First Search start: %s -> goal: %s grid %dx%d",
                     grid.start, grid.goal, fg.rows, fg.cols)

        parent = [-1] * fg.size
        seen = [False] * fg.size
        seen[fg.start] = True
        open_set = [(fg.heuristic(fg.start), fg.start)]
        expansions = 0

        while open_set:
            _, current = heapq.heappop(open_set)
            if current == fg.goal:
                logger.debug("Best-First Search reached goal after %d expansions", expansions)
                return fg.reconstruct(parent, current)

            for neighbor in fg.neighbors(current):
                if not seen[neighbor]:
                    seen[neighbor] = True
                    parent[neighbor] = current
                    heapq.heappush(open_set, (fg.heuristic(neighbor), neighbor))
            expansions += 1

        logger.debug("Best-First Search exhausted search after expanding %d nodes with no path",
                     expansions)
        raise MazeSolvingError("No path found from start to goal")


# ==================== Line of sight ====================

def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _line_samples(a: Tuple[int, int], b: Tuple[int, int]):
    """Cells sampled at unit steps along the longer axis, endpoints excluded"""
    dr = b[0] - a[0]
    dc = b[1] - a[1]
    steps = max(abs(dr), abs(dc))
    for i in range(1, steps):
        yield (_round_half_up(a[0] + i * dr / steps),
               _round_half_up(a[1] + i * dc / steps))


def has_line_of_sight(grid: Grid, a: Tuple[int, int], b: Tuple[int, int]) -> bool:
    """
    Sampled line-of-sight test between two cells.

    Only one rounded cell per step along the longer axis is checked, so a
    line grazing a wall corner can pass through a wall cell that is never
    sampled.
    """
    return all(grid.is_walkable(p) for p in _line_samples(a, b))


def line_cost(grid: Grid, a: Tuple[int, int], b: Tuple[int, int]) -> int:
    """Sum of step costs of the sampled cells after ``a`` up to and including ``b``"""
    if tuple(a) == tuple(b):
        return 0
    cells = list(_line_samples(a, b)) + [tuple(b)]
    return sum(grid.step_cost(p) for p in cells if grid.is_walkable(p))


class ThetaStarSolver:
    """
    Theta* any-angle search.

    Expands like A*, but before relaxing a neighbor it tests line of sight
    from the neighbor to the current node's parent; when clear, the neighbor
    is attached directly to that parent at the sampled line cost. The
    returned path is a list of waypoints, so consecutive entries need not be
    adjacent.
    """

    algorithm_name = "Theta* (Any-Angle A*)"

    def search(self, grid: Grid) -> List[Coordinate]:
        fg = FlatGrid(grid)
        logger.debug("Theta* start: %s -> goal: %s grid %dx%d",
                     grid.start, grid.goal, fg.rows, fg.cols)

        g_score = [math.inf] * fg.size
        parent = [-1] * fg.size
        closed = [False] * fg.size
        g_score[fg.start] = 0
        open_set = [(fg.heuristic(fg.start), fg.start)]
        expansions = 0

        while open_set:
            _, current = heapq.heappop(open_set)
            if closed[current]:
                continue
            closed[current] = True

            if current == fg.goal:
                path = fg.reconstruct(parent, current)
                logger.debug("Theta* reconstructed path of %d waypoints after %d expansions",
                             len(path), expansions)
                return path

            grand = parent[current]
            for neighbor in fg.neighbors(current):
                if closed[neighbor]:
                    continue

                via, tentative_g = current, g_score[current] + fg.costs[neighbor]
                if grand != -1:
                    grand_pos, neighbor_pos = fg.coord(grand), fg.coord(neighbor)
                    if has_line_of_sight(grid, grand_pos, neighbor_pos):
                        direct_g = g_score[grand] + line_cost(grid, grand_pos, neighbor_pos)
                        if direct_g <= tentative_g:
                            via, tentative_g = grand, direct_g

                if tentative_g < g_score[neighbor]:
                    g_score[neighbor] = tentative_g
                    parent[neighbor] = via
                    heapq.heappush(open_set, (tentative_g + fg.heuristic(neighbor), neighbor))
            expansions += 1

        logger.debug("Theta* exhausted search after expanding %d nodes with no path", expansions)
        raise MazeSolvingError("No path found from start to goal")
