"""
Weighted Search Module
======================

Minimum-cost searches honoring per-cell step costs: Dijkstra,
Bellman-Ford, and SPFA. Entering a cell costs that cell's step cost;
the start cell's cost is added once by the solver contract.
"""

import heapq
import logging
import math
from collections import deque
from typing import List

from .base import MazeSolvingError
from .toolkit import FlatGrid
from ..grid import Grid, Coordinate

logger = logging.getLogger(__name__)


class DijkstraSolver:
    """Dijkstra's algorithm over a binary heap with lazy deletion"""

    algorithm_name = "Dijkstra's Algorithm"

    def search(self, grid: Grid) -> List[Coordinate]:
        fg = FlatGrid(grid)
        logger.debug("Dijkstra start: %s -> goal: %s grid %dx%d",
                     grid.start, grid.goal, fg.rows, fg.cols)

        dist = [math.inf] * fg.size
        parent = [-1] * fg.size
        closed = [False] * fg.size
        dist[fg.start] = 0
        heap = [(0, fg.start)]
        expansions = 0

        while heap:
            d, current = heapq.heappop(heap)
            if closed[current]:
                continue
            closed[current] = True

            if current == fg.goal:
                logger.debug("Dijkstra reached goal after %d expansions", expansions)
                return fg.reconstruct(parent, current)

            for neighbor in fg.neighbors(current):
                if closed[neighbor]:
                    continue
                new_dist = d + fg.costs[neighbor]
                if new_dist < dist[neighbor]:
                    dist[neighbor] = new_dist
                    parent[neighbor] = current
                    heapq.heappush(heap, (new_dist, neighbor))
            expansions += 1

        logger.debug("Dijkstra exhausted search after expanding %d nodes with no path", expansions)
        raise MazeSolvingError("No path found from start to goal")


class BellmanFordSolver:
    """
    Bellman-Ford edge relaxation.

    Runs up to ``rows * cols - 1`` full sweeps over every walkable edge and
    stops early once a sweep relaxes nothing. Step costs are positive, so
    negative cycles cannot occur.
    """

    algorithm_name = "Bellman-Ford"

    def search(self, grid: Grid) -> List[Coordinate]:
        fg = FlatGrid(grid)
        logger.debug("Bellman-Ford start: %s -> goal: %s grid %dx%d",
                     grid.start, grid.goal, fg.rows, fg.cols)

        edges = [(u, v) for u in range(fg.size) if fg.walkable[u]
                 for v in fg.neighbors(u)]
        dist = [math.inf] * fg.size
        parent = [-1] * fg.size
        dist[fg.start] = 0

        passes = 0
        for passes in range(1, max(fg.size - 1, 1) + 1):
            relaxed = False
            for u, v in edges:
                if dist[u] == math.inf:
                    continue
                new_dist = dist[u] + fg.costs[v]
                if new_dist < dist[v]:
                    dist[v] = new_dist
                    parent[v] = u
                    relaxed = True
            if not relaxed:
                break

        if dist[fg.goal] == math.inf:
            logger.debug("Bellman-Ford found no path after %d passes", passes)
            raise MazeSolvingError("No path found from start to goal")

        logger.debug("Bellman-Ford converged after %d passes", passes)
        return fg.reconstruct(parent, fg.goal)


class SPFASolver:
    """
    Shortest Path Faster Algorithm.

    FIFO queue with an in-queue flag; a node is re-enqueued whenever its
    distance improves. Worst-case work is the same as Bellman-Ford.
    """

    algorithm_name = "SPFA (Shortest Path Faster Algorithm)"

    def search(self, grid: Grid) -> List[Coordinate]:
        fg = FlatGrid(grid)
        logger.debug("SPFA start: %s -> goal: %s grid %dx%d",
                     grid.start, grid.goal, fg.rows, fg.cols)

        dist = [math.inf] * fg.size
        parent = [-1] * fg.size
        in_queue = [False] * fg.size
        dist[fg.start] = 0
        queue = deque([fg.start])
        in_queue[fg.start] = True
        expansions = 0

        while queue:
            current = queue.popleft()
            in_queue[current] = False
            for neighbor in fg.neighbors(current):
                new_dist = dist[current] + fg.costs[neighbor]
                if new_dist < dist[neighbor]:
                    dist[neighbor] = new_dist
                    parent[neighbor] = current
                    if not in_queue[neighbor]:
                        queue.append(neighbor)
                        in_queue[neighbor] = True
            expansions += 1

        if dist[fg.goal] == math.inf:
            logger.debug("SPFA exhausted search after expanding %d nodes with no path", expansions)
            raise MazeSolvingError("No path found from start to goal")

        logger.debug("SPFA converged after %d expansions", expansions)
        return fg.reconstruct(parent, fg.goal)
