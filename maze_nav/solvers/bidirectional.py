"""
Bidirectional Search Module
===========================

Two simultaneous frontiers, one grown from the start and one from the
goal, joined at a meeting cell.
"""

import heapq
import logging
import math
from typing import List

from .base import MazeSolvingError
from .toolkit import FlatGrid
from ..grid import Grid, Coordinate

logger = logging.getLogger(__name__)


def _merge(fg: FlatGrid, parent_fwd: List[int], parent_bwd: List[int], meet: int) -> List[Coordinate]:
    """Forward chain start..meet followed by the backward chain after meet..goal"""
    path = fg.reconstruct(parent_fwd, meet)
    index = parent_bwd[meet]
    while index != -1:
        path.append(fg.coord(index))
        index = parent_bwd[index]
    return path


class BidirectionalBFSSolver:
    """
    Bidirectional breadth-first search.

    The two sides alternately expand one full BFS layer. Every cell reached
    by both sides during a layer is a candidate meeting point and the one
    with the smallest combined depth wins, so the path has as few steps as
    a plain BFS path.

    Whole layers are expanded per turn rather than a single node. Stopping
    at the first node seen by both sides after a one-node step can join the
    trees at a meeting point that is longer than the BFS path.
    """

    algorithm_name = "Bidirectional BFS"

    def search(self, grid: Grid) -> List[Coordinate]:
        fg = FlatGrid(grid)
        logger.debug("Bidirectional BFS start: %s -> goal: %s grid %dx%d",
                     grid.start, grid.goal, fg.rows, fg.cols)
        if fg.start == fg.goal:
            return [grid.start]

        depth = ([-1] * fg.size, [-1] * fg.size)
        parent = ([-1] * fg.size, [-1] * fg.size)
        depth[0][fg.start] = 0
        depth[1][fg.goal] = 0
        frontiers = [[fg.start], [fg.goal]]
        expansions = 0
        side = 0

        while frontiers[0] and frontiers[1]:
            other = 1 - side
            next_layer = []
            best, meet = math.inf, -1

            for current in frontiers[side]:
                for neighbor in fg.neighbors(current):
                    if depth[side][neighbor] != -1:
                        continue
                    depth[side][neighbor] = depth[side][current] + 1
                    parent[side][neighbor] = current
                    next_layer.append(neighbor)
                    if depth[other][neighbor] != -1:
                        total = depth[side][neighbor] + depth[other][neighbor]
                        if total < best:
                            best, meet = total, neighbor
                expansions += 1

            if meet != -1:
                logger.debug("Bidirectional BFS met at %s (%d steps) after %d expansions",
                             fg.coord(meet), best, expansions)
                return _merge(fg, parent[0], parent[1], meet)

            frontiers[side] = next_layer
            side = other

        logger.debug("Bidirectional BFS exhausted search after expanding %d nodes with no path",
                     expansions)
        raise MazeSolvingError("No path found from start to goal")


class BidirectionalDijkstraSolver:
    """
    Bidirectional Dijkstra.

    The sides alternate one heap pop each. Forward relaxation into a cell
    adds that cell's step cost; backward relaxation adds the cost of the
    cell being left, since that is the cell entered when walking toward the
    goal. Every cell with a finite distance on both sides is a meeting
    candidate and the minimum ``dist_fwd + dist_bwd`` is kept. The search
    stops once the two heap tops together cannot beat that minimum, which
    yields the same cost as one-sided Dijkstra.
    """

    algorithm_name = "Bidirectional Dijkstra"

    def search(self, grid: Grid) -> List[Coordinate]:
        fg = FlatGrid(grid)
        logger.debug("Bidirectional Dijkstra start: %s -> goal: %s grid %dx%d",
                     grid.start, grid.goal, fg.rows, fg.cols)
        if fg.start == fg.goal:
            return [grid.start]

        dist = ([math.inf] * fg.size, [math.inf] * fg.size)
        parent = ([-1] * fg.size, [-1] * fg.size)
        closed = ([False] * fg.size, [False] * fg.size)
        dist[0][fg.start] = 0
        dist[1][fg.goal] = 0
        heaps = ([(0, fg.start)], [(0, fg.goal)])

        best, meet = math.inf, -1
        expansions = 0
        side = 0

        while heaps[0] and heaps[1]:
            if heaps[0][0][0] + heaps[1][0][0] >= best:
                break

            other = 1 - side
            d, current = heapq.heappop(heaps[side])
            if not closed[side][current]:
                closed[side][current] = True
                for neighbor in fg.neighbors(current):
                    if closed[side][neighbor]:
                        continue
                    step = fg.costs[neighbor] if side == 0 else fg.costs[current]
                    new_dist = d + step
                    if new_dist < dist[side][neighbor]:
                        dist[side][neighbor] = new_dist
                        parent[side][neighbor] = current
                        heapq.heappush(heaps[side], (new_dist, neighbor))
                        total = new_dist + dist[other][neighbor]
                        if total < best:
                            best, meet = total, neighbor
                expansions += 1
            side = other

        if meet == -1:
            logger.debug("Bidirectional Dijkstra exhausted search after expanding %d nodes with no path",
                         expansions)
            raise MazeSolvingError("No path found from start to goal")

        logger.debug("Bidirectional Dijkstra met at %s (cost %d) after %d expansions",
                     fg.coord(meet), best, expansions)
        return _merge(fg, parent[0], parent[1], meet)
