"""
Uninformed Search Module
========================

Unit-weight searches: BFS, DFS, and iterative-deepening DFS.
"""

import logging
from collections import deque
from typing import List, Optional

from .base import MazeSolvingError, FailureKind
from .toolkit import FlatGrid
from ..grid import Grid, Coordinate

logger = logging.getLogger(__name__)


def breadth_first(fg: FlatGrid) -> Optional[List[Coordinate]]:
    """
    FIFO search over ``fg.walkable``.

    Returns:
        Fewest-steps path from start to goal, or None if unreachable
    """
    parent = [-1] * fg.size
    visited = [False] * fg.size
    visited[fg.start] = True
    queue = deque([fg.start])
    expansions = 0

    while queue:
        current = queue.popleft()
        if current == fg.goal:
            logger.debug("BFS reached goal after %d expansions", expansions)
            return fg.reconstruct(parent, current)

        for neighbor in fg.neighbors(current):
            if not visited[neighbor]:
                visited[neighbor] = True
                parent[neighbor] = current
                queue.append(neighbor)
        expansions += 1

    logger.debug("BFS exhausted search after expanding %d nodes with no path", expansions)
    return None


class BFSSolver:
    """Breadth-first search; the first goal pop is a fewest-steps path"""

    algorithm_name = "BFS (Breadth-First Search)"

    def search(self, grid: Grid) -> List[Coordinate]:
        fg = FlatGrid(grid)
        logger.debug("BFS start: %s -> goal: %s grid %dx%d",
                     grid.start, grid.goal, fg.rows, fg.cols)
        path = breadth_first(fg)
        if path is None:
            raise MazeSolvingError("No path found from start to goal")
        return path


class DFSSolver:
    """Depth-first search with an explicit LIFO stack; paths are not shortest"""

    algorithm_name = "DFS (Depth-First Search)"

    def search(self, grid: Grid) -> List[Coordinate]:
        fg = FlatGrid(grid)
        logger.debug("DFS start: %s -> goal: %s grid %dx%d",
                     grid.start, grid.goal, fg.rows, fg.cols)

        parent = [-1] * fg.size
        visited = [False] * fg.size
        stack = [fg.start]
        expansions = 0

        while stack:
            current = stack.pop()
            if visited[current]:
                continue
            visited[current] = True

            if current == fg.goal:
                logger.debug("DFS reached goal after %d expansions", expansions)
                return fg.reconstruct(parent, current)

            for neighbor in fg.neighbors(current):
                if not visited[neighbor]:
                    parent[neighbor] = current
                    stack.append(neighbor)
            expansions += 1

        logger.debug("DFS exhausted search after expanding %d nodes with no path", expansions)
        raise MazeSolvingError("No path found from start to goal")


class IDDFSSolver:
    """
    Iterative deepening depth-first search.

    Re-runs a depth-limited DFS with bounds 0, 1, 2, ... Visited marks only
    cover the current path and are cleared on backtrack, and the path is
    built by push/pop rather than parent pointers. The first bound that
    reaches the goal yields a fewest-steps path.
    """

    algorithm_name = "IDDFS (Iterative Deepening DFS)"

    def __init__(self, max_expansions: Optional[int] = None):
        """
        Args:
            max_expansions: Total node budget across all iterations (None for unbounded)
        """
        self.max_expansions = max_expansions

    def search(self, grid: Grid) -> List[Coordinate]:
        fg = FlatGrid(grid)
        logger.debug("IDDFS start: %s -> goal: %s grid %dx%d",
                     grid.start, grid.goal, fg.rows, fg.cols)
        expansions = 0

        for limit in range(fg.size + 1):
            path, cutoff, expansions = self._depth_limited(fg, limit, expansions)
            if path is not None:
                logger.debug("IDDFS found path at depth %d after %d total expansions",
                             limit, expansions)
                return [fg.coord(i) for i in path]
            if not cutoff:
                # Whole reachable region explored below the bound
                break

        logger.debug("IDDFS exhausted search after %d expansions with no path", expansions)
        raise MazeSolvingError("No path found from start to goal")

    def _depth_limited(self, fg: FlatGrid, limit: int, expansions: int):
        """
        One depth-limited pass.

        Returns:
            (path or None, whether any branch was cut at the bound,
            running expansion count)
        """
        path = [fg.start]
        if fg.start == fg.goal:
            return path, False, expansions

        on_path = {fg.start}
        frontier = [fg.neighbors(fg.start)] if limit > 0 else []
        cutoff = limit == 0

        while frontier:
            neighbor = next(frontier[-1], None)
            if neighbor is None:
                frontier.pop()
                on_path.discard(path.pop())
                continue
            if neighbor in on_path:
                continue

            expansions += 1
            if self.max_expansions is not None and expansions > self.max_expansions:
                raise MazeSolvingError(
                    f"IDDFS exceeded its budget of {self.max_expansions} expansions",
                    FailureKind.BUDGET_EXHAUSTED,
                )

            if neighbor == fg.goal:
                path.append(neighbor)
                return path, True, expansions

            if len(path) < limit:
                path.append(neighbor)
                on_path.add(neighbor)
                frontier.append(fg.neighbors(neighbor))
            else:
                cutoff = True

        return None, cutoff, expansions
