"""
Maze Generator Module
=====================

Procedural generation of perfect and braided mazes with optional weighted cells.
"""

import logging
import numpy as np
from typing import Optional, List, Tuple

from .types import CellType
from .world import Grid
from ..config import MazeConfig

logger = logging.getLogger(__name__)

# Lattice moves (two cells at a time, carving the wall in between)
_CARVE_STEPS = ((-2, 0), (0, 2), (2, 0), (0, -2))


class MazeGenerator:
    """
    Random maze generator.

    Creates mazes with:
    - Depth-first carving on the odd-index lattice (one path between any two cells)
    - Extra links punched through walls to create loops
    - Optional weighted cells scattered over the open area

    All randomness comes from one seeded numpy Generator, so a seed fully
    determines the maze.
    """

    def __init__(self, config: Optional[MazeConfig] = None, seed: Optional[int] = None):
        self.config = config or MazeConfig()
        self.seed = seed
        self.rng = np.random.default_rng(seed)

    def generate(self,
                 rows: Optional[int] = None,
                 cols: Optional[int] = None,
                 name: Optional[str] = None) -> Grid:
        """
        Generate a maze.

        Args:
            rows: Grid height (defaults to config), at least 3
            cols: Grid width (defaults to config), at least 3
            name: Grid name (defaults to ``random_<rows>x<cols>``)

        Returns:
            Grid with start at the top-left lattice cell and goal at the
            bottom-right lattice cell
        """
        rows = rows or self.config.rows
        cols = cols or self.config.cols
        if rows < 3 or cols < 3:
            raise ValueError("Generated mazes must be at least 3x3")

        types = np.full((rows, cols), CellType.WALL, dtype=np.int8)
        self._carve(types)
        self._add_links(types, self.config.extra_links)

        start = (1, 1)
        goal = (rows - 2 if rows % 2 else rows - 3,
                cols - 2 if cols % 2 else cols - 3)
        weights = self._add_weights(types, start, goal)

        types[start] = CellType.START
        types[goal] = CellType.GOAL

        grid = Grid(types, start, goal, weights=weights,
                    name=name or f"random_{rows}x{cols}")
        logger.debug("Generated maze %s: %s", grid.name, grid.get_stats())
        return grid

    def _carve(self, types: np.ndarray):
        """Iterative depth-first carving from the top-left lattice cell"""
        rows, cols = types.shape
        stack: List[Tuple[int, int]] = [(1, 1)]
        types[1, 1] = CellType.OPEN

        while stack:
            r, c = stack[-1]
            options = [
                (dr, dc) for dr, dc in _CARVE_STEPS
                if 0 < r + dr < rows - 1 and 0 < c + dc < cols - 1
                and types[r + dr, c + dc] == CellType.WALL
            ]
            if not options:
                stack.pop()
                continue
            dr, dc = options[int(self.rng.integers(len(options)))]
            types[r + dr // 2, c + dc // 2] = CellType.OPEN
            types[r + dr, c + dc] = CellType.OPEN
            stack.append((r + dr, c + dc))

    def _add_links(self, types: np.ndarray, count: int):
        """Open walls separating two open cells on a straight line"""
        rows, cols = types.shape
        candidates = []
        for r in range(1, rows - 1):
            for c in range(1, cols - 1):
                if types[r, c] != CellType.WALL:
                    continue
                horizontal = types[r, c - 1] != CellType.WALL and types[r, c + 1] != CellType.WALL
                vertical = types[r - 1, c] != CellType.WALL and types[r + 1, c] != CellType.WALL
                if horizontal != vertical:
                    candidates.append((r, c))

        if not candidates or count <= 0:
            return
        picks = self.rng.choice(len(candidates), size=min(count, len(candidates)), replace=False)
        for idx in picks:
            types[candidates[int(idx)]] = CellType.OPEN

    def _add_weights(self, types: np.ndarray,
                     start: Tuple[int, int],
                     goal: Tuple[int, int]) -> np.ndarray:
        """Turn a fraction of open cells into weighted cells"""
        weights = np.ones(types.shape, dtype=np.int64)
        fraction = self.config.weighted_fraction
        if fraction <= 0 or self.config.max_weight < 2:
            return weights

        open_cells = [tuple(p) for p in np.argwhere(types == CellType.OPEN)
                      if tuple(p) not in (start, goal)]
        n_weighted = int(round(fraction * len(open_cells)))
        if n_weighted == 0:
            return weights

        picks = self.rng.choice(len(open_cells), size=n_weighted, replace=False)
        for idx in picks:
            r, c = open_cells[int(idx)]
            types[r, c] = CellType.WEIGHTED
            weights[r, c] = int(self.rng.integers(2, self.config.max_weight + 1))
        return weights
