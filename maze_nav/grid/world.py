"""
Grid World Module
=================

Immutable numpy-backed maze grid. Loaded once per name and shared
read-only by every solver invocation against it.
"""

import logging
import numpy as np
from typing import Optional, Tuple, List

from .types import CellType, Coordinate

logger = logging.getLogger(__name__)


class Grid:
    """
    Immutable 2-D maze grid.

    Stores cell types and per-cell step costs as read-only numpy arrays
    indexed ``[row, col]``. Walls have cost 0 in the cost array; querying
    their step cost is a precondition violation.

    The start cell is the one exception to "non-weighted cells cost 1": it
    costs 0, so a path's cost counts only the cells moved into. A five-cell
    corner-to-corner path across an open 3x3 grid therefore costs 4, not 5.
    """

    def __init__(self,
                 cell_types: np.ndarray,
                 start: Tuple[int, int],
                 goal: Tuple[int, int],
                 weights: Optional[np.ndarray] = None,
                 name: str = 'grid'):
        """
        Build a grid.

        Args:
            cell_types: 2-D integer array of CellType values
            start: Start coordinate (row, col)
            goal: Goal coordinate (row, col)
            weights: Optional 2-D array of step costs for WEIGHTED cells
            name: Grid name, used as the persistence key

        Raises:
            ValueError: On malformed arrays or invalid start/goal
        """
        types = np.array(cell_types, dtype=np.int8)
        if types.ndim != 2 or types.size == 0:
            raise ValueError("cell_types must be a non-empty 2-D array")

        costs = np.where(types == CellType.WALL, 0, 1).astype(np.int64)
        weighted = types == CellType.WEIGHTED
        if weighted.any():
            if weights is None:
                raise ValueError("Weighted cells must provide a numeric weight")
            weights = np.asarray(weights)
            if weights.shape != types.shape:
                raise ValueError("weights must match cell_types shape")
            if (weights[weighted] <= 0).any():
                raise ValueError("Weighted cells must have a positive weight")
            costs[weighted] = weights[weighted]

        self._types = types
        self.name = name
        self.start = Coordinate(int(start[0]), int(start[1]))
        self.goal = Coordinate(int(goal[0]), int(goal[1]))

        for label, pos in (('start', self.start), ('goal', self.goal)):
            if not self.in_bounds(pos):
                raise ValueError(f"{label} {pos} is outside grid bounds")
            if not self.is_walkable(pos):
                raise ValueError(f"{label} {pos} is not walkable")

        # The agent starts on the start cell, it never pays to enter it
        costs[self.start] = 0

        self._costs = costs
        self._types.setflags(write=False)
        self._costs.setflags(write=False)

    # ==================== Shape ====================

    @property
    def height(self) -> int:
        return self._types.shape[0]

    @property
    def width(self) -> int:
        return self._types.shape[1]

    @property
    def shape(self) -> Tuple[int, int]:
        return self._types.shape

    @property
    def cell_types(self) -> np.ndarray:
        """Read-only CellType array"""
        return self._types

    # ==================== Cell queries ====================

    def in_bounds(self, pos: Tuple[int, int]) -> bool:
        return 0 <= pos[0] < self.height and 0 <= pos[1] < self.width

    def cell_type(self, pos: Tuple[int, int]) -> CellType:
        if not self.in_bounds(pos):
            raise ValueError(f"Coordinate {tuple(pos)} is outside grid bounds")
        return CellType(int(self._types[pos[0], pos[1]]))

    def is_walkable(self, pos: Tuple[int, int]) -> bool:
        """True for in-bounds, non-wall cells"""
        return self.in_bounds(pos) and self._types[pos[0], pos[1]] != CellType.WALL

    def step_cost(self, pos: Tuple[int, int]) -> int:
        """
        Cost of entering a cell.

        Raises:
            ValueError: If the coordinate is out of bounds or a wall
        """
        if not self.in_bounds(pos):
            raise ValueError(f"Coordinate {tuple(pos)} is outside grid bounds")
        if self._types[pos[0], pos[1]] == CellType.WALL:
            raise ValueError(f"Coordinate {tuple(pos)} is not walkable")
        return int(self._costs[pos[0], pos[1]])

    def walkable_mask(self) -> np.ndarray:
        """Writable boolean copy of the walkable cells"""
        return self._types != CellType.WALL

    def cost_array(self) -> np.ndarray:
        """Read-only step-cost array (0 on walls)"""
        return self._costs

    def walkable_cells(self) -> List[Coordinate]:
        rows, cols = np.nonzero(self.walkable_mask())
        return [Coordinate(int(r), int(c)) for r, c in zip(rows, cols)]

    def is_weighted(self) -> bool:
        return bool((self._types == CellType.WEIGHTED).any())

    def get_stats(self) -> dict:
        """Cell counts for logging and reports"""
        mask = self.walkable_mask()
        return {
            'name': self.name,
            'height': self.height,
            'width': self.width,
            'walkable': int(mask.sum()),
            'walls': int((~mask).sum()),
            'weighted': int((self._types == CellType.WEIGHTED).sum()),
            'max_cost': int(self._costs.max()),
        }

    def __repr__(self) -> str:
        return (f"Grid(name={self.name!r}, {self.height}x{self.width}, "
                f"start={self.start}, goal={self.goal})")
