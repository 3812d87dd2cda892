"""
Solver Toolkit Module
=====================

Free functions shared by every strategy: movement, walkability, step cost,
neighbors, and the flattened ``row * cols + col`` index space used by the
search family.
"""

from enum import Enum
from typing import List, Iterator, Sequence, Tuple

from ..grid import Grid, Coordinate


class Direction(Enum):
    """Compass directions as (d_row, d_col) deltas"""
    NORTH = (-1, 0)
    EAST = (0, 1)
    SOUTH = (1, 0)
    WEST = (0, -1)

    @property
    def d_row(self) -> int:
        return self.value[0]

    @property
    def d_col(self) -> int:
        return self.value[1]

    def left(self) -> 'Direction':
        return _LEFT[self]

    def right(self) -> 'Direction':
        return _RIGHT[self]

    def opposite(self) -> 'Direction':
        return _RIGHT[_RIGHT[self]]


_RIGHT = {
    Direction.NORTH: Direction.EAST,
    Direction.EAST: Direction.SOUTH,
    Direction.SOUTH: Direction.WEST,
    Direction.WEST: Direction.NORTH,
}
_LEFT = {v: k for k, v in _RIGHT.items()}

# N, E, S, W
DIRECTIONS: Tuple[Direction, ...] = tuple(Direction)


def move(pos: Tuple[int, int], direction: Direction) -> Coordinate:
    return Coordinate(pos[0] + direction.d_row, pos[1] + direction.d_col)


def is_walkable(grid: Grid, pos: Tuple[int, int]) -> bool:
    return grid.is_walkable(pos)


def step_cost(grid: Grid, pos: Tuple[int, int]) -> int:
    """Step cost of a cell; raises ValueError off-grid or on a wall"""
    return grid.step_cost(pos)


def walkable_neighbors(grid: Grid, pos: Tuple[int, int]) -> List[Coordinate]:
    """4-connected walkable neighbors in N, E, S, W order"""
    result = []
    for direction in DIRECTIONS:
        candidate = move(pos, direction)
        if grid.is_walkable(candidate):
            result.append(candidate)
    return result


def manhattan(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def is_adjacent(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
    return manhattan(a, b) == 1


def is_valid_path(grid: Grid, path: Sequence[Tuple[int, int]]) -> bool:
    """True if the path starts at grid.start and every step is adjacent and walkable"""
    if not path or tuple(path[0]) != grid.start:
        return False
    if not all(grid.is_walkable(p) for p in path):
        return False
    return all(is_adjacent(path[i], path[i + 1]) for i in range(len(path) - 1))


class FlatGrid:
    """
    Flattened view of a Grid for the search family.

    Walkability and costs are copied into plain lists indexed by
    ``row * cols + col``; parents use -1 as the "no parent" sentinel.
    """

    __slots__ = ('rows', 'cols', 'size', 'walkable', 'costs', 'start', 'goal')

    def __init__(self, grid: Grid):
        self.rows = grid.height
        self.cols = grid.width
        self.size = self.rows * self.cols
        self.walkable = grid.walkable_mask().ravel().tolist()
        self.costs = grid.cost_array().ravel().tolist()
        self.start = self.index(grid.start)
        self.goal = self.index(grid.goal)

    def index(self, pos: Tuple[int, int]) -> int:
        return pos[0] * self.cols + pos[1]

    def coord(self, index: int) -> Coordinate:
        return Coordinate(*divmod(index, self.cols))

    def neighbors(self, index: int) -> Iterator[int]:
        """Walkable neighbor indices in N, E, S, W order"""
        r, c = divmod(index, self.cols)
        if r > 0 and self.walkable[index - self.cols]:
            yield index - self.cols
        if c < self.cols - 1 and self.walkable[index + 1]:
            yield index + 1
        if r < self.rows - 1 and self.walkable[index + self.cols]:
            yield index + self.cols
        if c > 0 and self.walkable[index - 1]:
            yield index - 1

    def heuristic(self, index: int) -> int:
        """Manhattan distance to the goal"""
        r, c = divmod(index, self.cols)
        gr, gc = divmod(self.goal, self.cols)
        return abs(r - gr) + abs(c - gc)

    def reconstruct(self, parent: List[int], index: int) -> List[Coordinate]:
        """Walk parents back to the -1 sentinel and return the start-first path"""
        path = []
        while index != -1:
            path.append(self.coord(index))
            index = parent[index]
        path.reverse()
        return path
