"""
Path Chromosome Module
======================

Coordinate-sequence chromosome with deterministic repair and greedy
extension toward the goal.
"""

from typing import List, Optional, Sequence, Tuple

from ...config import GAConfig
from ...grid import Grid, Coordinate
from ...planning import AStarPlanner, straight_walk

# Neighbor order used by the GA family: up, down, left, right
_DELTAS = ((-1, 0), (1, 0), (0, -1), (0, 1))


def walkable_neighbors(grid: Grid, pos: Tuple[int, int]) -> List[Coordinate]:
    """Walkable 4-neighbors in up, down, left, right order"""
    result = []
    for dr, dc in _DELTAS:
        candidate = Coordinate(pos[0] + dr, pos[1] + dc)
        if grid.is_walkable(candidate):
            result.append(candidate)
    return result


def _manhattan(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _adjacent(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
    return _manhattan(a, b) == 1


class PathChromosome:
    """
    Candidate path encoded as an ordered coordinate sequence.

    The sequence may be structurally invalid (off-grid cells, walls, gaps)
    until ``repair()`` has run. The grid is shared read-only; every
    operation returns a new chromosome.
    """

    __slots__ = ('path', 'grid', 'config')

    def __init__(self,
                 path: Sequence[Tuple[int, int]],
                 grid: Grid,
                 config: Optional[GAConfig] = None):
        if grid is None:
            raise TypeError("grid cannot be None")
        self.path: Tuple[Coordinate, ...] = tuple(Coordinate(int(p[0]), int(p[1])) for p in path)
        self.grid = grid
        self.config = config or GAConfig()

    # ==================== Accessors ====================

    def __len__(self) -> int:
        return len(self.path)

    def __getitem__(self, index):
        return self.path[index]

    def __iter__(self):
        return iter(self.path)

    def __eq__(self, other) -> bool:
        if not isinstance(other, PathChromosome):
            return NotImplemented
        return self.path == other.path and self.grid is other.grid

    def __hash__(self) -> int:
        return hash(self.path)

    def __repr__(self) -> str:
        if not self.path:
            return "PathChromosome(size=0)"
        return f"PathChromosome(size={len(self.path)}, start={self.path[0]}, end={self.path[-1]})"

    def with_path(self, path: Sequence[Tuple[int, int]]) -> 'PathChromosome':
        """New chromosome on the same grid and settings"""
        return PathChromosome(path, self.grid, self.config)

    def is_empty(self) -> bool:
        return not self.path

    def reaches_goal(self) -> bool:
        return bool(self.path) and self.path[-1] == self.grid.goal

    def is_valid(self) -> bool:
        """Starts at the grid start; every cell walkable; every step 4-adjacent"""
        if not self.path or self.path[0] != self.grid.start:
            return False
        if not all(self.grid.is_walkable(p) for p in self.path):
            return False
        return all(_adjacent(self.path[i], self.path[i + 1]) for i in range(len(self.path) - 1))

    # ==================== Repair ====================

    def repair(self) -> 'PathChromosome':
        """
        Restore structural validity.

        The head is forced to the grid start. Each remaining gene is kept if
        it is a walkable neighbor of the running tail; otherwise the tail is
        bridged to it with cost-capped A*, then with a straight row-then-column
        walk. A gene that cannot be bridged is replaced by the nearest
        walkable cell on an expanding Manhattan ring, bridged the same way,
        or dropped. A one-cell result gains a walkable neighbor of the start,
        and the path is then extended toward the goal.

        The result is always valid, and repairing it again returns it
        unchanged.
        """
        grid = self.grid
        start = grid.start
        genes = self.path[1:] if self.path and self.path[0] == start else self.path

        cap = min(self.config.bridge_depth_cap, grid.width * grid.height // 4)
        planner = AStarPlanner(grid, cap)
        repaired = [start]

        for target in genes:
            tail = repaired[-1]
            if _adjacent(tail, target) and grid.is_walkable(target):
                repaired.append(target)
                continue

            bridge = self._bridge(planner, tail, target)
            if not bridge:
                nearest = self._nearest_walkable(target)
                if nearest is not None:
                    bridge = self._bridge(planner, tail, nearest)
            repaired.extend(bridge[1:])

        if len(repaired) < 2 and start != grid.goal:
            repaired.extend(walkable_neighbors(grid, start)[:1])

        return self.with_path(repaired).extend_toward_goal()

    def _bridge(self,
                planner: AStarPlanner,
                tail: Coordinate,
                target: Coordinate) -> List[Coordinate]:
        bridge = planner.plan(tail, target)
        if not bridge:
            bridge = straight_walk(self.grid, tail, target)
        return bridge

    def _nearest_walkable(self, target: Coordinate) -> Optional[Coordinate]:
        """First walkable cell on Manhattan rings of radius 1..probe_radius"""
        for radius in range(1, self.config.probe_radius + 1):
            for dr in range(-radius, radius + 1):
                for dc in range(-radius, radius + 1):
                    if abs(dr) + abs(dc) != radius:
                        continue
                    candidate = Coordinate(target[0] + dr, target[1] + dc)
                    if self.grid.is_walkable(candidate):
                        return candidate
        return None

    # ==================== Extension ====================

    def target_length(self, tail: Tuple[int, int]) -> int:
        """Desired path length given the current tail"""
        cfg = self.config
        desired = max(_manhattan(tail, self.grid.goal) * cfg.extend_factor, cfg.extend_min)
        return min(desired, cfg.extend_max)

    def extend_toward_goal(self) -> 'PathChromosome':
        """
        Grow the path greedily until it reaches the goal or its target length.

        Each step appends the walkable neighbor of the tail closest to the
        goal by Manhattan distance, preferring unvisited cells. The target
        length is re-derived from the tail after every step, so an extended
        path is a fixed point of this method.
        """
        if not self.path:
            return self.with_path([self.grid.start]).extend_toward_goal()

        goal = self.grid.goal
        extended = list(self.path)
        visited = set(extended)
        last = extended[-1]

        while last != goal and len(extended) < self.target_length(last):
            neighbors = walkable_neighbors(self.grid, last)
            fresh = [n for n in neighbors if n not in visited]
            candidates = fresh or neighbors
            if not candidates:
                break

            # Ties go to the earliest of up/down/left/right
            last = min(candidates, key=lambda n: _manhattan(n, goal))
            extended.append(last)
            visited.add(last)

        if len(extended) == len(self.path):
            return self
        return self.with_path(extended)
