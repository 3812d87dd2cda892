"""
Solution Cache Module
=====================

Best-effort store of the best GA solution per maze, one ``row,col`` pair
per line. Missing or corrupt files read as a cache miss.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from ..grid import Grid, Coordinate

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r'[^a-zA-Z0-9_-]')


def sanitize_name(name: str) -> str:
    """Replace every character outside [a-zA-Z0-9_-] with an underscore"""
    return _UNSAFE_CHARS.sub('_', name)


class SolutionCache:
    """
    Best-solution file per maze name.

    Usage:
        cache = SolutionCache('ga_checkpoints')
        cache.save(grid.name, path)
        path = cache.load(grid)  # None on miss
    """

    def __init__(self,
                 cache_dir: Union[str, Path] = 'ga_checkpoints',
                 suffix: str = '_ga_best.txt'):
        self.cache_dir = Path(cache_dir)
        self.suffix = suffix

    def path_for(self, maze_name: str) -> Path:
        return self.cache_dir / f"{sanitize_name(maze_name)}{self.suffix}"

    def exists(self, maze_name: str) -> bool:
        return self.path_for(maze_name).is_file()

    def save(self, maze_name: str, path: Sequence[Tuple[int, int]]) -> bool:
        """
        Write a path, replacing any previous one.

        Returns:
            True on success, False if the file could not be written
        """
        target = self.path_for(maze_name)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with open(target, 'w') as f:
                for row, col in path:
                    f.write(f"{row},{col}\n")
        except OSError as e:
            logger.debug("Could not write solution cache %s: %s", target, e)
            return False
        logger.debug("Saved %d-cell solution to %s", len(path), target)
        return True

    def load(self, grid: Grid) -> Optional[List[Coordinate]]:
        """
        Read the cached path for a grid.

        Lines without exactly two comma-separated fields are skipped. The
        path is only returned when it starts at the grid's start and every
        cell is in bounds and walkable; adjacency and goal checks are left
        to the caller.

        Returns:
            Cached path, or None on a miss
        """
        source = self.path_for(grid.name)
        if not source.is_file():
            logger.debug("No cached solution for %s", grid.name)
            return None

        path = []
        try:
            with open(source) as f:
                for line in f:
                    parts = line.strip().split(',')
                    if len(parts) != 2:
                        continue
                    path.append(Coordinate(int(parts[0]), int(parts[1])))
        except (OSError, ValueError) as e:
            logger.debug("Ignoring unreadable solution cache %s: %s", source, e)
            return None

        if not path or path[0] != grid.start or not all(grid.is_walkable(p) for p in path):
            logger.debug("Ignoring cached solution for %s: path does not fit the grid", grid.name)
            return None
        return path

    def clear(self, maze_name: str):
        self.path_for(maze_name).unlink(missing_ok=True)
