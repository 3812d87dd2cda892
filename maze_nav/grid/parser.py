"""
Maze File Module
================

Text maze format, file loading, and the shared per-name maze store.

Format (one grid row per non-blank line):
    #      wall
    . or ' '  open cell
    S      start (exactly one)
    G      goal (exactly one)
    "n"    weighted cell with positive integer weight n
"""

import logging
import numpy as np
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from .types import CellType
from .world import Grid

logger = logging.getLogger(__name__)


class MazeFormatError(ValueError):
    """Raised when maze text cannot be parsed into a valid grid"""


def _tokenize_row(line: str, line_no: int) -> List[tuple]:
    """Split a row into (CellType, weight) tokens"""
    tokens = []
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == '"':
            end = line.find('"', i + 1)
            if end == -1:
                raise MazeFormatError(f"Line {line_no}: unterminated weight token")
            raw = line[i + 1:end].strip()
            if not raw.isdigit() or int(raw) <= 0:
                raise MazeFormatError(
                    f"Line {line_no}: weight must be a positive integer, got {raw!r}"
                )
            tokens.append((CellType.WEIGHTED, int(raw)))
            i = end + 1
            continue
        try:
            tokens.append((CellType.from_symbol(ch), 0))
        except ValueError as e:
            raise MazeFormatError(f"Line {line_no}: {e}") from None
        i += 1
    return tokens


def parse_maze(lines: Iterable[str], name: str = 'maze') -> Grid:
    """
    Parse maze text into a Grid.

    Args:
        lines: Maze rows (blank lines are ignored)
        name: Grid name

    Returns:
        Parsed Grid

    Raises:
        MazeFormatError: On unknown symbols, ragged rows, or missing/duplicate S or G
    """
    rows = []
    for line_no, line in enumerate(lines, start=1):
        line = line.rstrip('\r\n')
        if not line.strip():
            continue
        rows.append(_tokenize_row(line, line_no))

    if not rows:
        raise MazeFormatError("Maze has no rows")

    width = len(rows[0])
    if any(len(r) != width for r in rows):
        raise MazeFormatError("All maze rows must have the same number of cells")

    types = np.zeros((len(rows), width), dtype=np.int8)
    weights = np.ones((len(rows), width), dtype=np.int64)
    for r, row in enumerate(rows):
        for c, (cell_type, weight) in enumerate(row):
            types[r, c] = cell_type
            if cell_type == CellType.WEIGHTED:
                weights[r, c] = weight

    starts = np.argwhere(types == CellType.START)
    goals = np.argwhere(types == CellType.GOAL)
    if len(starts) != 1:
        raise MazeFormatError(f"Maze must contain exactly one start, found {len(starts)}")
    if len(goals) != 1:
        raise MazeFormatError(f"Maze must contain exactly one goal, found {len(goals)}")

    return Grid(types, tuple(starts[0]), tuple(goals[0]), weights=weights, name=name)


def load_maze(path: Union[str, Path], name: Optional[str] = None) -> Grid:
    """Load a maze file; the grid is named after the file unless given"""
    path = Path(path)
    with open(path, encoding='utf-8') as f:
        grid = parse_maze(f.readlines(), name=name or path.name)
    logger.debug("Loaded maze %s (%dx%d)", grid.name, grid.height, grid.width)
    return grid


def format_maze(grid: Grid) -> str:
    """Serialize a grid back to maze text"""
    costs = grid.cost_array()
    lines = []
    for r in range(grid.height):
        chars = []
        for c in range(grid.width):
            cell_type = CellType(int(grid.cell_types[r, c]))
            if cell_type == CellType.WEIGHTED:
                chars.append(f'"{int(costs[r, c])}"')
            else:
                chars.append(cell_type.symbol)
        lines.append(''.join(chars))
    return '\n'.join(lines) + '\n'


def save_maze(grid: Grid, path: Union[str, Path]):
    """Write a grid to a maze file, creating parent directories"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(format_maze(grid), encoding='utf-8')


class MazeStore:
    """
    Loads each maze once per name and shares the immutable Grid.

    Mazes are looked up as files inside ``maze_dir``.
    """

    def __init__(self, maze_dir: Union[str, Path] = 'mazes', file_glob: str = '*.txt'):
        self.maze_dir = Path(maze_dir)
        self.file_glob = file_glob
        self._cache: Dict[str, Grid] = {}

    def get(self, name: str) -> Grid:
        """
        Get a maze by file name, loading it on first use.

        Raises:
            FileNotFoundError: If no such maze file exists
            MazeFormatError: If the file is malformed
        """
        if name not in self._cache:
            path = self.maze_dir / name
            if not path.is_file():
                raise FileNotFoundError(f"Maze file not found: {path}")
            self._cache[name] = load_maze(path, name=name)
        return self._cache[name]

    def list_mazes(self) -> List[str]:
        """Sorted maze file names available in the maze directory"""
        if not self.maze_dir.is_dir():
            return []
        return sorted(p.name for p in self.maze_dir.glob(self.file_glob) if p.is_file())

    def is_valid_maze(self, name: str) -> bool:
        try:
            self.get(name)
        except (OSError, ValueError):
            return False
        return True

    def clear(self):
        self._cache.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._cache
