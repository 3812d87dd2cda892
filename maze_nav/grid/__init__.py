"""
Grid Module
===========

Immutable maze grid model, maze file format, and random maze generation.
"""

from .types import CellType, Coordinate
from .world import Grid
from .parser import (
    MazeFormatError,
    MazeStore,
    parse_maze,
    load_maze,
    format_maze,
    save_maze,
)
from .generator import MazeGenerator

__all__ = [
    'CellType',
    'Coordinate',
    'Grid',
    'MazeFormatError',
    'MazeStore',
    'parse_maze',
    'load_maze',
    'format_maze',
    'save_maze',
    'MazeGenerator',
]
