"""
Grid Types Module
=================

Cell type enumeration and the coordinate value type.
"""

from enum import IntEnum
from typing import NamedTuple


class Coordinate(NamedTuple):
    """Integer (row, col) grid position with value equality"""
    row: int
    col: int

    def __repr__(self) -> str:
        return f"({self.row}, {self.col})"


class CellType(IntEnum):
    """
    Cell type enumeration.

    Values are integers for efficient numpy array storage.
    Only WEIGHTED cells carry an explicit weight; every other walkable
    cell costs 1 to enter.
    """
    WALL = 0
    OPEN = 1
    START = 2
    GOAL = 3
    WEIGHTED = 4

    @classmethod
    def from_symbol(cls, symbol: str) -> 'CellType':
        """Get cell type from a single maze-file character"""
        try:
            return _SYMBOLS[symbol]
        except KeyError:
            raise ValueError(f"Unknown maze symbol: {symbol!r}") from None

    @property
    def symbol(self) -> str:
        """Character used for this type in maze files (weighted cells are quoted)"""
        return _REVERSE_SYMBOLS[self]

    def is_walkable(self) -> bool:
        return self != CellType.WALL


_SYMBOLS = {
    '#': CellType.WALL,
    '.': CellType.OPEN,
    ' ': CellType.OPEN,
    'S': CellType.START,
    'G': CellType.GOAL,
}

_REVERSE_SYMBOLS = {
    CellType.WALL: '#',
    CellType.OPEN: '.',
    CellType.START: 'S',
    CellType.GOAL: 'G',
    CellType.WEIGHTED: '"',
}
