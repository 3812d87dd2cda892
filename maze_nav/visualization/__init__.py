"""
Visualization Module
====================

Maze and path plotting.
"""

from .plotter import MazeVisualizer

__all__ = [
    'MazeVisualizer',
]
