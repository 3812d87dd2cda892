"""
Maze Navigation Engine - Modular Architecture
=============================================

Grid maze pathfinding with interchangeable solvers.

This package solves 2-D grid mazes from a start cell to a goal cell and
compares the solvers on path cost, length and wall-clock time.

Key Features:
- Immutable grid model with open, wall and weighted cells
- Fourteen deterministic solvers behind one search contract
- Genetic algorithm optimizer with checkpoint resume and a solution cache
- Batch profiling, GA training and path plotting

Version: 1.0.0
"""

__version__ = "1.0.0"

from .config import Config, GASettings
from .grid import Grid, CellType, Coordinate, MazeStore, MazeGenerator, load_maze, parse_maze
from .solvers import (
    Solver,
    SolverResult,
    MazeSolvingError,
    FailureKind,
    solve,
    available_solvers,
    get_solver,
)
from .planning import AStarPlanner
from .optimization import GeneticAlgorithmSolver, GAResult
from .persistence import SolutionCache, CheckpointManager
from .metrics import PathMetrics, RunClassifier, compute_path_metrics
from .visualization import MazeVisualizer
from .pipeline import ProfileRunner, TrainingRunner

__all__ = [
    'Config', 'GASettings',
    'Grid', 'CellType', 'Coordinate', 'MazeStore', 'MazeGenerator',
    'load_maze', 'parse_maze',
    'Solver', 'SolverResult', 'MazeSolvingError', 'FailureKind',
    'solve', 'available_solvers', 'get_solver',
    'AStarPlanner',
    'GeneticAlgorithmSolver', 'GAResult',
    'SolutionCache', 'CheckpointManager',
    'PathMetrics', 'RunClassifier', 'compute_path_metrics',
    'MazeVisualizer',
    'ProfileRunner', 'TrainingRunner',
]
