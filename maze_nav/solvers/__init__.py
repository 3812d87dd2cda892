"""
Solvers Module
==============

Solver contract, shared toolkit, the deterministic search family and the
solver registry.
"""

from .base import (
    FailureKind,
    MazeSolvingError,
    SolverResult,
    Solver,
    path_cost,
    solve,
)
from .toolkit import (
    Direction,
    DIRECTIONS,
    FlatGrid,
    move,
    is_walkable,
    step_cost,
    walkable_neighbors,
    manhattan,
    is_adjacent,
    is_valid_path,
)
from .uninformed import BFSSolver, DFSSolver, IDDFSSolver
from .weighted import DijkstraSolver, BellmanFordSolver, SPFASolver
from .heuristic import (
    AStarSolver,
    WeightedAStarSolver,
    BestFirstSolver,
    ThetaStarSolver,
    has_line_of_sight,
    line_cost,
)
from .bidirectional import BidirectionalBFSSolver, BidirectionalDijkstraSolver
from .maze_rules import DeadEndFillSolver, WallFollowerSolver, WallSide
from .registry import available_solvers, get_solver, solver_names, solver_keys

__all__ = [
    'FailureKind',
    'MazeSolvingError',
    'SolverResult',
    'Solver',
    'path_cost',
    'solve',
    'Direction',
    'DIRECTIONS',
    'FlatGrid',
    'move',
    'is_walkable',
    'step_cost',
    'walkable_neighbors',
    'manhattan',
    'is_adjacent',
    'is_valid_path',
    'BFSSolver',
    'DFSSolver',
    'IDDFSSolver',
    'DijkstraSolver',
    'BellmanFordSolver',
    'SPFASolver',
    'AStarSolver',
    'WeightedAStarSolver',
    'BestFirstSolver',
    'ThetaStarSolver',
    'has_line_of_sight',
    'line_cost',
    'BidirectionalBFSSolver',
    'BidirectionalDijkstraSolver',
    'DeadEndFillSolver',
    'WallFollowerSolver',
    'WallSide',
    'available_solvers',
    'get_solver',
    'solver_names',
    'solver_keys',
]
