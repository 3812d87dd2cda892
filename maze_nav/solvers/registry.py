"""
Solver Registry Module
======================

Ordered catalogue of every available solver, looked up by display name or
short key.
"""

from typing import List, Optional, Dict, Callable

from .base import Solver
from .bidirectional import BidirectionalBFSSolver, BidirectionalDijkstraSolver
from .heuristic import AStarSolver, WeightedAStarSolver, BestFirstSolver, ThetaStarSolver
from .maze_rules import DeadEndFillSolver, WallFollowerSolver, WallSide
from .uninformed import BFSSolver, DFSSolver, IDDFSSolver
from .weighted import DijkstraSolver, BellmanFordSolver, SPFASolver
from ..config import Config


def _factories(config: Config, seed: Optional[int]) -> Dict[str, Callable[[], Solver]]:
    # Imported here: the GA package depends on solvers.base
    from ..optimization.ga import GeneticAlgorithmSolver

    search = config.search
    seed = config.random_seed if seed is None else seed
    return {
        'wall-left': lambda: WallFollowerSolver(WallSide.LEFT, search.wall_follower_step_multiplier),
        'wall-right': lambda: WallFollowerSolver(WallSide.RIGHT, search.wall_follower_step_multiplier),
        'dead-end': DeadEndFillSolver,
        'ga': lambda: GeneticAlgorithmSolver(config, seed=seed),
        'astar': AStarSolver,
        'dijkstra': DijkstraSolver,
        'bfs': BFSSolver,
        'bibfs': BidirectionalBFSSolver,
        'best-first': BestFirstSolver,
        'dfs': DFSSolver,
        'iddfs': lambda: IDDFSSolver(search.iddfs_max_expansions),
        'bidijkstra': BidirectionalDijkstraSolver,
        'weighted-astar': lambda: WeightedAStarSolver(search.weighted_astar_weight),
        'bellman-ford': BellmanFordSolver,
        'spfa': SPFASolver,
        'theta': ThetaStarSolver,
    }


def available_solvers(config: Optional[Config] = None, seed: Optional[int] = None) -> List[Solver]:
    """
    Fresh instances of every solver, in display order.

    Args:
        config: Configuration for parameterized solvers
        seed: GA seed (defaults to config.random_seed)
    """
    config = config or Config()
    return [make() for make in _factories(config, seed).values()]


def solver_keys() -> List[str]:
    return list(_factories(Config(), None))


def solver_names() -> List[str]:
    return [solver.algorithm_name for solver in available_solvers()]


def get_solver(name: str, config: Optional[Config] = None, seed: Optional[int] = None) -> Solver:
    """
    Look up one solver by short key or display name (case-insensitive).

    Raises:
        KeyError: If no solver matches
    """
    config = config or Config()
    wanted = name.strip().lower()
    factories = _factories(config, seed)
    if wanted in factories:
        return factories[wanted]()
    for make in factories.values():
        solver = make()
        if solver.algorithm_name.lower() == wanted:
            return solver
    raise KeyError(f"Unknown solver: {name!r}")
