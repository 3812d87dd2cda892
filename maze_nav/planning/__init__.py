"""
Planning Module
===============

Cost-capped A* bridge planning for chromosome repair and mutation.
"""

from .astar import AStarPlanner, PlannerStats, straight_walk

__all__ = [
    'AStarPlanner',
    'PlannerStats',
    'straight_walk',
]
