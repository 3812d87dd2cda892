"""
Persistence Module
==================

Best-effort GA checkpoint and best-solution cache files.
"""

from .cache import SolutionCache, sanitize_name
from .checkpoint import CheckpointManager, CheckpointData

__all__ = [
    'SolutionCache',
    'sanitize_name',
    'CheckpointManager',
    'CheckpointData',
]
