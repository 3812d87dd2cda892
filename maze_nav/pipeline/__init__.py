"""
Pipeline Module
===============

Solver profiling and GA training runners.
"""

from .runner import (
    ProfileRunner,
    ProfileRecord,
    ProfileReport,
    TrainingRunner,
    TrainingIteration,
    TrainingReport,
)

__all__ = [
    'ProfileRunner',
    'ProfileRecord',
    'ProfileReport',
    'TrainingRunner',
    'TrainingIteration',
    'TrainingReport',
]
