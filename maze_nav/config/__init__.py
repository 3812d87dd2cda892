"""
Configuration Module
====================

Centralized configuration management for the maze navigation engine.
"""

from .settings import (
    Config,
    SearchConfig,
    GAConfig,
    GASettings,
    FitnessConfig,
    PersistenceConfig,
    MazeConfig,
    VisualizationConfig,
)

__all__ = [
    'Config',
    'SearchConfig',
    'GAConfig',
    'GASettings',
    'FitnessConfig',
    'PersistenceConfig',
    'MazeConfig',
    'VisualizationConfig',
]
