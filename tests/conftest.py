"""Shared grid builders and fixtures"""

import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest

from maze_nav.config import Config, GAConfig, PersistenceConfig
from maze_nav.grid import Grid, parse_maze


OPEN_3X3 = [
    "S..",
    "...",
    "..G",
]

BLOCKED = ["S#G"]

ENCLOSED_START = [
    "#####",
    "#S#.#",
    "###G#",
]

# Direct route crosses a weight-9 cell; the detour below it costs 4
WEIGHTED = [
    'S"9"G',
    "...",
]

# Two corridors from start to goal plus dead ends
LOOP_MAZE = [
    "#########",
    "#S......#",
    "#.#.###.#",
    "#.#...#.#",
    "#.###.#.#",
    "#...#...#",
    "###.#.#.#",
    "#.....#G#",
    "#########",
]

# Long weighted corridor vs short expensive one
WEIGHTED_MAZE = [
    "#######",
    '#S"5"...#',
    "#.###.#",
    "#.#...#",
    "#.#.###",
    '#..."2"G#',
    "#######",
]


def build(rows, name='test'):
    """Grid from maze text rows"""
    return parse_maze(rows, name=name)


def same_cell_grid():
    """3x3 open grid whose start is also its goal"""
    return Grid(np.ones((3, 3), dtype=np.int8), (1, 1), (1, 1), name='same_cell')


def small_ga_config(**overrides) -> Config:
    """Config with a small, uncached GA and persistence switched off"""
    ga = GAConfig(pop_size=12, generations=8, stagnation_limit=5, use_cache=False)
    for key, value in overrides.items():
        setattr(ga, key, value)
    return Config(ga=ga, persistence=PersistenceConfig(enabled=False), random_seed=7)


@pytest.fixture
def open_grid():
    return build(OPEN_3X3, 'open_3x3')


@pytest.fixture
def blocked_grid():
    return build(BLOCKED, 'blocked')


@pytest.fixture
def enclosed_grid():
    return build(ENCLOSED_START, 'enclosed')


@pytest.fixture
def weighted_grid():
    return build(WEIGHTED, 'weighted')


@pytest.fixture
def loop_grid():
    return build(LOOP_MAZE, 'loops')


@pytest.fixture
def weighted_maze():
    return build(WEIGHTED_MAZE, 'weighted_maze')


@pytest.fixture
def tmp_config(tmp_path):
    """Small GA config persisting into a temporary directory"""
    config = small_ga_config(use_cache=True)
    config.persistence = PersistenceConfig(enabled=True, cache_dir=str(tmp_path / 'ga'))
    config.maze.maze_dir = str(tmp_path / 'mazes')
    return config
