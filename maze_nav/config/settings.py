"""
Configuration Settings Module
=============================

Dataclass-based configuration with validation and defaults.
"""

import json
from dataclasses import dataclass, field, asdict, fields, is_dataclass
from pathlib import Path
from typing import Dict, Optional, Any, Tuple


@dataclass
class SearchConfig:
    """Deterministic solver parameters"""
    weighted_astar_weight: float = 1.5
    wall_follower_step_multiplier: int = 10  # steps = width * height * multiplier
    iddfs_max_expansions: Optional[int] = 2_000_000  # None for unbounded

    def validate(self):
        if self.weighted_astar_weight < 1.0:
            raise ValueError("weighted_astar_weight must be >= 1.0")
        if self.wall_follower_step_multiplier < 1:
            raise ValueError("wall_follower_step_multiplier must be >= 1")
        if self.iddfs_max_expansions is not None and self.iddfs_max_expansions < 1:
            raise ValueError("iddfs_max_expansions must be positive or None")


@dataclass
class GAConfig:
    """Genetic Algorithm configuration"""
    pop_size: int = 500
    generations: int = 200
    stagnation_limit: int = 20
    elite_frac: float = 0.05
    tournament_k: int = 4

    # Mutation dispatch (disjoint, remainder is left unmutated)
    perturbation_rate: float = 0.10
    smoothing_rate: float = 0.20
    regrowth_rate: float = 0.05

    # Repair / extension
    bridge_depth_cap: int = 100
    regrowth_depth_cap: int = 50
    probe_radius: int = 5
    extend_factor: int = 3
    extend_min: int = 50
    extend_max: int = 500

    # Breeding budget
    max_offspring_attempts: int = 20  # multiplied by pop_size
    max_empty_offspring: int = 10

    # Persistence / result policy
    checkpoint_interval: int = 10
    use_cache: bool = True
    accept_partial: bool = False
    min_cached_length: int = 2

    def validate(self):
        if self.pop_size < 10:
            raise ValueError("Population size must be at least 10")
        if self.generations < 1:
            raise ValueError("Max generations must be at least 1")
        if not 0.0 <= self.elite_frac < 1.0:
            raise ValueError("elite_frac must be in [0, 1)")
        if self.tournament_k < 1:
            raise ValueError("tournament_k must be at least 1")
        total = self.perturbation_rate + self.smoothing_rate + self.regrowth_rate
        if min(self.perturbation_rate, self.smoothing_rate, self.regrowth_rate) < 0 or total > 1.0:
            raise ValueError("mutation rates must be non-negative and sum to at most 1")
        if self.stagnation_limit < 1:
            raise ValueError("stagnation_limit must be at least 1")
        if self.checkpoint_interval < 1:
            raise ValueError("checkpoint_interval must be at least 1")


@dataclass
class FitnessConfig:
    """Fitness shaping weights (higher fitness is better)"""
    goal_reward: float = 1_000_000.0
    goal_cost_weight: float = 0.1
    goal_collision_weight: float = 10.0

    distance_reward: float = 50_000.0
    distance_decay: float = 5.0
    exploration_bonus: float = 5_000.0
    progress_bonus: float = 10_000.0
    cost_reward: float = 100.0
    cost_scale: float = 1_000.0

    wall_penalty: int = 1000  # per out-of-grid or wall cell
    gap_penalty: int = 500    # per non-adjacent consecutive pair
    outside_step_cost: int = 1000


@dataclass
class PersistenceConfig:
    """GA checkpoint and best-solution cache locations"""
    enabled: bool = True
    cache_dir: str = 'ga_checkpoints'
    best_suffix: str = '_ga_best.txt'
    checkpoint_suffix: str = '_ga_checkpoint.json'


@dataclass
class MazeConfig:
    """Maze files and random maze generation"""
    maze_dir: str = 'mazes'
    file_glob: str = '*.txt'

    # Generation parameters
    rows: int = 21
    cols: int = 21
    extra_links: int = 10
    weighted_fraction: float = 0.0
    max_weight: int = 9


@dataclass
class VisualizationConfig:
    """Plotting configuration"""
    # Indexed by CellType value: WALL, OPEN, START, GOAL, WEIGHTED
    cell_colors: Tuple[str, ...] = ('black', 'white', 'limegreen', 'crimson', 'khaki')
    path_colors: Tuple[str, ...] = ('tab:blue', 'tab:orange', 'tab:purple',
                                    'tab:brown', 'tab:cyan', 'tab:olive')
    figure_size: Tuple[int, int] = (10, 10)
    dpi: int = 100


@dataclass
class Config:
    """
    Master configuration class combining all sub-configurations.

    Usage:
        config = Config()
        config = Config(ga=GAConfig(pop_size=50, generations=30))
        config = Config.from_dict({'ga': {'pop_size': 50}, 'verbose': True})
    """
    search: SearchConfig = field(default_factory=SearchConfig)
    ga: GAConfig = field(default_factory=GAConfig)
    fitness: FitnessConfig = field(default_factory=FitnessConfig)
    persistence: PersistenceConfig = field(default_factory=PersistenceConfig)
    maze: MazeConfig = field(default_factory=MazeConfig)
    visualization: VisualizationConfig = field(default_factory=VisualizationConfig)

    # Global settings
    random_seed: Optional[int] = None
    verbose: bool = False

    def validate(self) -> 'Config':
        """Validate all sections, returning self for chaining"""
        self.search.validate()
        self.ga.validate()
        return self

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Config':
        """Create Config from (possibly nested) dictionary"""
        config = cls()
        for key, value in d.items():
            if not hasattr(config, key):
                continue
            current = getattr(config, key)
            if is_dataclass(current) and isinstance(value, dict):
                _update_section(current, value)
            else:
                setattr(config, key, value)
        return config.validate()

    @classmethod
    def from_json(cls, path) -> 'Config':
        """Load Config from a JSON file"""
        with open(Path(path)) as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> Dict[str, Any]:
        """Export config to dictionary"""
        return asdict(self)


def _update_section(section, values: Dict[str, Any]):
    """Set known fields of a sub-configuration, keeping tuple fields as tuples"""
    known = {f.name for f in fields(section)}
    for key, value in values.items():
        if key not in known:
            continue
        if isinstance(getattr(section, key), tuple) and isinstance(value, list):
            value = tuple(value)
        setattr(section, key, value)


# Convenience aliases
GASettings = GAConfig
