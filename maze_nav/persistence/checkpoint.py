"""
Checkpoint Module
=================

JSON population snapshots keyed by maze name:

    {
      "mazeName": "...",
      "generation": 10,
      "populationSize": 500,
      "individuals": [{"fitness": 123.4, "path": [[r, c], ...]}, ...]
    }

Stored fitness values are informational; the solver re-evaluates every
loaded path.
"""

import json
import logging
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from .cache import sanitize_name
from ..grid import Coordinate

logger = logging.getLogger(__name__)


@dataclass
class CheckpointData:
    """Deserialized checkpoint contents"""
    maze_name: str
    generation: int
    paths: List[List[Coordinate]] = field(default_factory=list)
    fitnesses: List[float] = field(default_factory=list)

    @property
    def population_size(self) -> int:
        return len(self.paths)


def _encode_fitness(value: float):
    # JSON has no infinities
    return value if math.isfinite(value) else None


class CheckpointManager:
    """Saves and loads GA population checkpoints (best-effort)"""

    def __init__(self,
                 cache_dir: Union[str, Path] = 'ga_checkpoints',
                 suffix: str = '_ga_checkpoint.json'):
        self.cache_dir = Path(cache_dir)
        self.suffix = suffix

    def path_for(self, maze_name: str) -> Path:
        return self.cache_dir / f"{sanitize_name(maze_name)}{self.suffix}"

    def exists(self, maze_name: str) -> bool:
        return self.path_for(maze_name).is_file()

    def save(self,
             maze_name: str,
             generation: int,
             individuals: Sequence[Tuple[Sequence[Tuple[int, int]], float]]) -> bool:
        """
        Write a checkpoint.

        Args:
            maze_name: Grid name
            generation: Generation number of the population
            individuals: (path, fitness) pairs

        Returns:
            True on success, False if the file could not be written
        """
        record = {
            'mazeName': maze_name,
            'generation': int(generation),
            'populationSize': len(individuals),
            'individuals': [
                {'fitness': _encode_fitness(fitness),
                 'path': [[int(r), int(c)] for r, c in path]}
                for path, fitness in individuals
            ],
        }

        target = self.path_for(maze_name)
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
            with open(target, 'w') as f:
                json.dump(record, f, indent=2)
        except OSError as e:
            logger.debug("Could not write checkpoint %s: %s", target, e)
            return False
        logger.debug("Checkpointed %s at generation %d (%d individuals)",
                     maze_name, generation, len(individuals))
        return True

    def load(self, maze_name: str) -> Optional[CheckpointData]:
        """
        Read a checkpoint.

        Individuals with empty paths are dropped.

        Returns:
            CheckpointData, or None when missing, corrupt or empty
        """
        source = self.path_for(maze_name)
        if not source.is_file():
            logger.debug("No checkpoint for %s", maze_name)
            return None

        try:
            with open(source) as f:
                record = json.load(f)
            data = CheckpointData(maze_name=maze_name, generation=int(record['generation']))
            for entry in record['individuals']:
                path = [Coordinate(int(r), int(c)) for r, c in entry['path']]
                if not path:
                    continue
                fitness = entry.get('fitness')
                data.paths.append(path)
                data.fitnesses.append(float(fitness) if fitness is not None else -math.inf)
        except (OSError, ValueError, KeyError, TypeError) as e:
            # json.JSONDecodeError is a ValueError
            logger.debug("Ignoring corrupt checkpoint %s: %s", source, e)
            return None

        if not data.paths:
            logger.debug("Ignoring empty checkpoint %s", source)
            return None
        return data

    def clear(self, maze_name: str):
        self.path_for(maze_name).unlink(missing_ok=True)
