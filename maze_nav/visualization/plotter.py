"""
Visualization Module
====================

Static maze plots: cell map, solver paths overlaid, side-by-side solver
comparison and GA fitness curves.
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.colors import ListedColormap
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import VisualizationConfig
from ..grid import Grid


class MazeVisualizer:
    """
    Maze visualization.

    Rows run top to bottom; a cell (row, col) is drawn at x=col, y=row.
    """

    def __init__(self, grid: Grid, config: Optional[VisualizationConfig] = None):
        """
        Initialize visualizer.

        Args:
            grid: Grid to draw
            config: Visualization configuration
        """
        self.grid = grid
        self.config = config or VisualizationConfig()
        self.cmap = ListedColormap(self.config.cell_colors)

    def plot_maze(self, ax=None, title: Optional[str] = None) -> plt.Axes:
        """
        Plot the cell map with start and goal markers.

        Args:
            ax: Matplotlib axes (creates new if None)
            title: Axes title (defaults to the grid name)

        Returns:
            Matplotlib axes
        """
        if ax is None:
            fig, ax = plt.subplots(figsize=self.config.figure_size)

        ax.imshow(
            self.grid.cell_types,
            cmap=self.cmap,
            vmin=0,
            vmax=len(self.config.cell_colors) - 1,
            interpolation='nearest',
        )

        start, goal = self.grid.start, self.grid.goal
        ax.plot(start.col, start.row, 'go', markersize=10,
                markeredgecolor='white', markeredgewidth=1.5, label='Start')
        ax.plot(goal.col, goal.row, 'r*', markersize=14,
                markeredgecolor='white', markeredgewidth=1.5, label='Goal')

        ax.set_xticks([])
        ax.set_yticks([])
        ax.set_title(title or self.grid.name)
        return ax

    def plot_path(self, ax, path: Sequence[Tuple[int, int]],
                  color: str = 'tab:blue', label: Optional[str] = None,
                  linewidth: float = 2.0, alpha: float = 0.8):
        """Plot a path on existing axes"""
        if not path or len(path) < 2:
            return

        path_arr = np.asarray(path)
        ax.plot(path_arr[:, 1], path_arr[:, 0],
                color=color, linewidth=linewidth,
                alpha=alpha, label=label)

    def plot_solution(self, path: Sequence[Tuple[int, int]],
                      label: Optional[str] = None,
                      title: Optional[str] = None) -> plt.Figure:
        """Single-panel figure of the maze with one path"""
        fig, ax = plt.subplots(figsize=self.config.figure_size)
        self.plot_maze(ax, title=title)
        self.plot_path(ax, path, color=self.config.path_colors[0], label=label)
        ax.legend(loc='upper right', fontsize=8)
        return fig

    def plot_comparison(self, paths: Dict[str, List[Tuple[int, int]]],
                        title: str = 'Solver Comparison',
                        ncols: int = 3) -> plt.Figure:
        """
        Create a multi-panel figure, one panel per solver.

        Args:
            paths: Dict of solver name -> path (empty path for failures)
            title: Figure title
            ncols: Panels per row

        Returns:
            Matplotlib figure
        """
        n = max(1, len(paths))
        ncols = max(1, min(ncols, n))
        nrows = int(np.ceil(n / ncols))
        fig, axes = plt.subplots(nrows, ncols, figsize=(4 * ncols, 4 * nrows), squeeze=False)

        colors = self.config.path_colors
        for i, ax in enumerate(axes.flat):
            if i >= len(paths):
                ax.axis('off')
                continue
            name, path = list(paths.items())[i]
            suffix = f"len={len(path)}" if path else "failed"
            self.plot_maze(ax, title=f"{name} ({suffix})")
            self.plot_path(ax, path, color=colors[i % len(colors)])

        plt.suptitle(title, fontsize=14, fontweight='bold')
        return fig

    @staticmethod
    def plot_fitness_history(history: Sequence[float], ax=None,
                             title: str = 'GA Best Fitness') -> plt.Axes:
        """Plot best fitness per generation"""
        if ax is None:
            fig, ax = plt.subplots(figsize=(8, 4))

        values = np.asarray(history, dtype=float)
        values = np.where(np.isfinite(values), values, np.nan)
        ax.plot(np.arange(len(values)), values, color='tab:blue', linewidth=1.5)
        ax.set_xlabel('Generation')
        ax.set_ylabel('Best fitness')
        ax.set_title(title)
        ax.grid(True, alpha=0.3)
        return ax

    def save_figure(self, fig: plt.Figure, filename: str, dpi: Optional[int] = None):
        """Save figure to file"""
        Path(filename).parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(filename, dpi=dpi or self.config.dpi,
                    bbox_inches='tight', facecolor='white')
        plt.close(fig)
