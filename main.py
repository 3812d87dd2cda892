#!/usr/bin/env python3
"""
Maze Navigation Engine - Main Entry Point
=========================================

Usage:
    # List solvers and maze files
    python main.py list

    # Solve one maze with selected solvers
    python main.py solve m15_15.txt --algorithms astar,bfs,ga --seed 42

    # Profile every solver on every maze
    python main.py profile --output results/profile.json

    # Repeated GA training on one maze ("random" picks one)
    python main.py train m15_15.txt --iterations 10

    # Write a random maze file
    python main.py generate --rows 31 --cols 31 --output mazes/random_31.txt

    # Render solutions to PNG
    python main.py plot m15_15.txt --algorithms astar,wall-left --output plots/m15.png

For notebooks:
    from maze_nav import Config, ProfileRunner

    runner = ProfileRunner(Config())
    report = runner.run(solvers=['astar', 'dijkstra'])
"""

import argparse
import logging
import sys
from pathlib import Path

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def _build_config(args):
    """Config from --config (if any) with CLI overrides applied"""
    from maze_nav import Config

    config = Config.from_json(args.config) if args.config else Config()
    if args.seed is not None:
        config.random_seed = args.seed
    if getattr(args, 'maze_dir', None):
        config.maze.maze_dir = args.maze_dir
    config.verbose = args.verbose
    return config


def _split(value):
    return [v.strip() for v in value.split(',') if v.strip()] if value else None


def _load_grid(config, name):
    """Resolve a maze argument: a file path, a name in the maze directory, or 'random'"""
    import numpy as np
    from maze_nav import MazeStore, load_maze

    store = MazeStore(config.maze.maze_dir, config.maze.file_glob)
    if name == 'random':
        names = store.list_mazes()
        if not names:
            raise FileNotFoundError(f"No maze files in {config.maze.maze_dir}")
        rng = np.random.default_rng(config.random_seed)
        name = names[int(rng.integers(len(names)))]
        print(f"Randomly selected maze: {name}")
    path = Path(name)
    if path.is_file():
        return load_maze(path)
    return store.get(name)


def run_list(args):
    """List solvers and available mazes"""
    from maze_nav import MazeStore, available_solvers
    from maze_nav.solvers import solver_keys

    config = _build_config(args)

    print("Algorithms:")
    for key, solver in zip(solver_keys(), available_solvers(config)):
        print(f"  {key:<16} {solver.algorithm_name}")

    store = MazeStore(config.maze.maze_dir, config.maze.file_glob)
    names = store.list_mazes()
    print(f"\nMazes in {config.maze.maze_dir}:")
    if not names:
        print("  (none)")
    for name in names:
        mark = "" if store.is_valid_maze(name) else "  [invalid]"
        print(f"  {name}{mark}")
    return 0


def run_solve(args):
    """Solve one maze with one or more solvers"""
    from maze_nav import ProfileRunner, compute_path_metrics
    from maze_nav.metrics import RunStatus

    config = _build_config(args)
    try:
        grid = _load_grid(config, args.maze)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    runner = ProfileRunner(config)
    try:
        solvers = runner.select_solvers(_split(args.algorithms))
    except KeyError as e:
        print(f"Error: {e}")
        return 1

    print("\n" + "=" * 60)
    print(f"MAZE {grid.name} ({grid.height}x{grid.width})  start={grid.start} goal={grid.goal}")
    print("=" * 60)

    all_ok = True
    for solver in solvers:
        record = runner.run_single(solver, grid)
        if record.status == RunStatus.SUCCESS:
            print(f"✓ {record.algorithm:28s} cost={record.cost:<7d} length={record.length:<6d} "
                  f"time={record.time_ms:.3f} ms")
        elif record.cost is not None:
            all_ok = False
            print(f"✗ {record.algorithm:28s} cost={record.cost:<7d} length={record.length:<6d} "
                  f"(stops before goal)")
        else:
            all_ok = False
            print(f"✗ {record.algorithm:28s} {record.status}: {record.error}")

        if args.show_path and record.cost is not None:
            from maze_nav import solve
            path = solve(solver, grid).path
            metrics = compute_path_metrics(grid, path)
            print(f"    turns={metrics.turns} revisits={metrics.revisits} "
                  f"backtrack={metrics.backtrack_ratio:.2f}")
            print("    " + " ".join(f"{p.row},{p.col}" for p in path))

    print("=" * 60)
    return 0 if all_ok else 1


def run_profile(args):
    """Profile solvers over maze files"""
    from maze_nav import ProfileRunner

    config = _build_config(args)
    runner = ProfileRunner(config)
    try:
        report = runner.run(
            solvers=_split(args.algorithms),
            mazes=_split(args.mazes),
            output_file=args.output,
            verbose=True,
        )
    except KeyError as e:
        print(f"Error: {e}")
        return 1

    if not report.records:
        print(f"No mazes to profile in {config.maze.maze_dir}")
        return 1
    if args.output:
        print(f"\nResults saved to: {args.output}")
    return 0


def run_train(args):
    """Repeated GA runs on one maze"""
    from maze_nav import TrainingRunner

    config = _build_config(args)
    try:
        grid = _load_grid(config, args.maze)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    runner = TrainingRunner(config)
    report = runner.train(
        grid,
        iterations=args.iterations,
        pop_size=args.pop_size,
        generations=args.generations,
        verbose=True,
    )
    return 0 if report.reached_goal else 1


def run_generate(args):
    """Write a random maze file"""
    from maze_nav import MazeGenerator
    from maze_nav.grid import save_maze

    config = _build_config(args)
    generator = MazeGenerator(config.maze, seed=config.random_seed)
    grid = generator.generate(args.rows, args.cols)

    output = Path(args.output) if args.output else Path(config.maze.maze_dir) / f"{grid.name}.txt"
    save_maze(grid, output)
    stats = grid.get_stats()
    print(f"Wrote {grid.height}x{grid.width} maze to {output} "
          f"({stats['walkable']} walkable, {stats['weighted']} weighted)")
    return 0


def run_plot(args):
    """Render solver paths to an image file"""
    import matplotlib
    matplotlib.use('Agg')
    from maze_nav import MazeVisualizer, MazeSolvingError, solve
    from maze_nav.pipeline import ProfileRunner

    config = _build_config(args)
    try:
        grid = _load_grid(config, args.maze)
        solvers = ProfileRunner(config).select_solvers(_split(args.algorithms) or ['astar'])
    except (OSError, ValueError, KeyError) as e:
        print(f"Error: {e}")
        return 1

    paths = {}
    histories = {}
    for solver in solvers:
        try:
            paths[solver.algorithm_name] = list(solve(solver, grid).path)
        except MazeSolvingError as e:
            print(f"✗ {solver.algorithm_name}: {e}")
            paths[solver.algorithm_name] = []
        last = getattr(solver, 'last_result', None)
        if last is not None and last.fitness_history:
            histories[solver.algorithm_name] = last.fitness_history

    visualizer = MazeVisualizer(grid, config.visualization)
    if len(paths) == 1:
        name, path = next(iter(paths.items()))
        fig = visualizer.plot_solution(path, label=name, title=f"{grid.name} - {name}")
    else:
        fig = visualizer.plot_comparison(paths, title=grid.name)

    output = Path(args.output)
    visualizer.save_figure(fig, str(output))
    print(f"Saved plot to: {output}")

    for name, history in histories.items():
        import matplotlib.pyplot as plt
        fig, ax = plt.subplots(figsize=(8, 4))
        visualizer.plot_fitness_history(history, ax=ax, title=f"{name} - {grid.name}")
        history_file = output.with_name(f"{output.stem}_fitness{output.suffix}")
        visualizer.save_figure(fig, str(history_file))
        print(f"Saved fitness history to: {history_file}")

    return 0


def main(argv=None):
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('--seed', type=int, default=None, help='Random seed')
    common.add_argument('--config', type=str, help='JSON configuration file')
    common.add_argument('--maze_dir', type=str, help='Maze directory')
    common.add_argument('--verbose', '-v', action='store_true', help='Verbose (DEBUG) logging')

    parser = argparse.ArgumentParser(
        description='Maze Navigation Engine',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # List command
    subparsers.add_parser('list', parents=[common], help='List solvers and mazes')

    # Solve command
    solve_parser = subparsers.add_parser('solve', parents=[common], help='Solve one maze')
    solve_parser.add_argument('maze', type=str, help="Maze file name, path, or 'random'")
    solve_parser.add_argument('--algorithms', type=str, help='Comma-separated solver keys or names')
    solve_parser.add_argument('--show_path', action='store_true', help='Print path cells and metrics')

    # Profile command
    profile_parser = subparsers.add_parser('profile', parents=[common], help='Profile solvers over mazes')
    profile_parser.add_argument('--algorithms', type=str, help='Comma-separated solver keys or names')
    profile_parser.add_argument('--mazes', type=str, help='Comma-separated maze file names')
    profile_parser.add_argument('--output', type=str, help='JSON report file')

    # Train command
    train_parser = subparsers.add_parser('train', parents=[common], help='Repeated GA training on one maze')
    train_parser.add_argument('maze', type=str, nargs='?', default='m15_15.txt',
                              help="Maze file name, path, or 'random'")
    train_parser.add_argument('--iterations', type=int, default=10, help='Number of GA runs')
    train_parser.add_argument('--pop_size', type=int, default=None, help='Population size per run')
    train_parser.add_argument('--generations', type=int, default=None, help='Generation cap per run')

    # Generate command
    gen_parser = subparsers.add_parser('generate', parents=[common], help='Write a random maze file')
    gen_parser.add_argument('--rows', type=int, default=21, help='Rows')
    gen_parser.add_argument('--cols', type=int, default=21, help='Columns')
    gen_parser.add_argument('--output', type=str, help='Output file (default: maze directory)')

    # Plot command
    plot_parser = subparsers.add_parser('plot', parents=[common], help='Render solver paths to PNG')
    plot_parser.add_argument('maze', type=str, help="Maze file name, path, or 'random'")
    plot_parser.add_argument('--algorithms', type=str, help='Comma-separated solver keys (default astar)')
    plot_parser.add_argument('--output', type=str, default='maze.png', help='Image file')

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=LOG_FORMAT,
    )

    commands = {
        'list': run_list,
        'solve': run_solve,
        'profile': run_profile,
        'train': run_train,
        'generate': run_generate,
        'plot': run_plot,
    }
    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
