"""Command-line entry point"""

import matplotlib
matplotlib.use('Agg')

from maze_nav.grid import save_maze

from main import main
from conftest import build, LOOP_MAZE


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert 'usage' in capsys.readouterr().out


def test_list(tmp_path, capsys):
    save_maze(build(LOOP_MAZE), tmp_path / 'loops.txt')
    (tmp_path / 'bad.txt').write_text("S.\n")

    assert main(['list', '--maze_dir', str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert 'astar' in out and 'Theta* (Any-Angle A*)' in out
    assert 'loops.txt' in out
    assert 'bad.txt  [invalid]' in out


def test_generate_then_solve(tmp_path, capsys):
    maze_file = tmp_path / 'gen.txt'
    assert main(['generate', '--rows', '11', '--cols', '11', '--seed', '3',
                 '--output', str(maze_file)]) == 0
    assert maze_file.exists()

    assert main(['solve', str(maze_file), '--algorithms', 'astar,bfs', '--show_path']) == 0
    out = capsys.readouterr().out
    assert '✓ A* Search' in out
    assert 'turns=' in out


def test_solve_failures(tmp_path, capsys):
    save_maze(build(["S#G"]), tmp_path / 'blocked.txt')
    assert main(['solve', 'blocked.txt', '--maze_dir', str(tmp_path),
                 '--algorithms', 'bfs']) == 1
    assert main(['solve', 'absent.txt', '--maze_dir', str(tmp_path)]) == 1
    assert main(['solve', 'blocked.txt', '--maze_dir', str(tmp_path),
                 '--algorithms', 'nonsense']) == 1
    assert 'no_path' in capsys.readouterr().out


def test_random_maze_selection(tmp_path, capsys):
    save_maze(build(LOOP_MAZE), tmp_path / 'loops.txt')
    assert main(['solve', 'random', '--maze_dir', str(tmp_path),
                 '--algorithms', 'dijkstra', '--seed', '1']) == 0
    assert 'Randomly selected maze: loops.txt' in capsys.readouterr().out


def test_profile_writes_report(tmp_path):
    save_maze(build(LOOP_MAZE), tmp_path / 'loops.txt')
    output = tmp_path / 'results' / 'profile.json'
    assert main(['profile', '--maze_dir', str(tmp_path), '--algorithms', 'astar,dfs',
                 '--output', str(output)]) == 0
    assert output.exists()


def test_profile_empty_directory(tmp_path):
    assert main(['profile', '--maze_dir', str(tmp_path), '--algorithms', 'astar']) == 1


def test_plot(tmp_path):
    save_maze(build(LOOP_MAZE), tmp_path / 'loops.txt')
    output = tmp_path / 'plots' / 'loops.png'
    assert main(['plot', 'loops.txt', '--maze_dir', str(tmp_path),
                 '--algorithms', 'astar,wall-left', '--output', str(output)]) == 0
    assert output.exists()
