import pytest
from tsp_main import argparser, main, run
from tsp_dp import MAX_NCITY

MATRIX = """4
0 10 15 20
10 0 35 25
15 35 0 30
20 25 30 0
"""


@pytest.fixture
def matrix_file(tmp_path):
    path = tmp_path / "four.txt"
    path.write_text(MATRIX, encoding="utf-8")
    return str(path)


def test_argparser_defaults():
    params = argparser().parse_args(["-f", "x.txt"])
    assert params.f == "x.txt"
    assert params.format == "auto"
    assert params.max_ncity == MAX_NCITY
    assert not params.no_progress
    assert params.plot is None


def test_run(matrix_file):
    params = argparser().parse_args(["-f", matrix_file, "--no_progress"])
    tour, cost = run(params)
    assert cost == 80
    assert tour in ([0, 1, 3, 2, 0], [0, 2, 3, 1, 0])


def test_main_prints_solution(matrix_file, capsys):
    assert main(["-f", matrix_file, "--no_progress"]) == 0
    out = capsys.readouterr().out
    assert "Minimum Cost: 80" in out
    assert "DP States Computed: 12" in out
    assert "Step  1:" in out


def test_main_invalid_graph(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("3\n0 1 2\n1 0 3\n", encoding="utf-8")
    assert main(["-f", str(path), "--no_progress"]) == 1
    assert "error:" in capsys.readouterr().err


def test_main_unsolvable(tmp_path, capsys):
    path = tmp_path / "edges.txt"
    path.write_text("3\n0 1 1\n1 2 1\n", encoding="utf-8")
    assert main(["-f", str(path), "--format", "edges", "--no_progress"]) == 1
    captured = capsys.readouterr()
    assert "missing edges" in captured.out
    assert "not be connected" in captured.err


def test_main_too_large(matrix_file, capsys):
    assert main(["-f", matrix_file, "--max_ncity", "3", "--no_progress"]) == 1
    assert "too large" in capsys.readouterr().err


def test_main_not_utf8(tmp_path, capsys):
    path = tmp_path / "binary.txt"
    path.write_bytes(b"\xff\xfe\x00")
    assert main(["-f", str(path), "--no_progress"]) == 1
    assert "UTF-8" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    assert main(["-f", str(tmp_path / "nope.txt")]) == 1
    assert "error:" in capsys.readouterr().err
