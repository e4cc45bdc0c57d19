import math
import numpy as np
import pytest
from tsp_errors import InvalidGraph, Overflow
from tsp_graph import Graph

D4 = [[0, 10, 15, 20], [10, 0, 35, 25], [15, 35, 0, 30], [20, 25, 30, 0]]


def test_lookup():
    graph = Graph(4, D4)
    assert graph.city_count() == 4
    assert graph.distance(1, 3) == 25
    assert graph.distance(3, 1) == 25
    assert isinstance(graph.distance(0, 1), int)
    assert graph.D.dtype == np.int64


def test_float_matrix():
    graph = Graph(2, [[0, 1.5], [1.5, 0]])
    assert graph.D.dtype == np.float64
    assert graph.distance(0, 1) == 1.5


def test_single_city():
    graph = Graph(1, [[0]])
    assert graph.city_count() == 1
    assert graph.distance(0, 0) == 0


def test_immutable():
    D = [row[:] for row in D4]
    graph = Graph(4, D)
    D[0][1] = 99
    assert graph.distance(0, 1) == 10
    with pytest.raises(ValueError):
        graph.D[0, 1] = 99


def test_distance_out_of_range():
    graph = Graph(4, D4)
    with pytest.raises(IndexError):
        graph.distance(4, 0)
    with pytest.raises(IndexError):
        graph.distance(0, -1)


def test_missing_edge():
    D = [[0, 1, math.inf], [1, 0, 2], [math.inf, 2, 0]]
    graph = Graph(3, D)
    assert not graph.is_complete()
    assert Graph(4, D4).is_complete()


@pytest.mark.parametrize("ncity, D", [
    (0, []),
    (-1, [[0]]),
    (3, [[0, 1, 2], [1, 0, 3]]),
    (2, [[0, 1], [1, 0, 5]]),
    (2, [[1, 1], [1, 0]]),
    (2, [[0, 1], [2, 0]]),
    (2, [[0, -1], [-1, 0]]),
    (2, [[0, math.nan], [math.nan, 0]]),
    (2, [[0, "a"], ["a", 0]]),
    (2, np.zeros((3, 3))),
    (2.0, [[0, 1], [1, 0]]),
])
def test_invalid(ncity, D):
    with pytest.raises(InvalidGraph):
        Graph(ncity, D)


def test_asymmetric_message():
    D = [row[:] for row in D4]
    D[0][1] = 11
    with pytest.raises(InvalidGraph, match="symmetric"):
        Graph(4, D)


@pytest.mark.parametrize("w", [2 ** 63, 2 ** 64 - 1, 2 ** 70, -(2 ** 70)])
def test_too_large_integer(w):
    with pytest.raises(Overflow):
        Graph(2, [[0, w], [w, 0]])


def test_large_integer_stays_exact():
    w = 2 ** 62 + 1
    graph = Graph(2, [[0, w], [w, 0]])
    assert graph.D.dtype == np.int64
    assert graph.distance(0, 1) == w
