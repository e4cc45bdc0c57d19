import math
import logging
import numpy as np
import matplotlib.pyplot as plt
from scipy.spatial.distance import cdist
from geopy.distance import geodesic
from typing import Dict, List, Optional, Sequence
from tsp_errors import InvalidGraph

logger = logging.getLogger(__name__)

FORMATS = ("auto", "matrix", "edges", "tsplib")
INF_TOKENS = ("INF", "∞")


def read(filename: str, fmt: str = "auto"):
    """Read a distance matrix from ``filename``.

    Returns ``(name, ncity, D, coord)``; ``coord`` maps city index to its
    coordinates and is empty unless the file is TSPLIB with a
    NODE_COORD_SECTION.
    """
    try:
        with open(filename, "r", encoding="utf-8") as f:
            text = f.read()
    except UnicodeDecodeError as e:
        raise InvalidGraph(f"{filename} is not a UTF-8 text file: {e}") from e
    return parse(text, fmt=fmt, name=filename)


def parse(text: str, fmt: str = "auto", name: str = ""):
    if fmt not in FORMATS:
        raise ValueError(f"unknown format {fmt!r}, expected one of {FORMATS}")
    if fmt == "auto":
        fmt = "tsplib" if "DIMENSION" in text else "matrix"
    logger.debug("parsing %s as %s", name or "<text>", fmt)
    if fmt == "tsplib":
        return _parse_tsplib(text)
    lines = [line.split() for line in text.strip().splitlines() if line.strip()]
    if not lines:
        raise InvalidGraph("empty input")
    ncity = _parse_ncity(lines[0])
    if fmt == "matrix":
        D = _parse_matrix(ncity, lines[1:])
    else:
        D = _parse_edges(ncity, lines[1:])
    return name, ncity, D, dict()


def _parse_ncity(tokens: List[str]) -> int:
    if len(tokens) != 1:
        raise InvalidGraph(f"first line must hold only the number of cities, got {' '.join(tokens)!r}")
    try:
        ncity = int(tokens[0])
    except ValueError:
        raise InvalidGraph(f"invalid number of cities: {tokens[0]!r}") from None
    if ncity < 1:
        raise InvalidGraph("number of cities must be greater than 0")
    return ncity


def _parse_weight(token: str):
    if token.upper() in INF_TOKENS:
        return math.inf
    try:
        return int(token)
    except ValueError:
        pass
    try:
        w = float(token)
    except ValueError:
        raise InvalidGraph(f"invalid number {token!r}") from None
    if not math.isfinite(w):
        raise InvalidGraph(f"invalid number {token!r}, use INF for a missing edge")
    return w


def _parse_matrix(ncity: int, rows: List[List[str]]) -> List[List[float]]:
    if len(rows) != ncity:
        raise InvalidGraph(f"expected {ncity} rows, got {len(rows)}")
    D = []
    for i, row in enumerate(rows):
        if len(row) != ncity:
            raise InvalidGraph(f"row {i} has {len(row)} values, expected {ncity}")
        D.append([_parse_weight(x) for x in row])
    return D


def _parse_edges(ncity: int, rows: List[List[str]]) -> List[List[float]]:
    D = [[0 if i == j else math.inf for j in range(ncity)] for i in range(ncity)]
    for lineno, row in enumerate(rows, start=2):
        if len(row) != 3:
            raise InvalidGraph(f"line {lineno}: expected 3 values (from to weight)")
        try:
            u, v = int(row[0]), int(row[1])
        except ValueError:
            raise InvalidGraph(f"line {lineno}: invalid city index") from None
        if not (0 <= u < ncity and 0 <= v < ncity):
            raise InvalidGraph(f"line {lineno}: city index out of range")
        w = _parse_weight(row[2])
        D[u][v] = w
        D[v][u] = w
    return D


def _parse_tsplib(text: str):
    coord = dict()
    D = []
    _type = None
    name = ""
    ncity = None
    lines = iter(text.splitlines())
    for line in lines:
        line = line.rstrip().split(":")
        line = [l.replace(" ", "") for l in line]
        if line[0] in ("NAME", "EDGE_WEIGHT_TYPE") and len(line) < 2:
            raise InvalidGraph(f"{line[0]} without a value")
        if line[0] == "NAME":
            name = line[1]
        elif line[0] == "DIMENSION":
            ncity = _parse_ncity(line[1:])
        elif line[0] == "EDGE_WEIGHT_TYPE":
            _type = line[1]
        elif line[0] == "EDGE_WEIGHT_SECTION":
            values = []
            for _line in lines:
                if _line.strip() == "EOF":
                    break
                values.extend(_line.split())
            D = [_parse_weight(x) for x in values]
        elif line[0] == "NODE_COORD_SECTION":
            for _line in lines:
                _line = _line.rstrip().split()
                if not _line:
                    continue
                if _line[0] == "EOF":
                    break
                if len(_line) < 3:
                    raise InvalidGraph(f"coordinate line {' '.join(_line)!r} needs an index and 2 coordinates")
                try:
                    _line = list(map(float, _line))
                except ValueError:
                    raise InvalidGraph(f"invalid coordinate line {' '.join(_line)!r}") from None
                coord[int(_line[0]) - 1] = _line[1:]
    if ncity is None:
        raise InvalidGraph("TSPLIB input without DIMENSION")
    if D:
        if len(D) != ncity * ncity:
            raise InvalidGraph(f"EDGE_WEIGHT_SECTION holds {len(D)} values, expected {ncity * ncity}")
        D = [D[i * ncity:(i + 1) * ncity] for i in range(ncity)]
    elif coord:
        if sorted(coord) != list(range(ncity)):
            raise InvalidGraph(f"NODE_COORD_SECTION must list cities 1..{ncity}")
        if len({len(xy) for xy in coord.values()}) != 1:
            raise InvalidGraph("NODE_COORD_SECTION rows have different numbers of coordinates")
        XY = np.array([coord[i] for i in range(ncity)])
        if _type == "GEO":
            D = np.zeros((ncity, ncity))
            for i in range(ncity):
                for j in range(i + 1, ncity):
                    try:
                        D[i, j] = D[j, i] = geodesic(XY[i], XY[j]).m
                    except ValueError as e:
                        raise InvalidGraph(f"invalid GEO coordinates for cities {i + 1} and {j + 1}: {e}") from e
        else:
            D = cdist(XY, XY)
    else:
        raise InvalidGraph("TSPLIB input without EDGE_WEIGHT_SECTION or NODE_COORD_SECTION")
    return name, ncity, D, coord


def calc_dist(tour: Sequence[int], D):
    """Length of a closed tour given as ``[0, ..., 0]``."""
    return sum(D[i][j] for i, j in zip(tour, tour[1:]))


def format_tour(tour: Sequence[int]) -> str:
    return " -> ".join(str(i) for i in tour)


def plot(tour: Sequence[int], coord: Dict[int, List[float]], figname: Optional[str] = "./tmp.png") -> None:
    fig = plt.figure()
    x = [coord[i][0] for i in tour]
    y = [coord[i][1] for i in tour]
    plt.plot(x, y, "-o")
    for i in set(tour):
        plt.annotate(str(i), coord[i])
    if figname:
        plt.savefig(figname)
    else:
        plt.show()
    plt.close(fig)
