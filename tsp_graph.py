import numpy as np
from typing import List, Sequence, Union
from tsp_errors import InvalidGraph, Overflow

Matrix = Union[np.ndarray, Sequence[Sequence[float]]]


def _is_integer(w) -> bool:
    return isinstance(w, (int, np.integer)) and not isinstance(w, (bool, np.bool_))


class Graph:
    """Symmetric distance matrix of a complete graph on ``ncity`` cities.

    The matrix is validated once and stored as a read-only numpy array:
    ``int64`` when every weight is an integer, ``float64`` otherwise.
    ``math.inf`` marks a pair of cities with no edge between them.
    """
    def __init__(self, ncity: int, D: Matrix) -> None:
        if isinstance(ncity, bool) or not isinstance(ncity, (int, np.integer)):
            raise InvalidGraph(f"number of cities must be an integer, got {ncity!r}")
        if ncity < 1:
            raise InvalidGraph(f"number of cities must be at least 1, got {ncity}")
        self.ncity = int(ncity)
        self._D = self._to_array(self.ncity, D)
        self._validate()
        self._D.setflags(write=False)

    @staticmethod
    def _to_array(ncity: int, D: Matrix) -> np.ndarray:
        if not isinstance(D, np.ndarray):
            if len(D) != ncity:
                raise InvalidGraph(f"expected {ncity} rows, got {len(D)}")
            for i, row in enumerate(D):
                if not hasattr(row, "__len__"):
                    raise InvalidGraph(f"row {i} is not a sequence: {row!r}")
                if len(row) != ncity:
                    raise InvalidGraph(f"row {i} has {len(row)} values, expected {ncity}")
            if all(_is_integer(w) for row in D for w in row):
                info = np.iinfo(np.int64)
                if any(not info.min <= w <= info.max for row in D for w in row):
                    raise Overflow("distance does not fit in a 64-bit integer")
                return np.array(D, dtype=np.int64)
        arr = np.array(D)
        kind = arr.dtype.kind
        if kind == "u" and arr.size and arr.max() > np.iinfo(np.int64).max:
            raise Overflow("distance does not fit in a 64-bit integer")
        if kind not in "iufO":
            raise InvalidGraph(f"distances must be numbers, got dtype {arr.dtype}")
        try:
            arr = arr.astype(np.int64 if kind in "iu" else np.float64)
        except OverflowError as e:
            raise Overflow(f"distance does not fit in a float: {e}") from e
        except (TypeError, ValueError) as e:
            raise InvalidGraph(f"distances must be numbers: {e}") from e
        if arr.shape != (ncity, ncity):
            raise InvalidGraph(f"expected a {ncity}x{ncity} matrix, got shape {arr.shape}")
        return arr

    def _validate(self) -> None:
        D = self._D
        if D.dtype.kind == "f" and np.isnan(D).any():
            i, j = np.argwhere(np.isnan(D))[0]
            raise InvalidGraph(f"distance ({i}, {j}) is NaN")
        nonzero = np.flatnonzero(np.diagonal(D))
        if nonzero.size:
            i = nonzero[0]
            raise InvalidGraph(f"diagonal entry ({i}, {i}) is {D[i, i]}, expected 0")
        if (D < 0).any():
            i, j = np.argwhere(D < 0)[0]
            raise InvalidGraph(f"distance ({i}, {j}) is negative: {D[i, j]}")
        asym = np.argwhere(D != D.T)
        if asym.size:
            i, j = asym[0]
            raise InvalidGraph(f"matrix is not symmetric: D[{i}][{j}]={D[i, j]} but D[{j}][{i}]={D[j, i]}")

    @property
    def D(self) -> np.ndarray:
        return self._D

    def city_count(self) -> int:
        return self.ncity

    def distance(self, i: int, j: int) -> Union[int, float]:
        if not (0 <= i < self.ncity and 0 <= j < self.ncity):
            raise IndexError(f"city index out of range: ({i}, {j}) for {self.ncity} cities")
        return self._D[i, j].item()

    def is_complete(self) -> bool:
        return not np.isinf(self._D).any()

    def tolist(self) -> List[List[float]]:
        return self._D.tolist()

    def __repr__(self) -> str:
        return f"Graph(ncity={self.ncity}, dtype={self._D.dtype})"
