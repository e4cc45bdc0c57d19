import math
import logging
import numpy as np
from itertools import combinations
from typing import List, Tuple, Union
from tqdm import tqdm
from tsp_errors import Overflow, TooLarge, Unsolvable
from tsp_graph import Graph

logger = logging.getLogger(__name__)

MAX_NCITY = 20
HARD_MAX_NCITY = 24
# Unreached marker of integer tables. Half of int64 so that adding one edge never wraps.
INT_UNREACHED = np.iinfo(np.int64).max // 2

Cost = Union[int, float]


class TSP_DP:
    """Held-Karp dynamic programming over subsets of cities.

    ``dp[S][c]`` is the cheapest path that leaves city 0, visits exactly the
    cities of bitmask ``S`` (bit k stands for city k+1) and stops at ``c``.
    ``dp[0][0] = 0`` is the start state, every other cell is filled from the
    subsets one city smaller, so subsets are processed by increasing size.
    """
    def __init__(self, graph: Graph, max_ncity: int = MAX_NCITY) -> None:
        if max_ncity > HARD_MAX_NCITY:
            raise TooLarge(f"max_ncity={max_ncity} exceeds the hard limit of {HARD_MAX_NCITY} cities.")
        self.graph = graph
        self.ncity = graph.city_count()
        self.D = graph.D
        self.max_ncity = max_ncity
        self.best_tour = None
        self.best_obj = None
        self.computed_states = 0

    def solve(self, progress: bool = False) -> Tuple[List[int], Cost]:
        if self.ncity > self.max_ncity:
            raise TooLarge(f"This problem is too large to solve in practical time: "
                           f"{self.ncity} cities, at most {self.max_ncity} allowed.")
        self.computed_states = 0
        if self.ncity == 1:
            self.best_tour, self.best_obj = [0, 0], self.D[0, 0].item()
            return list(self.best_tour), self.best_obj

        unreached = self._unreached()
        dp, prev_node = self._fill(unreached, progress)
        self.best_tour, self.best_obj = self._reconstruct(dp, prev_node, unreached)
        return list(self.best_tour), self.best_obj

    def _unreached(self) -> Cost:
        # float paths that overflow become inf and never beat a finite one
        if self.D.dtype.kind != "i":
            return math.inf
        worst = self.D.max().item() * self.ncity
        if worst >= INT_UNREACHED:
            raise Overflow(f"tour cost may reach {worst}, beyond the 64-bit integer range.")
        return INT_UNREACHED

    def _fill(self, unreached: Cost, progress: bool) -> Tuple[np.ndarray, np.ndarray]:
        n = self.ncity
        S_max = 1 << (n - 1)
        logger.debug("allocating %d x %d DP table (%s)", S_max, n, self.D.dtype)
        dp = np.full((S_max, n), unreached, dtype=self.D.dtype)
        prev_node = np.full((S_max, n), -1, dtype=np.int8)
        dp[0, 0] = 0

        with tqdm(total=S_max - 1, unit="subset", disable=not progress) as pbar, np.errstate(over="ignore"):
            for size in range(1, n):
                pbar.set_description(f"subset size {size}/{n - 1}")
                count = 0
                for subset in combinations(range(1, n), size):
                    cities = np.array(subset)
                    bits = 1 << (cities - 1)
                    S = int(bits.sum())
                    # candidate[k][p]: reach cities[k] from p after visiting S without cities[k]
                    candidate = dp[S ^ bits] + self.D[:, cities].T
                    best_p = candidate.argmin(axis=1)
                    best = candidate[np.arange(size), best_p]
                    reached = best < unreached
                    dp[S, cities] = np.where(reached, best, unreached)
                    prev_node[S, cities] = np.where(reached, best_p, -1)
                    count += 1
                self.computed_states += count * size
                pbar.update(count)
                logger.debug("filled %d subsets of size %d", count, size)
        return dp, prev_node

    def _reconstruct(self, dp: np.ndarray, prev_node: np.ndarray, unreached: Cost) -> Tuple[List[int], Cost]:
        full = dp.shape[0] - 1
        with np.errstate(over="ignore"):
            closing = dp[full] + self.D[:, 0]
        last = int(closing.argmin())
        if not closing[last] < unreached:
            if self.graph.is_complete():
                raise Overflow("Every tour costs more than the float range can hold.")
            raise Unsolvable("No finite-cost tour visits every city; the graph might not be connected.")
        logger.debug("last city before returning to 0: %d", last)

        tour = []
        subset, index = full, last
        while index != 0:
            tour.append(index)
            subset, index = subset ^ (1 << (index - 1)), int(prev_node[subset, index])
        assert subset == 0
        tour.append(0)
        tour.reverse()
        tour.append(0)
        return tour, closing[last].item()


def solve(graph: Graph, max_ncity: int = MAX_NCITY, progress: bool = False) -> Tuple[List[int], Cost]:
    return TSP_DP(graph, max_ncity=max_ncity).solve(progress=progress)
