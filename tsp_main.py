import sys
import logging
from time import time
from math import isclose, isinf
from argparse import ArgumentParser
from tsp_dp import TSP_DP, MAX_NCITY
from tsp_errors import TSPError
from tsp_graph import Graph
from tsp_utils import FORMATS, read, plot, calc_dist, format_tour

WIDTH = 70
WARN_NCITY = 15
DETAIL_MAX_STOPS = 12


def argparser():
    parser = ArgumentParser(description="Exact TSP solver (Held-Karp dynamic programming over subsets)")
    parser.add_argument("-f", required=True, help="Input file: n, then an n x n distance matrix")
    parser.add_argument("--format", default="auto", choices=FORMATS, help="Input file format")
    parser.add_argument("--max_ncity", type=int, default=MAX_NCITY, help="Refuse inputs with more cities")
    parser.add_argument("--no_progress", default=False, action="store_true", help="Disable the progress bar")
    parser.add_argument("--plot", default=None, help="Save a plot of the tour (needs coordinates)")
    parser.add_argument("-v", "--verbose", default=False, action="store_true", help="Debug logging")
    return parser


def print_matrix(D):
    print("Distance Matrix:")
    n = len(D)
    print("      " + "".join(f"{j:>8}" for j in range(n)))
    for i, row in enumerate(D):
        cells = ("INF" if isinf(w) else str(w) for w in row)
        print(f"{i:>5}|" + "".join(f"{c:>8}" for c in cells))
    print()


def print_solution(tour, cost, elapsed, solver):
    print("=" * WIDTH)
    print(f"Minimum Cost: {cost}")
    print(f"Optimal Path: {format_tour(tour)}")
    print(f"Computation Time: {elapsed:.3f}s")
    print(f"Cities Visited: {len(tour) - 1}")
    print(f"DP States Computed: {solver.computed_states}")
    print("=" * WIDTH)
    if len(tour) <= DETAIL_MAX_STOPS:
        print("Detailed Route:")
        for step, (i, j) in enumerate(zip(tour, tour[1:]), start=1):
            print(f"   Step {step:2}: {i} -> {j} (distance: {solver.graph.distance(i, j)})")


def run(params):
    name, ncity, D, coord = read(params.f, fmt=params.format)
    graph = Graph(ncity, D)
    print_matrix(graph.tolist())
    if ncity > WARN_NCITY:
        print(f"Medium-large matrix ({ncity} cities). This may take some time.")
    if not graph.is_complete():
        print("The matrix has missing edges (INF); a tour may not exist.")

    solver = TSP_DP(graph, max_ncity=params.max_ncity)
    ts = time()
    tour, cost = solver.solve(progress=not params.no_progress)
    elapsed = time() - ts
    assert isclose(calc_dist(tour, graph.D), cost, abs_tol=1e-5)
    print_solution(tour, cost, elapsed, solver)

    if params.plot:
        if not coord:
            print("No coordinates in the input, skipping the plot.")
        else:
            plot(tour, coord, figname=params.plot)
    return tour, cost


def main(argv=None):
    params = argparser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if params.verbose else logging.WARNING,
                        format="%(asctime)s %(name)s %(levelname)s: %(message)s")
    try:
        run(params)
    except (TSPError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
