class TSPError(Exception):
    """Base class of every error raised while building or solving a TSP instance."""


class InvalidGraph(TSPError, ValueError):
    """Malformed or inconsistent distance matrix."""


class Unsolvable(TSPError):
    """No finite-cost Hamiltonian cycle exists."""


class TooLarge(TSPError, ValueError):
    """The number of cities exceeds the admitted bound."""


class Overflow(TSPError, OverflowError):
    """Accumulated path cost cannot be represented."""
