from .base import Point, Solver, SolveResult, Tour, distance, population_lengths, tour_length
from .genome import cross, permutation_from_draws, random_tour
from .graph import build_graph, default_neighbor_distance
from .heuristics import (
    BoundaryGrowthSolver,
    LatticeConfig,
    LatticeSolver,
    LongestPathSolver,
    boundary_growth_path,
    longest_path,
)

__all__ = [
    "Point",
    "Solver",
    "SolveResult",
    "Tour",
    "distance",
    "population_lengths",
    "tour_length",
    "cross",
    "permutation_from_draws",
    "random_tour",
    "build_graph",
    "default_neighbor_distance",
    "BoundaryGrowthSolver",
    "LatticeConfig",
    "LatticeSolver",
    "LongestPathSolver",
    "boundary_growth_path",
    "longest_path",
]
