"""
Point-ordering strategies that turn sampled image points into a single drawable line.
"""

from .errors import EmptyPool, GraphTooSparse, InvalidInput, NoTriangleFound, OneLineError
from .evolutionary import GeneticConfig, GeneticSolver, PopulationSearch, solve_tsp_approx
from .solvers import (
    BoundaryGrowthSolver,
    LatticeConfig,
    LongestPathSolver,
    SolveResult,
    boundary_growth_path,
    build_graph,
    longest_path,
    tour_length,
)
from .strategies import STRATEGIES, build_solver

__all__ = [
    "data",
    "evaluation",
    "evolutionary",
    "strategies",
    "EmptyPool",
    "GraphTooSparse",
    "InvalidInput",
    "NoTriangleFound",
    "OneLineError",
    "GeneticConfig",
    "GeneticSolver",
    "PopulationSearch",
    "solve_tsp_approx",
    "BoundaryGrowthSolver",
    "LatticeConfig",
    "LongestPathSolver",
    "SolveResult",
    "boundary_growth_path",
    "build_graph",
    "longest_path",
    "tour_length",
    "STRATEGIES",
    "build_solver",
]
