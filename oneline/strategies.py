from dataclasses import fields
from typing import Dict, Type

from .errors import InvalidInput
from .evolutionary import GeneticConfig, GeneticSolver
from .solvers.base import Solver
from .solvers.heuristics import BoundaryGrowthSolver, LatticeConfig, LongestPathSolver


STRATEGIES: Dict[str, Type[Solver]] = {
    GeneticSolver.name: GeneticSolver,
    BoundaryGrowthSolver.name: BoundaryGrowthSolver,
    LongestPathSolver.name: LongestPathSolver,
}

CONFIGS = {
    GeneticSolver.name: GeneticConfig,
    BoundaryGrowthSolver.name: LatticeConfig,
    LongestPathSolver.name: LatticeConfig,
}


def config_for(name: str, **options):
    """Build the config dataclass for `name`, ignoring options it does not define."""
    if name not in CONFIGS:
        raise InvalidInput(f"unknown strategy {name!r}; choose from {', '.join(STRATEGIES)}")
    cfg_cls = CONFIGS[name]
    known = {f.name for f in fields(cfg_cls)}
    return cfg_cls(**{k: v for k, v in options.items() if k in known and v is not None})


def build_solver(name: str, **options) -> Solver:
    cfg = config_for(name, **options)
    return STRATEGIES[name](cfg)
