import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .solvers.base import Solver


@dataclass
class Fitness:
    length: float
    runtime: float
    gap: float
    coverage: float
    score: float
    solver_name: str


def evaluate_solver(
    solver: Solver,
    points: Sequence[Sequence[float]],
    optimum: Optional[float] = None,
    max_runtime: Optional[float] = None,
    runtime_weight: float = 0.1,
    allow_partial: bool = False,
) -> Fitness:
    """Run `solver` once and score it; lower is better.

    A result that misses some points scores `inf` unless `allow_partial` is
    set, in which case its score is divided by the fraction of points covered.
    """
    start = time.perf_counter()
    result = solver.solve(points)
    runtime = time.perf_counter() - start
    if max_runtime is not None and runtime > max_runtime:
        # Penalize slow solvers heavily.
        return Fitness(
            length=float("inf"),
            runtime=runtime,
            gap=float("inf"),
            coverage=result.coverage,
            score=float("inf"),
            solver_name=solver.name,
        )
    result.optimum = optimum
    score = result.length + runtime_weight * result.length * runtime
    if result.is_partial:
        score = score / result.coverage if allow_partial and result.coverage > 0 else float("inf")
    return Fitness(
        length=result.length,
        runtime=runtime,
        gap=result.gap,
        coverage=result.coverage,
        score=score,
        solver_name=solver.name,
    )


def aggregate_fitness(fitnesses: List[Fitness]) -> Dict[str, float]:
    if not fitnesses:
        return {"score": float("inf"), "gap": float("inf"), "coverage": 0.0, "runtime": float("inf")}
    score = sum(f.score for f in fitnesses) / len(fitnesses)
    gap = sum(f.gap for f in fitnesses if f.gap != float("inf")) / max(
        1, sum(1 for f in fitnesses if f.gap != float("inf"))
    )
    coverage = sum(f.coverage for f in fitnesses) / len(fitnesses)
    runtime = sum(f.runtime for f in fitnesses) / len(fitnesses)
    return {"score": score, "gap": gap, "coverage": coverage, "runtime": runtime}
