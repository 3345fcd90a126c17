import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .errors import InvalidInput
from .reporting import log
from .solvers.base import SolveResult, Solver, Tour, population_lengths, tour_length
from .solvers.genome import cross, random_tour


@dataclass
class GeneticConfig:
    population_size: int = 500
    mutation_rate: float = 0.01
    generations: int = 100
    verbose: bool = False
    random_seed: int = 123
    # torch device for population scoring ("cpu", "cuda:0"); None scores with numpy.
    device: Optional[str] = None
    # Offspring that repeat indices score as infinitely long and never become elites.
    require_permutation: bool = True

    def __post_init__(self):
        if self.population_size < 2:
            raise InvalidInput(f"population_size must be at least 2, got {self.population_size}")
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise InvalidInput(f"mutation_rate must be within [0, 1], got {self.mutation_rate}")
        if self.generations < 0:
            raise InvalidInput(f"generations must be non-negative, got {self.generations}")


def select_elites(lengths: Sequence[float]) -> Tuple[int, int]:
    # Strict comparisons: on ties the earlier candidate wins.
    best_idx, second_idx = -1, -1
    best_len = second_len = float("inf")
    for idx, length in enumerate(lengths):
        if length < best_len:
            second_idx, second_len = best_idx, best_len
            best_idx, best_len = idx, length
        elif length < second_len:
            second_idx, second_len = idx, length
    if best_idx == -1:
        best_idx = 0
    if second_idx == -1:
        second_idx = 1 if best_idx == 0 else 0
    return best_idx, second_idx


class PopulationSearch:
    """Two-elite genetic search over closed tours of a fixed point set."""

    def __init__(self, config: GeneticConfig, points: Sequence[Sequence[float]], rng: random.Random = None):
        if len(points) < 2:
            raise InvalidInput(f"need at least 2 points, got {len(points)}")
        self.cfg = config
        self.points = points
        self.rng = rng or random.Random(config.random_seed)
        self.population: List[Tour] = [
            random_tour(self.rng, len(points)) for _ in range(config.population_size)
        ]
        self.generation = 0
        self.history: List[float] = []

    def score(self) -> List[float]:
        lengths = population_lengths(self.points, self.population, close=True, device=self.cfg.device)
        if self.cfg.require_permutation:
            n = len(self.points)
            lengths = [
                length if len(set(tour)) == n else float("inf")
                for length, tour in zip(lengths, self.population)
            ]
        return lengths

    def step(self) -> float:
        lengths = self.score()
        best_idx, second_idx = select_elites(lengths)
        best, second = self.population[best_idx], self.population[second_idx]
        num_points = len(self.points)
        new_pop: List[Tour] = [best[:], second[:]]
        while len(new_pop) < self.cfg.population_size:
            new_pop.append(cross(best, second, self.cfg.mutation_rate, num_points, self.rng))
        self.population = new_pop
        self.generation += 1
        self.history.append(lengths[best_idx])
        if self.cfg.verbose:
            log(f"gen {self.generation}: shortest tour={lengths[best_idx]:.4f}")
        return lengths[best_idx]

    def run(self) -> Tour:
        for _ in range(self.cfg.generations):
            self.step()
        return self.best()

    def best(self) -> Tour:
        # Slot 0 holds the best elite once at least one step has run.
        return self.population[0]


class GeneticSolver(Solver):
    name = "genetic"

    def __init__(self, config: GeneticConfig = None, rng: random.Random = None):
        self.cfg = config or GeneticConfig()
        self.rng = rng

    def solve(self, points: Sequence[Sequence[float]]) -> SolveResult:
        search = PopulationSearch(self.cfg, points, rng=self.rng)
        tour = search.run()
        return SolveResult(
            order=tour,
            length=tour_length(points, tour, close=True),
            solver_name=self.name,
            point_count=len(points),
            closed=True,
        )


def solve_tsp_approx(
    points: Sequence[Sequence[float]],
    generations: int,
    verbose: bool = False,
    population_size: int = 500,
    mutation_rate: float = 0.01,
    rng: random.Random = None,
    require_permutation: bool = True,
) -> Tour:
    cfg = GeneticConfig(
        population_size=population_size,
        mutation_rate=mutation_rate,
        generations=generations,
        verbose=verbose,
        require_permutation=require_permutation,
    )
    return PopulationSearch(cfg, points, rng=rng).run()
