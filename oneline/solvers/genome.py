import random
from typing import List, Sequence

from ..errors import EmptyPool
from .base import Tour


DRAW_BITS = 64


def random_draws(rng: random.Random, count: int) -> List[int]:
    return [rng.getrandbits(DRAW_BITS) for _ in range(count)]


def permutation_from_draws(num_points: int, draws: Sequence[int]) -> Tour:
    """Turn raw draws into a tour by drawing without replacement.

    Each draw picks pool[draw % len(pool)] from the indices not yet taken,
    so draws [0, 0, 0] give [0, 1, 2] and [2, 1, 0] give [2, 1, 0].
    """
    pool = list(range(num_points))
    tour = []
    for draw in draws:
        if not pool:
            raise EmptyPool(f"drew more than {num_points} indices from a pool of {num_points}")
        tour.append(pool.pop(draw % len(pool)))
    return tour


def random_tour(rng: random.Random, num_points: int) -> Tour:
    return permutation_from_draws(num_points, random_draws(rng, num_points))


def cross(
    parent_a: Sequence[int],
    parent_b: Sequence[int],
    mutation_rate: float,
    num_points: int,
    rng: random.Random,
) -> Tour:
    """Positional crossover with point mutation.

    Each gene is a random index with probability `mutation_rate`, otherwise
    parent_a's gene with probability 0.5 - mutation_rate / 2, else parent_b's.
    Genes are chosen independently per position, so a child can repeat some
    indices and miss others; elitism keeps the best valid parents around.
    """
    child = []
    for i in range(min(len(parent_a), len(parent_b))):
        if rng.random() < mutation_rate:
            child.append(rng.getrandbits(DRAW_BITS) % num_points)
        elif rng.random() < 0.5 - mutation_rate / 2:
            child.append(parent_a[i])
        else:
            child.append(parent_b[i])
    return child
