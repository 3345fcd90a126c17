"""Tests for tour measurement in oneline.solvers.base.

Test cases:
    - round trip, one way trip and back-and-forth on two points
    - reversal invariance, open and closed
    - fewer than two points or out-of-range indices raise InvalidInput
    - batched population lengths agree with tour_length (numpy and torch)
    - SolveResult coverage / permutation / gap properties

Run:
    pytest tests/test_geometry.py -v
"""

import random

import pytest

from oneline.errors import InvalidInput
from oneline.solvers.base import Point, SolveResult, distance, population_lengths, tour_length


TWO = [(0.0, 0.0), (1.0, 0.0)]


def test_round_trip():
    assert tour_length(TWO, None, close=True) == 2.0


def test_one_way_trip():
    assert tour_length(TWO, None, close=False) == 1.0


def test_back_and_forth():
    assert tour_length(TWO, [0, 1, 0, 1], close=False) == 3.0


def test_empty_order_has_no_length():
    assert tour_length(TWO, [], close=True) == 0.0


@pytest.mark.parametrize("close", [False, True])
def test_reversal_invariance(close):
    rng = random.Random(3)
    pts = [(rng.uniform(0, 10), rng.uniform(0, 10)) for _ in range(12)]
    order = list(range(12))
    rng.shuffle(order)
    forward = tour_length(pts, order, close=close)
    backward = tour_length(pts, order[::-1], close=close)
    assert forward == pytest.approx(backward)


@pytest.mark.parametrize("pts", [[], [(0.0, 0.0)]])
def test_too_few_points(pts):
    with pytest.raises(InvalidInput):
        tour_length(pts)


def test_invalid_input_is_value_error():
    with pytest.raises(ValueError):
        tour_length([(1.0, 1.0)], close=True)


@pytest.mark.parametrize("order", [[-1, 0], [0, 2], [0, 1, 5]])
def test_out_of_range_indices(order):
    with pytest.raises(InvalidInput, match="tour indices"):
        tour_length([(0.0, 0.0), (3.0, 4.0)], order)


def test_point_distance():
    p = Point(0.0, 0.0)
    assert p.distance_to((3.0, 4.0)) == 5.0
    assert distance((1.0, 1.0), Point(4.0, 5.0)) == 5.0


def test_malformed_points():
    with pytest.raises(InvalidInput):
        tour_length([(0.0, 0.0, 0.0), (1.0, 1.0, 1.0)])


def _random_tours(n, count, seed):
    rng = random.Random(seed)
    tours = []
    for _ in range(count):
        t = list(range(n))
        rng.shuffle(t)
        tours.append(t)
    return tours


@pytest.mark.parametrize("close", [False, True])
def test_population_lengths_match_tour_length(close):
    rng = random.Random(11)
    pts = [(rng.uniform(0, 5), rng.uniform(0, 5)) for _ in range(9)]
    tours = _random_tours(9, 6, seed=1)
    batched = population_lengths(pts, tours, close=close)
    expected = [tour_length(pts, t, close=close) for t in tours]
    assert batched == pytest.approx(expected)


def test_population_lengths_torch_cpu():
    rng = random.Random(5)
    pts = [(rng.uniform(0, 5), rng.uniform(0, 5)) for _ in range(7)]
    tours = _random_tours(7, 4, seed=2)
    assert population_lengths(pts, tours, device="cpu") == pytest.approx(population_lengths(pts, tours))


def test_population_lengths_empty():
    assert population_lengths(TWO, []) == []


class TestSolveResult:
    def test_full_permutation(self):
        res = SolveResult(order=[2, 0, 1], length=3.0, solver_name="x", point_count=3)
        assert res.is_permutation
        assert not res.is_partial
        assert res.coverage == 1.0

    def test_partial(self):
        res = SolveResult(order=[0, 1], length=1.0, solver_name="x", point_count=4)
        assert res.is_partial
        assert res.visited == 2
        assert res.coverage == 0.5
        assert not res.is_permutation

    def test_duplicates_are_not_a_permutation(self):
        res = SolveResult(order=[0, 0, 1], length=1.0, solver_name="x", point_count=3)
        assert not res.is_permutation
        assert res.visited == 2

    def test_gap(self):
        res = SolveResult(order=[0, 1], length=5.0, solver_name="x", point_count=2, optimum=4.0)
        assert res.gap == pytest.approx(0.25)
        res.optimum = None
        assert res.gap == float("inf")
