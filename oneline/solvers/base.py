import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence

import numpy as np
import torch

from ..errors import InvalidInput


Tour = List[int]


class Point(NamedTuple):
    x: float
    y: float

    def distance_to(self, other: Sequence[float]) -> float:
        return distance(self, other)


def distance(p: Sequence[float], q: Sequence[float]) -> float:
    return math.hypot(q[0] - p[0], q[1] - p[1])


def as_array(points: Sequence[Sequence[float]]) -> np.ndarray:
    coords = np.asarray(points, dtype=np.float64)
    if coords.size == 0:
        return coords.reshape(0, 2)
    if coords.ndim != 2 or coords.shape[1] != 2:
        raise InvalidInput(f"expected a sequence of (x, y) pairs, got shape {coords.shape}")
    return coords


def tour_length(
    points: Sequence[Sequence[float]],
    order: Optional[Sequence[int]] = None,
    close: bool = False,
) -> float:
    """Length of the line visiting `points` in `order` (index order if None).

    With `close` the first visited point is appended, giving a closed tour.
    """
    if len(points) < 2:
        raise InvalidInput(f"need at least 2 points to measure a tour, got {len(points)}")
    coords = as_array(points)
    idx = np.arange(len(coords)) if order is None else np.asarray(order, dtype=np.int64)
    if idx.size == 0:
        return 0.0
    if idx.min() < 0 or idx.max() >= len(coords):
        raise InvalidInput(f"tour indices must lie in [0, {len(coords)}), got {idx.min()}..{idx.max()}")
    if close:
        idx = np.append(idx, idx[0])
    steps = np.diff(coords[idx], axis=0)
    return float(np.hypot(steps[:, 0], steps[:, 1]).sum())


def population_lengths(
    points: Sequence[Sequence[float]],
    tours: Sequence[Sequence[int]],
    close: bool = True,
    device=None,
) -> List[float]:
    # All tours must have the same length; crossover keeps the parents' length.
    if len(points) < 2:
        raise InvalidInput(f"need at least 2 points to measure a tour, got {len(points)}")
    if not len(tours):
        return []
    if device is not None:
        coords = torch.tensor(as_array(points), device=device, dtype=torch.float64)
        idx = torch.tensor(tours, device=device, dtype=torch.long)
        a = coords[idx]
        b = a.roll(-1, dims=1)
        seg = (b - a).norm(dim=-1)
        if not close:
            seg = seg[:, :-1]
        return seg.sum(dim=1).tolist()
    coords = as_array(points)
    idx = np.asarray(tours, dtype=np.int64)
    a = coords[idx]
    b = np.roll(a, -1, axis=1)
    seg = np.hypot(b[..., 0] - a[..., 0], b[..., 1] - a[..., 1])
    if not close:
        seg = seg[:, :-1]
    return seg.sum(axis=1).tolist()


class Solver(ABC):
    name: str = "base"

    @abstractmethod
    def solve(self, points: Sequence[Sequence[float]]) -> "SolveResult":
        raise NotImplementedError


@dataclass
class SolveResult:
    order: Tour
    length: float
    solver_name: str
    point_count: int
    closed: bool = False
    optimum: Optional[float] = None

    @property
    def visited(self) -> int:
        return len(set(self.order))

    @property
    def coverage(self) -> float:
        if not self.point_count:
            return 0.0
        return self.visited / self.point_count

    @property
    def is_partial(self) -> bool:
        return self.visited < self.point_count

    @property
    def is_permutation(self) -> bool:
        return len(self.order) == self.point_count and sorted(self.order) == list(range(self.point_count))

    @property
    def gap(self) -> float:
        if self.optimum is None or math.isclose(self.optimum, 0.0):
            return float("inf")
        return (self.length - self.optimum) / self.optimum
