import random
from abc import abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import networkx as nx

from ..errors import GraphTooSparse, InvalidInput, NoTriangleFound
from .base import SolveResult, Solver, Tour, tour_length
from .graph import build_graph, default_neighbor_distance


@dataclass
class LatticeConfig:
    # None derives the threshold from the median nearest-neighbor spacing.
    neighbor_distance: Optional[float] = None
    neighbor_slack: float = 1.5
    max_seed_attempts: int = 1000
    max_triangle_attempts: int = 100
    random_seed: int = 123

    def __post_init__(self):
        if self.neighbor_distance is not None and self.neighbor_distance < 0:
            raise InvalidInput(f"neighbor_distance must be non-negative, got {self.neighbor_distance}")
        if self.neighbor_slack <= 0:
            raise InvalidInput(f"neighbor_slack must be positive, got {self.neighbor_slack}")
        if self.max_seed_attempts < 1 or self.max_triangle_attempts < 1:
            raise InvalidInput("retry budgets must be at least 1")


class _Agenda:
    """Dense list of vertices with O(1) add, discard and uniform random pick."""

    def __init__(self, size: int):
        self.items: List[int] = []
        self.pos = [-1] * size

    def __len__(self) -> int:
        return len(self.items)

    def __contains__(self, node: int) -> bool:
        return self.pos[node] != -1

    def add(self, node: int) -> None:
        if self.pos[node] == -1:
            self.pos[node] = len(self.items)
            self.items.append(node)

    def discard(self, node: int) -> None:
        i = self.pos[node]
        if i == -1:
            return
        self.pos[node] = -1
        last = self.items.pop()
        if last != node:
            self.items[i] = last
            self.pos[last] = i

    def pick(self, rng: random.Random) -> int:
        return self.items[rng.randrange(len(self.items))]


def pick_seed(graph: nx.Graph, rng: random.Random, min_degree: int, max_attempts: int) -> int:
    n = graph.number_of_nodes()
    if n:
        for _ in range(max_attempts):
            node = rng.randrange(n)
            if graph.degree(node) >= min_degree:
                return node
    raise GraphTooSparse(
        f"no vertex with degree >= {min_degree} found in {max_attempts} draws over {n} vertices"
    )


def find_triangle(graph: nx.Graph, seed: int) -> Optional[Tuple[int, int]]:
    nbrs = list(graph.adj[seed])
    for i, a in enumerate(nbrs):
        for b in nbrs[i + 1:]:
            if graph.has_edge(a, b):
                return a, b
    return None


def splice_candidates(graph: nx.Graph, v: int, w: int, visited: List[bool]) -> List[int]:
    w_adj = graph.adj[w]
    return [u for u in graph.adj[v] if u in w_adj and not visited[u]]


def _growable(graph: nx.Graph, v: int, w: int, visited: List[bool]) -> bool:
    w_adj = graph.adj[w]
    return any(u in w_adj and not visited[u] for u in graph.adj[v])


def boundary_growth_path(
    graph: nx.Graph,
    rng: random.Random,
    max_seed_attempts: int = 1000,
    max_triangle_attempts: int = 100,
) -> Tour:
    """Grow a cycle from a triangle by splicing shared neighbors into its edges.

    On a lattice every adjacent pair costs about the same, so any cycle made of
    graph edges is close to optimal. Growth stops when at most two boundary
    vertices remain or every vertex is on the cycle; the cycle is returned as a
    path and may cover only part of the graph.
    """
    n = graph.number_of_nodes()
    for _ in range(max_triangle_attempts):
        seed = pick_seed(graph, rng, 3, max_seed_attempts)
        triangle = find_triangle(graph, seed)
        if triangle is not None:
            break
    else:
        raise NoTriangleFound(f"no triangle found around {max_triangle_attempts} seed vertices")
    a, b = triangle

    # Vertices off the cycle are their own successor.
    successor = list(range(n))
    visited = [False] * n
    successor[seed], successor[a], successor[b] = a, b, seed
    boundary = _Agenda(n)
    for node in (seed, a, b):
        visited[node] = True
        boundary.add(node)
    visited_count = 3

    while len(boundary) > 2 and visited_count < n:
        v = boundary.pick(rng)
        w = successor[v]
        candidates = splice_candidates(graph, v, w, visited)
        if not candidates:
            boundary.discard(v)
            continue
        u = candidates[0]
        successor[v] = u
        successor[u] = w
        visited[u] = True
        visited_count += 1
        boundary.add(u)
        for node in (v, u, w):
            if not _growable(graph, node, successor[node], visited):
                boundary.discard(node)

    path = []
    node = successor[seed]
    while node != seed:
        path.append(node)
        node = successor[node]
    path.append(seed)
    return path


def longest_path(graph: nx.Graph, rng: random.Random, max_seed_attempts: int = 1000) -> Tour:
    """Parent chain of the deepest vertex in a depth-first spanning tree.

    The seed itself is not part of the returned path.
    """
    if graph.number_of_edges() == 0:
        raise GraphTooSparse("graph has no edges")
    n = graph.number_of_nodes()
    seed = pick_seed(graph, rng, 1, max_seed_attempts)
    parent = [-1] * n
    depth = [0] * n
    parent[seed] = seed
    deepest, best_depth = seed, 0
    stack = [seed]
    while stack:
        current = stack.pop()
        for nb in graph.adj[current]:
            if parent[nb] != -1:
                continue
            parent[nb] = current
            depth[nb] = depth[current] + 1
            stack.append(nb)
            if depth[nb] > best_depth:
                best_depth = depth[nb]
                deepest = nb

    path = []
    node = deepest
    while parent[node] != node:
        path.append(node)
        node = parent[node]
    return path


class LatticeSolver(Solver):
    name = "lattice"
    closed = False

    def __init__(self, config: LatticeConfig = None, rng: random.Random = None):
        self.cfg = config or LatticeConfig()
        self.rng = rng or random.Random(self.cfg.random_seed)

    def neighbor_distance(self, points: Sequence[Sequence[float]]) -> float:
        if self.cfg.neighbor_distance is not None:
            return self.cfg.neighbor_distance
        return default_neighbor_distance(points, self.cfg.neighbor_slack)

    @abstractmethod
    def order(self, graph: nx.Graph) -> Tour:
        raise NotImplementedError

    def solve(self, points: Sequence[Sequence[float]]) -> SolveResult:
        if len(points) < 2:
            raise InvalidInput(f"need at least 2 points, got {len(points)}")
        graph = build_graph(points, self.neighbor_distance(points))
        order = self.order(graph)
        length = tour_length(points, order, close=self.closed) if order else 0.0
        return SolveResult(
            order=order,
            length=length,
            solver_name=self.name,
            point_count=len(points),
            closed=self.closed,
        )


class BoundaryGrowthSolver(LatticeSolver):
    name = "boundary"
    closed = True

    def order(self, graph: nx.Graph) -> Tour:
        return boundary_growth_path(
            graph,
            self.rng,
            max_seed_attempts=self.cfg.max_seed_attempts,
            max_triangle_attempts=self.cfg.max_triangle_attempts,
        )


class LongestPathSolver(LatticeSolver):
    name = "longest"

    def order(self, graph: nx.Graph) -> Tour:
        return longest_path(graph, self.rng, max_seed_attempts=self.cfg.max_seed_attempts)
