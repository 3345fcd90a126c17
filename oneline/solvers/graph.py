from typing import Sequence

import networkx as nx
import numpy as np

from ..errors import InvalidInput
from .base import as_array


def build_graph(points: Sequence[Sequence[float]], neighbor_distance: float) -> nx.Graph:
    """Connect every pair of points no further apart than `neighbor_distance`.

    Nodes are the point indices. Edges are added in row-major (i, j) order, so
    each adjacency iterates its neighbors in ascending index order.
    """
    if neighbor_distance < 0:
        raise InvalidInput(f"neighbor_distance must be non-negative, got {neighbor_distance}")
    coords = as_array(points)
    n = len(coords)
    graph = nx.Graph()
    graph.add_nodes_from(range(n))
    if n < 2:
        return graph
    # Dense n x n squared distances.
    delta = coords[:, None, :] - coords[None, :, :]
    sq_dist = (delta ** 2).sum(axis=-1)
    close = np.triu(sq_dist <= neighbor_distance * neighbor_distance, k=1)
    rows, cols = np.nonzero(close)
    graph.add_edges_from(zip(rows.tolist(), cols.tolist()))
    return graph


def default_neighbor_distance(points: Sequence[Sequence[float]], slack: float = 1.1) -> float:
    """`slack` times the median nearest-neighbor spacing of `points`."""
    coords = as_array(points)
    if len(coords) < 2:
        raise InvalidInput(f"need at least 2 points to estimate spacing, got {len(coords)}")
    delta = coords[:, None, :] - coords[None, :, :]
    dist = np.sqrt((delta ** 2).sum(axis=-1))
    np.fill_diagonal(dist, np.inf)
    return float(np.median(dist.min(axis=1)) * slack)
