import csv
import math
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import tsplib95
from tsplib95.exceptions import TsplibError

from .errors import InvalidInput
from .solvers.base import Point, tour_length


@dataclass
class Instance:
    name: str
    path: Path
    points: List[Point]
    optimum: Optional[float]


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    for ext in (".opt.tour", ".opt", ".tour"):
        yield path.parent / "solutions" / f"{path.stem}{ext}"


def _read_dimension(path: Path) -> Optional[int]:
    with path.open("r") as f:
        for line in f:
            if "DIMENSION" in line.upper():
                parts = line.replace(":", " ").split()
                for token in parts:
                    if token.isdigit():
                        return int(token)
    return None


def _coords(problem) -> dict:
    coords = problem.node_coords or problem.display_data
    if not coords:
        raise InvalidInput(f"{problem.name} has no node coordinates")
    return coords


def _problem_points(problem) -> List[Point]:
    coords = _coords(problem)
    return [Point(float(c[0]), float(c[1])) for _, c in sorted(coords.items())]


def _load_optimum(problem, points: Sequence[Point], path: Path) -> Optional[float]:
    index = {node: i for i, node in enumerate(sorted(_coords(problem)))}
    for candidate in _solution_candidates(path):
        if not candidate.exists():
            continue
        try:
            tour_file = tsplib95.parse(candidate.read_text())
            order = [index[node] for node in tour_file.tours[0]]
            return tour_length(points, order, close=True)
        except (TsplibError, KeyError, IndexError, ValueError):
            continue
    return None


def load_instance(path: Path) -> Instance:
    problem = tsplib95.load(path)
    points = _problem_points(problem)
    optimum = _load_optimum(problem, points, path)
    return Instance(name=problem.name or path.stem, path=path, points=points, optimum=optimum)


def load_instances(
    root: Path, max_nodes: Optional[int] = None, max_instances: Optional[int] = None
) -> List[Instance]:
    tsp_files = sorted(root.glob("*.tsp"))
    instances: List[Instance] = []
    for p in tsp_files:
        if max_nodes is not None:
            dim = _read_dimension(p)
            if dim is not None and dim > max_nodes:
                continue
        instances.append(load_instance(p))
        if max_instances is not None and len(instances) >= max_instances:
            break
    return instances


def read_csv_points(path: Path) -> List[Point]:
    points = []
    with path.open("r", newline="") as f:
        for lineno, row in enumerate(csv.reader(f), start=1):
            if not row or not "".join(row).strip() or row[0].lstrip().startswith("#"):
                continue
            if len(row) == 1:
                row = row[0].split()
            try:
                x, y = (float(v) for v in row[:2])
            except ValueError as e:
                raise InvalidInput(f"{path}:{lineno}: expected 'x,y', got {','.join(row)!r}") from e
            points.append(Point(x, y))
    return points


def load_points(path: Path) -> List[Point]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"No point file at {path}")
    if path.suffix.lower() == ".tsp":
        return load_instance(path).points
    return read_csv_points(path)


def save_points(path: Path, points: Sequence[Sequence[float]]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="") as f:
        writer = csv.writer(f)
        for x, y in points:
            writer.writerow([x, y])


def ordered_points(points: Sequence[Sequence[float]], order: Sequence[int]) -> List[Point]:
    return [Point(*points[i]) for i in order]


def random_points(n: int, rng: random.Random, width: float = 1.0, height: float = 1.0) -> List[Point]:
    return [Point(rng.uniform(0.0, width), rng.uniform(0.0, height)) for _ in range(n)]


def lattice_points(
    rows: int,
    cols: int,
    spacing: float = 1.0,
    kind: str = "square",
    jitter: float = 0.0,
    rng: random.Random = None,
) -> List[Point]:
    """Row-major lattice. "triangular" offsets odd rows so each point has six neighbors."""
    if kind not in ("square", "triangular"):
        raise InvalidInput(f"unknown lattice kind {kind!r}")
    if jitter and rng is None:
        rng = random.Random()
    row_step = spacing * math.sqrt(3) / 2 if kind == "triangular" else spacing
    points = []
    for r in range(rows):
        offset = spacing / 2 if kind == "triangular" and r % 2 else 0.0
        for c in range(cols):
            x = c * spacing + offset
            y = r * row_step
            if jitter:
                x += rng.uniform(-jitter, jitter)
                y += rng.uniform(-jitter, jitter)
            points.append(Point(x, y))
    return points
