import argparse
import concurrent.futures
import json
import random
import sys
import time
from dataclasses import asdict
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

from .data import lattice_points, load_instances, load_points, ordered_points, random_points, save_points
from .errors import InvalidInput, OneLineError
from .evaluation import Fitness, aggregate_fitness, evaluate_solver
from .reporting import log
from .solvers.base import Point
from .strategies import STRATEGIES, build_solver


def _parse_lattice(value: str) -> Tuple[int, int]:
    try:
        rows, cols = (int(v) for v in value.lower().split("x"))
    except ValueError as e:
        raise InvalidInput(f"--lattice expects ROWSxCOLS, got {value!r}") from e
    return rows, cols


def load_point_set(args) -> List[Point]:
    rng = random.Random(args.seed)
    if args.input:
        return load_points(Path(args.input))
    if args.random:
        return random_points(args.random, rng, width=args.width, height=args.height)
    rows, cols = _parse_lattice(args.lattice)
    return lattice_points(rows, cols, spacing=args.spacing, kind=args.lattice_kind, jitter=args.jitter, rng=rng)


def solver_options(args) -> Dict:
    options = {}
    if args.config:
        options.update(json.loads(Path(args.config).read_text()))
    flags = {
        "neighbor_distance": args.neighbor_distance,
        "population_size": args.population_size,
        "mutation_rate": args.mutation_rate,
        "generations": args.generations,
        "random_seed": args.seed,
        "device": args.device,
        "verbose": args.verbose or None,
    }
    options.update({k: v for k, v in flags.items() if v is not None})
    return options


def solve(args) -> None:
    points = load_point_set(args)
    log(f"loaded {len(points)} points")
    solver = build_solver(args.strategy, **solver_options(args))
    t0 = time.perf_counter()
    result = solver.solve(points)
    log(
        f"{result.solver_name}: length={result.length:.4f} visited={result.visited}/{result.point_count} "
        f"in {time.perf_counter() - t0:.2f}s"
    )
    if result.is_partial:
        log(f"partial coverage ({result.coverage:.1%}); try a larger neighbor distance or another seed")
    if args.output:
        line = ordered_points(points, result.order)
        if result.closed and line:
            line.append(line[0])
        save_points(Path(args.output), line)
        log(f"wrote ordered points to {args.output}")
    if args.result_json:
        path = Path(args.result_json)
        path.parent.mkdir(parents=True, exist_ok=True)
        state = {
            "strategy": args.strategy,
            "config": asdict(solver.cfg),
            "order": result.order,
            "length": result.length,
            "closed": result.closed,
            "point_count": result.point_count,
            "coverage": result.coverage,
        }
        path.write_text(json.dumps(state, indent=2))


def _run_strategy(name: str, points: Sequence[Point], options: Dict, allow_partial: bool = False):
    try:
        return name, evaluate_solver(build_solver(name, **options), points, allow_partial=allow_partial), None
    except OneLineError as e:
        return name, None, e


def compare(args) -> None:
    points = load_point_set(args)
    options = solver_options(args)
    log(f"comparing {', '.join(STRATEGIES)} on {len(points)} points")
    with concurrent.futures.ThreadPoolExecutor(max_workers=len(STRATEGIES)) as ex:
        results = list(
            ex.map(lambda name: _run_strategy(name, points, options, args.allow_partial), STRATEGIES)
        )
    for name, fitness, error in results:
        if error is not None:
            print(f"[{name}] failed: {type(error).__name__}: {error}")
        else:
            print(
                f"[{name}] length={fitness.length:10.4f} coverage={fitness.coverage:6.1%} "
                f"score={fitness.score:10.4f} runtime={fitness.runtime:6.2f}s"
            )


def _failed_fitness(solver_name: str) -> Fitness:
    return Fitness(
        length=float("inf"),
        runtime=0.0,
        gap=float("inf"),
        coverage=0.0,
        score=float("inf"),
        solver_name=solver_name,
    )


def bench(args) -> None:
    data_root = Path(args.data_root)
    log(f"loading data from {data_root}")
    instances = load_instances(data_root, max_nodes=args.max_nodes, max_instances=args.max_instances)
    if not instances:
        raise RuntimeError(
            f"No TSPLIB instances found in {data_root}. "
            "Place .tsp (and optional .opt.tour) files there before running."
        )
    options = solver_options(args)
    fitnesses: List[Fitness] = []
    for inst in instances:
        solver = build_solver(args.strategy, **options)
        try:
            fitness = evaluate_solver(
                solver,
                inst.points,
                inst.optimum,
                max_runtime=args.max_runtime,
                allow_partial=args.allow_partial,
            )
        except OneLineError as e:
            fitnesses.append(_failed_fitness(solver.name))
            print(f"{inst.name}: failed: {type(e).__name__}: {e}")
            continue
        fitnesses.append(fitness)
        print(f"{inst.name}: length={fitness.length:.2f} gap={fitness.gap:.3f} coverage={fitness.coverage:.1%}")
    agg = aggregate_fitness(fitnesses)
    print(
        f"{args.strategy}: score={agg['score']:.2f} gap={agg['gap']:.3f} "
        f"coverage={agg['coverage']:.1%} runtime={agg['runtime']:.2f}s"
    )


def _add_solver_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--neighbor-distance", type=float, default=None)
    parser.add_argument("--population-size", type=int, default=None)
    parser.add_argument("--mutation-rate", type=float, default=None)
    parser.add_argument("--generations", type=int, default=None)
    parser.add_argument("--device", default=None, help="torch device for genetic scoring, e.g. cuda:0")
    parser.add_argument("--seed", type=int, default=123)
    parser.add_argument("--config", default=None, help="JSON file with solver config fields")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--allow-partial", action="store_true", help="score partial paths by coverage instead of inf")


def _add_point_args(parser: argparse.ArgumentParser) -> None:
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", help="CSV of x,y lines or a TSPLIB .tsp file")
    source.add_argument("--random", type=int, help="sample N uniform random points")
    source.add_argument("--lattice", help="generate a ROWSxCOLS lattice")
    parser.add_argument("--lattice-kind", choices=["square", "triangular"], default="triangular")
    parser.add_argument("--spacing", type=float, default=1.0)
    parser.add_argument("--jitter", type=float, default=0.0)
    parser.add_argument("--width", type=float, default=100.0)
    parser.add_argument("--height", type=float, default=100.0)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Order sampled points into a single drawable line")
    subparsers = parser.add_subparsers(dest="command", required=True)

    solve_parser = subparsers.add_parser("solve", help="Order a point set with one strategy")
    _add_point_args(solve_parser)
    _add_solver_args(solve_parser)
    solve_parser.add_argument("--strategy", choices=list(STRATEGIES), default="genetic")
    solve_parser.add_argument("--output", default=None, help="write the ordered points as CSV")
    solve_parser.add_argument("--result-json", default=None)
    solve_parser.set_defaults(func=solve)

    compare_parser = subparsers.add_parser("compare", help="Run every strategy on the same point set")
    _add_point_args(compare_parser)
    _add_solver_args(compare_parser)
    compare_parser.set_defaults(func=compare)

    bench_parser = subparsers.add_parser("bench", help="Evaluate a strategy on TSPLIB instances")
    bench_parser.add_argument("--data-root", default="data/tsplib")
    bench_parser.add_argument("--strategy", choices=list(STRATEGIES), default="genetic")
    bench_parser.add_argument("--max-nodes", type=int, default=None)
    bench_parser.add_argument("--max-instances", type=int, default=None)
    bench_parser.add_argument("--max-runtime", type=float, default=None)
    _add_solver_args(bench_parser)
    bench_parser.set_defaults(func=bench)

    args = parser.parse_args(argv)
    try:
        args.func(args)
    except OneLineError as e:
        log(f"error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
