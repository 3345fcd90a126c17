import random

from oneline.data import lattice_points, random_points
from oneline.strategies import build_solver


def main(generations: int = 20, population_size: int = 50):
    rng = random.Random(7)
    scattered = random_points(30, rng, width=100.0, height=100.0)
    lattice = lattice_points(8, 8, kind="triangular")

    genetic = build_solver("genetic", generations=generations, population_size=population_size)
    result = genetic.solve(scattered)
    print(f"genetic: length={result.length:.2f} permutation={result.is_permutation}")

    for name in ("boundary", "longest"):
        result = build_solver(name, neighbor_distance=1.1).solve(lattice)
        print(f"{name}: length={result.length:.2f} visited={result.visited}/{result.point_count}")


if __name__ == "__main__":
    main()
