"""End-to-end tests for the oneline command line and the demo script.

Test cases:
    - solve on a generated lattice writes ordered points and a result JSON
    - solve reads a CSV point file and a JSON config
    - compare prints one line per strategy
    - bench over a TSPLIB directory; empty directory raises RuntimeError
    - bench records a failed instance and carries on
    - --width and --height bound random points separately
    - solver failures exit with status 1

Run:
    pytest tests/test_cli.py -v
"""

import json

import pytest

from oneline.cli import main
from oneline.data import load_points
from oneline.examples.run_small_search import main as demo_main


SQUARE_TSP = """NAME: square4
TYPE: TSP
DIMENSION: 4
EDGE_WEIGHT_TYPE: EUC_2D
NODE_COORD_SECTION
1 0 0
2 1 0
3 0 1
4 1 1
EOF
"""


SPARSE_TSP = """NAME: sparse2
TYPE: TSP
DIMENSION: 2
EDGE_WEIGHT_TYPE: EUC_2D
NODE_COORD_SECTION
1 0 0
2 10 10
EOF
"""


def test_solve_lattice_longest(tmp_path, capsys):
    out = tmp_path / "line.csv"
    result_json = tmp_path / "result.json"
    main([
        "solve", "--lattice", "4x4", "--lattice-kind", "square", "--strategy", "longest",
        "--neighbor-distance", "1.1", "--output", str(out), "--result-json", str(result_json),
    ])
    state = json.loads(result_json.read_text())
    assert state["strategy"] == "longest"
    assert state["config"]["neighbor_distance"] == 1.1
    assert state["point_count"] == 16
    assert not state["closed"]
    assert len(load_points(out)) == len(state["order"])
    assert "longest: length=" in capsys.readouterr().out


def test_solve_closed_line_returns_to_start(tmp_path):
    out = tmp_path / "line.csv"
    main(["solve", "--random", "8", "--generations", "3", "--population-size", "10", "--output", str(out)])
    line = load_points(out)
    assert len(line) == 9
    assert line[0] == line[-1]


def test_solve_from_csv_with_config(tmp_path, capsys):
    points = tmp_path / "points.csv"
    points.write_text("0,0\n1,0\n0,1\n1,1\n")
    config = tmp_path / "genetic.json"
    config.write_text(json.dumps({"population_size": 12, "generations": 2, "verbose": True}))
    result_json = tmp_path / "result.json"
    main(["solve", "--input", str(points), "--config", str(config), "--result-json", str(result_json)])
    state = json.loads(result_json.read_text())
    assert state["config"]["population_size"] == 12
    assert sorted(state["order"]) == [0, 1, 2, 3]
    assert "gen 2: shortest tour=" in capsys.readouterr().out


def test_compare(capsys):
    main(["compare", "--lattice", "5x5", "--generations", "2", "--population-size", "10"])
    out = capsys.readouterr().out
    for name in ("genetic", "boundary", "longest"):
        assert f"[{name}]" in out


def test_bench(tmp_path, capsys):
    (tmp_path / "square4.tsp").write_text(SQUARE_TSP)
    main([
        "bench", "--data-root", str(tmp_path), "--strategy", "genetic",
        "--generations", "2", "--population-size", "20",
    ])
    out = capsys.readouterr().out
    assert "square4: length=" in out
    assert "genetic: score=" in out


def test_bench_keeps_going_after_a_failed_instance(tmp_path, capsys):
    (tmp_path / "sparse2.tsp").write_text(SPARSE_TSP)
    (tmp_path / "square4.tsp").write_text(SQUARE_TSP)
    main([
        "bench", "--data-root", str(tmp_path), "--strategy", "longest",
        "--neighbor-distance", "1.1", "--allow-partial",
    ])
    out = capsys.readouterr().out
    assert "sparse2: failed: GraphTooSparse" in out
    assert "square4: length=" in out
    assert "longest: score=inf" in out


def test_bench_empty_dir(tmp_path):
    with pytest.raises(RuntimeError, match="No TSPLIB instances"):
        main(["bench", "--data-root", str(tmp_path)])


def test_failure_exit_code():
    with pytest.raises(SystemExit) as exc:
        main([
            "solve", "--lattice", "3x3", "--lattice-kind", "square",
            "--strategy", "boundary", "--neighbor-distance", "1.1",
        ])
    assert exc.value.code == 1


def test_bad_lattice_size():
    with pytest.raises(SystemExit) as exc:
        main(["solve", "--lattice", "three-by-three"])
    assert exc.value.code == 1


def test_demo_script(capsys):
    demo_main(generations=2, population_size=10)
    out = capsys.readouterr().out
    assert "genetic: length=" in out
    assert "boundary: length=" in out
    assert "longest: length=" in out


def test_random_points_use_width_and_height(tmp_path):
    out = tmp_path / "line.csv"
    main([
        "solve", "--random", "20", "--width", "1", "--height", "50",
        "--generations", "1", "--population-size", "4", "--output", str(out),
    ])
    line = load_points(out)
    assert all(0.0 <= x <= 1.0 for x, _ in line)
    assert all(0.0 <= y <= 50.0 for _, y in line)
    assert max(y for _, y in line) > 1.0
