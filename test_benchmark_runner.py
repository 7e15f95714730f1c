#!/usr/bin/env python3
"""
Tests for the command line benchmark runner.
"""

import matplotlib
matplotlib.use("Agg")

from PSO_ENGINE.Logs.logger import log_header, log_success
from PSO_ENGINE.Benchmark.run_benchmark import BenchmarkRunner, main
from PSO_ENGINE.PSO.Config import PSOConfig


def test_runner_writes_report(tmp_path):
    log_header("=== Benchmark Runner Test ===", "test_benchmark_runner")
    exit_code = main(["--function", "sphere", "--dim", "3", "--runs", "3", "--swarm-size", "10",
                      "--max-iterations", "50", "--seed", "5", "--output-dir", str(tmp_path),
                      "--log-every", "0"])
    assert exit_code == 0

    reports = list(tmp_path.glob("benchmark_sphere_3d_*.txt"))
    assert len(reports) == 1
    content = reports[0].read_text()
    assert "Mean GBest" in content
    assert "Successful runs: 3/3" in content
    assert content.count("Run ") >= 3
    log_success(f"Report written to {reports[0]}", "test_benchmark_runner")


def test_runner_plots(tmp_path):
    exit_code = main(["--function", "rastrigin", "--runs", "2", "--swarm-size", "6", "--max-iterations", "10",
                      "--output-dir", str(tmp_path), "--plot-surface", "--plot-convergence", "--vectorized",
                      "--log-every", "0"])
    assert exit_code == 0
    assert (tmp_path / "surface_rastrigin.png").exists()
    assert (tmp_path / "convergence_rastrigin_10d.png").exists()


def test_runner_passes_velocity_and_decay_options(tmp_path):
    exit_code = main(["--function", "ackley", "--dim", "2", "--runs", "1", "--swarm-size", "6",
                      "--max-iterations", "20", "--inertia", "exponential_decay", "--decay-rate", "5.0",
                      "--v-clamp-ratio", "0.2", "--v-init-ratio", "0.05", "--output-dir", str(tmp_path),
                      "--log-every", "0"])
    assert exit_code == 0
    content = next(tmp_path.glob("benchmark_ackley_2d_*.txt")).read_text()
    assert "'inertia_mode': 'exponential_decay'" in content
    assert "'decay_rate': 5.0" in content
    assert "'v_clamp_ratio': 0.2" in content
    assert "'v_init_ratio': 0.05" in content

    assert main(["--function", "ackley", "--v-clamp-ratio", "0", "--output-dir", str(tmp_path)]) == 2
    assert main(["--function", "ackley", "--v-init-ratio", "-1", "--output-dir", str(tmp_path)]) == 2


def test_runner_rejects_bad_input(tmp_path):
    assert main(["--function", "unknown", "--output-dir", str(tmp_path)]) == 2
    assert main(["--function", "sphere", "--c1", "-1", "--output-dir", str(tmp_path)]) == 2


def test_list_functions(capsys):
    assert main(["--list-functions"]) == 0
    output = capsys.readouterr().out
    assert "spring_design" in output
    assert "linear_decay" in output


def test_runner_seeds_and_statistics():
    config = PSOConfig(swarm_size=8, max_iterations=30, random_seed=11, log_every=0)
    runner = BenchmarkRunner("spring_design", dim=10, config=config, num_runs=2)
    results = runner.run()
    assert runner.dim == 3
    assert len(results) == 2
    assert results[0] != results[1]

    repeat = BenchmarkRunner("spring_design", dim=3, config=config.replace(random_seed=12), num_runs=1).run()
    assert repeat[0] == results[1]

    stats = runner.statistics()
    assert stats["runs"] == 2
    assert stats["min"] <= stats["mean"] <= stats["max"]
    assert runner.save_results() is None
