#!/usr/bin/env python3
"""
Benchmark PSO Runner Script

Runs the optimizer repeatedly on one of the bundled benchmark problems with
seeds seed, seed+1, ... and reports summary statistics of the final fitness.
"""

import argparse
import time
from pathlib import Path
from typing import List, Optional

import numpy as np
from matplotlib import pyplot as plt

from PSO_ENGINE import CONFIG
from PSO_ENGINE.Logs.logger import log_error, log_header, log_info, log_success, log_warning, set_log_level
from PSO_ENGINE.PSO.Config import PSOConfig
from PSO_ENGINE.PSO.Errors import PSOError
from PSO_ENGINE.PSO.ObjectiveFunctions.Benchmarks.Loader import (FIXED_DIMENSIONS, benchmark_function_classes,
                                                                 create_benchmark)
from PSO_ENGINE.PSO.Optimizer import Optimizer
from PSO_ENGINE.PSO.Particle import BoundaryPolicy
from PSO_ENGINE.PSO.Result import Result
from PSO_ENGINE.PSO.Strategies.Inertia import INERTIA_STRATEGIES, list_available_strategies

module_name = Path(__file__).stem  # Gets 'run_benchmark'


class BenchmarkRunner:
    """
    Repeated optimizer runs on a single benchmark function.

    Args:
        function_name (str): Key in the benchmark registry.
        dim (int): Problem dimension (ignored for fixed-size problems).
        config (PSOConfig): Base configuration; random_seed is the seed of the first run.
        num_runs (int): Number of independent runs.
        output_dir (str | None): Directory for the text report; None disables saving.
    """

    def __init__(self, function_name: str, dim: int, config: PSOConfig,
                 num_runs: int = CONFIG.NUM_BENCHMARK_RUNS, output_dir: Optional[str] = None):
        self.function_name = function_name
        self.dim = FIXED_DIMENSIONS.get(function_name, dim)
        self.config = config
        self.num_runs = num_runs
        self.output_dir = output_dir
        self.results: List[Result] = []

    def run(self) -> List[Result]:
        base_seed = self.config.random_seed if self.config.random_seed is not None else 0
        self.results = []
        for run_idx in range(self.num_runs):
            seed = base_seed + run_idx
            log_header(f"Run {run_idx + 1}/{self.num_runs} on {self.function_name} (seed={seed})", module_name)
            objective = create_benchmark(self.function_name, self.dim)
            optimizer = Optimizer(objective, config=self.config.replace(random_seed=seed))
            start_time = time.time()
            result = optimizer.optimize()
            log_info(f"Run {run_idx + 1} finished in {time.time() - start_time:.2f}s: "
                     f"GBest={result.best_fitness:.6e}, reason={result.termination_reason.name}", module_name)
            self.results.append(result)
        return self.results

    def statistics(self) -> dict:
        """Mean/std/min/max of the finite final fitness values."""
        finite_gbests = [r.best_fitness for r in self.results if np.isfinite(r.best_fitness)]
        stats = {"runs": len(self.results), "successful_runs": len(finite_gbests)}
        if finite_gbests:
            stats.update(
                mean=float(np.mean(finite_gbests)),
                std=float(np.std(finite_gbests)),
                min=float(np.min(finite_gbests)),
                max=float(np.max(finite_gbests)),
                mean_evaluations=float(np.mean([r.evaluation_count for r in self.results])),
            )
        return stats

    def save_results(self) -> Optional[Path]:
        """Writes a text report and returns its path."""
        if self.output_dir is None:
            log_warning("No output directory specified. Results not saved.", module_name)
            return None

        results_dir = Path(self.output_dir)
        results_dir.mkdir(parents=True, exist_ok=True)
        filepath = results_dir / f"benchmark_{self.function_name}_{self.dim}d_{int(time.time())}.txt"
        stats = self.statistics()

        with open(filepath, 'w') as f:
            f.write(f"PSO Benchmark Results: {self.function_name}\n")
            f.write(f"Dimension: {self.dim}, runs: {self.num_runs}\n")
            f.write(f"Configuration: {self.config.as_dict()}\n")
            f.write("=" * 80 + "\n\n")

            for run_idx, result in enumerate(self.results):
                f.write(f"Run {run_idx + 1}: {result.summary()}\n")
            f.write("\n")

            if stats["successful_runs"]:
                f.write(f"  Mean GBest: {stats['mean']:.6e}\n")
                f.write(f"  Std GBest: {stats['std']:.6e}\n")
                f.write(f"  Min GBest: {stats['min']:.6e}\n")
                f.write(f"  Max GBest: {stats['max']:.6e}\n")
                f.write(f"  Successful runs: {stats['successful_runs']}/{stats['runs']}\n")
            else:
                f.write("  No successful runs\n")

        log_success(f"Benchmark results saved to {filepath}", module_name)
        return filepath

    def plot_convergence(self, show: bool = False) -> Optional[Path]:
        """Global best fitness per iteration for every run (log scale when positive)."""
        if not self.results:
            log_warning("No results to plot.", module_name)
            return None

        fig, ax = plt.subplots(figsize=(10, 6))
        for run_idx, result in enumerate(self.results):
            ax.plot(result.history, alpha=0.7, label=f"run {run_idx + 1}")
        if all(v > 0 for r in self.results for v in r.history if np.isfinite(v)):
            ax.set_yscale('log')
        ax.set_title(f"Convergence on {self.function_name} ({self.dim}D)")
        ax.set_xlabel("Iteration")
        ax.set_ylabel("Global best fitness")
        ax.grid(True, alpha=0.3)
        if len(self.results) <= 10:
            ax.legend()

        filepath = None
        if self.output_dir is not None:
            results_dir = Path(self.output_dir)
            results_dir.mkdir(parents=True, exist_ok=True)
            filepath = results_dir / f"convergence_{self.function_name}_{self.dim}d.png"
            fig.savefig(filepath, dpi=150, bbox_inches='tight')
            log_info(f"Convergence plot saved to {filepath}", module_name)
        if show:
            plt.show()
        plt.close(fig)
        return filepath


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Run PSO on a benchmark function')

    parser.add_argument('--function', type=str, default='sphere',
                        help='Benchmark function to optimize (default: sphere)')
    parser.add_argument('--dim', type=int, default=CONFIG.BENCHMARK_DIM,
                        help=f'Problem dimension (default: {CONFIG.BENCHMARK_DIM})')
    parser.add_argument('--runs', type=int, default=CONFIG.NUM_BENCHMARK_RUNS,
                        help=f'Independent runs with seeds seed, seed+1, ... (default: {CONFIG.NUM_BENCHMARK_RUNS})')

    # Swarm and stopping rules
    parser.add_argument('--swarm-size', type=int, default=CONFIG.SWARM_SIZE,
                        help=f'Number of particles (default: {CONFIG.SWARM_SIZE})')
    parser.add_argument('--max-iterations', type=int, default=CONFIG.MAX_ITERATIONS,
                        help=f'Iteration budget (default: {CONFIG.MAX_ITERATIONS})')
    parser.add_argument('--max-evaluations', type=int, default=CONFIG.MAX_EVALUATIONS,
                        help='Evaluation budget (default: unbounded)')
    parser.add_argument('--max-stagnation', type=int, default=CONFIG.MAX_STAGNATION,
                        help='Iterations without improvement before a restart (default: unbounded)')
    parser.add_argument('--max-restarts', type=int, default=CONFIG.MAX_RESTARTS,
                        help=f'Maximum number of restarts (default: {CONFIG.MAX_RESTARTS})')
    parser.add_argument('--abs-tolerance', type=float, default=CONFIG.ABS_TOLERANCE,
                        help='Stop once the global best is at or below this value (default: disabled)')

    # Coefficients
    parser.add_argument('--inertia', type=str, default=CONFIG.INERTIA_MODE, choices=list(INERTIA_STRATEGIES),
                        help=f'Inertia schedule (default: {CONFIG.INERTIA_MODE})')
    parser.add_argument('--w', type=float, default=CONFIG.INERTIA_WEIGHT,
                        help=f'Static inertia weight (default: {CONFIG.INERTIA_WEIGHT:.4f})')
    parser.add_argument('--w-start', type=float, default=CONFIG.INERTIA_START,
                        help=f'Initial inertia weight for decay schedules (default: {CONFIG.INERTIA_START})')
    parser.add_argument('--w-end', type=float, default=CONFIG.INERTIA_END,
                        help=f'Final inertia weight for decay schedules (default: {CONFIG.INERTIA_END})')
    parser.add_argument('--decay-rate', type=float, default=CONFIG.INERTIA_DECAY_RATE,
                        help=f'Rate of the exponential_decay schedule (default: {CONFIG.INERTIA_DECAY_RATE})')
    parser.add_argument('--v-clamp-ratio', type=float, default=CONFIG.V_CLAMP_RATIO,
                        help='Velocity limit as a fraction of the bound span (default: no clamping)')
    parser.add_argument('--v-init-ratio', type=float, default=CONFIG.V_INIT_RATIO,
                        help=f'Initial velocity range as a fraction of the bound span (default: {CONFIG.V_INIT_RATIO})')
    parser.add_argument('--c1', type=float, default=CONFIG.COGNITIVE_COEFF,
                        help=f'Cognitive coefficient (default: {CONFIG.COGNITIVE_COEFF:.4f})')
    parser.add_argument('--c2', type=float, default=CONFIG.SOCIAL_COEFF,
                        help=f'Social coefficient (default: {CONFIG.SOCIAL_COEFF:.4f})')
    parser.add_argument('--boundary-policy', type=str, default=CONFIG.BOUNDARY_POLICY,
                        choices=[p.value for p in BoundaryPolicy],
                        help=f'Velocity handling at the bounds (default: {CONFIG.BOUNDARY_POLICY})')
    parser.add_argument('--vectorized', action='store_true',
                        help='Matrix updates and batch evaluation')
    parser.add_argument('--seed', type=int, default=0,
                        help='Seed of the first run (default: 0)')

    # Output
    parser.add_argument('--output-dir', type=str, default=CONFIG.RESULTS_BASE_DIR,
                        help=f'Directory for the text report (default: {CONFIG.RESULTS_BASE_DIR})')
    parser.add_argument('--log-every', type=int, default=CONFIG.LOG_EVERY,
                        help=f'Progress line every N iterations, 0 disables (default: {CONFIG.LOG_EVERY})')
    parser.add_argument('--log-level', type=str, default=None,
                        help='Console log level (debug, info, warning, error)')
    parser.add_argument('--list-functions', action='store_true',
                        help='List available benchmark functions and exit')
    parser.add_argument('--plot-surface', action='store_true',
                        help='Save a 3D surface plot of the 2D version of the function')
    parser.add_argument('--plot-convergence', action='store_true',
                        help='Save a convergence plot of all runs')
    parser.add_argument('--show-plots', action='store_true',
                        help='Display plots in addition to saving them')
    return parser


def main(argv=None) -> int:
    """Main function to run the benchmark; returns the process exit code."""
    args = build_parser().parse_args(argv)

    if args.log_level:
        set_log_level(args.log_level)

    if args.list_functions:
        print("Available benchmark functions:")
        for name, cls in benchmark_function_classes.items():
            fixed = f" (fixed dimension {FIXED_DIMENSIONS[name]})" if name in FIXED_DIMENSIONS else ""
            print(f"  {name}: {cls.__name__}{fixed}")
        print("Available inertia strategies:")
        for name, description in list_available_strategies().items():
            print(f"  {name}: {description}")
        return 0

    if args.function not in benchmark_function_classes:
        log_error(f"Unknown function '{args.function}'. Use --list-functions to see the options.", "main")
        return 2

    try:
        config = PSOConfig(
            swarm_size=args.swarm_size,
            max_iterations=args.max_iterations,
            max_evaluations=args.max_evaluations,
            max_stagnation=args.max_stagnation,
            max_restarts=args.max_restarts,
            abs_tolerance=args.abs_tolerance,
            inertia_mode=args.inertia,
            w=args.w,
            w_start=args.w_start,
            w_end=args.w_end,
            decay_rate=args.decay_rate,
            v_clamp_ratio=args.v_clamp_ratio,
            v_init_ratio=args.v_init_ratio,
            c1=args.c1,
            c2=args.c2,
            boundary_policy=args.boundary_policy,
            vectorized=args.vectorized,
            random_seed=args.seed,
            log_every=args.log_every,
        )
    except PSOError as e:
        log_error(str(e), "main")
        return 2

    log_header("PSO Benchmark Runner", "main")
    log_info("Configuration:", "main")
    log_info(f"  Function: {args.function}", "main")
    log_info(f"  Dimension: {FIXED_DIMENSIONS.get(args.function, args.dim)}", "main")
    log_info(f"  Runs: {args.runs}", "main")
    log_info(f"  Swarm Size: {config.swarm_size}", "main")
    log_info(f"  Inertia: {config.build_strategy()}", "main")
    log_info(f"  Output Directory: {args.output_dir}", "main")

    if args.plot_surface:
        surface_dim = FIXED_DIMENSIONS.get(args.function, 2)
        if surface_dim != 2:
            log_warning(f"'{args.function}' is not a 2D problem. Skipping surface plot.", "main")
        else:
            fig = create_benchmark(args.function, 2).plot_3d_surface(show=args.show_plots)
            output_dir = Path(args.output_dir)
            output_dir.mkdir(parents=True, exist_ok=True)
            surface_file = output_dir / f"surface_{args.function}.png"
            fig.savefig(surface_file, dpi=150, bbox_inches='tight')
            plt.close(fig)
            log_info(f"Surface plot saved to {surface_file}", "main")

    runner = BenchmarkRunner(args.function, args.dim, config, num_runs=args.runs, output_dir=args.output_dir)
    runner.run()

    stats = runner.statistics()
    if stats["successful_runs"]:
        log_info(f"Mean GBest: {stats['mean']:.6e} (std {stats['std']:.6e})", "main")
        log_info(f"Min GBest: {stats['min']:.6e}, Max GBest: {stats['max']:.6e}", "main")
    else:
        log_warning("No run produced a finite result.", "main")

    runner.save_results()
    if args.plot_convergence:
        runner.plot_convergence(show=args.show_plots)

    log_header("PSO Benchmark Completed Successfully", "main")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
