# File: PSO_ENGINE/PSO/Optimizer.py
# Control loop around a Swarm: stopping rules, restarts and the final Result.
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from PSO_ENGINE.Logs.logger import log_header, log_info, log_success, log_warning
from PSO_ENGINE.PSO.Bounds import Bounds
from PSO_ENGINE.PSO.Config import PSOConfig
from PSO_ENGINE.PSO.Errors import InvalidBounds
from PSO_ENGINE.PSO.ObjectiveFunctions.ObjectiveFunction import as_objective
from PSO_ENGINE.PSO.Result import OptimizerState, Result, StepReport, TerminationReason
from PSO_ENGINE.PSO.Swarm import Swarm

# --- Module Name for Logging ---
module_name = Path(__file__).stem  # Gets 'Optimizer'


def resolve_bounds(objective, bounds=None) -> Bounds:
    """Explicit bounds win; otherwise the objective's own search box is used."""
    if bounds is not None:
        return Bounds.coerce(bounds)
    if callable(getattr(objective, "search_bounds", None)):
        return objective.search_bounds()
    if getattr(objective, "bounds", None) is not None:
        raw_bounds = objective.bounds
        if isinstance(raw_bounds, Bounds):
            return raw_bounds
        dim = getattr(objective, "dim", None)
        if dim is not None and np.ndim(raw_bounds) == 1 and len(raw_bounds) == 2:
            return Bounds.uniform(raw_bounds[0], raw_bounds[1], dim)
        return Bounds.coerce(raw_bounds)
    raise InvalidBounds("No bounds given and the objective does not define any.")


class Optimizer:
    """
    Drives a Swarm until one of the stopping rules fires.

    State machine:
        INITIALIZING -> RUNNING -> {CONVERGED, MAX_EVALUATIONS, MAX_ITERATIONS,
                                    MAX_RESTARTS, STAGNATED}

    After every step the rules are checked in this order: absolute tolerance,
    evaluation budget, iteration budget, stagnation (restart or stop).

    Args:
        objective: Object with evaluate() (optionally evaluate_batch()) or a plain callable.
        bounds: Bounds, sequence of (lower, upper) pairs, or None to use the objective's bounds.
        config (PSOConfig): Hyperparameters and stopping rules. Keyword overrides are applied on top.
        seed_position: Optional starting point for the first particle (NaN entries are sampled).
    """

    def __init__(self, objective, bounds=None, config: Optional[PSOConfig] = None,
                 seed_position: Optional[Sequence[float]] = None, **overrides):
        self.objective = as_objective(objective)
        self.bounds = resolve_bounds(self.objective, bounds)
        config = config if config is not None else PSOConfig()
        self.config = config.replace(**overrides) if overrides else config
        self.seed_position = seed_position
        self.strategy = self.config.build_strategy()

        self.swarm: Optional[Swarm] = None
        self.restart_count = 0
        self.history: List[float] = []
        self.last_report: Optional[StepReport] = None
        self._state = OptimizerState.INITIALIZING

    @property
    def state(self) -> OptimizerState:
        return self._state

    def _initialize(self):
        cfg = self.config
        log_header(f"Starting PSO on {getattr(self.objective, 'name', type(self.objective).__name__)} "
                   f"({self.bounds.dim} dimensions)", module_name)
        log_info(f"Inertia strategy: {self.strategy}", module_name)
        rng = np.random.default_rng(cfg.random_seed)
        self.swarm = Swarm.initialize(
            self.bounds, cfg.swarm_size, self.objective,
            seed_position=self.seed_position,
            rng=rng,
            boundary_policy=cfg.policy,
            v_clamp_ratio=cfg.v_clamp_ratio,
            v_init_ratio=cfg.v_init_ratio,
            vectorized=cfg.vectorized,
        )
        self.restart_count = 0
        self.history = [self.swarm.global_best_fitness]
        self._state = OptimizerState.RUNNING

    def _next_state(self) -> OptimizerState:
        cfg = self.config
        swarm = self.swarm
        if cfg.abs_tolerance is not None and swarm.global_best_fitness <= cfg.abs_tolerance:
            return OptimizerState.CONVERGED
        if cfg.max_evaluations is not None and swarm.evaluation_count >= cfg.max_evaluations:
            return OptimizerState.MAX_EVALUATIONS
        if cfg.max_iterations is not None and swarm.iteration_count >= cfg.max_iterations:
            return OptimizerState.MAX_ITERATIONS
        if cfg.max_stagnation is not None and swarm.stagnation_count >= cfg.max_stagnation:
            if self.restart_count < cfg.max_restarts:
                self._restart()
                # restart evaluations count against the budget
                if cfg.max_evaluations is not None and swarm.evaluation_count >= cfg.max_evaluations:
                    return OptimizerState.MAX_EVALUATIONS
                return OptimizerState.RUNNING
            if cfg.max_restarts > 0:
                return OptimizerState.MAX_RESTARTS
            return OptimizerState.STAGNATED
        return OptimizerState.RUNNING

    def _restart(self):
        self.restart_count += 1
        log_warning(f"No improvement for {self.swarm.stagnation_count} iterations. "
                    f"Restart {self.restart_count}/{self.config.max_restarts}.", module_name)
        self.swarm.reinitialize(self.objective)
        self.history[-1] = self.swarm.global_best_fitness

    def step(self) -> StepReport:
        """Runs one generational update and applies the stopping rules."""
        if self._state is OptimizerState.INITIALIZING:
            self._initialize()
        if self._state.is_terminal:
            raise RuntimeError(f"Optimizer already finished ({self._state.value}).")

        omega, c1, c2 = self.strategy.get_parameters(self.swarm.iteration_count, self.config.max_iterations)
        report = self.swarm.step(self.objective, omega, c1, c2)
        self.history.append(self.swarm.global_best_fitness)
        self.last_report = report

        log_every = self.config.log_every
        if log_every and report.iteration_count % log_every == 0:
            log_info(f"Iter {report.iteration_count}: GBest={report.global_best_fitness:.6e}, "
                     f"evals={report.evaluation_count}, stagnation={report.stagnation_count}, "
                     f"w={omega:.4f}, diversity={report.metrics.get('swarm_diversity', float('nan')):.4e}",
                     module_name)

        self._state = self._next_state()
        return report

    def optimize(self) -> Result:
        """Runs until a terminal state is reached and returns the Result."""
        if self._state is OptimizerState.INITIALIZING:
            self._initialize()
        while not self._state.is_terminal:
            self.step()

        result = self._build_result()
        log_success(f"Finished: {result.summary()}", module_name)
        return result

    def _build_result(self) -> Result:
        swarm = self.swarm
        best_position = tuple(float(x) for x in swarm.global_best_position)
        decoded = None
        if callable(getattr(self.objective, "decode", None)):
            decoded = tuple(float(x) for x in self.objective.decode(swarm.global_best_position))
        return Result(
            best_position=best_position,
            best_fitness=float(swarm.global_best_fitness),
            evaluation_count=swarm.evaluation_count,
            iteration_count=swarm.iteration_count,
            restart_count=self.restart_count,
            termination_reason=TerminationReason.from_state(self._state),
            history=tuple(float(v) for v in self.history),
            decoded_position=decoded,
        )


def minimize(objective, bounds=None, seed_position=None, **config) -> Result:
    """
    One-call entry point.

    Example:
        result = minimize(lambda x: float((x[0] - 3) ** 2), [(-10, 10)], random_seed=42)
    """
    return Optimizer(objective, bounds, config=PSOConfig().replace(**config), seed_position=seed_position).optimize()
