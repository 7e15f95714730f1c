# File: PSO_ENGINE/PSO/Swarm.py
# Synchronous (generational) global-best swarm.
#
# Every particle update in a step reads the swarm state as it was at the
# start of the step; the global best is only refreshed after all particles
# have been evaluated. The per-particle and vectorized paths share the
# update kernels in Particle.py and consume the random stream in the same
# (particle, dimension, r1-then-r2) order, so they yield identical runs.

import traceback
from pathlib import Path
from typing import List, Optional, Sequence

import numpy as np

from PSO_ENGINE.Logs.logger import log_debug, log_error, log_info, log_warning
from PSO_ENGINE.PSO.Bounds import Bounds
from PSO_ENGINE.PSO.Errors import DimensionMismatch, InvalidSwarmSize, ObjectiveEvaluationError
from PSO_ENGINE.PSO.Metrics.SwarmMetrics import SwarmMetrics
from PSO_ENGINE.PSO.ObjectiveFunctions.ObjectiveFunction import supports_batch
from PSO_ENGINE.PSO.Particle import BoundaryPolicy, Particle, compute_velocity, move
from PSO_ENGINE.PSO.Result import StepReport

# --- Module Name for Logging ---
module_name = Path(__file__).stem  # Gets 'Swarm'


def evaluate_positions(objective, positions: np.ndarray, use_batch: bool = False) -> np.ndarray:
    """
    Evaluates every row of `positions`.

    With use_batch and an objective exposing evaluate_batch(), a single call
    receives the whole matrix; otherwise evaluate() is called once per row.
    Non-finite fitness values are replaced by +inf.

    Raises:
        ObjectiveEvaluationError: If the objective raises or a batch result has the wrong shape.
    """
    num_positions = positions.shape[0]
    if use_batch and supports_batch(objective):
        batch = positions.copy()
        try:
            raw = objective.evaluate_batch(batch)
            fitness_values = np.asarray(raw, dtype=float).reshape(-1)
        except Exception as e:
            log_error(f"Batch objective evaluation failed: {e}", module_name)
            log_error(traceback.format_exc(), module_name)
            raise ObjectiveEvaluationError(f"evaluate_batch failed: {e}", positions=positions) from e
        if fitness_values.shape != (num_positions,):
            raise ObjectiveEvaluationError(
                f"evaluate_batch returned {fitness_values.size} values for {num_positions} positions",
                positions=positions)
    else:
        fitness_values = np.empty(num_positions, dtype=float)
        for i, position in enumerate(positions):
            try:
                fitness_values[i] = float(objective.evaluate(position.copy()))
            except Exception as e:
                log_error(f"Objective evaluation failed at {position}: {e}", module_name)
                log_error(traceback.format_exc(), module_name)
                raise ObjectiveEvaluationError(f"evaluate failed: {e}", position=position) from e

    non_finite = ~np.isfinite(fitness_values)
    if non_finite.any():
        log_warning(f"{int(non_finite.sum())} non-finite fitness value(s) detected. Replacing with inf.",
                    module_name)
        fitness_values[non_finite] = np.inf
    return fitness_values


class Swarm:
    """
    Collection of particles plus the shared global best.

    Attributes:
        bounds (Bounds): Search box.
        particles (list[Particle]): Particles in a fixed order.
        rng (np.random.Generator): The single random stream of the run.
        boundary_policy (BoundaryPolicy): Velocity correction at the bounds.
        v_max (np.ndarray | None): Per-dimension velocity limit.
        vectorized (bool): Matrix update and batch evaluation.
        global_best_position (np.ndarray): Best position seen by any particle.
        global_best_fitness (float): Fitness at global_best_position.
        iteration_count (int): Completed steps.
        evaluation_count (int): Objective evaluations so far.
        stagnation_count (int): Consecutive steps without global best improvement.
    """

    def __init__(self, bounds: Bounds, particles: List[Particle], rng: np.random.Generator,
                 boundary_policy: BoundaryPolicy = BoundaryPolicy.CLAMP_AND_ZERO_VELOCITY,
                 v_max: Optional[np.ndarray] = None, v_init_ratio: float = 0.0,
                 vectorized: bool = False):
        if len(particles) < 1:
            raise InvalidSwarmSize(f"A swarm needs at least one particle, got {len(particles)}")
        self.bounds = bounds
        self.particles = particles
        self.rng = rng
        self.boundary_policy = BoundaryPolicy(boundary_policy)
        self.v_max = v_max
        self.v_init_ratio = v_init_ratio
        self.vectorized = vectorized

        self.global_best_position = particles[0].position.copy()
        self.global_best_fitness = float('inf')
        self.iteration_count = 0
        self.evaluation_count = 0
        self.stagnation_count = 0

        self.metrics_calculator = SwarmMetrics()

    # --- Construction ---

    @classmethod
    def initialize(cls, bounds: Bounds, swarm_size: int, objective,
                   seed_position: Optional[Sequence[float]] = None,
                   rng: Optional[np.random.Generator] = None,
                   boundary_policy=BoundaryPolicy.CLAMP_AND_ZERO_VELOCITY,
                   v_clamp_ratio: Optional[float] = None,
                   v_init_ratio: float = 0.0,
                   vectorized: bool = False) -> "Swarm":
        """
        Creates `swarm_size` particles uniformly inside `bounds`, evaluates
        each once and seeds personal and global bests.

        Args:
            seed_position: Starting point for the first particle; NaN entries are sampled.

        Raises:
            InvalidSwarmSize: If swarm_size < 1.
            DimensionMismatch: If seed_position does not match the bounds.
        """
        if swarm_size is None or int(swarm_size) != swarm_size or swarm_size < 1:
            raise InvalidSwarmSize(f"swarm_size must be an integer >= 1, got {swarm_size}")
        swarm_size = int(swarm_size)
        rng = np.random.default_rng() if rng is None else rng

        seed = None
        if seed_position is not None:
            seed = np.array(seed_position, dtype=float).reshape(-1)
            if seed.size != bounds.dim:
                raise DimensionMismatch(bounds.dim, seed.size, "seed_position")

        v_max = None if v_clamp_ratio is None else v_clamp_ratio * bounds.span

        particles = []
        for i in range(swarm_size):
            position = bounds.sample(rng)
            if i == 0 and seed is not None:
                position = np.where(np.isnan(seed), position, seed)
                if not bounds.contains(position):
                    log_warning("Seed position lies outside the bounds. Clamping.", module_name)
                    position = bounds.clamp(position)
            particles.append(Particle(position, cls._initial_velocity(bounds, rng, v_init_ratio)))

        swarm = cls(bounds, particles, rng, boundary_policy=boundary_policy, v_max=v_max,
                    v_init_ratio=v_init_ratio, vectorized=vectorized)
        swarm._evaluate_initial(objective)
        log_info(f"Initialized swarm: {swarm_size} particles, {bounds.dim} dimensions, "
                 f"{'vectorized' if vectorized else 'per-particle'} updates.", module_name)
        log_info(f"Initial GBest Value: {swarm.global_best_fitness:.4e}", module_name)
        return swarm

    @staticmethod
    def _initial_velocity(bounds: Bounds, rng: np.random.Generator, v_init_ratio: float) -> np.ndarray:
        if v_init_ratio <= 0:
            return np.zeros(bounds.dim)
        limit = v_init_ratio * bounds.span
        return rng.uniform(-limit, limit)

    def _evaluate_initial(self, objective):
        fitness_values = evaluate_positions(objective, self.positions, use_batch=self.vectorized)
        self.evaluation_count += self.size
        for particle, fitness in zip(self.particles, fitness_values):
            particle.observe(fitness)
        min_idx = int(np.argmin(self.pbest_values))  # first index on ties
        best = self.particles[min_idx]
        if np.isfinite(best.pbest_value):
            self.global_best_position = best.pbest_position.copy()
            self.global_best_fitness = best.pbest_value
        else:
            log_warning("Could not determine initial gbest from pbest values. Initializing gbest to inf.",
                        module_name)

    # --- State views ---

    @property
    def size(self) -> int:
        return len(self.particles)

    @property
    def dim(self) -> int:
        return self.bounds.dim

    @property
    def positions(self) -> np.ndarray:
        return np.array([p.position for p in self.particles])

    @property
    def velocities(self) -> np.ndarray:
        return np.array([p.velocity for p in self.particles])

    @property
    def pbest_positions(self) -> np.ndarray:
        return np.array([p.pbest_position for p in self.particles])

    @property
    def pbest_values(self) -> np.ndarray:
        return np.array([p.pbest_value for p in self.particles])

    # --- Update ---

    def _move_particles(self, gbest_position: np.ndarray, omega: float, c1: float, c2: float) -> np.ndarray:
        clamped = np.zeros((self.size, self.dim), dtype=bool)
        for i, particle in enumerate(self.particles):
            draws = self.rng.random((self.dim, 2))
            particle.update_velocity(draws[:, 0], draws[:, 1], gbest_position, omega, c1, c2, self.v_max)
            clamped[i] = particle.update_position(self.bounds, self.boundary_policy)
        return clamped

    def _move_vectorized(self, gbest_position: np.ndarray, omega: float, c1: float, c2: float) -> np.ndarray:
        draws = self.rng.random((self.size, self.dim, 2))
        velocities = compute_velocity(self.positions, self.velocities, self.pbest_positions,
                                      gbest_position, draws[..., 0], draws[..., 1],
                                      omega, c1, c2, self.v_max)
        positions, velocities, clamped = move(self.positions, velocities, self.bounds, self.boundary_policy)
        for particle, position, velocity in zip(self.particles, positions, velocities):
            particle.position = position.copy()
            particle.velocity = velocity.copy()
        return clamped

    def step(self, objective, omega: float, c1: float, c2: float) -> StepReport:
        """
        One generational update: move all particles, evaluate all new
        positions, update personal bests, then the global best.

        Args:
            objective: Object with evaluate() (and optionally evaluate_batch()).
            omega (float): Inertia weight for this step.
            c1 (float): Cognitive coefficient.
            c2 (float): Social coefficient.
        """
        previous_positions = self.positions
        gbest_snapshot = self.global_best_position.copy()

        if self.vectorized:
            clamped = self._move_vectorized(gbest_snapshot, omega, c1, c2)
        else:
            clamped = self._move_particles(gbest_snapshot, omega, c1, c2)

        positions = self.positions
        fitness_values = evaluate_positions(objective, positions, use_batch=self.vectorized)
        for particle, fitness in zip(self.particles, fitness_values):
            particle.observe(fitness)

        improved = self._update_global_best()
        self.evaluation_count += self.size
        self.iteration_count += 1

        metrics = self.metrics_calculator.compute(positions, previous_positions, self.velocities,
                                                  omega, c1, c2, clamped_mask=clamped)
        return StepReport(
            iteration_count=self.iteration_count,
            evaluation_count=self.evaluation_count,
            stagnation_count=self.stagnation_count,
            improved=improved,
            global_best_fitness=self.global_best_fitness,
            omega=omega,
            metrics=metrics,
        )

    def _update_global_best(self) -> bool:
        """Refreshes the global best from all personal bests; True on strict improvement."""
        pbest_values = self.pbest_values
        min_idx = int(np.argmin(pbest_values))
        if pbest_values[min_idx] < self.global_best_fitness:
            self.global_best_fitness = float(pbest_values[min_idx])
            self.global_best_position = self.particles[min_idx].pbest_position.copy()
            self.stagnation_count = 0
            return True
        self.stagnation_count += 1
        return False

    def reinitialize(self, objective) -> bool:
        """
        Restart: re-sample every particle's position and velocity and reset
        its personal best to the new position. The global best is kept
        unless a re-sampled particle is strictly better.

        Returns:
            bool: True if the global best improved.
        """
        for particle in self.particles:
            position = self.bounds.sample(self.rng)
            particle.reset(position, self._initial_velocity(self.bounds, self.rng, self.v_init_ratio))

        fitness_values = evaluate_positions(objective, self.positions, use_batch=self.vectorized)
        self.evaluation_count += self.size
        for particle, fitness in zip(self.particles, fitness_values):
            particle.observe(fitness)

        pbest_values = self.pbest_values
        min_idx = int(np.argmin(pbest_values))
        improved = bool(pbest_values[min_idx] < self.global_best_fitness)
        if improved:
            self.global_best_fitness = float(pbest_values[min_idx])
            self.global_best_position = self.particles[min_idx].pbest_position.copy()
        self.stagnation_count = 0
        log_debug(f"Swarm reinitialized. GBest {'improved' if improved else 'kept'}: "
                  f"{self.global_best_fitness:.6e}", module_name)
        return improved
