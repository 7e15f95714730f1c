#!/usr/bin/env python3
"""
Tests for swarm initialization, the generational step and the update kernels.
"""

import numpy as np
import pytest

from PSO_ENGINE.Logs.logger import log_header, log_info, log_success
from PSO_ENGINE.PSO.Bounds import Bounds
from PSO_ENGINE.PSO.Errors import DimensionMismatch, InvalidSwarmSize, ObjectiveEvaluationError
from PSO_ENGINE.PSO.ObjectiveFunctions.Benchmarks.Sphere import ShiftedSphereFunction
from PSO_ENGINE.PSO.ObjectiveFunctions.ObjectiveFunction import CallableObjective
from PSO_ENGINE.PSO.Particle import BoundaryPolicy, Particle, move
from PSO_ENGINE.PSO.Swarm import Swarm, evaluate_positions

W, C1, C2 = 0.72, 1.19, 1.19


def sphere_objective():
    return CallableObjective(lambda x: float(np.sum(x ** 2)))


@pytest.mark.parametrize("swarm_size", [1, 2, 17, 40])
def test_initialize_within_bounds_and_gbest_is_min(swarm_size):
    log_header(f"=== Swarm Init Test (n={swarm_size}) ===", "test_swarm")
    bounds = Bounds.from_pairs([(-10, 10), (0, 1), (-3, 7)])
    swarm = Swarm.initialize(bounds, swarm_size, sphere_objective(), rng=np.random.default_rng(7))

    assert swarm.size == swarm_size
    for particle in swarm.particles:
        assert bounds.contains(particle.position)
        assert np.array_equal(particle.pbest_position, particle.position)
    assert swarm.global_best_fitness == np.min(swarm.pbest_values)
    assert swarm.evaluation_count == swarm_size
    assert swarm.iteration_count == 0
    assert swarm.stagnation_count == 0
    log_success(f"Initial GBest {swarm.global_best_fitness:.4e}", "test_swarm")


def test_initial_velocity_is_zero_by_default():
    swarm = Swarm.initialize(Bounds.uniform(-1, 1, 4), 5, sphere_objective(), rng=np.random.default_rng(0))
    assert np.all(swarm.velocities == 0.0)


def test_initial_velocity_ratio():
    bounds = Bounds.uniform(-1, 1, 4)
    swarm = Swarm.initialize(bounds, 50, sphere_objective(), rng=np.random.default_rng(0), v_init_ratio=0.1)
    assert np.any(swarm.velocities != 0.0)
    assert np.all(np.abs(swarm.velocities) <= 0.1 * bounds.span)


@pytest.mark.parametrize("swarm_size", [0, -3])
def test_invalid_swarm_size(swarm_size):
    with pytest.raises(InvalidSwarmSize):
        Swarm.initialize(Bounds.uniform(-1, 1, 2), swarm_size, sphere_objective())


def test_gbest_ties_broken_by_first_particle():
    swarm = Swarm.initialize(Bounds.uniform(-1, 1, 2), 6, CallableObjective(lambda x: 1.0),
                             rng=np.random.default_rng(3))
    assert np.array_equal(swarm.global_best_position, swarm.particles[0].position)


def test_constant_objective_never_improves():
    log_header("=== Constant Objective Test ===", "test_swarm")
    objective = CallableObjective(lambda x: 5.0)
    swarm = Swarm.initialize(Bounds.uniform(-5, 5, 3), 10, objective, rng=np.random.default_rng(11))
    gbest_position = swarm.global_best_position.copy()

    for expected_stagnation in range(1, 6):
        report = swarm.step(objective, W, C1, C2)
        assert report.global_best_fitness == 5.0
        assert not report.improved
        assert report.stagnation_count == expected_stagnation
        assert report.iteration_count == expected_stagnation
        assert report.evaluation_count == 10 * (expected_stagnation + 1)
    assert np.array_equal(swarm.global_best_position, gbest_position)
    log_success("Stagnation counter increments on every step", "test_swarm")


def test_step_improves_and_resets_stagnation():
    objective = sphere_objective()
    swarm = Swarm.initialize(Bounds.uniform(-5, 5, 2), 20, objective, rng=np.random.default_rng(5))
    previous = swarm.global_best_fitness
    for _ in range(30):
        report = swarm.step(objective, W, C1, C2)
        assert report.global_best_fitness <= previous
        if report.improved:
            assert report.stagnation_count == 0
            assert report.global_best_fitness < previous
        previous = report.global_best_fitness
        assert swarm.global_best_fitness == np.min(swarm.pbest_values)
        for particle in swarm.particles:
            assert swarm.bounds.contains(particle.position)
    assert set(report.metrics) == {'avg_step_size', 'avg_velocity_magnitude', 'swarm_diversity',
                                   'clamped_ratio', 'stable'}


def test_vectorized_and_per_particle_steps_are_identical():
    log_header("=== Vectorized vs Per-Particle Test ===", "test_swarm")
    objective = ShiftedSphereFunction(dim=3, center=1.5)
    bounds = objective.search_bounds()
    swarms = [Swarm.initialize(bounds, 15, objective, rng=np.random.default_rng(99), vectorized=flag,
                               v_init_ratio=0.05, v_clamp_ratio=0.2)
              for flag in (False, True)]

    for _ in range(25):
        reports = [s.step(objective, W, C1, C2) for s in swarms]
        assert reports[0] == reports[1]
        assert np.array_equal(swarms[0].positions, swarms[1].positions)
        assert np.array_equal(swarms[0].velocities, swarms[1].velocities)
        assert np.array_equal(swarms[0].global_best_position, swarms[1].global_best_position)
    log_success("Trajectories are bit-identical", "test_swarm")


def test_velocity_clamping_limits_every_component():
    bounds = Bounds.uniform(-100, 100, 2)
    objective = sphere_objective()
    swarm = Swarm.initialize(bounds, 10, objective, rng=np.random.default_rng(2), v_clamp_ratio=0.01)
    for _ in range(5):
        swarm.step(objective, W, C1, C2)
        assert np.all(np.abs(swarm.velocities) <= 2.0 + 1e-12)


@pytest.mark.parametrize("policy, expected_velocity", [
    (BoundaryPolicy.CLAMP_ONLY, 0.5),
    (BoundaryPolicy.CLAMP_AND_ZERO_VELOCITY, 0.0),
    (BoundaryPolicy.CLAMP_AND_REFLECT_VELOCITY, -0.5),
])
def test_boundary_policies(policy, expected_velocity):
    bounds = Bounds([0.0, 0.0], [1.0, 1.0])
    positions, velocities, hit = move(np.array([0.9, 0.25]), np.array([0.5, 0.25]), bounds, policy)
    assert np.array_equal(positions, [1.0, 0.5])
    assert np.array_equal(hit, [True, False])
    assert velocities[0] == expected_velocity
    assert velocities[1] == 0.25


def test_particle_update_keeps_position_in_bounds():
    bounds = Bounds([-1.0], [1.0])
    particle = Particle([0.95], velocity=[3.0])
    particle.update_velocity(np.array([0.0]), np.array([0.0]), np.array([0.0]), 1.0, C1, C2)
    hit = particle.update_position(bounds, BoundaryPolicy.CLAMP_AND_REFLECT_VELOCITY)
    assert particle.position[0] == 1.0
    assert particle.velocity[0] == -3.0
    assert hit[0]


def test_particle_pbest_requires_strict_improvement():
    particle = Particle([1.0, 2.0])
    assert particle.observe(3.0)
    particle.position = np.array([0.0, 0.0])
    assert not particle.observe(3.0)
    assert np.array_equal(particle.pbest_position, [1.0, 2.0])
    assert particle.observe(2.5)
    assert np.array_equal(particle.pbest_position, [0.0, 0.0])


def test_seed_position_applied_to_first_particle():
    bounds = Bounds.uniform(-2, 2, 3)
    swarm = Swarm.initialize(bounds, 4, sphere_objective(), seed_position=[1.0, np.nan, -0.5],
                             rng=np.random.default_rng(0))
    first = swarm.particles[0].position
    assert first[0] == 1.0
    assert first[2] == -0.5
    assert -2 <= first[1] <= 2


def test_seed_position_outside_bounds_is_clamped():
    bounds = Bounds.uniform(-2, 2, 2)
    swarm = Swarm.initialize(bounds, 3, sphere_objective(), seed_position=[5.0, -1.0],
                             rng=np.random.default_rng(0))
    assert np.array_equal(swarm.particles[0].position, [2.0, -1.0])


def test_seed_position_wrong_length():
    with pytest.raises(DimensionMismatch):
        Swarm.initialize(Bounds.uniform(-2, 2, 2), 3, sphere_objective(), seed_position=[0.0, 0.0, 0.0])


def test_objective_error_propagates():
    def failing(x):
        if x[0] > 0:
            raise ValueError("out of domain")
        return float(x[0])

    with pytest.raises(ObjectiveEvaluationError) as excinfo:
        Swarm.initialize(Bounds.uniform(-1, 1, 2), 30, CallableObjective(failing), rng=np.random.default_rng(0))
    assert isinstance(excinfo.value.__cause__, ValueError)
    assert excinfo.value.position[0] > 0
    assert isinstance(excinfo.value, RuntimeError)


def test_batch_error_propagates():
    def failing_batch(positions):
        raise ZeroDivisionError("boom")

    objective = CallableObjective(lambda x: 0.0, batch_func=failing_batch)
    with pytest.raises(ObjectiveEvaluationError) as excinfo:
        Swarm.initialize(Bounds.uniform(-1, 1, 2), 4, objective, vectorized=True)
    assert isinstance(excinfo.value.__cause__, ZeroDivisionError)
    assert excinfo.value.positions.shape == (4, 2)


def test_batch_wrong_shape_rejected():
    objective = CallableObjective(lambda x: 0.0, batch_func=lambda positions: [1.0, 2.0])
    with pytest.raises(ObjectiveEvaluationError):
        evaluate_positions(objective, np.zeros((3, 2)), use_batch=True)


def test_non_finite_fitness_replaced_by_inf():
    values = iter([np.nan, 1.0, -np.inf, 2.0])
    objective = CallableObjective(lambda x: next(values))
    fitness = evaluate_positions(objective, np.zeros((4, 1)))
    log_info(f"Fitness after replacement: {fitness}", "test_swarm")
    assert np.array_equal(fitness, [np.inf, 1.0, np.inf, 2.0])


def test_nan_objective_never_becomes_gbest():
    objective = CallableObjective(lambda x: np.nan if x[0] < 0 else float(x[0]))
    swarm = Swarm.initialize(Bounds.uniform(-1, 1, 1), 20, objective, rng=np.random.default_rng(4))
    assert swarm.global_best_position[0] >= 0
    assert np.isfinite(swarm.global_best_fitness)


def test_reinitialize_keeps_global_best():
    objective = sphere_objective()
    swarm = Swarm.initialize(Bounds.uniform(-5, 5, 2), 10, objective, rng=np.random.default_rng(8))
    for _ in range(20):
        swarm.step(objective, W, C1, C2)
    best_before = swarm.global_best_fitness
    evaluations_before = swarm.evaluation_count

    swarm.reinitialize(objective)

    assert swarm.global_best_fitness <= best_before
    assert swarm.stagnation_count == 0
    assert swarm.evaluation_count == evaluations_before + 10
    for particle in swarm.particles:
        assert np.array_equal(particle.pbest_position, particle.position)
        assert np.all(particle.velocity == 0.0)
