import enum
from typing import Optional, Tuple

import numpy as np

from PSO_ENGINE.PSO.Bounds import Bounds
from PSO_ENGINE.PSO.Errors import DimensionMismatch


class BoundaryPolicy(str, enum.Enum):
    """What happens to a velocity component whose coordinate was clamped."""
    CLAMP_ONLY = "clamp_only"
    CLAMP_AND_ZERO_VELOCITY = "clamp_and_zero_velocity"
    CLAMP_AND_REFLECT_VELOCITY = "clamp_and_reflect_velocity"


# --- Update kernels ---
# Shared by the per-particle path (1-D arrays) and the vectorized path
# (2-D arrays) so both produce bit-identical trajectories.

def compute_velocity(positions, velocities, pbest_positions, gbest_position,
                     r1, r2, omega: float, c1: float, c2: float,
                     v_max: Optional[np.ndarray] = None) -> np.ndarray:
    """v' = w*v + c1*r1*(pbest - x) + c2*r2*(gbest - x), optionally clipped to +-v_max."""
    inertia_velocity = omega * velocities
    cognitive_velocity = c1 * r1 * (pbest_positions - positions)
    social_velocity = c2 * r2 * (gbest_position - positions)
    new_velocities = inertia_velocity + cognitive_velocity + social_velocity
    if v_max is not None:
        new_velocities = np.clip(new_velocities, -v_max, v_max)
    return new_velocities


def move(positions, velocities, bounds: Bounds,
         policy: BoundaryPolicy) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    x' = clamp(x + v). Velocity components of clamped coordinates are kept,
    zeroed or negated according to `policy`.

    Returns:
        tuple: (new_positions, new_velocities, clamped_mask)
    """
    moved = positions + velocities
    clamped = bounds.clamp(moved)
    hit = clamped != moved
    new_velocities = velocities
    if policy is BoundaryPolicy.CLAMP_AND_ZERO_VELOCITY and hit.any():
        new_velocities = np.where(hit, 0.0, velocities)
    elif policy is BoundaryPolicy.CLAMP_AND_REFLECT_VELOCITY and hit.any():
        new_velocities = np.where(hit, -velocities, velocities)
    return clamped, new_velocities, hit


class Particle:
    """
    A candidate solution: current position and velocity plus the best
    position it has visited (personal best).
    """

    def __init__(self, position: np.ndarray, velocity: Optional[np.ndarray] = None):
        self.position = np.array(position, dtype=float)
        self.dim = self.position.size
        if velocity is None:
            self.velocity = np.zeros(self.dim)
        else:
            self.velocity = np.array(velocity, dtype=float)
            if self.velocity.size != self.dim:
                raise DimensionMismatch(self.dim, self.velocity.size, "velocity")

        self.pbest_position = self.position.copy()
        self.pbest_value = float('inf')

    def update_velocity(self, r1, r2, gbest_position, omega, c1, c2, v_max=None):
        self.velocity = compute_velocity(self.position, self.velocity, self.pbest_position,
                                         gbest_position, r1, r2, omega, c1, c2, v_max)

    def update_position(self, bounds: Bounds, policy: BoundaryPolicy) -> np.ndarray:
        """Moves the particle and returns the mask of clamped coordinates."""
        self.position, self.velocity, hit = move(self.position, self.velocity, bounds, policy)
        return hit

    def observe(self, fitness: float) -> bool:
        """Records the fitness at the current position; True on strict improvement."""
        if fitness < self.pbest_value:
            self.pbest_value = float(fitness)
            self.pbest_position = self.position.copy()
            return True
        return False

    def reset(self, position: np.ndarray, velocity: np.ndarray):
        """Places the particle somewhere new and forgets its personal best."""
        self.position = np.array(position, dtype=float)
        self.velocity = np.array(velocity, dtype=float)
        self.pbest_position = self.position.copy()
        self.pbest_value = float('inf')

    def __repr__(self):
        return f"Particle(position={self.position}, pbest_value={self.pbest_value:.6e})"
