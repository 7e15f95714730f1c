# File: PSO_ENGINE/PSO/Metrics/SwarmMetrics.py
# Per-step swarm metrics computed from the stacked state arrays.

from pathlib import Path
from typing import Optional

import numpy as np

from PSO_ENGINE.Logs.logger import log_debug, log_warning

# --- Module Name for Logging ---
module_name = Path(__file__).stem  # Gets 'SwarmMetrics'


def check_poli_stability(omega: float, c1: float, c2: float) -> bool:
    """
    Checks if the control parameters satisfy Poli's order-2 stability condition:
    c1 + c2 < 24 (1 - w^2) / (7 - 5w), with -1 <= w <= 1.
    """
    if not (-1.0 <= omega <= 1.0):
        return False
    denominator = 7.0 - 5.0 * omega
    if np.isclose(denominator, 0):
        return False
    stability_boundary = 24.0 * (1.0 - omega ** 2) / denominator
    return (c1 + c2) < stability_boundary


class SwarmMetrics:
    """
    Calculates swarm metrics using vectorized NumPy operations.
    """

    def compute(self,
                positions: np.ndarray,
                previous_positions: np.ndarray,
                velocities: np.ndarray,
                omega: float,
                c1: float,
                c2: float,
                clamped_mask: Optional[np.ndarray] = None) -> dict:
        """
        Args:
            positions: Particle positions after the step, shape (n, dim)
            previous_positions: Positions before the step, shape (n, dim)
            velocities: Velocities after the step, shape (n, dim)
            omega: Inertia weight used for the step
            c1: Cognitive coefficient used for the step
            c2: Social coefficient used for the step
            clamped_mask: Boolean mask of coordinates that hit a bound

        Returns:
            dict with avg_step_size, avg_velocity_magnitude, swarm_diversity,
            clamped_ratio and stable.
        """
        if positions.shape[0] == 0 or positions.shape != previous_positions.shape:
            log_warning("Compute called with empty or mismatched arrays.", module_name)
            return {
                'avg_step_size': np.nan,
                'avg_velocity_magnitude': np.nan,
                'swarm_diversity': np.nan,
                'clamped_ratio': np.nan,
                'stable': False,
            }

        num_particles = positions.shape[0]
        metrics = {}

        # 1. Average distance travelled during the step
        step_sizes = np.linalg.norm(positions - previous_positions, axis=1)
        metrics['avg_step_size'] = float(np.mean(step_sizes))

        # 2. Average velocity magnitude
        metrics['avg_velocity_magnitude'] = float(np.mean(np.linalg.norm(velocities, axis=1)))

        # 3. Swarm diversity: mean distance to the centroid
        if num_particles > 1:
            centroid = np.mean(positions, axis=0)
            metrics['swarm_diversity'] = float(np.mean(np.linalg.norm(positions - centroid, axis=1)))
        else:
            metrics['swarm_diversity'] = 0.0

        # 4. Fraction of coordinates that were clamped at a bound
        if clamped_mask is not None and clamped_mask.size > 0:
            metrics['clamped_ratio'] = float(np.mean(clamped_mask))
        else:
            metrics['clamped_ratio'] = 0.0

        # 5. Stability of the control parameters
        metrics['stable'] = check_poli_stability(omega, c1, c2)

        log_debug(f"Computed metrics: {metrics}", module_name)
        return metrics
