# --- Shifted Sphere Function Implementation ---
import numpy as np

from PSO_ENGINE.PSO.ObjectiveFunctions.ObjectiveFunction import ObjectiveFunction


class ShiftedSphereFunction(ObjectiveFunction):
    """f(x) = sum_i (x_i - c_i)^2, minimum 0 at x = c."""
    DEFAULT_BOUNDS = (-100.0, 100.0)

    def __init__(self, dim=30, bounds=None, center=0.0):
        super().__init__(dim, bounds)
        self.center = np.broadcast_to(np.asarray(center, dtype=float), (dim,)).copy()

    def evaluate(self, x: np.ndarray) -> float:
        return float(np.sum((x - self.center) ** 2))

    def evaluate_batch(self, positions: np.ndarray) -> np.ndarray:
        return np.sum((positions - self.center) ** 2, axis=1)
