# --- Rastrigin Function Implementation ---
import numpy as np

from PSO_ENGINE.PSO.ObjectiveFunctions.ObjectiveFunction import ObjectiveFunction


class RastriginFunction(ObjectiveFunction):
    DEFAULT_BOUNDS = (-5.12, 5.12)

    def evaluate(self, x: np.ndarray) -> float:
        return float(10 * self.dim + np.sum(x ** 2 - 10 * np.cos(2 * np.pi * x)))

    def evaluate_batch(self, positions: np.ndarray) -> np.ndarray:
        return 10 * self.dim + np.sum(positions ** 2 - 10 * np.cos(2 * np.pi * positions), axis=1)
