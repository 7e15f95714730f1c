# --- Ackley Function Implementation ---
import numpy as np

from PSO_ENGINE.PSO.ObjectiveFunctions.ObjectiveFunction import ObjectiveFunction


class AckleyFunction(ObjectiveFunction):
    DEFAULT_BOUNDS = (-32.0, 32.0)

    def evaluate(self, x: np.ndarray) -> float:
        return float(-20 * np.exp(-0.2 * np.sqrt(np.sum(x ** 2) / self.dim))
                     - np.exp(np.sum(np.cos(2 * np.pi * x)) / self.dim) + 20 + np.e)

    def evaluate_batch(self, positions: np.ndarray) -> np.ndarray:
        return (-20 * np.exp(-0.2 * np.sqrt(np.sum(positions ** 2, axis=1) / self.dim))
                - np.exp(np.sum(np.cos(2 * np.pi * positions), axis=1) / self.dim) + 20 + np.e)
