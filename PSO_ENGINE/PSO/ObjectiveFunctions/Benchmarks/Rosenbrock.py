import numpy as np

from PSO_ENGINE.PSO.ObjectiveFunctions.ObjectiveFunction import ObjectiveFunction


class RosenbrockFunction(ObjectiveFunction):
    DEFAULT_BOUNDS = (-30.0, 30.0)

    def evaluate(self, x: np.ndarray) -> float:
        return float(np.sum(100 * (x[1:] - x[:-1] ** 2) ** 2 + (x[:-1] - 1) ** 2))

    def evaluate_batch(self, positions: np.ndarray) -> np.ndarray:
        head, tail = positions[:, :-1], positions[:, 1:]
        return np.sum(100 * (tail - head ** 2) ** 2 + (head - 1) ** 2, axis=1)
