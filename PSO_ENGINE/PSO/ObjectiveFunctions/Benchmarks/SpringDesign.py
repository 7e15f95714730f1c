# --- Tension/Compression Spring Design Problem ---
# Minimize the weight of a coil spring subject to shear stress, surge
# frequency, deflection and outer diameter constraints.
#
#   x = (d, D, N): wire diameter, mean coil diameter, number of active coils
#   f(x) = (N + 2) * D * d^2
#   g1 = 1 - D^3 N / (71785 d^4)                                  <= 0
#   g2 = (4D^2 - dD) / (12566 (D d^3 - d^4)) + 1 / (5108 d^2) - 1   <= 0
#   g3 = 1 - 140.45 d / (D^2 N)                                   <= 0
#   g4 = (D + d) / 1.5 - 1                                        <= 0
import numpy as np

from PSO_ENGINE.PSO.ObjectiveFunctions.ObjectiveFunction import ObjectiveFunction


class SpringDesignFunction(ObjectiveFunction):
    """
    Penalized spring weight. An infeasible design scores
    weight + penalty + total violation, so every infeasible fitness is
    above `penalty` while feasible ones stay far below it.
    """
    DEFAULT_BOUNDS = [(0.05, 2.0), (0.25, 1.3), (2.0, 15.0)]

    def __init__(self, dim=3, bounds=None, penalty=1000.0):
        if dim != 3:
            raise ValueError("The spring design problem has exactly 3 variables.")
        super().__init__(dim, bounds)
        self.penalty = penalty

    @staticmethod
    def weight(x: np.ndarray):
        x = np.asarray(x, dtype=float)
        d, D, N = x[..., 0], x[..., 1], x[..., 2]
        return (N + 2) * D * d ** 2

    @staticmethod
    def constraints(x: np.ndarray) -> np.ndarray:
        """Constraint values g1..g4 along the last axis; feasible iff all <= 0."""
        x = np.asarray(x, dtype=float)
        d, D, N = x[..., 0], x[..., 1], x[..., 2]
        with np.errstate(divide='ignore', invalid='ignore'):
            g1 = 1 - (D ** 3 * N) / (71785 * d ** 4)
            g2 = (4 * D ** 2 - d * D) / (12566 * (D * d ** 3 - d ** 4)) + 1 / (5108 * d ** 2) - 1
            g3 = 1 - 140.45 * d / (D ** 2 * N)
            g4 = (D + d) / 1.5 - 1
        return np.stack([g1, g2, g3, g4], axis=-1)

    def is_feasible(self, x: np.ndarray) -> bool:
        return bool(np.all(self.constraints(x) <= 0))

    def _penalized(self, x: np.ndarray):
        g = self.constraints(x)
        violation = np.sum(np.where(np.isnan(g), np.inf, np.maximum(g, 0.0)), axis=-1)
        infeasible = violation > 0
        return self.weight(x) + np.where(infeasible, self.penalty + violation, 0.0)

    def evaluate(self, x: np.ndarray) -> float:
        return float(self._penalized(x))

    def evaluate_batch(self, positions: np.ndarray) -> np.ndarray:
        return self._penalized(positions)
