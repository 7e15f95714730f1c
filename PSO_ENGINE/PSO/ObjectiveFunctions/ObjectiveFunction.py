# --- Objective Function Base Class ---
# Objectives expose evaluate(x) -> float and, optionally,
# evaluate_batch(X) -> array of shape (n,). Problem data (targets,
# matrices, penalty constants) is passed to the constructor; the optimizer
# never reaches into module-level state.
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np
from matplotlib import pyplot as plt

from PSO_ENGINE.PSO.Bounds import Bounds

BoundsSpec = Union[Tuple[float, float], Sequence[Tuple[float, float]]]


class ObjectiveFunction(ABC):
    """
    Base class for objective functions to be minimized.

    Subclasses set DEFAULT_BOUNDS to either one (lower, upper) pair applied to
    every dimension or a list of per-dimension pairs.
    """
    DEFAULT_BOUNDS: BoundsSpec = (-5.12, 5.12)

    def __init__(self, dim: int = 30, bounds: Optional[BoundsSpec] = None):
        self.dim = dim
        self.bounds = self.DEFAULT_BOUNDS if bounds is None else bounds

    @abstractmethod
    def evaluate(self, x: np.ndarray) -> float:
        pass

    def search_bounds(self) -> Bounds:
        """Bounds object matching self.bounds and self.dim."""
        raw_bounds = self.bounds
        if isinstance(raw_bounds, Bounds):
            return raw_bounds
        if np.ndim(raw_bounds) == 1 and len(raw_bounds) == 2:
            return Bounds.uniform(raw_bounds[0], raw_bounds[1], self.dim)
        return Bounds.from_pairs(raw_bounds)

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def plot_3d_surface(self, resolution=100, show=True):
        if self.dim != 2:
            raise ValueError("3D surface plot only supports 2D objective functions.")

        box = self.search_bounds()
        x = np.linspace(box.lower[0], box.upper[0], resolution)
        y = np.linspace(box.lower[1], box.upper[1], resolution)
        X, Y = np.meshgrid(x, y)

        Z = np.array([
            self.evaluate(np.array([x_val, y_val]))
            for x_val, y_val in zip(np.ravel(X), np.ravel(Y))
        ]).reshape(X.shape)

        fig = plt.figure(figsize=(10, 7))
        ax = fig.add_subplot(111, projection='3d')
        ax.plot_surface(X, Y, Z, cmap='viridis', edgecolor='k', alpha=0.8)
        ax.set_title(f"3D Surface of {self.name}")
        ax.set_xlabel("x1")
        ax.set_ylabel("x2")
        ax.set_zlabel("f(x)")

        if show:
            plt.show()
        return fig


class CallableObjective:
    """
    Adapts plain callables to the objective protocol.

    Args:
        func: f(x) -> float
        batch_func: optional F(X) -> sequence of floats, one per row of X
    """

    def __init__(self, func: Callable[[np.ndarray], float],
                 batch_func: Optional[Callable[[np.ndarray], Sequence[float]]] = None):
        self.func = func
        self.batch_func = batch_func
        if batch_func is not None:
            self.evaluate_batch = self._evaluate_batch

    def evaluate(self, x: np.ndarray) -> float:
        return self.func(x)

    def _evaluate_batch(self, positions: np.ndarray) -> np.ndarray:
        return np.asarray(self.batch_func(positions), dtype=float)

    @property
    def name(self) -> str:
        return getattr(self.func, "__name__", self.func.__class__.__name__)


def supports_batch(objective) -> bool:
    return callable(getattr(objective, "evaluate_batch", None))


def as_objective(objective):
    """Returns `objective` if it already has evaluate(), wraps plain callables."""
    if callable(getattr(objective, "evaluate", None)):
        return objective
    if callable(objective):
        return CallableObjective(objective)
    raise TypeError(f"Expected an objective with evaluate() or a callable, got {type(objective).__name__}")
