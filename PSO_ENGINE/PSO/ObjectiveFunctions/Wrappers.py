# File: PSO_ENGINE/PSO/ObjectiveFunctions/Wrappers.py
# Decorators around an objective. The swarm only ever sees continuous
# positions; rounding and parallel evaluation live here.

import enum
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from pathlib import Path
from typing import Optional, Sequence, Union

import numpy as np

from PSO_ENGINE.Logs.logger import log_debug, log_info
from PSO_ENGINE.PSO.Errors import DimensionMismatch
from PSO_ENGINE.PSO.ObjectiveFunctions.ObjectiveFunction import as_objective, supports_batch

# --- Module Name for Logging ---
module_name = Path(__file__).stem


class VariableKind(str, enum.Enum):
    CONTINUOUS = "continuous"
    INTEGER = "integer"


class MixedVariableObjective:
    """
    Rounds the integer-valued dimensions of every position to the nearest
    integer (numpy.rint, ties to even) before the wrapped objective sees it.

    Args:
        objective: The objective to wrap (object with evaluate() or a callable).
        kinds: One VariableKind (or its string value) per dimension.
    """

    def __init__(self, objective, kinds: Sequence[Union[VariableKind, str]]):
        self.objective = as_objective(objective)
        self.kinds = tuple(VariableKind(k) for k in kinds)
        self.integer_mask = np.array([k is VariableKind.INTEGER for k in self.kinds], dtype=bool)
        self.dim = len(self.kinds)
        if hasattr(self.objective, "bounds"):
            self.bounds = self.objective.bounds

    def decode(self, position) -> np.ndarray:
        """Position as the wrapped objective sees it."""
        position = np.array(position, dtype=float)
        if position.shape[-1] != self.dim:
            raise DimensionMismatch(self.dim, position.shape[-1])
        return np.where(self.integer_mask, np.rint(position), position)

    def evaluate(self, x: np.ndarray) -> float:
        return self.objective.evaluate(self.decode(x))

    def evaluate_batch(self, positions: np.ndarray) -> np.ndarray:
        decoded = self.decode(positions)
        if supports_batch(self.objective):
            return np.asarray(self.objective.evaluate_batch(decoded), dtype=float)
        return np.array([self.objective.evaluate(row) for row in decoded], dtype=float)

    @property
    def name(self) -> str:
        return f"Mixed({getattr(self.objective, 'name', type(self.objective).__name__)})"


class PooledObjective:
    """
    Supplies evaluate_batch() by mapping evaluate() over a worker pool.
    Results keep the row order of the input matrix, so the values are the
    same as a sequential loop.

    Args:
        objective: The objective to wrap. Must be picklable when use_processes=True.
        max_workers: Pool size (None lets concurrent.futures decide; <= 1 evaluates sequentially).
        use_processes: Use a process pool instead of a thread pool.
    """

    def __init__(self, objective, max_workers: Optional[int] = None, use_processes: bool = False):
        self.objective = as_objective(objective)
        self.max_workers = max_workers
        self.use_processes = use_processes
        for attr in ("dim", "bounds"):
            if hasattr(self.objective, attr):
                setattr(self, attr, getattr(self.objective, attr))
        log_info(f"Pooled evaluation with {max_workers if max_workers else 'default'} "
                 f"{'process' if use_processes else 'thread'} workers", module_name)

    def evaluate(self, x: np.ndarray) -> float:
        return self.objective.evaluate(x)

    def evaluate_batch(self, positions: np.ndarray) -> np.ndarray:
        rows = [np.array(row) for row in positions]
        if self.max_workers is not None and self.max_workers <= 1:
            return np.array([self.objective.evaluate(row) for row in rows], dtype=float)

        executor_class = ProcessPoolExecutor if self.use_processes else ThreadPoolExecutor
        with executor_class(max_workers=self.max_workers) as executor:
            values = list(executor.map(self.objective.evaluate, rows))
        log_debug(f"Evaluated {len(rows)} positions in pool.", module_name)
        return np.array(values, dtype=float)

    @property
    def name(self) -> str:
        return f"Pooled({getattr(self.objective, 'name', type(self.objective).__name__)})"
