"""
Error kinds raised by the PSO engine.

Construction-time problems (bounds, swarm size, configuration) derive from
ValueError; a failing objective surfaces as ObjectiveEvaluationError with the
original exception chained.
"""

import numpy as np


class PSOError(Exception):
    """Base class for every error raised by PSO_ENGINE."""


class InvalidBounds(PSOError, ValueError):
    """Malformed per-dimension bounds."""


class InvalidSwarmSize(PSOError, ValueError):
    """Swarm size below one."""


class InvalidConfiguration(PSOError, ValueError):
    """Inconsistent or out-of-range optimizer configuration."""


class DimensionMismatch(PSOError, ValueError):
    """A position or velocity does not match the bounds dimension."""

    def __init__(self, expected: int, actual: int, what: str = "position"):
        super().__init__(f"{what} has {actual} dimensions, expected {expected}")
        self.expected = expected
        self.actual = actual


class ObjectiveEvaluationError(PSOError, RuntimeError):
    """The objective raised, or returned something that is not a fitness value."""

    def __init__(self, message: str, position=None, positions=None):
        super().__init__(message)
        self.position = None if position is None else np.array(position, dtype=float)
        self.positions = None if positions is None else np.array(positions, dtype=float)
