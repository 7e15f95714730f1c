"""
Inertia Schedules for the PSO Engine

This module provides an abstract base class and concrete implementations
for the inertia weight schedule. Every strategy returns the control
parameters (ω, c₁, c₂) for the upcoming iteration; c₁ and c₂ stay fixed.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

import numpy as np


class InertiaStrategy(ABC):
    """
    Abstract base class for inertia weight schedules.
    """

    def __init__(self, c1: float, c2: float):
        """
        Args:
            c1: Cognitive (personal best) coefficient
            c2: Social (global best) coefficient
        """
        self.c1 = c1
        self.c2 = c2

    @abstractmethod
    def get_weight(self, step: int, max_steps: Optional[int]) -> float:
        """
        Inertia weight for iteration `step` (0-based).

        Args:
            step: Index of the iteration about to be executed
            max_steps: Configured iteration budget (None if unbounded)
        """

    def get_parameters(self, step: int, max_steps: Optional[int]) -> Tuple[float, float, float]:
        """Returns (omega, c1, c2) for the upcoming iteration."""
        return self.get_weight(step, max_steps), self.c1, self.c2

    def __str__(self) -> str:
        return f"{self.__class__.__name__}(c1={self.c1:.4f}, c2={self.c2:.4f})"


class StaticInertia(InertiaStrategy):
    """Constant inertia weight for the whole run."""

    def __init__(self, w: float, c1: float, c2: float):
        super().__init__(c1, c2)
        self.w = w

    def get_weight(self, step: int, max_steps: Optional[int]) -> float:
        return self.w

    def __str__(self) -> str:
        return f"StaticInertia(w={self.w:.4f}, c1={self.c1:.4f}, c2={self.c2:.4f})"


class LinearDecayInertia(InertiaStrategy):
    """
    W(t) = W_start - (W_start - W_end) * (t / maxit)

    More exploration early, more exploitation late when W_start > W_end.
    """

    def __init__(self, w_start: float, w_end: float, c1: float, c2: float):
        super().__init__(c1, c2)
        self.w_start = w_start
        self.w_end = w_end

    def get_weight(self, step: int, max_steps: Optional[int]) -> float:
        if not max_steps:
            raise ValueError("Linear inertia decay needs a finite iteration budget.")
        progress = min(step / max_steps, 1.0)
        return self.w_start - (self.w_start - self.w_end) * progress

    def __str__(self) -> str:
        return (f"LinearDecayInertia(w_start={self.w_start:.4f}, w_end={self.w_end:.4f}, "
                f"c1={self.c1:.4f}, c2={self.c2:.4f})")


class ExponentialDecayInertia(InertiaStrategy):
    """
    Exponential decay from W_start towards W_end for smoother transitions.
    """

    def __init__(self, w_start: float, w_end: float, c1: float, c2: float, decay_rate: float = 3.0):
        super().__init__(c1, c2)
        self.w_start = w_start
        self.w_end = w_end
        self.decay_rate = decay_rate

    def get_weight(self, step: int, max_steps: Optional[int]) -> float:
        if not max_steps:
            raise ValueError("Exponential inertia decay needs a finite iteration budget.")
        progress = min(step / max_steps, 1.0)
        decay_factor = np.exp(-self.decay_rate * progress)
        return float(self.w_end + (self.w_start - self.w_end) * decay_factor)

    def __str__(self) -> str:
        return (f"ExponentialDecayInertia(w_start={self.w_start:.4f}, w_end={self.w_end:.4f}, "
                f"decay_rate={self.decay_rate}, c1={self.c1:.4f}, c2={self.c2:.4f})")


# Strategy registry for easy access
INERTIA_STRATEGIES = {
    'static': StaticInertia,
    'linear_decay': LinearDecayInertia,
    'exponential_decay': ExponentialDecayInertia,
}


def create_strategy(mode: str, **kwargs) -> InertiaStrategy:
    """
    Factory function to create inertia strategies.

    Args:
        mode: Name of the schedule (key of INERTIA_STRATEGIES)
        **kwargs: Strategy-specific parameters

    Raises:
        ValueError: If mode is not recognized
    """
    if mode not in INERTIA_STRATEGIES:
        available = list(INERTIA_STRATEGIES.keys())
        raise ValueError(f"Unknown inertia mode '{mode}'. Available: {available}")
    return INERTIA_STRATEGIES[mode](**kwargs)


def list_available_strategies() -> Dict[str, str]:
    return {
        'static': 'Constant inertia weight w',
        'linear_decay': 'Inertia decays linearly from w_start to w_end over max_iterations',
        'exponential_decay': 'Inertia decays exponentially from w_start towards w_end',
    }
