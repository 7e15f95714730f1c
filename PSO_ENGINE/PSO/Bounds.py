# File: PSO_ENGINE/PSO/Bounds.py
# Per-dimension search box. Positions are projected (saturated) into it
# after every move, never wrapped.

from typing import Sequence, Tuple

import numpy as np

from PSO_ENGINE.PSO.Errors import InvalidBounds, DimensionMismatch


class Bounds:
    """
    Ordered (lower, upper) limits, one pair per dimension.

    Attributes:
        lower (np.ndarray): Lower limits (read-only).
        upper (np.ndarray): Upper limits (read-only).
        span (np.ndarray): upper - lower.
    """

    def __init__(self, lower: Sequence[float], upper: Sequence[float]):
        try:
            lower_arr = np.array(lower, dtype=float).reshape(-1)
            upper_arr = np.array(upper, dtype=float).reshape(-1)
        except (TypeError, ValueError) as e:
            raise InvalidBounds(f"Bounds must be numeric sequences: {e}") from e

        if lower_arr.shape != upper_arr.shape:
            raise InvalidBounds(
                f"Lower and upper bounds differ in length ({lower_arr.size} != {upper_arr.size})")
        if lower_arr.size == 0:
            raise InvalidBounds("Bounds must cover at least one dimension.")
        if not (np.all(np.isfinite(lower_arr)) and np.all(np.isfinite(upper_arr))):
            raise InvalidBounds("Bounds must be finite.")
        bad = np.flatnonzero(lower_arr > upper_arr)
        if bad.size > 0:
            i = int(bad[0])
            raise InvalidBounds(f"Dimension {i}: lower bound {lower_arr[i]} > upper bound {upper_arr[i]}")

        lower_arr.flags.writeable = False
        upper_arr.flags.writeable = False
        self.lower = lower_arr
        self.upper = upper_arr
        self.span = upper_arr - lower_arr
        self.span.flags.writeable = False

    @classmethod
    def from_pairs(cls, pairs: Sequence[Tuple[float, float]]) -> "Bounds":
        """Builds bounds from [(lower_0, upper_0), (lower_1, upper_1), ...]."""
        pairs = list(pairs)
        for i, pair in enumerate(pairs):
            if np.ndim(pair) != 1 or len(pair) != 2:
                raise InvalidBounds(f"Dimension {i}: expected a (lower, upper) pair, got {pair!r}")
        return cls([p[0] for p in pairs], [p[1] for p in pairs])

    @classmethod
    def uniform(cls, lower: float, upper: float, dim: int) -> "Bounds":
        """Same (lower, upper) in every one of `dim` dimensions."""
        return cls(np.full(dim, lower, dtype=float), np.full(dim, upper, dtype=float))

    @classmethod
    def coerce(cls, value) -> "Bounds":
        """Accepts a Bounds instance or a sequence of (lower, upper) pairs."""
        if isinstance(value, Bounds):
            return value
        return cls.from_pairs(value)

    @property
    def dim(self) -> int:
        return int(self.lower.size)

    def _check(self, position: np.ndarray, what: str = "position"):
        if position.shape[-1] != self.dim:
            raise DimensionMismatch(self.dim, position.shape[-1], what)

    def clamp(self, position) -> np.ndarray:
        """
        Projects each coordinate into [lower_i, upper_i].

        Works on a single position (dim,) or a matrix of positions (n, dim).
        Idempotent: clamp(clamp(p)) == clamp(p).
        """
        position = np.asarray(position, dtype=float)
        self._check(position)
        return np.clip(position, self.lower, self.upper)

    def contains(self, position) -> bool:
        position = np.asarray(position, dtype=float)
        self._check(position)
        return bool(np.all((position >= self.lower) & (position <= self.upper)))

    def sample(self, rng: np.random.Generator) -> np.ndarray:
        """Draws each coordinate uniformly from [lower_i, upper_i] (one draw per dimension)."""
        return rng.uniform(self.lower, self.upper)

    def as_pairs(self):
        return [(float(lo), float(hi)) for lo, hi in zip(self.lower, self.upper)]

    def __len__(self):
        return self.dim

    def __eq__(self, other):
        if not isinstance(other, Bounds):
            return NotImplemented
        return np.array_equal(self.lower, other.lower) and np.array_equal(self.upper, other.upper)

    def __repr__(self):
        return f"Bounds({self.as_pairs()})"
