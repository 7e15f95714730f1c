import dataclasses
from dataclasses import dataclass
from typing import Optional

from PSO_ENGINE import CONFIG
from PSO_ENGINE.PSO.Errors import InvalidConfiguration
from PSO_ENGINE.PSO.Particle import BoundaryPolicy
from PSO_ENGINE.PSO.Strategies.Inertia import INERTIA_STRATEGIES, InertiaStrategy, create_strategy

"""
Dataclass definition for PSO hyperparameters and stopping rules.

Defaults come from CONFIG.py. Every instance is validated on construction;
use `replace(**overrides)` to derive a modified, validated copy.
"""


@dataclass(frozen=True)
class PSOConfig:
    swarm_size: int = CONFIG.SWARM_SIZE
    max_iterations: Optional[int] = CONFIG.MAX_ITERATIONS
    max_evaluations: Optional[int] = CONFIG.MAX_EVALUATIONS
    max_stagnation: Optional[int] = CONFIG.MAX_STAGNATION
    max_restarts: int = CONFIG.MAX_RESTARTS
    abs_tolerance: Optional[float] = CONFIG.ABS_TOLERANCE
    inertia_mode: str = CONFIG.INERTIA_MODE
    w: float = CONFIG.INERTIA_WEIGHT
    w_start: float = CONFIG.INERTIA_START
    w_end: float = CONFIG.INERTIA_END
    decay_rate: float = CONFIG.INERTIA_DECAY_RATE
    c1: float = CONFIG.COGNITIVE_COEFF
    c2: float = CONFIG.SOCIAL_COEFF
    boundary_policy: str = CONFIG.BOUNDARY_POLICY
    vectorized: bool = CONFIG.VECTORIZED
    random_seed: Optional[int] = CONFIG.RANDOM_SEED
    v_clamp_ratio: Optional[float] = CONFIG.V_CLAMP_RATIO
    v_init_ratio: float = CONFIG.V_INIT_RATIO
    log_every: int = CONFIG.LOG_EVERY

    def __post_init__(self):
        self.validate()

    def validate(self):
        problems = []
        if self.max_iterations is not None and self.max_iterations < 1:
            problems.append(f"max_iterations must be >= 1 or None, got {self.max_iterations}")
        if self.max_evaluations is not None and self.max_evaluations < 1:
            problems.append(f"max_evaluations must be >= 1 or None, got {self.max_evaluations}")
        if self.max_iterations is None and self.max_evaluations is None:
            problems.append("at least one of max_iterations / max_evaluations must be set")
        if self.max_stagnation is not None and self.max_stagnation < 0:
            problems.append(f"max_stagnation must be >= 0 or None, got {self.max_stagnation}")
        if self.max_restarts < 0:
            problems.append(f"max_restarts must be >= 0, got {self.max_restarts}")
        if self.inertia_mode not in INERTIA_STRATEGIES:
            problems.append(f"unknown inertia_mode '{self.inertia_mode}' "
                            f"(available: {list(INERTIA_STRATEGIES.keys())})")
        elif self.inertia_mode != "static" and self.max_iterations is None:
            problems.append(f"inertia_mode '{self.inertia_mode}' needs max_iterations")
        if self.c1 < 0 or self.c2 < 0:
            problems.append(f"c1 and c2 must be non-negative, got c1={self.c1}, c2={self.c2}")
        if self.boundary_policy not in [p.value for p in BoundaryPolicy]:
            problems.append(f"unknown boundary_policy '{self.boundary_policy}' "
                            f"(available: {[p.value for p in BoundaryPolicy]})")
        if self.v_clamp_ratio is not None and self.v_clamp_ratio <= 0:
            problems.append(f"v_clamp_ratio must be > 0 or None, got {self.v_clamp_ratio}")
        if self.v_init_ratio < 0:
            problems.append(f"v_init_ratio must be >= 0, got {self.v_init_ratio}")
        if self.log_every < 0:
            problems.append(f"log_every must be >= 0, got {self.log_every}")
        if problems:
            raise InvalidConfiguration("Invalid PSO configuration: " + "; ".join(problems))

    @property
    def policy(self) -> BoundaryPolicy:
        return BoundaryPolicy(self.boundary_policy)

    def build_strategy(self) -> InertiaStrategy:
        if self.inertia_mode == "static":
            return create_strategy("static", w=self.w, c1=self.c1, c2=self.c2)
        if self.inertia_mode == "linear_decay":
            return create_strategy("linear_decay", w_start=self.w_start, w_end=self.w_end,
                                   c1=self.c1, c2=self.c2)
        return create_strategy(self.inertia_mode, w_start=self.w_start, w_end=self.w_end,
                               c1=self.c1, c2=self.c2, decay_rate=self.decay_rate)

    def replace(self, **overrides) -> "PSOConfig":
        unknown = set(overrides) - {f.name for f in dataclasses.fields(self)}
        if unknown:
            raise InvalidConfiguration(f"Unknown configuration option(s): {sorted(unknown)}")
        return dataclasses.replace(self, **overrides)

    def as_dict(self) -> dict:
        return dataclasses.asdict(self)
