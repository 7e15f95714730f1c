import enum
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


class OptimizerState(enum.Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    CONVERGED = "converged"
    MAX_EVALUATIONS = "max_evaluations"
    MAX_ITERATIONS = "max_iterations"
    MAX_RESTARTS = "max_restarts"
    STAGNATED = "stagnated"

    @property
    def is_terminal(self) -> bool:
        return self not in (OptimizerState.INITIALIZING, OptimizerState.RUNNING)


class TerminationReason(enum.IntEnum):
    """Why the run stopped. The integer values are stable reason codes."""
    CONVERGED = 0
    MAX_EVALUATIONS = 1
    MAX_ITERATIONS = 2
    MAX_RESTARTS = 3
    STAGNATED = 4

    @classmethod
    def from_state(cls, state: OptimizerState) -> "TerminationReason":
        if not state.is_terminal:
            raise ValueError(f"{state} is not a terminal state")
        return cls[state.name]

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    TerminationReason.CONVERGED: "Global best fitness reached the absolute tolerance.",
    TerminationReason.MAX_EVALUATIONS: "Maximal number of objective evaluations reached.",
    TerminationReason.MAX_ITERATIONS: "Maximal number of iterations reached.",
    TerminationReason.MAX_RESTARTS: "Maximal number of restarts reached.",
    TerminationReason.STAGNATED: "Maximal number of iterations without improvement reached.",
}


@dataclass(frozen=True)
class StepReport:
    """Outcome of one generational update of the swarm."""
    iteration_count: int
    evaluation_count: int
    stagnation_count: int
    improved: bool
    global_best_fitness: float
    omega: float
    metrics: Dict[str, float] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class Result:
    """
    Final outcome of an optimization run. Positions are stored as tuples so
    the record is immutable and two results compare by value.

    Attributes:
        best_position (tuple): Global best position.
        best_fitness (float): Objective value at best_position.
        evaluation_count (int): Objective evaluations, including initialization and restarts.
        iteration_count (int): Completed generational steps.
        restart_count (int): Restarts performed.
        termination_reason (TerminationReason): Reason code, see TerminationReason.
        history (tuple): Global best fitness after initialization and after every step.
    """
    best_position: Tuple[float, ...]
    best_fitness: float
    evaluation_count: int
    iteration_count: int
    restart_count: int
    termination_reason: TerminationReason
    history: Tuple[float, ...] = ()
    decoded_position: Optional[Tuple[float, ...]] = None

    @property
    def message(self) -> str:
        return self.termination_reason.message

    @property
    def converged(self) -> bool:
        return self.termination_reason is TerminationReason.CONVERGED

    def summary(self) -> str:
        position = ", ".join(f"{x:.6g}" for x in self.best_position)
        return (f"best_fitness={self.best_fitness:.6e} at [{position}] | "
                f"iterations={self.iteration_count}, evaluations={self.evaluation_count}, "
                f"restarts={self.restart_count} | reason={self.termination_reason.value} "
                f"({self.message})")
