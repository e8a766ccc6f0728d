"""
Stopping rules for the minimizers.

Provides:
- EndCriteriaType: which rule stopped a minimization
- EndCriteria: iteration caps and tolerances shared by all methods
"""

from dataclasses import dataclass
from enum import Enum


class EndCriteriaType(Enum):
    """Reason a minimization terminated."""
    NONE = "None"
    MAX_ITERATIONS = "MaxIterations"
    STATIONARY_POINT = "StationaryPoint"
    STATIONARY_FUNCTION_VALUE = "StationaryFunctionValue"
    STATIONARY_FUNCTION_ACCURACY = "StationaryFunctionAccuracy"
    ZERO_GRADIENT_NORM = "ZeroGradientNorm"
    UNKNOWN = "Unknown"


_CONVERGED = frozenset({
    EndCriteriaType.STATIONARY_POINT,
    EndCriteriaType.STATIONARY_FUNCTION_VALUE,
    EndCriteriaType.STATIONARY_FUNCTION_ACCURACY,
    EndCriteriaType.ZERO_GRADIENT_NORM,
})


@dataclass(frozen=True)
class EndCriteria:
    """
    Iteration caps and tolerances for a minimization.

    Attributes:
        max_iterations: Hard cap on solver iterations (or function evaluations)
        max_stationary_state_iterations: Iterations without a function value
            improvement larger than function_epsilon before stopping
        root_epsilon: Tolerance on the parameter vector
        function_epsilon: Tolerance on the cost function value
        gradient_norm_epsilon: Tolerance on the gradient norm
    """
    max_iterations: int = 60000
    max_stationary_state_iterations: int = 100
    root_epsilon: float = 1e-8
    function_epsilon: float = 1e-8
    gradient_norm_epsilon: float = 1e-8

    def __post_init__(self):
        """Validate criteria."""
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if self.max_stationary_state_iterations <= 1:
            raise ValueError(
                "max_stationary_state_iterations must be greater than one, "
                f"got {self.max_stationary_state_iterations}"
            )
        if self.max_stationary_state_iterations > self.max_iterations:
            raise ValueError(
                f"max_stationary_state_iterations ({self.max_stationary_state_iterations}) "
                f"must not exceed max_iterations ({self.max_iterations})"
            )

    @staticmethod
    def succeeded(end_criteria: EndCriteriaType) -> bool:
        """True if the termination reason is a convergence, not a cap."""
        return end_criteria in _CONVERGED


__all__ = ["EndCriteria", "EndCriteriaType"]
