"""
Cost functions, constraints and the optimization problem they form.
"""

from abc import ABC, abstractmethod
from typing import Optional
import numpy as np


class CostFunction(ABC):
    """
    Function to be minimized.

    Scalar minimizers use value(); least-squares minimizers use values(),
    whose squared sum should be consistent with value().
    """

    @abstractmethod
    def value(self, x: np.ndarray) -> float:
        """Scalar cost at x."""
        pass

    @abstractmethod
    def values(self, x: np.ndarray) -> np.ndarray:
        """Residual vector at x."""
        pass


class Constraint(ABC):
    """Feasible region for a minimization."""

    @abstractmethod
    def test(self, x: np.ndarray) -> bool:
        """True if x is feasible."""
        pass


class NoConstraint(Constraint):
    """Accepts every point."""

    def test(self, x: np.ndarray) -> bool:
        return True


class BoundaryConstraint(Constraint):
    """Every component must lie in [low, high]."""

    def __init__(self, low: float, high: float):
        if low > high:
            raise ValueError(f"low ({low}) must not exceed high ({high})")
        self.low = low
        self.high = high

    def test(self, x: np.ndarray) -> bool:
        x = np.asarray(x, dtype=np.float64)
        return bool(np.all((x >= self.low) & (x <= self.high)))


class Problem:
    """
    A cost function, a constraint and a starting point.

    The minimizer updates current_value and function_value in place, so the
    result is read back from the problem after minimize() returns.
    """

    def __init__(
        self,
        cost_function: CostFunction,
        constraint: Constraint,
        initial_value: np.ndarray
    ):
        self.cost_function = cost_function
        self.constraint = constraint
        self.current_value = np.array(initial_value, dtype=np.float64)
        self.function_value: Optional[float] = None
        self.function_evaluation = 0

        if not constraint.test(self.current_value):
            raise ValueError("Initial guess is not in the feasible region")

    def value(self, x: np.ndarray) -> float:
        """Cost at x, counting the evaluation."""
        self.function_evaluation += 1
        return float(self.cost_function.value(x))

    def values(self, x: np.ndarray) -> np.ndarray:
        """Residuals at x, counting the evaluation."""
        self.function_evaluation += 1
        return np.asarray(self.cost_function.values(x), dtype=np.float64)

    def reset(self) -> None:
        """Clear evaluation bookkeeping."""
        self.function_value = None
        self.function_evaluation = 0


__all__ = [
    "CostFunction",
    "Constraint",
    "NoConstraint",
    "BoundaryConstraint",
    "Problem",
]
