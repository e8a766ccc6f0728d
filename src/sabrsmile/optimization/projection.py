"""
Restriction of a cost function to its free parameters.

A calibration can hold any subset of the model parameters constant. The
minimizer only sees the free components; fixed components are substituted
back from the values given at construction.
"""

from typing import Sequence
import numpy as np

from .problem import CostFunction


class Projection:
    """
    Maps between the full parameter vector and the free sub-vector.

    Args:
        parameter_values: Full parameter vector; supplies the fixed components
        fixed_parameters: One flag per parameter, True if held constant
    """

    def __init__(self, parameter_values: Sequence[float], fixed_parameters: Sequence[bool]):
        self.parameter_values = np.array(parameter_values, dtype=np.float64)
        self.fixed_parameters = np.array(fixed_parameters, dtype=bool)

        if self.parameter_values.shape != self.fixed_parameters.shape:
            raise ValueError(
                f"{len(self.parameter_values)} parameter values given "
                f"with {len(self.fixed_parameters)} fixed flags"
            )

        self.number_of_free = int(np.count_nonzero(~self.fixed_parameters))

    def project(self, parameters: Sequence[float]) -> np.ndarray:
        """Free components of a full parameter vector."""
        parameters = np.asarray(parameters, dtype=np.float64)
        if parameters.shape != self.parameter_values.shape:
            raise ValueError(
                f"expected {len(self.parameter_values)} parameters, got {len(parameters)}"
            )
        return parameters[~self.fixed_parameters].copy()

    def include(self, projected_parameters: Sequence[float]) -> np.ndarray:
        """Full parameter vector from its free components."""
        projected_parameters = np.asarray(projected_parameters, dtype=np.float64)
        if len(projected_parameters) != self.number_of_free:
            raise ValueError(
                f"expected {self.number_of_free} free parameters, "
                f"got {len(projected_parameters)}"
            )
        y = self.parameter_values.copy()
        y[~self.fixed_parameters] = projected_parameters
        return y


class ProjectedCostFunction(CostFunction):
    """Cost function of the free parameters only."""

    def __init__(
        self,
        cost_function: CostFunction,
        parameter_values: Sequence[float],
        fixed_parameters: Sequence[bool]
    ):
        self.cost_function = cost_function
        self.projection = Projection(parameter_values, fixed_parameters)

    @property
    def number_of_free(self) -> int:
        return self.projection.number_of_free

    def project(self, parameters: Sequence[float]) -> np.ndarray:
        return self.projection.project(parameters)

    def include(self, projected_parameters: Sequence[float]) -> np.ndarray:
        return self.projection.include(projected_parameters)

    def value(self, free_parameters: np.ndarray) -> float:
        return self.cost_function.value(self.include(free_parameters))

    def values(self, free_parameters: np.ndarray) -> np.ndarray:
        return self.cost_function.values(self.include(free_parameters))


__all__ = ["Projection", "ProjectedCostFunction"]
